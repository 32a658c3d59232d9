"""Entry point for the asyncio based game server."""

from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Optional, Tuple

from . import constants, protocol
from .config import GameConfig
from .network import Broadcaster, IngressProtocol
from .world import Address, AdmissionRejected, Phase, WorldState


def next_tick_deadline(deadline: float, now: float, interval: float) -> float:
    """Return the deadline following ``deadline``.

    If ``now`` is already past that point the missed ticks are skipped and the
    next boundary still ahead of ``now`` is returned.
    """

    deadline += interval
    if now >= deadline:
        missed = int((now - deadline) // interval) + 1
        deadline += missed * interval
    return deadline


class GameServer:
    """High level orchestration of the world simulation and datagram IO."""

    def __init__(
        self,
        host: str = "0.0.0.0",
        port: int = constants.PORT,
        config: Optional[GameConfig] = None,
        world: Optional[WorldState] = None,
    ) -> None:
        self.host = host
        self.port = port
        self.config = config or GameConfig()
        self.world = world or WorldState(self.config)
        self.broadcaster = Broadcaster()
        self.commands: asyncio.Queue[Tuple[protocol.Command, Address]] = asyncio.Queue()

    def handle_datagram(self, data: bytes, addr: Address) -> None:
        """Decode one datagram and queue it for the next tick."""

        try:
            command = protocol.parse_client_message(data)
        except ValueError as exc:
            logging.warning("Dropping malformed datagram from %s: %s", addr, exc)
            return
        if command is None:
            logging.debug("Ignoring unknown message from %s: %r", addr, data[:32])
            return
        self.commands.put_nowait((command, addr))

    def _apply_connect(self, addr: Address) -> None:
        if self.world.player_by_address(addr) is not None:
            logging.debug("Repeated CONNECT from %s", addr)
            return
        was_waiting = self.world.phase is Phase.WAITING
        try:
            player = self.world.admit(addr)
        except AdmissionRejected as exc:
            logging.info("Ignoring CONNECT: %s", exc)
            return
        logging.info("Player %s connected from %s (%d/%d)", player.id, addr, len(self.world.players), constants.MAX_PLAYERS)
        if was_waiting and self.world.phase is Phase.PLAYING:
            logging.info("Both players connected, starting game")
            self.broadcaster.broadcast(protocol.encode_start(), self.world.players)

    def _apply_move(self, move: protocol.Move, addr: Address) -> None:
        player = self.world.player_by_address(addr)
        if player is None:
            logging.debug("MOVE from unregistered address %s", addr)
            return
        self.world.set_position(player.id, move.x)

    def apply_pending_commands(self) -> int:
        """Apply every queued command in arrival order and return how many ran."""

        applied = 0
        while not self.commands.empty():
            command, addr = self.commands.get_nowait()
            if isinstance(command, protocol.Connect):
                self._apply_connect(addr)
            else:
                self._apply_move(command, addr)
            applied += 1
        return applied

    def tick(self) -> None:
        """Run one tick: apply commands, simulate and broadcast."""

        self.apply_pending_commands()
        if self.world.phase is not Phase.PLAYING:
            return
        self.world.update()
        if self.world.phase is Phase.FINISHED:
            logging.info("Player %s wins with %s points", self.world.winner, self.world.scores[self.world.winner])
            self.broadcaster.broadcast(protocol.encode_game_over(self.world.winner), self.world.players)
            return
        self.broadcaster.broadcast(protocol.encode_state(self.world.snapshot()), self.world.players)

    async def run_tick_loop(self) -> None:
        loop = asyncio.get_running_loop()
        interval = self.config.tick_interval
        deadline = loop.time()
        while True:
            self.tick()
            deadline = next_tick_deadline(deadline, loop.time(), interval)
            await asyncio.sleep(max(0.0, deadline - loop.time()))

    async def start(self) -> None:
        """Bind the datagram socket and run the tick loop forever."""

        loop = asyncio.get_running_loop()
        transport, _ = await loop.create_datagram_endpoint(
            lambda: IngressProtocol(self.handle_datagram),
            local_addr=(self.host, self.port),
        )
        self.broadcaster.transport = transport
        logging.info("Server listening on %s:%s", self.host, self.port)
        try:
            await self.run_tick_loop()
        finally:
            transport.close()


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the Dodge Arena server")
    parser.add_argument("--host", default="0.0.0.0", help="Host interface to bind to")
    parser.add_argument("--port", type=int, default=constants.PORT, help="UDP port to listen on")
    parser.add_argument("--win-score", type=int, default=constants.WIN_SCORE, help="Score that wins the game")
    parser.add_argument("--dodge-reward", type=int, default=constants.POINTS_PER_DODGE, help="Points for the opponent of a player that gets hit")
    parser.add_argument("--collision-penalty", type=int, default=constants.POINTS_PER_COLLISION, help="Points for a player that gets hit")
    parser.add_argument("--width", type=int, default=constants.GAME_WIDTH, help="Playfield width")
    parser.add_argument("--height", type=int, default=constants.GAME_HEIGHT, help="Playfield height")
    parser.add_argument("--obstacle-size", type=int, default=constants.OBSTACLE_SIZE, help="Obstacle edge length")
    parser.add_argument("--fall-step", type=int, default=constants.OBSTACLE_FALL_STEP, help="Obstacle fall distance per tick")
    parser.add_argument("--spawn-chance", type=float, default=constants.OBSTACLE_SPAWN_CHANCE, help="Obstacle spawn probability per tick")
    parser.add_argument("--tick-ms", type=int, default=constants.TICK_MS, help="Tick period in milliseconds")
    parser.add_argument("--log-level", default="INFO", help="Logging level")
    return parser.parse_args(argv)


def config_from_args(args: argparse.Namespace) -> GameConfig:
    return GameConfig(
        win_score=args.win_score,
        dodge_reward=args.dodge_reward,
        collision_penalty=args.collision_penalty,
        width=args.width,
        height=args.height,
        obstacle_size=args.obstacle_size,
        fall_step=args.fall_step,
        spawn_chance=args.spawn_chance,
        tick_ms=args.tick_ms,
    )


def main(argv=None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="[%(levelname)s] %(message)s")
    try:
        config = config_from_args(args)
    except ValueError as exc:
        logging.error("Invalid configuration: %s", exc)
        raise SystemExit(2) from exc
    server = GameServer(args.host, args.port, config)
    try:
        asyncio.run(server.start())
    except OSError as exc:
        logging.error("Cannot listen on %s:%s: %s", args.host, args.port, exc)
        raise SystemExit(1) from exc
    except KeyboardInterrupt:
        logging.info("Server stopped")


if __name__ == "__main__":
    main()
