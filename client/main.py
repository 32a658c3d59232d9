"""Entry point for the pygame based client."""

from __future__ import annotations

import argparse
import asyncio
import logging
import time

import pygame

from server import constants

from .entities import GameView
from .input import InputManager
from .network import NetworkClient
from .render import Renderer

CONNECT_RETRY_SECONDS = 1.0


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the Dodge Arena client")
    parser.add_argument("--host", default="127.0.0.1", help="Server host")
    parser.add_argument("--port", type=int, default=constants.PORT, help="Server port")
    parser.add_argument("--fps", type=int, default=60, help="Frames per second")
    return parser.parse_args()


async def run_client(args: argparse.Namespace) -> None:
    pygame.init()
    screen = pygame.display.set_mode((constants.GAME_WIDTH, constants.GAME_HEIGHT))
    pygame.display.set_caption("Falling Obstacles Game")
    renderer = Renderer(screen)
    clock = pygame.time.Clock()

    network = NetworkClient(args.host, args.port)
    await network.connect()
    last_connect = time.monotonic()

    view = GameView(player_id=network.local_port)
    input_manager = InputManager()
    running = True

    while running:
        clock.tick(args.fps)
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False

        for message in network.drain():
            view.apply(message)

        if not view.started and time.monotonic() - last_connect >= CONNECT_RETRY_SECONDS:
            network.send_connect()
            last_connect = time.monotonic()

        if view.playing:
            keys = pygame.key.get_pressed()
            x = input_manager.update(keys[pygame.K_LEFT], keys[pygame.K_RIGHT])
            network.send_move(x)

        renderer.clear()
        if not view.started:
            renderer.draw_banner("Waiting for another player...")
        else:
            renderer.draw_player(input_manager.x, own=True)
            if view.opponent_x is not None:
                renderer.draw_player(view.opponent_x, own=False)
            renderer.draw_obstacles(view.obstacles)
            renderer.draw_scores(view.player_score, view.opponent_score)
            if view.finished:
                renderer.draw_banner("You win!" if view.won else "Opponent wins!")
        renderer.present()
        await asyncio.sleep(0)

    network.close()
    pygame.quit()


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
    asyncio.run(run_client(args))


if __name__ == "__main__":
    main()
