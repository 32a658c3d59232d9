"""Authoritative game world simulation."""

from __future__ import annotations

from dataclasses import dataclass
import enum
import logging
import random
from typing import Dict, List, Optional, Tuple

from . import collision, constants
from .config import GameConfig
from .obstacle import Obstacle

Address = Tuple[str, int]


class Phase(enum.Enum):
    """Lifecycle of a match. Transitions only ever move forward."""

    WAITING = "waiting"
    PLAYING = "playing"
    FINISHED = "finished"


class AdmissionRejected(RuntimeError):
    """Raised when a new address tries to join a full game."""


@dataclass(frozen=True)
class PlayerSlot:
    """A registered player.

    ``id`` is the source port of the player's first ``CONNECT`` and is the
    public id used on the wire.
    """

    id: int
    address: Address


@dataclass(frozen=True)
class Collision:
    """A player hit by an obstacle during one tick."""

    player_id: int
    obstacle_id: int


@dataclass(frozen=True)
class WorldSnapshot:
    """Immutable view of the state that gets broadcast every tick."""

    positions: Tuple[Tuple[int, int], ...]
    obstacles: Tuple[Tuple[int, int], ...]
    scores: Tuple[Tuple[int, int], ...]


class WorldState:
    """Holds players, obstacles and scores and advances the match by ticks."""

    def __init__(self, config: Optional[GameConfig] = None, rng: Optional[random.Random] = None) -> None:
        self.config = config or GameConfig()
        self.rng = rng or random.Random()
        self.phase: Phase = Phase.WAITING
        self.winner: Optional[int] = None
        self.tick: int = 0
        self._players: List[PlayerSlot] = []
        self.positions: Dict[int, int] = {}
        self.scores: Dict[int, int] = {}
        self.obstacles: Dict[int, Obstacle] = {}

    @property
    def players(self) -> Tuple[PlayerSlot, ...]:
        return tuple(self._players)

    def player_by_id(self, player_id: int) -> Optional[PlayerSlot]:
        for player in self._players:
            if player.id == player_id:
                return player
        return None

    def player_by_address(self, address: Address) -> Optional[PlayerSlot]:
        for player in self._players:
            if player.address == address:
                return player
        return None

    def admit(self, address: Address) -> PlayerSlot:
        """Register ``address`` as a player and return its slot.

        An address that is already registered gets its existing slot back.
        Admitting the second player starts the match.
        """

        existing = self.player_by_address(address)
        if existing is not None:
            return existing
        if len(self._players) >= constants.MAX_PLAYERS:
            raise AdmissionRejected(f"game is full, rejecting {address}")
        port = address[1]
        if self.player_by_id(port) is not None:
            raise AdmissionRejected(f"port {port} is already taken, rejecting {address}")
        player = PlayerSlot(id=port, address=address)
        self._players.append(player)
        self.positions[player.id] = self.config.width // 2
        self.scores[player.id] = 0
        if len(self._players) == constants.MAX_PLAYERS and self.phase is Phase.WAITING:
            self.phase = Phase.PLAYING
        return player

    def set_position(self, player_id: int, x: int) -> bool:
        if self.phase is Phase.FINISHED or player_id not in self.positions:
            return False
        self.positions[player_id] = x
        return True

    def spawn_obstacle(self, x: Optional[int] = None, y: int = 0) -> Optional[Obstacle]:
        """Add an obstacle, at a random position on the top edge by default.

        Returns ``None`` once the match is finished.
        """

        if self.phase is Phase.FINISHED:
            return None
        if x is None:
            obstacle = Obstacle.spawn_random(self.config, self.rng)
        else:
            obstacle = Obstacle.at(x, y)
        self.obstacles[obstacle.id] = obstacle
        return obstacle

    def advance_obstacles(self, step: int) -> List[Obstacle]:
        """Move every obstacle down by ``step`` and return the ones that left the field."""

        gone: List[Obstacle] = []
        if self.phase is Phase.FINISHED:
            return gone
        for obstacle in list(self.obstacles.values()):
            obstacle.fall(step)
            # An obstacle exactly on the bottom edge is still in play.
            if obstacle.y > self.config.height:
                gone.append(obstacle)
                del self.obstacles[obstacle.id]
        return gone

    def remove_obstacle(self, obstacle_id: int) -> bool:
        if self.phase is Phase.FINISHED:
            return False
        return self.obstacles.pop(obstacle_id, None) is not None

    def add_score(self, player_id: int, delta: int) -> int:
        """Apply ``delta`` to a player's score and return the new score.

        This is the only place where the match can finish: the first score to
        reach ``win_score`` while playing makes that player the winner.
        """

        if self.phase is Phase.FINISHED:
            return self.scores[player_id]
        score = self.scores[player_id] + delta
        self.scores[player_id] = score
        if self.phase is Phase.PLAYING and score >= self.config.win_score:
            self.phase = Phase.FINISHED
            self.winner = player_id
        return score

    def snapshot(self) -> WorldSnapshot:
        ids = [player.id for player in self._players]
        return WorldSnapshot(
            positions=tuple((player_id, self.positions[player_id]) for player_id in ids),
            obstacles=tuple((obstacle.x, obstacle.y) for obstacle in self.obstacles.values()),
            scores=tuple((player_id, self.scores[player_id]) for player_id in ids),
        )

    def _resolve_collisions(self) -> List[Collision]:
        resolved: List[Collision] = []
        players = [(player.id, self.positions[player.id]) for player in self._players]
        hits = collision.detect_collisions(players, list(self.obstacles.values()), self.config)
        for player_id, obstacle in hits:
            self.remove_obstacle(obstacle.id)
            self.add_score(player_id, self.config.collision_penalty)
            for other in self._players:
                if other.id != player_id:
                    self.add_score(other.id, self.config.dodge_reward)
            resolved.append(Collision(player_id=player_id, obstacle_id=obstacle.id))
            logging.debug("Player %s hit obstacle %s", player_id, obstacle.id)
            if self.phase is Phase.FINISHED:
                break
        return resolved

    def update(self) -> List[Collision]:
        """Run one simulation step. Does nothing unless the match is playing."""

        if self.phase is not Phase.PLAYING:
            return []
        self.tick += 1
        if self.rng.random() < self.config.spawn_chance:
            self.spawn_obstacle()
        self.advance_obstacles(self.config.fall_step)
        return self._resolve_collisions()
