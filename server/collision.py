"""Collision helpers for the game server."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from .config import GameConfig
from .obstacle import Obstacle


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle anchored at its top-left corner."""

    x: int
    y: int
    width: int
    height: int


def intersects(a: Rect, b: Rect) -> bool:
    """Return ``True`` if ``a`` and ``b`` overlap.

    Edges that merely touch do not count as an intersection.
    """

    return (
        a.x < b.x + b.width
        and a.x + a.width > b.x
        and a.y < b.y + b.height
        and a.y + a.height > b.y
    )


def player_hitbox(x: int, config: GameConfig) -> Rect:
    """Return the hitbox of a player standing at horizontal position ``x``."""

    return Rect(x, config.player_top, config.player_width, config.player_height)


def obstacle_hitbox(obstacle: Obstacle, config: GameConfig) -> Rect:
    """Return the square hitbox of ``obstacle``."""

    return Rect(obstacle.x, obstacle.y, config.obstacle_size, config.obstacle_size)


def detect_collisions(
    players: Iterable[Tuple[int, int]],
    obstacles: Sequence[Obstacle],
    config: GameConfig,
) -> List[Tuple[int, Obstacle]]:
    """Return ``(player_id, obstacle)`` pairs for every hit.

    ``players`` yields ``(player_id, x)`` in admission order. An obstacle is
    assigned to the first player whose hitbox overlaps it and is never
    reported twice.
    """

    hits: List[Tuple[int, Obstacle]] = []
    consumed = set()
    for player_id, x in players:
        box = player_hitbox(x, config)
        for obstacle in obstacles:
            if obstacle.id in consumed:
                continue
            if intersects(box, obstacle_hitbox(obstacle, config)):
                consumed.add(obstacle.id)
                hits.append((player_id, obstacle))
    return hits
