"""Obstacle entity definition."""

from __future__ import annotations

from dataclasses import dataclass
import itertools
import random

from .config import GameConfig

_id_counter = itertools.count(1)


@dataclass
class Obstacle:
    """A square block falling from the top of the playfield."""

    id: int
    x: int
    y: int

    @classmethod
    def spawn_random(cls, config: GameConfig, rng: random.Random) -> "Obstacle":
        """Create an obstacle on the top edge at a random horizontal position."""

        return cls(id=next(_id_counter), x=rng.randrange(config.width - config.obstacle_size), y=0)

    @classmethod
    def at(cls, x: int, y: int) -> "Obstacle":
        """Create an obstacle at a specific position."""

        return cls(id=next(_id_counter), x=x, y=y)

    def fall(self, step: int) -> None:
        """Move the obstacle ``step`` units down."""

        self.y += step
