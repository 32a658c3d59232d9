"""Runtime configuration for the game server."""

from __future__ import annotations

from dataclasses import dataclass

from . import constants


@dataclass(frozen=True)
class GameConfig:
    """Tunable values supplied at startup.

    Every field defaults to the matching value in :mod:`server.constants`, so
    ``GameConfig()`` reproduces the stock game.
    """

    win_score: int = constants.WIN_SCORE
    dodge_reward: int = constants.POINTS_PER_DODGE
    collision_penalty: int = constants.POINTS_PER_COLLISION
    width: int = constants.GAME_WIDTH
    height: int = constants.GAME_HEIGHT
    obstacle_size: int = constants.OBSTACLE_SIZE
    fall_step: int = constants.OBSTACLE_FALL_STEP
    spawn_chance: float = constants.OBSTACLE_SPAWN_CHANCE
    player_width: int = constants.PLAYER_WIDTH
    player_height: int = constants.PLAYER_HEIGHT
    floor_offset: int = constants.PLAYER_FLOOR_OFFSET
    tick_ms: int = constants.TICK_MS

    def __post_init__(self) -> None:
        if self.win_score <= 0:
            raise ValueError("win_score must be positive")
        if self.dodge_reward <= 0:
            raise ValueError("dodge_reward must be positive")
        if self.collision_penalty >= 0:
            raise ValueError("collision_penalty must be negative")
        for name in ("width", "height", "obstacle_size", "player_width", "player_height", "fall_step"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        if self.obstacle_size >= self.width:
            raise ValueError("obstacle_size must be smaller than the playfield width")
        if not 0.0 <= self.spawn_chance <= 1.0:
            raise ValueError("spawn_chance must be within [0, 1]")
        if self.tick_ms <= 0:
            raise ValueError("tick_ms must be positive")

    @property
    def tick_interval(self) -> float:
        """Tick period in seconds."""

        return self.tick_ms / 1000.0

    @property
    def player_top(self) -> int:
        """Vertical coordinate of the top edge of every player hitbox."""

        return self.height - self.player_height - self.floor_offset
