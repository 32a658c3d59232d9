"""Gameplay constants shared across the server modules."""

PORT: int = 5000
TICK_MS: int = 16
WIN_SCORE: int = 500
POINTS_PER_DODGE: int = 10
POINTS_PER_COLLISION: int = -5
GAME_WIDTH: int = 800
GAME_HEIGHT: int = 600
OBSTACLE_SIZE: int = 30
OBSTACLE_FALL_STEP: int = 5
OBSTACLE_SPAWN_CHANCE: float = 0.10
PLAYER_WIDTH: int = 50
PLAYER_HEIGHT: int = 100
PLAYER_FLOOR_OFFSET: int = 10
MAX_PLAYERS: int = 2
MAX_DATAGRAM_SIZE: int = 1024
