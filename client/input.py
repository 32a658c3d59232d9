"""Translate local input into positions for the server."""

from __future__ import annotations

from server import constants


class InputManager:
    """Move the local player left or right, keeping it inside the playfield."""

    def __init__(
        self,
        width: int = constants.GAME_WIDTH,
        player_width: int = constants.PLAYER_WIDTH,
        speed: int = 5,
    ) -> None:
        self.max_x = width - player_width
        self.speed = speed
        self.x = width // 2 - player_width // 2

    def update(self, left: bool, right: bool) -> int:
        if left and self.x > 0:
            self.x = max(0, self.x - self.speed)
        elif right and self.x < self.max_x:
            self.x = min(self.max_x, self.x + self.speed)
        return self.x
