"""Pygame based renderer for the game client."""

from __future__ import annotations

from typing import Iterable, Tuple

import pygame

from server import constants


class Renderer:
    """Responsible for all drawing tasks."""

    def __init__(self, screen: pygame.Surface) -> None:
        self.screen = screen
        self.font = pygame.font.SysFont("arial", 20, bold=True)
        self.background_color = (255, 255, 255)
        self.text_color = (0, 0, 0)
        self.player_color = (0, 0, 255)
        self.opponent_color = (255, 0, 0)
        self.obstacle_color = (0, 200, 0)
        self.player_top = constants.GAME_HEIGHT - constants.PLAYER_HEIGHT - constants.PLAYER_FLOOR_OFFSET

    def clear(self) -> None:
        self.screen.fill(self.background_color)

    def draw_player(self, x: int, own: bool) -> None:
        color = self.player_color if own else self.opponent_color
        rect = pygame.Rect(x, self.player_top, constants.PLAYER_WIDTH, constants.PLAYER_HEIGHT)
        pygame.draw.rect(self.screen, color, rect)

    def draw_obstacles(self, obstacles: Iterable[Tuple[int, int]]) -> None:
        size = constants.OBSTACLE_SIZE
        for x, y in obstacles:
            pygame.draw.rect(self.screen, self.obstacle_color, pygame.Rect(x, y, size, size))

    def draw_scores(self, own: int, opponent: int) -> None:
        left = self.font.render(f"Your Score: {own}", True, self.text_color)
        self.screen.blit(left, (10, 35))
        right = self.font.render(f"Opponent's Score: {opponent}", True, self.text_color)
        self.screen.blit(right, (self.screen.get_width() - right.get_width() - 10, 35))

    def draw_banner(self, text: str) -> None:
        surface = self.font.render(text, True, self.text_color)
        x = (self.screen.get_width() - surface.get_width()) / 2
        y = (self.screen.get_height() - surface.get_height()) / 2
        self.screen.blit(surface, (x, y))

    def present(self) -> None:
        pygame.display.flip()
