"""Client side mirror of the server state."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .protocol import GameOver, ServerMessage, Start, State


@dataclass
class GameView:
    """Everything the renderer needs, updated from server messages.

    ``player_id`` is the local UDP port, which the server uses as our id.
    The local player's position is owned by the client, so ``STATE`` only
    updates the opponent's position.
    """

    player_id: Optional[int] = None
    started: bool = False
    finished: bool = False
    winner_id: Optional[int] = None
    opponent_x: Optional[int] = None
    obstacles: List[Tuple[int, int]] = field(default_factory=list)
    scores: Dict[int, int] = field(default_factory=dict)

    @property
    def playing(self) -> bool:
        return self.started and not self.finished

    @property
    def player_score(self) -> int:
        return self.scores.get(self.player_id, 0) if self.player_id is not None else 0

    @property
    def opponent_score(self) -> int:
        for player_id, score in self.scores.items():
            if player_id != self.player_id:
                return score
        return 0

    @property
    def won(self) -> bool:
        return self.finished and self.winner_id == self.player_id

    def apply(self, message: ServerMessage) -> None:
        if isinstance(message, Start):
            self.started = True
        elif isinstance(message, State):
            self._apply_state(message)
        elif isinstance(message, GameOver):
            self.finished = True
            self.winner_id = message.winner_id

    def _apply_state(self, state: State) -> None:
        for player_id, x in state.positions.items():
            if player_id != self.player_id:
                self.opponent_x = x
        self.obstacles = list(state.obstacles)
        self.scores.update(state.scores)
