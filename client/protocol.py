"""Decoding of messages sent by the game server."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple, Union


@dataclass(frozen=True)
class Start:
    pass


@dataclass(frozen=True)
class State:
    """A decoded ``STATE`` snapshot."""

    positions: Dict[int, int] = field(default_factory=dict)
    obstacles: List[Tuple[int, int]] = field(default_factory=list)
    scores: Dict[int, int] = field(default_factory=dict)


@dataclass(frozen=True)
class GameOver:
    winner_id: int


ServerMessage = Union[Start, State, GameOver]


def _parse_pairs(group: str) -> List[Tuple[int, int]]:
    pairs: List[Tuple[int, int]] = []
    for item in group.split(","):
        if not item:
            continue
        parts = item.split(":")
        if len(parts) != 2:
            raise ValueError(f"Invalid pair {item!r}")
        pairs.append((int(parts[0]), int(parts[1])))
    return pairs


def decode_state(body: str) -> State:
    """Decode the part of a ``STATE`` message after the keyword."""

    groups = body.split(";")
    if len(groups) != 3:
        raise ValueError(f"Invalid game state format: {body!r}")
    positions, obstacles, scores = (_parse_pairs(group.strip()) for group in groups)
    return State(positions=dict(positions), obstacles=obstacles, scores=dict(scores))


def decode_server_message(data: bytes) -> ServerMessage:
    """Decode a datagram from the server. Raises ``ValueError`` if malformed."""

    text = data.decode("utf-8").strip()
    kind, _, rest = text.partition(" ")
    if kind == "START":
        return Start()
    if kind == "STATE":
        return decode_state(rest)
    if kind == "GAME_OVER":
        return GameOver(int(rest))
    raise ValueError(f"Unknown server message: {text[:32]!r}")
