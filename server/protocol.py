"""Text protocol helpers for the datagram transport."""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Iterable, Optional, Tuple, Union

from .world import WorldSnapshot

_INTEGER = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class Connect:
    """Admission request."""


@dataclass(frozen=True)
class Move:
    """New horizontal position reported by a client."""

    x: int


Command = Union[Connect, Move]


def _parse_int(token: str, what: str) -> int:
    if not _INTEGER.fullmatch(token):
        raise ValueError(f"{what} is not an integer: {token!r}")
    return int(token)


def parse_client_message(data: bytes) -> Optional[Command]:
    """Parse a raw datagram into a command.

    Returns ``None`` for empty payloads and unknown message kinds. Raises
    ``ValueError`` when a known message is malformed.
    """

    text = data.decode("utf-8")
    tokens = text.split()
    if not tokens:
        return None
    kind = tokens[0]
    if kind == "CONNECT":
        return Connect()
    if kind == "MOVE":
        if len(tokens) != 2:
            raise ValueError(f"MOVE expects exactly one position: {text!r}")
        return Move(x=_parse_int(tokens[1], "position"))
    return None


def _join_pairs(pairs: Iterable[Tuple[int, int]]) -> str:
    return ",".join(f"{a}:{b}" for a, b in pairs)


def encode_state(snapshot: WorldSnapshot) -> bytes:
    """Encode a world snapshot as ``STATE <positions>;<obstacles>;<scores>``."""

    groups = (
        _join_pairs(snapshot.positions),
        _join_pairs(snapshot.obstacles),
        _join_pairs(snapshot.scores),
    )
    return ("STATE " + ";".join(groups)).encode("utf-8")


def encode_start() -> bytes:
    return b"START"


def encode_game_over(winner_id: int) -> bytes:
    return f"GAME_OVER {winner_id}".encode("utf-8")
