"""Datagram endpoints used by the server: ingress and broadcast."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Iterable, Optional

from .world import Address, PlayerSlot

DatagramHandler = Callable[[bytes, Address], None]


class IngressProtocol(asyncio.DatagramProtocol):
    """Forward every received datagram to ``handler``."""

    def __init__(self, handler: DatagramHandler) -> None:
        self.handler = handler
        self.transport: Optional[asyncio.DatagramTransport] = None

    def connection_made(self, transport: asyncio.BaseTransport) -> None:
        self.transport = transport  # type: ignore[assignment]

    def datagram_received(self, data: bytes, addr: Address) -> None:
        self.handler(data, addr)

    def error_received(self, exc: Exception) -> None:
        logging.warning("Transport error: %s", exc)

    def connection_lost(self, exc: Optional[Exception]) -> None:
        if exc is not None:
            logging.error("Listening socket closed: %s", exc)


class Broadcaster:
    """Best effort delivery of encoded messages to registered players."""

    def __init__(self, transport: Optional[asyncio.DatagramTransport] = None) -> None:
        self.transport = transport

    def send(self, payload: bytes, address: Address) -> bool:
        """Send ``payload`` to one address. Returns ``False`` if it failed."""

        if self.transport is None:
            logging.warning("No transport, dropping message to %s", address)
            return False
        try:
            self.transport.sendto(payload, address)
        except OSError:
            logging.exception("Failed to send to %s", address)
            return False
        return True

    def broadcast(self, payload: bytes, players: Iterable[PlayerSlot]) -> int:
        """Send ``payload`` to every player and return how many sends succeeded."""

        delivered = 0
        for player in players:
            if self.send(payload, player.address):
                delivered += 1
        return delivered
