"""Datagram networking client."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Tuple

from .protocol import ServerMessage, decode_server_message


class _ClientProtocol(asyncio.DatagramProtocol):
    def __init__(self, incoming: asyncio.Queue[ServerMessage]) -> None:
        self.incoming = incoming

    def datagram_received(self, data: bytes, addr: Tuple[str, int]) -> None:
        try:
            message = decode_server_message(data)
        except ValueError as exc:
            logging.warning("Dropping malformed server message: %s", exc)
            return
        self.incoming.put_nowait(message)

    def error_received(self, exc: Exception) -> None:
        logging.warning("Transport error: %s", exc)


class NetworkClient:
    """Asynchronous UDP client that exchanges messages with the server."""

    def __init__(self, host: str, port: int) -> None:
        self.host = host
        self.port = port
        self.transport: Optional[asyncio.DatagramTransport] = None
        self._incoming: asyncio.Queue[ServerMessage] = asyncio.Queue()

    async def connect(self) -> None:
        loop = asyncio.get_running_loop()
        self.transport, _ = await loop.create_datagram_endpoint(
            lambda: _ClientProtocol(self._incoming),
            remote_addr=(self.host, self.port),
        )
        self.send_connect()

    def _send(self, text: str) -> None:
        if self.transport is None:
            raise RuntimeError("Client is not connected")
        self.transport.sendto(text.encode("utf-8"))

    @property
    def local_port(self) -> int:
        """The source port of our datagrams, which the server uses as our id."""

        if self.transport is None:
            raise RuntimeError("Client is not connected")
        return self.transport.get_extra_info("sockname")[1]

    def send_connect(self) -> None:
        self._send("CONNECT")

    def send_move(self, x: int) -> None:
        self._send(f"MOVE {x}")

    def drain(self) -> List[ServerMessage]:
        """Return every message received since the last call."""

        messages: List[ServerMessage] = []
        while not self._incoming.empty():
            messages.append(self._incoming.get_nowait())
        return messages

    def close(self) -> None:
        if self.transport is not None:
            self.transport.close()
