import random

import pytest

from server.config import GameConfig
from server.main import GameServer
from server.world import WorldState


class FakeTransport:
    """Records every datagram instead of sending it."""

    def __init__(self, fail_for=()):
        self.sent = []
        self.fail_for = set(fail_for)

    def sendto(self, data, addr=None):
        if addr in self.fail_for:
            raise OSError("unreachable")
        self.sent.append((data, addr))

    def messages_to(self, addr):
        return [data for data, target in self.sent if target == addr]

    def clear(self):
        self.sent.clear()


ALICE = ("10.0.0.1", 40001)
BOB = ("10.0.0.2", 40002)
CAROL = ("10.0.0.3", 40003)


@pytest.fixture()
def config():
    # No random spawns, so every obstacle in a test is placed explicitly.
    return GameConfig(spawn_chance=0.0)


@pytest.fixture()
def world(config):
    return WorldState(config, random.Random(1234))


@pytest.fixture()
def transport():
    return FakeTransport()


@pytest.fixture()
def server(config, world, transport):
    game = GameServer(config=config, world=world)
    game.broadcaster.transport = transport
    return game


@pytest.fixture()
def playing_server(server, transport):
    server.handle_datagram(b"CONNECT", ALICE)
    server.handle_datagram(b"CONNECT", BOB)
    server.apply_pending_commands()
    transport.clear()
    return server
