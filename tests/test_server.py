import pytest

from server.main import next_tick_deadline
from server.world import Phase

from conftest import ALICE, BOB, CAROL, FakeTransport


def _ids(server):
    alice = server.world.player_by_address(ALICE)
    bob = server.world.player_by_address(BOB)
    return alice.id, bob.id


def test_two_connects_start_the_game_once(server, transport):
    server.handle_datagram(b"CONNECT", ALICE)
    server.tick()
    assert server.world.phase is Phase.WAITING
    assert transport.sent == []

    server.handle_datagram(b"CONNECT", BOB)
    server.handle_datagram(b"CONNECT", ALICE)
    server.tick()
    server.tick()

    assert server.world.phase is Phase.PLAYING
    for addr in (ALICE, BOB):
        assert transport.messages_to(addr).count(b"START") == 1


def test_third_connect_is_silently_ignored(playing_server, transport):
    playing_server.handle_datagram(b"CONNECT", CAROL)
    playing_server.apply_pending_commands()
    assert len(playing_server.world.players) == 2
    assert transport.messages_to(CAROL) == []


def test_waiting_tick_does_not_broadcast(server, transport):
    server.handle_datagram(b"CONNECT", ALICE)
    server.tick()
    transport.clear()
    server.tick()
    assert transport.sent == []


def test_playing_tick_broadcasts_one_state_to_each_player(playing_server, transport):
    playing_server.tick()
    for addr in (ALICE, BOB):
        messages = transport.messages_to(addr)
        assert len(messages) == 1
        assert messages[0].startswith(b"STATE ")


def test_player_ids_are_source_ports(playing_server):
    assert [player.id for player in playing_server.world.players] == [ALICE[1], BOB[1]]


def test_move_updates_position_of_sender(playing_server):
    alice_id, bob_id = _ids(playing_server)
    playing_server.handle_datagram(b"MOVE 150", ALICE)
    playing_server.handle_datagram(b"MOVE 275", BOB)
    playing_server.apply_pending_commands()
    assert playing_server.world.positions == {alice_id: 150, bob_id: 275}


def test_last_move_in_a_tick_wins(playing_server):
    alice_id, _ = _ids(playing_server)
    for x in (10, 20, 30):
        playing_server.handle_datagram(f"MOVE {x}".encode(), ALICE)
    playing_server.apply_pending_commands()
    assert playing_server.world.positions[alice_id] == 30


def test_moves_from_strangers_are_dropped(playing_server):
    before = dict(playing_server.world.positions)
    playing_server.handle_datagram(b"MOVE 5", CAROL)
    # Same port as Bob, different host.
    playing_server.handle_datagram(b"MOVE 5", ("192.168.1.9", BOB[1]))
    playing_server.apply_pending_commands()
    assert playing_server.world.positions == before


def test_non_numeric_move_is_dropped(playing_server):
    before = dict(playing_server.world.positions)
    playing_server.handle_datagram(b"MOVE abc", ALICE)
    playing_server.handle_datagram(b"MOVE", ALICE)
    playing_server.handle_datagram(b"\xff\xfe\xfd", ALICE)
    assert playing_server.commands.empty()
    playing_server.tick()
    assert playing_server.world.positions == before


def test_collision_scenario(playing_server, transport, config):
    alice_id, bob_id = _ids(playing_server)
    playing_server.handle_datagram(b"MOVE 100", ALICE)
    playing_server.apply_pending_commands()
    playing_server.world.spawn_obstacle(x=100, y=config.height - config.player_height - 10)

    playing_server.tick()

    assert playing_server.world.scores == {alice_id: -5, bob_id: 10}
    assert playing_server.world.obstacles == {}
    state = transport.messages_to(ALICE)[-1]
    assert state.endswith(f";;{alice_id}:-5,{bob_id}:10".encode())


def test_win_scenario_emits_single_game_over(playing_server, transport, config):
    alice_id, bob_id = _ids(playing_server)
    world = playing_server.world
    world.scores[bob_id] = config.win_score - config.dodge_reward
    world.set_position(alice_id, 100)
    world.spawn_obstacle(x=100, y=config.player_top - 10)

    for _ in range(5):
        playing_server.tick()

    assert world.phase is Phase.FINISHED
    assert world.winner == bob_id
    assert bob_id == BOB[1]
    for addr in (ALICE, BOB):
        assert transport.messages_to(addr) == [f"GAME_OVER {BOB[1]}".encode()]


def test_finished_game_ignores_moves(playing_server, config):
    alice_id, bob_id = _ids(playing_server)
    playing_server.world.scores[bob_id] = config.win_score - config.dodge_reward
    playing_server.world.spawn_obstacle(x=400, y=config.player_top - 10)
    playing_server.tick()
    assert playing_server.world.phase is Phase.FINISHED

    playing_server.handle_datagram(b"MOVE 10", ALICE)
    playing_server.tick()
    assert playing_server.world.positions[alice_id] == 400


def test_send_failure_does_not_stop_broadcast(playing_server):
    transport = FakeTransport(fail_for={ALICE})
    playing_server.broadcaster.transport = transport
    playing_server.tick()
    assert len(transport.messages_to(BOB)) == 1


def test_broadcast_reports_delivered_count(playing_server):
    playing_server.broadcaster.transport = FakeTransport(fail_for={BOB})
    assert playing_server.broadcaster.broadcast(b"START", playing_server.world.players) == 1


@pytest.mark.parametrize(
    "deadline, now, expected",
    [
        (0.0, 0.5, 1.0),
        (0.0, 1.0, 2.0),
        (0.0, 3.5, 4.0),
        (10.0, 10.2, 11.0),
    ],
)
def test_next_tick_deadline_skips_missed_ticks(deadline, now, expected):
    assert next_tick_deadline(deadline, now, 1.0) == pytest.approx(expected)


def test_state_names_players_by_source_port(playing_server, transport):
    playing_server.handle_datagram(b"MOVE 120", BOB)
    playing_server.tick()
    state = transport.messages_to(ALICE)[0]
    assert state == f"STATE {ALICE[1]}:400,{BOB[1]}:120;;{ALICE[1]}:0,{BOB[1]}:0".encode()


def test_same_port_from_another_host_is_not_admitted(server, transport):
    server.handle_datagram(b"CONNECT", ALICE)
    server.handle_datagram(b"CONNECT", ("10.9.9.9", ALICE[1]))
    server.tick()
    assert len(server.world.players) == 1
    assert server.world.phase is Phase.WAITING
    assert transport.sent == []
