import json
import socket
import time

import pytest

from hostrepl.config import ReplConfig
from hostrepl.server import ReplServer


def _banner(client, server):
    return client.poll(server.tick)


def _assert_silent(client, server, ticks=20):
    """No message arrives while the server keeps ticking."""
    client.sock.settimeout(0.01)
    try:
        for _ in range(ticks):
            server.tick()
            try:
                data = client.sock.recv(4096)
            except socket.timeout:
                continue
            pytest.fail(f"unexpected data from server: {data!r}")
    finally:
        client.sock.settimeout(client.timeout)


def test_start_and_stop(config, context):
    srv = ReplServer(config, context)
    assert not srv.is_running()
    assert srv.start()
    assert srv.is_running()
    srv.stop()
    assert not srv.is_running()
    assert srv.address is None
    srv.stop()


def test_tick_when_not_running_is_a_no_op(config, context):
    srv = ReplServer(config, context)
    srv.tick()
    assert not srv.listener.bound


def test_start_fails_on_port_in_use(server, context, caplog):
    other = ReplServer(ReplConfig(host="127.0.0.1", port=server.address[1]), context)
    with caplog.at_level("ERROR", logger="hostrepl.server"):
        assert other.start() is False
    assert not other.is_running()
    assert "Failed to bind" in caplog.text


def test_connected_banner(client, server):
    assert _banner(client, server) == {"type": "connected", "message": "UE4SS REPL ready!"}


def test_custom_banner(context):
    srv = ReplServer(ReplConfig(host="127.0.0.1", port=0, banner="hello"), context)
    assert srv.start()
    try:
        sock = socket.create_connection(srv.address, timeout=2.0)
        with sock:
            deadline = time.monotonic() + 2.0
            while not srv.listener.has_client and time.monotonic() < deadline:
                srv.tick()
                time.sleep(0.005)
            assert sock.recv(4096) == b'{"type":"connected","message":"hello"}\n'
    finally:
        srv.stop()


def test_round_trip(client, server):
    _banner(client, server)
    client.send_line('{"type":"evaluate","expression":"2*21"}')
    assert client.poll(server.tick) == {"type": "eval_result", "success": True, "result": "42"}
    _assert_silent(client, server)


def test_errors_are_reported_to_the_client(client, server):
    _banner(client, server)
    client.send_expression("1 +")
    msg = client.poll(server.tick)
    assert msg["success"] is False
    assert msg["result"].startswith("Compile error: ")

    client.send_expression("None()")
    msg = client.poll(server.tick)
    assert msg["success"] is False
    assert msg["result"].startswith("Error: ")

    # the server keeps serving after failures
    client.send_expression("'still here'")
    assert client.poll(server.tick)["result"] == "'still here'"


def test_state_is_shared_with_the_context(client, server, context):
    _banner(client, server)
    context.define("hp", 100)
    client.send_expression("hp = hp - 30")
    assert client.poll(server.tick)["result"] == "None"
    assert context.lookup("hp") == 70


def test_unrecognized_lines_get_no_response(client, server):
    _banner(client, server)
    client.send_line("hello there")
    client.send_line('{"type":"ping"}')
    client.send_line("")
    client.send_expression("'after noise'")
    # the first response is the one for the valid request
    assert client.poll(server.tick)["result"] == "'after noise'"
    _assert_silent(client, server)


def test_one_request_per_tick(client, server, context, pump):
    _banner(client, server)
    context.define("n", 0)
    client.sock.sendall(b"".join(
        json.dumps({"type": "evaluate", "expression": "n = n + 1"}).encode() + b"\n" for _ in range(3)
    ))
    assert pump(server, lambda: context.lookup("n") >= 1)
    assert context.lookup("n") == 1
    server.tick()
    assert context.lookup("n") == 2
    server.tick()
    assert context.lookup("n") == 3
    for _ in range(3):
        assert client.read_message()["success"] is True


def test_disconnect_then_reconnect(client, server, pump):
    _banner(client, server)
    assert server.listener.has_client
    client.close()
    assert pump(server, lambda: not server.listener.has_client)
    server.tick()
    server.tick()
    assert not server.listener.has_client
    assert server.is_running()

    client.connect()
    assert _banner(client, server)["type"] == "connected"
    client.send_expression("1+1")
    assert client.poll(server.tick)["result"] == "2"


def test_start_twice_keeps_socket_and_client(client, server):
    _banner(client, server)
    addr = server.address
    sock = server.listener._server
    assert server.start() is True
    assert server.address == addr
    assert server.listener._server is sock
    assert server.listener.has_client
    client.send_expression("3")
    assert client.poll(server.tick)["result"] == "3"


def test_stop_closes_client(client, server):
    _banner(client, server)
    server.stop()
    assert not server.listener.has_client
    client.sock.settimeout(2.0)
    assert client.sock.recv(4096) == b""


def test_base_exception_from_client_code_does_not_reach_the_host(client, server):
    _banner(client, server)
    client.send_expression("raise GeneratorExit('bye')")
    msg = client.poll(server.tick)
    assert msg == {"type": "eval_result", "success": False, "result": "Error: GeneratorExit: bye"}
    assert server.is_running()
