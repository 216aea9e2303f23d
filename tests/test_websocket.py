"""
WebSocket echo and chat broadcast.

Run: pytest tests/test_websocket.py -v
"""
import asyncio

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from routemeter.chat import ChatHub
from routemeter.main import create_app
from routemeter.metrics import MetricsRegistry
from routemeter.routers import ws


@pytest.fixture
def registry():
    return MetricsRegistry()


@pytest.fixture
def client(registry):
    # Entering the client shares one event loop across websocket sessions,
    # which the chat hub needs to broadcast between connections.
    with TestClient(create_app(metrics=registry)) as test_client:
        yield test_client


def test_echo(client):
    with client.websocket_connect("/ws/echo") as sock:
        sock.send_text("ping")
        assert sock.receive_text() == "ping"
        sock.send_text("second")
        assert sock.receive_text() == "second"


def test_chat_broadcasts_to_all_clients(client):
    with client.websocket_connect("/ws/chat") as alice:
        assert alice.receive_text() == "welcome: 1 client(s) connected"
        with client.websocket_connect("/ws/chat") as bob:
            assert bob.receive_text() == "welcome: 2 client(s) connected"
            alice.send_text("hello from alice")
            assert alice.receive_text() == "hello from alice"
            assert bob.receive_text() == "hello from alice"
            bob.send_text("hi alice")
            assert alice.receive_text() == "hi alice"
            assert bob.receive_text() == "hi alice"


def test_oversized_frame_closes_with_1009(client, monkeypatch):
    monkeypatch.setattr(ws.settings, "CHAT_MAX_MESSAGE_BYTES", 8)
    with client.websocket_connect("/ws/echo") as sock:
        sock.send_text("short")
        assert sock.receive_text() == "short"
        sock.send_text("x" * 9)
        with pytest.raises(WebSocketDisconnect) as exc:
            sock.receive_text()
    assert exc.value.code == 1009


def test_oversized_chat_frame_closes_with_1009(client, monkeypatch):
    hub = client.app.state.chat
    monkeypatch.setattr(ws.settings, "CHAT_MAX_MESSAGE_BYTES", 4)
    with client.websocket_connect("/ws/chat") as sock:
        sock.receive_text()
        sock.send_text("ééé")  # 6 bytes in UTF-8
        with pytest.raises(WebSocketDisconnect) as exc:
            sock.receive_text()
    assert exc.value.code == 1009
    assert hub.client_count == 0


def test_websocket_traffic_is_not_recorded(client, registry):
    with client.websocket_connect("/ws/echo") as sock:
        sock.send_text("ping")
        sock.receive_text()
    assert registry.request_counts() == {}


def test_chat_binary_frame_closes_and_unregisters(client):
    hub = client.app.state.chat
    with client.websocket_connect("/ws/chat") as sock:
        sock.receive_text()
        assert hub.client_count == 1
        sock.send_bytes(b"\x00\x01")
        with pytest.raises(WebSocketDisconnect) as exc:
            sock.receive_text()
    assert exc.value.code == 1003
    assert hub.client_count == 0


def test_echo_binary_frame_closes_with_1003(client):
    with client.websocket_connect("/ws/echo") as sock:
        sock.send_bytes(b"\x00\x01")
        with pytest.raises(WebSocketDisconnect) as exc:
            sock.receive_text()
    assert exc.value.code == 1003


def test_chat_client_leaving_unregisters(client):
    hub = client.app.state.chat
    with client.websocket_connect("/ws/chat") as sock:
        sock.receive_text()
        assert hub.client_count == 1
    assert hub.client_count == 0


class _FakeSocket:
    """Stands in for a WebSocket; records what was sent, optionally failing."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.sent: list[str] = []

    async def accept(self) -> None:
        pass

    async def send_text(self, message: str) -> None:
        if self.fail:
            raise RuntimeError("connection reset")
        self.sent.append(message)


def test_broadcast_drops_failing_client_and_delivers_to_rest():
    async def scenario():
        hub = ChatHub()
        healthy, broken = _FakeSocket(), _FakeSocket(fail=True)
        await hub.connect(healthy)
        await hub.connect(broken)
        assert hub.client_count == 2
        delivered = await hub.broadcast("hello")
        return hub, healthy, delivered

    hub, healthy, delivered = asyncio.run(scenario())
    assert delivered == 1
    assert healthy.sent == ["hello"]
    assert hub.client_count == 1


def test_disconnect_is_idempotent():
    async def scenario():
        hub = ChatHub()
        sock = _FakeSocket()
        await hub.connect(sock)
        await hub.disconnect(sock)
        await hub.disconnect(sock)
        return hub

    assert asyncio.run(scenario()).client_count == 0
