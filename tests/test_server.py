import re
import time

from fastapi.testclient import TestClient

from gateway.server import create_app
from txrelay.broadcaster import Broadcaster
from txrelay.config import RelayConfig

ROW = re.compile(r"^TX_\d+_\d+,alice,bob,5\.00,\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}$")


def _app(tmp_path, **overrides):
    public = tmp_path / "public"
    public.mkdir()
    (public / "index.html").write_text("<h1>relay</h1>", encoding="utf-8")
    cfg = RelayConfig(public_dir=str(public), **overrides)
    broadcaster = Broadcaster()
    return create_app(cfg, broadcaster), broadcaster


def _ready(ws):
    # a round trip proves the server side registered the socket
    ws.send_text("ping?")
    assert ws.receive_json() == {"type": "error", "message": "Invalid JSON"}


def test_health_and_ws_config(tmp_path):
    app, _ = _app(tmp_path, wss_host="relay.test", wss_port=9000)
    with TestClient(app) as client:
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"ok": True}
        assert client.get("/ws-config").json() == {"url": "ws://relay.test:9000/"}


def test_static_index_served(tmp_path):
    app, _ = _app(tmp_path)
    with TestClient(app) as client:
        resp = client.get("/")
        assert resp.status_code == 200
        assert "relay" in resp.text


def test_missing_public_dir_disables_static(tmp_path):
    cfg = RelayConfig(public_dir=str(tmp_path / "absent"))
    with TestClient(create_app(cfg, Broadcaster())) as client:
        assert client.get("/health").json() == {"ok": True}
        assert client.get("/").status_code == 404


def test_transfer_broadcast_reaches_all_sockets(tmp_path):
    app, broadcaster = _app(tmp_path)
    with TestClient(app) as client:
        with client.websocket_connect("/") as a, client.websocket_connect("/") as b:
            _ready(a)
            _ready(b)
            assert len(broadcaster.registry) == 2

            a.send_json({"type": "tx", "from": "alice", "to": "bob", "amount": 5})
            got_a = a.receive_json()
            got_b = b.receive_json()

    assert got_a == got_b
    assert got_a["type"] == "csv"
    assert ROW.match(got_a["row"])


def test_error_stays_on_offending_socket(tmp_path):
    app, _ = _app(tmp_path)
    with TestClient(app) as client:
        with client.websocket_connect("/") as a, client.websocket_connect("/") as b:
            _ready(a)
            _ready(b)

            b.send_json({"type": "tx", "from": "same", "to": "same"})
            assert b.receive_json() == {"type": "error", "message": "Invalid from/to"}

            # a gets nothing for b's mistake; its next frame is its own record
            a.send_json({"type": "tx", "from": "a1", "to": "a2"})
            assert a.receive_json()["row"].split(",")[1:4] == ["a1", "a2", "0.00"]
            assert b.receive_json()["row"].split(",")[1:4] == ["a1", "a2", "0.00"]


def test_binary_frames_are_decoded(tmp_path):
    app, _ = _app(tmp_path)
    with TestClient(app) as client:
        with client.websocket_connect("/") as ws:
            ws.send_bytes(b'{"type": "tx", "from": "x", "to": "y", "amount": "2.5"}')
            assert ws.receive_json()["row"].split(",")[3] == "2.50"


def test_disconnect_unregisters_socket(tmp_path):
    app, broadcaster = _app(tmp_path)
    with TestClient(app) as client:
        with client.websocket_connect("/") as ws:
            _ready(ws)
            assert len(broadcaster.registry) == 1
        deadline = time.monotonic() + 2.0
        while len(broadcaster.registry) and time.monotonic() < deadline:
            time.sleep(0.01)
        assert len(broadcaster.registry) == 0
