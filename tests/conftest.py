import socket
import threading
import time

import pytest
import uvicorn

from gateway.server import create_app
from txrelay.broadcaster import Broadcaster
from txrelay.config import RelayConfig


def _free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture
def live_relay(tmp_path):
    """Run a real relay on a free port in a background thread; yields its ws:// URL."""

    port = _free_port()
    cfg = RelayConfig(host="127.0.0.1", port=port, wss_port=port, public_dir=str(tmp_path))
    app = create_app(cfg, Broadcaster())
    server = uvicorn.Server(uvicorn.Config(app, host="127.0.0.1", port=port, log_level="warning"))
    thread = threading.Thread(target=server.run, daemon=True)
    thread.start()
    deadline = time.monotonic() + 10.0
    while not server.started:
        if time.monotonic() > deadline or not thread.is_alive():
            pytest.fail("relay server did not start")
        time.sleep(0.02)
    yield f"ws://127.0.0.1:{port}/"
    server.should_exit = True
    thread.join(timeout=10.0)
