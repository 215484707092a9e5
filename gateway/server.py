# ============================================================================
#  SpiralReality Proprietary
#  Copyright (c) 2025 SpiralReality. All Rights Reserved.
#
#  NOTICE: This file contains confidential and proprietary information of
#  SpiralReality. ANY USE, COPYING, MODIFICATION, DISTRIBUTION, DISPLAY,
#  OR DISCLOSURE OF THIS FILE, IN WHOLE OR IN PART, IS STRICTLY PROHIBITED
#  WITHOUT THE PRIOR WRITTEN CONSENT OF SPIRALREALITY.
#
#  NO LICENSE IS GRANTED OR IMPLIED BY THIS FILE. THIS SOFTWARE IS PROVIDED
#  "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR IMPLIED, INCLUDING BUT
#  NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY, FITNESS FOR A PARTICULAR
#  PURPOSE AND NON-INFRINGEMENT. IN NO EVENT SHALL SPIRALREALITY OR ITS
#  SUPPLIERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN
#  AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
#  CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE SOFTWARE.
# ============================================================================

"""HTTP/WebSocket front door for the relay.

Maps the socket lifecycle onto :class:`~txrelay.broadcaster.Broadcaster`:
accept -> ``on_open``, each frame -> ``on_message``, disconnect ->
``on_close``.  Also serves ``/health``, ``/ws-config`` and the static client.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.staticfiles import StaticFiles

from txrelay.broadcaster import Broadcaster
from txrelay.config import RelayConfig, load_relay_config
from txrelay.registry import Connection

logger = logging.getLogger(__name__)


def websocket_connection(ws: WebSocket) -> Connection:
    return Connection(ws.send_text)


def create_app(
    config: Optional[RelayConfig] = None,
    broadcaster: Optional[Broadcaster] = None,
) -> FastAPI:
    config = config or load_relay_config()
    broadcaster = broadcaster or Broadcaster()

    app = FastAPI(title="txrelay")
    app.state.config = config
    app.state.broadcaster = broadcaster

    @app.websocket(config.ws_path)
    async def relay(ws: WebSocket):
        await ws.accept()
        connection = websocket_connection(ws)
        broadcaster.on_open(connection)
        try:
            while True:
                message = await ws.receive()
                if message["type"] == "websocket.disconnect":
                    break
                raw = message.get("text")
                if raw is None:
                    raw = message.get("bytes") or b""
                await broadcaster.on_message(connection, raw)
        except WebSocketDisconnect:
            pass
        finally:
            broadcaster.on_close(connection)

    @app.get("/health")
    def health() -> Dict[str, Any]:
        return {"ok": True}

    @app.get("/ws-config")
    def ws_config() -> Dict[str, Any]:
        return {"url": config.ws_url}

    if os.path.isdir(config.public_dir):
        app.mount("/", StaticFiles(directory=config.public_dir, html=True), name="public")
    else:
        logger.warning("public directory %s not found; static files disabled", config.public_dir)

    return app


__all__ = ["create_app", "websocket_connection"]
