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

from __future__ import annotations

import json
from typing import Any, AsyncIterator, Dict, Optional

import aiohttp

from .messages import encode


class RelayClient:
    """Thin async WebSocket client for a running relay.

    Use as an async context manager; every record broadcast while the client
    is connected can be read back with :meth:`receive` or :meth:`rows`,
    including the ones it submitted itself.
    """

    def __init__(self, url: str, *, timeout_seconds: float = 10.0):
        self.url = url
        self.timeout_seconds = timeout_seconds
        self._session: Optional[aiohttp.ClientSession] = None
        self._ws: Optional[aiohttp.ClientWebSocketResponse] = None

    async def __aenter__(self) -> "RelayClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> Optional[bool]:
        await self.close()
        return None

    async def connect(self) -> None:
        if self._ws is not None:
            return
        timeout = aiohttp.ClientTimeout(total=None, sock_connect=self.timeout_seconds)
        self._session = aiohttp.ClientSession(timeout=timeout)
        try:
            self._ws = await self._session.ws_connect(self.url)
        except Exception:
            await self._session.close()
            self._session = None
            raise

    async def close(self) -> None:
        if self._ws is not None:
            await self._ws.close()
            self._ws = None
        if self._session is not None:
            await self._session.close()
            self._session = None

    def _socket(self) -> aiohttp.ClientWebSocketResponse:
        if self._ws is None:
            raise RuntimeError("RelayClient is not connected")
        return self._ws

    async def send_raw(self, data: str) -> None:
        await self._socket().send_str(data)

    async def submit(self, from_id: str, to_id: str, amount: Any = 0) -> None:
        if isinstance(amount, (int, float, str)) and not isinstance(amount, bool):
            value: Any = amount
        else:
            value = str(amount)
        await self.send_raw(encode({"type": "tx", "from": from_id, "to": to_id, "amount": value}))

    async def receive(self) -> Dict[str, Any]:
        msg = await self._socket().receive(timeout=self.timeout_seconds)
        if msg.type == aiohttp.WSMsgType.TEXT:
            return json.loads(msg.data)
        if msg.type == aiohttp.WSMsgType.BINARY:
            return json.loads(msg.data.decode("utf-8"))
        raise ConnectionError(f"relay connection ended: {msg.type.name}")

    async def rows(self) -> AsyncIterator[str]:
        """Yield broadcast rows until the server closes the connection."""

        while True:
            try:
                payload = await self.receive()
            except ConnectionError:
                return
            if payload.get("type") == "csv":
                yield payload["row"]


__all__ = ["RelayClient"]
