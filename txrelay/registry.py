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

import logging
import uuid
from enum import Enum
from typing import Awaitable, Callable, Iterator, List, Optional, Set

logger = logging.getLogger(__name__)


class ConnectionState(str, Enum):
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"


class Connection:
    """Handle around one client channel.

    The transport owns the socket; this object only knows how to push a text
    frame through it and what lifecycle state the registry last observed.
    """

    def __init__(self, send: Callable[[str], Awaitable[None]], *, connection_id: Optional[str] = None):
        self.id = connection_id or uuid.uuid4().hex[:8]
        self.state = ConnectionState.CONNECTING
        self._send = send

    @property
    def is_open(self) -> bool:
        return self.state is ConnectionState.OPEN

    async def send_text(self, data: str) -> None:
        await self._send(data)

    def __repr__(self) -> str:
        return f"Connection(id={self.id!r}, state={self.state.value})"


class ConnectionRegistry:
    """The open-set: every connection currently eligible for broadcasts."""

    def __init__(self) -> None:
        self._open: Set[Connection] = set()

    def on_open(self, connection: Connection) -> None:
        connection.state = ConnectionState.OPEN
        self._open.add(connection)
        logger.debug("connection %s opened (%d open)", connection.id, len(self._open))

    def on_close(self, connection: Connection) -> None:
        connection.state = ConnectionState.CLOSED
        if connection in self._open:
            self._open.discard(connection)
            logger.debug("connection %s closed (%d open)", connection.id, len(self._open))

    def discard(self, connection: Connection) -> None:
        """Drop a connection whose send failed, as if it had closed."""

        self.on_close(connection)

    def snapshot(self) -> List[Connection]:
        return list(self._open)

    def __len__(self) -> int:
        return len(self._open)

    def __contains__(self, connection: object) -> bool:
        return connection in self._open

    def __iter__(self) -> Iterator[Connection]:
        return iter(self.snapshot())


__all__ = ["Connection", "ConnectionRegistry", "ConnectionState"]
