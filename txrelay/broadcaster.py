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
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Union

from .errors import DeliveryFailure, RelayError
from .messages import InboundMessage, csv_payload, encode, error_payload, parse_message
from .record_formatter import SequenceCounter, TransferRecord, make_record
from .registry import Connection, ConnectionRegistry, ConnectionState

logger = logging.getLogger(__name__)


class Broadcaster:
    """Validates inbound transfers and fans the stamped record out to everyone.

    The broadcaster owns the sequence counter, so two broadcasters in one
    process number their transactions independently.  Delivery is best
    effort: a recipient whose send fails is dropped from the registry and the
    fan-out carries on with the rest.  The sender is a recipient like any
    other and receives its own record.
    """

    def __init__(
        self,
        registry: Optional[ConnectionRegistry] = None,
        *,
        counter: Optional[SequenceCounter] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.registry = registry if registry is not None else ConnectionRegistry()
        self.counter = counter if counter is not None else SequenceCounter()
        self.clock = clock
        self.accepted = 0
        self.rejected = 0

    def on_open(self, connection: Connection) -> None:
        self.registry.on_open(connection)

    def on_close(self, connection: Connection) -> None:
        self.registry.on_close(connection)

    async def on_message(
        self,
        connection: Connection,
        raw: Union[str, bytes, bytearray],
    ) -> Optional[TransferRecord]:
        try:
            message = parse_message(raw)
        except RelayError as exc:
            self.rejected += 1
            logger.debug("rejected frame from %s: %s (%s)", connection.id, exc.reason, exc)
            await self._reply(connection, error_payload(exc.reason))
            return None

        return await self._accept_transfer(message)

    async def _accept_transfer(self, message: InboundMessage) -> TransferRecord:
        record = make_record(
            message.from_id,
            message.to_id,
            message.amount,
            counter=self.counter,
            clock=self.clock,
        )
        self.accepted += 1
        delivered = await self.broadcast(csv_payload(record.row))
        logger.info("%s %s -> %s %s delivered to %d", record.transaction_id,
                    record.from_id, record.to_id, record.amount, delivered)
        return record

    async def broadcast(self, payload: Dict[str, Any]) -> int:
        """Send ``payload`` to every open connection; return the delivery count."""

        data = encode(payload)
        delivered = 0
        for connection in self.registry.snapshot():
            if not connection.is_open:
                continue
            if await self._deliver(connection, data):
                delivered += 1
        return delivered

    async def _reply(self, connection: Connection, payload: Dict[str, Any]) -> None:
        if connection.state is not ConnectionState.CLOSED:
            await self._deliver(connection, encode(payload))

    async def _deliver(self, connection: Connection, data: str) -> bool:
        try:
            await connection.send_text(data)
        except Exception as exc:
            failure = DeliveryFailure(connection.id, exc)
            logger.warning("%s; dropping connection", failure)
            self.registry.discard(connection)
            return False
        return True

    def stats(self) -> Dict[str, int]:
        return {
            "connections": len(self.registry),
            "accepted": self.accepted,
            "rejected": self.rejected,
        }


__all__ = ["Broadcaster"]
