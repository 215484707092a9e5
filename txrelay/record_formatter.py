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

"""Turn accepted transfers into the comma-joined records we broadcast."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Callable, Dict, Optional

_CENTS = Decimal("0.01")


class SequenceCounter:
    """Process-lifetime monotonic counter used inside transaction ids.

    Starts at zero and is only ever advanced through :meth:`next`, which
    returns the post-increment value.  The increment holds a lock so callers
    bridging in from worker threads still get distinct values.
    """

    def __init__(self) -> None:
        self._value = 0
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            self._value += 1
            return self._value


@dataclass(frozen=True, slots=True)
class TransferRecord:
    transaction_id: str
    from_id: str
    to_id: str
    amount: str
    timestamp: str

    @property
    def row(self) -> str:
        return ",".join(
            (self.transaction_id, self.from_id, self.to_id, self.amount, self.timestamp)
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "transactionId": self.transaction_id,
            "from": self.from_id,
            "to": self.to_id,
            "amount": self.amount,
            "timestamp": self.timestamp,
        }


def format_amount(amount: Any) -> str:
    """Render ``amount`` with exactly two fractional digits.

    Anything that does not coerce to a finite number renders as ``"NaN"``.
    """

    if isinstance(amount, bool):
        amount = int(amount)
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount).strip())
        if not value.is_finite():
            return "NaN"
        # quantize signals InvalidOperation once the result outgrows the context precision
        rounded = value.quantize(_CENTS, rounding=ROUND_HALF_UP)
        # -0.004 and -0 round to zero; render it unsigned
        return str(rounded.copy_abs() if rounded.is_zero() else rounded)
    except (InvalidOperation, ValueError):
        return "NaN"


def format_timestamp(moment: datetime) -> str:
    return (
        f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d} "
        f"{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"
    )


def epoch_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def make_record(
    from_id: str,
    to_id: str,
    amount: Any,
    *,
    counter: SequenceCounter,
    clock: Optional[Callable[[], datetime]] = None,
) -> TransferRecord:
    """Stamp a validated transfer with a transaction id and local time."""

    seq = counter.next()
    moment = (clock or datetime.now)()
    return TransferRecord(
        transaction_id=f"TX_{epoch_millis(moment)}_{seq}",
        from_id=str(from_id),
        to_id=str(to_id),
        amount=format_amount(amount),
        timestamp=format_timestamp(moment),
    )


__all__ = [
    "SequenceCounter",
    "TransferRecord",
    "epoch_millis",
    "format_amount",
    "format_timestamp",
    "make_record",
]
