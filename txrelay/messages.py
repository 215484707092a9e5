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

"""Typed payloads exchanged with relay clients.

Inbound frames are decoded into a tagged variant keyed on ``type``.  Only the
``tx`` variant exists today; anything else is rejected with
:class:`~txrelay.errors.UnsupportedType`.  Outbound payloads are built by the
small ``*_payload`` helpers so the wire format lives in one place.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, Literal, Mapping, Union

from .errors import InvalidAmount, InvalidTransfer, MalformedInput, UnsupportedType

_CENTS = Decimal("0.01")


def _identifier(value: Any) -> str:
    """Accept non-empty strings and plain integers as account identifiers."""

    if isinstance(value, bool) or not value:
        raise InvalidTransfer()
    if isinstance(value, str):
        try:
            value.encode("utf-8")
        except UnicodeEncodeError:
            raise InvalidTransfer("identifier is not valid unicode text") from None
        return value
    if isinstance(value, int):
        return str(value)
    raise InvalidTransfer(f"unsupported identifier type: {type(value).__name__}")


def _amount(value: Any) -> Decimal:
    if value is None:
        return Decimal(0)
    if isinstance(value, bool):
        raise InvalidAmount("boolean amount")
    if isinstance(value, (int, float, str)):
        try:
            amount = Decimal(str(value).strip())
            if amount.is_finite():
                amount.quantize(_CENTS)
                return amount
        except InvalidOperation:
            raise InvalidAmount(f"not a number: {value!r}") from None
    raise InvalidAmount(f"not a finite number: {value!r}")


@dataclass(slots=True)
class TransferMessage:
    """A client's request to move ``amount`` from one account to another."""

    from_id: str
    to_id: str
    amount: Decimal = Decimal(0)
    type: Literal["tx"] = field(init=False, default="tx")

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "TransferMessage":
        from_id = _identifier(payload.get("from"))
        to_id = _identifier(payload.get("to"))
        if from_id == to_id:
            raise InvalidTransfer("from and to are the same account")
        return cls(from_id=from_id, to_id=to_id, amount=_amount(payload.get("amount")))

    def to_payload(self) -> Dict[str, Any]:
        return {"type": self.type, "from": self.from_id, "to": self.to_id, "amount": str(self.amount)}


InboundMessage = TransferMessage

_VARIANTS: Dict[str, Callable[[Mapping[str, Any]], InboundMessage]] = {
    "tx": TransferMessage.from_payload,
}


def _reject_constant(token: str) -> Any:
    raise ValueError(f"{token} is not valid JSON")


def decode_frame(raw: Union[str, bytes, bytearray]) -> Any:
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = bytes(raw).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedInput(str(exc)) from None
    try:
        return json.loads(raw, parse_constant=_reject_constant)
    except (TypeError, ValueError) as exc:
        raise MalformedInput(str(exc)) from None


def parse_message(raw: Union[str, bytes, bytearray]) -> InboundMessage:
    """Decode one inbound frame into its message variant.

    Raises a :class:`~txrelay.errors.RelayError` subclass describing the first
    problem found: undecodable frame, unknown ``type``, bad accounts, bad
    amount, in that order.
    """

    payload = decode_frame(raw)
    message_type = payload.get("type") if isinstance(payload, dict) else None
    build = _VARIANTS.get(message_type) if isinstance(message_type, str) else None
    if build is None:
        raise UnsupportedType(f"unsupported message type: {message_type!r}")
    return build(payload)


def csv_payload(row: str) -> Dict[str, Any]:
    return {"type": "csv", "row": row}


def error_payload(message: str) -> Dict[str, Any]:
    return {"type": "error", "message": message}


def encode(payload: Mapping[str, Any]) -> str:
    return json.dumps(payload)


__all__ = [
    "InboundMessage",
    "TransferMessage",
    "csv_payload",
    "decode_frame",
    "encode",
    "error_payload",
    "parse_message",
]
