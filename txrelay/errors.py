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

"""Error taxonomy for the relay.

Every rejection that is reported back to a client derives from
:class:`RelayError` and carries the exact ``reason`` string sent in the
``{"type": "error", "message": ...}`` reply.
"""

from __future__ import annotations

from typing import Optional


class RelayError(Exception):
    reason: str = "Relay error"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail or self.reason)
        self.detail = detail


class MalformedInput(RelayError):
    """The frame could not be decoded as JSON."""

    reason = "Invalid JSON"


class UnsupportedType(RelayError):
    """The frame decoded but its ``type`` is not one we handle."""

    reason = "Unknown message type"


class InvalidTransfer(RelayError):
    """``from``/``to`` are missing, empty, not plain identifiers, or equal."""

    reason = "Invalid from/to"


class InvalidAmount(RelayError):
    """``amount`` cannot be read as a finite number."""

    reason = "Invalid amount"


class DeliveryFailure(Exception):
    """A send to one recipient failed during fan-out.

    Only used for logging; the broadcaster never lets it escape.
    """

    def __init__(self, connection_id: str, cause: BaseException):
        super().__init__(f"delivery to {connection_id} failed: {cause!r}")
        self.connection_id = connection_id
        self.cause = cause


__all__ = [
    "RelayError",
    "MalformedInput",
    "UnsupportedType",
    "InvalidTransfer",
    "InvalidAmount",
    "DeliveryFailure",
]
