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
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_PORT = 3000
DEFAULT_PUBLIC_DIR = Path(__file__).resolve().parent.parent / "public"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass
class RelayConfig:
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    wss_host: str = "localhost"
    wss_port: int = DEFAULT_PORT
    ws_path: str = "/"
    public_dir: str = str(DEFAULT_PUBLIC_DIR)
    log_level: str = "INFO"

    @property
    def http_url(self) -> str:
        return f"http://localhost:{self.port}"

    @property
    def ws_url(self) -> str:
        """Endpoint advertised to clients, which may differ from the bind address."""

        return f"ws://{self.wss_host}:{self.wss_port}{self.ws_path}"


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.environ.get(name)
    return value if value else default


def _env_int(name: str, default: int) -> int:
    raw = _env(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def load_relay_config() -> RelayConfig:
    """Build a :class:`RelayConfig` from ``PORT``/``WSS_HOST``/``WSS_PORT`` and friends.

    ``WSS_PORT`` falls back to ``PORT`` so a single variable is enough when
    clients reach the server directly.
    """

    port = _env_int("PORT", DEFAULT_PORT)
    return RelayConfig(
        host=_env("HOST", "0.0.0.0"),
        port=port,
        wss_host=_env("WSS_HOST", "localhost"),
        wss_port=_env_int("WSS_PORT", port),
        public_dir=_env("PUBLIC_DIR", str(DEFAULT_PUBLIC_DIR)),
        log_level=(_env("RELAY_LOG_LEVEL", "INFO") or "INFO").upper(),
    )


def configure_logging(level: str = "INFO") -> None:
    numeric = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=numeric, format=LOG_FORMAT)
    # basicConfig is a no-op once handlers exist, so apply the level explicitly
    logging.getLogger().setLevel(numeric)


__all__ = ["RelayConfig", "configure_logging", "load_relay_config"]
