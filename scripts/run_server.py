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

import argparse
import logging

import uvicorn

from gateway.server import create_app
from txrelay.config import configure_logging, load_relay_config

logger = logging.getLogger("txrelay.server")


def main(argv=None):
    config = load_relay_config()
    p = argparse.ArgumentParser(description="Run the transfer broadcast relay.")
    p.add_argument("--host", default=config.host)
    p.add_argument("--port", type=int, default=config.port)
    p.add_argument("--log-level", default=config.log_level)
    args = p.parse_args(argv)

    config.host = args.host
    if args.port != config.port:
        # keep the advertised port in step unless WSS_PORT pinned it explicitly
        if config.wss_port == config.port:
            config.wss_port = args.port
        config.port = args.port
    config.log_level = args.log_level.upper()

    configure_logging(config.log_level)
    app = create_app(config)
    logger.info("Server listening on %s", config.http_url)
    logger.info("WebSocket URL: %s", config.ws_url)
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower(), reload=False)


if __name__ == "__main__":
    main()
