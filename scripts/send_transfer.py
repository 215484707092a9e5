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
import asyncio
import sys

from txrelay.client import RelayClient
from txrelay.config import load_relay_config


async def send(url: str, from_id: str, to_id: str, amount: str) -> int:
    async with RelayClient(url) as client:
        await client.submit(from_id, to_id, amount)
        # other clients' records may arrive first; wait for ours or an error
        while True:
            payload = await client.receive()
            if payload.get("type") == "error":
                print(f"error: {payload.get('message')}", file=sys.stderr)
                return 1
            row = payload.get("row", "")
            if payload.get("type") == "csv" and row.split(",")[1:3] == [from_id, to_id]:
                print(row)
                return 0


def main(argv=None):
    p = argparse.ArgumentParser(description="Submit one transfer to a running relay.")
    p.add_argument("from_id")
    p.add_argument("to_id")
    p.add_argument("amount", nargs="?", default="0")
    p.add_argument("--url", default=load_relay_config().ws_url)
    args = p.parse_args(argv)
    return asyncio.run(send(args.url, args.from_id, args.to_id, args.amount))


if __name__ == "__main__":
    sys.exit(main())
