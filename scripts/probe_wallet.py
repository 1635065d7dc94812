"""
Print a wallet's current positions and latest activity using the monitor's
own client, as a quick smoke test of the Data API.

Run with:
    python -m scripts.probe_wallet 0x...
"""
import asyncio
import sys

from src.agents.market_client import MarketDataClient
from src.agents.telegram_notifier import to_american_odds
from src.config import load_config
from src.utils.http_client import close_client
from src.utils.logger import setup_logging


async def probe(wallet: str) -> None:
    client = MarketDataClient(wallet)
    try:
        positions = await client.fetch_positions()
        if not positions.ok:
            print("positions: error:", positions.error)
        for p in sorted(positions.items, key=lambda p: p.current_value, reverse=True)[:10]:
            print(f"{p.current_value:>12,.2f}  {p.effective_price:.2f} ({to_american_odds(p.effective_price)})  "
                  f"{p.title} [{p.outcome}]")
        print()

        recent = await client.fetch_recent_activity(limit=5)
        if not recent.ok:
            print("activity: error:", recent.error)
        for a in recent.items:
            print(f"{a.timestamp}  {a.side or a.type:<6} {a.notional:>10,.2f}  {a.title} [{a.outcome}]")
    finally:
        await close_client()


if __name__ == "__main__":
    setup_logging()
    address = sys.argv[1] if len(sys.argv) > 1 else load_config().target_wallet_address
    if not address:
        sys.exit("usage: python -m scripts.probe_wallet <wallet address>")
    asyncio.run(probe(address))
