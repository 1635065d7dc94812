"""
Alert strategies — the per-mode policy plugged into the poll loop.

A strategy decides what to fetch, which items deserve an alert, how each
alert reads, and how an alerted item is remembered:

* PositionStrategy: large holdings in a sane price band, deduplicated by a
  persisted set of asset IDs.
* ActivityStrategy: large BUY trades, deduplicated by the client's
  in-memory timestamp watermark only.
"""
from __future__ import annotations

import logging
from pathlib import Path

from src.agents import state_manager
from src.agents.market_client import MarketDataClient
from src.agents.telegram_notifier import format_activity_message, format_position_message
from src.config import AppConfig
from src.models import Activity, FetchResult, Position

log = logging.getLogger(__name__)


class AlertStrategy:
    """Base class; subclasses fill in every method."""

    name = "base"

    async def fetch(self, client: MarketDataClient) -> FetchResult:
        raise NotImplementedError

    def select(self, items: list) -> list:
        raise NotImplementedError

    def format(self, item) -> str:
        raise NotImplementedError

    def describe(self, item) -> str:
        raise NotImplementedError

    def mark_notified(self, item) -> None:
        raise NotImplementedError


class PositionStrategy(AlertStrategy):
    name = "positions"

    def __init__(
        self,
        wallet_address: str,
        notified_ids: set[str],
        state_path: Path,
        *,
        min_value: float = 5000.0,
        min_price: float = 0.10,
        max_price: float = 0.90,
    ) -> None:
        self.wallet_address = wallet_address
        self.notified_ids = notified_ids
        self.state_path = state_path
        self.min_value = min_value
        self.min_price = min_price
        self.max_price = max_price

    async def fetch(self, client: MarketDataClient) -> FetchResult[Position]:
        return await client.fetch_positions()

    def select(self, items: list[Position]) -> list[Position]:
        """
        Keep positions worth at least min_value, not yet notified, whose
        effective price lies in [min_price, max_price]. Large new positions
        rejected only for their price are logged as skipped.
        """
        selected: list[Position] = []
        for p in items:
            if p.current_value < self.min_value or p.asset in self.notified_ids:
                continue
            price = p.effective_price
            if not self.min_price <= price <= self.max_price:
                log.info(
                    "[Filter] Skipping \"%s\" (%s): price $%.2f outside %.2f-%.2f range.",
                    p.title, p.outcome, price, self.min_price, self.max_price,
                )
                continue
            selected.append(p)
        return selected

    def format(self, item: Position) -> str:
        return format_position_message(item, self.wallet_address)

    def describe(self, item: Position) -> str:
        return f"{item.title} ({item.outcome}) - value ${item.current_value:,.2f}"

    def mark_notified(self, item: Position) -> None:
        self.notified_ids.add(item.asset)
        state_manager.save_notified_ids(self.notified_ids, self.state_path)


class ActivityStrategy(AlertStrategy):
    name = "activity"

    def __init__(self, wallet_address: str, *, min_value: float = 1000.0) -> None:
        self.wallet_address = wallet_address
        self.min_value = min_value

    async def fetch(self, client: MarketDataClient) -> FetchResult[Activity]:
        return await client.fetch_new_activity()

    def select(self, items: list[Activity]) -> list[Activity]:
        return [
            a for a in items
            if a.side.upper() == "BUY" and a.notional >= self.min_value
        ]

    def format(self, item: Activity) -> str:
        return format_activity_message(item, self.wallet_address)

    def describe(self, item: Activity) -> str:
        return f"{item.title} ({item.outcome}) - buy ${item.notional:,.2f}"

    def mark_notified(self, item: Activity) -> None:
        # The client's watermark already moved past this item
        pass


def build_strategy(config: AppConfig) -> AlertStrategy:
    """Create the strategy selected by MONITOR_MODE."""
    if config.monitor_mode == "activity":
        return ActivityStrategy(config.target_wallet_address, min_value=config.min_activity_value)

    return PositionStrategy(
        config.target_wallet_address,
        state_manager.load_notified_ids(config.notified_path),
        config.notified_path,
        min_value=config.min_position_value,
        min_price=config.min_price,
        max_price=config.max_price,
    )
