"""
Market Data Client — reads a wallet's positions and activity from the
Polymarket Data API and normalises the loosely-typed JSON into models.

Every public fetch returns a FetchResult; transport and parse failures are
logged and reported through ``FetchResult.error`` instead of raised.
"""
from __future__ import annotations

import logging
import math
import time

from src.models import Activity, FetchResult, Position
from src.utils.http_client import get_json

log = logging.getLogger(__name__)

DATA_API_BASE = "https://data-api.polymarket.com"


def _to_float(value) -> float:
    """Coerce a string-or-number API field to float; missing, garbage, NaN or inf → 0."""
    if value is None or value == "":
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _first(item: dict, *keys: str):
    """Return the first truthy value among *keys* (mirrors the API's field aliases)."""
    for key in keys:
        value = item.get(key)
        if value:
            return value
    return None


def _parse_position(item: dict) -> Position:
    """Convert a raw /positions entry into a Position."""
    return Position(
        condition_id=str(item.get("conditionId") or ""),
        asset=str(item.get("asset") or ""),
        title=str(item.get("title") or ""),
        outcome=str(item.get("outcome") or ""),
        current_value=_to_float(item.get("currentValue")),
        tokens=_to_float(_first(item, "size", "tokens")),
        price=_to_float(_first(item, "price", "curPrice")),
        average_price=_to_float(_first(item, "avgPrice", "averagePrice")),
        initial_value=_to_float(item.get("initialValue")),
    )


def _parse_activity(item: dict) -> Activity:
    """Convert a raw /activity entry into an Activity."""
    return Activity(
        id=str(_first(item, "transactionHash", "id") or ""),
        timestamp=int(_to_float(item.get("timestamp"))),
        type=str(item.get("type") or ""),
        side=str(item.get("side") or ""),
        size=_to_float(item.get("size")),
        price=_to_float(item.get("price")),
        title=str(item.get("title") or ""),
        outcome=str(item.get("outcome") or ""),
        asset=str(item.get("asset") or ""),
        market_slug=str(_first(item, "slug", "marketSlug") or ""),
    )


def _unwrap_list(raw, *keys: str) -> list | None:
    """Return the record list from a response body, or None if the shape is unexpected."""
    if isinstance(raw, list):
        return raw
    if isinstance(raw, dict):
        for key in keys:
            if isinstance(raw.get(key), list):
                return raw[key]
    return None


class MarketDataClient:
    """Read-only view of one wallet on the Polymarket Data API."""

    def __init__(
        self,
        wallet_address: str,
        *,
        last_checked_timestamp: int | None = None,
        positions_limit: int = 500,
        activity_limit: int = 10,
    ) -> None:
        self.wallet_address = wallet_address
        self.positions_limit = positions_limit
        self.activity_limit = activity_limit
        # Start at "now" so actions from before startup are not alerted on
        if last_checked_timestamp is None:
            last_checked_timestamp = int(time.time())
        self.last_checked_timestamp = last_checked_timestamp

    async def fetch_positions(self) -> FetchResult[Position]:
        """Fetch the wallet's current holdings, in API order."""
        log.debug("Fetching positions for %s …", self.wallet_address)
        try:
            raw = await get_json(
                f"{DATA_API_BASE}/positions",
                params={"user": self.wallet_address, "limit": self.positions_limit},
            )
        except Exception as exc:
            log.error("Error fetching positions for %s: %s", self.wallet_address, exc)
            return FetchResult.failure(str(exc) or type(exc).__name__)

        records = _unwrap_list(raw, "positions", "data")
        if records is None:
            log.error("Unexpected /positions response shape: %.200r", raw)
            return FetchResult.failure("unexpected /positions response shape")

        positions: list[Position] = []
        for item in records:
            if not isinstance(item, dict):
                log.warning("Skipping malformed position entry: %r", item)
                continue
            positions.append(_parse_position(item))

        log.info("Fetched %d position(s) for %s", len(positions), self.wallet_address)
        return FetchResult(items=positions)

    async def _fetch_activity(self, limit: int) -> FetchResult[Activity]:
        try:
            raw = await get_json(
                f"{DATA_API_BASE}/activity",
                params={"user": self.wallet_address, "limit": limit},
            )
        except Exception as exc:
            log.error("Error fetching activity for %s: %s", self.wallet_address, exc)
            return FetchResult.failure(str(exc) or type(exc).__name__)

        records = _unwrap_list(raw, "activity", "data")
        if records is None:
            log.warning("Unexpected /activity response shape: %.200r", raw)
            return FetchResult.failure("unexpected /activity response shape")

        activities: list[Activity] = []
        for item in records:
            if not isinstance(item, dict):
                log.warning("Skipping malformed activity entry: %r", item)
                continue
            activities.append(_parse_activity(item))
        return FetchResult(items=activities)

    async def fetch_new_activity(self) -> FetchResult[Activity]:
        """
        Fetch recent actions newer than the watermark and advance it.

        On failure the watermark is left untouched.
        """
        result = await self._fetch_activity(self.activity_limit)
        if not result.ok:
            return result

        new = [a for a in result.items if a.timestamp > self.last_checked_timestamp]
        if new:
            # Don't rely on the API's sort order
            self.last_checked_timestamp = max(a.timestamp for a in new)
            log.info(
                "%d new action(s) for %s; watermark → %d",
                len(new), self.wallet_address, self.last_checked_timestamp,
            )
        return FetchResult(items=new)

    async def fetch_recent_activity(self, limit: int = 5) -> FetchResult[Activity]:
        """Fetch the latest actions regardless of the watermark (manual testing)."""
        return await self._fetch_activity(limit)
