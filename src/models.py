"""
Data models used across the Polymarket Wallet Alerts monitor.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Position:
    condition_id: str        # on-chain condition ID
    asset: str               # CLOB token ID (unique key per market outcome)
    title: str               # e.g. "Will Oscar Piastri be the 2026 F1 Drivers' Champion?"
    outcome: str             # e.g. "Yes" / "No" / team name
    current_value: float     # Current value in USD
    tokens: float            # Number of shares held
    price: float             # Current market price (0.0 – 1.0)
    average_price: float     # Average entry price (0.0 – 1.0)
    initial_value: float     # Cost basis in USD

    @property
    def effective_price(self) -> float:
        """Entry price, falling back to the current price when the entry is unknown."""
        return self.average_price or self.price or 0.0


@dataclass(frozen=True)
class Activity:
    id: str                  # transaction hash (or API id)
    timestamp: int           # unix seconds
    type: str = ""           # e.g. "TRADE", "REDEEM"
    side: str = ""           # "BUY" / "SELL"
    size: float = 0.0        # shares
    price: float = 0.0       # 0.0 – 1.0
    title: str = ""
    outcome: str = ""
    asset: str = ""
    market_slug: str = ""

    @property
    def notional(self) -> float:
        return self.size * self.price


@dataclass
class FetchResult(Generic[T]):
    """Outcome of a Data API read: the parsed items, or an error with no items."""

    items: list[T] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, error: str) -> "FetchResult[T]":
        return cls(items=[], error=error)


@dataclass
class SendResult:
    ok: bool
    error: str | None = None
