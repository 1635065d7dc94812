"""
Telegram Notifier Agent — formats alerts and sends them to a single chat.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from html import escape

import httpx

from src.models import Activity, Position, SendResult
from src.utils.http_client import post_json

log = logging.getLogger(__name__)

TELEGRAM_API_BASE = "https://api.telegram.org"


def to_american_odds(price: float) -> str:
    """
    Convert a 0–1 price to American odds, e.g. 0.25 → '+300', 0.75 → '-300'.
    Prices outside the open interval (0, 1) have no odds and give 'N/A'.
    """
    if not price or price <= 0 or price >= 1:
        return "N/A"

    decimal_odds = 1 / price
    if decimal_odds >= 2.0:
        return f"+{round((decimal_odds - 1) * 100)}"
    return f"{round(-100 / (decimal_odds - 1))}"


def _format_usd(amount: float) -> str:
    if amount < 0:
        return f"-${-amount:,.2f}"
    return f"${amount:,.2f}"


def _format_tokens(size: float) -> str:
    text = f"{size:,.3f}".rstrip("0").rstrip(".")
    return text or "0"


def _format_price(price: float) -> str:
    if price <= 0:
        return "N/A"
    return f"${price:.2f} ({to_american_odds(price)})"


def _format_timestamp(ts: int) -> str:
    return datetime.fromtimestamp(ts, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def format_position_message(position: Position, wallet_address: str) -> str:
    title = escape(position.title or "Unknown Market")
    outcome = escape(position.outcome or "Unknown Outcome")
    return (
        "🔥 <b>High-Value Position Detected!</b>\n\n"
        f"🏆 Market: <b>{title}</b>\n"
        f"🎯 Betting on: <b>{outcome}</b>\n\n"
        f"💰 Current Value: <b>{_format_usd(position.current_value)}</b>\n"
        f"📊 Size: {_format_tokens(position.tokens)} tokens\n"
        f"🏷 Entry Price: {_format_price(position.effective_price)}\n\n"
        f"<i>Tracking: {escape(wallet_address)}</i>"
    )


def format_activity_message(activity: Activity, wallet_address: str) -> str:
    title = escape(activity.title or "Unknown Market")
    outcome = escape(activity.outcome or "Unknown Outcome")
    return (
        "🐋 <b>Large Buy Detected!</b>\n\n"
        f"🏆 Market: <b>{title}</b>\n"
        f"🎯 Outcome: <b>{outcome}</b>\n\n"
        f"💰 Total: <b>{_format_usd(activity.notional)}</b>\n"
        f"📊 Size: {_format_tokens(activity.size)} tokens\n"
        f"🏷 Price: {_format_price(activity.price)}\n"
        f"🕒 {_format_timestamp(activity.timestamp)}\n\n"
        f"<i>Tracking: {escape(wallet_address)}</i>"
    )


def format_heartbeat_message(wallet_address: str) -> str:
    return (
        "💚 <b>Bot Heartbeat</b>\n"
        f"The bot is online and actively monitoring wallet: <code>{escape(wallet_address)}</code>"
    )


def format_connection_warning(failures: int, interval_seconds: float) -> str:
    minutes = round(failures * interval_seconds / 60)
    return (
        "⚠️ <b>Warning: Connection Issues</b>\n"
        f"The bot has failed to reach Polymarket {failures} times in a row "
        f"(approx. {minutes} mins). It will keep trying, but you may want to check the server."
    )


def format_startup_message(wallet_address: str, mode: str, interval_seconds: float) -> str:
    return (
        "🟢 <b>Polymarket Wallet Alerts is online</b>\n\n"
        f"Mode: <b>{escape(mode)}</b>\n"
        f"Polling every <b>{interval_seconds:g}s</b>\n"
        f"Wallet: <code>{escape(wallet_address)}</code>"
    )


def format_shutdown_message() -> str:
    return "🔴 <b>Polymarket Wallet Alerts is offline</b>"


class TelegramNotifier:
    """Sends HTML-formatted messages to one pre-configured chat."""

    def __init__(self, bot_token: str, chat_id: str) -> None:
        self.bot_token = bot_token
        self.chat_id = chat_id

    async def send_message(self, text: str) -> SendResult:
        """
        Send *text* to the configured chat.

        Errors are logged and returned as SendResult(ok=False), never raised,
        so one failed send does not block the caller. No retry.
        """
        url = f"{TELEGRAM_API_BASE}/bot{self.bot_token}/sendMessage"
        try:
            result = await post_json(url, {
                "chat_id": self.chat_id,
                "text": text,
                "parse_mode": "HTML",
                "disable_web_page_preview": True,
            })
        except httpx.HTTPStatusError as exc:
            error = f"HTTP {exc.response.status_code}: {exc.response.text[:200]}"
            log.error("Telegram rejected message: %s", error)
            return SendResult(ok=False, error=error)
        except Exception as exc:
            log.error("Failed to send Telegram message: %s", exc)
            return SendResult(ok=False, error=str(exc) or type(exc).__name__)

        if not result.get("ok", False):
            log.error("Telegram rejected message: %s", result)
            return SendResult(ok=False, error=str(result.get("description") or result))

        log.info("Notification sent to Telegram.")
        return SendResult(ok=True)
