"""
Tests for the Telegram Notifier agent.

Run with:  pytest tests/test_telegram_notifier.py
"""
from __future__ import annotations

import httpx
import pytest
from unittest.mock import AsyncMock, patch

from src.agents.telegram_notifier import (
    TelegramNotifier,
    format_activity_message,
    format_connection_warning,
    format_heartbeat_message,
    format_position_message,
    to_american_odds,
)
from src.models import Activity, Position

WALLET = "0xABCD"


def _make_position(**overrides) -> Position:
    fields = dict(
        condition_id="0xcond",
        asset="999",
        title="Will Oscar Piastri be the 2026 F1 Drivers' Champion?",
        outcome="Yes",
        current_value=12345.678,
        tokens=8583.2,
        price=0.06,
        average_price=0.25,
        initial_value=2145.8,
    )
    fields.update(overrides)
    return Position(**fields)


class TestAmericanOdds:
    @pytest.mark.parametrize("price, expected", [
        (0.5, "+100"),
        (0.25, "+300"),
        (0.75, "-300"),
        (0.2, "+400"),
        (0.8, "-400"),
    ])
    def test_valid_prices(self, price, expected):
        assert to_american_odds(price) == expected

    @pytest.mark.parametrize("price", [0, 1, -0.1, 1.5])
    def test_out_of_range_is_na(self, price):
        assert to_american_odds(price) == "N/A"


class TestFormatters:
    def test_position_message_fields(self):
        msg = format_position_message(_make_position(), WALLET)
        assert "High-Value Position Detected" in msg
        assert "Will Oscar Piastri" in msg
        assert "<b>Yes</b>" in msg
        assert "$12,345.68" in msg
        assert "8,583.2 tokens" in msg
        assert "$0.25 (+300)" in msg
        assert WALLET in msg

    def test_position_message_falls_back_to_current_price(self):
        msg = format_position_message(_make_position(average_price=0.0, price=0.75), WALLET)
        assert "$0.75 (-300)" in msg

    def test_position_message_placeholders(self):
        msg = format_position_message(_make_position(title="", outcome=""), WALLET)
        assert "Unknown Market" in msg
        assert "Unknown Outcome" in msg

    def test_position_message_escapes_html(self):
        msg = format_position_message(_make_position(title="A <b> & C"), WALLET)
        assert "A &lt;b&gt; &amp; C" in msg

    def test_activity_message(self):
        activity = Activity(
            id="0xhash", timestamp=1700000000, type="TRADE", side="BUY",
            size=4000, price=0.5, title="Lakers vs Celtics", outcome="Lakers",
        )
        msg = format_activity_message(activity, WALLET)
        assert "Large Buy Detected" in msg
        assert "$2,000.00" in msg
        assert "$0.50 (+100)" in msg
        assert "2023-11-14 22:13:20 UTC" in msg

    def test_heartbeat_message(self):
        assert f"<code>{WALLET}</code>" in format_heartbeat_message(WALLET)

    def test_connection_warning_estimates_minutes(self):
        msg = format_connection_warning(3, 300)
        assert "3 times in a row" in msg
        assert "approx. 15 mins" in msg


class TestSendMessage:
    @pytest.mark.asyncio
    async def test_success(self):
        notifier = TelegramNotifier("TOKEN", "CHAT")
        mock_post = AsyncMock(return_value={"ok": True, "result": {}})
        with patch("src.agents.telegram_notifier.post_json", new=mock_post):
            result = await notifier.send_message("hello")
        assert result.ok
        url, payload = mock_post.call_args.args
        assert url == "https://api.telegram.org/botTOKEN/sendMessage"
        assert payload["chat_id"] == "CHAT"
        assert payload["text"] == "hello"
        assert payload["parse_mode"] == "HTML"

    @pytest.mark.asyncio
    async def test_network_failure_is_returned_not_raised(self):
        notifier = TelegramNotifier("TOKEN", "CHAT")
        with patch("src.agents.telegram_notifier.post_json",
                   new=AsyncMock(side_effect=httpx.ConnectError("Network error"))):
            result = await notifier.send_message("hello")
        assert not result.ok
        assert "Network error" in result.error

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        request = httpx.Request("POST", "https://api.telegram.org/botTOKEN/sendMessage")
        response = httpx.Response(400, request=request, text='{"ok":false,"description":"chat not found"}')
        error = httpx.HTTPStatusError("Bad Request", request=request, response=response)
        notifier = TelegramNotifier("TOKEN", "CHAT")
        with patch("src.agents.telegram_notifier.post_json", new=AsyncMock(side_effect=error)):
            result = await notifier.send_message("hello")
        assert not result.ok
        assert "400" in result.error
        assert "chat not found" in result.error

    @pytest.mark.asyncio
    async def test_rejected_by_telegram(self):
        notifier = TelegramNotifier("TOKEN", "CHAT")
        with patch("src.agents.telegram_notifier.post_json",
                   new=AsyncMock(return_value={"ok": False, "description": "Forbidden"})):
            result = await notifier.send_message("hello")
        assert not result.ok
        assert result.error == "Forbidden"
