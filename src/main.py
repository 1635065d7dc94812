"""
main.py — Entry point. Starts the polling loop for the configured wallet.

Run with:
    python -m src.main
"""
from __future__ import annotations

import asyncio
import logging
import signal

from src.agents.market_client import MarketDataClient
from src.agents.poll_loop import PollLoop
from src.agents.strategies import build_strategy
from src.agents.telegram_notifier import (
    TelegramNotifier,
    format_shutdown_message,
    format_startup_message,
)
from src.config import load_config
from src.utils.http_client import close_client
from src.utils.logger import setup_logging

log = logging.getLogger(__name__)


def _install_signal_handlers(stop: asyncio.Event) -> None:
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except (NotImplementedError, RuntimeError):
            # Windows: fall back to KeyboardInterrupt for Ctrl+C
            pass


async def main() -> None:
    setup_logging()

    log.info("Loading configuration …")
    try:
        config = load_config()
    except ValueError as exc:
        log.critical("Configuration error: %s", exc)
        return

    setup_logging(config.log_level)

    log.info("Starting Polymarket Wallet Alerts (%s monitor) …", config.monitor_mode)
    log.info("Tracking wallet: %s", config.target_wallet_address)
    log.info("Poll interval: %dms", config.poll_interval_ms)

    client = MarketDataClient(config.target_wallet_address)
    notifier = TelegramNotifier(config.telegram_bot_token, config.telegram_chat_id)
    poller = PollLoop(
        client,
        notifier,
        build_strategy(config),
        interval_seconds=config.poll_interval_seconds,
        send_delay_seconds=config.send_delay_seconds,
    )

    stop = asyncio.Event()
    _install_signal_handlers(stop)

    await notifier.send_message(format_startup_message(
        config.target_wallet_address, config.monitor_mode, config.poll_interval_seconds,
    ))

    try:
        await poller.run_forever(stop)
    finally:
        log.info("Shutting down ...")
        await notifier.send_message(format_shutdown_message())
        await close_client()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
