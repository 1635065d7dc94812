"""
Poll Loop — the monitoring session: fetch, filter, notify, repeat.

All mutable run state (error counter, heartbeat clock, and through the
strategy the notified set or watermark) lives on the PollLoop instance, so a
cycle can be driven directly from tests without a live process.
"""
from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timezone

from src.agents.market_client import MarketDataClient
from src.agents.strategies import AlertStrategy
from src.agents.telegram_notifier import (
    TelegramNotifier,
    format_connection_warning,
    format_heartbeat_message,
)

log = logging.getLogger(__name__)

HEARTBEAT_INTERVAL_SECONDS = 24 * 60 * 60
ERROR_ALERT_THRESHOLD = 3


class PollLoop:
    def __init__(
        self,
        client: MarketDataClient,
        notifier: TelegramNotifier,
        strategy: AlertStrategy,
        *,
        interval_seconds: float = 300.0,
        send_delay_seconds: float = 2.0,
        heartbeat_interval_seconds: float = HEARTBEAT_INTERVAL_SECONDS,
        error_alert_threshold: int = ERROR_ALERT_THRESHOLD,
        clock=time.monotonic,
        sleep=asyncio.sleep,
    ) -> None:
        self.client = client
        self.notifier = notifier
        self.strategy = strategy
        self.interval_seconds = interval_seconds
        self.send_delay_seconds = send_delay_seconds
        self.heartbeat_interval_seconds = heartbeat_interval_seconds
        self.error_alert_threshold = error_alert_threshold
        self._clock = clock
        self._sleep = sleep

        self.consecutive_errors = 0
        self.last_heartbeat = clock()

    async def _maybe_send_heartbeat(self) -> None:
        if self._clock() - self.last_heartbeat < self.heartbeat_interval_seconds:
            return
        log.info("Sending daily heartbeat.")
        await self.notifier.send_message(format_heartbeat_message(self.client.wallet_address))
        self.last_heartbeat = self._clock()

    async def _record_failure(self) -> None:
        self.consecutive_errors += 1
        log.warning("Consecutive fetch failures: %d", self.consecutive_errors)
        # Exact match: one warning per run of failures
        if self.consecutive_errors == self.error_alert_threshold:
            await self.notifier.send_message(
                format_connection_warning(self.consecutive_errors, self.interval_seconds)
            )

    async def run_cycle(self) -> int:
        """
        Execute one poll cycle.

        1. Send the heartbeat if one is due.
        2. Fetch fresh data through the strategy.
        3. On failure bump the error counter (warning at the threshold) and stop.
        4. On success reset the counter, select candidates and alert on each,
           pausing between sends.

        Returns the number of alerts delivered.
        """
        log.info("Polling %s (%s) at %s", self.client.wallet_address, self.strategy.name,
                 datetime.now(timezone.utc).isoformat())
        sent = 0
        try:
            await self._maybe_send_heartbeat()

            result = await self.strategy.fetch(self.client)
            if not result.ok:
                log.error("Fetch failed: %s", result.error)
                await self._record_failure()
                return 0

            self.consecutive_errors = 0

            candidates = self.strategy.select(result.items)
            if not candidates:
                log.info("[Filter] No new items matched criteria.")
                return 0

            log.info("[Filter] Found %d new item(s) to notify!", len(candidates))
            for item in candidates:
                log.info("[Telegram] Sending alert for: %s", self.strategy.describe(item))
                outcome = await self.notifier.send_message(self.strategy.format(item))
                if outcome.ok:
                    sent += 1
                else:
                    log.warning("Alert not delivered (%s); dropping it.", outcome.error)
                # Marked either way: failed sends are not retried
                self.strategy.mark_notified(item)
                # Telegram rate limit
                await self._sleep(self.send_delay_seconds)

        except Exception as exc:
            log.error("Error in poll cycle: %s", exc, exc_info=True)
            await self._record_failure()

        return sent

    async def run_forever(self, stop: asyncio.Event | None = None) -> None:
        """
        Run cycles until *stop* is set, waiting the poll interval after each
        cycle ends. Setting *stop* cuts the wait short but never an in-flight
        cycle.
        """
        stop = stop or asyncio.Event()
        while not stop.is_set():
            await self.run_cycle()
            try:
                await asyncio.wait_for(stop.wait(), timeout=self.interval_seconds)
            except asyncio.TimeoutError:
                pass
