"""
Fixed-interval pollers for Farm Client

Refresh the unread notification count and unread weather alerts in the
background. Pollers are independent; overlapping fetches are tolerated
because they are plain GETs.
"""

import asyncio
import inspect
from typing import Any, Callable, List, Optional, Set

from ..utils.logging_setup import get_logger
from .resources import FarmApi

logger = get_logger('polling')


class Poller:
    """Calls a blocking fetch function every `interval` seconds"""

    def __init__(self, name: str, fetch: Callable[[], Any], interval: float,
                 on_result: Optional[Callable[[Any], Any]] = None):
        if interval <= 0:
            raise ValueError("Polling interval must be positive")
        self.name = name
        self.fetch = fetch
        self.interval = interval
        self.on_result = on_result
        self.last_result: Any = None
        self.error_count = 0
        self._task: Optional[asyncio.Task] = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    async def start(self):
        """Start polling; the first fetch happens immediately"""
        if self._running:
            return
        logger.info(f"Starting {self.name} poller (every {self.interval}s)")
        self._running = True
        self._task = asyncio.create_task(self._run())

    async def stop(self):
        """Stop polling and wait for the loop to exit"""
        logger.info(f"Stopping {self.name} poller")
        self._running = False

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

    async def poll_once(self) -> Any:
        """Run one fetch in a worker thread and deliver the result"""
        result = await asyncio.to_thread(self.fetch)
        self.last_result = result

        if self.on_result:
            outcome = self.on_result(result)
            if inspect.isawaitable(outcome):
                await outcome
        return result

    async def _run(self):
        while self._running:
            try:
                await self.poll_once()
            except asyncio.CancelledError:
                break
            except Exception as e:
                self.error_count += 1
                logger.debug(f"{self.name} poll failed: {e}")

            try:
                await asyncio.sleep(self.interval)
            except asyncio.CancelledError:
                break


class NotificationPoller(Poller):
    """Keeps the unread notification count fresh"""

    def __init__(self, api: FarmApi, interval: float = 30,
                 on_result: Optional[Callable[[int], Any]] = None):
        super().__init__("unread-count", api.notifications.unread_count, interval, on_result)

    @property
    def unread_count(self) -> int:
        return self.last_result or 0


class WeatherAlertPoller(Poller):
    """Reports each unread weather alert once

    An alert counts as reported only after `on_result` returns, so a failing
    callback sees the same alerts again on the next poll. Remembered ids are
    limited to those still unread on the server.
    """

    def __init__(self, api: FarmApi, interval: float = 300, limit: int = 5,
                 on_result: Optional[Callable[[List[dict]], Any]] = None):
        self.api = api
        self.limit = limit
        self.seen_alert_ids: Set[Any] = set()
        self._unread_ids: Set[Any] = set()
        super().__init__("weather-alerts", self._fetch_new_alerts, interval, on_result)

    def _fetch_new_alerts(self) -> List[dict]:
        alerts = self.api.weather.alerts(unread_only=True, limit=self.limit) or []
        self._unread_ids = {alert.get("alertId") for alert in alerts}
        return [alert for alert in alerts if alert.get("alertId") not in self.seen_alert_ids]

    async def poll_once(self) -> List[dict]:
        new_alerts = await super().poll_once()
        delivered = {alert.get("alertId") for alert in new_alerts}
        self.seen_alert_ids = (self.seen_alert_ids | delivered) & self._unread_ids
        return new_alerts
