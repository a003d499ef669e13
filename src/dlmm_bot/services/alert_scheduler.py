# Это файл src/dlmm_bot/services/alert_scheduler.py

import asyncio
import logging
from typing import Callable, List, Optional, Protocol, Set, Tuple

from dlmm_bot.models.alert import AlertResult
from dlmm_bot.services.alert_registry import AlertRegistry
from dlmm_bot.utils.messages import format_price_alert

logger = logging.getLogger(__name__)

DEFAULT_CHECK_INTERVAL_SECONDS = 5 * 60


class PriceOracle(Protocol):
    async def get_current_price(self) -> Optional[float]: ...


class Notifier(Protocol):
    async def send(self, user_id: int, message: str) -> bool: ...


class AlertScheduler:
    """
    Фоновая проверка алертов:
    1. Получает текущую цену (нет цены - цикл пропускается).
    2. Загружает все алерты из AlertRegistry.
    3. Срабатывание: current_price >= target_price.
    4. Отправляет уведомление (ошибка доставки только логируется).
    5. Удаляет сработавший алерт, даже если доставка не удалась.

    Циклы запускаются с фиксированным шагом от начала предыдущего цикла,
    поэтому медленный цикл может пересечься со следующим.
    """

    def __init__(
        self,
        registry: AlertRegistry,
        price_oracle: PriceOracle,
        notifier: Notifier,
        interval_seconds: float = DEFAULT_CHECK_INTERVAL_SECONDS,
        run_immediately: bool = False,
        message_formatter: Callable[[float, float], str] = format_price_alert,
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.registry = registry
        self.price_oracle = price_oracle
        self.notifier = notifier
        self.interval_seconds = interval_seconds
        self.run_immediately = run_immediately
        self.message_formatter = message_formatter
        self._ticker: Optional[asyncio.Task] = None
        self._cycles: Set[asyncio.Task] = set()

    @property
    def running(self) -> bool:
        return self._ticker is not None and not self._ticker.done()

    def start(self) -> None:
        """Stopped -> Running. Must be called from a running event loop."""
        if self.running:
            logger.warning("Alert scheduler is already running")
            return
        self._ticker = asyncio.create_task(self._tick_forever(), name="alert-scheduler")
        logger.info(f"Price alert checker started ({self.interval_seconds:g}s intervals)")

    async def stop(self) -> None:
        """Running -> Stopped. Cancels the ticker and any cycle still in flight."""
        tasks = list(self._cycles)
        if self._ticker is not None:
            tasks.append(self._ticker)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._ticker = None
        self._cycles.clear()
        logger.info("Price alert checker stopped")

    async def _tick_forever(self):
        loop = asyncio.get_running_loop()
        next_tick = loop.time() if self.run_immediately else loop.time() + self.interval_seconds
        while True:
            await asyncio.sleep(max(0.0, next_tick - loop.time()))
            next_tick += self.interval_seconds
            cycle = asyncio.create_task(self._run_cycle_safely())
            self._cycles.add(cycle)
            cycle.add_done_callback(self._cycles.discard)

    async def _run_cycle_safely(self):
        try:
            await self.run_cycle()
        except Exception as e:
            logger.error(f"Error in price checker: {e}", exc_info=True)

    async def _get_price(self) -> Optional[float]:
        try:
            return await self.price_oracle.get_current_price()
        except Exception as e:
            logger.error(f"Price oracle failed: {e}")
            return None

    async def _notify(self, user_id: int, current_price: float, target_price: float) -> Tuple[bool, Optional[str]]:
        """(delivered, error)"""
        message = self.message_formatter(current_price, target_price)
        try:
            if await self.notifier.send(user_id, message):
                return True, None
            return False, "notifier reported failure"
        except Exception as e:
            logger.error(f"Error sending alert to user {user_id}: {e}")
            return False, str(e) or type(e).__name__

    async def run_cycle(self) -> List[AlertResult]:
        """Один цикл проверки всех алертов. Возвращает сработавшие алерты."""
        current_price = await self._get_price()
        if current_price is None:
            logger.info("No current price available, skipping alert check cycle")
            return []

        user_alerts = await self.registry.list_all_alerts()
        if not user_alerts:
            logger.debug("No alerts to check.")
            return []

        results: List[AlertResult] = []
        for user_id, target_price in user_alerts.items():
            if current_price < target_price:
                continue

            logger.info(f"Alert for user {user_id} triggered at ${current_price} (target ${target_price})")
            delivered, error = await self._notify(user_id, current_price, target_price)
            if not delivered:
                logger.warning(f"Alert for user {user_id} was not delivered ({error}), removing it anyway")
            await self.registry.remove_alert(user_id)
            results.append(AlertResult(
                user_id=user_id,
                target_price=target_price,
                current_price=current_price,
                delivered=delivered,
                error=error,
            ))

        logger.info(
            f"Alert check cycle completed at ${current_price}: "
            f"{len(results)} of {len(user_alerts)} alerts triggered."
        )
        return results
