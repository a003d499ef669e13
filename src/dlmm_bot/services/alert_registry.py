import logging
from typing import Dict, Optional

from dlmm_bot.models.alert import AlertEntry
from dlmm_bot.storage.collection import Collection
from dlmm_bot.storage.exceptions import PersistenceError
from dlmm_bot.storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

ALERTS_COLLECTION = "alerts"


class AlertRegistry:
    """
    Хранит ценовые алерты пользователей:
    - один активный алерт на пользователя (новый перезаписывает старый);
    - удаляется пользователем (/alert off) или планировщиком после срабатывания.
    """

    def __init__(self, store: KeyValueStore):
        self.alerts: Collection[AlertEntry] = Collection(store, ALERTS_COLLECTION, AlertEntry)

    async def set_alert(self, user_id: int, target_price: float) -> AlertEntry:
        """
        Создает или перезаписывает алерт.
        ValueError если цена <= 0, PersistenceError если данные некуда сохранить.
        """
        if target_price is None or not target_price > 0:
            raise ValueError(f"Target price must be positive, got {target_price}")
        entry = AlertEntry(user_id=user_id, target_price=target_price)
        try:
            await self.alerts.put(user_id, entry)
        except PersistenceError:
            logger.error(f"Error setting price alert for user {user_id}", exc_info=True)
            raise
        logger.info(f"Alert set for user {user_id} at ${target_price}")
        return entry

    async def get_alert(self, user_id: int) -> Optional[float]:
        entry = await self.alerts.get(user_id)
        return entry.target_price if entry else None

    async def remove_alert(self, user_id: int) -> None:
        """Идемпотентно: удаление несуществующего алерта - не ошибка."""
        await self.alerts.delete(user_id)
        logger.info(f"Alert removed for user {user_id}")

    async def list_all_alerts(self) -> Dict[int, float]:
        """Все алерты на момент вызова: {user_id: target_price}"""
        return {user_id: entry.target_price for user_id, entry in (await self.alerts.all()).items()}
