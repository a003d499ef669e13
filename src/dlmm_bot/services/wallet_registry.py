"""Wallet address registry"""
import logging
from typing import Optional

from dlmm_bot.models.wallet import WalletEntry
from dlmm_bot.storage.collection import Collection
from dlmm_bot.storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

WALLETS_COLLECTION = "wallets"


class WalletRegistry:
    def __init__(self, store: KeyValueStore):
        self.wallets: Collection[WalletEntry] = Collection(store, WALLETS_COLLECTION, WalletEntry)

    async def set_wallet(self, user_id: int, address: str) -> WalletEntry:
        """Raises PersistenceError if the address could not be stored anywhere."""
        entry = WalletEntry(user_id=user_id, address=address)
        await self.wallets.put(user_id, entry)
        logger.info(f"Wallet set for user {user_id}")
        return entry

    async def get_wallet(self, user_id: int) -> Optional[str]:
        entry = await self.wallets.get(user_id)
        return entry.address if entry else None

    async def remove_wallet(self, user_id: int) -> None:
        await self.wallets.delete(user_id)
