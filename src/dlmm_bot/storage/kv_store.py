"""
KeyValueStore - one logical store over a remote and a local backend.

The remote backend (Redis or DynamoDB) is preferred while it is available.
Any remote failure falls through to the local JSON backend and is never
raised to the caller. If the remote connection fails at startup, the store
stays in local-only (degraded) mode for the rest of the process lifetime.
"""
import asyncio
import logging
from enum import Enum
from typing import Any, Dict, Optional
from urllib.parse import parse_qs, urlparse

from pydantic import BaseModel

from dlmm_bot.storage.base import StoreBackend
from dlmm_bot.storage.exceptions import PersistenceError, StorageInitError
from dlmm_bot.storage.json_storage import JSONBackend

logger = logging.getLogger(__name__)


class WritePolicy(str, Enum):
    """How writes are distributed between the two backends"""
    PREFERENCE = "preference"  # remote if available, else local
    MIRROR = "mirror"          # always local, plus remote if available


class StoreStatus(BaseModel):
    remote_configured: bool
    remote_available: bool
    remote_backend: Optional[str] = None

    @property
    def mode(self) -> str:
        if self.remote_available:
            return "remote"
        return "degraded" if self.remote_configured else "local"


def create_remote_backend(url: str) -> Optional[StoreBackend]:
    """Builds a remote backend from a connection string, None for unknown schemes."""
    scheme = urlparse(url).scheme.lower()
    if scheme in ("redis", "rediss", "unix"):
        from dlmm_bot.storage.redis_storage import RedisBackend
        return RedisBackend.from_url(url)
    if scheme == "dynamodb":
        from dlmm_bot.storage.dynamodb_storage import DynamoDBBackend
        parsed = urlparse(url)
        region = parse_qs(parsed.query).get("region", [None])[0]
        return DynamoDBBackend(table_name=parsed.netloc or "dlmm-bot", region=region)
    logger.error(f"Unsupported remote storage scheme '{scheme}'. Running in local-only mode.")
    return None


class KeyValueStore:
    def __init__(
        self,
        local: StoreBackend,
        remote_url: Optional[str] = None,
        remote: Optional[StoreBackend] = None,
        write_policy: WritePolicy = WritePolicy.PREFERENCE,
    ):
        """
        Args:
            local: Always-available backend (usually JSONBackend)
            remote_url: Connection string of the remote backend, None means local-only
            remote: Ready remote backend instance, takes precedence over remote_url
            write_policy: PREFERENCE (default) or MIRROR
        """
        self.local = local
        self.remote_url = remote_url
        self.write_policy = WritePolicy(write_policy)
        self._remote_candidate = remote
        self._remote: Optional[StoreBackend] = None
        self._initialized = False
        self._init_lock = asyncio.Lock()

    @classmethod
    def from_config(cls, config) -> "KeyValueStore":
        """Builds the store from utils.config.StorageConfig"""
        return cls(
            local=JSONBackend(config.data_dir),
            remote_url=config.remote_url,
            write_policy=config.write_policy,
        )

    @property
    def remote_configured(self) -> bool:
        return bool(self.remote_url) or self._remote_candidate is not None

    @property
    def remote_available(self) -> bool:
        return self._remote is not None

    async def initialize(self) -> None:
        """
        Idempotent. The local backend must come up, a local failure is fatal.
        The remote backend is tried once; its failure only switches to local-only mode.
        """
        if self._initialized:
            return
        async with self._init_lock:
            if self._initialized:
                return
            await self.local.connect()
            await self._connect_remote()
            self._initialized = True
            logger.info(f"Storage initialized in '{self.status().mode}' mode")

    async def _connect_remote(self) -> None:
        remote = self._remote_candidate
        if remote is None and self.remote_url:
            try:
                remote = create_remote_backend(self.remote_url)
            except Exception as e:
                logger.error(f"Could not create remote backend: {e}")
                remote = None
        if remote is None:
            return
        try:
            connected = await remote.connect()
        except Exception as e:
            logger.warning(f"Remote backend connection failed: {e}")
            connected = False
        if connected:
            self._remote = remote
        else:
            logger.warning("Remote backend unavailable, falling back to local storage")

    def status(self) -> StoreStatus:
        return StoreStatus(
            remote_configured=self.remote_configured,
            remote_available=self.remote_available,
            remote_backend=self._remote.name if self._remote else None,
        )

    async def get(self, collection: str, key) -> Optional[Any]:
        """Remote first; on failure read local. Never raises."""
        try:
            await self.initialize()
        except StorageInitError as e:
            logger.error(f"Storage unusable, cannot read {collection}/{key}: {e}")
            return None
        if self._remote is not None:
            try:
                return await self._remote.get(collection, str(key))
            except Exception as e:
                logger.warning(f"Remote get {collection}/{key} failed, using local storage: {e}")
        try:
            return await self.local.get(collection, str(key))
        except Exception as e:
            logger.error(f"Local get {collection}/{key} failed: {e}")
            return None

    async def items(self, collection: str) -> Dict[str, Any]:
        """Snapshot of a whole collection, same fallback rules as get()."""
        try:
            await self.initialize()
        except StorageInitError as e:
            logger.error(f"Storage unusable, cannot read {collection}: {e}")
            return {}
        if self._remote is not None:
            try:
                return await self._remote.items(collection)
            except Exception as e:
                logger.warning(f"Remote read of '{collection}' failed, using local storage: {e}")
        try:
            return await self.local.items(collection)
        except Exception as e:
            logger.error(f"Local read of '{collection}' failed: {e}")
            return {}

    async def set(self, collection: str, key, value: Any) -> bool:
        """
        Returns True if the value landed in the remote backend, False if only locally
        (degraded). Raises PersistenceError only if the local write itself fails.
        """
        await self.initialize()
        stored_remotely = False
        if self._remote is not None:
            try:
                await self._remote.set(collection, str(key), value)
                stored_remotely = True
            except Exception as e:
                logger.warning(f"Remote set {collection}/{key} failed, writing locally: {e}")

        if stored_remotely and self.write_policy == WritePolicy.PREFERENCE:
            return True

        try:
            await self.local.set(collection, str(key), value)
        except Exception as e:
            if stored_remotely:
                logger.warning(f"Local mirror write {collection}/{key} failed: {e}")
                return True
            logger.error(f"Local set {collection}/{key} failed: {e}")
            raise PersistenceError(f"Failed to persist {collection}/{key}") from e
        return stored_remotely

    async def delete(self, collection: str, key) -> None:
        """Best-effort, never raises."""
        try:
            await self.initialize()
        except StorageInitError as e:
            logger.error(f"Storage unusable, cannot delete {collection}/{key}: {e}")
            return
        if self._remote is not None:
            try:
                await self._remote.delete(collection, str(key))
                if self.write_policy == WritePolicy.PREFERENCE:
                    return
            except Exception as e:
                logger.warning(f"Remote delete {collection}/{key} failed, deleting locally: {e}")
        try:
            await self.local.delete(collection, str(key))
        except Exception as e:
            logger.error(f"Local delete {collection}/{key} failed: {e}")

    async def close(self) -> None:
        if self._remote is not None:
            try:
                await self._remote.close()
            except Exception as e:
                logger.warning(f"Error while closing remote backend: {e}")
        await self.local.close()
