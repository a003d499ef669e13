"""Общие фикстуры и фейковые backend'ы для тестов"""
from typing import Any, Dict, Optional

import pytest

from dlmm_bot.storage.base import StoreBackend
from dlmm_bot.storage.json_storage import JSONBackend
from dlmm_bot.storage.kv_store import KeyValueStore


class MemoryBackend(StoreBackend):
    """Remote backend stand-in, keeps data in a dict and counts calls"""

    name = "memory"

    def __init__(self, available: bool = True):
        self.available = available
        self.data: Dict[str, Dict[str, Any]] = {}
        self.connect_calls = 0
        self.closed = False

    async def connect(self) -> bool:
        self.connect_calls += 1
        return self.available

    async def get(self, collection: str, key: str) -> Optional[Any]:
        return self.data.get(collection, {}).get(key)

    async def set(self, collection: str, key: str, value: Any) -> None:
        self.data.setdefault(collection, {})[key] = value

    async def delete(self, collection: str, key: str) -> None:
        self.data.get(collection, {}).pop(key, None)

    async def items(self, collection: str) -> Dict[str, Any]:
        return dict(self.data.get(collection, {}))

    async def close(self) -> None:
        self.closed = True


class FailingBackend(MemoryBackend):
    """Connects fine, then every operation fails like a dropped network link"""

    name = "failing"

    def __init__(self):
        super().__init__(available=True)
        self.calls = 0

    async def get(self, collection, key):
        self.calls += 1
        raise ConnectionError("remote is down")

    async def set(self, collection, key, value):
        self.calls += 1
        raise ConnectionError("remote is down")

    async def delete(self, collection, key):
        self.calls += 1
        raise ConnectionError("remote is down")

    async def items(self, collection):
        self.calls += 1
        raise TimeoutError("remote timed out")


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "data"


@pytest.fixture
def local_backend(data_dir):
    return JSONBackend(str(data_dir))


@pytest.fixture
def local_store(local_backend):
    """KeyValueStore without remote backend (local-only mode)"""
    return KeyValueStore(local=local_backend)
