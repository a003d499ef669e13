"""
Локальное хранилище на JSON-файлах.
Всегда доступно: используется как основное, если Redis/DynamoDB не настроены,
и как запасное, если удаленный backend недоступен.
"""
import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from dlmm_bot.storage.base import StoreBackend
from dlmm_bot.storage.exceptions import StorageInitError

logger = logging.getLogger(__name__)

COLLECTION_NAME_RE = re.compile(r'^[A-Za-z0-9_-]+$')


class JSONBackend(StoreBackend):
    """
    One file per collection: <data_dir>/<collection>.json -> {key: value}
    """

    name = "local"

    def __init__(self, data_dir: str = "./data"):
        self.data_dir = Path(data_dir)
        self._initialized = False

    async def connect(self) -> bool:
        """Создает папку для данных. Повторный вызов ничего не делает."""
        if self._initialized:
            return True
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageInitError(f"Cannot create data directory {self.data_dir}: {e}") from e
        if not os.access(self.data_dir, os.W_OK):
            raise StorageInitError(f"Data directory {self.data_dir} is not writable")
        self._initialized = True
        logger.info(f"Local storage ready at {self.data_dir.resolve()}")
        return True

    def _collection_path(self, collection: str) -> Path:
        if not COLLECTION_NAME_RE.match(collection):
            raise ValueError(f"Invalid collection name: {collection!r}")
        return self.data_dir / f"{collection}.json"

    def _read_data(self, collection: str) -> Dict[str, Any]:
        """Читает всю коллекцию из файла."""
        path = self._collection_path(collection)
        if not path.exists():
            return {}
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError:
            logger.error(f"Could not parse {path}. Treating collection '{collection}' as empty.")
            return {}
        if not isinstance(data, dict):
            logger.error(f"Unexpected content in {path}. Treating collection '{collection}' as empty.")
            return {}
        return data

    def _write_data(self, collection: str, data: Dict[str, Any]):
        """Атомарно записывает коллекцию: временный файл + os.replace."""
        path = self._collection_path(collection)
        fd, tmp_path = tempfile.mkstemp(dir=self.data_dir, prefix=f".{collection}.", suffix=".tmp")
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=4, default=str)
            os.replace(tmp_path, path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    async def get(self, collection: str, key: str) -> Optional[Any]:
        await self.connect()
        return self._read_data(collection).get(str(key))

    async def set(self, collection: str, key: str, value: Any) -> None:
        await self.connect()
        data = self._read_data(collection)
        data[str(key)] = value
        self._write_data(collection, data)
        logger.debug(f"Saved {collection}/{key} to local storage")

    async def delete(self, collection: str, key: str) -> None:
        await self.connect()
        data = self._read_data(collection)
        if str(key) not in data:
            return
        del data[str(key)]
        self._write_data(collection, data)
        logger.debug(f"Deleted {collection}/{key} from local storage")

    async def items(self, collection: str) -> Dict[str, Any]:
        await self.connect()
        return self._read_data(collection)
