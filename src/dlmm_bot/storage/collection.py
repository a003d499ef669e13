"""Typed view over one collection of the KeyValueStore"""
import logging
from typing import Dict, Generic, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from dlmm_bot.storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class Collection(Generic[ModelT]):
    """
    Records of one pydantic model, keyed by user id.
    Values are validated on write and on read; unreadable records are skipped.
    """

    def __init__(self, store: KeyValueStore, name: str, model: Type[ModelT]):
        self.store = store
        self.name = name
        self.model = model

    def _parse(self, key: str, raw) -> Optional[ModelT]:
        try:
            return self.model.model_validate(raw)
        except ValidationError as e:
            logger.error(f"Skipping invalid record {self.name}/{key}: {e}")
            return None

    async def get(self, key: int) -> Optional[ModelT]:
        raw = await self.store.get(self.name, key)
        if raw is None:
            return None
        return self._parse(str(key), raw)

    async def put(self, key: int, record: ModelT) -> bool:
        if not isinstance(record, self.model):
            raise TypeError(f"Collection '{self.name}' stores {self.model.__name__}, got {type(record).__name__}")
        return await self.store.set(self.name, key, record.model_dump(mode="json"))

    async def delete(self, key: int) -> None:
        await self.store.delete(self.name, key)

    async def all(self) -> Dict[int, ModelT]:
        records: Dict[int, ModelT] = {}
        for key, raw in (await self.store.items(self.name)).items():
            try:
                user_id = int(key)
            except ValueError:
                logger.error(f"Skipping record with non-integer key {self.name}/{key}")
                continue
            record = self._parse(key, raw)
            if record is not None:
                records[user_id] = record
        return records
