"""Base Storage Backend Interface"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class StoreBackend(ABC):
    """
    Key-value backend, partitioned into named collections.

    Keys are always stored as strings, so an integer user id and its
    string form address the same record.
    """

    name: str = "backend"

    @abstractmethod
    async def connect(self) -> bool:
        """Prepare the backend. Returns False if it is unavailable."""
        pass

    @abstractmethod
    async def get(self, collection: str, key: str) -> Optional[Any]:
        """Get value by key, None if absent"""
        pass

    @abstractmethod
    async def set(self, collection: str, key: str, value: Any) -> None:
        """Create or overwrite value"""
        pass

    @abstractmethod
    async def delete(self, collection: str, key: str) -> None:
        """Delete value by key (no error if absent)"""
        pass

    @abstractmethod
    async def items(self, collection: str) -> Dict[str, Any]:
        """All key/value pairs of a collection"""
        pass

    async def close(self) -> None:
        """Release connections"""
        return None
