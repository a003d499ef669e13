"""Storage errors that are allowed to reach callers"""


class PersistenceError(Exception):
    """Data could not be persisted to any backend."""


class StorageInitError(PersistenceError):
    """The local backend could not be initialized at startup."""
