"""Services package."""

from paycycle.services.storage import (
    ConnectionError,
    FinanceStorageInterface,
    InMemoryFinanceStorage,
    NotFoundError,
    StorageError,
)

__all__ = [
    "ConnectionError",
    "FinanceStorageInterface",
    "InMemoryFinanceStorage",
    "NotFoundError",
    "StorageError",
]
