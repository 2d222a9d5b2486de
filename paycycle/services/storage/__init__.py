"""
Storage Services Package

Provides the abstract read interface the refresh flow loads snapshots
through, plus an in-memory implementation.
"""

from paycycle.services.storage.interface import (
    ConnectionError,
    FinanceStorageInterface,
    NotFoundError,
    StorageError,
)
from paycycle.services.storage.memory import InMemoryFinanceStorage

__all__ = [
    # Interfaces
    "FinanceStorageInterface",
    # Exceptions
    "ConnectionError",
    "NotFoundError",
    "StorageError",
    # In-memory implementation
    "InMemoryFinanceStorage",
]
