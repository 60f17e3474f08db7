"""Persistence layer."""

from sonora.infrastructure.persistence.database import Database
from sonora.infrastructure.persistence.key_value_store import (
    InMemoryKeyValueStorage,
    SqlKeyValueStorage,
)

__all__ = ["Database", "InMemoryKeyValueStorage", "SqlKeyValueStorage"]
