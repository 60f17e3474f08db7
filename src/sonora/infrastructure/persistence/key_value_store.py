"""Key-value storage implementations of IKeyValueStorage."""

import logging

from sqlalchemy import delete, select

from sonora.domain.ports import IKeyValueStorage
from sonora.infrastructure.persistence.database import Database
from sonora.infrastructure.persistence.models import KeyValueModel

logger = logging.getLogger(__name__)


class SqlKeyValueStorage(IKeyValueStorage):
    """Durable key-value storage backed by a single SQL table."""

    def __init__(self, db: Database) -> None:
        self.db = db

    async def get_item(self, key: str) -> str | None:
        async with self.db.session_scope() as session:
            result = await session.execute(
                select(KeyValueModel.value).where(KeyValueModel.key == key)
            )
            return result.scalar_one_or_none()

    async def set_item(self, key: str, value: str) -> None:
        # merge() = upsert by primary key, committed in one transaction.
        async with self.db.session_scope() as session:
            await session.merge(KeyValueModel(key=key, value=value))

    async def remove_item(self, key: str) -> None:
        async with self.db.session_scope() as session:
            await session.execute(delete(KeyValueModel).where(KeyValueModel.key == key))


class InMemoryKeyValueStorage(IKeyValueStorage):
    """Process-local storage for tests and demo mode. Lost on restart!"""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> str | None:
        return self._data.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    async def remove_item(self, key: str) -> None:
        self._data.pop(key, None)


__all__ = ["InMemoryKeyValueStorage", "SqlKeyValueStorage"]
