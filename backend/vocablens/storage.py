import abc

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from vocablens.errors import PersistenceError
from vocablens.models import KVItem


class KeyValueStorage(abc.ABC):
    """Whole-value string storage addressed by key. No partial updates."""

    @abc.abstractmethod
    async def get_item(self, key: str) -> str | None: ...

    @abc.abstractmethod
    async def set_item(self, key: str, value: str) -> None: ...

    async def set_items(self, items: dict[str, str]) -> None:
        """Write several keys in insertion order. Backends that can should do it atomically."""
        for key, value in items.items():
            await self.set_item(key, value)


class SQLKeyValueStorage(KeyValueStorage):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def get_item(self, key: str) -> str | None:
        async with self._session_factory() as db:
            result = await db.execute(select(KVItem.value).where(KVItem.key == key))
            return result.scalar_one_or_none()

    async def set_item(self, key: str, value: str) -> None:
        await self.set_items({key: value})

    async def set_items(self, items: dict[str, str]) -> None:
        try:
            async with self._session_factory() as db:
                for key, value in items.items():
                    item = await db.get(KVItem, key)
                    if item is None:
                        db.add(KVItem(key=key, value=value))
                    else:
                        item.value = value
                await db.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Could not write keys {list(items)}: {e}") from e
