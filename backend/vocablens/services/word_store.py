"""Saved-word registry on top of a whole-value key-value store.

The collection is read and rewritten in full on every mutation. Mutations are
not serialized against each other: two concurrent writers on the same storage
follow last-write-wins on the key.
"""

import json
import logging
import uuid
from datetime import datetime, timezone

from pydantic import TypeAdapter

from vocablens.errors import PersistenceError
from vocablens.schemas.saved_words import SavedWord, SaveResult, SaveStatus
from vocablens.schemas.vocabulary import Level
from vocablens.storage import KeyValueStorage

logger = logging.getLogger(__name__)

STORAGE_KEY = "@saved_words"
SCHEMA_VERSION_KEY = "@saved_words:schema_version"
SCHEMA_VERSION = 1

_words_adapter = TypeAdapter(list[SavedWord])


class WordStore:
    def __init__(self, storage: KeyValueStorage):
        self.storage = storage

    async def _load(self) -> list[SavedWord]:
        data = await self.storage.get_item(STORAGE_KEY)
        if not data:
            return []
        version = await self.storage.get_item(SCHEMA_VERSION_KEY)
        if version is not None and int(version) > SCHEMA_VERSION:
            raise ValueError(f"Unsupported saved-words schema version {version}")
        return _words_adapter.validate_json(data)

    async def _write(self, words: list[SavedWord]) -> None:
        payload = json.dumps(
            [w.model_dump(mode="json", by_alias=True) for w in words]
        )
        try:
            # Version key first; if the data write fails the old collection stays in place.
            await self.storage.set_items(
                {SCHEMA_VERSION_KEY: str(SCHEMA_VERSION), STORAGE_KEY: payload}
            )
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(f"Could not write saved words: {e}") from e

    async def _load_for_update(self) -> list[SavedWord]:
        """Load before a mutation. An unreadable collection raises instead of being overwritten."""
        try:
            return await self._load()
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(f"Could not read saved words before writing: {e}") from e

    async def list_words(self) -> list[SavedWord]:
        """Return saved words, most recently saved first. Read failures yield []."""
        try:
            return await self._load()
        except Exception:
            logger.exception("Error reading saved words")
            return []

    async def save(self, word: str, level: Level | str, sentence: str) -> SaveResult:
        words = await self._load_for_update()
        key = word.lower()
        for existing in words:
            if existing.word.lower() == key:
                return SaveResult(status=SaveStatus.ALREADY_SAVED, word=existing)

        new_word = SavedWord(
            id=str(uuid.uuid4()),
            word=word,
            level=Level(level),
            sentence=sentence,
            saved_at=datetime.now(timezone.utc),
        )
        await self._write([new_word, *words])
        logger.info("Saved word %r", word)
        return SaveResult(status=SaveStatus.SAVED, word=new_word)

    async def remove(self, word_id: str) -> None:
        words = await self._load_for_update()
        await self._write([w for w in words if w.id != word_id])

    async def exists(self, word: str) -> bool:
        try:
            words = await self._load()
        except Exception:
            logger.exception("Error checking if word is saved")
            return False
        key = word.lower()
        return any(w.word.lower() == key for w in words)
