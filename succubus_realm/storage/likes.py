"""Like counters stored as ``{"likes": {"<character id>": <count>}}``."""

import logging
from contextlib import AbstractAsyncContextManager
from pathlib import Path
from typing import Any

from succubus_realm.models import LikeStatistics, empty_likes, validate_likes

from .json_store import READ_ERRORS, JsonStore

logger = logging.getLogger(__name__)


def _is_id_key(key: str) -> bool:
    return key.isascii() and key.isdecimal() and key == str(int(key))


def like_statistics(likes: dict[int, int]) -> LikeStatistics:
    """Totals over a likes map; the average is rounded to two decimals (0 when empty)."""
    total = sum(likes.values())
    count = len(likes)
    average = round(total / count, 2) if count else 0
    return LikeStatistics(total_characters=count, total_likes=total, average_likes=average)


class LikesRepository:
    """Validated access to the likes file.

    Character ids are accepted as given: rejecting unknown or non-positive ids
    is the caller's job. Counters for ids with no entry read as zero.
    """

    def __init__(self, store: JsonStore, path: Path) -> None:
        self._store = store
        self.path = Path(path)

    def locked(self) -> AbstractAsyncContextManager[None]:
        """Hold the likes file lock; write with ``write(doc, lock_held=True)`` inside."""
        return self._store.locked(self.path)

    async def read(self) -> dict[str, Any]:
        """Load the likes document, or an empty one if it is missing or invalid.

        An invalid file is left on disk as-is until the next successful write.
        """
        document = await self._store.safe_read(self.path, default=empty_likes())
        result = validate_likes(document)
        if not result.valid:
            logger.warning("Likes file %s is invalid, using empty data: %s", self.path, result.error)
            return empty_likes()
        return document

    async def write(self, document: dict[str, Any], *, lock_held: bool = False) -> bool:
        result = validate_likes(document)
        if not result.valid:
            logger.error("Refusing to write invalid likes data: %s", result.error)
            return False
        return await self._store.safe_write(self.path, document, lock_held=lock_held)

    async def initialize_if_missing(self) -> bool:
        """Create an empty likes file if none exists. Returns True if one was written."""
        async with self.locked():
            if await self._store.exists(self.path):
                logger.info("Likes file already exists: %s", self.path)
                return False
            logger.info("Likes file missing, creating %s", self.path)
            return await self.write(empty_likes(), lock_held=True)

    async def increment(self, character_id: int | str) -> int | None:
        """Add one like and return the new total, or None if it could not be saved.

        The read-increment-write cycle holds the file lock, so concurrent
        increments in this process are never lost.
        """
        key = str(character_id)
        async with self.locked():
            document = await self.read()
            current = document["likes"].get(key, 0)
            document["likes"][key] = current + 1
            if not await self.write(document, lock_held=True):
                logger.error("Like for character %s was not saved", key)
                return None
        logger.info("Character %s likes: %d -> %d", key, current, current + 1)
        return current + 1

    async def get_count(self, character_id: int | str) -> int:
        document = await self.read()
        return document["likes"].get(str(character_id), 0)

    async def get_all(self) -> dict[int, int]:
        """All counters keyed by integer id.

        Only canonical decimal keys ("7", not "07", "+7", " 7" or "0_7") are
        kept, so a stray key can never shadow a real id.
        """
        document = await self.read()
        return {
            int(key): count
            for key, count in document["likes"].items()
            if _is_id_key(key)
        }

    async def restore_backup(self) -> bool:
        """Replace the likes file with its backup, if the backup holds valid likes data."""
        backup = self._store.backup_path(self.path)
        async with self.locked():
            try:
                document = await self._store.safe_read(backup)
            except READ_ERRORS:
                return False
            result = validate_likes(document)
            if not result.valid:
                logger.error("Backup %s is not valid likes data: %s", backup, result.error)
                return False
            return await self._store.restore_backup(self.path, lock_held=True)
