"""Read-only access to the character roster (``{"succubi": [...]}``)."""

import logging
from pathlib import Path
from typing import Any

from .json_store import READ_ERRORS, JsonStore, StoreError, describe_error
from .likes import LikesRepository

logger = logging.getLogger(__name__)


class CharacterDataError(StoreError):
    """The characters file is missing, unreadable or not a roster."""


def has_id(character: dict[str, Any]) -> bool:
    return bool(character.get("id"))


def _sort_id(character_id: Any) -> tuple[int, int, str]:
    # Integer ids sort numerically, anything else after them by text.
    if isinstance(character_id, int) and not isinstance(character_id, bool):
        return (0, character_id, "")
    return (1, 0, str(character_id))


def _coerce_id(character_id: Any) -> int | None:
    if not character_id or isinstance(character_id, bool):
        return None
    try:
        return int(character_id)
    except (TypeError, ValueError):
        return None


class CharactersRepository:
    def __init__(self, store: JsonStore, path: Path, likes: LikesRepository) -> None:
        self._store = store
        self._likes = likes
        self.path = Path(path)

    async def load(self) -> dict[str, Any]:
        """Read the roster, raising CharacterDataError if it cannot be used."""
        try:
            document = await self._store.safe_read(self.path)
        except READ_ERRORS as e:
            raise CharacterDataError(f"Cannot read {self.path}: {describe_error(e)}") from e
        if not isinstance(document, dict) or not isinstance(document.get("succubi"), list):
            raise CharacterDataError(f"{self.path} has no 'succubi' list")
        entries = document["succubi"]
        characters = [c for c in entries if isinstance(c, dict)]
        if len(characters) != len(entries):
            logger.warning("Skipped %d non-object entries in %s", len(entries) - len(characters), self.path)
            document["succubi"] = characters
        return document

    async def read_all(self) -> dict[str, Any]:
        """Read the roster; an unusable file reads as an empty roster."""
        try:
            return await self.load()
        except CharacterDataError as e:
            logger.error("Failed to load characters: %s", e)
            return {"succubi": []}

    async def get_by_id(self, character_id: Any) -> dict[str, Any] | None:
        """Find a character by numeric id. Falsy or non-numeric ids find nothing."""
        cid = _coerce_id(character_id)
        if cid is None:
            return None
        for character in (await self.read_all())["succubi"]:
            if character.get("id") == cid:
                return character
        logger.warning("Character %s not found", cid)
        return None

    async def get_all_ids(self) -> list[int]:
        return [c["id"] for c in (await self.read_all())["succubi"] if has_id(c)]

    async def get_with_like_count(self, character_id: Any) -> dict[str, Any] | None:
        character = await self.get_by_id(character_id)
        if character is None:
            return None
        return {**character, "likeCount": await self._likes.get_count(character["id"])}

    async def get_all_with_like_counts(self) -> list[dict[str, Any]]:
        """Every character with its `likeCount`. The likes file is read once."""
        characters = (await self.read_all())["succubi"]
        likes = (await self._likes.read())["likes"]
        return [{**c, "likeCount": likes.get(str(c.get("id")), 0)} for c in characters]

    async def get_ranking(self, limit: int | None = None) -> list[dict[str, Any]]:
        """Characters by popularity: most likes first, ties broken by id."""
        ranked = sorted(
            (c for c in await self.get_all_with_like_counts() if has_id(c)),
            key=lambda c: (-c["likeCount"], _sort_id(c["id"])),
        )
        return ranked if limit is None else ranked[:limit]
