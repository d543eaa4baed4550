"""Composition root: one shared JsonStore, the repositories on top of it, startup."""

import logging
from pathlib import Path

from succubus_realm.config import Settings, get_settings
from succubus_realm.storage import (
    CharactersRepository,
    IntegrityReconciler,
    JsonStore,
    LikesRepository,
)

logger = logging.getLogger(__name__)


class Realm:
    """Everything a request handler needs, built around a single JsonStore."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.store = JsonStore(backup_suffix=settings.backup_suffix)
        self.likes = LikesRepository(self.store, settings.likes_path)
        self.characters = CharactersRepository(self.store, settings.characters_path, self.likes)
        self.reconciler = IntegrityReconciler(self.characters, self.likes)

    async def file_status(self) -> dict[str, bool]:
        return {
            self.settings.likes_file: await self.store.exists(self.settings.likes_path),
            self.settings.characters_file: await self.store.exists(self.settings.characters_path),
        }

    async def startup(self) -> bool:
        """Create the likes file if needed, then reconcile it with the roster.

        Returns the reconciliation result; a failure is logged and the caller
        is expected to keep starting up.
        """
        status = await self.file_status()
        logger.info(
            "Data files in %s: %s",
            self.settings.data_dir,
            ", ".join(f"{name} {'present' if ok else 'missing'}" for name, ok in status.items()),
        )
        await self.likes.initialize_if_missing()
        ok = await self.reconciler.reconcile()
        if not ok:
            logger.error("Startup integrity check failed; serving data as-is")
        return ok


def create_realm(data_dir: Path | None = None, settings: Settings | None = None) -> Realm:
    settings = settings or get_settings()
    if data_dir is not None:
        settings = settings.model_copy(update={"data_dir": Path(data_dir)})
    return Realm(settings)
