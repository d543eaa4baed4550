"""Keeps the likes file's keys in step with the character roster.

Every character with an id gets a counter (seeded at 0 when absent) and
counters for ids no longer in the roster are dropped. Characters without an
id and duplicate ids are reported, never repaired. The likes file is written
at most once per pass, under its file lock.

Runs once at startup and again on demand. It never raises: a failed pass is
logged and reported as False so startup can continue.
"""

import logging

from succubus_realm.models import ReconcileReport

from .characters import CharacterDataError, CharactersRepository, has_id
from .likes import LikesRepository

logger = logging.getLogger(__name__)


class IntegrityReconciler:
    def __init__(self, characters: CharactersRepository, likes: LikesRepository) -> None:
        self._characters = characters
        self._likes = likes
        self.last_report: ReconcileReport | None = None

    async def reconcile(self) -> bool:
        report = ReconcileReport()
        self.last_report = report
        try:
            ok = await self._reconcile(report)
        except CharacterDataError as e:
            # An unreadable roster must not be mistaken for an empty one.
            logger.error("Integrity check skipped, likes left untouched: %s", e)
            report.issues.append(str(e))
            return False
        except Exception:
            logger.exception("Integrity check failed")
            return False
        for issue in report.issues:
            logger.warning("Integrity issue: %s", issue)
        return ok

    async def _reconcile(self, report: ReconcileReport) -> bool:
        characters = (await self._characters.load())["succubi"]
        async with self._likes.locked():
            document = await self._likes.read()
            likes = document["likes"]

            valid_ids: set[str] = set()
            for character in characters:
                if not has_id(character):
                    report.issues.append(f"Character {character.get('name')!r} has no id")
                    continue
                key = str(character["id"])
                if key in valid_ids:
                    report.issues.append(f"Duplicate character id {key}")
                valid_ids.add(key)
                if key not in likes:
                    likes[key] = 0
                    report.seeded.append(key)

            for key in list(likes):
                if key not in valid_ids:
                    del likes[key]
                    report.removed.append(key)
                    report.issues.append(f"Removed likes for unknown character id {key}")

            if not report.changed:
                logger.info("Integrity check passed, no changes")
                return True
            if not await self._likes.write(document, lock_held=True):
                logger.error("Integrity check could not save repaired likes data")
                return False
            report.written = True
        logger.info(
            "Integrity check repaired likes data: %d seeded, %d removed",
            len(report.seeded), len(report.removed),
        )
        return True
