"""Safe JSON file reads and writes with per-path locking and a one-generation backup.

One JsonStore is built at startup and shared by every repository. It owns the
lock table, so writers to the same file are serialised within the process
(first come, first served). Separate processes sharing a data directory are
not coordinated.

Writes go to a temp file in the target directory and are renamed over the
primary, after the previous primary has been copied to `<file><suffix>`.
"""

import asyncio
import contextlib
import errno
import json
import logging
import os
import shutil
import tempfile
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

_ERRNO_HINTS = {
    errno.ENOENT: "file or directory does not exist",
    errno.EACCES: "permission denied",
    errno.EMFILE: "too many open files",
    errno.ENOSPC: "no space left on device",
    errno.EISDIR: "expected a file but found a directory",
}


class StoreError(Exception):
    """Base class for data store errors."""


# Failures a read of an untrusted JSON file can raise. Deeply nested
# arrays or objects exhaust the decoder's recursion limit.
READ_ERRORS = (OSError, ValueError, RecursionError)


def describe_error(exc: BaseException) -> str:
    """One-line description of an I/O or parse failure, with errno name and hint."""
    if isinstance(exc, OSError) and exc.errno is not None:
        code = errno.errorcode.get(exc.errno, str(exc.errno))
        hint = _ERRNO_HINTS.get(exc.errno, "unrecognised filesystem error")
        return f"{code} ({hint}): {exc}"
    return f"{type(exc).__name__}: {exc}"


def _atomic_write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(text)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp_path)
        raise


class JsonStore:
    def __init__(self, backup_suffix: str = ".backup") -> None:
        self.backup_suffix = backup_suffix
        self._locks: dict[Path, asyncio.Lock] = {}

    # ------------------------------------------------------------------
    # Paths and locks
    # ------------------------------------------------------------------

    def backup_path(self, path: Path | str) -> Path:
        path = Path(path)
        return path.with_name(path.name + self.backup_suffix)

    def lock_for(self, path: Path | str) -> asyncio.Lock:
        """Return the lock guarding *path*, keyed by its absolute resolved form."""
        key = Path(path).resolve()
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        return lock

    @contextlib.asynccontextmanager
    async def locked(self, path: Path | str) -> AsyncIterator[None]:
        """Hold the path lock for a whole read-modify-write cycle.

        Inside the block, write with ``safe_write(path, doc, lock_held=True)``;
        the lock is not reentrant.
        """
        async with self.lock_for(path):
            yield

    async def exists(self, path: Path | str) -> bool:
        return await asyncio.to_thread(Path(path).is_file)

    # ------------------------------------------------------------------
    # Read / write
    # ------------------------------------------------------------------

    async def safe_read(self, path: Path | str, default: Any = None) -> Any:
        """Parse the JSON document at *path*.

        Any failure is logged. With a *default* the default is returned,
        otherwise the original exception propagates.
        """
        path = Path(path)
        try:
            text = await asyncio.to_thread(path.read_text, encoding="utf-8")
            return json.loads(text)
        except READ_ERRORS as e:
            logger.warning("Could not read %s: %s", path, describe_error(e))
            if default is None:
                raise
            logger.info("Using default data for %s", path)
            return default

    async def safe_write(self, path: Path | str, document: Any, *, lock_held: bool = False) -> bool:
        """Back up the current file, then write *document* as 2-space-indented JSON.

        Returns False (and logs) instead of raising when the write fails. A
        failed backup is logged but does not stop the write.
        """
        path = Path(path)
        if lock_held:
            assert self.lock_for(path).locked(), "safe_write(lock_held=True) outside locked()"
            return await self._write(path, document)
        async with self.locked(path):
            return await self._write(path, document)

    async def _write(self, path: Path, document: Any) -> bool:
        await self._backup(path)
        try:
            text = json.dumps(document, ensure_ascii=False, indent=2)
            await asyncio.to_thread(_atomic_write, path, text)
        except (OSError, TypeError, ValueError, RecursionError) as e:
            logger.error("Failed to write %s: %s", path, describe_error(e))
            return False
        logger.info("Wrote %s", path)
        return True

    async def _backup(self, path: Path) -> None:
        if not await self.exists(path):
            return
        backup = self.backup_path(path)
        try:
            await asyncio.to_thread(shutil.copyfile, path, backup)
        except OSError as e:
            logger.warning("Backup of %s failed, writing anyway: %s", path, describe_error(e))

    async def restore_backup(self, path: Path | str, *, lock_held: bool = False) -> bool:
        """Copy the backup generation back over the primary file.

        The backup itself is left in place. Returns False when there is no
        backup or the copy fails.
        """
        path = Path(path)
        if lock_held:
            return await self._restore(path)
        async with self.locked(path):
            return await self._restore(path)

    async def _restore(self, path: Path) -> bool:
        backup = self.backup_path(path)
        try:
            text = await asyncio.to_thread(backup.read_text, encoding="utf-8")
            await asyncio.to_thread(_atomic_write, path, text)
        except OSError as e:
            logger.error("Could not restore %s from %s: %s", path, backup, describe_error(e))
            return False
        logger.info("Restored %s from %s", path, backup)
        return True
