"""Cache – EntryStore: one file per storage location.

Every mutation holds an advisory lock scoped to the single location it
touches (``<root>/.locks/<location>.lock``), never a directory-wide lock.
Writes go to a temporary file in the same directory and are moved into
place with :func:`os.replace`, so a reader sees either the old or the new
complete file.  I/O problems are logged and reported as ``False``/``None``.
"""
from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path

from filelock import FileLock, Timeout

from chms_cache.cache.keys import ENTRY_PREFIX

logger = logging.getLogger(__name__)

LOCK_DIR = ".locks"
TEMP_PREFIX = ".tmp-"


class EntryStore:
    """Locked, atomic byte storage keyed by location name."""

    def __init__(self, root: str | os.PathLike[str], *, lock_timeout: float = 10.0) -> None:
        self._root = Path(root)
        self._lock_dir = self._root / LOCK_DIR
        self._lock_timeout = lock_timeout

    @property
    def root(self) -> Path:
        return self._root

    def path(self, location: str) -> Path:
        return self._root / location

    def _lock_path(self, location: str) -> Path:
        return self._lock_dir / f"{location}.lock"

    @contextmanager
    def lock(self, location: str) -> Iterator[Path]:
        """Hold the exclusive lock for *location*; yields its file path.

        Raises :class:`OSError` (``filelock.Timeout`` included) when the lock
        cannot be obtained.
        """
        self._lock_dir.mkdir(parents=True, exist_ok=True)
        with FileLock(str(self._lock_path(location)), timeout=self._lock_timeout):
            yield self.path(location)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def write(self, location: str, data: bytes, max_size: int | None = None) -> bool:
        """Atomically replace *location* with *data*.

        Data larger than *max_size* is rejected before anything is touched.
        """
        if max_size is not None and len(data) > max_size:
            logger.warning(
                "cache.entry_too_large location=%s size=%d max_size=%d", location, len(data), max_size
            )
            return False
        try:
            with self.lock(location) as path:
                self.replace_locked(path, data)
            return True
        except (OSError, Timeout) as exc:
            logger.error("cache.write_failed location=%s exc=%r", location, exc)
            return False

    def replace_locked(self, path: Path, data: bytes) -> None:
        """Write *data* over *path*; the caller must already hold its lock."""
        fd, tmp_name = tempfile.mkstemp(prefix=TEMP_PREFIX, dir=self._root)
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def delete(self, location: str) -> bool:
        """Remove *location*; absent is success.  ``False`` only on I/O failure."""
        try:
            with self.lock(location) as path:
                path.unlink(missing_ok=True)
            return True
        except (OSError, Timeout) as exc:
            logger.error("cache.delete_failed location=%s exc=%r", location, exc)
            return False

    def pop(self, location: str) -> bytes | None:
        """Read and remove *location* in one locked step."""
        try:
            with self.lock(location) as path:
                try:
                    data = path.read_bytes()
                except FileNotFoundError:
                    return None
                path.unlink(missing_ok=True)
                return data
        except (OSError, Timeout) as exc:
            logger.error("cache.pop_failed location=%s exc=%r", location, exc)
            return None

    def remove_if(self, location: str, predicate: Callable[[bytes], bool]) -> bool:
        """Remove *location* only if ``predicate(current_bytes)`` holds.

        The bytes are re-read under the lock, so a decision made on an older
        read never deletes a value written since.  Returns ``True`` iff a
        file was removed.
        """
        try:
            with self.lock(location) as path:
                try:
                    data = path.read_bytes()
                except FileNotFoundError:
                    return False
                if not predicate(data):
                    return False
                path.unlink(missing_ok=True)
                return True
        except (OSError, Timeout) as exc:
            logger.error("cache.remove_failed location=%s exc=%r", location, exc)
            return False

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def read(self, location: str) -> bytes | None:
        try:
            return self.path(location).read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.error("cache.read_failed location=%s exc=%r", location, exc)
            return None

    def exists(self, location: str) -> bool:
        return self.path(location).is_file()

    def stat(self, location: str) -> os.stat_result | None:
        try:
            return self.path(location).stat()
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.error("cache.stat_failed location=%s exc=%r", location, exc)
            return None

    def size(self, location: str) -> int | None:
        st = self.stat(location)
        return None if st is None else st.st_size

    def list_all(self, prefix: str = ENTRY_PREFIX) -> Iterator[str]:
        """Yield stored location names starting with *prefix*.

        Lazy and best-effort: files created or removed while iterating may or
        may not appear.  Call again to restart.
        """
        try:
            with os.scandir(self._root) as it:
                for item in it:
                    if item.name.startswith(prefix) and item.is_file(follow_symlinks=False):
                        yield item.name
        except FileNotFoundError:
            return
        except OSError as exc:
            logger.error("cache.list_failed root=%s exc=%r", self._root, exc)


__all__ = ["LOCK_DIR", "TEMP_PREFIX", "EntryStore"]
