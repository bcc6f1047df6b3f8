"""Local JSON file implementation of the URL mapping store."""

import asyncio
import json
import logging
import os
import tempfile
from dataclasses import replace
from typing import Callable, Optional, List, Dict
from datetime import datetime

from .base import MappingStoreBase
from .locks import ReadWriteLock
from .models import URLMapping
from ..errors import DuplicateKeyError, NotFoundError, StartupError, StorageError


class FileMappingStore(MappingStoreBase):
    """In-memory mapping set mirrored to a single JSON file.

    Reads are served from memory under a shared lock. Every mutation takes
    the exclusive lock, changes memory, rewrites the whole file and only
    then releases; a failed write rolls the in-memory change back. The file
    is replaced atomically (temp file in the same directory, then rename).
    """

    def __init__(
        self,
        db_config: str,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize file store.

        Args:
            db_config: Path of the JSON snapshot file
            logger: Optional logger instance
        """
        super().__init__(db_config)

        self.logger = logger or logging.getLogger(__name__)
        self.path = os.path.abspath(db_config)

        # short_code -> mapping, in insertion order
        self._mappings: Dict[str, URLMapping] = {}
        self._lock = ReadWriteLock()

    async def connect(self) -> None:
        """Load the snapshot file; a missing file means an empty store.

        Raises:
            StartupError: If the file exists but cannot be read or parsed
        """
        try:
            mappings = await asyncio.to_thread(self._read_snapshot)
        except (OSError, ValueError, KeyError, TypeError) as e:
            self.logger.error(f"Failed to load URL mappings from {self.path}: {e}")
            raise StartupError(f"Failed to load URL mappings from {self.path}: {e}") from e

        async with self._lock.write():
            self._mappings = {m.short_code: m for m in mappings}

        self.logger.info(f"Loaded {len(self._mappings)} URL mappings from {self.path}")

    def _read_snapshot(self) -> List[URLMapping]:
        if not os.path.exists(self.path):
            return []
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return [URLMapping.from_document(doc) for doc in data.get("urls", [])]

    def _write_snapshot(self, payload: dict) -> None:
        directory = os.path.dirname(self.path)
        os.makedirs(directory, exist_ok=True)

        with tempfile.NamedTemporaryFile(
            mode="w",
            dir=directory,
            prefix=".urls-",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        ) as tmp_file:
            tmp_path = tmp_file.name
            try:
                json.dump(payload, tmp_file, indent=2)
                tmp_file.flush()
                os.fsync(tmp_file.fileno())
            except BaseException:
                tmp_file.close()
                os.unlink(tmp_path)
                raise

        try:
            os.replace(tmp_path, self.path)
        except OSError:
            os.unlink(tmp_path)
            raise

    async def _persist(self, undo: Callable[[], None]) -> None:
        """Write the current in-memory set to disk, calling ``undo`` if it fails.

        Caller holds the write lock. The worker thread cannot be interrupted,
        so a cancelled caller keeps waiting (and keeps the lock) until the
        write has finished; memory is rolled back only if the write failed,
        then the cancellation propagates.
        """
        payload = {"urls": [m.to_dict() for m in self._mappings.values()]}
        write = asyncio.ensure_future(asyncio.to_thread(self._write_snapshot, payload))

        # asyncio.wait leaves ``write`` running when this task is cancelled
        cancelled = False
        while not write.done():
            try:
                await asyncio.wait([write])
            except asyncio.CancelledError:
                cancelled = True

        error = asyncio.CancelledError() if write.cancelled() else write.exception()
        if error is not None:
            undo()

        if cancelled:
            raise asyncio.CancelledError()
        if isinstance(error, OSError):
            self.logger.error(f"Error writing URL mappings to {self.path}: {error}")
            raise StorageError(f"Failed to save URL mappings: {error}") from error
        if error is not None:
            raise error

    async def insert(self, mapping: URLMapping) -> None:
        """Add a mapping and persist the snapshot.

        Raises:
            DuplicateKeyError: If the short code is already taken
        """
        async with self._lock.write():
            if mapping.short_code in self._mappings:
                raise DuplicateKeyError(f"Short code already exists: {mapping.short_code}")

            self._mappings[mapping.short_code] = mapping
            await self._persist(undo=lambda: self._mappings.pop(mapping.short_code))

        self.logger.debug(f"Inserted short code {mapping.short_code}")

    async def find_by_code(self, short_code: str) -> URLMapping:
        """Get the mapping for a short code."""
        async with self._lock.read():
            mapping = self._mappings.get(short_code)
        if mapping is None:
            raise NotFoundError(f"Short code '{short_code}' not found")
        return mapping

    async def find_by_long_url(self, long_url: str) -> URLMapping:
        """Get the first-inserted mapping targeting ``long_url``."""
        async with self._lock.read():
            mapping = next(
                (m for m in self._mappings.values() if m.long_url == long_url),
                None,
            )
        if mapping is None:
            raise NotFoundError(f"Long URL '{long_url}' not found")
        return mapping

    def _get_existing(self, short_code: str) -> URLMapping:
        mapping = self._mappings.get(short_code)
        if mapping is None:
            raise NotFoundError(f"Short code '{short_code}' not found")
        return mapping

    async def _replace(self, previous: URLMapping, mapping: URLMapping) -> None:
        """Swap ``previous`` for ``mapping`` and persist, restoring on failure.

        Caller holds the write lock.
        """
        def restore():
            self._mappings[previous.short_code] = previous

        self._mappings[mapping.short_code] = mapping
        await self._persist(undo=restore)

    async def update(self, mapping: URLMapping) -> None:
        """Replace visit fields of an existing mapping.

        Raises:
            NotFoundError: If the short code is unknown
        """
        async with self._lock.write():
            previous = self._get_existing(mapping.short_code)
            await self._replace(
                previous,
                replace(
                    previous,
                    visit_count=mapping.visit_count,
                    last_visited_at=mapping.last_visited_at,
                ),
            )

    async def record_visit(self, short_code: str, visited_at: datetime) -> URLMapping:
        """Count one visit; read, increment and write under one exclusive lock."""
        async with self._lock.write():
            previous = self._get_existing(short_code)
            visited = previous.with_visit(visited_at)
            await self._replace(previous, visited)
        return visited

    async def list_all(self) -> List[URLMapping]:
        """List every mapping in insertion order."""
        async with self._lock.read():
            return list(self._mappings.values())

    async def health_check(self) -> bool:
        """Check the nearest existing parent of the snapshot file is writable.

        Returns:
            True if healthy, False otherwise
        """
        directory = os.path.dirname(self.path)
        while not os.path.isdir(directory):
            parent = os.path.dirname(directory)
            if parent == directory:
                return False
            directory = parent
        return os.access(directory, os.W_OK)

    async def close(self) -> None:
        """Nothing to release; every mutation is already on disk."""
        self.logger.debug(f"Closed file store {self.path}")
