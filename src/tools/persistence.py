"""
Durable storage for the ledger snapshot.

The store is a plain JSON file written atomically (temp file + rename).
Durability is best-effort: the in-memory ledger is the source of truth
and may run ahead of the file between saves.
"""

import asyncio
import logging
import os
import tempfile
from typing import Callable, Optional, Protocol

from pydantic import ValidationError as SchemaError

from src.exceptions import PersistenceError
from src.schemas.booking_schema import LedgerSnapshot

logger = logging.getLogger(__name__)


class LedgerStore(Protocol):
    def save(self, snapshot: LedgerSnapshot) -> None:
        ...

    def load(self) -> Optional[LedgerSnapshot]:
        ...


class JsonLedgerStore:
    """Ledger snapshot persisted as a single JSON document."""

    def __init__(self, path: str) -> None:
        self.path = path

    def save(self, snapshot: LedgerSnapshot) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".ledger-", suffix=".json")
        except OSError as e:
            raise PersistenceError(f"Could not save ledger to {self.path}: {e}") from e
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(snapshot.model_dump_json(indent=2))
            os.replace(tmp_path, self.path)
        except OSError as e:
            os.unlink(tmp_path)
            raise PersistenceError(f"Could not save ledger to {self.path}: {e}") from e
        logger.debug("Ledger saved to %s", self.path)

    def load(self) -> Optional[LedgerSnapshot]:
        """Return the stored snapshot, or None when nothing was saved yet."""
        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, encoding="utf-8") as fh:
                return LedgerSnapshot.model_validate_json(fh.read())
        except (OSError, SchemaError) as e:
            raise PersistenceError(f"Could not load ledger from {self.path}: {e}") from e


class PeriodicSaver:
    """
    Saves a snapshot every ``interval`` seconds on the event loop.

    A failed save is logged and simply retried on the next tick. ``stop``
    cancels the loop and performs one final save for shutdown.
    """

    def __init__(
        self,
        store: LedgerStore,
        snapshot_fn: Callable[[], LedgerSnapshot],
        interval: float,
        on_tick: Optional[Callable[[], None]] = None,
    ) -> None:
        self._store = store
        self._snapshot_fn = snapshot_fn
        self._interval = interval
        self._on_tick = on_tick
        self._task: Optional[asyncio.Task] = None

    def start(self) -> None:
        if self._task is None:
            self._task = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        self.save_now()

    def save_now(self) -> bool:
        try:
            self._store.save(self._snapshot_fn())
        except PersistenceError as e:
            logger.error("Periodic ledger save failed: %s", e)
            return False
        return True

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            if self._on_tick is not None:
                self._on_tick()
            self.save_now()
