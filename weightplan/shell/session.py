"""Plan Session - The single owner of the in-memory snapshot.

Every edit goes through PlanSession.apply: a pure transition from
core.state produces the next snapshot, the session swaps it in and
schedules a best-effort flush to the store on a background worker.
Flushes are never retried; the next successful one carries any lost write.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import date
from typing import Any, Callable

from pydantic import ValidationError

from ..core.models import Snapshot
from ..core.state import initial_snapshot, rederive_budget
from .store import SnapshotFirestoreStore


logger = logging.getLogger(__name__)

Transition = Callable[..., Snapshot]


class PlanSession:
    """In-memory state plus asynchronous persistence.

    Snapshots are replaced, never mutated, so a flush running on the
    worker thread always writes a consistent state.
    """

    def __init__(
        self,
        store: SnapshotFirestoreStore,
        executor: ThreadPoolExecutor | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            store: Snapshot store used for load, flush and reset
            executor: Worker for flushes (defaults to a single thread)
        """
        self._store = store
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="snapshot-flush"
        )
        self._snapshot: Snapshot | None = None
        self._pending: Future | None = None

    @property
    def snapshot(self) -> Snapshot:
        """Current state, loading it from the store on first access."""
        if self._snapshot is None:
            self.load()
        return self._snapshot

    def load(self) -> Snapshot:
        """Load the stored snapshot, falling back to the initial state.

        A stored snapshot gets its budget re-derived so it respects the
        gender floor.
        """
        stored = self._store.load()
        if stored is None:
            logger.info("No stored snapshot, starting from defaults")
            stored = initial_snapshot()
        else:
            stored = rederive_budget(stored)
        self._snapshot = stored
        return stored

    def apply(self, transition: Transition, *args: Any, **kwargs: Any) -> Snapshot:
        """Run a transition against the current snapshot and persist the result.

        Exceptions raised by the transition propagate and leave the state
        unchanged.

        Args:
            transition: Pure function (snapshot, *args, **kwargs) -> snapshot
            *args: Positional arguments for the transition
            **kwargs: Keyword arguments for the transition

        Returns:
            The new snapshot
        """
        updated = transition(self.snapshot, *args, **kwargs)
        if updated is not self._snapshot:
            self._snapshot = updated
            self._schedule(self._flush, updated)
        return updated

    def reset(self) -> Snapshot:
        """Wipe all data: clear the store and start over from defaults."""
        logger.info("Resetting all data")
        self._snapshot = initial_snapshot()
        self._schedule(self._store.clear)
        return self._snapshot

    def export_document(self, today: date | None = None) -> tuple[str, str]:
        """Serialize the full snapshot for download.

        Returns:
            Tuple of (filename, JSON text)
        """
        if today is None:
            today = date.today()
        filename = f"weightplan-{today.isoformat()}.json"
        return filename, self.snapshot.model_dump_json(by_alias=True, indent=2)

    def import_document(self, document: str | bytes) -> bool:
        """Replace the whole snapshot with an imported document.

        Documents that do not parse or do not match the snapshot shape are
        rejected and the current state is kept. The budget of an accepted
        document is re-derived from its profile.

        Returns:
            True if the document was imported
        """
        try:
            imported = Snapshot.model_validate_json(document)
        except ValidationError as e:
            logger.warning("Rejected import: %d validation errors", e.error_count())
            return False

        imported = rederive_budget(imported)
        logger.info("Imported snapshot with %d daily logs", len(imported.daily_logs))
        self._snapshot = imported
        self._schedule(self._flush, imported)
        return True

    def wait_for_flush(self, timeout: float | None = None) -> None:
        """Block until the most recently scheduled store operation finished."""
        if self._pending is not None:
            self._pending.exception(timeout=timeout)

    def close(self) -> None:
        self._executor.shutdown(wait=True)

    def _schedule(self, operation: Callable[..., Any], *args: Any) -> None:
        self._pending = self._executor.submit(operation, *args)
        self._pending.add_done_callback(_log_failure)

    def _flush(self, snapshot: Snapshot) -> None:
        if not self._store.save(snapshot):
            logger.warning("Snapshot flush dropped; the next change will persist it")


def _log_failure(future: Future) -> None:
    error = future.exception()
    if error is not None:
        logger.error("Store operation failed: %s", str(error))
