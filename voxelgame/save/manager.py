"""
Save/Load system - player progression persistence.

Provides:
- Fire-and-forget saves on a single background worker thread
- Synchronous load at session start
- Failure logging and success/failure counters
- Event publishing for save/load outcomes

Saves never raise into the caller and are never retried; in-memory
progression stays the source of truth for the session.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from enum import Enum, auto
from typing import Optional

from voxelcore.core.config import ProgressionConfig
from voxelcore.core.events import EventBus
from voxelgame.components.player import PlayerSnapshot
from voxelgame.save.backends import JsonFileBackend, MemoryBackend, PersistenceBackend

logger = logging.getLogger(__name__)


class SaveResult(Enum):
    """Outcome of a save request."""
    SUCCESS = auto()
    FAILURE = auto()


class SaveEvent(Enum):
    """Save system events. Save outcomes are published on the worker thread."""
    SAVE_COMPLETED = auto()
    SAVE_FAILED = auto()
    LOAD_COMPLETED = auto()
    LOAD_FAILED = auto()


class SaveManager:
    """
    Manages saving and loading player snapshots.

    Saves are queued on one worker thread, so they reach the backend in
    request order. The snapshot handed over is a detached copy; the
    worker never touches live progression state.

    Usage:
        save_mgr = SaveManager(JsonFileBackend("saves"), event_bus=event_bus)
        future = save_mgr.request_save(identity, store.snapshot())
        ...
        save_mgr.flush()
        save_mgr.shutdown()
    """

    def __init__(
        self,
        backend: Optional[PersistenceBackend] = None,
        event_bus: Optional[EventBus] = None,
    ):
        self.backend = backend or MemoryBackend()
        self.event_bus = event_bus

        self._executor: Optional[ThreadPoolExecutor] = None
        self._pending: set[Future] = set()
        self._lock = threading.Lock()

        self._saves_succeeded = 0
        self._saves_failed = 0
        self._last_result: Optional[SaveResult] = None

    @classmethod
    def from_config(
        cls,
        config: ProgressionConfig,
        event_bus: Optional[EventBus] = None,
    ) -> SaveManager:
        """Create a manager writing JSON files under config.save_path."""
        return cls(JsonFileBackend.from_config(config), event_bus=event_bus)

    def load(self, identity: str) -> Optional[PlayerSnapshot]:
        """
        Load the saved snapshot of an identity.

        Returns:
            The snapshot, or None if there is none or loading failed
        """
        try:
            snapshot = self.backend.load(identity)
        except Exception as e:
            logger.exception(f"Failed to load player data for {identity}")
            self._publish(SaveEvent.LOAD_FAILED, identity=identity, error=str(e))
            return None

        if snapshot is not None:
            logger.info(f"Player data loaded for {identity}")
            self._publish(SaveEvent.LOAD_COMPLETED, identity=identity)
        return snapshot

    def request_save(self, identity: str, snapshot: PlayerSnapshot) -> Future:
        """
        Queue a save and return immediately.

        Returns:
            Future resolving to a SaveResult; it never raises
        """
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=1, thread_name_prefix="progression-save"
                )
            future = self._executor.submit(self._run_save, identity, snapshot)
            self._pending.add(future)

        future.add_done_callback(self._on_done)
        return future

    def save_now(self, identity: str, snapshot: PlayerSnapshot) -> SaveResult:
        """Save synchronously on the calling thread."""
        return self._run_save(identity, snapshot)

    def flush(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for queued saves to finish.

        Returns:
            True if nothing is pending anymore
        """
        with self._lock:
            pending = list(self._pending)
        if not pending:
            return True
        _, not_done = wait(pending, timeout=timeout)
        return not not_done

    def shutdown(self, wait_for_pending: bool = True) -> None:
        """Stop the worker thread."""
        with self._lock:
            executor = self._executor
            self._executor = None
        if executor is not None:
            executor.shutdown(wait=wait_for_pending)

    def _run_save(self, identity: str, snapshot: PlayerSnapshot) -> SaveResult:
        error = self._save(identity, snapshot)
        result = SaveResult.SUCCESS if error is None else SaveResult.FAILURE
        self._record(result)

        if error is None:
            self._publish(SaveEvent.SAVE_COMPLETED, identity=identity)
        else:
            self._publish(SaveEvent.SAVE_FAILED, identity=identity, error=error)
        return result

    def _save(self, identity: str, snapshot: PlayerSnapshot) -> Optional[str]:
        """Write a snapshot. Returns an error message on failure."""
        try:
            ok = self.backend.save(identity, snapshot)
        except Exception as e:
            logger.exception(f"Failed to save player data for {identity}")
            return str(e) or type(e).__name__

        if not ok:
            logger.error(f"Backend rejected save for {identity}")
            return "rejected by backend"

        logger.info(f"Player data saved for {identity}")
        return None

    def _publish(self, event_type: SaveEvent, **data) -> None:
        if self.event_bus:
            self.event_bus.publish(event_type, **data)

    def _on_done(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)

    def _record(self, result: SaveResult) -> None:
        with self._lock:
            if result == SaveResult.SUCCESS:
                self._saves_succeeded += 1
            else:
                self._saves_failed += 1
            self._last_result = result

    # Properties

    @property
    def saves_succeeded(self) -> int:
        return self._saves_succeeded

    @property
    def saves_failed(self) -> int:
        return self._saves_failed

    @property
    def last_result(self) -> Optional[SaveResult]:
        return self._last_result

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)
