"""
Progression session - lifecycle around one connected player.

A session is constructed explicitly and handed to the world simulation
(which feeds actions in) and to the presentation layer (which reads
accessors and listens on the event bus). ``start`` begins a player's
session, ``reset`` ends it.
"""

from __future__ import annotations

import logging
import threading
from enum import Enum, auto
from typing import Optional, Union

from voxelcore.core.config import ProgressionConfig
from voxelcore.core.events import EventBus
from voxelgame.components.player import PlayerSnapshot
from voxelgame.progression.catalog import MissionCatalog, load_catalog
from voxelgame.progression.missions import ActionKind, Mission, MissionEngine
from voxelgame.progression.store import ProgressionStore
from voxelgame.save.manager import SaveManager

logger = logging.getLogger(__name__)


class SessionEvent(Enum):
    """Session lifecycle events."""
    SESSION_STARTED = auto()
    SESSION_RESET = auto()


class ProgressionSession:
    """
    Owns the store and mission engine of the connected player.

    Action ingestion and every accessor run under one re-entrant lock,
    so a record_action together with any completion it triggers is
    atomic, and readers on other threads never observe it half-applied.

    Usage:
        session = ProgressionSession(event_bus=bus, save_manager=saves)
        session.resume("player-public-key")
        session.track_block_place("STONE")
        session.get_completion_stats()
        session.reset()
    """

    def __init__(
        self,
        config: Optional[ProgressionConfig] = None,
        event_bus: Optional[EventBus] = None,
        save_manager: Optional[SaveManager] = None,
        catalog: Optional[MissionCatalog] = None,
    ):
        self.config = config or ProgressionConfig()
        self.event_bus = event_bus or EventBus()
        self.save_manager = save_manager
        self.catalog = catalog or load_catalog(self.config.data_path)

        self._store: Optional[ProgressionStore] = None
        self._engine: Optional[MissionEngine] = None
        self._lock = threading.RLock()

    @classmethod
    def from_config(
        cls,
        config: ProgressionConfig,
        event_bus: Optional[EventBus] = None,
    ) -> ProgressionSession:
        """
        Create a session that persists to JSON files.

        Saves go to config.save_path and are tagged with config.game_id;
        save outcomes are published on the session's event bus.
        """
        event_bus = event_bus or EventBus()
        return cls(
            config=config,
            event_bus=event_bus,
            save_manager=SaveManager.from_config(config, event_bus=event_bus),
        )

    # Lifecycle

    def start(self, identity: str, snapshot: Optional[PlayerSnapshot] = None) -> None:
        """
        Start a session for an identity.

        Args:
            identity: Stable player key from the identity provider
            snapshot: Previously saved progression to restore
        """
        with self._lock:
            if self._store is not None:
                logger.info(f"Replacing active session of {self._store.identity}")
                self._clear()

            store = ProgressionStore(
                identity,
                traits=self.catalog.traits,
                resources=self.catalog.resources,
                xp_per_level=self.config.xp_per_level,
            )
            engine = MissionEngine(
                store,
                self.catalog.fresh_missions(),
                event_bus=self.event_bus,
                save_manager=self.save_manager,
                config=self.config,
            )

            if snapshot is not None:
                store.restore(snapshot)
                engine.restore_completed(snapshot.completed_mission_ids)

            self._store = store
            self._engine = engine

        logger.info(f"Progression session started for {identity}")
        self.event_bus.publish(
            SessionEvent.SESSION_STARTED,
            identity=identity,
            restored=snapshot is not None,
        )

    def resume(self, identity: str) -> bool:
        """
        Load saved progression through the save manager and start.

        Returns:
            True if saved progression was found and restored
        """
        snapshot = self.save_manager.load(identity) if self.save_manager else None
        self.start(identity, snapshot)
        return snapshot is not None

    def reset(self) -> None:
        """End the session and drop all progression state."""
        with self._lock:
            if self._store is None:
                return
            identity = self._store.identity
            self._clear()

        logger.info(f"Progression session reset for {identity}")
        self.event_bus.publish(SessionEvent.SESSION_RESET, identity=identity)

    def _clear(self) -> None:
        self._store = None
        self._engine = None

    @property
    def is_active(self) -> bool:
        with self._lock:
            return self._store is not None

    @property
    def identity(self) -> Optional[str]:
        with self._lock:
            return self._store.identity if self._store else None

    @property
    def store(self) -> Optional[ProgressionStore]:
        """Live store. Hold session.lock while reading it from another thread."""
        with self._lock:
            return self._store

    @property
    def engine(self) -> Optional[MissionEngine]:
        """Live engine. Hold session.lock while reading it from another thread."""
        with self._lock:
            return self._engine

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    # Action ingestion

    def record_action(self, kind: Union[ActionKind, str], subject_id: str) -> list[str]:
        """
        Record an in-world action. Ignored when no session is active.

        Returns:
            IDs of missions completed by this action
        """
        with self._lock:
            if self._engine is None:
                return []
            return self._engine.record_action(kind, subject_id)

    def track_block_break(self, block_type: str) -> list[str]:
        return self.record_action(ActionKind.BLOCK_BREAK, block_type)

    def track_block_place(self, block_type: str) -> list[str]:
        return self.record_action(ActionKind.BLOCK_PLACE, block_type)

    def track_distance(self, subject_id: str = "any") -> list[str]:
        """Record one unit of distance traveled."""
        return self.record_action(ActionKind.DISTANCE_TRAVEL, subject_id)

    def track_item_collect(self, item_id: str) -> list[str]:
        return self.record_action(ActionKind.ITEM_COLLECT, item_id)

    def complete_mission(self, mission_id: str) -> bool:
        with self._lock:
            if self._engine is None:
                return False
            return self._engine.complete_mission(mission_id)

    # Read access

    def get_missions(self) -> list[Mission]:
        with self._lock:
            return self._engine.get_missions() if self._engine else []

    def get_active_missions(self) -> list[Mission]:
        with self._lock:
            return self._engine.get_active_missions() if self._engine else []

    def get_completed_missions(self) -> list[str]:
        with self._lock:
            return self._engine.get_completed_missions() if self._engine else []

    def are_all_completed(self) -> bool:
        with self._lock:
            return self._engine.are_all_completed() if self._engine else False

    def get_completion_stats(self) -> dict[str, int]:
        with self._lock:
            if self._engine is None:
                return {'completed': 0, 'total': 0, 'percentage': 0}
            return self._engine.get_completion_stats()

    def get_player_snapshot(self) -> Optional[PlayerSnapshot]:
        with self._lock:
            return self._store.snapshot() if self._store else None

    def get_action_count(self, kind: Union[ActionKind, str], subject_id: str) -> int:
        with self._lock:
            return self._engine.get_action_count(kind, subject_id) if self._engine else 0
