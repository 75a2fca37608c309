"""
Mission system - action matching, progress, completion, rewards.
"""

from __future__ import annotations

import copy
import logging
import math
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Optional, Union

from voxelcore.core.config import ProgressionConfig
from voxelcore.core.events import EventBus
from voxelgame.progression.store import ProgressionStore

if TYPE_CHECKING:
    from voxelgame.save.manager import SaveManager

logger = logging.getLogger(__name__)


class ActionKind(Enum):
    """In-world player actions the world simulation reports."""
    BLOCK_BREAK = auto()
    BLOCK_PLACE = auto()
    DISTANCE_TRAVEL = auto()
    ITEM_COLLECT = auto()


class RewardKind(Enum):
    """Kinds of mission reward."""
    XP = auto()
    TRAIT = auto()
    CURRENCY = auto()
    RESOURCE = auto()
    ACHIEVEMENT = auto()


# Rewards whose payload is an amount; the others name a catalog id
NUMERIC_REWARDS = frozenset({RewardKind.XP, RewardKind.CURRENCY})


class ProgressionEvent(Enum):
    """Progression events published on the event bus."""
    ACTION_RECORDED = auto()
    MISSION_PROGRESS = auto()
    MISSION_COMPLETED = auto()
    ALL_MISSIONS_COMPLETED = auto()
    LEVEL_UP = auto()
    REWARD_SKIPPED = auto()


def parse_action_kind(value: Union[ActionKind, str]) -> Optional[ActionKind]:
    """Resolve an ActionKind from a member or its name ("block_place")."""
    if isinstance(value, ActionKind):
        return value
    try:
        return ActionKind[str(value).upper()]
    except KeyError:
        return None


@dataclass
class Requirement:
    """A countable condition of a mission."""
    kind: ActionKind
    target: str
    amount_needed: int
    amount_current: int = 0

    def __post_init__(self):
        if self.amount_needed <= 0:
            raise ValueError(
                f"Requirement amount must be positive, got {self.amount_needed}"
            )

    @property
    def is_satisfied(self) -> bool:
        return self.amount_current >= self.amount_needed

    @property
    def overflow(self) -> int:
        """Counted actions beyond the amount needed."""
        return max(0, self.amount_current - self.amount_needed)

    def matches(self, kind: ActionKind, subject_id: str, any_target: str = "any") -> bool:
        """Check whether an action counts toward this requirement."""
        return self.kind == kind and (self.target == subject_id or self.target == any_target)

    def advance(self, clamp: bool = False) -> bool:
        """
        Count one matching action.

        Returns:
            False if the count was capped
        """
        if clamp and self.is_satisfied:
            return False
        self.amount_current += 1
        return True


@dataclass(frozen=True)
class Reward:
    """A single mission reward: an amount (xp, currency) or a catalog id."""
    kind: RewardKind
    payload: Union[str, int]

    def __post_init__(self):
        if self.kind in NUMERIC_REWARDS:
            if isinstance(self.payload, bool) or not isinstance(self.payload, int):
                raise ValueError(f"{self.kind.name} reward needs an integer, got {self.payload!r}")
        elif not isinstance(self.payload, str) or not self.payload:
            raise ValueError(f"{self.kind.name} reward needs an id, got {self.payload!r}")


@dataclass
class Mission:
    """A mission: requirements to satisfy and rewards paid once on completion."""
    id: str
    title: str
    description: str = ""

    requirements: list[Requirement] = field(default_factory=list)
    rewards: list[Reward] = field(default_factory=list)

    # State
    completed: bool = False
    progress: float = 0.0

    @property
    def total_needed(self) -> int:
        return sum(r.amount_needed for r in self.requirements)

    @property
    def total_current(self) -> int:
        return sum(r.amount_current for r in self.requirements)

    @property
    def overflow(self) -> int:
        """Counted actions beyond what individual requirements needed."""
        return sum(r.overflow for r in self.requirements)

    def compute_progress(self) -> float:
        """Aggregate progress over all requirements, clamped to [0, 1]."""
        needed = self.total_needed
        if needed <= 0:
            return 1.0 if self.completed else 0.0
        return max(0.0, min(1.0, self.total_current / needed))

    def get_reward_total(self, kind: RewardKind) -> int:
        """Sum of the numeric rewards of one kind."""
        return sum(r.payload for r in self.rewards if r.kind == kind and kind in NUMERIC_REWARDS)


class MissionEngine:
    """
    Turns action events into mission progress and pays out rewards.

    Missions are either active or completed; completion is one-way.
    Completion happens synchronously inside record_action, so by the time
    record_action returns, rewards are applied and events published.

    Usage:
        engine = MissionEngine(store, missions, event_bus=bus)
        engine.record_action(ActionKind.BLOCK_PLACE, "STONE")
        engine.get_completion_stats()  # {'completed': 1, 'total': 5, 'percentage': 20}
    """

    def __init__(
        self,
        store: ProgressionStore,
        missions: list[Mission],
        event_bus: Optional[EventBus] = None,
        save_manager: Optional[SaveManager] = None,
        config: Optional[ProgressionConfig] = None,
    ):
        self.store = store
        self.event_bus = event_bus
        self.save_manager = save_manager
        self.config = config or ProgressionConfig()

        # Owned copies, in catalog order
        self._missions: dict[str, Mission] = {}
        for mission in missions:
            if mission.id in self._missions:
                logger.warning(f"Duplicate mission id '{mission.id}', keeping the first")
                continue
            self._missions[mission.id] = copy.deepcopy(mission)

        # (kind, subject) -> raw action count for this session
        self._action_counts: dict[tuple[ActionKind, str], int] = {}

        self._all_completed_announced = self.are_all_completed()

    # Action ingestion

    def record_action(self, kind: Union[ActionKind, str], subject_id: str) -> list[str]:
        """
        Record one in-world action and update every active mission.

        Args:
            kind: Action kind (member or name)
            subject_id: What the action was applied to (block type, item id)

        Returns:
            IDs of missions completed by this action
        """
        action = parse_action_kind(kind)
        if action is None:
            logger.warning(f"Ignoring unknown action kind {kind!r}")
            return []

        key = (action, subject_id)
        self._action_counts[key] = self._action_counts.get(key, 0) + 1
        self._publish(ProgressionEvent.ACTION_RECORDED, kind=action, subject_id=subject_id)

        completed = []
        any_target = self.config.any_target
        clamp = self.config.clamp_requirements

        for mission in self._missions.values():
            if mission.completed:
                continue

            matched = False
            for requirement in mission.requirements:
                if requirement.matches(action, subject_id, any_target):
                    requirement.advance(clamp)
                    matched = True

            if not matched:
                continue

            mission.progress = max(mission.progress, mission.compute_progress())
            logger.debug(
                f"Mission progress: {mission.title} - "
                f"{mission.total_current}/{mission.total_needed}"
            )
            self._publish(
                ProgressionEvent.MISSION_PROGRESS,
                mission_id=mission.id,
                progress=mission.progress,
            )

            if mission.progress >= 1.0 and self.complete_mission(mission.id):
                completed.append(mission.id)

        return completed

    # Completion

    def complete_mission(self, mission_id: str) -> bool:
        """
        Complete a mission and apply its rewards.

        Returns:
            True if the mission transitioned to completed, False if it
            was unknown or already completed
        """
        mission = self._missions.get(mission_id)
        if mission is None:
            logger.warning(f"Cannot complete unknown mission '{mission_id}'")
            return False
        if mission.completed:
            logger.debug(f"Mission '{mission_id}' already completed")
            return False

        mission.completed = True
        mission.progress = 1.0
        self.store.mark_mission_completed(mission.id)

        for reward in mission.rewards:
            self._apply_reward(mission, reward)

        logger.info(
            f"Mission completed: {mission.title} - "
            f"XP gained: {mission.get_reward_total(RewardKind.XP)}"
        )
        self._publish(
            ProgressionEvent.MISSION_COMPLETED,
            mission_id=mission.id,
            title=mission.title,
            rewards=list(mission.rewards),
        )

        if not self._all_completed_announced and self.are_all_completed():
            self._all_completed_announced = True
            logger.info(f"All {len(self._missions)} missions completed")
            self._publish(
                ProgressionEvent.ALL_MISSIONS_COMPLETED,
                total_xp=self.store.experience,
                currency_balance=self.store.currency_balance,
                level=self.store.level,
                completed_mission_ids=self.store.completed_mission_ids,
            )

        if self.save_manager and self.config.save_on_completion:
            self.save_manager.request_save(self.store.identity, self.store.snapshot())

        return True

    def _apply_reward(self, mission: Mission, reward: Reward) -> bool:
        """Apply one reward through the store. Unknown ids are skipped."""
        store = self.store
        kind = reward.kind

        if kind == RewardKind.XP:
            level_before = store.level
            applied = store.add_experience(reward.payload)
            if store.level > level_before:
                self._publish(ProgressionEvent.LEVEL_UP, level=store.level, previous_level=level_before)
        elif kind == RewardKind.TRAIT:
            applied = store.grow_trait(reward.payload, 1)
        elif kind == RewardKind.CURRENCY:
            applied = store.add_currency(reward.payload)
        elif kind == RewardKind.RESOURCE:
            applied = store.grow_resource(reward.payload, 1)
        else:
            # Achievements are recorded, nothing numeric changes
            store.record_achievement(reward.payload)
            applied = True

        if not applied:
            logger.warning(f"Reward {kind.name}:{reward.payload} of '{mission.id}' skipped")
            self._publish(ProgressionEvent.REWARD_SKIPPED, mission_id=mission.id, reward=reward)

        return applied

    def restore_completed(self, mission_ids: list[str]) -> None:
        """
        Mark missions completed from saved state.

        No rewards are applied and no events are published.
        """
        for mission_id in mission_ids:
            mission = self._missions.get(mission_id)
            if mission is None:
                logger.warning(f"Saved mission '{mission_id}' is not in the catalog")
                continue
            mission.completed = True
            mission.progress = 1.0

        self._all_completed_announced = self.are_all_completed()

    # Read access

    def get_mission(self, mission_id: str) -> Optional[Mission]:
        """Get a copy of a mission."""
        mission = self._missions.get(mission_id)
        return copy.deepcopy(mission) if mission else None

    def get_missions(self) -> list[Mission]:
        """Get copies of all missions in catalog order."""
        return [copy.deepcopy(m) for m in self._missions.values()]

    def get_active_missions(self) -> list[Mission]:
        """Get copies of the missions not yet completed."""
        return [copy.deepcopy(m) for m in self._missions.values() if not m.completed]

    def get_completed_missions(self) -> list[str]:
        """Get completed mission IDs in catalog order."""
        return [m.id for m in self._missions.values() if m.completed]

    def is_mission_complete(self, mission_id: str) -> bool:
        mission = self._missions.get(mission_id)
        return bool(mission and mission.completed)

    def are_all_completed(self) -> bool:
        """True if the catalog is non-empty and every mission is completed."""
        return bool(self._missions) and all(m.completed for m in self._missions.values())

    def get_completion_stats(self) -> dict[str, int]:
        """Get completed/total counts and a rounded percentage."""
        total = len(self._missions)
        completed = sum(1 for m in self._missions.values() if m.completed)
        percentage = math.floor(completed / total * 100 + 0.5) if total else 0
        return {'completed': completed, 'total': total, 'percentage': percentage}

    def get_action_count(self, kind: Union[ActionKind, str], subject_id: str) -> int:
        """Get how many times an action was recorded this session."""
        action = parse_action_kind(kind)
        if action is None:
            return 0
        return self._action_counts.get((action, subject_id), 0)

    def _publish(self, event_type: ProgressionEvent, **data) -> None:
        if self.event_bus:
            self.event_bus.publish(event_type, **data)
