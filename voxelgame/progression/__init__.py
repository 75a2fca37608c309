"""
Progression module - experience, traits, resources, missions.

Provides:
- ProgressionStore: the player record and its mutation primitives
- MissionEngine: action matching, completion and rewards
- Catalog loading
"""

from voxelgame.progression.store import (
    ProgressionStore,
    TraitDefinition,
    ResourceDefinition,
    level_for_experience,
)
from voxelgame.progression.missions import (
    MissionEngine,
    Mission,
    Requirement,
    Reward,
    ActionKind,
    RewardKind,
    ProgressionEvent,
    parse_action_kind,
)
from voxelgame.progression.catalog import (
    MissionCatalog,
    load_catalog,
    build_catalog,
    DEFAULT_DATA_PATH,
)

__all__ = [
    # Store
    "ProgressionStore",
    "TraitDefinition",
    "ResourceDefinition",
    "level_for_experience",
    # Missions
    "MissionEngine",
    "Mission",
    "Requirement",
    "Reward",
    "ActionKind",
    "RewardKind",
    "ProgressionEvent",
    "parse_action_kind",
    # Catalog
    "MissionCatalog",
    "load_catalog",
    "build_catalog",
    "DEFAULT_DATA_PATH",
]
