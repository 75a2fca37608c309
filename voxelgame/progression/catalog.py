"""
Mission catalog - traits, resources and missions loaded at session start.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from voxelcore.resources.database import Database
from voxelgame.components.player import Rarity
from voxelgame.progression.missions import (
    ActionKind,
    Mission,
    Requirement,
    Reward,
    RewardKind,
)
from voxelgame.progression.store import ResourceDefinition, TraitDefinition

logger = logging.getLogger(__name__)

# Packaged default catalog (schemas/ and database/ folders)
DEFAULT_DATA_PATH = Path(__file__).resolve().parent.parent / "data"


@dataclass
class MissionCatalog:
    """The fixed catalogs a session is started with."""
    traits: list[TraitDefinition] = field(default_factory=list)
    resources: list[ResourceDefinition] = field(default_factory=list)
    missions: list[Mission] = field(default_factory=list)

    def get_mission(self, mission_id: str) -> Optional[Mission]:
        for mission in self.missions:
            if mission.id == mission_id:
                return mission
        return None

    def fresh_missions(self) -> list[Mission]:
        """Get unplayed copies of the mission templates."""
        return [copy.deepcopy(m) for m in self.missions]


def parse_trait(data: dict) -> TraitDefinition:
    """Parse a trait from JSON data."""
    return TraitDefinition(
        id=data['id'],
        name=data.get('name', data['id']),
        description=data.get('description', ''),
    )


def parse_resource(data: dict) -> ResourceDefinition:
    """Parse a resource from JSON data."""
    return ResourceDefinition(
        id=data['id'],
        name=data.get('name', data['id']),
        rarity=Rarity(data.get('rarity', 'common')),
    )


def parse_mission(data: dict) -> Mission:
    """Parse a mission from JSON data."""
    mission = Mission(
        id=data['id'],
        title=data.get('title', data['id']),
        description=data.get('description', ''),
    )

    for req_data in data.get('requirements', []):
        mission.requirements.append(Requirement(
            kind=ActionKind[req_data['kind'].upper()],
            target=req_data.get('target', 'any'),
            amount_needed=req_data.get('amount', 1),
        ))

    for reward_data in data.get('rewards', []):
        mission.rewards.append(Reward(
            kind=RewardKind[reward_data['kind'].upper()],
            payload=reward_data['value'],
        ))

    return mission


def build_catalog(database: Database) -> MissionCatalog:
    """
    Build a catalog from loaded database entries.

    Entries that fail to parse are logged and skipped.
    """
    catalog = MissionCatalog()

    for parse, source, target in (
        (parse_trait, database.traits, catalog.traits),
        (parse_resource, database.resources, catalog.resources),
        (parse_mission, database.missions, catalog.missions),
    ):
        for entry_id, entry in source.items():
            try:
                target.append(parse(entry))
            except (KeyError, ValueError) as e:
                logger.error(f"Skipping catalog entry '{entry_id}': {e}")

    return catalog


def load_catalog(data_path: Path | str | None = None) -> MissionCatalog:
    """
    Load a catalog from a data directory.

    Args:
        data_path: Directory holding schemas/ and database/; None loads
            the packaged default catalog
    """
    database = Database(data_path or DEFAULT_DATA_PATH)
    database.load_all()
    catalog = build_catalog(database)
    logger.info(
        f"Catalog ready: {len(catalog.missions)} missions, "
        f"{len(catalog.traits)} traits, {len(catalog.resources)} resources"
    )
    return catalog
