"""
Progression store - experience, levels, currency, traits, resources.

The store is the single owner of the PlayerRecord. Every mutation goes
through one of its methods; none of them raise. Unknown catalog ids and
non-positive amounts are logged and reported as a ``False`` status so
reward application can continue with the next reward.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from voxelgame.components.player import (
    PlayerRecord,
    PlayerSnapshot,
    Rarity,
    ResourceStack,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TraitDefinition:
    """A catalog trait."""
    id: str
    name: str
    description: str = ""


@dataclass(frozen=True)
class ResourceDefinition:
    """A catalog resource."""
    id: str
    name: str
    rarity: Rarity = Rarity.COMMON


def level_for_experience(experience: int, xp_per_level: int = 100) -> int:
    """Level reached with a given amount of experience."""
    return experience // xp_per_level + 1


class ProgressionStore:
    """
    Holds the PlayerRecord and the fixed trait/resource catalogs.

    Usage:
        store = ProgressionStore("player-key", traits, resources)
        store.add_experience(150)   # level 2
        store.grow_trait("builder", 1)
        snapshot = store.snapshot()
    """

    def __init__(
        self,
        identity: str,
        traits: list[TraitDefinition] | tuple[TraitDefinition, ...] = (),
        resources: list[ResourceDefinition] | tuple[ResourceDefinition, ...] = (),
        xp_per_level: int = 100,
    ):
        self.xp_per_level = xp_per_level

        self._record = PlayerRecord(
            identity=identity,
            traits={t.id: 0 for t in traits},
            resources={
                r.id: ResourceStack(amount=0, rarity=r.rarity) for r in resources
            },
        )

    # Read access

    @property
    def identity(self) -> str:
        return self._record.identity

    @property
    def experience(self) -> int:
        return self._record.experience

    @property
    def level(self) -> int:
        return self._record.level

    @property
    def currency_balance(self) -> int:
        return self._record.currency_balance

    @property
    def completed_mission_ids(self) -> list[str]:
        return list(self._record.completed_mission_ids)

    def get_trait(self, trait_id: str) -> Optional[int]:
        """Get a trait value, None if the trait is not in the catalog."""
        return self._record.traits.get(trait_id)

    def get_resource(self, resource_id: str) -> Optional[ResourceStack]:
        """Get a copy of a resource stack, None if not in the catalog."""
        stack = self._record.resources.get(resource_id)
        return stack.clone() if stack else None

    def snapshot(self) -> PlayerSnapshot:
        """Get a detached, read-only copy of the player record."""
        return PlayerSnapshot.model_validate(self._record.model_dump())

    # Mutation

    def add_experience(self, amount: int) -> bool:
        """
        Add experience and raise the level if a threshold was crossed.

        Returns:
            False if the amount was not positive
        """
        if not self._check_amount("experience", amount):
            return False

        record = self._record
        record.experience += amount

        new_level = level_for_experience(record.experience, self.xp_per_level)
        if new_level > record.level:
            record.level = new_level
            logger.info(f"Level up! {record.identity} is now level {new_level}")

        return True

    def add_currency(self, amount: int) -> bool:
        """Add reward currency."""
        if not self._check_amount("currency", amount):
            return False

        self._record.currency_balance += amount
        logger.debug(f"Currency balance increased to {self._record.currency_balance}")
        return True

    def grow_trait(self, trait_id: str, amount: int = 1) -> bool:
        """
        Grow a catalog trait.

        Returns:
            False if the trait is unknown or the amount is not positive
        """
        if trait_id not in self._record.traits:
            logger.warning(f"Unknown trait '{trait_id}', ignoring growth of {amount}")
            return False
        if not self._check_amount(f"trait '{trait_id}'", amount):
            return False

        traits = self._record.traits
        traits[trait_id] = traits[trait_id] + amount
        logger.debug(f"Trait {trait_id} increased to {traits[trait_id]}")
        return True

    def grow_resource(self, resource_id: str, amount: int = 1) -> bool:
        """
        Grow a catalog resource. Rarity is unchanged.

        Returns:
            False if the resource is unknown or the amount is not positive
        """
        stack = self._record.resources.get(resource_id)
        if stack is None:
            logger.warning(f"Unknown resource '{resource_id}', ignoring growth of {amount}")
            return False
        if not self._check_amount(f"resource '{resource_id}'", amount):
            return False

        stack.amount += amount
        logger.debug(f"Resource {resource_id} increased to {stack.amount}")
        return True

    def record_achievement(self, achievement_id: str) -> bool:
        """Record an achievement. Returns False if it was already recorded."""
        if achievement_id in self._record.achievements:
            return False
        self._record.achievements.append(achievement_id)
        logger.info(f"Achievement unlocked: {achievement_id}")
        return True

    def mark_mission_completed(self, mission_id: str) -> bool:
        """Add a mission to the completed list. Returns False if already there."""
        if mission_id in self._record.completed_mission_ids:
            return False
        self._record.completed_mission_ids.append(mission_id)
        return True

    def restore(self, snapshot: PlayerSnapshot) -> None:
        """
        Restore progression from a saved snapshot.

        Only catalog traits and resources are restored; rarity always
        comes from the current catalog. Level is derived from the restored
        experience; a stored level that disagrees is replaced.
        """
        record = self._record
        record.experience = snapshot.experience
        record.level = level_for_experience(snapshot.experience, self.xp_per_level)
        if snapshot.level != record.level:
            logger.warning(
                f"Saved level {snapshot.level} does not match experience "
                f"{snapshot.experience}, using level {record.level}"
            )
        record.currency_balance = snapshot.currency_balance

        for trait_id, value in snapshot.traits.items():
            if trait_id in record.traits:
                record.traits[trait_id] = value
            else:
                logger.warning(f"Saved trait '{trait_id}' is not in the catalog, dropped")

        for resource_id, saved in snapshot.resources.items():
            stack = record.resources.get(resource_id)
            if stack is not None:
                stack.amount = saved.amount
            else:
                logger.warning(f"Saved resource '{resource_id}' is not in the catalog, dropped")

        record.completed_mission_ids = list(dict.fromkeys(snapshot.completed_mission_ids))
        record.achievements = list(dict.fromkeys(snapshot.achievements))

    def _check_amount(self, what: str, amount: int) -> bool:
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            logger.warning(f"Ignoring non-positive {what} amount: {amount!r}")
            return False
        return True
