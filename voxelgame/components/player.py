"""
Player components - progression record, traits, inventory resources.
"""

from __future__ import annotations

from enum import Enum

from pydantic import ConfigDict, Field, NonNegativeInt

from voxelcore.core.component import Component, register_component


class Rarity(Enum):
    """Resource rarity tiers."""
    COMMON = "common"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


@register_component
class ResourceStack(Component):
    """
    Amount held of one catalog resource.

    Attributes:
        amount: Units held
        rarity: Rarity tier, fixed by the catalog
    """
    amount: int = Field(default=0, ge=0)
    rarity: Rarity = Rarity.COMMON


@register_component
class PlayerRecord(Component):
    """
    Progression state of the connected player.

    Owned by ProgressionStore and mutated only through it.

    Attributes:
        identity: Stable key from the session provider
        experience: Total experience earned
        level: Derived from experience, never decreases
        currency_balance: Reward currency held
        traits: Trait id -> value
        resources: Resource id -> stack
        completed_mission_ids: Completed missions in completion order
        achievements: Achievement ids in award order
    """
    identity: str
    experience: int = Field(default=0, ge=0)
    level: int = Field(default=1, ge=1)
    currency_balance: int = Field(default=0, ge=0)
    traits: dict[str, NonNegativeInt] = Field(default_factory=dict)
    resources: dict[str, ResourceStack] = Field(default_factory=dict)
    completed_mission_ids: list[str] = Field(default_factory=list)
    achievements: list[str] = Field(default_factory=list)


@register_component
class PlayerSnapshot(PlayerRecord):
    """
    Detached, read-only copy of a PlayerRecord.

    Used for persistence and by the presentation layer. Field assignment
    raises; mutating nested containers only changes the copy.
    """
    model_config = ConfigDict(frozen=True)

    @property
    def total_resources(self) -> int:
        return sum(stack.amount for stack in self.resources.values())
