"""
Game Components - Data-only component definitions.

All components are Pydantic models containing only data.
Mutation lives in services (ProgressionStore), not in components.
"""

from voxelgame.components.player import (
    PlayerRecord,
    PlayerSnapshot,
    ResourceStack,
    Rarity,
)

__all__ = [
    "PlayerRecord",
    "PlayerSnapshot",
    "ResourceStack",
    "Rarity",
]
