"""
Voxel Game module.

Provides the game-side progression built on top of voxelcore:
- Components (player record, snapshots; Pydantic models)
- Progression (store, missions, catalog)
- Save (persistence backends, background saves)
- Session (start/reset lifecycle for the connected player)
"""

from voxelgame.session import ProgressionSession, SessionEvent

__all__ = [
    "ProgressionSession",
    "SessionEvent",
]
