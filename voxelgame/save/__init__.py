"""
Save module - player progression persistence.

Provides:
- SaveManager: fire-and-forget saves, session-start loads
- Backends: in-memory and JSON file stores
"""

from voxelgame.save.backends import (
    PersistenceBackend,
    MemoryBackend,
    JsonFileBackend,
)
from voxelgame.save.manager import SaveEvent, SaveManager, SaveResult

__all__ = [
    "SaveManager",
    "SaveResult",
    "SaveEvent",
    "PersistenceBackend",
    "MemoryBackend",
    "JsonFileBackend",
]
