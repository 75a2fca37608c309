"""
Voxel Core

Engine-level building blocks for the sandbox progression engine:
typed events, data components, configuration and catalog loading.

Quick Start:
    from voxelcore import EventBus, ProgressionConfig

    bus = EventBus()
    config = ProgressionConfig(xp_per_level=100)
"""

__version__ = "0.1.0"

from voxelcore.core import (
    Component,
    register_component,
    EventBus,
    Event,
    ProgressionConfig,
)
from voxelcore.resources import Database

__all__ = [
    "Component",
    "register_component",
    "EventBus",
    "Event",
    "ProgressionConfig",
    "Database",
]
