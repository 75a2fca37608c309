"""
Core engine module.

Exports:
- Component, register_component: Data component base and registration
- EventBus, Event: Event system
- ProgressionConfig: Engine configuration
"""

from voxelcore.core.component import Component, register_component, get_component_type
from voxelcore.core.events import EventBus, Event, EventHandler
from voxelcore.core.config import ProgressionConfig

__all__ = [
    # Components
    "Component",
    "register_component",
    "get_component_type",
    # Events
    "EventBus",
    "Event",
    "EventHandler",
    # Config
    "ProgressionConfig",
]
