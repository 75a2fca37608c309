"""
Component base class for data-only records.

Components are pure data containers. Logic that mutates them lives in
the services that own them (ProgressionStore for the player record).
This separation keeps:
- Serialization trivial (snapshots are model dumps)
- Validation in one place
- Testing easier

Usage:
    class Wallet(Component):
        balance: int = Field(default=0, ge=0)
"""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict


class Component(BaseModel):
    """
    Base class for all data components.

    Components are data-only containers using Pydantic for:
    - Automatic validation (including on assignment)
    - JSON serialization
    - Default values

    IMPORTANT: Do NOT add methods that modify state.
    Mutation belongs to the owning service.
    """

    model_config = ConfigDict(
        # Validate on assignment so invariants (ge=0) hold after mutation
        validate_assignment=True,
        # Unknown fields in persisted data are a bug, not a feature
        extra='forbid',
    )

    # Class variable: component type name (used for serialization)
    _type_name: ClassVar[str] = ""

    @classmethod
    def get_type_name(cls) -> str:
        """Get the component type name for serialization."""
        return cls._type_name or cls.__name__

    def clone(self) -> Component:
        """Create a deep copy of this component."""
        return self.model_copy(deep=True)


# Registry of component types for deserialization
_component_registry: dict[str, type[Component]] = {}


def register_component(cls: type[Component]) -> type[Component]:
    """
    Decorator to register a component type.

    Usage:
        @register_component
        class ResourceStack(Component):
            amount: int
    """
    type_name = cls.get_type_name()
    _component_registry[type_name] = cls
    return cls


def get_component_type(type_name: str) -> type[Component] | None:
    """Get component class by type name."""
    return _component_registry.get(type_name)
