import os
import sys
import pytest

# Ensure packages can be imported without installation
sys.path.append(os.getcwd())


@pytest.fixture
def event_bus():
    """Fresh EventBus for each test."""
    from voxelcore.core.events import EventBus
    return EventBus()


@pytest.fixture
def trait_defs():
    from voxelgame.progression.store import TraitDefinition
    return [
        TraitDefinition(id="builder", name="Builder"),
        TraitDefinition(id="artist", name="Artist"),
    ]


@pytest.fixture
def resource_defs():
    from voxelgame.components.player import Rarity
    from voxelgame.progression.store import ResourceDefinition
    return [
        ResourceDefinition(id="stone", name="Stone", rarity=Rarity.COMMON),
        ResourceDefinition(id="diamond", name="Diamond", rarity=Rarity.LEGENDARY),
    ]


@pytest.fixture
def store(trait_defs, resource_defs):
    """Store for player 'alice' with a small trait/resource catalog."""
    from voxelgame.progression.store import ProgressionStore
    return ProgressionStore("alice", trait_defs, resource_defs)


@pytest.fixture
def first_builder():
    """One block_place on anything; 10 xp, 5 currency, builder trait."""
    from voxelgame.progression.missions import (
        ActionKind, Mission, Requirement, Reward, RewardKind,
    )
    return Mission(
        id="first_builder",
        title="First Builder",
        requirements=[Requirement(ActionKind.BLOCK_PLACE, "any", 1)],
        rewards=[
            Reward(RewardKind.XP, 10),
            Reward(RewardKind.CURRENCY, 5),
            Reward(RewardKind.TRAIT, "builder"),
        ],
    )


@pytest.fixture
def stone_house():
    """Twenty stone placements; 50 xp and a stone resource."""
    from voxelgame.progression.missions import (
        ActionKind, Mission, Requirement, Reward, RewardKind,
    )
    return Mission(
        id="stone_house",
        title="Stone House",
        requirements=[Requirement(ActionKind.BLOCK_PLACE, "STONE", 20)],
        rewards=[
            Reward(RewardKind.XP, 50),
            Reward(RewardKind.RESOURCE, "stone"),
        ],
    )


@pytest.fixture
def memory_backend():
    from voxelgame.save.backends import MemoryBackend
    return MemoryBackend()


@pytest.fixture
def save_manager(memory_backend):
    """SaveManager over an in-memory backend, shut down after the test."""
    from voxelgame.save.manager import SaveManager
    manager = SaveManager(memory_backend)
    yield manager
    manager.shutdown()
