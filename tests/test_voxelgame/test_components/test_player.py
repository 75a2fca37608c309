import pytest
from pydantic import ValidationError
from voxelgame.components.player import PlayerRecord, PlayerSnapshot, ResourceStack, Rarity

def test_record_defaults():
    record = PlayerRecord(identity="alice")

    assert record.experience == 0
    assert record.level == 1
    assert record.currency_balance == 0
    assert record.traits == {}
    assert record.completed_mission_ids == []

def test_record_rejects_negative_values():
    record = PlayerRecord(identity="alice")

    with pytest.raises(ValidationError):
        record.experience = -1
    with pytest.raises(ValidationError):
        ResourceStack(amount=-3)

def test_trait_values_cannot_be_negative():
    with pytest.raises(ValidationError):
        PlayerSnapshot(identity="alice", traits={"builder": -3})
    with pytest.raises(ValidationError):
        PlayerRecord.model_validate({"identity": "alice", "traits": {"artist": -1}})

def test_snapshot_is_read_only():
    snapshot = PlayerSnapshot(identity="alice", experience=40)

    with pytest.raises(ValidationError):
        snapshot.experience = 50

def test_snapshot_json_round_trip():
    snapshot = PlayerSnapshot(
        identity="alice",
        experience=120,
        level=2,
        resources={"glass": ResourceStack(amount=2, rarity=Rarity.RARE)},
    )

    dumped = snapshot.model_dump(mode="json")
    assert dumped["resources"]["glass"] == {"amount": 2, "rarity": "rare"}

    restored = PlayerSnapshot.model_validate(dumped)
    assert restored == snapshot
    assert restored.total_resources == 2
