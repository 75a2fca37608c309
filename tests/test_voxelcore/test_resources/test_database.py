import pytest
import json
from voxelcore.resources.database import Database

@pytest.fixture
def mock_db_path(tmp_path):
    # Setup mock directory structure in tmp_path
    schemas = tmp_path / "schemas"
    schemas.mkdir()

    database = tmp_path / "database"
    database.mkdir()
    for folder in ("traits", "resources", "missions"):
        (database / folder).mkdir()

    trait_schema = {
        "type": "object",
        "required": ["id", "name"],
        "properties": {
            "id": {"type": "string"},
            "name": {"type": "string"}
        }
    }
    with open(schemas / "trait.schema.json", "w") as f:
        json.dump(trait_schema, f)

    return tmp_path

def test_load_all(mock_db_path):
    trait_data = [
        {"id": "builder", "name": "Builder"},
        {"id": "artist", "name": "Artist"}
    ]
    with open(mock_db_path / "database" / "traits" / "default.json", "w") as f:
        json.dump(trait_data, f)

    db = Database(mock_db_path)
    db.load_all()

    assert list(db.traits) == ["builder", "artist"]
    assert db.traits["artist"]["name"] == "Artist"

def test_single_entry_file(mock_db_path):
    with open(mock_db_path / "database" / "traits" / "solo.json", "w") as f:
        json.dump({"id": "solo", "name": "Solo"}, f)

    db = Database(mock_db_path)
    db.load_all()

    assert "solo" in db.traits

def test_validation_error(mock_db_path):
    # Second entry is missing its name
    trait_data = [
        {"id": "builder", "name": "Builder"},
        {"id": "broken"}
    ]
    with open(mock_db_path / "database" / "traits" / "default.json", "w") as f:
        json.dump(trait_data, f)

    db = Database(mock_db_path)
    db.load_all()

    assert "builder" in db.traits
    assert "broken" not in db.traits # Skipped due to validation error

def test_invalid_json_file_is_skipped(mock_db_path):
    (mock_db_path / "database" / "traits" / "bad.json").write_text("{not json")
    with open(mock_db_path / "database" / "traits" / "good.json", "w") as f:
        json.dump([{"id": "builder", "name": "Builder"}], f)

    db = Database(mock_db_path)
    db.load_all()

    assert list(db.traits) == ["builder"]

def test_missing_schema(mock_db_path):
    trait_data = [{"id": "builder", "name": "Builder"}]
    with open(mock_db_path / "database" / "traits" / "default.json", "w") as f:
        json.dump(trait_data, f)

    (mock_db_path / "schemas" / "trait.schema.json").unlink()

    db = Database(mock_db_path)
    db.load_all()

    # Without a schema the category is not loaded
    assert "builder" not in db.traits

def test_files_load_in_name_order(mock_db_path):
    traits = mock_db_path / "database" / "traits"
    with open(traits / "b.json", "w") as f:
        json.dump([{"id": "second", "name": "Second"}], f)
    with open(traits / "a.json", "w") as f:
        json.dump([{"id": "first", "name": "First"}], f)

    db = Database(mock_db_path)
    db.load_all()

    assert list(db.traits) == ["first", "second"]

def test_missing_directories(tmp_path):
    db = Database(tmp_path / "nowhere")
    db.load_all()

    assert db.traits == {}
    assert db.resources == {}
    assert db.missions == {}
