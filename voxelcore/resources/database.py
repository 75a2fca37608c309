"""
Catalog Database.

Handles loading and validation of static catalog data (missions,
traits, resources). Each category is a folder of JSON files, each file
holding one entry or a list of entries, validated against a JSON schema.
"""

import json
import logging
from pathlib import Path
from typing import Any

import jsonschema


class Database:
    """
    Central storage for static catalog data.

    Entries are keyed by their ``id`` and kept in load order (files are
    read in sorted name order, entries in file order) so catalogs built
    from the database are deterministic.
    """

    # category folder -> schema file name
    CATEGORIES: dict[str, str] = {
        "traits": "trait.schema.json",
        "resources": "resource.schema.json",
        "missions": "mission.schema.json",
    }

    def __init__(self, data_path: Path | str):
        self._data_path = Path(data_path)
        self._schemas: dict[str, Any] = {}

        # Data stores
        self.traits: dict[str, Any] = {}
        self.resources: dict[str, Any] = {}
        self.missions: dict[str, Any] = {}

        self.logger = logging.getLogger(__name__)

    @property
    def data_path(self) -> Path:
        return self._data_path

    def load_all(self) -> None:
        """Load all data from disk."""
        self._load_schemas()

        for folder, schema_name in self.CATEGORIES.items():
            setattr(self, folder, self._load_category(folder, schema_name))

        self.logger.info(
            f"Loaded {len(self.traits)} traits, "
            f"{len(self.resources)} resources, "
            f"{len(self.missions)} missions from {self._data_path}."
        )

    def _load_schemas(self) -> None:
        """Load JSON schemas."""
        schema_dir = self._data_path / "schemas"
        if not schema_dir.exists():
            self.logger.warning(f"Schema directory not found: {schema_dir}")
            return

        for schema_file in sorted(schema_dir.glob("*.schema.json")):
            try:
                with open(schema_file, 'r', encoding='utf-8') as f:
                    self._schemas[schema_file.name] = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                self.logger.error(f"Failed to load schema {schema_file}: {e}")

    def _load_category(self, folder: str, schema_name: str) -> dict[str, Any]:
        """Load all JSON files in a category folder."""
        category_dir = self._data_path / "database" / folder
        data_store: dict[str, Any] = {}

        if not category_dir.exists():
            self.logger.warning(f"Data directory not found: {category_dir}")
            return data_store

        schema = self._schemas.get(schema_name)
        if not schema:
            self.logger.warning(f"No schema found for {folder} ({schema_name})")
            return data_store

        for file_path in sorted(category_dir.glob("*.json")):
            try:
                with open(file_path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                self.logger.error(f"Failed to load {file_path}: {e}")
                continue

            entries = data if isinstance(data, list) else [data]
            for entry in entries:
                # A bad entry is skipped; its siblings still load
                try:
                    jsonschema.validate(instance=entry, schema=schema)
                except jsonschema.ValidationError as e:
                    self.logger.error(f"Validation error in {file_path}: {e.message}")
                    continue

                entry_id = entry['id']
                if entry_id in data_store:
                    self.logger.warning(
                        f"Duplicate {folder} id '{entry_id}' in {file_path}, replacing"
                    )
                data_store[entry_id] = entry

        return data_store
