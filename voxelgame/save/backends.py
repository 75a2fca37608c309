"""
Persistence backends - where player snapshots are stored.

A backend is a key/value store keyed by player identity. Backends may
block; SaveManager calls them from its worker thread for saves.
"""

from __future__ import annotations

import base64
import hashlib
import json
import logging
import os
import re
import tempfile
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from voxelcore.core.component import get_component_type
from voxelcore.core.config import ProgressionConfig
from voxelgame.components.player import PlayerSnapshot

logger = logging.getLogger(__name__)


class PersistenceBackend(ABC):
    """Interface the progression engine needs from a store."""

    @abstractmethod
    def load(self, identity: str) -> Optional[PlayerSnapshot]:
        """Load the snapshot saved for an identity, None if there is none."""

    @abstractmethod
    def save(self, identity: str, snapshot: PlayerSnapshot) -> bool:
        """Save a snapshot. Returns False (or raises) on failure."""


class MemoryBackend(PersistenceBackend):
    """In-process store. Snapshots are kept as JSON-mode dumps."""

    def __init__(self):
        self._data: dict[str, dict] = {}
        self._lock = threading.Lock()

    def load(self, identity: str) -> Optional[PlayerSnapshot]:
        with self._lock:
            data = self._data.get(identity)
        return PlayerSnapshot.model_validate(data) if data is not None else None

    def save(self, identity: str, snapshot: PlayerSnapshot) -> bool:
        with self._lock:
            self._data[identity] = snapshot.model_dump(mode="json")
        return True

    def __contains__(self, identity: str) -> bool:
        with self._lock:
            return identity in self._data


class JsonFileBackend(PersistenceBackend):
    """
    One JSON file per identity.

    File layout:
        {version, game_id, identity, type, last_updated, player, checksum}

    The checksum is a SHA-256 over the rest of the document. Files are
    written to a temp file and moved into place.
    """

    VERSION = "1.0"

    def __init__(self, save_path: str | Path = "saves", game_id: str = "threecraft-v1"):
        self.save_path = Path(save_path)
        self.save_path.mkdir(parents=True, exist_ok=True)
        self.game_id = game_id

    @classmethod
    def from_config(cls, config: ProgressionConfig) -> JsonFileBackend:
        return cls(config.save_path, config.game_id)

    def get_path(self, identity: str) -> Path:
        """Get the save file path for an identity."""
        safe = re.sub(r'[^A-Za-z0-9_.-]', '_', identity)[:64]
        digest = hashlib.sha1(identity.encode('utf-8')).hexdigest()[:8]
        return self.save_path / f"{safe}_{digest}.json"

    def load(self, identity: str) -> Optional[PlayerSnapshot]:
        path = self.get_path(identity)
        if not path.exists():
            return None

        with open(path, 'r', encoding='utf-8') as f:
            document = json.load(f)

        checksum = document.get('checksum')
        if checksum and not self._verify_checksum(document, checksum):
            logger.warning(f"Save file corrupted: checksum mismatch in {path}")
            return None

        if document.get('identity') != identity:
            logger.warning(f"Save file {path} belongs to another identity")
            return None

        snapshot_type = get_component_type(document.get('type', PlayerSnapshot.get_type_name()))
        if snapshot_type is None:
            logger.warning(f"Unknown snapshot type in {path}: {document.get('type')!r}")
            return None

        try:
            player = snapshot_type.model_validate(document['player'])
            if not isinstance(player, PlayerSnapshot):
                player = PlayerSnapshot.model_validate(player.model_dump())
        except (KeyError, ValidationError) as e:
            logger.warning(f"Invalid save data in {path}: {e}")
            return None

        return player

    def save(self, identity: str, snapshot: PlayerSnapshot) -> bool:
        document = {
            'version': self.VERSION,
            'game_id': self.game_id,
            'identity': identity,
            'type': snapshot.get_type_name(),
            'last_updated': datetime.now(timezone.utc).isoformat(),
            'player': snapshot.model_dump(mode="json"),
        }
        document['checksum'] = self._calculate_checksum(document)

        path = self.get_path(identity)
        temp_path: Path | None = None
        try:
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=self.save_path, suffix=".tmp", delete=False
            ) as handle:
                temp_path = Path(handle.name)
                json.dump(document, handle, indent=2)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(temp_path, path)
            temp_path = None
        finally:
            if temp_path is not None:
                temp_path.unlink(missing_ok=True)

        return True

    def delete(self, identity: str) -> bool:
        """Delete the save file of an identity."""
        path = self.get_path(identity)
        if not path.exists():
            return False
        path.unlink()
        return True

    # Checksum validation

    def _calculate_checksum(self, data: dict) -> str:
        """Calculate checksum for save data."""
        json_str = json.dumps(data, sort_keys=True, separators=(',', ':'))
        hash_bytes = hashlib.sha256(json_str.encode('utf-8')).digest()
        return base64.b64encode(hash_bytes).decode('ascii')

    def _verify_checksum(self, data: dict, expected_checksum: str) -> bool:
        """Verify save data checksum."""
        data_copy = data.copy()
        data_copy.pop('checksum', None)
        return self._calculate_checksum(data_copy) == expected_checksum
