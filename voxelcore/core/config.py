"""
Progression configuration.
"""

from __future__ import annotations

from pathlib import Path


class ProgressionConfig:
    """Configuration for the progression engine."""

    def __init__(
        self,
        xp_per_level: int = 100,
        any_target: str = "any",
        clamp_requirements: bool = False,
        save_on_completion: bool = True,
        game_id: str = "threecraft-v1",
        data_path: str | Path | None = None,
        save_path: str | Path = "saves",
    ):
        if xp_per_level <= 0:
            raise ValueError(f"xp_per_level must be positive, got {xp_per_level}")

        self.xp_per_level = xp_per_level
        # Requirement target that matches every subject
        self.any_target = any_target
        # Cap amount_current at amount_needed (completion then needs every row)
        self.clamp_requirements = clamp_requirements
        self.save_on_completion = save_on_completion
        self.game_id = game_id
        self.data_path = Path(data_path) if data_path is not None else None
        self.save_path = Path(save_path)
