from __future__ import annotations

"""Tunable engine configuration.

All constants here are tuning knobs for the generation engine itself
(not for the loot taxonomy, which lives in the configuration model).
Keep them pure (no randomness at import time).
"""

from dataclasses import dataclass

LIBRARY_NAME: str = "lootgen"
VERSION: str = "0.4.0"


@dataclass(frozen=True, slots=True)
class EngineConfig:
    # ---------------------------------------------------------------------
    # Level resolution
    # ---------------------------------------------------------------------
    # Resolved item levels are floored here so that (L - 1) never goes negative
    # in the scaling formulas.
    min_level: float = 1.0

    # ---------------------------------------------------------------------
    # Request bounds
    # ---------------------------------------------------------------------
    max_items_per_request: int = 100_000

    # ---------------------------------------------------------------------
    # Attribute conventions
    # ---------------------------------------------------------------------
    # Attributes named "<stat>_requirement" (e.g. "level_requirement") take the
    # resolved item level instead of a scaled value.
    level_requirement_suffix: str = "_requirement"

    # ---------------------------------------------------------------------
    # Default generation options (used by the HTTP layer when fields are omitted)
    # ---------------------------------------------------------------------
    default_number_of_items: int = 1
    default_base_level: float = 1.0
    default_level_variance: float = 1.0
    default_affix_chance: float = 0.25
    default_linear: bool = True
    default_scaling_factor: float = 1.0

    # Key used for loot history when the caller does not name one.
    default_loot_key: str = "main"


DEFAULT_ENGINE_CONFIG = EngineConfig()
