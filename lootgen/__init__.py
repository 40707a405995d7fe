from __future__ import annotations

"""
Procedural loot generation package.

Configure a LootConfig (qualities, item types/subtypes, attributes, affixes,
name pools) directly or from a TOML/JSON document, then generate items for a
target level. Public API is exposed via lootgen.service.
"""

from .config import DEFAULT_ENGINE_CONFIG, VERSION, EngineConfig
from .errors import (
    BatchReleased,
    DegenerateWeights,
    EmptyPopulation,
    InvalidConfig,
    InvalidLevel,
    InvalidOptions,
    LootError,
    NoNames,
    NoSubtypes,
)
from .model import LootConfig
from .service import LootBatch, LootGenerator, version
from .session import GenerationSession, generate
from .types import (
    Affix,
    AffixInstance,
    Attribute,
    GeneratedItem,
    GenerationOptions,
    GenerationOverrides,
    ItemAttribute,
    ItemType,
)

__all__ = [
    "VERSION",
    "EngineConfig",
    "DEFAULT_ENGINE_CONFIG",
    "LootConfig",
    "LootGenerator",
    "LootBatch",
    "GenerationSession",
    "generate",
    "version",
    "Attribute",
    "Affix",
    "AffixInstance",
    "ItemType",
    "ItemAttribute",
    "GeneratedItem",
    "GenerationOptions",
    "GenerationOverrides",
    "LootError",
    "InvalidConfig",
    "EmptyPopulation",
    "NoSubtypes",
    "NoNames",
    "DegenerateWeights",
    "InvalidLevel",
    "InvalidOptions",
    "BatchReleased",
]
