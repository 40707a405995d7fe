from __future__ import annotations

"""Orchestration layer over the configuration model and the generation engine.

This module is intended to be called by host applications and by the HTTP
endpoints in app/.

Key responsibilities:
- Own one LootConfig and expose the per-field setters / queries
- Bulk-load configuration documents atomically
- Run generation sessions and hand results out as owned LootBatch objects
- Keep the last generated items per caller-chosen key (loot history)
"""

import logging
import random
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

from . import loader
from .config import DEFAULT_ENGINE_CONFIG, LIBRARY_NAME, VERSION, EngineConfig
from .errors import BatchReleased
from .model import LootConfig
from .serialization import items_to_json, items_to_json_text
from .session import GenerationSession
from .types import Attribute, GeneratedItem, GenerationOptions, GenerationOverrides, JsonDict

logger = logging.getLogger(__name__)


def version() -> str:
    """Library identifier string."""
    return f"{LIBRARY_NAME} {VERSION}"


class LootBatch:
    """Owned result of one generation call.

    The caller owns the items until release() (or leaving a `with` block).
    Any access after release raises BatchReleased.
    """

    __slots__ = ("key", "seed", "_items", "_released")

    def __init__(self, items: List[GeneratedItem], *, key: str, seed: Optional[int] = None) -> None:
        self.key = key
        self.seed = seed
        self._items: Optional[List[GeneratedItem]] = list(items)
        self._released = False

    def __enter__(self) -> "LootBatch":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        """Drop the owned items. Releasing twice is a no-op."""
        self._items = None
        self._released = True

    @property
    def items(self) -> List[GeneratedItem]:
        if self._items is None:
            raise BatchReleased(f"loot batch '{self.key}' was already released", {"key": self.key})
        return self._items

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[GeneratedItem]:
        return iter(self.items)

    def __getitem__(self, index: int) -> GeneratedItem:
        return self.items[index]

    def to_json(self) -> List[JsonDict]:
        return items_to_json(self.items)

    def to_json_text(self) -> str:
        return items_to_json_text(self.items)


class LootGenerator:
    """Long-lived generator: configuration model + generation entry points."""

    def __init__(self, config: Optional[LootConfig] = None, *, engine: EngineConfig = DEFAULT_ENGINE_CONFIG) -> None:
        self.config = config if config is not None else LootConfig()
        self.engine = engine
        self._loot: Dict[str, List[GeneratedItem]] = {}

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def load_config_text(self, text: str, fmt: str = "toml") -> None:
        loader.load_config_text(self.config, text, fmt)

    def load_config_file(self, path: Union[str, Path], fmt: Optional[str] = None) -> None:
        loader.load_config_file(self.config, path, fmt)

    def set_quality(self, name: str, weight: int) -> None:
        self.config.set_quality(name, weight)

    def set_item_type(self, name: str, weight: int) -> None:
        self.config.set_item_type(name, weight)

    def set_item_subtype(self, item_type: str, subtype: str, weight: int) -> None:
        self.config.set_item_subtype(item_type, subtype, weight)

    def set_attribute(self, item_type: Optional[str], subtype: Optional[str], attribute: Attribute) -> None:
        self.config.set_attribute(item_type, subtype, attribute)

    def set_item_names(self, item_type: str, subtype: str, names: List[str]) -> None:
        self.config.set_item_names(item_type, subtype, names)

    def set_prefix_attribute(self, item_type: Optional[str], subtype: Optional[str], affix_name: str, attribute: Attribute) -> None:
        self.config.set_prefix_attribute(item_type, subtype, affix_name, attribute)

    def set_suffix_attribute(self, item_type: Optional[str], subtype: Optional[str], affix_name: str, attribute: Attribute) -> None:
        self.config.set_suffix_attribute(item_type, subtype, affix_name, attribute)

    def has_quality(self, name: str) -> bool:
        return self.config.has_quality(name)

    def config_document(self) -> JsonDict:
        return self.config.to_document()

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def generate(
        self,
        options: GenerationOptions,
        overrides: Optional[GenerationOverrides] = None,
        *,
        key: Optional[str] = None,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ) -> LootBatch:
        """Run one session; on success store the items under `key` and return an owned batch."""
        k = key or self.engine.default_loot_key
        session = GenerationSession(self.config, options, overrides, rng=rng, seed=seed, engine=self.engine)
        items = session.run()
        self._loot[k] = list(items)
        logger.debug("generate: stored %d items under key=%s", len(items), k)
        return LootBatch(items, key=k, seed=seed)

    def generate_json(
        self,
        options: GenerationOptions,
        overrides: Optional[GenerationOverrides] = None,
        *,
        key: Optional[str] = None,
        seed: Optional[int] = None,
    ) -> str:
        with self.generate(options, overrides, key=key, seed=seed) as batch:
            return batch.to_json_text()

    def get_loot(self, key: Optional[str] = None) -> List[GeneratedItem]:
        return list(self._loot.get(key or self.engine.default_loot_key, []))

    def get_loot_json(self, key: Optional[str] = None) -> str:
        return items_to_json_text(self.get_loot(key))

    def loot_keys(self) -> List[str]:
        return list(self._loot.keys())

    def clear_loot(self, key: Optional[str] = None) -> None:
        if key is None:
            self._loot.clear()
        else:
            self._loot.pop(key, None)

    @staticmethod
    def version() -> str:
        return version()

    def info(self) -> Dict[str, Any]:
        return {
            "version": version(),
            "qualities": len(self.config.quality_weights()),
            "item_types": len(self.config.item_type_names()),
            "loot_keys": self.loot_keys(),
        }
