from __future__ import annotations

from typing import List, Sequence

import pytest

from lootgen import Attribute, LootConfig


class ScriptedRng:
    """Deterministic stand-in for random.Random: replays scripted draws in order."""

    def __init__(self, ranges: Sequence[int] = (), floats: Sequence[float] = (), uniforms: Sequence[float] = ()) -> None:
        self._ranges: List[int] = list(ranges)
        self._floats: List[float] = list(floats)
        self._uniforms: List[float] = list(uniforms)

    def randrange(self, n: int) -> int:
        v = self._ranges.pop(0)
        assert 0 <= v < n, f"scripted randrange value {v} outside [0, {n})"
        return v

    def random(self) -> float:
        return self._floats.pop(0)

    def uniform(self, a: float, b: float) -> float:
        return self._uniforms.pop(0) if self._uniforms else 0.0

    def exhausted(self) -> bool:
        return not (self._ranges or self._floats or self._uniforms)


@pytest.fixture
def weapon_config() -> LootConfig:
    """Small but complete taxonomy: one type, two subtypes, attributes and affixes."""
    cfg = LootConfig()
    cfg.set_quality("common", 100)
    cfg.set_quality("rare", 30)

    cfg.set_item_type("weapon", 2)
    cfg.set_item_subtype("weapon", "sword", 3)
    cfg.set_item_subtype("weapon", "axe", 1)

    cfg.set_item_names("weapon", "sword", ["longsword", "shortsword"])
    cfg.set_item_names("weapon", "axe", ["hatchet"])

    cfg.set_attribute("weapon", None, Attribute("damage", 10.0, 0.0, 1000.0, required=True))
    cfg.set_attribute("weapon", "sword", Attribute("damage", 20.0, 0.0, 1000.0, required=True))
    cfg.set_attribute("weapon", "sword", Attribute("crit", 0.05, 0.0, 1.0, scaling_factor=0.0, chance=0.5))

    cfg.set_suffix_attribute("weapon", "sword", "of Power", Attribute("strength", 1.0, 0.0, 100.0, required=True))
    return cfg


@pytest.fixture
def full_config() -> LootConfig:
    """Two types, affixes in both slots, optional attributes with every chance flavour."""
    cfg = LootConfig()
    for q, w in (("common", 100), ("uncommon", 60), ("rare", 30), ("legendary", 1)):
        cfg.set_quality(q, w)

    cfg.set_item_type("weapon", 1)
    cfg.set_item_subtype("weapon", "sword", 1)
    cfg.set_item_subtype("weapon", "bow", 1)
    cfg.set_item_type("armor", 1)
    cfg.set_item_subtype("armor", "helm", 1)

    cfg.set_item_names("weapon", "sword", ["Iron Sword", "Steel Sword"])
    cfg.set_item_names("weapon", "bow", ["Short Bow"])
    cfg.set_item_names("armor", "helm", ["Cap", "Great Helm"])

    for t in ("weapon", "armor"):
        cfg.set_attribute(t, None, Attribute("durability", 50.0, 10.0, 200.0, required=True, scaling_factor=3.0))
        cfg.set_attribute(t, None, Attribute("never", 1.0, 0.0, 5.0, required=False, chance=0.0))
        cfg.set_attribute(t, None, Attribute("always", 1.0, 0.0, 5.0, required=False, chance=1.0))
        cfg.set_attribute(t, None, Attribute("level_requirement", 1.0, 1.0, 60.0, required=True))
        cfg.set_prefix_attribute(t, None, "Sturdy", Attribute("durability", 5.0, 0.0, 25.0, required=True))
        cfg.set_suffix_attribute(t, None, "of Luck", Attribute("luck", 2.0, -3.0, 7.0, required=True, scaling_factor=-4.0))

    cfg.set_attribute("weapon", "sword", Attribute("damage", 12.0, 1.0, 80.0, required=True, scaling_factor=2.5))
    cfg.set_attribute("weapon", "bow", Attribute("range", 30.0, 30.0, 30.0, required=True))
    cfg.set_attribute("armor", "helm", Attribute("defense", 4.0, 1.0, 40.0, required=True, scaling_factor=1.2))
    return cfg
