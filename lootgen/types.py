from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

JsonDict = Dict[str, Any]


@dataclass(frozen=True, slots=True)
class Attribute:
    """
    Attribute definition (configured, not rolled).

    required=True attributes are always rolled; otherwise the attribute is
    included with probability `chance`. `scaling_factor` is the per-attribute
    growth rate combined with the request-wide factor.
    """
    name: str
    initial_value: float
    min: float
    max: float
    required: bool = False
    scaling_factor: float = 1.0
    chance: float = 0.0


@dataclass(slots=True)
class ItemType:
    name: str
    weight: int
    subtypes: Dict[str, int] = field(default_factory=dict)
    metadata: JsonDict = field(default_factory=dict)


@dataclass(slots=True)
class Affix:
    """A named prefix/suffix definition; attributes are keyed by name (upsert)."""
    name: str
    attributes: Dict[str, Attribute] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class GenerationOptions:
    number_of_items: int = 1
    base_level: float = 1.0
    level_variance: float = 1.0
    affix_chance: float = 0.25
    linear: bool = True
    scaling_factor: float = 1.0


@dataclass(frozen=True, slots=True)
class GenerationOverrides:
    """Forced selections. Empty strings mean "roll it"."""
    quality: str = ""
    item_type: str = ""
    subtype: str = ""

    def is_empty(self) -> bool:
        return not (self.quality or self.item_type or self.subtype)


@dataclass(frozen=True, slots=True)
class ItemAttribute:
    """Resolved attribute on a generated item: rolled value plus its static bounds/flags."""
    name: str
    value: float
    min: float
    max: float
    required: bool
    scaling_factor: float
    chance: float


@dataclass(frozen=True, slots=True)
class AffixInstance:
    name: str
    attributes: Dict[str, ItemAttribute]


@dataclass(frozen=True, slots=True)
class GeneratedItem:
    name: str
    quality: str
    item_type: str
    subtype: str
    level: float
    attributes: Dict[str, ItemAttribute]
    prefix: Optional[AffixInstance] = None
    suffix: Optional[AffixInstance] = None
    metadata: JsonDict = field(default_factory=dict)

    @property
    def display_name(self) -> str:
        parts = []
        if self.prefix is not None:
            parts.append(self.prefix.name)
        parts.append(self.name)
        if self.suffix is not None:
            parts.append(self.suffix.name)
        return " ".join(parts)

    def has_attribute(self, name: str) -> bool:
        return name in self.attributes

    def combined_values(self) -> Dict[str, float]:
        """Base attribute values plus prefix/suffix contributions, summed per name."""
        out: Dict[str, float] = {k: a.value for k, a in self.attributes.items()}
        for affix in (self.prefix, self.suffix):
            if affix is None:
                continue
            for k, a in affix.attributes.items():
                out[k] = out.get(k, 0.0) + a.value
        return out

    def to_json_dict(self) -> JsonDict:
        """Stable JSON payload (slots-safe; no __dict__ dependency)."""
        from .serialization import item_to_json
        return item_to_json(self)
