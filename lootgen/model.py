from __future__ import annotations

"""In-memory loot configuration model.

Holds the taxonomy the engine draws from:

    quality (weight)
    item type (weight) -> subtype (weight)
        -> attributes (scoped, see below)
        -> prefix / suffix affixes (scoped, see below)
        -> name pool (per type/subtype)

All setters are upserts: setting the same key twice overwrites the previous
value. The model is never mutated by the generation engine; callers must not
mutate it while generations are running on other threads.

Attributes and affixes live under (item_type, subtype) scope keys, from least
to most specific:

    ("", "")            every item
    (type, "")          every subtype of one type
    ("", subtype)       every type owning that subtype
    (type, subtype)     one subtype

A scope must name declared types/subtypes, so to_document() always reloads.
Names are exact keys: surrounding whitespace is rejected, not stripped.
"""

import copy
import logging
from dataclasses import replace
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .errors import InvalidConfig
from .serialization import attribute_to_json
from .types import Affix, Attribute, ItemType, JsonDict
from .utils import is_finite_number, norm_name

logger = logging.getLogger(__name__)

ScopeKey = Tuple[str, str]

ANY = ""


# ----------------------------
# Validation helpers
# ----------------------------

def _require_name(value: Any, what: str) -> str:
    name = norm_name(value)
    if not name.strip():
        raise InvalidConfig(f"{what} must be a non-empty name", {"field": what})
    if name != name.strip():
        raise InvalidConfig(f"{what} {name!r} has leading or trailing whitespace", {"field": what})
    return name


def _require_weight(weight: Any, what: str) -> int:
    if isinstance(weight, bool) or not isinstance(weight, int):
        raise InvalidConfig(f"{what} weight must be an integer (got {weight!r})", {"field": what})
    if weight < 0:
        raise InvalidConfig(f"{what} weight must be >= 0 (got {weight})", {"field": what, "weight": weight})
    return int(weight)


def _scope(subtype: Optional[str]) -> str:
    return norm_name(subtype)


def validate_attribute(attribute: Attribute) -> Attribute:
    """Return a normalized copy of `attribute` or raise InvalidConfig."""
    if not isinstance(attribute, Attribute):
        raise InvalidConfig(f"expected an Attribute, got {type(attribute).__name__}")
    name = _require_name(attribute.name, "attribute")
    for field_name in ("initial_value", "min", "max", "scaling_factor", "chance"):
        v = getattr(attribute, field_name)
        if not is_finite_number(v):
            raise InvalidConfig(
                f"attribute '{name}': {field_name} must be a finite number (got {v!r})",
                {"attribute": name, "field": field_name},
            )
    if attribute.min > attribute.max:
        raise InvalidConfig(
            f"attribute '{name}': min ({attribute.min}) > max ({attribute.max})",
            {"attribute": name, "min": attribute.min, "max": attribute.max},
        )
    if not 0.0 <= attribute.chance <= 1.0:
        raise InvalidConfig(
            f"attribute '{name}': chance must be within [0, 1] (got {attribute.chance})",
            {"attribute": name, "chance": attribute.chance},
        )
    return replace(
        attribute,
        name=name,
        initial_value=float(attribute.initial_value),
        min=float(attribute.min),
        max=float(attribute.max),
        required=bool(attribute.required),
        scaling_factor=float(attribute.scaling_factor),
        chance=float(attribute.chance),
    )


class LootConfig:
    """Configuration model consumed by the generation engine."""

    def __init__(self) -> None:
        self._qualities: Dict[str, int] = {}
        self._item_types: Dict[str, ItemType] = {}
        self._attributes: Dict[ScopeKey, Dict[str, Attribute]] = {}
        self._names: Dict[ScopeKey, List[str]] = {}
        self._prefixes: Dict[ScopeKey, Dict[str, Affix]] = {}
        self._suffixes: Dict[ScopeKey, Dict[str, Affix]] = {}
        self._subtype_metadata: Dict[ScopeKey, JsonDict] = {}
        self._name_metadata: Dict[Tuple[str, str, str], JsonDict] = {}

    # ------------------------------------------------------------------
    # Qualities
    # ------------------------------------------------------------------

    def set_quality(self, name: str, weight: int) -> None:
        q = _require_name(name, "quality")
        self._qualities[q] = _require_weight(weight, f"quality '{q}'")

    def has_quality(self, name: str) -> bool:
        return norm_name(name) in self._qualities

    def quality_weights(self) -> Mapping[str, int]:
        return MappingProxyType(self._qualities)

    # ------------------------------------------------------------------
    # Item types / subtypes
    # ------------------------------------------------------------------

    def set_item_type(self, name: str, weight: int) -> None:
        t = _require_name(name, "item type")
        w = _require_weight(weight, f"item type '{t}'")
        existing = self._item_types.get(t)
        if existing is not None:
            existing.weight = w
        else:
            self._item_types[t] = ItemType(name=t, weight=w)

    def set_item_subtype(self, item_type: str, subtype: str, weight: int) -> None:
        t = _require_name(item_type, "item type")
        s = _require_name(subtype, "subtype")
        w = _require_weight(weight, f"subtype '{t}/{s}'")
        it = self._item_types.get(t)
        if it is None:
            # Unknown type: register it unweighted so the subtype has an owner.
            logger.debug("set_item_subtype: registering item type %r with weight 0", t)
            it = ItemType(name=t, weight=0)
            self._item_types[t] = it
        it.subtypes[s] = w

    def has_item_type(self, name: str) -> bool:
        return norm_name(name) in self._item_types

    def has_item_subtype(self, item_type: str, subtype: str) -> bool:
        it = self._item_types.get(norm_name(item_type))
        return it is not None and norm_name(subtype) in it.subtypes

    def get_item_type(self, name: str) -> Optional[ItemType]:
        return self._item_types.get(norm_name(name))

    def item_type_names(self) -> List[str]:
        return list(self._item_types.keys())

    def type_weights(self) -> Dict[str, int]:
        return {name: it.weight for name, it in self._item_types.items()}

    def subtype_weights(self, item_type: str) -> Mapping[str, int]:
        it = self._item_types.get(norm_name(item_type))
        if it is None:
            return MappingProxyType({})
        return MappingProxyType(it.subtypes)

    def subtypes_for(self, item_type: str) -> List[str]:
        return list(self.subtype_weights(item_type).keys())

    # ------------------------------------------------------------------
    # Attributes
    # ------------------------------------------------------------------

    def _check_scope(self, item_type: Optional[str], subtype: Optional[str]) -> ScopeKey:
        """Validate an attribute/affix scope. None and "" both mean "any"."""
        t = norm_name(item_type)
        s = _scope(subtype)
        if t:
            _require_name(t, "item type")
            if t not in self._item_types:
                raise InvalidConfig(f"unknown item type '{t}'", {"item_type": t})
        if s:
            _require_name(s, "subtype")
            if t:
                if s not in self._item_types[t].subtypes:
                    raise InvalidConfig(
                        f"unknown subtype '{s}' for item type '{t}'",
                        {"item_type": t, "subtype": s},
                    )
            elif not any(s in it.subtypes for it in self._item_types.values()):
                raise InvalidConfig(f"subtype '{s}' is not configured under any item type", {"subtype": s})
        return (t, s)

    def _require_subtype(self, item_type: str, subtype: str) -> ScopeKey:
        t = _require_name(item_type, "item type")
        s = _require_name(subtype, "subtype")
        return self._check_scope(t, s)

    @staticmethod
    def _scope_chain(item_type: str, subtype: str) -> List[ScopeKey]:
        t = norm_name(item_type)
        s = _scope(subtype)
        chain = [(ANY, ANY), (t, ANY), (ANY, s), (t, s)]
        return list(dict.fromkeys(chain))

    def set_attribute(self, item_type: Optional[str], subtype: Optional[str], attribute: Attribute) -> None:
        """Upsert an attribute. item_type and subtype may each be None/"" (any)."""
        key = self._check_scope(item_type, subtype)
        attr = validate_attribute(attribute)
        self._attributes.setdefault(key, {})[attr.name] = attr

    def has_attribute(self, item_type: Optional[str], subtype: Optional[str], name: str) -> bool:
        key = (norm_name(item_type), _scope(subtype))
        return norm_name(name) in self._attributes.get(key, {})

    def attributes_for(self, item_type: str, subtype: str) -> Dict[str, Attribute]:
        """Attributes of every matching scope; the more specific scope wins a name clash."""
        merged: Dict[str, Attribute] = {}
        for key in self._scope_chain(item_type, subtype):
            merged.update(self._attributes.get(key, {}))
        return merged

    # ------------------------------------------------------------------
    # Names
    # ------------------------------------------------------------------

    def set_item_names(self, item_type: str, subtype: str, names: Iterable[str]) -> None:
        t, s = self._require_subtype(item_type, subtype)
        if isinstance(names, str):
            raise InvalidConfig("item names must be a sequence of strings, not a single string")
        cleaned = [_require_name(n, f"item name for '{t}/{s}'") for n in names]
        self._names[(t, s)] = cleaned

    def item_names(self, item_type: str, subtype: str) -> List[str]:
        return list(self._names.get((norm_name(item_type), norm_name(subtype)), []))

    # ------------------------------------------------------------------
    # Affixes
    # ------------------------------------------------------------------

    def set_prefix_attribute(self, item_type: Optional[str], subtype: Optional[str], affix_name: str, attribute: Attribute) -> None:
        self._set_affix_attribute(self._prefixes, item_type, subtype, affix_name, attribute)

    def set_suffix_attribute(self, item_type: Optional[str], subtype: Optional[str], affix_name: str, attribute: Attribute) -> None:
        self._set_affix_attribute(self._suffixes, item_type, subtype, affix_name, attribute)

    def _set_affix_attribute(
        self,
        table: Dict[ScopeKey, Dict[str, Affix]],
        item_type: str,
        subtype: Optional[str],
        affix_name: str,
        attribute: Attribute,
    ) -> None:
        key = self._check_scope(item_type, subtype)
        a = _require_name(affix_name, "affix")
        attr = validate_attribute(attribute)
        affixes = table.setdefault(key, {})
        affix = affixes.get(a)
        if affix is None:
            affix = Affix(name=a)
            affixes[a] = affix
        affix.attributes[attr.name] = attr

    def prefixes_for(self, item_type: str, subtype: str) -> Dict[str, Affix]:
        return self._affixes_for(self._prefixes, item_type, subtype)

    def suffixes_for(self, item_type: str, subtype: str) -> Dict[str, Affix]:
        return self._affixes_for(self._suffixes, item_type, subtype)

    def _affixes_for(self, table: Dict[ScopeKey, Dict[str, Affix]], item_type: str, subtype: str) -> Dict[str, Affix]:
        merged: Dict[str, Affix] = {}
        for key in self._scope_chain(item_type, subtype):
            merged.update(table.get(key, {}))
        return merged

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    def set_item_type_metadata(self, item_type: str, key: str, value: Any) -> None:
        t = _require_name(item_type, "item type")
        k = _require_name(key, "metadata key")
        it = self._item_types.get(t)
        if it is None:
            raise InvalidConfig(f"unknown item type '{t}'", {"item_type": t})
        it.metadata[k] = value

    def set_subtype_metadata(self, item_type: str, subtype: str, key: str, value: Any) -> None:
        t, s = self._require_subtype(item_type, subtype)
        k = _require_name(key, "metadata key")
        self._subtype_metadata.setdefault((t, s), {})[k] = value

    def set_item_name_metadata(self, item_type: str, subtype: str, item_name: str, key: str, value: Any) -> None:
        t, s = self._require_subtype(item_type, subtype)
        n = _require_name(item_name, "item name")
        k = _require_name(key, "metadata key")
        self._name_metadata.setdefault((t, s, n), {})[k] = value

    def get_subtype_metadata(self, item_type: str, subtype: str) -> JsonDict:
        return dict(self._subtype_metadata.get((norm_name(item_type), norm_name(subtype)), {}))

    def get_item_name_metadata(self, item_type: str, subtype: str, item_name: str) -> JsonDict:
        key = (norm_name(item_type), norm_name(subtype), norm_name(item_name))
        return dict(self._name_metadata.get(key, {}))

    def metadata_for(self, item_type: str, subtype: str, item_name: str) -> JsonDict:
        """Type metadata, then subtype metadata, then per-name metadata (later wins)."""
        out: JsonDict = {}
        it = self._item_types.get(norm_name(item_type))
        if it is not None:
            out.update(it.metadata)
        out.update(self.get_subtype_metadata(item_type, subtype))
        out.update(self.get_item_name_metadata(item_type, subtype, item_name))
        return copy.deepcopy(out)

    # ------------------------------------------------------------------
    # Whole-model helpers
    # ------------------------------------------------------------------

    def is_empty(self) -> bool:
        return not self._qualities and not self._item_types

    def copy(self) -> "LootConfig":
        return copy.deepcopy(self)

    def replace_with(self, other: "LootConfig") -> None:
        """Swap in the full state of `other` (used to commit a staged bulk load)."""
        staged = copy.deepcopy(other)
        self._qualities = staged._qualities
        self._item_types = staged._item_types
        self._attributes = staged._attributes
        self._names = staged._names
        self._prefixes = staged._prefixes
        self._suffixes = staged._suffixes
        self._subtype_metadata = staged._subtype_metadata
        self._name_metadata = staged._name_metadata

    def to_document(self) -> JsonDict:
        """Snapshot in the bulk-load document shape (see lootgen.loader)."""
        item_types = [
            {
                "item_type": it.name,
                "weight": it.weight,
                "subtypes": dict(it.subtypes),
                "metadata": copy.deepcopy(it.metadata),
            }
            for it in self._item_types.values()
        ]
        item_attributes = [
            {
                "item_type": t,
                "subtype": s,
                "attributes": [attribute_to_json(a) for a in attrs.values()],
            }
            for (t, s), attrs in self._attributes.items()
        ]
        item_list = []
        name_scopes = dict.fromkeys(list(self._names) + [(t, s) for t, s, _ in self._name_metadata])
        for t, s in name_scopes:
            names = self._names.get((t, s), [])
            item_metadata = {
                n: copy.deepcopy(md)
                for (mt, ms, n), md in self._name_metadata.items()
                if (mt, ms) == (t, s)
            }
            item_list.append({"item_type": t, "subtype": s, "names": list(names), "item_metadata": item_metadata})

        affix_keys = list(self._prefixes.keys()) + [k for k in self._suffixes.keys() if k not in self._prefixes]
        item_affixes = []
        for t, s in affix_keys:
            item_affixes.append(
                {
                    "item_type": t,
                    "subtype": s,
                    "prefixes": [_affix_to_json(a) for a in self._prefixes.get((t, s), {}).values()],
                    "suffixes": [_affix_to_json(a) for a in self._suffixes.get((t, s), {}).values()],
                }
            )

        return {
            "quality_data": dict(self._qualities),
            "item_types": item_types,
            "item_attributes": item_attributes,
            "item_list": item_list,
            "item_affixes": item_affixes,
            "subtype_metadata": [
                {"item_type": t, "subtype": s, "metadata": copy.deepcopy(md)}
                for (t, s), md in self._subtype_metadata.items()
            ],
        }


def _affix_to_json(affix: Affix) -> JsonDict:
    return {"name": affix.name, "attributes": [attribute_to_json(a) for a in affix.attributes.values()]}
