from __future__ import annotations

"""Bulk configuration loading (TOML or JSON) validated by pydantic.

Document shape
--------------
    [quality_data]
    common = 100
    rare = 30

    [[item_types]]
    item_type = "weapon"
    weight = 2
    [item_types.subtypes]
    sword = 3

    [[item_attributes]]
    item_type = "weapon"    # "" = every item type
    subtype = ""            # "" = every subtype
    [[item_attributes.attributes]]
    name = "damage"
    initial_value = 10.0
    min = 1.0
    max = 100.0
    required = true

    [[item_list]]
    item_type = "weapon"
    subtype = "sword"
    names = ["longsword"]

    [[item_affixes]]
    item_type = "weapon"
    subtype = "sword"
    [[item_affixes.prefixes]]
    name = "Flaming"
    [[item_affixes.prefixes.attributes]]
    name = "fire_damage"
    ...

Loading is all-or-nothing: the document is applied to a staged copy of the
model and swapped in only when every section applied cleanly. Entries are
upserted into whatever the model already holds.
"""

import json
import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, ValidationError, model_validator

from .errors import InvalidConfig
from .model import LootConfig
from .types import Attribute

logger = logging.getLogger(__name__)


# ================================================================================
# SCHEMAS
# ================================================================================

class _Doc(BaseModel):
    model_config = ConfigDict(extra="forbid", allow_inf_nan=False, str_strip_whitespace=True)


class AttributeDoc(_Doc):
    name: str = Field(..., min_length=1)
    initial_value: float
    min: float
    max: float
    required: bool = False
    scaling_factor: float = 1.0
    chance: float = Field(0.0, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def _bounds_ordered(self) -> "AttributeDoc":
        if self.min > self.max:
            raise ValueError(f"attribute '{self.name}': min ({self.min}) > max ({self.max})")
        return self

    def to_attribute(self) -> Attribute:
        return Attribute(
            name=self.name,
            initial_value=self.initial_value,
            min=self.min,
            max=self.max,
            required=self.required,
            scaling_factor=self.scaling_factor,
            chance=self.chance,
        )


class ItemTypeDoc(_Doc):
    item_type: str = Field(..., min_length=1)
    weight: NonNegativeInt
    subtypes: Dict[str, NonNegativeInt] = Field(default_factory=dict)
    metadata: Dict[str, Any] = Field(default_factory=dict)


class ItemAttributesDoc(_Doc):
    item_type: str = ""
    subtype: str = ""
    attributes: List[AttributeDoc] = Field(default_factory=list)


class ItemListDoc(_Doc):
    item_type: str = Field(..., min_length=1)
    subtype: str = Field(..., min_length=1)
    names: List[str] = Field(default_factory=list)
    item_metadata: Dict[str, Dict[str, Any]] = Field(default_factory=dict)


class AffixDoc(_Doc):
    name: str = Field(..., min_length=1)
    attributes: List[AttributeDoc] = Field(default_factory=list)


class ItemAffixesDoc(_Doc):
    item_type: str = ""
    subtype: str = ""
    prefixes: List[AffixDoc] = Field(default_factory=list)
    suffixes: List[AffixDoc] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)


class SubtypeMetadataDoc(_Doc):
    item_type: str = Field(..., min_length=1)
    subtype: str = Field(..., min_length=1)
    metadata: Dict[str, Any] = Field(default_factory=dict)


class LootDocument(_Doc):
    quality_data: Dict[str, NonNegativeInt] = Field(default_factory=dict)
    item_types: List[ItemTypeDoc] = Field(default_factory=list)
    item_attributes: List[ItemAttributesDoc] = Field(default_factory=list)
    item_list: List[ItemListDoc] = Field(default_factory=list)
    item_affixes: List[ItemAffixesDoc] = Field(default_factory=list)
    subtype_metadata: List[SubtypeMetadataDoc] = Field(default_factory=list)


# ================================================================================
# PARSING
# ================================================================================

def _validation_details(e: ValidationError) -> List[Dict[str, Any]]:
    return [
        {"loc": [str(p) for p in err.get("loc", ())], "msg": str(err.get("msg", "")), "type": str(err.get("type", ""))}
        for err in e.errors()
    ]


def parse_document(data: Union[str, Dict[str, Any]], fmt: str = "toml") -> LootDocument:
    """Parse TOML/JSON text (or an already-decoded mapping) into a LootDocument."""
    if isinstance(data, dict):
        raw = data
    else:
        kind = (fmt or "toml").strip().lower()
        try:
            if kind == "toml":
                raw = tomllib.loads(data)
            elif kind == "json":
                raw = json.loads(data)
            else:
                raise InvalidConfig(f"unsupported configuration format '{fmt}'", {"format": fmt})
        except tomllib.TOMLDecodeError as e:
            raise InvalidConfig(f"malformed TOML configuration: {e}", {"format": "toml"}) from e
        except json.JSONDecodeError as e:
            raise InvalidConfig(f"malformed JSON configuration: {e}", {"format": "json"}) from e
        if not isinstance(raw, dict):
            raise InvalidConfig("configuration document must be a table/object at the top level")

    try:
        return LootDocument.model_validate(raw)
    except ValidationError as e:
        details = _validation_details(e)
        first = details[0] if details else {"loc": [], "msg": str(e)}
        where = ".".join(first["loc"]) or "<document>"
        raise InvalidConfig(f"invalid configuration at {where}: {first['msg']}", details) from e


# ================================================================================
# APPLY
# ================================================================================

def _require_type(stage: LootConfig, item_type: str, section: str) -> None:
    if not stage.has_item_type(item_type):
        raise InvalidConfig(
            f"{section}: unknown item type '{item_type}'",
            {"section": section, "item_type": item_type},
        )


def _require_subtype(stage: LootConfig, item_type: str, subtype: str, section: str) -> None:
    _require_type(stage, item_type, section)
    if subtype and not stage.has_item_subtype(item_type, subtype):
        raise InvalidConfig(
            f"{section}: unknown subtype '{subtype}' for item type '{item_type}'",
            {"section": section, "item_type": item_type, "subtype": subtype},
        )


def _require_scope(stage: LootConfig, item_type: str, subtype: str, section: str) -> None:
    """Like _require_subtype, but item_type and subtype may each be "" (any)."""
    if item_type:
        _require_subtype(stage, item_type, subtype, section)
        return
    if subtype and not any(stage.has_item_subtype(t, subtype) for t in stage.item_type_names()):
        raise InvalidConfig(
            f"{section}: subtype '{subtype}' is not configured under any item type",
            {"section": section, "subtype": subtype},
        )


def _apply(stage: LootConfig, doc: LootDocument) -> None:
    for name, weight in doc.quality_data.items():
        stage.set_quality(name, weight)

    for it in doc.item_types:
        stage.set_item_type(it.item_type, it.weight)
        for subtype, weight in it.subtypes.items():
            stage.set_item_subtype(it.item_type, subtype, weight)
        for key, value in it.metadata.items():
            stage.set_item_type_metadata(it.item_type, key, value)

    for entry in doc.item_attributes:
        _require_scope(stage, entry.item_type, entry.subtype, "item_attributes")
        for attr in entry.attributes:
            stage.set_attribute(entry.item_type, entry.subtype, attr.to_attribute())

    for entry in doc.item_list:
        _require_subtype(stage, entry.item_type, entry.subtype, "item_list")
        stage.set_item_names(entry.item_type, entry.subtype, entry.names)
        for item_name, metadata in entry.item_metadata.items():
            for key, value in metadata.items():
                stage.set_item_name_metadata(entry.item_type, entry.subtype, item_name, key, value)

    for entry in doc.item_affixes:
        _require_scope(stage, entry.item_type, entry.subtype, "item_affixes")
        for affix in entry.prefixes:
            for attr in affix.attributes:
                stage.set_prefix_attribute(entry.item_type, entry.subtype, affix.name, attr.to_attribute())
        for affix in entry.suffixes:
            for attr in affix.attributes:
                stage.set_suffix_attribute(entry.item_type, entry.subtype, affix.name, attr.to_attribute())
        if entry.metadata:
            if not entry.item_type:
                raise InvalidConfig(
                    "item_affixes: metadata needs an item_type",
                    {"section": "item_affixes", "subtype": entry.subtype},
                )
            if not entry.subtype:
                for key, value in entry.metadata.items():
                    stage.set_item_type_metadata(entry.item_type, key, value)
            else:
                for key, value in entry.metadata.items():
                    stage.set_subtype_metadata(entry.item_type, entry.subtype, key, value)

    for entry in doc.subtype_metadata:
        _require_subtype(stage, entry.item_type, entry.subtype, "subtype_metadata")
        for key, value in entry.metadata.items():
            stage.set_subtype_metadata(entry.item_type, entry.subtype, key, value)


def apply_document(config: LootConfig, doc: LootDocument) -> None:
    """Apply `doc` to `config` atomically (no partial application on error)."""
    stage = config.copy()
    try:
        _apply(stage, doc)
    except InvalidConfig as e:
        logger.warning("LOOT_CONFIG_LOAD_REJECTED message=%s", e.message)
        raise
    config.replace_with(stage)
    logger.debug(
        "config loaded: qualities=%d item_types=%d attribute_sets=%d name_pools=%d affix_sets=%d",
        len(doc.quality_data),
        len(doc.item_types),
        len(doc.item_attributes),
        len(doc.item_list),
        len(doc.item_affixes),
    )


def load_config_text(config: LootConfig, text: str, fmt: str = "toml") -> None:
    try:
        doc = parse_document(text, fmt)
    except InvalidConfig as e:
        logger.warning("LOOT_CONFIG_LOAD_REJECTED message=%s", e.message)
        raise
    apply_document(config, doc)


def load_config_file(config: LootConfig, path: Union[str, Path], fmt: Optional[str] = None) -> None:
    """Load a TOML/JSON file; the format defaults to the file suffix (.json -> JSON, else TOML)."""
    p = Path(path)
    kind = fmt or ("json" if p.suffix.lower() == ".json" else "toml")
    try:
        text = p.read_text(encoding="utf-8")
    except OSError as e:
        raise InvalidConfig(f"cannot read configuration file '{p}': {e}", {"path": str(p)}) from e
    load_config_text(config, text, kind)
