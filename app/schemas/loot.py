from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from lootgen import DEFAULT_ENGINE_CONFIG as _ENGINE


class ConfigLoadRequest(BaseModel):
    text: str
    format: str = "toml"  # toml | json


class QualityRequest(BaseModel):
    name: str
    weight: int


class ItemTypeRequest(BaseModel):
    name: str
    weight: int


class ItemSubtypeRequest(BaseModel):
    item_type: str
    subtype: str
    weight: int


class AttributePayload(BaseModel):
    name: str
    initial_value: float
    min: float
    max: float
    required: bool = False
    scaling_factor: float = 1.0
    chance: float = 0.0


class AttributeRequest(BaseModel):
    item_type: Optional[str] = None  # None/"" = every item type
    subtype: Optional[str] = None  # None/"" = every subtype
    attribute: AttributePayload


class ItemNamesRequest(BaseModel):
    item_type: str
    subtype: str
    names: List[str] = Field(default_factory=list)


class AffixAttributeRequest(BaseModel):
    item_type: Optional[str] = None
    subtype: Optional[str] = None
    affix_name: str
    attribute: AttributePayload


class GenerateRequest(BaseModel):
    number_of_items: int = _ENGINE.default_number_of_items
    base_level: float = _ENGINE.default_base_level
    level_variance: float = _ENGINE.default_level_variance
    affix_chance: float = _ENGINE.default_affix_chance
    linear: bool = _ENGINE.default_linear
    scaling_factor: float = _ENGINE.default_scaling_factor
    quality_override: str = ""
    type_override: str = ""
    subtype_override: str = ""
    seed: Optional[int] = None
    key: Optional[str] = None
