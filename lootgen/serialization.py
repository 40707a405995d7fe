from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from .types import AffixInstance, Attribute, GeneratedItem, ItemAttribute
from .utils import json_dumps

JsonDict = Dict[str, Any]

ITEM_JSON_VERSION = 1


def attribute_to_json(attr: Attribute) -> JsonDict:
    return {
        "name": str(attr.name),
        "initial_value": float(attr.initial_value),
        "min": float(attr.min),
        "max": float(attr.max),
        "required": bool(attr.required),
        "scaling_factor": float(attr.scaling_factor),
        "chance": float(attr.chance),
    }


def item_attribute_to_json(attr: ItemAttribute) -> JsonDict:
    return {
        "name": str(attr.name),
        "value": float(attr.value),
        "min": float(attr.min),
        "max": float(attr.max),
        "required": bool(attr.required),
        "scaling_factor": float(attr.scaling_factor),
        "chance": float(attr.chance),
    }


def affix_to_json(affix: Optional[AffixInstance]) -> Optional[JsonDict]:
    if affix is None:
        return None
    return {
        "name": str(affix.name),
        "attributes": {k: item_attribute_to_json(a) for k, a in affix.attributes.items()},
    }


def item_to_json(item: GeneratedItem) -> JsonDict:
    """
    Stable, explicit JSON shape for GeneratedItem.

    - Does not rely on dataclass __dict__ (slots-safe).
    - Absent affixes are null rather than empty objects.
    """
    return {
        "__v": ITEM_JSON_VERSION,
        "name": str(item.name),
        "display_name": item.display_name,
        "quality": str(item.quality),
        "type": str(item.item_type),
        "subtype": str(item.subtype),
        "level": float(item.level),
        "prefix": affix_to_json(item.prefix),
        "suffix": affix_to_json(item.suffix),
        "attributes": {k: item_attribute_to_json(a) for k, a in item.attributes.items()},
        "metadata": dict(item.metadata or {}),
    }


def items_to_json(items: Iterable[GeneratedItem]) -> List[JsonDict]:
    return [item_to_json(it) for it in items]


def items_to_json_text(items: Iterable[GeneratedItem]) -> str:
    return json_dumps(items_to_json(items))
