from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException

from lootgen import Attribute, LootError
from app.schemas.loot import (
    AffixAttributeRequest,
    AttributePayload,
    AttributeRequest,
    ConfigLoadRequest,
    ItemNamesRequest,
    ItemSubtypeRequest,
    ItemTypeRequest,
    QualityRequest,
)
from app.services.generator_facade import get_generator, raise_http

router = APIRouter()
logger = logging.getLogger(__name__)


def _to_attribute(p: AttributePayload) -> Attribute:
    return Attribute(
        name=p.name,
        initial_value=p.initial_value,
        min=p.min,
        max=p.max,
        required=p.required,
        scaling_factor=p.scaling_factor,
        chance=p.chance,
    )


@router.get("/api/config")
async def api_get_config():
    """Current configuration model in the bulk-load document shape."""
    return get_generator().config_document()


@router.post("/api/config/load")
async def api_load_config(req: ConfigLoadRequest):
    """Bulk-load a TOML/JSON document (all-or-nothing)."""
    gen = get_generator()
    try:
        gen.load_config_text(req.text, req.format)
    except LootError as e:
        raise_http(e)
    except Exception as e:
        logger.exception("configuration load failed unexpectedly")
        raise HTTPException(status_code=500, detail=f"Configuration load failed: {e}")
    return {"ok": True, "info": gen.info()}


@router.post("/api/config/quality")
async def api_set_quality(req: QualityRequest):
    try:
        get_generator().set_quality(req.name, req.weight)
    except LootError as e:
        raise_http(e)
    return {"ok": True}


@router.get("/api/config/quality/{name}")
async def api_has_quality(name: str):
    return {"name": name, "exists": get_generator().has_quality(name)}


@router.post("/api/config/item-type")
async def api_set_item_type(req: ItemTypeRequest):
    try:
        get_generator().set_item_type(req.name, req.weight)
    except LootError as e:
        raise_http(e)
    return {"ok": True}


@router.post("/api/config/item-subtype")
async def api_set_item_subtype(req: ItemSubtypeRequest):
    try:
        get_generator().set_item_subtype(req.item_type, req.subtype, req.weight)
    except LootError as e:
        raise_http(e)
    return {"ok": True}


@router.post("/api/config/attribute")
async def api_set_attribute(req: AttributeRequest):
    try:
        get_generator().set_attribute(req.item_type, req.subtype, _to_attribute(req.attribute))
    except LootError as e:
        raise_http(e)
    return {"ok": True}


@router.post("/api/config/item-names")
async def api_set_item_names(req: ItemNamesRequest):
    try:
        get_generator().set_item_names(req.item_type, req.subtype, req.names)
    except LootError as e:
        raise_http(e)
    return {"ok": True}


@router.post("/api/config/prefix-attribute")
async def api_set_prefix_attribute(req: AffixAttributeRequest):
    try:
        get_generator().set_prefix_attribute(req.item_type, req.subtype, req.affix_name, _to_attribute(req.attribute))
    except LootError as e:
        raise_http(e)
    return {"ok": True}


@router.post("/api/config/suffix-attribute")
async def api_set_suffix_attribute(req: AffixAttributeRequest):
    try:
        get_generator().set_suffix_attribute(req.item_type, req.subtype, req.affix_name, _to_attribute(req.attribute))
    except LootError as e:
        raise_http(e)
    return {"ok": True}
