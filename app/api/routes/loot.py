from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException

from lootgen import GenerationOptions, GenerationOverrides, LootError, version
from app.schemas.loot import GenerateRequest
from app.services.generator_facade import default_seed, get_generator, raise_http

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/api/version")
async def api_version():
    """Library identifier (no side effects)."""
    return {"version": version()}


@router.get("/api/info")
async def api_info():
    return get_generator().info()


@router.post("/api/loot/generate")
async def api_generate_loot(req: GenerateRequest):
    """Generate items; either every requested item is returned or an error."""
    options = GenerationOptions(
        number_of_items=req.number_of_items,
        base_level=req.base_level,
        level_variance=req.level_variance,
        affix_chance=req.affix_chance,
        linear=req.linear,
        scaling_factor=req.scaling_factor,
    )
    overrides = GenerationOverrides(
        quality=req.quality_override,
        item_type=req.type_override,
        subtype=req.subtype_override,
    )
    seed = req.seed if req.seed is not None else default_seed()

    try:
        with get_generator().generate(options, overrides, key=req.key, seed=seed) as batch:
            return {"key": batch.key, "seed": seed, "count": len(batch), "items": batch.to_json()}
    except LootError as e:
        raise_http(e)
    except Exception as e:
        logger.exception("loot generation failed unexpectedly")
        raise HTTPException(status_code=500, detail=f"Loot generation failed: {e}")


@router.get("/api/loot/{key}")
async def api_get_loot(key: str):
    """Items last generated under `key` (empty when unknown)."""
    items = get_generator().get_loot(key)
    return {"key": key, "count": len(items), "items": [it.to_json_dict() for it in items]}
