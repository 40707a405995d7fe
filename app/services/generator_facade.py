from __future__ import annotations

import logging
import os
from typing import NoReturn, Optional

from fastapi import HTTPException

from lootgen import LootGenerator
from lootgen.errors import POPULATION_ERROR_CODES, LootError

logger = logging.getLogger(__name__)

_GENERATOR: Optional[LootGenerator] = None


def get_generator() -> LootGenerator:
    """Process-wide generator used by the API routes (created lazily)."""
    global _GENERATOR
    if _GENERATOR is None:
        _GENERATOR = LootGenerator()
    return _GENERATOR


def reset_generator(generator: Optional[LootGenerator] = None) -> LootGenerator:
    """Replace the process-wide generator (startup reload, tests)."""
    global _GENERATOR
    _GENERATOR = generator if generator is not None else LootGenerator()
    return _GENERATOR


def load_startup_config() -> None:
    """Load LOOT_CONFIG_PATH into the process-wide generator, if configured."""
    path = (os.environ.get("LOOT_CONFIG_PATH") or "").strip()
    if not path:
        logger.info("LOOT_CONFIG_PATH not set; starting with an empty configuration")
        return
    try:
        get_generator().load_config_file(path)
    except LootError as e:
        raise RuntimeError(f"loading LOOT_CONFIG_PATH={path} failed during startup: {e}") from e
    logger.info("loaded loot configuration from %s", path)


def default_seed() -> Optional[int]:
    raw = (os.environ.get("LOOT_DEFAULT_SEED") or "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning("LOOT_DEFAULT_SEED is not an integer: %r; ignoring", raw)
        return None


def raise_http(e: LootError) -> NoReturn:
    """Map a LootError to an HTTPException with a stable machine-readable code."""
    status = 409 if e.code in POPULATION_ERROR_CODES else 400
    raise HTTPException(status_code=status, detail=e.to_payload()) from e
