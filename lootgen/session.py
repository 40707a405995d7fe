from __future__ import annotations

"""Generation session (one per request).

- Holds:
    * the configuration model (read-only for the session's lifetime)
    * the validated options/overrides
    * its own random.Random (seedable)

- Provides:
    * run() -> ordered list of items, all-or-nothing
"""

import logging
import random
from typing import List, Optional

from .assembler import assemble_item, check_overrides
from .attributes import check_level
from .config import DEFAULT_ENGINE_CONFIG, EngineConfig
from .errors import InvalidOptions, LootError
from .model import LootConfig
from .types import GeneratedItem, GenerationOptions, GenerationOverrides
from .utils import is_finite_number

logger = logging.getLogger(__name__)


def validate_options(options: GenerationOptions, *, engine: EngineConfig = DEFAULT_ENGINE_CONFIG) -> GenerationOptions:
    """Raise InvalidOptions / InvalidLevel for malformed options."""
    if not isinstance(options, GenerationOptions):
        raise InvalidOptions(f"expected GenerationOptions, got {type(options).__name__}")

    n = options.number_of_items
    if isinstance(n, bool) or not isinstance(n, int):
        raise InvalidOptions(f"number_of_items must be an integer (got {n!r})", {"field": "number_of_items"})
    if n < 0 or n > engine.max_items_per_request:
        raise InvalidOptions(
            f"number_of_items must be within [0, {engine.max_items_per_request}] (got {n})",
            {"field": "number_of_items", "max": engine.max_items_per_request},
        )

    if not is_finite_number(options.level_variance) or options.level_variance < 0:
        raise InvalidOptions(
            f"level_variance must be a finite number >= 0 (got {options.level_variance!r})",
            {"field": "level_variance"},
        )
    if not is_finite_number(options.affix_chance) or not 0.0 <= options.affix_chance <= 1.0:
        raise InvalidOptions(
            f"affix_chance must be within [0, 1] (got {options.affix_chance!r})",
            {"field": "affix_chance"},
        )
    if not is_finite_number(options.scaling_factor):
        raise InvalidOptions(
            f"scaling_factor must be a finite number (got {options.scaling_factor!r})",
            {"field": "scaling_factor"},
        )

    check_level(options.base_level)
    return options


class GenerationSession:
    """Drives N independent item assemblies for a single request."""

    def __init__(
        self,
        config: LootConfig,
        options: GenerationOptions,
        overrides: Optional[GenerationOverrides] = None,
        *,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        engine: EngineConfig = DEFAULT_ENGINE_CONFIG,
    ) -> None:
        if rng is not None and seed is not None:
            raise InvalidOptions("pass either rng or seed, not both")
        self.config = config
        self.options = options
        self.overrides = overrides
        self.engine = engine
        self.rng = rng if rng is not None else random.Random(seed)

    def run(self) -> List[GeneratedItem]:
        try:
            validate_options(self.options, engine=self.engine)
            check_overrides(self.config, self.overrides)

            n = int(self.options.number_of_items)
            logger.debug(
                "generate: n=%d base_level=%s variance=%s affix_chance=%s linear=%s",
                n,
                self.options.base_level,
                self.options.level_variance,
                self.options.affix_chance,
                self.options.linear,
            )
            items: List[GeneratedItem] = []
            for _ in range(n):
                items.append(assemble_item(self.rng, self.config, self.options, self.overrides, engine=self.engine))
        except LootError as e:
            # A configuration defect would recur for every remaining item.
            logger.warning("LOOT_GENERATION_FAILED code=%s message=%s", e.code, e.message)
            raise

        return items


def generate(
    config: LootConfig,
    options: GenerationOptions,
    overrides: Optional[GenerationOverrides] = None,
    *,
    rng: Optional[random.Random] = None,
    seed: Optional[int] = None,
    engine: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> List[GeneratedItem]:
    """Generate options.number_of_items items or raise; never a partial list."""
    return GenerationSession(config, options, overrides, rng=rng, seed=seed, engine=engine).run()
