from __future__ import annotations

import random
from typing import Dict, Optional

from .attributes import resolve_level, roll_attributes
from .config import DEFAULT_ENGINE_CONFIG, EngineConfig
from .errors import EmptyPopulation, InvalidOptions, NoNames, NoSubtypes
from .model import LootConfig
from .selection import bernoulli, uniform_choice, weighted_choice
from .types import Affix, AffixInstance, GeneratedItem, GenerationOptions, GenerationOverrides


def check_overrides(config: LootConfig, overrides: Optional[GenerationOverrides]) -> None:
    """Reject overrides that name entries the model does not have."""
    if overrides is None:
        return
    if overrides.quality and not config.has_quality(overrides.quality):
        raise InvalidOptions(f"unknown quality override '{overrides.quality}'", {"quality": overrides.quality})
    if overrides.item_type and not config.has_item_type(overrides.item_type):
        raise InvalidOptions(f"unknown item type override '{overrides.item_type}'", {"item_type": overrides.item_type})
    if overrides.subtype:
        if not overrides.item_type:
            owners = [t for t in config.item_type_names() if config.has_item_subtype(t, overrides.subtype)]
            if not owners:
                raise InvalidOptions(f"unknown subtype override '{overrides.subtype}'", {"subtype": overrides.subtype})
        elif not config.has_item_subtype(overrides.item_type, overrides.subtype):
            raise InvalidOptions(
                f"subtype override '{overrides.subtype}' is not configured under '{overrides.item_type}'",
                {"item_type": overrides.item_type, "subtype": overrides.subtype},
            )


def _select_item_type(rng: random.Random, config: LootConfig, overrides: GenerationOverrides) -> str:
    if overrides.item_type:
        return overrides.item_type
    if overrides.subtype:
        # Only types owning the forced subtype are eligible.
        owners = {
            t: w for t, w in config.type_weights().items() if config.has_item_subtype(t, overrides.subtype)
        }
        return weighted_choice(rng, owners, what="item type")
    return weighted_choice(rng, config.type_weights(), what="item type")


def _roll_affix(
    rng: random.Random,
    candidates: Dict[str, Affix],
    level: float,
    options: GenerationOptions,
    engine: EngineConfig,
) -> Optional[AffixInstance]:
    if not candidates:
        return None
    if len(candidates) == 1:
        affix = next(iter(candidates.values()))
    else:
        affix = candidates[weighted_choice(rng, {name: 1 for name in candidates}, what="affix")]
    attrs = roll_attributes(
        rng,
        affix.attributes,
        level,
        linear=options.linear,
        scaling_factor=options.scaling_factor,
        engine=engine,
    )
    return AffixInstance(name=affix.name, attributes=attrs)


def assemble_item(
    rng: random.Random,
    config: LootConfig,
    options: GenerationOptions,
    overrides: Optional[GenerationOverrides] = None,
    *,
    engine: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> GeneratedItem:
    """
    Assemble a single item.

    Draw order per item (fixed, so seeded runs are reproducible):
      quality -> type -> subtype -> name -> level -> attributes
      -> prefix gate (+ choice + attributes) -> suffix gate (+ choice + attributes)

    The configuration model is only read.
    """
    ov = overrides or GenerationOverrides()

    if ov.quality:
        quality = ov.quality
    else:
        quality = weighted_choice(rng, config.quality_weights(), what="quality")

    if not config.type_weights() and not ov.item_type:
        raise EmptyPopulation("no item types configured to select from", {"what": "item type"})
    item_type = _select_item_type(rng, config, ov)

    if ov.subtype:
        subtype = ov.subtype
    else:
        subtypes = config.subtype_weights(item_type)
        if not subtypes:
            raise NoSubtypes(f"item type '{item_type}' has no subtypes configured", {"item_type": item_type})
        subtype = weighted_choice(rng, subtypes, what=f"subtype of '{item_type}'")

    names = config.item_names(item_type, subtype)
    if not names:
        raise NoNames(
            f"no item names configured for '{item_type}/{subtype}'",
            {"item_type": item_type, "subtype": subtype},
        )
    name = uniform_choice(rng, names, what="item name")

    level = resolve_level(rng, options.base_level, options.level_variance, engine=engine)

    attributes = roll_attributes(
        rng,
        config.attributes_for(item_type, subtype),
        level,
        linear=options.linear,
        scaling_factor=options.scaling_factor,
        engine=engine,
    )

    prefix = None
    if bernoulli(rng, options.affix_chance):
        prefix = _roll_affix(rng, config.prefixes_for(item_type, subtype), level, options, engine)

    suffix = None
    if bernoulli(rng, options.affix_chance):
        suffix = _roll_affix(rng, config.suffixes_for(item_type, subtype), level, options, engine)

    return GeneratedItem(
        name=name,
        quality=quality,
        item_type=item_type,
        subtype=subtype,
        level=level,
        attributes=attributes,
        prefix=prefix,
        suffix=suffix,
        metadata=config.metadata_for(item_type, subtype, name),
    )
