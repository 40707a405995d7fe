from __future__ import annotations

"""Attribute instantiation: presence gate, level scaling, clamping.

Scaling policies (L = resolved item level, floored at EngineConfig.min_level):

    linear:     raw = initial + (L - 1) * attr.scaling_factor * scaling_factor
    nonlinear:  raw = initial * (scaling_factor * attr.scaling_factor) ** (L - 1)

At L == 1 both policies return the initial value. The nonlinear growth base is
floored at 0 (a negative base has no real fractional power) and overflow
saturates to +/-inf before clamping. Every returned value lies in [min, max].
"""

import math
import random
from typing import Dict, Mapping

from .config import DEFAULT_ENGINE_CONFIG, EngineConfig
from .errors import InvalidConfig, InvalidLevel
from .selection import bernoulli
from .types import Attribute, ItemAttribute
from .utils import clamp, is_finite_number


def check_level(level: float) -> float:
    if not is_finite_number(level):
        raise InvalidLevel(f"level must be a finite number (got {level!r})", {"level": repr(level)})
    if level < 0:
        raise InvalidLevel(f"level must be >= 0 (got {level})", {"level": level})
    return float(level)


def resolve_level(
    rng: random.Random,
    base_level: float,
    level_variance: float,
    *,
    engine: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> float:
    """base_level + U(-variance, +variance), floored at engine.min_level.

    The uniform draw always happens (also for variance 0) so the RNG stream
    consumed per item does not depend on the options.

    A negative base_level is rejected with InvalidLevel before the floor is
    applied: the floor only absorbs variance below 1, it does not repair a
    malformed request.
    """
    base = check_level(base_level)
    offset = rng.uniform(-level_variance, level_variance)
    return max(float(engine.min_level), base + offset)


def roll_presence(rng: random.Random, attribute: Attribute) -> bool:
    if attribute.required:
        return True
    return bernoulli(rng, attribute.chance)


def _nonlinear_factor(growth: float, exponent: float) -> float:
    if growth < 0.0:
        growth = 0.0
    if growth == 0.0:
        if exponent == 0.0:
            return 1.0
        return 0.0 if exponent > 0.0 else math.inf
    try:
        return math.pow(growth, exponent)
    except OverflowError:
        return math.inf


def scale_value(attribute: Attribute, level: float, *, linear: bool, scaling_factor: float) -> float:
    """Raw (unclamped) value of `attribute` at `level`."""
    initial = float(attribute.initial_value)
    steps = float(level) - 1.0
    if linear:
        raw = initial + steps * float(attribute.scaling_factor) * float(scaling_factor)
    elif initial == 0.0:
        raw = 0.0
    else:
        raw = initial * _nonlinear_factor(float(scaling_factor) * float(attribute.scaling_factor), steps)
    if math.isnan(raw):
        return initial
    return raw


def instantiate_attribute(
    attribute: Attribute,
    level: float,
    *,
    linear: bool,
    scaling_factor: float,
    engine: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> ItemAttribute:
    lvl = check_level(level)
    if attribute.min > attribute.max:
        raise InvalidConfig(
            f"attribute '{attribute.name}': min ({attribute.min}) > max ({attribute.max})",
            {"attribute": attribute.name},
        )

    if engine.level_requirement_suffix and attribute.name.endswith(engine.level_requirement_suffix):
        raw = lvl
    else:
        raw = scale_value(attribute, lvl, linear=linear, scaling_factor=scaling_factor)

    return ItemAttribute(
        name=attribute.name,
        value=float(clamp(raw, float(attribute.min), float(attribute.max))),
        min=float(attribute.min),
        max=float(attribute.max),
        required=bool(attribute.required),
        scaling_factor=float(attribute.scaling_factor),
        chance=float(attribute.chance),
    )


def roll_attributes(
    rng: random.Random,
    attributes: Mapping[str, Attribute],
    level: float,
    *,
    linear: bool,
    scaling_factor: float,
    engine: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> Dict[str, ItemAttribute]:
    """Presence-gate and instantiate each attribute, preserving configured order."""
    out: Dict[str, ItemAttribute] = {}
    for name, attr in attributes.items():
        if not roll_presence(rng, attr):
            continue
        out[name] = instantiate_attribute(attr, level, linear=linear, scaling_factor=scaling_factor, engine=engine)
    return out
