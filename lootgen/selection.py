from __future__ import annotations

"""Weighted random selection primitives.

Both helpers take the caller's RNG explicitly; nothing here touches the
module-level `random` state.

Keys are visited in sorted order so that a given random stream always maps to
the same key regardless of mapping insertion order.
"""

import random
from typing import Mapping, Sequence, TypeVar

from .errors import DegenerateWeights, EmptyPopulation, InvalidConfig

T = TypeVar("T")


def weighted_choice(rng: random.Random, weights: Mapping[str, int], *, what: str = "entry") -> str:
    """Draw one key with probability weight / sum(weights).

    Raises EmptyPopulation for an empty mapping and DegenerateWeights when
    every weight is zero.
    """
    if not weights:
        raise EmptyPopulation(f"no {what} configured to select from", {"what": what})

    keys = sorted(weights.keys())
    total = 0
    for k in keys:
        w = weights[k]
        if isinstance(w, bool) or not isinstance(w, int) or w < 0:
            raise InvalidConfig(f"{what} '{k}' has invalid weight {w!r}", {"what": what, "key": k})
        total += w
    if total <= 0:
        raise DegenerateWeights(
            f"all {what} weights are zero ({len(keys)} candidates)",
            {"what": what, "candidates": keys},
        )

    roll = rng.randrange(total)
    for k in keys:
        roll -= weights[k]
        if roll < 0:
            return k

    # randrange(total) < total guarantees the loop returns.
    raise AssertionError("weighted_choice: roll exceeded total weight")


def uniform_choice(rng: random.Random, items: Sequence[T], *, what: str = "entry") -> T:
    if not items:
        raise EmptyPopulation(f"no {what} configured to select from", {"what": what})
    return items[rng.randrange(len(items))]


def bernoulli(rng: random.Random, p: float) -> bool:
    """One fresh draw; p <= 0 is never true, p >= 1 always true."""
    return rng.random() < p
