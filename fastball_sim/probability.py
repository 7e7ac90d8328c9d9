"""Random-source helpers for the engine.

Every stochastic decision in the engine draws from a :class:`random.Random`
instance handed in by the caller, so a fixed seed reproduces a game exactly.
"""
from __future__ import annotations

from random import Random
from typing import Dict, Sequence, TypeVar

T = TypeVar("T")


def make_rng(seed: int | None = None) -> Random:
    """Return an independent random source, seeded when ``seed`` is given."""
    return Random(seed)


def clamp01(value: float) -> float:
    """Clamp ``value`` to the inclusive ``0.0``–``1.0`` range."""
    return max(0.0, min(1.0, value))


def roll(chance: float, rng: Random) -> bool:
    """Return ``True`` with the given probability.

    Exactly one draw is consumed regardless of ``chance`` so that callers keep
    a predictable number of draws per decision.
    """
    return rng.random() < clamp01(chance)


def symmetric(spread: float, rng: Random) -> float:
    """Return a uniform value in ``[-spread, spread]`` from a single draw."""
    return (rng.random() * 2.0 - 1.0) * spread


def weighted_choice(
    weights: Dict[T, float] | Sequence[float],
    rng: Random,
    items: Sequence[T] | None = None,
) -> T:
    """Select an item based on provided ``weights``."""
    if isinstance(weights, dict):
        items, weights = zip(*weights.items())
    assert items is not None

    total = sum(weights)
    r = rng.random() * total
    upto = 0.0
    for item, weight in zip(items, weights):
        upto += weight
        if upto > r:
            return item
    # Floating point rounding can leave ``r`` just past the final bucket.
    return items[-1]


__all__ = ["make_rng", "clamp01", "roll", "symmetric", "weighted_choice"]
