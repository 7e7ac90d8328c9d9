"""Runner advancement on hits and walks."""
from __future__ import annotations

from random import Random
from typing import Tuple

from .config import GameRules
from .models import OutcomeType
from .probability import roll

# Occupancy of first, second and third base.
Runners = Tuple[bool, bool, bool]

EMPTY_BASES: Runners = (False, False, False)


def advance_runners(
    runners: Runners,
    hit_type: OutcomeType,
    rng: Random,
    rules: GameRules | None = None,
) -> Tuple[Runners, int]:
    """Return the new base occupancy and runs scored on a hit.

    Only singles involve chance: a runner on second scores with
    ``rules.single_runner_on_second_scores`` and a runner on first reaches
    third with ``rules.single_runner_on_first_to_third`` unless a runner was
    already held there.  Each decision that is actually made consumes one draw.
    """

    if rules is None:
        rules = GameRules()
    first, second, third = runners

    if hit_type is OutcomeType.HOMERUN:
        return EMPTY_BASES, 1 + sum(runners)

    if hit_type is OutcomeType.TRIPLE:
        return (False, False, True), sum(runners)

    if hit_type is OutcomeType.DOUBLE:
        runs = int(second) + int(third)
        return (False, True, first), runs

    if hit_type is OutcomeType.SINGLE:
        runs = int(third)
        new_third = False
        new_second = False
        if second:
            if roll(rules.single_runner_on_second_scores, rng):
                runs += 1
            else:
                new_third = True
        if first:
            # A runner held at third blocks the runner from first.
            if not new_third and roll(rules.single_runner_on_first_to_third, rng):
                new_third = True
            else:
                new_second = True
        return (True, new_second, new_third), runs

    raise ValueError(f"{hit_type.name} does not advance runners as a hit")


def walk_runners(runners: Runners) -> Tuple[Runners, int]:
    """Return occupancy and runs after a walk; only forced runners move."""

    first, second, third = runners
    if not first:
        return (True, second, third), 0
    if not second:
        return (True, True, third), 0
    if not third:
        return (True, True, True), 0
    return (True, True, True), 1


__all__ = ["Runners", "EMPTY_BASES", "advance_runners", "walk_runners"]
