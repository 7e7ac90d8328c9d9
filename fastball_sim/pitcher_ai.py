"""Pitch selection for the computer-controlled pitcher.

The pitcher picks a pitch type from a small arsenal, discouraging repeats of
what the batter has just seen, then chooses an objective for the count
(``attack`` the zone, work the ``edge`` or ``chase`` outside it) and aims so
the pitch *after* its break lands where the objective wants it.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from random import Random
from typing import Dict, List, Mapping, Sequence, Tuple

from .models import (
    Difficulty,
    Handedness,
    Location,
    OutcomeType,
    PitchOutcome,
    PitchSpec,
    PitchType,
)
from .probability import symmetric, weighted_choice
from .state import GameState

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 10


@dataclass(frozen=True)
class PitchArchetype:
    min_speed: float
    max_speed: float
    movement: Location
    color: str
    weight: float


# Movement is given for a right-handed pitcher and mirrored for lefties.
ARSENAL: Dict[PitchType, PitchArchetype] = {
    PitchType.FOUR_SEAM: PitchArchetype(94.0, 100.0, Location(0.0, 0.05), "#ffffff", 4.0),
    PitchType.SLIDER: PitchArchetype(84.0, 89.0, Location(0.25, -0.1), "#ffd166", 2.5),
    PitchType.CURVEBALL: PitchArchetype(76.0, 82.0, Location(0.05, -0.35), "#06d6a0", 2.0),
    PitchType.CHANGEUP: PitchArchetype(82.0, 87.0, Location(-0.12, -0.18), "#ef476f", 2.0),
}

# Added to every pitch's speed so harder levels throw harder.
VELOCITY_ADJUST: Dict[Difficulty, float] = {
    Difficulty.ROOKIE: -4.0,
    Difficulty.PRO: 0.0,
    Difficulty.MLB: 2.0,
}

REPEAT_PENALTY = 0.35

OBJECTIVE_CENTERS: Dict[str, Tuple[Location, float]] = {
    # (centre of the desired plate location, jitter radius)
    "attack": (Location(0.0, 1.1), 0.2),
    "edge": (Location(0.3, 0.75), 0.08),
    "chase": (Location(0.5, 0.4), 0.12),
}


@dataclass(frozen=True)
class PitchHistory:
    pitch_type: PitchType
    location: Location
    result: OutcomeType


def objective_weights_by_count(balls: int, strikes: int) -> Mapping[str, float]:
    """Return objective weights for the count.

    Behind in the count the pitcher attacks; ahead, especially with two
    strikes, he expands toward the edges and out of the zone.
    """

    if balls == 3:
        return {"attack": 0.85, "edge": 0.15, "chase": 0.0}
    if strikes == 2 and balls < 2:
        return {"attack": 0.25, "edge": 0.4, "chase": 0.35}
    if strikes > balls:
        return {"attack": 0.45, "edge": 0.4, "chase": 0.15}
    if balls > strikes:
        return {"attack": 0.7, "edge": 0.25, "chase": 0.05}
    return {"attack": 0.55, "edge": 0.35, "chase": 0.1}


def pitch_type_weights(history: Sequence[PitchHistory]) -> Dict[PitchType, float]:
    """Return arsenal weights with recently thrown pitches discouraged."""

    weights = {ptype: arch.weight for ptype, arch in ARSENAL.items()}
    for seen in history[-2:]:
        weights[seen.pitch_type] *= REPEAT_PENALTY
    return weights


def build_pitch(
    pitch_type: PitchType,
    handedness: Handedness,
    difficulty: Difficulty,
    rng: Random,
) -> PitchSpec:
    arch = ARSENAL[pitch_type]
    speed = arch.min_speed + (arch.max_speed - arch.min_speed) * rng.random()
    speed += VELOCITY_ADJUST[difficulty]
    movement = Location(arch.movement.x * handedness.side, arch.movement.y)
    return PitchSpec(pitch_type, round(speed, 1), arch.color, movement)


def select_pitch(
    difficulty: Difficulty,
    state: GameState,
    history: Sequence[PitchHistory],
    rng: Random,
) -> Tuple[PitchSpec, Location]:
    """Return the next pitch and the target the pitcher aims at.

    Exactly five draws are taken from ``rng``: pitch type, speed, objective
    and the two jitter components of the target.
    """

    pitch_type = weighted_choice(pitch_type_weights(history), rng)
    pitch = build_pitch(pitch_type, state.pitcher_handedness, difficulty, rng)

    objective = weighted_choice(dict(objective_weights_by_count(state.balls, state.strikes)), rng)
    center, radius = OBJECTIVE_CENTERS[objective]
    # Work the glove side of the plate for the current pitcher.
    side = -state.pitcher_handedness.side
    desired = Location(
        center.x * side + symmetric(radius, rng),
        center.y + symmetric(radius, rng),
    )
    target = Location(desired.x - pitch.movement.x, desired.y - pitch.movement.y)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "%d-%d count: %s %.1fmph objective=%s target=(%.2f, %.2f)",
            state.balls,
            state.strikes,
            pitch.pitch_type.value,
            pitch.speed_mph,
            objective,
            target.x,
            target.y,
        )
    return pitch, target


def plate_appearance_over(before: GameState, outcome: PitchOutcome) -> bool:
    """Return ``True`` when ``outcome`` ends the batter's plate appearance."""

    if outcome.is_hit or outcome.type is OutcomeType.OUT:
        return True
    if outcome.type is OutcomeType.BALL:
        return before.balls == 3
    if outcome.type is OutcomeType.STRIKE:
        return before.strikes == 2
    return False


def record_pitch(
    history: Sequence[PitchHistory],
    pitch: PitchSpec,
    target: Location,
    before: GameState,
    outcome: PitchOutcome,
) -> List[PitchHistory]:
    """Return the history after ``outcome``; empty once the batter is done."""

    if plate_appearance_over(before, outcome):
        return []
    entry = PitchHistory(pitch.pitch_type, target, outcome.type)
    return [*history[-(HISTORY_LIMIT - 1):], entry]


__all__ = [
    "ARSENAL",
    "PitchArchetype",
    "PitchHistory",
    "objective_weights_by_count",
    "pitch_type_weights",
    "build_pitch",
    "select_pitch",
    "plate_appearance_over",
    "record_pitch",
]
