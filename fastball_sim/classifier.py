"""Outcome classification for a single pitch.

Rules are evaluated top to bottom and the first match wins.  Whenever a value
lands exactly on a threshold the branch less favorable to the batter is taken.
"""
from __future__ import annotations

import logging
import math
from random import Random

from .config import TuningConfig
from .models import (
    BatterProfile,
    ContactReading,
    Difficulty,
    Location,
    OutcomeType,
    PitchOutcome,
    PitchSpec,
)
from .probability import clamp01
from .trajectory import effective_location

logger = logging.getLogger(__name__)


def in_strike_zone(location: Location, tuning: TuningConfig) -> bool:
    """Return ``True`` when ``location`` is inside the zone (edges count)."""

    return (
        abs(location.x) <= tuning.get("zone_half_width")
        and tuning.get("zone_bottom") <= location.y <= tuning.get("zone_top")
    )


def carry_distance_ft(exit_velo: float, launch_angle: float, tuning: TuningConfig) -> float:
    """Return the theoretical unobstructed carry of a batted ball in feet."""

    speed = exit_velo * tuning.get("mph_to_ms")
    theta = math.radians(launch_angle)
    g = abs(tuning.get("gravity"))
    if theta <= 0 or g == 0:
        return 0.0
    metres = speed * speed / g * math.sin(2 * theta)
    return max(0.0, metres * tuning.get("ft_per_m") * tuning.get("carry_scale"))


def homerun_distance_ft(exit_velo: float, launch_angle: float, tuning: TuningConfig) -> float:
    off_optimum = abs(launch_angle - tuning.get("hr_optimal_la"))
    return exit_velo * tuning.get("hr_distance_ev_scale") - off_optimum * tuning.get(
        "hr_distance_la_penalty"
    )


def hit_chance(
    exit_velo: float,
    launch_angle: float,
    batter: BatterProfile,
    tuning: TuningConfig,
) -> float:
    """Return the chance a weakly struck ball falls for a hit."""

    if launch_angle >= tuning.get("hit_chance_zero_la"):
        return 0.0
    # A value on a band edge takes the lower band.
    if exit_velo <= 60:
        chance = tuning.get("hit_chance_ev60")
    elif exit_velo <= 70:
        chance = tuning.get("hit_chance_ev70")
    elif exit_velo <= 80:
        chance = tuning.get("hit_chance_ev80")
    elif exit_velo <= 88:
        chance = tuning.get("hit_chance_ev88")
    else:
        chance = tuning.get("hit_chance_ev_max")
    chance += batter.contact * tuning.get("contact_hit_bonus_per_point")
    if launch_angle >= tuning.get("hit_chance_penalty_la"):
        chance *= tuning.get("hit_chance_high_la_scale")
    return clamp01(chance)


def classify_take(
    pitch: PitchSpec,
    target: Location,
    tuning: TuningConfig,
) -> PitchOutcome:
    """Return a called ball or strike for a pitch the batter let go."""

    location = effective_location(pitch, target)
    if in_strike_zone(location, tuning):
        return PitchOutcome.called_strike(location, pitch.pitch_type)
    return PitchOutcome.called_ball(location, pitch.pitch_type)


def _label(reading: ContactReading, descriptor: str) -> str:
    return f"{reading.timing_label} - {descriptor}"


def classify_swing(
    reading: ContactReading,
    *,
    pitch: PitchSpec,
    target: Location,
    batter: BatterProfile,
    strikes: int,
    difficulty: Difficulty,
    tuning: TuningConfig,
    rng: Random,
) -> PitchOutcome:
    """Return the outcome of a swing described by ``reading``.

    At most one draw is taken from ``rng``, and only for balls that are
    neither barreled nor solidly struck.
    """

    location = effective_location(pitch, target)
    offset = reading.timing_offset_ms
    ev = reading.exit_velocity_mph
    la = reading.launch_angle_deg
    pci = reading.pci_distance
    abs_timing = abs(offset)

    def whiff(descriptor: str) -> PitchOutcome:
        return PitchOutcome.whiff(
            location,
            timing_offset_ms=offset,
            timing_label=_label(reading, descriptor),
            pitch_type=pitch.pitch_type,
        )

    def batted(kind: OutcomeType, descriptor: str, *, exit_velo: float = ev, distance=None):
        return PitchOutcome.batted(
            kind,
            location,
            timing_offset_ms=offset,
            timing_label=_label(reading, descriptor),
            exit_velocity_mph=exit_velo,
            launch_angle_deg=la,
            distance_ft=distance,
            pitch_type=pitch.pitch_type,
        )

    # 1. Reticle nowhere near the ball.
    if pci >= tuning.scaled("miss_threshold", difficulty):
        return whiff("WHIFF")

    # 2. Timing outside every exit-velocity band.
    if ev == 0:
        window_key = "foul_window_two_strike_ms" if strikes >= 2 else "foul_window_ms"
        if abs_timing < tuning.scaled(window_key, difficulty):
            floor = tuning.get("foul_ev_floor")
            return batted(OutcomeType.FOUL, "FOUL TIP", exit_velo=floor)
        return whiff("WHIFF")

    # 3. Clipped the ball off the edge of the bat.
    if pci >= tuning.scaled("foul_threshold", difficulty) and not reading.perfect:
        return batted(OutcomeType.FOUL, "FOUL", exit_velo=max(ev, tuning.get("foul_ev_floor")))

    # 4. Ball in play.
    solid_span = tuning.scaled("t_solid_ms", difficulty)
    timing_scale = max(
        tuning.get("barrel_min_timing_scale"),
        1.0 - abs_timing / solid_span if solid_span > 0 else 0.0,
    )
    barrel = (
        ev >= tuning.get("barrel_ev")
        and tuning.get("barrel_la_min") <= la <= tuning.get("barrel_la_max")
        and pci < tuning.get("barrel_pci_band") * timing_scale
    )
    solid = (
        ev >= tuning.get("solid_ev")
        and tuning.get("solid_la_min") <= la <= tuning.get("solid_la_max")
        and pci < tuning.get("solid_pci_band")
    )

    if barrel and ev >= tuning.get("homerun_ev"):
        return batted(
            OutcomeType.HOMERUN,
            "BARREL",
            distance=homerun_distance_ft(ev, la, tuning),
        )

    carry = carry_distance_ft(ev, la, tuning)
    fence = tuning.get("fence_distance_ft")
    if barrel or solid:
        descriptor = "BARREL" if barrel else "SOLID"
        if la > tuning.get("weak_fly_la"):
            return batted(OutcomeType.OUT, "POP UP", distance=min(carry, fence * 0.5))
        if la < tuning.get("grounder_la"):
            return batted(OutcomeType.SINGLE, descriptor, distance=min(carry, fence))
        if la > tuning.get("gap_la") and ev > tuning.get("gap_ev"):
            return batted(OutcomeType.DOUBLE, descriptor, distance=min(carry, fence))
        return batted(OutcomeType.SINGLE, descriptor, distance=min(carry, fence))

    if (
        carry > fence
        and ev > tuning.get("physics_hr_ev")
        and tuning.get("physics_hr_la_min") < la < tuning.get("physics_hr_la_max")
    ):
        return batted(OutcomeType.HOMERUN, "GONE", distance=carry)

    chance = hit_chance(ev, la, batter, tuning)
    draw = rng.random()
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("weak contact ev=%.1f la=%.1f chance=%.3f draw=%.3f", ev, la, chance, draw)
    if draw < chance:
        if ev >= tuning.get("weak_double_ev") and la > tuning.get("weak_double_la"):
            return batted(OutcomeType.DOUBLE, "BLOOP", distance=min(carry, fence))
        return batted(OutcomeType.SINGLE, "BLOOP", distance=min(carry, fence))
    return batted(OutcomeType.OUT, "WEAK", distance=min(carry, fence * 0.9))


__all__ = [
    "in_strike_zone",
    "carry_distance_ft",
    "homerun_distance_ft",
    "hit_chance",
    "classify_take",
    "classify_swing",
]
