"""Swing timing and contact-quality evaluation.

Turns a swing trigger plus the batter's aim into exit velocity, launch angle
and placement error.  Classification into an outcome happens separately in
:mod:`fastball_sim.classifier`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from random import Random
from typing import List, Tuple

from .config import TuningConfig
from .models import BatterProfile, ContactReading, Difficulty, Location, PitchSpec
from .trajectory import effective_location

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimingWindows:
    """Timing breakpoints in milliseconds, already scaled for difficulty."""

    perfect: float
    great: float
    good: float
    solid: float

    @classmethod
    def for_difficulty(cls, difficulty: Difficulty, tuning: TuningConfig) -> "TimingWindows":
        return cls(
            perfect=tuning.scaled("t_perfect_ms", difficulty),
            great=tuning.scaled("t_great_ms", difficulty),
            good=tuning.scaled("t_good_ms", difficulty),
            solid=tuning.scaled("t_solid_ms", difficulty),
        )

    def bands(self, tuning: TuningConfig) -> List[Tuple[float, float, float, float]]:
        """Return ``(start_ms, end_ms, ev_at_start, ev_at_end)`` per band."""

        return [
            (0.0, self.perfect, tuning.get("ev_perfect_max"), tuning.get("ev_perfect_min")),
            (self.perfect, self.great, tuning.get("ev_great_max"), tuning.get("ev_great_min")),
            (self.great, self.good, tuning.get("ev_good_max"), tuning.get("ev_good_min")),
            (self.good, self.solid, tuning.get("ev_solid_max"), tuning.get("ev_solid_min")),
        ]


def timing_offset_ms(swing_time: float, plate_arrival: float, tuning: TuningConfig) -> float:
    """Return how early (negative) or late (positive) the swing was in ms."""

    return (swing_time - plate_arrival) * 1000.0 + tuning.get("reaction_latency_ms")


def timing_label(offset_ms: float, windows: TimingWindows) -> str:
    if abs(offset_ms) < windows.perfect:
        return "PERFECT"
    direction = "LATE" if offset_ms > 0 else "EARLY"
    return f"{abs(round(offset_ms))}MS {direction}"


def timing_exit_velocity(offset_ms: float, windows: TimingWindows, tuning: TuningConfig) -> float:
    """Map ``|offset_ms|`` onto the descending exit-velocity bands.

    A value sitting exactly on a breakpoint belongs to the worse band; at or
    beyond the solid breakpoint the result is ``0`` (no ball in play).
    """

    magnitude = abs(offset_ms)
    for start, end, ev_high, ev_low in windows.bands(tuning):
        if magnitude < end:
            span = end - start
            frac = (magnitude - start) / span if span > 0 else 0.0
            return ev_high + (ev_low - ev_high) * frac
    return 0.0


def effective_pci_distance(
    pci: Location,
    pitch_location: Location,
    batter: BatterProfile,
    tuning: TuningConfig,
) -> float:
    """Return the aim error, shrunk by the batter's contact skill."""

    raw = pci.distance_to(pitch_location)
    shrink = 1.0 - batter.contact * tuning.get("contact_bonus_per_point")
    return raw * max(0.0, shrink)


def evaluate_swing(
    *,
    pitch: PitchSpec,
    target: Location,
    pci: Location,
    swing_time: float,
    plate_arrival: float,
    batter: BatterProfile,
    difficulty: Difficulty,
    tuning: TuningConfig,
    rng: Random,
) -> ContactReading:
    """Return the :class:`ContactReading` for a committed swing.

    Two draws are consumed from ``rng`` on every call (exit-velocity jitter
    and launch-angle jitter) so the random stream stays aligned regardless of
    the result.
    """

    windows = TimingWindows.for_difficulty(difficulty, tuning)
    offset = timing_offset_ms(swing_time, plate_arrival, tuning)
    location = effective_location(pitch, target)
    aim = pci.clamped(
        (tuning.get("pci_min_x"), tuning.get("pci_max_x")),
        (tuning.get("pci_min_y"), tuning.get("pci_max_y")),
    )
    distance = effective_pci_distance(aim, location, batter, tuning)

    ev_noise = rng.gauss(0.0, tuning.get("ev_noise_sd"))
    la_draw = rng.random()

    ev = timing_exit_velocity(offset, windows, tuning)
    if ev > 0:
        if abs(offset) < windows.great:
            ev *= 1.0 + batter.power * tuning.get("power_bonus_per_point")
        radius = tuning.get("pci_radius")
        miss_frac = min(distance / radius, 1.0) if radius > 0 else 1.0
        ev *= 1.0 - tuning.get("pci_ev_penalty") * miss_frac
        ev = max(tuning.get("ev_floor"), ev + ev_noise)

    radius = tuning.get("pci_radius")
    precision_loss = min(distance / radius, 1.0) if radius > 0 else 1.0
    spread = tuning.get("la_spread_base") + tuning.get("la_spread_pci") * precision_loss
    # Swinging under the ball (reticle below it) lifts the launch angle.
    vertical = location.y - aim.y
    la = tuning.get("base_launch_angle") + vertical * tuning.get("la_vertical_scale")
    la += (la_draw * 2.0 - 1.0) * spread
    la = max(tuning.get("la_min"), min(tuning.get("la_max"), la))

    reading = ContactReading(
        exit_velocity_mph=ev,
        launch_angle_deg=la,
        pci_distance=distance,
        timing_offset_ms=offset,
        timing_label=timing_label(offset, windows),
        perfect=abs(offset) < windows.perfect,
    )
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "swing %s: offset=%.1fms pci=%.3f ev=%.1f la=%.1f",
            pitch.pitch_type.value,
            offset,
            distance,
            ev,
            la,
        )
    return reading


__all__ = [
    "TimingWindows",
    "timing_offset_ms",
    "timing_label",
    "timing_exit_velocity",
    "effective_pci_distance",
    "evaluate_swing",
]
