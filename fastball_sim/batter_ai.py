"""Computer batter used while the user's team is in the field."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from random import Random
from typing import Dict, Optional

from .classifier import in_strike_zone
from .config import TuningConfig
from .models import Difficulty, Location, PitchSpec
from .probability import roll
from .trajectory import effective_location

logger = logging.getLogger(__name__)

# Fraction of a perfect batter's accuracy at each level.
AI_SKILL: Dict[Difficulty, float] = {
    Difficulty.ROOKIE: 0.4,
    Difficulty.PRO: 0.7,
    Difficulty.MLB: 0.9,
}

PCI_ERROR_SCALE = 0.8
TIMING_ERROR_SCALE_MS = 200.0
TAKE_STRIKE_CHANCE = 0.1
TAKE_BALL_CHANCE = 0.6


@dataclass(frozen=True)
class SwingPlan:
    """Where the computer batter aims and when (if ever) it swings."""

    pci: Location
    swing_time: Optional[float]

    @property
    def takes(self) -> bool:
        return self.swing_time is None


def plan_swing(
    difficulty: Difficulty,
    pitch: PitchSpec,
    target: Location,
    plate_arrival: float,
    tuning: TuningConfig,
    rng: Random,
) -> SwingPlan:
    """Return the computer batter's plan for an incoming pitch.

    The reticle is placed where the pitch will cross the plate, with an
    error that shrinks with skill, and the swing is timed against the true
    plate arrival with a similar error.  The take decision uses the same
    crossing point.  Four draws are consumed on every call.
    """

    skill = AI_SKILL[difficulty]
    error_x = (rng.random() - 0.5) * (1.0 - skill) * PCI_ERROR_SCALE
    error_y = (rng.random() - 0.5) * (1.0 - skill) * PCI_ERROR_SCALE
    crossing = effective_location(pitch, target)
    pci = Location(crossing.x + error_x, crossing.y + error_y).clamped(
        (tuning.get("pci_min_x"), tuning.get("pci_max_x")),
        (tuning.get("pci_min_y"), tuning.get("pci_max_y")),
    )
    timing_error_ms = (rng.random() - 0.5) * TIMING_ERROR_SCALE_MS * (1.0 - skill)

    is_strike = in_strike_zone(crossing, tuning)
    take_chance = TAKE_STRIKE_CHANCE if is_strike else TAKE_BALL_CHANCE
    if roll(take_chance, rng):
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("AI batter takes %s (strike=%s)", pitch.pitch_type.value, is_strike)
        return SwingPlan(pci, None)
    return SwingPlan(pci, plate_arrival + timing_error_ms / 1000.0)


__all__ = ["AI_SKILL", "SwingPlan", "plan_swing"]
