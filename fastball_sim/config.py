from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional
import json
import logging
import os

from .models import Difficulty

logger = logging.getLogger(__name__)

TUNING_PATH_ENV = "FASTBALL_TUNING_PATH"


DEFAULT_TUNING: Dict[str, float] = {
    # Field geometry (metres) and units
    "release_x": 0.0,
    "release_y": 1.8,
    "release_z": -18.44,
    "gravity": -9.81,
    "mph_to_ms": 0.44704,
    "ft_per_m": 3.28084,
    "max_progress": 1.2,
    "contact_window_z": 0.8,
    "plate_cross_z": 1.3,
    # Strike zone and plate coverage reticle
    "zone_half_width": 0.35,
    "zone_bottom": 0.6,
    "zone_top": 1.6,
    "pci_min_x": -0.8,
    "pci_max_x": 0.8,
    "pci_min_y": 0.2,
    "pci_max_y": 2.0,
    # Swing timing (ms, before difficulty scaling)
    "reaction_latency_ms": 0.0,
    "t_perfect_ms": 12.0,
    "t_great_ms": 30.0,
    "t_good_ms": 60.0,
    "t_solid_ms": 100.0,
    "rookie_window_scale": 1.5,
    "pro_window_scale": 1.0,
    "mlb_window_scale": 0.75,
    # Exit velocity bands (mph), best timing first
    "ev_perfect_max": 122.0,
    "ev_perfect_min": 106.0,
    "ev_great_max": 110.0,
    "ev_great_min": 98.0,
    "ev_good_max": 100.0,
    "ev_good_min": 88.0,
    "ev_solid_max": 90.0,
    "ev_solid_min": 70.0,
    "ev_noise_sd": 1.5,
    "ev_floor": 40.0,
    "power_bonus_per_point": 0.02,
    "contact_bonus_per_point": 0.06,
    "pci_radius": 0.4,
    "pci_ev_penalty": 0.35,
    # Launch angle (degrees)
    "base_launch_angle": 12.0,
    "la_vertical_scale": 60.0,
    "la_spread_base": 6.0,
    "la_spread_pci": 10.0,
    "la_min": -20.0,
    "la_max": 80.0,
    # Outcome classification
    "miss_threshold": 0.45,
    "foul_threshold": 0.30,
    "foul_window_ms": 130.0,
    "foul_window_two_strike_ms": 110.0,
    "foul_ev_floor": 55.0,
    "barrel_ev": 95.0,
    "barrel_la_min": 18.0,
    "barrel_la_max": 38.0,
    "barrel_pci_band": 0.15,
    "barrel_min_timing_scale": 0.25,
    "homerun_ev": 102.0,
    "solid_ev": 88.0,
    "solid_la_min": 6.0,
    "solid_la_max": 40.0,
    "solid_pci_band": 0.25,
    "weak_fly_la": 40.0,
    "grounder_la": 8.0,
    "gap_la": 20.0,
    "gap_ev": 95.0,
    "hr_distance_ev_scale": 4.0,
    "hr_distance_la_penalty": 2.0,
    "hr_optimal_la": 25.0,
    "hit_chance_ev60": 0.04,
    "hit_chance_ev70": 0.10,
    "hit_chance_ev80": 0.18,
    "hit_chance_ev88": 0.28,
    "hit_chance_ev_max": 0.38,
    "contact_hit_bonus_per_point": 0.015,
    "hit_chance_zero_la": 50.0,
    "hit_chance_penalty_la": 35.0,
    "hit_chance_high_la_scale": 0.5,
    "physics_hr_ev": 95.0,
    "physics_hr_la_min": 18.0,
    "physics_hr_la_max": 60.0,
    "weak_double_ev": 92.0,
    "weak_double_la": 15.0,
    "fence_distance_ft": 400.0,
    "carry_scale": 0.75,
    # Batted-ball flight
    "spray_timing_ms": 150.0,
    "spray_max_deg": 51.43,
    "foul_spray_deg": 88.0,
    "foul_settle_s": 0.7,
    "fly_out_fence_fraction": 0.92,
    "drag_k": 0.0035,
    "vertical_drag_weight": 0.85,
    "restitution": 0.45,
    "ground_friction": 0.8,
    "ground_epsilon": 0.036,
    "settle_speed": 0.6,
    "flight_timeout_s": 8.0,
    "max_substep_s": 1.0 / 120.0,
    # Pitch cadence (seconds)
    "windup_s": 1.2,
    "result_hold_s": 1.5,
}


def _read_overrides(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as fh:
            loaded = json.load(fh)
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Ignoring tuning overrides in %s: %s", path, exc)
        return {}
    return loaded if isinstance(loaded, dict) else {}


@dataclass
class TuningConfig:
    """Container for every numeric tuning knob used by the engine."""

    values: Dict[str, float] = field(default_factory=lambda: dict(DEFAULT_TUNING))

    @classmethod
    def from_overrides(
        cls,
        *,
        overrides: Optional[Dict[str, Any]] = None,
        overrides_path: Optional[Path] = None,
    ) -> "TuningConfig":
        """Return defaults updated from ``overrides_path`` then ``overrides``.

        Keys that are not tuning knobs and values that are not numbers are
        skipped; an unreadable file contributes nothing.
        """

        merged: Dict[str, Any] = {}
        if overrides_path:
            merged.update(_read_overrides(Path(overrides_path)))
        merged.update(overrides or {})

        values = dict(DEFAULT_TUNING)
        for key, raw in merged.items():
            if key not in values:
                continue
            try:
                values[key] = float(raw)
            except (TypeError, ValueError):
                logger.warning("Ignoring non-numeric tuning value %s=%r", key, raw)
        return cls(values=values)

    def get(self, key: str, default: Optional[float] = None) -> float:
        if key in self.values:
            return float(self.values[key])
        return 0.0 if default is None else float(default)

    def window_scale(self, difficulty: Difficulty) -> float:
        """Return the timing/placement window multiplier for ``difficulty``.

        Values above ``1`` widen every window (easier), below ``1`` narrow them.
        """

        return self.get(f"{difficulty.value.lower()}_window_scale", 1.0)

    def scaled(self, key: str, difficulty: Difficulty) -> float:
        return self.get(key) * self.window_scale(difficulty)


@dataclass(frozen=True)
class GameRules:
    """Rule-level settings fixed for the length of one game.

    ``final_inning`` is the last scheduled inning; play continues past it
    only while the score is tied.  The single-advancement probabilities model
    how aggressively runners take the extra base.  With ``walk_as_single`` a
    walk moves runners exactly like a single; otherwise only forced runners
    advance.
    """

    final_inning: int = 3
    single_runner_on_second_scores: float = 0.7
    single_runner_on_first_to_third: float = 0.3
    walk_as_single: bool = True

    def __post_init__(self) -> None:
        if self.final_inning < 1:
            raise ValueError(f"final_inning must be at least 1, got {self.final_inning}")

    @classmethod
    def regular(cls) -> "GameRules":
        return cls(final_inning=3)

    @classmethod
    def tournament(cls) -> "GameRules":
        return cls(final_inning=9)


def load_tuning(
    overrides: Optional[Dict[str, Any]] = None, overrides_path: Optional[Path] = None
) -> TuningConfig:
    """Load a :class:`TuningConfig` merging optional overrides.

    When ``overrides_path`` is omitted the ``FASTBALL_TUNING_PATH`` environment
    variable is consulted.
    """

    if overrides_path is None:
        env_path = os.getenv(TUNING_PATH_ENV)
        if env_path:
            overrides_path = Path(env_path)
    return TuningConfig.from_overrides(overrides=overrides, overrides_path=overrides_path)


__all__ = ["DEFAULT_TUNING", "TuningConfig", "GameRules", "load_tuning", "TUNING_PATH_ENV"]
