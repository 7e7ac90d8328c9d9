"""Pitch trajectory from release to the plate.

Coordinates are metres: ``x`` lateral (positive toward the first-base side),
``y`` height above the ground and ``z`` depth with the front of home plate at
``z = 0`` and the release point on the mound at a negative ``z``.
"""
from __future__ import annotations

from .config import TuningConfig
from .models import Location, PitchSpec, Vector3


def release_point(tuning: TuningConfig) -> Vector3:
    return (
        tuning.get("release_x"),
        tuning.get("release_y"),
        tuning.get("release_z"),
    )


def pitch_velocity(pitch: PitchSpec, tuning: TuningConfig) -> float:
    """Return the pitch's constant depth velocity in metres per second."""
    return pitch.speed_mph * tuning.get("mph_to_ms")


def flight_time(pitch: PitchSpec, tuning: TuningConfig) -> float:
    """Return seconds from release until the ball reaches the plate."""
    return abs(tuning.get("release_z")) / pitch_velocity(pitch, tuning)


def plate_arrival_time(pitch: PitchSpec, pitch_start: float, tuning: TuningConfig) -> float:
    """Return the absolute clock time at which the pitch crosses the plate."""
    return pitch_start + flight_time(pitch, tuning)


def effective_location(pitch: PitchSpec, target: Location) -> Location:
    """Return where the pitch actually crosses the plate after its break."""
    return target.offset(pitch.movement)


def position(
    pitch: PitchSpec,
    target: Location,
    elapsed: float,
    tuning: TuningConfig,
) -> Vector3:
    """Return the ball position ``elapsed`` seconds after release.

    Depth advances at constant speed.  The lateral break is weighted by the
    square of the pitch's progress so most of it happens late, and the height
    follows a gravity parabola whose launch velocity is solved so the ball
    arrives exactly at ``target.y + movement.y``.  Progress is capped at
    ``max_progress`` so callers may keep evaluating shortly past the plate.
    Before release the ball sits at the release point.
    """

    start_x, start_y, start_z = release_point(tuning)
    if elapsed < 0:
        return (start_x, start_y, start_z)

    velocity = pitch_velocity(pitch, tuning)
    total = abs(start_z) / velocity
    progress = min(elapsed / total, tuning.get("max_progress", 1.2))

    z = start_z + velocity * elapsed

    break_factor = progress * progress
    end_x = target.x + pitch.movement.x * break_factor
    blend = min(progress, 1.0)
    x = start_x + (end_x - start_x) * blend

    g = tuning.get("gravity")
    end_y = target.y + pitch.movement.y
    vy0 = (end_y - start_y - 0.5 * g * total * total) / total
    y = start_y + vy0 * elapsed + 0.5 * g * elapsed * elapsed

    return (x, y, z)


__all__ = [
    "release_point",
    "pitch_velocity",
    "flight_time",
    "plate_arrival_time",
    "effective_location",
    "position",
]
