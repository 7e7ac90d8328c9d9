"""Batted-ball flight with drag, gravity and ground bounces.

Velocities are metres per second and share the pitch coordinate frame, so a
ball hit back up the middle travels toward negative ``z``.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
import math
from typing import Optional, Tuple

from .classifier import carry_distance_ft
from .config import TuningConfig
from .models import Handedness, OutcomeType, PitchOutcome, Vector3


@dataclass(frozen=True)
class FlightState:
    position: Vector3
    velocity: Vector3
    start_time: float
    elapsed: float = 0.0
    bounces: int = 0
    settled: bool = False
    settle_after: Optional[float] = None


@dataclass(frozen=True)
class SettledEvent:
    """Emitted once when a batted ball stops moving meaningfully."""

    time: float
    position: Vector3
    reason: str


def spray_angle(timing_offset_ms: float, handedness: Handedness, tuning: TuningConfig) -> float:
    """Return the horizontal spray angle in radians.

    Early swings pull the ball and late swings push it the other way; the
    direction is mirrored for left-handed batters.
    """

    max_angle = math.radians(tuning.get("spray_max_deg"))
    return (timing_offset_ms / tuning.get("spray_timing_ms")) * max_angle * handedness.side


def launch_flight(
    outcome: PitchOutcome,
    handedness: Handedness,
    start_time: float,
    tuning: TuningConfig,
    contact_point: Vector3 | None = None,
) -> FlightState:
    """Return the initial :class:`FlightState` for a ball the bat touched."""

    ev = outcome.exit_velocity_mph or 0.0
    la = outcome.launch_angle_deg or 0.0
    timing = outcome.timing_offset_ms or 0.0

    spray = spray_angle(timing, handedness, tuning)
    settle_after = None
    if outcome.type is OutcomeType.FOUL:
        direction = math.copysign(1.0, spray) if spray != 0 else float(handedness.side)
        spray = direction * math.radians(tuning.get("foul_spray_deg"))
        settle_after = tuning.get("foul_settle_s")

    speed = ev * tuning.get("mph_to_ms")
    if outcome.type is OutcomeType.OUT:
        # Keep caught fly balls visibly short of the wall.
        limit = tuning.get("fence_distance_ft") * tuning.get("fly_out_fence_fraction")
        carry = carry_distance_ft(ev, la, tuning)
        if carry > limit > 0:
            speed *= math.sqrt(limit / carry)

    angle = math.radians(la)
    horizontal = speed * math.cos(angle)
    velocity = (
        math.sin(spray) * horizontal,
        speed * math.sin(angle),
        -math.cos(spray) * horizontal,
    )
    if contact_point is None:
        loc = outcome.pitch_location
        contact_point = (loc.x, loc.y, 0.0)
    return FlightState(
        position=contact_point,
        velocity=velocity,
        start_time=start_time,
        settle_after=settle_after,
    )


def _step(state: FlightState, dt: float, tuning: TuningConfig) -> FlightState:
    vx, vy, vz = state.velocity
    x, y, z = state.position

    speed = math.sqrt(vx * vx + vy * vy + vz * vz)
    drag = tuning.get("drag_k") * speed * dt
    vx -= drag * vx
    vz -= drag * vz
    vy -= drag * tuning.get("vertical_drag_weight") * vy

    vy += tuning.get("gravity") * dt
    x += vx * dt
    y += vy * dt
    z += vz * dt

    bounces = state.bounces
    settled = False
    floor = tuning.get("ground_epsilon")
    if y < floor:
        y = floor
        vy = -vy * tuning.get("restitution")
        friction = tuning.get("ground_friction")
        vx *= friction
        vz *= friction
        bounces += 1
        if abs(vy) < tuning.get("settle_speed"):
            settled = True
            vx = vy = vz = 0.0

    return replace(
        state,
        position=(x, y, z),
        velocity=(vx, vy, vz),
        elapsed=state.elapsed + dt,
        bounces=bounces,
        settled=settled,
    )


def advance(
    state: FlightState | None,
    dt: float,
    tuning: TuningConfig,
) -> Tuple[FlightState | None, SettledEvent | None]:
    """Advance ``state`` by ``dt`` seconds.

    Returns the new state and a :class:`SettledEvent` on the call during
    which the ball settles.  Settled or missing states are returned untouched.
    """

    if state is None or state.settled or dt <= 0:
        return state, None

    max_step = tuning.get("max_substep_s") or dt
    timeout = tuning.get("flight_timeout_s")
    remaining = dt
    while remaining > 1e-12:
        step = min(max_step, remaining)
        state = _step(state, step, tuning)
        remaining -= step
        if state.settled:
            return state, SettledEvent(state.start_time + state.elapsed, state.position, "settled")
        if state.settle_after is not None and state.elapsed >= state.settle_after:
            state = replace(state, settled=True)
            return state, SettledEvent(state.start_time + state.elapsed, state.position, "foul")
        if state.elapsed >= timeout:
            state = replace(state, settled=True)
            return state, SettledEvent(state.start_time + state.elapsed, state.position, "timeout")
    return state, None


__all__ = ["FlightState", "SettledEvent", "spray_angle", "launch_flight", "advance"]
