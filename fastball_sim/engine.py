"""Tick-driven pitch controller and a headless game driver.

A pitch moves through ``IDLE -> WINDUP -> PITCHING -> FLIGHT | RESULT ->
IDLE``.  The controller never reads a clock of its own: every call supplies
the current simulation time in seconds, so the same sequence of ticks and
draws always yields the same outcome.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from random import Random
from typing import Any, Dict, List, Optional, Union

from .batter_ai import plan_swing
from .classifier import classify_swing, classify_take
from .config import TuningConfig, load_tuning
from .contact import evaluate_swing
from .flight import FlightState, SettledEvent, advance, launch_flight
from .models import BatterProfile, Difficulty, Location, PitchOutcome, PitchSpec, Vector3
from .outputs import GameSummary
from .pitcher_ai import PitchHistory, record_pitch, select_pitch
from .trajectory import plate_arrival_time, position, release_point

logger = logging.getLogger(__name__)


class PitchPhase(Enum):
    IDLE = "idle"
    WINDUP = "windup"
    PITCHING = "pitching"
    FLIGHT = "flight"
    RESULT = "result"


@dataclass(frozen=True)
class PitchResolved:
    """The pitch has been decided; the outcome is not yet applied."""

    time: float
    outcome: PitchOutcome


@dataclass(frozen=True)
class ContactEvent:
    time: float
    position: Vector3
    is_hit: bool


@dataclass(frozen=True)
class OutcomeReady:
    """The outcome may now be handed to the game state reducer."""

    time: float
    outcome: PitchOutcome


PitchEvent = Union[PitchResolved, ContactEvent, SettledEvent, OutcomeReady]


class PitchController:
    """Run one pitch at a time from windup to a released outcome."""

    def __init__(
        self,
        difficulty: Difficulty = Difficulty.PRO,
        tuning: TuningConfig | None = None,
        rng: Random | None = None,
    ) -> None:
        self.difficulty = difficulty
        self.tuning = tuning or load_tuning()
        self.rng = rng or Random()
        self.phase = PitchPhase.IDLE
        self.pitch: Optional[PitchSpec] = None
        self.target = Location()
        self.batter = BatterProfile()
        self.strikes = 0
        self.pci = Location(0.0, 1.1)
        self.swing_time: Optional[float] = None
        self.outcome: Optional[PitchOutcome] = None
        self.flight: Optional[FlightState] = None
        self._pitch_start = 0.0
        self._result_until = 0.0
        self._last_tick = 0.0
        self._resolved = False
        self._released = False

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------
    def start_pitch(
        self,
        pitch: PitchSpec,
        target: Location,
        batter: BatterProfile,
        strikes: int,
        now: float,
    ) -> None:
        """Begin the windup for ``pitch``, discarding the previous pitch."""

        self.pitch = pitch
        self.target = target
        self.batter = batter
        self.strikes = strikes
        self.swing_time = None
        self.outcome = None
        self.flight = None
        self._resolved = False
        self._released = False
        self._pitch_start = now + self.tuning.get("windup_s")
        self._last_tick = now
        self.phase = PitchPhase.WINDUP

    def swing(self, timestamp: float) -> bool:
        """Record the swing trigger; only the first swing of a pitch counts."""

        if self.phase not in (PitchPhase.WINDUP, PitchPhase.PITCHING):
            return False
        if self.swing_time is not None or self._resolved:
            return False
        self.swing_time = timestamp
        return True

    def aim(self, x: float, y: float) -> Location:
        """Move the plate coverage reticle, clamped to its bounds."""

        self.pci = Location(x, y).clamped(
            (self.tuning.get("pci_min_x"), self.tuning.get("pci_max_x")),
            (self.tuning.get("pci_min_y"), self.tuning.get("pci_max_y")),
        )
        return self.pci

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def pitch_start(self) -> float:
        return self._pitch_start

    @property
    def plate_arrival_time(self) -> float:
        if self.pitch is None:
            raise RuntimeError("No pitch has been started")
        return plate_arrival_time(self.pitch, self._pitch_start, self.tuning)

    def ball_position(self, now: float) -> Vector3 | None:
        """Return where the ball should be drawn at ``now``."""

        if self.flight is not None:
            return self.flight.position
        if self.pitch is None:
            return None
        if self.phase is PitchPhase.WINDUP:
            return release_point(self.tuning)
        return position(self.pitch, self.target, now - self._pitch_start, self.tuning)

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------
    def tick(self, now: float) -> List[PitchEvent]:
        """Advance the pitch to ``now`` and return the events it produced."""

        events: List[PitchEvent] = []
        if self.phase is PitchPhase.IDLE:
            return events

        if self.phase is PitchPhase.WINDUP:
            if now < self._pitch_start:
                return events
            self.phase = PitchPhase.PITCHING

        if self.phase is PitchPhase.PITCHING:
            self._tick_pitching(now, events)
        elif self.phase is PitchPhase.FLIGHT:
            self._tick_flight(now, events)
        elif self.phase is PitchPhase.RESULT:
            if now >= self._result_until:
                self._release(now, events)
        self._last_tick = now
        return events

    def _tick_pitching(self, now: float, events: List[PitchEvent]) -> None:
        assert self.pitch is not None
        ball = position(self.pitch, self.target, now - self._pitch_start, self.tuning)
        z = ball[2]
        swung = self.swing_time is not None and self.swing_time <= now
        if swung and z > -self.tuning.get("contact_window_z"):
            self._resolve_swing(now, ball, events)
        elif z > self.tuning.get("plate_cross_z"):
            self._resolve(now, classify_take(self.pitch, self.target, self.tuning), events)

    def _resolve_swing(self, now: float, ball: Vector3, events: List[PitchEvent]) -> None:
        assert self.pitch is not None and self.swing_time is not None
        reading = evaluate_swing(
            pitch=self.pitch,
            target=self.target,
            pci=self.pci,
            swing_time=self.swing_time,
            plate_arrival=self.plate_arrival_time,
            batter=self.batter,
            difficulty=self.difficulty,
            tuning=self.tuning,
            rng=self.rng,
        )
        outcome = classify_swing(
            reading,
            pitch=self.pitch,
            target=self.target,
            batter=self.batter,
            strikes=self.strikes,
            difficulty=self.difficulty,
            tuning=self.tuning,
            rng=self.rng,
        )
        self._resolve(now, outcome, events, contact_point=ball)

    def _resolve(
        self,
        now: float,
        outcome: PitchOutcome,
        events: List[PitchEvent],
        contact_point: Vector3 | None = None,
    ) -> None:
        if self._resolved:
            return
        self._resolved = True
        self.outcome = outcome
        events.append(PitchResolved(now, outcome))
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("pitch resolved: %s", outcome.to_dict())

        if outcome.in_flight:
            point = contact_point or (outcome.pitch_location.x, outcome.pitch_location.y, 0.0)
            floor = self.tuning.get("ground_epsilon")
            point = (point[0], max(point[1], floor), point[2])
            events.append(ContactEvent(now, point, outcome.is_hit))
            self.flight = launch_flight(
                outcome, self.batter.handedness, now, self.tuning, contact_point=point
            )
            self.phase = PitchPhase.FLIGHT
        else:
            self._result_until = now + self.tuning.get("result_hold_s")
            self.phase = PitchPhase.RESULT

    def _tick_flight(self, now: float, events: List[PitchEvent]) -> None:
        self.flight, settled = advance(self.flight, now - self._last_tick, self.tuning)
        if settled is not None:
            events.append(settled)
            self._release(now, events)

    def _release(self, now: float, events: List[PitchEvent]) -> None:
        if self._released or self.outcome is None:
            return
        self._released = True
        self.phase = PitchPhase.IDLE
        events.append(OutcomeReady(now, self.outcome))


@dataclass
class SimulationResult:
    summary: Optional[GameSummary]
    pitch_log: List[Dict[str, Any]] = field(default_factory=list)


def play_pitch(
    controller: PitchController,
    pitch: PitchSpec,
    target: Location,
    batter: BatterProfile,
    strikes: int,
    clock: float,
    tick_seconds: float,
    rng: Random,
) -> tuple[PitchOutcome, float]:
    """Throw one pitch with the computer batting and return the outcome.

    Returns the released outcome and the clock time at release.
    """

    controller.start_pitch(pitch, target, batter, strikes, clock)
    plan = plan_swing(
        controller.difficulty,
        pitch,
        target,
        controller.plate_arrival_time,
        controller.tuning,
        rng,
    )
    controller.aim(plan.pci.x, plan.pci.y)

    limit = clock + controller.tuning.get("windup_s") + controller.tuning.get(
        "flight_timeout_s"
    ) + controller.tuning.get("result_hold_s") + 5.0
    while clock < limit:
        clock += tick_seconds
        if plan.swing_time is not None and plan.swing_time <= clock:
            controller.swing(plan.swing_time)
        for event in controller.tick(clock):
            if isinstance(event, OutcomeReady):
                return event.outcome, clock
    raise RuntimeError("Pitch did not resolve within the time limit")


def simulate_game(
    session,
    rng: Random | None = None,
    *,
    tuning: TuningConfig | None = None,
    tick_seconds: float = 1.0 / 60.0,
    max_pitches: int = 2000,
) -> SimulationResult:
    """Play ``session``'s current game to the end with AI on both sides.

    Every released outcome goes through ``session.apply`` so persistence,
    stats and game-over listeners behave exactly as in interactive play.
    """

    rng = rng or session.rng
    controller = PitchController(session.difficulty, tuning, rng)
    history: List[PitchHistory] = []
    pitch_log: List[Dict[str, Any]] = []
    clock = 0.0

    for _ in range(max_pitches):
        before = session.state
        if before.game_over:
            break
        pitch, target = select_pitch(session.difficulty, before, history, rng)
        outcome, clock = play_pitch(
            controller,
            pitch,
            target,
            session.batting_profile(),
            before.strikes,
            clock,
            tick_seconds,
            rng,
        )
        session.apply(outcome)
        history = record_pitch(history, pitch, target, before, outcome)
        entry = outcome.to_dict()
        entry.update(
            inning=before.inning,
            is_top=before.is_top,
            count=f"{before.balls}-{before.strikes}",
            outs=before.outs,
            speed=pitch.speed_mph,
        )
        pitch_log.append(entry)

    if not session.state.game_over:
        logger.warning("Stopped after %d pitches without finishing the game", max_pitches)

    return SimulationResult(session.summary(), pitch_log)


__all__ = [
    "PitchPhase",
    "PitchResolved",
    "ContactEvent",
    "OutcomeReady",
    "PitchController",
    "SimulationResult",
    "play_pitch",
    "simulate_game",
]
