import random

import pytest

from fastball_sim.classifier import in_strike_zone
from fastball_sim.config import TuningConfig
from fastball_sim.models import Difficulty, Handedness, Location, OutcomeType, PitchOutcome, PitchType
from fastball_sim.pitcher_ai import (
    ARSENAL,
    PitchHistory,
    build_pitch,
    objective_weights_by_count,
    pitch_type_weights,
    record_pitch,
    select_pitch,
)
from fastball_sim.state import GameState
from fastball_sim.trajectory import effective_location
from tests.util.mock_random import MockRandom


def test_target_compensates_for_break() -> None:
    rng = MockRandom([0.0, 0.0, 0.0, 0.5, 0.5])
    pitch, target = select_pitch(Difficulty.PRO, GameState(), [], rng)
    assert pitch.pitch_type is PitchType.FOUR_SEAM
    assert pitch.speed_mph == pytest.approx(94.0)
    assert target.y == pytest.approx(1.05)
    crossing = effective_location(pitch, target)
    assert crossing.x == pytest.approx(0.0)
    assert crossing.y == pytest.approx(1.1)
    assert rng.values == []


def test_two_strike_chase_lands_outside_the_zone() -> None:
    state = GameState(strikes=2, pitcher_handedness=Handedness.LEFT)
    pitch, target = select_pitch(Difficulty.PRO, state, [], MockRandom([0.0, 0.0, 0.99, 0.5, 0.5]))
    crossing = effective_location(pitch, target)
    assert crossing.x == pytest.approx(0.5)
    assert not in_strike_zone(crossing, TuningConfig())


def test_left_handers_mirror_horizontal_break() -> None:
    righty = build_pitch(PitchType.SLIDER, Handedness.RIGHT, Difficulty.PRO, MockRandom([1.0]))
    lefty = build_pitch(PitchType.SLIDER, Handedness.LEFT, Difficulty.MLB, MockRandom([1.0]))
    assert righty.movement == Location(0.25, -0.1)
    assert lefty.movement == Location(-0.25, -0.1)
    assert righty.speed_mph == pytest.approx(89.0)
    assert lefty.speed_mph == pytest.approx(91.0)


def test_recent_pitches_are_discouraged() -> None:
    seen = PitchHistory(PitchType.FOUR_SEAM, Location(0.0, 1.1), OutcomeType.BALL)
    weights = pitch_type_weights([seen, seen])
    assert weights[PitchType.FOUR_SEAM] == pytest.approx(ARSENAL[PitchType.FOUR_SEAM].weight * 0.35**2)
    assert weights[PitchType.CURVEBALL] == ARSENAL[PitchType.CURVEBALL].weight


def test_three_ball_counts_never_chase() -> None:
    assert objective_weights_by_count(3, 0)["chase"] == 0.0
    assert objective_weights_by_count(0, 2)["chase"] > objective_weights_by_count(0, 0)["chase"]


def test_history_resets_when_the_plate_appearance_ends() -> None:
    pitch = build_pitch(PitchType.CHANGEUP, Handedness.RIGHT, Difficulty.PRO, MockRandom([0.5]))
    target = Location(0.0, 1.0)
    ball = PitchOutcome.called_ball(Location(0.6, 1.0))
    strike = PitchOutcome.called_strike(Location(0.0, 1.0))

    history = record_pitch([], pitch, target, GameState(), ball)
    assert [h.result for h in history] == [OutcomeType.BALL]
    assert record_pitch(history, pitch, target, GameState(balls=3), ball) == []
    assert record_pitch(history, pitch, target, GameState(strikes=2), strike) == []

    for _ in range(15):
        history = record_pitch(history, pitch, target, GameState(), strike)
    assert len(history) == 10


def test_selection_is_deterministic_for_a_seed() -> None:
    state = GameState(balls=1, strikes=1)
    first = select_pitch(Difficulty.MLB, state, [], random.Random(3))
    second = select_pitch(Difficulty.MLB, state, [], random.Random(3))
    assert first == second
