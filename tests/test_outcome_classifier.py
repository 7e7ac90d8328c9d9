import pytest

from fastball_sim.classifier import (
    carry_distance_ft,
    classify_swing,
    classify_take,
    hit_chance,
    in_strike_zone,
)
from fastball_sim.config import TuningConfig
from fastball_sim.models import (
    BatterProfile,
    ContactReading,
    Difficulty,
    Location,
    OutcomeStatus,
    OutcomeType,
    PitchSpec,
    PitchType,
)
from tests.util.mock_random import MockRandom


PITCH = PitchSpec(PitchType.FOUR_SEAM, 96.0)
TARGET = Location(0.0, 1.1)


def _reading(ev, la, pci, timing=0.0, label="PERFECT"):
    return ContactReading(
        exit_velocity_mph=ev,
        launch_angle_deg=la,
        pci_distance=pci,
        timing_offset_ms=timing,
        timing_label=label,
        perfect=abs(timing) < 12.0,
    )


def _classify(reading, strikes=0, difficulty=Difficulty.PRO, values=(), batter=None):
    rng = MockRandom(values)
    outcome = classify_swing(
        reading,
        pitch=PITCH,
        target=TARGET,
        batter=batter or BatterProfile(),
        strikes=strikes,
        difficulty=difficulty,
        tuning=TuningConfig(),
        rng=rng,
    )
    return outcome.validate(), rng


def test_strike_zone_edges_count_as_strikes() -> None:
    tuning = TuningConfig()
    assert in_strike_zone(Location(0.35, 0.6), tuning)
    assert in_strike_zone(Location(-0.35, 1.6), tuning)
    assert not in_strike_zone(Location(0.36, 1.0), tuning)
    assert not in_strike_zone(Location(0.0, 1.61), tuning)


def test_take_uses_location_after_break() -> None:
    tuning = TuningConfig()
    breaking = PitchSpec(PitchType.SLIDER, 86.0, movement=Location(0.1, 0.0))
    strike = classify_take(PITCH, Location(0.3, 1.0), tuning)
    ball = classify_take(breaking, Location(0.3, 1.0), tuning)
    assert (strike.status, strike.type) == (OutcomeStatus.STRIKE, OutcomeType.STRIKE)
    assert (ball.status, ball.type) == (OutcomeStatus.BALL, OutcomeType.BALL)
    assert ball.pitch_location.x == pytest.approx(0.4)
    assert not ball.swung


def test_reticle_far_from_ball_is_a_whiff() -> None:
    outcome, _ = _classify(_reading(110.0, 20.0, 0.45))
    assert (outcome.status, outcome.type) == (OutcomeStatus.MISS, OutcomeType.STRIKE)
    assert outcome.timing_label == "PERFECT - WHIFF"
    assert outcome.exit_velocity_mph is None


def test_miss_threshold_widens_on_rookie() -> None:
    outcome, _ = _classify(_reading(110.0, 20.0, 0.5, timing=20.0), difficulty=Difficulty.ROOKIE)
    assert outcome.type is OutcomeType.FOUL


def test_foul_tip_window_narrows_with_two_strikes() -> None:
    reading = _reading(0.0, 15.0, 0.1, timing=120.0, label="120MS LATE")
    tip, _ = _classify(reading, strikes=1)
    assert tip.type is OutcomeType.FOUL
    assert tip.exit_velocity_mph == pytest.approx(55.0)
    assert tip.timing_label == "120MS LATE - FOUL TIP"
    whiff, _ = _classify(reading, strikes=2)
    assert (whiff.status, whiff.type) == (OutcomeStatus.MISS, OutcomeType.STRIKE)


def test_edge_of_bat_is_foul_unless_perfect() -> None:
    foul, _ = _classify(_reading(100.0, 20.0, 0.3, timing=20.0, label="20MS LATE"))
    assert foul.type is OutcomeType.FOUL
    assert foul.exit_velocity_mph == pytest.approx(100.0)
    weak_foul, _ = _classify(_reading(45.0, 20.0, 0.35, timing=20.0))
    assert weak_foul.exit_velocity_mph == pytest.approx(55.0)
    perfect, _ = _classify(_reading(100.0, 20.0, 0.3), values=(0.99,))
    assert perfect.type is not OutcomeType.FOUL


def test_barrel_home_run() -> None:
    outcome, rng = _classify(_reading(105.0, 25.0, 0.0))
    assert (outcome.status, outcome.type) == (OutcomeStatus.HIT, OutcomeType.HOMERUN)
    assert outcome.distance_ft == pytest.approx(420.0)
    assert outcome.timing_label == "PERFECT - BARREL"


def test_solid_contact_gap_double_and_grounder_single() -> None:
    double, _ = _classify(_reading(98.0, 25.0, 0.2))
    assert double.type is OutcomeType.DOUBLE
    assert double.timing_label == "PERFECT - SOLID"
    single, _ = _classify(_reading(90.0, 7.0, 0.2))
    assert single.type is OutcomeType.SINGLE
    line, _ = _classify(_reading(94.0, 25.0, 0.2))
    assert line.type is OutcomeType.SINGLE


def test_barrel_needs_tighter_placement_when_timing_is_off() -> None:
    # 50ms late halves the barrel band, so 0.1 misses it and the ball is only solid.
    outcome, _ = _classify(_reading(105.0, 25.0, 0.1, timing=50.0, label="50MS LATE"))
    assert outcome.type is OutcomeType.DOUBLE


def test_long_carry_leaves_the_park() -> None:
    tuning = TuningConfig()
    assert carry_distance_ft(100.0, 30.0, tuning) > tuning.get("fence_distance_ft")
    outcome, rng = _classify(_reading(100.0, 30.0, 0.28, timing=20.0, label="20MS LATE"))
    assert outcome.type is OutcomeType.HOMERUN
    assert outcome.timing_label == "20MS LATE - GONE"


def test_weak_contact_rolls_for_a_hit() -> None:
    reading = _reading(80.0, 10.0, 0.28, timing=40.0, label="40MS LATE")
    bloop, rng = _classify(reading, values=(0.1,))
    assert bloop.type is OutcomeType.SINGLE
    assert bloop.timing_label == "40MS LATE - BLOOP"
    assert rng.values == []
    out, _ = _classify(reading, values=(0.5,))
    assert (out.status, out.type) == (OutcomeStatus.MISS, OutcomeType.OUT)
    assert out.exit_velocity_mph == pytest.approx(80.0)


def test_hard_bloop_becomes_a_double() -> None:
    outcome, _ = _classify(_reading(93.0, 16.0, 0.28, timing=40.0), values=(0.0,))
    assert outcome.type is OutcomeType.DOUBLE


def test_hit_chance_shape() -> None:
    tuning = TuningConfig()
    batter = BatterProfile()
    chances = [hit_chance(ev, 10.0, batter, tuning) for ev in (50, 65, 75, 85, 95)]
    assert chances == sorted(chances)
    assert hit_chance(95.0, 51.0, batter, tuning) == 0.0
    assert hit_chance(95.0, 40.0, batter, tuning) == pytest.approx(
        hit_chance(95.0, 30.0, batter, tuning) * 0.5
    )
    better = BatterProfile(speed=0, contact=5, power=0)
    assert hit_chance(80.0, 10.0, better, tuning) > hit_chance(80.0, 10.0, batter, tuning)


def test_hit_chance_band_edges_take_the_lower_band() -> None:
    tuning = TuningConfig()
    batter = BatterProfile(speed=5, contact=0, power=0)
    assert hit_chance(60.0, 10.0, batter, tuning) == pytest.approx(0.04)
    assert hit_chance(60.001, 10.0, batter, tuning) == pytest.approx(0.10)
    assert hit_chance(70.0, 10.0, batter, tuning) == pytest.approx(0.10)
    assert hit_chance(80.0, 10.0, batter, tuning) == pytest.approx(0.18)
    assert hit_chance(88.0, 10.0, batter, tuning) == pytest.approx(0.28)
    assert hit_chance(88.001, 10.0, batter, tuning) == pytest.approx(0.38)
    assert hit_chance(95.0, 50.0, batter, tuning) == 0.0
    assert hit_chance(95.0, 35.0, batter, tuning) == pytest.approx(0.19)


def test_carry_is_zero_for_grounders() -> None:
    assert carry_distance_ft(110.0, -5.0, TuningConfig()) == 0.0
