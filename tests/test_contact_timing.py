import pytest

from fastball_sim.config import TuningConfig
from fastball_sim.contact import (
    TimingWindows,
    effective_pci_distance,
    evaluate_swing,
    timing_exit_velocity,
    timing_label,
    timing_offset_ms,
)
from fastball_sim.models import BatterProfile, Difficulty, Location, PitchSpec, PitchType
from tests.util.mock_random import MockRandom


PITCH = PitchSpec(PitchType.FOUR_SEAM, 95.0)
TARGET = Location(0.0, 1.1)


def _swing(pci=TARGET, offset_s=0.0, batter=None, difficulty=Difficulty.PRO, values=(0.5,)):
    return evaluate_swing(
        pitch=PITCH,
        target=TARGET,
        pci=pci,
        swing_time=10.0 + offset_s,
        plate_arrival=10.0,
        batter=batter or BatterProfile(speed=0, contact=0, power=0),
        difficulty=difficulty,
        tuning=TuningConfig(),
        rng=MockRandom(values),
    )


def test_timing_offset_sign_and_latency() -> None:
    tuning = TuningConfig()
    assert timing_offset_ms(10.010, 10.0, tuning) == pytest.approx(10.0)
    assert timing_offset_ms(9.980, 10.0, tuning) == pytest.approx(-20.0)
    delayed = TuningConfig.from_overrides(overrides={"reaction_latency_ms": 15})
    assert timing_offset_ms(10.0, 10.0, delayed) == pytest.approx(15.0)


def test_timing_labels() -> None:
    windows = TimingWindows.for_difficulty(Difficulty.PRO, TuningConfig())
    assert timing_label(5.0, windows) == "PERFECT"
    assert timing_label(-23.4, windows) == "23MS EARLY"
    assert timing_label(40.0, windows) == "40MS LATE"


def test_exit_velocity_bands_descend() -> None:
    tuning = TuningConfig()
    windows = TimingWindows.for_difficulty(Difficulty.PRO, tuning)
    assert timing_exit_velocity(0.0, windows, tuning) == pytest.approx(122.0)
    assert timing_exit_velocity(-6.0, windows, tuning) == pytest.approx(114.0)
    # A breakpoint belongs to the worse band.
    assert timing_exit_velocity(12.0, windows, tuning) == pytest.approx(110.0)
    assert timing_exit_velocity(99.9, windows, tuning) == pytest.approx(70.05)
    assert timing_exit_velocity(100.0, windows, tuning) == 0.0
    assert timing_exit_velocity(-250.0, windows, tuning) == 0.0


def test_difficulty_scales_windows() -> None:
    tuning = TuningConfig()
    mlb = TimingWindows.for_difficulty(Difficulty.MLB, tuning)
    rookie = TimingWindows.for_difficulty(Difficulty.ROOKIE, tuning)
    assert mlb.perfect == pytest.approx(9.0)
    assert rookie.solid == pytest.approx(150.0)
    assert timing_label(10.0, mlb) == "10MS LATE"
    assert timing_exit_velocity(120.0, rookie, tuning) > 0


def test_perfect_swing_on_the_ball() -> None:
    reading = _swing()
    assert reading.perfect
    assert reading.timing_label == "PERFECT"
    assert reading.pci_distance == pytest.approx(0.0)
    assert reading.exit_velocity_mph == pytest.approx(122.0)
    assert reading.launch_angle_deg == pytest.approx(12.0)


def test_power_bonus_only_inside_great_window() -> None:
    strong = BatterProfile(speed=0, contact=0, power=5)
    assert _swing(batter=strong).exit_velocity_mph == pytest.approx(122.0 * 1.1)
    good = _swing(offset_s=0.045, batter=strong)
    assert good.exit_velocity_mph == pytest.approx(100.0 - 12.0 * 0.5)


def test_swinging_under_raises_launch_angle_and_costs_velocity() -> None:
    reading = _swing(pci=Location(0.0, 0.9))
    assert reading.pci_distance == pytest.approx(0.2)
    assert reading.exit_velocity_mph == pytest.approx(122.0 * (1 - 0.35 * 0.5))
    assert reading.launch_angle_deg == pytest.approx(24.0)
    over = _swing(pci=Location(0.0, 1.3))
    assert over.launch_angle_deg == pytest.approx(0.0)


def test_launch_angle_jitter_and_clamp() -> None:
    high = _swing(pci=Location(0.0, 0.2), values=(1.0,))
    assert high.launch_angle_deg == pytest.approx(80.0)
    low = _swing(pci=Location(0.0, 2.0), values=(0.0,))
    assert low.launch_angle_deg == pytest.approx(-20.0)


def test_contact_skill_shrinks_placement_error() -> None:
    tuning = TuningConfig()
    pci = Location(0.0, 1.3)
    raw = effective_pci_distance(pci, TARGET, BatterProfile(speed=0, contact=0, power=5), tuning)
    skilled = effective_pci_distance(pci, TARGET, BatterProfile(speed=0, contact=5, power=0), tuning)
    assert raw == pytest.approx(0.2)
    assert skilled == pytest.approx(0.2 * 0.7)


def test_reticle_is_clamped_before_measuring() -> None:
    reading = _swing(pci=Location(3.0, 1.1))
    assert reading.pci_distance == pytest.approx(0.8)


def test_swing_outside_solid_window_has_no_exit_velocity() -> None:
    reading = _swing(offset_s=0.150)
    assert reading.exit_velocity_mph == 0.0
    assert reading.timing_label == "150MS LATE"
    assert not reading.perfect
