import json

import pytest

from fastball_sim.config import DEFAULT_TUNING, TUNING_PATH_ENV, GameRules, TuningConfig, load_tuning
from fastball_sim.models import Difficulty


def test_defaults_match_table() -> None:
    tuning = TuningConfig()
    assert tuning.get("release_z") == pytest.approx(-18.44)
    assert tuning.get("t_perfect_ms") == pytest.approx(12.0)
    assert tuning.get("missing_key", 3.5) == pytest.approx(3.5)
    assert tuning.values is not DEFAULT_TUNING


def test_overrides_merge_file_then_mapping(tmp_path) -> None:
    path = tmp_path / "tuning.json"
    path.write_text(
        json.dumps({"ev_floor": 45, "miss_threshold": 0.5, "unknown": 1, "drag_k": "heavy"}),
        encoding="utf-8",
    )
    tuning = TuningConfig.from_overrides(overrides={"miss_threshold": 0.4}, overrides_path=path)
    assert tuning.get("ev_floor") == pytest.approx(45.0)
    assert tuning.get("miss_threshold") == pytest.approx(0.4)
    assert tuning.get("drag_k") == pytest.approx(DEFAULT_TUNING["drag_k"])
    assert "unknown" not in tuning.values


def test_unreadable_override_file_is_ignored(tmp_path, caplog) -> None:
    path = tmp_path / "broken.json"
    path.write_text("[", encoding="utf-8")
    assert TuningConfig.from_overrides(overrides_path=path).values == DEFAULT_TUNING
    assert "Ignoring tuning overrides" in caplog.text
    assert TuningConfig.from_overrides(overrides_path=tmp_path / "missing.json").values == DEFAULT_TUNING


def test_environment_variable_points_at_overrides(tmp_path, monkeypatch) -> None:
    path = tmp_path / "env.json"
    path.write_text(json.dumps({"windup_s": 0.5}), encoding="utf-8")
    monkeypatch.setenv(TUNING_PATH_ENV, str(path))
    assert load_tuning().get("windup_s") == pytest.approx(0.5)
    monkeypatch.delenv(TUNING_PATH_ENV)
    assert load_tuning().get("windup_s") == pytest.approx(1.2)


def test_difficulty_window_scaling() -> None:
    tuning = TuningConfig()
    assert tuning.window_scale(Difficulty.ROOKIE) == pytest.approx(1.5)
    assert tuning.window_scale(Difficulty.PRO) == pytest.approx(1.0)
    assert tuning.window_scale(Difficulty.MLB) == pytest.approx(0.75)
    assert tuning.scaled("foul_window_ms", Difficulty.MLB) == pytest.approx(97.5)


def test_game_rules_presets() -> None:
    assert GameRules.regular().final_inning == 3
    assert GameRules.tournament().final_inning == 9
    assert GameRules().single_runner_on_second_scores == pytest.approx(0.7)
    assert GameRules.regular().walk_as_single
    with pytest.raises(ValueError):
        GameRules(final_inning=0)
