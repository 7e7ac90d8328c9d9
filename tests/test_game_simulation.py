import random

from fastball_sim.config import GameRules
from fastball_sim.engine import simulate_game
from fastball_sim.models import Difficulty
from fastball_sim.session import GameSession
from utils.session_store import GAME_STATE_KEY, MemoryStore


def _play(seed, difficulty=Difficulty.PRO):
    store = MemoryStore()
    session = GameSession(store, difficulty=difficulty, rules=GameRules.regular(), rng=random.Random(seed))
    summaries = []
    session.add_game_over_listener(summaries.append)
    session.start_game()
    result = simulate_game(session)
    return session, store, summaries, result


def test_headless_game_runs_to_completion() -> None:
    session, store, summaries, result = _play(11)
    assert session.state.game_over
    assert result.summary is not None
    assert summaries == [result.summary]
    assert store.get(GAME_STATE_KEY) is None
    assert result.summary.player_score != result.summary.computer_score
    assert result.summary.hits <= result.summary.at_bats
    assert len(result.pitch_log) > 0
    assert {"type", "inning", "is_top", "count"} <= set(result.pitch_log[0])


def test_same_seed_replays_the_same_game() -> None:
    _, _, _, first = _play(5, Difficulty.MLB)
    _, _, _, second = _play(5, Difficulty.MLB)
    assert first.pitch_log == second.pitch_log
    assert first.summary == second.summary
