"""Game state snapshots and the pitch-outcome reducer.

The user's team always bats in the top half of an inning and its runs are
recorded as ``score.player``; the computer bats in the bottom half.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from random import Random
from typing import Any, Dict

from .baserunning import EMPTY_BASES, Runners, advance_runners, walk_runners
from .config import GameRules
from .models import BatterProfile, Handedness, OutcomeType, PitchOutcome

logger = logging.getLogger(__name__)

SIMULATED_RUNS_PER_POWER = 0.3


@dataclass(frozen=True)
class Score:
    player: int = 0
    computer: int = 0

    def add(self, runs: int, is_top: bool) -> "Score":
        if not runs:
            return self
        if is_top:
            return Score(self.player + runs, self.computer)
        return Score(self.player, self.computer + runs)

    @property
    def tied(self) -> bool:
        return self.player == self.computer


@dataclass(frozen=True)
class GameState:
    """Immutable snapshot of the game between pitches."""

    inning: int = 1
    is_top: bool = True
    outs: int = 0
    balls: int = 0
    strikes: int = 0
    score: Score = Score()
    runners: Runners = EMPTY_BASES
    game_over: bool = False
    pitcher_handedness: Handedness = Handedness.RIGHT

    def __post_init__(self) -> None:
        if self.inning < 1:
            raise ValueError(f"inning must be at least 1, got {self.inning}")
        if not 0 <= self.outs <= 2:
            raise ValueError(f"outs must be between 0 and 2, got {self.outs}")
        if not 0 <= self.balls <= 3:
            raise ValueError(f"balls must be between 0 and 3, got {self.balls}")
        if not 0 <= self.strikes <= 2:
            raise ValueError(f"strikes must be between 0 and 2, got {self.strikes}")
        if len(self.runners) != 3:
            raise ValueError(f"runners must describe three bases, got {self.runners!r}")

    @property
    def user_batting(self) -> bool:
        return self.is_top

    def to_dict(self) -> Dict[str, Any]:
        return {
            "inning": self.inning,
            "isTop": self.is_top,
            "outs": self.outs,
            "balls": self.balls,
            "strikes": self.strikes,
            "score": {"player": self.score.player, "computer": self.score.computer},
            "runners": list(self.runners),
            "gameOver": self.game_over,
            "pitcherHandedness": self.pitcher_handedness.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameState":
        """Rebuild a snapshot saved by :meth:`to_dict`.

        Raises ``KeyError``, ``TypeError`` or ``ValueError`` when ``data`` is
        malformed so callers can fall back to a fresh game.
        """

        score = data["score"]
        runners = tuple(bool(r) for r in data["runners"])
        return cls(
            inning=int(data["inning"]),
            is_top=bool(data["isTop"]),
            outs=int(data["outs"]),
            balls=int(data["balls"]),
            strikes=int(data["strikes"]),
            score=Score(int(score["player"]), int(score["computer"])),
            runners=runners,  # type: ignore[arg-type]
            game_over=bool(data.get("gameOver", False)),
            pitcher_handedness=Handedness(
                data.get("pitcherHandedness", Handedness.RIGHT.value)
            ),
        )


def random_handedness(rng: Random) -> Handedness:
    return Handedness.RIGHT if rng.random() > 0.5 else Handedness.LEFT


def new_game(rng: Random | None = None) -> GameState:
    """Return the opening state with a randomly handed starting pitcher."""

    if rng is None:
        return GameState()
    return GameState(pitcher_handedness=random_handedness(rng))


def apply_outcome(
    state: GameState,
    outcome: PitchOutcome,
    rules: GameRules | None = None,
    rng: Random | None = None,
) -> GameState:
    """Return the state that follows ``outcome``.

    ``outcome`` is validated before anything else and an
    :class:`~utils.exceptions.InvalidOutcomeError` propagates unchanged.
    ``state`` is never mutated.  ``rng`` is drawn from for single and walk
    advancement and for the pitcher handedness of a new half inning.
    """

    outcome.validate()
    if state.game_over:
        return state
    if rules is None:
        rules = GameRules()
    if rng is None:
        rng = Random()

    outs = state.outs
    balls = state.balls
    strikes = state.strikes
    runners = state.runners
    runs = 0
    kind = outcome.type

    if kind is OutcomeType.BALL:
        balls += 1
        if balls == 4:
            if rules.walk_as_single:
                runners, runs = advance_runners(runners, OutcomeType.SINGLE, rng, rules)
            else:
                runners, runs = walk_runners(runners)
            balls = strikes = 0
    elif kind is OutcomeType.STRIKE or kind is OutcomeType.FOUL:
        if kind is OutcomeType.STRIKE or strikes < 2:
            strikes += 1
        if strikes == 3:
            outs += 1
            balls = strikes = 0
    elif kind is OutcomeType.OUT:
        outs += 1
        balls = strikes = 0
    else:
        runners, runs = advance_runners(runners, kind, rng, rules)
        balls = strikes = 0

    score = state.score.add(runs, state.is_top)
    final = state.inning >= rules.final_inning

    if not state.is_top and final and score.computer > score.player:
        logger.info(
            "Walk-off in inning %d: computer %d, player %d",
            state.inning,
            score.computer,
            score.player,
        )
        return replace(
            state,
            outs=min(outs, 2),
            balls=0,
            strikes=0,
            score=score,
            runners=EMPTY_BASES,
            game_over=True,
        )

    if outs < 3:
        return replace(
            state, outs=outs, balls=balls, strikes=strikes, score=score, runners=runners
        )
    return _end_half(state, score, final, rng)


def _end_half(state: GameState, score: Score, final: bool, rng: Random) -> GameState:
    """Close the half inning of ``state``: finish the game or flip sides."""

    if final and (
        (state.is_top and score.computer > score.player)
        or (not state.is_top and not score.tied)
    ):
        logger.info(
            "Game over after %d innings: player %d, computer %d",
            state.inning,
            score.player,
            score.computer,
        )
        return replace(
            state,
            outs=0,
            balls=0,
            strikes=0,
            score=score,
            runners=EMPTY_BASES,
            game_over=True,
        )

    is_top = not state.is_top
    inning = state.inning + 1 if is_top else state.inning
    handedness = random_handedness(rng)
    logger.info(
        "Side retired; %s of inning %d (%s-handed pitcher)",
        "top" if is_top else "bottom",
        inning,
        handedness.value.lower(),
    )
    return GameState(
        inning=inning,
        is_top=is_top,
        score=score,
        pitcher_handedness=handedness,
    )


def simulated_runs(batter: BatterProfile, rng: Random) -> int:
    """Return the runs a skipped half inning is worth: 0 or 1 plus power."""

    runs = int(rng.random() * 2) + batter.power * SIMULATED_RUNS_PER_POWER
    # Halves round up.
    return int(math.floor(runs + 0.5))


def simulate_half_inning(
    state: GameState,
    batter: BatterProfile,
    rules: GameRules | None = None,
    rng: Random | None = None,
) -> GameState:
    """Skip the rest of the current half inning with a quick score estimate.

    The batting side is credited with :func:`simulated_runs` for ``batter``
    and the half ends as if the third out had been made, so the same game
    over checks and side change apply.  A finished game is returned as is.
    """

    if state.game_over:
        return state
    if rules is None:
        rules = GameRules()
    if rng is None:
        rng = Random()

    runs = simulated_runs(batter, rng)
    score = state.score.add(runs, state.is_top)
    logger.info(
        "Simulated %s of inning %d: %d run(s)",
        "top" if state.is_top else "bottom",
        state.inning,
        runs,
    )
    return _end_half(state, score, state.inning >= rules.final_inning, rng)


__all__ = [
    "Score",
    "GameState",
    "new_game",
    "apply_outcome",
    "random_handedness",
    "simulated_runs",
    "simulate_half_inning",
]
