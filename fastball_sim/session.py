from __future__ import annotations

import logging
from dataclasses import replace
from random import Random
from typing import Any, Callable, Dict, List, Optional

from utils.exceptions import InvalidOutcomeError
from utils.session_store import GAME_STATE_KEY, STATS_KEY, TEAM_KEY, SessionStore

from .config import GameRules
from .models import BatterProfile, Difficulty, PitchOutcome, create_team_profile
from .outputs import BattingLine, GameSummary, PlayerStats, credit_batting
from .state import GameState, apply_outcome, new_game, simulate_half_inning

logger = logging.getLogger(__name__)

GameOverListener = Callable[[GameSummary], None]

DEFAULT_OPPONENT = BatterProfile(speed=2, contact=2, power=1)


class GameSession:
    """Own the live game, the user's team and persistent stats.

    Every reducer step is written back to ``store``.  Loading tolerates a
    missing or malformed store by falling back to a fresh game, the default
    team and empty stats.
    """

    def __init__(
        self,
        store: Any | None = None,
        *,
        difficulty: Difficulty = Difficulty.PRO,
        rules: GameRules | None = None,
        rng: Random | None = None,
        opponent: BatterProfile | None = None,
    ) -> None:
        self.store = store if store is not None else SessionStore()
        self.difficulty = difficulty
        self.rules = rules or GameRules.regular()
        self.rng = rng or Random()
        self.opponent = opponent or DEFAULT_OPPONENT
        self.team = BatterProfile()
        self.stats = PlayerStats()
        self.match = BattingLine()
        self.state = new_game(self.rng)
        self._listeners: List[GameOverListener] = []
        self._reported = False

    # ------------------------------------------------------------------
    # Persistence helpers
    # ------------------------------------------------------------------
    @classmethod
    def load(
        cls,
        store: Any | None = None,
        *,
        rng: Random | None = None,
        opponent: BatterProfile | None = None,
    ) -> "GameSession":
        """Return a session restored from ``store``.

        A saved in-progress game brings back its difficulty and inning
        limit; otherwise a new game at PRO difficulty is started.
        """

        session = cls(store, rng=rng, opponent=opponent)
        session.team = session._load_team()
        session.stats = session._load_stats()
        session._load_game()
        return session

    def _load_team(self) -> BatterProfile:
        data = self.store.get(TEAM_KEY)
        if data is None:
            return BatterProfile()
        try:
            saved = BatterProfile.from_dict(data)
            # Saved teams are held to the same rules as newly created ones.
            return create_team_profile(
                saved.speed, saved.contact, saved.power, saved.handedness
            )
        except (TypeError, ValueError, KeyError) as exc:
            logger.warning("Discarding saved team %r: %s", data, exc)
            return BatterProfile()

    def _load_stats(self) -> PlayerStats:
        data = self.store.get(STATS_KEY)
        if data is None:
            return PlayerStats()
        try:
            return PlayerStats.from_dict(data)
        except (AttributeError, TypeError, ValueError) as exc:
            logger.warning("Discarding saved stats %r: %s", data, exc)
            return PlayerStats()

    def _load_game(self) -> None:
        data = self.store.get(GAME_STATE_KEY)
        if data is None:
            return
        try:
            state = GameState.from_dict(data)
            difficulty = Difficulty(data.get("difficulty", Difficulty.PRO.value))
            rules = GameRules(final_inning=int(data.get("finalInning", self.rules.final_inning)))
            match = BattingLine.from_dict(data.get("matchStats", {}))
        except (AttributeError, TypeError, ValueError, KeyError) as exc:
            logger.warning("Discarding saved game state: %s", exc)
            self.store.remove(GAME_STATE_KEY)
            return
        if state.game_over:
            self.store.remove(GAME_STATE_KEY)
            return
        self.state = state
        self.difficulty = difficulty
        self.rules = rules
        self.match = match

    def _game_entry(self) -> Dict[str, Any]:
        entry = self.state.to_dict()
        entry["difficulty"] = self.difficulty.value
        entry["finalInning"] = self.rules.final_inning
        entry["matchStats"] = self.match.to_dict()
        return entry

    def save(self) -> None:
        """Persist team, stats and (while it is running) the game."""

        entries: Dict[str, Any] = {
            TEAM_KEY: self.team.to_dict(),
            STATS_KEY: self.stats.to_dict(),
        }
        if not self.state.game_over:
            entries[GAME_STATE_KEY] = self._game_entry()
        self.store.update(entries)
        if self.state.game_over:
            self.store.remove(GAME_STATE_KEY)

    # ------------------------------------------------------------------
    # Game lifecycle
    # ------------------------------------------------------------------
    def start_game(
        self,
        difficulty: Difficulty | None = None,
        rules: GameRules | None = None,
        opponent: BatterProfile | None = None,
    ) -> GameState:
        """Begin a fresh game, discarding any game in progress."""

        if difficulty is not None:
            self.difficulty = difficulty
        if rules is not None:
            self.rules = rules
        if opponent is not None:
            self.opponent = opponent
        self.state = new_game(self.rng)
        self.match = BattingLine()
        self._reported = False
        logger.info(
            "New %d-inning game at %s difficulty",
            self.rules.final_inning,
            self.difficulty.value,
        )
        self.save()
        return self.state

    def create_team(self, speed: int, contact: int, power: int, handedness=None) -> BatterProfile:
        """Validate and store a newly created team profile."""

        kwargs = {} if handedness is None else {"handedness": handedness}
        self.team = create_team_profile(speed, contact, power, **kwargs)
        self.store.set(TEAM_KEY, self.team.to_dict())
        return self.team

    def batting_profile(self) -> BatterProfile:
        """Return the profile of the team currently at the plate."""

        return self.team if self.state.user_batting else self.opponent

    def add_game_over_listener(self, listener: GameOverListener) -> None:
        self._listeners.append(listener)

    def apply(self, outcome: PitchOutcome) -> GameState:
        """Apply ``outcome`` to the live game and persist the result.

        Raises :class:`InvalidOutcomeError` for ill-formed outcomes without
        changing any state.
        """

        before = self.state
        try:
            after = apply_outcome(before, outcome, self.rules, self.rng)
        except InvalidOutcomeError:
            logger.error("Rejected outcome %r", outcome)
            raise
        if after is before:
            return after

        self.match = credit_batting(self.match, before, outcome)
        self.stats = credit_batting(self.stats, before, outcome)
        self.state = after
        self.save()
        if after.game_over:
            self._report_game_over()
        return after

    def simulate_half(self) -> GameState:
        """Skip the rest of the current half inning and persist the result.

        No batting stats are credited for a simulated half.
        """

        before = self.state
        after = simulate_half_inning(before, self.batting_profile(), self.rules, self.rng)
        if after is before:
            return after

        self.state = after
        self.save()
        if after.game_over:
            self._report_game_over()
        return after

    def record_tournament_win(self) -> PlayerStats:
        self.stats = replace(self.stats, tournament_wins=self.stats.tournament_wins + 1)
        self.store.set(STATS_KEY, self.stats.to_dict())
        return self.stats

    def summary(self) -> Optional[GameSummary]:
        if not self.state.game_over:
            return None
        return GameSummary.from_game(self.state, self.match)

    def _report_game_over(self) -> None:
        if self._reported:
            return
        self._reported = True
        summary = GameSummary.from_game(self.state, self.match)
        logger.info(
            "Final: player %d, computer %d (%d-for-%d, %d HR)",
            summary.player_score,
            summary.computer_score,
            summary.hits,
            summary.at_bats,
            summary.home_runs,
        )
        for listener in list(self._listeners):
            listener(summary)


__all__ = ["GameSession", "GameOverListener", "DEFAULT_OPPONENT"]
