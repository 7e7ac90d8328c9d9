from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable

from .models import OutcomeType, PitchOutcome
from .state import GameState


@dataclass(frozen=True)
class BattingLine:
    """Hits, at-bats and home runs for the user's team."""

    hits: int = 0
    at_bats: int = 0
    home_runs: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {"hits": self.hits, "atBats": self.at_bats, "homeRuns": self.home_runs}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BattingLine":
        return cls(
            hits=int(data.get("hits", 0)),
            at_bats=int(data.get("atBats", 0)),
            home_runs=int(data.get("homeRuns", 0)),
        )


@dataclass(frozen=True)
class PlayerStats(BattingLine):
    """Career totals kept across games."""

    tournament_wins: int = 0

    def to_dict(self) -> Dict[str, int]:
        data = super().to_dict()
        data["tournamentWins"] = self.tournament_wins
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlayerStats":
        line = BattingLine.from_dict(data)
        return cls(
            hits=line.hits,
            at_bats=line.at_bats,
            home_runs=line.home_runs,
            tournament_wins=int(data.get("tournamentWins", 0)),
        )


def ends_at_bat(before: GameState, outcome: PitchOutcome) -> bool:
    """Return ``True`` when ``outcome`` finishes an official at-bat.

    Hits, batted outs and strikeouts count; walks and pitches that leave the
    plate appearance open do not.
    """

    if outcome.is_hit or outcome.type is OutcomeType.OUT:
        return True
    return outcome.type is OutcomeType.STRIKE and before.strikes == 2


def credit_batting(line: BattingLine, before: GameState, outcome: PitchOutcome) -> BattingLine:
    """Return ``line`` updated for ``outcome`` if the user was batting."""

    if before.game_over or not before.user_batting:
        return line
    hits = line.hits + (1 if outcome.is_hit else 0)
    home_runs = line.home_runs + (1 if outcome.type is OutcomeType.HOMERUN else 0)
    at_bats = line.at_bats + (1 if ends_at_bat(before, outcome) else 0)
    return replace(line, hits=hits, at_bats=at_bats, home_runs=home_runs)


@dataclass(frozen=True)
class GameSummary:
    """End-of-game record handed to tournament listeners."""

    player_score: int
    computer_score: int
    hits: int
    at_bats: int
    home_runs: int

    @property
    def user_won(self) -> bool:
        return self.player_score > self.computer_score

    @classmethod
    def from_game(cls, state: GameState, match: BattingLine) -> "GameSummary":
        return cls(
            player_score=state.score.player,
            computer_score=state.score.computer,
            hits=match.hits,
            at_bats=match.at_bats,
            home_runs=match.home_runs,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "playerScore": self.player_score,
            "computerScore": self.computer_score,
            "hits": self.hits,
            "atBats": self.at_bats,
            "homeRuns": self.home_runs,
        }


def summarize_pitch_log(pitch_log: Iterable[Dict[str, Any]]) -> Dict[str, Dict[str, int]]:
    """Count outcome types per batting side from a simulated pitch log."""

    totals: Dict[str, Dict[str, int]] = {}
    for entry in pitch_log:
        side = "player" if entry.get("is_top") else "computer"
        bucket = totals.setdefault(side, {t.value: 0 for t in OutcomeType})
        kind = entry.get("type")
        if kind in bucket:
            bucket[kind] += 1
    return totals


__all__ = [
    "BattingLine",
    "PlayerStats",
    "ends_at_bat",
    "credit_batting",
    "GameSummary",
    "summarize_pitch_log",
]
