"""
Arcade pitch delivery and at-bat resolution engine.

A pitch is thrown along a deterministic trajectory, the batter's swing is
scored on timing and reticle placement, the result is classified into a
single outcome and folded into an immutable game state.  All randomness
comes from an injected :class:`random.Random`.
"""

from .config import GameRules, TuningConfig, load_tuning  # noqa: F401
from .engine import PitchController, PitchPhase, simulate_game  # noqa: F401
from .models import (  # noqa: F401
    BatterProfile,
    Difficulty,
    Handedness,
    Location,
    OutcomeStatus,
    OutcomeType,
    PitchOutcome,
    PitchSpec,
    PitchType,
    create_team_profile,
)
from .session import GameSession  # noqa: F401
from .state import (  # noqa: F401
    GameState,
    Score,
    apply_outcome,
    new_game,
    simulate_half_inning,
)
