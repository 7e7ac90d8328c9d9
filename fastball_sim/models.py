from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from utils.exceptions import InvalidOutcomeError, InvalidProfileError


Vector3 = Tuple[float, float, float]

SKILL_MIN = 0
SKILL_MAX = 5
SKILL_BUDGET = 5


class PitchType(Enum):
    FOUR_SEAM = "4-SEAM"
    SLIDER = "SLIDER"
    CURVEBALL = "CURVEBALL"
    CHANGEUP = "CHANGEUP"


class Handedness(Enum):
    LEFT = "LEFT"
    RIGHT = "RIGHT"

    @property
    def side(self) -> int:
        """Return ``1`` for right handers and ``-1`` for left handers."""
        return 1 if self is Handedness.RIGHT else -1


class Difficulty(Enum):
    """Skill level; fixed for the duration of a game."""

    ROOKIE = "ROOKIE"
    PRO = "PRO"
    MLB = "MLB"


class OutcomeStatus(Enum):
    BALL = "ball"
    STRIKE = "strike"
    FOUL = "foul"
    MISS = "miss"
    HIT = "hit"


class OutcomeType(Enum):
    BALL = "BALL"
    STRIKE = "STRIKE"
    FOUL = "FOUL"
    OUT = "OUT"
    SINGLE = "SINGLE"
    DOUBLE = "DOUBLE"
    TRIPLE = "TRIPLE"
    HOMERUN = "HOMERUN"

    @property
    def is_hit(self) -> bool:
        return self in HIT_TYPES


HIT_TYPES = frozenset(
    {OutcomeType.SINGLE, OutcomeType.DOUBLE, OutcomeType.TRIPLE, OutcomeType.HOMERUN}
)

# Legal status -> type pairings for a pitch outcome.
VALID_PAIRINGS: Dict[OutcomeStatus, frozenset] = {
    OutcomeStatus.BALL: frozenset({OutcomeType.BALL}),
    OutcomeStatus.STRIKE: frozenset({OutcomeType.STRIKE}),
    OutcomeStatus.FOUL: frozenset({OutcomeType.FOUL}),
    OutcomeStatus.MISS: frozenset({OutcomeType.STRIKE, OutcomeType.OUT}),
    OutcomeStatus.HIT: HIT_TYPES,
}


@dataclass(frozen=True)
class Location:
    """A point in plate-relative coordinates (``x`` lateral, ``y`` height)."""

    x: float = 0.0
    y: float = 0.0

    def offset(self, other: "Location") -> "Location":
        return Location(self.x + other.x, self.y + other.y)

    def distance_to(self, other: "Location") -> float:
        return ((self.x - other.x) ** 2 + (self.y - other.y) ** 2) ** 0.5

    def clamped(self, x_range: Tuple[float, float], y_range: Tuple[float, float]) -> "Location":
        return Location(
            max(x_range[0], min(x_range[1], self.x)),
            max(y_range[0], min(y_range[1], self.y)),
        )

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Location":
        return cls(float(data["x"]), float(data["y"]))


@dataclass(frozen=True)
class PitchSpec:
    """A pitch as chosen by the pitcher; immutable once thrown."""

    pitch_type: PitchType
    speed_mph: float
    color: str = "#ffffff"
    movement: Location = field(default_factory=Location)

    def __post_init__(self) -> None:
        if self.speed_mph <= 0:
            raise ValueError(f"Pitch speed must be positive, got {self.speed_mph}")


@dataclass(frozen=True)
class BatterProfile:
    """Batter skill points and handedness; read-only during play."""

    speed: int = 1
    contact: int = 2
    power: int = 2
    handedness: Handedness = Handedness.RIGHT

    def __post_init__(self) -> None:
        for name in ("speed", "contact", "power"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise InvalidProfileError(f"{name} must be an integer, got {value!r}")
            if not SKILL_MIN <= value <= SKILL_MAX:
                raise InvalidProfileError(
                    f"{name} must be between {SKILL_MIN} and {SKILL_MAX}, got {value}"
                )

    @property
    def total_points(self) -> int:
        return self.speed + self.contact + self.power

    def to_dict(self) -> Dict[str, Any]:
        return {
            "speed": self.speed,
            "contact": self.contact,
            "power": self.power,
            "handedness": self.handedness.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BatterProfile":
        return cls(
            speed=int(data["speed"]),
            contact=int(data["contact"]),
            power=int(data["power"]),
            handedness=Handedness(data.get("handedness", Handedness.RIGHT.value)),
        )


def create_team_profile(
    speed: int,
    contact: int,
    power: int,
    handedness: Handedness = Handedness.RIGHT,
    *,
    budget: int = SKILL_BUDGET,
) -> BatterProfile:
    """Return a validated profile for a newly created team.

    Team creation requires every skill point to be spent: the three skills
    must add up to exactly ``budget``.
    """

    profile = BatterProfile(speed=speed, contact=contact, power=power, handedness=handedness)
    if profile.total_points != budget:
        raise InvalidProfileError(
            f"Skill points must total {budget}, got {profile.total_points}"
        )
    return profile


@dataclass(frozen=True)
class ContactReading:
    """Timing and placement quality of a swing, before classification."""

    exit_velocity_mph: float
    launch_angle_deg: float
    pci_distance: float
    timing_offset_ms: float
    timing_label: str
    perfect: bool = False


@dataclass(frozen=True)
class PitchOutcome:
    """The single result produced for a pitch.

    ``type`` is the discriminant.  Called balls and strikes carry only the
    pitch location; whiffs add the timing fields; fouls, outs and hits also
    carry exit velocity and launch angle.  Use the constructors below rather
    than populating fields by hand.
    """

    status: OutcomeStatus
    type: OutcomeType
    pitch_location: Location
    timing_offset_ms: Optional[float] = None
    timing_label: Optional[str] = None
    exit_velocity_mph: Optional[float] = None
    launch_angle_deg: Optional[float] = None
    distance_ft: Optional[float] = None
    pitch_type: Optional[PitchType] = None

    # ------------------------------------------------------------------
    # Variant constructors
    # ------------------------------------------------------------------
    @classmethod
    def called_ball(cls, location: Location, pitch_type: PitchType | None = None) -> "PitchOutcome":
        return cls(OutcomeStatus.BALL, OutcomeType.BALL, location, pitch_type=pitch_type)

    @classmethod
    def called_strike(cls, location: Location, pitch_type: PitchType | None = None) -> "PitchOutcome":
        return cls(OutcomeStatus.STRIKE, OutcomeType.STRIKE, location, pitch_type=pitch_type)

    @classmethod
    def whiff(
        cls,
        location: Location,
        *,
        timing_offset_ms: float,
        timing_label: str,
        pitch_type: PitchType | None = None,
    ) -> "PitchOutcome":
        return cls(
            OutcomeStatus.MISS,
            OutcomeType.STRIKE,
            location,
            timing_offset_ms=timing_offset_ms,
            timing_label=timing_label,
            pitch_type=pitch_type,
        )

    @classmethod
    def batted(
        cls,
        outcome_type: OutcomeType,
        location: Location,
        *,
        timing_offset_ms: float,
        timing_label: str,
        exit_velocity_mph: float,
        launch_angle_deg: float,
        distance_ft: float | None = None,
        pitch_type: PitchType | None = None,
    ) -> "PitchOutcome":
        """Return a foul, out or hit outcome for a ball the bat touched."""

        if outcome_type is OutcomeType.FOUL:
            status = OutcomeStatus.FOUL
        elif outcome_type is OutcomeType.OUT:
            status = OutcomeStatus.MISS
        else:
            status = OutcomeStatus.HIT
        return cls(
            status,
            outcome_type,
            location,
            timing_offset_ms=timing_offset_ms,
            timing_label=timing_label,
            exit_velocity_mph=exit_velocity_mph,
            launch_angle_deg=launch_angle_deg,
            distance_ft=distance_ft,
            pitch_type=pitch_type,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def is_hit(self) -> bool:
        return self.status is OutcomeStatus.HIT

    @property
    def swung(self) -> bool:
        return self.timing_offset_ms is not None

    @property
    def in_flight(self) -> bool:
        """True when the ball leaves the bat and needs flight physics."""
        return self.is_hit or self.type in (OutcomeType.OUT, OutcomeType.FOUL)

    def validate(self) -> "PitchOutcome":
        """Raise :class:`InvalidOutcomeError` unless the outcome is well formed."""

        problems = []
        if not isinstance(self.status, OutcomeStatus):
            problems.append(f"unknown status {self.status!r}")
        if not isinstance(self.type, OutcomeType):
            problems.append(f"unknown type {self.type!r}")
        if problems:
            raise InvalidOutcomeError(problems, self)

        if self.type not in VALID_PAIRINGS[self.status]:
            problems.append(f"status {self.status.name} cannot carry type {self.type.name}")
        if self.in_flight:
            if self.exit_velocity_mph is None or self.launch_angle_deg is None:
                problems.append(f"{self.type.name} requires exit velocity and launch angle")
            if self.timing_offset_ms is None:
                problems.append(f"{self.type.name} requires a timing offset")
        elif self.exit_velocity_mph is not None or self.launch_angle_deg is not None:
            problems.append(f"{self.type.name} cannot carry batted-ball data")
        if self.status in (OutcomeStatus.BALL, OutcomeStatus.STRIKE) and self.swung:
            problems.append("a called pitch cannot carry swing timing")
        if problems:
            raise InvalidOutcomeError(problems, self)
        return self

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "status": self.status.value,
            "type": self.type.value,
            "pitchLocation": self.pitch_location.to_dict(),
        }
        optional = {
            "timingOffset": self.timing_offset_ms,
            "timingLabel": self.timing_label,
            "exitVelocity": self.exit_velocity_mph,
            "launchAngle": self.launch_angle_deg,
            "distance": self.distance_ft,
            "pitchType": self.pitch_type.value if self.pitch_type else None,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        return data


__all__ = [
    "Vector3",
    "PitchType",
    "Handedness",
    "Difficulty",
    "OutcomeStatus",
    "OutcomeType",
    "HIT_TYPES",
    "VALID_PAIRINGS",
    "Location",
    "PitchSpec",
    "BatterProfile",
    "create_team_profile",
    "ContactReading",
    "PitchOutcome",
    "SKILL_BUDGET",
]
