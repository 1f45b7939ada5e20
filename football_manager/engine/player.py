"""
Player model and attribute generation.

A player carries 24 detailed sub-attributes; the six summary ratings shown to
the manager are always derived from them, never stored independently.
"""

import math
from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from typing import Dict, Optional

import numpy as np

from . import constants as C
from .rng import ensure_rng, new_id, pick, randint


class Position(str, Enum):
    """
    Squad positions.

    Position Responsibilities:
    - GK: Shot stopping and handling, rated on reflexes/handling
    - DEF: Marking, tackling, aerial duels
    - MID: Passing range, vision, box-to-box running
    - ATT: Finishing, movement, shot power
    """
    GK = "GK"
    DEF = "DEF"
    MID = "MID"
    ATT = "ATT"


# Squad mix used when no position is requested
POSITION_WEIGHTS = {
    Position.GK: 0.10,
    Position.DEF: 0.35,
    Position.MID: 0.35,
    Position.ATT: 0.20,
}

# Additive deltas applied on top of the centred draw, per outfield position
POSITION_ADJUSTMENTS: Dict[Position, Dict[str, int]] = {
    Position.DEF: {
        "marking": 10, "standing_tackle": 10, "sliding_tackle": 10, "interceptions": 10,
        "strength": 10, "heading": 10,
        "finishing": -10, "dribbling": -10,
    },
    Position.MID: {
        "short_passing": 10, "long_passing": 10, "vision": 10, "stamina": 10,
    },
    Position.ATT: {
        "finishing": 10, "positioning": 10, "shot_power": 10,
        "standing_tackle": -10, "sliding_tackle": -10, "marking": -10,
    },
}

GOALKEEPING_ATTRIBUTES = ("reflexes", "handling")

# Summary rating -> detailed attributes it averages
SUMMARY_SOURCES: Dict[str, tuple] = {
    "pace": ("acceleration", "sprint_speed"),
    "shooting": ("finishing", "shot_power", "long_shots"),
    "passing": ("short_passing", "long_passing", "crossing", "vision"),
    "dribbling": ("dribbling", "ball_control", "agility"),
    "defense": ("marking", "standing_tackle", "interceptions"),
    "physical": ("strength", "stamina", "balance"),
}


def _clamp_attribute(value: float) -> int:
    return int(np.clip(value, C.MIN_ATTRIBUTE, C.MAX_ATTRIBUTE))


@dataclass
class DetailedStats:
    """Detailed sub-attributes, each 10-99."""
    # Physical
    acceleration: int = 50
    sprint_speed: int = 50
    agility: int = 50
    balance: int = 50
    stamina: int = 50
    strength: int = 50
    jumping: int = 50
    # Shooting
    finishing: int = 50
    shot_power: int = 50
    long_shots: int = 50
    heading: int = 50
    # Passing
    short_passing: int = 50
    long_passing: int = 50
    crossing: int = 50
    vision: int = 50
    # Ball skills
    dribbling: int = 50
    ball_control: int = 50
    # Defending
    marking: int = 50
    standing_tackle: int = 50
    sliding_tackle: int = 50
    interceptions: int = 50
    positioning: int = 50
    # Goalkeeping
    reflexes: int = 50
    handling: int = 50

    @classmethod
    def names(cls) -> tuple:
        return tuple(f.name for f in fields(cls))

    @classmethod
    def generate_for_position(cls,
                              position: Position,
                              overall: int,
                              rng: np.random.Generator) -> "DetailedStats":
        """
        Draw a full attribute profile centred on ``overall``.

        Outfield positions take their deltas from ``POSITION_ADJUSTMENTS``.
        Goalkeepers are handled separately: outfield attributes are redrawn low
        and the goalkeeping attributes are drawn around ``overall + 5``.

        Args:
            position: Squad position
            overall: Target overall rating
            rng: Random source

        Returns:
            DetailedStats with every value clamped to 10-99
        """
        values = {
            name: _clamp_attribute(overall + randint(rng, -C.ATTRIBUTE_NOISE, C.ATTRIBUTE_NOISE))
            for name in cls.names()
        }

        if position == Position.GK:
            low, high = C.GK_OUTFIELD_RANGE
            for name in cls.names():
                if name in GOALKEEPING_ATTRIBUTES:
                    centre = overall + C.GK_KEY_BONUS
                    values[name] = _clamp_attribute(centre + randint(rng, -C.GK_KEY_NOISE, C.GK_KEY_NOISE))
                else:
                    values[name] = randint(rng, low, high)
        else:
            for name, delta in POSITION_ADJUSTMENTS[position].items():
                values[name] = _clamp_attribute(values[name] + delta)

        return cls(**values)

    def improve(self, names) -> None:
        """Add one point to each named attribute, respecting the 99 cap."""
        for name in names:
            setattr(self, name, _clamp_attribute(getattr(self, name) + 1))


@dataclass
class SummaryStats:
    """Six headline ratings, exact means over ``SUMMARY_SOURCES``."""
    pace: float
    shooting: float
    passing: float
    dribbling: float
    defense: float
    physical: float

    @classmethod
    def from_detailed(cls, detailed: DetailedStats) -> "SummaryStats":
        averages = {}
        for stat, sources in SUMMARY_SOURCES.items():
            values = [getattr(detailed, name) for name in sources]
            averages[stat] = sum(values) / len(values)
        return cls(**averages)


@dataclass
class SeasonStats:
    """Per-season counting stats."""
    matches: int = 0
    goals: int = 0
    yellow_cards: int = 0
    red_cards: int = 0


@dataclass
class Player:
    """
    Persistent player record.

    Mutated in place by training, contracts, transfers and post-match updates.
    Match-only flags (cards, substitutions) are never stored here.
    """
    id: str
    name: str
    age: int
    position: Position
    overall: int
    potential: int
    detailed_stats: DetailedStats
    summary_stats: Optional[SummaryStats] = None
    energy: int = 100
    morale: int = 80
    is_injured: bool = False
    injury_duration: int = 0
    value: int = 0
    wage: int = 0
    contract_length: int = 1
    season_stats: SeasonStats = field(default_factory=SeasonStats)

    def __post_init__(self):
        self.position = Position(self.position)
        self.refresh_summary()

    def refresh_summary(self) -> None:
        """Recompute summary ratings from the detailed profile."""
        self.summary_stats = SummaryStats.from_detailed(self.detailed_stats)

    @property
    def market_wage(self) -> float:
        """Reference wage the market expects for this player."""
        return self.value * C.WAGE_FACTOR

    @property
    def is_available(self) -> bool:
        return not self.is_injured

    def injure(self, weeks: int) -> None:
        self.is_injured = True
        self.injury_duration = max(self.injury_duration, weeks)

    def to_dict(self) -> Dict:
        data = asdict(self)
        data["position"] = self.position.value
        return data

    @classmethod
    def from_dict(cls, data: Dict) -> "Player":
        data = dict(data)
        data["detailed_stats"] = DetailedStats(**data["detailed_stats"])
        data.pop("summary_stats", None)
        data["season_stats"] = SeasonStats(**data.get("season_stats", {}))
        return cls(**data)


def player_value(overall: int, potential: int) -> int:
    """Market value: overall^2 * 100, scaled up by remaining headroom."""
    headroom = 1 + C.VALUE_POTENTIAL_FACTOR * (potential - overall)
    return int(math.floor(overall * overall * C.VALUE_PER_RATING_SQUARED * headroom))


def random_name(rng: np.random.Generator) -> str:
    return f"{pick(rng, C.FIRST_NAMES)} {pick(rng, C.LAST_NAMES)}"


def _validate_range(min_overall: int, max_overall: int) -> None:
    if min_overall > max_overall:
        raise ValueError(f"min_overall ({min_overall}) exceeds max_overall ({max_overall})")
    for bound in (min_overall, max_overall):
        if not C.MIN_RATING <= bound <= C.MAX_RATING:
            raise ValueError(f"overall bound {bound} outside [{C.MIN_RATING}, {C.MAX_RATING}]")


def generate_player(min_overall: int = 50,
                    max_overall: int = 90,
                    position: Optional[Position] = None,
                    rng: Optional[np.random.Generator] = None) -> Player:
    """
    Generate a fully populated player.

    Args:
        min_overall: Lowest overall rating to draw
        max_overall: Highest overall rating to draw
        position: Squad position (weighted random if None)
        rng: Random source (fresh entropy if None)

    Returns:
        Player with consistent detailed and summary stats

    Raises:
        ValueError: If the rating range is malformed
    """
    _validate_range(min_overall, max_overall)
    rng = ensure_rng(rng)

    if position is None:
        positions = list(POSITION_WEIGHTS)
        weights = np.array([POSITION_WEIGHTS[p] for p in positions])
        position = positions[int(rng.choice(len(positions), p=weights / weights.sum()))]
    position = Position(position)

    age = randint(rng, *C.AGE_RANGE)
    overall = randint(rng, min_overall, max_overall)
    potential = min(C.MAX_RATING, overall + randint(rng, 0, C.POTENTIAL_HEADROOM))
    detailed = DetailedStats.generate_for_position(position, overall, rng)

    value = player_value(overall, potential)
    wage = int(math.floor(value * C.WAGE_FACTOR))

    return Player(
        id=new_id(rng),
        name=random_name(rng),
        age=age,
        position=position,
        overall=overall,
        potential=potential,
        detailed_stats=detailed,
        energy=randint(rng, *C.ENERGY_RANGE),
        morale=randint(rng, *C.MORALE_RANGE),
        value=value,
        wage=wage,
        contract_length=randint(rng, *C.CONTRACT_RANGE),
    )
