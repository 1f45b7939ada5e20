"""
Team model, tactics, and roster generation.

Implements the club record (squad, tactics, finances, league record) and the
generators that build squads and the transfer market.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

import numpy as np

from . import constants as C
from .player import Player, Position, generate_player
from .rng import ensure_rng, new_id

_log = logging.getLogger("football_manager.team")


class Formation(str, Enum):
    F433 = "4-3-3"
    F442 = "4-4-2"
    F352 = "3-5-2"
    F532 = "5-3-2"


class Intensity(str, Enum):
    LOW = "Low"
    NORMAL = "Normal"
    HIGH = "High"


class Style(str, Enum):
    POSSESSION = "Possession"
    COUNTER = "Counter"
    LONG_BALL = "Long Ball"


@dataclass
class Tactics:
    """
    Team tactical setup.

    Defines the manager's high-level approach:
    - Formation (shape of the outfield lines)
    - Pressing intensity (fatigue, attacking push, card risk)
    - Play style (possession share, attack/defence balance)
    """
    formation: Formation = Formation.F433
    intensity: Intensity = Intensity.NORMAL
    style: Style = Style.POSSESSION

    def __post_init__(self):
        self.formation = Formation(self.formation)
        self.intensity = Intensity(self.intensity)
        self.style = Style(self.style)

    def to_dict(self) -> Dict[str, str]:
        return {
            "formation": self.formation.value,
            "intensity": self.intensity.value,
            "style": self.style.value,
        }


@dataclass(frozen=True)
class TacticalModifiers:
    """Multipliers and offsets derived once per team from its tactics."""
    fatigue: float = 1.0
    attack: float = 0.0
    defense: float = 0.0
    cards: float = 1.0

    @classmethod
    def from_tactics(cls, tactics: Tactics) -> "TacticalModifiers":
        fatigue, attack, defense, cards = 1.0, 0.0, 0.0, 1.0

        if tactics.intensity == Intensity.HIGH:
            fatigue, attack, cards = 1.5, attack + 0.05, 1.5
        elif tactics.intensity == Intensity.LOW:
            fatigue, attack, cards = 0.7, attack - 0.05, 0.5

        if tactics.style == Style.POSSESSION:
            defense += 0.05
            attack -= 0.02
        elif tactics.style == Style.COUNTER:
            defense -= 0.05
            attack += 0.05

        return cls(fatigue=fatigue, attack=attack, defense=defense, cards=cards)


@dataclass
class Team:
    """
    Football club with squad, tactics, finances and league record.

    Manages:
    - Squad of up to 30 players with unique ids
    - Tactical setup used by the match engine
    - Budget and stadium level
    - Cumulative league record (points = 3*wins + draws)
    """
    id: str
    name: str
    players: List[Player] = field(default_factory=list)
    tactics: Tactics = field(default_factory=Tactics)
    budget: int = C.STARTING_BUDGET
    stadium_level: int = C.STARTING_STADIUM_LEVEL
    wins: int = 0
    draws: int = 0
    losses: int = 0
    points: int = 0
    goal_diff: int = 0
    primary_color: str = C.TEAM_COLORS[0]
    secondary_color: str = C.TEAM_COLORS[1]

    def get_player(self, player_id: str) -> Optional[Player]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def available_players(self) -> List[Player]:
        """Non-injured players, best overall first."""
        return sorted((p for p in self.players if p.is_available),
                      key=lambda p: p.overall, reverse=True)

    def starting_eleven(self) -> List[Player]:
        return self.available_players()[:11]

    @property
    def wage_bill(self) -> int:
        return sum(p.wage for p in self.players)

    @property
    def matches_played(self) -> int:
        return self.wins + self.draws + self.losses

    @property
    def is_squad_full(self) -> bool:
        return len(self.players) >= C.MAX_SQUAD_SIZE

    def record_result(self, goals_for: int, goals_against: int) -> None:
        """Update the league record after a match."""
        if goals_for > goals_against:
            self.wins += 1
            self.points += C.WIN_POINTS
        elif goals_for < goals_against:
            self.losses += 1
        else:
            self.draws += 1
            self.points += C.DRAW_POINTS
        self.goal_diff += goals_for - goals_against

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "name": self.name,
            "players": [p.to_dict() for p in self.players],
            "tactics": self.tactics.to_dict(),
            "budget": self.budget,
            "stadium_level": self.stadium_level,
            "wins": self.wins,
            "draws": self.draws,
            "losses": self.losses,
            "points": self.points,
            "goal_diff": self.goal_diff,
            "primary_color": self.primary_color,
            "secondary_color": self.secondary_color,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "Team":
        data = dict(data)
        data["players"] = [Player.from_dict(p) for p in data.get("players", [])]
        data["tactics"] = Tactics(**data.get("tactics", {}))
        return cls(**data)


def generate_team(name: str, rng: Optional[np.random.Generator] = None) -> Team:
    """
    Build a club with a balanced squad.

    Squad quotas and overall bands come from ``SQUAD_QUOTAS`` and
    ``SQUAD_BANDS`` (3 GK, 7 DEF, 7 MID, 5 ATT by default).

    Args:
        name: Club name
        rng: Random source

    Returns:
        Team with default tactics, budget and stadium level
    """
    rng = ensure_rng(rng)
    players = []
    for position, count in C.SQUAD_QUOTAS.items():
        low, high = C.SQUAD_BANDS[position]
        for _ in range(count):
            players.append(generate_player(low, high, Position(position), rng))

    team = Team(id=new_id(rng), name=name, players=players)
    _log.debug("Generated %s with %d players", name, len(players))
    return team


def initialize_league(names: Optional[List[str]] = None,
                      rng: Optional[np.random.Generator] = None) -> List[Team]:
    """Create one generated team per club name."""
    rng = ensure_rng(rng)
    names = names if names is not None else C.TEAM_NAMES
    return [generate_team(name, rng) for name in names]


def generate_transfer_market(count: int = C.MARKET_SIZE,
                             rng: Optional[np.random.Generator] = None) -> List[Player]:
    """Unattached players drawn from the higher market band."""
    rng = ensure_rng(rng)
    low, high = C.MARKET_BAND
    return [generate_player(low, high, rng=rng) for _ in range(count)]
