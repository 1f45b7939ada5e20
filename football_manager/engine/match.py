"""
Main match engine for football simulation.

Resolves a match as a 90-tick minute loop driven by a single random source,
producing the final score, an ordered event timeline and aggregate stats.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

import numpy as np

from . import constants as C
from .player import Player
from .rng import ensure_rng, pick, randint
from .team import Style, TacticalModifiers, Team

if TYPE_CHECKING:
    from ..logger.event_logger import MatchEventLogger

_log = logging.getLogger("football_manager.match")


class MatchEventType(str, Enum):
    GOAL = "GOAL"
    MISS = "MISS"
    YELLOW_CARD = "YELLOW_CARD"
    RED_CARD = "RED_CARD"
    SUBSTITUTION = "SUBSTITUTION"
    INJURY = "INJURY"


@dataclass(frozen=True)
class MatchEvent:
    """Single timeline entry."""
    minute: int
    event_type: MatchEventType
    description: str
    team_id: str
    player_id: Optional[str] = None
    player_name: Optional[str] = None

    def to_dict(self) -> Dict:
        return {
            "minute": self.minute,
            "event_type": self.event_type.value,
            "description": self.description,
            "team_id": self.team_id,
            "player_id": self.player_id,
            "player_name": self.player_name,
        }


@dataclass(frozen=True)
class MatchStats:
    home_possession: int
    away_possession: int
    home_shots: int
    away_shots: int


@dataclass(frozen=True)
class MatchResult:
    """Immutable outcome of one match."""
    home_team_id: str
    away_team_id: str
    home_team_name: str
    away_team_name: str
    home_score: int
    away_score: int
    events: Tuple[MatchEvent, ...]
    stats: MatchStats
    appearances: Tuple[str, ...] = ()
    injuries: Tuple[Tuple[str, int], ...] = ()

    @property
    def winner_id(self) -> Optional[str]:
        if self.home_score > self.away_score:
            return self.home_team_id
        if self.away_score > self.home_score:
            return self.away_team_id
        return None

    @property
    def total_goals(self) -> int:
        return self.home_score + self.away_score

    def goals_for(self, team_id: str) -> List[MatchEvent]:
        return [e for e in self.events
                if e.event_type == MatchEventType.GOAL and e.team_id == team_id]

    def to_dict(self) -> Dict:
        return {
            "home_team_id": self.home_team_id,
            "away_team_id": self.away_team_id,
            "home_team_name": self.home_team_name,
            "away_team_name": self.away_team_name,
            "home_score": self.home_score,
            "away_score": self.away_score,
            "events": [e.to_dict() for e in self.events],
            "stats": {
                "home_possession": self.stats.home_possession,
                "away_possession": self.stats.away_possession,
                "home_shots": self.stats.home_shots,
                "away_shots": self.stats.away_shots,
            },
            "appearances": list(self.appearances),
            "injuries": [list(item) for item in self.injuries],
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "MatchResult":
        events = tuple(
            MatchEvent(
                minute=e["minute"],
                event_type=MatchEventType(e["event_type"]),
                description=e["description"],
                team_id=e["team_id"],
                player_id=e.get("player_id"),
                player_name=e.get("player_name"),
            )
            for e in data["events"]
        )
        return cls(
            home_team_id=data["home_team_id"],
            away_team_id=data["away_team_id"],
            home_team_name=data["home_team_name"],
            away_team_name=data["away_team_name"],
            home_score=data["home_score"],
            away_score=data["away_score"],
            events=events,
            stats=MatchStats(**data["stats"]),
            appearances=tuple(data.get("appearances", ())),
            injuries=tuple((pid, weeks) for pid, weeks in data.get("injuries", ())),
        )


def energy_factor(energy: float) -> float:
    """0.7 when tired, otherwise scales linearly from 0.75 to 1.0."""
    if energy < C.LOW_ENERGY_THRESHOLD:
        return C.LOW_ENERGY_FACTOR
    return 0.5 + energy / 200.0


def morale_factor(morale: float) -> float:
    """Scales from 0.9 at morale 0 to 1.1 at morale 100."""
    return 0.9 + morale / 500.0


@dataclass
class Participant:
    """
    A player's match-day wrapper.

    Created fresh for every simulation and discarded afterwards, so cards,
    substitutions and in-match energy never leak into the persistent record.
    """
    player: Player
    energy: float
    has_yellow: bool = False
    has_red: bool = False
    is_subbed_out: bool = False
    is_injured: bool = False

    @property
    def is_active(self) -> bool:
        return not (self.has_red or self.is_subbed_out or self.is_injured)

    def effective_rating(self) -> float:
        if not self.is_active:
            return 0.0
        return self.player.overall * energy_factor(self.energy) * morale_factor(self.player.morale)


@dataclass
class SideState:
    """One team's state during a match."""
    team: Team
    is_home: bool
    modifiers: TacticalModifiers
    on_pitch: List[Participant] = field(default_factory=list)
    bench: List[Participant] = field(default_factory=list)
    subs_used: int = 0
    score: int = 0

    @property
    def home_bonus(self) -> float:
        if not self.is_home:
            return 1.0
        return 1.0 + C.STADIUM_BONUS_PER_LEVEL * self.team.stadium_level

    def active(self) -> List[Participant]:
        return [p for p in self.on_pitch if p.is_active]

    def base_strength(self) -> float:
        return sum(p.effective_rating() for p in self.on_pitch) * self.home_bonus

    def strengths(self) -> Tuple[float, float]:
        """Attacking and defending strength for the current minute."""
        base = self.base_strength()
        return base * (1.0 + self.modifiers.attack), base * (1.0 + self.modifiers.defense)

    def can_substitute(self) -> bool:
        return self.subs_used < C.MAX_SUBSTITUTIONS and bool(self.bench)


@dataclass
class MatchState:
    """Current state of the football match."""
    minute: int = 0
    events: List[MatchEvent] = field(default_factory=list)
    injuries: Dict[str, int] = field(default_factory=dict)


class MatchEngine:
    """
    Minute-stepped football match simulation engine.

    Implements:
    - 90 discrete minute ticks
    - Strength aggregation from effective player ratings
    - Goals, cards, injuries, substitutions and near misses
    - Possession and shot totals after the final whistle
    """

    MATCH_MINUTES = 90

    def __init__(self,
                 home_team: Team,
                 away_team: Team,
                 rng: Optional[np.random.Generator] = None,
                 event_logger: Optional["MatchEventLogger"] = None):
        """
        Initialize match engine with two teams.

        Args:
            home_team: Home team
            away_team: Away team
            rng: Random source driving every draw of the match
            event_logger: Optional structured event log to record into

        Raises:
            ValueError: If either team cannot field any player
        """
        self.home_team = home_team
        self.away_team = away_team
        self.rng = ensure_rng(rng)
        self.event_logger = event_logger

        self.match_state = MatchState()
        self.home = self._build_side(home_team, is_home=True)
        self.away = self._build_side(away_team, is_home=False)

    @staticmethod
    def _build_side(team: Team, is_home: bool) -> SideState:
        if not team.players:
            raise ValueError(f"Team {team.name!r} has an empty roster")
        available = team.available_players()
        if not available:
            raise ValueError(f"Team {team.name!r} has no fit players")

        starters = available[:11]
        bench = available[11:11 + C.BENCH_SIZE]
        if len(starters) < 11:
            _log.warning("%s can only field %d players", team.name, len(starters))

        return SideState(
            team=team,
            is_home=is_home,
            modifiers=TacticalModifiers.from_tactics(team.tactics),
            on_pitch=[Participant(p, float(p.energy)) for p in starters],
            bench=[Participant(p, float(p.energy)) for p in bench],
        )

    def simulate_match(self) -> MatchResult:
        """
        Simulate complete 90-minute football match.

        Returns:
            MatchResult containing score, ordered events and stats
        """
        _log.info("Kick-off: %s vs %s", self.home_team.name, self.away_team.name)
        if self.event_logger is not None:
            self.event_logger.start_match(self.home_team, self.away_team)

        for minute in range(1, self.MATCH_MINUTES + 1):
            self.match_state.minute = minute
            self._simulate_minute(minute)

        _log.info("Full-time: %s %d-%d %s", self.home_team.name, self.home.score,
                  self.away.score, self.away_team.name)
        return self._generate_match_result()

    def _simulate_minute(self, minute: int) -> None:
        """Simulate a single minute of the match."""
        home_chance, away_chance = self.goal_chances()
        total_chance = home_chance + away_chance

        if total_chance > 0 and self.rng.random() < total_chance:
            side = self.home if self.rng.random() < home_chance / total_chance else self.away
            if self._score_goal(side, minute):
                self._drain_energy()
                return

        for side in (self.home, self.away):
            self._check_card(side, minute)
        for side in (self.home, self.away):
            self._check_injury(side, minute)
        if minute > C.SUBSTITUTION_WINDOW_START:
            for side in (self.home, self.away):
                if side.can_substitute() and self.rng.random() < C.SUBSTITUTION_CHANCE:
                    self._make_substitution(side, minute)

        if self.rng.random() < C.MISS_CHANCE:
            h_att, _ = self.home.strengths()
            a_att, _ = self.away.strengths()
            attack_total = h_att + a_att
            dominance = h_att / attack_total if attack_total > 0 else 0.5
            side = self.home if self.rng.random() < dominance else self.away
            self._near_miss(side, minute)

        self._drain_energy()

    def goal_chances(self) -> Tuple[float, float]:
        """
        Per-minute scoring chance of each side.

        Attack over opposing defence, with a defence of zero counted as 1.
        Each chance is capped at MAX_GOAL_CHANCE so a side with nobody left
        on the pitch concedes at a bounded rate.
        """
        h_att, h_def = self.home.strengths()
        a_att, a_def = self.away.strengths()
        home_chance = C.BASE_GOAL_CHANCE * h_att / max(a_def, 1.0)
        away_chance = C.BASE_GOAL_CHANCE * a_att / max(h_def, 1.0)
        return min(home_chance, C.MAX_GOAL_CHANCE), min(away_chance, C.MAX_GOAL_CHANCE)

    def _score_goal(self, side: SideState, minute: int) -> bool:
        active = side.active()
        if not active:
            return False
        scorer = pick(self.rng, active)
        side.score += 1
        self._log_event(side, minute, MatchEventType.GOAL,
                        f"GOAL! {scorer.player.name} scores for {side.team.name}!", scorer)
        return True

    def _check_card(self, side: SideState, minute: int) -> None:
        if self.rng.random() >= C.CARD_CHANCE * side.modifiers.cards:
            return
        active = side.active()
        if not active:
            return
        offender = pick(self.rng, active)
        name = offender.player.name

        if offender.has_yellow:
            offender.has_red = True
            self._log_event(side, minute, MatchEventType.RED_CARD,
                            f"Second yellow! {name} ({side.team.name}) is sent off.", offender)
        elif self.rng.random() < C.STRAIGHT_RED_CHANCE:
            offender.has_red = True
            self._log_event(side, minute, MatchEventType.RED_CARD,
                            f"Straight red card for {name} ({side.team.name})!", offender)
        else:
            offender.has_yellow = True
            self._log_event(side, minute, MatchEventType.YELLOW_CARD,
                            f"Yellow card for {name} ({side.team.name}).", offender)

    def _check_injury(self, side: SideState, minute: int) -> None:
        if self.rng.random() >= C.MATCH_INJURY_CHANCE:
            return
        active = side.active()
        if not active:
            return
        victim = pick(self.rng, active)
        weeks = randint(self.rng, *C.MATCH_INJURY_WEEKS)
        victim.is_injured = True
        self.match_state.injuries[victim.player.id] = weeks
        self._log_event(side, minute, MatchEventType.INJURY,
                        f"{victim.player.name} ({side.team.name}) is injured and out for "
                        f"{weeks} week{'s' if weeks != 1 else ''}.", victim)

        if side.can_substitute():
            self._bring_on(side, victim, minute)

    def _make_substitution(self, side: SideState, minute: int) -> None:
        active = side.active()
        if not active:
            return
        tired = min(active, key=lambda p: p.energy)
        tired.is_subbed_out = True
        self._bring_on(side, tired, minute)

    def _bring_on(self, side: SideState, outgoing: Participant, minute: int) -> None:
        incoming = side.bench.pop(0)
        side.on_pitch.append(incoming)
        side.subs_used += 1
        self._log_event(side, minute, MatchEventType.SUBSTITUTION,
                        f"Substitution {side.team.name}: {incoming.player.name} "
                        f"replaces {outgoing.player.name}.", incoming)

    def _near_miss(self, side: SideState, minute: int) -> None:
        active = side.active()
        shooter = pick(self.rng, active) if active else None
        if shooter is not None:
            description = f"Close call! {shooter.player.name} hits the post for {side.team.name}."
        else:
            description = f"Close call for {side.team.name}! Hit the post."
        self._log_event(side, minute, MatchEventType.MISS, description, shooter)

    def _drain_energy(self) -> None:
        for side in (self.home, self.away):
            drain = C.MATCH_ENERGY_DRAIN * side.modifiers.fatigue
            for participant in side.active():
                participant.energy = max(0.0, participant.energy - drain)

    def _log_event(self,
                   side: SideState,
                   minute: int,
                   event_type: MatchEventType,
                   description: str,
                   participant: Optional[Participant] = None) -> None:
        event = MatchEvent(
            minute=minute,
            event_type=event_type,
            description=description,
            team_id=side.team.id,
            player_id=participant.player.id if participant else None,
            player_name=participant.player.name if participant else None,
        )
        self.match_state.events.append(event)
        _log.debug("%d' %s", minute, description)

        if self.event_logger is not None:
            self.event_logger.log_event(event, home_score=self.home.score, away_score=self.away.score)

    def _possession(self) -> Tuple[int, int]:
        home_share = 50
        home_style = self.home_team.tactics.style
        away_style = self.away_team.tactics.style

        if home_style == Style.POSSESSION:
            home_share += C.POSSESSION_STYLE_SHIFT
        elif home_style == Style.COUNTER:
            home_share -= C.POSSESSION_STYLE_SHIFT
        if away_style == Style.POSSESSION:
            home_share -= C.POSSESSION_STYLE_SHIFT
        elif away_style == Style.COUNTER:
            home_share += C.POSSESSION_STYLE_SHIFT

        h_str = self.home.base_strength()
        a_str = self.away.base_strength()
        if h_str + a_str > 0:
            home_share += round((h_str / (h_str + a_str) - 0.5) * C.POSSESSION_STRENGTH_SKEW)

        low, high = C.POSSESSION_RANGE
        home_share = int(np.clip(home_share, low, high))
        return home_share, 100 - home_share

    def _generate_match_result(self) -> MatchResult:
        """Build the immutable result after the final whistle."""
        home_shots = self.home.score + randint(self.rng, *C.EXTRA_SHOTS_RANGE)
        away_shots = self.away.score + randint(self.rng, *C.EXTRA_SHOTS_RANGE)
        home_possession, away_possession = self._possession()

        appearances = tuple(p.player.id for side in (self.home, self.away) for p in side.on_pitch)

        return MatchResult(
            home_team_id=self.home_team.id,
            away_team_id=self.away_team.id,
            home_team_name=self.home_team.name,
            away_team_name=self.away_team.name,
            home_score=self.home.score,
            away_score=self.away.score,
            events=tuple(self.match_state.events),
            stats=MatchStats(
                home_possession=home_possession,
                away_possession=away_possession,
                home_shots=home_shots,
                away_shots=away_shots,
            ),
            appearances=appearances,
            injuries=tuple(self.match_state.injuries.items()),
        )


def simulate_match(home: Team,
                   away: Team,
                   rng: Optional[np.random.Generator] = None,
                   event_logger: Optional["MatchEventLogger"] = None) -> MatchResult:
    """Simulate one match and return its final result."""
    return MatchEngine(home, away, rng=rng, event_logger=event_logger).simulate_match()
