"""
Season progression: standings, condition, training, contracts and transfers.

Every operation works on explicit objects handed in by the caller. Denied
actions (no budget, full squad, unknown id) come back as result values rather
than exceptions so the caller can show a message.
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np

from . import constants as C
from .match import MatchEventType, MatchResult, simulate_match
from .news import NewsItem, generate_match_news, generate_transfer_news
from .player import Player, player_value
from .rng import ensure_rng, new_id, randint
from .team import TacticalModifiers, Team, generate_transfer_market, initialize_league

_log = logging.getLogger("football_manager.season")


class Drill(str, Enum):
    PHYSICAL = "Physical"
    TECHNICAL = "Technical"
    TACTICAL = "Tactical"


DRILL_ATTRIBUTES: Dict[Drill, Tuple[str, ...]] = {
    Drill.PHYSICAL: ("acceleration", "sprint_speed", "agility", "balance",
                     "stamina", "strength", "jumping"),
    Drill.TECHNICAL: ("finishing", "shot_power", "long_shots", "short_passing",
                      "crossing", "dribbling", "ball_control", "handling"),
    Drill.TACTICAL: ("vision", "long_passing", "marking", "interceptions",
                     "positioning", "heading", "reflexes"),
}


@dataclass
class TrainingReport:
    """Which players trained, got hurt, or sat the session out."""
    drill: Drill
    trained: List[str] = field(default_factory=list)
    injured: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ContractOutcome:
    accepted: bool
    probability: float


@dataclass(frozen=True)
class TransactionResult:
    success: bool
    message: str
    amount: int = 0
    player: Optional[Player] = None


def find_team(teams: Iterable[Team], team_id: str) -> Optional[Team]:
    for team in teams:
        if team.id == team_id:
            return team
    return None


# --- Match aftermath ---

def apply_match_result(teams: List[Team], result: MatchResult) -> List[Team]:
    """
    Fold a completed match into the league.

    Updates both clubs' records, credits matchday income to the home side,
    counts appearances, goals and cards, and copies in-match injuries onto the
    persistent players.

    Args:
        teams: All league teams (mutated in place)
        result: Completed match

    Returns:
        The same team list
    """
    home = find_team(teams, result.home_team_id)
    away = find_team(teams, result.away_team_id)
    if home is None or away is None:
        _log.warning("Result references unknown team(s): %s vs %s",
                     result.home_team_id, result.away_team_id)
        return teams

    home.record_result(result.home_score, result.away_score)
    away.record_result(result.away_score, result.home_score)

    home.budget += matchday_income(home)

    appeared = set(result.appearances)
    injuries = dict(result.injuries)
    goals: Dict[str, int] = {}
    yellows: Dict[str, int] = {}
    reds: Dict[str, int] = {}
    for event in result.events:
        if event.player_id is None:
            continue
        if event.event_type == MatchEventType.GOAL:
            goals[event.player_id] = goals.get(event.player_id, 0) + 1
        elif event.event_type == MatchEventType.YELLOW_CARD:
            yellows[event.player_id] = yellows.get(event.player_id, 0) + 1
        elif event.event_type == MatchEventType.RED_CARD:
            reds[event.player_id] = reds.get(event.player_id, 0) + 1

    for team in (home, away):
        for player in team.players:
            stats = player.season_stats
            if player.id in appeared:
                stats.matches += 1
            stats.goals += goals.get(player.id, 0)
            stats.yellow_cards += yellows.get(player.id, 0)
            stats.red_cards += reds.get(player.id, 0)
            if player.id in injuries:
                player.injure(injuries[player.id])

    return teams


def matchday_income(team: Team) -> int:
    attendance = C.BASE_ATTENDANCE * team.stadium_level
    return attendance * C.TICKET_PRICE


def apply_fatigue_and_recovery(teams: List[Team],
                               played_team_ids: Iterable[str],
                               rng: Optional[np.random.Generator] = None) -> None:
    """Tire the likely starters of teams that played; everyone else rests."""
    rng = ensure_rng(rng)
    played = set(played_team_ids)

    for team in teams:
        starters = set()
        if team.id in played:
            fatigue = TacticalModifiers.from_tactics(team.tactics).fatigue
            for player in team.starting_eleven():
                loss = math.floor(rng.uniform(*C.MATCH_FATIGUE_RANGE) * fatigue)
                player.energy = max(0, player.energy - loss)
                starters.add(player.id)

        for player in team.players:
            if player.id not in starters:
                player.energy = min(100, player.energy + C.REST_RECOVERY)


def tick_injuries(teams: List[Team], skip_ids: Iterable[str] = ()) -> None:
    """Advance every injury clock by one week, leaving ``skip_ids`` untouched."""
    skip = set(skip_ids)
    for team in teams:
        for player in team.players:
            if not player.is_injured or player.id in skip:
                continue
            player.injury_duration -= 1
            if player.injury_duration <= 0:
                player.is_injured = False
                player.injury_duration = 0


def pay_wages(team: Team) -> int:
    bill = team.wage_bill
    team.budget -= bill
    return bill


# --- Training ---

def train_squad(team: Team,
                drill: Drill,
                rng: Optional[np.random.Generator] = None,
                player_ids: Optional[Iterable[str]] = None) -> TrainingReport:
    """
    Run a training session.

    Each player pays the energy cost. Tired players (energy below the fatigue
    threshold) risk injury; players who cannot afford the cost sit out.

    Args:
        team: Team to train
        drill: Drill type
        rng: Random source
        player_ids: Restrict the session to these players (whole squad if None)

    Returns:
        TrainingReport listing trained, injured and skipped player ids
    """
    rng = ensure_rng(rng)
    drill = Drill(drill)
    report = TrainingReport(drill=drill)

    if player_ids is None:
        targets = list(team.players)
    else:
        wanted = set(player_ids)
        targets = [p for p in team.players if p.id in wanted]

    for player in targets:
        if player.is_injured:
            report.skipped.append(player.id)
            continue

        if (player.energy < C.TRAINING_FATIGUE_THRESHOLD
                and rng.random() < C.TRAINING_INJURY_CHANCE):
            player.injure(randint(rng, *C.TRAINING_INJURY_WEEKS))
            if player.energy >= C.TRAINING_ENERGY_COST:
                player.energy -= C.TRAINING_ENERGY_COST
            report.injured.append(player.id)
            continue

        if player.energy < C.TRAINING_ENERGY_COST:
            report.skipped.append(player.id)
            continue

        player.energy -= C.TRAINING_ENERGY_COST
        _apply_drill(player, drill, rng)
        report.trained.append(player.id)

    _log.debug("%s %s training: %d trained, %d injured, %d skipped", team.name,
               drill.value, len(report.trained), len(report.injured), len(report.skipped))
    return report


def _apply_drill(player: Player, drill: Drill, rng: np.random.Generator) -> None:
    if player.potential > player.overall:
        player.detailed_stats.improve(DRILL_ATTRIBUTES[drill])
    if rng.random() < C.TRAINING_OVERALL_GAIN_CHANCE and player.overall < player.potential:
        player.overall += 1
        player.value = player_value(player.overall, player.potential)
    player.refresh_summary()


# --- Contracts ---

def acceptance_probability(player: Player, offered_wage: float) -> float:
    """Chance the player signs at ``offered_wage``, clamped to [0, 1]."""
    reference = player.market_wage
    chance = C.CONTRACT_BASE_ACCEPTANCE + (player.morale - 50) / C.CONTRACT_MORALE_DIVISOR

    if offered_wage > C.GENEROUS_WAGE_RATIO * reference:
        chance += C.GENEROUS_WAGE_BONUS
    elif offered_wage > C.FAIR_WAGE_RATIO * reference:
        chance += C.FAIR_WAGE_BONUS
    if offered_wage < C.UNDERPAY_WAGE_RATIO * reference:
        chance -= C.UNDERPAY_PENALTY

    return float(np.clip(chance, 0.0, 1.0))


def offer_contract(player: Player,
                   wage: int,
                   years: int,
                   rng: Optional[np.random.Generator] = None) -> ContractOutcome:
    """Offer new terms; acceptance lifts morale, rejection dents it."""
    rng = ensure_rng(rng)
    probability = acceptance_probability(player, wage)
    accepted = bool(rng.random() < probability)

    if accepted:
        player.wage = int(wage)
        player.contract_length = int(years)
        player.morale = min(100, player.morale + C.CONTRACT_MORALE_SWING)
    else:
        player.morale = max(0, player.morale - C.CONTRACT_MORALE_SWING)

    return ContractOutcome(accepted=accepted, probability=probability)


# --- Transfers ---

def _denied(message: str, amount: int = 0) -> TransactionResult:
    _log.info("Transaction denied: %s", message)
    return TransactionResult(False, message, amount=amount)


def buy_player(team: Team,
               market: List[Player],
               player_id: str,
               rng: Optional[np.random.Generator] = None) -> TransactionResult:
    player = next((p for p in market if p.id == player_id), None)
    if player is None:
        return _denied("Player is not on the transfer market")
    if team.is_squad_full:
        return _denied(f"Squad is full ({C.MAX_SQUAD_SIZE} players)")
    if team.budget < player.value:
        return _denied("Insufficient budget")

    rng = ensure_rng(rng)
    fee = player.value
    team.budget -= fee
    market.remove(player)
    player.id = new_id(rng)
    player.contract_length = C.TRANSFER_CONTRACT_YEARS
    team.players.append(player)

    _log.info("%s signed %s for %d", team.name, player.name, fee)
    return TransactionResult(True, f"Signed {player.name}", amount=fee, player=player)


def sell_player(team: Team, player_id: str) -> TransactionResult:
    player = team.get_player(player_id)
    if player is None:
        return _denied("Player is not in the squad")

    fee = int(player.value * C.SALE_VALUE_FACTOR)
    team.budget += fee
    team.players.remove(player)

    _log.info("%s sold %s for %d", team.name, player.name, fee)
    return TransactionResult(True, f"Sold {player.name}", amount=fee, player=player)


def severance_cost(player: Player) -> int:
    return int(player.wage * C.SEVERANCE_WEEKS * C.SEVERANCE_FACTOR * player.contract_length)


def release_player(team: Team, player_id: str) -> TransactionResult:
    player = team.get_player(player_id)
    if player is None:
        return _denied("Player is not in the squad")

    cost = severance_cost(player)
    if team.budget < cost:
        return _denied("Insufficient budget for severance", amount=cost)

    team.budget -= cost
    team.players.remove(player)

    _log.info("%s released %s (severance %d)", team.name, player.name, cost)
    return TransactionResult(True, f"Released {player.name}", amount=cost, player=player)


# --- League ---

def league_table(teams: Iterable[Team]) -> List[Team]:
    """Teams ordered by points, then goal difference."""
    return sorted(teams, key=lambda t: (t.points, t.goal_diff), reverse=True)


def round_robin_fixtures(team_ids: List[str]) -> List[List[Tuple[str, str]]]:
    """
    Double round-robin schedule (circle method).

    Returns:
        One list of (home_id, away_id) pairs per round; the second half of
        the season repeats the first with venues swapped.
    """
    ids: List[Optional[str]] = list(team_ids)
    if len(ids) < 2:
        return []
    if len(ids) % 2:
        ids.append(None)

    n = len(ids)
    rounds = []
    for r in range(n - 1):
        pairs = []
        for i in range(n // 2):
            home, away = ids[i], ids[n - 1 - i]
            if home is None or away is None:
                continue
            if r % 2 == 1:
                home, away = away, home
            pairs.append((home, away))
        rounds.append(pairs)
        ids = [ids[0], ids[-1]] + ids[1:-1]

    return rounds + [[(away, home) for home, away in rnd] for rnd in rounds]


@dataclass
class GameState:
    """
    Explicit save snapshot passed to every league-level operation.

    The presentation layer owns persistence; ``to_dict``/``from_dict``
    produce and accept the exact shape it stores.
    """
    teams: List[Team]
    user_team_id: str
    current_week: int = 1
    transfer_market: List[Player] = field(default_factory=list)
    news: List[NewsItem] = field(default_factory=list)
    history: List[MatchResult] = field(default_factory=list)

    @property
    def user_team(self) -> Optional[Team]:
        return find_team(self.teams, self.user_team_id)

    def fixtures_for_week(self) -> List[Tuple[Team, Team]]:
        rounds = round_robin_fixtures([t.id for t in self.teams])
        if not rounds:
            return []
        by_id = {t.id: t for t in self.teams}
        current = rounds[(self.current_week - 1) % len(rounds)]
        return [(by_id[home], by_id[away]) for home, away in current]

    def train(self, drill: Drill, rng: Optional[np.random.Generator] = None,
              player_ids: Optional[Iterable[str]] = None) -> Optional[TrainingReport]:
        team = self.user_team
        if team is None:
            return None
        return train_squad(team, drill, rng, player_ids)

    def offer_contract(self, player_id: str, wage: int, years: int,
                       rng: Optional[np.random.Generator] = None) -> ContractOutcome:
        team = self.user_team
        player = team.get_player(player_id) if team else None
        if player is None:
            return ContractOutcome(accepted=False, probability=0.0)
        return offer_contract(player, wage, years, rng)

    def buy(self, player_id: str, rng: Optional[np.random.Generator] = None) -> TransactionResult:
        team = self.user_team
        if team is None:
            return TransactionResult(False, "No user team")
        result = buy_player(team, self.transfer_market, player_id, rng)
        self._transfer_news(team, result, "buy")
        return result

    def sell(self, player_id: str) -> TransactionResult:
        team = self.user_team
        if team is None:
            return TransactionResult(False, "No user team")
        result = sell_player(team, player_id)
        self._transfer_news(team, result, "sell")
        return result

    def release(self, player_id: str) -> TransactionResult:
        team = self.user_team
        if team is None:
            return TransactionResult(False, "No user team")
        result = release_player(team, player_id)
        self._transfer_news(team, result, "release")
        return result

    def _transfer_news(self, team: Team, result: TransactionResult, kind: str) -> None:
        if result.success and result.player is not None:
            self.news.append(generate_transfer_news(self.current_week, team, result.player,
                                                    kind, result.amount))

    def to_dict(self) -> Dict:
        return {
            "teams": [t.to_dict() for t in self.teams],
            "user_team_id": self.user_team_id,
            "current_week": self.current_week,
            "transfer_market": [p.to_dict() for p in self.transfer_market],
            "news": [n.to_dict() for n in self.news],
            "history": [r.to_dict() for r in self.history],
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "GameState":
        return cls(
            teams=[Team.from_dict(t) for t in data["teams"]],
            user_team_id=data["user_team_id"],
            current_week=data.get("current_week", 1),
            transfer_market=[Player.from_dict(p) for p in data.get("transfer_market", [])],
            news=[NewsItem(**n) for n in data.get("news", [])],
            history=[MatchResult.from_dict(r) for r in data.get("history", [])],
        )


def new_game(names: Optional[List[str]] = None,
             rng: Optional[np.random.Generator] = None,
             user_team_index: int = 0) -> GameState:
    """Set up a fresh league with the user managing ``names[user_team_index]``."""
    rng = ensure_rng(rng)
    teams = initialize_league(names, rng)
    return GameState(
        teams=teams,
        user_team_id=teams[user_team_index].id,
        transfer_market=generate_transfer_market(rng=rng),
    )


def refresh_market(state: GameState, rng: Optional[np.random.Generator] = None) -> None:
    state.transfer_market = generate_transfer_market(rng=ensure_rng(rng))
    _log.info("Transfer market refreshed for week %d", state.current_week)


def advance_week(state: GameState,
                 played_team_ids: Iterable[str],
                 rng: Optional[np.random.Generator] = None,
                 fresh_injury_ids: Iterable[str] = ()) -> GameState:
    """
    Close out the current week.

    Applies fatigue and recovery, advances injury clocks, pays the user
    team's wages, moves the week counter on and refreshes the market every
    fourth week. Injuries picked up in this week's matches
    (``fresh_injury_ids``) start counting down next week.
    """
    rng = ensure_rng(rng)
    apply_fatigue_and_recovery(state.teams, played_team_ids, rng)
    tick_injuries(state.teams, fresh_injury_ids)

    user_team = state.user_team
    if user_team is not None:
        pay_wages(user_team)

    state.current_week += 1
    if state.current_week % C.MARKET_REFRESH_INTERVAL == 0:
        refresh_market(state, rng)
    return state


def play_week(state: GameState,
              rng: Optional[np.random.Generator] = None,
              event_logger=None) -> List[MatchResult]:
    """
    Simulate every fixture of the current week and advance the league.

    Args:
        state: Game state (mutated in place)
        rng: Random source for all matches and weekly updates
        event_logger: Optional MatchEventLogger recording every match

    Returns:
        Results of this week's matches in fixture order
    """
    rng = ensure_rng(rng)
    results = []
    played = set()
    injured = set()

    for home, away in state.fixtures_for_week():
        result = simulate_match(home, away, rng=rng, event_logger=event_logger)
        apply_match_result(state.teams, result)
        state.history.append(result)
        played.update((home.id, away.id))
        injured.update(player_id for player_id, _ in result.injuries)
        if state.user_team_id in (home.id, away.id):
            state.news.append(generate_match_news(result, state.current_week, home, away))
        results.append(result)

    advance_week(state, played, rng, injured)
    return results
