"""
News generation from completed matches and transfers.

Headlines are pure functions of their inputs: the same result always yields
the same item.
"""

from collections import Counter
from dataclasses import asdict, dataclass
from typing import Dict, List

from .match import MatchResult
from .player import Player
from .team import Team


@dataclass(frozen=True)
class NewsItem:
    week: int
    category: str
    title: str
    body: str

    def to_dict(self) -> Dict:
        return asdict(self)


def headline_category(result: MatchResult) -> str:
    """Classify a result into the framing used for its headline."""
    diff = abs(result.home_score - result.away_score)
    total = result.total_goals

    if result.winner_id is None:
        return "bore_draw" if total == 0 else "draw"
    if diff >= 3:
        return "rout"
    if total > 4:
        return "goal_fest"
    if diff == 1:
        return "tight_win"
    return "win"


def _scorer_line(result: MatchResult, team_id: str) -> str:
    counts = Counter(e.player_name for e in result.goals_for(team_id) if e.player_name)
    parts: List[str] = []
    for name, goals in counts.items():
        parts.append(f"{name} ({goals})" if goals > 1 else name)
    return ", ".join(parts)


def generate_match_news(result: MatchResult, week: int, home: Team, away: Team) -> NewsItem:
    """
    Write the match report for a completed result.

    Args:
        result: Completed match
        week: League week the match belongs to
        home: Home team
        away: Away team

    Returns:
        NewsItem whose category reflects margin and goal count
    """
    category = headline_category(result)
    score = f"{result.home_score}-{result.away_score}"

    if result.winner_id == home.id:
        winner, loser = home, away
    else:
        winner, loser = away, home
    winner_score = max(result.home_score, result.away_score)
    loser_score = min(result.home_score, result.away_score)

    if category == "rout":
        title = f"{winner.name} thrash {loser.name} {winner_score}-{loser_score}"
        body = f"A one-sided afternoon as {winner.name} ran riot against {loser.name}."
    elif category == "goal_fest":
        title = f"Goal-fest as {winner.name} edge {loser.name}"
        body = (f"Defences took the day off in a {result.total_goals}-goal thriller, "
                f"with {winner.name} coming out on top.")
    elif category == "tight_win":
        title = f"{winner.name} squeeze past {loser.name}"
        body = f"Nothing separated the sides but a single goal as {winner.name} held on."
    elif category == "win":
        title = f"{winner.name} beat {loser.name} {winner_score}-{loser_score}"
        body = f"{winner.name} collected all three points against {loser.name}."
    elif category == "bore_draw":
        title = f"Stalemate between {home.name} and {away.name}"
        body = "Neither side could find a breakthrough in a goalless encounter."
    else:
        title = f"{home.name} and {away.name} share the spoils"
        body = f"The points were split after a {score} draw."

    scorers = []
    for team in (home, away):
        line = _scorer_line(result, team.id)
        if line:
            scorers.append(f"{team.name}: {line}")
    if scorers:
        body += " Scorers - " + "; ".join(scorers) + "."

    body += (f" Final score {home.name} {score} {away.name}; possession "
             f"{result.stats.home_possession}%-{result.stats.away_possession}%.")

    return NewsItem(week=week, category=category, title=title, body=body)


def generate_transfer_news(week: int, team: Team, player: Player, kind: str, amount: int) -> NewsItem:
    """Headline for a completed buy, sale or release."""
    if kind == "buy":
        title = f"{team.name} sign {player.name}"
        body = f"{team.name} have completed the signing of {player.name} for ${amount:,}."
    elif kind == "sell":
        title = f"{player.name} leaves {team.name}"
        body = f"{team.name} have sold {player.name} for ${amount:,}."
    else:
        title = f"{team.name} release {player.name}"
        body = f"{player.name} has been released; severance paid was ${amount:,}."
    return NewsItem(week=week, category="transfer", title=title, body=body)
