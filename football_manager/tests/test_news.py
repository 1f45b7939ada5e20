"""
Test match and transfer news generation.
"""

import pytest

from football_manager.engine.match import MatchEvent, MatchEventType, MatchResult, MatchStats
from football_manager.engine.news import generate_match_news, generate_transfer_news, headline_category


def result_for(home, away, home_score, away_score, events=()):
    return MatchResult(
        home_team_id=home.id,
        away_team_id=away.id,
        home_team_name=home.name,
        away_team_name=away.name,
        home_score=home_score,
        away_score=away_score,
        events=tuple(events),
        stats=MatchStats(58, 42, home_score + 4, away_score + 2),
    )


@pytest.mark.parametrize("home_score,away_score,category", [
    (0, 0, "bore_draw"),
    (2, 2, "draw"),
    (4, 1, "rout"),
    (0, 3, "rout"),
    (3, 2, "goal_fest"),
    (1, 0, "tight_win"),
    (2, 0, "win"),
])
def test_headline_categories(make_team, home_score, away_score, category):
    home, away = make_team("Home"), make_team("Away")
    assert headline_category(result_for(home, away, home_score, away_score)) == category


def test_rout_names_winner_first(make_team):
    home, away = make_team("Rovers"), make_team("Wanderers")
    item = generate_match_news(result_for(home, away, 0, 4), 7, home, away)
    assert item.week == 7
    assert item.category == "rout"
    assert item.title.startswith("Wanderers")
    assert "4-0" in item.title


def test_report_lists_scorers_and_possession(make_team):
    home, away = make_team("Rovers"), make_team("Wanderers")
    striker = home.players[-1]
    events = [
        MatchEvent(10, MatchEventType.GOAL, "Goal", home.id, striker.id, striker.name),
        MatchEvent(55, MatchEventType.GOAL, "Goal", home.id, striker.id, striker.name),
    ]
    item = generate_match_news(result_for(home, away, 2, 0, events), 1, home, away)

    assert f"{striker.name} (2)" in item.body
    assert "58%-42%" in item.body


def test_news_is_deterministic(make_team):
    home, away = make_team("Rovers"), make_team("Wanderers")
    result = result_for(home, away, 2, 2)
    assert generate_match_news(result, 3, home, away) == generate_match_news(result, 3, home, away)


@pytest.mark.parametrize("kind,phrase", [("buy", "sign"), ("sell", "leaves"), ("release", "release")])
def test_transfer_news(make_team, make_player, kind, phrase):
    team, player = make_team("Rovers"), make_player()
    item = generate_transfer_news(5, team, player, kind, 1_500_000)
    assert item.category == "transfer"
    assert phrase in item.title
    assert "$1,500,000" in item.body
