"""
Test the minute-by-minute match engine.

Covers timeline invariants, determinism under a seeded source, the transient
participant model and the equal-strength calibration scenario.
"""

from collections import Counter

import pytest

from football_manager.engine.match import (
    MatchEngine,
    MatchEventType,
    Participant,
    energy_factor,
    morale_factor,
    simulate_match,
)
from football_manager.engine import constants as C
from football_manager.engine.rng import make_rng
from football_manager.engine.team import Intensity, Style, Tactics, generate_team


def many_results(home, away, count, seed):
    rng = make_rng(seed)
    return [simulate_match(home, away, rng=rng) for _ in range(count)]


def test_events_sorted_and_within_match(make_team):
    home, away = make_team("Home"), make_team("Away")
    for result in many_results(home, away, 50, seed=1):
        minutes = [e.minute for e in result.events]
        assert minutes == sorted(minutes)
        assert all(1 <= m <= 90 for m in minutes)


def test_goal_events_match_score(make_team):
    home, away = make_team("Home"), make_team("Away")
    for result in many_results(home, away, 50, seed=2):
        goals = Counter(e.team_id for e in result.events if e.event_type == MatchEventType.GOAL)
        assert goals.get(home.id, 0) == result.home_score
        assert goals.get(away.id, 0) == result.away_score


def test_possession_and_shots(make_team):
    home = make_team("Home", tactics=Tactics(style=Style.POSSESSION))
    away = make_team("Away", tactics=Tactics(style=Style.COUNTER))
    for result in many_results(home, away, 50, seed=3):
        stats = result.stats
        assert stats.home_possession + stats.away_possession == 100
        assert 20 <= stats.home_possession <= 80
        assert 20 <= stats.away_possession <= 80
        assert result.home_score + 2 <= stats.home_shots <= result.home_score + 6
        assert result.away_score + 2 <= stats.away_shots <= result.away_score + 6


def test_possession_style_shift(make_team):
    home = make_team("Home", tactics=Tactics(style=Style.POSSESSION))
    away = make_team("Away", tactics=Tactics(style=Style.COUNTER))
    results = many_results(home, away, 20, seed=4)
    assert sum(r.stats.home_possession for r in results) / len(results) > 60


def test_same_seed_same_result(rng):
    home = generate_team("Seed Home", rng)
    away = generate_team("Seed Away", rng)
    first = simulate_match(home, away, rng=make_rng(555))
    second = simulate_match(home, away, rng=make_rng(555))
    assert first == second


def test_simulation_does_not_mutate_players(make_team):
    home, away = make_team("Home"), make_team("Away")
    before = [p.to_dict() for p in home.players + away.players]
    many_results(home, away, 10, seed=5)
    after = [p.to_dict() for p in home.players + away.players]
    assert before == after


def test_lineup_is_top_eleven_fit_players(make_team):
    team = make_team("Home")
    for i, player in enumerate(team.players):
        player.overall = 60 + i
    injured = max(team.players, key=lambda p: p.overall)
    injured.is_injured = True

    engine = MatchEngine(team, make_team("Away"), rng=make_rng(6))
    starters = [p.player for p in engine.home.on_pitch]
    bench = [p.player for p in engine.home.bench]

    assert injured not in starters and injured not in bench
    assert len(starters) == 11
    assert len(bench) == 7
    assert min(p.overall for p in starters) > max(p.overall for p in bench)


def test_substitutions_capped_and_late(make_team):
    home, away = make_team("Home"), make_team("Away")
    for result in many_results(home, away, 100, seed=7):
        subs = Counter(e.team_id for e in result.events if e.event_type == MatchEventType.SUBSTITUTION)
        assert all(count <= 3 for count in subs.values())
        for event in result.events:
            if event.event_type == MatchEventType.SUBSTITUTION:
                injury_same_minute = any(
                    e.event_type == MatchEventType.INJURY and e.minute == event.minute
                    and e.team_id == event.team_id for e in result.events)
                assert event.minute > 60 or injury_same_minute


def test_sent_off_players_take_no_further_part(make_team):
    home = make_team("Home", tactics=Tactics(intensity=Intensity.HIGH))
    away = make_team("Away", tactics=Tactics(intensity=Intensity.HIGH))
    for result in many_results(home, away, 200, seed=8):
        sent_off = {}
        for event in result.events:
            if event.player_id in sent_off and event.event_type != MatchEventType.SUBSTITUTION:
                pytest.fail(f"{event.player_name} involved after a red card")
            if event.event_type == MatchEventType.RED_CARD:
                sent_off[event.player_id] = event.minute


def test_second_yellow_is_red(make_team):
    home, away = make_team("Home"), make_team("Away")
    for result in many_results(home, away, 300, seed=9):
        yellows = Counter()
        for event in result.events:
            if event.event_type == MatchEventType.YELLOW_CARD:
                yellows[event.player_id] += 1
                assert yellows[event.player_id] == 1


def test_rating_factors():
    assert energy_factor(100) == 1.0
    assert energy_factor(50) == 0.75
    assert energy_factor(49) == 0.7
    assert morale_factor(0) == 0.9
    assert morale_factor(100) == pytest.approx(1.1)


def test_inactive_participant_contributes_nothing(make_player):
    participant = Participant(make_player(80), energy=100.0)
    assert participant.effective_rating() == pytest.approx(80 * 1.0 * 1.1)
    participant.has_red = True
    assert participant.effective_rating() == 0.0


def test_empty_roster_raises(make_team):
    with pytest.raises(ValueError):
        simulate_match(make_team("Empty", squad_size=0), make_team("Away"), rng=make_rng(1))


def test_short_squad_still_plays(make_team):
    result = simulate_match(make_team("Short", squad_size=8), make_team("Away"), rng=make_rng(2))
    assert result.stats.home_possession + result.stats.away_possession == 100


def test_appearances_cover_starters(make_team):
    home, away = make_team("Home"), make_team("Away")
    result = simulate_match(home, away, rng=make_rng(10))
    subs = sum(1 for e in result.events if e.event_type == MatchEventType.SUBSTITUTION)
    assert len(result.appearances) == 22 + subs


def test_equal_teams_home_side_has_the_edge(make_team):
    """Equal squads, identical tactics, default stadium: home chance is higher."""
    engine = MatchEngine(make_team("Home"), make_team("Away"), rng=make_rng(11))
    home_chance, away_chance = engine.goal_chances()

    bonus = 1 + C.STADIUM_BONUS_PER_LEVEL
    assert home_chance > away_chance
    assert home_chance / away_chance == pytest.approx(bonus ** 2)


def test_equal_teams_goal_rate(make_team):
    """Equal squads average between 1.5 and 4 goals a game."""
    home, away = make_team("Home"), make_team("Away")
    results = many_results(home, away, 1000, seed=2024)
    avg_goals = sum(r.total_goals for r in results) / len(results)
    assert 1.5 <= avg_goals <= 4.0


def test_bigger_stadium_wins_more_home_games(make_team):
    home = make_team("Home", stadium_level=5)
    away = make_team("Away")
    results = many_results(home, away, 1000, seed=2024)

    home_wins = sum(r.home_score > r.away_score for r in results)
    away_wins = sum(r.away_score > r.home_score for r in results)
    assert home_wins > away_wins


def test_goal_chance_is_capped_against_empty_side(make_team):
    engine = MatchEngine(make_team("Home"), make_team("Away"), rng=make_rng(12))
    for participant in engine.away.on_pitch:
        participant.has_red = True

    home_chance, away_chance = engine.goal_chances()
    assert home_chance == C.MAX_GOAL_CHANCE
    assert away_chance == 0.0

    result = engine.simulate_match()
    assert result.away_score == 0
    assert result.home_score < 60
