"""
Test player attribute generation.

Validates attribute bounds, exact summary means and economic derivations.
"""

import pytest

from football_manager.engine.player import (
    GOALKEEPING_ATTRIBUTES,
    SUMMARY_SOURCES,
    DetailedStats,
    Position,
    generate_player,
    player_value,
)
from football_manager.engine.rng import make_rng


def generated_players(count=200, seed=7, **kwargs):
    rng = make_rng(seed)
    return [generate_player(rng=rng, **kwargs) for _ in range(count)]


def test_detailed_attributes_within_bounds():
    """Every detailed attribute lies in [10, 99]."""
    for player in generated_players(min_overall=1, max_overall=99):
        for name in DetailedStats.names():
            value = getattr(player.detailed_stats, name)
            assert 10 <= value <= 99, f"{name}={value} out of range"


def test_potential_at_least_overall():
    for player in generated_players(min_overall=60, max_overall=99):
        assert player.overall <= player.potential <= 99


def test_overall_and_age_ranges():
    for player in generated_players(min_overall=70, max_overall=80):
        assert 70 <= player.overall <= 80
        assert 16 <= player.age <= 34
        assert 1 <= player.contract_length <= 4
        assert 70 <= player.morale <= 100
        assert 90 <= player.energy <= 100
        assert not player.is_injured


def test_summary_stats_are_exact_means():
    """Summary ratings equal the unweighted mean of their source attributes."""
    for player in generated_players():
        for stat, sources in SUMMARY_SOURCES.items():
            values = [getattr(player.detailed_stats, name) for name in sources]
            expected = sum(values) / len(values)
            actual = getattr(player.summary_stats, stat)
            assert actual == expected
            assert 10 <= actual <= 99


def test_summary_recomputed_after_detail_change(make_player):
    player = make_player(overall=60)
    player.detailed_stats.acceleration = 90
    player.detailed_stats.sprint_speed = 80
    player.refresh_summary()
    assert player.summary_stats.pace == 85


def test_value_and_wage_formula():
    for player in generated_players(count=50):
        expected = int(player.overall ** 2 * 100 * (1 + 0.1 * (player.potential - player.overall)))
        assert player.value == expected
        assert player.wage == int(player.value * 0.005)


def test_player_value_examples():
    assert player_value(80, 80) == 640_000
    assert player_value(80, 90) == 1_280_000


def test_requested_position_is_respected():
    for position in Position:
        for player in generated_players(count=20, position=position):
            assert player.position == position


def test_goalkeeper_outfield_attributes_low():
    for player in generated_players(count=50, min_overall=75, max_overall=90, position=Position.GK):
        for name in DetailedStats.names():
            value = getattr(player.detailed_stats, name)
            if name in GOALKEEPING_ATTRIBUTES:
                assert value >= min(99, player.overall + 5 - 5)
            else:
                assert 10 <= value <= 40


def test_defenders_outdefend_attackers_on_average():
    defenders = generated_players(count=100, min_overall=75, max_overall=75, position=Position.DEF)
    attackers = generated_players(count=100, min_overall=75, max_overall=75, position=Position.ATT)

    def mean(players, attr):
        return sum(getattr(p.summary_stats, attr) for p in players) / len(players)

    assert mean(defenders, "defense") > mean(attackers, "defense")
    assert mean(attackers, "shooting") > mean(defenders, "shooting")


def test_seeded_generation_is_reproducible():
    first = generated_players(count=5, seed=99)
    second = generated_players(count=5, seed=99)
    assert [p.to_dict() for p in first] == [p.to_dict() for p in second]


@pytest.mark.parametrize("low,high", [(80, 70), (0, 50), (50, 100)])
def test_malformed_range_raises(low, high):
    with pytest.raises(ValueError):
        generate_player(low, high, rng=make_rng(1))


def test_player_dict_round_trip():
    player = generated_players(count=1)[0]
    player.season_stats.goals = 4
    restored = type(player).from_dict(player.to_dict())
    assert restored == player
