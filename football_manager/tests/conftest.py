"""
Shared fixtures for the simulation tests.

Hand-built players and teams keep ratings fixed so tests can reason about
exact strengths; generated ones come from seeded generators.
"""

import itertools

import pytest

from football_manager.engine.player import DetailedStats, Player, Position, player_value
from football_manager.engine.rng import make_rng
from football_manager.engine.team import Tactics, Team

_ids = itertools.count(1)

SQUAD_LAYOUT = [Position.GK] * 3 + [Position.DEF] * 7 + [Position.MID] * 7 + [Position.ATT] * 5


def build_player(overall=75, position=Position.MID, energy=100, morale=100,
                 potential=None, wage=None, contract_length=2, value=None):
    potential = overall if potential is None else potential
    value = player_value(overall, potential) if value is None else value
    stat = max(10, min(99, overall))
    detailed = DetailedStats(**{name: stat for name in DetailedStats.names()})
    return Player(
        id=f"p{next(_ids)}",
        name=f"Player {next(_ids)}",
        age=25,
        position=position,
        overall=overall,
        potential=potential,
        detailed_stats=detailed,
        energy=energy,
        morale=morale,
        value=value,
        wage=int(value * 0.005) if wage is None else wage,
        contract_length=contract_length,
    )


def build_team(name="Test FC", overall=75, energy=100, morale=100, squad_size=22,
               tactics=None, stadium_level=1, budget=50_000_000):
    players = [build_player(overall, position, energy, morale)
               for position in SQUAD_LAYOUT[:squad_size]]
    return Team(
        id=f"t{next(_ids)}",
        name=name,
        players=players,
        tactics=tactics or Tactics(),
        stadium_level=stadium_level,
        budget=budget,
    )


@pytest.fixture
def rng():
    return make_rng(20240817)


@pytest.fixture
def make_player():
    return build_player


@pytest.fixture
def make_team():
    return build_team
