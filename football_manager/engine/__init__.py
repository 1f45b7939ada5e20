"""
Football management simulation engine components.

This module contains the simulation core including:
- Player attribute generation
- Team, tactics and roster generation
- Minute-by-minute match simulation
- Season progression (standings, condition, training, contracts, transfers)
- Match news generation
"""

from .player import Player, Position, DetailedStats, SummaryStats, generate_player
from .team import Team, Tactics, Formation, Intensity, Style, generate_team, initialize_league, generate_transfer_market
from .match import MatchEngine, MatchEvent, MatchEventType, MatchResult, simulate_match
from .news import NewsItem, generate_match_news
from .season import GameState, Drill, new_game, play_week
from .rng import make_rng

__all__ = [
    'Player', 'Position', 'DetailedStats', 'SummaryStats', 'generate_player',
    'Team', 'Tactics', 'Formation', 'Intensity', 'Style',
    'generate_team', 'initialize_league', 'generate_transfer_market',
    'MatchEngine', 'MatchEvent', 'MatchEventType', 'MatchResult', 'simulate_match',
    'NewsItem', 'generate_match_news',
    'GameState', 'Drill', 'new_game', 'play_week',
    'make_rng',
]
