"""
Football Manager Simulation Package

Player generation, match simulation and season progression for a
single-player football management game.
"""

__version__ = "1.0.0"

from .engine.match import MatchEngine, simulate_match
from .engine.season import GameState, new_game, play_week
from .scripts.run_sim import simulate_matches

__all__ = ["MatchEngine", "simulate_match", "GameState", "new_game", "play_week", "simulate_matches"]
