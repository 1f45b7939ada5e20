"""
Main simulation script for running football matches and seasons.

Provides CLI interface and batch simulation capabilities.
"""

import argparse
import logging
import os
import sys
import time
from typing import Any, Dict, List, Optional

import pandas as pd

from ..engine.match import MatchEngine
from ..engine.rng import make_rng
from ..engine.season import GameState, league_table, new_game, play_week
from ..engine.team import Intensity, Style, Tactics, generate_team
from ..logger.event_logger import MatchEventLogger, validate_export


def create_default_teams(rng) -> tuple:
    """Create default home and away teams for simulation."""
    home_team = generate_team("Home United", rng)
    home_team.tactics = Tactics(intensity=Intensity.HIGH, style=Style.POSSESSION)

    away_team = generate_team("Away City", rng)
    away_team.tactics = Tactics(intensity=Intensity.NORMAL, style=Style.COUNTER)

    return home_team, away_team


def simulate_single_match(random_seed: Optional[int] = None,
                          verbose: bool = True,
                          event_logger: Optional[MatchEventLogger] = None) -> Dict[str, Any]:
    """
    Simulate a single football match.

    Args:
        random_seed: Random seed for reproducibility
        verbose: Print detailed output
        event_logger: Event log to record the match into

    Returns:
        Dict containing match results and statistics
    """
    if verbose:
        print(f"Setting up match with seed: {random_seed}")

    rng = make_rng(random_seed)
    home_team, away_team = create_default_teams(rng)

    engine = MatchEngine(home_team, away_team, rng=rng, event_logger=event_logger)

    start_time = time.time()
    result = engine.simulate_match()
    simulation_time = time.time() - start_time

    summary = {
        "teams": {"home": result.home_team_name, "away": result.away_team_name},
        "final_score": {"home": result.home_score, "away": result.away_score},
        "possession": {"home": result.stats.home_possession, "away": result.stats.away_possession},
        "shots": {"home": result.stats.home_shots, "away": result.stats.away_shots},
        "events": [f"{e.minute}' {e.description}" for e in result.events],
        "simulation_time_seconds": simulation_time,
    }

    if verbose:
        print(f"Simulation completed in {simulation_time:.3f} seconds")
        print_match_summary(summary)

    return summary


def simulate_matches(n_matches: int = 1,
                     random_seed: Optional[int] = None,
                     out_dir: str = "logs",
                     verbose: bool = True) -> List[Dict[str, Any]]:
    """
    Simulate multiple football matches.

    Args:
        n_matches: Number of matches to simulate
        random_seed: Base random seed
        out_dir: Output directory for logs
        verbose: Print detailed output

    Returns:
        List of match results
    """
    if verbose:
        print(f"Starting simulation of {n_matches} matches")
        print(f"Output directory: {out_dir}")

    os.makedirs(out_dir, exist_ok=True)
    event_logger = MatchEventLogger()

    results = []
    total_start_time = time.time()

    for i in range(n_matches):
        if verbose:
            print(f"\n--- Match {i+1}/{n_matches} ---")

        # Use different seed for each match if base seed provided
        match_seed = random_seed + i if random_seed is not None else None
        results.append(simulate_single_match(random_seed=match_seed, verbose=verbose,
                                             event_logger=event_logger))

    log_files = export_logs(event_logger, out_dir)
    for result in results:
        result["log_files"] = log_files

    total_time = time.time() - total_start_time

    if verbose:
        print(f"\n=== SIMULATION SUMMARY ===")
        print(f"Total matches: {n_matches}")
        print(f"Total time: {total_time:.2f} seconds")
        print(f"Average time per match: {total_time/max(1, n_matches):.3f} seconds")
        print(f"Logs exported to: {log_files}")
        print_batch_summary(results)

    return results


def simulate_season(weeks: int,
                    random_seed: Optional[int] = None,
                    out_dir: str = "logs",
                    verbose: bool = True) -> GameState:
    """
    Play ``weeks`` league weeks from a fresh game.

    Returns:
        The final game state
    """
    rng = make_rng(random_seed)
    state = new_game(rng=rng)
    event_logger = MatchEventLogger()

    os.makedirs(out_dir, exist_ok=True)
    for _ in range(weeks):
        week = state.current_week
        results = play_week(state, rng, event_logger)
        if verbose:
            print(f"\n--- Week {week} ---")
            for result in results:
                print(f"  {result.home_team_name} {result.home_score}-{result.away_score} {result.away_team_name}")

    export_logs(event_logger, out_dir)

    if verbose:
        print_league_table(state)
        for item in state.news[-3:]:
            print(f"\n[Week {item.week}] {item.title}\n  {item.body}")

    return state


def export_logs(event_logger: MatchEventLogger, out_dir: str) -> Dict[str, str]:
    """Export the event log to CSV and XES; returns the written paths."""
    timestamp = time.strftime("%Y%m%d_%H%M%S")
    csv_path = os.path.join(out_dir, f"matches_{timestamp}.csv")
    xes_path = os.path.join(out_dir, f"matches_{timestamp}.xes")

    df = event_logger.export_to_csv(csv_path)
    if df is None:
        return {}
    for problem in validate_export(df):
        print(f"WARNING: {problem}")
    event_logger.export_to_xes(xes_path)
    return {"csv": csv_path, "xes": xes_path}


def print_match_summary(result: Dict[str, Any]) -> None:
    """Print formatted match summary."""
    print(f"\n=== MATCH SUMMARY ===")
    print(f"Final Score: {result['teams']['home']} {result['final_score']['home']}-{result['final_score']['away']} {result['teams']['away']}")

    print(f"\nPossession:")
    print(f"  {result['teams']['home']}: {result['possession']['home']}%")
    print(f"  {result['teams']['away']}: {result['possession']['away']}%")

    print(f"\nShots:")
    print(f"  {result['teams']['home']}: {result['shots']['home']}")
    print(f"  {result['teams']['away']}: {result['shots']['away']}")

    if result["events"]:
        print(f"\nTimeline:")
        for line in result["events"]:
            print(f"  {line}")


def print_batch_summary(results: List[Dict[str, Any]]) -> None:
    """Print summary statistics across multiple matches."""
    if not results:
        return

    df = pd.DataFrame({
        "home_goals": [r["final_score"]["home"] for r in results],
        "away_goals": [r["final_score"]["away"] for r in results],
        "home_possession": [r["possession"]["home"] for r in results],
    })
    home_wins = int((df["home_goals"] > df["away_goals"]).sum())
    away_wins = int((df["away_goals"] > df["home_goals"]).sum())
    draws = len(df) - home_wins - away_wins

    print(f"\nResults Distribution:")
    print(f"  Home wins: {home_wins} ({home_wins/len(df)*100:.1f}%)")
    print(f"  Away wins: {away_wins} ({away_wins/len(df)*100:.1f}%)")
    print(f"  Draws: {draws} ({draws/len(df)*100:.1f}%)")

    print(f"\nAverages per match:")
    print(f"  Goals: {(df['home_goals'] + df['away_goals']).mean():.2f}")
    print(f"  Home possession: {df['home_possession'].mean():.1f}%")


def print_league_table(state: GameState) -> None:
    table = pd.DataFrame([
        {"Team": t.name, "P": t.matches_played, "W": t.wins, "D": t.draws,
         "L": t.losses, "GD": t.goal_diff, "Pts": t.points}
        for t in league_table(state.teams)
    ])
    table.index = range(1, len(table) + 1)
    print(f"\n=== LEAGUE TABLE (after week {state.current_week - 1}) ===")
    print(table.to_string())


def validate_simulation_output(results: List[Dict[str, Any]]) -> bool:
    """
    Validate simulation meets quality requirements.

    Returns:
        bool: True if all quality gates passed
    """
    print("\n=== QUALITY VALIDATION ===")

    passed_checks = 0
    total_checks = 3

    # Check 1: All matches completed
    if len(results) > 0 and all('final_score' in r for r in results):
        print("✓ All matches completed successfully")
        passed_checks += 1
    else:
        print("✗ Some matches failed to complete")

    # Check 2: Possession always complementary and in range
    if all(r['possession']['home'] + r['possession']['away'] == 100
           and 20 <= r['possession']['home'] <= 80 for r in results):
        print("✓ Possession splits valid")
        passed_checks += 1
    else:
        print("✗ Invalid possession split found")

    # Check 3: Goal rate is reasonable
    avg_goals = sum(r['final_score']['home'] + r['final_score']['away'] for r in results) / max(1, len(results))
    if 1.5 <= avg_goals <= 4.0:
        print(f"✓ Average goals per match: {avg_goals:.2f} (reasonable range)")
        passed_checks += 1
    else:
        print(f"✗ Average goals per match: {avg_goals:.2f} (outside reasonable range)")

    print(f"\nValidation Result: {passed_checks}/{total_checks} checks passed")
    return passed_checks == total_checks


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(description='Football Manager Simulation')
    parser.add_argument('--matches', type=int, default=1, help='Number of matches to simulate')
    parser.add_argument('--weeks', type=int, default=0, help='Play this many league weeks instead of single matches')
    parser.add_argument('--seed', type=int, default=42, help='Random seed for reproducibility')
    parser.add_argument('--output-dir', type=str, default='logs', help='Output directory for logs')
    parser.add_argument('--quiet', action='store_true', help='Suppress detailed output')
    parser.add_argument('--validate', action='store_true', help='Run quality validation')
    parser.add_argument('--log-level', type=str, default='WARNING', help='Diagnostic logging level')

    args = parser.parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    try:
        if args.weeks > 0:
            simulate_season(args.weeks, random_seed=args.seed, out_dir=args.output_dir,
                            verbose=not args.quiet)
        else:
            results = simulate_matches(
                n_matches=args.matches,
                random_seed=args.seed,
                out_dir=args.output_dir,
                verbose=not args.quiet
            )
            if args.validate and not validate_simulation_output(results):
                sys.exit(1)

        print(f"\nSimulation completed successfully!")
        print(f"Logs saved to: {os.path.abspath(args.output_dir)}")

    except KeyboardInterrupt:
        print("\nSimulation interrupted by user")
        sys.exit(1)


if __name__ == "__main__":
    main()
