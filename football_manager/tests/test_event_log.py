"""
Test the match event log and its exports.

Validates that exported CSV files carry the process-mining columns, stay in
chronological order and reproduce each match timeline.
"""

import os

import pandas as pd
import pytest

from football_manager.engine.match import MatchEvent, MatchEventType, simulate_match
from football_manager.engine.rng import make_rng
from football_manager.logger.event_logger import REQUIRED_COLUMNS, MatchEventLogger, validate_export


@pytest.fixture
def logged_matches(make_team):
    """Five matches recorded into one logger."""
    home, away = make_team("Home"), make_team("Away")
    event_logger = MatchEventLogger()
    rng = make_rng(31)
    results = [simulate_match(home, away, rng=rng, event_logger=event_logger) for _ in range(5)]
    return event_logger, results


def test_one_case_per_match(logged_matches):
    event_logger, results = logged_matches
    df = event_logger.to_dataframe()

    assert event_logger.match_count == 5
    assert len(df) == sum(len(r.events) for r in results)
    for n, result in enumerate(results, start=1):
        case = df[df["case_id"] == f"match_{n:04d}"]
        assert list(case["minute"]) == [e.minute for e in result.events]
        assert list(case["activity"]) == [e.event_type.value for e in result.events]


def test_running_score_ends_at_final_score(logged_matches):
    event_logger, results = logged_matches
    df = event_logger.to_dataframe()
    for n, result in enumerate(results, start=1):
        case = df[df["case_id"] == f"match_{n:04d}"]
        if case.empty:
            continue
        last = case.iloc[-1]
        assert (last["home_score"], last["away_score"]) == (result.home_score, result.away_score)


def test_csv_export_schema(logged_matches, tmp_path):
    event_logger, _ = logged_matches
    csv_file = tmp_path / "matches.csv"
    event_logger.export_to_csv(str(csv_file))

    df = pd.read_csv(csv_file)
    missing_columns = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    assert len(missing_columns) == 0, f"Missing required columns: {missing_columns}"
    for column in ("case:concept:name", "concept:name", "time:timestamp"):
        assert column in df.columns

    assert validate_export(df) == []


def test_timestamps_chronological(logged_matches, tmp_path):
    """Timestamps increase through the whole log, match after match."""
    event_logger, _ = logged_matches
    csv_file = tmp_path / "matches.csv"
    event_logger.export_to_csv(str(csv_file))

    df = pd.read_csv(csv_file)
    timestamps = pd.to_datetime(df["timestamp"])
    assert timestamps.isnull().sum() == 0
    assert timestamps.is_monotonic_increasing


def test_timestamps_follow_match_minute(logged_matches):
    event_logger, _ = logged_matches
    for record in event_logger.records:
        kickoff = record.timestamp - pd.Timedelta(minutes=record.minute)
        assert kickoff.hour == 15 and kickoff.minute == 0


def test_empty_log_exports_nothing(tmp_path):
    event_logger = MatchEventLogger()
    csv_file = tmp_path / "empty.csv"
    assert event_logger.export_to_csv(str(csv_file)) is None
    assert not csv_file.exists()
    assert event_logger.get_summary_stats() == {}


def test_logging_requires_open_match():
    event_logger = MatchEventLogger()
    with pytest.raises(RuntimeError):
        event_logger.log_event(MatchEvent(5, MatchEventType.MISS, "Wide", "t1"))


def test_log_match_after_the_fact(make_team):
    home, away = make_team("Home"), make_team("Away")
    result = simulate_match(home, away, rng=make_rng(8))
    event_logger = MatchEventLogger()

    case_id = event_logger.log_match(result, home, away)

    df = event_logger.to_dataframe()
    assert case_id == "match_0001"
    assert len(df) == len(result.events)
    assert set(df["side"]) <= {"home", "away"}


def test_summary_stats_count_goals(logged_matches):
    event_logger, results = logged_matches
    stats = event_logger.get_summary_stats()
    assert stats["goals_logged"] == sum(r.total_goals for r in results)
    assert stats["matches"] <= 5
    assert event_logger.goals_by_minute_band().sum() == stats["goals_logged"]


def test_validate_export_flags_problems():
    df = pd.DataFrame({
        "timestamp": ["2024-08-17 15:30:00", "2024-08-17 15:10:00"],
        "case_id": ["match_0001", "match_0001"],
        "activity": ["GOAL", "MISS"],
        "minute": [30, 95],
        "team_id": ["t1", None],
        "team_name": ["Home", "Away"],
    })
    problems = validate_export(df)
    assert any("team_id" in p for p in problems)
    assert any("chronological" in p for p in problems)
    assert any("outside minutes" in p for p in problems)
    assert validate_export(df.drop(columns=["activity"])) == [
        "Missing required columns: ['activity']"]


def test_xes_export(logged_matches, tmp_path):
    event_logger, _ = logged_matches
    xes_file = tmp_path / "matches.xes"
    event_logger.export_to_xes(str(xes_file))
    assert os.path.getsize(xes_file) > 0
