"""
Match event logging for post-hoc analysis.

Flattens match timelines into a pandas DataFrame (one row per event, one case
per match) and exports it as CSV or, through PM4Py, as an XES event log.
"""

from dataclasses import asdict, dataclass, fields
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

import pandas as pd
import pm4py

from ..engine.match import MatchEvent, MatchEventType, MatchResult
from ..engine.team import Team

DEFAULT_KICKOFF = datetime(2024, 8, 17, 15, 0)

REQUIRED_COLUMNS = ["timestamp", "case_id", "activity", "minute", "team_id", "team_name"]


@dataclass
class EventRecord:
    """
    Single logged match event.

    Conforms to the PM4Py event log schema (case, activity, timestamp) with
    football context attached.
    """
    # PM4Py required fields
    timestamp: datetime
    case_id: str
    activity: str

    # Football context
    minute: int
    team_id: str
    team_name: str
    side: str
    player_id: str
    player_name: str
    description: str

    # Running score after the event
    home_score: int = 0
    away_score: int = 0

    sequence_number: int = 0


class MatchEventLogger:
    """
    Event logger shared by any number of matches.

    Each match is a separate case; its events are stamped at kickoff plus the
    event minute, with consecutive matches a week apart.
    """

    def __init__(self, kickoff: Optional[datetime] = None):
        """
        Initialize event logger.

        Args:
            kickoff: Kickoff time of the first logged match
        """
        self.first_kickoff = kickoff or DEFAULT_KICKOFF
        self.records: List[EventRecord] = []
        self.sequence_counter = 0
        self.match_count = 0

        self.current_case: Optional[str] = None
        self.current_kickoff = self.first_kickoff
        self._team_names: Dict[str, str] = {}
        self._home_team_id: Optional[str] = None

    def start_match(self, home: Team, away: Team) -> str:
        """
        Open a new case for a match about to kick off.

        Returns:
            The case id assigned to the match
        """
        self.match_count += 1
        self.current_case = f"match_{self.match_count:04d}"
        self.current_kickoff = self.first_kickoff + timedelta(weeks=self.match_count - 1)
        self._team_names = {home.id: home.name, away.id: away.name}
        self._home_team_id = home.id
        return self.current_case

    def log_event(self, event: MatchEvent, home_score: int = 0, away_score: int = 0) -> None:
        """
        Log a single match event into the current case.

        Args:
            event: Event emitted by the match engine
            home_score: Home goals after the event
            away_score: Away goals after the event
        """
        if self.current_case is None:
            raise RuntimeError("start_match() must be called before log_event()")

        record = EventRecord(
            timestamp=self.current_kickoff + timedelta(minutes=event.minute),
            case_id=self.current_case,
            activity=event.event_type.value,
            minute=event.minute,
            team_id=event.team_id,
            team_name=self._team_names.get(event.team_id, ""),
            side="home" if event.team_id == self._home_team_id else "away",
            player_id=event.player_id or "",
            player_name=event.player_name or "",
            description=event.description,
            home_score=home_score,
            away_score=away_score,
            sequence_number=self.sequence_counter,
        )
        self.records.append(record)
        self.sequence_counter += 1

    def log_match(self, result: MatchResult, home: Team, away: Team) -> str:
        """Log a finished result after the fact; returns its case id."""
        case_id = self.start_match(home, away)
        home_score = away_score = 0
        for event in result.events:
            if event.event_type == MatchEventType.GOAL:
                if event.team_id == result.home_team_id:
                    home_score += 1
                else:
                    away_score += 1
            self.log_event(event, home_score, away_score)
        return case_id

    def to_dataframe(self) -> pd.DataFrame:
        """Event log as a DataFrame with the PM4Py column aliases added."""
        df = pd.DataFrame([asdict(record) for record in self.records],
                          columns=[f.name for f in fields(EventRecord)])
        df["case:concept:name"] = df["case_id"]
        df["concept:name"] = df["activity"]
        df["time:timestamp"] = pd.to_datetime(df["timestamp"])
        return df

    def export_to_csv(self, filepath: str) -> Optional[pd.DataFrame]:
        """
        Export event log to CSV format.

        Args:
            filepath: Output file path

        Returns:
            The exported DataFrame, or None when there is nothing to export
        """
        if not self.records:
            return None
        df = self.to_dataframe()
        df.to_csv(filepath, index=False)
        return df

    def export_to_xes(self, filepath: str) -> None:
        """
        Export event log to XES format using PM4Py.

        Args:
            filepath: Output file path (.xes)
        """
        if not self.records:
            return
        df = self.to_dataframe()
        event_log = pm4py.format_dataframe(
            df,
            case_id="case:concept:name",
            activity_key="concept:name",
            timestamp_key="time:timestamp",
        )
        pm4py.write_xes(event_log, filepath)

    def get_summary_stats(self) -> Dict[str, Any]:
        """Get summary statistics for the event log."""
        if not self.records:
            return {}

        df = self.to_dataframe()
        activity_counts = df["activity"].value_counts()

        return {
            "total_events": len(df),
            "matches": df["case_id"].nunique(),
            "events_per_match": len(df) / max(1, df["case_id"].nunique()),
            "goals_logged": int(activity_counts.get("GOAL", 0)),
            "misses_logged": int(activity_counts.get("MISS", 0)),
            "cards_logged": int(activity_counts.get("YELLOW_CARD", 0) + activity_counts.get("RED_CARD", 0)),
            "substitutions_logged": int(activity_counts.get("SUBSTITUTION", 0)),
            "injuries_logged": int(activity_counts.get("INJURY", 0)),
        }

    def goals_by_minute_band(self, band: int = 15) -> pd.Series:
        """Goal counts grouped into ``band``-minute windows."""
        df = self.to_dataframe()
        goals = df[df["activity"] == "GOAL"]
        bands = ((goals["minute"] - 1) // band) * band + 1
        return goals.groupby(bands).size()


def validate_export(df: pd.DataFrame) -> List[str]:
    """
    Check an exported event log.

    Returns:
        Human-readable problems; empty when the log is clean
    """
    problems = []

    missing_columns = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing_columns:
        problems.append(f"Missing required columns: {missing_columns}")
        return problems

    missing = df[REQUIRED_COLUMNS].isnull().sum()
    for column, count in missing[missing > 0].items():
        problems.append(f"{count} missing values in {column}")

    timestamps = pd.to_datetime(df["timestamp"])
    for case_id, group in timestamps.groupby(df["case_id"]):
        if not group.is_monotonic_increasing:
            problems.append(f"Timestamps are not in chronological order for {case_id}")

    out_of_range = df[(df["minute"] < 1) | (df["minute"] > 90)]
    if not out_of_range.empty:
        problems.append(f"{len(out_of_range)} events outside minutes 1-90")

    return problems
