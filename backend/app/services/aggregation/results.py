"""
MOODJOURNAL - Aggregation Results
集計結果のドメイン型（読み取りのたびに再計算し、永続化しない）
"""
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Tuple

from app.models.mood import MoodFactor
from app.services.event_store import MoodEvent, NoteEntry


@dataclass(frozen=True)
class DayAggregate:
    """1日分の集計"""

    date: date
    average_level: Optional[float]  # イベント0件なら None
    event_count: int
    has_notes: bool
    factors: Tuple[MoodFactor, ...] = ()


@dataclass(frozen=True)
class MonthCalendar:
    month: int
    year: int
    days: List[DayAggregate] = field(default_factory=list)


@dataclass(frozen=True)
class DayDetail:
    """日別詳細（moods / notes はストアの値をそのまま渡す）"""

    date: date
    moods: List[MoodEvent]
    notes: List[NoteEntry]
    average_mood_level: Optional[float]
    factors: Tuple[MoodFactor, ...] = ()


@dataclass(frozen=True)
class GraphPoint:
    date: date
    average_level: float
    event_count: int


@dataclass(frozen=True)
class GraphSeries:
    data: List[GraphPoint]
    average_level: float
    period: int


@dataclass(frozen=True)
class StatisticsSummary:
    total_events: int
    average_level: float
    top_factors: List[MoodFactor]
    streak_days: int
    most_recent_event: Optional[MoodEvent] = None
