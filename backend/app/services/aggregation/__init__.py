"""
MOODJOURNAL - Aggregation Services
気分イベントから日別集計・月カレンダー・ストリーク・グラフを導出する
"""
from app.services.aggregation.day_aggregator import DayAggregator, aggregate_day
from app.services.aggregation.calendar_builder import CalendarBuilder
from app.services.aggregation.streak_graph import StreakGraphCalculator
from app.services.aggregation.service import MoodAggregationService

__all__ = [
    "DayAggregator",
    "aggregate_day",
    "CalendarBuilder",
    "StreakGraphCalculator",
    "MoodAggregationService",
]
