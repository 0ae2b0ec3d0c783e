"""
MOODJOURNAL - Mood Aggregation Service
カレンダー・日別詳細・統計・グラフの窓口

各処理は読み取り専用で、ストアの例外（StoreUnavailable）は捕捉せずに呼び出し元へ伝播する。
入力チェックはストアへ問い合わせる前に行う。
"""
import uuid
from datetime import date
from typing import Optional

from app.core.config import Settings
from app.core.logger import get_traced_logger, trace_execution
from app.services.aggregation.calendar_builder import CalendarBuilder
from app.services.aggregation.dates import (
    day_bounds,
    get_timezone,
    local_today,
    parse_day_key,
)
from app.services.aggregation.day_aggregator import average_of, union_factors
from app.services.aggregation.results import DayDetail, GraphSeries, MonthCalendar, StatisticsSummary
from app.services.aggregation.streak_graph import StreakGraphCalculator, summarize, validate_period
from app.services.event_store import EventStore, NoteStore

logger = get_traced_logger("Aggregation")


class MoodAggregationService:
    """気分データの集計サービス"""

    def __init__(self, event_store: EventStore, note_store: NoteStore, settings: Settings):
        self._events = event_store
        self._notes = note_store
        self._settings = settings
        self._tz = get_timezone(settings.calendar_timezone)
        self._calendar = CalendarBuilder(
            event_store,
            note_store,
            self._tz,
            min_year=settings.calendar_min_year,
            max_year=settings.calendar_max_year,
        )
        self._streak_graph = StreakGraphCalculator(
            event_store,
            self._tz,
            streak_max_days=settings.streak_max_days,
            min_period=settings.graph_min_period,
            max_period=settings.graph_max_period,
        )

    def today(self) -> date:
        return local_today(self._tz)

    @trace_execution("Aggregation", "get_month_calendar")
    async def get_month_calendar(self, user_id: uuid.UUID, month: int, year: int) -> MonthCalendar:
        return await self._calendar.build(user_id, month, year)

    @trace_execution("Aggregation", "get_day_detail")
    async def get_day_detail(self, user_id: uuid.UUID, date_key: str) -> DayDetail:
        day = parse_day_key(date_key)
        day_start, day_end = day_bounds(day, self._tz)

        moods = await self._events.query_events_for_day(user_id, day_start, day_end)
        notes = await self._notes.notes_for_day(user_id, day_start, day_end)

        return DayDetail(
            date=day,
            moods=moods,
            notes=notes,
            average_mood_level=average_of(moods),
            factors=union_factors(moods),
        )

    @trace_execution("Aggregation", "get_statistics")
    async def get_statistics(self, user_id: uuid.UUID, today: Optional[date] = None) -> StatisticsSummary:
        today = today or self.today()
        events = await self._events.query_all_events(user_id)
        summary = summarize(
            events,
            today,
            self._tz,
            streak_max_days=self._settings.streak_max_days,
            top_limit=self._settings.top_factors_limit,
        )
        logger.debug(
            "Statistics computed",
            metadata={"total_events": summary.total_events, "streak_days": summary.streak_days},
        )
        return summary

    @trace_execution("Aggregation", "get_streak")
    async def get_streak(self, user_id: uuid.UUID, today: Optional[date] = None) -> int:
        return await self._streak_graph.streak(user_id, today or self.today())

    @trace_execution("Aggregation", "get_graph")
    async def get_graph(
        self,
        user_id: uuid.UUID,
        period_days: Optional[int] = None,
        today: Optional[date] = None,
    ) -> GraphSeries:
        if period_days is None:
            period_days = self._settings.graph_default_period
        validate_period(period_days, self._settings.graph_min_period, self._settings.graph_max_period)
        return await self._streak_graph.graph(user_id, period_days, today or self.today())
