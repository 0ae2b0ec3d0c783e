"""
MOODJOURNAL - Calendar Builder
月を1日〜末日の DayAggregate 列に展開する（イベントのない日も含む）

月内のイベントとノートはそれぞれ1回の範囲クエリで取得し、
日ごとの集計は Day Aggregator の aggregate_day に委ねる。
"""
import uuid
from collections import defaultdict
from datetime import date, datetime, tzinfo
from typing import Dict, Iterable, List, Sequence, Set

from app.core.exceptions import AggregationValidationError
from app.services.aggregation.dates import local_day, month_days, range_bounds
from app.services.aggregation.day_aggregator import aggregate_day
from app.services.aggregation.results import DayAggregate, MonthCalendar
from app.services.event_store import EventStore, MoodEvent, NoteStore


def validate_month(month, year, min_year: int, max_year: int) -> None:
    """月・年の範囲チェック（丸めずにエラーにする）"""
    if isinstance(month, bool) or not isinstance(month, int) or not 1 <= month <= 12:
        raise AggregationValidationError("Month must be between 1 and 12", field="month")
    if isinstance(year, bool) or not isinstance(year, int) or not min_year <= year <= max_year:
        raise AggregationValidationError(
            f"Year must be between {min_year} and {max_year}",
            field="year",
        )


def group_by_day(events: Iterable[MoodEvent], tz: tzinfo) -> Dict[date, List[MoodEvent]]:
    grouped: Dict[date, List[MoodEvent]] = defaultdict(list)
    for event in events:
        grouped[local_day(event.date, tz)].append(event)
    return grouped


def build_month(
    year: int,
    month: int,
    events: Sequence[MoodEvent],
    note_days: Set[date],
    tz: tzinfo,
) -> List[DayAggregate]:
    """純粋関数: 月の全日について日付昇順で DayAggregate を返す"""
    grouped = group_by_day(events, tz)
    return [
        aggregate_day(day, grouped.get(day, []), day in note_days)
        for day in month_days(year, month)
    ]


class CalendarBuilder:
    """月カレンダーの組み立て"""

    def __init__(
        self,
        event_store: EventStore,
        note_store: NoteStore,
        tz: tzinfo,
        min_year: int = 1970,
        max_year: int = 2200,
    ):
        self._events = event_store
        self._notes = note_store
        self._tz = tz
        self._min_year = min_year
        self._max_year = max_year

    async def build(self, user_id: uuid.UUID, month: int, year: int) -> MonthCalendar:
        validate_month(month, year, self._min_year, self._max_year)

        days = month_days(year, month)
        start, end = range_bounds(days[0], days[-1], self._tz)

        events = await self._events.query_events_for_range(user_id, start, end)
        note_times: List[datetime] = await self._notes.note_timestamps_in_range(user_id, start, end)
        note_days = {local_day(ts, self._tz) for ts in note_times}

        return MonthCalendar(
            month=month,
            year=year,
            days=build_month(year, month, events, note_days, self._tz),
        )
