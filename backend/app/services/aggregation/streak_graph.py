"""
MOODJOURNAL - Streak & Graph Calculator
連続記録日数・期間グラフ・よく出る要因の算出

「今日」は常に引数で受け取る（テストで境界を固定するため）。
"""
import uuid
from collections import Counter
from datetime import date, timedelta, tzinfo
from fractions import Fraction
from typing import Iterable, List, Sequence, Set

from app.core.exceptions import AggregationValidationError
from app.models.mood import MoodFactor
from app.services.aggregation.calendar_builder import group_by_day
from app.services.aggregation.dates import (
    local_day,
    mean_level,
    range_bounds,
    round_half_up,
    trailing_days,
)
from app.services.aggregation.results import GraphPoint, GraphSeries, StatisticsSummary
from app.services.event_store import EventStore, MoodEvent


def validate_period(period, min_period: int = 1, max_period: int = 365) -> None:
    if isinstance(period, bool) or not isinstance(period, int) or not min_period <= period <= max_period:
        raise AggregationValidationError(
            f"Period must be between {min_period} and {max_period} days",
            field="period",
        )


def active_days(events: Iterable[MoodEvent], tz: tzinfo) -> Set[date]:
    """イベントが1件以上ある日の集合"""
    return {local_day(event.date, tz) for event in events}


def compute_streak(days_with_events: Set[date], today: date, max_days: int = 365) -> int:
    """
    today から過去へ連続して記録のある日数

    today 自体に記録がなければ、昨日以前に記録があっても 0。
    遡る日数は max_days で打ち切る。
    """
    streak = 0
    for offset in range(max_days):
        if today - timedelta(days=offset) not in days_with_events:
            break
        streak += 1
    return streak


def build_graph(
    events: Sequence[MoodEvent],
    today: date,
    period: int,
    tz: tzinfo,
) -> GraphSeries:
    """
    [today - period + 1, today] の日別平均

    記録のない日は点を作らず、全体平均にも 0 として混ぜない（欠損扱い）。
    全体平均は丸める前の日別平均の平均。
    """
    grouped = group_by_day(events, tz)
    points: List[GraphPoint] = []
    daily_means: List[Fraction] = []

    for day in trailing_days(today, period):
        day_events = grouped.get(day)
        if not day_events:
            continue
        mean = mean_level(event.level for event in day_events)
        daily_means.append(mean)
        points.append(
            GraphPoint(
                date=day,
                average_level=round_half_up(mean, 1),
                event_count=len(day_events),
            )
        )

    overall = mean_level(daily_means)
    return GraphSeries(
        data=points,
        average_level=round_half_up(overall, 1) if overall is not None else 0.0,
        period=period,
    )


def top_factors(events: Iterable[MoodEvent], limit: int = 3) -> List[MoodFactor]:
    """
    出現回数の多い要因（1イベントにつき1回カウント）

    同数の場合は先に処理したイベントで先に出てきたものが上位。
    Counter.most_common は同数の要素を最初に出現した順に並べる。
    """
    counts: Counter = Counter()
    for event in events:
        counts.update(event.factors)
    return [factor for factor, _ in counts.most_common(limit)]


def summarize(
    events: Sequence[MoodEvent],
    today: date,
    tz: tzinfo,
    streak_max_days: int = 365,
    top_limit: int = 3,
) -> StatisticsSummary:
    """
    全期間の統計

    events はストアの返した順（新しい順）のまま渡す。
    先頭が最新のイベントになる。
    """
    if not events:
        return StatisticsSummary(
            total_events=0,
            average_level=0.0,
            top_factors=[],
            streak_days=0,
            most_recent_event=None,
        )

    return StatisticsSummary(
        total_events=len(events),
        average_level=round_half_up(mean_level(event.level for event in events), 1),
        top_factors=top_factors(events, top_limit),
        streak_days=compute_streak(active_days(events, tz), today, streak_max_days),
        most_recent_event=events[0],
    )


class StreakGraphCalculator:
    """ストアの期間クエリを使うストリーク / グラフ計算"""

    def __init__(
        self,
        event_store: EventStore,
        tz: tzinfo,
        streak_max_days: int = 365,
        min_period: int = 1,
        max_period: int = 365,
    ):
        self._events = event_store
        self._tz = tz
        self._streak_max_days = streak_max_days
        self._min_period = min_period
        self._max_period = max_period

    async def streak(self, user_id: uuid.UUID, today: date) -> int:
        first = today - timedelta(days=self._streak_max_days - 1)
        start, end = range_bounds(first, today, self._tz)
        events = await self._events.query_events_for_range(user_id, start, end)
        return compute_streak(active_days(events, self._tz), today, self._streak_max_days)

    async def graph(self, user_id: uuid.UUID, period: int, today: date) -> GraphSeries:
        validate_period(period, self._min_period, self._max_period)
        start, end = range_bounds(today - timedelta(days=period - 1), today, self._tz)
        events = await self._events.query_events_for_range(user_id, start, end)
        return build_graph(events, today, period, self._tz)
