"""
MOODJOURNAL - Day Aggregator
1日分の気分イベントを DayAggregate に畳み込む
"""
import uuid
from datetime import date, tzinfo
from typing import Sequence, Tuple

from app.models.mood import MoodFactor
from app.services.aggregation.dates import day_bounds, mean_level, round_half_up
from app.services.aggregation.results import DayAggregate
from app.services.event_store import EventStore, MoodEvent, NoteStore


def union_factors(events: Sequence[MoodEvent]) -> Tuple[MoodFactor, ...]:
    """全イベントの要因タグの和集合（最初に出てきた順）"""
    return tuple(dict.fromkeys(f for event in events for f in event.factors))


def average_of(events: Sequence[MoodEvent]):
    """平均 level を小数1桁で四捨五入。イベントがなければ None"""
    mean = mean_level(event.level for event in events)
    if mean is None:
        return None
    return round_half_up(mean, 1)


def aggregate_day(day: date, events: Sequence[MoodEvent], has_notes: bool = False) -> DayAggregate:
    """
    純粋な集計関数

    events はその日に属するものだけを渡すこと。
    event_count は渡された件数そのもの（重複排除も欠落もしない）。
    """
    return DayAggregate(
        date=day,
        average_level=average_of(events),
        event_count=len(events),
        has_notes=has_notes,
        factors=union_factors(events),
    )


class DayAggregator:
    """ストアから1日分を取得して集計する"""

    def __init__(self, event_store: EventStore, note_store: NoteStore, tz: tzinfo):
        self._events = event_store
        self._notes = note_store
        self._tz = tz

    async def aggregate(self, user_id: uuid.UUID, day: date) -> DayAggregate:
        day_start, day_end = day_bounds(day, self._tz)
        events = await self._events.query_events_for_day(user_id, day_start, day_end)
        # ノートの有無は気分の計算には影響しない
        has_notes = await self._notes.note_exists_for_day(user_id, day_start, day_end)
        return aggregate_day(day, events, has_notes)
