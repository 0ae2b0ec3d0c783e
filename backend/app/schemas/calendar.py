"""
MOODJOURNAL - Calendar Schemas
月カレンダー・日別詳細・フィルタのスキーマ
"""
from datetime import date
from typing import List, Optional

from app.models.mood import MoodFactor
from app.schemas.mood import CamelModel, MoodResponse
from app.schemas.note import NoteResponse
from app.services.aggregation.results import DayAggregate, DayDetail, MonthCalendar


class DayAggregateResponse(CamelModel):
    """カレンダーの1日（記録がなければ averageLevel は null）"""

    date: date
    average_level: Optional[float] = None
    event_count: int
    has_notes: bool
    factors: List[MoodFactor]

    @classmethod
    def from_domain(cls, day: DayAggregate) -> "DayAggregateResponse":
        return cls(
            date=day.date,
            average_level=day.average_level,
            event_count=day.event_count,
            has_notes=day.has_notes,
            factors=list(day.factors),
        )


class MonthCalendarResponse(CamelModel):
    month: int
    year: int
    days: List[DayAggregateResponse]

    @classmethod
    def from_domain(cls, calendar: MonthCalendar) -> "MonthCalendarResponse":
        return cls(
            month=calendar.month,
            year=calendar.year,
            days=[DayAggregateResponse.from_domain(day) for day in calendar.days],
        )


class DayDetailResponse(CamelModel):
    """日別詳細"""

    date: date
    moods: List[MoodResponse]
    notes: List[NoteResponse]
    average_mood_level: Optional[float] = None
    factors: List[MoodFactor]

    @classmethod
    def from_domain(cls, detail: DayDetail) -> "DayDetailResponse":
        return cls(
            date=detail.date,
            moods=[MoodResponse.from_domain(m) for m in detail.moods],
            notes=[NoteResponse.from_domain(n) for n in detail.notes],
            average_mood_level=detail.average_mood_level,
            factors=list(detail.factors),
        )


class FilterOption(CamelModel):
    value: MoodFactor
    label: str
    icon: str


class FilterListResponse(CamelModel):
    filters: List[FilterOption]


# 要因タグの表示名とアイコン（SF Symbols 名）
FACTOR_FILTERS: List[FilterOption] = [
    FilterOption(value=MoodFactor.SLEEP, label="Slept well", icon="moon.fill"),
    FilterOption(value=MoodFactor.NO_SLEEP, label="Slept badly", icon="moon"),
    FilterOption(value=MoodFactor.EXERCISE, label="Exercise", icon="figure.run"),
    FilterOption(value=MoodFactor.WORK, label="Work", icon="briefcase.fill"),
    FilterOption(value=MoodFactor.FAMILY, label="Family", icon="house.fill"),
    FilterOption(value=MoodFactor.FRIENDS, label="Friends", icon="person.2.fill"),
    FilterOption(value=MoodFactor.HEALTH, label="Health", icon="heart.fill"),
    FilterOption(value=MoodFactor.WEATHER, label="Weather", icon="sun.max.fill"),
    FilterOption(value=MoodFactor.FOOD, label="Food", icon="fork.knife"),
    FilterOption(value=MoodFactor.HOBBY, label="Hobby", icon="paintbrush.fill"),
]
