"""
MOODJOURNAL - Pydantic Schemas
APIリクエスト・レスポンスのスキーマ定義
"""
from app.schemas.mood import (
    MoodCreate,
    MoodResponse,
    TodayMoodResponse,
    GraphPointResponse,
    GraphResponse,
    StatisticsResponse,
)
from app.schemas.note import NoteResponse
from app.schemas.calendar import (
    DayAggregateResponse,
    MonthCalendarResponse,
    DayDetailResponse,
    FilterOption,
    FilterListResponse,
    FACTOR_FILTERS,
)

__all__ = [
    # Mood
    "MoodCreate",
    "MoodResponse",
    "TodayMoodResponse",
    "GraphPointResponse",
    "GraphResponse",
    "StatisticsResponse",
    # Note
    "NoteResponse",
    # Calendar
    "DayAggregateResponse",
    "MonthCalendarResponse",
    "DayDetailResponse",
    "FilterOption",
    "FilterListResponse",
    "FACTOR_FILTERS",
]
