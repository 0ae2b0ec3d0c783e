"""
MOODJOURNAL - Mood Schemas
気分記録・統計・グラフのスキーマ（JSON は camelCase）
"""
import uuid
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.models.mood import MoodFactor, MOOD_LEVEL_MAX, MOOD_LEVEL_MIN, MOOD_NOTE_MAX_LENGTH
from app.services.aggregation.results import GraphSeries, StatisticsSummary
from app.services.event_store import MoodEvent


class CamelModel(BaseModel):
    """camelCase で入出力するスキーマの基底"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class MoodCreate(CamelModel):
    """今日の気分の登録リクエスト"""

    level: int = Field(..., ge=MOOD_LEVEL_MIN, le=MOOD_LEVEL_MAX)
    note: Optional[str] = Field(default=None, max_length=MOOD_NOTE_MAX_LENGTH)
    factors: List[MoodFactor] = Field(default_factory=list)


class MoodResponse(CamelModel):
    """気分記録レスポンス"""

    id: uuid.UUID
    user_id: uuid.UUID
    level: int
    note: Optional[str] = None
    factors: List[MoodFactor]
    date: datetime
    created_at: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, event: MoodEvent) -> "MoodResponse":
        return cls(
            id=event.id,
            user_id=event.user_id,
            level=event.level,
            note=event.note,
            factors=list(event.factors),
            date=event.date,
            created_at=event.created_at,
            updated_at=event.updated_at,
        )


class TodayMoodResponse(CamelModel):
    mood: Optional[MoodResponse] = None


class GraphPointResponse(CamelModel):
    """グラフの1点（記録のある日だけ）"""

    date: date
    average_level: float
    event_count: int


class GraphResponse(CamelModel):
    """期間グラフ"""

    data: List[GraphPointResponse]
    average_level: float
    period: int

    @classmethod
    def from_domain(cls, series: GraphSeries) -> "GraphResponse":
        return cls(
            data=[
                GraphPointResponse(
                    date=point.date,
                    average_level=point.average_level,
                    event_count=point.event_count,
                )
                for point in series.data
            ],
            average_level=series.average_level,
            period=series.period,
        )


class StatisticsResponse(CamelModel):
    """全期間の統計"""

    total_events: int
    average_level: float
    top_factors: List[MoodFactor]
    streak_days: int
    most_recent_event: Optional[MoodResponse] = None

    @classmethod
    def from_domain(cls, summary: StatisticsSummary) -> "StatisticsResponse":
        return cls(
            total_events=summary.total_events,
            average_level=summary.average_level,
            top_factors=list(summary.top_factors),
            streak_days=summary.streak_days,
            most_recent_event=(
                MoodResponse.from_domain(summary.most_recent_event)
                if summary.most_recent_event
                else None
            ),
        )
