"""
MOODJOURNAL - Mood Endpoints
今日の気分の登録・統計・グラフ API
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import get_aggregation_service, get_current_user, get_mood_recorder
from app.models.user import User
from app.schemas.mood import (
    GraphResponse,
    MoodCreate,
    MoodResponse,
    StatisticsResponse,
    TodayMoodResponse,
)
from app.services.aggregation import MoodAggregationService
from app.services.mood_recorder import MoodRecorder

router = APIRouter()


@router.post("", response_model=MoodResponse, status_code=status.HTTP_201_CREATED)
async def upsert_today_mood(
    mood_in: MoodCreate,
    recorder: MoodRecorder = Depends(get_mood_recorder),
    current_user: User = Depends(get_current_user),
):
    """
    今日の気分を登録

    今日の記録が既にあれば上書きする（1日1件）。
    """
    event = await recorder.upsert_today(
        current_user.id,
        level=mood_in.level,
        note=mood_in.note,
        factors=mood_in.factors,
    )
    return MoodResponse.from_domain(event)


@router.get("/today", response_model=TodayMoodResponse)
async def get_today_mood(
    recorder: MoodRecorder = Depends(get_mood_recorder),
    current_user: User = Depends(get_current_user),
):
    """今日の気分（未登録なら mood: null）"""
    event = await recorder.get_today(current_user.id)
    return TodayMoodResponse(mood=MoodResponse.from_domain(event) if event else None)


@router.get("/statistics", response_model=StatisticsResponse)
async def get_statistics(
    service: MoodAggregationService = Depends(get_aggregation_service),
    current_user: User = Depends(get_current_user),
):
    """全期間の統計（件数・平均・よく出る要因・連続記録日数・最新の記録）"""
    summary = await service.get_statistics(current_user.id)
    return StatisticsResponse.from_domain(summary)


@router.get("/graph", response_model=GraphResponse)
async def get_graph(
    period: Optional[int] = Query(None, description="遡る日数（省略時は設定の既定値）"),
    service: MoodAggregationService = Depends(get_aggregation_service),
    current_user: User = Depends(get_current_user),
):
    """
    期間グラフ

    記録のある日だけ点を返し、全体平均も記録のある日の平均だけで計算する。
    """
    series = await service.get_graph(current_user.id, period)
    return GraphResponse.from_domain(series)
