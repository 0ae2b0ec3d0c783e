"""
MOODJOURNAL - Calendar Endpoints
月カレンダー・日別詳細 API
"""
from fastapi import APIRouter, Depends, Query

from app.api.deps import get_aggregation_service, get_current_user
from app.models.user import User
from app.schemas.calendar import (
    DayDetailResponse,
    FilterListResponse,
    MonthCalendarResponse,
    FACTOR_FILTERS,
)
from app.services.aggregation import MoodAggregationService

router = APIRouter()


@router.get("", response_model=MonthCalendarResponse)
async def get_month_calendar(
    month: int = Query(...),
    year: int = Query(...),
    service: MoodAggregationService = Depends(get_aggregation_service),
    current_user: User = Depends(get_current_user),
):
    """
    月カレンダー

    1日〜末日まで欠けなく日付昇順で返す（記録のない日は eventCount=0）。
    月・年の範囲チェックはサービス側で行い、不正なら 400。
    """
    calendar = await service.get_month_calendar(current_user.id, month, year)
    return MonthCalendarResponse.from_domain(calendar)


@router.get("/filters/list", response_model=FilterListResponse)
async def list_filters(
    current_user: User = Depends(get_current_user),
):
    """カレンダーで使える要因フィルタ一覧"""
    return FilterListResponse(filters=FACTOR_FILTERS)


@router.get("/{date}", response_model=DayDetailResponse)
async def get_day_detail(
    date: str,
    service: MoodAggregationService = Depends(get_aggregation_service),
    current_user: User = Depends(get_current_user),
):
    """日別詳細（date は YYYY-MM-DD）"""
    detail = await service.get_day_detail(current_user.id, date)
    return DayDetailResponse.from_domain(detail)
