"""
MOODJOURNAL - API v1 Router
すべてのエンドポイントを統合
"""
from fastapi import APIRouter

from app.api.v1.endpoints import calendar, mood

api_router = APIRouter()

api_router.include_router(
    mood.router,
    prefix="/mood",
    tags=["気分"],
)

api_router.include_router(
    calendar.router,
    prefix="/calendar",
    tags=["カレンダー"],
)
