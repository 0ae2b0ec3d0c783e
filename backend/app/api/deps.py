"""
MOODJOURNAL - API Dependencies
認証ユーザーの解決と、リクエスト単位のストア / サービスの組み立て
"""
import uuid

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import StoreUnavailable
from app.core.security import decode_access_token
from app.db.base import get_async_session
from app.models.user import User
from app.services.aggregation import MoodAggregationService
from app.services.event_store import EventStore, NoteStore, SqlEventStore, SqlNoteStore
from app.services.mood_recorder import MoodRecorder

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    session: AsyncSession = Depends(get_async_session),
) -> User:
    """Bearer トークンから現在のユーザーを取得"""
    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise unauthorized

    subject = decode_access_token(credentials.credentials)
    if not subject:
        raise unauthorized
    try:
        user_id = uuid.UUID(subject)
    except ValueError:
        raise unauthorized from None

    try:
        result = await session.execute(select(User).where(User.id == user_id))
    except SQLAlchemyError as e:
        raise StoreUnavailable("user store unavailable") from e
    user = result.scalar_one_or_none()
    if user is None:
        raise unauthorized

    return user


def get_event_store(session: AsyncSession = Depends(get_async_session)) -> EventStore:
    return SqlEventStore(session)


def get_note_store(session: AsyncSession = Depends(get_async_session)) -> NoteStore:
    return SqlNoteStore(session)


def get_aggregation_service(
    event_store: EventStore = Depends(get_event_store),
    note_store: NoteStore = Depends(get_note_store),
) -> MoodAggregationService:
    return MoodAggregationService(event_store, note_store, settings)


def get_mood_recorder(session: AsyncSession = Depends(get_async_session)) -> MoodRecorder:
    return MoodRecorder(session, settings)
