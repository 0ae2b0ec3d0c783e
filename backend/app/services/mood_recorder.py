"""
MOODJOURNAL - Mood Recorder
「今日の気分」の登録・更新（このシステムで唯一の書き込み経路）

今日の枠 [00:00, 翌日00:00) に記録があれば上書き、なければ新規作成する。
集計エンジンからは呼ばれない。
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.core.exceptions import StoreUnavailable
from app.models.mood import Mood
from app.services.aggregation.dates import day_bounds, get_timezone, local_day
from app.services.event_store import MoodEvent, normalize_factors

logger = logging.getLogger(__name__)


class MoodRecorder:
    """今日の気分の upsert"""

    def __init__(self, session: AsyncSession, settings: Settings):
        self._session = session
        self._tz = get_timezone(settings.calendar_timezone)

    def _today_window(self, now: datetime):
        return day_bounds(local_day(now, self._tz), self._tz)

    async def _find_today(self, user_id: uuid.UUID, now: datetime) -> Optional[Mood]:
        day_start, day_end = self._today_window(now)
        result = await self._session.execute(
            select(Mood)
            .where(
                Mood.user_id == user_id,
                Mood.date >= day_start,
                Mood.date < day_end,
            )
            .order_by(Mood.created_at)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def get_today(self, user_id: uuid.UUID, now: Optional[datetime] = None) -> Optional[MoodEvent]:
        """今日の記録（なければ None）"""
        now = now or datetime.now(timezone.utc)
        try:
            mood = await self._find_today(user_id, now)
            return MoodEvent.from_model(mood) if mood else None
        except (SQLAlchemyError, OSError, ValueError) as e:
            logger.error("Failed to load today's mood: %s", e)
            raise StoreUnavailable() from e

    async def upsert_today(
        self,
        user_id: uuid.UUID,
        level: int,
        note: Optional[str] = None,
        factors: Iterable = (),
        now: Optional[datetime] = None,
    ) -> MoodEvent:
        """今日の記録を作成 or 更新して返す"""
        now = now or datetime.now(timezone.utc)
        factor_values = [f.value for f in normalize_factors(factors)]
        note = note.strip() if note else None

        try:
            mood = await self._find_today(user_id, now)
            if mood:
                mood.level = level
                mood.note = note or None
                mood.factors = factor_values
            else:
                mood = Mood(
                    user_id=user_id,
                    level=level,
                    note=note or None,
                    factors=factor_values,
                    date=now,
                )
                self._session.add(mood)
            await self._session.commit()
            await self._session.refresh(mood)
        except (SQLAlchemyError, OSError) as e:
            await self._session.rollback()
            logger.error("Failed to upsert today's mood: %s", e)
            raise StoreUnavailable("mood store unavailable") from e

        logger.info("Upserted mood %s for user %s", mood.id, user_id)
        return MoodEvent.from_model(mood)
