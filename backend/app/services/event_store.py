"""
MOODJOURNAL - Event Store
集計エンジンが参照する気分イベント / ノートの読み取り専用インターフェース

集計側はここで定義したドメイン型（MoodEvent, NoteEntry）だけを扱い、
ORM オブジェクトやセッションには触れない。
DB 側の I/O 障害はすべて StoreUnavailable に変換して送出する。
"""
import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import asc, desc, exists, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import StoreUnavailable
from app.models.mood import Mood, MoodFactor, MOOD_LEVEL_MAX, MOOD_LEVEL_MIN
from app.models.note import Note

logger = logging.getLogger(__name__)


def normalize_factors(values: Iterable) -> Tuple[MoodFactor, ...]:
    """
    要因タグを MoodFactor のタプルに正規化する

    重複は最初の出現位置を残して畳み込む。語彙外の文字列は ValueError。
    """
    seen: List[MoodFactor] = []
    for value in values or ():
        factor = value if isinstance(value, MoodFactor) else MoodFactor(value)
        if factor not in seen:
            seen.append(factor)
    return tuple(seen)


@dataclass(frozen=True)
class MoodEvent:
    """気分イベント（集計の入力。生成後は不変）"""

    id: uuid.UUID
    user_id: uuid.UUID
    level: int
    date: datetime
    created_at: datetime
    factors: Tuple[MoodFactor, ...] = ()
    note: Optional[str] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if not MOOD_LEVEL_MIN <= self.level <= MOOD_LEVEL_MAX:
            raise ValueError(f"mood level out of range: {self.level}")
        object.__setattr__(self, "factors", normalize_factors(self.factors))

    @classmethod
    def from_model(cls, mood: Mood) -> "MoodEvent":
        return cls(
            id=mood.id,
            user_id=mood.user_id,
            level=mood.level,
            note=mood.note,
            factors=tuple(mood.factors or ()),
            date=mood.date,
            created_at=mood.created_at,
            updated_at=mood.updated_at,
        )


@dataclass(frozen=True)
class NoteEntry:
    """ノート（日別詳細にそのまま渡すだけ）"""

    id: uuid.UUID
    user_id: uuid.UUID
    title: str
    content: str
    created_at: datetime
    updated_at: datetime
    mood_level: Optional[int] = None
    tags: Tuple[str, ...] = ()

    @classmethod
    def from_model(cls, note: Note) -> "NoteEntry":
        return cls(
            id=note.id,
            user_id=note.user_id,
            title=note.title,
            content=note.content or "",
            mood_level=note.mood_level,
            tags=tuple(note.tags or ()),
            created_at=note.created_at,
            updated_at=note.updated_at,
        )


class EventStore(ABC):
    """
    気分イベントの読み取り専用ストア

    範囲はすべて半開区間 [start, end)。
    """

    @abstractmethod
    async def query_events_for_day(
        self,
        user_id: uuid.UUID,
        day_start: datetime,
        day_end: datetime,
    ) -> List[MoodEvent]:
        """1日分のイベント"""

    @abstractmethod
    async def query_events_for_range(
        self,
        user_id: uuid.UUID,
        start: datetime,
        end: datetime,
    ) -> List[MoodEvent]:
        """期間内のイベント（date 昇順）"""

    @abstractmethod
    async def query_all_events(self, user_id: uuid.UUID) -> List[MoodEvent]:
        """全イベント（created_at 降順）"""


class NoteStore(ABC):
    """ノートの読み取り専用ストア（created_at で日付に振り分ける）"""

    @abstractmethod
    async def note_exists_for_day(
        self,
        user_id: uuid.UUID,
        day_start: datetime,
        day_end: datetime,
    ) -> bool:
        """その日にノートが1件以上あるか"""

    @abstractmethod
    async def note_timestamps_in_range(
        self,
        user_id: uuid.UUID,
        start: datetime,
        end: datetime,
    ) -> List[datetime]:
        """期間内のノート作成時刻"""

    @abstractmethod
    async def notes_for_day(
        self,
        user_id: uuid.UUID,
        day_start: datetime,
        day_end: datetime,
    ) -> List[NoteEntry]:
        """その日のノート（新しい順）"""


class SqlEventStore(EventStore):
    """SQLAlchemy (AsyncSession) ベースの EventStore"""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def _fetch(self, stmt, operation: str) -> List[MoodEvent]:
        try:
            result = await self._session.execute(stmt)
            rows = list(result.scalars().all())
        except (SQLAlchemyError, OSError) as e:
            logger.error("Event store query failed (%s): %s", operation, e)
            raise StoreUnavailable() from e

        try:
            return [MoodEvent.from_model(row) for row in rows]
        except ValueError as e:
            # 他の書き込み元による語彙外の要因タグ・範囲外の level
            logger.error("Event store returned an invalid mood row (%s): %s", operation, e)
            raise StoreUnavailable() from e

    async def query_events_for_day(self, user_id, day_start, day_end):
        return await self._fetch(
            select(Mood)
            .where(
                Mood.user_id == user_id,
                Mood.date >= day_start,
                Mood.date < day_end,
            )
            .order_by(desc(Mood.created_at)),
            "query_events_for_day",
        )

    async def query_events_for_range(self, user_id, start, end):
        return await self._fetch(
            select(Mood)
            .where(
                Mood.user_id == user_id,
                Mood.date >= start,
                Mood.date < end,
            )
            .order_by(asc(Mood.date), asc(Mood.created_at)),
            "query_events_for_range",
        )

    async def query_all_events(self, user_id):
        return await self._fetch(
            select(Mood)
            .where(Mood.user_id == user_id)
            .order_by(desc(Mood.created_at)),
            "query_all_events",
        )


class SqlNoteStore(NoteStore):
    """SQLAlchemy (AsyncSession) ベースの NoteStore"""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def note_exists_for_day(self, user_id, day_start, day_end):
        stmt = select(
            exists().where(
                Note.user_id == user_id,
                Note.created_at >= day_start,
                Note.created_at < day_end,
            )
        )
        try:
            result = await self._session.execute(stmt)
            return bool(result.scalar())
        except (SQLAlchemyError, OSError) as e:
            logger.error("Note store query failed (note_exists_for_day): %s", e)
            raise StoreUnavailable() from e

    async def note_timestamps_in_range(self, user_id, start, end):
        stmt = (
            select(Note.created_at)
            .where(
                Note.user_id == user_id,
                Note.created_at >= start,
                Note.created_at < end,
            )
            .order_by(asc(Note.created_at))
        )
        try:
            result = await self._session.execute(stmt)
            return list(result.scalars().all())
        except (SQLAlchemyError, OSError) as e:
            logger.error("Note store query failed (note_timestamps_in_range): %s", e)
            raise StoreUnavailable() from e

    async def notes_for_day(self, user_id, day_start, day_end):
        stmt = (
            select(Note)
            .where(
                Note.user_id == user_id,
                Note.created_at >= day_start,
                Note.created_at < day_end,
            )
            .order_by(desc(Note.created_at))
        )
        try:
            result = await self._session.execute(stmt)
            rows = result.scalars().all()
        except (SQLAlchemyError, OSError) as e:
            logger.error("Note store query failed (notes_for_day): %s", e)
            raise StoreUnavailable() from e
        return [NoteEntry.from_model(row) for row in rows]
