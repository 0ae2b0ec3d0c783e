"""
MOODJOURNAL バックエンド - 共通テストフィクスチャ

設計方針:
- DB を一切使わず、EventStore / NoteStore をインメモリ実装で置き換える
- 「今日」は固定日付を明示的に渡し、壁時計に依存しない
- 各テストは独立して実行可能（サービス起動不要）
"""
from __future__ import annotations

import uuid
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable, List, Optional, Sequence

import pytest
from jose import jwt

from app.core.config import Settings, settings
from app.core.exceptions import StoreUnavailable
from app.services.aggregation import MoodAggregationService
from app.services.event_store import EventStore, MoodEvent, NoteEntry, NoteStore

# 2024 はうるう年。3/15 を基準日にする
TODAY = date(2024, 3, 15)
USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")
OTHER_USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000002")


def make_access_token(subject: str, expires_delta: Optional[timedelta] = None) -> str:
    """
    認証サービスが発行するのと同じ形式の JWT を作る（テスト専用）

    sub にユーザーID、exp に有効期限。署名鍵とアルゴリズムはアプリの設定と共通。
    """
    now = datetime.now(timezone.utc)
    claims = {
        "sub": subject,
        "iat": now,
        "exp": now + (expires_delta or timedelta(hours=1)),
    }
    return jwt.encode(claims, settings.secret_key, algorithm=settings.algorithm)


# =============================================================================
# InMemoryEventStore / InMemoryNoteStore
# 外部ストアを呼び出さないテスト専用実装。範囲は半開区間 [start, end)。
# =============================================================================

class InMemoryEventStore(EventStore):
    """
    リストを保持するだけの EventStore。

    - `calls`: 呼び出されたクエリ名（ストアに触れたかどうかの検証用）
    """

    def __init__(self, events: Optional[Iterable[MoodEvent]] = None):
        self.events: List[MoodEvent] = list(events or [])
        self.calls: List[str] = []

    def _owned(self, user_id):
        return [e for e in self.events if e.user_id == user_id]

    async def query_events_for_day(self, user_id, day_start, day_end):
        self.calls.append("query_events_for_day")
        rows = [e for e in self._owned(user_id) if day_start <= e.date < day_end]
        return sorted(rows, key=lambda e: e.created_at, reverse=True)

    async def query_events_for_range(self, user_id, start, end):
        self.calls.append("query_events_for_range")
        rows = [e for e in self._owned(user_id) if start <= e.date < end]
        return sorted(rows, key=lambda e: (e.date, e.created_at))

    async def query_all_events(self, user_id):
        self.calls.append("query_all_events")
        return sorted(self._owned(user_id), key=lambda e: e.created_at, reverse=True)


class InMemoryNoteStore(NoteStore):
    def __init__(self, notes: Optional[Iterable[NoteEntry]] = None):
        self.notes: List[NoteEntry] = list(notes or [])
        self.calls: List[str] = []

    def _window(self, user_id, start, end):
        return [
            n for n in self.notes
            if n.user_id == user_id and start <= n.created_at < end
        ]

    async def note_exists_for_day(self, user_id, day_start, day_end):
        self.calls.append("note_exists_for_day")
        return bool(self._window(user_id, day_start, day_end))

    async def note_timestamps_in_range(self, user_id, start, end):
        self.calls.append("note_timestamps_in_range")
        return sorted(n.created_at for n in self._window(user_id, start, end))

    async def notes_for_day(self, user_id, day_start, day_end):
        self.calls.append("notes_for_day")
        return sorted(self._window(user_id, day_start, day_end), key=lambda n: n.created_at, reverse=True)


class FailingEventStore(EventStore):
    """すべてのクエリで StoreUnavailable を送出する"""

    async def query_events_for_day(self, user_id, day_start, day_end):
        raise StoreUnavailable()

    async def query_events_for_range(self, user_id, start, end):
        raise StoreUnavailable()

    async def query_all_events(self, user_id):
        raise StoreUnavailable()


# =============================================================================
# フィクスチャ: イベント / ノートのファクトリー
# =============================================================================

@pytest.fixture
def make_event():
    """
    MoodEvent を生成するファクトリー。

    使用例:
        make_event(TODAY, 4, ["sleep"])
        make_event(TODAY - timedelta(days=1), 3, hour=23)

    created_at は生成順に1秒ずつ進むので、後で作ったものほど新しい。
    """
    counter = {"n": 0}

    def _factory(
        day: date,
        level: int,
        factors: Sequence[str] = (),
        hour: int = 12,
        user_id: uuid.UUID = USER_ID,
        note: Optional[str] = None,
    ) -> MoodEvent:
        counter["n"] += 1
        logical = datetime.combine(day, time(hour), tzinfo=timezone.utc)
        created = datetime(2024, 1, 1, tzinfo=timezone.utc) + timedelta(seconds=counter["n"])
        return MoodEvent(
            id=uuid.uuid4(),
            user_id=user_id,
            level=level,
            note=note,
            factors=tuple(factors),
            date=logical,
            created_at=created,
        )

    return _factory


@pytest.fixture
def make_note():
    def _factory(day: date, title: str = "note", hour: int = 9, user_id: uuid.UUID = USER_ID) -> NoteEntry:
        created = datetime.combine(day, time(hour), tzinfo=timezone.utc)
        return NoteEntry(
            id=uuid.uuid4(),
            user_id=user_id,
            title=title,
            content="",
            created_at=created,
            updated_at=created,
        )

    return _factory


# =============================================================================
# フィクスチャ: 設定 / サービス
# =============================================================================

@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        calendar_timezone="UTC",
        calendar_min_year=1970,
        calendar_max_year=2200,
        streak_max_days=365,
        graph_default_period=7,
        graph_min_period=1,
        graph_max_period=365,
        top_factors_limit=3,
    )


@pytest.fixture
def event_store() -> InMemoryEventStore:
    return InMemoryEventStore()


@pytest.fixture
def note_store() -> InMemoryNoteStore:
    return InMemoryNoteStore()


@pytest.fixture
def service(event_store, note_store, test_settings) -> MoodAggregationService:
    """インメモリストアにつないだ MoodAggregationService"""
    return MoodAggregationService(event_store, note_store, test_settings)
