"""
API エンドポイントのテスト

DB には接続しない。依存関係を差し替えて以下を検証する:
- レスポンスが camelCase であること
- 入力エラー → 400、ストア障害 → 503、未認証 → 401
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from app.api.deps import (
    get_aggregation_service,
    get_current_user,
    get_event_store,
    get_mood_recorder,
    get_note_store,
)
from app.core.exceptions import StoreUnavailable
from app.main import app
from app.models.mood import Mood
from app.services.aggregation import MoodAggregationService
from app.services.event_store import MoodEvent, SqlEventStore, normalize_factors
from tests.conftest import FailingEventStore, InMemoryNoteStore, TODAY, USER_ID


class FixedDayService(MoodAggregationService):
    """「今日」を固定したサービス"""

    def today(self):
        return TODAY


class FakeRecorder:
    """MoodRecorder の代わり。呼び出し内容を記録する"""

    def __init__(self, existing=None, fail=False):
        self.existing = existing
        self.fail = fail
        self.upserts = []

    async def get_today(self, user_id, now=None):
        if self.fail:
            raise StoreUnavailable("mood store unavailable")
        return self.existing

    async def upsert_today(self, user_id, level, note=None, factors=(), now=None):
        if self.fail:
            raise StoreUnavailable("mood store unavailable")
        self.upserts.append({"level": level, "note": note, "factors": list(factors)})
        stamp = datetime(2024, 3, 15, 8, 0, tzinfo=timezone.utc)
        return MoodEvent(
            id=uuid.uuid4(),
            user_id=user_id,
            level=level,
            note=note,
            factors=normalize_factors(factors),
            date=stamp,
            created_at=stamp,
            updated_at=stamp,
        )


@pytest.fixture
def recorder():
    return FakeRecorder()


@pytest.fixture
def client(event_store, note_store, test_settings, recorder):
    service = FixedDayService(event_store, note_store, test_settings)
    app.dependency_overrides[get_current_user] = lambda: SimpleNamespace(id=USER_ID)
    app.dependency_overrides[get_aggregation_service] = lambda: service
    app.dependency_overrides[get_mood_recorder] = lambda: recorder
    yield TestClient(app)
    app.dependency_overrides.clear()


# =============================================================================
# カレンダー
# =============================================================================

class TestCalendarEndpoints:

    def test_month_calendar(self, client, event_store, note_store, make_event, make_note):
        event_store.events.extend([make_event(TODAY, 3, ["work"]), make_event(TODAY, 4)])
        note_store.notes.append(make_note(TODAY))

        response = client.get("/api/v1/calendar", params={"month": 3, "year": 2024})

        assert response.status_code == 200
        body = response.json()
        assert body["month"] == 3
        assert body["year"] == 2024
        assert len(body["days"]) == 31

        day = body["days"][14]
        assert day == {
            "date": "2024-03-15",
            "averageLevel": 3.5,
            "eventCount": 2,
            "hasNotes": True,
            "factors": ["work"],
        }
        assert body["days"][0]["averageLevel"] is None
        assert body["days"][0]["eventCount"] == 0

    @pytest.mark.parametrize("params", [{"month": 13, "year": 2024}, {"month": 1, "year": 1969}])
    def test_out_of_range_is_400(self, client, event_store, params):
        response = client.get("/api/v1/calendar", params=params)
        assert response.status_code == 400
        assert "detail" in response.json()
        assert event_store.calls == []

    def test_missing_query_is_422(self, client):
        assert client.get("/api/v1/calendar", params={"month": 3}).status_code == 422

    def test_day_detail(self, client, event_store, note_store, make_event, make_note):
        event_store.events.append(make_event(TODAY, 4, ["sleep"], note="よく眠れた"))
        note_store.notes.append(make_note(TODAY, "日記"))

        response = client.get("/api/v1/calendar/2024-03-15")

        assert response.status_code == 200
        body = response.json()
        assert body["date"] == "2024-03-15"
        assert body["averageMoodLevel"] == 4.0
        assert body["factors"] == ["sleep"]
        assert body["moods"][0]["note"] == "よく眠れた"
        assert body["moods"][0]["userId"] == str(USER_ID)
        assert body["notes"][0]["title"] == "日記"

    def test_day_detail_invalid_date_is_400(self, client):
        assert client.get("/api/v1/calendar/2024-13-01").status_code == 400

    def test_filters(self, client):
        response = client.get("/api/v1/calendar/filters/list")
        assert response.status_code == 200
        filters = response.json()["filters"]
        assert len(filters) == 10
        assert filters[0] == {"value": "sleep", "label": "Slept well", "icon": "moon.fill"}


# =============================================================================
# 気分
# =============================================================================

class TestMoodEndpoints:

    def test_upsert_today(self, client, recorder):
        response = client.post(
            "/api/v1/mood",
            json={"level": 4, "note": "散歩した", "factors": ["exercise", "weather"]},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["level"] == 4
        assert body["factors"] == ["exercise", "weather"]
        assert "createdAt" in body
        assert recorder.upserts[0]["level"] == 4

    @pytest.mark.parametrize("payload", [
        {"level": 0},
        {"level": 6},
        {"level": 3, "factors": ["unknown"]},
        {"level": 3, "note": "x" * 1001},
    ])
    def test_upsert_invalid_payload_is_422(self, client, recorder, payload):
        assert client.post("/api/v1/mood", json=payload).status_code == 422
        assert recorder.upserts == []

    def test_today_without_record(self, client):
        response = client.get("/api/v1/mood/today")
        assert response.status_code == 200
        assert response.json() == {"mood": None}

    def test_statistics(self, client, event_store, make_event):
        event_store.events.extend([
            make_event(TODAY, 5, ["friends"]),
            make_event(TODAY, 3, ["friends", "food"]),
        ])

        response = client.get("/api/v1/mood/statistics")

        assert response.status_code == 200
        body = response.json()
        assert body["totalEvents"] == 2
        assert body["averageLevel"] == 4.0
        assert body["topFactors"] == ["friends", "food"]
        assert body["streakDays"] == 1
        assert body["mostRecentEvent"]["level"] == 3

    def test_statistics_empty(self, client):
        body = client.get("/api/v1/mood/statistics").json()
        assert body == {
            "totalEvents": 0,
            "averageLevel": 0.0,
            "topFactors": [],
            "streakDays": 0,
            "mostRecentEvent": None,
        }

    def test_graph_default_period(self, client, event_store, make_event):
        event_store.events.append(make_event(TODAY, 2))

        body = client.get("/api/v1/mood/graph").json()

        assert body["period"] == 7
        assert body["data"] == [{"date": "2024-03-15", "averageLevel": 2.0, "eventCount": 1}]
        assert body["averageLevel"] == 2.0

    @pytest.mark.parametrize("period", [0, 366])
    def test_graph_invalid_period_is_400(self, client, event_store, period):
        response = client.get("/api/v1/mood/graph", params={"period": period})
        assert response.status_code == 400
        assert event_store.calls == []


# =============================================================================
# 障害・認証
# =============================================================================

class TestFailures:

    def test_store_failure_is_503(self, note_store, test_settings):
        service = FixedDayService(FailingEventStore(), note_store, test_settings)
        app.dependency_overrides[get_current_user] = lambda: SimpleNamespace(id=USER_ID)
        app.dependency_overrides[get_aggregation_service] = lambda: service
        try:
            response = TestClient(app).get("/api/v1/mood/statistics")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 503
        assert response.json() == {"detail": "aggregation unavailable"}

    def test_invalid_stored_factor_is_503(self):
        stamp = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)
        row = Mood(
            id=uuid.uuid4(),
            user_id=USER_ID,
            level=3,
            factors=["good_mood"],
            date=stamp,
            created_at=stamp,
            updated_at=stamp,
        )
        result = MagicMock()
        result.scalars.return_value.all.return_value = [row]
        session = MagicMock()
        session.execute = AsyncMock(return_value=result)

        app.dependency_overrides[get_current_user] = lambda: SimpleNamespace(id=USER_ID)
        app.dependency_overrides[get_event_store] = lambda: SqlEventStore(session)
        app.dependency_overrides[get_note_store] = lambda: InMemoryNoteStore()
        try:
            response = TestClient(app).get("/api/v1/mood/statistics")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 503
        assert response.json() == {"detail": "aggregation unavailable"}

    def test_recorder_failure_is_503(self, test_settings):
        app.dependency_overrides[get_current_user] = lambda: SimpleNamespace(id=USER_ID)
        app.dependency_overrides[get_mood_recorder] = lambda: FakeRecorder(fail=True)
        try:
            response = TestClient(app).get("/api/v1/mood/today")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 503

    @pytest.mark.parametrize("path", ["/api/v1/mood/statistics", "/api/v1/calendar/filters/list"])
    def test_missing_token_is_401(self, path):
        response = TestClient(app).get(path)
        assert response.status_code == 401

    def test_trace_id_header_echoed(self, client):
        response = client.get("/health", headers={"X-Trace-ID": "abc123"})
        assert response.status_code == 200
        assert response.headers["X-Trace-ID"] == "abc123"
