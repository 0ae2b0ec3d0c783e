"""
MOODJOURNAL - Database Base
SQLAlchemy の宣言基底・非同期エンジン・リクエスト単位のセッション

集計は読み取りのみ、書き込みは MoodRecorder だけが行う。
どちらも get_async_session が払い出す AsyncSession 1つで完結する。
"""
from datetime import datetime, timezone
from typing import Any, AsyncGenerator, Dict

from sqlalchemy import MetaData
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.core.config import Settings, settings

# 制約名の命名規則（moods の level 範囲チェックは ck_moods_level_range になる）
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """User / Mood / Note の基底クラス"""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


def engine_options(config: Settings) -> Dict[str, Any]:
    """
    create_async_engine に渡す引数

    SQLite はコネクションプールの大きさを指定できないので、PostgreSQL 等のときだけ付ける。
    """
    options: Dict[str, Any] = {
        "echo": config.debug,
        "pool_pre_ping": True,
    }
    if not config.database_url.startswith("sqlite"):
        options["pool_size"] = config.database_pool_size
        options["max_overflow"] = config.database_max_overflow
    return options


engine = create_async_engine(settings.database_url, **engine_options(settings))

# commit 後も MoodEvent.from_model で属性を読むため expire しない
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """リクエスト単位の AsyncSession（レスポンス後に閉じる）"""
    async with async_session_maker() as session:
        yield session


def utc_now() -> datetime:
    """created_at / updated_at の既定値"""
    return datetime.now(timezone.utc)
