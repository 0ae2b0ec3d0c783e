"""
MOODJOURNAL - Mood Model
気分記録（MoodEvent の永続化形式）
"""
import uuid
from datetime import datetime
from enum import Enum
from typing import Optional, List, TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import UUID, ARRAY
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, utc_now

if TYPE_CHECKING:
    from app.models.user import User


MOOD_LEVEL_MIN = 1
MOOD_LEVEL_MAX = 5
MOOD_NOTE_MAX_LENGTH = 1000


class MoodFactor(str, Enum):
    """気分に影響した要因タグ（固定語彙）"""

    SLEEP = "sleep"  # よく眠れた
    NO_SLEEP = "no_sleep"  # 睡眠不足
    EXERCISE = "exercise"
    WORK = "work"
    FAMILY = "family"
    FRIENDS = "friends"
    HEALTH = "health"
    WEATHER = "weather"
    FOOD = "food"
    HOBBY = "hobby"


class Mood(Base):
    """
    気分記録

    date は記録が属する論理上の日（作成時刻とは限らない）。
    「今日」の記録は upsert で1件に保たれるが、過去日には複数件ありうる。
    """

    __tablename__ = "moods"
    __table_args__ = (
        CheckConstraint(
            f"level >= {MOOD_LEVEL_MIN} AND level <= {MOOD_LEVEL_MAX}",
            name="level_range",
        ),
        Index("ix_moods_user_id_date", "user_id", "date"),
        Index("ix_moods_user_id_created_at", "user_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    level: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    note: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    factors: Mapped[List[str]] = mapped_column(
        ARRAY(String(20)),
        default=list,
        nullable=False,
    )
    date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    # タイムスタンプ
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        nullable=False,
    )

    # Relationships
    user: Mapped["User"] = relationship(
        "User",
        back_populates="moods",
    )

    def __repr__(self) -> str:
        return f"<Mood {self.id} level={self.level} by {self.user_id}>"
