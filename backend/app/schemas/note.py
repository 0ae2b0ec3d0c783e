"""
MOODJOURNAL - Note Schemas
日別詳細に含めるノート
"""
import uuid
from datetime import datetime
from typing import List, Optional

from app.schemas.mood import CamelModel
from app.services.event_store import NoteEntry


class NoteResponse(CamelModel):
    """ノートレスポンス"""

    id: uuid.UUID
    user_id: uuid.UUID
    title: str
    content: str
    mood_level: Optional[int] = None
    tags: List[str]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, note: NoteEntry) -> "NoteResponse":
        return cls(
            id=note.id,
            user_id=note.user_id,
            title=note.title,
            content=note.content,
            mood_level=note.mood_level,
            tags=list(note.tags),
            created_at=note.created_at,
            updated_at=note.updated_at,
        )
