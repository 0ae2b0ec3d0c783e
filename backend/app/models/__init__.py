"""
MOODJOURNAL - Database Models
データベースモデルの定義
"""
from app.models.user import User
from app.models.mood import Mood, MoodFactor
from app.models.note import Note

__all__ = [
    "User",
    "Mood",
    "MoodFactor",
    "Note",
]
