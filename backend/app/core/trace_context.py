"""
MOODJOURNAL - Request Trace Context
contextvars を使用したリクエストスコープの trace_id 管理

集計リクエスト単位で一意のIDを割り当て、ストア問い合わせから
レスポンスまでのログを1本の流れとして追跡できるようにする。
"""
import uuid
from contextvars import ContextVar
from typing import Optional

_trace_id_var: ContextVar[str] = ContextVar("trace_id", default="no-trace")


def get_trace_id() -> str:
    """現在のリクエストスコープの trace_id を取得"""
    return _trace_id_var.get()


def set_trace_id(trace_id: str) -> None:
    """現在のリクエストスコープに trace_id を設定"""
    _trace_id_var.set(trace_id)


def generate_trace_id(incoming: Optional[str] = None) -> str:
    """
    trace_id を決定して設定し、返す

    クライアントが X-Trace-ID を送ってきた場合はそれを引き継ぐ。
    """
    trace_id = (incoming or "").strip()[:64] or uuid.uuid4().hex[:12]
    set_trace_id(trace_id)
    return trace_id
