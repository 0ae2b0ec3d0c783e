"""
MOODJOURNAL - Date Bucketing Utilities
日付の区切り・丸め・月の展開

壁時計を読むのは local_today() だけ。それ以外は「今日」を引数で受け取る。
"""
import calendar
import math
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from fractions import Fraction
from functools import lru_cache
from typing import Iterable, List, Optional, Tuple, Union
from zoneinfo import ZoneInfo

from app.core.exceptions import AggregationValidationError

Number = Union[int, Fraction]


@lru_cache
def get_timezone(name: str) -> tzinfo:
    """設定値のタイムゾーン名を tzinfo に変換"""
    if name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


def round_half_up(value: Number, places: int = 1) -> float:
    """
    四捨五入（half-up）で小数点以下 places 桁に丸める

    float の round() は偶数丸めかつ 2 進誤差を含むため、有理数のまま計算する。
    """
    scale = 10 ** places
    scaled = Fraction(value) * scale
    return math.floor(scaled + Fraction(1, 2)) / scale


def mean_level(levels: Iterable[Number]) -> Optional[Fraction]:
    """平均値（有理数のまま）。空なら None"""
    values = list(levels)
    if not values:
        return None
    return sum((Fraction(v) for v in values), Fraction(0)) / len(values)


def day_bounds(day: date, tz: tzinfo) -> Tuple[datetime, datetime]:
    """その日の [00:00, 翌日00:00) をタイムゾーン付きで返す"""
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz)
    return start, end


def range_bounds(first: date, last: date, tz: tzinfo) -> Tuple[datetime, datetime]:
    """first 日の 00:00 から last 翌日の 00:00 まで"""
    return day_bounds(first, tz)[0], day_bounds(last, tz)[1]


def local_day(instant: datetime, tz: tzinfo) -> date:
    """時刻が属する暦日（naive な datetime は UTC とみなす）"""
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(tz).date()


def local_today(tz: tzinfo, now: Optional[datetime] = None) -> date:
    """基準タイムゾーンでの「今日」"""
    return local_day(now or datetime.now(timezone.utc), tz)


def month_days(year: int, month: int) -> List[date]:
    """月の全日付（1日〜末日）"""
    _, last = calendar.monthrange(year, month)
    return [date(year, month, d) for d in range(1, last + 1)]


def trailing_days(today: date, count: int) -> List[date]:
    """today を末尾とする count 日分（昇順）"""
    return [today - timedelta(days=offset) for offset in range(count - 1, -1, -1)]


def day_key(day: date) -> str:
    return day.strftime("%Y-%m-%d")


def parse_day_key(text: str) -> date:
    """'YYYY-MM-DD' を date に変換（それ以外の形式はエラー）"""
    try:
        if len(text) != 10:
            raise ValueError(text)
        return datetime.strptime(text, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise AggregationValidationError(
            "Date must be formatted as YYYY-MM-DD",
            field="date",
        ) from None
