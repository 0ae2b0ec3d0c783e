"""
MOODJOURNAL - Aggregation Errors
集計エンジンのエラー分類

- AggregationValidationError: 月・年・期間・日付の範囲外（ストアへ問い合わせる前に拒否）
- StoreUnavailable: ストア（DB）側の I/O 障害。空データや古いデータで代替しない

イベントが存在しないことはエラーではない（0件/None として表現する）。
"""


class AggregationError(Exception):
    """集計エンジンの基底例外"""


class AggregationValidationError(AggregationError):
    """入力値が不正"""

    def __init__(self, message: str, field: str = ""):
        super().__init__(message)
        self.message = message
        self.field = field


class StoreUnavailable(AggregationError):
    """イベントストア / ノートストアへの問い合わせに失敗した"""

    def __init__(self, message: str = "aggregation unavailable"):
        super().__init__(message)
        self.message = message
