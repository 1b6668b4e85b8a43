"""
유틸리티 패키지

타임존/날짜 처리, 금액 변환 등 공통 유틸리티
"""

from core.utils.money import format_amount, parse_amount
from core.utils.timezone import (
    ensure_utc,
    format_date,
    now_utc,
    parse_date,
    utc_date,
)

__all__ = [
    "ensure_utc",
    "format_date",
    "now_utc",
    "parse_date",
    "utc_date",
    "format_amount",
    "parse_amount",
]
