"""
타임존 유틸리티

내부 저장: UTC 원칙 준수를 위한 헬퍼 함수
날짜(entry_date, document_date)는 ISO 'YYYY-MM-DD' 문자열로 저장
"""

from datetime import date, datetime, timezone


def now_utc() -> datetime:
    """현재 UTC 시간 반환 (타임존 명시)

    datetime.now(timezone.utc)의 축약형.

    Returns:
        현재 UTC 시간 (tzinfo=timezone.utc)
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """datetime을 UTC로 정규화 (naive면 UTC로 간주)"""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def utc_date(dt: datetime) -> date:
    """datetime의 UTC 기준 날짜

    Example:
        >>> utc_date(datetime(2026, 3, 31, 23, 30, tzinfo=timezone.utc))
        datetime.date(2026, 3, 31)
    """
    return ensure_utc(dt).date()


def parse_date(value: str | date) -> date:
    """'YYYY-MM-DD' 문자열 또는 date를 date로 변환

    Raises:
        ValueError: 형식이 잘못된 경우
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def format_date(value: date) -> str:
    """date를 저장용 'YYYY-MM-DD' 문자열로 변환"""
    return value.isoformat()
