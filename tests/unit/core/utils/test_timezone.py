"""core/utils/timezone.py 테스트"""

from datetime import date, datetime, timedelta, timezone

import pytest

from core.utils.timezone import ensure_utc, format_date, now_utc, parse_date, utc_date


class TestNowUtc:
    def test_has_utc_tz(self) -> None:
        assert now_utc().tzinfo == timezone.utc


class TestEnsureUtc:
    def test_naive(self) -> None:
        assert ensure_utc(datetime(2026, 1, 1)).tzinfo == timezone.utc

    def test_converts_offset(self) -> None:
        kst = timezone(timedelta(hours=9))
        result = ensure_utc(datetime(2026, 1, 1, 9, 0, tzinfo=kst))
        assert result == datetime(2026, 1, 1, 0, 0, tzinfo=timezone.utc)


class TestDates:
    def test_utc_date(self) -> None:
        kst = timezone(timedelta(hours=9))
        assert utc_date(datetime(2026, 4, 1, 3, 0, tzinfo=kst)) == date(2026, 3, 31)

    def test_parse_date(self) -> None:
        assert parse_date("2026-03-31") == date(2026, 3, 31)
        assert parse_date(date(2026, 3, 31)) == date(2026, 3, 31)
        assert parse_date(datetime(2026, 3, 31, 12, 0)) == date(2026, 3, 31)

    def test_parse_date_invalid(self) -> None:
        with pytest.raises(ValueError):
            parse_date("31/03/2026")

    def test_format_date(self) -> None:
        assert format_date(date(2026, 3, 1)) == "2026-03-01"
