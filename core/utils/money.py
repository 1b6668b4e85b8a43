"""
금액 변환 유틸리티

DB에는 금액을 TEXT로 저장하고 Decimal로 복원.
float는 반올림 오차로 차대 균형 검증을 깨뜨리므로 받지 않음.
"""

from decimal import Decimal, InvalidOperation

from core.constants import Money


def parse_amount(value: str | int | Decimal) -> Decimal:
    """금액 문자열/정수를 Decimal로 변환

    Args:
        value: "1000.00", 1000, Decimal("1000")

    Returns:
        Decimal 금액

    Raises:
        TypeError: float가 전달된 경우
        ValueError: 숫자가 아닌 경우
    """
    if isinstance(value, float):
        raise TypeError(f"float amount is not allowed: {value!r}")
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value))
        except InvalidOperation as e:
            raise ValueError(f"Invalid amount: {value!r}") from e

    if not amount.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    return amount


def format_amount(amount: Decimal) -> str:
    """Decimal을 저장용 고정 소수점 문자열로 변환

    지수 표기(1E+3)를 피하기 위해 'f' 포맷 사용.

    Example:
        >>> format_amount(Decimal("1E+3"))
        '1000'
    """
    return f"{amount:f}"


def has_valid_scale(amount: Decimal, scale: int = Money.SCALE) -> bool:
    """소수 자릿수가 허용 범위 이내인지 확인

    Example:
        >>> has_valid_scale(Decimal("10.25"))
        True
        >>> has_valid_scale(Decimal("10.255"))
        False
    """
    exponent = amount.as_tuple().exponent
    if not isinstance(exponent, int):
        return False
    return exponent >= -scale or amount == amount.quantize(Decimal(1).scaleb(-scale))
