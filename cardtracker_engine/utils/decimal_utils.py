"""Decimal helpers for money and ratio math"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Any, Optional


def to_decimal(value: Any) -> Optional[Decimal]:
    """
    Convert a numeric-looking value to a finite Decimal.

    Floats go through str() so 0.1 stays 0.1. Strings may carry thousands
    separators and a leading "$". Booleans, NaN, infinities and anything
    unparsable yield None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip().replace(",", "").replace("$", "")
        if not text:
            return None
        try:
            result = Decimal(text)
        except InvalidOperation:
            return None
    else:
        return None

    if not result.is_finite():
        return None
    return result


def quantize(value: Decimal, places: int) -> Optional[Decimal]:
    """
    Round half-up to a fixed number of decimal places.

    Precision is widened to fit the value, so large finite amounts round
    instead of raising; None only when the result cannot be represented.
    """
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + places + 2)
        try:
            return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
        except InvalidOperation:
            return None
