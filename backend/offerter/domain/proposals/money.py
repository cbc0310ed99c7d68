from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
# Largest amount a proposal may carry; keeps quantize within the decimal
# context and stored numbers well inside DynamoDB limits.
MAX_AMOUNT = Decimal("999999999999.99")


def parse_amount(value: Any) -> Decimal | None:
    """Parse a stored or submitted amount into a Decimal.

    Accepts Decimal/int/float and text such as "1500", "1500.50", "1 500,50".
    Returns None for anything that is not a finite number or whose magnitude
    exceeds MAX_AMOUNT.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        d = value
    elif isinstance(value, int):
        d = Decimal(value)
    elif isinstance(value, float):
        d = Decimal(str(value))
    else:
        s = str(value).strip().replace("\u00a0", "").replace(" ", "")
        if not s:
            return None
        if "," in s and "." not in s:
            s = s.replace(",", ".")
        try:
            d = Decimal(s)
        except InvalidOperation:
            return None
    if not d.is_finite() or abs(d) > MAX_AMOUNT:
        return None
    return d


def quantize(amount: Decimal) -> Decimal:
    """Round half-up to whole öre (2 decimals)."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(amount: Decimal | None) -> str:
    return f"{quantize(amount if amount is not None else ZERO):f}"
