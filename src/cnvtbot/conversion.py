"""
Conversion Engine

🔒 Pure: the result depends only on the snapshot and the arguments.
Results are rounded to 2 places with ROUND_HALF_UP (half away from zero).
"""

from decimal import ROUND_HALF_UP, Decimal, DecimalException, InvalidOperation, getcontext
from typing import Any

from cnvtbot.models import RateSnapshot

getcontext().prec = 28

CENTS = Decimal("0.01")


def parse_amount(amount: Any) -> Decimal | None:
    """
    Coerce a user-supplied amount to Decimal.

    Returns None for anything that is missing, non-numeric, zero, NaN or
    infinite; callers treat all of those the same way.
    """
    if amount is None or isinstance(amount, bool):
        return None
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount).strip())
    except (InvalidOperation, ValueError):
        return None
    if not value.is_finite() or value == 0:
        return None
    return value


def convert(snapshot: RateSnapshot, from_code: str | None, to_code: str | None, amount: Any) -> Decimal | None:
    """
    Convert `amount` of `from_code` into `to_code` using the snapshot's rates.

    Returns the result quantized to two decimal places, or None when the
    request is rejected (unknown code, bad amount, result out of range).
    """
    source = (from_code or "").strip().upper()
    target = (to_code or "").strip().upper()

    if not snapshot.supports(source) or not snapshot.supports(target):
        return None

    value = parse_amount(amount)
    if value is None:
        return None

    to_rate = snapshot.rate_for(target)
    from_rate = snapshot.rate_for(source)
    if to_rate is None or from_rate is None:
        return None

    try:
        if source == snapshot.base:
            result = value * to_rate
        else:
            result = value / from_rate * to_rate
        return result.quantize(CENTS, rounding=ROUND_HALF_UP)
    except DecimalException:
        # Overflow, or more digits than the context precision holds
        return None


def format_result(amount: Any, from_code: str, to_code: str, result: Decimal) -> str:
    """
    Render '<amount> <FROM> is <result> <TO>'.

    The amount is echoed as typed; the codes are upper-cased even when the
    user typed them in lower case ('usd uah 250' -> '250 USD is ... UAH').
    """
    return f"{amount} {from_code.upper()} is {result:.2f} {to_code.upper()}"
