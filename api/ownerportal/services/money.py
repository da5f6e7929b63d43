# ownerportal/services/money.py
"""
Reading and rounding monetary amounts.

Upstream invoice values arrive as strings ("100.00"), numbers, or nothing at
all. `parse_amount` is strict and raises; `coerce_amount` is the statement
policy on top of it: an unreadable value counts as zero, and every such
coercion is logged with the invoice it came from so it can be chased up.

Rounding is banker's rounding (ROUND_HALF_EVEN) to cents everywhere.
"""
import logging
from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN
from typing import Any, Optional

from ..exceptions import AmountParseError

log = logging.getLogger("money")

CENT = Decimal("0.01")
ZERO = Decimal("0")
# Largest power of ten an invoice amount may reach (quadrillions)
MAX_EXPONENT = 15


def parse_amount(raw: Any) -> Decimal:
    if raw is None:
        raise AmountParseError(raw, "missing")
    if isinstance(raw, bool):
        raise AmountParseError(raw, "boolean is not an amount")
    if isinstance(raw, Decimal):
        value = raw
    elif isinstance(raw, int):
        value = Decimal(raw)
    elif isinstance(raw, float):
        # str() keeps the short repr, Decimal(float) would not
        value = Decimal(str(raw))
    elif isinstance(raw, str):
        cleaned = raw.strip().replace(" ", "")
        if not cleaned:
            raise AmountParseError(raw, "empty")
        try:
            value = Decimal(cleaned)
        except InvalidOperation:
            raise AmountParseError(raw)
    else:
        raise AmountParseError(raw, f"unsupported type {type(raw).__name__}")

    if not value.is_finite():
        raise AmountParseError(raw, "not a finite number")
    if value and value.adjusted() > MAX_EXPONENT:
        raise AmountParseError(raw, "out of range")
    return value


def coerce_amount(raw: Any, invoice_id: Optional[str] = None) -> Decimal:
    try:
        return parse_amount(raw)
    except AmountParseError as e:
        log.warning("Invoice %s: %s; counting it as 0", invoice_id or "?", e)
        return ZERO


def quantize_money(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_EVEN)
