# ownerportal/services/formatting.py
import os
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Union

from .money import quantize_money

DEFAULT_CURRENCY = "EUR"
DEFAULT_LOCALE = "pt-PT"

CURRENCY_SYMBOLS = {"EUR": "€", "USD": "$", "GBP": "£", "BRL": "R$", "CHF": "CHF"}

# locale -> (thousands separator, decimal separator, symbol goes first)
LOCALE_STYLES = {
    "en-GB": (",", ".", True),
    "en-US": (",", ".", True),
    "pt-PT": (" ", ",", False),
    "de-DE": (".", ",", False),
    "fr-FR": (" ", ",", False),
}

PLACEHOLDER = "Not specified"


def statement_currency() -> str:
    return (os.getenv("STATEMENT_CURRENCY") or DEFAULT_CURRENCY).strip().upper()


def statement_locale() -> str:
    loc = (os.getenv("STATEMENT_LOCALE") or DEFAULT_LOCALE).strip()
    return loc if loc in LOCALE_STYLES else DEFAULT_LOCALE


def format_currency(
    amount: Union[Decimal, int, float],
    currency: Optional[str] = None,
    locale: Optional[str] = None,
) -> str:
    """
    >>> format_currency(Decimal("1234.5"), "EUR", "en-GB")
    '€1,234.50'
    >>> format_currency(Decimal("-16.88"), "EUR", "pt-PT")
    '-16,88 €'
    """
    currency = (currency or statement_currency()).upper()
    locale = locale if locale in LOCALE_STYLES else statement_locale()
    thousands, decimal_sep, symbol_first = LOCALE_STYLES[locale]
    symbol = CURRENCY_SYMBOLS.get(currency, currency)

    if not isinstance(amount, Decimal):
        amount = Decimal(str(amount))
    amount = quantize_money(amount)
    sign = "-" if amount < 0 else ""
    digits = f"{abs(amount):,.2f}"  # 1,234.50
    int_part, dec_part = digits.split(".")
    number = int_part.replace(",", thousands) + decimal_sep + dec_part

    if symbol_first:
        return f"{sign}{symbol}{number}"
    return f"{sign}{number} {symbol}"


def format_amount(amount: Decimal) -> str:
    """Plain 2-decimal string, as used in machine-readable outputs."""
    return str(quantize_money(amount))


def format_date(value: Optional[Union[date, datetime]]) -> str:
    if value is None:
        return PLACEHOLDER
    if isinstance(value, datetime):
        return value.date().isoformat()
    return value.isoformat()


def format_timestamp(value: Optional[datetime]) -> str:
    if value is None:
        return PLACEHOLDER
    return value.strftime("%Y-%m-%d %H:%M:%S UTC")


def text_or_placeholder(value: Optional[str], placeholder: str = PLACEHOLDER) -> str:
    if value is None:
        return placeholder
    value = str(value).strip()
    return value or placeholder
