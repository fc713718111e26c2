"""
Presentation helpers shared by every renderer.

Mail, chat and in-app output for the same event must show the same figures,
so all of them format money and dates through these functions.
"""

from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Union
from zoneinfo import ZoneInfo

from babel.dates import format_date, format_datetime
from babel.numbers import format_decimal

Number = Union[int, float, Decimal, str]


def format_currency(amount: Number, locale: str) -> str:
    """Rupiah rounded half-up to a whole number, grouped per locale: ``Rp 1.500.000``."""
    rounded = Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return f"Rp {format_decimal(rounded, format='#,##0', locale=locale)}"


def format_long_date(value: Union[date, datetime], locale: str) -> str:
    return format_date(value, format="d MMMM yyyy", locale=locale)


def format_month(value: Union[date, datetime], locale: str) -> str:
    return format_date(value, format="MMMM yyyy", locale=locale)


def format_timestamp(value: datetime, locale: str, tz: str = "Asia/Jakarta") -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return format_datetime(value, format="d MMMM yyyy HH:mm", tzinfo=ZoneInfo(tz), locale=locale)
