# utils/formatting.py
"""
Display formatting shared by receipts, labels and API responses.

Amounts are shown in the store currency (PKR by default) with thousands
separators and two decimals, dates day-first.
"""
from datetime import date, datetime
from typing import Union

from config import settings


def format_currency(amount: float, currency: str = None) -> str:
    """Formats an amount with currency code, e.g. ``PKR 1,234.50``."""
    currency = currency or settings.CURRENCY
    sign = "-" if amount < 0 else ""
    return f"{sign}{currency} {abs(amount):,.2f}"


def format_date(value: Union[date, datetime]) -> str:
    """DD/MM/YYYY"""
    return value.strftime("%d/%m/%Y")


def format_datetime(value: datetime) -> str:
    """DD/MM/YYYY HH:MM AM/PM"""
    return value.strftime("%d/%m/%Y %I:%M %p")


def format_number(number: Union[int, float]) -> str:
    """Thousands separators, decimals only when there are any."""
    if float(number).is_integer():
        return f"{int(number):,}"
    return f"{number:,}"


def shorten_number(num: float) -> str:
    """Shortens large numbers with K/M/B suffixes (1.5K, 2.3M)."""
    if num >= 1e9:
        return f"{num / 1e9:.1f}B"
    if num >= 1e6:
        return f"{num / 1e6:.1f}M"
    if num >= 1e3:
        return f"{num / 1e3:.1f}K"
    return str(int(num)) if float(num).is_integer() else str(num)
