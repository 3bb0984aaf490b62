"""
Money, date and percentage formatting for display.

Locale and currency are always passed in by the caller. The tables below
cover the locales and currencies the dashboard ships with; an unknown
locale formats as en-US and an unknown currency code is printed in front
of the number instead of a symbol.
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional, Tuple

from cardtracker_engine.domain.models import Activity, ActivityType, Transaction
from cardtracker_engine.utils.date_utils import to_date, to_instant
from cardtracker_engine.utils.decimal_utils import quantize, to_decimal

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en-US"
DEFAULT_CURRENCY = "USD"
PLACEHOLDER = "—"

_MONTHS_EN: Tuple[str, ...] = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


@dataclass(frozen=True)
class CurrencySpec:
    code: str
    symbol: str
    decimal_places: int = 2


@dataclass(frozen=True)
class LocaleSpec:
    group_separator: str
    decimal_separator: str
    symbol_first: bool
    date_pattern: str  # with year
    short_date_pattern: str  # without year
    hour_12: bool


CURRENCIES: Dict[str, CurrencySpec] = {
    "USD": CurrencySpec("USD", "$"),
    "EUR": CurrencySpec("EUR", "€"),
    "GBP": CurrencySpec("GBP", "£"),
    "JPY": CurrencySpec("JPY", "¥", decimal_places=0),
    "CAD": CurrencySpec("CAD", "CA$"),
    "AUD": CurrencySpec("AUD", "A$"),
    "INR": CurrencySpec("INR", "₹"),
}

# Patterns use {mon} (English abbreviation), {d}, {dd}, {mm} and {yyyy}
LOCALES: Dict[str, LocaleSpec] = {
    "en-US": LocaleSpec(",", ".", True, "{mon} {d}, {yyyy}", "{mon} {d}", hour_12=True),
    "en-GB": LocaleSpec(",", ".", True, "{d} {mon} {yyyy}", "{d} {mon}", hour_12=False),
    "de-DE": LocaleSpec(".", ",", False, "{dd}.{mm}.{yyyy}", "{dd}.{mm}.", hour_12=False),
    "fr-FR": LocaleSpec(" ", ",", False, "{dd}/{mm}/{yyyy}", "{dd}/{mm}", hour_12=False),
    "ja-JP": LocaleSpec(",", ".", True, "{yyyy}/{mm}/{dd}", "{mm}/{dd}", hour_12=False),
}


def _locale_spec(locale: str) -> LocaleSpec:
    spec = LOCALES.get(locale)
    if spec is None:
        logger.debug("Unknown locale, using %s", DEFAULT_LOCALE, extra={"locale": locale})
        return LOCALES[DEFAULT_LOCALE]
    return spec


def _group_digits(value: Decimal, places: int, spec: LocaleSpec) -> str:
    text = f"{value:,.{places}f}"
    return (
        text.replace(",", "\x00")
        .replace(".", spec.decimal_separator)
        .replace("\x00", spec.group_separator)
    )


def _money_body(value: Decimal, currency: str, locale: str) -> str:
    """Unsigned formatted amount with currency symbol"""
    code = currency.upper()
    currency_spec = CURRENCIES.get(code)
    spec = _locale_spec(locale)
    places = currency_spec.decimal_places if currency_spec else 2
    digits = _group_digits(value.copy_abs(), places, spec)

    if currency_spec is None:
        return f"{code} {digits}"
    if spec.symbol_first:
        return f"{currency_spec.symbol}{digits}"
    return f"{digits} {currency_spec.symbol}"


def _rounded(amount: Any, currency: str) -> Optional[Decimal]:
    value = to_decimal(amount)
    if value is None:
        return None
    currency_spec = CURRENCIES.get(currency.upper())
    return quantize(value, currency_spec.decimal_places if currency_spec else 2)


def format_currency(amount: Any, currency: str = DEFAULT_CURRENCY, locale: str = DEFAULT_LOCALE) -> str:
    """
    Format an amount as money, e.g. -1234.5 -> "-$1,234.50".

    Missing or non-numeric amounts render as an em dash.
    """
    value = _rounded(amount, currency)
    if value is None:
        return PLACEHOLDER
    body = _money_body(value, currency, locale)
    return f"-{body}" if value < 0 else body


def format_signed_amount(
    amount: Any,
    negative: bool,
    currency: str = DEFAULT_CURRENCY,
    locale: str = DEFAULT_LOCALE,
) -> str:
    """Absolute amount with an explicit +/- chosen by the caller"""
    value = _rounded(amount, currency)
    if value is None:
        return PLACEHOLDER
    sign = "-" if negative else "+"
    return f"{sign}{_money_body(value, currency, locale)}"


def format_transaction_amount(
    txn: Transaction,
    currency: str = DEFAULT_CURRENCY,
    locale: str = DEFAULT_LOCALE,
) -> str:
    # spend is negative, refunds and credits positive
    value = to_decimal(txn.amount)
    if value is None:
        return PLACEHOLDER
    return format_signed_amount(value, value < 0, currency, locale)


def format_activity_amount(
    activity: Activity,
    currency: str = DEFAULT_CURRENCY,
    locale: str = DEFAULT_LOCALE,
) -> str:
    # sign comes from the activity type, not from the stored amount
    return format_signed_amount(
        activity.amount,
        activity.activity_type is not ActivityType.PAYMENT,
        currency,
        locale,
    )


def _date_fields(day: date) -> Dict[str, Any]:
    return {
        "mon": _MONTHS_EN[day.month - 1],
        "d": day.day,
        "dd": f"{day.day:02d}",
        "mm": f"{day.month:02d}",
        "yyyy": day.year,
    }


def format_date(value: Any, locale: str = DEFAULT_LOCALE, include_year: bool = True) -> str:
    """Medium date, e.g. "Jan 5, 2024" for en-US or "05.01.2024" for de-DE"""
    day = to_date(value)
    if day is None:
        return PLACEHOLDER
    spec = _locale_spec(locale)
    pattern = spec.date_pattern if include_year else spec.short_date_pattern
    return pattern.format(**_date_fields(day))


def format_time(value: Any, locale: str = DEFAULT_LOCALE) -> str:
    instant = to_instant(value)
    if instant is None:
        return PLACEHOLDER
    if _locale_spec(locale).hour_12:
        hour = instant.hour % 12 or 12
        suffix = "AM" if instant.hour < 12 else "PM"
        return f"{hour:02d}:{instant.minute:02d} {suffix}"
    return f"{instant.hour:02d}:{instant.minute:02d}"


def format_datetime(value: Any, locale: str = DEFAULT_LOCALE) -> str:
    """Short date plus time for the activity feed, e.g. "Jan 5, 02:30 PM" """
    instant = to_instant(value)
    if instant is None:
        return PLACEHOLDER
    return f"{format_date(instant, locale, include_year=False)}, {format_time(instant, locale)}"


def format_percent(value: Any, places: int = 1) -> str:
    """Percentage with fixed decimals; undefined values render as an em dash"""
    percent = to_decimal(value)
    rounded = quantize(percent, places) if percent is not None else None
    if rounded is None:
        return PLACEHOLDER
    return f"{rounded}%"


def describe_due(days: Optional[int]) -> str:
    """Relative due-date label used on the payment timeline"""
    if days is None:
        return "No due date"
    if days == 0:
        return "Today"
    if days == 1:
        return "Tomorrow"
    if days == -1:
        return "1 day overdue"
    if days < 0:
        return f"{abs(days)} days overdue"
    return f"{days} days"


def mask_card_number(last_four: Any) -> str:
    digits = str(last_four).strip() if last_four is not None else ""
    return f"•••• {digits or '????'}"
