"""Transaction sort/filter engine and ordered payment/activity views"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Iterable, List, Optional, TypeVar, Union

from cardtracker_engine.domain.categories import OTHER, normalize_category
from cardtracker_engine.domain.exceptions import InvalidSortError
from cardtracker_engine.domain.models import (
    Activity,
    Payment,
    SortDirection,
    SortField,
    Transaction,
    TransactionFilters,
)
from cardtracker_engine.utils.date_utils import to_date, to_instant
from cardtracker_engine.utils.decimal_utils import to_decimal

T = TypeVar("T")

_DIRECTION_ALIASES = {
    "asc": SortDirection.ASC,
    "ascending": SortDirection.ASC,
    "desc": SortDirection.DESC,
    "descending": SortDirection.DESC,
}


def coerce_sort_field(value: Union[SortField, str]) -> SortField:
    """Sort field from an enum member or its name; InvalidSortError for any other value"""
    if isinstance(value, SortField):
        return value
    try:
        return SortField(str(value).strip().lower())
    except ValueError:
        raise InvalidSortError(f"Unsupported sort field: {value!r}") from None


def coerce_sort_direction(value: Union[SortDirection, str]) -> SortDirection:
    """Sort direction from asc/ascending/desc/descending; InvalidSortError otherwise"""
    if isinstance(value, SortDirection):
        return value
    direction = _DIRECTION_ALIASES.get(str(value).strip().lower())
    if direction is None:
        raise InvalidSortError(f"Unsupported sort direction: {value!r}")
    return direction


@dataclass(frozen=True)
class SortState:
    """Column sort selection of the transaction table"""

    field: SortField = SortField.DATE
    direction: SortDirection = SortDirection.DESC

    def select(self, field: Union[SortField, str]) -> "SortState":
        """
        Header click: the same field flips direction, a new field starts
        descending (most recent / largest first).
        """
        field = coerce_sort_field(field)
        if field is self.field:
            flipped = SortDirection.ASC if self.direction is SortDirection.DESC else SortDirection.DESC
            return SortState(field=field, direction=flipped)
        return SortState(field=field, direction=SortDirection.DESC)


def _text_key(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _abs_amount(value: Any) -> Optional[Decimal]:
    amount = to_decimal(value)
    return abs(amount) if amount is not None else None


_SORT_KEYS: dict = {
    SortField.DATE: lambda t: to_instant(t.date),
    SortField.DESCRIPTION: lambda t: _text_key(t.description),
    SortField.CATEGORY: lambda t: _text_key(t.category),
    SortField.AMOUNT: lambda t: _abs_amount(t.amount),
}


def stable_sort(items: Iterable[T], key: Callable[[T], Any], descending: bool) -> List[T]:
    """
    Stable sort into a new list; items whose key is None go last.

    Ties keep their input order in both directions, and so do the
    keyless items at the end.
    """
    keyed = []
    missing = []
    for item in items:
        value = key(item)
        if value is None:
            missing.append(item)
        else:
            keyed.append((value, item))

    keyed.sort(key=lambda pair: pair[0], reverse=descending)
    return [item for _, item in keyed] + missing


def sort_transactions(
    transactions: Iterable[Transaction],
    sort_field: Union[SortField, str] = SortField.DATE,
    sort_direction: Union[SortDirection, str] = SortDirection.DESC,
) -> List[Transaction]:
    """
    Order transactions by one field.

    Dates compare as instants, amounts by absolute value, description and
    category as case-sensitive strings.

    Raises InvalidSortError for an unknown field or direction; user-supplied
    sort input can be checked first with coerce_sort_field and
    coerce_sort_direction.
    """
    field = coerce_sort_field(sort_field)
    direction = coerce_sort_direction(sort_direction)
    return stable_sort(transactions, _SORT_KEYS[field], descending=direction is SortDirection.DESC)


def _matches_search(txn: Transaction, term: str) -> bool:
    for text in (txn.description, txn.merchant):
        if isinstance(text, str) and term in text.lower():
            return True
    return False


def _matches_category(txn: Transaction, wanted: str) -> bool:
    actual = txn.category.strip().lower() if isinstance(txn.category, str) else ""
    if actual == wanted:
        return True
    # "other" also covers every category the classifier buckets as other
    return wanted == OTHER and normalize_category(txn.category) == OTHER


def filter_transactions(
    transactions: Iterable[Transaction],
    filters: Optional[TransactionFilters],
) -> List[Transaction]:
    """
    Keep the transactions matching every active filter.

    A transaction missing the value an active filter looks at (no date
    with a date range, no amount with an amount range) is excluded.
    """
    result = list(transactions)
    if filters is None or not filters.has_active_filters:
        return result

    if filters.search:
        term = filters.search.strip().lower()
        if term:
            result = [t for t in result if _matches_search(t, term)]

    if filters.category:
        wanted = filters.category.strip().lower()
        if wanted:
            result = [t for t in result if _matches_category(t, wanted)]

    if filters.date_from is not None or filters.date_to is not None:
        date_from = to_date(filters.date_from)
        date_to = to_date(filters.date_to)
        kept = []
        for txn in result:
            day = to_date(txn.date)
            if day is None:
                continue
            if date_from is not None and day < date_from:
                continue
            if date_to is not None and day > date_to:
                continue
            kept.append(txn)
        result = kept

    amount_min = to_decimal(filters.amount_min)
    amount_max = to_decimal(filters.amount_max)
    if amount_min is not None or amount_max is not None:
        kept = []
        for txn in result:
            amount = _abs_amount(txn.amount)
            if amount is None:
                continue
            if amount_min is not None and amount < amount_min:
                continue
            if amount_max is not None and amount > amount_max:
                continue
            kept.append(txn)
        result = kept

    return result


def view(
    transactions: Iterable[Transaction],
    sort_field: Union[SortField, str] = SortField.DATE,
    sort_direction: Union[SortDirection, str] = SortDirection.DESC,
    filters: Optional[TransactionFilters] = None,
) -> List[Transaction]:
    """
    Filtered, ordered copy of a transaction collection; the input is left untouched.

    Malformed records never raise here. An unknown sort field or direction
    raises InvalidSortError, see sort_transactions.
    """
    return sort_transactions(filter_transactions(transactions, filters), sort_field, sort_direction)


def payment_history(payments: Iterable[Payment]) -> List[Payment]:
    """Payments newest first"""
    return stable_sort(payments, lambda p: to_instant(p.date), descending=True)


def activity_feed(activities: Iterable[Activity], limit: Optional[int] = None) -> List[Activity]:
    """Activity newest first, optionally cut to the first `limit` items"""
    ordered = stable_sort(activities, lambda a: to_instant(a.timestamp), descending=True)
    if limit is not None:
        return ordered[: max(limit, 0)]
    return ordered
