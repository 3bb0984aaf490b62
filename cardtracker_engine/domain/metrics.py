"""Financial metrics - available credit, utilization, health rating, category spend and dashboard aggregates"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from cardtracker_engine.domain.categories import CATEGORY_STYLES, normalize_category
from cardtracker_engine.domain.models import Card, CardStatus, CategoryShare, DashboardSummary, Transaction
from cardtracker_engine.domain.status import DEFAULT_THRESHOLDS, StatusThresholds, assess
from cardtracker_engine.utils.decimal_utils import quantize, to_decimal

HUNDRED = Decimal(100)


def available_credit(card: Card) -> Optional[Decimal]:
    """
    Credit limit minus current balance.

    Not clamped: a negative result means the card is over its limit.
    None only when either figure is missing.
    """
    limit = to_decimal(card.credit_limit)
    balance = to_decimal(card.current_balance)
    if limit is None or balance is None:
        return None
    return limit - balance


def utilization_ratio(card: Card) -> Optional[Decimal]:
    """Balance / limit at full precision; None when the limit is missing or not positive"""
    limit = to_decimal(card.credit_limit)
    balance = to_decimal(card.current_balance)
    if limit is None or balance is None or limit <= 0:
        return None
    return balance / limit


def utilization(card: Card, places: int = 1) -> Optional[Decimal]:
    """Utilization as a percentage rounded half-up, e.g. Decimal("120.0")"""
    ratio = utilization_ratio(card)
    if ratio is None:
        return None
    return quantize(ratio * HUNDRED, places)


@dataclass(frozen=True)
class FinancialHealth:
    status: str
    color: str
    label: str


UNKNOWN_HEALTH = FinancialHealth("unknown", "gray", "Unknown")

# Upper bound (exclusive) of each rating; anything at or above the last bound is critical
HEALTH_LEVELS: List[Tuple[Decimal, FinancialHealth]] = [
    (Decimal(30), FinancialHealth("excellent", "green", "Excellent")),
    (Decimal(50), FinancialHealth("good", "blue", "Good")),
    (Decimal(70), FinancialHealth("fair", "yellow", "Fair")),
    (Decimal(90), FinancialHealth("poor", "orange", "Poor")),
]
CRITICAL_HEALTH = FinancialHealth("critical", "red", "Critical")


def financial_health(percent: Any) -> FinancialHealth:
    """
    Rate a utilization percentage.

    excellent < 30, good < 50, fair < 70, poor < 90, critical otherwise.
    A missing or undefined utilization rates as unknown.
    """
    value = to_decimal(percent)
    if value is None:
        return UNKNOWN_HEALTH
    for bound, health in HEALTH_LEVELS:
        if value < bound:
            return health
    return CRITICAL_HEALTH


def category_distribution(transactions: Iterable[Transaction], places: int = 1) -> List[CategoryShare]:
    """
    Spend per category, largest first.

    Only spend (negative amounts) counts, as an absolute value; refunds,
    credits and transactions without an amount are left out. Categories
    are bucketed with normalize_category, so unmatched ones add up under
    "other". Equal amounts keep first-seen order.
    """
    totals: Dict[str, Decimal] = {}
    counts: Dict[str, int] = {}
    for txn in transactions:
        amount = to_decimal(txn.amount)
        if amount is None or amount >= 0:
            continue
        key = normalize_category(txn.category)
        totals[key] = totals.get(key, Decimal(0)) - amount
        counts[key] = counts.get(key, 0) + 1

    grand_total = sum(totals.values(), Decimal(0))
    shares = []
    for key, amount in totals.items():
        percentage = quantize(amount / grand_total * HUNDRED, places) if grand_total > 0 else None
        shares.append(
            CategoryShare(
                category=key,
                label=CATEGORY_STYLES[key].label,
                amount=amount,
                count=counts[key],
                percentage=percentage if percentage is not None else Decimal(0),
            )
        )
    return sorted(shares, key=lambda share: share.amount, reverse=True)


def aggregate(
    cards: Iterable[Card],
    reference_date: Union[date, datetime],
    thresholds: StatusThresholds = DEFAULT_THRESHOLDS,
    places: int = 1,
) -> DashboardSummary:
    """
    Dashboard counts and totals over a card collection.

    Counts come from assess(), the same rule behind each card's badge, so
    the summary cannot disagree with the grid. An empty collection is
    valid and yields zeros.
    """
    counts = {status: 0 for status in CardStatus}
    total_cards = 0
    overdue_count = 0
    total_balance = Decimal(0)
    total_limit = Decimal(0)
    total_available = Decimal(0)
    total_minimum_due = Decimal(0)
    utilized_balance = Decimal(0)
    utilized_limit = Decimal(0)

    for card in cards:
        total_cards += 1
        assessment = assess(card, reference_date, thresholds)
        counts[assessment.status] += 1
        if assessment.is_overdue:
            overdue_count += 1

        limit = to_decimal(card.credit_limit)
        balance = to_decimal(card.current_balance)
        if balance is not None:
            total_balance += balance
        if limit is not None:
            total_limit += limit
        available = available_credit(card)
        if available is not None:
            total_available += available
        if limit is not None and balance is not None and limit > 0:
            utilized_balance += balance
            utilized_limit += limit

        minimum = to_decimal(card.minimum_payment)
        if minimum is not None and assessment.status is not CardStatus.PAID:
            total_minimum_due += minimum

    overall = None
    if utilized_limit > 0:
        overall = quantize(utilized_balance / utilized_limit * HUNDRED, places)

    return DashboardSummary(
        total_cards=total_cards,
        upcoming_count=counts[CardStatus.UPCOMING],
        overdue_count=overdue_count,
        urgent_count=counts[CardStatus.URGENT],
        paid_count=counts[CardStatus.PAID],
        unknown_count=counts[CardStatus.UNKNOWN],
        total_balance=total_balance,
        total_credit_limit=total_limit,
        total_available_credit=total_available,
        total_minimum_due=total_minimum_due,
        overall_utilization=overall,
    )
