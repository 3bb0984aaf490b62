"""Dashboard and card-detail view builders - the entry points used by presentation code"""

import time
from datetime import date, datetime
from typing import Any, Iterable, List, Optional, Union

from cardtracker_engine.config import Settings
from cardtracker_engine.domain.metrics import aggregate, available_credit, utilization
from cardtracker_engine.domain.models import (
    Activity,
    Card,
    CardDetail,
    CardStatus,
    CardSummary,
    Dashboard,
    Payment,
    Transaction,
    TransactionFilters,
)
from cardtracker_engine.domain.status import DEFAULT_THRESHOLDS, StatusThresholds, assess
from cardtracker_engine.domain.transactions import SortState, activity_feed, payment_history, view
from cardtracker_engine.infrastructure.observability.logging import log_dashboard_built
from cardtracker_engine.infrastructure.observability.metrics import record_dashboard
from cardtracker_engine.utils import formatting

ReferenceDate = Union[date, datetime]


def build_card_summary(
    card: Card,
    reference_date: ReferenceDate,
    thresholds: StatusThresholds = DEFAULT_THRESHOLDS,
    utilization_places: int = 1,
) -> CardSummary:
    return CardSummary(
        card=card,
        assessment=assess(card, reference_date, thresholds),
        available_credit=available_credit(card),
        utilization=utilization(card, utilization_places),
    )


def upcoming_payments(summaries: Iterable[CardSummary]) -> List[CardSummary]:
    """Urgent and upcoming cards, soonest due first, then by name"""
    due = [
        s
        for s in summaries
        if s.status in (CardStatus.URGENT, CardStatus.UPCOMING) and s.assessment.days_until_due is not None
    ]
    return sorted(due, key=lambda s: (s.assessment.days_until_due, s.card.name))


def build_dashboard(
    cards: Iterable[Card],
    activities: Iterable[Activity],
    reference_date: ReferenceDate,
    thresholds: StatusThresholds = DEFAULT_THRESHOLDS,
    activity_limit: Optional[int] = None,
    utilization_places: int = 1,
) -> Dashboard:
    """
    Build the dashboard: card grid, summary metrics, payment timeline and
    recent activity.

    Every card's status comes from assess(), so the grid badges, the
    timeline and the summary counts always agree.
    """
    start_time = time.perf_counter()
    cards = list(cards)

    summaries = [build_card_summary(card, reference_date, thresholds, utilization_places) for card in cards]
    summary = aggregate(cards, reference_date, thresholds, utilization_places)
    recent = activity_feed(activities, activity_limit)

    duration = time.perf_counter() - start_time
    record_dashboard(summary, duration)
    log_dashboard_built(
        summary.total_cards,
        summary.upcoming_count,
        summary.overdue_count,
        len(recent),
        duration * 1000,
    )

    return Dashboard(
        summary=summary,
        cards=summaries,
        upcoming_payments=upcoming_payments(summaries),
        recent_activity=recent,
    )


def build_card_detail(
    card: Card,
    transactions: Iterable[Transaction],
    payments: Iterable[Payment],
    reference_date: ReferenceDate,
    thresholds: StatusThresholds = DEFAULT_THRESHOLDS,
    sort_state: Optional[SortState] = None,
    filters: Optional[TransactionFilters] = None,
    utilization_places: int = 1,
) -> CardDetail:
    """Card detail page: header summary, filtered/sorted transactions and payment history"""
    sort_state = sort_state or SortState()
    filters = filters or TransactionFilters()

    own_transactions = [t for t in transactions if t.card_id == card.card_id]
    own_payments = [p for p in payments if p.card_id == card.card_id]

    return CardDetail(
        summary=build_card_summary(card, reference_date, thresholds, utilization_places),
        transactions=view(own_transactions, sort_state.field, sort_state.direction, filters),
        payments=payment_history(own_payments),
        sort_field=sort_state.field,
        sort_direction=sort_state.direction,
        filters=filters,
        total_transactions=len(own_transactions),
    )


class DashboardEngine:
    """Thresholds and display defaults bound once, for presentation code"""

    def __init__(
        self,
        thresholds: StatusThresholds = DEFAULT_THRESHOLDS,
        locale: str = formatting.DEFAULT_LOCALE,
        currency: str = formatting.DEFAULT_CURRENCY,
        utilization_places: int = 1,
        activity_limit: Optional[int] = None,
    ):
        self.thresholds = thresholds
        self.locale = locale
        self.currency = currency
        self.utilization_places = utilization_places
        self.activity_limit = activity_limit

    @classmethod
    def from_settings(cls, settings: Settings) -> "DashboardEngine":
        return cls(
            thresholds=StatusThresholds.from_settings(settings),
            locale=settings.default_locale,
            currency=settings.default_currency,
            utilization_places=settings.utilization_decimals,
            activity_limit=settings.activity_feed_limit,
        )

    def classify(self, card: Card, reference_date: ReferenceDate) -> CardStatus:
        return assess(card, reference_date, self.thresholds).status

    def dashboard(
        self,
        cards: Iterable[Card],
        activities: Iterable[Activity],
        reference_date: ReferenceDate,
    ) -> Dashboard:
        return build_dashboard(
            cards,
            activities,
            reference_date,
            self.thresholds,
            self.activity_limit,
            self.utilization_places,
        )

    def card_detail(
        self,
        card: Card,
        transactions: Iterable[Transaction],
        payments: Iterable[Payment],
        reference_date: ReferenceDate,
        sort_state: Optional[SortState] = None,
        filters: Optional[TransactionFilters] = None,
    ) -> CardDetail:
        return build_card_detail(
            card,
            transactions,
            payments,
            reference_date,
            self.thresholds,
            sort_state,
            filters,
            self.utilization_places,
        )

    def format_currency(self, amount: Any) -> str:
        return formatting.format_currency(amount, self.currency, self.locale)

    def format_date(self, value: Any, include_year: bool = True) -> str:
        return formatting.format_date(value, self.locale, include_year)

    def format_percent(self, value: Any) -> str:
        return formatting.format_percent(value, self.utilization_places)
