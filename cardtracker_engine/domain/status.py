"""Card status classification - urgency of a card's next payment"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union

from cardtracker_engine.config import Settings
from cardtracker_engine.domain.models import Card, CardAssessment, CardStatus
from cardtracker_engine.utils.date_utils import resolve_due_day, to_date


@dataclass(frozen=True)
class StatusThresholds:
    """Day windows before the due date that make a card urgent or upcoming"""

    urgent_days: int = 3
    upcoming_days: int = 14

    @classmethod
    def from_settings(cls, settings: Settings) -> "StatusThresholds":
        return cls(
            urgent_days=settings.urgent_window_days,
            upcoming_days=settings.upcoming_window_days,
        )


DEFAULT_THRESHOLDS = StatusThresholds()


def resolve_due_date(card: Card, reference_date: date) -> Optional[date]:
    """
    Due date of the card's current cycle.

    An absolute due date is used as-is, even when it is in the past.
    A day-of-month resolves to its next occurrence on or after the
    reference date.
    """
    due = to_date(card.due_date)
    if due is not None:
        return due
    return resolve_due_day(card.due_day, reference_date)


def assess(
    card: Card,
    reference_date: Union[date, datetime],
    thresholds: StatusThresholds = DEFAULT_THRESHOLDS,
) -> CardAssessment:
    """
    Classify a card's payment urgency at a reference date.

    Rules, first match wins:
    - Marked paid for the cycle: paid
    - No usable due date: unknown
    - Due within urgent_days, or already past due: urgent
    - Due within upcoming_days: upcoming
    - Otherwise: unknown (nothing actionable soon)

    Window bounds are inclusive, so a card due exactly urgent_days out is
    urgent and one due exactly upcoming_days out is upcoming.
    """
    today = reference_date.date() if isinstance(reference_date, datetime) else reference_date
    due = resolve_due_date(card, today)
    days = (due - today).days if due is not None else None

    if card.is_paid:
        status = CardStatus.PAID
    elif days is None:
        status = CardStatus.UNKNOWN
    elif days <= thresholds.urgent_days:
        status = CardStatus.URGENT
    elif days <= thresholds.upcoming_days:
        status = CardStatus.UPCOMING
    else:
        status = CardStatus.UNKNOWN

    return CardAssessment(
        status=status,
        due_date=due,
        days_until_due=days,
        is_overdue=status is CardStatus.URGENT and days is not None and days < 0,
    )


def classify(
    card: Card,
    reference_date: Union[date, datetime],
    thresholds: StatusThresholds = DEFAULT_THRESHOLDS,
) -> CardStatus:
    return assess(card, reference_date, thresholds).status
