"""Pytest fixtures for testing"""

import pytest
from datetime import date, datetime
from decimal import Decimal
from typing import Callable, List

from cardtracker_engine.domain.models import (
    Activity,
    ActivityType,
    Card,
    CardNetwork,
    Payment,
    PaymentStatus,
    Transaction,
)


@pytest.fixture
def reference_date() -> date:
    """Fixed "today" so classifications never depend on the clock"""
    return date(2024, 3, 10)


@pytest.fixture
def make_card() -> Callable[..., Card]:
    """Factory for a well-formed card; keyword overrides replace any field"""

    def _make(**overrides) -> Card:
        fields = dict(
            card_id="card_1",
            name="Sapphire Preferred",
            last_four="4242",
            cardholder_name="Alex Rivera",
            network=CardNetwork.VISA,
            credit_limit=Decimal("5000.00"),
            current_balance=Decimal("1250.50"),
            minimum_payment=Decimal("35.00"),
            due_date=date(2024, 3, 20),
            billing_date=date(2024, 2, 25),
            interest_rate=Decimal("21.99"),
            annual_fee=Decimal("95.00"),
        )
        fields.update(overrides)
        return Card(**fields)

    return _make


@pytest.fixture
def sample_cards(make_card) -> List[Card]:
    """One card per status bucket, relative to reference_date (2024-03-10)"""
    return [
        # Due in 2 days and over its limit
        make_card(
            card_id="card_urgent",
            name="Freedom Flex",
            credit_limit=Decimal("1000"),
            current_balance=Decimal("1200"),
            minimum_payment=Decimal("40"),
            due_date=date(2024, 3, 12),
        ),
        # Five days past due
        make_card(
            card_id="card_overdue",
            name="Blue Cash",
            network=CardNetwork.AMEX,
            credit_limit=Decimal("2000"),
            current_balance=Decimal("300"),
            minimum_payment=Decimal("25"),
            due_date=date(2024, 3, 5),
        ),
        # Due in 10 days
        make_card(card_id="card_upcoming", name="Sapphire Preferred"),
        # Due tomorrow but already paid this cycle
        make_card(
            card_id="card_paid",
            name="Discover It",
            network=CardNetwork.DISCOVER,
            credit_limit=Decimal("3000"),
            current_balance=Decimal("500"),
            minimum_payment=Decimal("30"),
            due_date=date(2024, 3, 11),
            is_paid=True,
        ),
        # Due in 30 days, no credit line on file
        make_card(
            card_id="card_far",
            name="Store Card",
            network=CardNetwork.MASTERCARD,
            credit_limit=Decimal("0"),
            current_balance=Decimal("100"),
            minimum_payment=Decimal("10"),
            due_date=date(2024, 4, 9),
        ),
    ]


@pytest.fixture
def sample_transactions() -> List[Transaction]:
    """Transaction history, mostly on card_upcoming, in insertion order"""
    return [
        Transaction("t1", "card_upcoming", datetime(2024, 3, 1, 10, 0), "Whole Foods", "Whole Foods Market", "groceries", Decimal("-82.45")),
        Transaction("t2", "card_upcoming", datetime(2024, 3, 3, 19, 30), "Olive Garden", None, "dining", Decimal("-56.20")),
        Transaction("t3", "card_upcoming", datetime(2024, 3, 3, 19, 30), "Refund - Amazon", "Amazon", "Shopping", Decimal("50.00")),
        Transaction("t4", "card_upcoming", datetime(2024, 3, 5, 8, 15), "Shell", "Shell Oil", "gas", Decimal("-50.00")),
        Transaction("t5", "card_upcoming", datetime(2024, 2, 28, 12, 0), "Netflix", None, "entertainment", Decimal("-15.99")),
        Transaction("t6", "card_urgent", datetime(2024, 3, 2, 7, 45), "Delta Air Lines", "Delta", "travel", Decimal("-420.00")),
    ]


@pytest.fixture
def sample_payments() -> List[Payment]:
    return [
        Payment("p1", "card_upcoming", datetime(2024, 1, 18, 9, 0), Decimal("300.00"), "Bank transfer", PaymentStatus.COMPLETED, "CNF-1001"),
        Payment("p2", "card_upcoming", datetime(2024, 2, 18, 9, 0), Decimal("250.00"), "Bank transfer", PaymentStatus.PENDING, "CNF-1002"),
        Payment("p3", "card_urgent", datetime(2024, 2, 10, 9, 0), Decimal("100.00"), "Debit card", PaymentStatus.FAILED, "CNF-1003"),
    ]


@pytest.fixture
def sample_activities() -> List[Activity]:
    return [
        Activity("a1", "Whole Foods", "Sapphire Preferred", "groceries", datetime(2024, 3, 1, 10, 0), Decimal("82.45"), ActivityType.CHARGE),
        Activity("a2", "Payment received", "Blue Cash", "payment", datetime(2024, 3, 8, 16, 5), Decimal("150.00"), ActivityType.PAYMENT),
        Activity("a3", "Shell", "Sapphire Preferred", "gas", datetime(2024, 3, 5, 8, 15), Decimal("50.00"), ActivityType.CHARGE),
    ]
