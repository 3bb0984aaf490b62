"""Unit tests for financial metrics and dashboard aggregates"""

from datetime import timedelta
from decimal import Decimal

from cardtracker_engine.domain.metrics import (
    aggregate,
    available_credit,
    category_distribution,
    financial_health,
    utilization,
    utilization_ratio,
)
from cardtracker_engine.domain.models import CardStatus, Transaction
from cardtracker_engine.domain.status import classify


def test_over_limit_card(make_card):
    """Balance above the limit gives negative available credit and >100% utilization"""
    card = make_card(credit_limit=Decimal("1000"), current_balance=Decimal("1200"))

    assert available_credit(card) == Decimal("-200")
    assert utilization(card) == Decimal("120.0")


def test_available_credit_is_exact(make_card):
    """available + balance == limit at full precision"""
    cases = [
        (Decimal("5000.00"), Decimal("1250.50")),
        (Decimal("0.30"), Decimal("0.10")),
        (Decimal("7500"), Decimal("0")),
        (Decimal("1000"), Decimal("1200.01")),
    ]
    for limit, balance in cases:
        card = make_card(credit_limit=limit, current_balance=balance)
        assert available_credit(card) + balance == limit


def test_float_inputs_do_not_drift(make_card):
    card = make_card(credit_limit=0.3, current_balance=0.1)
    assert available_credit(card) == Decimal("0.2")


def test_zero_limit_utilization_is_none(make_card):
    """No credit line: utilization is undefined, never NaN"""
    card = make_card(credit_limit=Decimal("0"), current_balance=Decimal("100"))

    assert utilization_ratio(card) is None
    assert utilization(card) is None
    assert available_credit(card) == Decimal("-100")


def test_missing_figures(make_card):
    assert available_credit(make_card(credit_limit=None)) is None
    assert utilization(make_card(current_balance=None)) is None


def test_utilization_rounds_half_up(make_card):
    # 1/3 = 33.333...%, 1/8 = 12.5%, 5/8000 = 0.0625%
    assert utilization(make_card(credit_limit=Decimal("3"), current_balance=Decimal("1"))) == Decimal("33.3")
    assert utilization(make_card(credit_limit=Decimal("8"), current_balance=Decimal("1"))) == Decimal("12.5")
    assert utilization(make_card(credit_limit=Decimal("8000"), current_balance=Decimal("5"))) == Decimal("0.1")
    assert utilization(make_card(credit_limit=Decimal("8000"), current_balance=Decimal("5")), places=2) == Decimal("0.06")


def test_financial_health_levels():
    """Each rating starts exactly at its lower bound"""
    cases = [
        (Decimal("0"), "excellent", "green"),
        (Decimal("29.9"), "excellent", "green"),
        (Decimal("30.0"), "good", "blue"),
        (Decimal("49.9"), "good", "blue"),
        (Decimal("50"), "fair", "yellow"),
        (Decimal("69.9"), "fair", "yellow"),
        (Decimal("70"), "poor", "orange"),
        (Decimal("89.9"), "poor", "orange"),
        (Decimal("90"), "critical", "red"),
        (Decimal("120.0"), "critical", "red"),
    ]
    for percent, status, color in cases:
        health = financial_health(percent)
        assert (health.status, health.color) == (status, color)

    assert financial_health(Decimal("45")).label == "Good"


def test_financial_health_unknown_without_utilization(make_card):
    zero_limit = make_card(credit_limit=Decimal("0"))

    assert financial_health(utilization(zero_limit)).status == "unknown"
    assert financial_health("n/a").status == "unknown"


def test_category_distribution(sample_transactions):
    shares = category_distribution(sample_transactions)

    # The +50.00 refund is not spend
    assert [s.category for s in shares] == ["travel", "groceries", "dining", "gas", "entertainment"]
    travel = shares[0]
    assert travel.label == "Travel"
    assert travel.amount == Decimal("420.00")
    assert travel.count == 1
    # 420.00 / 624.64
    assert travel.percentage == Decimal("67.2")
    assert sum(s.amount for s in shares) == Decimal("624.64")


def test_category_distribution_buckets_unmatched_as_other():
    txns = [
        Transaction("a", "c", None, "Petco", None, "Pet Supplies", Decimal("-30")),
        Transaction("b", "c", None, "Toys", None, None, Decimal("-10")),
        Transaction("c", "c", None, "Safeway", None, "Groceries", Decimal("-40")),
        Transaction("d", "c", None, "Broken", None, "dining", None),
    ]

    shares = category_distribution(txns)

    assert [(s.category, s.amount, s.count) for s in shares] == [
        ("other", Decimal("40"), 2),
        ("groceries", Decimal("40"), 1),
    ]
    assert [s.percentage for s in shares] == [Decimal("50.0"), Decimal("50.0")]


def test_category_distribution_without_spend():
    refund = Transaction("r", "c", None, "Refund", None, "shopping", Decimal("25"))

    assert category_distribution([]) == []
    assert category_distribution([refund]) == []


def test_aggregate_counts(sample_cards, reference_date):
    summary = aggregate(sample_cards, reference_date)

    assert summary.total_cards == 5
    assert summary.urgent_count == 2
    assert summary.overdue_count == 1
    assert summary.upcoming_count == 1
    assert summary.paid_count == 1
    assert summary.unknown_count == 1


def test_aggregate_matches_per_card_classification(sample_cards, reference_date):
    """The summary uses exactly the rule behind each card badge"""
    summary = aggregate(sample_cards, reference_date)
    statuses = [classify(card, reference_date) for card in sample_cards]

    assert summary.upcoming_count == statuses.count(CardStatus.UPCOMING)
    assert summary.urgent_count == statuses.count(CardStatus.URGENT)
    assert summary.paid_count == statuses.count(CardStatus.PAID)


def test_aggregate_totals(sample_cards, reference_date):
    summary = aggregate(sample_cards, reference_date)

    # 1200 + 300 + 1250.50 + 500 + 100
    assert summary.total_balance == Decimal("3350.50")
    # 1000 + 2000 + 5000 + 3000 + 0
    assert summary.total_credit_limit == Decimal("11000")
    assert summary.total_available_credit == summary.total_credit_limit - summary.total_balance
    # Paid card's 30 excluded: 40 + 25 + 35 + 10
    assert summary.total_minimum_due == Decimal("110")
    # Zero-limit card excluded: 3250.50 / 11000 = 29.55%, rounded half-up
    assert summary.overall_utilization == Decimal("29.6")


def test_aggregate_empty(reference_date):
    summary = aggregate([], reference_date)

    assert summary.total_cards == 0
    assert summary.upcoming_count == 0
    assert summary.overdue_count == 0
    assert summary.total_balance == Decimal("0")
    assert summary.overall_utilization is None


def test_aggregate_tolerates_malformed_cards(make_card, reference_date):
    """A broken card lands in unknown without hiding the rest"""
    cards = [
        make_card(card_id="ok", due_date=reference_date + timedelta(days=7)),
        make_card(card_id="broken", due_date="??", credit_limit=None, current_balance=None, minimum_payment=None),
    ]

    summary = aggregate(cards, reference_date)

    assert summary.total_cards == 2
    assert summary.upcoming_count == 1
    assert summary.unknown_count == 1
    assert summary.total_balance == Decimal("1250.50")


def test_aggregate_accepts_generator(sample_cards, reference_date):
    summary = aggregate((card for card in sample_cards), reference_date)
    assert summary.total_cards == 5


def test_huge_balance_rounds_instead_of_raising(make_card, reference_date):
    """Finite amounts beyond the default 28-digit precision still produce figures"""
    card = make_card(credit_limit=Decimal("0.01"), current_balance=Decimal("1e25"))

    assert utilization(card) == Decimal("1e29")

    summary = aggregate([card], reference_date)
    assert summary.overall_utilization == Decimal("1e29")
    assert summary.total_balance == Decimal("1e25")
