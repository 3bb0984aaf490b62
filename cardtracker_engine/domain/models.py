"""Domain models - pure Python dataclasses for cards, their activity and derived views"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional


class CardNetwork(str, Enum):
    VISA = "visa"
    MASTERCARD = "mastercard"
    AMEX = "amex"
    DISCOVER = "discover"


class CardStatus(str, Enum):
    URGENT = "urgent"
    UPCOMING = "upcoming"
    PAID = "paid"
    UNKNOWN = "unknown"


class PaymentStatus(str, Enum):
    COMPLETED = "completed"
    PENDING = "pending"
    FAILED = "failed"


class ActivityType(str, Enum):
    PAYMENT = "payment"
    CHARGE = "charge"


class SortField(str, Enum):
    DATE = "date"
    DESCRIPTION = "description"
    CATEGORY = "category"
    AMOUNT = "amount"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass
class Card:
    """Credit card account snapshot from the external store"""

    card_id: str
    name: str = ""
    last_four: str = ""
    cardholder_name: str = ""
    network: Optional[CardNetwork] = None
    credit_limit: Optional[Decimal] = None
    current_balance: Optional[Decimal] = None  # amount owed
    minimum_payment: Optional[Decimal] = None
    due_date: Optional[date] = None  # absolute due date, wins over due_day
    due_day: Optional[int] = None  # day-of-month 1-31
    billing_date: Optional[date] = None
    interest_rate: Optional[Decimal] = None  # percent
    annual_fee: Optional[Decimal] = None
    is_paid: bool = False  # paid for the current billing cycle


@dataclass
class Transaction:
    """Card transaction; negative amount = spend, positive = credit/refund"""

    transaction_id: str
    card_id: str
    date: Optional[datetime]
    description: str = ""
    merchant: Optional[str] = None
    category: str = ""
    amount: Optional[Decimal] = None


@dataclass
class Payment:
    """Payment made towards a card"""

    payment_id: str
    card_id: str
    date: Optional[datetime]
    amount: Optional[Decimal] = None
    method: str = ""
    status: Optional[PaymentStatus] = None
    confirmation_code: str = ""


@dataclass
class Activity:
    """Feed item projected from a transaction or a payment"""

    activity_id: str
    description: str
    card_name: str
    category: str
    timestamp: Optional[datetime]
    amount: Optional[Decimal] = None
    activity_type: Optional[ActivityType] = None  # decides the display sign


@dataclass
class CardAssessment:
    """Payment urgency of one card at a reference date"""

    status: CardStatus
    due_date: Optional[date]
    days_until_due: Optional[int]  # negative when past due
    is_overdue: bool


@dataclass
class CardSummary:
    """Per-card view model shared by the dashboard grid and the detail header"""

    card: Card
    assessment: CardAssessment
    available_credit: Optional[Decimal]
    utilization: Optional[Decimal]  # percent, None when undefined

    @property
    def status(self) -> CardStatus:
        return self.assessment.status


@dataclass
class DashboardSummary:
    """Aggregate metrics over a card collection"""

    total_cards: int
    upcoming_count: int
    overdue_count: int
    urgent_count: int
    paid_count: int
    unknown_count: int
    total_balance: Decimal
    total_credit_limit: Decimal
    total_available_credit: Decimal
    total_minimum_due: Decimal
    overall_utilization: Optional[Decimal]


@dataclass
class CategoryShare:
    """Spend in one category and its share of total spend"""

    category: str
    label: str
    amount: Decimal
    count: int
    percentage: Decimal


@dataclass
class TransactionFilters:
    """User-selected filters for the transaction table"""

    search: Optional[str] = None
    category: Optional[str] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    amount_min: Optional[Decimal] = None
    amount_max: Optional[Decimal] = None

    @property
    def has_active_filters(self) -> bool:
        return any(
            value not in (None, "")
            for value in (
                self.search,
                self.category,
                self.date_from,
                self.date_to,
                self.amount_min,
                self.amount_max,
            )
        )


@dataclass
class Dashboard:
    summary: DashboardSummary
    cards: List[CardSummary]
    upcoming_payments: List[CardSummary]
    recent_activity: List[Activity]


@dataclass
class CardDetail:
    summary: CardSummary
    transactions: List[Transaction]
    payments: List[Payment]
    sort_field: SortField
    sort_direction: SortDirection
    filters: TransactionFilters = field(default_factory=TransactionFilters)
    total_transactions: int = 0  # before filtering
