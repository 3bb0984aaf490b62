"""Pydantic schemas validating raw store records into domain objects"""

import logging
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Iterable, List, Mapping, Optional, Type, TypeVar

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)

from cardtracker_engine.domain.exceptions import InvalidRecordError
from cardtracker_engine.domain.models import (
    Activity,
    ActivityType,
    Card,
    CardNetwork,
    Payment,
    PaymentStatus,
    Transaction,
)
from cardtracker_engine.infrastructure.observability.metrics import record_degraded
from cardtracker_engine.utils.date_utils import to_date, to_instant
from cardtracker_engine.utils.decimal_utils import to_decimal

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)
D = TypeVar("D")

_TRUE_STRINGS = {"true", "yes", "1", "y"}


def _degraded(record_type: str, field_name: Optional[str], value: Any) -> None:
    logger.debug(
        "Malformed field replaced with default",
        extra={"record_type": record_type, "field": field_name, "raw_value": repr(value)},
    )
    record_degraded(record_type, field_name or "unknown")


def _identifier(value: Any) -> Any:
    if isinstance(value, (int, str)) and not isinstance(value, bool):
        return str(value).strip()
    return value


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _money(value: Any, record_type: str, info: ValidationInfo) -> Optional[Decimal]:
    result = to_decimal(value)
    if result is None and value not in (None, ""):
        _degraded(record_type, info.field_name, value)
    return result


def _day(value: Any, record_type: str, info: ValidationInfo) -> Optional[date]:
    result = to_date(value)
    if result is None and value not in (None, ""):
        _degraded(record_type, info.field_name, value)
    return result


def _instant(value: Any, record_type: str, info: ValidationInfo) -> Optional[datetime]:
    result = to_instant(value)
    if result is None and value not in (None, ""):
        _degraded(record_type, info.field_name, value)
    return result


def _member(enum_cls: Type[E], value: Any, record_type: str, info: ValidationInfo) -> Optional[E]:
    if value is None or value == "":
        return None
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        _degraded(record_type, info.field_name, value)
        return None


def _is_day_of_month(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    return isinstance(value, int) and 1 <= value <= 31


class _Record(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class CardRecord(_Record):
    """Card as stored; accepts snake_case and the dashboard's camelCase keys"""

    card_id: str = Field(..., min_length=1, validation_alias=AliasChoices("card_id", "cardId", "id", "_id"))
    name: str = Field("", validation_alias=AliasChoices("name", "cardName"))
    last_four: str = Field("", validation_alias=AliasChoices("last_four", "lastFour", "lastFourDigits"))
    cardholder_name: str = Field("", validation_alias=AliasChoices("cardholder_name", "cardholderName", "cardholder"))
    network: Optional[CardNetwork] = Field(None, validation_alias=AliasChoices("network", "cardType", "type"))
    credit_limit: Optional[Decimal] = Field(None, validation_alias=AliasChoices("credit_limit", "creditLimit"))
    current_balance: Optional[Decimal] = Field(
        None, validation_alias=AliasChoices("current_balance", "currentBalance", "balance")
    )
    minimum_payment: Optional[Decimal] = Field(None, validation_alias=AliasChoices("minimum_payment", "minimumPayment"))
    due_date: Optional[date] = Field(None, validation_alias=AliasChoices("due_date", "dueDate", "nextDueDate"))
    due_day: Optional[int] = Field(None, validation_alias=AliasChoices("due_day", "dueDay"))
    billing_date: Optional[date] = Field(None, validation_alias=AliasChoices("billing_date", "billingDate"))
    interest_rate: Optional[Decimal] = Field(None, validation_alias=AliasChoices("interest_rate", "interestRate", "apr"))
    annual_fee: Optional[Decimal] = Field(None, validation_alias=AliasChoices("annual_fee", "annualFee"))
    is_paid: bool = Field(False, validation_alias=AliasChoices("is_paid", "isPaid", "paid"))
    status: Optional[str] = None  # legacy pre-computed badge

    @model_validator(mode="before")
    @classmethod
    def split_day_of_month(cls, data: Any) -> Any:
        """A due date given as a bare 1-31 is a day-of-month, not a calendar date"""
        if not isinstance(data, Mapping):
            return data
        for key in ("due_date", "dueDate", "nextDueDate"):
            if key in data and _is_day_of_month(data[key]):
                data = dict(data)
                data.setdefault("due_day", int(str(data.pop(key)).strip()))
                break
        return data

    @field_validator("card_id", mode="before")
    @classmethod
    def coerce_card_id(cls, value: Any) -> Any:
        return _identifier(value)

    @field_validator("name", "last_four", "cardholder_name", mode="before")
    @classmethod
    def coerce_texts(cls, value: Any) -> str:
        return _text(value)

    @field_validator("network", mode="before")
    @classmethod
    def coerce_network(cls, value: Any, info: ValidationInfo) -> Optional[CardNetwork]:
        return _member(CardNetwork, value, "card", info)

    @field_validator(
        "credit_limit", "current_balance", "minimum_payment", "interest_rate", "annual_fee", mode="before"
    )
    @classmethod
    def coerce_amounts(cls, value: Any, info: ValidationInfo) -> Optional[Decimal]:
        return _money(value, "card", info)

    @field_validator("due_date", "billing_date", mode="before")
    @classmethod
    def coerce_dates(cls, value: Any, info: ValidationInfo) -> Optional[date]:
        return _day(value, "card", info)

    @field_validator("due_day", mode="before")
    @classmethod
    def coerce_due_day(cls, value: Any, info: ValidationInfo) -> Optional[int]:
        if value is None or value == "":
            return None
        if _is_day_of_month(value):
            return int(str(value).strip())
        _degraded("card", info.field_name, value)
        return None

    @field_validator("is_paid", mode="before")
    @classmethod
    def coerce_paid_flag(cls, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.strip().lower() in _TRUE_STRINGS
        return value == 1

    @field_validator("status", mode="before")
    @classmethod
    def coerce_status(cls, value: Any) -> Optional[str]:
        return value.strip().lower() if isinstance(value, str) else None

    def to_domain(self) -> Card:
        return Card(
            card_id=self.card_id,
            name=self.name,
            last_four=self.last_four,
            cardholder_name=self.cardholder_name,
            network=self.network,
            credit_limit=self.credit_limit,
            current_balance=self.current_balance,
            minimum_payment=self.minimum_payment,
            due_date=self.due_date,
            due_day=self.due_day,
            billing_date=self.billing_date,
            interest_rate=self.interest_rate,
            annual_fee=self.annual_fee,
            is_paid=self.is_paid or self.status == "paid",
        )


class TransactionRecord(_Record):
    transaction_id: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("transaction_id", "transactionId", "id", "_id")
    )
    card_id: str = Field("", validation_alias=AliasChoices("card_id", "cardId", "card"))
    date: Optional[datetime] = Field(None, validation_alias=AliasChoices("date", "transactionDate", "createdAt"))
    description: str = ""
    merchant: Optional[str] = None
    category: str = ""
    amount: Optional[Decimal] = None

    @field_validator("transaction_id", "card_id", mode="before")
    @classmethod
    def coerce_ids(cls, value: Any) -> Any:
        return _identifier(value)

    @field_validator("description", "category", mode="before")
    @classmethod
    def coerce_texts(cls, value: Any) -> str:
        return _text(value)

    @field_validator("merchant", mode="before")
    @classmethod
    def coerce_merchant(cls, value: Any) -> Optional[str]:
        text = _text(value).strip()
        return text or None

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, value: Any, info: ValidationInfo) -> Optional[datetime]:
        return _instant(value, "transaction", info)

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, value: Any, info: ValidationInfo) -> Optional[Decimal]:
        return _money(value, "transaction", info)

    def to_domain(self) -> Transaction:
        return Transaction(
            transaction_id=self.transaction_id,
            card_id=self.card_id,
            date=self.date,
            description=self.description,
            merchant=self.merchant,
            category=self.category,
            amount=self.amount,
        )


class PaymentRecord(_Record):
    payment_id: str = Field(..., min_length=1, validation_alias=AliasChoices("payment_id", "paymentId", "id", "_id"))
    card_id: str = Field("", validation_alias=AliasChoices("card_id", "cardId", "card"))
    date: Optional[datetime] = Field(None, validation_alias=AliasChoices("date", "paymentDate", "createdAt"))
    amount: Optional[Decimal] = None
    method: str = ""
    status: Optional[PaymentStatus] = None
    confirmation_code: str = Field(
        "", validation_alias=AliasChoices("confirmation_code", "confirmationCode", "confirmationNumber")
    )

    @field_validator("payment_id", "card_id", mode="before")
    @classmethod
    def coerce_ids(cls, value: Any) -> Any:
        return _identifier(value)

    @field_validator("method", "confirmation_code", mode="before")
    @classmethod
    def coerce_texts(cls, value: Any) -> str:
        return _text(value)

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, value: Any, info: ValidationInfo) -> Optional[datetime]:
        return _instant(value, "payment", info)

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, value: Any, info: ValidationInfo) -> Optional[Decimal]:
        return _money(value, "payment", info)

    @field_validator("status", mode="before")
    @classmethod
    def coerce_status(cls, value: Any, info: ValidationInfo) -> Optional[PaymentStatus]:
        return _member(PaymentStatus, value, "payment", info)

    def to_domain(self) -> Payment:
        return Payment(
            payment_id=self.payment_id,
            card_id=self.card_id,
            date=self.date,
            amount=self.amount,
            method=self.method,
            status=self.status,
            confirmation_code=self.confirmation_code,
        )


class ActivityRecord(_Record):
    activity_id: str = Field(..., min_length=1, validation_alias=AliasChoices("activity_id", "activityId", "id", "_id"))
    description: str = ""
    card_name: str = Field("", validation_alias=AliasChoices("card_name", "cardName", "card"))
    category: str = ""
    timestamp: Optional[datetime] = Field(None, validation_alias=AliasChoices("timestamp", "date", "createdAt"))
    amount: Optional[Decimal] = None
    activity_type: Optional[ActivityType] = Field(None, validation_alias=AliasChoices("activity_type", "type"))

    @field_validator("activity_id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        return _identifier(value)

    @field_validator("description", "card_name", "category", mode="before")
    @classmethod
    def coerce_texts(cls, value: Any) -> str:
        return _text(value)

    @field_validator("timestamp", mode="before")
    @classmethod
    def coerce_timestamp(cls, value: Any, info: ValidationInfo) -> Optional[datetime]:
        return _instant(value, "activity", info)

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, value: Any, info: ValidationInfo) -> Optional[Decimal]:
        return _money(value, "activity", info)

    @field_validator("activity_type", mode="before")
    @classmethod
    def coerce_type(cls, value: Any, info: ValidationInfo) -> Optional[ActivityType]:
        return _member(ActivityType, value, "activity", info)

    def to_domain(self) -> Activity:
        return Activity(
            activity_id=self.activity_id,
            description=self.description,
            card_name=self.card_name,
            category=self.category,
            timestamp=self.timestamp,
            amount=self.amount,
            activity_type=self.activity_type,
        )


def _validator(schema: Type[_Record], domain_type: type, record_type: str) -> Callable[[Any], Any]:
    def parse(raw: Any) -> Any:
        if isinstance(raw, domain_type):
            return raw
        try:
            return schema.model_validate(raw).to_domain()
        except ValidationError as e:
            raise InvalidRecordError(f"Invalid {record_type} record: {e.error_count()} error(s)") from e

    return parse


parse_card = _validator(CardRecord, Card, "card")
parse_transaction = _validator(TransactionRecord, Transaction, "transaction")
parse_payment = _validator(PaymentRecord, Payment, "payment")
parse_activity = _validator(ActivityRecord, Activity, "activity")


def _parse_batch(raws: Optional[Iterable[Any]], parse: Callable[[Any], D], record_type: str) -> List[D]:
    """Parse a snapshot, skipping records that cannot be used at all"""
    parsed: List[D] = []
    for index, raw in enumerate(raws or []):
        try:
            parsed.append(parse(raw))
        except InvalidRecordError as e:
            record_degraded(record_type, "rejected")
            logger.warning(
                "Skipping malformed record",
                extra={"record_type": record_type, "index": index, "error": str(e)},
            )
    return parsed


def parse_cards(raws: Optional[Iterable[Any]]) -> List[Card]:
    return _parse_batch(raws, parse_card, "card")


def parse_transactions(raws: Optional[Iterable[Any]]) -> List[Transaction]:
    return _parse_batch(raws, parse_transaction, "transaction")


def parse_payments(raws: Optional[Iterable[Any]]) -> List[Payment]:
    return _parse_batch(raws, parse_payment, "payment")


def parse_activities(raws: Optional[Iterable[Any]]) -> List[Activity]:
    return _parse_batch(raws, parse_activity, "activity")
