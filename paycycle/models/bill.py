"""
Bill Models for paycycle

Bills, their payments and their deferments, as read-only snapshots from
the storage collaborator. Payments and deferments are associated with a
bill by `bill_id`, not embedded in it.

Dates coming from storage are coerced leniently: a date that cannot be
parsed becomes None. The bill then counts as undated instead of
failing validation.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)

from paycycle.utils.dates import last_day_of_month, parse_date, parse_month


MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


# =============================================================================
# ENUMS
# =============================================================================

class Priority(str, Enum):
    """Bill priority chosen by the user."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class BillStatus(str, Enum):
    """
    Derived status of a bill.

    Precedence when more than one applies:
    DEFERRED > UNDATED > PAID > OVERDUE > PARTIAL > UPCOMING
    """
    UPCOMING = "upcoming"
    PARTIAL = "partial"
    PAID = "paid"
    OVERDUE = "overdue"
    DEFERRED = "deferred"
    UNDATED = "undated"


class LateSeverity(str, Enum):
    """How late a bill is, banded by days since the last payment."""
    MILD = "mild"            # under 15 days
    MODERATE = "moderate"    # 15-29 days
    SERIOUS = "serious"      # 30-59 days
    SEVERE = "severe"        # 60+ days


# =============================================================================
# PAYMENTS AND DEFERMENTS
# =============================================================================

class BillPayment(BaseModel):
    """
    A payment made (or scheduled) against a bill.

    A payment dated after today is a scheduled payment.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(..., min_length=1)
    bill_id: str = Field(..., min_length=1)
    amount: Decimal = Field(
        ...,
        ge=0,
        decimal_places=2,
        description="Amount paid"
    )
    payment_date: date = Field(
        ...,
        description="Date the money moved (or will move)"
    )
    applied_date: Optional[date] = Field(
        default=None,
        description="Date the payment was applied to, if different"
    )
    applied_month: Optional[str] = Field(
        default=None,
        pattern=MONTH_PATTERN,
        description="Billing month (YYYY-MM) the payment covers"
    )
    is_paid: bool = Field(
        default=True,
        description="False for recorded-but-not-settled payments"
    )
    created_at: Optional[datetime] = None

    @field_validator('applied_date', mode='before')
    @classmethod
    def lenient_applied_date(cls, v: Any) -> Optional[date]:
        return parse_date(v)

    @property
    def last_payment_date(self) -> date:
        """
        The date this payment counts for.

        applied_date first, then the last day of applied_month,
        then payment_date.
        """
        if self.applied_date is not None:
            return self.applied_date
        month_start = parse_month(self.applied_month)
        if month_start is not None:
            return last_day_of_month(month_start.year, month_start.month)
        return self.payment_date

    @property
    def period_key(self) -> str:
        """YYYY-MM billing period this payment is applied to."""
        if self.applied_month:
            return self.applied_month
        return (self.applied_date or self.payment_date).strftime("%Y-%m")


class BillDeferment(BaseModel):
    """A user decision to push a bill out of its normal due week for a month."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(..., min_length=1)
    bill_id: str = Field(..., min_length=1)
    month_year: str = Field(
        ...,
        pattern=MONTH_PATTERN,
        description="Deferred billing month (YYYY-MM)"
    )
    decide_by_date: Optional[date] = Field(
        default=None,
        description="When the user must decide what to do"
    )
    loss_date: Optional[date] = Field(
        default=None,
        description="When the service is lost if still unpaid"
    )
    reason: Optional[str] = Field(default=None, max_length=1000)
    is_active: bool = True
    created_at: Optional[datetime] = None

    @field_validator('decide_by_date', 'loss_date', mode='before')
    @classmethod
    def lenient_dates(cls, v: Any) -> Optional[date]:
        return parse_date(v)


# =============================================================================
# BILL
# =============================================================================

class Bill(BaseModel):
    """
    A bill: one-time (`due_date`) or recurring monthly (`due_day`).

    Variable bills (credit cards and the like) may have no fixed amount;
    their balance is tracked through statements instead.

    `total_amount` and `partial_payment` are pre-aggregated by the storage
    layer for the current billing period and are consumed as-is.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(..., min_length=1)
    name: str = Field(
        default="",
        max_length=200,
        description="Display name"
    )
    amount: Optional[Decimal] = Field(
        default=None,
        ge=0,
        decimal_places=2,
        description="Fixed amount (None for variable bills)"
    )
    due_date: Optional[date] = Field(
        default=None,
        description="Due date of a one-time bill"
    )
    due_day: Optional[int] = Field(
        default=None,
        description="Day of month (1-31) of a recurring bill"
    )
    priority: Priority = Priority.MEDIUM
    is_variable: bool = False
    deferred_flag: bool = False
    loss_risk_flag: bool = False
    category: Optional[str] = None
    notes: Optional[str] = Field(default=None, max_length=1000)

    # Active months of a recurring bill (YYYY-MM, inclusive)
    start_month: Optional[str] = Field(default=None, pattern=MONTH_PATTERN)
    end_month: Optional[str] = Field(default=None, pattern=MONTH_PATTERN)

    # Current billing period, pre-aggregated by storage
    total_amount: Optional[Decimal] = None
    partial_payment: Optional[Decimal] = None

    # Latest statement of a variable bill
    statement_balance: Optional[Decimal] = None
    statement_minimum_due: Optional[Decimal] = None
    statement_date: Optional[date] = None
    updated_balance: Optional[Decimal] = None

    @field_validator('due_date', 'statement_date', mode='before')
    @classmethod
    def lenient_dates(cls, v: Any) -> Optional[date]:
        """Unparseable dates become None (the bill is then undated)."""
        return parse_date(v)

    @field_validator('due_day', mode='before')
    @classmethod
    def lenient_due_day(cls, v: Any) -> Optional[int]:
        if v is None or v == "":
            return None
        try:
            return int(v)
        except (TypeError, ValueError):
            return None

    @property
    def is_recurring(self) -> bool:
        """True when due_day is a usable day of month."""
        return self.due_day is not None and 1 <= self.due_day <= 31

    @property
    def is_dated(self) -> bool:
        return self.due_date is not None or self.is_recurring

    @property
    def effective_amount(self) -> Decimal:
        """
        Amount to plan for.

        The fixed amount, else the statement minimum of a variable bill,
        else zero.
        """
        if self.amount is not None:
            return self.amount
        if self.statement_minimum_due is not None:
            return self.statement_minimum_due
        return Decimal("0.00")

    def is_active_in_month(self, year: int, month: int) -> bool:
        """Whether a recurring bill bills in the given month."""
        key = f"{year:04d}-{month:02d}"
        if self.start_month and key < self.start_month:
            return False
        if self.end_month and key > self.end_month:
            return False
        return True


class BillStatusReport(BaseModel):
    """
    The status classifier's annotation of one bill.

    Figures refer to the current billing period.
    """

    bill_id: str
    status: BillStatus
    next_due_date: Optional[date] = None
    is_overdue: bool = False
    days_until_due: Optional[int] = Field(
        default=None,
        description="Negative when overdue"
    )
    is_deferred: bool = False
    active_deferment: Optional[BillDeferment] = None
    decision_due: bool = Field(
        default=False,
        description="The active deferment's decide-by date has been reached"
    )
    total_amount: Decimal = Decimal("0.00")
    partial_payment: Decimal = Decimal("0.00")
    remaining_amount: Decimal = Decimal("0.00")
    total_paid: Decimal = Decimal("0.00")
    payment_progress: Decimal = Field(
        default=Decimal("0.00"),
        description="Percent of the period amount paid (0-100)"
    )

    @property
    def is_partially_paid(self) -> bool:
        return self.status == BillStatus.PARTIAL or (
            Decimal("0") < self.partial_payment < self.total_amount
        )

    @property
    def is_paid(self) -> bool:
        return self.status == BillStatus.PAID


class LateNotice(BaseModel):
    """How late a bill is relative to its last payment."""

    days: int = Field(..., ge=1)
    severity: LateSeverity
