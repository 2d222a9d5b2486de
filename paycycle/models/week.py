"""
Weekly Aggregation Models

Derived, never stored. A WeekBucket covers one Sunday-Saturday week;
the bucketer fills in its events and totals, the balance projector
fills in the carryover figures.
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from paycycle.models.bill import Bill, BillStatus, BillStatusReport
from paycycle.models.expense import ExpensePurchase
from paycycle.models.income import Deposit, Gig, Paycheck
from paycycle.models.snapshot import ValidationIssue
from paycycle.utils.dates import format_week_label


class BillOccurrence(BaseModel):
    """One dated instance of a bill inside the aggregation window."""

    bill: Bill
    due_date: date
    amount: Decimal = Field(
        ...,
        description="Amount planned for this instance"
    )
    status: Optional[BillStatus] = None

    @property
    def bill_id(self) -> str:
        return self.bill.id


class WeekBucket(BaseModel):
    """
    Events and totals for one Sunday-Saturday week.

    `total_gigs` counts every overlapping gig's full amount and is kept
    out of `total_income`. `total_expenses` is the larger of the week's
    expense budget and its purchases; the projector deducts it.
    """

    start_date: date
    end_date: date

    bills: list[BillOccurrence] = Field(default_factory=list)
    paychecks: list[Paycheck] = Field(default_factory=list)
    deposits: list[Deposit] = Field(default_factory=list)
    gigs: list[Gig] = Field(default_factory=list)
    purchases: list[ExpensePurchase] = Field(default_factory=list)

    total_bills: Decimal = Decimal("0.00")
    total_income: Decimal = Decimal("0.00")
    total_gigs: Decimal = Decimal("0.00")
    total_gig_hours: Decimal = Decimal("0.00")
    expense_budget: Decimal = Decimal("0.00")
    total_purchases: Decimal = Decimal("0.00")
    total_expenses: Decimal = Decimal("0.00")

    # Filled in by the balance projector
    carryover_balance: Decimal = Decimal("0.00")
    total_available: Decimal = Decimal("0.00")
    week_remainder: Decimal = Decimal("0.00")
    shortfall: Decimal = Decimal("0.00")
    progress_percentage: Decimal = Decimal("0.00")

    @model_validator(mode='after')
    def validate_span(self) -> 'WeekBucket':
        """A bucket is exactly seven days long."""
        if self.end_date != self.start_date + timedelta(days=6):
            raise ValueError("Week end must be six days after week start")
        return self

    @property
    def label(self) -> str:
        return format_week_label(self.start_date, self.end_date)

    @property
    def total_paychecks(self) -> Decimal:
        return sum((p.amount for p in self.paychecks), Decimal("0.00"))

    @property
    def total_deposits(self) -> Decimal:
        return sum((d.amount for d in self.deposits), Decimal("0.00"))

    @property
    def is_empty(self) -> bool:
        return not (self.bills or self.paychecks or self.deposits or self.gigs or self.purchases)

    @property
    def is_short(self) -> bool:
        return self.week_remainder < 0

    def contains(self, d: date) -> bool:
        return self.start_date <= d <= self.end_date


class BucketResult(BaseModel):
    """Output of the weekly bucketer."""

    buckets: list[WeekBucket] = Field(default_factory=list)
    undated_bills: list[Bill] = Field(
        default_factory=list,
        description="Bills with neither a due date nor a due day"
    )
    deferred_bills: list[Bill] = Field(
        default_factory=list,
        description="Bills flagged as deferred, or deferred for a month in the window"
    )


class WeeklyOverview(BaseModel):
    """Everything a weekly view renders, computed from one snapshot."""

    window_start: date
    window_end: date
    today: date
    buckets: list[WeekBucket] = Field(default_factory=list)
    undated_bills: list[Bill] = Field(default_factory=list)
    deferred_bills: list[Bill] = Field(default_factory=list)
    overdue_bills: list[BillStatusReport] = Field(default_factory=list)
    status_reports: list[BillStatusReport] = Field(default_factory=list)
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def total_income(self) -> Decimal:
        return sum((b.total_income for b in self.buckets), Decimal("0.00"))

    @property
    def total_bills(self) -> Decimal:
        return sum((b.total_bills for b in self.buckets), Decimal("0.00"))

    @property
    def total_expenses(self) -> Decimal:
        return sum((b.total_expenses for b in self.buckets), Decimal("0.00"))

    @property
    def closing_balance(self) -> Decimal:
        """Balance carried out of the last week (never negative)."""
        if not self.buckets:
            return Decimal("0.00")
        return max(Decimal("0.00"), self.buckets[-1].week_remainder)

    def report_for(self, bill_id: str) -> Optional[BillStatusReport]:
        for report in self.status_reports:
            if report.bill_id == bill_id:
                return report
        return None

    def bucket_for(self, d: date) -> Optional[WeekBucket]:
        for bucket in self.buckets:
            if bucket.contains(d):
                return bucket
        return None
