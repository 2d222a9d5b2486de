"""
Snapshot and Validation Models

A FinanceSnapshot is the read-only bundle of records the storage
collaborator hands to the engine, already scoped to one user.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from paycycle.models.bill import Bill, BillDeferment, BillPayment
from paycycle.models.expense import ExpenseBudget, ExpensePurchase
from paycycle.models.income import Deposit, Gig, Paycheck
from paycycle.models.recurrence import RecurringDeposit, RecurringPaycheck


class FinanceSnapshot(BaseModel):
    """All records the engine needs for one refresh."""

    bills: list[Bill] = Field(default_factory=list)
    bill_payments: list[BillPayment] = Field(default_factory=list)
    bill_deferments: list[BillDeferment] = Field(default_factory=list)
    paychecks: list[Paycheck] = Field(default_factory=list)
    deposits: list[Deposit] = Field(default_factory=list)
    gigs: list[Gig] = Field(default_factory=list)
    recurring_paychecks: list[RecurringPaycheck] = Field(default_factory=list)
    recurring_deposits: list[RecurringDeposit] = Field(default_factory=list)
    expense_budgets: list[ExpenseBudget] = Field(default_factory=list)
    expense_purchases: list[ExpensePurchase] = Field(default_factory=list)
    loaded_at: datetime = Field(default_factory=datetime.now)

    def payments_for(self, bill_id: str) -> list[BillPayment]:
        return [p for p in self.bill_payments if p.bill_id == bill_id]

    def deferments_for(self, bill_id: str) -> list[BillDeferment]:
        return [d for d in self.bill_deferments if d.bill_id == bill_id]

    @property
    def record_count(self) -> int:
        return (
            len(self.bills)
            + len(self.bill_payments)
            + len(self.bill_deferments)
            + len(self.paychecks)
            + len(self.deposits)
            + len(self.gigs)
            + len(self.recurring_paychecks)
            + len(self.recurring_deposits)
            + len(self.expense_budgets)
            + len(self.expense_purchases)
        )


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single problem found in a snapshot."""

    record_type: str = Field(
        ...,
        description="Kind of record (e.g., 'bill', 'gig', 'recurring_paycheck')"
    )
    record_id: Optional[str] = Field(
        default=None,
        description="ID of the offending record"
    )
    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'out_of_range', 'duplicate')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """Result of validating one snapshot. Issues never block aggregation."""

    validated_at: datetime = Field(default_factory=datetime.now)
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        return not self.issues

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    def issues_for(self, record_id: str) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.record_id == record_id]
