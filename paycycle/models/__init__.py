"""
Data Models Package

This package contains all Pydantic models used by paycycle.
Every record handed to the engine, and every result it produces,
conforms to these schemas.
"""

from paycycle.models.bill import (
    Bill,
    BillDeferment,
    BillPayment,
    BillStatus,
    BillStatusReport,
    LateNotice,
    LateSeverity,
    Priority,
)
from paycycle.models.expense import ExpenseBudget, ExpensePurchase
from paycycle.models.income import (
    Deposit,
    Gig,
    IncomeRecord,
    Paycheck,
)
from paycycle.models.recurrence import (
    Cadence,
    DayOfMonthAnchor,
    DayOfWeek,
    LastBusinessDayAnchor,
    LastDayAnchor,
    MonthlyAnchor,
    MonthlyCadence,
    RecurrenceRule,
    RecurrenceUnit,
    RecurringDeposit,
    RecurringPaycheck,
    WeeklyCadence,
)
from paycycle.models.snapshot import (
    FinanceSnapshot,
    ValidationIssue,
    ValidationResult,
)
from paycycle.models.week import (
    BillOccurrence,
    BucketResult,
    WeekBucket,
    WeeklyOverview,
)

__all__ = [
    # Bill models
    "Bill",
    "BillDeferment",
    "BillPayment",
    "BillStatus",
    "BillStatusReport",
    "LateNotice",
    "LateSeverity",
    "Priority",
    # Expense models
    "ExpenseBudget",
    "ExpensePurchase",
    # Income models
    "Deposit",
    "Gig",
    "IncomeRecord",
    "Paycheck",
    # Recurrence models
    "Cadence",
    "DayOfMonthAnchor",
    "DayOfWeek",
    "LastBusinessDayAnchor",
    "LastDayAnchor",
    "MonthlyAnchor",
    "MonthlyCadence",
    "RecurrenceRule",
    "RecurrenceUnit",
    "RecurringDeposit",
    "RecurringPaycheck",
    "WeeklyCadence",
    # Snapshot and validation
    "FinanceSnapshot",
    "ValidationIssue",
    "ValidationResult",
    # Weekly aggregation
    "BillOccurrence",
    "BucketResult",
    "WeekBucket",
    "WeeklyOverview",
]
