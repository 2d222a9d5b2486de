"""
Engine Package

Pure computations over snapshot records: recurrence expansion, bill
due dates and statuses, weekly bucketing and balance projection.
"""

from paycycle.engine.bucketing import (
    bill_occurrences,
    bucketize,
    deferred_months,
    weekly_expense_budget,
)
from paycycle.engine.due_dates import (
    days_late,
    days_until_due,
    due_date_from,
    due_date_in_month,
    is_overdue,
    last_paid_payment,
    next_due_date,
    remaining_amount,
    split_payments,
)
from paycycle.engine.overview import build_weekly_overview, default_window
from paycycle.engine.projection import annotate, closing_balance, project
from paycycle.engine.recurrence import (
    anchor_date,
    describe,
    expand,
    instance_id,
    iter_occurrences,
    materialize,
    materialize_deposits,
    materialize_paychecks,
    merge_income,
)
from paycycle.engine.status import (
    active_deferment,
    classify,
    classify_all,
    period_figures,
)
from paycycle.utils.dates import format_week_label, week_range, week_start

__all__ = [
    # Recurrence
    "anchor_date",
    "describe",
    "expand",
    "instance_id",
    "iter_occurrences",
    "materialize",
    "materialize_deposits",
    "materialize_paychecks",
    "merge_income",
    # Due dates
    "days_late",
    "days_until_due",
    "due_date_from",
    "due_date_in_month",
    "is_overdue",
    "last_paid_payment",
    "next_due_date",
    "remaining_amount",
    "split_payments",
    # Status
    "active_deferment",
    "classify",
    "classify_all",
    "period_figures",
    # Bucketing
    "bill_occurrences",
    "bucketize",
    "deferred_months",
    "weekly_expense_budget",
    "format_week_label",
    "week_range",
    "week_start",
    # Projection
    "annotate",
    "closing_balance",
    "project",
    # Overview
    "build_weekly_overview",
    "default_window",
]
