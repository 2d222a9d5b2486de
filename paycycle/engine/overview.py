"""
Weekly Overview

Runs the whole engine over one FinanceSnapshot:

    validate -> classify bills -> expand recurring income
             -> bucket by week (bills, income, gigs, expenses)
             -> project balances

Everything here is a pure function of (snapshot, window, today). The one
side effect is a summary log event per run.
"""

from datetime import date, timedelta
from typing import Optional

from paycycle.config import EngineSettings, get_settings
from paycycle.engine.bucketing import bucketize
from paycycle.engine.projection import project
from paycycle.engine.recurrence import (
    materialize_deposits,
    materialize_paychecks,
    merge_income,
)
from paycycle.engine.status import classify_all
from paycycle.log import get_logger
from paycycle.models.bill import BillStatus, BillStatusReport
from paycycle.models.snapshot import FinanceSnapshot
from paycycle.models.week import WeekBucket, WeeklyOverview
from paycycle.utils.dates import week_start
from paycycle.validation import SnapshotValidator


def default_window(today: date, weeks: int) -> tuple[date, date]:
    """(Sunday of today's week, Saturday `weeks` weeks later)."""
    start = week_start(today)
    return start, start + timedelta(weeks=max(1, weeks), days=-1)


def _mark_occurrences(buckets: list[WeekBucket], reports: list[BillStatusReport]) -> None:
    """Stamp each bill occurrence with its bill's status.

    Only the occurrence on the bill's next due date carries the classified
    status; later months of a recurring bill are still upcoming. Deferred
    months never reach a bucket, so no bucketed occurrence is DEFERRED.
    """
    by_bill = {report.bill_id: report for report in reports}
    for bucket in buckets:
        for occurrence in bucket.bills:
            report = by_bill.get(occurrence.bill_id)
            if report is not None and report.next_due_date == occurrence.due_date:
                occurrence.status = report.status
            else:
                occurrence.status = BillStatus.UPCOMING


def build_weekly_overview(
    snapshot: FinanceSnapshot,
    window_start: Optional[date] = None,
    window_end: Optional[date] = None,
    today: Optional[date] = None,
    settings: Optional[EngineSettings] = None,
) -> WeeklyOverview:
    """
    Compute the weekly overview for one snapshot.

    Args:
        snapshot: Records for one user, as loaded from storage
        window_start: First day of the window (defaults to Sunday of today's week)
        window_end: Last day of the window (defaults to `window_weeks` weeks on)
        today: Reference date (defaults to the system date)
        settings: Engine settings (defaults to the environment)
    """
    settings = settings or get_settings().engine
    today = today or date.today()

    default_start, default_end = default_window(today, settings.window_weeks)
    window_start = window_start or default_start
    window_end = window_end or default_end

    validation = SnapshotValidator().validate(snapshot)

    reports = classify_all(
        snapshot.bills,
        snapshot.bill_payments,
        snapshot.bill_deferments,
        today,
    )

    paychecks = merge_income(
        snapshot.paychecks,
        materialize_paychecks(snapshot.recurring_paychecks, window_start, window_end),
    )
    deposits = merge_income(
        snapshot.deposits,
        materialize_deposits(snapshot.recurring_deposits, window_start, window_end),
    )

    result = bucketize(
        snapshot.bills,
        paychecks,
        deposits,
        snapshot.gigs,
        window_start,
        window_end,
        today=today,
        payments=snapshot.bill_payments,
        deferments=snapshot.bill_deferments,
        include_weeks=[today] if settings.include_current_week else [],
        expense_budgets=snapshot.expense_budgets,
        expense_purchases=snapshot.expense_purchases,
    )
    _mark_occurrences(result.buckets, reports)
    buckets = project(result.buckets)

    overview = WeeklyOverview(
        window_start=window_start,
        window_end=window_end,
        today=today,
        buckets=buckets,
        undated_bills=result.undated_bills,
        deferred_bills=result.deferred_bills,
        overdue_bills=[r for r in reports if r.status == BillStatus.OVERDUE],
        status_reports=reports,
        issues=validation.issues,
    )

    get_logger(__name__).info(
        "weekly_overview_built",
        window_start=window_start.isoformat(),
        window_end=window_end.isoformat(),
        weeks=len(buckets),
        bills=len(snapshot.bills),
        overdue=len(overview.overdue_bills),
        undated=len(overview.undated_bills),
        deferred=len(overview.deferred_bills),
        expenses=str(overview.total_expenses),
        issues=len(validation.issues),
        closing_balance=str(overview.closing_balance),
    )
    return overview
