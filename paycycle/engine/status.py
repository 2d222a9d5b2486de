"""
Bill Status Classification

Derives one primary status per bill, plus the period payment figures a
weekly view shows next to it.

Precedence: DEFERRED > UNDATED > PAID > OVERDUE > PARTIAL > UPCOMING.

A deferment only counts for the month it names: the bill is DEFERRED
when a deferment covers the month of its next due date. Deferments of
other months leave the current status alone; the bucketer hides those
months instead.

Period figures (`total_amount`, `partial_payment`) are pre-aggregated by
the storage layer. When a bill arrives without them they are derived
here from its settled payments: every payment for a one-time bill, the
payments applied to today's month for a recurring one.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from paycycle.engine.due_dates import next_due_date, remaining_amount
from paycycle.models.bill import (
    Bill,
    BillDeferment,
    BillPayment,
    BillStatus,
    BillStatusReport,
)
from paycycle.utils.dates import month_key
from paycycle.utils.money import ZERO, percentage, total


def active_deferment(
    bill: Bill,
    deferments: Iterable[BillDeferment],
    month: Optional[str] = None,
) -> Optional[BillDeferment]:
    """
    The bill's active deferment, if any.

    Args:
        month: Only consider deferments for this YYYY-MM month
               (None = any month).

    When storage holds more than one (it should not), the newest wins.
    """
    active = [
        d for d in deferments
        if d.bill_id == bill.id and d.is_active and (month is None or d.month_year == month)
    ]
    if not active:
        return None
    return max(
        active,
        key=lambda d: (d.created_at is not None, d.created_at or 0, d.month_year),
    )


def period_figures(
    bill: Bill,
    payments: Iterable[BillPayment],
    today: date,
) -> tuple[Decimal, Decimal]:
    """(total_amount, partial_payment) for the current billing period."""
    total_amount = bill.total_amount if bill.total_amount is not None else bill.effective_amount

    if bill.partial_payment is not None:
        return total_amount, bill.partial_payment

    settled = [p for p in payments if p.bill_id == bill.id and p.is_paid and p.payment_date <= today]
    if bill.is_recurring and bill.due_date is None:
        current = month_key(today)
        settled = [p for p in settled if p.period_key == current]
    return total_amount, total(p.amount for p in settled)


def classify(
    bill: Bill,
    payments: Iterable[BillPayment],
    deferments: Iterable[BillDeferment],
    today: date,
) -> BillStatusReport:
    """Annotate one bill with its status and period figures."""
    payments = list(payments)
    due = next_due_date(bill, payments, today)
    deferment = active_deferment(bill, deferments, month_key(due)) if due is not None else None
    total_amount, partial = period_figures(bill, payments, today)
    remaining = remaining_amount(total_amount, partial)
    overdue = due is not None and due < today

    if bill.deferred_flag or deferment is not None:
        status = BillStatus.DEFERRED
    elif due is None:
        status = BillStatus.UNDATED
    elif total_amount > ZERO and partial >= total_amount:
        status = BillStatus.PAID
    elif overdue:
        status = BillStatus.OVERDUE
    elif partial > ZERO:
        status = BillStatus.PARTIAL
    else:
        status = BillStatus.UPCOMING

    decision_due = (
        deferment is not None
        and deferment.decide_by_date is not None
        and deferment.decide_by_date <= today
    )

    return BillStatusReport(
        bill_id=bill.id,
        status=status,
        next_due_date=due,
        is_overdue=overdue,
        days_until_due=(due - today).days if due is not None else None,
        is_deferred=status == BillStatus.DEFERRED,
        active_deferment=deferment,
        decision_due=decision_due,
        total_amount=total_amount,
        partial_payment=partial,
        remaining_amount=remaining,
        total_paid=total(p.amount for p in payments if p.bill_id == bill.id and p.is_paid),
        payment_progress=percentage(partial, total_amount),
    )


def classify_all(
    bills: Iterable[Bill],
    payments: Iterable[BillPayment],
    deferments: Iterable[BillDeferment],
    today: date,
) -> list[BillStatusReport]:
    """Classify every bill against the shared payment and deferment lists."""
    payments = list(payments)
    deferments = list(deferments)
    return [classify(bill, payments, deferments, today) for bill in bills]
