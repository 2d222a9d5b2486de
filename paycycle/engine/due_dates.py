"""
Bill Due-Date Resolution

Works out when a bill is next due, given its payment history.

Priority order for `next_due_date`:
1. A scheduled payment (dated after today) wins: the user has already
   arranged when the bill gets paid.
2. A recurring bill rolls forward past its most recent paid payment.
   A bill with a fixed due_date never rolls; the due_date wins over
   due_day.
3. Otherwise the plain rule: due_day in this month (next month once it
   has passed), or the fixed due_date of a one-time bill.

All comparisons are between calendar dates; nothing here is mutated,
so resolving twice with the same history gives the same answer.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from paycycle.models.bill import Bill, BillPayment, LateNotice, LateSeverity
from paycycle.utils.dates import day_in_month, months_between, shift_month


def due_date_in_month(due_day: int, year: int, month: int) -> date:
    """due_day in the given month, clamped to the month's last day."""
    return day_in_month(year, month, due_day)


def _own_payments(bill: Bill, payments: Iterable[BillPayment]) -> list[BillPayment]:
    return [p for p in payments if p.bill_id == bill.id]


def split_payments(
    payments: Iterable[BillPayment],
    today: date,
) -> tuple[list[BillPayment], list[BillPayment]]:
    """
    (scheduled, history): payments dated after today, and the rest.

    Scheduled payments come out earliest first, history newest first.
    """
    scheduled = []
    history = []
    for payment in payments:
        if payment.payment_date > today:
            scheduled.append(payment)
        else:
            history.append(payment)
    scheduled.sort(key=lambda p: p.payment_date)
    history.sort(key=lambda p: p.payment_date, reverse=True)
    return scheduled, history


def last_paid_payment(payments: Iterable[BillPayment]) -> Optional[BillPayment]:
    """The settled payment with the latest `last_payment_date`."""
    paid = [p for p in payments if p.is_paid]
    if not paid:
        return None
    return max(paid, key=lambda p: p.last_payment_date)


def due_date_from(bill: Bill, reference: date) -> Optional[date]:
    """
    Next due date counted from `reference`, ignoring payments.

    One-time bills return their due_date; recurring bills return due_day
    in the reference month, or next month once it is before `reference`.
    """
    if bill.due_date is not None:
        return bill.due_date
    if not bill.is_recurring:
        return None
    candidate = due_date_in_month(bill.due_day, reference.year, reference.month)
    if candidate < reference:
        year, month = shift_month(reference.year, reference.month, 1)
        candidate = due_date_in_month(bill.due_day, year, month)
    return candidate


def next_due_date(
    bill: Bill,
    payments: Iterable[BillPayment],
    today: date,
) -> Optional[date]:
    """The bill's current next due date, or None for an undated bill."""
    if not bill.is_dated:
        return None

    own = _own_payments(bill, payments)
    scheduled, _ = split_payments(own, today)
    if scheduled:
        return scheduled[0].payment_date

    if bill.is_recurring and bill.due_date is None:
        last = last_paid_payment(own)
        if last is not None:
            paid_on = last.last_payment_date
            candidate = due_date_in_month(bill.due_day, paid_on.year, paid_on.month)
            if candidate <= paid_on:
                year, month = shift_month(paid_on.year, paid_on.month, 1)
                candidate = due_date_in_month(bill.due_day, year, month)
            return candidate

    return due_date_from(bill, today)


def is_overdue(bill: Bill, payments: Iterable[BillPayment], today: date) -> bool:
    """True when the next due date is before today."""
    due = next_due_date(bill, payments, today)
    return due is not None and due < today


def days_until_due(
    bill: Bill,
    payments: Iterable[BillPayment],
    today: date,
) -> Optional[int]:
    """Days from today to the next due date (negative when overdue)."""
    due = next_due_date(bill, payments, today)
    if due is None:
        return None
    return (due - today).days


def remaining_amount(total_amount: Decimal, partial_payment: Decimal) -> Decimal:
    """What is still owed for the period; never negative."""
    return max(Decimal("0.00"), total_amount - partial_payment)


def _severity(days: int) -> LateSeverity:
    if days >= 60:
        return LateSeverity.SEVERE
    if days >= 30:
        return LateSeverity.SERIOUS
    if days >= 15:
        return LateSeverity.MODERATE
    return LateSeverity.MILD


def days_late(
    payment: BillPayment,
    today: date,
    due_day: Optional[int] = None,
) -> Optional[LateNotice]:
    """
    Lateness badge for a bill whose latest payment is `payment`.

    Shown once more than one whole month has passed since the payment,
    or once this month's due day has passed.
    """
    paid_on = payment.last_payment_date

    show = months_between(paid_on, today) > 1
    if not show and due_day is not None and 1 <= due_day <= 31:
        show = due_date_in_month(due_day, today.year, today.month) < today
    if not show:
        return None

    days = (today - paid_on).days
    if days <= 0:
        return None
    return LateNotice(days=days, severity=_severity(days))
