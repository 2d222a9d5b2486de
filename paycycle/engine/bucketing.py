"""
Weekly Bucketing

Partitions dated money events into fixed Sunday-Saturday weeks.

RULES:
- A point event (bill occurrence, paycheck, deposit, purchase) lands in
  exactly one bucket: the week containing its date.
- A gig lands in every week its date range overlaps. Each of those
  buckets counts the gig's full amount in `total_gigs` and its hours in
  `total_gig_hours`; nothing is pro-rated, and gigs stay out of
  `total_income`.
- Bills without any due date, bills flagged as deferred, and bill months
  covered by an active deferment never enter a bucket. They are returned
  on the side for the undated / deferred lists.
- Bill occurrences dated before today are past due. They are reported
  through the overdue list and kept out of the weeks.
- A week's expense deduction is the larger of its expense budget and
  its purchases.
- Buckets exist only for weeks holding at least one event, plus any
  explicitly requested week. Events inside a bucket are sorted by date.
"""

from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Optional

from paycycle.engine.due_dates import next_due_date
from paycycle.engine.recurrence import expand
from paycycle.models.bill import Bill, BillDeferment, BillPayment
from paycycle.models.expense import ExpenseBudget, ExpensePurchase
from paycycle.models.income import Deposit, Gig, Paycheck
from paycycle.models.recurrence import DayOfMonthAnchor, MonthlyCadence, RecurrenceRule
from paycycle.models.week import BillOccurrence, BucketResult, WeekBucket
from paycycle.utils.dates import month_key, shift_month, week_start, weeks_between
from paycycle.utils.money import to_money, total


# =============================================================================
# BILL OCCURRENCES
# =============================================================================

def bill_occurrences(
    bill: Bill,
    payments: Iterable[BillPayment],
    window_start: date,
    window_end: date,
    today: date,
) -> list[BillOccurrence]:
    """
    Dated instances of one bill inside [window_start, window_end].

    The first instance is the resolver's next due date. A recurring bill
    then repeats on its due day every following month, within the months
    it is active in. Instances before today are left out.
    """
    if bill.deferred_flag or not bill.is_dated:
        return []

    first = next_due_date(bill, payments, today)
    if first is None:
        return []

    amount = to_money(bill.effective_amount)
    dates = [first]
    if bill.is_recurring and bill.due_date is None:
        year, month = shift_month(first.year, first.month, 1)
        following = RecurrenceRule(
            id=bill.id,
            amount=amount,
            start_date=date(year, month, 1),
            cadence=MonthlyCadence(anchor=DayOfMonthAnchor(day=bill.due_day)),
        )
        dates.extend(expand(following, window_start, window_end))

    occurrences = []
    for on in dates:
        if on < today or not window_start <= on <= window_end:
            continue
        if bill.due_date is None and not bill.is_active_in_month(on.year, on.month):
            continue
        occurrences.append(BillOccurrence(bill=bill, due_date=on, amount=amount))
    return occurrences


def deferred_months(bill: Bill, deferments: Iterable[BillDeferment]) -> set[str]:
    """YYYY-MM months the bill has an active deferment for."""
    return {d.month_year for d in deferments if d.bill_id == bill.id and d.is_active}


# =============================================================================
# EXPENSES
# =============================================================================

def weekly_expense_budget(
    budgets: Iterable[ExpenseBudget],
    start: date,
    end: date,
) -> Decimal:
    """
    Sum of the budgets in effect for the week [start, end].

    Each expense type contributes its most recent budget that covers the
    whole week.
    """
    current: dict[str, ExpenseBudget] = {}
    for budget in budgets:
        if not budget.covers_week(start, end):
            continue
        seen = current.get(budget.expense_type_id)
        if seen is None or budget.start_date > seen.start_date:
            current[budget.expense_type_id] = budget
    return total(b.amount for b in current.values())


# =============================================================================
# BUCKETING
# =============================================================================

def _empty_bucket(sunday: date) -> WeekBucket:
    return WeekBucket(start_date=sunday, end_date=sunday + timedelta(days=6))


def _in_window(d: Optional[date], window_start: date, window_end: date) -> bool:
    return d is not None and window_start <= d <= window_end


def bucketize(
    bills: Iterable[Bill],
    paychecks: Iterable[Paycheck],
    deposits: Iterable[Deposit],
    gigs: Iterable[Gig],
    window_start: date,
    window_end: date,
    today: Optional[date] = None,
    payments: Iterable[BillPayment] = (),
    deferments: Iterable[BillDeferment] = (),
    include_weeks: Iterable[date] = (),
    expense_budgets: Iterable[ExpenseBudget] = (),
    expense_purchases: Iterable[ExpensePurchase] = (),
) -> BucketResult:
    """
    Group events into week buckets, oldest week first.

    Args:
        today: Reference date for bill due-date resolution
               (defaults to window_start).
        payments: Bill payment history, used to resolve due dates.
        deferments: Bill deferments; active ones hide that month's bill.
        include_weeks: Dates whose weeks are materialized even if empty
                       (only when they fall inside the window).
        expense_budgets: Weekly expense budgets by expense type.
        expense_purchases: Dated purchases; each lands in its own week.
    """
    if window_end < window_start:
        return BucketResult()

    today = today or window_start
    payments = list(payments)
    deferments = list(deferments)
    expense_budgets = list(expense_budgets)

    bill_slots: dict[date, list[BillOccurrence]] = defaultdict(list)
    paycheck_slots: dict[date, list[Paycheck]] = defaultdict(list)
    deposit_slots: dict[date, list[Deposit]] = defaultdict(list)
    gig_slots: dict[date, list[Gig]] = defaultdict(list)
    purchase_slots: dict[date, list[ExpensePurchase]] = defaultdict(list)
    weeks: set[date] = set()

    undated: list[Bill] = []
    deferred: list[Bill] = []

    for bill in bills:
        if bill.deferred_flag:
            deferred.append(bill)
            continue
        if not bill.is_dated:
            undated.append(bill)
            continue

        hidden_months = deferred_months(bill, deferments)
        current = next_due_date(bill, payments, today)
        skipped = current is not None and month_key(current) in hidden_months
        for occurrence in bill_occurrences(bill, payments, window_start, window_end, today):
            if month_key(occurrence.due_date) in hidden_months:
                skipped = True
                continue
            sunday = week_start(occurrence.due_date)
            bill_slots[sunday].append(occurrence)
            weeks.add(sunday)
        if skipped:
            deferred.append(bill)

    for paycheck in paychecks:
        if _in_window(paycheck.date, window_start, window_end):
            sunday = week_start(paycheck.date)
            paycheck_slots[sunday].append(paycheck)
            weeks.add(sunday)

    for deposit in deposits:
        if _in_window(deposit.date, window_start, window_end):
            sunday = week_start(deposit.date)
            deposit_slots[sunday].append(deposit)
            weeks.add(sunday)

    for gig in gigs:
        span = gig.span
        if span is None or not gig.overlaps(window_start, window_end):
            continue
        for sunday in weeks_between(max(span[0], window_start), min(span[1], window_end)):
            gig_slots[sunday].append(gig)
            weeks.add(sunday)

    for purchase in expense_purchases:
        if _in_window(purchase.purchase_date, window_start, window_end):
            sunday = week_start(purchase.purchase_date)
            purchase_slots[sunday].append(purchase)
            weeks.add(sunday)

    for requested in include_weeks:
        if _in_window(requested, window_start, window_end):
            weeks.add(week_start(requested))

    buckets = []
    for sunday in sorted(weeks):
        bucket = _empty_bucket(sunday)
        bucket.bills = sorted(bill_slots[sunday], key=lambda o: (o.due_date, o.bill.name))
        bucket.paychecks = sorted(paycheck_slots[sunday], key=lambda p: p.date)
        bucket.deposits = sorted(deposit_slots[sunday], key=lambda d: d.date)
        bucket.gigs = sorted(gig_slots[sunday], key=lambda g: g.span[0])
        bucket.purchases = sorted(purchase_slots[sunday], key=lambda p: p.purchase_date)
        bucket.total_bills = total(o.amount for o in bucket.bills)
        bucket.total_income = total(
            [p.amount for p in bucket.paychecks] + [d.amount for d in bucket.deposits]
        )
        bucket.total_gigs = total(g.amount for g in bucket.gigs)
        bucket.total_gig_hours = total(g.total_hours for g in bucket.gigs)
        bucket.expense_budget = weekly_expense_budget(
            expense_budgets, bucket.start_date, bucket.end_date
        )
        bucket.total_purchases = total(p.amount for p in bucket.purchases)
        bucket.total_expenses = max(bucket.expense_budget, bucket.total_purchases)
        buckets.append(bucket)

    return BucketResult(buckets=buckets, undated_bills=undated, deferred_bills=deferred)
