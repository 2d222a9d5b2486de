"""
Recurrence Expansion

Turns a recurrence rule into the concrete dates it falls on inside a
date range, and turns those dates into virtual paycheck / deposit
records.

Expansion is a pure function of (rule, range_start, range_end): the same
inputs always give the same dates, and nothing is remembered between
calls. Generated instances are never persisted.

ALGORITHM:
1. Generation starts at max(rule.start_date, range_start).
2. Weekly rules snap forward to the rule's weekday (if any), then step
   `interval` weeks.
3. Monthly rules place the anchor inside the starting month, then step
   `interval` months, re-applying the anchor in every month reached.
4. A date is emitted when it lies inside the range and inside the rule's
   own [start_date, end_date].
"""

from datetime import date, timedelta
from typing import Iterable, Iterator, Type, TypeVar

from paycycle.models.income import Deposit, IncomeRecord, Paycheck
from paycycle.models.recurrence import (
    DayOfMonthAnchor,
    LastBusinessDayAnchor,
    LastDayAnchor,
    MonthlyCadence,
    RecurrenceRule,
    WeeklyCadence,
)
from paycycle.utils.dates import (
    day_in_month,
    last_business_day_of_month,
    last_day_of_month,
    next_weekday_on_or_after,
    shift_month,
)
from paycycle.utils.money import format_amount


IncomeT = TypeVar("IncomeT", bound=IncomeRecord)


# =============================================================================
# ANCHORS
# =============================================================================

def anchor_date(anchor, year: int, month: int) -> date:
    """The date a monthly anchor picks inside the given month."""
    if isinstance(anchor, LastBusinessDayAnchor):
        return last_business_day_of_month(year, month)
    if isinstance(anchor, LastDayAnchor):
        return last_day_of_month(year, month)
    if isinstance(anchor, DayOfMonthAnchor):
        return day_in_month(year, month, anchor.day)
    raise TypeError(f"Unknown monthly anchor: {anchor!r}")


# =============================================================================
# EXPANSION
# =============================================================================

def _weekly_candidates(cadence: WeeklyCadence, first: date) -> Iterator[date]:
    current = first
    if cadence.day_of_week is not None:
        current = next_weekday_on_or_after(current, cadence.day_of_week.weekday)
    step = timedelta(weeks=cadence.interval)
    while True:
        yield current
        current += step


def _monthly_candidates(cadence: MonthlyCadence, first: date) -> Iterator[date]:
    year, month = first.year, first.month
    while True:
        yield anchor_date(cadence.anchor, year, month)
        year, month = shift_month(year, month, cadence.interval)


def iter_occurrences(
    rule: RecurrenceRule,
    range_start: date,
    range_end: date,
) -> Iterator[date]:
    """
    Lazily yield the rule's occurrence dates within [range_start, range_end].

    Dates come out strictly increasing, so no date is produced twice.
    """
    if range_end < range_start or rule.start_date > range_end:
        return
    if rule.end_date is not None and rule.end_date < rule.start_date:
        return

    first = max(rule.start_date, range_start)
    cadence = rule.cadence
    if isinstance(cadence, WeeklyCadence):
        candidates = _weekly_candidates(cadence, first)
    elif isinstance(cadence, MonthlyCadence):
        candidates = _monthly_candidates(cadence, first)
    else:
        raise TypeError(f"Unknown cadence: {cadence!r}")

    for candidate in candidates:
        if candidate > range_end:
            return
        if rule.end_date is not None and candidate > rule.end_date:
            return
        if candidate >= range_start and candidate >= rule.start_date:
            yield candidate


def expand(rule: RecurrenceRule, range_start: date, range_end: date) -> list[date]:
    """Ordered occurrence dates of `rule` within [range_start, range_end]."""
    return list(iter_occurrences(rule, range_start, range_end))


# =============================================================================
# DESCRIPTIONS
# =============================================================================

def _ordinal(n: int) -> str:
    if 11 <= n % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def describe(rule: RecurrenceRule) -> str:
    """
    Human-readable cadence, e.g. 'week on Friday',
    'every 2 weeks on Monday', 'month on last business day'.
    """
    cadence = rule.cadence
    interval = cadence.interval
    interval_text = "" if interval == 1 else f"every {interval} "
    unit_text = cadence.kind if interval == 1 else f"{cadence.kind}s"
    prefix = f"{interval_text}{unit_text}"

    if isinstance(cadence, WeeklyCadence):
        if cadence.day_of_week is None:
            return prefix
        return f"{prefix} on {cadence.day_of_week.value.capitalize()}"

    anchor = cadence.anchor
    if isinstance(anchor, LastBusinessDayAnchor):
        return f"{prefix} on last business day"
    if isinstance(anchor, LastDayAnchor):
        return f"{prefix} on last day"
    return f"{prefix} on {_ordinal(anchor.day)}"


# =============================================================================
# VIRTUAL INSTANCES
# =============================================================================

def instance_id(rule: RecurrenceRule, on: date) -> str:
    """Stable id of the instance of `rule` falling on `on`."""
    return f"{rule.id}-{on.isoformat()}"


def materialize(
    rules: Iterable[RecurrenceRule],
    record_type: Type[IncomeT],
    range_start: date,
    range_end: date,
) -> list[IncomeT]:
    """Generate one `record_type` instance per occurrence of every rule."""
    instances: list[IncomeT] = []
    for rule in rules:
        for on in iter_occurrences(rule, range_start, range_end):
            instances.append(record_type(
                id=instance_id(rule, on),
                amount=rule.amount,
                date=on,
                name=rule.name or f"Recurring: {format_amount(rule.amount)}",
                recurring_rule_id=rule.id,
                is_generated=True,
            ))
    return instances


def materialize_paychecks(
    rules: Iterable[RecurrenceRule],
    range_start: date,
    range_end: date,
) -> list[Paycheck]:
    return materialize(rules, Paycheck, range_start, range_end)


def materialize_deposits(
    rules: Iterable[RecurrenceRule],
    range_start: date,
    range_end: date,
) -> list[Deposit]:
    return materialize(rules, Deposit, range_start, range_end)


def merge_income(actual: Iterable[IncomeT], generated: Iterable[IncomeT]) -> list[IncomeT]:
    """
    Actual records followed by generated ones.

    A generated instance is dropped when an actual record already realizes
    the same rule on the same date.
    """
    actual = list(actual)
    realized = {
        (record.recurring_rule_id, record.date)
        for record in actual
        if record.recurring_rule_id is not None and record.date is not None
    }
    merged = list(actual)
    for record in generated:
        if (record.recurring_rule_id, record.date) in realized:
            continue
        merged.append(record)
    return merged
