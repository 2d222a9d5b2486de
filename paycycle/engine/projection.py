"""
Balance Projection

Carries money forward from week to week, oldest week first.

For each bucket, in order:
    carryover  = running balance
    available  = total_income + carryover - total_expenses
    remainder  = available - total_bills
    running    = max(0, remainder)

`total_expenses` is the larger of the week's expense budget and its
purchases, worked out by the bucketer.

A short week does not drag the following weeks down: its deficit shows
up as the bucket's `shortfall` and the next week starts from zero.

The fold is written out with functools.reduce so the dependency of each
week on the previous one is explicit. Input buckets are not modified;
annotated copies are returned.
"""

from decimal import Decimal
from functools import reduce
from typing import Iterable

from paycycle.models.week import WeekBucket
from paycycle.utils.money import ZERO, percentage, to_money


Accumulator = tuple[Decimal, list[WeekBucket]]


def annotate(bucket: WeekBucket, carryover: Decimal) -> WeekBucket:
    """A copy of `bucket` with the projection figures for `carryover`."""
    available = to_money(bucket.total_income + carryover - bucket.total_expenses)
    remainder = to_money(available - bucket.total_bills)
    return bucket.model_copy(update={
        "carryover_balance": to_money(carryover),
        "total_available": available,
        "week_remainder": remainder,
        "shortfall": max(ZERO, -remainder),
        "progress_percentage": percentage(max(ZERO, available), bucket.total_bills),
    })


def _step(acc: Accumulator, bucket: WeekBucket) -> Accumulator:
    running, annotated = acc
    current = annotate(bucket, running)
    return max(ZERO, current.week_remainder), annotated + [current]


def project(buckets: Iterable[WeekBucket], opening_balance: Decimal = ZERO) -> list[WeekBucket]:
    """
    Annotate buckets with carryover, available, remainder and progress.

    Buckets must already be in chronological order.
    """
    start: Accumulator = (max(ZERO, to_money(opening_balance)), [])
    _, annotated = reduce(_step, buckets, start)
    return annotated


def closing_balance(buckets: Iterable[WeekBucket]) -> Decimal:
    """Balance carried out of the last projected week."""
    remainders = [b.week_remainder for b in buckets]
    if not remainders:
        return ZERO
    return max(ZERO, remainders[-1])
