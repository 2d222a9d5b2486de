"""
Income Models

Paychecks and deposits are point-in-time events. A gig is income earned
over a date range; it links to the paychecks and deposits that paid for it.
"""

import datetime as dt
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from paycycle.utils.dates import parse_date


class IncomeRecord(BaseModel):
    """
    A dated amount of incoming money.

    Records generated from a recurrence rule carry `is_generated=True`
    and the rule's id; they are never persisted.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(..., min_length=1)
    amount: Decimal = Field(
        ...,
        ge=0,
        decimal_places=2
    )
    date: Optional[dt.date] = Field(
        default=None,
        description="Date received (None = undated, never bucketed)"
    )
    name: Optional[str] = None
    notes: Optional[str] = None
    recurring_rule_id: Optional[str] = Field(
        default=None,
        description="Rule this record was generated from or realizes"
    )
    is_generated: bool = False

    @field_validator('date', mode='before')
    @classmethod
    def lenient_date(cls, v: Any) -> Optional[dt.date]:
        return parse_date(v)


class Paycheck(IncomeRecord):
    """Income from an employer."""


class Deposit(IncomeRecord):
    """Any other incoming money."""


class Gig(BaseModel):
    """
    An income-producing engagement spanning [start_date, end_date].

    A gig with no end date is treated as a single day.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(..., min_length=1)
    name: str = ""
    amount: Decimal = Field(
        default=Decimal("0.00"),
        ge=0,
        decimal_places=2
    )
    total_hours: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Hours worked or planned for the gig"
    )
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None
    notes: Optional[str] = None
    paycheck_ids: list[str] = Field(default_factory=list)
    deposit_ids: list[str] = Field(default_factory=list)

    @field_validator('start_date', 'end_date', mode='before')
    @classmethod
    def lenient_dates(cls, v: Any) -> Optional[dt.date]:
        return parse_date(v)

    @property
    def span(self) -> Optional[tuple[dt.date, dt.date]]:
        """(first, last) day of the gig, or None when it has no start date."""
        if self.start_date is None:
            return None
        end = self.end_date or self.start_date
        if end < self.start_date:
            end = self.start_date
        return self.start_date, end

    def overlaps(self, start: dt.date, end: dt.date) -> bool:
        """True when the gig's range shares at least one day with [start, end]."""
        span = self.span
        if span is None:
            return False
        return span[0] <= end and span[1] >= start

    @property
    def linked_income_ids(self) -> list[str]:
        return [*self.paycheck_ids, *self.deposit_ids]
