"""
Expense Models

Planned spending that is not a bill. A budget sets a weekly amount for
one expense type over a date range; a purchase is money actually spent
(or planned to be spent) on a given day.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from paycycle.utils.dates import parse_date


class ExpenseBudget(BaseModel):
    """Weekly budget for one expense type, effective from start_date."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(..., min_length=1)
    expense_type_id: str = Field(..., min_length=1)
    amount: Decimal = Field(
        ...,
        ge=0,
        decimal_places=2,
        description="Amount set aside per week"
    )
    start_date: Optional[date] = Field(
        default=None,
        description="First day the budget applies (None = never active)"
    )
    end_date: Optional[date] = Field(
        default=None,
        description="Last day the budget applies (None = open-ended)"
    )

    @field_validator('start_date', 'end_date', mode='before')
    @classmethod
    def lenient_dates(cls, v: Any) -> Optional[date]:
        return parse_date(v)

    def covers_week(self, start: date, end: date) -> bool:
        """True when the budget is in effect for the whole of [start, end]."""
        if self.start_date is None or self.start_date > start:
            return False
        return self.end_date is None or self.end_date >= end


class ExpensePurchase(BaseModel):
    """A purchase against an expense type."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(..., min_length=1)
    expense_type_id: Optional[str] = None
    title: Optional[str] = None
    estimated_amount: Optional[Decimal] = Field(default=None, ge=0)
    purchase_amount: Optional[Decimal] = Field(default=None, ge=0)
    purchase_date: Optional[date] = Field(
        default=None,
        description="Day of the purchase (None = not yet scheduled)"
    )

    @field_validator('purchase_date', mode='before')
    @classmethod
    def lenient_date(cls, v: Any) -> Optional[date]:
        return parse_date(v)

    @property
    def amount(self) -> Decimal:
        """Actual amount, else the estimate, else zero."""
        if self.purchase_amount is not None:
            return self.purchase_amount
        if self.estimated_amount is not None:
            return self.estimated_amount
        return Decimal("0.00")
