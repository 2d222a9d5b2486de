"""
Recurrence Rule Models

A recurrence rule is an immutable template describing a repeating
income event: its cadence (weekly or monthly), its interval and the
anchor day inside each period. Instances are never stored; the expander
computes them on demand for a date range.

The cadence is a tagged union:

    WeeklyCadence(day_of_week?, interval)
    MonthlyCadence(anchor, interval)
        anchor = DayOfMonthAnchor(day) | LastDayAnchor | LastBusinessDayAnchor

Storage keeps the same information as flat nullable fields (three
competing monthly anchor fields). `RecurrenceRule.from_record` is the
single place where that flat shape is collapsed into one anchor.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from paycycle.utils.dates import parse_date


# =============================================================================
# ENUMS
# =============================================================================

class DayOfWeek(str, Enum):
    """Weekday names as stored by the mobile app."""
    SUNDAY = "sunday"
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"

    @property
    def weekday(self) -> int:
        """date.weekday() number (0=Monday .. 6=Sunday)."""
        return _WEEKDAY_NUMBERS[self]

    @classmethod
    def parse(cls, value: Any) -> Optional["DayOfWeek"]:
        """Case-insensitive lookup; None for empty or unknown values."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str) or not value.strip():
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


_WEEKDAY_NUMBERS = {
    DayOfWeek.MONDAY: 0,
    DayOfWeek.TUESDAY: 1,
    DayOfWeek.WEDNESDAY: 2,
    DayOfWeek.THURSDAY: 3,
    DayOfWeek.FRIDAY: 4,
    DayOfWeek.SATURDAY: 5,
    DayOfWeek.SUNDAY: 6,
}


class RecurrenceUnit(str, Enum):
    WEEK = "week"
    MONTH = "month"


# =============================================================================
# MONTHLY ANCHORS
# =============================================================================

class DayOfMonthAnchor(BaseModel):
    """A fixed day of the month; clamps to the last day in short months."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["day_of_month"] = "day_of_month"
    day: int = Field(default=1, ge=1, le=31)


class LastDayAnchor(BaseModel):
    """The last calendar day of the month."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["last_day"] = "last_day"


class LastBusinessDayAnchor(BaseModel):
    """The last Monday-Friday day of the month."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["last_business_day"] = "last_business_day"


MonthlyAnchor = Annotated[
    Union[DayOfMonthAnchor, LastDayAnchor, LastBusinessDayAnchor],
    Field(discriminator="kind"),
]


# =============================================================================
# CADENCES
# =============================================================================

class WeeklyCadence(BaseModel):
    """Every `interval` weeks, optionally on a fixed weekday."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["week"] = "week"
    interval: int = Field(default=1, ge=1)
    day_of_week: Optional[DayOfWeek] = None


class MonthlyCadence(BaseModel):
    """Every `interval` months on the anchor day."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["month"] = "month"
    interval: int = Field(default=1, ge=1)
    anchor: MonthlyAnchor = Field(default_factory=DayOfMonthAnchor)


Cadence = Annotated[
    Union[WeeklyCadence, MonthlyCadence],
    Field(discriminator="kind"),
]


# =============================================================================
# RULES
# =============================================================================

class RecurrenceRule(BaseModel):
    """
    A repeating income template.

    `end_date` of None means open-ended.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Opaque identifier from storage"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        decimal_places=2,
        description="Amount of every generated instance"
    )
    start_date: date = Field(
        ...,
        description="First date an instance may fall on"
    )
    end_date: Optional[date] = Field(
        default=None,
        description="Last date an instance may fall on (None = open-ended)"
    )
    cadence: Cadence
    name: Optional[str] = None
    notes: Optional[str] = None

    @field_validator('end_date', mode='before')
    @classmethod
    def lenient_end_date(cls, v: Any) -> Optional[date]:
        """An unparseable end date is treated as open-ended."""
        return parse_date(v)

    @property
    def unit(self) -> RecurrenceUnit:
        return RecurrenceUnit(self.cadence.kind)

    @property
    def interval(self) -> int:
        return self.cadence.interval

    @classmethod
    def from_record(cls, record: Mapping[str, Any]):
        """
        Build a rule from the flat storage shape.

        Monthly anchor precedence: last_business_day_of_month, then
        last_day_of_month, then day_of_month, then day 1. A missing or
        non-positive interval becomes 1.
        """
        unit = str(record.get("recurrence_unit") or "").strip().lower()
        interval = _coerce_interval(record.get("interval"))

        cadence: Union[WeeklyCadence, MonthlyCadence]
        if unit in ("week", "weekly"):
            cadence = WeeklyCadence(
                interval=interval,
                day_of_week=DayOfWeek.parse(record.get("day_of_week")),
            )
        elif unit in ("month", "monthly"):
            cadence = MonthlyCadence(
                interval=interval,
                anchor=_anchor_from_record(record),
            )
        else:
            raise ValueError(f"Unsupported recurrence unit: {record.get('recurrence_unit')!r}")

        return cls(
            id=str(record["id"]),
            amount=record["amount"],
            start_date=record["start_date"],
            end_date=record.get("end_date"),
            cadence=cadence,
            name=record.get("name"),
            notes=record.get("notes"),
        )


class RecurringPaycheck(RecurrenceRule):
    """A recurrence rule whose instances are paychecks."""


class RecurringDeposit(RecurrenceRule):
    """A recurrence rule whose instances are deposits."""


def _coerce_interval(value: Any) -> int:
    try:
        interval = int(value)
    except (TypeError, ValueError):
        return 1
    return interval if interval >= 1 else 1


def _anchor_from_record(record: Mapping[str, Any]):
    if record.get("last_business_day_of_month"):
        return LastBusinessDayAnchor()
    if record.get("last_day_of_month"):
        return LastDayAnchor()
    try:
        day = int(record.get("day_of_month") or 0)
    except (TypeError, ValueError):
        day = 0
    if day >= 1:
        return DayOfMonthAnchor(day=min(day, 31))
    return DayOfMonthAnchor(day=1)
