"""Money helpers: two-place Decimal arithmetic and display."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Union


ZERO = Decimal("0.00")
CENT = Decimal("0.01")
HUNDRED = Decimal("100")

Number = Union[Decimal, int, float, str]


def to_money(value: Optional[Number]) -> Decimal:
    """Quantize to cents; None becomes zero."""
    if value is None:
        return ZERO
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def total(amounts: Iterable[Optional[Number]]) -> Decimal:
    return to_money(sum((to_money(a) for a in amounts), ZERO))


def percentage(part: Decimal, whole: Decimal, cap: Decimal = HUNDRED) -> Decimal:
    """part / whole * 100 capped at `cap`; zero when whole is not positive."""
    if whole <= 0:
        return ZERO
    return to_money(min(cap, part / whole * HUNDRED))


def format_amount(amount: Number, symbol: str = "$") -> str:
    """Format as a currency string, e.g. '$1,234.56' or '-$12.00'."""
    value = to_money(amount)
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"
