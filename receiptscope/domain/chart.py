"""Pure helpers that turn monetary series into chart-ready magnitudes.

Amounts may arrive as Decimal, int or decimal strings. They are converted to
Decimal only where arithmetic happens, and nothing is rounded until
format_amount() is called for display.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Final

from receiptscope.domain.receipt import CategoryAggregate, MonthlyAggregate, parse_amount

DEFAULT_BAR_CEILING = 150
CENT = Decimal("0.01")


class NoData:
    """Marker returned when a series is empty; render an explicit "no data" state."""

    _instance: NoData | None = None

    def __new__(cls) -> NoData:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NO_DATA"

    def __bool__(self) -> bool:
        return False


NO_DATA: Final = NoData()


@dataclass(frozen=True)
class ScaledPoint:
    """One bar/slice: the raw amount and its scaled value."""

    label: str
    amount: Decimal
    value: Decimal


def to_decimal(value: Any) -> Decimal:
    """Convert an amount to Decimal; unparseable values count as zero."""
    amount = parse_amount(value)
    return amount if amount is not None else Decimal("0")


def format_amount(value: Any) -> str:
    """Display form of an amount, rounded half-up to cents: 1234.5 -> '1,234.50'."""
    return f"{to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP):,}"


def scale_trend(
    series: Sequence[tuple[str, Any]],
    ceiling: int | Decimal = DEFAULT_BAR_CEILING,
) -> list[ScaledPoint] | NoData:
    """Scale amounts so the largest bar is exactly `ceiling` tall.

    >>> [p.value for p in scale_trend([("a", 10), ("b", 20), ("c", 30)])]
    [Decimal('50'), Decimal('100'), Decimal('150')]
    """
    if not series:
        return NO_DATA

    points = [(label, to_decimal(amount)) for label, amount in series]
    peak = max(amount for _, amount in points)
    ceiling = Decimal(ceiling)

    if peak <= 0:
        return [ScaledPoint(label, amount, Decimal("0")) for label, amount in points]
    # Multiply before dividing so exact ratios stay exact.
    return [ScaledPoint(label, amount, amount * ceiling / peak) for label, amount in points]


def scale_shares(series: Sequence[tuple[str, Any]]) -> list[ScaledPoint] | NoData:
    """Percentage share of each amount in the series total."""
    if not series:
        return NO_DATA

    points = [(label, to_decimal(amount)) for label, amount in series]
    total = sum((amount for _, amount in points), Decimal("0"))

    if total == 0:
        return [ScaledPoint(label, amount, Decimal("0")) for label, amount in points]
    return [ScaledPoint(label, amount, amount * 100 / total) for label, amount in points]


def trend_series(months: Iterable[MonthlyAggregate]) -> list[tuple[str, Decimal]]:
    return [(m.label, m.total_amount) for m in months]


def category_series(aggregates: Iterable[CategoryAggregate]) -> list[tuple[str, Decimal]]:
    return [(a.category_name, a.total_amount) for a in aggregates]
