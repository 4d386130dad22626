"""Tests for trend and share scaling."""

from __future__ import annotations

from decimal import Decimal

from receiptscope.domain.chart import (
    NO_DATA,
    NoData,
    category_series,
    format_amount,
    scale_shares,
    scale_trend,
    trend_series,
)
from receiptscope.domain.receipt import CategoryAggregate, MonthlyAggregate


def _values(points: object) -> list[Decimal]:
    assert not isinstance(points, NoData)
    return [p.value for p in points]  # type: ignore[attr-defined]


def test_trend_scales_to_ceiling() -> None:
    points = scale_trend([("Jan", 10), ("Feb", 20), ("Mar", 30)], ceiling=150)

    assert _values(points) == [50, 100, 150]


def test_trend_accepts_decimal_strings() -> None:
    points = scale_trend([("Jan", "12.50"), ("Feb", "25.00")], ceiling=100)

    assert _values(points) == [Decimal("50"), Decimal("100")]


def test_trend_all_zero_is_zero_not_error() -> None:
    assert _values(scale_trend([("a", 0), ("b", 0), ("c", 0)], ceiling=150)) == [0, 0, 0]


def test_trend_empty_is_no_data() -> None:
    assert scale_trend([]) is NO_DATA
    assert not scale_trend([])


def test_shares_sum_to_hundred() -> None:
    points = scale_shares([("A", 30), ("B", 70)])

    assert _values(points) == [30.0, 70.0]
    assert abs(sum(_values(points)) - 100) < Decimal("0.0001")


def test_shares_with_zero_total_are_zero() -> None:
    assert _values(scale_shares([("A", 0), ("B", "0.00")])) == [0, 0]


def test_shares_empty_is_no_data() -> None:
    assert scale_shares([]) is NO_DATA


def test_scaling_is_deterministic() -> None:
    series = [("a", "1.10"), ("b", "2.20"), ("c", "3.30")]

    assert scale_trend(series) == scale_trend(series)
    assert scale_shares(series) == scale_shares(series)


def test_no_rounding_before_display() -> None:
    points = scale_shares([("a", 1), ("b", 2)])

    first = _values(points)[0]
    assert first != Decimal("33.33")
    assert format_amount(first) == "33.33"


def test_format_amount_rounds_half_up_to_cents() -> None:
    assert format_amount("2.005") == "2.01"
    assert format_amount(1234.5) == "1,234.50"
    assert format_amount("junk") == "0.00"


def test_series_builders() -> None:
    months = [MonthlyAggregate(2025, 1, "January", Decimal("10"))]
    cats = [CategoryAggregate(1, "Groceries", Decimal("5"), 2)]

    assert trend_series(months) == [("January 2025", Decimal("10"))]
    assert category_series(cats) == [("Groceries", Decimal("5"))]
