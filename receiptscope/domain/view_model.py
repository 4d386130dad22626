"""Display-ready analytics state and the pure merge that builds it.

AnalyticsViewModel is frozen. Every method that changes receipts or the
category selection recomputes filtered_receipts in the same call, so a
consumer can never observe the two out of step.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from typing import Any, Generic, Literal, TypeVar

from receiptscope.domain.filtering import ALL_CATEGORIES, filter_receipts, is_all_selector
from receiptscope.domain.normalize import derive_categories
from receiptscope.domain.receipt import Category, CategoryAggregate, MonthlyAggregate, Receipt

T = TypeVar("T")

AggregateStatus = Literal["ok", "partial", "failed"]

QUERY_MONTHLY_TREND = "monthly_trend"
QUERY_CURRENT_MONTH = "current_month_by_category"
QUERY_TOTAL = "total_spending"
QUERY_RECEIPTS = "receipts"
SUMMARY_QUERIES = (QUERY_MONTHLY_TREND, QUERY_CURRENT_MONTH, QUERY_TOTAL, QUERY_RECEIPTS)


@dataclass(frozen=True)
class QueryOutcome(Generic[T]):
    """Settled result of one query: a value, or the reason it is missing."""

    value: T | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> QueryOutcome[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, reason: str) -> QueryOutcome[T]:
        return cls(error=reason or "unknown error")


@dataclass(frozen=True)
class AnalyticsViewModel:
    total_spending: Decimal = Decimal("0")
    receipts: tuple[Receipt, ...] = ()
    categories: tuple[Category, ...] = ()
    monthly_trend: tuple[MonthlyAggregate, ...] = ()
    current_month_by_category: tuple[CategoryAggregate, ...] = ()
    custom_period: tuple[CategoryAggregate, ...] | None = None
    custom_period_range: tuple[date, date] | None = None
    custom_period_error: str | None = None
    selected_category: Any = ALL_CATEGORIES
    filtered_receipts: tuple[Receipt, ...] = ()
    status: AggregateStatus = "ok"
    failures: dict[str, str] = field(default_factory=dict)

    @property
    def is_partial(self) -> bool:
        return self.status == "partial"

    @property
    def is_failed(self) -> bool:
        return self.status == "failed"

    def with_selection(self, selector: Any) -> AnalyticsViewModel:
        """Return a copy with a new category selection and matching filtered receipts."""
        selected = ALL_CATEGORIES if is_all_selector(selector) else selector
        return replace(
            self,
            selected_category=selected,
            filtered_receipts=tuple(filter_receipts(self.receipts, selected)),
        )

    def with_receipts(self, receipts: tuple[Receipt, ...] | list[Receipt]) -> AnalyticsViewModel:
        """Return a copy with new receipts and their derived categories/filter."""
        receipts = tuple(receipts)
        return replace(
            self,
            receipts=receipts,
            categories=tuple(derive_categories(receipts)),
            filtered_receipts=tuple(filter_receipts(receipts, self.selected_category)),
        )

    def with_custom_period(
        self,
        start: date,
        end: date,
        aggregates: list[CategoryAggregate] | tuple[CategoryAggregate, ...],
    ) -> AnalyticsViewModel:
        return replace(
            self,
            custom_period=tuple(aggregates),
            custom_period_range=(start, end),
            custom_period_error=None,
        )

    def with_custom_period_error(self, reason: str) -> AnalyticsViewModel:
        """Record a failed period query; existing data stays in place."""
        return replace(self, custom_period_error=reason)


def aggregate_status(outcomes: list[QueryOutcome[Any]]) -> AggregateStatus:
    failed = sum(1 for outcome in outcomes if not outcome.ok)
    if failed == 0:
        return "ok"
    if failed == len(outcomes):
        return "failed"
    return "partial"


def merge_summary(
    monthly_trend: QueryOutcome[list[MonthlyAggregate]],
    current_month: QueryOutcome[list[CategoryAggregate]],
    total_spending: QueryOutcome[Decimal | None],
    receipts: QueryOutcome[list[Receipt]],
    *,
    previous: AnalyticsViewModel | None = None,
) -> AnalyticsViewModel:
    """Combine the four summary outcomes into one view-model.

    Each outcome is adopted on its own: a failed query leaves its field at the
    empty/zero default and is listed in `failures`. Selection and custom
    period state are carried over from `previous` when given.
    """
    outcomes: dict[str, QueryOutcome[Any]] = {
        QUERY_MONTHLY_TREND: monthly_trend,
        QUERY_CURRENT_MONTH: current_month,
        QUERY_TOTAL: total_spending,
        QUERY_RECEIPTS: receipts,
    }
    failures = {name: outcome.error for name, outcome in outcomes.items() if outcome.error is not None}

    total = total_spending.value if total_spending.ok else None
    model = AnalyticsViewModel(
        total_spending=total if isinstance(total, Decimal) else Decimal("0"),
        monthly_trend=tuple(monthly_trend.value or ()) if monthly_trend.ok else (),
        current_month_by_category=tuple(current_month.value or ()) if current_month.ok else (),
        status=aggregate_status(list(outcomes.values())),
        failures=failures,
    )
    model = model.with_receipts(tuple(receipts.value or ()) if receipts.ok else ())
    if previous is not None:
        model = carry_view_state(model, previous)
    return model


def carry_view_state(model: AnalyticsViewModel, previous: AnalyticsViewModel) -> AnalyticsViewModel:
    """Keep the user's category selection and custom period across a reload."""
    model = replace(
        model,
        custom_period=previous.custom_period,
        custom_period_range=previous.custom_period_range,
        custom_period_error=previous.custom_period_error,
    )
    return model.with_selection(previous.selected_category)
