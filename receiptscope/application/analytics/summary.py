"""Summary aggregation: four concurrent queries, settled and merged."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from datetime import date
from decimal import Decimal
from typing import Protocol, TypeVar

from receiptscope.domain.receipt import CategoryAggregate, MonthlyAggregate, Receipt
from receiptscope.domain.session import Session
from receiptscope.domain.view_model import (
    QUERY_CURRENT_MONTH,
    QUERY_MONTHLY_TREND,
    QUERY_RECEIPTS,
    QUERY_TOTAL,
    AnalyticsViewModel,
    QueryOutcome,
    merge_summary,
)
from receiptscope.runtime.api_client import ReceiptServiceError
from receiptscope.runtime.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class AnalyticsSource(Protocol):
    """The subset of ReceiptsApi the analytics workflows depend on."""

    async def monthly_trend(self, session: Session) -> list[MonthlyAggregate]: ...

    async def current_month_by_category(self, session: Session) -> list[CategoryAggregate]: ...

    async def total_spending(self, session: Session) -> Decimal | None: ...

    async def all_receipts(self, session: Session) -> list[Receipt]: ...

    async def period_by_category(self, session: Session, start: date, end: date) -> list[CategoryAggregate]: ...


async def settle(name: str, query: Awaitable[T]) -> QueryOutcome[T]:
    """Await one query, turning a service error into a failed outcome."""
    try:
        value = await query
    except ReceiptServiceError as e:
        logger.warning("Query %s failed (%s): %s", name, e.kind.value, e)
        return QueryOutcome.failure(f"{e.kind.value}: {e}")
    return QueryOutcome.success(value)


async def load_analytics(
    api: AnalyticsSource,
    session: Session,
    previous: AnalyticsViewModel | None = None,
) -> AnalyticsViewModel:
    """Run the four summary queries concurrently and merge what comes back.

    Never raises for service errors: check `status` on the result
    ("ok", "partial" or "failed") and `failures` for the reasons.
    """
    monthly, current, total, receipts = await asyncio.gather(
        settle(QUERY_MONTHLY_TREND, api.monthly_trend(session)),
        settle(QUERY_CURRENT_MONTH, api.current_month_by_category(session)),
        settle(QUERY_TOTAL, api.total_spending(session)),
        settle(QUERY_RECEIPTS, api.all_receipts(session)),
    )
    model = merge_summary(monthly, current, total, receipts, previous=previous)

    if model.is_failed:
        logger.error("All summary queries failed; receipts service looks unreachable")
    elif model.is_partial:
        logger.warning("Loaded partial analytics; missing: %s", ", ".join(sorted(model.failures)))
    else:
        logger.info(
            "Loaded analytics: %d receipts, %d categories, %d months",
            len(model.receipts),
            len(model.categories),
            len(model.monthly_trend),
        )
    return model
