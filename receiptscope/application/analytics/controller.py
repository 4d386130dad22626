"""Analytics controller: the object the presentation layer talks to."""

from __future__ import annotations

from datetime import date
from typing import Any, Protocol

from receiptscope.application.analytics.period import PeriodQuery, PeriodResult
from receiptscope.application.analytics.summary import AnalyticsSource, load_analytics
from receiptscope.domain.filtering import canonical_category_id, is_all_selector
from receiptscope.domain.receipt import Receipt
from receiptscope.domain.session import Session
from receiptscope.domain.view_model import AnalyticsViewModel, carry_view_state
from receiptscope.runtime.logging import get_logger

logger = get_logger(__name__)


class ReceiptListSource(AnalyticsSource, Protocol):
    async def receipts_by_category(self, session: Session, category_id: int | str) -> list[Receipt]: ...

    async def receipts_by_date_range(self, session: Session, start: date, end: date) -> list[Receipt]: ...

    async def recent_receipts(self, session: Session) -> list[Receipt]: ...


class AnalyticsController:
    """Holds the current AnalyticsViewModel and applies user actions to it.

    All mutation happens on the event loop's single thread. Each action
    swaps `view_model` for a new, fully consistent value.
    """

    def __init__(self, api: ReceiptListSource, session: Session) -> None:
        self._api = api
        self.session = session
        self.view_model = AnalyticsViewModel()
        self._generation = 0
        self._period = PeriodQuery()

    async def reload(self) -> AnalyticsViewModel:
        """Fetch the standing summaries again.

        If another reload starts before this one finishes, this one's result
        is dropped. Category selection and custom period survive.
        """
        self._generation += 1
        generation = self._generation

        fresh = await load_analytics(self._api, self.session)
        if generation != self._generation:
            logger.debug("Dropping stale reload #%d (latest is #%d)", generation, self._generation)
            return self.view_model

        self.view_model = carry_view_state(fresh, self.view_model)
        return self.view_model

    def select_category(self, selector: Any) -> AnalyticsViewModel:
        """Select a category id (number or text) or "all"."""
        self.view_model = self.view_model.with_selection(selector)
        logger.debug(
            "Selected category %r: %d of %d receipts",
            self.view_model.selected_category,
            len(self.view_model.filtered_receipts),
            len(self.view_model.receipts),
        )
        return self.view_model

    async def request_custom_period(self, start: date, end: date) -> PeriodResult:
        """Load a category summary for start..end next to the standing data."""
        result = await self._period.load(self._api, self.session, start, end)
        if result.stale:
            return result
        if result.ok:
            self.view_model = self.view_model.with_custom_period(result.start, result.end, result.aggregates)
        else:
            assert result.error is not None
            self.view_model = self.view_model.with_custom_period_error(result.error)
        return result

    async def receipts_for(
        self,
        category: Any = None,
        start: date | None = None,
        end: date | None = None,
        recent: bool = False,
    ) -> list[Receipt]:
        """Drill-down receipt lists; these do not change the view-model.

        At most one of category, date range or recent may be given; with
        none, every receipt is listed.

        Raises:
            ValueError: On combined drill-downs, an incomplete date range or a
                category that cannot be used as an id.
            ReceiptServiceError: When the service call fails.
        """
        by_range = start is not None or end is not None
        by_category = not is_all_selector(category)
        if sum((recent, by_range, by_category)) > 1:
            raise ValueError("Choose one of category, date range or recent")
        if recent:
            return await self._api.recent_receipts(self.session)
        if by_range:
            if start is None or end is None:
                raise ValueError("Both start and end dates are required for a date range")
            return await self._api.receipts_by_date_range(self.session, start, end)
        if by_category:
            category_id = canonical_category_id(category)
            if category_id is None:
                raise ValueError(f"Not a category id: {category!r}")
            return await self._api.receipts_by_category(self.session, category_id)
        return await self._api.all_receipts(self.session)
