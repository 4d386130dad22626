"""On-demand category summary for a custom date range."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from receiptscope.application.analytics.summary import AnalyticsSource
from receiptscope.domain.receipt import CategoryAggregate
from receiptscope.domain.session import Session
from receiptscope.runtime.api_client import ReceiptServiceError
from receiptscope.runtime.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class PeriodResult:
    """Outcome of one period request.

    `stale` is decided when the response arrives: a newer request was
    started while this one was in flight, so its outcome must be dropped.
    """

    ticket: int
    start: date
    end: date
    aggregates: list[CategoryAggregate] = field(default_factory=list)
    error: str | None = None
    stale: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


class PeriodQuery:
    """Issues period queries with last-request-wins semantics.

    The range is forwarded exactly as given; validating start <= end is the
    caller's job and rejecting it is the service's.
    """

    def __init__(self) -> None:
        self._latest_ticket = 0

    @property
    def latest_ticket(self) -> int:
        return self._latest_ticket

    async def load(self, api: AnalyticsSource, session: Session, start: date, end: date) -> PeriodResult:
        self._latest_ticket += 1
        ticket = self._latest_ticket
        logger.debug("Period request #%d: %s..%s", ticket, start, end)

        try:
            aggregates = await api.period_by_category(session, start, end)
        except ReceiptServiceError as e:
            stale = ticket != self._latest_ticket
            if not stale:
                logger.warning("Period query %s..%s failed: %s", start, end, e)
            return PeriodResult(ticket, start, end, error=f"{e.kind.value}: {e}", stale=stale)

        stale = ticket != self._latest_ticket
        if stale:
            logger.debug("Dropping stale period result #%d (%s..%s)", ticket, start, end)
        return PeriodResult(ticket, start, end, aggregates=aggregates, stale=stale)
