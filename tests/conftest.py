"""Shared pytest fixtures and fakes for receiptscope tests."""

from __future__ import annotations

import asyncio
from collections.abc import Iterator
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any

import pytest
from _pytest.monkeypatch import MonkeyPatch
from receiptscope.domain.normalize import normalize_receipts
from receiptscope.domain.receipt import CategoryAggregate, MonthlyAggregate, Receipt
from receiptscope.domain.session import Session
from receiptscope.runtime.api_client import TransportFailure
from receiptscope.runtime.paths import reset_paths

RECEIPT_PAYLOADS: list[dict[str, Any]] = [
    {
        "receiptId": 1,
        "storeName": "Loblaws",
        "purchaseDate": "2025-01-04",
        "categoryId": 1,
        "categoryName": "Groceries",
        "amount": "54.20",
    },
    {
        "receiptId": 2,
        "storeName": "Shell",
        "purchaseDate": "2025-01-09",
        "categoryId": 2,
        "categoryName": "Gas",
        "amount": 40,
    },
    {
        "receiptId": 3,
        "storeName": "Corner Store",
        "purchaseDate": "2025-02-01",
        "categoryId": None,
        "categoryName": None,
        "amount": "3.50",
    },
    {
        "receiptId": 4,
        "storeName": "No Frills",
        "purchaseDate": "2025-02-11",
        "categoryId": 1,
        "categoryName": "Groceries",
        "amount": "61.05",
    },
]


def sample_receipts() -> list[Receipt]:
    return normalize_receipts(RECEIPT_PAYLOADS)


def sample_monthly() -> list[MonthlyAggregate]:
    return [
        MonthlyAggregate(2025, 1, "January", Decimal("94.20")),
        MonthlyAggregate(2025, 2, "February", Decimal("64.55")),
    ]


def sample_current_month() -> list[CategoryAggregate]:
    return [
        CategoryAggregate(1, "Groceries", Decimal("61.05"), 1),
        CategoryAggregate(None, "Uncategorized", Decimal("3.50"), 1),
    ]


class FakeReceiptsApi:
    """In-memory stand-in for ReceiptsApi.

    - `fail`: query names that raise TransportFailure
    - `delays`: per-query sleep in seconds, to shuffle arrival order
    - `hold_next_receipts`: an Event the next all_receipts() call waits on
    """

    def __init__(
        self,
        *,
        fail: set[str] | None = None,
        delays: dict[str, float] | None = None,
    ) -> None:
        self.monthly = sample_monthly()
        self.current = sample_current_month()
        self.total: Decimal | None = Decimal("158.75")
        self.receipts = sample_receipts()
        self.periods: dict[tuple[date, date], list[CategoryAggregate]] = {}
        self.fail = set(fail or ())
        self.delays = dict(delays or {})
        self.hold_next_receipts: asyncio.Event | None = None
        self.receipts_started: asyncio.Event | None = None
        self.calls: list[str] = []
        self.sessions: list[Session] = []

    async def _answer(self, name: str, session: Session, value: Any) -> Any:
        self.calls.append(name)
        self.sessions.append(session)
        delay = self.delays.get(name)
        if delay:
            await asyncio.sleep(delay)
        if name in self.fail:
            raise TransportFailure(f"{name} is down")
        return value

    async def monthly_trend(self, session: Session) -> list[MonthlyAggregate]:
        return await self._answer("monthly_trend", session, list(self.monthly))

    async def current_month_by_category(self, session: Session) -> list[CategoryAggregate]:
        return await self._answer("current_month_by_category", session, list(self.current))

    async def total_spending(self, session: Session) -> Decimal | None:
        return await self._answer("total_spending", session, self.total)

    async def all_receipts(self, session: Session) -> list[Receipt]:
        value = list(self.receipts)
        gate, self.hold_next_receipts = self.hold_next_receipts, None
        if self.receipts_started is not None:
            self.receipts_started.set()
        if gate is not None:
            await gate.wait()
        return await self._answer("receipts", session, value)

    async def period_by_category(self, session: Session, start: date, end: date) -> list[CategoryAggregate]:
        return await self._answer("period", session, list(self.periods.get((start, end), [])))

    async def receipts_by_category(self, session: Session, category_id: int | str) -> list[Receipt]:
        value = [r for r in self.receipts if str(r.category_id) == str(category_id)]
        return await self._answer("receipts_by_category", session, value)

    async def receipts_by_date_range(self, session: Session, start: date, end: date) -> list[Receipt]:
        value = [r for r in self.receipts if r.purchase_date and start <= r.purchase_date <= end]
        return await self._answer("receipts_by_date_range", session, value)

    async def recent_receipts(self, session: Session) -> list[Receipt]:
        return await self._answer("recent_receipts", session, list(self.receipts[-2:]))


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: MonkeyPatch) -> Iterator[Path]:
    """Point the app home at a temp dir so no test touches ~/.receiptscope."""
    home = tmp_path / "home"
    monkeypatch.setenv("RECEIPTSCOPE_HOME", str(home))
    monkeypatch.delenv("RECEIPTSCOPE_API_URL", raising=False)
    monkeypatch.delenv("RECEIPTSCOPE_TIMEOUT", raising=False)
    reset_paths()
    yield home
    reset_paths()


@pytest.fixture
def fake_api() -> FakeReceiptsApi:
    return FakeReceiptsApi()


@pytest.fixture
def session() -> Session:
    return Session("test-token")
