"""Data models for receipts and service-side aggregates.

Payload parsing is lenient: the service owns these records, and a malformed
field must never stop the client from displaying the rest.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any

CategoryId = int | str

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def parse_amount(value: Any) -> Decimal | None:
    """Parse a monetary value from JSON (number or decimal string)."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, float):
        # Go through repr so 12.3 stays 12.3 rather than its binary expansion.
        value = repr(value)
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    return amount if amount.is_finite() else None


def parse_date(value: Any) -> date | None:
    """Parse an ISO date (YYYY-MM-DD); timestamps keep only their date part."""
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def month_name(month: int) -> str:
    if 1 <= month <= 12:
        return MONTH_NAMES[month - 1]
    return "Unknown"


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _int_or_zero(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return 0


@dataclass(frozen=True)
class Category:
    """A spending bucket observed on at least one receipt."""

    id: CategoryId
    name: str


@dataclass(frozen=True)
class Receipt:
    """A single purchase as reported by the receipts service."""

    receipt_id: int | str | None
    store_name: str
    purchase_date: date | None
    amount: Decimal
    category_id: CategoryId | None = None
    category_name: str | None = None
    created_at: str | None = None
    image_key: str | None = None
    image_url: str | None = None

    @property
    def is_categorized(self) -> bool:
        return self.category_id is not None and self.category_name is not None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> Receipt:
        amount = parse_amount(payload.get("amount"))
        category_id = payload.get("categoryId")
        if isinstance(category_id, bool) or category_id == "":
            category_id = None
        return cls(
            receipt_id=payload.get("receiptId"),
            store_name=str(payload.get("storeName") or ""),
            purchase_date=parse_date(payload.get("purchaseDate")),
            amount=amount if amount is not None else Decimal("0"),
            category_id=category_id,
            category_name=_optional_text(payload.get("categoryName")),
            created_at=_optional_text(payload.get("createdAt")),
            image_key=_optional_text(payload.get("imageKey")),
            image_url=_optional_text(payload.get("imageUrl")),
        )


@dataclass(frozen=True)
class MonthlyAggregate:
    """Total spend for one calendar month."""

    year: int
    month: int
    month_name: str
    total_amount: Decimal

    @property
    def label(self) -> str:
        return f"{self.month_name} {self.year}"

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> MonthlyAggregate:
        month = _int_or_zero(payload.get("month"))
        total = parse_amount(payload.get("totalAmount"))
        return cls(
            year=_int_or_zero(payload.get("year")),
            month=month,
            month_name=_optional_text(payload.get("monthName")) or month_name(month),
            total_amount=total if total is not None else Decimal("0"),
        )


@dataclass(frozen=True)
class CategoryAggregate:
    """Total spend for one category within a period."""

    category_id: CategoryId | None
    category_name: str
    total_amount: Decimal
    receipt_count: int = 0

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> CategoryAggregate:
        total = parse_amount(payload.get("totalAmount"))
        return cls(
            category_id=payload.get("categoryId"),
            category_name=_optional_text(payload.get("categoryName")) or "Uncategorized",
            total_amount=total if total is not None else Decimal("0"),
            receipt_count=_int_or_zero(payload.get("receiptCount")),
        )
