"""Core domain models and pure analytics logic.

This package has no I/O:
- Receipt, Category, MonthlyAggregate, CategoryAggregate: service data
- normalize_receipts, derive_categories: record normalization
- filter_receipts, canonical_category_id: category filtering
- scale_trend, scale_shares: chart scaling
- AnalyticsViewModel, QueryOutcome, merge_summary: view-model construction
- SessionMachine, Session: screen state machine

Usage:
    from receiptscope.domain import AnalyticsViewModel, filter_receipts
"""

from receiptscope.domain.chart import (
    NO_DATA,
    NoData,
    ScaledPoint,
    category_series,
    format_amount,
    scale_shares,
    scale_trend,
    trend_series,
)
from receiptscope.domain.filtering import ALL_CATEGORIES, canonical_category_id, filter_receipts
from receiptscope.domain.normalize import derive_categories, normalize_receipts
from receiptscope.domain.receipt import Category, CategoryAggregate, MonthlyAggregate, Receipt
from receiptscope.domain.session import (
    InvalidTransition,
    LoggedIn,
    LoggedOut,
    Screen,
    Session,
    SessionMachine,
)
from receiptscope.domain.view_model import AnalyticsViewModel, QueryOutcome, merge_summary

__all__ = [
    # Records
    "Receipt",
    "Category",
    "MonthlyAggregate",
    "CategoryAggregate",
    "normalize_receipts",
    "derive_categories",
    # Filtering
    "ALL_CATEGORIES",
    "canonical_category_id",
    "filter_receipts",
    # Charts
    "NO_DATA",
    "NoData",
    "ScaledPoint",
    "scale_trend",
    "scale_shares",
    "trend_series",
    "category_series",
    "format_amount",
    # View-model
    "AnalyticsViewModel",
    "QueryOutcome",
    "merge_summary",
    # Session
    "Session",
    "SessionMachine",
    "Screen",
    "LoggedIn",
    "LoggedOut",
    "InvalidTransition",
]
