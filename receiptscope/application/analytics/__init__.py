"""Analytics workflows."""

from receiptscope.application.analytics.controller import AnalyticsController
from receiptscope.application.analytics.period import PeriodQuery, PeriodResult
from receiptscope.application.analytics.summary import load_analytics, settle

__all__ = [
    "AnalyticsController",
    "PeriodQuery",
    "PeriodResult",
    "load_analytics",
    "settle",
]
