"""Shared helpers for CLI commands: wiring and text rendering."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from datetime import date

from receiptscope.domain.chart import NoData, ScaledPoint, format_amount
from receiptscope.domain.receipt import Receipt
from receiptscope.domain.session import SessionMachine
from receiptscope.runtime import FileTokenStore, get_logger, load_settings
from receiptscope.runtime.api_client import ReceiptsApi

logger = get_logger(__name__)

BAR_CHAR = "#"
# A bar at full chart height spans this many terminal columns.
BAR_COLUMNS = 40


def open_api() -> ReceiptsApi:
    """Build an API client from config.toml and the environment."""
    return ReceiptsApi(load_settings())


def start_machine() -> SessionMachine:
    return SessionMachine.start(FileTokenStore())


def parse_iso_date(value: str) -> date:
    """argparse type for YYYY-MM-DD."""
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Invalid date {value!r}; expected YYYY-MM-DD") from e


def render_bars(title: str, points: list[ScaledPoint] | NoData, ceiling: int) -> list[str]:
    """Horizontal bars for a trend scaled to `ceiling`."""
    lines = [title]
    if isinstance(points, NoData):
        lines.append("  (no data)")
        return lines
    width = max(len(p.label) for p in points)
    for p in points:
        bar = BAR_CHAR * int(p.value * BAR_COLUMNS / ceiling)
        lines.append(f"  {p.label:<{width}}  {bar} ${format_amount(p.amount)}")
    return lines


def render_shares(title: str, points: list[ScaledPoint] | NoData) -> list[str]:
    """Category lines with percentage shares."""
    lines = [title]
    if isinstance(points, NoData):
        lines.append("  (no data)")
        return lines
    width = max(len(p.label) for p in points)
    for p in points:
        lines.append(f"  {p.label:<{width}}  ${format_amount(p.amount):>12}  {format_amount(p.value):>6}%")
    return lines


def render_receipts(receipts: Sequence[Receipt]) -> list[str]:
    if not receipts:
        return ["  (no receipts)"]
    lines = []
    for r in receipts:
        when = r.purchase_date.isoformat() if r.purchase_date else "????-??-??"
        category = r.category_name or "Uncategorized"
        lines.append(f"  {when}  {r.store_name:<24.24}  ${format_amount(r.amount):>10}  [{category}]")
    return lines


def print_lines(lines: Sequence[str]) -> None:
    for line in lines:
        print(line)
