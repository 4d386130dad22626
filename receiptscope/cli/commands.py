"""Command handlers used by the unified CLI. Each returns an exit code."""

from __future__ import annotations

import argparse
import asyncio
import getpass
from decimal import Decimal

from receiptscope.application.analytics import AnalyticsController
from receiptscope.application.auth import AuthResult, run_login, run_resend, run_signup, run_verify
from receiptscope.cli.common import (
    open_api,
    print_lines,
    render_bars,
    render_receipts,
    render_shares,
    start_machine,
)
from receiptscope.domain.chart import category_series, format_amount, scale_shares, scale_trend, trend_series
from receiptscope.domain.receipt import Receipt
from receiptscope.domain.session import LoggedOut, SessionMachine
from receiptscope.domain.view_model import AnalyticsViewModel
from receiptscope.runtime import get_logger, load_settings
from receiptscope.runtime.api_client import ReceiptServiceError

logger = get_logger(__name__)


def _report_auth(result: AuthResult, success: str) -> int:
    if result.status == "ok":
        print(success)
        return 0
    if result.status == "conflict":
        print(result.message)
        print("Would you like to resend verification? Run: receiptscope resend <email>")
        return 1
    if result.status == "unavailable":
        print(f"Receipts service unavailable: {result.message}")
        return 1
    print(f"Error: {result.message}")
    return 1


def _require_login(machine: SessionMachine) -> bool:
    if machine.session.authenticated:
        return True
    print("Not logged in. Run: receiptscope login <email>")
    return False


def _require_logged_out(machine: SessionMachine) -> bool:
    if isinstance(machine.state, LoggedOut):
        return True
    print("Already logged in. Run: receiptscope logout first.")
    return False


# --- auth commands ---


def cmd_login(args: argparse.Namespace) -> int:
    machine = start_machine()
    if not _require_logged_out(machine):
        return 1
    password = args.password or getpass.getpass("Password: ")

    async def _run() -> AuthResult:
        async with open_api() as api:
            return await run_login(api, machine, args.email, password)

    return _report_auth(asyncio.run(_run()), "Login successful!")


def cmd_signup(args: argparse.Namespace) -> int:
    machine = start_machine()
    if not _require_logged_out(machine):
        return 1
    password = args.password or getpass.getpass("Password: ")

    async def _run() -> AuthResult:
        async with open_api() as api:
            return await run_signup(api, machine, args.username, args.email, password)

    return _report_auth(
        asyncio.run(_run()),
        f"We sent a verification code to: {args.email}\nRun: receiptscope verify {args.email} <code>",
    )


def cmd_verify(args: argparse.Namespace) -> int:
    machine = start_machine()
    if not _require_logged_out(machine):
        return 1

    async def _run() -> AuthResult:
        async with open_api() as api:
            return await run_verify(api, machine, args.email, args.code)

    return _report_auth(asyncio.run(_run()), "Email verified successfully! You can now login.")


def cmd_resend(args: argparse.Namespace) -> int:
    machine = start_machine()
    if not _require_logged_out(machine):
        return 1

    async def _run() -> AuthResult:
        async with open_api() as api:
            return await run_resend(api, machine, args.email)

    return _report_auth(asyncio.run(_run()), "Verification code sent! Check your email.")


def cmd_logout(args: argparse.Namespace) -> int:
    machine = start_machine()
    if not machine.session.authenticated:
        print("Not logged in.")
        return 0
    machine.logout()
    print("Logged out.")
    return 0


def cmd_status(args: argparse.Namespace) -> int:
    machine = start_machine()
    state = "logged in" if machine.session.authenticated else "logged out"
    print(f"Session: {state} (screen: {machine.screen.value})")
    return 0


# --- analytics commands ---


def _print_warnings(model: AnalyticsViewModel) -> None:
    if model.is_partial:
        print("Warning: some data could not be loaded:")
        for name, reason in sorted(model.failures.items()):
            print(f"  - {name}: {reason}")


def _print_failure(model: AnalyticsViewModel) -> None:
    print("Could not load any analytics; the receipts service looks unreachable.")
    for name, reason in sorted(model.failures.items()):
        print(f"  - {name}: {reason}")


def cmd_dashboard(args: argparse.Namespace) -> int:
    """Totals, monthly trend and this month's categories."""
    machine = start_machine()
    if not _require_login(machine):
        return 1
    ceiling = load_settings().bar_ceiling

    async def _run() -> AnalyticsViewModel:
        async with open_api() as api:
            return await AnalyticsController(api, machine.session).reload()

    model = asyncio.run(_run())
    if model.is_failed:
        _print_failure(model)
        return 1

    _print_warnings(model)
    print(f"Total spending: ${format_amount(model.total_spending)}")
    print()
    print_lines(render_bars("Monthly spending", scale_trend(trend_series(model.monthly_trend), ceiling), ceiling))
    print()
    print_lines(render_shares("This month by category", scale_shares(category_series(model.current_month_by_category))))
    return 0


def cmd_analytics(args: argparse.Namespace) -> int:
    """Receipts and categories, optionally filtered to one category."""
    machine = start_machine()
    if not _require_login(machine):
        return 1
    machine.show_analytics()

    async def _run() -> AnalyticsViewModel:
        async with open_api() as api:
            controller = AnalyticsController(api, machine.session)
            await controller.reload()
            return controller.select_category(args.category)

    model = asyncio.run(_run())
    if model.is_failed:
        _print_failure(model)
        return 1

    _print_warnings(model)
    print("Categories:")
    if not model.categories:
        print("  (none)")
    for category in model.categories:
        print(f"  {category.id}: {category.name}")
    print()
    print(f"Receipts ({model.selected_category}): {len(model.filtered_receipts)} of {len(model.receipts)}")
    print_lines(render_receipts(model.filtered_receipts))
    return 0


def cmd_period(args: argparse.Namespace) -> int:
    """Category breakdown for a custom date range."""
    if args.start > args.end:
        print(f"Start date {args.start} is after end date {args.end}.")
        return 1
    machine = start_machine()
    if not _require_login(machine):
        return 1
    machine.show_analytics()

    async def _run() -> AnalyticsViewModel:
        async with open_api() as api:
            controller = AnalyticsController(api, machine.session)
            await controller.request_custom_period(args.start, args.end)
            return controller.view_model

    model = asyncio.run(_run())
    if model.custom_period_error is not None:
        print(f"Could not load period {args.start}..{args.end}: {model.custom_period_error}")
        return 1

    period = model.custom_period or ()
    total = sum((a.total_amount for a in period), Decimal("0"))
    print(f"Spending {args.start} to {args.end}: ${format_amount(total)}")
    print_lines(render_shares("By category", scale_shares(category_series(period))))
    return 0


def cmd_receipts(args: argparse.Namespace) -> int:
    """List receipts: all, by category, by date range, or most recent."""
    machine = start_machine()
    if not _require_login(machine):
        return 1
    machine.show_analytics()

    async def _run() -> list[Receipt]:
        async with open_api() as api:
            controller = AnalyticsController(api, machine.session)
            return await controller.receipts_for(
                category=args.category,
                start=args.start,
                end=args.end,
                recent=args.recent,
            )

    try:
        receipts = asyncio.run(_run())
    except ValueError as e:
        print(f"Error: {e}")
        return 1
    except ReceiptServiceError as e:
        logger.error("Receipt query failed: %s", e)
        print(f"Could not load receipts: {e}")
        return 1

    print(f"Receipts: {len(receipts)}")
    print_lines(render_receipts(receipts))
    return 0
