#!/usr/bin/env python3

import argparse
import logging
from collections.abc import Callable, Sequence

from receiptscope.cli.common import parse_iso_date
from receiptscope.runtime import set_log_level


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="receiptscope",
        description="Personal spending analytics from your receipts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  login <email>              Log in and remember the session
  signup <username> <email>  Create an account (a code is emailed)
  verify <email> <code>      Verify your email address
  resend <email>             Send a new verification code
  logout                     Forget the stored session
  status                     Show session state
  dashboard                  Total, monthly trend, this month by category
  analytics [--category ID]  Categories and receipts, optionally filtered
  period <start> <end>       Spending by category for a date range
  receipts [...]             List receipts by category, date range or recency

Settings are read from ~/.receiptscope/config.toml (override the directory
with RECEIPTSCOPE_HOME, the service URL with RECEIPTSCOPE_API_URL).
""",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    login_parser = subparsers.add_parser("login", help="Log in")
    login_parser.add_argument("email")
    login_parser.add_argument("--password", help="Password (prompted if omitted)")

    signup_parser = subparsers.add_parser("signup", help="Create an account")
    signup_parser.add_argument("username")
    signup_parser.add_argument("email")
    signup_parser.add_argument("--password", help="Password (prompted if omitted)")

    verify_parser = subparsers.add_parser("verify", help="Verify email address")
    verify_parser.add_argument("email")
    verify_parser.add_argument("code", help="Verification code from the email")

    resend_parser = subparsers.add_parser("resend", help="Resend verification code")
    resend_parser.add_argument("email")

    subparsers.add_parser("logout", help="Log out")
    subparsers.add_parser("status", help="Show session state")
    subparsers.add_parser("dashboard", help="Show spending dashboard")

    analytics_parser = subparsers.add_parser("analytics", help="Show categories and receipts")
    analytics_parser.add_argument("--category", default="all", help='Category id or "all" (default: all)')

    period_parser = subparsers.add_parser("period", help="Spending by category for a date range")
    period_parser.add_argument("start", type=parse_iso_date, help="Start date (YYYY-MM-DD)")
    period_parser.add_argument("end", type=parse_iso_date, help="End date (YYYY-MM-DD)")

    receipts_parser = subparsers.add_parser("receipts", help="List receipts")
    receipts_group = receipts_parser.add_mutually_exclusive_group()
    receipts_group.add_argument("--category", default=None, help="Only receipts in this category id")
    receipts_group.add_argument("--recent", action="store_true", help="Most recent receipts")
    receipts_parser.add_argument("--from", dest="start", type=parse_iso_date, default=None, help="Start date")
    receipts_parser.add_argument("--to", dest="end", type=parse_iso_date, default=None, help="End date")

    return parser


def _handlers() -> dict[str, Callable[[argparse.Namespace], int]]:
    from receiptscope.cli import commands

    return {
        "login": commands.cmd_login,
        "signup": commands.cmd_signup,
        "verify": commands.cmd_verify,
        "resend": commands.cmd_resend,
        "logout": commands.cmd_logout,
        "status": commands.cmd_status,
        "dashboard": commands.cmd_dashboard,
        "analytics": commands.cmd_analytics,
        "period": commands.cmd_period,
        "receipts": commands.cmd_receipts,
    }


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    if args.verbose:
        set_log_level(logging.DEBUG)

    handler = _handlers().get(args.command)
    if handler is None:
        print(f"Unsupported command: {args.command}")
        return 1
    return handler(args)


if __name__ == "__main__":
    raise SystemExit(main())
