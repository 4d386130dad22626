"""Authentication workflow orchestration.

Each workflow calls the auth endpoint, feeds the outcome into the
SessionMachine and reports a typed result for the presentation layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Protocol

from receiptscope.domain.session import Screen, SessionMachine, ViewState
from receiptscope.runtime.api_client import (
    AuthRejected,
    MalformedResponse,
    ReceiptServiceError,
    SignupConflict,
    ValidationFailure,
)
from receiptscope.runtime.logging import get_logger

logger = get_logger(__name__)

AuthStatus = Literal["ok", "rejected", "conflict", "unavailable"]


class AuthService(Protocol):
    async def login(self, email: str, password: str) -> str: ...

    async def signup(self, username: str, email: str, password: str) -> None: ...

    async def verify(self, email: str, code: str) -> None: ...

    async def resend_verification(self, email: str) -> None: ...


@dataclass(frozen=True)
class AuthResult:
    """Outcome from an auth workflow."""

    status: AuthStatus
    state: ViewState
    message: str | None = None


def _failure(machine: SessionMachine, e: ReceiptServiceError, fallback: str) -> AuthResult:
    if isinstance(e, (ValidationFailure, AuthRejected)):
        return AuthResult(status="rejected", state=machine.state, message=str(e) or fallback)
    if isinstance(e, MalformedResponse):
        logger.error("Unexpected auth response: %s", e)
    return AuthResult(status="unavailable", state=machine.state, message=str(e) or fallback)


async def run_login(api: AuthService, machine: SessionMachine, email: str, password: str) -> AuthResult:
    """Log in and enter the dashboard."""
    if machine.screen != Screen.LOGIN:
        machine.show_login()
    try:
        token = await api.login(email, password)
    except ReceiptServiceError as e:
        return _failure(machine, e, "Login failed")
    logger.info("Logged in as %s", email)
    return AuthResult(status="ok", state=machine.login_succeeded(token))


async def run_signup(
    api: AuthService,
    machine: SessionMachine,
    username: str,
    email: str,
    password: str,
) -> AuthResult:
    """Create an account; on success the machine waits for the emailed code."""
    if machine.screen != Screen.SIGNUP:
        machine.show_signup()
    try:
        await api.signup(username, email, password)
    except SignupConflict as e:
        logger.info("Signup conflict for %s; offering resend", email)
        return AuthResult(status="conflict", state=machine.signup_conflict(email), message=str(e))
    except ReceiptServiceError as e:
        return _failure(machine, e, "Signup failed")
    return AuthResult(status="ok", state=machine.signup_succeeded(email))


async def run_verify(api: AuthService, machine: SessionMachine, email: str, code: str) -> AuthResult:
    """Submit a verification code; on success the user can log in."""
    state = machine.state
    if state.screen != Screen.VERIFICATION or getattr(state, "email", None) != email:
        machine.resume_verification(email)
    try:
        await api.verify(email, code)
    except ReceiptServiceError as e:
        return _failure(machine, e, "Verification failed")
    logger.info("Verified %s", email)
    return AuthResult(status="ok", state=machine.verification_succeeded())


async def run_resend(api: AuthService, machine: SessionMachine, email: str) -> AuthResult:
    """Send a fresh verification code and move to the verification screen."""
    state = machine.state
    if not getattr(state, "resend_available", False) and state.screen != Screen.VERIFICATION:
        machine.resume_verification(email)
    try:
        await api.resend_verification(email)
    except ReceiptServiceError as e:
        return _failure(machine, e, "Failed to resend verification code")
    return AuthResult(status="ok", state=machine.resend_succeeded())
