"""Tests for login, signup, verification and resend workflows."""

from __future__ import annotations

import asyncio

from receiptscope.application.auth import run_login, run_resend, run_signup, run_verify
from receiptscope.domain.session import LoggedIn, LoggedOut, Screen, SessionMachine
from receiptscope.runtime.api_client import (
    MalformedResponse,
    ReceiptServiceError,
    SignupConflict,
    TransportFailure,
    ValidationFailure,
)
from receiptscope.runtime.token_store import MemoryTokenStore


class FakeAuthApi:
    """Auth endpoints that either succeed or raise a configured error."""

    def __init__(self, error: ReceiptServiceError | None = None, token: str = "tok") -> None:
        self.error = error
        self.token = token
        self.calls: list[tuple[str, ...]] = []

    async def _maybe_fail(self) -> None:
        if self.error is not None:
            raise self.error

    async def login(self, email: str, password: str) -> str:
        self.calls.append(("login", email))
        await self._maybe_fail()
        return self.token

    async def signup(self, username: str, email: str, password: str) -> None:
        self.calls.append(("signup", username, email))
        await self._maybe_fail()

    async def verify(self, email: str, code: str) -> None:
        self.calls.append(("verify", email, code))
        await self._maybe_fail()

    async def resend_verification(self, email: str) -> None:
        self.calls.append(("resend", email))
        await self._maybe_fail()


def _machine() -> tuple[SessionMachine, MemoryTokenStore]:
    store = MemoryTokenStore()
    return SessionMachine.start(store), store


def test_login_ok_stores_token_and_enters_dashboard() -> None:
    machine, store = _machine()

    result = asyncio.run(run_login(FakeAuthApi(), machine, "a@example.com", "pw"))

    assert result.status == "ok"
    assert result.state == LoggedIn(Screen.DASHBOARD)
    assert store.token == "tok"


def test_login_rejected_stays_on_login() -> None:
    machine, store = _machine()
    api = FakeAuthApi(ValidationFailure("Bad credentials", status_code=400))

    result = asyncio.run(run_login(api, machine, "a@example.com", "nope"))

    assert result.status == "rejected"
    assert result.message == "Bad credentials"
    assert result.state == LoggedOut(Screen.LOGIN)
    assert store.token is None


def test_login_service_down_is_unavailable() -> None:
    machine, _ = _machine()
    api = FakeAuthApi(TransportFailure("Failed to connect"))

    result = asyncio.run(run_login(api, machine, "a@example.com", "pw"))

    assert result.status == "unavailable"
    assert machine.screen == Screen.LOGIN


def test_login_malformed_response_is_unavailable() -> None:
    machine, _ = _machine()

    result = asyncio.run(run_login(FakeAuthApi(MalformedResponse("no token")), machine, "a@example.com", "pw"))

    assert result.status == "unavailable"


def test_signup_ok_moves_to_verification() -> None:
    machine, _ = _machine()

    result = asyncio.run(run_signup(FakeAuthApi(), machine, "ann", "a@example.com", "pw"))

    assert result.status == "ok"
    assert result.state == LoggedOut(Screen.VERIFICATION, email="a@example.com")


def test_signup_conflict_then_resend_reaches_verification() -> None:
    machine, _ = _machine()
    conflict = FakeAuthApi(SignupConflict("User already exists", status_code=409))

    result = asyncio.run(run_signup(conflict, machine, "ann", "a@example.com", "pw"))

    assert result.status == "conflict"
    assert result.state == LoggedOut(Screen.SIGNUP, email="a@example.com", resend_available=True)

    api = FakeAuthApi()
    resent = asyncio.run(run_resend(api, machine, "a@example.com"))

    assert resent.status == "ok"
    assert resent.state == LoggedOut(Screen.VERIFICATION, email="a@example.com")
    assert api.calls == [("resend", "a@example.com")]


def test_signup_validation_failure_is_rejected() -> None:
    machine, _ = _machine()
    api = FakeAuthApi(ValidationFailure("Password too short", status_code=400))

    result = asyncio.run(run_signup(api, machine, "ann", "a@example.com", "pw"))

    assert result.status == "rejected"
    assert machine.screen == Screen.SIGNUP


def test_verify_from_fresh_start_then_login() -> None:
    machine, _ = _machine()
    api = FakeAuthApi()

    result = asyncio.run(run_verify(api, machine, "a@example.com", "123456"))

    assert result.status == "ok"
    assert result.state == LoggedOut(Screen.LOGIN)
    assert api.calls == [("verify", "a@example.com", "123456")]

    logged_in = asyncio.run(run_login(api, machine, "a@example.com", "pw"))
    assert logged_in.state == LoggedIn(Screen.DASHBOARD)


def test_verify_bad_code_stays_on_verification() -> None:
    machine, _ = _machine()
    api = FakeAuthApi(ValidationFailure("Invalid verification code", status_code=400))

    result = asyncio.run(run_verify(api, machine, "a@example.com", "000000"))

    assert result.status == "rejected"
    assert result.state == LoggedOut(Screen.VERIFICATION, email="a@example.com")


def test_resend_failure_leaves_state_unchanged() -> None:
    machine, _ = _machine()
    api = FakeAuthApi(TransportFailure("down"))

    result = asyncio.run(run_resend(api, machine, "a@example.com"))

    assert result.status == "unavailable"
    assert result.state == LoggedOut(Screen.VERIFICATION, email="a@example.com")
