"""Async HTTP client for the receipts service and its auth endpoints."""

from __future__ import annotations

from collections.abc import Callable
from datetime import date
from decimal import Decimal
from enum import Enum
from types import TracebackType
from typing import Any, TypeVar

import httpx

from receiptscope.domain.normalize import normalize_receipts
from receiptscope.domain.receipt import CategoryAggregate, MonthlyAggregate, Receipt, parse_amount
from receiptscope.domain.session import Session
from receiptscope.runtime.config import ClientSettings
from receiptscope.runtime.logging import get_logger

logger = get_logger(__name__)

RECEIPTS_PREFIX = "/api/receipts"

T = TypeVar("T")


class ErrorKind(str, Enum):
    TRANSPORT = "transport"
    VALIDATION = "validation"
    CONFLICT = "conflict"
    UNAUTHORIZED = "unauthorized"
    MALFORMED = "malformed"


class ReceiptServiceError(RuntimeError):
    """Base class for failures talking to the receipts service."""

    kind = ErrorKind.TRANSPORT

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TransportFailure(ReceiptServiceError):
    """Service unreachable, or a non-2xx response with nothing useful in it."""

    kind = ErrorKind.TRANSPORT


class ValidationFailure(ReceiptServiceError):
    """The service rejected the request with a message (bad credentials, bad code)."""

    kind = ErrorKind.VALIDATION


class SignupConflict(ValidationFailure):
    """Signup for an address that already has an (unverified) account."""

    kind = ErrorKind.CONFLICT


class AuthRejected(ReceiptServiceError):
    """The bearer token was missing, expired or refused."""

    kind = ErrorKind.UNAUTHORIZED


class MalformedResponse(ReceiptServiceError):
    """A 2xx response whose body is not the expected JSON shape."""

    kind = ErrorKind.MALFORMED


def _error_message(response: httpx.Response) -> str:
    """Best-effort message from an error body ({"message"}, {"error"} or plain text)."""
    try:
        body = response.json()
    except ValueError:
        return response.text.strip()
    if isinstance(body, dict):
        for key in ("message", "error"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
        return ""
    if isinstance(body, str):
        return body.strip()
    return ""


def raise_for_response(response: httpx.Response) -> None:
    """Map a non-2xx response onto the ReceiptServiceError hierarchy."""
    if response.is_success:
        return

    status = response.status_code
    message = _error_message(response)
    where = f"{response.request.method} {response.request.url.path}"

    if status in (401, 403):
        raise AuthRejected(message or f"{where}: not authorized", status_code=status)
    if status == 409:
        raise SignupConflict(message or "Account already exists", status_code=status)
    if 400 <= status < 500 and message:
        raise ValidationFailure(message, status_code=status)
    raise TransportFailure(f"{where} failed with HTTP {status}", status_code=status)


def _expect_list(body: Any, what: str) -> list[Any]:
    if not isinstance(body, list):
        raise MalformedResponse(f"Expected a JSON list for {what}, got {type(body).__name__}")
    return body


def _parse_list(body: Any, what: str, parse: Callable[[list[Any]], list[T]]) -> list[T]:
    """Parse a JSON list, reporting any conversion error as MalformedResponse."""
    items = _expect_list(body, what)
    try:
        return parse(items)
    except (ArithmeticError, TypeError, ValueError) as e:
        raise MalformedResponse(f"Unreadable {what} payload: {e}") from e


def _aggregates(factory: Callable[[dict[str, Any]], T]) -> Callable[[list[Any]], list[T]]:
    return lambda items: [factory(p) for p in items if isinstance(p, dict)]


class ReceiptsApi:
    """Thin async wrapper over the receipts service.

    Usage:
        async with ReceiptsApi(settings) as api:
            receipts = await api.all_receipts(session)

    An existing httpx.AsyncClient can be injected (tests pass one built on
    MockTransport or ASGITransport); the wrapper only closes clients it made.
    """

    def __init__(self, settings: ClientSettings, client: httpx.AsyncClient | None = None) -> None:
        self.settings = settings
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=settings.api_base_url,
            timeout=settings.timeout,
        )

    async def __aenter__(self) -> ReceiptsApi:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        session: Session | None = None,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        headers = session.authorization_header() if session is not None else {}
        if session is not None and not headers:
            raise AuthRejected(f"{method} {path}: no credential in session")

        logger.debug("%s %s params=%s", method, path, params)
        try:
            response = await self._client.request(method, path, params=params, json=json, headers=headers)
        except httpx.RequestError as e:
            logger.error("Failed to reach receipts service (%s %s): %s", method, path, e)
            raise TransportFailure(f"Failed to connect to receipts service: {e}") from e

        raise_for_response(response)
        return response

    async def _get_json(self, path: str, session: Session, params: dict[str, str] | None = None) -> Any:
        response = await self._request("GET", path, session=session, params=params)
        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponse(f"GET {path} returned a non-JSON body") from e

    # --- auth endpoints ---

    async def login(self, email: str, password: str) -> str:
        """Exchange credentials for a bearer token."""
        response = await self._request("POST", "/auth/login", json={"email": email, "password": password})
        try:
            body = response.json()
        except ValueError as e:
            raise MalformedResponse("Login response is not JSON") from e
        token = body.get("token") if isinstance(body, dict) else None
        if not isinstance(token, str) or not token:
            raise MalformedResponse("Login response has no token")
        return token

    async def signup(self, username: str, email: str, password: str) -> None:
        await self._request(
            "POST",
            "/auth/signup",
            json={"username": username, "email": email, "password": password},
        )

    async def verify(self, email: str, code: str) -> None:
        await self._request("POST", "/auth/verify", json={"email": email, "verificationCode": code})

    async def resend_verification(self, email: str) -> None:
        await self._request("POST", "/auth/resend", json={"email": email})

    # --- summaries ---

    async def current_month_by_category(self, session: Session) -> list[CategoryAggregate]:
        body = await self._get_json(f"{RECEIPTS_PREFIX}/summary/current-month", session)
        return _parse_list(body, "current month", _aggregates(CategoryAggregate.from_payload))

    async def monthly_trend(self, session: Session) -> list[MonthlyAggregate]:
        body = await self._get_json(f"{RECEIPTS_PREFIX}/summary/monthly", session)
        return _parse_list(body, "monthly trend", _aggregates(MonthlyAggregate.from_payload))

    async def period_by_category(self, session: Session, start: date, end: date) -> list[CategoryAggregate]:
        body = await self._get_json(
            f"{RECEIPTS_PREFIX}/summary/period",
            session,
            params={"startDate": start.isoformat(), "endDate": end.isoformat()},
        )
        return _parse_list(body, "period summary", _aggregates(CategoryAggregate.from_payload))

    async def total_spending(self, session: Session) -> Decimal | None:
        """Total spend, or None when the body carries no numeric totalSpending."""
        body = await self._get_json(f"{RECEIPTS_PREFIX}/total", session)
        if not isinstance(body, dict):
            return None
        return parse_amount(body.get("totalSpending"))

    # --- receipt lists ---

    async def all_receipts(self, session: Session) -> list[Receipt]:
        body = await self._get_json(f"{RECEIPTS_PREFIX}/all", session)
        return _parse_list(body, "receipts", normalize_receipts)

    async def receipts_by_category(self, session: Session, category_id: int | str) -> list[Receipt]:
        body = await self._get_json(f"{RECEIPTS_PREFIX}/category/{category_id}", session)
        return _parse_list(body, "receipts by category", normalize_receipts)

    async def receipts_by_date_range(self, session: Session, start: date, end: date) -> list[Receipt]:
        body = await self._get_json(
            f"{RECEIPTS_PREFIX}/date-range",
            session,
            params={"startDate": start.isoformat(), "endDate": end.isoformat()},
        )
        return _parse_list(body, "receipts by date range", normalize_receipts)

    async def recent_receipts(self, session: Session) -> list[Receipt]:
        body = await self._get_json(f"{RECEIPTS_PREFIX}/recent", session)
        return _parse_list(body, "recent receipts", normalize_receipts)
