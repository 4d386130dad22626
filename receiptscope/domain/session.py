"""Session credential and the top-level screen state machine.

States:
    LoggedOut(LOGIN | SIGNUP | VERIFICATION)
    LoggedIn(DASHBOARD | ANALYTICS)

The token in Session is the only thing that decides whether the logged-in
states can be reached. No expiry check happens here; a stale token shows up
later as a rejected request.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class Screen(str, Enum):
    LOGIN = "login"
    SIGNUP = "signup"
    VERIFICATION = "verification"
    DASHBOARD = "dashboard"
    ANALYTICS = "analytics"


LOGGED_OUT_SCREENS = frozenset({Screen.LOGIN, Screen.SIGNUP, Screen.VERIFICATION})
LOGGED_IN_SCREENS = frozenset({Screen.DASHBOARD, Screen.ANALYTICS})


@dataclass(frozen=True)
class Session:
    """Bearer credential for the receipts service. Replaced, never mutated."""

    token: str | None = None

    @property
    def authenticated(self) -> bool:
        return bool(self.token)

    def authorization_header(self) -> dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}


@dataclass(frozen=True)
class LoggedOut:
    screen: Screen = Screen.LOGIN
    email: str | None = None
    # Set after a signup conflict: the account exists but is unverified.
    resend_available: bool = False

    def __post_init__(self) -> None:
        if self.screen not in LOGGED_OUT_SCREENS:
            raise ValueError(f"{self.screen} is not a logged-out screen")


@dataclass(frozen=True)
class LoggedIn:
    screen: Screen = Screen.DASHBOARD

    def __post_init__(self) -> None:
        if self.screen not in LOGGED_IN_SCREENS:
            raise ValueError(f"{self.screen} is not a logged-in screen")


ViewState = LoggedOut | LoggedIn


class InvalidTransition(ValueError):
    """Raised when an event does not apply to the current view state."""


class TokenStore(Protocol):
    def load(self) -> str | None: ...

    def save(self, token: str) -> None: ...

    def clear(self) -> None: ...


class SessionMachine:
    """Owns the current Session and ViewState and applies navigation events."""

    def __init__(self, store: TokenStore | None = None) -> None:
        self._store = store
        self.session = Session()
        self.state: ViewState = LoggedOut()

    @classmethod
    def start(cls, store: TokenStore | None = None) -> SessionMachine:
        """Create a machine, entering the dashboard if a stored token exists."""
        machine = cls(store)
        token = store.load() if store is not None else None
        if token:
            machine.session = Session(token)
            machine.state = LoggedIn(Screen.DASHBOARD)
        return machine

    @property
    def screen(self) -> Screen:
        return self.state.screen

    def _require_logged_out(self, event: str, *screens: Screen) -> LoggedOut:
        state = self.state
        if not isinstance(state, LoggedOut) or (screens and state.screen not in screens):
            raise InvalidTransition(f"{event} is not valid from {state}")
        return state

    def _require_logged_in(self, event: str) -> LoggedIn:
        if not isinstance(self.state, LoggedIn):
            raise InvalidTransition(f"{event} is not valid from {self.state}")
        return self.state

    def _move(self, state: ViewState) -> ViewState:
        self.state = state
        return state

    # --- logged-out regime ---

    def login_succeeded(self, token: str) -> ViewState:
        self._require_logged_out("login", Screen.LOGIN)
        if not token:
            raise InvalidTransition("login succeeded without a token")
        self.session = Session(token)
        if self._store is not None:
            self._store.save(token)
        return self._move(LoggedIn(Screen.DASHBOARD))

    def signup_succeeded(self, email: str) -> ViewState:
        self._require_logged_out("signup", Screen.SIGNUP)
        return self._move(LoggedOut(Screen.VERIFICATION, email=email))

    def signup_conflict(self, email: str) -> ViewState:
        self._require_logged_out("signup conflict", Screen.SIGNUP)
        return self._move(LoggedOut(Screen.SIGNUP, email=email, resend_available=True))

    def resend_succeeded(self) -> ViewState:
        state = self._require_logged_out("resend verification", Screen.SIGNUP, Screen.VERIFICATION)
        if state.screen == Screen.SIGNUP and not state.resend_available:
            raise InvalidTransition("resend verification was not offered")
        if not state.email:
            raise InvalidTransition("resend verification needs an email")
        return self._move(LoggedOut(Screen.VERIFICATION, email=state.email))

    def resume_verification(self, email: str) -> ViewState:
        """Reopen verification for an address whose code arrived after a restart."""
        self._require_logged_out("resume verification")
        if not email:
            raise InvalidTransition("resume verification needs an email")
        return self._move(LoggedOut(Screen.VERIFICATION, email=email))

    def verification_succeeded(self) -> ViewState:
        self._require_logged_out("verification", Screen.VERIFICATION)
        return self._move(LoggedOut(Screen.LOGIN))

    def show_signup(self) -> ViewState:
        state = self._require_logged_out("show signup")
        return self._move(LoggedOut(Screen.SIGNUP, email=state.email))

    def show_login(self) -> ViewState:
        self._require_logged_out("show login")
        return self._move(LoggedOut(Screen.LOGIN))

    # --- logged-in regime ---

    def show_analytics(self) -> ViewState:
        self._require_logged_in("show analytics")
        return self._move(LoggedIn(Screen.ANALYTICS))

    def show_dashboard(self) -> ViewState:
        self._require_logged_in("show dashboard")
        return self._move(LoggedIn(Screen.DASHBOARD))

    def logout(self) -> ViewState:
        self._require_logged_in("logout")
        self.session = Session()
        if self._store is not None:
            self._store.clear()
        return self._move(LoggedOut(Screen.LOGIN))
