"""
Admission decisions for role-protected views.

'AuthorizationGuard.evaluate' turns the current 'Session' into one of three
decisions:

    PENDING  - the session is still unresolved. Show a neutral loading state;
               do not redirect and do not run anything.
    DENIED   - nobody is signed in (redirect to the login page) or the signed-in
               user lacks the role (notice + redirect to the default page).
    GRANTED  - the view may render. The first time a guard instance grants
               access it runs its post-admission callbacks, in order, exactly
               once; later evaluations never run them again.

'is_granted' answers the same question as a plain value for call sites that
only need to show or hide something, and goes through the same role check as
'evaluate' so the two cannot disagree.
"""

from collections.abc import Callable, Sequence
from enum import StrEnum

from loguru import logger
from pydantic import BaseModel

from storefront_toolkit.notifications.base import LoggingNotifier, Notifier
from storefront_toolkit.session.base import Session, SessionStatus

DEFAULT_LOGIN_PATH = "/login"
DEFAULT_LANDING_PATH = "/"

Callback = Callable[[], object]
Callbacks = Callback | Sequence[Callback | None] | None


class AdmissionStatus(StrEnum):
    PENDING = "pending"
    DENIED = "denied"
    GRANTED = "granted"


class DenialReason(StrEnum):
    NOT_AUTHENTICATED = "not-authenticated"
    INSUFFICIENT_ROLE = "insufficient-role"


class AdmissionDecision(BaseModel):
    """Result of one guard evaluation. 'reason' and 'redirect_to' are set only when denied."""

    status: AdmissionStatus
    reason: DenialReason | None = None
    redirect_to: str | None = None

    model_config = {"frozen": True}

    @classmethod
    def pending(cls) -> "AdmissionDecision":
        return cls(status=AdmissionStatus.PENDING)

    @classmethod
    def granted(cls) -> "AdmissionDecision":
        return cls(status=AdmissionStatus.GRANTED)

    @classmethod
    def denied(cls, reason: DenialReason, redirect_to: str) -> "AdmissionDecision":
        return cls(status=AdmissionStatus.DENIED, reason=reason, redirect_to=redirect_to)

    @property
    def is_granted(self) -> bool:
        return self.status == AdmissionStatus.GRANTED

    @property
    def is_denied(self) -> bool:
        return self.status == AdmissionStatus.DENIED

    @property
    def is_pending(self) -> bool:
        return self.status == AdmissionStatus.PENDING


def is_granted(session: Session, required_role: str) -> bool | None:
    """True if 'session' holds 'required_role', False if it does not, None while unresolved."""
    if session.status == SessionStatus.UNRESOLVED:
        return None
    if session.status == SessionStatus.ANONYMOUS:
        return False
    return session.role == required_role


def _as_list(callbacks: Callbacks) -> list[Callback]:
    if callbacks is None:
        return []
    if callable(callbacks):
        return [callbacks]
    return [callback for callback in callbacks if callback is not None]


def denial_notice(required_role: str) -> str:
    if required_role == "admin":
        return "Only administrators can access this page."
    return f"Only {required_role} users can access this page."


class AuthorizationGuard:
    """
    Decides admission for one protected view.

    A guard instance belongs to exactly one view and lives as long as it does;
    its one-shot latch is never shared or re-armed. Build a new guard for a new
    view.

    Attributes:
        notifier: Receives the notice shown on insufficient-role denials.
        navigate: Optional callable invoked with the redirect target of every
            denial. When omitted the caller reads 'redirect_to' itself.
        login_path: Redirect target for anonymous sessions.
        landing_path: Redirect target for users without the required role.
    """

    def __init__(
        self,
        notifier: Notifier | None = None,
        navigate: Callable[[str], object] | None = None,
        login_path: str = DEFAULT_LOGIN_PATH,
        landing_path: str = DEFAULT_LANDING_PATH,
    ) -> None:
        self.notifier = notifier or LoggingNotifier()
        self.navigate = navigate
        self.login_path = login_path
        self.landing_path = landing_path
        self._callbacks_fired = False

    @property
    def callbacks_fired(self) -> bool:
        return self._callbacks_fired

    def evaluate(self, session: Session, required_role: str, callbacks: Callbacks = None) -> AdmissionDecision:
        granted = is_granted(session, required_role)

        if granted is None:
            return AdmissionDecision.pending()

        if session.status == SessionStatus.ANONYMOUS:
            return self._deny(DenialReason.NOT_AUTHENTICATED, self.login_path)

        if not granted:
            logger.warning(f"User {session.identity} with role {session.role!r} denied, {required_role!r} required")
            self.notifier.notify(denial_notice(required_role))
            return self._deny(DenialReason.INSUFFICIENT_ROLE, self.landing_path)

        if not self._callbacks_fired:
            # Closed before running anything so a raising callback cannot re-arm it.
            self._callbacks_fired = True
            logger.info(f"Admitted {session.identity} as {required_role!r}")
            for callback in _as_list(callbacks):
                callback()

        return AdmissionDecision.granted()

    def is_granted(self, session: Session, required_role: str) -> bool | None:
        return is_granted(session, required_role)

    def _deny(self, reason: DenialReason, redirect_to: str) -> AdmissionDecision:
        decision = AdmissionDecision.denied(reason, redirect_to)
        logger.debug(f"Admission denied ({reason}), redirecting to {redirect_to}")
        if self.navigate is not None:
            self.navigate(redirect_to)
        return decision
