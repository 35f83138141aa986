"""
Request-level session resolution and role guards for FastAPI.

A 'RequestSessionProvider' turns an incoming request into a 'Session'. The
toolkit ships 'TrustedHeaderSessionProvider', which reads the identity and role
that an authenticating reverse proxy forwards in request headers.

'require_role' wraps 'AuthorizationGuard' as a FastAPI dependency so admin
routes get the same admission rules as admin views:

    UNRESOLVED  -> 503 with 'Retry-After' (never a redirect)
    ANONYMOUS   -> 303 to the login path
    wrong role  -> 303 to the landing path
    granted     -> the dependency returns the 'Session'
"""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable

from fastapi import HTTPException, Request, status

from storefront_toolkit.guard.authorization import (
    DEFAULT_LANDING_PATH,
    DEFAULT_LOGIN_PATH,
    AuthorizationGuard,
)
from storefront_toolkit.notifications.base import Notifier
from storefront_toolkit.session.base import Session


class RequestSessionProvider(ABC):
    """
    Abstract base class for request authentication backends.

    Implementors return 'Session.unresolved()' when they cannot tell yet (for
    example, the identity service timed out), which the guard answers with 503
    instead of sending the user to the login page.
    """

    @abstractmethod
    async def get_session(self, request: Request) -> Session:
        """Resolve the 'Session' the request is made under."""
        pass


class TrustedHeaderSessionProvider(RequestSessionProvider):
    """Reads identity and role from headers set by an upstream authenticating proxy."""

    def __init__(self, identity_header: str = "X-User-Id", role_header: str = "X-User-Role") -> None:
        self.identity_header = identity_header
        self.role_header = role_header

    async def get_session(self, request: Request) -> Session:
        identity = request.headers.get(self.identity_header)
        if not identity:
            return Session.anonymous()
        return Session.authenticated(identity, request.headers.get(self.role_header))


def require_role(
    provider: RequestSessionProvider,
    required_role: str,
    login_path: str = DEFAULT_LOGIN_PATH,
    landing_path: str = DEFAULT_LANDING_PATH,
    notifier: Notifier | None = None,
) -> Callable[[Request], Awaitable[Session]]:
    """Build a FastAPI dependency admitting only sessions that hold 'required_role'."""

    async def dependency(request: Request) -> Session:
        session = await provider.get_session(request)
        # Each request is its own view: a fresh guard, a fresh latch.
        guard = AuthorizationGuard(notifier=notifier, login_path=login_path, landing_path=landing_path)
        decision = guard.evaluate(session, required_role)

        if decision.is_pending:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Session is not resolved yet",
                headers={"Retry-After": "1"},
            )
        if decision.is_denied:
            raise HTTPException(
                status_code=status.HTTP_303_SEE_OTHER,
                detail=str(decision.reason),
                headers={"Location": decision.redirect_to or login_path},
            )
        return session

    return dependency
