"""
Keeps an 'AuthorizationGuard' in step with a 'SessionProvider'.

A protected view creates one 'GuardBinding' when it mounts. The binding
evaluates the guard against the current session straight away and again on
every session change, so a view that mounted while the session was still
unresolved is admitted (and runs its callbacks) as soon as the session
resolves. 'dispose' stops listening; the guard and its latch go away with the
binding.
"""

from collections.abc import Callable

from storefront_toolkit.guard.authorization import AdmissionDecision, AuthorizationGuard, Callbacks
from storefront_toolkit.session.base import Session, SessionProvider


class GuardBinding:
    def __init__(
        self,
        guard: AuthorizationGuard,
        sessions: SessionProvider,
        required_role: str,
        callbacks: Callbacks = None,
    ) -> None:
        self.guard = guard
        self.sessions = sessions
        self.required_role = required_role
        self.callbacks = callbacks
        self.decision = AdmissionDecision.pending()
        self._unsubscribe: Callable[[], None] | None = None

    def start(self) -> AdmissionDecision:
        self._unsubscribe = self.sessions.subscribe(self._on_session)
        return self._on_session(self.sessions.current())

    def _on_session(self, session: Session) -> AdmissionDecision:
        self.decision = self.guard.evaluate(session, self.required_role, self.callbacks)
        return self.decision

    def dispose(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
