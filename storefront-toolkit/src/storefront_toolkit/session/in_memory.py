"""
In-memory 'SessionProvider'.

Holds a single 'Session' and pushes every change to its listeners in
subscription order. Used by the demo scenarios and the test suite, and as the
adapter target for any auth client that reports identity changes through
callbacks.
"""

import asyncio
from collections.abc import Callable

from loguru import logger

from storefront_toolkit.session.base import Session, SessionListener, SessionProvider


class InMemorySessionProvider(SessionProvider):
    def __init__(self, session: Session | None = None) -> None:
        self._session = session or Session.unresolved()
        self._listeners: list[SessionListener] = []
        self._resolved = asyncio.Event()
        if self._session.is_resolved:
            self._resolved.set()

    def current(self) -> Session:
        return self._session

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set(self, session: Session) -> None:
        """Replace the current session and notify listeners if it changed."""
        if session == self._session:
            return
        logger.debug(f"Session changed: {self._session.status} -> {session.status}")
        self._session = session
        if session.is_resolved:
            self._resolved.set()
        else:
            self._resolved.clear()
        for listener in list(self._listeners):
            listener(session)

    async def wait_resolved(self) -> Session:
        """Suspend until the session leaves the 'UNRESOLVED' state and return it."""
        await self._resolved.wait()
        return self._session
