from storefront_toolkit.session.base import Session, SessionListener, SessionProvider, SessionStatus
from storefront_toolkit.session.in_memory import InMemorySessionProvider

__all__ = [
    "InMemorySessionProvider",
    "Session",
    "SessionListener",
    "SessionProvider",
    "SessionStatus",
]
