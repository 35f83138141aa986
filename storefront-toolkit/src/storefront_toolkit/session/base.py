"""
Session data model and provider interface.

A 'Session' describes what the client currently knows about the signed-in user.
It has three states, and 'UNRESOLVED' is deliberately distinct from
'ANONYMOUS': the first means the identity lookup has not finished yet, the
second means it finished and nobody is signed in. Guards and trackers must
never collapse the two.

The 'SessionProvider' ABC is the pluggable source of sessions. Concrete
implementations: 'InMemorySessionProvider'. Both core components receive the
provider (or a 'Session' value) explicitly, so nothing here reads process-wide
state.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from enum import StrEnum

from pydantic import BaseModel, model_validator


class SessionStatus(StrEnum):
    UNRESOLVED = "unresolved"
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


class Session(BaseModel):
    """
    Snapshot of the current user's identity and role.

    'identity' and 'role' are only meaningful for 'AUTHENTICATED' sessions; the
    validator rejects an authenticated session without an identity and strips
    both fields from the other two states.
    """

    status: SessionStatus
    identity: str | None = None
    role: str | None = None

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_identity(self) -> "Session":
        if self.status == SessionStatus.AUTHENTICATED:
            if not self.identity:
                raise ValueError("An authenticated session requires an identity")
        elif self.identity is not None or self.role is not None:
            raise ValueError(f"A {self.status} session cannot carry an identity or role")
        return self

    @classmethod
    def unresolved(cls) -> "Session":
        return cls(status=SessionStatus.UNRESOLVED)

    @classmethod
    def anonymous(cls) -> "Session":
        return cls(status=SessionStatus.ANONYMOUS)

    @classmethod
    def authenticated(cls, identity: str, role: str | None = None) -> "Session":
        return cls(status=SessionStatus.AUTHENTICATED, identity=identity, role=role)

    @property
    def is_resolved(self) -> bool:
        return self.status != SessionStatus.UNRESOLVED

    @property
    def actor(self) -> str | None:
        """The identity acting on behalf of this session, or None when nobody is signed in."""
        return self.identity if self.status == SessionStatus.AUTHENTICATED else None


SessionListener = Callable[[Session], None]


class SessionProvider(ABC):
    """
    Abstract source of the current 'Session'.

    Listeners registered through 'subscribe' are called with the new session on
    every change. 'subscribe' returns a callable that removes the listener
    again; owners of a subscription must call it when they are torn down.
    """

    @abstractmethod
    def current(self) -> Session:
        """Return the latest known session without waiting."""
        pass

    @abstractmethod
    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register 'listener' for session changes and return its unsubscribe callable."""
        pass
