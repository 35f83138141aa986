import asyncio

import pytest
from pydantic import ValidationError

from storefront_toolkit.session import InMemorySessionProvider, Session, SessionStatus


def test_unresolved_is_not_anonymous():
    unresolved = Session.unresolved()
    anonymous = Session.anonymous()
    assert unresolved != anonymous
    assert not unresolved.is_resolved
    assert anonymous.is_resolved
    assert unresolved.actor is None and anonymous.actor is None


def test_authenticated_session_carries_actor():
    session = Session.authenticated("U1", role="admin")
    assert session.status == SessionStatus.AUTHENTICATED
    assert session.actor == "U1"
    assert session.role == "admin"


def test_authenticated_session_requires_identity():
    with pytest.raises(ValidationError):
        Session.authenticated("")


def test_anonymous_session_cannot_carry_identity():
    with pytest.raises(ValidationError):
        Session(status=SessionStatus.ANONYMOUS, identity="U1")


def test_provider_notifies_listeners_in_order():
    provider = InMemorySessionProvider()
    seen = []
    provider.subscribe(lambda s: seen.append(("a", s.status)))
    provider.subscribe(lambda s: seen.append(("b", s.status)))

    provider.set(Session.anonymous())

    assert seen == [("a", SessionStatus.ANONYMOUS), ("b", SessionStatus.ANONYMOUS)]


def test_provider_skips_unchanged_session_and_unsubscribes():
    provider = InMemorySessionProvider(Session.anonymous())
    seen = []
    unsubscribe = provider.subscribe(seen.append)

    provider.set(Session.anonymous())
    assert seen == []

    unsubscribe()
    provider.set(Session.authenticated("U1"))
    assert seen == []
    assert provider.current().actor == "U1"


async def test_wait_resolved_returns_once_session_resolves():
    provider = InMemorySessionProvider()
    waiter = asyncio.create_task(provider.wait_resolved())
    await asyncio.sleep(0)
    assert not waiter.done()

    provider.set(Session.authenticated("U1", role="admin"))

    session = await waiter
    assert session.actor == "U1"
