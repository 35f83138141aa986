import asyncio

from conftest import wait_at_gate
from storefront_toolkit.reactions import ReactionState, ReactionSubject, ReactionTracker, ToggleRejection
from storefront_toolkit.session import Session

P1 = ReactionSubject.product("P1")


async def seed_like(store, actor="U1", pid="P1"):
    await store.insert("likes", {"target_type": "product", "uid": actor, "pid": pid, "bid": None})


async def test_mount_loads_state_for_signed_in_actor(ledger, store, signed_in):
    await seed_like(store)
    tracker = ReactionTracker(ledger, signed_in, P1, initial_count=4)

    await tracker.mount()

    assert tracker.state == ReactionState(liked=True, count=4)


async def test_state_reloads_when_session_resolves(ledger, store, sessions):
    await seed_like(store)
    tracker = ReactionTracker(ledger, sessions, P1, initial_count=1)
    await tracker.mount()
    assert tracker.state == ReactionState(liked=False, count=1)

    sessions.set(Session.authenticated("U1"))
    await tracker.settled()
    assert tracker.state.liked is True

    sessions.set(Session.anonymous())
    await tracker.settled()
    assert tracker.state == ReactionState(liked=False, count=1)


async def test_toggle_scenario(ledger, signed_in):
    tracker = ReactionTracker(ledger, signed_in, P1, initial_count=4)
    await tracker.mount()

    assert await tracker.toggle() is True
    assert tracker.state == ReactionState(liked=True, count=5)
    assert await tracker.toggle() is False
    assert tracker.state == ReactionState(liked=False, count=4)


async def test_toggle_without_actor(ledger, sessions):
    sessions.set(Session.anonymous())
    tracker = ReactionTracker(ledger, sessions, ReactionSubject.brand("B1"), initial_count=2)
    await tracker.mount()

    assert await tracker.toggle() == ToggleRejection.NOT_AUTHENTICATED
    assert tracker.state == ReactionState(liked=False, count=2)


async def test_second_click_during_flight_is_rejected(gated_ledger, gated_store, signed_in):
    tracker = ReactionTracker(gated_ledger, signed_in, P1, initial_count=4)
    await tracker.mount()

    first = asyncio.create_task(tracker.toggle())
    await wait_at_gate(gated_store)
    assert tracker.state.pending is True

    assert await tracker.toggle() == ToggleRejection.ALREADY_PENDING
    assert tracker.state == ReactionState(liked=False, count=4, pending=True)

    gated_store.gate.set()
    assert await first is True
    assert tracker.state == ReactionState(liked=True, count=5)


async def test_failed_toggle_restores_state(ledger, store, signed_in):
    tracker = ReactionTracker(ledger, signed_in, P1, initial_count=4)
    await tracker.mount()
    store.fail_next("insert")

    assert await tracker.toggle() == ToggleRejection.TOGGLE_FAILED
    assert tracker.state == ReactionState(liked=False, count=4)


async def test_results_after_dispose_are_dropped(gated_ledger, gated_store, signed_in):
    tracker = ReactionTracker(gated_ledger, signed_in, P1, initial_count=4)
    await tracker.mount()

    in_flight = asyncio.create_task(tracker.toggle())
    await wait_at_gate(gated_store)
    tracker.dispose()
    gated_store.gate.set()

    assert await in_flight is True
    assert tracker.disposed
    assert tracker.state.liked is False
    assert tracker.state.count == 4

    signed_in.set(Session.authenticated("U2"))
    await tracker.settled()
    assert tracker.actor == "U1"


async def test_reload_started_before_a_toggle_does_not_overwrite_it(
    read_gated_ledger, read_gated_store, sessions
):
    tracker = ReactionTracker(read_gated_ledger, sessions, P1, initial_count=4)
    await tracker.mount()

    sessions.set(Session.authenticated("U1"))
    await wait_at_gate(read_gated_store)
    assert await tracker.toggle() is True

    read_gated_store.gate.set()
    await tracker.settled()
    assert tracker.state == ReactionState(liked=True, count=5)

    assert await tracker.toggle() is False
    assert tracker.state == ReactionState(liked=False, count=4)
    assert read_gated_store.tables["likes"] == []


async def test_toggle_result_is_not_applied_to_a_new_actor(gated_ledger, gated_store, signed_in):
    tracker = ReactionTracker(gated_ledger, signed_in, P1, initial_count=4)
    await tracker.mount()

    in_flight = asyncio.create_task(tracker.toggle())
    await wait_at_gate(gated_store)
    signed_in.set(Session.authenticated("U2"))
    await tracker.settled()

    gated_store.gate.set()
    assert await in_flight is True
    assert tracker.actor == "U2"
    assert tracker.state == ReactionState(liked=False, count=5)
    assert [row["uid"] for row in gated_store.tables["likes"]] == ["U1"]

    assert await tracker.toggle() is True
    assert tracker.state == ReactionState(liked=True, count=6)
    assert [row["uid"] for row in gated_store.tables["likes"]] == ["U1", "U2"]
