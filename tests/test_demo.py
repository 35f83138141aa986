from storefront_backend.demo import run_demo
from storefront_toolkit.guard import denial_notice
from storefront_toolkit.reactions.ledger import TOGGLE_FAILED_NOTICE


async def test_demo_runs_end_to_end():
    services = await run_demo(actor="U1", initial_count=4)

    assert services.notifier.messages == [denial_notice("admin"), TOGGLE_FAILED_NOTICE]
    rows = services.store.tables["likes"]
    assert [row["bid"] for row in rows] == ["b-1"]
    assert all(row["pid"] is None for row in rows)
