"""
Storefront interaction walkthrough.

Each stage is an independent coroutine so you can run and inspect individual
steps on their own. loguru logs the intermediate state at every stage.

Steps at a glance:
    1  build_services()      - In-memory store, session provider, ledger
    2  admin_area()          - Guard an admin view across session changes
    3  product_likes()       - Like / unlike a product from its detail view
    4  failed_toggle()       - Remote write failure rolls the view back
    5  account_likes()       - List and remove liked items on the account page

Everything runs against 'InMemoryRemoteStore' and 'InMemorySessionProvider';
swap them for real adapters to talk to a hosted backend.

Usage:
    python -m storefront_backend.demo

    Override the acting user or the initial like count:
        ACTOR=u-42 INITIAL_COUNT=10 python -m storefront_backend.demo
        STOREFRONT_LOG_LEVEL=DEBUG python -m storefront_backend.demo
"""

import asyncio
import os
from dataclasses import dataclass

from loguru import logger

from storefront_toolkit.config import StorefrontSettings, configure_logging
from storefront_toolkit.guard import AuthorizationGuard, GuardBinding
from storefront_toolkit.notifications import RecordingNotifier
from storefront_toolkit.reactions import ReactionLedger, ReactionSubject, ReactionTracker, SubjectKind
from storefront_toolkit.remote_store import InMemoryRemoteStore
from storefront_toolkit.session import InMemorySessionProvider, Session


@dataclass
class Services:
    settings: StorefrontSettings
    store: InMemoryRemoteStore
    sessions: InMemorySessionProvider
    notifier: RecordingNotifier
    ledger: ReactionLedger


def build_services(settings: StorefrontSettings) -> Services:
    store = InMemoryRemoteStore()
    notifier = RecordingNotifier()
    return Services(
        settings=settings,
        store=store,
        sessions=InMemorySessionProvider(),
        notifier=notifier,
        ledger=ReactionLedger(store, notifier=notifier, table=settings.likes_table),
    )


def admin_area(services: Services, actor: str) -> None:
    """Mount an admin view before the session resolves, then resolve it twice."""
    loaded: list[str] = []
    redirects: list[str] = []
    guard = AuthorizationGuard(
        notifier=services.notifier,
        navigate=redirects.append,
        login_path=services.settings.login_path,
        landing_path=services.settings.landing_path,
    )
    binding = GuardBinding(
        guard,
        services.sessions,
        services.settings.admin_role,
        callbacks=[lambda: loaded.append("orders"), lambda: loaded.append("users")],
    )

    logger.info(f"Mounted admin view: {binding.start().status}")
    services.sessions.set(Session.authenticated(actor, role="user"))
    logger.info(f"As a regular user: {binding.decision.status} ({binding.decision.reason}), redirects={redirects}")

    services.sessions.set(Session.authenticated(actor, role=services.settings.admin_role))
    # Re-render without a session change; callbacks must not run again.
    guard.evaluate(services.sessions.current(), services.settings.admin_role, binding.callbacks)
    logger.info(f"As an admin: {binding.decision.status}, loaded={loaded}")
    binding.dispose()


async def product_likes(services: Services, product_id: str, initial_count: int) -> ReactionTracker:
    tracker = ReactionTracker(services.ledger, services.sessions, ReactionSubject.product(product_id), initial_count)
    await tracker.mount()
    logger.info(f"Mounted product {product_id}: {tracker.state}")

    for _ in range(2):
        outcome = await tracker.toggle()
        logger.info(f"Toggle -> {outcome}; state={tracker.state}")
    return tracker


async def failed_toggle(services: Services, tracker: ReactionTracker) -> None:
    services.store.fail_next("insert", error="connection reset")
    before = tracker.state
    outcome = await tracker.toggle()
    logger.info(f"Toggle with failing store -> {outcome}; unchanged={tracker.state == before}")


async def account_likes(services: Services, actor: str) -> None:
    for brand_id in ("b-1", "b-2"):
        brand = ReactionTracker(services.ledger, services.sessions, ReactionSubject.brand(brand_id))
        await brand.mount()
        await brand.toggle()
        brand.dispose()

    limit = services.settings.liked_items_limit
    brands = await services.ledger.liked_items(actor, SubjectKind.BRAND, limit=limit)
    logger.info(f"Liked brands (newest first): {[like.bid for like in brands]}")

    if brands:
        await services.ledger.remove(brands[0].lid)
    remaining = await services.ledger.liked_items(actor, SubjectKind.BRAND, limit=limit)
    logger.info(f"After removing one: {[like.bid for like in remaining]}")


async def run_demo(actor: str, initial_count: int) -> Services:
    settings = StorefrontSettings.from_env()
    configure_logging(settings)
    logger.info("Starting storefront interaction demo")

    # Step 1: Collaborators
    services = build_services(settings)

    # Step 2: Admin guard
    admin_area(services, actor)

    # Step 3: Product likes
    tracker = await product_likes(services, "p-1", initial_count)

    # Step 4: Failure rollback
    await failed_toggle(services, tracker)
    tracker.dispose()

    # Step 5: Account page
    await account_likes(services, actor)

    logger.info(f"Notices shown: {services.notifier.messages}")
    logger.info("Storefront interaction demo done")
    return services


if __name__ == "__main__":
    asyncio.run(
        run_demo(
            actor=os.getenv("ACTOR", "u-1"),
            initial_count=int(os.getenv("INITIAL_COUNT", "4")),
        )
    )
