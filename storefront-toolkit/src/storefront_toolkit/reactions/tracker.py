"""
View-scoped reaction binding.

A product or brand detail view owns one 'ReactionTracker' for as long as it is
on screen. The tracker holds the 'ReactionState' the view renders, reloads it
whenever the signed-in actor changes, and routes like-button clicks through the
shared 'ReactionLedger'. Once 'dispose' has been called, results of loads or
toggles that are still in flight are dropped instead of being written into a
view that no longer exists.
"""

import asyncio
from collections.abc import Callable

from loguru import logger

from storefront_toolkit.reactions.data_models import ReactionState, ReactionSubject, ToggleRejection
from storefront_toolkit.reactions.ledger import ReactionLedger
from storefront_toolkit.session.base import Session, SessionProvider


class ReactionTracker:
    """
    Holds the liked/count state of one subject for the current actor.

    Attributes:
        state: The latest 'ReactionState'; read it after every await.
        disposed: True once the owning view has been torn down.
    """

    def __init__(
        self,
        ledger: ReactionLedger,
        sessions: SessionProvider,
        subject: ReactionSubject,
        initial_count: int = 0,
    ) -> None:
        self.ledger = ledger
        self.sessions = sessions
        self.subject = subject
        self.state = ReactionState(liked=False, count=initial_count)
        self.disposed = False
        self._actor: str | None = None
        self._unsubscribe: Callable[[], None] | None = None
        self._load_task: asyncio.Task[None] | None = None
        # Bumped when a toggle starts; a read that began under an older value is stale.
        self._toggle_generation = 0

    @property
    def actor(self) -> str | None:
        return self._actor

    async def mount(self) -> None:
        """Start following session changes and load the state for the current actor."""
        self._unsubscribe = self.sessions.subscribe(self._on_session)
        self._actor = self.sessions.current().actor
        await self.refresh()

    def _on_session(self, session: Session) -> None:
        if self.disposed or session.actor == self._actor:
            return
        self._actor = session.actor
        self._load_task = asyncio.get_running_loop().create_task(self.refresh())

    async def refresh(self) -> None:
        """Reload 'liked' from the store for the current actor."""
        actor = self._actor
        if actor is None or self.subject.id is None:
            self._apply(self.state.model_copy(update={"liked": False, "loading": False}))
            return
        generation = self._toggle_generation
        self._apply(self.state.model_copy(update={"loading": True}))
        loaded = await self.ledger.load(self.subject, actor, self.state)
        if actor != self._actor:
            # The actor changed while this read was in flight; the newer load wins.
            return
        if self.state.pending or generation != self._toggle_generation:
            # A toggle ran during the read and owns 'liked'.
            self._apply(self.state.model_copy(update={"loading": False}))
            return
        self._apply(self.state.model_copy(update={"liked": loaded.liked, "loading": False}))

    async def settled(self) -> None:
        """Wait for a reload triggered by a session change, if one is running."""
        if self._load_task is not None:
            await self._load_task

    async def toggle(self) -> bool | ToggleRejection:
        """Handle a like-button click. Returns the new liked value or why it was refused."""
        before = self.state
        if before.pending:
            return ToggleRejection.ALREADY_PENDING

        actor = self._actor
        self._toggle_generation += 1
        self._apply(before.model_copy(update={"pending": True}))
        result = await self.ledger.toggle(self.subject, actor, before)

        if actor != self._actor:
            # The view now belongs to another actor: keep the subject's count, reload 'liked'.
            self._apply(self.state.model_copy(update={"count": result.state.count, "pending": False}))
            if not self.disposed:
                await self.refresh()
        else:
            self._apply(result.state)

        if result.rejection is not None:
            return result.rejection
        return result.state.liked

    def dispose(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self.disposed = True

    def _apply(self, state: ReactionState) -> None:
        if self.disposed:
            logger.debug(f"Dropping state update for disposed tracker on {self.subject.kind}:{self.subject.id}")
            return
        self.state = state
