"""
Reaction ledger.

'ReactionLedger' is the single entry point for reading and changing likes. It
talks to the 'RemoteStore' through the scope helpers in 'data_models', so every
query and command is narrowed by the subject kind, the kind's identity column
and the actor.

Read and write paths fail differently:

    'load', 'liked_items', 'count_for' - best effort. Remote errors are logged
                                         and degrade to "not liked" / empty / 0.
    'toggle', 'remove'                 - authoritative. A failed write leaves
                                         the caller's state as it was and posts
                                         a single notice; nothing is retried,
                                         because replaying an insert or delete
                                         against a row that may already have
                                         changed is not safe.

Only one toggle per (kind, subject id, actor) may be in flight at a time. The
ledger tracks in-flight keys itself so that two views, or a double click,
cannot interleave two writes for the same pair. Toggles on different subjects
do not wait for each other.
"""

from loguru import logger

from storefront_toolkit.notifications.base import LoggingNotifier, Notifier
from storefront_toolkit.reactions.data_models import (
    Reaction,
    ReactionState,
    ReactionSubject,
    SubjectKind,
    ToggleRejection,
    ToggleResult,
    identity_column,
    insert_payload,
    scope_filters,
)
from storefront_toolkit.remote_store.base import RemoteStore

DEFAULT_TABLE = "likes"
DEFAULT_LIKED_ITEMS_LIMIT = 8

LOGIN_REQUIRED_NOTICE = "Please log in to like items."
TOGGLE_FAILED_NOTICE = "Something went wrong while updating your like."
REMOVE_FAILED_NOTICE = "Could not remove this item from your likes."

_InFlightKey = tuple[SubjectKind, str, str]


class ReactionLedger:
    def __init__(
        self,
        store: RemoteStore,
        notifier: Notifier | None = None,
        table: str = DEFAULT_TABLE,
    ) -> None:
        self.store = store
        self.notifier = notifier or LoggingNotifier()
        self.table = table
        self._in_flight: set[_InFlightKey] = set()

    def is_pending(self, subject: ReactionSubject, actor: str | None) -> bool:
        if actor is None or subject.id is None:
            return False
        return (subject.kind, subject.id, actor) in self._in_flight

    async def load(self, subject: ReactionSubject, actor: str | None, state: ReactionState) -> ReactionState:
        """Refresh 'state.liked' from the store; 'count' is carried through unchanged."""
        if actor is None or subject.id is None:
            return state.model_copy(update={"liked": False, "loading": False})

        filters = scope_filters(subject, actor)
        logger.debug(f"Loading reaction state for {filters}")
        try:
            result = await self.store.select(self.table, filters, order_by="created_at", limit=1)
            result.raise_for_error(self.table)
        except Exception as exc:
            # Read errors are indistinguishable from "no reaction" for the caller.
            logger.warning(f"Reaction lookup degraded to not-liked for {subject.kind}:{subject.id}: {exc}")
            return state.model_copy(update={"liked": False, "loading": False})

        return state.model_copy(update={"liked": result.first() is not None, "loading": False})

    async def toggle(self, subject: ReactionSubject, actor: str | None, state: ReactionState) -> ToggleResult:
        """Flip the actor's reaction on 'subject' and return the state to render next."""
        if actor is None:
            logger.debug(f"Rejected toggle on {subject.kind}:{subject.id}: no actor")
            self.notifier.notify(LOGIN_REQUIRED_NOTICE)
            return ToggleResult(state=state, rejection=ToggleRejection.NOT_AUTHENTICATED)

        if subject.id is None:
            logger.error(f"Rejected toggle on {subject.kind}: subject id is missing")
            return ToggleResult(state=state, rejection=ToggleRejection.INVALID_SUBJECT)

        key: _InFlightKey = (subject.kind, subject.id, actor)
        if state.pending or key in self._in_flight:
            logger.debug(f"Rejected toggle on {subject.kind}:{subject.id}: already pending")
            return ToggleResult(state=state, rejection=ToggleRejection.ALREADY_PENDING)

        self._in_flight.add(key)
        try:
            if state.liked:
                result = await self.store.delete(self.table, scope_filters(subject, actor))
            else:
                result = await self.store.insert(self.table, insert_payload(subject, actor))
            result.raise_for_error(self.table)
        except Exception as exc:
            logger.error(f"Toggle on {subject.kind}:{subject.id} for {actor} failed, keeping previous state: {exc}")
            self.notifier.notify(TOGGLE_FAILED_NOTICE)
            return ToggleResult(
                state=state.model_copy(update={"pending": False}),
                rejection=ToggleRejection.TOGGLE_FAILED,
            )
        finally:
            self._in_flight.discard(key)

        if state.liked:
            new_state = state.model_copy(update={"liked": False, "count": max(0, state.count - 1), "pending": False})
        else:
            new_state = state.model_copy(update={"liked": True, "count": state.count + 1, "pending": False})
        logger.info(f"{actor} {'liked' if new_state.liked else 'unliked'} {subject.kind}:{subject.id}")
        return ToggleResult(state=new_state, liked=new_state.liked)

    async def liked_items(
        self, actor: str | None, kind: SubjectKind, limit: int | None = DEFAULT_LIKED_ITEMS_LIMIT
    ) -> list[Reaction]:
        """The actor's reactions of one kind, newest first."""
        if actor is None:
            return []
        try:
            result = await self.store.select(
                self.table,
                {"target_type": str(kind), "uid": actor},
                order_by="created_at",
                descending=True,
                limit=limit,
            )
            result.raise_for_error(self.table)
            return [Reaction.model_validate(row) for row in result.data]
        except Exception as exc:
            logger.warning(f"Liked {kind} list for {actor} degraded to empty: {exc}")
            return []

    async def remove(self, reaction_id: str) -> bool:
        """Delete one reaction row by id. Returns False when no such row existed."""
        try:
            result = await self.store.delete(self.table, {"lid": reaction_id})
            result.raise_for_error(self.table)
        except Exception:
            logger.error(f"Removing reaction {reaction_id} failed")
            self.notifier.notify(REMOVE_FAILED_NOTICE)
            raise
        return bool(result.data)

    async def count_for(self, subject: ReactionSubject) -> int:
        """Number of reactions recorded for 'subject' across all actors."""
        if subject.id is None:
            return 0
        filters = {"target_type": str(subject.kind), identity_column(subject.kind): subject.id}
        try:
            result = await self.store.select(self.table, filters)
            result.raise_for_error(self.table)
        except Exception as exc:
            logger.warning(f"Reaction count for {subject.kind}:{subject.id} degraded to 0: {exc}")
            return 0
        return len(result.data)
