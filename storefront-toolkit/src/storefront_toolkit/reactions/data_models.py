"""
Reaction data models and the subject dispatch table.

A reaction ("like") links an actor to exactly one subject, which is either a
product or a brand. Both kinds share the 'likes' table; each kind has its own
identity column ('pid' for products, 'bid' for brands) and every row populates
exactly one of them. '_SUBJECT_ID_COLUMNS' is the single place that knows this
mapping: queries, deletes and inserts are all derived from it, so adding a
subject kind means adding an enum member and one table entry.

'ReactionState' is the per-view, per-actor snapshot a detail page renders:
whether the actor likes the subject, how many likes it has, and whether a load
or toggle is currently in flight.
"""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class SubjectKind(StrEnum):
    PRODUCT = "product"
    BRAND = "brand"


_SUBJECT_ID_COLUMNS: dict[SubjectKind, str] = {
    SubjectKind.PRODUCT: "pid",
    SubjectKind.BRAND: "bid",
}

_missing = set(SubjectKind) - set(_SUBJECT_ID_COLUMNS)
if _missing:
    raise RuntimeError(f"Subject kinds without an identity column: {sorted(_missing)}")

if len(set(_SUBJECT_ID_COLUMNS.values())) != len(_SUBJECT_ID_COLUMNS):
    raise RuntimeError("Subject kinds must not share an identity column")


class ReactionSubject(BaseModel):
    """
    The product or brand a reaction targets.

    'id' may be None while a detail view is still waiting for its route
    parameter; 'ReactionLedger.toggle' rejects such subjects.
    """

    kind: SubjectKind
    id: str | None

    model_config = {"frozen": True}

    @classmethod
    def product(cls, product_id: str | None) -> "ReactionSubject":
        return cls(kind=SubjectKind.PRODUCT, id=product_id)

    @classmethod
    def brand(cls, brand_id: str | None) -> "ReactionSubject":
        return cls(kind=SubjectKind.BRAND, id=brand_id)


def identity_column(kind: SubjectKind) -> str:
    return _SUBJECT_ID_COLUMNS[SubjectKind(kind)]


def scope_filters(subject: ReactionSubject, actor: str) -> dict[str, Any]:
    """Predicate selecting the actor's reaction on 'subject' and nothing else."""
    return {
        "target_type": str(subject.kind),
        "uid": actor,
        identity_column(subject.kind): subject.id,
    }


def insert_payload(subject: ReactionSubject, actor: str) -> dict[str, Any]:
    """Row for a new reaction: the subject's identity column set, every other one null."""
    payload = scope_filters(subject, actor)
    for kind, column in _SUBJECT_ID_COLUMNS.items():
        if kind != subject.kind:
            payload[column] = None
    return payload


class Reaction(BaseModel):
    """A stored 'likes' row."""

    lid: str
    target_type: SubjectKind
    uid: str
    pid: str | None = None
    bid: str | None = None
    created_at: int

    @property
    def subject(self) -> ReactionSubject:
        return ReactionSubject(kind=self.target_type, id=getattr(self, identity_column(self.target_type)))


class ReactionState(BaseModel):
    """What a detail view shows for one (subject, actor) pair."""

    liked: bool = False
    count: int = Field(default=0, ge=0)
    pending: bool = False
    loading: bool = False

    model_config = {"frozen": True}


class ToggleRejection(StrEnum):
    NOT_AUTHENTICATED = "not-authenticated"
    INVALID_SUBJECT = "invalid-subject"
    ALREADY_PENDING = "already-pending"
    TOGGLE_FAILED = "toggle-failed"


class ToggleResult(BaseModel):
    """
    Outcome of 'ReactionLedger.toggle'.

    Exactly one of 'liked' (the new liked value) and 'rejection' is set.
    'state' is the state the caller should render next. Rejections hand back
    the pre-call 'liked' and 'count' unchanged.
    """

    state: ReactionState
    liked: bool | None = None
    rejection: ToggleRejection | None = None

    @property
    def ok(self) -> bool:
        return self.rejection is None
