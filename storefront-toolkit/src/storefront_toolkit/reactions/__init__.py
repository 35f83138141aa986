"""
Like/unlike handling for products and brands.

    from storefront_toolkit.reactions import ReactionLedger, ReactionSubject, ReactionTracker
"""

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
from storefront_toolkit.reactions.ledger import ReactionLedger
from storefront_toolkit.reactions.tracker import ReactionTracker

__all__ = [
    "Reaction",
    "ReactionLedger",
    "ReactionState",
    "ReactionSubject",
    "ReactionTracker",
    "SubjectKind",
    "ToggleRejection",
    "ToggleResult",
    "identity_column",
    "insert_payload",
    "scope_filters",
]
