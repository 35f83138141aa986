from storefront_toolkit.guard.authorization import (
    AdmissionDecision,
    AdmissionStatus,
    AuthorizationGuard,
    Callbacks,
    DenialReason,
    denial_notice,
    is_granted,
)
from storefront_toolkit.guard.binding import GuardBinding

__all__ = [
    "AdmissionDecision",
    "AdmissionStatus",
    "AuthorizationGuard",
    "Callbacks",
    "DenialReason",
    "GuardBinding",
    "denial_notice",
    "is_granted",
]
