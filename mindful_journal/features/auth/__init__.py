"""Authentication against the remote backend."""

from mindful_journal.features.auth.backend import (
    AuthBackend,
    AuthSubscription,
    SupabaseAuthBackend,
)
from mindful_journal.features.auth.models import AuthEvent, SignedIn, SignedOut, User

__all__ = [
    "AuthBackend",
    "AuthSubscription",
    "SupabaseAuthBackend",
    "AuthEvent",
    "SignedIn",
    "SignedOut",
    "User",
]
