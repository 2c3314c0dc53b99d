"""User and auth-state event types."""

from dataclasses import dataclass
from typing import Any, Union

from pydantic import BaseModel


class User(BaseModel):
    """The signed-in account as the journal sees it."""
    id: str
    email: str
    name: str

    @classmethod
    def from_backend(cls, backend_user: Any) -> "User":
        """
        Map a Supabase user object.

        The display name comes from the ``name`` profile metadata key, then
        the email local-part, then "User".
        """
        email = getattr(backend_user, "email", None) or ""
        metadata = getattr(backend_user, "user_metadata", None) or {}
        name = metadata.get("name") or email.split("@")[0] or "User"
        return cls(id=str(backend_user.id), email=email, name=name)


@dataclass(frozen=True)
class SignedIn:
    user_id: str


@dataclass(frozen=True)
class SignedOut:
    pass


AuthEvent = Union[SignedIn, SignedOut]

