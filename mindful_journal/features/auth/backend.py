"""
Auth backend interface and its Supabase implementation.

The session sync and the journal controller only talk to ``AuthBackend``.
``SupabaseAuthBackend`` adapts supabase-py's async auth client to it and
turns its ``(event, session)`` callbacks into ``SignedIn`` / ``SignedOut``
events; every other event kind (token refresh, user update, ...) is dropped
at this boundary.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from supabase import AuthError

from mindful_journal.core.logging_utils import mask_email, sanitize_for_logging
from mindful_journal.features.auth.models import AuthEvent, SignedIn, SignedOut, User
from mindful_journal.shared.errors import AuthenticationError, EmailConfirmationRequired

logger = logging.getLogger("MindfulJournal.Auth")

AuthEventHandler = Callable[[AuthEvent], None]


class AuthSubscription:
    """Handle for a registered auth event handler."""

    def __init__(self, unsubscribe: Callable[[], None]):
        self._unsubscribe = unsubscribe
        self.active = True

    def unsubscribe(self) -> None:
        """Stop delivering events. Safe to call more than once."""
        if not self.active:
            return
        self.active = False
        self._unsubscribe()


class AuthBackend(ABC):
    """
    Remote authentication capability.

    Implementations must:
    - return None from get_session_user when there is no usable session
    - raise AuthenticationError from sign_in / sign_up on rejected credentials
    - call subscribed handlers on the event loop thread
    """

    @abstractmethod
    async def get_session_user(self) -> Optional[User]:
        ...

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> User:
        ...

    @abstractmethod
    async def sign_up(self, email: str, password: str, name: str) -> User:
        ...

    @abstractmethod
    async def sign_out(self) -> None:
        ...

    @abstractmethod
    def subscribe(self, handler: AuthEventHandler) -> AuthSubscription:
        ...


def translate_auth_event(event: str, session: Any) -> Optional[AuthEvent]:
    """Map a Supabase auth change to a journal auth event, or None to ignore it."""
    if event == "SIGNED_IN":
        user = getattr(session, "user", None)
        if user is None:
            return None
        return SignedIn(user_id=str(user.id))
    if event == "SIGNED_OUT":
        return SignedOut()
    return None


class SupabaseAuthBackend(AuthBackend):
    """AuthBackend over supabase-py's async auth client."""

    def __init__(self, client):
        """Initialize with an async Supabase client."""
        self.auth = client.auth

    async def get_session_user(self) -> Optional[User]:
        try:
            session = await self.auth.get_session()
        except Exception as e:
            logger.error(f"Error fetching session: {sanitize_for_logging(e)}")
            return None

        if not session or not getattr(session, "user", None):
            return None
        return User.from_backend(session.user)

    async def sign_in(self, email: str, password: str) -> User:
        if not password:
            raise AuthenticationError("Password is required")

        try:
            response = await self.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthError as e:
            logger.warning(f"Sign-in rejected for {mask_email(email)}: {sanitize_for_logging(e)}")
            raise AuthenticationError(str(e) or None) from e

        if not response.user:
            raise AuthenticationError("Login failed")

        logger.info(f"Signed in {mask_email(email)}")
        return User.from_backend(response.user)

    async def sign_up(self, email: str, password: str, name: str) -> User:
        if not password:
            raise AuthenticationError("Password is required")

        try:
            response = await self.auth.sign_up(
                {
                    "email": email,
                    "password": password,
                    "options": {"data": {"name": name}},
                }
            )
        except AuthError as e:
            logger.warning(f"Sign-up rejected for {mask_email(email)}: {sanitize_for_logging(e)}")
            raise AuthenticationError(str(e) or "Signup failed") from e

        # A user without a session means email confirmation is pending
        if response.user and not response.session:
            logger.info(f"Sign-up for {mask_email(email)} awaits email confirmation")
            raise EmailConfirmationRequired()

        if not response.user:
            raise AuthenticationError("Signup failed")

        logger.info(f"Signed up {mask_email(email)}")
        return User.from_backend(response.user)

    async def sign_out(self) -> None:
        await self.auth.sign_out()
        logger.info("Signed out")

    def subscribe(self, handler: AuthEventHandler) -> AuthSubscription:
        def _listener(event: str, session: Any) -> None:
            translated = translate_auth_event(event, session)
            if translated is None:
                logger.debug(f"Ignoring auth event {event}")
                return
            handler(translated)

        subscription = self.auth.on_auth_state_change(_listener)
        return AuthSubscription(subscription.unsubscribe)
