"""
Session provider.

Answers "who is signed in right now" for the mutation services. Services only
call ``get_current_session()`` synchronously before a write; ``subscribe``
exists for long-lived consumers that want sign-in/sign-out pushes and
returns a handle to cancel the subscription.
"""
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.jwt_handler import get_token_user_id
from app.services.auth.user_service import UserService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionIdentity:
    user_id: int
    email: str


SessionListener = Callable[[Optional[SessionIdentity]], None]


class Subscription:
    """Handle returned by ``SessionProvider.subscribe``"""

    def __init__(self, provider: "SessionProvider", listener: SessionListener):
        self._provider = provider
        self._listener = listener
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self._provider._remove_listener(self._listener)
            self.active = False


class SessionProvider:
    def __init__(self, identity: Optional[SessionIdentity] = None):
        self._identity = identity
        self._listeners: List[SessionListener] = []

    def get_current_session(self) -> Optional[SessionIdentity]:
        return self._identity

    def subscribe(self, listener: SessionListener) -> Subscription:
        self._listeners.append(listener)
        return Subscription(self, listener)

    def sign_in(self, identity: SessionIdentity) -> None:
        self._identity = identity
        self._notify()

    def sign_out(self) -> None:
        self._identity = None
        self._notify()

    def _remove_listener(self, listener: SessionListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._identity)
            except Exception as e:
                logger.error(f"Session listener failed: {str(e)}")


class BearerSessionProvider(SessionProvider):
    """Session resolved from a bearer access token for the current request"""

    @classmethod
    async def from_token(cls, session: AsyncSession, token: Optional[str]) -> "BearerSessionProvider":
        if not token:
            return cls()

        user_id = get_token_user_id(token)
        if user_id is None:
            logger.info("Rejected bearer token: invalid or expired")
            return cls()

        user = await UserService(session).get_user(user_id)
        if user is None or not user.is_active:
            return cls()
        return cls(SessionIdentity(user_id=user.id, email=user.email))
