# core/session.py
"""Explicit session context shared by the services of one client session.

The identity itself is issued by an external auth provider; this module only
tracks which identity is current and tells interested parties when it changes.
"""
import logging
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional

from core.errors import AuthenticationRequired
from core.sa.repositories.profile import ProfileRepository

logger = logging.getLogger(__name__)

IdentityListener = Callable[[Optional["Identity"]], None]


@dataclass(frozen=True)
class Identity:
    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None

    @property
    def display_name(self) -> Optional[str]:
        if self.full_name:
            return self.full_name
        if self.email:
            return self.email.split("@")[0]
        return None


class SessionContext:
    def __init__(self, identity: Optional[Identity] = None):
        self._identity = identity
        self._listeners: List[IdentityListener] = []
        self._lock = threading.Lock()

    def current_user(self) -> Optional[Identity]:
        return self._identity

    def require_user(self) -> Identity:
        if self._identity is None:
            raise AuthenticationRequired("Please sign in to continue")
        return self._identity

    def sign_in(self, identity: Identity) -> None:
        if self._identity == identity:
            return
        self._identity = identity
        logger.info("Signed in as %s", identity.id)
        self._notify(identity)

    def sign_out(self) -> None:
        if self._identity is None:
            return
        logger.info("Signed out %s", self._identity.id)
        self._identity = None
        self._notify(None)

    def subscribe(self, listener: IdentityListener) -> Callable[[], None]:
        """Register for identity changes; returns the matching unsubscribe."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, identity: Optional[Identity]) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(identity)
            except Exception:
                logger.exception("Session listener failed")


def ensure_profile_on_sign_in(context: SessionContext, database) -> Callable[[], None]:
    """Create the profile row for each identity that signs in on ``context``."""
    def on_change(identity: Optional[Identity]) -> None:
        if identity is None:
            return
        with database.get_db() as session:
            ProfileRepository(session).ensure_profile(identity)

    unsubscribe = context.subscribe(on_change)
    if context.current_user() is not None:
        on_change(context.current_user())
    return unsubscribe
