"""Identity provider adapters."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from photoshare.domain.models import User

logger = logging.getLogger(__name__)

IdentityListener = Callable[[User | None], None]
Unsubscribe = Callable[[], None]


class AuthSession(Protocol):
    """Interface for the external identity provider."""

    def current(self) -> User | None:
        """Return the signed-in user, if any."""

    def subscribe(self, on_change: IdentityListener) -> Unsubscribe:
        """Register a listener for identity changes and return its unsubscriber."""


@dataclass
class InMemoryAuthSession(AuthSession):
    """Identity provider that holds the signed-in user in memory.

    Listeners receive the current identity on subscription and then every
    change in the order it happened.
    """

    user: User | None = None
    _listeners: list[IdentityListener] = field(default_factory=list)

    def current(self) -> User | None:
        return self.user

    def subscribe(self, on_change: IdentityListener) -> Unsubscribe:
        self._listeners.append(on_change)
        on_change(self.user)

        def unsubscribe() -> None:
            if on_change in self._listeners:
                self._listeners.remove(on_change)

        return unsubscribe

    def sign_in(self, user: User) -> None:
        self._set(user)

    def sign_out(self) -> None:
        self._set(None)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def _set(self, user: User | None) -> None:
        self.user = user
        logger.debug("Identity changed: %s", user.uid if user else None)
        for listener in list(self._listeners):
            listener(user)
