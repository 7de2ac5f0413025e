"""
Per-request authentication session state.

`AuthSessionManager` owns one `SessionState` and moves it through a fixed
lifecycle: start() puts it in loading, auth events settle it, close() tears it
down. Listeners are notified after every change.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class AuthEvent(str, Enum):
    SIGNED_IN = "SIGNED_IN"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    USER_UPDATED = "USER_UPDATED"
    SIGNED_OUT = "SIGNED_OUT"


@dataclass(frozen=True)
class SessionState:
    user: Optional[Any] = None
    loading: bool = True
    error: Optional[Exception] = None


Listener = Callable[[SessionState], None]


class AuthSessionManager:
    """Holds the session state for one caller and notifies subscribers of changes"""

    def __init__(self):
        self._state = SessionState()
        self._listeners: list[Listener] = []
        self._closed = False

    @property
    def state(self) -> SessionState:
        return self._state

    def start(self) -> SessionState:
        if self._closed:
            raise RuntimeError("Session manager is closed")
        self._set(SessionState(user=None, loading=True, error=None))
        return self._state

    def handle_event(self, event: AuthEvent, user: Optional[Any] = None) -> SessionState:
        """Apply an auth event; events that carry no user leave the caller signed out"""
        if self._closed:
            logger.warning(f"⚠️ Ignoring {event} on a closed session")
            return self._state

        event = AuthEvent(event)
        if event == AuthEvent.SIGNED_OUT or user is None:
            self._set(SessionState(user=None, loading=False, error=None))
        else:
            self._set(SessionState(user=user, loading=False, error=None))
        return self._state

    def fail(self, error: Exception) -> SessionState:
        """Record a failure while resolving the session; loading always ends"""
        if self._closed:
            logger.warning(f"⚠️ Ignoring failure on a closed session: {error}")
            return self._state

        logger.error(f"❌ Session resolution failed: {error}")
        self._set(replace(self._state, loading=False, error=error))
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def close(self) -> None:
        self._listeners.clear()
        self._closed = True

    def _set(self, state: SessionState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)
