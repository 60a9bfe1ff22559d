from __future__ import annotations

import threading
import time
import uuid
from collections import OrderedDict
from typing import Callable, Optional, Tuple

import assistant_config as config
from conversation_context import ConversationContext
from exception_logger import exception_logger


class SessionManager:
    """
    Keeps one ConversationContext per chat session.

    Turns of the same session are serialized through a per-session lock so a
    context never sees two writers at once. Sessions idle for longer than
    ``idle_timeout`` seconds are dropped, and when more than ``max_sessions``
    are open the least recently used one is evicted.
    """

    def __init__(
        self,
        max_sessions: int = config.SESSION_LIMIT,
        idle_timeout: float = config.SESSION_IDLE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_sessions = max(1, max_sessions)
        self.idle_timeout = idle_timeout
        self._clock = clock
        # session id -> (context, turn lock, last used), least recently used first
        self._sessions: "OrderedDict[str, Tuple[ConversationContext, threading.Lock, float]]" = OrderedDict()
        self._lock = threading.Lock()

    def open(self, session_id: Optional[str] = None) -> Tuple[str, ConversationContext, threading.Lock]:
        """Return the session for ``session_id``, creating it (and an id) if needed."""
        with self._lock:
            now = self._clock()
            self._sweep(now)
            if not session_id:
                session_id = uuid.uuid4().hex
            if session_id in self._sessions:
                context, turn_lock, _ = self._sessions.pop(session_id)
            else:
                context, turn_lock = ConversationContext(), threading.Lock()
            self._sessions[session_id] = (context, turn_lock, now)
            while len(self._sessions) > self.max_sessions:
                evicted, _ = self._sessions.popitem(last=False)
                exception_logger.log_error(
                    "Session limit reached, evicting least recently used session", "server",
                    context=evicted,
                )
            return session_id, context, turn_lock

    def get(self, session_id: str) -> Optional[Tuple[ConversationContext, threading.Lock]]:
        with self._lock:
            now = self._clock()
            self._sweep(now)
            entry = self._sessions.pop(session_id, None)
            if entry is None:
                return None
            context, turn_lock, _ = entry
            self._sessions[session_id] = (context, turn_lock, now)
            return context, turn_lock

    def close(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def count(self) -> int:
        with self._lock:
            self._sweep(self._clock())
            return len(self._sessions)

    def _sweep(self, now: float):
        # Oldest entries come first, so stop at the first one still fresh
        while self._sessions:
            session_id, (_, _, last_used) = next(iter(self._sessions.items()))
            if now - last_used <= self.idle_timeout:
                break
            del self._sessions[session_id]
