"""Per-session assistants for the API server.

Each ``session_id`` gets its own :class:`AgentExecutor` with its own memory,
created on first use.  The least recently used sessions are dropped once
``max_sessions`` is exceeded, so an abandoned conversation does not live
forever in process memory.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from collections.abc import Callable

from chainkit.agents import AgentExecutor
from chainkit.schemas.memory import BaseChatMessageHistory, SimpleMemory

logger = logging.getLogger(__name__)

DEFAULT_MAX_SESSIONS = 1000

AssistantFactory = Callable[[BaseChatMessageHistory], AgentExecutor]


class SessionStore:
    def __init__(self, factory: AssistantFactory, max_sessions: int = DEFAULT_MAX_SESSIONS) -> None:
        self._factory = factory
        self._max_sessions = max_sessions
        self._sessions: OrderedDict[str, AgentExecutor] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, session_id: str) -> AgentExecutor:
        """Return the session's executor, creating it on first use."""
        with self._lock:
            executor = self._sessions.get(session_id)
            if executor is not None:
                self._sessions.move_to_end(session_id)
                return executor

            executor = self._factory(SimpleMemory())
            self._sessions[session_id] = executor
            logger.info("Started new session: %s", session_id)

            while len(self._sessions) > self._max_sessions:
                evicted, _ = self._sessions.popitem(last=False)
                logger.debug("Evicted session %s", evicted)
            return executor

    def reset(self, session_id: str) -> bool:
        """Forget a session.  ``True`` if one was held, whatever its memory holds."""
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions
