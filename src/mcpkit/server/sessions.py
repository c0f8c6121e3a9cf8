"""In-memory session store populated by ``initialize``."""

from __future__ import annotations

import itertools
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from mcpkit.core.locks import ReadWriteLock

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    """Server-side record of one negotiated client connection."""

    session_id: str
    client_capabilities: dict[str, Any] = field(default_factory=dict)
    client_info: dict[str, Any] = field(default_factory=dict)
    protocol_version: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class SessionStore:
    """Maps session ids to :class:`Session` records.

    Ids look like ``session-<ns timestamp>-<counter>``: unique within the
    process, not meant to be unguessable. Sessions are kept until the
    process exits.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}
        self._lock = ReadWriteLock()
        self._counter = itertools.count(1)

    def create(
        self,
        client_capabilities: dict[str, Any] | None = None,
        client_info: dict[str, Any] | None = None,
        protocol_version: str = "",
    ) -> Session:
        """Mint a new session id and store the session under it."""
        with self._lock.write():
            session_id = f"session-{time.time_ns()}-{next(self._counter)}"
            session = Session(
                session_id=session_id,
                client_capabilities=dict(client_capabilities or {}),
                client_info=dict(client_info or {}),
                protocol_version=protocol_version,
            )
            self._sessions[session_id] = session
        logger.info("Created new session: %s", session_id)
        return session

    def get(self, session_id: str) -> Session | None:
        with self._lock.read():
            return self._sessions.get(session_id)

    def __contains__(self, session_id: object) -> bool:
        with self._lock.read():
            return session_id in self._sessions

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._sessions)
