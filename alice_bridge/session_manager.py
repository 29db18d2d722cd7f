import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

# 30 minutes idle, swept every 10 minutes
SESSION_TIMEOUT = 30 * 60
SWEEP_INTERVAL = 10 * 60


@dataclass
class Turn:
    role: str  # "user" | "assistant"
    content: str

    def as_message(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass
class Session:
    session_id: str
    history: List[Turn] = field(default_factory=list)
    last_activity: float = 0.0


class SessionStore:
    """session_id → rolling history, dropped once idle past the timeout.

    Only touched from the event loop, so there is no locking. A session swept
    while a request for it is in flight is recreated on the next request.
    """

    def __init__(
        self,
        ttl_seconds: float = SESSION_TIMEOUT,
        max_history: int = 10,
        clock: Callable[[], float] = time.time,
    ):
        self.ttl_seconds = ttl_seconds
        self.max_history = max_history
        self._clock = clock
        self._sessions: Dict[str, Session] = {}

    def get_or_create(self, session_id: str, is_new: bool = False) -> Session:
        session = self._sessions.get(session_id)
        if is_new or session is None:
            session = Session(session_id=session_id)
            self._sessions[session_id] = session
        self.touch(session)
        return session

    def touch(self, session: Session):
        session.last_activity = self._clock()

    def append(self, session: Session, turn: Turn):
        session.history.append(turn)
        if len(session.history) > self.max_history:
            del session.history[: -self.max_history]

    def sweep(self, now: Optional[float] = None) -> int:
        if now is None:
            now = self._clock()
        expired = [
            session_id
            for session_id, session in list(self._sessions.items())
            if now - session.last_activity > self.ttl_seconds
        ]
        for session_id in expired:
            self._sessions.pop(session_id, None)
        return len(expired)

    def get(self, session_id: str) -> Optional[Session]:
        return self._sessions.get(session_id)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions


async def clean_old_sessions(store: SessionStore, interval: float = SWEEP_INTERVAL):
    while True:
        await asyncio.sleep(interval)
        removed = store.sweep()
        if removed:
            logger.info("🗑️  %d idle session(s) removed, %d active", removed, len(store))
