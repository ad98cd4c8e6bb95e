# session state and the keyed store that scopes it per client
import logging
import threading
import uuid
from collections import OrderedDict
from typing import Optional

from .chat_log import ChatLog
from .errors import SessionNotFoundError

logger = logging.getLogger(__name__)


class SessionState:
    """Currently loaded document text plus the chat log built on top of it"""

    def __init__(self, session_id: str):
        self.session_id = session_id
        # none means no document has been uploaded yet; "" is a pdf with no text
        self.document_text: Optional[str] = None
        self.log = ChatLog()
        # serialises reset, upsert and set_expansion for this session only
        self.lock = threading.RLock()

    # replace the document and drop every previous topic
    def reset(self, document_text: str):
        with self.lock:
            self.document_text = document_text
            self.log.clear()
        logger.info(f"Session {self.session_id} reset with {len(document_text)} characters of text")

    def has_document(self) -> bool:
        return self.document_text is not None


class SessionStore:
    """Thread-safe map of session id to session state.

    When ``max_sessions`` is set, creating a session beyond the cap evicts the
    least recently used one.
    """

    def __init__(self, max_sessions: Optional[int] = None):
        self._sessions: "OrderedDict[str, SessionState]" = OrderedDict()
        self._lock = threading.Lock()
        self.max_sessions = max_sessions

    # create an empty session under a fresh opaque id
    def create(self) -> SessionState:
        session = SessionState(uuid.uuid4().hex)
        with self._lock:
            self._sessions[session.session_id] = session
            evicted = []
            while self.max_sessions and len(self._sessions) > self.max_sessions:
                evicted.append(self._sessions.popitem(last=False)[0])
        logger.info(f"Created session {session.session_id}")
        for session_id in evicted:
            logger.info(f"Evicted least recently used session {session_id}")
        return session

    # look up a session without raising, marking it as recently used
    def find(self, session_id: Optional[str]) -> Optional[SessionState]:
        if not session_id:
            return None
        with self._lock:
            session = self._sessions.get(session_id)
            if session is not None:
                self._sessions.move_to_end(session_id)
        return session

    def get(self, session_id: str) -> SessionState:
        session = self.find(session_id)
        if session is None:
            raise SessionNotFoundError(f"Unknown session: {session_id}")
        return session

    def get_or_create(self, session_id: Optional[str] = None) -> SessionState:
        if session_id:
            return self.get(session_id)
        return self.create()

    def discard(self, session_id: str) -> bool:
        with self._lock:
            removed = self._sessions.pop(session_id, None)
        if removed is not None:
            logger.info(f"Discarded session {session_id}")
        return removed is not None

    def __contains__(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
