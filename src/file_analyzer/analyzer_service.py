# analyzer service orchestrates upload, grounded search, expansion and export per session
import logging
from typing import List, Optional

from .errors import (
    EmptyInputError, EmptyLogError, NoDocumentError,
    TopicNotSearchedError, UnsupportedTypeError,
)
from .export import render
from .models import ChatLogEntry
from .prompts import expand_prompt, search_prompt
from .session import SessionState, SessionStore

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
SEARCH_FALLBACK = "No relevant information found on this topic."
EXPAND_FALLBACK = "No additional information available on this topic."


class FileAnalyzerService:
    """Runs the four session use cases against an extractor and a completion provider.

    ``extractor`` needs ``extract_text(data: bytes) -> str`` and ``provider``
    needs ``complete(prompt: str) -> Optional[str]``. Each use case holds its
    session's lock from start to finish, so calls on one session are
    serialised while other sessions run concurrently.
    """

    def __init__(self, extractor, provider, store: Optional[SessionStore] = None):
        self.extractor = extractor
        self.provider = provider
        self.store = store if store is not None else SessionStore()

    # load a new document, creating a session or resetting the given one
    def upload(self, data: bytes, content_type: Optional[str], session_id: Optional[str] = None) -> SessionState:
        if content_type != PDF_CONTENT_TYPE:
            raise UnsupportedTypeError("Only PDF files are allowed.")
        if not data:
            raise EmptyInputError("Only PDF files are allowed.")

        # an unknown id fails before extraction; a new session is only made once the text is in hand
        existing = self.store.get(session_id) if session_id else None
        text = self.extractor.extract_text(data)
        session = existing if existing is not None else self.store.create()

        with session.lock:
            had_topics = len(session.log)
            session.reset(text)
        if had_topics:
            logger.info(f"Upload discarded {had_topics} topics from session {session.session_id}")
        return session

    # answer a topic strictly from the loaded document and record it
    def search(self, session_id: Optional[str], topic: str) -> str:
        # a missing or unknown session has no document loaded
        session = self.store.find(session_id)
        if session is None:
            raise NoDocumentError("Please upload a PDF file first.")

        with session.lock:
            if not session.has_document():
                raise NoDocumentError("Please upload a PDF file first.")
            if not topic or not topic.strip():
                raise EmptyInputError("Please enter a topic.")

            logger.info(f"Search in session {session_id} for topic: {topic}")
            answer = self.provider.complete(search_prompt(topic, session.document_text))
            if answer is None:
                logger.warning(f"No answer for topic '{topic}', recording fallback")
                answer = SEARCH_FALLBACK

            session.log.upsert(topic, answer)
            return answer

    # elaborate on a topic already searched, without grounding in the document
    def expand(self, session_id: Optional[str], topic: str) -> str:
        session = self.store.find(session_id)
        if session is None:
            raise TopicNotSearchedError("The topic has not been searched in the current session.")

        with session.lock:
            if session.log.find(topic) is None:
                raise TopicNotSearchedError("The topic has not been searched in the current session.")

            logger.info(f"Expand in session {session_id} for topic: {topic}")
            expansion = self.provider.complete(expand_prompt(topic))
            if expansion is None:
                logger.warning(f"No expansion for topic '{topic}', recording fallback")
                expansion = EXPAND_FALLBACK

            session.log.set_expansion(topic, expansion)
            return expansion

    def export(self, session_id: Optional[str]) -> bytes:
        session = self.store.find(session_id)
        if session is None:
            raise EmptyLogError("No data available for export.")
        with session.lock:
            return render(session.log)

    def history(self, session_id: Optional[str]) -> List[ChatLogEntry]:
        session = self.store.find(session_id)
        if session is None:
            return []
        with session.lock:
            return session.log.entries()
