# ordered per-topic record of grounded answers and expansions
from collections import OrderedDict
from typing import Iterator, List, Optional

from .errors import NotFoundError
from .models import ChatLogEntry


class ChatLog:
    """Ordered collection of chat log entries keyed by topic.

    Entries keep the order in which each topic was first searched. A topic
    appears at most once (exact, case-sensitive match); searching it again
    replaces the grounded answer in place and keeps its position and any
    expansion already recorded.
    """

    def __init__(self):
        self._entries: "OrderedDict[str, ChatLogEntry]" = OrderedDict()

    # insert a new topic at the end, or update the answer of an existing one
    def upsert(self, topic: str, grounded_answer: str) -> ChatLogEntry:
        entry = self._entries.get(topic)
        if entry is None:
            entry = ChatLogEntry(topic=topic, grounded_answer=grounded_answer)
            self._entries[topic] = entry
        else:
            entry.grounded_answer = grounded_answer
        return entry

    def find(self, topic: str) -> Optional[ChatLogEntry]:
        return self._entries.get(topic)

    # record the expansion for a topic that has already been searched
    def set_expansion(self, topic: str, text: str) -> ChatLogEntry:
        entry = self._entries.get(topic)
        if entry is None:
            raise NotFoundError(f"Topic '{topic}' is not in the chat log")
        entry.expansion = text
        return entry

    def clear(self):
        self._entries.clear()

    def is_empty(self) -> bool:
        return not self._entries

    def topics(self) -> List[str]:
        return list(self._entries.keys())

    # copies, so callers can read them after the session lock is released
    def entries(self) -> List[ChatLogEntry]:
        return [entry.model_copy() for entry in self._entries.values()]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ChatLogEntry]:
        return iter(list(self._entries.values()))
