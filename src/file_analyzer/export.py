# renders a chat log into the plain-text export file
from typing import List

from .chat_log import ChatLog
from .errors import EmptyLogError

EXPORT_FILENAME = "ChatLogExport.txt"
EXPORT_MEDIA_TYPE = "text/plain"
SEPARATOR = "-" * 50
NO_EXPANSION = "N/A"


# one block per topic, each header followed by exactly one blank line
def render_entry(topic: str, grounded_answer: str, expansion=None) -> List[str]:
    return [
        f"Topic: {topic}",
        "",
        "Information from notes:",
        "",
        grounded_answer,
        "",
        "AI Expanded Notes:",
        "",
        expansion if expansion is not None else NO_EXPANSION,
        "",
        SEPARATOR,
    ]


def render(log: ChatLog) -> bytes:
    """Render the chat log as utf-8 text in first-searched order"""
    if log.is_empty():
        raise EmptyLogError("No data available for export.")

    lines = []
    for entry in log:
        lines.extend(render_entry(entry.topic, entry.grounded_answer, entry.expansion))

    # every line, including the last separator, ends with a newline
    return "".join(line + "\n" for line in lines).encode("utf-8")
