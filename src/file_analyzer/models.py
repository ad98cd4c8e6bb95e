# pydantic models for data validation and structure
from pydantic import BaseModel
from typing import List, Optional


# one topic in the session: the grounded answer plus an optional ai expansion
class ChatLogEntry(BaseModel):
    topic: str
    grounded_answer: str
    expansion: Optional[str] = None


# response model for a successful upload
class UploadResponse(BaseModel):
    message: str
    session_id: str


# response model for search and expand
class TopicResult(BaseModel):
    result: str


# response model for the discussion history
class HistoryResponse(BaseModel):
    session_id: Optional[str] = None
    entries: List[ChatLogEntry] = []


# request body sent to the chat completions endpoint
class ChatMessage(BaseModel):
    role: str
    content: str


class ChatCompletionRequest(BaseModel):
    model: str
    messages: List[ChatMessage]
    max_tokens: int = 500


# typed view of the chat completions response, only the fields we read
class ChoiceMessage(BaseModel):
    role: Optional[str] = None
    content: Optional[str] = None


class Choice(BaseModel):
    index: int = 0
    message: Optional[ChoiceMessage] = None


class ChatCompletionResponse(BaseModel):
    choices: List[Choice] = []

    # text of the first choice, or none when the response carries no usable text
    def first_text(self) -> Optional[str]:
        if not self.choices or self.choices[0].message is None:
            return None
        content = self.choices[0].message.content
        if content is None or not content.strip():
            return None
        return content
