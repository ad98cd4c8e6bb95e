# llm service using an openai-compatible chat completions api
import logging
import threading
from typing import Optional

import requests
from pydantic import ValidationError as SchemaError

from .config import Settings, get_settings
from .models import ChatCompletionRequest, ChatCompletionResponse, ChatMessage

logger = logging.getLogger(__name__)


# service for turning a prompt into text, or none when the api gives nothing usable
class OpenAIChatService:
    """Completion provider backed by the chat completions endpoint"""

    # initialize service from settings; credentials come from the environment
    def __init__(self, settings: Optional[Settings] = None, session: Optional[requests.Session] = None):
        settings = settings or get_settings()
        self.api_base = settings.openai_api_base
        self.model = settings.openai_model
        self.max_tokens = settings.openai_max_tokens
        self.timeout = settings.openai_timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Authorization": f"Bearer {settings.openai_api_key}"})

        if not settings.openai_api_key:
            logger.warning("OPENAI_API_KEY is not set, completion requests will be rejected")

    # send a single user-role prompt and return the first choice's text
    def complete(self, prompt: str, max_tokens: Optional[int] = None) -> Optional[str]:
        """Generate text for a prompt; any failure is reported as no text"""
        payload = ChatCompletionRequest(
            model=self.model,
            messages=[ChatMessage(role="user", content=prompt)],
            max_tokens=max_tokens or self.max_tokens,
        )

        logger.info(f"Calling chat completions with model {self.model} ({len(prompt)} prompt characters)")
        try:
            response = self.session.post(
                f"{self.api_base}/chat/completions",
                json=payload.model_dump(),
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout:
            logger.warning(f"Chat completions request timed out after {self.timeout}s")
            return None
        except requests.exceptions.RequestException as e:
            logger.warning(f"Chat completions request failed: {str(e)}")
            return None

        if not response.ok:
            logger.warning(f"Chat completions API error: {response.status_code} - {response.text[:200]}")
            return None

        return self._extract_text(response)

    # parse the body into the typed response shape; mismatches mean no text
    def _extract_text(self, response: requests.Response) -> Optional[str]:
        try:
            parsed = ChatCompletionResponse.model_validate(response.json())
        except (ValueError, SchemaError) as e:
            logger.warning(f"Unexpected chat completions response: {str(e)}")
            return None
        text = parsed.first_text()
        if text is None:
            logger.warning("Chat completions response contained no text")
        return text

    # test if the api connection is working
    def test_connection(self) -> bool:
        """Test if the completion service answers"""
        response = self.complete("Hello! Please respond with just 'OK' to confirm you're working.", max_tokens=10)
        if response is None:
            logger.error("✗ LLM test failed: no response")
            return False
        logger.info(f"✓ LLM test successful. Response: {response}")
        return True


# global instance for singleton pattern
llm_service = None
_llm_service_lock = threading.Lock()


# get or create the global llm service instance
def get_llm_service() -> OpenAIChatService:
    """Get or create the global LLM service instance"""
    global llm_service
    if llm_service is None:
        with _llm_service_lock:
            if llm_service is None:
                llm_service = OpenAIChatService()
    return llm_service
