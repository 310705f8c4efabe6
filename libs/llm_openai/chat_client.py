import base64
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)


class LLMError(Exception):
    """Base class for failures at the chat-completion boundary."""


class LLMTransportError(LLMError):
    """Network error, timeout, non-2xx status or missing credentials."""


class LLMMalformedOutputError(LLMError):
    """The response (or its content) does not have the expected shape."""


@dataclass(frozen=True)
class ChatClientConfig:
    api_url: str
    api_key: str
    model_name: str
    temperature: float = 0.7
    timeout_seconds: float = 45.0


def build_image_data_url(image_bytes: bytes, content_type: str) -> str:
    """Encode image bytes as `data:<content_type>;base64,<data>`."""
    encoded = base64.b64encode(image_bytes).decode("ascii")
    return f"data:{content_type};base64,{encoded}"


class ChatCompletionClient:
    """
    Thin wrapper around an OpenAI-compatible chat-completion endpoint.

    Contract:
    - one blocking POST per call, no retries
    - returns the first choice's message content as text
    - knows nothing about business prompts or schemas
    """

    def __init__(self, config: ChatClientConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or requests.Session()

    def is_configured(self) -> bool:
        return bool(self.config.api_url and self.config.api_key)

    def complete(
        self,
        messages: List[Dict[str, Any]],
        max_tokens: int,
        temperature: Optional[float] = None,
        model_name: Optional[str] = None,
    ) -> str:
        if not self.is_configured():
            raise LLMTransportError("LLM client is not configured (missing API URL or API key)")

        payload = {
            "model": model_name or self.config.model_name,
            "messages": messages,
            "temperature": self.config.temperature if temperature is None else temperature,
            "max_tokens": max_tokens,
        }
        headers = {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
        }

        try:
            response = self.session.post(
                self.config.api_url,
                json=payload,
                headers=headers,
                timeout=self.config.timeout_seconds,
            )
            response.raise_for_status()
        except requests.Timeout as e:
            raise LLMTransportError(
                f"LLM request timed out after {self.config.timeout_seconds}s"
            ) from e
        except requests.RequestException as e:
            raise LLMTransportError(f"LLM request failed: {e}") from e

        try:
            body = response.json()
        except ValueError as e:
            raise LLMMalformedOutputError("LLM response body is not JSON") from e

        return self._first_choice_content(body)

    @staticmethod
    def _first_choice_content(body: Any) -> str:
        choices = body.get("choices") if isinstance(body, dict) else None
        if not choices:
            raise LLMMalformedOutputError("LLM response has no choices")

        message = choices[0].get("message") if isinstance(choices[0], dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str) or not content.strip():
            raise LLMMalformedOutputError("LLM response has no message content")
        return content
