"""
Client for the OpenRouter chat-completions API.

OpenRouter speaks the OpenAI chat-completions wire format, so the same
client serves the chat proxy, context extraction and code generation;
callers differ only in prompt and model.
"""

import logging
from typing import Any, AsyncGenerator, Dict, List, Optional

import httpx

from ..config import Settings, get_settings
from ..errors import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)


class OpenRouterClient:
    """
    Thin async client around ``POST /chat/completions``.
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://openrouter.ai/api/v1",
        referer: Optional[str] = None,
        title: Optional[str] = None,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        if referer:
            headers["HTTP-Referer"] = referer
        if title:
            headers["X-Title"] = title
        self.client = httpx.AsyncClient(
            timeout=timeout, headers=headers, transport=transport
        )

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "OpenRouterClient":
        settings = settings or get_settings()
        return cls(
            api_key=settings.openrouter_api_key,
            base_url=settings.openrouter_base_url,
            referer=settings.openrouter_referer,
            title=settings.openrouter_title,
            timeout=settings.llm_timeout_seconds,
            transport=transport,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def ensure_configured(self) -> None:
        """Raise ``ConfigurationError`` when no API key is available."""
        if not self.is_configured:
            raise ConfigurationError("OpenRouter not configured")

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    async def chat_completion(
        self,
        model: str,
        messages: List[Dict[str, str]],
        response_format: Optional[Dict[str, Any]] = None,
        temperature: Optional[float] = None,
    ) -> str:
        """Send one non-streaming completion request and return the text.

        Raises ``ConfigurationError`` before any network call when the key
        is missing, and ``UpstreamError`` for transport failures, non-2xx
        responses or a payload without ``choices``.
        """
        self.ensure_configured()

        body: Dict[str, Any] = {"model": model, "messages": messages}
        if response_format is not None:
            body["response_format"] = response_format
        if temperature is not None:
            body["temperature"] = temperature

        try:
            response = await self.client.post(
                f"{self.base_url}/chat/completions", json=body
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"OpenRouter returned {e.response.status_code} for model {model}"
            )
            raise UpstreamError(
                "Model provider request failed", status=e.response.status_code
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Failed to reach OpenRouter: {e}")
            raise UpstreamError("Model provider unreachable") from e
        except ValueError as e:
            logger.error(f"OpenRouter returned a non-JSON body: {e}")
            raise UpstreamError("Model provider returned invalid JSON") from e

        return _first_choice_content(data)


def _first_choice_content(data: Any) -> str:
    if not isinstance(data, dict):
        raise UpstreamError("Model provider response has no choices")
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        raise UpstreamError("Model provider response has no choices")
    message = choices[0].get("message") if isinstance(choices[0], dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    return content if isinstance(content, str) else ""


async def get_llm_client() -> AsyncGenerator[OpenRouterClient, None]:
    """FastAPI dependency yielding a request-scoped client."""
    client = OpenRouterClient.from_settings()
    try:
        yield client
    finally:
        await client.close()
