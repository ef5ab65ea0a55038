"""
Context extraction.

Turns a session's conversation into structured fields (integrations,
databases, requirements, constraints, tech stack) by asking the model for
a JSON object. Upstream and parse failures are reported as ``None`` so that
callers can leave previously stored context alone. Only a missing
credential raises.
"""

import json
import logging
from typing import Any, Iterable, Optional

from ..errors import UpstreamError
from ..integrations.openrouter import OpenRouterClient
from ..schemas.session_v1 import ExtractedContext

logger = logging.getLogger(__name__)

EXTRACTION_SYSTEM_PROMPT = (
    "You are a data extraction specialist. Extract structured information "
    "from conversations and return ONLY valid JSON."
)

DEFAULT_EXTRACTION_MODEL = "google/gemini-flash-1.5:free"


def _field(message: Any, name: str) -> str:
    if isinstance(message, dict):
        value = message.get(name)
    else:
        value = getattr(message, name, None)
    if hasattr(value, "value"):
        value = value.value
    return value if isinstance(value, str) else ""


def render_transcript(messages: Iterable[Any]) -> str:
    """Render messages as ``"<role>: <content>"`` lines.

    Accepts ORM rows or plain dicts with ``role`` and ``content``.
    """
    return "\n".join(
        f"{_field(m, 'role')}: {_field(m, 'content')}" for m in messages
    )


def build_extraction_prompt(transcript: str) -> str:
    return f"""Analyze this conversation and extract structured information:

Conversation:
{transcript}

Extract and return ONLY valid JSON with exactly these five top-level keys:
{{
  "integrations": [{{"type": "email|github|calendar|api|database", "name": "descriptive name", "config": {{}}}}],
  "databases": [{{"type": "postgresql|mysql|mongodb|sqlite|api", "name": "descriptive name", "config": {{}}}}],
  "requirements": ["list of key requirements mentioned"],
  "constraints": ["list of constraints or limitations mentioned"],
  "techStack": ["list of technologies, languages, frameworks mentioned"]
}}

Only include items that were explicitly stated in the conversation. Do not infer or invent services, tools, or technologies."""


def parse_extraction_response(text: str) -> Optional[ExtractedContext]:
    """Parse the model's reply strictly as JSON; ``None`` if it is not JSON."""
    try:
        raw = json.loads(text or "{}")
    except ValueError:
        logger.warning("Extraction response was not valid JSON")
        return None
    return ExtractedContext.from_raw(raw)


async def extract_context_from_messages(
    messages: Iterable[Any],
    agent_type: str,
    client: OpenRouterClient,
    model: Optional[str] = None,
) -> Optional[ExtractedContext]:
    """Extract structured context from a full conversation.

    Raises ``ConfigurationError`` if the client has no credential. Returns
    ``None`` when the provider call fails or the reply is not JSON.
    """
    client.ensure_configured()

    prompt = build_extraction_prompt(render_transcript(messages))
    try:
        content = await client.chat_completion(
            model=model or DEFAULT_EXTRACTION_MODEL,
            messages=[
                {"role": "system", "content": EXTRACTION_SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            response_format={"type": "json_object"},
        )
    except UpstreamError as e:
        logger.error(f"Context extraction failed for {agent_type} session: {e}")
        return None

    return parse_extraction_response(content)
