"""
Code generation.

Builds a prompt from a session's accumulated context and asks the model for
a JSON ``files`` payload. The reply is parsed in three tiers, each tried
only if the previous one produced nothing:

1. a JSON object containing ``"files"``;
2. fenced code blocks, one artifact per block;
3. the whole raw reply as a single artifact.

So any reply from the model yields at least one artifact.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from ..integrations.openrouter import OpenRouterClient
from ..schemas.enums import AutomationLanguage
from ..schemas.session_v1 import GeneratedFile
from .context_extractor import render_transcript

logger = logging.getLogger(__name__)

GENERATION_SYSTEM_PROMPT = (
    "You are an expert automation engineer. Generate production-ready code "
    "with proper error handling, logging, and documentation. Return code as "
    "valid JSON."
)

DEFAULT_GENERATION_MODEL = "meta-llama/llama-3.1-8b-instruct:free"
CONVERSATION_SUMMARY_LIMIT = 4000
GENERATION_TEMPERATURE = 0.7

DEFAULT_DESCRIPTION = "Generated automation code"

_FILES_JSON_RE = re.compile(r'\{[\s\S]*"files"[\s\S]*\}')
_CODE_BLOCK_RE = re.compile(r"```(\w+)?\n([\s\S]*?)```")

_LANGUAGE_ALIASES = {
    "python": "python",
    "py": "python",
    "python3": "python",
    "javascript": "javascript",
    "js": "javascript",
    "node": "javascript",
    "typescript": "typescript",
    "ts": "typescript",
    "bash": "bash",
    "sh": "bash",
    "shell": "bash",
    "zsh": "bash",
}

AGENT_GUIDANCE = {
    "research": """For research automation, include:
- Web scraping with proper headers and rate limiting
- Data parsing and cleaning
- Storage mechanism (JSON/CSV/database)
- Scheduling capability
- Error retry logic""",
    "webapp_developer": """For web application, include:
- Project structure with separate files for frontend/backend
- Database schema and migrations
- API endpoints with validation
- Authentication setup
- Deployment configuration""",
    "web_crawler": """For web crawler, include:
- Robust HTML parsing
- JavaScript rendering if needed (Puppeteer/Selenium)
- Pagination and link following
- Duplicate detection
- Respectful crawling (robots.txt, rate limits)""",
}


@dataclass
class CodeGenerationRequest:
    agent_type: str
    requirements: List[str] = field(default_factory=list)
    tech_stack: List[str] = field(default_factory=list)
    constraints: List[str] = field(default_factory=list)
    conversation_summary: str = ""
    language: Optional[str] = None


def summarize_conversation(
    messages: Iterable[Any], limit: int = CONVERSATION_SUMMARY_LIMIT
) -> str:
    """Transcript lines cut to the first ``limit`` characters."""
    return render_transcript(messages)[:limit]


def build_generation_prompt(request: CodeGenerationRequest) -> str:
    requirements = "\n".join(
        f"{i}. {r}" for i, r in enumerate(request.requirements, start=1)
    )
    tech_stack = ", ".join(request.tech_stack) or "Choose best fit"
    lines = [
        "Generate production-ready automation code based on these requirements:",
        "",
        f"Agent Type: {request.agent_type}",
        "Requirements:",
        requirements,
        "",
        f"Tech Stack: {tech_stack}",
    ]
    if request.constraints:
        lines.append(f"Constraints: {'; '.join(request.constraints)}")
    if request.language:
        lines.append(f"Preferred Language: {request.language}")
    lines += [
        "",
        f"Context: {request.conversation_summary}",
        "",
        """Generate complete, working code with:
1. Proper error handling and logging
2. Clear comments and documentation
3. Environment variable configuration
4. Setup/installation instructions
5. Example usage

Return ONLY valid JSON in this exact format:
{
  "files": [
    {
      "name": "descriptive-name",
      "description": "what this code does",
      "language": "python|javascript|typescript|bash",
      "code": "complete code here",
      "dependencies": ["package1", "package2"],
      "setupInstructions": "step by step setup"
    }
  ]
}""",
    ]
    prompt = "\n".join(lines)

    guidance = AGENT_GUIDANCE.get(request.agent_type)
    if guidance:
        prompt += "\n\n" + guidance
    return prompt


def normalize_language(value: Any, fallback: Optional[str] = None) -> AutomationLanguage:
    """Map a model-supplied language tag onto the supported set."""
    if isinstance(value, str):
        mapped = _LANGUAGE_ALIASES.get(value.strip().lower())
        if mapped:
            return AutomationLanguage(mapped)
    if fallback:
        return normalize_language(fallback)
    return AutomationLanguage.PYTHON


def _text(value: Any, default: str) -> str:
    return value if isinstance(value, str) and value else default


def _from_files_json(
    content: str, preferred_language: Optional[str]
) -> List[GeneratedFile]:
    match = _FILES_JSON_RE.search(content)
    if not match:
        return []
    try:
        parsed = json.loads(match.group(0))
    except ValueError:
        logger.warning("Generated output contained an unparseable files object")
        return []
    files = parsed.get("files") if isinstance(parsed, dict) else None
    if not isinstance(files, list):
        return []

    generated = []
    for entry in files:
        if not isinstance(entry, dict):
            continue
        dependencies = entry.get("dependencies")
        generated.append(
            GeneratedFile(
                name=_text(entry.get("name"), "automation"),
                description=_text(entry.get("description"), DEFAULT_DESCRIPTION),
                language=normalize_language(
                    entry.get("language"), preferred_language
                ),
                code=entry.get("code") if isinstance(entry.get("code"), str) else "",
                dependencies=[
                    d for d in dependencies if isinstance(d, str)
                ] if isinstance(dependencies, list) else [],
                setup_instructions=_text(
                    entry.get("setupInstructions"), "No setup instructions provided"
                ),
            )
        )
    return generated


def extract_code_blocks(text: str) -> List[Dict[str, str]]:
    """Fenced ``` blocks as ``{"language", "code"}``; untagged blocks are ``text``."""
    return [
        {"language": match.group(1) or "text", "code": match.group(2).strip()}
        for match in _CODE_BLOCK_RE.finditer(text)
    ]


def parse_generated_code(
    content: str, agent_type: str, preferred_language: Optional[str] = None
) -> List[GeneratedFile]:
    """Turn a raw model reply into at least one artifact."""
    files = _from_files_json(content, preferred_language)
    if files:
        return files

    blocks = extract_code_blocks(content)
    if blocks:
        return [
            GeneratedFile(
                name=f"{agent_type}-automation-{index}",
                description=DEFAULT_DESCRIPTION,
                language=normalize_language(block["language"], preferred_language),
                code=block["code"],
                dependencies=[],
                setup_instructions="See code comments for setup",
            )
            for index, block in enumerate(blocks, start=1)
        ]

    return [
        GeneratedFile(
            name=f"{agent_type}-automation",
            description=DEFAULT_DESCRIPTION,
            language=normalize_language(preferred_language),
            code=content,
            dependencies=[],
            setup_instructions="Review code for setup requirements",
        )
    ]


async def generate_automation_code(
    request: CodeGenerationRequest,
    client: OpenRouterClient,
    model: Optional[str] = None,
) -> List[GeneratedFile]:
    """Generate code artifacts for a session.

    Raises ``ConfigurationError`` without a credential and ``UpstreamError``
    when the provider call fails; an empty result would be useless here.
    """
    client.ensure_configured()

    prompt = build_generation_prompt(request)
    content = await client.chat_completion(
        model=model or DEFAULT_GENERATION_MODEL,
        messages=[
            {"role": "system", "content": GENERATION_SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ],
        temperature=GENERATION_TEMPERATURE,
    )

    files = parse_generated_code(content, request.agent_type, request.language)
    logger.info(f"Generated {len(files)} artifact(s) for {request.agent_type} session")
    return files
