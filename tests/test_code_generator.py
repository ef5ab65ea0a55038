"""Unit tests for prompt building and reply parsing in the code generator."""

import json

import httpx
import pytest

from automation_hub.errors import ConfigurationError, UpstreamError
from automation_hub.integrations.openrouter import OpenRouterClient
from automation_hub.schemas.enums import AutomationLanguage
from automation_hub.services.code_generator import (
    CodeGenerationRequest,
    build_generation_prompt,
    extract_code_blocks,
    generate_automation_code,
    normalize_language,
    parse_generated_code,
    summarize_conversation,
)


class TestParseGeneratedCode:
    def test_files_json_is_preferred(self):
        content = "Here is the code:\n" + json.dumps(
            {
                "files": [
                    {
                        "name": "sync",
                        "description": "Sync things",
                        "language": "typescript",
                        "code": "export {}",
                        "dependencies": ["zod", 7],
                        "setupInstructions": "npm i",
                    }
                ]
            }
        )

        files = parse_generated_code(content, "research")

        assert len(files) == 1
        assert files[0].name == "sync"
        assert files[0].language == AutomationLanguage.TYPESCRIPT
        assert files[0].dependencies == ["zod"]
        assert files[0].setup_instructions == "npm i"

    def test_missing_fields_get_defaults(self):
        files = parse_generated_code('{"files": [{"code": "x = 1"}]}', "research")

        assert files[0].name == "automation"
        assert files[0].description == "Generated automation code"
        assert files[0].language == AutomationLanguage.PYTHON
        assert files[0].setup_instructions == "No setup instructions provided"

    def test_preferred_language_fills_unknown_tags(self):
        files = parse_generated_code(
            '{"files": [{"name": "a", "language": "cobol", "code": "x"}]}',
            "research",
            preferred_language="bash",
        )
        assert files[0].language == AutomationLanguage.BASH

    def test_empty_files_list_falls_through_to_raw_text(self):
        content = '{"files": []}'

        files = parse_generated_code(content, "general")

        assert len(files) == 1
        assert files[0].name == "general-automation"
        assert files[0].code == content

    def test_fenced_blocks(self):
        content = "```bash\necho hi\n```\n```\nplain\n```"

        files = parse_generated_code(content, "research")

        assert [f.name for f in files] == [
            "research-automation-1",
            "research-automation-2",
        ]
        assert files[0].language == AutomationLanguage.BASH
        assert files[0].code == "echo hi"
        assert files[1].language == AutomationLanguage.PYTHON
        assert all(f.setup_instructions == "See code comments for setup" for f in files)

    def test_raw_text_always_yields_one_artifact(self):
        files = parse_generated_code("", "web_crawler")

        assert len(files) == 1
        assert files[0].name == "web_crawler-automation"
        assert files[0].code == ""


def test_extract_code_blocks_tags_untagged_blocks_as_text():
    blocks = extract_code_blocks("```\nfoo\n```")
    assert blocks == [{"language": "text", "code": "foo"}]


@pytest.mark.parametrize(
    "value,expected",
    [
        ("py", AutomationLanguage.PYTHON),
        ("JS", AutomationLanguage.JAVASCRIPT),
        ("ts", AutomationLanguage.TYPESCRIPT),
        ("shell", AutomationLanguage.BASH),
        (None, AutomationLanguage.PYTHON),
        ("rust", AutomationLanguage.PYTHON),
    ],
)
def test_normalize_language(value, expected):
    assert normalize_language(value) == expected


def test_summarize_conversation_truncates():
    messages = [{"role": "user", "content": "x" * 50}]

    summary = summarize_conversation(messages, limit=10)

    assert summary == "user: xxxx"


class TestBuildGenerationPrompt:
    def test_defaults_when_context_is_empty(self):
        prompt = build_generation_prompt(CodeGenerationRequest(agent_type="general"))

        assert "Agent Type: general" in prompt
        assert "Tech Stack: Choose best fit" in prompt
        assert "Constraints:" not in prompt
        assert "Preferred Language:" not in prompt

    def test_includes_constraints_and_agent_guidance(self):
        prompt = build_generation_prompt(
            CodeGenerationRequest(
                agent_type="webapp_developer",
                requirements=["login page", "dashboard"],
                constraints=["no paid services", "runs on a VPS"],
            )
        )

        assert "1. login page\n2. dashboard" in prompt
        assert "Constraints: no paid services; runs on a VPS" in prompt
        assert "Authentication setup" in prompt


def _client(handler, api_key="test-key"):
    return OpenRouterClient(api_key=api_key, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_generate_automation_code_parses_reply():
    def handler(request):
        body = json.loads(request.content)
        assert body["model"] == "some/model"
        return httpx.Response(
            200, json={"choices": [{"message": {"content": "```python\nprint(1)\n```"}}]}
        )

    client = _client(handler)
    try:
        files = await generate_automation_code(
            CodeGenerationRequest(agent_type="research"), client, model="some/model"
        )
    finally:
        await client.close()

    assert [f.code for f in files] == ["print(1)"]


@pytest.mark.asyncio
async def test_generate_automation_code_propagates_upstream_errors():
    client = _client(lambda request: httpx.Response(500, json={}))
    try:
        with pytest.raises(UpstreamError):
            await generate_automation_code(
                CodeGenerationRequest(agent_type="research"), client
            )
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_generate_automation_code_requires_credential():
    calls = []
    client = _client(lambda request: calls.append(request), api_key=None)
    try:
        with pytest.raises(ConfigurationError):
            await generate_automation_code(
                CodeGenerationRequest(agent_type="research"), client
            )
    finally:
        await client.close()

    assert calls == []
