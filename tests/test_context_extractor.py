"""Unit tests for context extraction and the OpenRouter client."""

import json

import httpx
import pytest

from automation_hub.errors import ConfigurationError, UpstreamError
from automation_hub.integrations.openrouter import OpenRouterClient
from automation_hub.schemas.enums import IntegrationType
from automation_hub.services.context_extractor import (
    build_extraction_prompt,
    extract_context_from_messages,
    parse_extraction_response,
    render_transcript,
)

MESSAGES = [
    {"role": "user", "content": "Check GitHub issues every morning"},
    {"role": "assistant", "content": "Which repository?"},
]


def _reply(content):
    return httpx.Response(200, json={"choices": [{"message": {"content": content}}]})


def _client(handler, api_key="test-key"):
    return OpenRouterClient(api_key=api_key, transport=httpx.MockTransport(handler))


def test_render_transcript():
    assert render_transcript(MESSAGES) == (
        "user: Check GitHub issues every morning\nassistant: Which repository?"
    )


def test_prompt_lists_the_five_keys():
    prompt = build_extraction_prompt("user: hi")

    assert "user: hi" in prompt
    for key in ("integrations", "databases", "requirements", "constraints", "techStack"):
        assert f'"{key}"' in prompt


class TestParseExtractionResponse:
    def test_valid_json(self):
        result = parse_extraction_response(
            json.dumps(
                {
                    "integrations": [{"type": "github", "name": "GitHub"}],
                    "requirements": ["daily digest"],
                }
            )
        )

        assert result.integrations[0].type == IntegrationType.GITHUB
        assert result.requirements == ["daily digest"]
        assert result.tech_stack == []

    def test_fenced_json_is_not_accepted(self):
        assert parse_extraction_response('```json\n{"requirements": ["x"]}\n```') is None

    def test_non_object_json_is_empty(self):
        result = parse_extraction_response('["requirements"]')
        assert result.to_dict()["requirements"] == []

    def test_empty_reply_is_empty(self):
        assert parse_extraction_response("").integrations == []


@pytest.mark.asyncio
async def test_extract_context_sends_json_mode_request():
    seen = []

    def handler(request):
        seen.append(json.loads(request.content))
        return _reply(json.dumps({"techStack": ["python", "cron"]}))

    client = _client(handler)
    try:
        result = await extract_context_from_messages(MESSAGES, "research", client)
    finally:
        await client.close()

    assert result.tech_stack == ["python", "cron"]
    assert seen[0]["response_format"] == {"type": "json_object"}
    assert "Which repository?" in seen[0]["messages"][1]["content"]


@pytest.mark.asyncio
async def test_extract_context_reports_transport_errors_as_none():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler)
    try:
        result = await extract_context_from_messages(MESSAGES, "research", client)
    finally:
        await client.close()

    assert result is None


@pytest.mark.asyncio
async def test_extract_context_requires_credential():
    client = _client(lambda request: _reply("{}"), api_key=None)
    try:
        with pytest.raises(ConfigurationError):
            await extract_context_from_messages(MESSAGES, "research", client)
    finally:
        await client.close()


class TestOpenRouterClient:
    @pytest.mark.asyncio
    async def test_sends_attribution_headers(self):
        seen = []

        def handler(request):
            seen.append(request)
            return _reply("hi")

        client = OpenRouterClient(
            api_key="secret",
            base_url="https://llm.example/api/v1/",
            referer="https://app.example",
            title="Automation Hub",
            transport=httpx.MockTransport(handler),
        )
        try:
            content = await client.chat_completion("m", [{"role": "user", "content": "x"}])
        finally:
            await client.close()

        assert content == "hi"
        request = seen[0]
        assert str(request.url) == "https://llm.example/api/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer secret"
        assert request.headers["HTTP-Referer"] == "https://app.example"
        assert request.headers["X-Title"] == "Automation Hub"

    @pytest.mark.asyncio
    async def test_non_success_status_raises_upstream_error(self):
        client = _client(lambda request: httpx.Response(401, json={"error": "bad key"}))
        try:
            with pytest.raises(UpstreamError) as exc_info:
                await client.chat_completion("m", [])
        finally:
            await client.close()

        assert exc_info.value.status == 401

    @pytest.mark.asyncio
    async def test_missing_choices_raises_upstream_error(self):
        client = _client(lambda request: httpx.Response(200, json={"id": "x"}))
        try:
            with pytest.raises(UpstreamError):
                await client.chat_completion("m", [])
        finally:
            await client.close()

    @pytest.mark.asyncio
    async def test_null_content_is_empty_string(self):
        client = _client(
            lambda request: httpx.Response(
                200, json={"choices": [{"message": {"content": None}}]}
            )
        )
        try:
            assert await client.chat_completion("m", []) == ""
        finally:
            await client.close()
