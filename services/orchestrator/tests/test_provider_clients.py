from __future__ import annotations

import json

import httpx
import pytest

from shared.errors import ConfigurationError, UpstreamError, UpstreamFormatError

from services.orchestrator.app.prompts import BENTO_SYSTEM_PROMPT, build_model_request
from services.orchestrator.app.providers.clients import KimiClient, make_provider_client


def _chat_reply(content: str) -> dict:
    return {
        "choices": [{"message": {"role": "assistant", "content": content}}],
        "usage": {"prompt_tokens": 120, "completion_tokens": 80},
    }


def test_make_provider_client_requires_key(monkeypatch):
    monkeypatch.delenv("KIMI_API_KEY", raising=False)

    with pytest.raises(ConfigurationError) as excinfo:
        make_provider_client("kimi")

    assert "KIMI_API_KEY" in str(excinfo.value)


def test_make_provider_client_rejects_unknown_provider(monkeypatch):
    monkeypatch.setenv("KIMI_API_KEY", "test-key")

    with pytest.raises(ConfigurationError):
        make_provider_client("nope")


def test_generate_posts_system_prompt_and_bearer(monkeypatch):
    monkeypatch.setenv("KIMI_API_KEY", "test-key")
    monkeypatch.delenv("KIMI_MODEL", raising=False)
    monkeypatch.delenv("KIMI_TEMPERATURE", raising=False)
    monkeypatch.setenv("KIMI_BASE_URL", "https://llm.test/")
    captured: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["auth"] = request.headers.get("authorization")
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json=_chat_reply('{"title": "ok"}'))

    client = KimiClient(transport=httpx.MockTransport(handler))
    result = client.generate(build_model_request("今天天气很好"))

    assert captured["url"] == "https://llm.test/v1/chat/completions"
    assert captured["auth"] == "Bearer test-key"
    assert captured["body"]["model"] == "moonshot-v1-8k"
    assert captured["body"]["temperature"] == 0.7
    assert captured["body"]["messages"] == [
        {"role": "system", "content": BENTO_SYSTEM_PROMPT},
        {"role": "user", "content": "今天天气很好"},
    ]
    assert result.text == '{"title": "ok"}'
    assert result.tokens_input == 120
    assert result.tokens_output == 80


def test_generate_raises_upstream_error_with_truncated_body(monkeypatch):
    monkeypatch.setenv("KIMI_API_KEY", "test-key")
    body = "x" * 500
    client = KimiClient(transport=httpx.MockTransport(lambda request: httpx.Response(429, text=body)))

    with pytest.raises(UpstreamError) as excinfo:
        client.generate(build_model_request("hello"))

    assert not isinstance(excinfo.value, UpstreamFormatError)
    assert excinfo.value.details == "x" * 200


def test_generate_raises_format_error_for_non_json(monkeypatch):
    monkeypatch.setenv("KIMI_API_KEY", "test-key")
    client = KimiClient(
        transport=httpx.MockTransport(lambda request: httpx.Response(200, text="<html>gateway</html>"))
    )

    with pytest.raises(UpstreamFormatError) as excinfo:
        client.generate(build_model_request("hello"))

    assert excinfo.value.details == "<html>gateway</html>"


def test_generate_raises_format_error_without_choices(monkeypatch):
    monkeypatch.setenv("KIMI_API_KEY", "test-key")
    client = KimiClient(transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"choices": []})))

    with pytest.raises(UpstreamFormatError):
        client.generate(build_model_request("hello"))


def test_generate_wraps_timeouts(monkeypatch):
    monkeypatch.setenv("KIMI_API_KEY", "test-key")

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    client = KimiClient(transport=httpx.MockTransport(handler))

    with pytest.raises(UpstreamError) as excinfo:
        client.generate(build_model_request("hello"))

    assert "timed out" in excinfo.value.message
