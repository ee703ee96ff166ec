from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from time import perf_counter

import httpx

from shared.errors import ConfigurationError, UpstreamError, UpstreamFormatError, truncate_body

from ..prompts import ModelRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationResult:
    provider: str
    model: str
    text: str
    tokens_input: int = 0
    tokens_output: int = 0
    latency_s: float = 0.0


class BaseProviderClient:
    provider: str

    def generate(self, request: ModelRequest) -> GenerationResult:
        raise NotImplementedError


def _env_float(name: str, default: float, minimum: float | None = None) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return max(minimum, value) if minimum is not None else value


class OpenAICompatibleClient(BaseProviderClient):
    api_key: str
    model: str
    base_url: str
    temperature: float
    timeout_s: float
    api_key_env_name: str
    default_base_url: str
    default_model: str
    default_temperature: float = 0.2
    provider: str

    def __init__(self, transport: httpx.BaseTransport | None = None) -> None:
        prefix = self.provider.upper()
        self.api_key = os.getenv(self.api_key_env_name) or ""
        self.model = os.getenv(f"{prefix}_MODEL", self.default_model)
        self.base_url = os.getenv(f"{prefix}_BASE_URL", self.default_base_url).rstrip("/")
        self.temperature = _env_float(f"{prefix}_TEMPERATURE", self.default_temperature)
        self.timeout_s = _env_float(f"{prefix}_TIMEOUT_S", 60.0, minimum=1.0)
        self.transport = transport
        if not self.api_key:
            logger.error("%s is not set", self.api_key_env_name)
            raise ConfigurationError(details=f"{self.api_key_env_name} is not set")

    def generate(self, request: ModelRequest) -> GenerationResult:
        url = f"{self.base_url}/v1/chat/completions"
        headers = {"Authorization": f"Bearer {self.api_key}"}
        payload = {
            "model": self.model,
            "messages": request.messages(),
            "temperature": self.temperature,
        }
        started = perf_counter()
        try:
            with httpx.Client(timeout=self.timeout_s, transport=self.transport) as client:
                response = client.post(url, headers=headers, json=payload)
        except httpx.TimeoutException as exc:
            logger.error("%s request timed out: %s", self.provider, exc)
            raise UpstreamError("connection timed out, please check the network", details=str(exc)) from exc
        except httpx.HTTPError as exc:
            logger.error("%s request failed: %s", self.provider, exc)
            raise UpstreamError(details=str(exc)) from exc

        if not response.is_success:
            logger.error("%s returned HTTP %s: %s", self.provider, response.status_code, response.text)
            raise UpstreamError(details=truncate_body(response.text))

        try:
            data = response.json()
            text = str(data["choices"][0]["message"]["content"] or "")
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            logger.error("%s returned a non-JSON body: %s", self.provider, response.text)
            raise UpstreamFormatError(details=truncate_body(response.text)) from exc

        usage = data.get("usage", {}) or {}
        return GenerationResult(
            provider=self.provider,
            model=self.model,
            text=text,
            tokens_input=int(usage.get("prompt_tokens", 0) or 0),
            tokens_output=int(usage.get("completion_tokens", 0) or 0),
            latency_s=max(0.0, perf_counter() - started),
        )


class KimiClient(OpenAICompatibleClient):
    provider = "kimi"
    api_key_env_name = "KIMI_API_KEY"
    default_base_url = "https://api.moonshot.cn"
    default_model = "moonshot-v1-8k"
    default_temperature = 0.7


def make_provider_client(provider: str = "kimi", transport: httpx.BaseTransport | None = None) -> BaseProviderClient:
    normalized = provider.lower()
    if normalized in {"kimi", "moonshot"}:
        return KimiClient(transport=transport)
    raise ConfigurationError(details=f"unsupported provider: {provider}")
