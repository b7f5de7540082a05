"""
LLM Client - Unified interface for Ollama and OpenAI.

Ollama is the DEFAULT provider (local, no API key needed).
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx

from config import LLMConfig, LLMProvider

logger = logging.getLogger(__name__)


class LLMError(RuntimeError):
    """The LLM provider failed or returned something unusable."""


@dataclass
class LLMResponse:
    content: str
    model: str = ""
    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


class LLMClient(ABC):
    """Abstract base class for LLM clients."""

    default_model: str
    endpoint: str

    @abstractmethod
    def generate(self, prompt: str, model: Optional[str] = None) -> LLMResponse:
        pass

    @abstractmethod
    def list_models(self) -> List[Dict[str, Any]]:
        pass

    def close(self) -> None:
        pass


class OllamaClient(LLMClient):
    """
    Ollama HTTP API client.

    Uses the native endpoints:
    - GET  /api/tags      installed models
    - POST /api/generate  single non-streaming completion
    """

    def __init__(
        self,
        host: str = "http://localhost:11434",
        model: str = "llama3.2",
        temperature: float = 0.1,
        max_tokens: int = 2000,
        timeout: float = 120.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.endpoint = host.rstrip("/")
        self.default_model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._client = httpx.Client(base_url=self.endpoint, timeout=timeout, transport=transport)

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        try:
            response = self._client.request(method, path, **kwargs)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            raise LLMError(f"Ollama returned HTTP {e.response.status_code}: {e.response.text}") from e
        except httpx.HTTPError as e:
            raise LLMError(f"Ollama request failed: {e}") from e
        except ValueError as e:
            raise LLMError("invalid response from Ollama") from e

    def generate(self, prompt: str, model: Optional[str] = None) -> LLMResponse:
        model = model or self.default_model
        data = self._request(
            "POST",
            "/api/generate",
            json={
                "model": model,
                "prompt": prompt,
                "stream": False,
                "options": {
                    "temperature": self.temperature,
                    "num_predict": self.max_tokens,
                },
            },
        )
        content = data.get("response") if isinstance(data, dict) else None
        if not isinstance(content, str):
            raise LLMError("invalid response from Ollama")
        return LLMResponse(
            content=content,
            model=model,
            input_tokens=int(data.get("prompt_eval_count") or 0),
            output_tokens=int(data.get("eval_count") or 0),
        )

    def list_models(self) -> List[Dict[str, Any]]:
        data = self._request("GET", "/api/tags")
        models = []
        for item in (data.get("models") or []) if isinstance(data, dict) else []:
            if not isinstance(item, dict):
                continue
            models.append({
                "name": str(item.get("name") or ""),
                "size": int(item.get("size") or 0),
                "modified_at": str(item.get("modified_at") or ""),
            })
        return models

    def close(self) -> None:
        self._client.close()


class OpenAIClient(LLMClient):
    """OpenAI API client (paid)."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        temperature: float = 0.1,
        max_tokens: int = 2000,
        timeout: float = 120.0,
    ):
        self.api_key = api_key
        self.default_model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.endpoint = "https://api.openai.com/v1"
        self._client = None

    @property
    def client(self):
        if self._client is None:
            from openai import OpenAI
            self._client = OpenAI(api_key=self.api_key, timeout=self.timeout)
        return self._client

    def generate(self, prompt: str, model: Optional[str] = None) -> LLMResponse:
        from openai import OpenAIError

        model = model or self.default_model
        try:
            response = self.client.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except OpenAIError as e:
            raise LLMError(f"OpenAI request failed: {e}") from e

        if not response.choices or response.choices[0].message.content is None:
            raise LLMError("invalid response from OpenAI")
        usage = response.usage
        return LLMResponse(
            content=response.choices[0].message.content,
            model=model,
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
        )

    def list_models(self) -> List[Dict[str, Any]]:
        from openai import OpenAIError

        try:
            page = self.client.models.list()
        except OpenAIError as e:
            raise LLMError(f"OpenAI request failed: {e}") from e
        return [
            {
                "name": m.id,
                "size": 0,
                "modified_at": datetime.fromtimestamp(m.created, tz=timezone.utc).isoformat(),
            }
            for m in page
        ]

    def close(self) -> None:
        if self._client is not None:
            self._client.close()


def create_llm_client(provider: str = "ollama", **kwargs) -> LLMClient:
    """
    Factory function to create LLM client.

    Args:
        provider: "ollama" (default, local) or "openai"
        **kwargs: Provider-specific arguments

    Returns:
        Configured LLMClient instance
    """
    if provider == "ollama":
        return OllamaClient(**kwargs)
    elif provider == "openai":
        return OpenAIClient(**kwargs)
    else:
        raise ValueError(f"Unknown provider: {provider}. Use 'ollama' or 'openai'")


def create_llm_client_from_config(llm_config: LLMConfig) -> LLMClient:
    """Build the configured provider's client."""
    if llm_config.provider == LLMProvider.OPENAI:
        return create_llm_client(
            "openai",
            api_key=llm_config.openai_api_key,
            model=llm_config.openai_model,
            temperature=llm_config.temperature,
            max_tokens=llm_config.max_tokens,
            timeout=llm_config.timeout,
        )
    return create_llm_client(
        "ollama",
        host=llm_config.ollama_host,
        model=llm_config.default_model,
        temperature=llm_config.temperature,
        max_tokens=llm_config.max_tokens,
        timeout=llm_config.timeout,
    )
