import json

import httpx
import pytest

from config import LLMConfig, LLMProvider
from llm import LLMError, OllamaClient, OpenAIClient, create_llm_client, create_llm_client_from_config


def ollama_client(handler) -> OllamaClient:
    return OllamaClient(host="http://ollama.test:11434/", transport=httpx.MockTransport(handler))


def test_generate_sends_non_streaming_request() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"response": "SELECT 1", "prompt_eval_count": 12, "eval_count": 3})

    response = ollama_client(handler).generate("count users")

    assert seen["path"] == "/api/generate"
    assert seen["body"] == {
        "model": "llama3.2",
        "prompt": "count users",
        "stream": False,
        "options": {"temperature": 0.1, "num_predict": 2000},
    }
    assert response.content == "SELECT 1"
    assert response.total_tokens == 15


def test_generate_with_explicit_model() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"response": json.loads(request.content)["model"]})

    assert ollama_client(handler).generate("hi", model="qwen2.5").content == "qwen2.5"


def test_missing_response_field() -> None:
    client = ollama_client(lambda request: httpx.Response(200, json={"done": True}))
    with pytest.raises(LLMError, match="invalid response from Ollama"):
        client.generate("hi")


def test_non_json_body() -> None:
    client = ollama_client(lambda request: httpx.Response(200, text="<html>"))
    with pytest.raises(LLMError, match="invalid response from Ollama"):
        client.generate("hi")


def test_http_error_status() -> None:
    client = ollama_client(lambda request: httpx.Response(404, text="model not found"))
    with pytest.raises(LLMError, match="HTTP 404"):
        client.generate("hi")


def test_transport_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = ollama_client(handler)
    with pytest.raises(LLMError, match="Ollama request failed"):
        client.generate("hi")


def test_list_models() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/tags"
        return httpx.Response(200, json={"models": [
            {"name": "llama3.2:latest", "size": 2019393189, "modified_at": "2024-10-01T10:00:00Z", "digest": "abc"},
        ]})

    client = ollama_client(handler)
    assert client.list_models() == [
        {"name": "llama3.2:latest", "size": 2019393189, "modified_at": "2024-10-01T10:00:00Z"},
    ]
    assert client.endpoint == "http://ollama.test:11434"


def test_factory() -> None:
    assert isinstance(create_llm_client("ollama"), OllamaClient)
    assert isinstance(create_llm_client("openai", api_key="sk-test"), OpenAIClient)
    with pytest.raises(ValueError, match="Unknown provider"):
        create_llm_client("groq")


def test_factory_from_config() -> None:
    ollama = create_llm_client_from_config(
        LLMConfig(provider=LLMProvider.OLLAMA, ollama_host="http://gpu:11434", default_model="mistral")
    )
    assert isinstance(ollama, OllamaClient)
    assert ollama.default_model == "mistral"
    assert ollama.endpoint == "http://gpu:11434"

    openai = create_llm_client_from_config(
        LLMConfig(provider=LLMProvider.OPENAI, openai_api_key="sk-test", openai_model="gpt-4o")
    )
    assert isinstance(openai, OpenAIClient)
    assert openai.default_model == "gpt-4o"
