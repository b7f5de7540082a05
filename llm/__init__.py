"""LLM module exports."""

from .client import (
    LLMClient,
    LLMError,
    LLMResponse,
    OllamaClient,
    OpenAIClient,
    create_llm_client,
    create_llm_client_from_config,
)
from .translator import Translator, TranslationRequestError, build_translation_prompt

__all__ = [
    "LLMClient",
    "LLMError",
    "LLMResponse",
    "OllamaClient",
    "OpenAIClient",
    "create_llm_client",
    "create_llm_client_from_config",
    "Translator",
    "TranslationRequestError",
    "build_translation_prompt",
]
