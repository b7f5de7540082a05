"""
Translator - prompt building for LLM-backed translation.
"""

import logging
from typing import Optional

from .client import LLMClient

logger = logging.getLogger(__name__)


LANGUAGE_NAMES = {
    "zh": "Chinese",
    "en": "English",
    "ja": "Japanese",
}

STYLE_INSTRUCTIONS = {
    "casual": "Use casual, conversational language that sounds natural and friendly.",
    "formal": "Use formal, professional language with precise terminology.",
}

DEFAULT_STYLE_INSTRUCTION = (
    "Use clear, natural language that is neither too casual nor overly formal."
)

TRANSLATION_PROMPT_TEMPLATE = """You are a professional translator. Translate the following {source} text to {target}.
Style: {style}
Rules: Provide ONLY the translation, no explanations.

Text: {text}

Translation:"""


class TranslationRequestError(ValueError):
    """The translation request is missing fields or is self-contradictory."""


def language_name(code: str) -> str:
    """Human-readable language name; unknown codes pass through unchanged."""
    return LANGUAGE_NAMES.get(code, code)


def build_translation_prompt(text: str, source_lang: str, target_lang: str, style: str = "") -> str:
    if not text or not source_lang or not target_lang:
        raise TranslationRequestError("Text, source language, and target language are required")
    if source_lang == target_lang:
        raise TranslationRequestError("Source and target languages cannot be the same")

    return TRANSLATION_PROMPT_TEMPLATE.format(
        source=language_name(source_lang),
        target=language_name(target_lang),
        style=STYLE_INSTRUCTIONS.get(style, DEFAULT_STYLE_INSTRUCTION),
        text=text,
    )


class Translator:
    def __init__(self, llm_client: LLMClient):
        self.llm_client = llm_client

    def translate(
        self,
        text: str,
        source_lang: str,
        target_lang: str,
        style: str = "",
        model: Optional[str] = None,
    ) -> str:
        prompt = build_translation_prompt(text, source_lang, target_lang, style)
        logger.info(f"Translating {len(text)} chars {source_lang} -> {target_lang}")
        return self.llm_client.generate(prompt, model=model).content
