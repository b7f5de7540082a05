import pytest

from llm import TranslationRequestError, Translator, build_translation_prompt


def test_prompt_names_languages_and_style() -> None:
    prompt = build_translation_prompt("你好", "zh", "en", "formal")
    assert "Translate the following Chinese text to English." in prompt
    assert "Style: Use formal, professional language with precise terminology." in prompt
    assert prompt.endswith("Text: 你好\n\nTranslation:")


def test_unknown_language_code_passes_through() -> None:
    prompt = build_translation_prompt("hola", "es", "ja")
    assert "Translate the following es text to Japanese." in prompt


def test_default_style() -> None:
    prompt = build_translation_prompt("hello", "en", "ja", "poetic")
    assert "neither too casual nor overly formal" in prompt


@pytest.mark.parametrize("text, source, target", [("", "en", "zh"), ("hi", "", "zh"), ("hi", "en", "")])
def test_required_fields(text, source, target) -> None:
    with pytest.raises(TranslationRequestError, match="Text, source language, and target language are required"):
        build_translation_prompt(text, source, target)


def test_same_language_rejected() -> None:
    with pytest.raises(TranslationRequestError, match="cannot be the same"):
        build_translation_prompt("hi", "en", "en")


def test_translate_returns_model_output(fake_llm) -> None:
    fake_llm.reply = "Hello"
    assert Translator(fake_llm).translate("你好", "zh", "en", "casual") == "Hello"
    assert "conversational" in fake_llm.prompts[0]
