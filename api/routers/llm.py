"""LLM proxy routes: model listing, text-to-SQL, chat and translation."""

import asyncio

from fastapi import APIRouter, Depends, HTTPException

from llm import LLMClient, Translator
from sql import SQLGenerator
from ..dependencies import get_llm_client
from ..schemas import ChatRequest, GenerateSQLRequest, TranslateRequest

router = APIRouter()


@router.get("/models")
async def list_models(llm_client: LLMClient = Depends(get_llm_client)) -> dict:
    models = await asyncio.to_thread(llm_client.list_models)
    return {"success": True, "models": models, "host": llm_client.endpoint}


@router.post("/generate")
async def generate_sql(request: GenerateSQLRequest, llm_client: LLMClient = Depends(get_llm_client)) -> dict:
    """Turn a natural-language request into SQL. The SQL is returned, never executed."""
    if not request.prompt:
        raise HTTPException(status_code=400, detail="Prompt is required")

    generator = SQLGenerator(llm_client)
    sql = await asyncio.to_thread(
        generator.generate, request.prompt, request.schema_text, request.db_type, request.model
    )
    return {"success": True, "sql": sql}


@router.post("/chat")
async def chat(request: ChatRequest, llm_client: LLMClient = Depends(get_llm_client)) -> dict:
    if not request.message:
        raise HTTPException(status_code=400, detail="Message is required")

    response = await asyncio.to_thread(llm_client.generate, request.message, request.model)
    return {"success": True, "response": response.content}


@router.post("/translate")
async def translate(request: TranslateRequest, llm_client: LLMClient = Depends(get_llm_client)) -> dict:
    translator = Translator(llm_client)
    translation = await asyncio.to_thread(
        translator.translate,
        request.text,
        request.source_lang,
        request.target_lang,
        request.style,
        request.model,
    )
    return {"success": True, "translation": translation}
