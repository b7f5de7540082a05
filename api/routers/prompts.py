"""Prompt library routes. Mounted only when the metadata store is available."""

import asyncio

from fastapi import APIRouter, Depends, HTTPException

from storage import MetadataStore
from storage.prompts import DEFAULT_PROMPT_LIMIT
from ..dependencies import get_store, parse_id
from ..schemas import PromptRequest

router = APIRouter()


def _require_title_and_content(request: PromptRequest) -> None:
    if not request.title or not request.content:
        raise HTTPException(status_code=400, detail="title and content are required")


@router.post("")
async def create_prompt(request: PromptRequest, store: MetadataStore = Depends(get_store)) -> dict:
    _require_title_and_content(request)
    prompt = await asyncio.to_thread(store.prompts.create, request.title, request.content, request.tags)
    return {"success": True, "prompt": prompt.to_dict()}


@router.get("")
async def list_prompts(
    search: str = "",
    tags: str = "",
    limit: int = DEFAULT_PROMPT_LIMIT,
    store: MetadataStore = Depends(get_store),
) -> dict:
    """
    Search the library.

    ``tags`` is comma-separated; a prompt matches when it carries any of them.
    """
    tag_list = tags.split(",") if tags else []
    prompts = await asyncio.to_thread(store.prompts.search, search, tag_list, limit)
    return {"success": True, "prompts": [p.to_dict() for p in prompts]}


@router.get("/tags")
async def list_tags(store: MetadataStore = Depends(get_store)) -> dict:
    tags = await asyncio.to_thread(store.prompts.all_tags)
    return {"success": True, "tags": tags}


@router.get("/{prompt_id}")
async def get_prompt(prompt_id: str, store: MetadataStore = Depends(get_store)) -> dict:
    prompt = await asyncio.to_thread(store.prompts.get, parse_id(prompt_id))
    return {"success": True, "prompt": prompt.to_dict()}


@router.put("/{prompt_id}")
async def update_prompt(
    prompt_id: str, request: PromptRequest, store: MetadataStore = Depends(get_store)
) -> dict:
    pid = parse_id(prompt_id)
    _require_title_and_content(request)
    await asyncio.to_thread(store.prompts.update, pid, request.title, request.content, request.tags)
    return {"success": True}


@router.delete("/{prompt_id}")
async def delete_prompt(prompt_id: str, store: MetadataStore = Depends(get_store)) -> dict:
    await asyncio.to_thread(store.prompts.delete, parse_id(prompt_id))
    return {"success": True}


@router.post("/{prompt_id}/use")
async def use_prompt(prompt_id: str, store: MetadataStore = Depends(get_store)) -> dict:
    await asyncio.to_thread(store.prompts.increment_use_count, parse_id(prompt_id))
    return {"success": True}
