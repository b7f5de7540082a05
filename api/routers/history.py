"""Tool history routes. Mounted only when the metadata store is available."""

import asyncio

from fastapi import APIRouter, Depends, HTTPException

from storage import MetadataStore
from storage.history import DEFAULT_HISTORY_LIMIT
from ..dependencies import get_store, parse_id
from ..schemas import HistoryRequest

router = APIRouter()


@router.post("")
async def save_history(request: HistoryRequest, store: MetadataStore = Depends(get_store)) -> dict:
    if not request.tool_name:
        raise HTTPException(status_code=400, detail="tool_name is required")

    await asyncio.to_thread(
        store.history.save, request.tool_name, request.input_data, request.output_data
    )
    return {"success": True}


@router.get("")
async def list_history(
    tool_name: str = "",
    limit: int = DEFAULT_HISTORY_LIMIT,
    store: MetadataStore = Depends(get_store),
) -> dict:
    if not tool_name:
        raise HTTPException(status_code=400, detail="tool_name is required")

    entries = await asyncio.to_thread(store.history.list_for_tool, tool_name, limit)
    return {"success": True, "history": [entry.to_dict() for entry in entries]}


@router.delete("/{history_id}")
async def delete_history(history_id: str, store: MetadataStore = Depends(get_store)) -> dict:
    await asyncio.to_thread(store.history.delete, parse_id(history_id))
    return {"success": True}


@router.delete("")
async def clear_history(tool_name: str = "", store: MetadataStore = Depends(get_store)) -> dict:
    if not tool_name:
        raise HTTPException(status_code=400, detail="tool_name is required")

    await asyncio.to_thread(store.history.clear, tool_name)
    return {"success": True}
