"""
Database gateway routes.

Each handler hands the payload to the gateway on a worker thread; the
gateway opens and releases its own connection.
"""

import asyncio

from fastapi import APIRouter, Depends

from database import DatabaseGateway
from ..dependencies import get_gateway
from ..schemas import DatabaseRequest, ExecuteRequest

router = APIRouter()


@router.post("/connect")
async def connect(request: DatabaseRequest, gateway: DatabaseGateway = Depends(get_gateway)) -> dict:
    """Verify that the supplied credentials reach the server."""
    message = await asyncio.to_thread(gateway.connect, request.model_dump())
    return {"success": True, "message": message}


@router.post("/databases")
async def list_databases(request: DatabaseRequest, gateway: DatabaseGateway = Depends(get_gateway)) -> dict:
    databases = await asyncio.to_thread(gateway.list_catalogs, request.model_dump())
    return {"success": True, "databases": databases}


@router.post("/schema")
async def get_schema(request: DatabaseRequest, gateway: DatabaseGateway = Depends(get_gateway)) -> dict:
    """Tables and columns of the requested database, plus a text rendering for LLM prompts."""
    report = await asyncio.to_thread(gateway.get_schema, request.model_dump())
    return {"success": True, "schema": report.to_dict()}


@router.post("/execute")
async def execute(request: ExecuteRequest, gateway: DatabaseGateway = Depends(get_gateway)) -> dict:
    """
    Run one read-only statement.

    Rows and header are tab-separated text; NULL renders as "NULL".
    """
    result = await asyncio.to_thread(gateway.execute_query, request.model_dump())
    return {"success": True, **result.to_dict()}
