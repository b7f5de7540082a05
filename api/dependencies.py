"""Request-scoped access to the objects wired up in create_app."""

from fastapi import HTTPException, Request

from database import DatabaseGateway
from llm import LLMClient
from storage import MetadataStore


def get_gateway(request: Request) -> DatabaseGateway:
    return request.app.state.gateway


def get_llm_client(request: Request) -> LLMClient:
    return request.app.state.llm_client


def get_store(request: Request) -> MetadataStore:
    return request.app.state.store


def parse_id(raw: str) -> int:
    """Path ids must be positive integers."""
    try:
        value = int(raw)
    except ValueError:
        raise HTTPException(status_code=400, detail="invalid id")
    if value <= 0:
        raise HTTPException(status_code=400, detail="invalid id")
    return value
