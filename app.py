"""
Database Gateway - FastAPI Application

An HTTP JSON service that connects to ad-hoc PostgreSQL or MySQL
databases with per-request credentials, introspects their schema and
runs read-only queries. Also proxies an LLM for text-to-SQL, chat and
translation, and keeps tool history and a prompt library in its own
metadata store.

Run with:  db-gateway --port 3001
"""

import argparse
import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Callable, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from api import setup_exception_handlers
from api.routers import database as database_routes
from api.routers import history as history_routes
from api.routers import llm as llm_routes
from api.routers import prompts as prompt_routes
from config import AppConfig, config as default_config
from database import ConnectionManager, DatabaseGateway
from llm import LLMClient, create_llm_client_from_config
from storage import MetadataStore, StorageError, init_metadata_store

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def create_app(
    app_config: Optional[AppConfig] = None,
    gateway: Optional[DatabaseGateway] = None,
    llm_client: Optional[LLMClient] = None,
    store_factory: Optional[Callable[[], MetadataStore]] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        app_config: Configuration. Uses global config if not provided.
        gateway: Database gateway. Built from app_config.gateway if not provided.
        llm_client: LLM provider client. Built from app_config.llm if not provided.
        store_factory: Returns the metadata store. When it raises StorageError,
            the history and prompt routes are not mounted.
    """
    app_config = app_config or default_config

    is_valid, errors = app_config.validate()
    if not is_valid:
        for error in errors:
            logger.warning(f"Configuration: {error}")

    gateway = gateway or DatabaseGateway(connections=ConnectionManager(app_config.gateway))
    llm_client = llm_client or create_llm_client_from_config(app_config.llm)
    store_factory = store_factory or (lambda: init_metadata_store(app_config.metadata))

    try:
        store = store_factory()
    except StorageError as e:
        logger.warning(f"Metadata store unavailable, history and prompt routes disabled: {e}")
        store = None

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        llm_client.close()
        if store is not None:
            store.close()

    app = FastAPI(title="Database Gateway", version="0.1.0", lifespan=lifespan)
    app.state.config = app_config
    app.state.gateway = gateway
    app.state.llm_client = llm_client
    app.state.store = store

    setup_exception_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_config.server.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f}ms)")
        return response

    @app.get("/api/health")
    async def health() -> dict:
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    app.include_router(database_routes.router, prefix="/api/db", tags=["database"])
    app.include_router(llm_routes.router, prefix="/api/ollama", tags=["llm"])
    if store is not None:
        app.include_router(history_routes.router, prefix="/api/history", tags=["history"])
        app.include_router(prompt_routes.router, prefix="/api/prompts", tags=["prompts"])

    return app


def main() -> None:
    """Start the gateway with uvicorn."""
    parser = argparse.ArgumentParser(description="Start the database gateway")
    parser.add_argument(
        "--port",
        type=int,
        default=default_config.server.port,
        help=f"Port to run the server on (default: {default_config.server.port})",
    )
    args = parser.parse_args()

    configure_logging(default_config.logging.level)
    uvicorn.run(create_app(), host=default_config.server.host, port=args.port)


if __name__ == "__main__":
    main()
