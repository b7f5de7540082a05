"""
Exception handlers mapping the service's errors to JSON responses.

Every error body has the shape {"success": false, "error": "<message>"}.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from database import GatewayError, SecurityError, ValidationError
from llm import LLMError, TranslationRequestError
from storage import NotFoundError, StorageError

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


async def gateway_exception_handler(request: Request, exc: GatewayError) -> JSONResponse:
    if isinstance(exc, (ValidationError, SecurityError)):
        logger.warning(f"Rejected {request.method} {request.url.path}: {exc}")
        return error_response(status.HTTP_400_BAD_REQUEST, str(exc))
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))


async def translation_exception_handler(request: Request, exc: TranslationRequestError) -> JSONResponse:
    return error_response(status.HTTP_400_BAD_REQUEST, str(exc))


async def llm_exception_handler(request: Request, exc: LLMError) -> JSONResponse:
    logger.error(f"LLM request failed on {request.url.path}: {exc}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))


async def storage_exception_handler(request: Request, exc: StorageError) -> JSONResponse:
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))


async def not_found_exception_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return error_response(status.HTTP_404_NOT_FOUND, str(exc))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning(f"Invalid request body on {request.url.path}: {exc.errors()}")
    return error_response(status.HTTP_400_BAD_REQUEST, "Invalid request")


def setup_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(GatewayError, gateway_exception_handler)
    app.add_exception_handler(TranslationRequestError, translation_exception_handler)
    app.add_exception_handler(LLMError, llm_exception_handler)
    app.add_exception_handler(StorageError, storage_exception_handler)
    app.add_exception_handler(NotFoundError, not_found_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
