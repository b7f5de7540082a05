"""HTTP API: request models, routers and error mapping."""

from .exception_handlers import setup_exception_handlers

__all__ = ["setup_exception_handlers"]
