"""
Error taxonomy for the database gateway.

Every failure surfaced by a gateway operation is one of these, so the HTTP
layer can map them to a status code without inspecting driver exceptions.
"""


class GatewayError(Exception):
    """Base class for all gateway failures."""


class ValidationError(GatewayError):
    """A required field is missing or invalid. Raised before any network I/O."""


class DatabaseConnectionError(GatewayError):
    """The connection could not be established or verified."""


class SecurityError(GatewayError):
    """The statement is not in the read-only allowlist."""


class QueryError(GatewayError):
    """The database rejected the statement or failed while executing it."""
