"""
Protocol Exceptions
MCP errors surfaced to the client as JSON-RPC error responses
Source: https://modelcontextprotocol.io/specification/2025-06-18/basic#responses
Verified: 2026-10-19
"""

from mcp.shared.exceptions import McpError
from mcp.types import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    ErrorData,
)


class ProtocolError(McpError):
    """Base class for errors that must reach the client unwrapped."""

    code: int = INTERNAL_ERROR
    default_detail: str = "Internal error"

    def __init__(self, detail: str | None = None):
        super().__init__(ErrorData(code=self.code, message=detail or self.default_detail))

    @property
    def detail(self) -> str:
        return self.error.message


class MethodNotFoundError(ProtocolError):
    """Raised for an unknown tool name or unknown method value"""

    code = METHOD_NOT_FOUND
    default_detail = "Method not found"


class InvalidParamsError(ProtocolError):
    """Raised when tool arguments fail validation"""

    code = INVALID_PARAMS
    default_detail = "Invalid parameters"


class InvalidRequestError(ProtocolError):
    """Raised when a request cannot be routed (e.g. malformed resource URI)"""

    code = INVALID_REQUEST
    default_detail = "Invalid request"


class InternalError(ProtocolError):
    """Raised when a resource read fails upstream"""

    code = INTERNAL_ERROR
    default_detail = "Internal error"
