"""
Base types for upstream HTTP gateways.

Provides:
- Gateway error hierarchy (timeouts, connection failures, HTTP status errors)
- Immutable gateway configuration
- Result wrapper separating success payloads from failure reasons
"""

from dataclasses import dataclass, field
from typing import Any, Generic, Optional, TypeVar

TResponse = TypeVar("TResponse")


class GatewayError(Exception):
    """Base exception for gateway errors."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.original_error = original_error


class UpstreamUnavailableError(GatewayError):
    """Raised when the upstream service cannot be reached."""

    pass


class UpstreamTimeoutError(GatewayError):
    """Raised when an upstream request times out."""

    pass


class UpstreamStatusError(GatewayError):
    """Raised when the upstream answers with a non-success status."""

    pass


class UpstreamNotFoundError(UpstreamStatusError):
    """Raised when the upstream answers 404 (no matching record)."""

    pass


class UpstreamResponseError(GatewayError):
    """Raised when an upstream body cannot be decoded."""

    pass


@dataclass(frozen=True)
class GatewayConfig:
    """Configuration for a gateway instance. Immutable once built."""

    base_url: str
    timeout_seconds: float = 30.0
    user_agent: str = "PubChem-MCP-Server/1.0.0"
    accept: str = "application/json"

    @property
    def headers(self) -> dict[str, str]:
        return {"User-Agent": self.user_agent, "Accept": self.accept}


@dataclass
class GatewayResult(Generic[TResponse]):
    """Result wrapper for gateway-backed operations."""

    success: bool
    data: Optional[TResponse] = None
    error: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, data: TResponse, **metadata: Any) -> "GatewayResult[TResponse]":
        return cls(success=True, data=data, metadata=metadata)

    @classmethod
    def failed(cls, error: str, **metadata: Any) -> "GatewayResult[TResponse]":
        return cls(success=False, error=error, metadata=metadata)
