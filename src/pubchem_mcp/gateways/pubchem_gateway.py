"""
PubChem PUG REST Gateway.

Source: https://pubchem.ncbi.nlm.nih.gov/docs/pug-rest
Verified: 2026-10-19

Thin async HTTP client over the PUG REST root. One ``httpx.AsyncClient``
is built from a frozen ``GatewayConfig`` and shared by every request;
transport, timeout and status failures are translated into ``GatewayError``
subclasses so callers never see raw httpx exceptions. No retries are made.
"""

from typing import Any, Optional
from urllib.parse import quote

import httpx

from pubchem_mcp.core.config import PubChemSettings, get_settings
from pubchem_mcp.gateways.base import (
    GatewayConfig,
    GatewayError,
    UpstreamNotFoundError,
    UpstreamResponseError,
    UpstreamStatusError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
)
from pubchem_mcp.utils.logging import get_logger

logger = get_logger(__name__)

# Characters left unescaped in path segments (mirrors encodeURIComponent)
_SEGMENT_SAFE = "!~*'()"


def quote_segment(value: Any) -> str:
    """Percent-encode a user-supplied value for use as one path segment."""
    return quote(str(value), safe=_SEGMENT_SAFE)


def build_gateway_config(settings: Optional[PubChemSettings] = None) -> GatewayConfig:
    """Freeze the HTTP-relevant settings into a gateway configuration."""
    settings = settings or get_settings()
    return GatewayConfig(
        base_url=settings.API_BASE_URL,
        timeout_seconds=settings.REQUEST_TIMEOUT_SECONDS,
        user_agent=settings.USER_AGENT,
        accept=settings.ACCEPT,
    )


class PubChemGateway:
    """
    Async gateway to PubChem PUG REST.

    Provides:
    - JSON GET lookups
    - Raw text and byte GETs (SDF, XML, ASN.1 records)
    - JSON and form-encoded POST
    """

    def __init__(
        self,
        config: Optional[GatewayConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the gateway.

        Args:
            config: Optional gateway configuration. If not provided,
                    built from application settings.
            transport: Optional httpx transport (used by tests to stub upstream).
        """
        self.config = config or build_gateway_config()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def gateway_name(self) -> str:
        return "PubChem"

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the shared HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.config.base_url,
                timeout=self.config.timeout_seconds,
                headers=self.config.headers,
                transport=self._transport,
            )
        return self._client

    # =========================================================================
    # Request helpers
    # =========================================================================

    async def get_json(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        """GET ``path`` and decode the JSON body."""
        response = await self._request("GET", path, params=params)
        return self._decode_json(response, path)

    async def get_text(self, path: str, params: Optional[dict[str, Any]] = None) -> str:
        """GET ``path`` and return the body as text."""
        response = await self._request("GET", path, params=params)
        return response.text

    async def get_bytes(self, path: str, params: Optional[dict[str, Any]] = None) -> bytes:
        """GET ``path`` and return the undecoded body."""
        response = await self._request("GET", path, params=params)
        return response.content

    async def post_json(self, path: str, payload: dict[str, Any]) -> Any:
        """POST a JSON body to ``path`` and decode the JSON response."""
        response = await self._request("POST", path, json=payload)
        return self._decode_json(response, path)

    async def post_form(self, path: str, data: dict[str, Any]) -> Any:
        """POST a form-encoded body to ``path`` and decode the JSON response."""
        response = await self._request("POST", path, data=data)
        return self._decode_json(response, path)

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        logger.debug(f"{self.gateway_name} {method} {path}")

        try:
            response = await self.client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            raise UpstreamTimeoutError(
                f"Request to {path} timed out after {self.config.timeout_seconds}s",
                original_error=e,
            ) from e
        except httpx.TransportError as e:
            raise UpstreamUnavailableError(
                f"Could not reach PubChem: {e}",
                original_error=e,
            ) from e

        if response.is_success:
            return response

        message = f"PubChem returned HTTP {response.status_code}"
        fault = self._fault_message(response)
        if fault:
            message = f"{message}: {fault}"

        logger.warning(f"{self.gateway_name} {method} {path} failed: {message}")

        if response.status_code == 404:
            raise UpstreamNotFoundError(message, status_code=404)
        raise UpstreamStatusError(message, status_code=response.status_code)

    @staticmethod
    def _decode_json(response: httpx.Response, path: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamResponseError(
                f"PubChem returned a non-JSON body for {path}",
                status_code=response.status_code,
                original_error=e,
            ) from e

    @staticmethod
    def _fault_message(response: httpx.Response) -> Optional[str]:
        """Extract the PUG REST ``Fault`` message from an error body, if any."""
        try:
            fault = response.json()["Fault"]
            message = fault.get("Message")
            details = fault.get("Details") or []
        except (ValueError, KeyError, TypeError, AttributeError):
            return None

        if message and isinstance(details, list) and details:
            return f"{message} ({'; '.join(str(d) for d in details)})"
        return message

    async def close(self) -> None:
        """Clean up gateway resources."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        logger.info(f"{self.gateway_name} gateway closed")


# Singleton instance
_pubchem_gateway: Optional[PubChemGateway] = None


def get_pubchem_gateway() -> PubChemGateway:
    """Get or create the singleton PubChem gateway instance."""
    global _pubchem_gateway
    if _pubchem_gateway is None:
        _pubchem_gateway = PubChemGateway()
    return _pubchem_gateway


async def reset_pubchem_gateway() -> None:
    """Close and drop the singleton gateway (shutdown and tests)."""
    global _pubchem_gateway
    if _pubchem_gateway:
        await _pubchem_gateway.close()
    _pubchem_gateway = None


__all__ = [
    "GatewayError",
    "PubChemGateway",
    "build_gateway_config",
    "get_pubchem_gateway",
    "quote_segment",
    "reset_pubchem_gateway",
]
