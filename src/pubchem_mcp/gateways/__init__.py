"""
Upstream gateway module for the PubChem MCP Server.

Wraps the PubChem PUG REST API behind a single shared async HTTP client and
a uniform error hierarchy.
"""

from pubchem_mcp.gateways.base import (
    GatewayConfig,
    GatewayError,
    GatewayResult,
    UpstreamNotFoundError,
    UpstreamResponseError,
    UpstreamStatusError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
)
from pubchem_mcp.gateways.pubchem_gateway import (
    PubChemGateway,
    build_gateway_config,
    get_pubchem_gateway,
    quote_segment,
    reset_pubchem_gateway,
)

__all__ = [
    # Base
    "GatewayConfig",
    "GatewayError",
    "GatewayResult",
    "UpstreamNotFoundError",
    "UpstreamResponseError",
    "UpstreamStatusError",
    "UpstreamTimeoutError",
    "UpstreamUnavailableError",
    # PubChem
    "PubChemGateway",
    "build_gateway_config",
    "get_pubchem_gateway",
    "quote_segment",
    "reset_pubchem_gateway",
]
