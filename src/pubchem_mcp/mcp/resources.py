"""
PubChem MCP Resources
Read-only ``pubchem://`` URIs routed to PUG REST lookups
Source: https://modelcontextprotocol.io/specification/2025-06-18/server/resources
Verified: 2026-10-19
"""

import json
import re
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional
from urllib.parse import unquote

from mcp.types import ReadResourceResult, ResourceTemplate, TextResourceContents
from pubchem_mcp.gateways.base import GatewayError
from pubchem_mcp.gateways.pubchem_gateway import PubChemGateway, get_pubchem_gateway
from pubchem_mcp.services.pubchem_service import (
    DEFAULT_MAX_RECORDS,
    DEFAULT_SIMILARITY_THRESHOLD,
)
from pubchem_mcp.utils.errors import InternalError, InvalidRequestError
from pubchem_mcp.utils.logging import get_logger

logger = get_logger(__name__)

MIME_TYPE = "application/json"

STRUCTURE_PROPERTIES = "CanonicalSMILES,IsomericSMILES,InChI,InChIKey"
RESOURCE_PROPERTIES = (
    "MolecularWeight,XLogP,TPSA,HBondDonorCount,HBondAcceptorCount,RotatableBondCount,Complexity"
)


RESOURCE_TEMPLATES = [
    ResourceTemplate(
        uriTemplate="pubchem://compound/{cid}",
        name="PubChem compound entry",
        mimeType=MIME_TYPE,
        description="Complete compound information for a PubChem CID",
    ),
    ResourceTemplate(
        uriTemplate="pubchem://structure/{cid}",
        name="Chemical structure data",
        mimeType=MIME_TYPE,
        description="2D/3D structure information for a compound",
    ),
    ResourceTemplate(
        uriTemplate="pubchem://properties/{cid}",
        name="Chemical properties",
        mimeType=MIME_TYPE,
        description="Molecular properties and descriptors for a compound",
    ),
    ResourceTemplate(
        uriTemplate="pubchem://bioassay/{aid}",
        name="PubChem bioassay data",
        mimeType=MIME_TYPE,
        description="Bioassay information and results for an AID",
    ),
    ResourceTemplate(
        uriTemplate="pubchem://similarity/{smiles}",
        name="Similarity search results",
        mimeType=MIME_TYPE,
        description="Chemical similarity search results for a SMILES string",
    ),
    ResourceTemplate(
        uriTemplate="pubchem://safety/{cid}",
        name="Safety and toxicity data",
        mimeType=MIME_TYPE,
        description="Safety classifications and toxicity information",
    ),
]


async def list_resource_templates() -> list[ResourceTemplate]:
    return list(RESOURCE_TEMPLATES)


# =============================================================================
# Routing
# =============================================================================

Fetcher = Callable[[PubChemGateway, str], Awaitable[Any]]


@dataclass(frozen=True)
class ResourceRoute:
    """One URI pattern, the lookup it triggers and its failure prefix."""

    pattern: re.Pattern
    fetch: Fetcher
    failure: str
    decode: bool = False


async def _fetch_compound(gateway: PubChemGateway, cid: str) -> Any:
    return await gateway.get_json(f"/compound/cid/{cid}/JSON")


async def _fetch_structure(gateway: PubChemGateway, cid: str) -> Any:
    return await gateway.get_json(f"/compound/cid/{cid}/property/{STRUCTURE_PROPERTIES}/JSON")


async def _fetch_properties(gateway: PubChemGateway, cid: str) -> Any:
    return await gateway.get_json(f"/compound/cid/{cid}/property/{RESOURCE_PROPERTIES}/JSON")


async def _fetch_bioassay(gateway: PubChemGateway, aid: str) -> Any:
    return await gateway.get_json(f"/assay/aid/{aid}/JSON")


async def _fetch_similarity(gateway: PubChemGateway, smiles: str) -> Any:
    return await gateway.post_json(
        "/compound/similarity/smiles/JSON",
        {
            "smiles": smiles,
            "Threshold": DEFAULT_SIMILARITY_THRESHOLD,
            "MaxRecords": DEFAULT_MAX_RECORDS,
        },
    )


async def _fetch_safety(gateway: PubChemGateway, cid: str) -> Any:
    return await gateway.get_json(f"/compound/cid/{cid}/classification/JSON")


# Evaluated in order; the first match wins.
RESOURCE_ROUTES: list[ResourceRoute] = [
    ResourceRoute(re.compile(r"^pubchem://compound/([0-9]+)$"), _fetch_compound, "Failed to fetch compound {}"),
    ResourceRoute(re.compile(r"^pubchem://structure/([0-9]+)$"), _fetch_structure, "Failed to fetch structure for {}"),
    ResourceRoute(re.compile(r"^pubchem://properties/([0-9]+)$"), _fetch_properties, "Failed to fetch properties for {}"),
    ResourceRoute(re.compile(r"^pubchem://bioassay/([0-9]+)$"), _fetch_bioassay, "Failed to fetch bioassay {}"),
    ResourceRoute(re.compile(r"^pubchem://similarity/(.+)$"), _fetch_similarity, "Failed to perform similarity search", decode=True),
    ResourceRoute(re.compile(r"^pubchem://safety/([0-9]+)$"), _fetch_safety, "Failed to fetch safety data for {}"),
]


def match_route(uri: str) -> tuple[ResourceRoute, str]:
    """
    Find the route for ``uri`` and its captured identifier.

    Raises:
        InvalidRequestError: no route matches
    """
    for route in RESOURCE_ROUTES:
        match = route.pattern.match(uri)
        if match:
            value = match.group(1)
            if route.decode:
                value = unquote(value)
            return route, value
    raise InvalidRequestError(f"Invalid URI format: {uri}")


async def read_resource(uri: Any, gateway: Optional[PubChemGateway] = None) -> ReadResourceResult:
    """
    Read a ``pubchem://`` resource.

    Raises:
        InvalidRequestError: the URI matches no template
        InternalError: the upstream lookup failed
    """
    uri_text = str(uri)
    route, value = match_route(uri_text)
    gateway = gateway or get_pubchem_gateway()

    logger.info(f"Reading resource {uri_text}")
    try:
        data = await route.fetch(gateway, value)
    except GatewayError as e:
        logger.warning(f"Resource read failed for {uri_text}: {e}")
        raise InternalError(f"{route.failure.format(value)}: {e}") from e

    return ReadResourceResult(
        contents=[
            TextResourceContents(
                uri=uri_text,
                mimeType=MIME_TYPE,
                text=json.dumps(data, indent=2, ensure_ascii=False),
            )
        ]
    )


__all__ = [
    "RESOURCE_TEMPLATES",
    "list_resource_templates",
    "match_route",
    "read_resource",
]
