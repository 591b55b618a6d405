"""
PubChem MCP Tool
Single ``pubchem`` tool multiplexing every PUG REST operation by ``method``
Source: https://modelcontextprotocol.io/docs/concepts/tools
Verified: 2026-10-19
"""

import json
from typing import Any, Optional

from pydantic import ValidationError

from mcp.shared.exceptions import McpError
from mcp.types import CallToolResult, TextContent, Tool
from pubchem_mcp.core.enums import (
    ActivityOutcome,
    BatchOperation,
    ConformerType,
    DescriptorType,
    OutputFormat,
    PubChemMethod,
    SearchType,
)
from pubchem_mcp.gateways.base import GatewayError, GatewayResult
from pubchem_mcp.schemas.requests import (
    BATCH_MAX_ACCEPTED,
    MAX_RECORDS_LIMIT,
    THRESHOLD_MAX,
    THRESHOLD_MIN,
    MethodRequest,
    parse_method_request,
    summarize_validation_error,
)
from pubchem_mcp.services.pubchem_service import PubChemService
from pubchem_mcp.utils.errors import InvalidParamsError, MethodNotFoundError
from pubchem_mcp.utils.logging import get_logger

logger = get_logger(__name__)

TOOL_NAME = "pubchem"


def _enum_values(enum_cls: Any) -> list[str]:
    return [member.value for member in enum_cls]


# Tool definition
# Evidence: MCP tool schema
# Source: https://modelcontextprotocol.io/specification/2025-06-18/server/tools
# Verified: 2026-10-19
PUBCHEM_TOOL = Tool(
    name=TOOL_NAME,
    description=(
        "Unified PubChem tool. Search compounds by name, SMILES, InChI or CAS number, "
        "retrieve records, synonyms, properties, stereochemistry and 3D data, run "
        "similarity searches, look up bioassays, bioactivities, safety classification, "
        "external references and patents, or batch-process CIDs. Choose the operation "
        "with the 'method' parameter."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "method": {
                "type": "string",
                "enum": _enum_values(PubChemMethod),
                "description": "The PubChem operation to perform",
            },
            "query": {
                "type": "string",
                "description": "Search query (compound name, identifier, formula)",
            },
            "cid": {
                "type": ["number", "string"],
                "description": "PubChem Compound ID (CID)",
            },
            "aid": {
                "type": "number",
                "description": "PubChem Assay ID (AID)",
            },
            "smiles": {
                "type": "string",
                "description": "SMILES string",
            },
            "inchi": {
                "type": "string",
                "description": "InChI string or InChIKey",
            },
            "cas_number": {
                "type": "string",
                "description": "CAS Registry Number (e.g. 50-78-2)",
            },
            "search_type": {
                "type": "string",
                "enum": _enum_values(SearchType),
                "description": "Type of search input (default: name)",
            },
            "max_records": {
                "type": "number",
                "minimum": 1,
                "maximum": MAX_RECORDS_LIMIT,
                "description": "Maximum number of records (default: 100)",
            },
            "threshold": {
                "type": "number",
                "minimum": THRESHOLD_MIN,
                "maximum": THRESHOLD_MAX,
                "description": "Tanimoto similarity threshold in percent (default: 90)",
            },
            "properties": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Property names to retrieve",
            },
            "format": {
                "type": "string",
                "enum": _enum_values(OutputFormat),
                "description": "Output format (default: json); asnb records are returned base64-encoded",
            },
            "conformer_type": {
                "type": "string",
                "enum": _enum_values(ConformerType),
                "description": "Conformer type (default: 3d)",
            },
            "descriptor_type": {
                "type": "string",
                "enum": _enum_values(DescriptorType),
                "description": "Descriptor group",
            },
            "target": {
                "type": "string",
                "description": "Target protein or gene",
            },
            "activity_type": {
                "type": "string",
                "description": "Activity type (e.g. IC50, EC50)",
            },
            "activity_outcome": {
                "type": "string",
                "enum": _enum_values(ActivityOutcome),
                "description": "Activity outcome filter",
            },
            "cids": {
                "type": "array",
                "items": {"type": "number"},
                "minItems": 1,
                "maxItems": BATCH_MAX_ACCEPTED,
                "description": "Compound IDs for batch lookup (only the first 10 are processed)",
            },
            "operation": {
                "type": "string",
                "enum": _enum_values(BatchOperation),
                "description": "Batch operation (default: property)",
            },
            "source": {
                "type": "string",
                "description": "External database source",
            },
        },
        "required": ["method"],
    },
)


async def list_tools() -> list[Tool]:
    """
    List available tools.

    Returns:
        The single ``pubchem`` tool definition
    """
    return [PUBCHEM_TOOL]


# =============================================================================
# Dispatch
# =============================================================================


def resolve_method(arguments: Optional[dict[str, Any]]) -> PubChemMethod:
    """
    Read and check the ``method`` field of a tool call.

    Raises:
        InvalidParamsError: ``method`` is missing or not a string
        MethodNotFoundError: ``method`` names no known operation
    """
    method = (arguments or {}).get("method")
    if not isinstance(method, str):
        raise InvalidParamsError('The "method" parameter is required and must be a string')
    try:
        return PubChemMethod(method)
    except ValueError as err:
        raise MethodNotFoundError(f"Unknown method: {method}") from err


def validate_arguments(method: PubChemMethod, arguments: dict[str, Any]) -> MethodRequest:
    """Validate the argument bag; runs before any upstream request."""
    try:
        return parse_method_request(method, arguments)
    except ValidationError as err:
        summary = summarize_validation_error(err)
        logger.info(f"Rejected {method.value} arguments: {summary}")
        raise InvalidParamsError(f"Invalid {method.value} arguments: {summary}") from err


async def execute_method(service: PubChemService, request: MethodRequest) -> GatewayResult[Any]:
    """
    Run a validated request and capture any handler failure.

    Protocol errors are not captured; they must reach the client as-is.
    """
    try:
        return GatewayResult.ok(await service.execute(request), method=request.method)
    except GatewayError as e:
        return GatewayResult.failed(str(e), method=request.method, status_code=e.status_code)
    except McpError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected failure in {request.method}")
        return GatewayResult.failed(str(e) or type(e).__name__, method=request.method)


def render_result(method: PubChemMethod, result: GatewayResult[Any]) -> CallToolResult:
    """Shape a handler outcome into the MCP tool-result envelope."""
    if not result.success:
        return CallToolResult(
            content=[
                TextContent(
                    type="text",
                    text=f"Error executing method {method.value}: {result.error}",
                )
            ],
            isError=True,
        )

    data = result.data
    text = data if isinstance(data, str) else json.dumps(data, indent=2, ensure_ascii=False)
    return CallToolResult(content=[TextContent(type="text", text=text)])


async def call_tool(
    name: str,
    arguments: Optional[dict[str, Any]],
    service: Optional[PubChemService] = None,
) -> CallToolResult:
    """
    Execute the ``pubchem`` tool.

    Args:
        name: Tool name
        arguments: Tool arguments, including ``method``
        service: Optional service (tests inject one over a stub gateway)

    Returns:
        Tool result; upstream failures become ``isError`` results

    Raises:
        MethodNotFoundError: unknown tool or method
        InvalidParamsError: missing method or invalid arguments
    """
    if name != TOOL_NAME:
        raise MethodNotFoundError(f"Unknown tool: {name}")

    method = resolve_method(arguments)
    request = validate_arguments(method, arguments or {})

    logger.info(f"PubChem tool called: {method.value}")
    service = service or PubChemService()
    result = await execute_method(service, request)

    if not result.success:
        logger.warning(f"{method.value} failed: {result.error}")
    return render_result(method, result)
