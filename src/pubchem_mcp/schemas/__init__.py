"""
Pydantic Schemas for the PubChem MCP Server.

This module exports the per-method request models and validators.
"""

from pubchem_mcp.schemas.requests import (
    METHOD_MODELS,
    VALIDATORS,
    MethodRequest,
    is_valid_request,
    parse_method_request,
    summarize_validation_error,
)

__all__ = [
    "METHOD_MODELS",
    "VALIDATORS",
    "MethodRequest",
    "is_valid_request",
    "parse_method_request",
    "summarize_validation_error",
]
