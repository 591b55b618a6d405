"""
Services Layer for the PubChem MCP Server.

Exports the per-method PubChem handlers.
"""

from pubchem_mcp.services.pubchem_service import PubChemService

__all__ = ["PubChemService"]
