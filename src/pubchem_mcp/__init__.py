"""PubChem MCP Server: PubChem PUG REST exposed as Model Context Protocol tools and resources."""

__version__ = "1.0.0"
