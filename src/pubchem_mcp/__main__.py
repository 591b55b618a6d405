"""Allow ``python -m pubchem_mcp``."""

from pubchem_mcp.mcp.server import run

if __name__ == "__main__":
    run()
