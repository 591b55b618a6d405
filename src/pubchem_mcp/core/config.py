"""
PubChem MCP Server Configuration
Pydantic Settings for environment-based configuration
Source: https://docs.pydantic.dev/latest/concepts/pydantic_settings/
Verified: 2026-10-19
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PubChemSettings(BaseSettings):
    """
    Server settings loaded from environment variables.

    All variables are prefixed with ``PUBCHEM_`` (e.g. ``PUBCHEM_LOG_LEVEL``).
    A ``.env`` file in the working directory is read when present.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="PUBCHEM_",
    )

    # ============================================================================
    # Application Settings
    # ============================================================================
    ENVIRONMENT: Literal["development", "staging", "production", "testing"] = Field(
        default="development", description="Environment: development, staging, production, testing"
    )
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FILE: str | None = Field(default=None, description="Optional log file path")
    JSON_LOGS: bool = Field(default=False, description="Emit logs as JSON lines")

    # ============================================================================
    # PubChem PUG REST
    # ============================================================================
    API_BASE_URL: str = Field(
        default="https://pubchem.ncbi.nlm.nih.gov/rest/pug",
        description="PUG REST root",
    )
    REQUEST_TIMEOUT_SECONDS: float = Field(
        default=30.0, gt=0, description="Timeout applied to every upstream request (seconds)"
    )
    USER_AGENT: str = Field(
        default="PubChem-MCP-Server/1.0.0", description="User-Agent header sent upstream"
    )
    ACCEPT: str = Field(default="application/json", description="Accept header sent upstream")
    PATENT_URL_TEMPLATE: str = Field(
        default="https://patents.google.com/patent/{patent_id}",
        description="Template for patent links derived from PubChem patent IDs",
    )

    # ============================================================================
    # MCP Configuration
    # ============================================================================
    MCP_SERVER_NAME: str = Field(default="pubchem-server", description="MCP server name")
    MCP_SERVER_VERSION: str = Field(default="1.0.0", description="MCP server version")

    @field_validator("API_BASE_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Upstream paths are joined with a leading slash."""
        return v.rstrip("/")

    @field_validator("PATENT_URL_TEMPLATE")
    @classmethod
    def require_patent_placeholder(cls, v: str) -> str:
        if "{patent_id}" not in v:
            raise ValueError("PATENT_URL_TEMPLATE must contain a {patent_id} placeholder")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()


@lru_cache
def get_settings() -> PubChemSettings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded once and reused.
    Call ``get_settings.cache_clear()`` to reload (tests only).
    """
    return PubChemSettings()
