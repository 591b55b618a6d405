"""
Unit Tests for Configuration Management
Tests settings defaults, environment overrides and validation
"""

import pytest
from pydantic import ValidationError

from pubchem_mcp.core.config import PubChemSettings, get_settings
from pubchem_mcp.gateways.pubchem_gateway import build_gateway_config


@pytest.mark.unit
class TestSettingsDefaults:
    """Test default configuration values"""

    def test_upstream_defaults(self):
        """Defaults target the public PUG REST root with a 30s timeout"""
        settings = PubChemSettings()

        assert settings.API_BASE_URL == "https://pubchem.ncbi.nlm.nih.gov/rest/pug"
        assert settings.REQUEST_TIMEOUT_SECONDS == 30.0
        assert settings.USER_AGENT == "PubChem-MCP-Server/1.0.0"
        assert settings.ACCEPT == "application/json"

    def test_server_identity_defaults(self):
        settings = PubChemSettings()

        assert settings.MCP_SERVER_NAME == "pubchem-server"
        assert settings.MCP_SERVER_VERSION == "1.0.0"
        assert settings.ENVIRONMENT == "development"


@pytest.mark.unit
class TestSettingsValidation:
    """Test configuration validation"""

    def test_timeout_must_be_positive(self):
        """Test that a zero timeout is rejected"""
        with pytest.raises(ValidationError) as exc_info:
            PubChemSettings(REQUEST_TIMEOUT_SECONDS=0)

        errors = exc_info.value.errors()
        assert any("REQUEST_TIMEOUT_SECONDS" in str(error) for error in errors)

    def test_patent_template_requires_placeholder(self):
        with pytest.raises(ValidationError):
            PubChemSettings(PATENT_URL_TEMPLATE="https://patents.example.org/")

    def test_trailing_slash_is_stripped(self):
        settings = PubChemSettings(API_BASE_URL="https://mirror.example.org/rest/pug/")
        assert settings.API_BASE_URL == "https://mirror.example.org/rest/pug"

    def test_log_level_is_uppercased(self):
        settings = PubChemSettings(LOG_LEVEL="debug")
        assert settings.LOG_LEVEL == "DEBUG"

    def test_environment_literal_validation(self):
        """Test that ENVIRONMENT only accepts valid values"""
        for env in ["development", "staging", "production", "testing"]:
            assert PubChemSettings(ENVIRONMENT=env).ENVIRONMENT == env

        with pytest.raises(ValidationError):
            PubChemSettings(ENVIRONMENT="qa")


@pytest.mark.unit
class TestEnvironmentOverrides:
    """Settings are read from PUBCHEM_-prefixed variables"""

    def test_prefixed_variables_override_defaults(self, monkeypatch):
        monkeypatch.setenv("PUBCHEM_REQUEST_TIMEOUT_SECONDS", "12.5")
        monkeypatch.setenv("PUBCHEM_USER_AGENT", "pubchem-tests/0.1")

        settings = PubChemSettings()

        assert settings.REQUEST_TIMEOUT_SECONDS == 12.5
        assert settings.USER_AGENT == "pubchem-tests/0.1"

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_gateway_config_is_built_from_settings(self):
        settings = PubChemSettings(REQUEST_TIMEOUT_SECONDS=7, USER_AGENT="ua-under-test")

        config = build_gateway_config(settings)

        assert config.base_url == settings.API_BASE_URL
        assert config.timeout_seconds == 7
        assert config.headers == {"User-Agent": "ua-under-test", "Accept": "application/json"}
