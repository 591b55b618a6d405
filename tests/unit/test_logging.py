"""
Unit tests for logging configuration.
"""

import logging
import sys

import pytest
from loguru import logger

from pubchem_mcp.utils.logging import (
    InterceptHandler,
    get_logger,
    is_package_record,
    setup_logging,
)


@pytest.fixture
def restore_logger():
    root = logging.getLogger()
    root_level = root.level
    yield
    logger.remove()
    logger.add(sys.stderr, level="INFO")
    root.handlers = [h for h in root.handlers if not isinstance(h, InterceptHandler)]
    root.setLevel(root_level)


@pytest.mark.unit
class TestLogging:
    """Tests for loguru sinks."""

    def test_file_sink_records_bound_name(self, tmp_path, restore_logger):
        log_file = tmp_path / "logs" / "server.log"

        setup_logging(level="DEBUG", log_file=str(log_file))
        get_logger("pubchem_mcp.tests").debug("gateway ready")

        content = log_file.read_text()
        assert "pubchem_mcp.tests" in content
        assert "gateway ready" in content

    def test_level_filters_file_sink(self, tmp_path, restore_logger):
        log_file = tmp_path / "server.log"

        setup_logging(level="WARNING", log_file=str(log_file))
        get_logger("quiet").info("not written")

        assert "not written" not in log_file.read_text()


@pytest.mark.unit
class TestLibraryRecords:
    """Tests for stdlib records forwarded from the mcp SDK and httpx."""

    def test_package_names(self):
        assert is_package_record("pubchem_mcp")
        assert is_package_record("pubchem_mcp.gateways.pubchem_gateway")
        assert not is_package_record("pubchem_mcp_extras")
        assert not is_package_record("httpx")

    def test_setup_installs_intercept_handler_once(self, tmp_path, restore_logger):
        setup_logging(level="INFO")
        setup_logging(level="INFO")

        handlers = [h for h in logging.getLogger().handlers if isinstance(h, InterceptHandler)]
        assert len(handlers) == 1

    def test_library_warning_reaches_file_sink(self, tmp_path, restore_logger):
        log_file = tmp_path / "server.log"

        setup_logging(level="DEBUG", log_file=str(log_file))
        logging.getLogger("mcp.server.lowlevel.server").warning("session closed early")

        content = log_file.read_text()
        assert "mcp.server.lowlevel.server" in content
        assert "session closed early" in content

    def test_library_info_is_dropped_below_warning(self, tmp_path, restore_logger):
        log_file = tmp_path / "server.log"

        setup_logging(level="DEBUG", log_file=str(log_file))
        logging.getLogger("httpx").info("HTTP Request: GET https://pubchem.test/rest/pug")
        get_logger("pubchem_mcp.gateways.pubchem_gateway").debug("PubChem GET /compound")

        content = log_file.read_text()
        assert "HTTP Request" not in content
        assert "PubChem GET /compound" in content
