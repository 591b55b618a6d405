"""
Pytest Configuration and Fixtures.
Shared test fixtures for all test modules.
"""

import sys
from pathlib import Path
from typing import Any, Callable, Optional, Union

import httpx
import pytest

# Add src to path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from pubchem_mcp.core.config import get_settings  # noqa: E402
from pubchem_mcp.gateways.base import GatewayConfig  # noqa: E402
from pubchem_mcp.gateways.pubchem_gateway import PubChemGateway  # noqa: E402
from pubchem_mcp.services.pubchem_service import PubChemService  # noqa: E402

TEST_BASE_URL = "https://pubchem.test/rest/pug"
PATENT_URL_TEMPLATE = "https://patents.google.com/patent/{patent_id}"

Responder = Callable[[httpx.Request], httpx.Response]


class StubUpstream:
    """
    Stand-in for PUG REST behind ``httpx.MockTransport``.

    Routes are matched by path fragment in registration order; unmatched
    requests get PubChem's 404 fault. Every request is recorded.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self._routes: list[tuple[str, Responder]] = []
        self.transport = httpx.MockTransport(self._handle)

    def add(
        self,
        fragment: str,
        json: Any = None,
        *,
        status_code: int = 200,
        text: Optional[str] = None,
        responder: Optional[Responder] = None,
    ) -> None:
        if responder is None:
            if text is not None:
                responder = lambda request: httpx.Response(status_code, text=text)  # noqa: E731
            else:
                responder = lambda request: httpx.Response(status_code, json=json)  # noqa: E731
        self._routes.append((fragment, responder))

    def fail(self, fragment: str, error: Union[type[httpx.TransportError], None] = None) -> None:
        """Make requests matching ``fragment`` fail at the transport level."""
        error_cls = error or httpx.ConnectError

        def raise_error(request: httpx.Request) -> httpx.Response:
            raise error_cls("connection refused", request=request)

        self._routes.append((fragment, raise_error))

    @property
    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for fragment, responder in self._routes:
            if fragment in request.url.path:
                return responder(request)
        return httpx.Response(
            404,
            json={
                "Fault": {
                    "Code": "PUGREST.NotFound",
                    "Message": "No CID found",
                    "Details": ["No CID found that matches the given name"],
                }
            },
        )


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached process-wide; start every test from a clean slate."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def upstream() -> StubUpstream:
    return StubUpstream()


@pytest.fixture
def gateway(upstream: StubUpstream) -> PubChemGateway:
    config = GatewayConfig(base_url=TEST_BASE_URL, timeout_seconds=5.0)
    return PubChemGateway(config=config, transport=upstream.transport)


@pytest.fixture
def service(gateway: PubChemGateway) -> PubChemService:
    return PubChemService(gateway, patent_url_template=PATENT_URL_TEMPLATE)


@pytest.fixture
def property_table():
    """Minimal PUG REST property response for aspirin."""
    return {
        "PropertyTable": {
            "Properties": [
                {
                    "CID": 2244,
                    "MolecularFormula": "C9H8O4",
                    "MolecularWeight": "180.16",
                    "CanonicalSMILES": "CC(=O)OC1=CC=CC=C1C(=O)O",
                    "IUPACName": "2-acetyloxybenzoic acid",
                }
            ]
        }
    }


# Configure pytest markers
def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
