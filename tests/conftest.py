"""
Shared fixtures for osm_services tests

Responses recorded from the OSM API and Nominatim live in tests/responses,
local .osm files in tests/files. No test touches the network.
"""

import sys
import pytest
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from osm_services import ClientConfig, MockTransport, OSMClient

RESPONSES_DIR = Path(__file__).parent / "responses"
FILES_DIR = Path(__file__).parent / "files"

DEV_SERVER = "http://api06.dev.openstreetmap.org/"


def load_response(name: str) -> bytes:
    return (RESPONSES_DIR / name).read_bytes()


@pytest.fixture(scope="session")
def files_dir():
    return FILES_DIR


@pytest.fixture
def mock_transport():
    """Build a MockTransport replaying the named response files in order"""
    def _make(*names):
        return MockTransport([load_response(name) for name in names])
    return _make


@pytest.fixture
def make_client(mock_transport):
    """Build an OSMClient against the dev server, replaying responses in order"""
    def _make(*names, server=DEV_SERVER):
        config = ClientConfig()
        config.api.server = server
        transport = mock_transport(*names)
        return OSMClient(config, transport=transport)
    return _make
