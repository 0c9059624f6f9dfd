"""
Tests for capabilities parsing and the API version check
"""

import re
import pytest

from osm_services import (
    CapabilitiesError, ClientConfig, MockTransport, OSMClient, UnsupportedVersionError
)
from osm_services.osm import Capabilities, ServiceStatus
from conftest import DEV_SERVER, load_response


def test_create_client(make_client):
    client = make_client("capabilities.xml")
    assert isinstance(client, OSMClient)
    assert client.transport.requests[0].url == "http://api06.dev.openstreetmap.org/api/capabilities"


def test_timeout(make_client):
    client = make_client("capabilities.xml")
    assert client.capabilities.timeout == 300


def test_capabilities_limits_and_status(make_client):
    caps = make_client("capabilities2.xml").capabilities
    assert caps.min_version == 0.5
    assert caps.max_version == 0.6
    assert caps.max_area == 0.25
    assert caps.tracepoints_per_page == 5000
    assert caps.max_nodes == 2000
    assert caps.max_elements == 50000
    assert caps.database_status == ServiceStatus.ONLINE
    assert caps.api_status == "readonly"
    assert caps.gpx_status == "offline"


def test_capabilities_without_status(make_client):
    caps = make_client("capabilitiesNoStatus.xml").capabilities
    assert caps.database_status is None
    assert caps.api_status is None
    assert caps.gpx_status is None


@pytest.mark.parametrize("response", ["capabilities_min.xml", "capabilities_max.xml"])
def test_unsupported_version(make_client, response):
    with pytest.raises(UnsupportedVersionError, match=re.escape("Specified API Version 0.6 not supported.")) as exc:
        make_client(response)
    assert exc.value.version == "0.6"


def test_invalid_capabilities(make_client):
    with pytest.raises(CapabilitiesError, match="Problem checking server capabilities"):
        make_client("capabilities_invalid.xml")


def test_capabilities_http_error():
    transport = MockTransport().add_response(b"", status_code=500)
    config = ClientConfig()
    config.api.server = DEV_SERVER
    with pytest.raises(CapabilitiesError):
        OSMClient(config, transport=transport)


@pytest.mark.parametrize("payload", [
    None,
    b"",
    b"<osm><api>",
    b"<osm/>",
    b'<osm><api><version minimum="zero" maximum="0.6"/></api></osm>',
    b'<osm><api><version minimum="0.6" maximum="0.6"/><status api="broken"/></api></osm>',
])
def test_parse_rejects_bad_payloads(payload):
    with pytest.raises(CapabilitiesError, match="Problem checking server capabilities"):
        Capabilities.parse(payload)


def test_parse_minimal_payload():
    caps = Capabilities.parse('<osm><api><version minimum="0.6" maximum="0.6"/></api></osm>')
    assert caps.max_area is None
    assert caps.max_nodes is None
    assert caps.timeout is None
    assert caps.api_status is None


def test_version_range_check():
    caps = Capabilities.parse(load_response("capabilities2.xml"))
    assert caps.supports("0.6")
    assert caps.supports(0.5)
    assert not caps.supports("0.7")
    caps.check_version("0.6")
    with pytest.raises(UnsupportedVersionError):
        caps.check_version("0.4")


def test_capabilities_are_immutable():
    caps = Capabilities.parse(load_response("capabilities.xml"))
    with pytest.raises(AttributeError):
        caps.max_area = 1.0
