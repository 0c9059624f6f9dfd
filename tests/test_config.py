"""
Tests for configuration defaults, environment overrides and validation
"""

import pytest

from osm_services import ClientConfig, InvalidConfigError, MockTransport, OSMClient, get_config
from osm_services.config import validate_config


def test_defaults():
    config = get_config()
    assert config.api.server == "https://api.openstreetmap.org/"
    assert config.api.api_version == "0.6"
    assert config.api.timeout == 30
    assert config.nominatim.server == "nominatim"
    assert config.nominatim.format == "xml"
    assert config.nominatim.limit is None
    validate_config(config)


def test_get_config_returns_fresh_instances():
    first = get_config()
    first.api.server = "http://changed.example.com/"
    assert get_config().api.server == "https://api.openstreetmap.org/"


def test_validate_collects_every_problem():
    config = ClientConfig()
    config.api.server = "api.openstreetmap.org"
    config.api.timeout = 0
    config.nominatim.format = "yaml"
    config.nominatim.limit = -1

    with pytest.raises(InvalidConfigError) as exc:
        validate_config(config)

    message = str(exc.value)
    assert "api.server" in message
    assert "api.timeout" in message
    assert "nominatim.format" in message
    assert "nominatim.limit" in message


def test_from_env(monkeypatch):
    monkeypatch.setenv("OSM_API_SERVER", "http://api06.dev.openstreetmap.org/")
    monkeypatch.setenv("OSM_API_TIMEOUT", "90")
    monkeypatch.setenv("OSM_USER_AGENT", "tests/1.0")
    monkeypatch.setenv("NOMINATIM_SERVER", "mapquest")
    monkeypatch.setenv("NOMINATIM_EMAIL", "maps@example.com")

    config = ClientConfig.from_env()
    assert config.api.server == "http://api06.dev.openstreetmap.org/"
    assert config.api.timeout == 90
    assert config.api.user_agent == "tests/1.0"
    assert config.nominatim.server == "mapquest"
    assert config.nominatim.email == "maps@example.com"


def test_from_env_bad_timeout(monkeypatch):
    monkeypatch.setenv("OSM_API_TIMEOUT", "soon")
    with pytest.raises(InvalidConfigError):
        ClientConfig.from_env()


def test_client_rejects_invalid_config_before_any_request():
    config = ClientConfig()
    config.api.timeout = -5
    transport = MockTransport()
    with pytest.raises(InvalidConfigError):
        OSMClient(config, transport=transport)
    assert transport.requests == []
