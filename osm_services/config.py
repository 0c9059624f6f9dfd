"""
Configuration settings for osm_services
"""

from dataclasses import dataclass, field
from typing import Optional
import os

from .exceptions import InvalidConfigError


@dataclass
class APIConfig:
    """OSM API endpoint and request settings"""
    # Base URL, API paths ("api/capabilities", "api/0.6/...") are appended
    server: str = "https://api.openstreetmap.org/"
    api_version: str = "0.6"

    # Request settings
    timeout: int = 30
    user_agent: str = "osm-services/0.1"


@dataclass
class NominatimConfig:
    """Nominatim geocoder defaults"""
    # Alias ("nominatim", "mapquest") or absolute URL
    server: str = "nominatim"
    format: str = "xml"
    limit: Optional[int] = None

    # Nominatim usage policy asks heavy users to identify themselves
    email: Optional[str] = None


@dataclass
class ClientConfig:
    """Client configuration"""
    api: APIConfig = field(default_factory=APIConfig)
    nominatim: NominatimConfig = field(default_factory=NominatimConfig)

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Build a configuration, overriding defaults from the environment"""
        config = cls()
        if os.environ.get("OSM_API_SERVER"):
            config.api.server = os.environ["OSM_API_SERVER"]
        if os.environ.get("OSM_API_TIMEOUT"):
            try:
                config.api.timeout = int(os.environ["OSM_API_TIMEOUT"])
            except ValueError as e:
                raise InvalidConfigError(
                    f"OSM_API_TIMEOUT must be an integer, got {os.environ['OSM_API_TIMEOUT']!r}"
                ) from e
        if os.environ.get("OSM_USER_AGENT"):
            config.api.user_agent = os.environ["OSM_USER_AGENT"]
        if os.environ.get("NOMINATIM_SERVER"):
            config.nominatim.server = os.environ["NOMINATIM_SERVER"]
        if os.environ.get("NOMINATIM_EMAIL"):
            config.nominatim.email = os.environ["NOMINATIM_EMAIL"]
        return config


def get_config() -> ClientConfig:
    """Get a default configuration"""
    return ClientConfig()


def validate_config(config: ClientConfig) -> None:
    """
    Validate that all required configuration values are set.
    Raises InvalidConfigError if any required value is missing or invalid.
    """
    errors = []

    if config.api is None:
        errors.append("api configuration is required but not set")
    else:
        if not config.api.server:
            errors.append("api.server is required but not set")
        elif not config.api.server.startswith(("http://", "https://")):
            errors.append(f"api.server must be an http(s) URL, got {config.api.server}")
        if not config.api.api_version:
            errors.append("api.api_version is required but not set")
        if config.api.timeout is None or config.api.timeout <= 0:
            errors.append(f"api.timeout must be positive, got {config.api.timeout}")
        if not config.api.user_agent:
            errors.append("api.user_agent is required but not set")

    if config.nominatim is None:
        errors.append("nominatim configuration is required but not set")
    else:
        if not config.nominatim.server:
            errors.append("nominatim.server is required but not set")
        if config.nominatim.format not in ("html", "json", "xml"):
            errors.append(f"nominatim.format must be html, json or xml, got {config.nominatim.format}")
        if config.nominatim.limit is not None and config.nominatim.limit <= 0:
            errors.append(f"nominatim.limit must be positive, got {config.nominatim.limit}")

    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise InvalidConfigError(error_msg)
