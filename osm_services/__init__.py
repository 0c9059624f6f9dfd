"""
Client for the OpenStreetMap data API and the Nominatim geocoder

- OSMClient: capabilities negotiation, data fetches, tag search
- Nominatim: place name <-> coordinate lookups
- Document: in-memory OSM data, usable without a server
"""

from .client import OSMClient
from .config import APIConfig, ClientConfig, NominatimConfig, get_config
from .exceptions import (
    OSMError,
    BoundingBoxError,
    CapabilitiesError,
    DocumentFormatError,
    GeocodeNotFoundError,
    InvalidConfigError,
    TransportError,
    UnsupportedVersionError,
)
from .nominatim import Nominatim, Place
from .osm import Document, History, Node, Way, Relation, SearchEngine
from .transport import HttpTransport, MockTransport, Response

__version__ = "0.1.0"

__all__ = [
    "OSMClient",
    "APIConfig",
    "ClientConfig",
    "NominatimConfig",
    "get_config",
    "OSMError",
    "BoundingBoxError",
    "CapabilitiesError",
    "DocumentFormatError",
    "GeocodeNotFoundError",
    "InvalidConfigError",
    "TransportError",
    "UnsupportedVersionError",
    "Nominatim",
    "Place",
    "Document",
    "History",
    "Node",
    "Way",
    "Relation",
    "SearchEngine",
    "HttpTransport",
    "MockTransport",
    "Response",
]
