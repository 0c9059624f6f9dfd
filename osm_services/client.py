"""
OSM API client

Orchestrates capabilities negotiation, data fetches into the in-memory
document, tag search and geocoding
"""

import math
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union
from loguru import logger

from .config import ClientConfig, get_config, validate_config
from .exceptions import BoundingBoxError, CapabilitiesError, TransportError
from .nominatim import Nominatim
from .osm.capabilities import Capabilities
from .osm.document import Document
from .osm.history import History
from .osm.models import Bounds, Changeset, Element, NODE, WAY, RELATION
from .osm.search import SearchEngine
from .transport import HttpTransport


class OSMClient:
    """
    Client for the OpenStreetMap data API

    The server's capabilities are fetched once, when the client is
    constructed; construction fails if the server does not serve the
    configured API version.

    Usage:
        client = OSMClient()
        client.get(-8.2472, 52.8482, -8.1741, 52.8995)
        pharmacies = client.search({"amenity": "pharmacy"})
    """

    def __init__(self, config: Optional[ClientConfig] = None, transport=None):
        self.config = config or get_config()
        validate_config(self.config)
        self.server = self.config.api.server
        self.api_version = self.config.api.api_version
        self.transport = transport or HttpTransport(self.config.api)
        self.document = Document(version=self.api_version)
        self.search_engine = SearchEngine()
        self.nominatim = Nominatim(self.transport, self.config.nominatim)
        self.capabilities = self._negotiate()

    def _negotiate(self) -> Capabilities:
        """Fetch and check the server's capabilities"""
        url = self._url("api/capabilities")
        logger.info(f"Checking capabilities of {url}")
        response = self.transport.send("GET", url)
        if not response.ok:
            logger.error(f"Capabilities request returned HTTP {response.status_code}")
            raise CapabilitiesError()

        capabilities = Capabilities.parse(response.body)
        capabilities.check_version(self.api_version)
        logger.info(
            f"Server supports API {capabilities.min_version}-{capabilities.max_version} "
            f"(api status: {capabilities.api_status.value if capabilities.api_status else 'unknown'})"
        )
        return capabilities

    def _url(self, path: str) -> str:
        return self.server.rstrip("/") + "/" + path

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> bytes:
        url = self._url(path)
        logger.info(f"Fetching {url}")
        response = self.transport.send("GET", url, params)
        if not response.ok:
            logger.error(f"OSM API returned HTTP {response.status_code} for {url}")
            raise TransportError(
                f"OSM API returned HTTP {response.status_code} for {url}",
                status_code=response.status_code
            )
        return response.body

    def _fetch(self, path: str, params: Optional[Dict[str, Any]] = None) -> str:
        body = self._get(f"api/{self.api_version}/{path}", params)
        self.document.load(body)
        return self.document.raw_xml

    def get(
        self,
        min_lon: float,
        min_lat: float,
        max_lon: float,
        max_lat: float
    ) -> str:
        """
        Fetch all data inside a bounding box and merge it into the document

        Args:
            min_lon: West edge
            min_lat: South edge
            max_lon: East edge
            max_lat: North edge

        Returns:
            Raw XML returned by the server

        Raises:
            BoundingBoxError: If the box is inverted, out of range, or larger
                than the server's maximum area
        """
        try:
            bounds = Bounds(
                min_lat=float(min_lat),
                min_lon=float(min_lon),
                max_lat=float(max_lat),
                max_lon=float(max_lon),
            )
        except (TypeError, ValueError) as e:
            raise BoundingBoxError(f"Bounding box coordinates must be numeric: {e}") from e
        self._check_bounds(bounds)
        bbox = f"{min_lon},{min_lat},{max_lon},{max_lat}"
        return self._fetch("map", {"bbox": bbox})

    def _check_bounds(self, bounds: Bounds) -> None:
        if not all(math.isfinite(v) for v in (bounds.min_lat, bounds.min_lon, bounds.max_lat, bounds.max_lon)):
            raise BoundingBoxError(f"Bounding box coordinates must be finite: {bounds}")
        if bounds.min_lat > bounds.max_lat or bounds.min_lon > bounds.max_lon:
            raise BoundingBoxError(f"Bounding box is inverted: {bounds}")
        if not (-90 <= bounds.min_lat and bounds.max_lat <= 90):
            raise BoundingBoxError(f"Latitude out of range: {bounds}")
        if not (-180 <= bounds.min_lon and bounds.max_lon <= 180):
            raise BoundingBoxError(f"Longitude out of range: {bounds}")

        max_area = self.capabilities.max_area
        if max_area is not None and bounds.area > max_area:
            logger.warning(f"Bounding box area {bounds.area:.4f} exceeds server maximum {max_area}")
            raise BoundingBoxError(
                f"Bounding box area {bounds.area:.4f} exceeds server maximum {max_area}"
            )

    def get_xml(self) -> Optional[str]:
        """Raw XML most recently loaded into the document"""
        return self.document.raw_xml

    def load_xml(self, path: Union[str, Path]) -> Document:
        """Merge an .osm file into the document"""
        return self.document.load_file(path)

    def get_element(self, element_type: str, element_id: int, full: bool = False) -> Optional[Element]:
        """
        Fetch one element (and, with ``full``, everything it references)

        Returns:
            The element as held by the document after merging
        """
        if element_type not in (NODE, WAY, RELATION):
            raise ValueError(f"Unknown element type {element_type!r}")
        path = f"{element_type}/{element_id}"
        if full and element_type != NODE:
            path += "/full"
        self._fetch(path)
        return self.document.get(element_type, element_id)

    def get_node(self, node_id: int) -> Optional[Element]:
        return self.get_element(NODE, node_id)

    def get_way(self, way_id: int, full: bool = False) -> Optional[Element]:
        return self.get_element(WAY, way_id, full)

    def get_relation(self, relation_id: int, full: bool = False) -> Optional[Element]:
        return self.get_element(RELATION, relation_id, full)

    def get_history(self, element_type: str, element_id: int) -> History:
        """Fetch every version of an element"""
        self._fetch(f"{element_type}/{element_id}/history")
        history = self.document.history(element_type, element_id)
        if history is None:
            return History(element_type, element_id)
        return history

    def get_changeset(self, changeset_id: int) -> Optional[Changeset]:
        self._fetch(f"changeset/{changeset_id}")
        return self.document.changeset(changeset_id)

    def search(self, criteria: Mapping[str, str], element_type: Optional[str] = None) -> List[Element]:
        """Elements of the document whose tags match every criterion"""
        return self.search_engine.search(criteria, self.document, element_type=element_type)

    def get_coords_of_place(self, place: str) -> Dict[str, str]:
        return self.nominatim.get_coords_of_place(place)

    @staticmethod
    def bbox_to_min_max(min_lon, min_lat, max_lon, max_lat) -> Tuple[Any, Any, Any, Any]:
        """Reorder a lon/lat bounding box into (min_lat, min_lon, max_lat, max_lon)"""
        return (min_lat, min_lon, max_lat, max_lon)
