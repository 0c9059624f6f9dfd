"""
Nominatim geocoder

Translates place names to coordinates (search) and coordinates to places
(reverse) using a Nominatim server. Independent of the OSM document: results
are returned directly from the parsed responses.
"""

import json
from typing import Any, Dict, List, Optional, Union
from urllib.parse import urlparse
from lxml import etree
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .config import NominatimConfig
from .exceptions import (
    DocumentFormatError, GeocodeNotFoundError, InvalidConfigError, TransportError
)
from .osm.parser import parse_xml


SERVER_ALIASES = {
    "nominatim": "http://nominatim.openstreetmap.org/",
    "mapquest": "http://open.mapquestapi.com/nominatim/v1/",
}

FORMATS = ("html", "json", "xml")


class Place(BaseModel):
    """One Nominatim result. Coordinates are kept verbatim as strings."""
    model_config = ConfigDict(populate_by_name=True, extra="allow", coerce_numbers_to_str=True)

    place_id: Optional[int] = None
    osm_type: Optional[str] = None
    osm_id: Optional[int] = None
    lat: Optional[str] = None
    lon: Optional[str] = None
    display_name: Optional[str] = None
    class_: Optional[str] = Field(default=None, alias="class")
    type: Optional[str] = None
    importance: Optional[float] = None
    boundingbox: Optional[List[str]] = None
    address: Optional[Dict[str, str]] = None

    @property
    def coords(self) -> Dict[str, Optional[str]]:
        return {"lat": self.lat, "lon": self.lon}


def _validate_place(data: Any) -> Place:
    try:
        return Place.model_validate(data)
    except ValidationError as e:
        logger.error(f"Unexpected Nominatim result: {e}")
        raise DocumentFormatError(f"Unexpected Nominatim result: {e}") from e


def _place_from_xml(node: etree._Element) -> Place:
    data: Dict[str, Any] = dict(node.attrib)
    if "boundingbox" in data:
        data["boundingbox"] = data["boundingbox"].split(",")
    address = {
        child.tag: child.text or ""
        for child in node
        if isinstance(child.tag, str)
    }
    if address:
        data["address"] = address
    if node.text and node.text.strip() and "display_name" not in data:
        data["display_name"] = node.text.strip()
    return _validate_place(data)


class Nominatim:
    """
    Nominatim search client

    Usage:
        nominatim = Nominatim(transport).set_format("json").set_limit(5)
        places = nominatim.search("Limerick, Ireland")
    """

    def __init__(self, transport, config: Optional[NominatimConfig] = None):
        config = config or NominatimConfig()
        self.transport = transport
        self._server = SERVER_ALIASES["nominatim"]
        self._format = "xml"
        self._limit: Optional[int] = None
        self._email = config.email

        self.set_server(config.server)
        self.set_format(config.format)
        if config.limit is not None:
            self.set_limit(config.limit)

    @property
    def server(self) -> str:
        return self._server

    @property
    def format(self) -> str:
        return self._format

    @property
    def limit(self) -> Optional[int]:
        return self._limit

    @property
    def email(self) -> Optional[str]:
        return self._email

    def set_format(self, format: str) -> "Nominatim":
        if format not in FORMATS:
            raise InvalidConfigError(f"Unrecognised format ({format})")
        self._format = format
        return self

    def set_limit(self, limit: Union[int, str]) -> "Nominatim":
        self._limit = self._validate_limit(limit)
        return self

    @staticmethod
    def _validate_limit(limit: Union[int, str]) -> int:
        if isinstance(limit, bool):
            raise InvalidConfigError("Limit must be a numeric value")
        if isinstance(limit, str) and limit.strip().isdigit():
            limit = int(limit)
        elif isinstance(limit, float):
            if not limit.is_integer():
                raise InvalidConfigError("Limit must be an integer")
            limit = int(limit)
        if not isinstance(limit, int):
            raise InvalidConfigError("Limit must be a numeric value")
        if limit <= 0:
            raise InvalidConfigError("Limit must be a positive value")
        return limit

    def set_server(self, server: str) -> "Nominatim":
        if server in SERVER_ALIASES:
            self._server = SERVER_ALIASES[server]
            return self
        parsed = urlparse(server or "")
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise InvalidConfigError("Server endpoint invalid")
        self._server = server
        return self

    def set_email(self, email: Optional[str]) -> "Nominatim":
        self._email = email
        return self

    def search(self, query: str, limit: Optional[int] = None) -> Union[List[Place], str]:
        """
        Search for a place by name

        Args:
            query: Free-form query, e.g. "Limerick, Ireland"
            limit: Maximum number of results (defaults to the configured limit)

        Returns:
            List of Place for json/xml formats, raw response text for html
        """
        return self._search(query, limit, self._format)

    def reverse(self, lat: Union[float, str], lon: Union[float, str], zoom: Optional[int] = None) -> Optional[Place]:
        """
        Look up the place at a coordinate

        Returns:
            The place found, or None if the server could not geocode the point
        """
        format = "json" if self._format == "json" else "xml"
        params = {"lat": lat, "lon": lon, "format": format}
        if zoom is not None:
            params["zoom"] = zoom
        body = self._get("reverse", params)

        if format == "json":
            data = self._decode_json(body)
            if not isinstance(data, dict) or "error" in data:
                return None
            return _validate_place(data)

        root = parse_xml(body)
        result = root.find("result")
        if result is None:
            return None
        place = _place_from_xml(result)
        addressparts = root.find("addressparts")
        if addressparts is not None:
            place.address = {
                child.tag: child.text or ""
                for child in addressparts
                if isinstance(child.tag, str)
            }
        return place

    def get_coords_of_place(self, place: str) -> Dict[str, str]:
        """
        Coordinates of the first search result

        Returns:
            {"lat": ..., "lon": ...} as returned by the server

        Raises:
            GeocodeNotFoundError: If the search has no results
        """
        format = "xml" if self._format == "html" else self._format
        results = self._search(place, 1, format)
        if not results:
            logger.warning(f"No geocoding results for {place!r}")
            raise GeocodeNotFoundError(place)
        return results[0].coords

    def _search(self, query: str, limit: Optional[int], format: str) -> Union[List[Place], str]:
        limit = self._limit if limit is None else self._validate_limit(limit)

        params: Dict[str, Any] = {"q": query, "format": format}
        if limit is not None:
            params["limit"] = limit
        body = self._get("search", params)

        if format == "html":
            return body.decode("utf-8", errors="replace")
        if format == "json":
            data = self._decode_json(body)
            if not isinstance(data, list):
                raise DocumentFormatError("Nominatim search did not return a list")
            places = [_validate_place(item) for item in data]
        else:
            root = parse_xml(body)
            places = [_place_from_xml(node) for node in root.iterchildren("place")]

        logger.info(f"Nominatim search {query!r}: {len(places)} results")
        return places

    def _get(self, path: str, params: Dict[str, Any]) -> bytes:
        if self._email:
            params["email"] = self._email
        url = self._server.rstrip("/") + "/" + path
        logger.debug(f"Nominatim request: {url} {params}")
        response = self.transport.send("GET", url, params)
        if not response.ok:
            logger.error(f"Nominatim returned HTTP {response.status_code} for {url}")
            raise TransportError(
                f"Nominatim returned HTTP {response.status_code} for {url}",
                status_code=response.status_code
            )
        return response.body

    @staticmethod
    def _decode_json(body: bytes) -> Any:
        try:
            return json.loads(body)
        except ValueError as e:
            logger.error(f"Malformed Nominatim JSON: {e}")
            raise DocumentFormatError(f"Malformed Nominatim JSON: {e}") from e
