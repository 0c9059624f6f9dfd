"""
Exceptions raised by osm_services

Every error surfaces to the caller at the point it is detected; nothing in the
package recovers locally or retries.
"""

from typing import Optional


class OSMError(Exception):
    """Base class for all osm_services errors"""


class DocumentFormatError(OSMError):
    """OSM data XML could not be parsed"""


class CapabilitiesError(OSMError):
    """Capabilities response missing or invalid"""

    def __init__(self, message: str = "Problem checking server capabilities"):
        super().__init__(message)


class UnsupportedVersionError(OSMError):
    """The server's supported API range excludes the client's version"""

    def __init__(self, version: str):
        self.version = version
        super().__init__(f"Specified API Version {version} not supported.")


class GeocodeNotFoundError(OSMError):
    """Nominatim returned no results for a place"""

    def __init__(self, query: str):
        self.query = query
        super().__init__(f"Could not get coords for {query}")


class InvalidConfigError(OSMError, ValueError):
    """Bad configuration value (format, limit, server URL, ...)"""


class BoundingBoxError(OSMError, ValueError):
    """Bounding box is malformed or larger than the server allows"""


class TransportError(OSMError):
    """HTTP request failed or returned a non-success status"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)
