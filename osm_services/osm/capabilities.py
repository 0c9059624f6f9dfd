"""
Server capabilities

Parses the API's capabilities document (supported version range, size
limits, service status) and checks that the client's API version is served.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union
from lxml import etree
from loguru import logger

from ..exceptions import CapabilitiesError, DocumentFormatError, UnsupportedVersionError
from .parser import parse_xml


class ServiceStatus(str, Enum):
    ONLINE = "online"
    READONLY = "readonly"
    OFFLINE = "offline"


def _number(api: etree._Element, path: str, attribute: str, cast):
    node = api.find(path)
    if node is None or node.get(attribute) is None:
        return None
    try:
        return cast(node.get(attribute))
    except ValueError as e:
        raise CapabilitiesError() from e


def _status(status: Optional[etree._Element], attribute: str) -> Optional[ServiceStatus]:
    if status is None or status.get(attribute) is None:
        return None
    try:
        return ServiceStatus(status.get(attribute))
    except ValueError as e:
        logger.error(f"Unknown {attribute} status {status.get(attribute)!r}")
        raise CapabilitiesError() from e


@dataclass(frozen=True)
class Capabilities:
    """Snapshot of the server's advertised policy"""
    min_version: float
    max_version: float
    max_area: Optional[float] = None
    tracepoints_per_page: Optional[int] = None
    max_nodes: Optional[int] = None
    max_elements: Optional[int] = None
    timeout: Optional[int] = None
    database_status: Optional[ServiceStatus] = None
    api_status: Optional[ServiceStatus] = None
    gpx_status: Optional[ServiceStatus] = None

    @classmethod
    def parse(cls, xml: Union[str, bytes, None]) -> "Capabilities":
        """
        Parse a capabilities response

        Only the <version> block is required; limits and the <status>
        block default to None when the server omits them.

        Raises:
            CapabilitiesError: If the payload is empty, malformed or has no
                usable version block
        """
        if not xml:
            logger.error("Empty capabilities response")
            raise CapabilitiesError()

        try:
            root = parse_xml(xml)
        except DocumentFormatError as e:
            raise CapabilitiesError() from e

        api = root if root.tag == "api" else root.find("api")
        if api is None:
            logger.error("Capabilities response has no <api> block")
            raise CapabilitiesError()

        min_version = _number(api, "version", "minimum", float)
        max_version = _number(api, "version", "maximum", float)
        if min_version is None or max_version is None:
            logger.error("Capabilities response has no version range")
            raise CapabilitiesError()

        status = api.find("status")
        capabilities = cls(
            min_version=min_version,
            max_version=max_version,
            max_area=_number(api, "area", "maximum", float),
            tracepoints_per_page=_number(api, "tracepoints", "per_page", int),
            max_nodes=_number(api, "waynodes", "maximum", int),
            max_elements=_number(api, "changesets", "maximum_elements", int),
            timeout=_number(api, "timeout", "seconds", int),
            database_status=_status(status, "database"),
            api_status=_status(status, "api"),
            gpx_status=_status(status, "gpx"),
        )
        logger.debug(f"Parsed capabilities: {capabilities}")
        return capabilities

    def supports(self, version: Union[str, float]) -> bool:
        return self.min_version <= float(version) <= self.max_version

    def check_version(self, version: Union[str, float]) -> None:
        """
        Raises:
            UnsupportedVersionError: If ``version`` is outside the server's range
        """
        if not self.supports(version):
            logger.error(
                f"API version {version} outside server range "
                f"{self.min_version}-{self.max_version}"
            )
            raise UnsupportedVersionError(str(version))
