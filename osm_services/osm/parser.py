"""
OSM XML parser

Parses OSM API XML payloads into Node, Way, Relation and Changeset objects
"""

import re
from typing import List, Optional, Tuple, Union
from lxml import etree
from loguru import logger

from ..exceptions import DocumentFormatError
from .models import (
    Bounds, Changeset, Element, Member, Node, Way, Relation, ELEMENT_CLASSES, NODE, WAY
)


ParsedPayload = Tuple[Optional[Bounds], List[Element], List[Changeset]]


XML_DECLARATION_RE = re.compile(r"^\s*<\?xml[^>]*\?>")


def parse_xml(payload: Union[str, bytes]) -> etree._Element:
    """
    Parse raw XML into an lxml root element

    Bytes are decoded by lxml according to their XML declaration. Text is
    already decoded, so its declaration is dropped before parsing.

    Args:
        payload: XML text or bytes

    Returns:
        Root element
    """
    if isinstance(payload, str):
        payload = XML_DECLARATION_RE.sub("", payload, count=1).encode("utf-8")
    if not payload or not payload.strip():
        raise DocumentFormatError("Empty XML payload")

    parser = etree.XMLParser(resolve_entities=False, no_network=True)
    try:
        return etree.fromstring(payload, parser)
    except (etree.XMLSyntaxError, LookupError) as e:
        logger.error(f"Malformed XML: {e}")
        raise DocumentFormatError(f"Malformed XML: {e}") from e


def payload_text(payload: Union[str, bytes], root: etree._Element) -> str:
    """Decoded text of a payload already parsed into ``root``"""
    if isinstance(payload, str):
        return payload
    encoding = root.getroottree().docinfo.encoding or "utf-8"
    try:
        return payload.decode(encoding)
    except (LookupError, UnicodeDecodeError) as e:
        raise DocumentFormatError(f"Cannot decode XML payload as {encoding}: {e}") from e


def _attr_int(node: etree._Element, name: str) -> Optional[int]:
    value = node.get(name)
    if value is None or value == "":
        return None
    try:
        return int(value)
    except ValueError as e:
        raise DocumentFormatError(f"Invalid {name} {value!r} on <{node.tag}>") from e


def _attr_ref(node: etree._Element, parent: etree._Element) -> int:
    ref = _attr_int(node, "ref")
    if ref is None:
        raise DocumentFormatError(f"<{node.tag}> without ref in <{parent.tag} id={parent.get('id')}>")
    return ref


def _attr_float(node: etree._Element, name: str) -> Optional[float]:
    value = node.get(name)
    if value is None or value == "":
        return None
    try:
        return float(value)
    except ValueError as e:
        raise DocumentFormatError(f"Invalid {name} {value!r} on <{node.tag}>") from e


def _attr_bool(node: etree._Element, name: str) -> Optional[bool]:
    value = node.get(name)
    if value is None:
        return None
    return value == "true"


class OSMXMLParser:
    """Parses OSM API XML responses"""

    @staticmethod
    def parse(payload: Union[str, bytes]) -> ParsedPayload:
        """
        Parse an <osm> payload

        Args:
            payload: XML text from the API or a .osm file

        Returns:
            Tuple of (bounds or None, elements in payload order, changesets)

        Raises:
            DocumentFormatError: If the XML is malformed or an attribute
                that must be numeric is not
        """
        root = parse_xml(payload)
        return OSMXMLParser.parse_root(root)

    @staticmethod
    def parse_root(root: etree._Element) -> ParsedPayload:
        bounds = None
        elements = []
        changesets = []

        for child in root:
            if not isinstance(child.tag, str):
                continue
            if child.tag in ELEMENT_CLASSES:
                elements.append(OSMXMLParser.parse_element(child))
            elif child.tag == "changeset":
                changesets.append(OSMXMLParser.parse_changeset(child))
            elif child.tag == "bounds":
                bounds = OSMXMLParser.parse_bounds(child)
            else:
                logger.debug(f"Ignoring <{child.tag}> in OSM payload")

        return bounds, elements, changesets

    @staticmethod
    def parse_bounds(node: etree._Element) -> Optional[Bounds]:
        values = [_attr_float(node, name) for name in ("minlat", "minlon", "maxlat", "maxlon")]
        if any(v is None for v in values):
            return None
        return Bounds(*values)

    @staticmethod
    def parse_tags(node: etree._Element) -> dict:
        tags = {}
        for tag in node.iterchildren("tag"):
            key = tag.get("k")
            if key is None:
                logger.debug(f"Skipping <tag> without key on <{node.tag}>")
                continue
            tags[key] = tag.get("v", "")
        return tags

    @staticmethod
    def parse_element(node: etree._Element) -> Element:
        element_id = _attr_int(node, "id")
        if element_id is None:
            raise DocumentFormatError(f"<{node.tag}> without id")

        common = dict(
            id=element_id,
            version=_attr_int(node, "version"),
            user=node.get("user"),
            uid=_attr_int(node, "uid"),
            timestamp=node.get("timestamp"),
            changeset=_attr_int(node, "changeset"),
            visible=_attr_bool(node, "visible"),
            tags=OSMXMLParser.parse_tags(node),
        )

        if node.tag == NODE:
            return Node(
                lat=_attr_float(node, "lat"),
                lon=_attr_float(node, "lon"),
                **common
            )
        if node.tag == WAY:
            return Way(
                nodes=[_attr_ref(nd, node) for nd in node.iterchildren("nd")],
                **common
            )
        return Relation(
            members=[
                Member(
                    type=member.get("type", ""),
                    ref=_attr_ref(member, node),
                    role=member.get("role", "")
                )
                for member in node.iterchildren("member")
            ],
            **common
        )

    @staticmethod
    def parse_changeset(node: etree._Element) -> Changeset:
        bounds = None
        if node.get("min_lat") is not None:
            bounds = Bounds(
                min_lat=_attr_float(node, "min_lat"),
                min_lon=_attr_float(node, "min_lon"),
                max_lat=_attr_float(node, "max_lat"),
                max_lon=_attr_float(node, "max_lon"),
            )
        return Changeset(
            id=_attr_int(node, "id"),
            user=node.get("user"),
            uid=_attr_int(node, "uid"),
            created_at=node.get("created_at"),
            closed_at=node.get("closed_at"),
            open=_attr_bool(node, "open"),
            bounds=bounds,
            tags=OSMXMLParser.parse_tags(node),
        )
