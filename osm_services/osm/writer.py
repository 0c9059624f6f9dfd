"""
OSM XML writer

Serializes elements, changesets and bounds back into OSM API XML
"""

from decimal import Decimal
from typing import Iterable, Optional
from lxml import etree

from .models import Bounds, Changeset, Element, Node, Way, Relation


XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'


def format_decimal(value: float) -> str:
    """Plain decimal notation, never exponent form"""
    return format(Decimal(repr(value)), "f")


def _set(node: etree._Element, name: str, value) -> None:
    if value is None:
        return
    if isinstance(value, bool):
        node.set(name, "true" if value else "false")
    elif isinstance(value, float):
        node.set(name, format_decimal(value))
    else:
        node.set(name, str(value))


def _append_tags(node: etree._Element, tags: dict) -> None:
    for key, value in tags.items():
        etree.SubElement(node, "tag", k=key, v=value)


def element_to_xml(element: Element) -> etree._Element:
    node = etree.Element(element.element_type)
    for name in ("id", "visible", "version", "changeset", "timestamp", "user", "uid"):
        _set(node, name, getattr(element, name))

    if isinstance(element, Node):
        _set(node, "lat", element.lat)
        _set(node, "lon", element.lon)
    elif isinstance(element, Way):
        for ref in element.nodes:
            _set(etree.SubElement(node, "nd"), "ref", ref)
    elif isinstance(element, Relation):
        for member in element.members:
            child = etree.SubElement(node, "member")
            _set(child, "type", member.type)
            _set(child, "ref", member.ref)
            _set(child, "role", member.role)

    _append_tags(node, element.tags)
    return node


def element_to_string(element: Element) -> str:
    return etree.tostring(element_to_xml(element), encoding="unicode")


def bounds_to_xml(bounds: Bounds) -> etree._Element:
    node = etree.Element("bounds")
    _set(node, "minlat", bounds.min_lat)
    _set(node, "minlon", bounds.min_lon)
    _set(node, "maxlat", bounds.max_lat)
    _set(node, "maxlon", bounds.max_lon)
    return node


def changeset_to_xml(changeset: Changeset) -> etree._Element:
    node = etree.Element("changeset")
    for name in ("id", "user", "uid", "created_at", "closed_at", "open"):
        _set(node, name, getattr(changeset, name))
    if changeset.bounds is not None:
        _set(node, "min_lat", changeset.bounds.min_lat)
        _set(node, "min_lon", changeset.bounds.min_lon)
        _set(node, "max_lat", changeset.bounds.max_lat)
        _set(node, "max_lon", changeset.bounds.max_lon)
    _append_tags(node, changeset.tags)
    return node


def osm_to_string(
    elements: Iterable[Element],
    bounds: Optional[Bounds] = None,
    changesets: Iterable[Changeset] = (),
    version: str = "0.6",
    generator: str = "osm-services",
) -> str:
    """
    Build a complete <osm> document

    Elements are written in the order given; callers sort nodes before
    ways before relations.
    """
    root = etree.Element("osm", version=version, generator=generator)
    if bounds is not None:
        root.append(bounds_to_xml(bounds))
    for changeset in changesets:
        root.append(changeset_to_xml(changeset))
    for element in elements:
        root.append(element_to_xml(element))
    return XML_DECLARATION + etree.tostring(root, encoding="unicode", pretty_print=True)
