"""
OSM data models

Data classes for representing OSM elements (nodes, ways, relations),
relation members, changesets and bounding boxes
"""

from typing import ClassVar, Dict, List, Optional, Tuple
from dataclasses import dataclass, field


ElementKey = Tuple[str, int]

NODE = "node"
WAY = "way"
RELATION = "relation"
ELEMENT_TYPES = (NODE, WAY, RELATION)


@dataclass
class Bounds:
    """Lat/lon rectangle"""
    min_lat: float
    min_lon: float
    max_lat: float
    max_lon: float

    @property
    def area(self) -> float:
        """Area in square degrees, as the API measures it"""
        return (self.max_lat - self.min_lat) * (self.max_lon - self.min_lon)

    def union(self, other: "Bounds") -> "Bounds":
        return Bounds(
            min_lat=min(self.min_lat, other.min_lat),
            min_lon=min(self.min_lon, other.min_lon),
            max_lat=max(self.max_lat, other.max_lat),
            max_lon=max(self.max_lon, other.max_lon),
        )


@dataclass
class Element:
    """
    Common attributes of every OSM element

    A freshly constructed element has no attributes set: every attribute
    is None, tags are empty and str() gives an empty string.
    """
    element_type: ClassVar[str] = ""

    id: Optional[int] = None
    version: Optional[int] = None
    user: Optional[str] = None
    uid: Optional[int] = None
    timestamp: Optional[str] = None
    changeset: Optional[int] = None
    visible: Optional[bool] = None
    tags: Dict[str, str] = field(default_factory=dict)

    @property
    def key(self) -> ElementKey:
        return (self.element_type, self.id)

    def get_tag(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.tags.get(key, default)

    def __str__(self) -> str:
        if self.id is None:
            return ""
        from .writer import element_to_string
        return element_to_string(self)


@dataclass
class Node(Element):
    """Represents an OSM node (point)"""
    element_type: ClassVar[str] = NODE

    lat: Optional[float] = None
    lon: Optional[float] = None


@dataclass
class Way(Element):
    """Represents an OSM way (ordered list of node refs)"""
    element_type: ClassVar[str] = WAY

    nodes: List[int] = field(default_factory=list)


@dataclass
class Member:
    """One member of a relation"""
    type: str
    ref: int
    role: str = ""


@dataclass
class Relation(Element):
    """Represents an OSM relation (ordered list of members)"""
    element_type: ClassVar[str] = RELATION

    members: List[Member] = field(default_factory=list)


@dataclass
class Changeset:
    """Represents an OSM changeset (a group of edits, not an element)"""
    id: Optional[int] = None
    user: Optional[str] = None
    uid: Optional[int] = None
    created_at: Optional[str] = None
    closed_at: Optional[str] = None
    open: Optional[bool] = None
    bounds: Optional[Bounds] = None
    tags: Dict[str, str] = field(default_factory=dict)


ELEMENT_CLASSES = {
    NODE: Node,
    WAY: Way,
    RELATION: Relation,
}
