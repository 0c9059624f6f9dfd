"""
In-memory OSM document

Holds every element loaded so far, keyed by (type, id). Loading more XML
merges into the existing map so sequential bounding-box fetches accumulate
into one working set.
"""

from pathlib import Path
from typing import Dict, Iterator, List, Mapping, Optional, Union
from loguru import logger

from ..exceptions import DocumentFormatError
from .history import History
from .models import (
    Bounds, Changeset, Element, ElementKey, Node, Way, Relation, NODE, WAY, RELATION
)
from .parser import OSMXMLParser, parse_xml, payload_text
from .search import SearchEngine
from .writer import osm_to_string


class Document:
    """
    Parsed OSM data

    Usage:
        document = Document().load(xml)
        document.load(more_xml)
        pubs = document.search({"amenity": "pub"})
    """

    def __init__(self, version: str = "0.6", generator: str = "osm-services"):
        self.version = version
        self.generator = generator
        self.bounds: Optional[Bounds] = None
        self.raw_xml: Optional[str] = None
        self._elements: Dict[ElementKey, Element] = {}
        self._histories: Dict[ElementKey, History] = {}
        self._changesets: Dict[int, Changeset] = {}
        self._search_engine = SearchEngine()

    @classmethod
    def from_xml(cls, xml: Union[str, bytes]) -> "Document":
        return cls().load(xml)

    def load(self, xml: Union[str, bytes]) -> "Document":
        """
        Merge an OSM XML payload into this document

        Elements already held with the same (type, id) are replaced by the
        newly loaded ones; elements absent from the payload are kept.

        Args:
            xml: OSM XML text or bytes

        Returns:
            This document

        Raises:
            DocumentFormatError: If the payload cannot be parsed
        """
        # parse and decode fully before touching any held state
        root = parse_xml(xml)
        raw_xml = payload_text(xml, root)
        bounds, elements, changesets = OSMXMLParser.parse_root(root)

        for element in elements:
            self._elements[element.key] = element
            if element.version is not None:
                history = self._histories.get(element.key)
                if history is None:
                    history = self._histories[element.key] = History(element.element_type, element.id)
                history.add(element)

        for changeset in changesets:
            if changeset.id is not None:
                self._changesets[changeset.id] = changeset

        if bounds is not None:
            self.bounds = bounds if self.bounds is None else self.bounds.union(bounds)

        self.raw_xml = raw_xml
        logger.info(
            f"Loaded {len(elements)} elements, {len(changesets)} changesets "
            f"({len(self._elements)} elements held)"
        )
        return self

    def load_file(self, path: Union[str, Path]) -> "Document":
        """Merge an .osm file into this document"""
        path = Path(path)
        try:
            data = path.read_bytes()
        except OSError as e:
            logger.error(f"Cannot read OSM file {path}: {e}")
            raise DocumentFormatError(f"Cannot read OSM file {path}: {e}") from e
        logger.info(f"Loading OSM file: {path}")
        return self.load(data)

    def serialize(self) -> str:
        """Serialize held bounds, changesets and elements back to OSM XML"""
        ordered = self.nodes + self.ways + self.relations
        return osm_to_string(
            ordered,
            bounds=self.bounds,
            changesets=self._changesets.values(),
            version=self.version,
            generator=self.generator,
        )

    def search(self, criteria: Mapping[str, str], element_type: Optional[str] = None) -> List[Element]:
        return self._search_engine.search(criteria, self, element_type=element_type)

    def get(self, element_type: str, element_id: int) -> Optional[Element]:
        return self._elements.get((element_type, element_id))

    def history(self, element_type: str, element_id: int) -> Optional[History]:
        return self._histories.get((element_type, element_id))

    def versions_of(self, element_type: str, element_id: int) -> List[Element]:
        history = self.history(element_type, element_id)
        if history is None:
            return []
        return history.versions_of(element_id)

    def changeset(self, changeset_id: int) -> Optional[Changeset]:
        return self._changesets.get(changeset_id)

    @property
    def elements(self) -> List[Element]:
        return list(self._elements.values())

    @property
    def nodes(self) -> List[Node]:
        return self._of_type(NODE)

    @property
    def ways(self) -> List[Way]:
        return self._of_type(WAY)

    @property
    def relations(self) -> List[Relation]:
        return self._of_type(RELATION)

    @property
    def changesets(self) -> List[Changeset]:
        return list(self._changesets.values())

    def _of_type(self, element_type: str) -> list:
        return [e for e in self._elements.values() if e.element_type == element_type]

    def clear(self) -> None:
        self.bounds = None
        self.raw_xml = None
        self._elements.clear()
        self._histories.clear()
        self._changesets.clear()

    def __contains__(self, key: ElementKey) -> bool:
        return key in self._elements

    def __iter__(self) -> Iterator[Element]:
        return iter(list(self._elements.values()))

    def __len__(self) -> int:
        return len(self._elements)

    def __repr__(self) -> str:
        return (
            f"Document(nodes={len(self.nodes)}, ways={len(self.ways)}, "
            f"relations={len(self.relations)}, changesets={len(self._changesets)})"
        )
