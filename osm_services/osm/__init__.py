"""
OpenStreetMap document model

Modular components for working with OSM API data:
- Models: Node, Way, Relation, Changeset, Bounds
- History: versions of one element
- Parser / Writer: XML conversion
- Document: load, merge and serialize loaded data
- Capabilities: server policy and version gate
- Search: tag predicates over a document
"""

from .models import Bounds, Changeset, Element, Member, Node, Way, Relation
from .history import History
from .document import Document
from .capabilities import Capabilities, ServiceStatus
from .search import SearchEngine

__all__ = [
    "Bounds",
    "Changeset",
    "Element",
    "Member",
    "Node",
    "Way",
    "Relation",
    "History",
    "Document",
    "Capabilities",
    "ServiceStatus",
    "SearchEngine",
]
