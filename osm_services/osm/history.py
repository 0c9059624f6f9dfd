"""
Element history

All known versions of one OSM element, ordered by version number
"""

from typing import Dict, Iterator, List, Optional

from .models import Element


class History:
    """Versions of a single (type, id) element"""

    def __init__(self, element_type: str, element_id: int):
        self.element_type = element_type
        self.id = element_id
        self._versions: Dict[int, Element] = {}

    def add(self, element: Element) -> None:
        """
        Record one version of the element

        Re-adding a version number replaces the stored entry.

        Raises:
            ValueError: If the element belongs to another (type, id) or
                carries no version
        """
        if element.element_type != self.element_type or element.id != self.id:
            raise ValueError(
                f"Cannot add {element.element_type} {element.id} to history of "
                f"{self.element_type} {self.id}"
            )
        if element.version is None:
            raise ValueError(f"{self.element_type} {self.id} has no version")
        self._versions[element.version] = element

    def versions_of(self, element_id: int) -> List[Element]:
        """Versions of ``element_id`` in ascending version order"""
        if element_id != self.id:
            return []
        return [self._versions[v] for v in sorted(self._versions)]

    @property
    def versions(self) -> List[Element]:
        return self.versions_of(self.id)

    @property
    def latest(self) -> Optional[Element]:
        if not self._versions:
            return None
        return self._versions[max(self._versions)]

    def __getitem__(self, version: int) -> Element:
        return self._versions[version]

    def __contains__(self, version: int) -> bool:
        return version in self._versions

    def __iter__(self) -> Iterator[Element]:
        return iter(self.versions)

    def __len__(self) -> int:
        return len(self._versions)

    def __repr__(self) -> str:
        return f"History({self.element_type} {self.id}, versions={sorted(self._versions)})"
