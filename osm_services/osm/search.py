"""
Tag search over loaded OSM elements

A criterion ``key=value`` matches an element whose tag ``key`` holds
``value`` either exactly or as one of its semicolon-separated values,
so ``amenity=pub;restaurant`` matches both ``amenity=pub`` and
``amenity=restaurant``.
"""

from typing import List, Mapping, Optional
from loguru import logger

from .models import Element


TAG_VALUE_DELIMITER = ";"


class SearchEngine:
    """Evaluates tag criteria against a Document's elements"""

    def __init__(self, delimiter: str = TAG_VALUE_DELIMITER):
        self.delimiter = delimiter

    def split_values(self, value: str) -> List[str]:
        """Split a multi-value tag into trimmed values"""
        # TODO: honour the ";;" escape for literal semicolons in values
        return [part.strip() for part in value.split(self.delimiter)]

    def matches(self, element: Element, criteria: Mapping[str, str]) -> bool:
        """True if every criterion holds for the element"""
        for key, expected in criteria.items():
            value = element.tags.get(key)
            if value is None:
                return False
            if expected not in self.split_values(value):
                return False
        return True

    def search(
        self,
        criteria: Mapping[str, str],
        document,
        element_type: Optional[str] = None
    ) -> List[Element]:
        """
        Find elements matching all criteria

        Args:
            criteria: Mapping of tag key to expected value
            document: Document to scan
            element_type: Restrict to "node", "way" or "relation"

        Returns:
            Matching elements in document order (empty if nothing is loaded)
        """
        results = [
            element for element in document
            if (element_type is None or element.element_type == element_type)
            and self.matches(element, criteria)
        ]
        logger.debug(f"Search {dict(criteria)}: {len(results)} of {len(document)} elements matched")
        return results
