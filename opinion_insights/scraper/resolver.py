"""
Ordered fallback resolution of CSS locators against a page session.
"""

from typing import Iterator, List, Optional, Sequence, Tuple

from ..config.logging import StructuredLogger, get_logger
from .session import ElementHandle, PageSession


class SelectorResolver:
    """
    Resolve a field's fallback list of locators, first match wins.

    Locators are tried in preference order and querying stops at the first
    locator that yields at least one element. No match is a normal outcome
    and produces an empty list.
    """

    def __init__(self, logger: Optional[StructuredLogger] = None):
        self.logger = logger or get_logger(__name__)

    def resolve_each(
        self,
        session: PageSession,
        selectors: Sequence[str],
        max_results: Optional[int] = None
    ) -> Iterator[Tuple[str, List[ElementHandle]]]:
        """
        Yield (locator, elements) for every matching locator, in order.

        Lazy: a caller that stops after the first item never queries the
        remaining locators.
        """
        for locator in selectors:
            elements = session.find_all(locator)
            if not elements:
                continue
            if max_results is not None:
                elements = elements[:max_results]
            self.logger.debug("Selector matched", locator=locator, matches=len(elements))
            yield locator, elements

    def resolve(
        self,
        session: PageSession,
        selectors: Sequence[str],
        max_results: Optional[int] = None
    ) -> List[ElementHandle]:
        """Elements of the first locator with at least one match, else []."""
        for _locator, elements in self.resolve_each(session, selectors, max_results):
            return elements
        return []
