"""
Item extractor turning comment listing elements into deletion candidates.
"""
from typing import List, Optional, Tuple

from playwright.sync_api import Locator, Page

from comment_overkill.models import Candidate
from comment_overkill.utils.logging import get_logger

logger = get_logger(__name__)

# Comment containers per interface
ITEM_SELECTORS = {
    "old": [".thing.comment", "div.comment"],
    "new": ["shreddit-profile-comment"],
}

# Attributes carrying the comment's fullname, in lookup order
ID_ATTRIBUTES = {
    "old": ["data-fullname"],
    "new": ["comment-id", "thingid"],
}

# Only the author's own comments carry a delete control
OWN_ITEM_MARKERS = {
    "old": ["a[data-event-action='delete']", "form.del-button"],
    "new": ["shreddit-overflow-menu", "button[aria-label*='more options' i]"],
}


class ItemExtractor:
    """Extracts deletable comments from a listing page."""

    def __init__(self, interface: str = "old"):
        """
        Initialize ItemExtractor.

        Args:
            interface: "old" or "new"
        """
        if interface not in ITEM_SELECTORS:
            raise ValueError(f"Unknown interface: {interface}")
        self.interface = interface

    def extract_candidates(self, page: Page) -> List[Candidate]:
        """
        Extract every comment on the page that the user can delete.

        Each candidate's element is a locator bound to the comment's id, so it
        keeps pointing at the same comment when others leave the page. Comments
        without an id are left out. Protection (age, markers) is not decided here.

        Args:
            page: Playwright Page object

        Returns:
            Candidates in listing order
        """
        candidates: List[Candidate] = []

        container, elements = self._find_items(page)
        for element in elements:
            try:
                if not self._has_delete_control(element):
                    continue
                candidate = self._parse_item(page, container, element)
            except Exception as e:
                logger.debug(f"Error parsing item: {e}")
                continue

            if candidate is None:
                logger.debug("Skipping comment without an id")
                continue
            candidates.append(candidate)

        logger.debug(f"Extracted {len(candidates)} candidates from page")
        return candidates

    def find_item_elements(self, page: Page) -> List[Locator]:
        """Return comment containers, using the first selector that matches."""
        return self._find_items(page)[1]

    def _find_items(self, page: Page) -> Tuple[Optional[str], List[Locator]]:
        for selector in ITEM_SELECTORS[self.interface]:
            try:
                elements = page.locator(selector).all()
                if elements:
                    logger.debug(f"Found {len(elements)} elements with selector: {selector}")
                    return selector, elements
            except Exception as e:
                logger.debug(f"Selector '{selector}' failed: {e}")
                continue
        return None, []

    def _has_delete_control(self, element: Locator) -> bool:
        for selector in OWN_ITEM_MARKERS[self.interface]:
            if element.locator(selector).count() > 0:
                return True
        return False

    def _parse_item(self, page: Page, container: str, element: Locator) -> Optional[Candidate]:
        identity = self._identity(element)
        if identity is None:
            return None
        id_attribute, item_id = identity

        if self.interface == "old":
            timestamp = self._first_attribute(
                element, ["p.tagline time.live-timestamp", "time[datetime]"], "datetime"
            )
            body = self._first_text(element, [".usertext-body .md", ".md"])
        else:
            timestamp = self._first_attribute(element, ["faceplate-timeago[ts]"], "ts")
            if timestamp is None:
                timestamp = self._first_attribute(element, ["time[datetime]"], "datetime")
            body = self._first_text(element, ["[slot='comment']", "#-post-rtjson-content", "p"])

        return Candidate(
            element=page.locator(f"{container}[{id_attribute}='{item_id}']").first,
            timestamp=timestamp,
            item_id=item_id,
            body=body or "",
            interface=self.interface,
        )

    def _identity(self, element: Locator) -> Optional[Tuple[str, str]]:
        for attribute in ID_ATTRIBUTES[self.interface]:
            value = element.get_attribute(attribute)
            if value and "'" not in value:
                return attribute, value
        return None

    @staticmethod
    def _first_attribute(element: Locator, selectors: List[str], attribute: str) -> Optional[str]:
        for selector in selectors:
            match = element.locator(selector)
            if match.count() > 0:
                value = match.first.get_attribute(attribute)
                if value:
                    return value
        return None

    @staticmethod
    def _first_text(element: Locator, selectors: List[str]) -> Optional[str]:
        for selector in selectors:
            match = element.locator(selector)
            if match.count() > 0:
                return (match.first.inner_text() or "").strip()
        return None
