"""
Content source: the listing the engine walks, one partition (sort order) at a time.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from playwright.sync_api import Page

from comment_overkill.config import settings
from comment_overkill.models import Candidate
from comment_overkill.traversal.item_extractor import ItemExtractor
from comment_overkill.traversal.pagination import PaginationHandler
from comment_overkill.traversal.url_builder import URLBuilder
from comment_overkill.utils.cancellation import CancellationToken
from comment_overkill.utils.logging import get_logger

logger = get_logger(__name__)

SORT_DROPDOWN_SELECTORS = [
    ".dropdown.lightdrop .selected",
    ".dropdown.sorts .selected",
    "[data-sort-direction].active",
]


class ContentSource(ABC):
    """Abstract listing of candidates split into partitions."""

    @abstractmethod
    def current_partition(self) -> Optional[str]:
        """Partition currently displayed, or None if not on a listing."""

    @abstractmethod
    def navigate_to(self, partition: str) -> None:
        """Load the first page of a partition."""

    @abstractmethod
    def list_candidates(self) -> List[Candidate]:
        """Candidates visible on the current page, in listing order."""

    @abstractmethod
    def has_next_page(self) -> bool:
        pass

    @abstractmethod
    def go_to_next_page(self) -> bool:
        pass

    @abstractmethod
    def has_more_to_load(self) -> bool:
        pass

    @abstractmethod
    def load_more(self) -> bool:
        pass


class RedditContentSource(ContentSource):
    """A user's comment listing on old or new Reddit, partitioned by sort."""

    def __init__(
        self,
        page: Page,
        username: str,
        interface: Optional[str] = None,
        token: Optional[CancellationToken] = None,
        settle_delay: Optional[float] = None,
        url_builder: Optional[URLBuilder] = None,
        pagination_handler: Optional[PaginationHandler] = None,
        item_extractor: Optional[ItemExtractor] = None,
    ):
        """
        Initialize RedditContentSource.

        Args:
            page: Playwright Page object (from BrowserManager)
            username: Reddit username
            interface: "old" or "new" (defaults to settings.TARGET_INTERFACE)
            token: Cancellation token used for the load-more settle wait
            settle_delay: Seconds to wait after "load more" (defaults to settings)
        """
        self.page = page
        self.interface = interface or settings.TARGET_INTERFACE
        self.token = token or CancellationToken()
        self.settle_delay = (
            settings.LOAD_MORE_SETTLE_SECONDS if settle_delay is None else settle_delay
        )

        self.url_builder = url_builder or URLBuilder(username, self.interface)
        self.pagination_handler = pagination_handler or PaginationHandler()
        self.item_extractor = item_extractor or ItemExtractor(self.interface)

        logger.info(
            f"RedditContentSource initialized: username={self.url_builder.username}, "
            f"interface={self.interface}"
        )

    def current_partition(self) -> Optional[str]:
        """
        Detect the sort of the displayed listing.

        The URL "sort" parameter wins, then the selected sort in the dropdown;
        a listing with neither is sorted by "new".
        """
        url = self.page.url
        if not self.url_builder.is_listing_url(url):
            return None

        sort = URLBuilder.sort_from_url(url)
        if sort:
            return sort

        for selector in SORT_DROPDOWN_SELECTORS:
            try:
                locator = self.page.locator(selector)
                if locator.count() > 0:
                    text = (locator.first.text_content() or "").strip().lower()
                    if text in settings.SORTS:
                        return text
            except Exception as e:
                logger.debug(f"Selector '{selector}' failed: {e}")
                continue

        return "new"

    def navigate_to(self, partition: str) -> None:
        """
        Load the listing for a sort.

        Raises:
            ValueError: If the sort is unknown
            PlaywrightTimeoutError: If the page does not load
        """
        url = self.url_builder.build_sort_url(partition)
        logger.info(f"Switching sort → {partition} ({url})")
        self.page.goto(url, wait_until="domcontentloaded", timeout=self.pagination_handler.timeout)
        self.pagination_handler.wait_for_page_load(self.page)

    def list_candidates(self) -> List[Candidate]:
        return self.item_extractor.extract_candidates(self.page)

    def has_next_page(self) -> bool:
        return self.pagination_handler.has_next_page(self.page)

    def go_to_next_page(self) -> bool:
        return self.pagination_handler.go_to_next_page(self.page)

    def has_more_to_load(self) -> bool:
        return self.pagination_handler.has_more_to_load(self.page)

    def load_more(self) -> bool:
        if not self.pagination_handler.load_more(self.page):
            return False
        self.token.sleep(self.settle_delay)
        return True
