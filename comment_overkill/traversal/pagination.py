"""
Pagination handler for comment listings: "next" links and "load more" controls.
"""
from typing import List, Optional

from playwright.sync_api import Locator, Page
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from comment_overkill.utils.logging import get_logger

logger = get_logger(__name__)


class PaginationHandler:
    """Handles pagination through a comment listing."""

    def __init__(self, timeout: int = 30000):
        """
        Initialize PaginationHandler.

        Args:
            timeout: Page navigation timeout in milliseconds (default: 30000)
        """
        self.timeout = timeout
        self.next_page_selectors: List[str] = [
            "span.next-button a",
            "a[rel~='next']",
        ]
        self.load_more_selectors: List[str] = [
            ".morecomments a",
            ".morecomments",
            ".load-more-comments",
            "faceplate-partial button:has-text('View more')",
        ]

    def has_next_page(self, page: Page) -> bool:
        """
        Check if the listing has a "next" link.

        Args:
            page: Playwright Page object

        Returns:
            True if a visible "next" link exists
        """
        return self._find(page, self.next_page_selectors) is not None

    def go_to_next_page(self, page: Page, timeout: Optional[int] = None) -> bool:
        """
        Follow the "next" link and wait for the page to load.

        Args:
            page: Playwright Page object
            timeout: Optional timeout override (uses self.timeout if None)

        Returns:
            True if successful, False otherwise
        """
        timeout = timeout or self.timeout

        next_link = self._find(page, self.next_page_selectors)
        if next_link is None:
            logger.debug("No next page link found")
            return False

        try:
            href = next_link.get_attribute("href")
            logger.info(f"Next page → {href or '(click)'}")

            if href:
                page.goto(href, wait_until="domcontentloaded", timeout=timeout)
            else:
                next_link.click(timeout=5000)

            self.wait_for_page_load(page, timeout)
            return True

        except PlaywrightTimeoutError as e:
            logger.error(f"Timeout loading next page: {e}")
            return False
        except Exception as e:
            logger.error(f"Error following next page link: {e}")
            return False

    def has_more_to_load(self, page: Page) -> bool:
        """Check if the listing has a "load more" control."""
        return self._find(page, self.load_more_selectors) is not None

    def load_more(self, page: Page) -> bool:
        """
        Click the "load more" control.

        The caller waits for the new content to settle.

        Returns:
            True if the control was clicked
        """
        control = self._find(page, self.load_more_selectors)
        if control is None:
            logger.debug("No load more control found")
            return False

        try:
            logger.info("Loading more comments...")
            control.scroll_into_view_if_needed(timeout=5000)
            control.click(timeout=5000)
            return True
        except Exception as e:
            logger.error(f"Error clicking load more: {e}")
            return False

    def wait_for_page_load(self, page: Page, timeout: Optional[int] = None) -> None:
        """
        Wait for page to finish loading.

        Args:
            page: Playwright Page object
            timeout: Optional timeout override (uses self.timeout if None)

        Raises:
            PlaywrightTimeoutError: If page doesn't load within timeout
        """
        timeout = timeout or self.timeout

        try:
            page.wait_for_load_state("networkidle", timeout=timeout)
            logger.debug("Page load state: networkidle")
        except PlaywrightTimeoutError:
            try:
                page.wait_for_load_state("domcontentloaded", timeout=timeout)
                logger.debug("Page load state: domcontentloaded (fallback)")
            except PlaywrightTimeoutError as e:
                logger.warning(f"Page load timeout: {e}")
                raise

    def _find(self, page: Page, selectors: List[str]) -> Optional[Locator]:
        for selector in selectors:
            try:
                locator = page.locator(selector)
                if locator.count() > 0 and locator.first.is_visible():
                    logger.debug(f"Matched selector: {selector}")
                    return locator.first
            except Exception as e:
                logger.debug(f"Selector '{selector}' failed: {e}")
                continue
        return None
