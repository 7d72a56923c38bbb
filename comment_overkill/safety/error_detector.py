"""
Throttle detector: reports rate limiting seen in browser traffic to the governor.
"""
from typing import Any, Optional

from playwright.sync_api import Page

from comment_overkill.safety.rate_limiter import RateLimitGovernor, ThrottleSignal
from comment_overkill.utils.logging import get_logger

logger = get_logger(__name__)


class ThrottleDetector:
    """Observes every response of a page and inspects pages for throttling banners."""

    THROTTLE_INDICATORS = [
        "you are doing that too much",
        "you're doing that too much",
        "too many requests",
    ]

    RATELIMIT_SELECTORS = [
        ".error.RATELIMIT",
        "span.RATELIMIT",
        "[data-error='RATELIMIT']",
    ]

    # Elements that show action errors; never comment bodies
    ERROR_MESSAGE_SELECTORS = [
        "form.del-button .error",
        ".status.error",
        "span.error",
        "[role='alert']",
        "faceplate-toast",
    ]

    def __init__(self, governor: RateLimitGovernor, additional_indicators: Optional[list] = None):
        """
        Initialize ThrottleDetector.

        Args:
            governor: RateLimitGovernor receiving the signals
            additional_indicators: Optional list of additional throttling phrases
        """
        self.governor = governor
        self.indicators = self.THROTTLE_INDICATORS.copy()
        if additional_indicators:
            self.indicators.extend(additional_indicators)
        self._attached_pages: list = []

    def attach(self, page: Page) -> None:
        """
        Register the response hook on a page.

        Covers fetch, XHR and navigations alike.

        Args:
            page: Playwright Page object
        """
        if page in self._attached_pages:
            return
        page.on("response", self.on_response)
        self._attached_pages.append(page)
        logger.debug("Throttle detector attached to page")

    def detach(self, page: Page) -> None:
        if page not in self._attached_pages:
            return
        try:
            page.remove_listener("response", self.on_response)
        except Exception as e:
            logger.debug(f"Error detaching response listener: {e}")
        self._attached_pages.remove(page)

    def on_response(self, response: Any) -> None:
        """
        Response event handler.

        Args:
            response: Playwright Response object
        """
        try:
            status = response.status
        except Exception as e:
            logger.debug(f"Could not read response status: {e}")
            return
        self.governor.observe_status(status)

    def check_page(self, page: Page) -> bool:
        """
        Check the page's error elements for throttling messages.

        Only error and status elements are read. Comment bodies on the listing
        can contain the same phrases and must not trigger a wait.
        A detected message is reported to the governor as a throttling signal.

        Args:
            page: Playwright Page object

        Returns:
            True if a throttling message was found, False otherwise
        """
        for selector in self.RATELIMIT_SELECTORS:
            try:
                locator = page.locator(selector)
                if locator.count() > 0 and locator.first.is_visible():
                    logger.warning(f"Rate limit error element detected: {selector}")
                    self.governor.observe(ThrottleSignal.THROTTLED)
                    return True
            except Exception as e:
                logger.debug(f"Selector '{selector}' failed: {e}")
                continue

        for selector in self.ERROR_MESSAGE_SELECTORS:
            try:
                messages = page.locator(selector).all()
            except Exception as e:
                logger.debug(f"Selector '{selector}' failed: {e}")
                continue

            for message in messages:
                try:
                    if not message.is_visible():
                        continue
                    text = (message.text_content() or "").lower()
                except Exception as e:
                    logger.debug(f"Could not read error element: {e}")
                    continue

                for indicator in self.indicators:
                    if indicator in text:
                        logger.warning(f"Throttling message detected: '{indicator}'")
                        self.governor.observe(ThrottleSignal.THROTTLED)
                        return True

        return False
