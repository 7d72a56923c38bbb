"""
Session validation module for verifying Reddit authentication status.
"""
import re
from typing import Optional

from playwright.sync_api import Page
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from comment_overkill.config import settings
from comment_overkill.utils.logging import get_logger

logger = get_logger(__name__)


class SessionValidator:
    """Validates the Reddit session and discovers the logged-in username."""

    def __init__(self, base_url: Optional[str] = None, timeout: int = 30000):
        """
        Initialize SessionValidator.

        Args:
            base_url: Reddit base URL (defaults to settings.OLD_REDDIT_BASE)
            timeout: Page navigation timeout in milliseconds (default: 30000)
        """
        self.base_url = base_url or settings.OLD_REDDIT_BASE
        self.timeout = timeout
        self.username: Optional[str] = None

    def validate_session(self, page: Page) -> tuple[bool, str]:
        """
        Validate that the current session is active and authenticated.

        Args:
            page: Playwright Page object

        Returns:
            Tuple of (is_valid: bool, message: str)
        """
        try:
            logger.info("Validating Reddit session...")
            page.goto(self.base_url, wait_until="domcontentloaded", timeout=self.timeout)

            if self._check_login_redirect(page):
                logger.warning("Session expired - not logged in")
                return False, "Session expired - not logged in"

            username = self._detect_username(page)
            if username:
                self.username = username
                logger.info(f"Session validation successful (user: {username})")
                return True, f"Session valid for {username}"

            logger.warning("Session indicators not found")
            return False, "Session validation failed - unable to confirm authentication"

        except PlaywrightTimeoutError:
            logger.error(f"Timeout waiting for page load (>{self.timeout}ms)")
            return False, "Timeout waiting for page load"
        except Exception as e:
            logger.error(f"Unexpected error during session validation: {e}")
            return False, f"Session validation error: {str(e)}"

    def _check_login_redirect(self, page: Page) -> bool:
        """
        Detect if page shows the logged-out state.

        Args:
            page: Playwright Page object

        Returns:
            True if logged out, False otherwise
        """
        if "/login" in page.url.lower():
            logger.debug(f"Login redirect detected in URL: {page.url}")
            return True

        try:
            # old reddit: "Log in or sign up" header link
            if page.locator("#header .login-required, span.user a.login-required").count() > 0:
                logger.debug("Login link detected in header")
                return True
        except Exception as e:
            logger.debug(f"Error checking for login link: {e}")

        return False

    def _detect_username(self, page: Page) -> Optional[str]:
        """
        Read the logged-in username from the page header.

        Args:
            page: Playwright Page object

        Returns:
            Username or None if not found
        """
        selectors = [
            "#header-bottom-right span.user a",
            "span.user a[href*='/user/']",
            "a[href*='/user/'][data-testid='user-drawer-button']",
        ]

        for selector in selectors:
            try:
                locator = page.locator(selector)
                if locator.count() == 0:
                    continue
                href = locator.first.get_attribute("href") or ""
                match = re.search(r"/user/([^/?#]+)", href)
                if match:
                    return match.group(1)
                text = (locator.first.text_content() or "").strip()
                if text and " " not in text:
                    return text
            except Exception as e:
                logger.debug(f"Selector '{selector}' failed: {e}")
                continue

        return None
