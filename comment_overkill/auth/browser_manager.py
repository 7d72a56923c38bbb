"""
Browser manager for creating authenticated browser sessions with stealth configuration.
"""
from pathlib import Path
from typing import Optional, Tuple

from playwright.sync_api import Browser, BrowserContext, Page, sync_playwright

from comment_overkill.auth.cookie_manager import CookieManager
from comment_overkill.auth.session_validator import SessionValidator
from comment_overkill.config import settings
from comment_overkill.stealth.fingerprint import (
    apply_stealth_patches,
    create_stealth_context,
    get_browser_args,
)
from comment_overkill.utils.logging import get_logger

logger = get_logger(__name__)


class BrowserManager:
    """High-level interface for creating authenticated browser sessions."""

    def __init__(self, cookie_path: Optional[Path] = None, logger_instance=None):
        """
        Initialize BrowserManager.

        Args:
            cookie_path: Path to cookies.json file (defaults to settings.REDDIT_COOKIES_PATH)
            logger_instance: Optional logger instance (uses module logger if None)
        """
        self.cookie_path = cookie_path or Path(settings.REDDIT_COOKIES_PATH)
        self.logger = logger_instance or logger
        self.cookie_manager = CookieManager(self.cookie_path)
        self.session_validator = SessionValidator()
        self.playwright = None
        self.browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None
        self.page: Optional[Page] = None

    @property
    def username(self) -> Optional[str]:
        """Username discovered during session validation."""
        return self.session_validator.username

    def create_authenticated_browser(
        self, headless: Optional[bool] = None, validate_session: bool = True
    ) -> Tuple[Browser, BrowserContext, Page]:
        """
        Create an authenticated browser session with stealth configuration.

        Args:
            headless: Run browser in headless mode (defaults to settings.HEADLESS)
            validate_session: Whether to validate session after creation (default: True)

        Returns:
            Tuple of (Browser, BrowserContext, Page)

        Raises:
            FileNotFoundError: If cookie file doesn't exist
            ValueError: If cookies are invalid or session validation fails
            RuntimeError: If browser creation fails
        """
        headless = headless if headless is not None else settings.HEADLESS

        try:
            self.logger.info("Step 1: Loading cookies...")
            self.cookie_manager.load_cookies()

            all_present, missing = self.cookie_manager.check_required_cookies()
            if not all_present:
                raise ValueError(
                    f"Missing required cookies: {missing}\n"
                    "Please re-export your Reddit cookies."
                )

            self.logger.info("Step 2: Launching browser...")
            self.playwright = sync_playwright().start()
            browser_args = get_browser_args()
            self.logger.debug(f"Browser args: {browser_args}")
            self.browser = self.playwright.chromium.launch(headless=headless, args=browser_args)
            self.logger.info(f"Browser launched (headless={headless})")

            self.logger.info("Step 3: Creating stealth context with cookies...")
            self.context = create_stealth_context(self.browser, cookies_path=self.cookie_path)

            self.logger.info("Step 4: Creating page and applying stealth patches...")
            self.page = self.context.new_page()
            apply_stealth_patches(self.page)

            if validate_session:
                self.logger.info("Step 5: Validating session...")
                is_valid, message = self.session_validator.validate_session(self.page)

                if not is_valid:
                    self.logger.error(f"Session validation failed: {message}")
                    self.cleanup()
                    raise ValueError(
                        f"Session validation failed: {message}\n"
                        "Please re-export your Reddit cookies and try again."
                    )

                self.logger.info(f"Session validation successful: {message}")

            self.logger.info("Authenticated browser session created successfully")
            return self.browser, self.context, self.page

        except FileNotFoundError as e:
            self.logger.error(f"Cookie file not found: {e}")
            self.cleanup()
            raise
        except ValueError as e:
            self.logger.error(f"Cookie validation error: {e}")
            self.cleanup()
            raise
        except Exception as e:
            self.logger.error(f"Unexpected error creating browser: {e}")
            self.cleanup()
            raise RuntimeError(f"Failed to create authenticated browser: {e}") from e

    def cleanup(self) -> None:
        """Clean up browser resources."""
        for name in ("page", "context", "browser"):
            resource = getattr(self, name)
            if resource is None:
                continue
            try:
                resource.close()
                self.logger.debug(f"{name.capitalize()} closed")
            except Exception as e:
                self.logger.debug(f"Error closing {name}: {e}")
            setattr(self, name, None)

        if self.playwright:
            try:
                self.playwright.stop()
                self.logger.debug("Playwright stopped")
            except Exception as e:
                self.logger.debug(f"Error stopping playwright: {e}")
            self.playwright = None

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - cleanup resources."""
        self.cleanup()
        return False
