"""
Base deletion handler interface using Strategy pattern.
"""
from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

from playwright.sync_api import Locator, Page

from comment_overkill.models import Candidate
from comment_overkill.utils.logging import get_logger

logger = get_logger(__name__)


class DeletionHandler(ABC):
    """Abstract base class for interface-specific delete/confirm flows.

    A handler is the transport for the destructive actions: begin_delete()
    opens the confirmation, confirm() commits it. Exceptions raised by either
    are treated as transient by the executor.
    """

    def __init__(self, timeout: int = 5000):
        """
        Initialize deletion handler.

        Args:
            timeout: Default timeout for clicks in milliseconds
        """
        self.timeout = timeout

    @abstractmethod
    def can_handle(self, candidate: Candidate) -> bool:
        """
        Check if this handler can process the given candidate.

        Args:
            candidate: Candidate from the content source

        Returns:
            True if handler can process this candidate, False otherwise
        """

    @abstractmethod
    def begin_delete(self, page: Page, candidate: Candidate) -> bool:
        """
        Trigger the delete action for the candidate.

        Args:
            page: Playwright Page object
            candidate: Candidate to delete

        Returns:
            True if a delete control was clicked, False if none was found
        """

    @abstractmethod
    def locate_confirmation(self, page: Page, candidate: Candidate) -> Optional[Locator]:
        """
        Find the confirmation control opened by begin_delete().

        Args:
            page: Playwright Page object
            candidate: Candidate being deleted

        Returns:
            Locator for the confirmation control, or None if absent
        """

    def confirm(self, page: Page, candidate: Candidate, confirmation: Locator) -> None:
        """
        Click the confirmation control.

        Args:
            page: Playwright Page object
            candidate: Candidate being deleted
            confirmation: Locator returned by locate_confirmation()
        """
        logger.debug(f"Confirming deletion of {candidate.item_id or 'item'}")
        confirmation.click(timeout=self.timeout)

    def _first_visible(
        self, scope: Any, selectors: Sequence[str], text: Optional[str] = None
    ) -> Optional[Locator]:
        """
        Return the first visible match of a list of selectors.

        Args:
            scope: Page or Locator to search within
            selectors: CSS/Playwright selectors tried in order
            text: Optional exact text (case-insensitive) the match must have

        Returns:
            Locator or None
        """
        for selector in selectors:
            try:
                for match in scope.locator(selector).all():
                    if not match.is_visible():
                        continue
                    if text is not None:
                        content = (match.text_content() or "").strip().lower()
                        if content != text.lower():
                            continue
                    logger.debug(f"Matched selector: {selector}")
                    return match
            except Exception as e:
                logger.debug(f"Selector '{selector}' failed: {e}")
                continue

        return None
