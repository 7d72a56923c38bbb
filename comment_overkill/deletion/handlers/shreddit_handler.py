"""
Comment deletion handler for the redesigned (www.reddit.com) profile listing.
"""
from typing import Optional

from playwright.sync_api import Locator, Page

from comment_overkill.deletion.handlers.base_handler import DeletionHandler
from comment_overkill.models import Candidate
from comment_overkill.utils.logging import get_logger

logger = get_logger(__name__)

MENU_SELECTORS = [
    "shreddit-overflow-menu button",
    "button[aria-label*='more options' i]",
    "button[aria-label*='overflow' i]",
]

MENU_DELETE_SELECTORS = [
    "[role='menuitem']:has-text('Delete')",
    "faceplate-menu li:has-text('Delete')",
    "li:has-text('Delete comment')",
]

DIALOG_CONFIRM_SELECTORS = [
    "[role='dialog'] button:has-text('Yes, delete')",
    "[role='dialog'] button:has-text('Delete')",
    "button:has-text('Yes, delete')",
]


class ShredditCommentHandler(DeletionHandler):
    """Handler for the overflow menu → Delete → dialog flow."""

    def can_handle(self, candidate: Candidate) -> bool:
        return candidate.interface == "new"

    def begin_delete(self, page: Page, candidate: Candidate) -> bool:
        """
        Open the comment's overflow menu and choose "Delete".

        Returns:
            True if the menu entry was clicked, False if not found
        """
        menu_button = self._first_visible(candidate.element, MENU_SELECTORS)
        if menu_button is None:
            logger.debug(f"No overflow menu for {candidate.item_id or 'item'}")
            return False

        menu_button.click(timeout=self.timeout)

        delete_entry = self._first_visible(page, MENU_DELETE_SELECTORS)
        if delete_entry is None:
            logger.debug("Overflow menu has no Delete entry")
            page.keyboard.press("Escape")
            return False

        delete_entry.click(timeout=self.timeout)
        return True

    def locate_confirmation(self, page: Page, candidate: Candidate) -> Optional[Locator]:
        """Find the confirm button of the delete dialog."""
        return self._first_visible(page, DIALOG_CONFIRM_SELECTORS)
