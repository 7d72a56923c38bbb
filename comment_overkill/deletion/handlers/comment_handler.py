"""
Comment deletion handler for old Reddit's inline "delete / are you sure? yes" flow.
"""
from typing import Optional

from playwright.sync_api import Locator, Page

from comment_overkill.deletion.handlers.base_handler import DeletionHandler
from comment_overkill.models import Candidate
from comment_overkill.utils.logging import get_logger

logger = get_logger(__name__)

DELETE_SELECTORS = [
    "a[data-event-action='delete']",
    "form.del-button a.togglebutton",
    "a.togglebutton",
]

CONFIRM_SELECTORS = [
    ".option.error.active a.yes",
    "form.del-button a.yes",
    "a.yes",
]


class CommentDeletionHandler(DeletionHandler):
    """Handler for deleting comments on old.reddit.com listings."""

    def can_handle(self, candidate: Candidate) -> bool:
        return candidate.interface == "old"

    def begin_delete(self, page: Page, candidate: Candidate) -> bool:
        """
        Click the comment's "delete" toggle.

        Args:
            page: Playwright Page object
            candidate: Candidate to delete

        Returns:
            True if the toggle was clicked, False if not found
        """
        delete_link = self._find_delete_link(candidate)
        if delete_link is None:
            logger.debug(f"No delete link for {candidate.item_id or 'item'}")
            return False

        logger.debug(f"Clicking delete for {candidate.item_id or 'item'}")
        delete_link.click(timeout=self.timeout)
        return True

    def locate_confirmation(self, page: Page, candidate: Candidate) -> Optional[Locator]:
        """
        Find the "yes" link of this comment's inline confirmation.

        The search is scoped to the comment element so another comment's
        pending confirmation is never clicked.
        """
        return self._first_visible(candidate.element, CONFIRM_SELECTORS, text="yes")

    def _find_delete_link(self, candidate: Candidate) -> Optional[Locator]:
        return self._first_visible(candidate.element, DELETE_SELECTORS, text="delete")
