"""
URL builder for a user's comment listing, one URL per sort order.
"""
from typing import Optional
from urllib.parse import parse_qs, urlencode, urlparse

from comment_overkill.config import settings
from comment_overkill.utils.logging import get_logger

logger = get_logger(__name__)


class URLBuilder:
    """Builds comment listing URLs for each sort order."""

    def __init__(self, username: str, interface: Optional[str] = None):
        """
        Initialize URLBuilder.

        Args:
            username: Reddit username (with or without the u/ prefix)
            interface: "old" or "new" (defaults to settings.TARGET_INTERFACE)

        Raises:
            ValueError: If username is empty or interface is unknown
        """
        if not username or not username.strip():
            raise ValueError("Username cannot be empty")

        self.username = username.strip().removeprefix("/").removeprefix("u/")
        self.interface = interface or settings.TARGET_INTERFACE
        if self.interface not in ("old", "new"):
            raise ValueError(f"Unknown interface: {self.interface}")

        base = settings.OLD_REDDIT_BASE if self.interface == "old" else settings.NEW_REDDIT_BASE
        self.base_url = f"{base}/user/{self.username}/comments/"

    def build_sort_url(self, sort: str) -> str:
        """
        Build the listing URL for a sort order.

        Args:
            sort: One of settings.SORTS

        Returns:
            Complete URL string

        Raises:
            ValueError: If sort is unknown
        """
        self._validate_sort(sort)
        url = f"{self.base_url}?{urlencode({'sort': sort})}"
        logger.debug(f"Built URL: {url}")
        return url

    def is_listing_url(self, url: str) -> bool:
        """Check whether url points at this user's comment listing."""
        path = urlparse(url or "").path.lower().rstrip("/")
        expected = f"/user/{self.username.lower()}/comments"
        return path == expected

    @staticmethod
    def sort_from_url(url: str) -> Optional[str]:
        """
        Extract the sort query parameter.

        Returns:
            Sort name if present and known, None otherwise
        """
        values = parse_qs(urlparse(url or "").query).get("sort")
        if not values:
            return None
        sort = values[0].strip().lower()
        return sort if sort in settings.SORTS else None

    def _validate_sort(self, sort: str) -> None:
        if sort not in settings.SORTS:
            raise ValueError(f"Invalid sort: {sort}. Must be one of {', '.join(settings.SORTS)}")
