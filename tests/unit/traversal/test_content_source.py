"""
Tests for RedditContentSource.
"""
from unittest.mock import MagicMock

import pytest

from comment_overkill.traversal.content_source import RedditContentSource
from tests.unit.fixtures.mock_pages import make_element, make_page


@pytest.mark.unit
class TestCurrentPartition:
    """Test RedditContentSource.current_partition()."""

    def test_sort_from_url(self, mock_page_old_listing, instant_token):
        """Test the URL sort parameter wins."""
        source = RedditContentSource(mock_page_old_listing, "testuser", "old", token=instant_token)

        assert source.current_partition() == "top"

    def test_sort_from_dropdown(self, instant_token):
        """Test the selected dropdown entry is used without a sort parameter."""
        page = make_page(
            "https://old.reddit.com/user/testuser/comments/",
            {".dropdown.lightdrop .selected": [make_element(text="Controversial")]},
        )
        source = RedditContentSource(page, "testuser", "old", token=instant_token)

        assert source.current_partition() == "controversial"

    def test_default_new(self, instant_token):
        """Test listing without sort information is 'new'."""
        page = make_page("https://old.reddit.com/user/testuser/comments/")
        source = RedditContentSource(page, "testuser", "old", token=instant_token)

        assert source.current_partition() == "new"

    def test_not_on_listing(self, instant_token):
        """Test None when the page is not the user's listing."""
        page = make_page("https://old.reddit.com/login")
        source = RedditContentSource(page, "testuser", "old", token=instant_token)

        assert source.current_partition() is None


@pytest.mark.unit
class TestNavigation:
    """Test navigate_to() and paging delegation."""

    def test_navigate_to(self, mock_page, instant_token):
        """Test navigate_to loads the sort URL and waits for load."""
        source = RedditContentSource(mock_page, "testuser", "old", token=instant_token)

        source.navigate_to("hot")

        assert mock_page.goto.call_args[0][0] == "https://old.reddit.com/user/testuser/comments/?sort=hot"
        mock_page.wait_for_load_state.assert_called()

    def test_navigate_to_unknown_sort(self, mock_page, instant_token):
        """Test unknown sorts raise ValueError."""
        source = RedditContentSource(mock_page, "testuser", "old", token=instant_token)

        with pytest.raises(ValueError):
            source.navigate_to("best")

    def test_load_more_waits_to_settle(self, mock_page, instant_token):
        """Test a successful load more is followed by the settle delay."""
        pagination = MagicMock()
        pagination.load_more.return_value = True
        source = RedditContentSource(
            mock_page, "testuser", "old", token=instant_token, settle_delay=3, pagination_handler=pagination
        )

        assert source.load_more() is True
        assert instant_token.sleeps == [3]

    def test_load_more_nothing_to_load(self, mock_page, instant_token):
        """Test no settle delay when nothing was clicked."""
        pagination = MagicMock()
        pagination.load_more.return_value = False
        source = RedditContentSource(mock_page, "testuser", "old", token=instant_token, pagination_handler=pagination)

        assert source.load_more() is False
        assert instant_token.sleeps == []

    def test_list_candidates(self, mock_page_old_listing, instant_token):
        """Test candidates come from the item extractor."""
        source = RedditContentSource(mock_page_old_listing, "testuser", "old", token=instant_token)

        assert [c.item_id for c in source.list_candidates()] == ["t1_old", "t1_new"]
        assert source.has_next_page() is True
        assert source.has_more_to_load() is False
