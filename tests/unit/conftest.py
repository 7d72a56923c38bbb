"""
Pytest configuration and shared fixtures for unit tests.
"""
from unittest.mock import MagicMock

import pytest  # noqa: E402

# Note: pytest_plugins is defined in the root tests/conftest.py
# to comply with pytest's requirement that it be at the top level


# Shared fixtures for unit tests
@pytest.fixture
def mock_page():
    """
    Create a mock Playwright Page object.

    Includes commonly used attributes and methods:
    - url: Page URL (default: old reddit comment listing sorted by "new")
    - content(): Returns mock HTML content
    - locator(): Returns a mock locator that matches nothing
    - goto(): Navigate to URL (returns None)
    - wait_for_load_state(): Wait for page load (returns None)

    Tests can override any attribute or method as needed.
    """
    page = MagicMock()
    page.url = "https://old.reddit.com/user/testuser/comments/?sort=new"
    page.content.return_value = "<html><body>Mock page content</body></html>"

    # Mock locator chain
    mock_locator = MagicMock()
    mock_locator.count.return_value = 0
    mock_locator.first = MagicMock()
    mock_locator.first.is_visible.return_value = False
    mock_locator.all.return_value = []
    mock_locator.is_visible.return_value = False

    page.locator.return_value = mock_locator
    page.goto.return_value = None
    page.wait_for_load_state.return_value = None

    return page


@pytest.fixture
def mock_context(mock_page):
    """
    Create a mock Playwright BrowserContext object.

    Args:
        mock_page: The mock_page fixture to return from new_page()
    """
    context = MagicMock()
    context.new_page.return_value = mock_page
    return context


@pytest.fixture
def mock_browser(mock_context):
    """
    Create a mock Playwright Browser object.

    Args:
        mock_context: The mock_context fixture to return from new_context()
    """
    browser = MagicMock()
    browser.new_context.return_value = mock_context
    return browser


@pytest.fixture
def temp_cookie_file(tmp_path):
    """
    Path for a temporary cookies.json (not created).

    Args:
        tmp_path: Pytest's temporary directory fixture
    """
    return tmp_path / "cookies.json"


@pytest.fixture
def temp_progress_file(tmp_path):
    """
    Path for a temporary progress.json (not created).

    Args:
        tmp_path: Pytest's temporary directory fixture
    """
    return tmp_path / "progress.json"
