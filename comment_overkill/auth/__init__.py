"""
Authentication and session management modules.
"""
from comment_overkill.auth.browser_manager import BrowserManager
from comment_overkill.auth.cookie_manager import CookieManager
from comment_overkill.auth.session_validator import SessionValidator

__all__ = ["CookieManager", "SessionValidator", "BrowserManager"]
