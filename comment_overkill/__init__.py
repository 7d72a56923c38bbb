"""
Comment Overkill - resumable bulk deletion of a user's Reddit comments.
"""

__version__ = "2.21.0"
