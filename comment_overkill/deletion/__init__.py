"""
Deletion modules: eligibility, handlers and the deletion executor.
"""
from comment_overkill.deletion.date_parser import DateParser
from comment_overkill.deletion.eligibility import EligibilityFilter, marker_predicate
from comment_overkill.deletion.executor import DeletionExecutor
from comment_overkill.deletion.handlers import (
    CommentDeletionHandler,
    DeletionHandler,
    ShredditCommentHandler,
    get_all_handlers,
)

__all__ = [
    "DateParser",
    "EligibilityFilter",
    "marker_predicate",
    "DeletionExecutor",
    "DeletionHandler",
    "CommentDeletionHandler",
    "ShredditCommentHandler",
    "get_all_handlers",
]
