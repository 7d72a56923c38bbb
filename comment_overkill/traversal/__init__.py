"""
Traversal of the comment listing: content source, page processing and the sort cycle.
"""

from comment_overkill.traversal.content_source import ContentSource, RedditContentSource
from comment_overkill.traversal.cycle_controller import PartitionCycleController
from comment_overkill.traversal.item_extractor import ItemExtractor
from comment_overkill.traversal.page_processor import PageProcessor
from comment_overkill.traversal.pagination import PaginationHandler
from comment_overkill.traversal.url_builder import URLBuilder

__all__ = [
    "URLBuilder",
    "PaginationHandler",
    "ItemExtractor",
    "ContentSource",
    "RedditContentSource",
    "PageProcessor",
    "PartitionCycleController",
]
