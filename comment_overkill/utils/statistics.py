"""
Statistics and status reporting for cleanup runs.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from comment_overkill.models import PageResult
from comment_overkill.utils.logging import get_logger

logger = get_logger(__name__)

STATUS_FIELDS = {
    "status": "Status",
    "current_sort": "Current Sort",
    "sort_progress": "Sort Progress",
    "comments_found": "Comments Found",
    "comments_deleted": "Comments Deleted",
    "recent_preserved": "Recent Preserved",
    "rate_limit": "Rate Limit Status",
}


class StatisticsReporter:
    """Tracks counters and the status fields shown to the operator."""

    def __init__(self, start_time: Optional[datetime] = None):
        """
        Initialize StatisticsReporter.

        Args:
            start_time: Operation start time (defaults to now)
        """
        self.start_time = start_time or datetime.now()
        self.stats = {
            "total_found": 0,
            "total_deleted": 0,
            "total_preserved": 0,
            "total_skipped": 0,
            "total_failed": 0,
            "pages_processed": 0,
            "partitions_completed": 0,
            "errors_encountered": 0,
        }
        self.status: Dict[str, Any] = {key: "" for key in STATUS_FIELDS}

    def update_status(self, key: str, value: Any) -> None:
        """
        Update a status field; changes are logged.

        Args:
            key: One of STATUS_FIELDS
            value: New value ("" hides the field)
        """
        if key not in STATUS_FIELDS:
            logger.debug(f"Ignoring unknown status field: {key}")
            return

        if self.status[key] == value:
            return

        self.status[key] = value
        if value != "":
            logger.info(f"{STATUS_FIELDS[key]}: {value}")

    def update_from_page_result(self, result: PageResult) -> None:
        """
        Update statistics from a page processing result.

        Args:
            result: PageResult from PageProcessor.process_one_page()
        """
        self.stats["total_found"] += result.found
        self.stats["total_deleted"] += result.deleted
        self.stats["total_preserved"] += result.preserved
        self.stats["total_skipped"] += result.skipped
        self.stats["total_failed"] += result.failed
        self.stats["errors_encountered"] += len(result.errors)
        self.stats["pages_processed"] += 1

        if result.found:
            self.update_status("comments_found", result.found)
        self.update_status("comments_deleted", self.stats["total_deleted"])
        self.update_status("recent_preserved", self.stats["total_preserved"])

    def record_partition_complete(self) -> None:
        self.stats["partitions_completed"] += 1

    def record_error(self) -> None:
        self.stats["errors_encountered"] += 1

    def print_summary(self) -> None:
        """Print final summary statistics."""
        elapsed = datetime.now() - self.start_time
        hours = elapsed.total_seconds() / 3600

        logger.info("=" * 60)
        logger.info("CLEANUP SUMMARY")
        logger.info("=" * 60)
        logger.info(f"Comments Found: {self.stats['total_found']}")
        logger.info(f"Total Deleted: {self.stats['total_deleted']}")
        logger.info(f"Recent Preserved: {self.stats['total_preserved']}")
        logger.info(f"Total Skipped: {self.stats['total_skipped']}")
        logger.info(f"Total Failed: {self.stats['total_failed']}")
        logger.info(f"Pages Processed: {self.stats['pages_processed']}")
        logger.info(f"Sorts Completed: {self.stats['partitions_completed']}")
        logger.info(f"Errors Encountered: {self.stats['errors_encountered']}")
        logger.info(f"Time Elapsed: {elapsed}")
        logger.info(
            f"Average Rate: {self.stats['total_deleted'] / max(hours, 0.01):.1f} items/hour"
        )
        logger.info("=" * 60)

    def get_stats(self) -> Dict[str, Any]:
        """
        Get current statistics.

        Returns:
            Statistics dictionary
        """
        elapsed = datetime.now() - self.start_time
        return {
            **self.stats,
            "start_time": self.start_time.isoformat(),
            "elapsed_time": str(elapsed),
            "elapsed_hours": elapsed.total_seconds() / 3600,
        }
