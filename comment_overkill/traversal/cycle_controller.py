"""
Partition cycle controller: walks every sort order to exhaustion, resumably.
"""
from datetime import timedelta
from typing import Optional, Sequence

from comment_overkill.config import settings
from comment_overkill.models import RunState
from comment_overkill.safety.rate_limiter import RateLimitGovernor
from comment_overkill.traversal.content_source import ContentSource
from comment_overkill.traversal.page_processor import PageProcessor
from comment_overkill.utils.cancellation import CancellationToken
from comment_overkill.utils.logging import get_logger
from comment_overkill.utils.state_manager import StateManager
from comment_overkill.utils.statistics import StatisticsReporter

logger = get_logger(__name__)

COMPLETE = "complete"
STOPPED = "stopped"
INTERRUPTED = "interrupted"


class PartitionCycleController:
    """
    Drives the run over all partitions.

    Each partition is entered (navigating only when the content source shows
    another one), processed page by page until a page no longer advances, then
    marked completed and persisted. The run ends when every partition is
    completed or the cancellation token fires.
    """

    def __init__(
        self,
        content_source: ContentSource,
        page_processor: PageProcessor,
        governor: RateLimitGovernor,
        state_manager: StateManager,
        token: CancellationToken,
        statistics: Optional[StatisticsReporter] = None,
        navigation_delay: Optional[float] = None,
        post_navigation_delay: Optional[float] = None,
        page_interval: Optional[float] = None,
        partition_interval: Optional[float] = None,
        error_cooldown: Optional[float] = None,
    ):
        """
        Initialize PartitionCycleController.

        Args:
            content_source: Listing being walked
            page_processor: PageProcessor bound to the same content source
            governor: Shared RateLimitGovernor
            state_manager: Progress persistence
            token: Cancellation token of the run
            statistics: Optional StatisticsReporter for counters and status fields
            navigation_delay: Seconds to wait before switching partition
            post_navigation_delay: Seconds to wait after switching partition
            page_interval: Seconds between two pages of a partition
            partition_interval: Seconds between two partitions
            error_cooldown: Seconds to wait after an unexpected error
        """
        self.content_source = content_source
        self.page_processor = page_processor
        self.governor = governor
        self.state_manager = state_manager
        self.token = token
        self.statistics = statistics or StatisticsReporter()

        self.navigation_delay = _default(navigation_delay, settings.NAVIGATION_DELAY_SECONDS)
        self.post_navigation_delay = _default(
            post_navigation_delay, settings.POST_NAVIGATION_DELAY_SECONDS
        )
        self.page_interval = _default(page_interval, settings.PAGE_INTERVAL_SECONDS)
        self.partition_interval = _default(partition_interval, settings.PARTITION_INTERVAL_SECONDS)
        self.error_cooldown = _default(error_cooldown, settings.ERROR_COOLDOWN_SECONDS)

        self.state: Optional[RunState] = None
        self._stop_requested = False

    def start(
        self, preserve_window: timedelta, partitions: Optional[Sequence[str]] = None
    ) -> RunState:
        """
        Begin a fresh run and persist its cursor.

        Args:
            preserve_window: Age window of protected items
            partitions: Ordered partitions (defaults to settings.SORTS)

        Raises:
            ValueError: If partitions are empty or repeated
        """
        partitions = list(partitions or settings.SORTS)
        if not partitions:
            raise ValueError("At least one sort is required")
        if len(set(partitions)) != len(partitions):
            raise ValueError(f"Duplicate sorts: {partitions}")

        self.state = RunState(partitions=partitions, preserve_window=preserve_window)
        self.state_manager.save_state(self.state)

        logger.info(
            f"Starting fresh run over sorts {', '.join(partitions)}, "
            f"preserving {preserve_window.days} days"
        )
        return self.state

    def resume(self) -> Optional[RunState]:
        """
        Load a running cursor, if any.

        Returns:
            RunState to resume, or None if no run is in progress
        """
        state = self.state_manager.load_state()
        if state is None or not state.running:
            return None

        self.state = state
        completed = [p for p in state.partitions if p in state.completed_partitions]
        logger.info(
            f"Resuming run at sort '{state.current_partition}' "
            f"(completed: {', '.join(completed) or 'none'})"
        )
        return state

    def run(self) -> str:
        """
        Run until every partition is completed or the run is cancelled.

        Returns:
            "complete", "stopped" (operator stop, cursor cleared) or
            "interrupted" (cursor kept for resume)

        Raises:
            RuntimeError: If neither start() nor resume() was called
        """
        if self.state is None:
            raise RuntimeError("No run state: call start() or resume() first")

        self.statistics.update_status("status", "Running")
        self._report_progress()

        while not self.token.cancelled:
            try:
                if not self.governor.gate(self.token):
                    break

                index = self.state.next_pending_index()
                if index is None:
                    return self._complete()

                partition = self.state.partitions[index]
                self.state.current_partition_index = index

                if not self._enter(partition):
                    continue

                self._process(partition)
                if self.token.cancelled:
                    break

                self._exhaust(partition)

            except Exception as e:
                logger.error(f"Unexpected error in main loop: {e}", exc_info=True)
                self.statistics.record_error()
                self.statistics.update_status("status", "Error - retrying")
                self.token.sleep(self.error_cooldown)

        return self._finish_cancelled()

    def stop(self) -> None:
        """
        Request an operator stop; the cursor is cleared once the run acknowledges.

        Calling stop() more than once has no further effect.
        """
        if not self._stop_requested:
            logger.info("Stop requested")
        self._stop_requested = True
        self.token.cancel()

    def interrupt(self) -> None:
        """Cancel the run but keep the cursor so the next run resumes."""
        if not self.token.cancelled:
            logger.info("Interrupt received, saving progress")
        self.token.cancel()

    def _enter(self, partition: str) -> bool:
        """
        Make sure the content source shows the partition.

        Returns:
            True if processing may start, False if the run was cancelled or stopped
        """
        self.statistics.update_status("current_sort", partition)

        if self.content_source.current_partition() == partition:
            logger.info(f"Already on sort '{partition}', processing immediately")
            return True

        if self._reload_cursor() is None:
            return False

        self.state_manager.save_state(self.state)
        logger.info(
            f"Need sort '{partition}', waiting {self.navigation_delay:.0f}s before navigation"
        )
        self.statistics.update_status("status", f"Waiting to switch to {partition}")
        if not self.token.sleep(self.navigation_delay):
            return False

        self.content_source.navigate_to(partition)
        if not self.token.sleep(self.post_navigation_delay):
            return False

        persisted = self._reload_cursor()
        if persisted is None:
            return False
        self.state = persisted

        landed = self.content_source.current_partition()
        if landed != partition:
            raise RuntimeError(f"Navigation to sort '{partition}' landed on '{landed}'")

        self.statistics.update_status("status", "Running")
        return True

    def _process(self, partition: str) -> None:
        logger.info(f"Processing sort: {partition}")

        while not self.token.cancelled:
            if self._reload_cursor() is None:
                break

            result = self.page_processor.process_one_page(should_stop=self._cursor_cleared)
            self.statistics.update_from_page_result(result)

            if not result.advanced:
                break

            if not self.token.sleep(self.page_interval):
                break

    def _exhaust(self, partition: str) -> None:
        logger.info(f"Sort complete: {partition}")
        self.state.mark_completed(partition)
        if self._reload_cursor() is None:
            return
        self.state_manager.save_state(self.state)
        self.statistics.record_partition_complete()
        self._report_progress()
        self.token.sleep(self.partition_interval)

    def _complete(self) -> str:
        self.state.running = False
        self.state_manager.clear_state()
        self.statistics.update_status("status", "Complete - All sorts processed")
        logger.info("All sorts processed")
        return COMPLETE

    def _finish_cancelled(self) -> str:
        if not self._stop_requested:
            persisted = self.state_manager.load_state()
            if persisted is None or not persisted.running:
                logger.info("Progress cursor was cleared, not saving")
                self._stop_requested = True

        if self._stop_requested:
            self.state.running = False
            self.state_manager.clear_state()
            self.statistics.update_status("status", "Stopped")
            logger.info("Run stopped, progress cleared")
            return STOPPED

        self.state_manager.save_state(self.state)
        self.statistics.update_status("status", "Interrupted - progress saved")
        logger.info("Run interrupted, progress saved for resume")
        return INTERRUPTED

    def _reload_cursor(self) -> Optional[RunState]:
        """
        Reload the persisted cursor, which a "stop" from another process deletes.

        Returns:
            The persisted RunState, or None if it is gone (the run is then stopped)
        """
        persisted = self.state_manager.load_state()
        if persisted is None or not persisted.running:
            logger.info("Progress cursor was cleared, stopping")
            self.stop()
            return None
        return persisted

    def _cursor_cleared(self) -> bool:
        return self._reload_cursor() is None

    def _report_progress(self) -> None:
        done = len(self.state.completed_partitions)
        total = len(self.state.partitions)
        self.statistics.update_status("sort_progress", f"{done}/{total}")


def _default(value: Optional[float], fallback: float) -> float:
    return fallback if value is None else value
