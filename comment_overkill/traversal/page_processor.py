"""
Page processor: deletes every eligible candidate on the current page, then advances.
"""
import random
import time
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple

from comment_overkill.config import settings
from comment_overkill.deletion.eligibility import EligibilityFilter
from comment_overkill.deletion.executor import DeletionExecutor
from comment_overkill.models import Candidate, OutcomeStatus, PageResult
from comment_overkill.safety.rate_limiter import RateLimitGovernor
from comment_overkill.stealth.behavior import draw_pause_interval, pause
from comment_overkill.traversal.content_source import ContentSource
from comment_overkill.utils.cancellation import CancellationToken
from comment_overkill.utils.logging import get_logger

logger = get_logger(__name__)


class PageProcessor:
    """Processes one page of the current partition per call."""

    def __init__(
        self,
        content_source: ContentSource,
        eligibility_filter: EligibilityFilter,
        executor: DeletionExecutor,
        governor: RateLimitGovernor,
        token: CancellationToken,
        wait_for_items: Optional[float] = None,
        item_poll_interval: Optional[float] = None,
        long_pause_every: Optional[Tuple[int, int]] = None,
        long_pause: Optional[Tuple[float, float]] = None,
        clock: Callable[[], float] = time.monotonic,
        now: Optional[Callable[[], datetime]] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize PageProcessor.

        Args:
            content_source: Listing being walked
            eligibility_filter: Decides which candidates are protected
            executor: DeletionExecutor for eligible candidates
            governor: Shared RateLimitGovernor
            token: Cancellation token of the run
            wait_for_items: Seconds to poll an empty-looking page for candidates
            item_poll_interval: Seconds between polls of an empty-looking page
            long_pause_every: (low, high) deletions between long pauses
            long_pause: (low, high) seconds of a long pause
            clock: Monotonic clock for the empty-page poll
            now: Wall-clock source for eligibility decisions (UTC)
            rng: Optional random source for pause scheduling
        """
        self.content_source = content_source
        self.eligibility_filter = eligibility_filter
        self.executor = executor
        self.governor = governor
        self.token = token
        self.wait_for_items = (
            settings.WAIT_FOR_ITEMS_SECONDS if wait_for_items is None else wait_for_items
        )
        self.item_poll_interval = item_poll_interval or settings.ITEM_POLL_SECONDS
        self.long_pause_every = long_pause_every or settings.LONG_PAUSE_EVERY
        self.long_pause = long_pause or settings.LONG_PAUSE_SECONDS
        self.clock = clock
        self.now = now or (lambda: datetime.now(timezone.utc))
        self.rng = rng

        self._deleted_since_pause = 0
        self._next_pause_after = draw_pause_interval(self.long_pause_every, self.rng)

    def process_one_page(self, should_stop: Optional[Callable[[], bool]] = None) -> PageResult:
        """
        Process the current page.

        Args:
            should_stop: Optional check asked before every delete attempt;
                         returning True ends the page without advancing

        Returns:
            PageResult; advanced is True if the page was paginated or at least
            one item was deleted
        """
        result = PageResult()

        if not self.governor.gate(self.token):
            return result

        candidates = self._wait_for_candidates()
        result.found = len(candidates)
        if not candidates:
            logger.info("No comments found on page")
        else:
            logger.info(f"Found {len(candidates)} comments")

        eligible, protected = self.eligibility_filter.split(candidates, self.now())
        result.preserved = len(protected)
        if protected:
            logger.info(f"Preserving {len(protected)} recent or protected comments")

        stopped = False
        for candidate in eligible:
            if not self.governor.gate(self.token):
                break

            outcome = self.executor.execute(candidate, should_stop)
            label = candidate.item_id or "item"

            if outcome.status is OutcomeStatus.DELETED:
                result.deleted += 1
                self._after_deletion()
            elif outcome.status is OutcomeStatus.SKIPPED:
                result.skipped += 1
                result.errors.append({"item": label, "error": outcome.reason})
            else:
                result.failed += 1
                result.errors.append({"item": label, "error": outcome.reason})

            if self.token.cancelled or outcome.reason == "stopped":
                stopped = True
                break

        paginated = False
        if not stopped and not self.token.cancelled:
            paginated = self._advance()

        result.advanced = paginated or result.deleted > 0

        logger.info(
            f"Page processing complete: {result.deleted} deleted, "
            f"{result.preserved} preserved, {result.skipped} skipped, {result.failed} failed"
        )
        return result

    def _wait_for_candidates(self) -> List[Candidate]:
        """List candidates, polling for lazily loaded content while the page looks empty."""
        candidates = self.content_source.list_candidates()
        if candidates:
            return candidates

        start = self.clock()
        while self.clock() - start < self.wait_for_items:
            if not self.governor.gate(self.token):
                break
            if not self.token.sleep(self.item_poll_interval):
                break
            candidates = self.content_source.list_candidates()
            if candidates:
                return candidates

        return candidates

    def _after_deletion(self) -> None:
        self._deleted_since_pause += 1
        if self._deleted_since_pause < self._next_pause_after:
            return

        pause(self.token, self.long_pause, "Long pause", self.rng)
        self._deleted_since_pause = 0
        self._next_pause_after = draw_pause_interval(self.long_pause_every, self.rng)

    def _advance(self) -> bool:
        """Follow the next page link, else click load more."""
        if self.content_source.has_next_page():
            return self.content_source.go_to_next_page()

        if self.content_source.has_more_to_load():
            return self.content_source.load_more()

        return False
