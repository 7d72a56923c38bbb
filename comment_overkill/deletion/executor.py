"""
Deletion executor: gated delete/confirm protocol for a single candidate.
"""
import random
from typing import Callable, List, Optional, Tuple

from playwright.sync_api import Page

from comment_overkill.config import settings
from comment_overkill.deletion.handlers import DeletionHandler, get_all_handlers
from comment_overkill.models import Candidate, DeletionOutcome
from comment_overkill.safety.error_detector import ThrottleDetector
from comment_overkill.safety.rate_limiter import RateLimitGovernor
from comment_overkill.stealth.behavior import pause
from comment_overkill.utils.cancellation import CancellationToken
from comment_overkill.utils.logging import get_logger

logger = get_logger(__name__)


class DeletionExecutor:
    """Deletes one candidate at a time, retrying transient handler faults."""

    def __init__(
        self,
        page: Page,
        governor: RateLimitGovernor,
        token: CancellationToken,
        handlers: Optional[List[DeletionHandler]] = None,
        throttle_detector: Optional[ThrottleDetector] = None,
        confirm_delay: Optional[float] = None,
        pacing_delay: Optional[float] = None,
        retry_cooldown: Optional[Tuple[float, float]] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize DeletionExecutor.

        Args:
            page: Playwright Page object
            governor: Shared RateLimitGovernor
            token: Cancellation token of the run
            handlers: Optional list of handlers (defaults to all registered handlers)
            throttle_detector: Optional detector checked for throttling banners after confirming
            confirm_delay: Seconds between begin_delete and locating the confirmation
            pacing_delay: Seconds to wait after a confirmed deletion
            retry_cooldown: (low, high) seconds to wait before retrying after a fault
            rng: Optional random source for the cooldown
        """
        self.page = page
        self.governor = governor
        self.token = token
        self.handlers = handlers if handlers is not None else get_all_handlers()
        self.throttle_detector = throttle_detector
        self.confirm_delay = (
            settings.CONFIRM_DELAY_SECONDS if confirm_delay is None else confirm_delay
        )
        self.pacing_delay = (
            settings.DELETE_PACING_SECONDS if pacing_delay is None else pacing_delay
        )
        self.retry_cooldown = retry_cooldown or settings.RETRY_COOLDOWN_SECONDS
        self.rng = rng

        self.attempts = 0
        self.retries = 0

    def execute(
        self, candidate: Candidate, should_stop: Optional[Callable[[], bool]] = None
    ) -> DeletionOutcome:
        """
        Delete a single eligible candidate.

        Each attempt waits on the governor, opens the delete confirmation and
        confirms it. A fault from the handler leads to a randomized cooldown
        and a new attempt. should_stop is asked before every attempt.

        Args:
            candidate: Eligible candidate
            should_stop: Optional check for a stop requested outside this process

        Returns:
            DeletionOutcome (Deleted, Skipped("no-confirmation"),
            Skipped("no-handler") or Failed("stopped"))
        """
        handler = self._select_handler(candidate)
        if handler is None:
            logger.warning(f"No handler for {candidate.item_id or 'item'} ({candidate.interface})")
            return DeletionOutcome.skipped("no-handler")

        label = candidate.item_id or "item"

        while not self.token.cancelled:
            if not self.governor.gate(self.token):
                break
            if should_stop is not None and should_stop():
                break

            self.attempts += 1
            try:
                opened = handler.begin_delete(self.page, candidate)
                if not self.token.sleep(self.confirm_delay):
                    break

                confirmation = (
                    handler.locate_confirmation(self.page, candidate) if opened else None
                )
                if confirmation is None:
                    logger.warning(f"No confirmation control for {label}, skipping")
                    return DeletionOutcome.skipped("no-confirmation")

                handler.confirm(self.page, candidate, confirmation)
            except Exception as e:
                self.retries += 1
                logger.warning(f"Error deleting {label}: {e}")
                if not pause(self.token, self.retry_cooldown, "Retry cooldown", self.rng):
                    break
                continue

            if self.throttle_detector is not None:
                self.throttle_detector.check_page(self.page)

            logger.info(f"Deleted {label}")
            self.token.sleep(self.pacing_delay)
            return DeletionOutcome.deleted()

        logger.info(f"Stopped before deleting {label}")
        return DeletionOutcome.failed("stopped")

    def _select_handler(self, candidate: Candidate) -> Optional[DeletionHandler]:
        for handler in self.handlers:
            try:
                if handler.can_handle(candidate):
                    logger.debug(f"Selected handler: {type(handler).__name__}")
                    return handler
            except Exception as e:
                logger.debug(f"Handler {type(handler).__name__} error in can_handle: {e}")
                continue

        return None
