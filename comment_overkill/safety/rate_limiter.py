"""
Rate limit governor: exponential backoff on throttling signals.
"""
import time
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Callable, Optional

from comment_overkill.config import settings
from comment_overkill.utils.cancellation import CancellationToken
from comment_overkill.utils.logging import get_logger
from comment_overkill.utils.state_manager import RateLimitStore

logger = get_logger(__name__)


class ThrottleSignal(Enum):
    THROTTLED = "throttled"
    SUCCESS = "success"


@dataclass
class RateLimitState:
    active: bool = False
    last_triggered_at: float = 0.0
    multiplier: float = 1.0
    wait: float = 0.0


class RateLimitGovernor:
    """Tracks throttling and suspends callers until it is safe to act again."""

    def __init__(
        self,
        base_wait: Optional[float] = None,
        max_wait: Optional[float] = None,
        poll_interval: Optional[float] = None,
        throttle_statuses: Optional[tuple] = None,
        clock: Callable[[], float] = time.time,
        store: Optional[RateLimitStore] = None,
        on_status: Optional[Callable[[str], None]] = None,
    ):
        """
        Initialize RateLimitGovernor.

        Args:
            base_wait: Wait in seconds after a first throttling signal
                       (defaults to settings.RATE_LIMIT_BASE_WAIT_SECONDS)
            max_wait: Upper bound for any wait (defaults to settings.RATE_LIMIT_MAX_WAIT_SECONDS)
            poll_interval: Seconds between checks while waiting
                           (defaults to settings.RATE_LIMIT_POLL_SECONDS)
            throttle_statuses: HTTP statuses treated as throttling
            clock: Wall-clock source in seconds
            store: Optional RateLimitStore used to survive restarts
            on_status: Optional callback receiving a human-readable rate limit status

        Raises:
            ValueError: If a wait or the poll interval is not positive, or
                        max_wait is below base_wait
        """
        self.base_wait = _default(base_wait, settings.RATE_LIMIT_BASE_WAIT_SECONDS)
        self.max_wait = _default(max_wait, settings.RATE_LIMIT_MAX_WAIT_SECONDS)
        self.poll_interval = _default(poll_interval, settings.RATE_LIMIT_POLL_SECONDS)
        if self.base_wait <= 0 or self.poll_interval <= 0:
            raise ValueError("base_wait and poll_interval must be positive")
        if self.max_wait < self.base_wait:
            raise ValueError("max_wait cannot be smaller than base_wait")
        self.throttle_statuses = tuple(throttle_statuses or settings.THROTTLE_STATUS_CODES)
        self.clock = clock
        self.store = store
        self.on_status = on_status

        self.max_multiplier = self.max_wait / self.base_wait
        self.state = RateLimitState()
        self.throttle_count = 0

        if self.store is not None:
            snapshot = self.store.load()
            if snapshot:
                self.restore(snapshot)

        logger.info(
            f"RateLimitGovernor initialized: base_wait={self.base_wait}s, "
            f"max_wait={self.max_wait}s, poll_interval={self.poll_interval}s"
        )

    def observe(self, signal: ThrottleSignal) -> None:
        """
        Record a throttling signal or a successful response.

        Args:
            signal: ThrottleSignal.THROTTLED or ThrottleSignal.SUCCESS
        """
        if signal is ThrottleSignal.THROTTLED:
            self.state.active = True
            self.state.last_triggered_at = self.clock()
            self.state.wait = self.effective_wait()
            self.state.multiplier = min(self.state.multiplier * 2, self.max_multiplier)
            self.throttle_count += 1

            logger.warning(
                f"Rate limited, waiting {self.state.wait:.0f} seconds, "
                f"multiplier now: {self.state.multiplier:g}"
            )
            self._report(f"Active - {self.state.wait:.0f}s backoff")
            self._persist()
            return

        if self.state.multiplier > 1:
            self.state.multiplier = 1.0
            logger.info("Rate limit multiplier reset after successful response")
            self._persist()

    def observe_status(self, status: int) -> None:
        """
        Translate an HTTP status into a signal.

        Args:
            status: HTTP response status code
        """
        if status in self.throttle_statuses:
            logger.warning(f"RATE LIMIT detected ({status})")
            self.observe(ThrottleSignal.THROTTLED)
        else:
            self.observe(ThrottleSignal.SUCCESS)

    def effective_wait(self) -> float:
        """Wait applied to the next throttling signal: min(base * multiplier, max)."""
        return min(self.base_wait * self.state.multiplier, self.max_wait)

    def is_limited(self) -> bool:
        """
        Check whether the current backoff window is still open.

        Clears the active flag once the window has elapsed.
        """
        if not self.state.active:
            return False

        elapsed = self.clock() - self.state.last_triggered_at
        if elapsed >= self.state.wait:
            self.state.active = False
            logger.info(f"Rate limit window elapsed after {elapsed:.0f} seconds")
            self._persist()
            return False

        return True

    def remaining_wait(self) -> float:
        if not self.is_limited():
            return 0.0
        return max(0.0, self.state.wait - (self.clock() - self.state.last_triggered_at))

    def gate(self, token: CancellationToken) -> bool:
        """
        Suspend until no backoff is in effect.

        Args:
            token: Cancellation token of the run

        Returns:
            True if the caller may proceed, False if the run was cancelled
        """
        waited = False
        while self.is_limited():
            if token.cancelled:
                return False
            waited = True
            logger.info(f"Still rate limited, {self.remaining_wait():.0f}s remaining...")
            self._report("Active - waiting...")
            token.sleep(self.poll_interval)

        if waited:
            self._report("")

        return not token.cancelled

    def snapshot(self) -> dict:
        return asdict(self.state)

    def restore(self, snapshot: dict) -> bool:
        """
        Restore backoff state saved by a previous process.

        Only a still-open backoff window is restored.

        Returns:
            True if a backoff window was restored
        """
        try:
            restored = RateLimitState(
                active=bool(snapshot["active"]),
                last_triggered_at=float(snapshot["last_triggered_at"]),
                multiplier=max(1.0, min(float(snapshot["multiplier"]), self.max_multiplier)),
                wait=min(float(snapshot["wait"]), self.max_wait),
            )
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Ignoring invalid rate limit snapshot: {e}")
            return False

        if not restored.active:
            return False

        if self.clock() - restored.last_triggered_at >= restored.wait:
            logger.debug("Saved rate limit window already elapsed")
            return False

        self.state = restored
        logger.warning(
            f"Restored rate limit backoff: {self.remaining_wait():.0f}s remaining, "
            f"multiplier {restored.multiplier:g}"
        )
        return True

    def get_stats(self) -> dict:
        return {
            **self.snapshot(),
            "remaining_wait": self.remaining_wait(),
            "throttle_count": self.throttle_count,
            "base_wait": self.base_wait,
            "max_wait": self.max_wait,
        }

    def _persist(self) -> None:
        if self.store is not None:
            self.store.save(self.snapshot())

    def _report(self, status: str) -> None:
        if self.on_status is not None:
            self.on_status(status)


def _default(value: Optional[float], fallback: float) -> float:
    return fallback if value is None else value
