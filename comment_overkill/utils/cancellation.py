"""
Cancellation token shared by every suspension point of a run.
"""
import threading

from comment_overkill.utils.logging import get_logger

logger = get_logger(__name__)


class CancellationToken:
    """Cooperative cancellation for the single controller task.

    All waits go through sleep(), which returns as soon as cancel() is called
    from a signal handler or the control surface.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        if not self._event.is_set():
            logger.debug("Cancellation requested")
        self._event.set()

    def sleep(self, seconds: float) -> bool:
        """
        Suspend for up to `seconds`.

        Args:
            seconds: Time to wait

        Returns:
            True if the run is still active afterwards, False if cancelled
        """
        if seconds > 0:
            self._event.wait(seconds)
        return not self._event.is_set()
