"""
Randomized pacing between actions.
"""
import random
from typing import Optional, Tuple

from comment_overkill.utils.cancellation import CancellationToken
from comment_overkill.utils.logging import get_logger

logger = get_logger(__name__)


def random_delay(bounds: Tuple[float, float], rng: Optional[random.Random] = None) -> float:
    """
    Draw a delay uniformly from a (low, high) range.

    Args:
        bounds: Inclusive (low, high) delay in seconds
        rng: Optional random source

    Returns:
        Delay in seconds (never negative)
    """
    low, high = bounds
    rng = rng or random
    return max(0.0, rng.uniform(low, high))


def pause(
    token: CancellationToken,
    bounds: Tuple[float, float],
    reason: str = "",
    rng: Optional[random.Random] = None,
) -> bool:
    """
    Suspend for a randomized delay, waking early on cancellation.

    Args:
        token: Cancellation token of the run
        bounds: Inclusive (low, high) delay in seconds
        reason: Optional text for the log line
        rng: Optional random source

    Returns:
        True if the run is still active afterwards
    """
    delay = random_delay(bounds, rng)
    if reason:
        logger.info(f"{reason}: pausing {delay:.1f} seconds")
    else:
        logger.debug(f"Pausing {delay:.2f} seconds")
    return token.sleep(delay)


def draw_pause_interval(bounds: Tuple[int, int], rng: Optional[random.Random] = None) -> int:
    """
    Draw the number of actions to perform before the next long pause.

    Args:
        bounds: Inclusive (low, high) action count

    Returns:
        Positive action count
    """
    low, high = bounds
    rng = rng or random
    return max(1, rng.randint(low, high))
