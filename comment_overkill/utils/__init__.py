"""
Utility modules: logging, state management, cancellation, statistics.
"""
from comment_overkill.utils.cancellation import CancellationToken
from comment_overkill.utils.logging import get_logger, setup_logging
from comment_overkill.utils.state_manager import RateLimitStore, StateManager
from comment_overkill.utils.statistics import StatisticsReporter

__all__ = [
    "setup_logging",
    "get_logger",
    "CancellationToken",
    "StateManager",
    "RateLimitStore",
    "StatisticsReporter",
]
