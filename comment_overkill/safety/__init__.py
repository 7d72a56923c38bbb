"""
Safety modules: rate limit governor and throttle detection.
"""

from comment_overkill.safety.error_detector import ThrottleDetector
from comment_overkill.safety.rate_limiter import RateLimitGovernor, RateLimitState, ThrottleSignal

__all__ = ["RateLimitGovernor", "RateLimitState", "ThrottleSignal", "ThrottleDetector"]
