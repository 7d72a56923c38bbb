"""
Stealth and pacing modules.
"""
from comment_overkill.stealth.behavior import draw_pause_interval, pause, random_delay
from comment_overkill.stealth.fingerprint import (
    apply_stealth_patches,
    create_stealth_context,
    get_browser_args,
    get_context_options,
)

__all__ = [
    "create_stealth_context",
    "apply_stealth_patches",
    "get_browser_args",
    "get_context_options",
    "random_delay",
    "pause",
    "draw_pause_interval",
]
