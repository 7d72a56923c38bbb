"""
Configuration constants for Comment Overkill.
"""
import os
from pathlib import Path

# Base directory (project root)
BASE_DIR = Path(__file__).parent.parent.parent

# Partitions (sort orders), processed in this order
SORTS = ["new", "hot", "top", "controversial"]

# Eligibility
DAYS_TO_PRESERVE = 10  # Keep comments from the last N days
PROTECT_MARKERS = [
    marker.strip()
    for marker in os.getenv("OVERKILL_PROTECT_MARKERS", "").split(",")
    if marker.strip()
]

# Rate limiting (reactive)
RATE_LIMIT_BASE_WAIT_SECONDS = 60.0
RATE_LIMIT_MAX_WAIT_SECONDS = 1800.0
RATE_LIMIT_POLL_SECONDS = 5.0
THROTTLE_STATUS_CODES = (429,)

# Pacing (proactive)
CONFIRM_DELAY_SECONDS = 0.3
DELETE_PACING_SECONDS = 2.0
RETRY_COOLDOWN_SECONDS = (5.0, 30.0)
LONG_PAUSE_EVERY = (10, 20)  # Deletions between long pauses
LONG_PAUSE_SECONDS = (10.0, 15.0)

# Page and partition handling
WAIT_FOR_ITEMS_SECONDS = 8.0
ITEM_POLL_SECONDS = 1.0
LOAD_MORE_SETTLE_SECONDS = 3.0
PAGE_INTERVAL_SECONDS = 3.0
PARTITION_INTERVAL_SECONDS = 5.0
NAVIGATION_DELAY_SECONDS = 30.0
POST_NAVIGATION_DELAY_SECONDS = 5.0
ERROR_COOLDOWN_SECONDS = 10.0

# Interface
TARGET_INTERFACE = os.getenv("OVERKILL_INTERFACE", "old")  # "old" or "new"
OLD_REDDIT_BASE = "https://old.reddit.com"
NEW_REDDIT_BASE = "https://www.reddit.com"
USER_AGENT = "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"

# Paths (relative to BASE_DIR)
DATA_DIR = Path(os.getenv("OVERKILL_DATA_DIR", str(BASE_DIR / "data")))
COOKIES_PATH = DATA_DIR / "cookies.json"
PROGRESS_PATH = DATA_DIR / "progress.json"
RATE_LIMIT_PATH = DATA_DIR / "rate_limit.json"
LOG_DIR = DATA_DIR / "logs"

# Environment Variables (with defaults)
REDDIT_USERNAME = os.getenv("REDDIT_USERNAME", "")
REDDIT_COOKIES_PATH = os.getenv("REDDIT_COOKIES_PATH", str(COOKIES_PATH))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
HEADLESS = os.getenv("HEADLESS", "false").lower() == "true"

# Ensure data directories exist
LOG_DIR.mkdir(parents=True, exist_ok=True)
COOKIES_PATH.parent.mkdir(parents=True, exist_ok=True)
PROGRESS_PATH.parent.mkdir(parents=True, exist_ok=True)
