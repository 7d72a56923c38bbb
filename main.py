#!/usr/bin/env python3
"""
Comment Overkill - Main entry point.

Deletes a Reddit account's comments by cycling through every listing sort
until all of them are empty, keeping recent comments.
"""

import argparse
import signal
import sys
from datetime import timedelta
from pathlib import Path
from typing import List, Optional

# Add project root to path for imports
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

# Load environment variables
from dotenv import load_dotenv  # noqa: E402

load_dotenv()

from comment_overkill.auth.browser_manager import BrowserManager  # noqa: E402
from comment_overkill.config import settings  # noqa: E402
from comment_overkill.deletion.eligibility import EligibilityFilter, marker_predicate  # noqa: E402
from comment_overkill.deletion.executor import DeletionExecutor  # noqa: E402
from comment_overkill.safety.error_detector import ThrottleDetector  # noqa: E402
from comment_overkill.safety.rate_limiter import RateLimitGovernor  # noqa: E402
from comment_overkill.traversal.content_source import RedditContentSource  # noqa: E402
from comment_overkill.traversal.cycle_controller import PartitionCycleController  # noqa: E402
from comment_overkill.traversal.page_processor import PageProcessor  # noqa: E402
from comment_overkill.utils.cancellation import CancellationToken  # noqa: E402
from comment_overkill.utils.logging import setup_logging  # noqa: E402
from comment_overkill.utils.state_manager import RateLimitStore, StateManager  # noqa: E402
from comment_overkill.utils.statistics import StatisticsReporter  # noqa: E402

# Global variables for cleanup on interrupt
controller: Optional[PartitionCycleController] = None


def parse_sorts(value: str) -> List[str]:
    """
    Parse a comma-separated list of sorts.

    Raises:
        argparse.ArgumentTypeError: If a sort is unknown or repeated
    """
    sorts = [s.strip().lower() for s in value.split(",") if s.strip()]
    if not sorts:
        raise argparse.ArgumentTypeError("At least one sort is required")

    unknown = [s for s in sorts if s not in settings.SORTS]
    if unknown:
        raise argparse.ArgumentTypeError(
            f"Unknown sort(s): {', '.join(unknown)}. Choose from {', '.join(settings.SORTS)}"
        )
    if len(set(sorts)) != len(sorts):
        raise argparse.ArgumentTypeError(f"Duplicate sort in: {value}")

    # Keep the canonical processing order
    return [s for s in settings.SORTS if s in sorts]


def non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Not an integer: {value}")
    if number < 0:
        raise argparse.ArgumentTypeError("Value cannot be negative")
    return number


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        description="Delete all of your Reddit comments, cycling sorts until every listing is empty.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Start (or resume) a run, keeping comments from the last 10 days
  python main.py run

  # Keep the last 30 days, only walk the "new" and "top" listings
  python main.py run --preserve-days 30 --sorts new,top

  # Abandon the current run
  python main.py stop

  # Show saved progress and rate limit state
  python main.py status
        """,
    )

    parser.add_argument(
        "command",
        nargs="?",
        choices=["run", "stop", "status"],
        default="run",
        help="run (default): start or resume; stop: clear saved progress; status: show progress",
    )

    parser.add_argument(
        "--preserve-days",
        type=non_negative_int,
        default=settings.DAYS_TO_PRESERVE,
        help=f"Keep comments newer than this many days, 0 keeps none (default: {settings.DAYS_TO_PRESERVE})",
    )

    parser.add_argument(
        "--sorts",
        type=parse_sorts,
        default=list(settings.SORTS),
        help=f"Comma-separated sorts to cycle through (default: {','.join(settings.SORTS)})",
    )

    parser.add_argument(
        "--username",
        type=str,
        default=None,
        help="Reddit username (defaults to REDDIT_USERNAME, then the logged-in user)",
    )

    parser.add_argument(
        "--interface",
        choices=["old", "new"],
        default=settings.TARGET_INTERFACE,
        help=f"Reddit interface to drive (default: {settings.TARGET_INTERFACE})",
    )

    parser.add_argument(
        "--headless",
        action="store_true",
        default=settings.HEADLESS,
        help="Run the browser without a window",
    )

    parser.add_argument(
        "--yes",
        "-y",
        action="store_true",
        help="Do not ask for confirmation before starting a fresh run",
    )

    return parser.parse_args(argv)


def signal_handler(signum, frame):
    """Handle interrupt signals gracefully: cancel the run, keep the cursor."""
    if controller is None:
        raise KeyboardInterrupt
    controller.interrupt()


def confirm_fresh_start(preserve_days: int, sorts: List[str], assume_yes: bool = False) -> bool:
    """
    Ask the operator to confirm a destructive run.

    Returns:
        True if the run may start
    """
    if assume_yes:
        return True

    print("=" * 60)
    print("WARNING: this deletes your comments and cannot be undone.")
    if preserve_days:
        print(f"Comments from the last {preserve_days} days are kept.")
    else:
        print("No comments are kept.")
    print(f"Sorts: {', '.join(sorts)}")
    print("=" * 60)

    try:
        answer = input("Start deleting? [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


def run_overkill(args: argparse.Namespace) -> int:
    """
    Start or resume a run.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    global controller

    logger = setup_logging()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    state_manager = StateManager(settings.PROGRESS_PATH, default_partitions=settings.SORTS)
    saved_state = state_manager.load_state()
    resuming = saved_state is not None and saved_state.running

    if resuming:
        preserve_window = saved_state.preserve_window
        sorts = saved_state.partitions
        if preserve_window != timedelta(days=args.preserve_days):
            logger.warning(
                f"Resuming with the saved preserve window ({preserve_window.days} days); "
                "run 'stop' first to change it"
            )
    else:
        preserve_window = timedelta(days=args.preserve_days)
        sorts = args.sorts
        if not confirm_fresh_start(args.preserve_days, sorts, args.yes):
            logger.info("Run cancelled by user")
            return 0

    logger.info("=" * 60)
    logger.info("Comment Overkill - Automated Comment Deletion")
    logger.info("=" * 60)
    logger.info(f"Mode: {'resume' if resuming else 'fresh start'}")
    logger.info(f"Preserve: {preserve_window.days} days")
    logger.info(f"Sorts: {', '.join(sorts)}")
    logger.info(f"Interface: {args.interface}")
    logger.info("=" * 60)

    stats_reporter = StatisticsReporter()
    token = CancellationToken()
    governor = RateLimitGovernor(
        store=RateLimitStore(settings.RATE_LIMIT_PATH),
        on_status=lambda status: stats_reporter.update_status("rate_limit", status),
    )
    throttle_detector = ThrottleDetector(governor)
    browser_manager = BrowserManager()
    page = None

    try:
        logger.info("Creating authenticated browser session...")
        browser, context, page = browser_manager.create_authenticated_browser(
            headless=args.headless, validate_session=True
        )
        throttle_detector.attach(page)

        username = args.username or settings.REDDIT_USERNAME or browser_manager.username
        if not username:
            logger.error("Reddit username unknown. Pass --username or set REDDIT_USERNAME in .env.")
            return 1

        predicates = []
        if settings.PROTECT_MARKERS:
            predicates.append(marker_predicate(settings.PROTECT_MARKERS))
            logger.info(f"Protect markers: {', '.join(settings.PROTECT_MARKERS)}")

        content_source = RedditContentSource(page, username, interface=args.interface, token=token)
        executor = DeletionExecutor(
            page, governor, token, throttle_detector=throttle_detector
        )
        page_processor = PageProcessor(
            content_source,
            EligibilityFilter(preserve_window, predicates=predicates),
            executor,
            governor,
            token,
        )
        controller = PartitionCycleController(
            content_source,
            page_processor,
            governor,
            state_manager,
            token,
            statistics=stats_reporter,
        )

        if resuming:
            controller.resume()
        else:
            controller.start(preserve_window, sorts)

        outcome = controller.run()

        logger.info("\n" + "=" * 60)
        stats_reporter.print_summary()

        if outcome == "interrupted":
            logger.info("Progress saved. Run again to resume, or run 'stop' to abandon.")
        else:
            logger.info(f"Run finished: {outcome}")

        return 0

    except FileNotFoundError as e:
        logger.error("=" * 60)
        logger.error("ERROR: Cookie file not found")
        logger.error("=" * 60)
        logger.error(str(e))
        logger.error("")
        logger.error("Please:")
        logger.error("  1. Log into Reddit in your browser")
        logger.error(f"  2. Export cookies to {settings.REDDIT_COOKIES_PATH}")
        logger.error("  3. See README.md for detailed instructions")
        return 1

    except ValueError as e:
        logger.error("=" * 60)
        logger.error("ERROR: Cookie or session validation failed")
        logger.error("=" * 60)
        logger.error(str(e))
        logger.error("")
        logger.error("Please re-export your Reddit cookies.")
        return 1

    except RuntimeError as e:
        logger.error("=" * 60)
        logger.error("ERROR: Browser could not be started")
        logger.error("=" * 60)
        logger.error(str(e))
        logger.error("")
        logger.error("Make sure browsers are installed: playwright install chromium")
        return 1

    except Exception as e:
        logger.error("=" * 60)
        logger.error("ERROR: Unexpected error")
        logger.error("=" * 60)
        logger.error(f"Error: {e}", exc_info=True)
        return 1

    finally:
        if page is not None:
            throttle_detector.detach(page)
        browser_manager.cleanup()
        logger.info("Browser session closed")
        controller = None


def stop_run() -> int:
    """
    Abandon the saved run.

    A process still running notices the cleared cursor before its next delete attempt.

    Returns:
        Exit code
    """
    logger = setup_logging()
    state_manager = StateManager(settings.PROGRESS_PATH, default_partitions=settings.SORTS)

    if state_manager.load_cursor() is None:
        logger.info("Nothing is running")
        return 0

    state_manager.clear_state()
    logger.info("Run stopped, saved progress cleared")
    return 0


def show_status() -> int:
    """
    Print saved progress and rate limit state.

    Returns:
        Exit code
    """
    logger = setup_logging()
    state_manager = StateManager(settings.PROGRESS_PATH, default_partitions=settings.SORTS)
    state = state_manager.load_state()

    if state is None:
        logger.info("Status: Idle (no saved progress)")
    else:
        completed = [p for p in state.partitions if p in state.completed_partitions]
        logger.info(f"Status: {'Running' if state.running else 'Stopped'}")
        logger.info(f"Current Sort: {state.current_partition or '-'}")
        logger.info(f"Sort Progress: {len(completed)}/{len(state.partitions)}")
        logger.info(f"Completed Sorts: {', '.join(completed) or 'none'}")
        logger.info(f"Preserve Window: {state.preserve_window.days} days")

    governor = RateLimitGovernor(store=RateLimitStore(settings.RATE_LIMIT_PATH))
    remaining = governor.remaining_wait()
    if remaining > 0:
        logger.info(f"Rate Limit Status: Active - {remaining:.0f}s remaining")
    else:
        logger.info("Rate Limit Status: inactive")

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for Comment Overkill.

    Parses command-line arguments and dispatches the command.
    """
    try:
        args = parse_arguments(argv)
        if args.command == "stop":
            return stop_run()
        if args.command == "status":
            return show_status()
        return run_overkill(args)
    except KeyboardInterrupt:
        logger = setup_logging()
        logger.warning("\nInterrupted by user")
        return 0


if __name__ == "__main__":
    sys.exit(main())
