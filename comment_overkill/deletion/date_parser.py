"""
Date parser for Reddit comment timestamps.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Optional, cast

import dateparser  # type: ignore[import-untyped]

from comment_overkill.utils.logging import get_logger

logger = get_logger(__name__)

# old reddit <time title="..."> format
REDDIT_TITLE_FORMAT = "%a %b %d %H:%M:%S %Y UTC"

RELATIVE_UNITS = {
    "s": timedelta(seconds=1),
    "sec": timedelta(seconds=1),
    "second": timedelta(seconds=1),
    "m": timedelta(minutes=1),
    "min": timedelta(minutes=1),
    "minute": timedelta(minutes=1),
    "h": timedelta(hours=1),
    "hr": timedelta(hours=1),
    "hour": timedelta(hours=1),
    "d": timedelta(days=1),
    "day": timedelta(days=1),
    "w": timedelta(weeks=1),
    "wk": timedelta(weeks=1),
    "week": timedelta(weeks=1),
    "mo": timedelta(days=30),  # Approximate
    "month": timedelta(days=30),
    "y": timedelta(days=365),  # Approximate
    "yr": timedelta(days=365),
    "year": timedelta(days=365),
}

RELATIVE_PATTERN = re.compile(
    r"^(\d+)\s*(mo|months?|y|yrs?|years?|w|wks?|weeks?|d|days?|h|hrs?|hours?|"
    r"m|mins?|minutes?|s|secs?|seconds?)(\s+ago)?$"
)


class DateParser:
    """Parses comment timestamps into timezone-aware UTC datetimes."""

    def parse_timestamp(
        self, value: Optional[str], reference_date: Optional[datetime] = None
    ) -> Optional[datetime]:
        """
        Parse a timestamp string.

        Args:
            value: ISO-8601 string, epoch seconds/milliseconds, old reddit title
                   text or a relative string ("3 days ago", "5mo")
            reference_date: Reference for relative strings (defaults to now, UTC)

        Returns:
            Aware UTC datetime, or None if the value cannot be parsed
        """
        if value is None or not str(value).strip():
            logger.debug("Empty timestamp provided")
            return None

        value = str(value).strip()

        if reference_date is None:
            reference_date = datetime.now(timezone.utc)
        reference_date = self._as_utc(reference_date)

        for parse in (self._parse_epoch, self._parse_iso, self._parse_reddit_title):
            parsed = parse(value)
            if parsed is not None:
                return parsed

        parsed = self._parse_relative(value, reference_date)
        if parsed is not None:
            return parsed

        # Fallback to dateparser library
        try:
            parsed = dateparser.parse(
                value,
                settings={
                    "RELATIVE_BASE": reference_date.replace(tzinfo=None),
                    "TIMEZONE": "UTC",
                    "RETURN_AS_TIMEZONE_AWARE": True,
                    "PREFER_DATES_FROM": "past",
                },
            )
            if parsed:
                logger.debug(f"Parsed '{value}' as {parsed}")
                return self._as_utc(cast(datetime, parsed))
        except Exception as e:
            logger.debug(f"dateparser failed for '{value}': {e}")

        logger.warning(f"Could not parse timestamp: '{value}'")
        return None

    def _parse_iso(self, value: str) -> Optional[datetime]:
        candidate = value[:-1] + "+00:00" if value.endswith("Z") else value
        try:
            return self._as_utc(datetime.fromisoformat(candidate))
        except ValueError:
            return None

    def _parse_epoch(self, value: str) -> Optional[datetime]:
        if not re.fullmatch(r"\d{9,13}(\.\d+)?", value):
            return None
        seconds = float(value)
        if seconds > 1e11:  # Milliseconds
            seconds /= 1000
        try:
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    def _parse_reddit_title(self, value: str) -> Optional[datetime]:
        try:
            return datetime.strptime(value, REDDIT_TITLE_FORMAT).replace(tzinfo=timezone.utc)
        except ValueError:
            return None

    def _parse_relative(self, value: str, reference_date: datetime) -> Optional[datetime]:
        """
        Parse relative dates like "3 days ago", "5mo", "just now".

        Args:
            value: Timestamp string
            reference_date: Aware reference datetime

        Returns:
            Parsed datetime or None
        """
        lowered = value.lower()

        if lowered in ("just now", "now"):
            return reference_date

        match = RELATIVE_PATTERN.match(lowered)
        if not match:
            return None

        amount = int(match.group(1))
        unit = match.group(2)
        if unit not in RELATIVE_UNITS:
            unit = unit.rstrip("s")
        delta = RELATIVE_UNITS.get(unit)
        if delta is None:
            return None

        parsed = reference_date - amount * delta
        logger.debug(f"Parsed relative timestamp '{value}' as {parsed}")
        return parsed

    @staticmethod
    def _as_utc(value: datetime) -> datetime:
        # Naive datetimes are taken as UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
