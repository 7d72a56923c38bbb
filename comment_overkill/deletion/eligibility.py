"""
Eligibility filter deciding which candidates are protected from deletion.
"""
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from comment_overkill.deletion.date_parser import DateParser
from comment_overkill.models import Candidate
from comment_overkill.utils.logging import get_logger

logger = get_logger(__name__)

# A predicate returns True when the candidate must be kept
ProtectionPredicate = Callable[[Candidate], bool]


def marker_predicate(markers: Sequence[str]) -> ProtectionPredicate:
    """
    Build a predicate protecting comments whose body contains a marker.

    Args:
        markers: Case-insensitive marker strings, e.g. ["[keep]"]
    """
    lowered = [m.lower() for m in markers if m]

    def is_marked(candidate: Candidate) -> bool:
        body = (candidate.body or "").lower()
        return any(marker in body for marker in lowered)

    return is_marked


class EligibilityFilter:
    """Age-based protection plus optional content predicates.

    A candidate whose timestamp is missing or unparseable is always protected.
    """

    def __init__(
        self,
        preserve_window: timedelta,
        predicates: Optional[Iterable[ProtectionPredicate]] = None,
        date_parser: Optional[DateParser] = None,
    ):
        """
        Initialize EligibilityFilter.

        Args:
            preserve_window: Items newer than now - preserve_window are kept;
                             timedelta(0) disables age protection
            predicates: Additional protection predicates
            date_parser: Optional DateParser instance
        """
        if preserve_window < timedelta(0):
            raise ValueError("preserve_window cannot be negative")

        self.preserve_window = preserve_window
        self.predicates: List[ProtectionPredicate] = list(predicates or [])
        self.date_parser = date_parser or DateParser()

    def is_protected(self, candidate: Candidate, now: Optional[datetime] = None) -> bool:
        """
        Decide whether a candidate must be kept.

        Args:
            candidate: Candidate to evaluate
            now: Reference time (defaults to now, UTC)

        Returns:
            True if the candidate must not be deleted
        """
        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)

        created_at = self.date_parser.parse_timestamp(candidate.timestamp, reference_date=now)
        if created_at is None:
            logger.debug(f"Protecting {candidate.item_id or 'item'}: timestamp unknown")
            return True

        if self.preserve_window > timedelta(0) and created_at > now - self.preserve_window:
            logger.debug(f"Protecting {candidate.item_id or 'item'}: created {created_at}")
            return True

        for predicate in self.predicates:
            try:
                if predicate(candidate):
                    logger.debug(f"Protecting {candidate.item_id or 'item'}: matched predicate")
                    return True
            except Exception as e:
                logger.warning(f"Protection predicate failed, keeping item: {e}")
                return True

        return False

    def split(
        self, candidates: Sequence[Candidate], now: Optional[datetime] = None
    ) -> Tuple[List[Candidate], List[Candidate]]:
        """
        Split candidates into (eligible, protected), preserving listing order.
        """
        now = now or datetime.now(timezone.utc)
        eligible: List[Candidate] = []
        protected: List[Candidate] = []
        for candidate in candidates:
            if self.is_protected(candidate, now):
                protected.append(candidate)
            else:
                eligible.append(candidate)
        return eligible, protected
