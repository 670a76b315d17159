"""Deduplication of listings against a search's seen set."""

import logging
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from ..models.listing import Listing, SeenEntry, SeenSet

logger = logging.getLogger(__name__)


class DeduplicationService:
    """
    Track which listings a search has already reported.

    The seen set belongs to the caller (the state store keeps one per
    search). Methods never mutate the mapping they are given; they return
    an updated copy for the caller to persist.

    Features:
    - Fresh/seen split of a result batch
    - First-seen timestamp and URL per listing id
    - Optional age-based pruning (off unless a retention horizon is configured)
    """

    def __init__(self, retention_days: Optional[int] = None):
        self.retention_days = retention_days

    def compute_fresh(
        self,
        seen: SeenSet,
        listings: Iterable[Listing],
        now: Optional[datetime] = None,
    ) -> Tuple[List[Listing], SeenSet]:
        """
        Split out the listings this search has not reported yet.

        Args:
            seen: Listing id -> SeenEntry from previous cycles
            listings: Filtered listings of the current cycle
            now: Timestamp recorded for new entries (defaults to utcnow)

        Returns:
            (fresh listings in input order, updated seen set)
        """
        now = now or datetime.utcnow()
        updated: SeenSet = dict(seen)
        fresh = []

        for listing in listings:
            if listing.id in updated:
                continue
            updated[listing.id] = SeenEntry(first_seen_at=now, url=listing.url)
            fresh.append(listing)

        logger.info(f"{len(fresh)} fresh listings, {len(updated)} tracked in total")
        return fresh, updated

    def prune(self, seen: SeenSet, days: Optional[int] = None, now: Optional[datetime] = None) -> SeenSet:
        """
        Drop entries first seen more than ``days`` ago.

        Args:
            seen: Seen set to prune
            days: Retention horizon, defaults to retention_days. None keeps everything.
            now: Reference time (defaults to utcnow)

        Returns:
            Pruned copy of the seen set
        """
        days = days if days is not None else self.retention_days
        if days is None:
            return dict(seen)

        cutoff = (now or datetime.utcnow()) - timedelta(days=days)
        kept = {listing_id: entry for listing_id, entry in seen.items() if entry.first_seen_at >= cutoff}

        removed = len(seen) - len(kept)
        if removed > 0:
            logger.info(f"Pruned {removed} seen listings older than {days} days")
        return kept

    @staticmethod
    def get_stats(seen_sets: Dict[str, SeenSet]) -> dict:
        """Get statistics about tracked listings per search."""
        by_search = {search_id: len(seen) for search_id, seen in seen_sets.items()}
        return {
            "total_tracked": sum(by_search.values()),
            "by_search": by_search,
        }
