"""Criteria filtering of aggregated listings."""

import logging
from typing import Iterable, List, Optional, Sequence

from ..models.listing import Criteria, Listing

logger = logging.getLogger(__name__)


def matches_district(text: Optional[str], wanted: Optional[Sequence[str]]) -> bool:
    """
    Check whether the text mentions any wanted district.

    Plain case-insensitive substring containment, so "Pankow" also
    matches "Prenzlauer Berg (Pankow)". No districts means no constraint.
    """
    if not wanted:
        return True
    haystack = (text or "").lower()
    return any(district.lower() in haystack for district in wanted)


def _within_bounds(listing: Listing, criteria: Criteria) -> bool:
    if listing.rooms is not None:
        if criteria.zimmer_min is not None and listing.rooms < criteria.zimmer_min:
            return False
        if criteria.zimmer_max is not None and listing.rooms > criteria.zimmer_max:
            return False
    if listing.size is not None and criteria.flaeche_min is not None:
        if listing.size < criteria.flaeche_min:
            return False
    if listing.price is not None and criteria.preis_max is not None:
        if listing.price > criteria.preis_max:
            return False
    return True


def filter_listings(
    listings: Iterable[Listing],
    criteria: Criteria,
    district_exempt: Iterable[str] = (),
) -> List[Listing]:
    """
    Apply the numeric bounds and the district constraint.

    Only values that were actually extracted are checked; a listing with
    unknown price is never rejected for its price.

    Args:
        listings: Listings from all providers
        criteria: Search criteria
        district_exempt: Provider ids whose records skip the district check
            (meta providers that already encode the districts in their link)

    Returns:
        Listings that satisfy the criteria, in input order
    """
    exempt = set(district_exempt)
    kept = []

    for listing in listings:
        if not _within_bounds(listing, criteria):
            continue

        if criteria.bezirke and listing.provider_id not in exempt:
            haystack = f"{listing.location or ''} {listing.title or ''}".strip()
            if not haystack or not matches_district(haystack, criteria.bezirke):
                continue

        kept.append(listing)

    logger.debug(f"Criteria filter kept {len(kept)} listings")
    return kept
