"""Trying a provider's candidate URLs in order, with a fallback link."""

import logging
import re
from typing import List, Optional, Sequence

from ..models.listing import Criteria, Listing
from .extraction import DEFAULT_CITY, BaseExtractor, CardExtractor
from .fetcher import HttpFetcher

logger = logging.getLogger(__name__)


def fallback_location(criteria: Optional[Criteria], city: str = DEFAULT_CITY) -> str:
    """Location text for synthetic records: the wanted districts or the city."""
    if criteria and criteria.bezirke:
        return ", ".join(criteria.bezirke)
    return city


def make_fallback_listing(
    provider_name: str,
    url: str,
    criteria: Optional[Criteria],
    provider_id: str = "",
    city: str = DEFAULT_CITY,
) -> Listing:
    """A link-only record sending the user to the provider's own search page."""
    return Listing(
        id=url,
        url=url,
        title=f"Zur Suche bei {provider_name} öffnen",
        provider=provider_name,
        provider_id=provider_id,
        location=fallback_location(criteria, city),
    )


class CandidateResolver:
    """
    Resolve a provider's listings from an ordered list of candidate URLs.

    Provider sites move their listing pages around, so each provider knows
    several places its offers might live. The first URL that fetches and
    yields at least one listing wins. When none does, a single fallback
    record linking to the provider's search is returned instead, so the
    user still gets something to click.
    """

    def __init__(self, fetcher: HttpFetcher, extractor: Optional[BaseExtractor] = None, city: str = DEFAULT_CITY):
        self.fetcher = fetcher
        self.extractor = extractor or CardExtractor(city)
        self.city = city

    def resolve(
        self,
        provider_name: str,
        candidates: Sequence[str],
        link_pattern: re.Pattern,
        criteria: Optional[Criteria],
        fallback_url: Optional[str],
        provider_id: str = "",
    ) -> List[Listing]:
        """
        Try each candidate URL until one yields listings.

        Args:
            provider_name: Display name for the records
            candidates: Candidate URLs, most likely first
            link_pattern: Regex separating listing links from navigation
            criteria: Search criteria, used for the fallback record's location
            fallback_url: Link for the fallback record, None to disable it
            provider_id: Registry key for the records

        Returns:
            Extracted listings, a single fallback record, or an empty list
        """
        for url in candidates:
            result = self.fetcher.fetch(url)
            if not result.success:
                continue

            listings = self.extractor.extract(result.body, url, provider_name, link_pattern, provider_id)
            if listings:
                logger.info(f"{provider_name}: {len(listings)} listings from {url}")
                return listings

            logger.debug(f"{provider_name}: no listings found on {url}")

        if fallback_url:
            logger.info(f"{provider_name}: no candidate yielded listings, using fallback link")
            return [make_fallback_listing(provider_name, fallback_url, criteria, provider_id, self.city)]

        logger.info(f"{provider_name}: no listings and no fallback configured")
        return []
