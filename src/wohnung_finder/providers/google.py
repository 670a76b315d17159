"""Google site-search meta provider."""

from typing import List, Optional
from urllib.parse import quote

from ..models.listing import Criteria, Listing
from ..services.fetcher import HttpFetcher
from ..services.resolver import fallback_location
from . import register_provider
from .base import BaseProvider

DEFAULT_SITES = [
    "vonovia.de",
    "gewobag.de",
    "degewo.de",
    "deutsche-wohnen.com",
    "stadtundland.de",
    "berlinovo.de",
]


@register_provider("google")
class GoogleFallbackProvider(BaseProvider):
    """
    Always-available meta provider.

    Never fetches anything. It returns one record linking to a Google
    search restricted to the housing companies' domains and the wanted
    districts, so a search always has at least one usable result even
    when every scraper comes back empty.
    """

    display_name = "Google Fallback"
    is_meta = True

    def build_candidates(self, criteria: Criteria) -> List[str]:
        return [self.search_url(criteria)]

    def fallback_url(self, criteria: Criteria) -> Optional[str]:
        return self.search_url(criteria)

    def search_url(self, criteria: Optional[Criteria]) -> str:
        sites = self.config.get("sites") or DEFAULT_SITES
        terms = [self.city]
        if criteria:
            terms.extend(criteria.bezirke)
        terms.extend(f"site:{site}" for site in sites)
        return "https://www.google.com/search?q=" + quote(" ".join(terms), safe="")

    def fetch_listings(self, criteria: Criteria, fetcher: HttpFetcher) -> List[Listing]:
        url = self.search_url(criteria)
        return [
            Listing(
                id=url,
                url=url,
                title="Sammelsuche in allen Gesellschaften (Google)",
                provider="Google",
                provider_id=self.provider_id,
                location=fallback_location(criteria, self.city),
            )
        ]
