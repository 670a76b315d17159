"""Poll cycle for a single search: fetch -> filter -> dedupe -> notify."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Mapping, Optional, Tuple

from ..models.listing import Listing, PollResult, Search, SeenSet
from ..providers.base import BaseProvider
from .deduplication import DeduplicationService
from .email_sender import EmailService
from .fetcher import HttpFetcher
from .filtering import filter_listings

logger = logging.getLogger(__name__)


class SearchPoller:
    """
    Run one poll cycle for a search.

    Coordinates: provider fetching (concurrently, bounded) -> criteria
                 filter -> deduplication -> email notification

    Holds no state between cycles; the seen set goes in and the updated
    one comes back in the PollResult.
    """

    def __init__(
        self,
        registry: Mapping[str, BaseProvider],
        fetcher: Optional[HttpFetcher] = None,
        dedup_service: Optional[DeduplicationService] = None,
        notifier: Optional[EmailService] = None,
        max_workers: int = 4,
    ):
        self.registry = registry
        self.fetcher = fetcher or HttpFetcher()
        self.dedup_service = dedup_service or DeduplicationService()
        self.notifier = notifier
        self.max_workers = max_workers

    @property
    def meta_provider_ids(self) -> List[str]:
        return [provider_id for provider_id, provider in self.registry.items() if provider.is_meta]

    def _enabled_providers(self, search: Search) -> List[str]:
        provider_ids = []
        for provider_id in search.providers:
            provider = self.registry.get(provider_id)
            if provider is None:
                logger.warning(f"Unknown provider {provider_id} in search {search.id}")
                continue
            if not provider.is_available():
                logger.debug(f"Provider {provider_id} is disabled, skipping")
                continue
            provider_ids.append(provider_id)
        return provider_ids

    def fetch_all(self, search: Search) -> Tuple[List[Listing], Dict[str, str]]:
        """
        Fetch listings from every enabled provider of the search.

        A failing provider is logged and contributes nothing; the others
        still count. Results are concatenated in the search's provider order.

        Returns:
            (listings tagged with their provider id, provider id -> error message)
        """
        provider_ids = self._enabled_providers(search)
        if not provider_ids:
            return [], {}

        results: Dict[str, List[Listing]] = {}
        errors: Dict[str, str] = {}

        workers = max(1, min(self.max_workers, len(provider_ids)))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="provider") as pool:
            futures = {
                provider_id: pool.submit(self.registry[provider_id].fetch_listings, search.criteria, self.fetcher)
                for provider_id in provider_ids
            }

            for provider_id, future in futures.items():
                try:
                    results[provider_id] = future.result()
                except Exception as e:
                    logger.error(f"Provider {provider_id} failed for search {search.id}: {e}")
                    errors[provider_id] = str(e)

        listings = []
        for provider_id in provider_ids:
            for listing in results.get(provider_id, []):
                listing.provider_id = provider_id
                listings.append(listing)

        return listings, errors

    def run(self, search: Search, seen: SeenSet) -> PollResult:
        """
        Execute one poll cycle.

        Args:
            search: The search to run
            seen: Listing ids already reported for this search

        Returns:
            PollResult with the filtered listings, the fresh ones and the
            updated seen set
        """
        logger.info(f"Polling search {search.id} ({len(search.providers)} providers)")

        listings, errors = self.fetch_all(search)
        filtered = filter_listings(listings, search.criteria, district_exempt=self.meta_provider_ids)
        fresh, updated_seen = self.dedup_service.compute_fresh(seen, filtered)

        result = PollResult(all=filtered, new=fresh, seen=updated_seen, errors=errors)

        if fresh and search.email and self.notifier and self.notifier.is_configured():
            # Seen set is already updated: a failed email is not retried
            try:
                result.notified = self.notifier.notify(search.email, fresh)
            except Exception as e:
                logger.error(f"Notification for search {search.id} failed: {e}")

        logger.info(
            f"Search {search.id}: {len(listings)} fetched, "
            f"{len(filtered)} matching, {len(fresh)} new"
        )
        return result
