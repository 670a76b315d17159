"""Base class for housing providers."""

import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..models.listing import Criteria, Listing
from ..services.extraction import DEFAULT_CITY, BaseExtractor, CardExtractor
from ..services.fetcher import HttpFetcher
from ..services.resolver import CandidateResolver


class BaseProvider(ABC):
    """
    Abstract base class for all housing providers.

    Each provider must implement:
    - build_candidates(): Ordered URLs where its listings might be found

    and usually sets ``display_name``, ``link_pattern`` and ``fallback``.
    The default fetch_listings() runs the candidate URLs through a
    CandidateResolver using the provider's extractor.

    Subclasses use the @register_provider decorator, which also sets
    ``provider_id``.
    """

    provider_id: str = ""
    display_name: str = ""
    link_pattern: re.Pattern = re.compile(r"wohnung|angebot|miete", re.IGNORECASE)
    fallback: Optional[str] = None

    # Meta providers produce synthetic records that skip the district check
    is_meta: bool = False

    def __init__(self, config: Optional[Dict[str, Any]] = None, city: str = DEFAULT_CITY):
        """
        Initialize provider with configuration.

        Args:
            config: Provider section from config.yaml (enabled, candidates, fallback)
            city: City used for locations and search links
        """
        self.config = config or {}
        self.city = city
        self.enabled: bool = bool(self.config.get("enabled", True))
        self.extractor: BaseExtractor = CardExtractor(city)

    @abstractmethod
    def build_candidates(self, criteria: Criteria) -> List[str]:
        """
        Build the candidate URLs for this provider, most likely first.

        Args:
            criteria: Search criteria, for providers that filter server-side

        Returns:
            Ordered list of URLs
        """
        pass

    def _configured_candidates(self, defaults: List[str]) -> List[str]:
        """Candidate URLs from config, falling back to the built-in ones."""
        return list(self.config.get("candidates") or defaults)

    def fallback_url(self, criteria: Criteria) -> Optional[str]:
        """Link used when no candidate yields listings."""
        return self.config.get("fallback", self.fallback)

    def fetch_listings(self, criteria: Criteria, fetcher: HttpFetcher) -> List[Listing]:
        """Fetch and extract this provider's current listings."""
        resolver = CandidateResolver(fetcher, self.extractor, self.city)
        return resolver.resolve(
            self.display_name,
            self.build_candidates(criteria),
            self.link_pattern,
            criteria,
            self.fallback_url(criteria),
            self.provider_id,
        )

    def is_available(self) -> bool:
        """True if the provider is enabled in the configuration."""
        return self.enabled

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.provider_id}, enabled={self.enabled})"
