"""Turning provider markup into Listing records."""

import logging
import re
from abc import ABC, abstractmethod
from typing import List, Optional
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from ..models.listing import Listing
from .normalizer import collapse_whitespace, normalize_fields

logger = logging.getLogger(__name__)

DEFAULT_CITY = "Berlin"
DEFAULT_TITLE = "Angebot"


class BaseExtractor(ABC):
    """
    Extraction strategy for one kind of provider page.

    Providers hold an extractor instance, so a site whose markup needs
    special handling can swap in its own strategy.
    """

    @abstractmethod
    def extract(
        self,
        markup: str,
        source_url: str,
        provider_name: str,
        link_pattern: re.Pattern,
        provider_id: str = "",
    ) -> List[Listing]:
        """
        Parse markup into listings.

        Args:
            markup: Page HTML
            source_url: URL the page was fetched from, base for relative links
            provider_name: Display name stored on each listing
            link_pattern: Regex an href must match to count as a listing link
            provider_id: Registry key stored on each listing

        Returns:
            List of Listing objects, possibly empty
        """
        pass


def resolve_link(base_url: str, href: str) -> Optional[str]:
    """Make href absolute against base_url, None if it is not a web link."""
    try:
        url = href if href.startswith("http") else urljoin(base_url, href)
        scheme = urlparse(url).scheme
    except ValueError:
        return None
    if scheme not in ("http", "https"):
        return None
    return url


class CardExtractor(BaseExtractor):
    """
    Generic extractor for listing pages built from "cards".

    Every element matching any of CARD_SELECTORS is a candidate. Its first
    link must match the provider's link pattern; price, rooms and area are
    read from the card's whole text.
    """

    CARD_SELECTORS = [
        "article",
        ".teaser",
        ".card",
        ".listing",
        ".listing-item",
        ".c-results__item",
        ".result",
        "li",
        ".tile",
        ".object",
        ".item",
        ".search-result",
        ".search__result",
        ".result-item",
    ]

    def __init__(self, city: str = DEFAULT_CITY):
        self.city = city
        # "Berlin-Pankow, ..." -> "Berlin-Pankow"
        self._location_pattern = re.compile(re.escape(city) + r"[^|,\n]*")

    def extract(
        self,
        markup: str,
        source_url: str,
        provider_name: str,
        link_pattern: re.Pattern,
        provider_id: str = "",
    ) -> List[Listing]:
        soup = BeautifulSoup(markup, "html.parser")
        cards = soup.select(", ".join(self.CARD_SELECTORS))
        logger.debug(f"Found {len(cards)} candidate cards on {source_url}")

        listings = []
        seen_ids = set()

        for card in cards:
            listing = self._parse_card(card, source_url, provider_name, link_pattern, provider_id)
            # Nested cards (an <li> inside an <article>) share their first link
            if listing and listing.id not in seen_ids:
                seen_ids.add(listing.id)
                listings.append(listing)

        return listings

    def _parse_card(self, card, source_url, provider_name, link_pattern, provider_id) -> Optional[Listing]:
        link = card.find("a", href=True)
        if link is None:
            return None

        href = link.get("href", "")
        if not link_pattern.search(href):
            return None

        url = resolve_link(source_url, href)
        if not url:
            return None

        text = collapse_whitespace(card.get_text(" "))
        fields = normalize_fields(text)

        location_match = self._location_pattern.search(text)
        location = location_match.group(0).strip() if location_match else self.city

        title = collapse_whitespace(link.get_text(" ")) or DEFAULT_TITLE

        return Listing(
            id=url,
            url=url,
            title=title,
            provider=provider_name,
            provider_id=provider_id,
            price=fields.price,
            rooms=fields.rooms,
            size=fields.size,
            location=location,
        )
