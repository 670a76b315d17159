"""Tests for the candidate resolver."""

import re

from wohnung_finder.models.listing import Criteria
from wohnung_finder.services.resolver import CandidateResolver, make_fallback_listing

LINK_PATTERN = re.compile(r"angebot|wohnung", re.IGNORECASE)
FIRST = "https://www.example.de/angebote"
SECOND = "https://www.example.de/wohnungen/"
FALLBACK = "https://www.example.de/suche?ort=Berlin"


class TestCandidateResolver:
    """Tests for CandidateResolver.resolve()."""

    def test_first_successful_candidate_wins(self, fake_fetcher, listing_page):
        fetcher = fake_fetcher({FIRST: listing_page, SECOND: listing_page})
        resolver = CandidateResolver(fetcher)

        listings = resolver.resolve("Example", [FIRST, SECOND], LINK_PATTERN, Criteria(), FALLBACK, "example")

        assert len(listings) == 2
        assert fetcher.calls == [FIRST]

    def test_failed_fetch_advances(self, fake_fetcher, listing_page):
        fetcher = fake_fetcher({SECOND: listing_page})
        resolver = CandidateResolver(fetcher)

        listings = resolver.resolve("Example", [FIRST, SECOND], LINK_PATTERN, Criteria(), FALLBACK)

        assert fetcher.calls == [FIRST, SECOND]
        assert all(listing.url.startswith("https://www.example.de/wohnungen/") for listing in listings)

    def test_empty_extraction_advances(self, fake_fetcher, empty_page, listing_page):
        fetcher = fake_fetcher({FIRST: empty_page, SECOND: listing_page})
        resolver = CandidateResolver(fetcher)

        listings = resolver.resolve("Example", [FIRST, SECOND], LINK_PATTERN, Criteria(), FALLBACK)

        assert len(listings) == 2
        assert fetcher.calls == [FIRST, SECOND]

    def test_fallback_when_everything_fails(self, fake_fetcher):
        resolver = CandidateResolver(fake_fetcher())

        listings = resolver.resolve("Example", [FIRST, SECOND], LINK_PATTERN, Criteria(), FALLBACK, "example")

        assert len(listings) == 1
        fallback = listings[0]
        assert fallback.id == fallback.url == FALLBACK
        assert fallback.title == "Zur Suche bei Example öffnen"
        assert fallback.provider == "Example"
        assert fallback.provider_id == "example"
        assert (fallback.price, fallback.rooms, fallback.size) == (None, None, None)
        assert fallback.location == "Berlin"

    def test_fallback_location_lists_districts(self, fake_fetcher):
        resolver = CandidateResolver(fake_fetcher())
        criteria = Criteria(bezirke=["Pankow", "Mitte"])

        (fallback,) = resolver.resolve("Example", [FIRST], LINK_PATTERN, criteria, FALLBACK)

        assert fallback.location == "Pankow, Mitte"

    def test_no_fallback_configured(self, fake_fetcher):
        resolver = CandidateResolver(fake_fetcher())
        assert resolver.resolve("Example", [FIRST, SECOND], LINK_PATTERN, Criteria(), None) == []

    def test_no_candidates_uses_fallback(self, fake_fetcher):
        resolver = CandidateResolver(fake_fetcher())
        assert len(resolver.resolve("Example", [], LINK_PATTERN, Criteria(), FALLBACK)) == 1

    def test_no_district_filtering_at_this_stage(self, fake_fetcher, listing_page):
        resolver = CandidateResolver(fake_fetcher({FIRST: listing_page}))
        criteria = Criteria(bezirke=["Spandau"])

        listings = resolver.resolve("Example", [FIRST], LINK_PATTERN, criteria, FALLBACK)

        assert len(listings) == 2


def test_make_fallback_listing_without_criteria():
    listing = make_fallback_listing("Example", FALLBACK, None, city="Potsdam")
    assert listing.location == "Potsdam"
