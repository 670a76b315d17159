"""Tests for the provider registry and the built-in providers."""

from urllib.parse import parse_qs, urlparse

import pytest

from wohnung_finder.models.listing import Criteria
from wohnung_finder.providers import PROVIDER_REGISTRY, build_registry, list_available_providers
from wohnung_finder.providers.google import GoogleFallbackProvider
from wohnung_finder.providers.vonovia import VonoviaProvider


class TestRegistry:
    def test_all_providers_registered_in_order(self):
        assert list_available_providers() == [
            "vonovia",
            "gewobag",
            "degewo",
            "dw",
            "stadtundland",
            "berlinovo",
            "google",
        ]

    def test_decorator_sets_provider_id(self):
        assert PROVIDER_REGISTRY["dw"].provider_id == "dw"

    def test_build_registry_is_read_only(self):
        registry = build_registry()
        with pytest.raises(TypeError):
            registry["extra"] = VonoviaProvider()

    def test_providers_enabled_by_default(self):
        registry = build_registry()
        assert all(provider.enabled for provider in registry.values())

    def test_disable_from_config(self):
        registry = build_registry({"degewo": {"enabled": False}})

        assert registry["degewo"].is_available() is False
        assert registry["gewobag"].is_available() is True

    def test_only_google_is_meta(self):
        registry = build_registry()
        assert [pid for pid, provider in registry.items() if provider.is_meta] == ["google"]

    def test_every_html_provider_has_candidates_and_fallback(self):
        for provider_id, provider in build_registry().items():
            if provider.is_meta:
                continue
            assert len(provider.build_candidates(Criteria())) >= 1, provider_id
            assert provider.fallback_url(Criteria()).startswith("https://"), provider_id


class TestHtmlProvider:
    def test_candidate_override_from_config(self):
        provider = VonoviaProvider({"candidates": ["https://example.org/a"], "fallback": "https://example.org/f"})

        assert provider.build_candidates(Criteria()) == ["https://example.org/a"]
        assert provider.fallback_url(Criteria()) == "https://example.org/f"

    def test_link_pattern_accepts_listing_links(self):
        assert VonoviaProvider.link_pattern.search("/de-de/mieten/immobilie/123")
        assert not VonoviaProvider.link_pattern.search("/karriere")

    def test_fetch_falls_back_when_site_unreachable(self, fake_fetcher):
        fetcher = fake_fetcher()
        provider = VonoviaProvider()

        listings = provider.fetch_listings(Criteria(bezirke=["Pankow"]), fetcher)

        assert fetcher.calls == provider.build_candidates(Criteria())
        assert len(listings) == 1
        assert listings[0].url == "https://www.vonovia.de/immobiliensuche?city=Berlin"
        assert listings[0].provider == "Vonovia"
        assert listings[0].provider_id == "vonovia"
        assert listings[0].location == "Pankow"

    def test_fetch_extracts_from_first_working_page(self, fake_fetcher, listing_page):
        provider = VonoviaProvider()
        first, second = provider.build_candidates(Criteria())
        fetcher = fake_fetcher({second: listing_page})

        listings = provider.fetch_listings(Criteria(), fetcher)

        assert len(listings) == 2
        assert all(listing.provider == "Vonovia" for listing in listings)


class TestGoogleFallbackProvider:
    def test_single_synthetic_record(self, fake_fetcher):
        fetcher = fake_fetcher()
        provider = GoogleFallbackProvider()
        provider.provider_id = "google"

        listings = provider.fetch_listings(Criteria(bezirke=["Pankow", "Mitte"]), fetcher)

        assert fetcher.calls == []
        assert len(listings) == 1
        listing = listings[0]
        assert listing.id == listing.url
        assert listing.provider == "Google"
        assert listing.title == "Sammelsuche in allen Gesellschaften (Google)"
        assert listing.location == "Pankow, Mitte"
        assert (listing.price, listing.rooms, listing.size) == (None, None, None)

    def test_query_covers_districts_and_all_domains(self):
        url = GoogleFallbackProvider().search_url(Criteria(bezirke=["Pankow"]))
        query = parse_qs(urlparse(url).query)["q"][0]

        assert query.startswith("Berlin Pankow ")
        for site in ["vonovia.de", "gewobag.de", "degewo.de", "deutsche-wohnen.com", "stadtundland.de", "berlinovo.de"]:
            assert f"site:{site}" in query

    def test_location_defaults_to_city(self, fake_fetcher):
        (listing,) = GoogleFallbackProvider().fetch_listings(Criteria(), fake_fetcher())
        assert listing.location == "Berlin"
