"""Shared fixtures for wohnung-finder tests."""

import dataclasses
from types import MappingProxyType

import pytest

from wohnung_finder.models.listing import Criteria, Listing, Search
from wohnung_finder.providers.base import BaseProvider
from wohnung_finder.services.fetcher import FetchResult


class FakeFetcher:
    """Serves canned pages; every other URL fails like a 404."""

    def __init__(self, pages=None):
        self.pages = pages or {}
        self.calls = []

    def fetch(self, url):
        self.calls.append(url)
        if url in self.pages:
            return FetchResult(body=self.pages[url], success=True, status_code=200)
        return FetchResult(body="", success=False, status_code=404)


class StubProvider(BaseProvider):
    """Provider returning fixed listings (or raising) without any fetching."""

    def __init__(self, provider_id, listings=None, error=None, is_meta=False, enabled=True):
        super().__init__({"enabled": enabled})
        self.provider_id = provider_id
        self.display_name = provider_id.title()
        self.is_meta = is_meta
        self._listings = listings or []
        self._error = error
        self.calls = 0

    def build_candidates(self, criteria):
        return []

    def fetch_listings(self, criteria, fetcher):
        self.calls += 1
        if self._error is not None:
            raise self._error
        return [dataclasses.replace(listing) for listing in self._listings]


LISTING_PAGE = """
<html>
<body>
  <nav>
    <ul>
      <li><a href="/impressum">Impressum</a></li>
      <li><a href="/kontakt">Kontakt</a></li>
    </ul>
  </nav>
  <div class="results">
    <article class="teaser">
      <a href="/wohnungen/angebot-123">Schöne 2-Zimmer-Wohnung</a>
      <p>Berlin-Pankow | 2 Zimmer | 54 m² | 650 € Kaltmiete</p>
    </article>
    <article class="teaser">
      <a href="https://www.example.de/wohnungen/angebot-456">Altbau mit Balkon</a>
      <span>3,5 Zimmer, 1.250,50 €, 95 qm, Berlin Mitte, Nähe S-Bahn</span>
    </article>
    <div class="card"><p>Kein Link hier, 500 €</p></div>
  </div>
</body>
</html>
"""

EMPTY_PAGE = "<html><body><p>Derzeit keine Angebote.</p></body></html>"


@pytest.fixture
def listing_page():
    return LISTING_PAGE


@pytest.fixture
def empty_page():
    return EMPTY_PAGE


@pytest.fixture
def fake_fetcher():
    return FakeFetcher


@pytest.fixture
def make_listing():
    """Factory for creating test listings."""

    def _make(
        slug: str,
        price=None,
        rooms=None,
        size=None,
        location: str = "Berlin",
        provider_id: str = "acme",
        title: str = None,
    ) -> Listing:
        url = f"https://example.com/wohnung/{slug}"
        return Listing(
            id=url,
            url=url,
            title=title or f"Wohnung {slug}",
            provider=provider_id.title(),
            provider_id=provider_id,
            price=price,
            rooms=rooms,
            size=size,
            location=location,
        )

    return _make


@pytest.fixture
def make_registry():
    """Build an immutable registry from stub providers."""

    def _make(*providers):
        return MappingProxyType({provider.provider_id: provider for provider in providers})

    return _make


@pytest.fixture
def stub_provider():
    return StubProvider


@pytest.fixture
def pankow_search():
    """Active search for Pankow with a rent ceiling of 700 €."""
    return Search(
        id="search-1",
        criteria=Criteria(bezirke=["Pankow"], preis_max=700),
        providers=["acme"],
        email="mieter@example.com",
    )


@pytest.fixture(autouse=True)
def clean_smtp_env(monkeypatch):
    """Keep the developer's SMTP settings out of the tests."""
    for key in ("SMTP_HOST", "SMTP_PORT", "SMTP_USER", "SMTP_PASS", "SMTP_STARTTLS", "FROM_EMAIL", "PORT", "STATE_FILE"):
        monkeypatch.delenv(key, raising=False)
