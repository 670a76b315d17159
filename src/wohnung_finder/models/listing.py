"""Normalized listing, criteria and search models used across all providers."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


def _to_number(value: Any) -> Optional[float]:
    """Coerce user-supplied criteria values ("3", 3, "", None) to float or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip().replace(",", ".")
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def _naive_utc(value: datetime) -> datetime:
    """Seen timestamps are naive UTC; convert aware values."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return _naive_utc(value)
    if isinstance(value, (int, float)):
        # Epoch milliseconds
        return datetime.utcfromtimestamp(value / 1000)
    if isinstance(value, str) and value:
        try:
            # "2024-05-01T10:00:00.000Z" as written by JavaScript
            if value.endswith("Z"):
                value = value[:-1] + "+00:00"
            return _naive_utc(datetime.fromisoformat(value))
        except ValueError:
            pass
    return datetime.utcnow()


@dataclass
class Listing:
    """
    Normalized housing offer.

    Every provider converts its results to this format. The resolved
    absolute URL doubles as the identity: two listings are the same
    offer iff their ``id`` is equal.
    """

    id: str
    url: str
    title: str
    provider: str  # Display name, e.g. "Vonovia"
    provider_id: str = ""  # Registry key, e.g. "vonovia"

    # None means "not found in the text", never zero
    price: Optional[float] = None
    rooms: Optional[float] = None
    size: Optional[float] = None

    location: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "url": self.url,
            "title": self.title,
            "provider": self.provider,
            "providerId": self.provider_id,
            "price": self.price,
            "rooms": self.rooms,
            "size": self.size,
            "location": self.location,
        }

    def display_price(self) -> str:
        """Format price for display, empty when unknown."""
        if self.price is None:
            return ""
        return f"{self.price:,.0f} €".replace(",", ".")

    def display_size(self) -> str:
        """Format rooms and area for display."""
        parts = []
        if self.rooms is not None:
            rooms = f"{self.rooms:.0f}" if self.rooms == int(self.rooms) else f"{self.rooms}".replace(".", ",")
            parts.append(f"{rooms} Zi")
        if self.size is not None:
            parts.append(f"{self.size:.0f} m²")
        return " | ".join(parts)

    def __repr__(self) -> str:
        return f"Listing({self.provider_id or self.provider}, {self.url})"


@dataclass
class Criteria:
    """User search constraints. Unset bounds are None; empty bezirke matches everything."""

    bezirke: List[str] = field(default_factory=list)
    zimmer_min: Optional[float] = None
    zimmer_max: Optional[float] = None
    flaeche_min: Optional[float] = None
    preis_max: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Criteria":
        data = data or {}
        bezirke = data.get("bezirke") or []
        if isinstance(bezirke, str):
            bezirke = bezirke.split(",")
        return cls(
            bezirke=[str(b).strip() for b in bezirke if str(b).strip()],
            zimmer_min=_to_number(data.get("zimmerMin")),
            zimmer_max=_to_number(data.get("zimmerMax")),
            flaeche_min=_to_number(data.get("flaecheMin")),
            preis_max=_to_number(data.get("preisMax")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bezirke": list(self.bezirke),
            "zimmerMin": self.zimmer_min,
            "zimmerMax": self.zimmer_max,
            "flaecheMin": self.flaeche_min,
            "preisMax": self.preis_max,
        }


@dataclass
class Search:
    """A saved search: criteria, chosen providers and an optional notification address."""

    id: str
    criteria: Criteria = field(default_factory=Criteria)
    providers: List[str] = field(default_factory=list)
    email: Optional[str] = None
    active: bool = True
    created_at: datetime = field(default_factory=datetime.utcnow)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Search":
        return cls(
            id=str(data["id"]),
            criteria=Criteria.from_dict(data.get("criteria")),
            providers=list(data.get("providers") or []),
            email=data.get("email") or None,
            active=bool(data.get("active", True)),
            created_at=_parse_timestamp(data.get("createdAt")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email or "",
            "criteria": self.criteria.to_dict(),
            "providers": list(self.providers),
            "active": self.active,
            "createdAt": self.created_at.isoformat(),
        }


@dataclass
class SeenEntry:
    """When a listing id was first reported for a search."""

    first_seen_at: datetime
    url: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SeenEntry":
        return cls(
            first_seen_at=_parse_timestamp(data.get("firstSeenAt", data.get("ts"))),
            url=data.get("url", ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"firstSeenAt": self.first_seen_at.isoformat(), "url": self.url}


# listing id -> first sighting
SeenSet = Dict[str, SeenEntry]


@dataclass
class PollResult:
    """Outcome of one poll cycle for one search."""

    all: List[Listing]
    new: List[Listing]
    seen: SeenSet
    errors: Dict[str, str] = field(default_factory=dict)
    notified: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "all": [listing.to_dict() for listing in self.all],
            "new": [listing.to_dict() for listing in self.new],
            "errors": dict(self.errors),
        }
