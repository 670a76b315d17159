"""Heuristic extraction of price, rooms and area from German listing text."""

import re
from typing import NamedTuple, Optional

# "1.250,50 €", "680 €"; never starts in the middle of a number
PRICE_PATTERN = re.compile(r"(?<!\d)((?:\d{1,3}(?:\.\d{3})+|\d{2,5})(?:,\d+)?)\s*€")
# "3,5 Zimmer", "2 Zi."
ROOMS_PATTERN = re.compile(r"(\d+(?:[.,]\d)?)\s*(?:Zimmer|Zi)\b", re.IGNORECASE)
# "75 m²", "75qm", "75 m2"
SIZE_PATTERN = re.compile(r"(\d{2,4})\s*(?:m²|qm|m2)\b", re.IGNORECASE)

_WHITESPACE = re.compile(r"\s+")


class FieldValues(NamedTuple):
    price: Optional[float]
    rooms: Optional[float]
    size: Optional[float]


def collapse_whitespace(text: Optional[str]) -> str:
    """Collapse runs of whitespace to single spaces and trim."""
    return _WHITESPACE.sub(" ", text or "").strip()


def parse_price(text: str) -> Optional[float]:
    match = PRICE_PATTERN.search(text)
    if not match:
        return None
    return float(match.group(1).replace(".", "").replace(",", "."))


def parse_rooms(text: str) -> Optional[float]:
    match = ROOMS_PATTERN.search(text)
    if not match:
        return None
    return float(match.group(1).replace(",", "."))


def parse_size(text: str) -> Optional[float]:
    match = SIZE_PATTERN.search(text)
    if not match:
        return None
    return float(match.group(1))


def normalize_fields(text: Optional[str]) -> FieldValues:
    """
    Pull the structured fields out of a card's visible text.

    The first match of each pattern wins; several prices in one card are
    not disambiguated. Fields that cannot be found are None.

    Args:
        text: Free text, whitespace is collapsed first

    Returns:
        FieldValues(price, rooms, size)
    """
    text = collapse_whitespace(text)
    return FieldValues(
        price=parse_price(text),
        rooms=parse_rooms(text),
        size=parse_size(text),
    )
