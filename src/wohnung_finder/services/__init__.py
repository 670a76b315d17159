from .deduplication import DeduplicationService
from .email_sender import EmailService
from .fetcher import FetchResult, HttpFetcher
from .filtering import filter_listings, matches_district
from .normalizer import normalize_fields

__all__ = [
    "DeduplicationService",
    "EmailService",
    "FetchResult",
    "HttpFetcher",
    "filter_listings",
    "matches_district",
    "normalize_fields",
]
