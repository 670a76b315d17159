from .listing import Criteria, Listing, PollResult, Search, SeenEntry, SeenSet

__all__ = ["Criteria", "Listing", "PollResult", "Search", "SeenEntry", "SeenSet"]
