"""Vonovia provider, Germany's largest private landlord."""

import re
from typing import List

from ..models.listing import Criteria
from . import register_provider
from .base import BaseProvider


@register_provider("vonovia")
class VonoviaProvider(BaseProvider):
    """
    Vonovia property search.

    The search page moved under a localized path at some point, both
    routes are still tried.
    """

    display_name = "Vonovia"
    link_pattern = re.compile(r"immobil|wohnung|miete", re.IGNORECASE)
    fallback = "https://www.vonovia.de/immobiliensuche?city=Berlin"

    def build_candidates(self, criteria: Criteria) -> List[str]:
        return self._configured_candidates([
            "https://www.vonovia.de/immobiliensuche",
            "https://www.vonovia.de/de-de/mieten/immobiliensuche",
        ])
