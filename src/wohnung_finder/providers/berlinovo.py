"""Berlinovo provider (furnished apartments and student housing)."""

import re
from typing import List

from ..models.listing import Criteria
from . import register_provider
from .base import BaseProvider


@register_provider("berlinovo")
class BerlinovoProvider(BaseProvider):
    """Berlinovo housing pages; offers are often labelled "Apartment"."""

    display_name = "Berlinovo"
    link_pattern = re.compile(r"wohn|apartment|miete|angebot", re.IGNORECASE)
    fallback = "https://www.berlinovo.de/de/wohnraum"

    def build_candidates(self, criteria: Criteria) -> List[str]:
        return self._configured_candidates([
            "https://www.berlinovo.de/de/wohnraum",
            "https://www.berlinovo.de/de/wohnraum/mieten",
        ])
