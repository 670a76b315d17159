"""STADT UND LAND provider (municipal housing company)."""

import re
from typing import List

from ..models.listing import Criteria
from . import register_provider
from .base import BaseProvider


@register_provider("stadtundland")
class StadtUndLandProvider(BaseProvider):
    display_name = "STADT UND LAND"
    link_pattern = re.compile(r"wohnung|angebot|miete", re.IGNORECASE)
    fallback = "https://www.stadtundland.de/mietangebote"

    def build_candidates(self, criteria: Criteria) -> List[str]:
        return self._configured_candidates([
            "https://www.stadtundland.de/wohnungen/wohnungsangebote",
            "https://www.stadtundland.de/mietangebote",
        ])
