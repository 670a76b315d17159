"""Gewobag provider (municipal housing company)."""

import re
from typing import List

from ..models.listing import Criteria
from . import register_provider
from .base import BaseProvider


@register_provider("gewobag")
class GewobagProvider(BaseProvider):
    """Gewobag offers page."""

    display_name = "Gewobag"
    link_pattern = re.compile(r"angebot|wohnung|miete", re.IGNORECASE)
    fallback = "https://www.gewobag.de/wohnungen/angebote/?ort=Berlin"

    def build_candidates(self, criteria: Criteria) -> List[str]:
        return self._configured_candidates([
            "https://www.gewobag.de/wohnungen/angebote/",
            "https://www.gewobag.de/wohnungen/",
        ])
