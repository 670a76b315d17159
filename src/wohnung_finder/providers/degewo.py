"""DEGEWO provider (municipal housing company)."""

import re
from typing import List

from ..models.listing import Criteria
from . import register_provider
from .base import BaseProvider


@register_provider("degewo")
class DegewoProvider(BaseProvider):
    display_name = "DEGEWO"
    link_pattern = re.compile(r"angebot|wohnung|miete", re.IGNORECASE)
    fallback = "https://www.degewo.de/wohnungen/wohnungssuche/?ort=Berlin"

    def build_candidates(self, criteria: Criteria) -> List[str]:
        return self._configured_candidates([
            "https://www.degewo.de/wohnungen/wohnungsangebote/",
            "https://www.degewo.de/wohnungen/wohnungssuche/",
        ])
