"""Deutsche Wohnen provider."""

import re
from typing import List

from ..models.listing import Criteria
from . import register_provider
from .base import BaseProvider


@register_provider("dw")
class DeutscheWohnenProvider(BaseProvider):
    """
    Deutsche Wohnen rental offers.

    Listing links point at expose pages, hence the extra "expose" token
    in the link pattern.
    """

    display_name = "Deutsche Wohnen"
    link_pattern = re.compile(r"angebot|wohnung|miete|expose", re.IGNORECASE)
    fallback = "https://www.deutsche-wohnen.com/mieten/"

    def build_candidates(self, criteria: Criteria) -> List[str]:
        return self._configured_candidates([
            "https://www.deutsche-wohnen.com/mieten/wohnungsangebote/",
            "https://www.deutsche-wohnen.com/mieten/",
        ])
