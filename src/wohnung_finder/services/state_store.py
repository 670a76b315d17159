"""JSON file persistence for searches and their seen sets."""

import json
import logging
import os
import tempfile
import threading
import uuid
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from ..models.listing import Criteria, Search, SeenEntry, SeenSet

logger = logging.getLogger(__name__)


class JsonStateStore:
    """
    Keep searches and seen sets in a single JSON file.

    File layout:
        {"searches": [Search...],
         "seen": {search_id: {listing_id: {"firstSeenAt": ..., "url": ...}}}}

    Every change rewrites the whole file through a temporary file and
    os.replace, so readers never see a half-written state. The web API and
    the scheduler thread share one instance; all access goes through a lock.
    """

    DEFAULT_PATH = "./data/state.json"

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path or os.getenv("STATE_FILE", self.DEFAULT_PATH))
        self._lock = threading.RLock()
        self._searches: List[Search] = []
        self._seen: Dict[str, SeenSet] = {}
        self.load_state()

    def load_state(self) -> None:
        """Load the state file. A missing or unreadable file yields an empty state."""
        with self._lock:
            self._searches, self._seen = [], {}
            if not self.path.exists():
                logger.info(f"No state file at {self.path}, starting empty")
                return

            try:
                data = json.loads(self.path.read_text(encoding="utf-8"))
                self._searches = [Search.from_dict(item) for item in data.get("searches", [])]
                self._seen = {
                    search_id: {listing_id: SeenEntry.from_dict(entry) for listing_id, entry in entries.items()}
                    for search_id, entries in (data.get("seen") or {}).items()
                }
            except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
                logger.error(f"Could not read state file {self.path}: {e}")
                self._searches, self._seen = [], {}
                self._set_aside_corrupt_file()
                return

            logger.debug(f"Loaded {len(self._searches)} searches from {self.path}")

    def _set_aside_corrupt_file(self) -> None:
        # The next save would otherwise overwrite the only copy
        corrupt_path = self.path.with_name(self.path.name + ".corrupt")
        try:
            os.replace(self.path, corrupt_path)
        except OSError as e:
            logger.error(f"Could not move {self.path} aside: {e}")
            return
        logger.warning(f"Moved unreadable state file to {corrupt_path}")

    def save_state(self) -> None:
        """Atomically write the whole state to disk."""
        with self._lock:
            data: Dict[str, Any] = {
                "searches": [search.to_dict() for search in self._searches],
                "seen": {
                    search_id: {listing_id: entry.to_dict() for listing_id, entry in seen.items()}
                    for search_id, seen in self._seen.items()
                },
            }

            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), prefix=".state-", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_path, self.path)
            except Exception:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise

    # Searches

    def list_searches(self) -> List[Search]:
        with self._lock:
            return list(self._searches)

    def active_searches(self) -> List[Search]:
        with self._lock:
            return [search for search in self._searches if search.active]

    def get_search(self, search_id: str) -> Optional[Search]:
        with self._lock:
            for search in self._searches:
                if search.id == search_id:
                    return search
            return None

    def create_search(
        self,
        criteria: Criteria,
        providers: Optional[Iterable[str]] = None,
        email: Optional[str] = None,
        default_providers: Iterable[str] = (),
    ) -> Search:
        """
        Create, store and persist a new active search.

        Args:
            criteria: Search criteria
            providers: Chosen provider ids; empty means all of default_providers
            email: Notification address, optional
            default_providers: Provider ids used when none are chosen
        """
        chosen = list(providers or []) or list(default_providers)
        search = Search(id=uuid.uuid4().hex[:12], criteria=criteria, providers=chosen, email=email or None)

        with self._lock:
            self._searches.append(search)
            self.save_state()

        logger.info(f"Created search {search.id} with providers {chosen}")
        return search

    def toggle_search(self, search_id: str) -> Optional[Search]:
        """Flip a search between active and paused. Returns None if unknown."""
        with self._lock:
            search = self.get_search(search_id)
            if search is None:
                return None
            search.active = not search.active
            self.save_state()

        logger.info(f"Search {search_id} is now {'active' if search.active else 'paused'}")
        return search

    # Seen sets

    def get_seen(self, search_id: str) -> SeenSet:
        """Copy of the seen set of a search (empty for a new search)."""
        with self._lock:
            return dict(self._seen.get(search_id, {}))

    def all_seen(self) -> Dict[str, SeenSet]:
        with self._lock:
            return {search_id: dict(seen) for search_id, seen in self._seen.items()}

    def save_seen(self, search_id: str, seen: SeenSet) -> None:
        """Replace the seen set of a search and persist."""
        with self._lock:
            self._seen[search_id] = dict(seen)
            self.save_state()
