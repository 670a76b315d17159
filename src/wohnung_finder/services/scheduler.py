"""Periodic polling of all active searches."""

import logging
import threading

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.blocking import BlockingScheduler

from ..models.listing import PollResult, Search
from .poller import SearchPoller
from .state_store import JsonStateStore

logger = logging.getLogger(__name__)


class PollScheduler:
    """
    Run every active search once per interval.

    Searches in a tick run one after another. A failing search is logged
    and the tick moves on; nothing a search does stops the scheduler.
    APScheduler runs at most one tick at a time and coalesces missed ones.
    """

    JOB_ID = "poll-active-searches"

    def __init__(
        self,
        store: JsonStateStore,
        poller: SearchPoller,
        interval_seconds: int = 30,
    ):
        self.store = store
        self.poller = poller
        self.interval_seconds = interval_seconds
        self._scheduler = None
        # Scheduled ticks and on-demand API polls share the seen sets
        self._run_lock = threading.Lock()

    def run_search(self, search: Search) -> PollResult:
        """Run one poll cycle for a search and persist its updated seen set."""
        with self._run_lock:
            seen = self.store.get_seen(search.id)
            result = self.poller.run(search, seen)
            result.seen = self.poller.dedup_service.prune(result.seen)
            self.store.save_seen(search.id, result.seen)
        return result

    def tick(self) -> int:
        """
        Poll every active search once.

        Returns:
            Number of searches that completed without error
        """
        searches = self.store.active_searches()
        logger.debug(f"Tick: {len(searches)} active searches")

        completed = 0
        for search in searches:
            try:
                self.run_search(search)
                completed += 1
            except Exception:
                logger.exception(f"Poll cycle for search {search.id} failed")

        return completed

    def start(self, blocking: bool = True) -> None:
        """
        Start polling on a fixed interval.

        Args:
            blocking: Run in the calling thread (CLI) instead of a
                background thread (web server)
        """
        scheduler_class = BlockingScheduler if blocking else BackgroundScheduler
        self._scheduler = scheduler_class()
        self._scheduler.add_job(
            self.tick,
            "interval",
            seconds=self.interval_seconds,
            id=self.JOB_ID,
            max_instances=1,
            coalesce=True,
        )
        logger.info(f"Polling active searches every {self.interval_seconds}s")
        self._scheduler.start()

    def shutdown(self, wait: bool = False) -> None:
        if self._scheduler is not None and self._scheduler.running:
            self._scheduler.shutdown(wait=wait)
        self._scheduler = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running
