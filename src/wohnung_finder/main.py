"""Command line entry point and application wiring."""

import argparse
import json
import logging
import sys
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from .config import DEFAULT_CONFIG_PATH, load_config
from .providers import build_registry
from .services.deduplication import DeduplicationService
from .services.email_sender import EmailService
from .services.fetcher import HttpFetcher
from .services.poller import SearchPoller
from .services.scheduler import PollScheduler
from .services.state_store import JsonStateStore
from .utils.logging import setup_logging

logger = logging.getLogger(__name__)


class WohnungFinder:
    """
    Wire the components together from a configuration dict.

    Coordinates: provider registry -> fetcher -> poller -> scheduler,
                 with the state store and email service as collaborators
    """

    def __init__(self, config: Dict[str, Any]):
        self.config = config
        poll = config["poll"]
        http = config["http"]

        self.registry = build_registry(config.get("providers"), city=config["city"])
        self.store = JsonStateStore(config["storage"]["state_file"])
        self.email_service = EmailService()
        self.dedup_service = DeduplicationService(retention_days=poll.get("seen_retention_days"))

        self.poller = SearchPoller(
            registry=self.registry,
            fetcher=HttpFetcher(timeout=http["timeout_seconds"], retries=http["retries"]),
            dedup_service=self.dedup_service,
            notifier=self.email_service,
            max_workers=poll["max_workers"],
        )
        self.scheduler = PollScheduler(self.store, self.poller, interval_seconds=poll["interval_seconds"])

        if not self.email_service.is_configured():
            logger.info("SMTP_HOST not set - email notifications disabled")

    def create_app(self):
        from .web.app import create_app

        return create_app(self.store, self.scheduler, self.registry)

    def serve(self) -> None:
        """Run the REST API with the scheduler in a background thread."""
        server = self.config["server"]
        app = self.create_app()
        self.scheduler.start(blocking=False)
        try:
            logger.info(f"Server on http://{server['host']}:{server['port']}")
            app.run(host=server["host"], port=server["port"], use_reloader=False)
        finally:
            self.scheduler.shutdown()


def configure_logging(verbose: bool = False, dotenv_path: Optional[str] = None) -> None:
    """Set up logging after .env is loaded, so LOG_LEVEL from .env applies."""
    load_dotenv(dotenv_path)
    setup_logging("DEBUG" if verbose else None)


def main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Wohnung Finder - watch Berlin housing companies for new rental listings"
    )
    parser.add_argument(
        "-c",
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help="Path to configuration file",
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Run the REST API with background polling",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Poll all active searches once and exit",
    )
    parser.add_argument(
        "--search",
        metavar="ID",
        help="Run a single search once and print its results",
    )
    parser.add_argument(
        "--providers",
        action="store_true",
        help="List registered providers and exit",
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Show seen-listing statistics and exit",
    )
    parser.add_argument(
        "--test-email",
        metavar="EMAIL",
        help="Send a test email to verify configuration",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args()
    configure_logging(args.verbose)

    try:
        finder = WohnungFinder(load_config(args.config))
    except (FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        sys.exit(1)

    if args.providers:
        for provider_id, provider in finder.registry.items():
            state = "enabled" if provider.enabled else "disabled"
            print(f"{provider_id:14} {provider.display_name:20} {state}")
        return

    if args.stats:
        stats = finder.dedup_service.get_stats(finder.store.all_seen())
        print("\n=== Wohnung Finder Statistics ===")
        print(f"Searches: {len(finder.store.list_searches())}")
        print(f"Total tracked: {stats['total_tracked']}")
        for search_id, count in stats["by_search"].items():
            print(f"  {search_id}: {count}")
        return

    if args.test_email:
        if finder.email_service.send_test_email(args.test_email):
            print(f"Test email sent to {args.test_email}")
        else:
            print("Failed to send test email - check your SMTP settings")
            sys.exit(1)
        return

    if args.search:
        search = finder.store.get_search(args.search)
        if search is None:
            logger.error(f"Unknown search: {args.search}")
            sys.exit(1)
        result = finder.scheduler.run_search(search)
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        return

    if args.once:
        completed = finder.scheduler.tick()
        print(f"Polled {completed} active search(es)")
        return

    if args.serve:
        finder.serve()
        return

    try:
        finder.scheduler.start(blocking=True)
    except (KeyboardInterrupt, SystemExit):
        logger.info("Stopped")


if __name__ == "__main__":
    main()
