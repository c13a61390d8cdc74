"""Entry point for ingesting URLs from the command line.

Allows running with: python -m src.ingestion URL [URL ...] [--newsletter NAME]
"""

import argparse
import logging

from dotenv import load_dotenv

from src.database.connection import get_session
from src.ingestion.service import IngestionService
from src.observability.sentry import init_sentry
from src.paths import ENV_FILE
from src.summarisation import build_summariser, get_summarisation_settings
from src.utils.logging import configure_logging

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    """Ingest the URLs given on the command line."""
    parser = argparse.ArgumentParser(description="Fetch, parse and store newsletter links.")
    parser.add_argument("urls", nargs="+", help="URLs to ingest")
    parser.add_argument("--newsletter", default=None, help="Newsletter the URLs came from")
    args = parser.parse_args(argv)

    load_dotenv(ENV_FILE)
    configure_logging()
    init_sentry()

    summariser = build_summariser(get_summarisation_settings())

    with get_session() as session:
        service = IngestionService(session, summariser=summariser)
        for url in args.urls:
            outcome = service.ingest_url(url, args.newsletter)
            logger.info(f"{outcome.status}: {url} ({outcome.link_type})")


if __name__ == "__main__":
    main()
