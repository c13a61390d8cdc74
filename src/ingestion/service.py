"""Service layer tying newsletter intake, extraction and storage together."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import requests
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.classification import classify_url
from src.database.sources import create_source, source_exists
from src.extraction import ParsedContent, parse_html, validate_parsed_content
from src.ingestion.config import IngestionConfig, get_ingestion_settings
from src.ingestion.exceptions import IngestionError, PageFetchError
from src.ingestion.fetcher import fetch_page
from src.ingestion.models import IngestOutcome, IngestStatus, NewsletterStats, ProcessingResult
from src.newsletters import (
    ExtractedLinks,
    extract_urls,
    fetch_emails,
    parse_email,
    sender_addresses,
)
from src.summarisation import SummaryRequest, SummaryResult

if TYPE_CHECKING:
    from src.newsletters import MailClient
    from src.summarisation import HybridSummariser

logger = logging.getLogger(__name__)

PDF_TITLE = "PDF"


class IngestionService:
    """Service for ingesting newsletter links into the sources table."""

    def __init__(
        self,
        session: Session,
        *,
        mail_client: MailClient | None = None,
        summariser: HybridSummariser | None = None,
        config: IngestionConfig | None = None,
    ) -> None:
        """Initialise the ingestion service.

        :param session: A SQLAlchemy database session.
        :param mail_client: An authenticated mail client, needed to process newsletters.
        :param summariser: Optional summariser for parsed content.
        :param config: Ingestion settings (loaded from the environment if not provided).
        """
        self._session = session
        self._mail_client = mail_client
        self._summariser = summariser
        self._config = config or get_ingestion_settings()

    def ingest_url(self, url: str, newsletter: str | None = None) -> IngestOutcome:
        """Classify, fetch, parse and store a single URL.

        :param url: The URL to ingest.
        :param newsletter: The newsletter the URL was found in.
        :returns: What happened to the URL.
        """
        link_type = classify_url(url)
        outcome: dict[str, Any] = {"url": url, "link_type": link_type, "newsletter": newsletter}

        if source_exists(self._session, url):
            logger.debug(f"Source already stored: {url}")
            return IngestOutcome(status=IngestStatus.DUPLICATE, **outcome)

        try:
            page = fetch_page(
                url,
                timeout=self._config.request_timeout,
                user_agent=self._config.user_agent,
            )
        except PageFetchError as e:
            logger.warning(str(e))
            return IngestOutcome(status=IngestStatus.FAILED, error=str(e), **outcome)

        if page.is_pdf:
            error = self._store_source(
                url=url, link_type=link_type, newsletter=newsletter, title=PDF_TITLE
            )
            if error:
                return IngestOutcome(status=IngestStatus.FAILED, error=error, **outcome)
            return IngestOutcome(status=IngestStatus.STORED, **outcome)

        parsed = parse_html(page.text, page.final_url)
        if not parsed.success:
            logger.warning(f"Failed to parse {url}: {parsed.error}")
            return IngestOutcome(
                status=IngestStatus.FAILED, parsed=parsed, error=parsed.error, **outcome
            )

        report = validate_parsed_content(parsed)
        logger.info(
            f"Parsed {url}: score={report.score}, words={parsed.word_count}, "
            f"type={parsed.content_type}, issues={report.issues}"
        )

        summary = self._summarise(parsed)

        error = self._store_source(
            url=url,
            link_type=link_type,
            parsed=parsed,
            newsletter=newsletter,
            summary=summary.summary if summary is not None and summary.ok else None,
        )
        if error:
            return IngestOutcome(
                status=IngestStatus.FAILED,
                parsed=parsed,
                report=report,
                summary=summary,
                error=error,
                **outcome,
            )

        return IngestOutcome(
            status=IngestStatus.STORED,
            parsed=parsed,
            report=report,
            summary=summary,
            **outcome,
        )

    def process_newsletters(
        self,
        *,
        since: datetime | None = None,
        limit: int | None = None,
    ) -> ProcessingResult:
        """Fetch newsletter emails, extract their links and ingest them.

        :param since: Only process emails received after this datetime.
        :param limit: Maximum number of emails to fetch per sender.
        :returns: A ProcessingResult with statistics.
        :raises IngestionError: If no mail client was provided.
        """
        if self._mail_client is None:
            raise IngestionError("A mail client is required to process newsletters")

        if since is None:
            since = datetime.now(UTC) - timedelta(hours=self._config.lookback_hours)
        limit = limit or self._config.max_emails

        result = ProcessingResult()

        for sender_email in sender_addresses():
            try:
                messages = fetch_emails(self._mail_client, sender_email, since=since, limit=limit)
            except requests.RequestException as e:
                error_msg = f"Failed to fetch emails from {sender_email}: {e}"
                logger.exception(error_msg)
                result.errors.append(error_msg)
                continue

            for message in messages:
                try:
                    self._process_single_email(message, result)
                except Exception as e:
                    error_msg = f"Failed to process email {message.get('id', '')}: {e}"
                    logger.exception(error_msg)
                    result.errors.append(error_msg)

        logger.info(
            f"Newsletter processing complete: {result.emails_processed} emails, "
            f"{result.urls_extracted} URLs ({result.urls_processed} stored, "
            f"{result.urls_duplicate} duplicate), {len(result.errors)} errors"
        )

        return result

    def _process_single_email(self, message: dict[str, Any], result: ProcessingResult) -> None:
        """Process a single email message.

        :param message: The raw email message.
        :param result: The ProcessingResult to update.
        """
        email = parse_email(message)
        logger.info(f"Processing email from {email.newsletter}: {email.subject}")

        links = ExtractedLinks(
            email_id=email.email_id,
            newsletter=email.newsletter,
            urls=extract_urls(email.body),
        )

        result.emails_processed += 1
        result.urls_extracted += len(links.urls)

        stats = result.summary.setdefault(links.newsletter, NewsletterStats())
        stats.emails += 1
        stats.urls += len(links.urls)

        if result.latest_received_at is None or email.received_at > result.latest_received_at:
            result.latest_received_at = email.received_at

        if not self._config.process_urls:
            return

        for url in links.urls:
            try:
                outcome = self.ingest_url(url, links.newsletter)
            except Exception as e:
                error_msg = f"Failed to ingest {url}: {e}"
                logger.exception(error_msg)
                result.errors.append(error_msg)
                continue

            if outcome.status == IngestStatus.STORED:
                result.urls_processed += 1
            elif outcome.status == IngestStatus.DUPLICATE:
                result.urls_duplicate += 1
            elif outcome.error:
                result.errors.append(outcome.error)

    def _store_source(self, **fields: Any) -> str | None:
        """Insert a source row inside a savepoint.

        A failed insert only rolls back its own savepoint, so the session stays
        usable for the URLs that follow.

        :param fields: Keyword arguments for create_source.
        :returns: An error message if the insert failed, otherwise None.
        """
        try:
            with self._session.begin_nested():
                create_source(self._session, **fields)
        except SQLAlchemyError as e:
            error_msg = f"Failed to store {fields['url']}: {e}"
            logger.exception(error_msg)
            return error_msg

        return None

    def _summarise(self, parsed: ParsedContent) -> SummaryResult | None:
        """Summarise parsed content when a summariser is configured.

        :param parsed: The parsed content.
        :returns: The summary result, or None if summarisation was skipped.
        """
        if self._summariser is None or not parsed.content:
            return None

        return self._summariser.summarise(
            SummaryRequest(title=parsed.title, content=parsed.content, summary=parsed.summary)
        )
