"""Tests for the ingestion service."""

import unittest
from datetime import UTC, datetime
from unittest.mock import MagicMock, patch

import requests
from sqlalchemy.exc import IntegrityError

from src.enums import LinkType
from src.ingestion.config import IngestionConfig
from src.ingestion.exceptions import IngestionError, PageFetchError
from src.ingestion.fetcher import FetchedPage
from src.ingestion.models import IngestOutcome, IngestStatus
from src.ingestion.service import IngestionService
from src.newsletters.models import NewsletterName
from src.summarisation.models import SummaryResult

ARTICLE_HTML = (
    '<html lang="en"><head><title>A Long Enough Title</title></head>'
    "<body><article><p>"
    + " ".join(f"word{i}" for i in range(120))
    + "</p></article></body></html>"
)


def _message(message_id: str, body: str, received: str = "2024-01-15T10:30:00Z") -> dict:
    return {
        "id": message_id,
        "subject": "Daily issue",
        "from": {"emailAddress": {"name": "TLDR", "address": "dan@tldrnewsletter.com"}},
        "receivedDateTime": received,
        "body": {"content": body},
    }


def _outcome(url: str, status: IngestStatus) -> IngestOutcome:
    return IngestOutcome(url=url, link_type=LinkType.ARTICLE, status=status)


class TestIngestUrl(unittest.TestCase):
    """Tests for IngestionService.ingest_url."""

    def setUp(self) -> None:
        """Set up test fixtures."""
        self.mock_session = MagicMock()
        self.config = IngestionConfig(request_timeout=5, user_agent="TestAgent")
        self.service = IngestionService(self.mock_session, config=self.config)

    @patch("src.ingestion.service.fetch_page")
    @patch("src.ingestion.service.source_exists")
    def test_skips_duplicates(self, mock_exists: MagicMock, mock_fetch: MagicMock) -> None:
        """Should not fetch URLs that are already stored."""
        mock_exists.return_value = True

        outcome = self.service.ingest_url("https://example.com/a")

        self.assertEqual(outcome.status, IngestStatus.DUPLICATE)
        self.assertEqual(outcome.link_type, LinkType.ARTICLE)
        mock_fetch.assert_not_called()

    @patch("src.ingestion.service.create_source")
    @patch("src.ingestion.service.fetch_page")
    @patch("src.ingestion.service.source_exists")
    def test_records_fetch_failures(
        self, mock_exists: MagicMock, mock_fetch: MagicMock, mock_create: MagicMock
    ) -> None:
        """Should report fetch errors without storing anything."""
        mock_exists.return_value = False
        mock_fetch.side_effect = PageFetchError("https://example.com/a", "HTTP 500")

        outcome = self.service.ingest_url("https://example.com/a")

        self.assertEqual(outcome.status, IngestStatus.FAILED)
        self.assertEqual(outcome.error, "Failed to fetch https://example.com/a: HTTP 500")
        mock_create.assert_not_called()

    @patch("src.ingestion.service.create_source")
    @patch("src.ingestion.service.fetch_page")
    @patch("src.ingestion.service.source_exists")
    def test_stores_pdfs_without_parsing(
        self, mock_exists: MagicMock, mock_fetch: MagicMock, mock_create: MagicMock
    ) -> None:
        """Should store PDFs with a placeholder title."""
        mock_exists.return_value = False
        mock_fetch.return_value = FetchedPage(
            url="https://example.com/paper.pdf",
            final_url="https://example.com/paper.pdf",
            is_pdf=True,
        )

        outcome = self.service.ingest_url("https://example.com/paper.pdf", NewsletterName.TLDR)

        self.assertEqual(outcome.status, IngestStatus.STORED)
        self.assertEqual(outcome.link_type, LinkType.PDF)
        self.assertIsNone(outcome.parsed)
        mock_create.assert_called_once_with(
            self.mock_session,
            url="https://example.com/paper.pdf",
            link_type=LinkType.PDF,
            newsletter=NewsletterName.TLDR,
            title="PDF",
        )

    @patch("src.ingestion.service.create_source")
    @patch("src.ingestion.service.fetch_page")
    @patch("src.ingestion.service.source_exists")
    def test_parses_and_stores_html(
        self, mock_exists: MagicMock, mock_fetch: MagicMock, mock_create: MagicMock
    ) -> None:
        """Should parse, validate and store HTML pages."""
        mock_exists.return_value = False
        mock_fetch.return_value = FetchedPage(
            url="https://example.com/a",
            final_url="https://example.com/final",
            text=ARTICLE_HTML,
        )

        outcome = self.service.ingest_url("https://example.com/a")

        self.assertEqual(outcome.status, IngestStatus.STORED)
        assert outcome.parsed is not None
        assert outcome.report is not None
        self.assertEqual(outcome.parsed.source_url, "https://example.com/final")
        self.assertEqual(outcome.parsed.word_count, 120)
        self.assertEqual(outcome.report.score, 80)
        self.assertIsNone(outcome.summary)
        mock_fetch.assert_called_once_with(
            "https://example.com/a", timeout=5, user_agent="TestAgent"
        )

        kwargs = mock_create.call_args[1]
        self.assertEqual(kwargs["url"], "https://example.com/a")
        self.assertIs(kwargs["parsed"], outcome.parsed)
        self.assertIsNone(kwargs["summary"])

    @patch("src.ingestion.service.create_source")
    @patch("src.ingestion.service.fetch_page")
    @patch("src.ingestion.service.source_exists")
    def test_stores_generated_summary(
        self, mock_exists: MagicMock, mock_fetch: MagicMock, mock_create: MagicMock
    ) -> None:
        """Should store the summariser output when it succeeds."""
        mock_exists.return_value = False
        mock_fetch.return_value = FetchedPage(
            url="https://example.com/a", final_url="https://example.com/a", text=ARTICLE_HTML
        )
        mock_summariser = MagicMock()
        mock_summariser.summarise.return_value = SummaryResult(
            summary="A generated summary", provider="bedrock", model="model-id"
        )
        service = IngestionService(
            self.mock_session, summariser=mock_summariser, config=self.config
        )

        outcome = service.ingest_url("https://example.com/a")

        request = mock_summariser.summarise.call_args[0][0]
        self.assertEqual(request.title, "A Long Enough Title")
        self.assertEqual(outcome.summary.summary, "A generated summary")  # type: ignore[union-attr]
        self.assertEqual(mock_create.call_args[1]["summary"], "A generated summary")

    @patch("src.ingestion.service.create_source")
    @patch("src.ingestion.service.fetch_page")
    @patch("src.ingestion.service.source_exists")
    def test_skips_failed_summaries(
        self, mock_exists: MagicMock, mock_fetch: MagicMock, mock_create: MagicMock
    ) -> None:
        """Should not store a summary produced with an error."""
        mock_exists.return_value = False
        mock_fetch.return_value = FetchedPage(
            url="https://example.com/a", final_url="https://example.com/a", text=ARTICLE_HTML
        )
        mock_summariser = MagicMock()
        mock_summariser.summarise.return_value = SummaryResult(
            summary="Truncated...",
            provider="fallback",
            model="none",
            error="No AI providers configured",
        )
        service = IngestionService(
            self.mock_session, summariser=mock_summariser, config=self.config
        )

        service.ingest_url("https://example.com/a")

        self.assertIsNone(mock_create.call_args[1]["summary"])

    @patch("src.ingestion.service.create_source")
    @patch("src.ingestion.service.fetch_page")
    @patch("src.ingestion.service.source_exists")
    def test_records_parse_failures(
        self, mock_exists: MagicMock, mock_fetch: MagicMock, mock_create: MagicMock
    ) -> None:
        """Should not store pages that are not HTML documents."""
        mock_exists.return_value = False
        mock_fetch.return_value = FetchedPage(
            url="https://example.com/a", final_url="https://example.com/a", text="plain text"
        )

        outcome = self.service.ingest_url("https://example.com/a")

        self.assertEqual(outcome.status, IngestStatus.FAILED)
        self.assertEqual(outcome.error, "No valid HTML content found")
        mock_create.assert_not_called()

    @patch("src.ingestion.service.create_source")
    @patch("src.ingestion.service.fetch_page")
    @patch("src.ingestion.service.source_exists")
    def test_failed_insert_rolls_back_its_savepoint(
        self, mock_exists: MagicMock, mock_fetch: MagicMock, mock_create: MagicMock
    ) -> None:
        """Should report a failed insert after rolling back only its savepoint."""
        mock_exists.return_value = False
        mock_fetch.return_value = FetchedPage(
            url="https://example.com/a", final_url="https://example.com/a", text=ARTICLE_HTML
        )
        mock_create.side_effect = IntegrityError("INSERT", {}, Exception("duplicate key"))

        outcome = self.service.ingest_url("https://example.com/a")

        self.assertEqual(outcome.status, IngestStatus.FAILED)
        assert outcome.error is not None
        self.assertIn("duplicate key", outcome.error)
        self.assertIsNotNone(outcome.parsed)
        self.mock_session.begin_nested.assert_called_once()
        exit_args = self.mock_session.begin_nested.return_value.__exit__.call_args[0]
        self.assertIs(exit_args[0], IntegrityError)


class TestProcessNewsletters(unittest.TestCase):
    """Tests for IngestionService.process_newsletters."""

    def setUp(self) -> None:
        """Set up test fixtures."""
        self.mock_session = MagicMock()
        self.mock_client = MagicMock()
        self.config = IngestionConfig()
        self.service = IngestionService(
            self.mock_session, mail_client=self.mock_client, config=self.config
        )
        self.since = datetime(2024, 1, 14, tzinfo=UTC)

    def test_requires_mail_client(self) -> None:
        """Should raise when no mail client was given."""
        service = IngestionService(self.mock_session, config=self.config)

        with self.assertRaises(IngestionError):
            service.process_newsletters()

    @patch.object(IngestionService, "ingest_url")
    @patch("src.ingestion.service.fetch_emails")
    def test_processes_emails_and_urls(
        self, mock_fetch_emails: MagicMock, mock_ingest: MagicMock
    ) -> None:
        """Should extract and ingest URLs from every fetched email."""
        body = (
            '<a href="https://example.com/one">One</a>'
            '<a href="https://example.com/two">Two</a>'
            '<a href="https://example.com/unsubscribe">Unsubscribe</a>'
        )

        def fetch_side_effect(client, sender_email, **kwargs):
            if sender_email == "dan@tldrnewsletter.com":
                return [_message("msg-1", body)]
            return []

        mock_fetch_emails.side_effect = fetch_side_effect
        mock_ingest.side_effect = [
            _outcome("https://example.com/one", IngestStatus.STORED),
            _outcome("https://example.com/two", IngestStatus.DUPLICATE),
        ]

        result = self.service.process_newsletters(since=self.since, limit=5)

        self.assertEqual(result.emails_processed, 1)
        self.assertEqual(result.urls_extracted, 2)
        self.assertEqual(result.urls_processed, 1)
        self.assertEqual(result.urls_duplicate, 1)
        self.assertEqual(result.errors, [])
        self.assertEqual(result.summary[NewsletterName.TLDR].emails, 1)
        self.assertEqual(result.summary[NewsletterName.TLDR].urls, 2)
        self.assertEqual(result.latest_received_at, datetime(2024, 1, 15, 10, 30, tzinfo=UTC))
        mock_ingest.assert_any_call("https://example.com/one", NewsletterName.TLDR)
        mock_fetch_emails.assert_any_call(
            self.mock_client, "dan@tldrnewsletter.com", since=self.since, limit=5
        )

    @patch.object(IngestionService, "ingest_url")
    @patch("src.ingestion.service.fetch_emails")
    def test_isolates_url_errors(
        self, mock_fetch_emails: MagicMock, mock_ingest: MagicMock
    ) -> None:
        """Should keep processing remaining URLs when one fails."""
        body = '<a href="https://example.com/one">One</a><a href="https://example.com/two">Two</a>'
        mock_fetch_emails.side_effect = lambda client, sender, **kwargs: (
            [_message("msg-1", body)] if sender == "dan@tldrnewsletter.com" else []
        )
        mock_ingest.side_effect = [
            RuntimeError("Database unavailable"),
            _outcome("https://example.com/two", IngestStatus.STORED),
        ]

        result = self.service.process_newsletters(since=self.since)

        self.assertEqual(result.urls_processed, 1)
        self.assertEqual(len(result.errors), 1)
        self.assertIn("Database unavailable", result.errors[0])

    @patch("src.ingestion.service.create_source")
    @patch("src.ingestion.service.fetch_page")
    @patch("src.ingestion.service.source_exists")
    @patch("src.ingestion.service.fetch_emails")
    def test_failed_insert_does_not_stop_later_urls(
        self,
        mock_fetch_emails: MagicMock,
        mock_exists: MagicMock,
        mock_fetch: MagicMock,
        mock_create: MagicMock,
    ) -> None:
        """Should still store later URLs after an insert fails."""
        body = '<a href="https://example.com/one">One</a><a href="https://example.com/two">Two</a>'
        mock_fetch_emails.side_effect = lambda client, sender, **kwargs: (
            [_message("msg-1", body)] if sender == "dan@tldrnewsletter.com" else []
        )
        mock_exists.return_value = False
        mock_fetch.side_effect = lambda url, **kwargs: FetchedPage(
            url=url, final_url=url, text=ARTICLE_HTML
        )
        mock_create.side_effect = [
            IntegrityError("INSERT", {}, Exception("duplicate key")),
            MagicMock(),
        ]

        result = self.service.process_newsletters(since=self.since)

        self.assertEqual(result.urls_processed, 1)
        self.assertEqual(len(result.errors), 1)
        self.assertIn("https://example.com/one", result.errors[0])
        self.assertIn("duplicate key", result.errors[0])
        self.assertEqual(self.mock_session.begin_nested.call_count, 2)
        self.assertEqual(mock_create.call_args[1]["url"], "https://example.com/two")

    @patch.object(IngestionService, "ingest_url")
    @patch("src.ingestion.service.fetch_emails")
    def test_records_failed_outcomes(
        self, mock_fetch_emails: MagicMock, mock_ingest: MagicMock
    ) -> None:
        """Should add failed outcome errors to the result."""
        body = '<a href="https://example.com/one">One</a>'
        mock_fetch_emails.side_effect = lambda client, sender, **kwargs: (
            [_message("msg-1", body)] if sender == "dan@tldrnewsletter.com" else []
        )
        mock_ingest.return_value = IngestOutcome(
            url="https://example.com/one",
            link_type=LinkType.ARTICLE,
            status=IngestStatus.FAILED,
            error="Failed to fetch https://example.com/one: HTTP 500",
        )

        result = self.service.process_newsletters(since=self.since)

        self.assertEqual(result.errors, ["Failed to fetch https://example.com/one: HTTP 500"])

    @patch("src.ingestion.service.fetch_emails")
    def test_isolates_sender_errors(self, mock_fetch_emails: MagicMock) -> None:
        """Should continue with other senders when fetching one fails."""
        mock_fetch_emails.side_effect = requests.ConnectionError("Mailbox unreachable")

        result = self.service.process_newsletters(since=self.since)

        self.assertEqual(result.emails_processed, 0)
        self.assertEqual(len(result.errors), 5)
        self.assertEqual(mock_fetch_emails.call_count, 5)

    @patch("src.ingestion.service.fetch_emails")
    def test_isolates_malformed_emails(self, mock_fetch_emails: MagicMock) -> None:
        """Should record emails that cannot be parsed and continue."""
        mock_fetch_emails.side_effect = lambda client, sender, **kwargs: (
            [{"id": "bad", "receivedDateTime": "not a date"}, _message("msg-2", "No links here")]
            if sender == "dan@tldrnewsletter.com"
            else []
        )

        result = self.service.process_newsletters(since=self.since)

        self.assertEqual(result.emails_processed, 1)
        self.assertEqual(len(result.errors), 1)
        self.assertIn("bad", result.errors[0])

    @patch.object(IngestionService, "ingest_url")
    @patch("src.ingestion.service.fetch_emails")
    def test_skips_urls_when_disabled(
        self, mock_fetch_emails: MagicMock, mock_ingest: MagicMock
    ) -> None:
        """Should only count URLs when URL processing is disabled."""
        service = IngestionService(
            self.mock_session,
            mail_client=self.mock_client,
            config=IngestionConfig(process_urls=False),
        )
        mock_fetch_emails.side_effect = lambda client, sender, **kwargs: (
            [_message("msg-1", '<a href="https://example.com/one">One</a>')]
            if sender == "dan@tldrnewsletter.com"
            else []
        )

        result = service.process_newsletters(since=self.since)

        self.assertEqual(result.urls_extracted, 1)
        mock_ingest.assert_not_called()


if __name__ == "__main__":
    unittest.main()
