"""Fetching newsletter emails from a Graph-style mail API."""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any, Protocol

from requests import Response

from src.newsletters.models import NewsletterEmail
from src.newsletters.senders import identify_newsletter

logger = logging.getLogger(__name__)

DEFAULT_LOOKBACK_HOURS = 24
DEFAULT_LIMIT = 50


class MailClient(Protocol):
    """An authenticated client for the mailbox holding the newsletters."""

    def get(self, endpoint: str, params: dict[str, Any] | None = None) -> Response:
        """Make a GET request against the mail API."""
        ...


def parse_datetime(dt_string: str) -> datetime:
    """Parse an ISO 8601 datetime string from the mail API.

    :param dt_string: ISO 8601 datetime string (e.g., "2024-01-15T10:30:00Z").
    :returns: A timezone-aware datetime object.
    """
    if dt_string.endswith("Z"):
        dt_string = dt_string[:-1] + "+00:00"
    return datetime.fromisoformat(dt_string)


def parse_email(message: dict[str, Any]) -> NewsletterEmail:
    """Convert a raw mail API message into a NewsletterEmail.

    :param message: The raw message dict.
    :returns: The email with its newsletter identified from the sender.
    """
    sender_info = message.get("from", {}).get("emailAddress", {})
    sender_name = sender_info.get("name", "")
    sender_email = sender_info.get("address", "")

    return NewsletterEmail(
        email_id=message.get("id", ""),
        subject=message.get("subject", ""),
        sender_name=sender_name,
        sender_email=sender_email,
        received_at=parse_datetime(message.get("receivedDateTime", "")),
        body=message.get("body", {}).get("content", ""),
        newsletter=identify_newsletter(f"{sender_name} <{sender_email}>"),
    )


def fetch_emails(
    mail_client: MailClient,
    sender_email: str,
    *,
    since: datetime | None = None,
    limit: int = DEFAULT_LIMIT,
) -> list[dict[str, Any]]:
    """Fetch emails from a specific sender.

    :param mail_client: An authenticated mail client.
    :param sender_email: The sender email address to filter by.
    :param since: Only fetch emails received after this datetime.
        Defaults to 24 hours ago.
    :param limit: Maximum number of emails to fetch.
    :returns: A list of raw email message dicts.
    :raises requests.RequestException: If the API request fails.
    """
    if since is None:
        since = datetime.now(UTC) - timedelta(hours=DEFAULT_LOOKBACK_HOURS)

    since_iso = since.isoformat()

    logger.info(f"Fetching emails from {sender_email} since {since_iso} (limit={limit})")

    # receivedDateTime must come first for the API to use its index
    filter_query = (
        f"receivedDateTime ge {since_iso} and from/emailAddress/address eq '{sender_email}'"
    )

    response = mail_client.get(
        "mailFolders/Inbox/messages",
        params={
            "$filter": filter_query,
            "$select": "id,subject,from,receivedDateTime,body",
            "$top": str(limit),
            "$orderby": "receivedDateTime desc",
        },
    )
    response.raise_for_status()

    messages = response.json().get("value", [])
    logger.info(f"Fetched {len(messages)} email(s) from {sender_email}")

    return messages
