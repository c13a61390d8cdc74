"""Newsletter email intake and link extraction."""

from src.newsletters.fetcher import MailClient, fetch_emails, parse_datetime, parse_email
from src.newsletters.links import clean_url, extract_urls, should_include_url
from src.newsletters.models import ExtractedLinks, NewsletterEmail, NewsletterName
from src.newsletters.senders import NEWSLETTER_SENDERS, identify_newsletter, sender_addresses

__all__ = [
    "NEWSLETTER_SENDERS",
    "ExtractedLinks",
    "MailClient",
    "NewsletterEmail",
    "NewsletterName",
    "clean_url",
    "extract_urls",
    "fetch_emails",
    "identify_newsletter",
    "parse_datetime",
    "parse_email",
    "sender_addresses",
]
