"""Fetching linked pages over HTTP."""

import logging

import requests
from pydantic import BaseModel

from src.ingestion.exceptions import PageFetchError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30
PDF_CONTENT_TYPE = "application/pdf"


class FetchedPage(BaseModel):
    """A fetched page. PDFs carry no text."""

    url: str
    final_url: str
    text: str = ""
    is_pdf: bool = False


def fetch_page(
    url: str,
    *,
    timeout: int = DEFAULT_TIMEOUT,
    user_agent: str | None = None,
) -> FetchedPage:
    """Fetch a page, following redirects.

    :param url: The URL to fetch.
    :param timeout: Request timeout in seconds.
    :param user_agent: Optional User-Agent header.
    :returns: The fetched page.
    :raises PageFetchError: If the request fails or returns an error status.
    """
    headers = {"User-Agent": user_agent} if user_agent else None
    logger.debug(f"Fetching page url={url}, timeout={timeout}s")

    try:
        response = requests.get(url, headers=headers, timeout=timeout, allow_redirects=True)
        response.raise_for_status()
    except requests.HTTPError as e:
        status = e.response.status_code if e.response is not None else "error"
        raise PageFetchError(url, f"HTTP {status}") from e
    except requests.RequestException as e:
        raise PageFetchError(url, str(e)) from e

    content_type = response.headers.get("content-type", "").lower()
    is_pdf = PDF_CONTENT_TYPE in content_type or url.lower().endswith(".pdf")

    logger.debug(
        f"Fetched page url={url}, final_url={response.url}, "
        f"status_code={response.status_code}, is_pdf={is_pdf}"
    )

    return FetchedPage(
        url=url,
        final_url=response.url or url,
        text="" if is_pdf else response.text,
        is_pdf=is_pdf,
    )
