"""Web page fetching utilities."""

import logging
from dataclasses import dataclass

import httpx

from ..errors import FetchTimeoutError, NetworkError, UpstreamError, ValidationError
from ..extract.article import ParsedArticle, extract_article

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}


@dataclass
class FetchedPage:
    """Result of a page fetch."""

    url: str
    status_code: int
    html: str


def fetch_page(url: str, timeout: float = DEFAULT_TIMEOUT) -> FetchedPage:
    """
    Download a page and return its HTML.

    Args:
        url: Page URL
        timeout: Upper bound in seconds for the whole request

    Raises:
        FetchTimeoutError: The page did not answer within the timeout
        NetworkError: DNS, connection or protocol failure
        UpstreamError: The page answered with a non-2xx status
    """
    logger.info("Fetching %s", url)
    try:
        with httpx.Client(
            follow_redirects=True, timeout=timeout, headers=BROWSER_HEADERS
        ) as client:
            response = client.get(url)
    except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
        raise ValidationError(f"Invalid URL: {url}") from e
    except httpx.TimeoutException as e:
        raise FetchTimeoutError(f"Timed out after {timeout:.0f}s fetching {url}") from e
    except httpx.HTTPError as e:
        raise NetworkError(f"Failed to fetch URL: {e}") from e

    if not response.is_success:
        logger.warning("Fetching %s returned %s", url, response.status_code)
        raise UpstreamError(
            f"Failed to fetch URL: {response.reason_phrase}",
            status_code=response.status_code,
        )

    return FetchedPage(url=str(response.url), status_code=response.status_code, html=response.text)


def parse_url(url: str, timeout: float = DEFAULT_TIMEOUT) -> ParsedArticle:
    """Fetch a page and extract its article."""
    page = fetch_page(url, timeout=timeout)
    return extract_article(page.html)
