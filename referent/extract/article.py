"""Best-effort article extraction from arbitrary HTML."""

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from bs4 import BeautifulSoup, Tag

TITLE_NOT_FOUND = "Title not found"
CONTENT_NOT_FOUND = "Content not found"

# Ordered fallback chains, most precise first
TITLE_SELECTORS = (
    "h1",
    "article h1",
    ".post-title",
    ".article-title",
    '[itemprop="headline"]',
    'meta[property="og:title"]',
    "title",
)

DATE_SELECTORS = (
    "time[datetime]",
    "time",
    '[itemprop="datePublished"]',
    ".date",
    ".published",
    ".post-date",
    ".article-date",
    'meta[property="article:published_time"]',
    'meta[name="publish-date"]',
)

BODY_SELECTORS = (
    "article",
    ".post",
    ".content",
    ".article-content",
    ".post-content",
    '[itemprop="articleBody"]',
    "main article",
    ".entry-content",
)

NOISE_SELECTOR = "script, style, nav, aside, .advertisement, .ads, .sidebar"
TEXT_BLOCK_SELECTOR = "p, h1, h2, h3, h4, h5, h6, li"

MIN_CONTENT_LENGTH = 100
MIN_PARAGRAPH_LENGTH = 50
MAX_FALLBACK_PARAGRAPHS = 10


@dataclass(frozen=True)
class ParsedArticle:
    """Article data extracted from a page."""

    title: str
    published_at: str | None
    body: str

    @property
    def has_title(self) -> bool:
        return self.title != TITLE_NOT_FOUND

    @property
    def has_body(self) -> bool:
        return self.body != CONTENT_NOT_FOUND

    def to_dict(self) -> dict[str, str | None]:
        """Wire form used by the HTTP API."""
        return {"title": self.title, "date": self.published_at, "content": self.body}


def first_match(chain: Iterable[str], probe: Callable[[str], str | None]) -> str | None:
    """Return the first non-empty probe result along an ordered chain."""
    for item in chain:
        value = probe(item)
        if value:
            return value
    return None


def _meta_content(soup: BeautifulSoup, selector: str) -> str | None:
    tag = soup.select_one(selector)
    if tag is None:
        return None
    content = tag.get("content")
    return content.strip() if isinstance(content, str) else None


def _probe_title(soup: BeautifulSoup, selector: str) -> str | None:
    if selector.startswith("meta"):
        return _meta_content(soup, selector)
    element = soup.select_one(selector)
    return element.get_text().strip() if element is not None else None


def _probe_date(soup: BeautifulSoup, selector: str) -> str | None:
    if selector.startswith("meta"):
        return _meta_content(soup, selector)
    element = soup.select_one(selector)
    if element is None:
        return None
    datetime_attr = element.get("datetime")
    if isinstance(datetime_attr, str) and datetime_attr.strip():
        return datetime_attr.strip()
    return element.get_text().strip()


def _container_text(container: Tag) -> str:
    """Collect paragraph, heading and list text of a container, noise removed."""
    for noise in container.select(NOISE_SELECTOR):
        noise.decompose()

    blocks = (el.get_text().strip() for el in container.select(TEXT_BLOCK_SELECTOR))
    return "\n\n".join(block for block in blocks if block).strip()


def _paragraphs(soup: BeautifulSoup, min_length: int) -> str:
    texts = [p.get_text().strip() for p in soup.find_all("p")]
    selected = [text for text in texts if text and len(text) > min_length]
    return "\n\n".join(selected[:MAX_FALLBACK_PARAGRAPHS])


def _extract_body(soup: BeautifulSoup) -> str | None:
    short_texts: list[str] = []

    def probe(selector: str) -> str | None:
        container = soup.select_one(selector)
        if container is None:
            return None
        text = _container_text(container)
        if len(text) < MIN_CONTENT_LENGTH:
            short_texts.append(text)
            return None
        return text

    body = first_match(BODY_SELECTORS, probe)
    if body:
        return body

    # No article container: fall back to long paragraphs, then any paragraphs
    body = _paragraphs(soup, MIN_PARAGRAPH_LENGTH) or _paragraphs(soup, 0)
    if body:
        return body

    return max(short_texts, key=len, default=None)


def extract_article(html: str) -> ParsedArticle:
    """
    Extract title, publish date and body text from raw HTML.

    Never raises on malformed markup. Fields that cannot be located are set to
    TITLE_NOT_FOUND, None and CONTENT_NOT_FOUND respectively. The date is
    returned verbatim and is not parsed.
    """
    soup = BeautifulSoup(html, "html.parser")

    title = first_match(TITLE_SELECTORS, lambda sel: _probe_title(soup, sel))
    published_at = first_match(DATE_SELECTORS, lambda sel: _probe_date(soup, sel))
    body = _extract_body(soup)

    return ParsedArticle(
        title=title or TITLE_NOT_FOUND,
        published_at=published_at or None,
        body=body or CONTENT_NOT_FOUND,
    )
