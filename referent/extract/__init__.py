"""Article extraction modules."""

from .article import (
    CONTENT_NOT_FOUND,
    TITLE_NOT_FOUND,
    ParsedArticle,
    extract_article,
    first_match,
)

__all__ = [
    "CONTENT_NOT_FOUND",
    "TITLE_NOT_FOUND",
    "ParsedArticle",
    "extract_article",
    "first_match",
]
