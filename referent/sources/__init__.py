"""Source modules for fetching article pages."""

from .web import FetchedPage, fetch_page, parse_url

__all__ = ["FetchedPage", "fetch_page", "parse_url"]
