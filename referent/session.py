"""Interactive session state: the parsed article, result cache and progress."""

import logging
from collections.abc import Callable
from enum import Enum

from .cache import CacheKey, ResultCache
from .errors import ReferentError, ValidationError
from .extract.article import ParsedArticle
from .process.schema import ActionKind, CompletionResult

logger = logging.getLogger(__name__)

ArticleParser = Callable[[str], ParsedArticle]
ActionRunner = Callable[[ActionKind, str], CompletionResult]


class SessionState(str, Enum):
    IDLE = "idle"
    PARSING = "parsing"
    READY = "ready"
    PROCESSING = "processing"
    ERROR = "error"


class SessionBusy(ReferentError):
    """Raised when a request arrives while another one is in progress."""

    category = "validation"
    status_code = 409


class Session:
    """
    State machine behind the article UI.

    idle -> parsing -> ready -> processing -> ready
    Failures move to error and keep the article, so another action can be
    tried. clear() returns to idle. Results are cached per article and action
    until the input is cleared or another URL is parsed.
    """

    def __init__(self, parser: ArticleParser, runner: ActionRunner) -> None:
        self._parser = parser
        self._runner = runner
        self.cache = ResultCache()
        self.state = SessionState.IDLE
        self.url: str | None = None
        self.article: ParsedArticle | None = None
        self.active_action: ActionKind | None = None
        self.error: ReferentError | None = None

    @property
    def busy(self) -> bool:
        return self.state in (SessionState.PARSING, SessionState.PROCESSING)

    def _ensure_idle(self) -> None:
        if self.busy:
            raise SessionBusy(f"Session is busy ({self.state.value})")

    def _fail(self, exc: Exception) -> None:
        error = exc if isinstance(exc, ReferentError) else ReferentError(str(exc))
        logger.warning("Session error [%s]: %s", error.category, error.message)
        self.state = SessionState.ERROR
        self.error = error
        self.active_action = None

    def parse(self, url: str) -> ParsedArticle:
        """Parse a new URL, discarding the previous article and its cached results."""
        self._ensure_idle()
        url = url.strip()
        if not url:
            raise ValidationError("URL is required")

        self.cache.clear()
        self.url = url
        self.article = None
        self.error = None
        self.active_action = None
        self.state = SessionState.PARSING

        try:
            article = self._parser(url)
        except Exception as e:
            self._fail(e)
            raise

        self.article = article
        self.state = SessionState.READY
        return article

    def run(self, action: ActionKind) -> CompletionResult:
        """Run an action on the parsed article, using the cache when possible."""
        self._ensure_idle()
        if self.article is None or self.url is None:
            raise ValidationError("Parse an article before running an action")
        if not self.article.has_body:
            raise ValidationError("The article has no content to process")

        key = CacheKey.build(self.url, self.article.title, self.article.body, action)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Using cached %s result", action.value)
            self.state = SessionState.READY
            self.error = None
            return cached

        self.state = SessionState.PROCESSING
        self.active_action = action
        self.error = None

        try:
            result = self._runner(action, self.article.body)
        except Exception as e:
            self._fail(e)
            raise

        self.cache.put(key, result)
        self.state = SessionState.READY
        self.active_action = None
        return result

    def clear(self) -> None:
        """Forget the article, cached results and any error."""
        self.cache.clear()
        self.url = None
        self.article = None
        self.active_action = None
        self.error = None
        self.state = SessionState.IDLE
