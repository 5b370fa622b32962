"""In-memory result cache for one interactive session."""

import hashlib
from dataclasses import dataclass

from .process.schema import ActionKind, CompletionResult

FINGERPRINT_PREFIX = 500


def fingerprint(source: str, title: str, body: str, prefix: int = FINGERPRINT_PREFIX) -> str:
    """Derive a short content fingerprint from source, title and the start of the body."""
    content = "\n".join([source, title, body[:prefix]]).encode("utf-8")
    return hashlib.sha256(content).hexdigest()[:16]


@dataclass(frozen=True)
class CacheKey:
    """Composite key of a cached action result."""

    source: str
    title: str
    fingerprint: str
    action: ActionKind

    @classmethod
    def build(cls, source: str, title: str, body: str, action: ActionKind) -> "CacheKey":
        return cls(source, title, fingerprint(source, title, body), action)


class ResultCache:
    """
    Action results keyed by CacheKey.

    There is no eviction; the cache lives as long as the session and is cleared
    wholesale when the input is cleared or a new URL is parsed.
    """

    def __init__(self) -> None:
        self._entries: dict[CacheKey, CompletionResult] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: CacheKey) -> bool:
        return key in self._entries

    def get(self, key: CacheKey) -> CompletionResult | None:
        return self._entries.get(key)

    def put(self, key: CacheKey, result: CompletionResult) -> None:
        self._entries[key] = result

    def clear(self) -> int:
        """Drop every entry, returning how many were removed."""
        count = len(self._entries)
        self._entries.clear()
        return count
