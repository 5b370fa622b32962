"""Action and result types for AI processing."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, StrictStr


class ActionKind(str, Enum):
    """Transformations that can be applied to article text."""

    SUMMARY = "summary"
    THESIS = "thesis"
    TELEGRAM = "telegram"
    TRANSLATE = "translate"
    IMAGE_PROMPT = "image_prompt"


# Actions whose per-chunk outputs are merged by a synthesis call
MERGEABLE_ACTIONS = frozenset({ActionKind.SUMMARY, ActionKind.THESIS, ActionKind.TELEGRAM})


class ActionRequest(BaseModel):
    """A user-triggered action on article text."""

    action: ActionKind
    text: StrictStr = Field(min_length=1)


@dataclass
class Usage:
    """Token usage counters reported by the completion service."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    def __add__(self, other: "Usage") -> "Usage":
        return Usage(
            prompt_tokens=self.prompt_tokens + other.prompt_tokens,
            completion_tokens=self.completion_tokens + other.completion_tokens,
            total_tokens=self.total_tokens + other.total_tokens,
        )

    @classmethod
    def from_response(cls, usage: Any) -> "Usage":
        """Build from an SDK usage object, tolerating missing counters."""
        if usage is None:
            return cls()
        return cls(
            prompt_tokens=getattr(usage, "prompt_tokens", 0) or 0,
            completion_tokens=getattr(usage, "completion_tokens", 0) or 0,
            total_tokens=getattr(usage, "total_tokens", 0) or 0,
        )


@dataclass
class CompletionResult:
    """Text produced by one action, with the model and token usage behind it."""

    text: str
    model: str
    usage: Usage = field(default_factory=Usage)
    chunks: int = 1
