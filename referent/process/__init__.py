"""AI processing modules."""

from .chunking import count_tokens, split_text
from .completion import CompletionClient
from .dispatch import (
    ACTION_SPECS,
    MERGE_SPECS,
    ActionSpec,
    DispatchOptions,
    reconcile,
    run_action,
)
from .schema import MERGEABLE_ACTIONS, ActionKind, ActionRequest, CompletionResult, Usage

__all__ = [
    "ACTION_SPECS",
    "MERGEABLE_ACTIONS",
    "MERGE_SPECS",
    "ActionKind",
    "ActionRequest",
    "ActionSpec",
    "CompletionClient",
    "CompletionResult",
    "DispatchOptions",
    "Usage",
    "count_tokens",
    "reconcile",
    "run_action",
    "split_text",
]
