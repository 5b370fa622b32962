"""Action dispatch with chunked execution and reconciliation of partial results."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from .chunking import split_text
from .completion import CompletionClient
from .prompts import (
    CHUNK_NOTE,
    IMAGE_PROMPT_SYSTEM,
    MERGE_SUMMARY_SYSTEM,
    MERGE_TELEGRAM_SYSTEM,
    MERGE_THESIS_SYSTEM,
    SUMMARY_SYSTEM,
    TELEGRAM_SYSTEM,
    THESIS_SYSTEM,
    TRANSLATE_CHUNK_NOTE,
    TRANSLATE_SYSTEM,
)
from .schema import MERGEABLE_ACTIONS, ActionKind, CompletionResult, Usage

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_THRESHOLD = 80_000


@dataclass(frozen=True)
class ActionSpec:
    """System prompt and generation parameters for one action."""

    system_prompt: str
    temperature: float
    max_tokens: int
    chunk_note: str = CHUNK_NOTE


@dataclass(frozen=True)
class MergeSpec:
    """How partial results of one action are combined."""

    system_prompt: str
    separator: str


ACTION_SPECS: dict[ActionKind, ActionSpec] = {
    ActionKind.SUMMARY: ActionSpec(SUMMARY_SYSTEM, temperature=0.7, max_tokens=2000),
    ActionKind.THESIS: ActionSpec(THESIS_SYSTEM, temperature=0.7, max_tokens=2000),
    ActionKind.TELEGRAM: ActionSpec(TELEGRAM_SYSTEM, temperature=0.7, max_tokens=2000),
    ActionKind.TRANSLATE: ActionSpec(
        TRANSLATE_SYSTEM, temperature=0.3, max_tokens=4000, chunk_note=TRANSLATE_CHUNK_NOTE
    ),
    ActionKind.IMAGE_PROMPT: ActionSpec(IMAGE_PROMPT_SYSTEM, temperature=0.7, max_tokens=300),
}

MERGE_SPECS: dict[ActionKind, MergeSpec] = {
    ActionKind.SUMMARY: MergeSpec(MERGE_SUMMARY_SYSTEM, separator="\n\n"),
    ActionKind.THESIS: MergeSpec(MERGE_THESIS_SYSTEM, separator="\n"),
    ActionKind.TELEGRAM: MergeSpec(MERGE_TELEGRAM_SYSTEM, separator="\n\n"),
}


@dataclass
class DispatchOptions:
    """Options for running an action."""

    language: str = "Russian"
    chunk_threshold: int = DEFAULT_CHUNK_THRESHOLD


def system_prompt_for(action: ActionKind, language: str) -> str:
    return ACTION_SPECS[action].system_prompt.format(language=language)


def reconcile(
    client: CompletionClient,
    action: ActionKind,
    partials: Sequence[str],
    language: str = "Russian",
) -> CompletionResult:
    """
    Merge ordered per-chunk outputs of one action with a single synthesis call.

    The synthesis call uses the action's generation parameters, the merge
    instruction as system content and the joined partials as user content.
    Failures propagate; there is no concatenation fallback.

    Raises:
        ValueError: The action has no merge instruction
    """
    if action not in MERGE_SPECS:
        raise ValueError(f"Action {action.value!r} cannot be reconciled")

    merge = MERGE_SPECS[action]
    spec = ACTION_SPECS[action]
    logger.info("Reconciling %d partial %s results", len(partials), action.value)

    return client.complete(
        merge.system_prompt.format(language=language),
        merge.separator.join(partials),
        temperature=spec.temperature,
        max_tokens=spec.max_tokens,
    )


def _run_chunks(
    client: CompletionClient,
    action: ActionKind,
    chunks: list[str],
    language: str,
) -> list[CompletionResult]:
    """Call the completion service once per chunk, in order."""
    spec = ACTION_SPECS[action]
    base_prompt = system_prompt_for(action, language)
    results = []

    for i, chunk in enumerate(chunks):
        logger.info(
            "Processing %s chunk %d/%d (%d chars)", action.value, i + 1, len(chunks), len(chunk)
        )
        system = base_prompt + spec.chunk_note.format(index=i + 1, total=len(chunks))
        results.append(
            client.complete(system, chunk, temperature=spec.temperature, max_tokens=spec.max_tokens)
        )

    return results


def run_action(
    client: CompletionClient,
    action: ActionKind,
    text: str,
    options: DispatchOptions | None = None,
) -> CompletionResult:
    """
    Run an action on article text, chunking long texts.

    Short texts take one completion call whose result is returned unchanged.
    Long texts are split, processed chunk by chunk and then combined:
    summaries, theses and posts are reconciled by one more call, translations
    are joined in order, and image prompts only use the first chunk.

    For chunked runs the usage counters of every call are summed and the
    model is the one reported by the last call.

    Args:
        client: Completion client
        action: Action to run
        text: Full article text
        options: Language and chunk threshold
    """
    options = options or DispatchOptions()
    spec = ACTION_SPECS[action]

    if len(text) <= options.chunk_threshold:
        return client.complete(
            system_prompt_for(action, options.language),
            text,
            temperature=spec.temperature,
            max_tokens=spec.max_tokens,
        )

    chunks = split_text(text, options.chunk_threshold)
    logger.info("Text of %d chars split into %d chunks", len(text), len(chunks))

    if action is ActionKind.IMAGE_PROMPT:
        return client.complete(
            system_prompt_for(action, options.language),
            chunks[0],
            temperature=spec.temperature,
            max_tokens=spec.max_tokens,
        )

    partials = _run_chunks(client, action, chunks, options.language)
    usage = sum((p.usage for p in partials), Usage())

    if action in MERGEABLE_ACTIONS:
        merged = reconcile(client, action, [p.text for p in partials], options.language)
        return CompletionResult(
            text=merged.text,
            model=merged.model,
            usage=usage + merged.usage,
            chunks=len(chunks),
        )

    return CompletionResult(
        text="\n\n".join(p.text.strip() for p in partials),
        model=partials[-1].model,
        usage=usage,
        chunks=len(chunks),
    )
