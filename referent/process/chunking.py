"""Splitting long article text into completion-sized chunks."""

import tiktoken

PARAGRAPH_BREAK = "\n\n"
SENTENCE_BREAK = ". "


def count_tokens(text: str, model: str = "gpt-4o-mini") -> int:
    """Count tokens in text using tiktoken."""
    model = model.split("/")[-1]
    try:
        enc = tiktoken.encoding_for_model(model)
    except KeyError:
        enc = tiktoken.get_encoding("cl100k_base")
    return len(enc.encode(text))


def _find_break(text: str, separator: str, floor: int, end: int) -> int | None:
    """Position just after the last separator fully inside [floor, end), if any."""
    index = text.rfind(separator, floor, end)
    if index == -1:
        return None
    return index + len(separator)


def split_text(text: str, max_length: int) -> list[str]:
    """
    Split text into ordered chunks of at most max_length characters.

    Chunk boundaries prefer a paragraph break, then a sentence break, and fall
    back to a hard cut. Breaks are only searched in the back half of each
    window so chunks never become degenerately short. Separators stay with the
    preceding chunk, so "".join(chunks) == text.

    Args:
        text: Full text
        max_length: Maximum chunk length in characters

    Returns:
        Non-empty list of chunks; [text] when len(text) <= max_length
    """
    if max_length <= 0:
        raise ValueError(f"max_length must be positive, got {max_length}")

    if len(text) <= max_length:
        return [text]

    chunks = []
    cursor = 0

    while cursor < len(text):
        end = cursor + max_length

        if end < len(text):
            floor = cursor + (max_length + 1) // 2
            end = (
                _find_break(text, PARAGRAPH_BREAK, floor, end)
                or _find_break(text, SENTENCE_BREAK, floor, end)
                or end
            )
        else:
            end = len(text)

        chunks.append(text[cursor:end])
        cursor = end

    return chunks
