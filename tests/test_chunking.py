"""Tests for text chunking."""

import random

import pytest

from referent.process.chunking import split_text


def _sample_text(seed: int) -> str:
    rng = random.Random(seed)
    pieces = ["word", "Sentence ends. ", "\n\n", "x" * 30, ". ", "long-token" * 5, " "]
    return "".join(rng.choice(pieces) for _ in range(400))


class TestSplitText:
    """Tests for split_text."""

    def test_short_text_single_chunk(self) -> None:
        text = "This is a short text."
        assert split_text(text, 100) == [text]

    def test_exact_length_single_chunk(self) -> None:
        text = "a" * 50
        assert split_text(text, 50) == [text]

    def test_empty_text(self) -> None:
        assert split_text("", 10) == [""]

    def test_invalid_max_length(self) -> None:
        with pytest.raises(ValueError):
            split_text("text", 0)

    def test_hard_cut_without_breaks(self) -> None:
        text = "a" * 90_000
        chunks = split_text(text, 80_000)
        assert len(chunks) == 2
        assert len(chunks[0]) == 80_000
        assert len(chunks[1]) == 10_000

    def test_prefers_paragraph_break(self) -> None:
        text = "a" * 70 + "\n\n" + "b" * 10 + ". " + "c" * 50
        chunks = split_text(text, 100)
        assert chunks[0] == "a" * 70 + "\n\n"

    def test_sentence_break_when_no_paragraph(self) -> None:
        text = "a" * 70 + ". " + "b" * 60
        chunks = split_text(text, 100)
        assert chunks == ["a" * 70 + ". ", "b" * 60]

    def test_ignores_breaks_in_front_half(self) -> None:
        text = "a" * 20 + "\n\n" + "b" * 20 + ". " + "c" * 100
        chunks = split_text(text, 100)
        assert len(chunks[0]) == 100

    def test_odd_window_break_must_reach_half(self) -> None:
        text = "abc. " + "x" * 10
        chunks = split_text(text, 7)
        assert chunks == ["abc. xx", "x" * 7, "x"]

    @pytest.mark.parametrize("seed", range(5))
    @pytest.mark.parametrize("max_length", [1, 7, 64, 500])
    def test_concatenation_reproduces_text(self, seed: int, max_length: int) -> None:
        text = _sample_text(seed)
        chunks = split_text(text, max_length)
        assert "".join(chunks) == text
        assert all(len(chunk) <= max_length for chunk in chunks)
        assert all(chunks)
