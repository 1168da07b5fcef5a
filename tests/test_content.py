"""Tests for the random content corpus and id generation."""

import random

import pytest

from mockai.services.content import DEFAULT_SENTENCES, RandomContent, count_tokens
from mockai.utils.ids import generate_id


def test_default_corpus_is_used_without_file() -> None:
    content = RandomContent.load()

    assert len(content) == len(DEFAULT_SENTENCES)
    assert content.sentence() in DEFAULT_SENTENCES


def test_load_from_file_skips_blank_lines(tmp_path) -> None:
    corpus = tmp_path / "corpus.txt"
    corpus.write_text("First line.\n\n   \nSecond line.\n", encoding="utf-8")

    content = RandomContent.load(corpus)

    assert len(content) == 2
    assert content.sentence() in {"First line.", "Second line."}


def test_empty_file_is_rejected(tmp_path) -> None:
    corpus = tmp_path / "empty.txt"
    corpus.write_text("\n\n", encoding="utf-8")

    with pytest.raises(ValueError):
        RandomContent.load(corpus)


def test_paragraph_respects_word_cap() -> None:
    content = RandomContent(rng=random.Random(7))

    for _ in range(20):
        assert count_tokens(content.paragraph(max_words=4)) <= 4


def test_generate_id_prefix_and_length() -> None:
    value = generate_id("chatcmpl", 10)

    assert value.startswith("chatcmpl-")
    assert len(value) == len("chatcmpl-") + 10
    assert value[len("chatcmpl-"):].isalnum()
    assert generate_id("file") != generate_id("file")


def test_zero_byte_file_is_rejected(tmp_path) -> None:
    corpus = tmp_path / "blank.txt"
    corpus.write_text("", encoding="utf-8")

    with pytest.raises(ValueError):
        RandomContent.load(corpus)
