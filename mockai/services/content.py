"""Random text used to fill mock responses.

The corpus is loaded once at startup, either from a text file (one sentence
per line) or from the built-in sentences below.
"""

from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Sequence

logger = logging.getLogger(__name__)

DEFAULT_SENTENCES: tuple[str, ...] = (
    "This is a mock response generated for testing purposes.",
    "The quick brown fox jumps over the lazy dog.",
    "Lorem ipsum dolor sit amet, consectetur adipiscing elit.",
    "Sed do eiusmod tempor incididunt ut labore et dolore magna aliqua.",
    "Ut enim ad minim veniam, quis nostrud exercitation ullamco laboris.",
    "Duis aute irure dolor in reprehenderit in voluptate velit esse.",
    "Excepteur sint occaecat cupidatat non proident.",
    "Mock servers make integration tests fast and deterministic.",
    "Every request is answered without calling a real model.",
    "Latency and throttling can be simulated through configuration.",
)


class RandomContent:
    """Pick random sentences and paragraphs from a fixed corpus."""

    def __init__(self, sentences: Sequence[str] | None = None, *, rng: random.Random | None = None) -> None:
        corpus = [s.strip() for s in (DEFAULT_SENTENCES if sentences is None else sentences) if s and s.strip()]
        if not corpus:
            raise ValueError("content corpus must contain at least one sentence")
        self._sentences = tuple(corpus)
        self._rng = rng or random.Random()

    @classmethod
    def load(cls, path: str | Path | None = None) -> "RandomContent":
        """Load the corpus from ``path``, or use the built-in sentences.

        Raises:
            OSError: If ``path`` is given but cannot be read.
            ValueError: If the file holds no sentences.
        """
        if path is None:
            return cls()

        lines = Path(path).read_text(encoding="utf-8").splitlines()
        content = cls(lines)
        logger.info("content.loaded", extra={"file": str(path), "sentences": len(content)})
        return content

    def __len__(self) -> int:
        return len(self._sentences)

    def sentence(self) -> str:
        return self._rng.choice(self._sentences)

    def paragraph(self, max_words: int | None = None) -> str:
        """Return a few sentences, truncated to ``max_words`` words when given."""
        text = " ".join(self.sentence() for _ in range(self._rng.randint(2, 5)))
        if max_words is not None and max_words > 0:
            text = " ".join(text.split()[:max_words])
        return text

    def random_float(self) -> float:
        return self._rng.uniform(-1.0, 1.0)


def count_tokens(text: str) -> int:
    """Rough token count used for mock ``usage`` blocks."""
    return len(text.split())
