"""Embedded English dictionary used for mnemonic connection names."""

from __future__ import annotations

import functools
import logging
from importlib import resources
from typing import List, Tuple

logger = logging.getLogger(__name__)

WORDLIST_FILE = "english.txt"


def parse_words(text: str) -> List[str]:
    """Split *text* into trimmed, non-empty lines."""
    lines = text.replace("\r\n", "\n").split("\n")
    return [line.strip() for line in lines if line.strip()]


@functools.lru_cache(maxsize=None)
def _load_words() -> Tuple[str, ...]:
    text = resources.files(__name__).joinpath(WORDLIST_FILE).read_text(encoding="utf-8")
    words = tuple(parse_words(text))
    logger.debug("Loaded %d dictionary words", len(words))
    return words


def get_words() -> List[str]:
    """Return the dictionary words, parsing the embedded file only once."""
    return list(_load_words())


__all__ = ["get_words", "parse_words"]
