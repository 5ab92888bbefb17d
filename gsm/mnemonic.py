"""Deterministic, human readable names derived from a secret key."""

from __future__ import annotations

import hashlib
from typing import Sequence

DEFAULT_WORD_COUNT = 3
FALLBACK_PREFIX = "GsConn-"
FALLBACK_KEY_CHARS = 8

# Number of leading hex digits of the digest used as the selection seed.
SEED_HEX_DIGITS = 15


def generate_mnemonic(secret: str, word_count: int, dictionary: Sequence[str]) -> str:
    """
    Return a mnemonic name for *secret* built from *word_count* dictionary words.

    The first 15 hex digits of the MD5 digest of the secret form a seed; each
    word is picked with ``seed % len(dictionary)`` before the seed is divided
    by the dictionary size. Words are capitalised and joined without a
    separator. Once the seed reaches zero every further pick is the first
    dictionary word.

    Raises:
        ValueError: if ``word_count`` is not positive or the dictionary is empty.
    """
    if word_count <= 0:
        raise ValueError("number of words must be greater than 0")
    if not dictionary:
        raise ValueError("dictionary is empty")

    size = len(dictionary)
    hex_hash = hashlib.md5(secret.encode("utf-8")).hexdigest()
    seed = int(hex_hash[:SEED_HEX_DIGITS], 16)

    parts = []
    for _ in range(word_count):
        word = dictionary[seed % size]
        if word:
            word = word[0].upper() + word[1:]
        parts.append(word)
        seed //= size
    return "".join(parts)


def fallback_name(key: str) -> str:
    """Name used when a mnemonic cannot be generated for *key*."""
    return FALLBACK_PREFIX + key[:FALLBACK_KEY_CHARS]


__all__ = ["generate_mnemonic", "fallback_name", "DEFAULT_WORD_COUNT"]
