"""
Batch import of connections from ``KEY[#tag1,tag2]`` entries.

A single secret can be imported from the command line, or many from a text
file holding one entry per line. Names are always generated with the
mnemonic namer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from .config import Connection, ConnectionStore
from .mnemonic import DEFAULT_WORD_COUNT, generate_mnemonic

logger = logging.getLogger(__name__)

KEY_PREVIEW_CHARS = 8


class ImportFailed(Exception):
    """Raised when an import cannot proceed at all."""


@dataclass
class ImportReport:
    prepared: List[Connection] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


def is_base62(char: str) -> bool:
    return char.isalnum()


def shorten(text: str, max_len: int) -> str:
    if len(text) > max_len:
        return text[: max_len - 3] + "..."
    return text


def key_preview(key: str) -> str:
    return key[:KEY_PREVIEW_CHARS]


def parse_key_and_tags(text: str) -> Tuple[str, List[str]]:
    """Split ``KEY#tag1,tag2`` into the key and its cleaned tag list."""
    key, sep, raw_tags = text.partition("#")
    tags: List[str] = []
    if sep:
        for tag in raw_tags.split(","):
            tag = tag.strip()
            if tag:
                tags.append(tag)
    return key.strip(), tags


def extract_candidates(lines: Iterable[str], report: Optional[ImportReport] = None) -> List[str]:
    """
    Return the ``KEY[#tags]`` part of every usable line.

    Blank lines are ignored. Lines not starting with an alphanumeric
    character are skipped, and only the text before the first space or tab
    is kept.
    """
    candidates: List[str] = []
    for line_num, original in enumerate(lines, 1):
        original = original.rstrip("\r\n")
        trimmed = original.strip()
        if not trimmed:
            continue
        if not is_base62(trimmed[0]):
            if report is not None:
                report.skipped.append(
                    f'Line {line_num} does not start with alphanumeric char: "{shorten(original, 30)}"'
                )
            continue
        candidates.append(trimmed.split(None, 1)[0])
    return candidates


def prepare_secret(
    store: ConnectionStore,
    secret: str,
    dictionary: Sequence[str],
    *,
    word_count: int = DEFAULT_WORD_COUNT,
) -> ImportReport:
    """Prepare a single secret given on the command line.

    Raises:
        ImportFailed: for an unusable key, a naming failure or a name collision.
    """
    candidate = (secret or "").strip()
    if not candidate or not is_base62(candidate[0]):
        raise ImportFailed(
            "Secret key provided via --secret must start with an alphanumeric character and not be empty."
        )
    key, tags = parse_key_and_tags(candidate)
    if not key:
        raise ImportFailed("Provided secret key via --secret is effectively empty after parsing.")

    try:
        name = generate_mnemonic(key, word_count, dictionary)
    except ValueError as exc:
        raise ImportFailed(f"Error generating mnemonic for key '{key_preview(key)}...': {exc}") from exc

    if any(conn.name == name for conn in store.get_current()):
        raise ImportFailed(f"Auto-generated name '{name}' (for key '{key_preview(key)}...') already exists.")

    report = ImportReport()
    report.prepared.append(Connection(name=name, key=key, tags=tags))
    return report


def prepare_lines(
    store: ConnectionStore,
    lines: Iterable[str],
    dictionary: Sequence[str],
    *,
    word_count: int = DEFAULT_WORD_COUNT,
) -> ImportReport:
    """Prepare every usable entry of an import file, skipping bad ones."""
    report = ImportReport()
    candidates = extract_candidates(lines, report)

    seen_keys: Set[str] = set()
    taken_names = {conn.name for conn in store.get_current()}

    for index, candidate in enumerate(candidates, 1):
        key, tags = parse_key_and_tags(candidate)
        if not key:
            report.skipped.append(f"Empty key from parsed line (original index {index}): '{candidate}'")
            continue
        if key in seen_keys:
            report.skipped.append(f"Duplicate key '{key_preview(key)}...' from file batch.")
            continue
        seen_keys.add(key)

        try:
            name = generate_mnemonic(key, word_count, dictionary)
        except ValueError as exc:
            report.errors.append(f"Error generating mnemonic for key '{key_preview(key)}...': {exc}. Skipping.")
            continue

        if name in taken_names:
            report.errors.append(
                f"Auto-generated name '{name}' (for key '{key_preview(key)}...') already exists. Skipping."
            )
            continue

        taken_names.add(name)
        report.prepared.append(Connection(name=name, key=key, tags=tags))
    return report


def prepare_file(
    store: ConnectionStore,
    path: str,
    dictionary: Sequence[str],
    *,
    word_count: int = DEFAULT_WORD_COUNT,
) -> ImportReport:
    """Read *path* and prepare its entries.

    Raises:
        ImportFailed: if the file cannot be opened.
    """
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            lines = f.readlines()
    except OSError as exc:
        raise ImportFailed(f"Error opening file '{path}': {exc}") from exc
    return prepare_lines(store, lines, dictionary, word_count=word_count)


def commit(store: ConnectionStore, report: ImportReport) -> int:
    """Add every prepared connection and save once. Returns the number added."""
    if not report.prepared:
        return 0
    with store.transaction():
        for conn in report.prepared:
            store.add_connection(conn)
        store.save()
    logger.info("Imported %d connection(s)", len(report.prepared))
    return len(report.prepared)


__all__ = [
    "ImportFailed",
    "ImportReport",
    "commit",
    "extract_candidates",
    "parse_key_and_tags",
    "prepare_file",
    "prepare_lines",
    "prepare_secret",
]
