"""Hashtag extraction from a note's tag line."""

from __future__ import annotations

import re
from enum import Enum, auto

_WORD_RE = re.compile(r"\w+(?:['’]\w+)*")


class ScanState(Enum):
    """States of the tag line scanner."""

    OUTSIDE = auto()
    IN_HASH = auto()
    PENDING_MULTI_WORD = auto()


def title_case(text: str) -> str:
    """Upper-case the first character of every word and lower-case the rest.

    Apostrophes inside a word do not start a new word, so ``don't`` becomes
    ``Don't`` rather than ``Don'T``.
    """
    return _WORD_RE.sub(lambda m: m.group(0)[:1].upper() + m.group(0)[1:].lower(), text)


def format_tag(span: str, prefix: str) -> str:
    """Turn a raw hashtag span into its display form.

    Args:
        span: Text between the opening ``#`` and the end of the tag.
        prefix: Note tag prefix to strip, e.g. ``blog`` for ``#blog/finance``.

    Returns:
        Title-cased tag without the prefix segment.
    """
    tag = span.strip().removesuffix("#")
    return title_case(tag.removeprefix(prefix + "/"))


def scan_tags(line: bytes | str, prefix: str, omit_others: bool = False) -> list[str]:
    """Extract hashtags from a single line.

    Bear hashtags come in two forms: ``#single`` ends at whitespace, while a
    multi-word tag is closed with a trailing hash (``#multi word tag#``). A
    space followed by another ``#`` always ends the current tag.

    Args:
        line: The tag line, raw bytes are decoded as UTF-8.
        prefix: Note tag prefix stripped from each tag.
        omit_others: If True, drop tags that do not start with the prefix.

    Returns:
        Formatted tags in the order they appear. Empty tags are dropped.
    """
    text = line.decode("utf-8", errors="replace") if isinstance(line, bytes) else line

    hashtags: list[str] = []
    state = ScanState.OUTSIDE
    start = end = 0
    prev: str | None = None

    def close() -> None:
        raw = text[start:end]
        if omit_others and not raw.startswith(prefix):
            return
        tag = format_tag(raw, prefix)
        if tag:
            hashtags.append(tag)

    for i, char in enumerate(text):
        peek = text[i + 1] if i + 1 < len(text) else None

        if char == "#" and prev in (None, " ") and state is ScanState.OUTSIDE:
            start = end = i + 1
            state = ScanState.IN_HASH
        elif char == "#" and prev != " ":
            # Closing hash of a multi-word tag.
            end = i
        elif state is not ScanState.OUTSIDE and char == " " and peek != "#":
            # Either a multi-word tag or trailing text, remember where the tag could end.
            end = i
            state = ScanState.PENDING_MULTI_WORD
        elif state is not ScanState.OUTSIDE and char == " ":
            close()
            state = ScanState.OUTSIDE
        elif state is not ScanState.PENDING_MULTI_WORD:
            end = i + 1

        prev = char

    if state is not ScanState.OUTSIDE:
        close()

    return hashtags


def is_draft(hashtags: list[str]) -> bool:
    """Check whether any tag marks the note as a draft."""
    return any("draft" in tag.lower() for tag in hashtags)
