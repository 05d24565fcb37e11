"""Front matter parsing and rendering for bhugo."""

from __future__ import annotations

from collections.abc import Collection

from ..config.schema import BASE_MANAGED_KEYS
from ..models import TransformedNote

DELIMITER = "---"


def parse_custom_front_matter(
    document: bytes | str | None,
    managed_keys: Collection[str] = BASE_MANAGED_KEYS,
) -> list[str]:
    """Collect the front matter lines bhugo does not manage.

    Lines are returned verbatim, in their original order. A document that
    does not open with ``---`` or never closes its front matter yields an
    empty list.

    Args:
        document: Contents of an existing output file.
        managed_keys: Keys that are regenerated and therefore dropped.

    Returns:
        List of custom front matter lines.
    """
    if not document:
        return []
    if isinstance(document, bytes):
        document = document.decode("utf-8", errors="surrogateescape")

    lines = document.split("\n")
    if lines[0] != DELIMITER:
        return []

    custom = []
    for line in lines[1:]:
        key = line.split(":", 1)[0]
        if key in managed_keys:
            continue
        if line == DELIMITER:
            return custom
        custom.append(line)

    # Front matter was never closed.
    return []


def _render_list(values: list[str]) -> str:
    return "[" + ",".join(f'"{value}"' for value in values) + "]"


def render_document(note: TransformedNote) -> str:
    """Render a note into a Hugo document.

    Args:
        note: Transformed note, with custom front matter already attached.

    Returns:
        Front matter followed by the note body.
    """
    lines = [
        DELIMITER,
        f'title: "{note.title}"',
        f"date: {note.date}",
    ]
    if note.categories:
        lines.append(f"categories: {_render_list(note.hashtags)}")
    if note.tags:
        lines.append(f"tags: {_render_list(note.hashtags)}")
    lines.append(f"draft: {'true' if note.draft else 'false'}")
    lines.extend(note.custom_front_matter)
    lines.append(DELIMITER)
    return "\n".join(lines) + "\n" + note.body
