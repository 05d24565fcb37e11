"""Turn raw Bear notes into notes ready for rendering."""

from __future__ import annotations

from datetime import tzinfo

from ..config import Config
from ..models import Note, TransformedNote
from .dates import format_creation_date
from .tags import is_draft, scan_tags

_SMART_QUOTES = {"“": '"', "”": '"'}


def normalize_quotes(text: str) -> str:
    """Replace curly double quotes with straight ones."""
    for smart, plain in _SMART_QUOTES.items():
        text = text.replace(smart, plain)
    return text


def slugify(title: str) -> str:
    """Directory name for a note: lower-cased title with spaces turned into hyphens."""
    return title.lower().replace(" ", "-")


def resolve_tag_line(lines: list[str], tag_line: int) -> tuple[list[str], int | None]:
    """Find the index of the tag line.

    A negative ``tag_line`` counts from the end, ignoring trailing empty lines,
    which are removed from the returned list.

    Args:
        lines: Lines of the note, title first.
        tag_line: Configured tag line index.

    Returns:
        Tuple of (possibly trimmed lines, index or None when out of range).
    """
    index = tag_line
    if tag_line < 0:
        last = len(lines) - 1
        while last > 0 and not lines[last]:
            last -= 1
        lines = lines[: last + 1]
        index = len(lines) + tag_line

    if index < 0 or index >= len(lines):
        return lines, None
    return lines, index


def transform_note(
    note: Note, config: Config, tz: tzinfo | None = None
) -> TransformedNote | None:
    """Extract date, hashtags, draft status and body from a note.

    Args:
        note: Note as read from the Bear database.
        config: Configuration object.
        tz: Timezone for the date, local time when None.

    Returns:
        TransformedNote, or None when the tag line falls outside the note.
    """
    # Stray bytes survive the round trip to the written document.
    text = normalize_quotes(note.raw_body.decode("utf-8", errors="surrogateescape"))
    date = format_creation_date(note.creation_timestamp, config.time_format, tz)

    lines, index = resolve_tag_line(text.split("\n"), config.tag_line)
    if index is None:
        return None

    hashtags = scan_tags(lines[index], config.note_tag, config.omit_non_note_tag_prefix)
    del lines[index]

    return TransformedNote(
        pk=note.pk,
        title=note.title,
        slug=slugify(note.title),
        date=date,
        # The title is the first line.
        body="\n".join(lines[1:]),
        hashtags=hashtags,
        draft=is_draft(hashtags),
        categories=config.categories,
        tags=config.tags,
    )
