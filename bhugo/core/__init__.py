"""Core processing functions for bhugo.

This module contains the note-to-document pipeline: hashtag scanning, note
transformation, front matter handling and idempotent document writing.
"""

from .dates import CORE_DATA_EPOCH_OFFSET, core_data_to_datetime, format_creation_date
from .frontmatter import parse_custom_front_matter, render_document
from .tags import ScanState, format_tag, is_draft, scan_tags, title_case
from .transform import normalize_quotes, resolve_tag_line, slugify, transform_note
from .writer import AttachmentSource, mirror_attachments, post_dir_for, write_note

__all__ = [
    "CORE_DATA_EPOCH_OFFSET",
    "AttachmentSource",
    "ScanState",
    "core_data_to_datetime",
    "format_creation_date",
    "format_tag",
    "is_draft",
    "mirror_attachments",
    "normalize_quotes",
    "parse_custom_front_matter",
    "post_dir_for",
    "render_document",
    "resolve_tag_line",
    "scan_tags",
    "slugify",
    "title_case",
    "transform_note",
    "write_note",
]
