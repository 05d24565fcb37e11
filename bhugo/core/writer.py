"""Write transformed notes into the Hugo content tree."""

from __future__ import annotations

import os
import tempfile
from collections.abc import Collection
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from ..config.schema import BASE_MANAGED_KEYS
from ..exceptions import WriteError
from ..models import TransformedNote, WriteResult
from .frontmatter import parse_custom_front_matter, render_document

if TYPE_CHECKING:
    from typing import Any


class AttachmentSource(Protocol):
    """Anything that can list and read the files attached to a note."""

    def list_attachments(self, pk: int) -> list[tuple[str, str]]: ...

    def read_attachment(self, attachment_id: str, filename: str) -> bytes: ...


def post_dir_for(note: TransformedNote, hugo_dir: Path | str, content_dir: str) -> Path:
    """Page bundle directory of a note."""
    return Path(hugo_dir) / content_dir / note.slug


def mirror_attachments(
    source: AttachmentSource, pk: int, post_dir: Path, logger: Any
) -> int:
    """Copy a note's attachments next to its index file.

    Files that already exist with identical content are left alone. A
    failure on one attachment is logged and the others are still copied.

    Args:
        source: Attachment collaborator.
        pk: Primary key of the note.
        post_dir: Page bundle directory.
        logger: Logger instance.

    Returns:
        Number of files written.
    """
    copied = 0
    for attachment_id, filename in source.list_attachments(pk):
        # Never let a stored filename escape the bundle directory.
        dest = post_dir / Path(filename).name
        try:
            data = source.read_attachment(attachment_id, filename)
            if dest.exists() and dest.read_bytes() == data:
                continue
            logger.info(f"Copying {filename} to {post_dir}")
            dest.write_bytes(data)
            copied += 1
        except OSError as e:
            logger.error(f"Error copying attachment {filename}: {e}")
    return copied


def _read_existing(path: Path) -> bytes | None:
    try:
        return path.read_bytes()
    except FileNotFoundError:
        return None
    except OSError as e:
        raise WriteError(f"Error reading {path}: {e}", path) from e


def write_note(
    note: TransformedNote,
    hugo_dir: Path | str,
    content_dir: str,
    logger: Any,
    attachments: AttachmentSource | None = None,
    managed_keys: Collection[str] = BASE_MANAGED_KEYS,
    index_ext: str = "md",
) -> WriteResult:
    """Render a note and replace its index file only if the content changed.

    The document is first written to a temporary file in the bundle
    directory and then renamed over the index file, so readers never see a
    half-written document. Custom front matter of the existing index file is
    carried over.

    Args:
        note: Transformed note.
        hugo_dir: Root of the Hugo site.
        content_dir: Content directory below the site root.
        logger: Logger instance.
        attachments: Optional attachment collaborator.
        managed_keys: Front matter keys regenerated on every write.
        index_ext: Extension of the index file.

    Returns:
        CREATED, UPDATED or UNCHANGED.

    Raises:
        WriteError: If the directory, the temporary file or the rename fails.
    """
    post_dir = post_dir_for(note, hugo_dir, content_dir)
    try:
        post_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise WriteError(f"Error creating {post_dir}: {e}", post_dir) from e

    if attachments is not None:
        mirror_attachments(attachments, note.pk, post_dir, logger)

    index_path = post_dir / f"index.{index_ext}"
    existing = _read_existing(index_path)
    if existing:
        note.custom_front_matter = parse_custom_front_matter(existing, managed_keys)

    rendered = render_document(note).encode("utf-8", errors="surrogateescape")

    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".index.{index_ext}.", suffix=".tmp", dir=post_dir
        )
    except OSError as e:
        raise WriteError(f"Error creating temporary file in {post_dir}: {e}", post_dir) from e

    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(rendered)
        tmp_path.chmod(0o644)

        if existing is not None and existing == tmp_path.read_bytes():
            logger.info(f"{note.title}: files are same, skipping update")
            tmp_path.unlink()
            return WriteResult.UNCHANGED

        os.replace(tmp_path, index_path)
    except OSError as e:
        tmp_path.unlink(missing_ok=True)
        raise WriteError(f"Error writing {index_path}: {e}", index_path) from e

    if existing is None:
        logger.info(f"{note.title}: created {index_path}")
        return WriteResult.CREATED
    logger.info(f"{note.title}: updated {index_path}")
    return WriteResult.UPDATED
