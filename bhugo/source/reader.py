"""Read-only access to Bear's SQLite database."""

from __future__ import annotations

import os
import sqlite3
import threading
from pathlib import Path
from typing import TYPE_CHECKING

from ..exceptions import SourceError
from ..models import Note

if TYPE_CHECKING:
    from typing import Any

NOTES_QUERY = (
    "SELECT Z_PK, ZUNIQUEIDENTIFIER, ZTITLE, ZTEXT, ZCREATIONDATE, ZMODIFICATIONDATE "
    "FROM ZSFNOTE WHERE ZTEXT LIKE ?"
)
ATTACHMENTS_QUERY = "SELECT ZUNIQUEIDENTIFIER, ZFILENAME FROM ZSFNOTEFILE WHERE ZNOTE=?"

# Relative to the directory two levels above the database file.
NOTE_IMAGES_DIR = Path("Application Data") / "Local Files" / "Note Images"


def _to_bytes(value: Any) -> bytes:
    if isinstance(value, bytes):
        return value
    return str(value).encode("utf-8")


def _to_text(value: Any) -> str:
    # Bear does not guarantee valid UTF-8, a bad byte must not hide the row.
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


class BearDatabase:
    """Bear note store, opened read-only.

    The connection is shared between the polling and writing threads, so
    every query runs under a lock.
    """

    def __init__(self, path: Path, logger: Any) -> None:
        self.path = Path(path)
        self.logger = logger
        self._lock = threading.Lock()
        self._conn: sqlite3.Connection | None = None

    def connect(self) -> BearDatabase:
        """Open the database and check that it looks like a Bear store.

        Raises:
            SourceError: If the file cannot be opened or has no ZSFNOTE table.
        """
        uri = self.path.resolve().as_uri() + "?mode=ro"
        try:
            conn = sqlite3.connect(uri, uri=True, check_same_thread=False)
        except sqlite3.Error as e:
            raise SourceError(f"Cannot open Bear database {self.path}: {e}") from e
        try:
            conn.execute("SELECT 1 FROM ZSFNOTE LIMIT 1").fetchall()
        except sqlite3.Error as e:
            conn.close()
            raise SourceError(f"Cannot open Bear database {self.path}: {e}") from e

        # Text columns come back undecoded, see fetch_notes.
        conn.text_factory = bytes
        self._conn = conn
        self.logger.debug(f"Opened Bear database {self.path}")
        return self

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> BearDatabase:
        return self.connect()

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _query(self, sql: str, params: tuple[Any, ...]) -> list[tuple[Any, ...]]:
        if self._conn is None:
            raise SourceError("Bear database is not open")
        try:
            with self._lock:
                return self._conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise SourceError(f"Query failed: {e}") from e

    def fetch_notes(self, note_tag: str) -> list[Note]:
        """Return every note whose text contains ``#<note_tag>``.

        This is a plain substring match, so ``#blogroll`` also matches ``blog``.
        Bodies are kept as raw bytes. Titles with invalid UTF-8 are decoded
        with replacement characters.

        Raises:
            SourceError: If the query fails.
        """
        notes = []
        for pk, unique_id, title, text, created, modified in self._query(
            NOTES_QUERY, (f"%#{note_tag}%",)
        ):
            if title is None or text is None:
                self.logger.debug(f"Skipping note {pk} without title or text")
                continue
            notes.append(
                Note(
                    pk=pk,
                    unique_id=_to_text(unique_id or ""),
                    title=_to_text(title),
                    raw_body=_to_bytes(text),
                    creation_timestamp=created or 0.0,
                    modification_timestamp=modified or 0.0,
                )
            )
        return notes

    @property
    def images_dir(self) -> Path:
        """Directory holding Bear's note images."""
        return self.path.parent.parent / NOTE_IMAGES_DIR

    def list_attachments(self, pk: int) -> list[tuple[str, str]]:
        """Return ``(attachment id, filename)`` pairs of a note.

        Malformed rows are skipped with a warning.
        """
        attachments = []
        for row in self._query(ATTACHMENTS_QUERY, (pk,)):
            if len(row) != 2 or row[0] is None or row[1] is None:
                self.logger.warning(f"Skipping malformed attachment row for note {pk}")
                continue
            attachments.append((_to_text(row[0]), os.fsdecode(row[1])))
        return attachments

    def read_attachment(self, attachment_id: str, filename: str) -> bytes:
        """Read the bytes of an attachment.

        Raises:
            OSError: If the file cannot be read.
        """
        return (self.images_dir / attachment_id / filename).read_bytes()
