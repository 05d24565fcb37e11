"""Track which note bodies have already been written."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from ..models import Note

if TYPE_CHECKING:
    from typing import Any


class NoteCache:
    """Seen-body cache keyed by note title.

    A note goes through three steps: the poller claims it when its body
    differs from the cached one, and the writer either commits it after a
    successful write or releases it after a failure. Only committed bodies are
    cached, so a failed note is offered again on the next poll. A claimed
    note is never offered twice.
    """

    def __init__(self) -> None:
        self._bodies: dict[str, bytes] = {}
        self._pending: set[str] = set()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._bodies)

    def __contains__(self, title: object) -> bool:
        return title in self._bodies

    def claim_if_changed(self, note: Note, logger: Any) -> bool:
        """Claim a note for writing if it is new or its body changed.

        Returns:
            True if the note was claimed and should be written.
        """
        with self._lock:
            if note.title in self._pending:
                return False
            cached = self._bodies.get(note.title)
            if cached is None:
                logger.info(f"Not cached note {note.title} - possibly Hugo")
            elif cached == note.raw_body:
                return False
            else:
                logger.info(f"Differences detected in {note.title} - updating Hugo")
            self._pending.add(note.title)
            return True

    def commit(self, note: Note) -> None:
        """Remember a note's body once it has been handled."""
        with self._lock:
            self._bodies[note.title] = note.raw_body
            self._pending.discard(note.title)

    def release(self, note: Note) -> None:
        """Give up a claim without caching, so the note is retried."""
        with self._lock:
            self._pending.discard(note.title)
