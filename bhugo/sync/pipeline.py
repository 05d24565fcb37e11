"""Producer/consumer pipeline that keeps Hugo in sync with Bear."""

from __future__ import annotations

import queue
import threading
from collections import Counter
from datetime import tzinfo
from typing import TYPE_CHECKING, Protocol

from ..config import Config
from ..core import AttachmentSource, transform_note, write_note
from ..exceptions import BhugoError
from ..models import Note, WriteResult
from ..source import NoteCache

if TYPE_CHECKING:
    from typing import Any

# How often blocked queue operations wake up to look at the shutdown flag.
_POLL_SLICE = 0.1

FAILED = "failed"


class NoteSource(AttachmentSource, Protocol):
    """Note store the pipeline reads from."""

    def fetch_notes(self, note_tag: str) -> list[Note]: ...


def process_note(
    note: Note,
    config: Config,
    logger: Any,
    attachments: AttachmentSource | None = None,
    tz: tzinfo | None = None,
) -> WriteResult:
    """Transform a single note and write it into the Hugo site.

    Args:
        note: Note read from Bear.
        config: Configuration object.
        logger: Logger instance.
        attachments: Optional attachment collaborator.
        tz: Timezone for the date, local time when None.

    Returns:
        SKIPPED when the tag line is out of range, otherwise the write result.

    Raises:
        WriteError: If the document cannot be written.
    """
    logger.debug(f"Handling {note.title}")
    transformed = transform_note(note, config, tz)
    if transformed is None:
        logger.warning(
            f"{note.title}: tag line {config.tag_line} is outside the note, skipping"
        )
        return WriteResult.SKIPPED

    return write_note(
        transformed,
        config.hugo_dir,
        config.content_dir,
        logger,
        attachments=attachments,
        managed_keys=config.managed_keys(),
        index_ext=config.index_ext,
    )


class Pipeline:
    """Poll Bear for tagged notes and write them on a separate thread.

    The poller hands notes to the writer through a bounded queue. While the
    queue is full the poller blocks. After :meth:`stop` the poller accepts
    no new work, and the writer drains everything already queued before it
    exits.
    """

    def __init__(
        self,
        source: NoteSource,
        config: Config,
        logger: Any,
        cache: NoteCache | None = None,
        queue_size: int = 1,
        tz: tzinfo | None = None,
    ) -> None:
        self.source = source
        self.config = config
        self.logger = logger
        self.cache = cache if cache is not None else NoteCache()
        self.tz = tz
        self.queue: queue.Queue[Note] = queue.Queue(maxsize=queue_size)
        self.stats: Counter[str] = Counter()
        self._shutdown = threading.Event()
        self._producer_done = threading.Event()

    @property
    def stopping(self) -> bool:
        return self._shutdown.is_set()

    def stop(self) -> None:
        """Request shutdown. Queued notes are still written."""
        self._shutdown.set()

    def _offer(self, note: Note) -> bool:
        while not self._shutdown.is_set():
            try:
                self.queue.put(note, timeout=_POLL_SLICE)
                return True
            except queue.Full:
                continue
        self.cache.release(note)
        return False

    def poll_once(self) -> int:
        """Queue every new or changed note once.

        Returns:
            Number of notes queued.
        """
        try:
            notes = self.source.fetch_notes(self.config.note_tag)
        except BhugoError as e:
            self.logger.error(f"Error reading Bear notes: {e}")
            return 0

        queued = 0
        for note in notes:
            if self._shutdown.is_set():
                break
            if not self.cache.claim_if_changed(note, self.logger):
                continue
            if self._offer(note):
                queued += 1
        return queued

    def produce(self, once: bool = False) -> None:
        """Poll once, or every ``config.interval`` seconds until stopped."""
        self.logger.debug("Starting note poller")
        try:
            while True:
                self.poll_once()
                if once or self._shutdown.wait(self.config.interval):
                    break
        finally:
            self._producer_done.set()
            self.logger.debug("Note poller exiting")

    def _handle(self, note: Note) -> None:
        try:
            result = process_note(
                note, self.config, self.logger, attachments=self.source, tz=self.tz
            )
        except BhugoError as e:
            self.logger.error(f"Error processing {note.title}: {e}")
            self.cache.release(note)
            self.stats[FAILED] += 1
        except Exception:
            self.logger.exception(f"Unexpected error processing {note.title}")
            self.cache.release(note)
            self.stats[FAILED] += 1
        else:
            self.cache.commit(note)
            self.stats[result.value] += 1

    def consume(self) -> None:
        """Write queued notes until the poller is done and the queue is empty."""
        self.logger.debug("Starting Hugo writer")
        while True:
            try:
                note = self.queue.get(timeout=_POLL_SLICE)
            except queue.Empty:
                if self._producer_done.is_set() and self.queue.empty():
                    break
                continue
            try:
                self._handle(note)
            finally:
                self.queue.task_done()
        self.logger.debug("Hugo writer exiting")

    def run(self, once: bool = False) -> Counter[str]:
        """Run poller and writer threads until done or stopped.

        Args:
            once: Poll a single time, then drain and return.

        Returns:
            Counter of results keyed by WriteResult value, plus ``failed``.
        """
        self._producer_done.clear()
        threads = [
            threading.Thread(target=self.consume, name="bhugo-writer", daemon=True),
            threading.Thread(
                target=self.produce, args=(once,), name="bhugo-poller", daemon=True
            ),
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            # Short joins keep the main thread responsive to signals.
            while thread.is_alive():
                thread.join(_POLL_SLICE)
        return self.stats
