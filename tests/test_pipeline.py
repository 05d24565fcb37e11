"""Tests for the poller/writer pipeline."""

import threading
import time
from pathlib import Path

from loguru import logger

from bhugo.config import Config
from bhugo.exceptions import SourceError
from bhugo.models import Note
from bhugo.sync import FAILED, Pipeline


class FakeSource:
    """Note store backed by a list."""

    def __init__(self, notes: list[Note] | None = None) -> None:
        self.notes = notes or []
        self.fail = False

    def fetch_notes(self, note_tag: str) -> list[Note]:
        if self.fail:
            raise SourceError("database is locked")
        return list(self.notes)

    def list_attachments(self, pk: int) -> list[tuple[str, str]]:
        return []

    def read_attachment(self, attachment_id: str, filename: str) -> bytes:
        raise FileNotFoundError(filename)


def make_note(pk: int, title: str, body: str = "\n\nText") -> Note:
    return Note(pk=pk, title=title, raw_body=f"# {title}\n#blog/tag{body}".encode())


def wait_for(condition, timeout: float = 5.0) -> bool:  # type: ignore[no-untyped-def]
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return True
        time.sleep(0.02)
    return False


class TestPipeline:
    """Test polling, writing and shutdown."""

    def test_run_once_writes_every_note(self, config: Config, hugo_dir: Path) -> None:
        source = FakeSource([make_note(1, "First"), make_note(2, "Second")])

        stats = Pipeline(source, config, logger).run(once=True)

        assert stats == {"created": 2}
        assert (hugo_dir / "content" / "first" / "index.md").exists()
        assert (hugo_dir / "content" / "second" / "index.md").exists()

    def test_unchanged_notes_are_not_offered_again(self, config: Config) -> None:
        pipeline = Pipeline(FakeSource([make_note(1, "First")]), config, logger)

        pipeline.run(once=True)
        assert pipeline.poll_once() == 0
        assert pipeline.run(once=True) == {"created": 1}

    def test_changed_note_is_rewritten(self, config: Config) -> None:
        source = FakeSource([make_note(1, "First")])
        pipeline = Pipeline(source, config, logger)
        pipeline.run(once=True)

        source.notes = [make_note(1, "First", "\n\nNew text")]

        assert pipeline.run(once=True) == {"created": 1, "updated": 1}

    def test_failed_write_is_retried(self, config: Config, hugo_dir: Path) -> None:
        (hugo_dir / "content").write_text("not a directory")
        pipeline = Pipeline(FakeSource([make_note(1, "First")]), config, logger)

        assert pipeline.run(once=True) == {FAILED: 1}
        assert "First" not in pipeline.cache
        assert pipeline.poll_once() == 1

    def test_skipped_note_is_not_retried(self, config: Config, hugo_dir: Path) -> None:
        config = config.model_copy(update={"tag_line": 10})
        pipeline = Pipeline(FakeSource([make_note(1, "First")]), config, logger)

        assert pipeline.run(once=True) == {"skipped": 1}
        assert pipeline.poll_once() == 0
        assert list(hugo_dir.iterdir()) == []

    def test_source_error_is_logged(self, config: Config) -> None:
        source = FakeSource([make_note(1, "First")])
        source.fail = True

        assert Pipeline(source, config, logger).poll_once() == 0

    def test_stop_drains_queued_notes(self, config: Config, hugo_dir: Path) -> None:
        notes = [make_note(i, f"Note {i}") for i in range(3)]
        pipeline = Pipeline(FakeSource(notes), config, logger, queue_size=10)

        assert pipeline.poll_once() == 3
        pipeline.stop()
        stats = pipeline.run()

        assert stats == {"created": 3}
        assert len(list((hugo_dir / "content").iterdir())) == 3

    def test_no_new_work_after_stop(self, config: Config) -> None:
        notes = [make_note(i, f"Note {i}") for i in range(3)]
        pipeline = Pipeline(FakeSource(notes), config, logger, queue_size=1)
        pipeline.stop()

        assert pipeline.poll_once() == 0
        assert pipeline.queue.empty()
        assert pipeline.stopping

    def test_blocked_offer_is_released_on_stop(self, config: Config) -> None:
        notes = [make_note(1, "One"), make_note(2, "Two")]
        pipeline = Pipeline(FakeSource(notes), config, logger, queue_size=1)

        poller = threading.Thread(target=pipeline.poll_once)
        poller.start()
        assert wait_for(pipeline.queue.full)
        pipeline.stop()
        poller.join(timeout=5)

        assert not poller.is_alive()
        assert pipeline.queue.qsize() == 1
        # "Two" never made it into the queue, so it can be claimed again.
        assert pipeline.cache.claim_if_changed(notes[1], logger)

    def test_watch_mode_picks_up_new_notes(self, config: Config, hugo_dir: Path) -> None:
        config = config.model_copy(update={"interval": 0.05})
        source = FakeSource([make_note(1, "First")])
        pipeline = Pipeline(source, config, logger)

        runner = threading.Thread(target=pipeline.run)
        runner.start()
        try:
            assert wait_for((hugo_dir / "content" / "first" / "index.md").exists)
            source.notes = source.notes + [make_note(2, "Second")]
            assert wait_for((hugo_dir / "content" / "second" / "index.md").exists)
        finally:
            pipeline.stop()
            runner.join(timeout=5)

        assert not runner.is_alive()
        assert pipeline.stats["created"] == 2
