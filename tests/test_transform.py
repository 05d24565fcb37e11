"""Tests for note transformation."""

from datetime import timezone

from bhugo.config import Config
from bhugo.core.dates import CORE_DATA_EPOCH_OFFSET, format_creation_date
from bhugo.core.transform import (
    normalize_quotes,
    resolve_tag_line,
    slugify,
    transform_note,
)
from bhugo.models import Note


def make_note(text: str, title: str = "Note Title", created: float = 0.0) -> Note:
    return Note(pk=1, title=title, raw_body=text.encode(), creation_timestamp=created)


class TestHelpers:
    """Test the small transformation helpers."""

    def test_normalize_quotes(self) -> None:
        assert normalize_quotes("“quoted” text") == '"quoted" text'

    def test_slugify(self) -> None:
        assert slugify("My First Post") == "my-first-post"

    def test_slugify_keeps_other_characters(self) -> None:
        assert slugify("What's new? 2024") == "what's-new?-2024"

    def test_epoch_offset(self) -> None:
        assert CORE_DATA_EPOCH_OFFSET == 978307200
        assert format_creation_date(0, "%Y-%m-%d %H:%M", timezone.utc) == "2001-01-01 00:00"

    def test_fractional_seconds_truncated(self) -> None:
        assert format_creation_date(59.9, "%M:%S", timezone.utc) == "00:59"


class TestResolveTagLine:
    """Test tag line index resolution."""

    def test_positive_index(self) -> None:
        lines = ["title", "#tags", "body"]
        assert resolve_tag_line(lines, 1) == (lines, 1)

    def test_negative_index_skips_trailing_empty_lines(self) -> None:
        lines, index = resolve_tag_line(["title", "body", "#tags", "", ""], -1)
        assert lines == ["title", "body", "#tags"]
        assert index == 2

    def test_negative_index_out_of_range(self) -> None:
        _, index = resolve_tag_line(["title", ""], -3)
        assert index is None

    def test_positive_index_out_of_range(self) -> None:
        _, index = resolve_tag_line(["title", "body"], 2)
        assert index is None


class TestTransformNote:
    """Test the full transformation of one note."""

    def test_basic(self, config: Config) -> None:
        note = make_note("# Note Title\n#blog/tag\n\nBody text")
        result = transform_note(note, config, timezone.utc)

        assert result is not None
        assert result.title == "Note Title"
        assert result.slug == "note-title"
        assert result.date == "2001-01-01"
        assert result.hashtags == ["Tag"]
        assert result.body == "\nBody text"
        assert result.draft is False
        assert result.categories is True
        assert result.tags is True

    def test_draft_tag(self, config: Config) -> None:
        note = make_note("# Note\n#blog/travel #blog/draft\n\nText")
        result = transform_note(note, config, timezone.utc)

        assert result is not None
        assert result.hashtags == ["Travel", "Draft"]
        assert result.draft is True

    def test_smart_quotes_in_body(self, config: Config) -> None:
        note = make_note("# Note\n#blog/tag\n\nShe said “hi”")
        result = transform_note(note, config, timezone.utc)

        assert result is not None
        assert result.body == '\nShe said "hi"'

    def test_tag_line_from_end(self, config: Config) -> None:
        config = config.model_copy(update={"tag_line": -1})
        note = make_note("# Note\n\nText\n\n#blog/a #blog/b\n\n\n")
        result = transform_note(note, config, timezone.utc)

        assert result is not None
        assert result.hashtags == ["A", "B"]
        assert result.body == "\nText\n"

    def test_out_of_range_is_skipped(self, config: Config) -> None:
        config = config.model_copy(update={"tag_line": -5})
        assert transform_note(make_note("# Note\n#blog/a"), config) is None

    def test_flags_follow_config(self, config: Config) -> None:
        config = config.model_copy(update={"categories": False, "tags": True})
        result = transform_note(make_note("# Note\n#blog/a"), config, timezone.utc)

        assert result is not None
        assert result.categories is False
        assert result.tags is True

    def test_omit_others(self, config: Config) -> None:
        config = config.model_copy(update={"omit_non_note_tag_prefix": True})
        result = transform_note(
            make_note("# Note\n#blog/a #other\n\nText"), config, timezone.utc
        )

        assert result is not None
        assert result.hashtags == ["A"]
