"""Data models passed between the source reader, transformer and writer."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class Note(BaseModel):
    """One row of Bear's ZSFNOTE table."""

    pk: int
    unique_id: str = ""
    title: str
    raw_body: bytes
    creation_timestamp: float = 0.0
    # Not used when rendering, kept so callers can inspect it.
    modification_timestamp: float = 0.0


class TransformedNote(BaseModel):
    """A note ready to be rendered into a Hugo document."""

    pk: int
    title: str
    slug: str
    date: str
    body: str
    hashtags: list[str] = Field(default_factory=list)
    draft: bool = False
    categories: bool = False
    tags: bool = False
    custom_front_matter: list[str] = Field(default_factory=list)


class WriteResult(str, Enum):
    """Outcome of processing a single note."""

    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    SKIPPED = "skipped"
