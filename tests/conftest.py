"""Shared fixtures: a minimal Bear database and a test configuration."""

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from bhugo.config import Config

SCHEMA = """
CREATE TABLE ZSFNOTE (
    Z_PK INTEGER PRIMARY KEY,
    ZUNIQUEIDENTIFIER TEXT,
    ZTITLE TEXT,
    ZTEXT TEXT,
    ZCREATIONDATE REAL,
    ZMODIFICATIONDATE REAL
);
CREATE TABLE ZSFNOTEFILE (
    Z_PK INTEGER PRIMARY KEY,
    ZNOTE INTEGER,
    ZUNIQUEIDENTIFIER TEXT,
    ZFILENAME TEXT
);
"""


def add_note(
    db_path: Path, pk: int, title: str, text: str, created: float = 0.0
) -> None:
    """Insert a note row into a test database."""
    conn = sqlite3.connect(db_path)
    try:
        conn.execute(
            "INSERT INTO ZSFNOTE VALUES (?, ?, ?, ?, ?, ?)",
            (pk, f"NOTE-{pk}", title, text, created, created),
        )
        conn.commit()
    finally:
        conn.close()


def add_attachment(
    db_path: Path, note_pk: int, attachment_id: str, filename: str, data: bytes
) -> Path:
    """Insert an attachment row and write its file where Bear keeps images."""
    conn = sqlite3.connect(db_path)
    try:
        conn.execute(
            "INSERT INTO ZSFNOTEFILE (ZNOTE, ZUNIQUEIDENTIFIER, ZFILENAME) VALUES (?, ?, ?)",
            (note_pk, attachment_id, filename),
        )
        conn.commit()
    finally:
        conn.close()
    image = (
        db_path.parent.parent
        / "Application Data"
        / "Local Files"
        / "Note Images"
        / attachment_id
        / filename
    )
    image.parent.mkdir(parents=True, exist_ok=True)
    image.write_bytes(data)
    return image


@pytest.fixture
def bear_db(tmp_path: Path) -> Path:
    """Empty Bear database laid out like Bear's group container."""
    db_path = tmp_path / "bear" / "Application Data" / "database.sqlite"
    db_path.parent.mkdir(parents=True)
    conn = sqlite3.connect(db_path)
    try:
        conn.executescript(SCHEMA)
        conn.commit()
    finally:
        conn.close()
    return db_path


@pytest.fixture
def hugo_dir(tmp_path: Path) -> Path:
    site = tmp_path / "site"
    site.mkdir()
    return site


@pytest.fixture
def config(hugo_dir: Path) -> Config:
    """Configuration matching the examples used throughout the tests."""
    return Config(
        hugo_dir=str(hugo_dir),
        content_dir="content",
        note_tag="blog",
        categories=True,
        tags=True,
        tag_line=1,
        omit_non_note_tag_prefix=False,
        time_format="%Y-%m-%d",
    )
