"""Exceptions raised by bhugo."""

from __future__ import annotations

from pathlib import Path


class BhugoError(Exception):
    """Base exception for bhugo."""


class ConfigError(BhugoError):
    """Raised when the configuration cannot be loaded or is invalid."""


class SourceError(BhugoError):
    """Raised when the Bear database cannot be opened or queried."""


class WriteError(BhugoError):
    """Raised when a note cannot be written into the Hugo content tree."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path
