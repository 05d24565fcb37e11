"""Configuration schema for bhugo."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, field_validator

# Front matter keys that bhugo always owns.
BASE_MANAGED_KEYS = frozenset({"title", "date", "categories", "tags", "draft"})

BEAR_DATABASE_PATH = (
    "Library/Group Containers/9K33E3U3T4.net.shinyfrog.bear"
    "/Application Data/database.sqlite"
)

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|s|m|h)")
_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}


def parse_duration(value: str) -> float:
    """Parse a duration such as ``1s``, ``500ms`` or ``1m30s`` into seconds.

    Plain numbers are taken as seconds.

    Args:
        value: Duration string.

    Returns:
        Number of seconds.

    Raises:
        ValueError: If the string is not a valid duration.
    """
    text = value.strip()
    try:
        return float(text)
    except ValueError:
        pass

    pos = 0
    total = 0.0
    for match in _DURATION_PART.finditer(text):
        if match.start() != pos:
            break
        total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()
    if pos == 0 or pos != len(text):
        raise ValueError(f"invalid duration: {value!r}")
    return total


class Config(BaseModel):
    """Main configuration class for bhugo."""

    interval: float = 1.0
    hugo_dir: str = "."
    content_dir: str = "content/blog"
    note_tag: str = "blog"
    categories: bool = True
    tags: bool = False
    time_format: str = "%Y-%m-%dT%H:%M:%S%:z"
    tag_line: int = -1
    omit_non_note_tag_prefix: bool = True
    database: str | None = None
    index_ext: str = "md"

    @field_validator("interval", mode="before")
    @classmethod
    def _parse_interval(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_duration(value)
        return value

    @field_validator("interval")
    @classmethod
    def _check_interval(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("interval must be positive")
        return value

    @field_validator("note_tag")
    @classmethod
    def _check_note_tag(cls, value: str) -> str:
        value = value.strip().lstrip("#")
        if not value:
            raise ValueError("note_tag must not be empty")
        return value

    @field_validator("index_ext")
    @classmethod
    def _strip_ext_dot(cls, value: str) -> str:
        return value.lstrip(".")

    def managed_keys(self) -> frozenset[str]:
        """Front matter keys regenerated on every write.

        ``categories`` and ``tags`` are only managed when enabled, so a disabled
        key already present in a document is kept as custom front matter.
        """
        keys = set(BASE_MANAGED_KEYS)
        if not self.categories:
            keys.discard("categories")
        if not self.tags:
            keys.discard("tags")
        return frozenset(keys)

    def database_path(self) -> Path:
        """Location of Bear's SQLite database."""
        if self.database:
            return Path(self.database).expanduser()
        return Path.home() / BEAR_DATABASE_PATH

    def output_root(self) -> Path:
        """Directory that receives one page bundle per note."""
        return Path(self.hugo_dir) / self.content_dir

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary for YAML serialization."""
        return self.model_dump()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        """Create config from a dictionary, accepting dashed keys as well."""
        normalized = {str(k).replace("-", "_").lower(): v for k, v in data.items()}
        return cls.model_validate(normalized)

    def to_yaml(self) -> str:
        """Convert config to YAML string."""
        return yaml.safe_dump(self.to_dict(), sort_keys=False, default_flow_style=False)
