"""Bear note store access for bhugo.

This module reads tagged notes and their attachments from Bear's database
and tracks which note bodies have already been converted.
"""

from .cache import NoteCache
from .reader import BearDatabase

__all__ = ["BearDatabase", "NoteCache"]
