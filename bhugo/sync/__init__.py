"""Bear to Hugo synchronisation for bhugo.

This module wires the note reader and the document writer together.
"""

from .pipeline import FAILED, NoteSource, Pipeline, process_note

__all__ = ["FAILED", "NoteSource", "Pipeline", "process_note"]
