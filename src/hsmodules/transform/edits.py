"""
Text edits produced by the import transformer and applied by the workspace.
"""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class InsertText:
    """Insert text at the start of a 0-based line."""
    line: int
    text: str


@dataclass(frozen=True)
class ReplaceContent:
    """Replace the whole buffer."""
    text: str


TextEdit = Union[InsertText, ReplaceContent]


def apply_edit(text: str, edit: TextEdit) -> str:
    if isinstance(edit, ReplaceContent):
        return edit.text
    lines = text.split("\n")
    line = min(max(edit.line, 0), len(lines))
    offset = sum(len(l) + 1 for l in lines[:line])
    offset = min(offset, len(text))
    return text[:offset] + edit.text + text[offset:]
