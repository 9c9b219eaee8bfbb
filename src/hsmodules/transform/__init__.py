"""Import hydration and dehydration."""

from .edits import InsertText, ReplaceContent, TextEdit, apply_edit
from .imports import hydrate, dehydrate, hydrated_import, hydrated_alias, scan_imports

__all__ = [
    "InsertText",
    "ReplaceContent",
    "TextEdit",
    "apply_edit",
    "hydrate",
    "dehydrate",
    "hydrated_import",
    "hydrated_alias",
    "scan_imports",
]
