"""
Source Location

A position inside a Haskell source buffer, used by diagnostics.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SourceLocation:
    """
    Source location.

    - File, 1-based line and column
    - Optional end column for underlining a span on the same line
    - Immutable (frozen) for hashability
    """
    file: str
    line: int
    column: int
    end_column: int = 0

    def __str__(self) -> str:
        """Format as file:line:column"""
        return f"{self.file}:{self.line}:{self.column}"
