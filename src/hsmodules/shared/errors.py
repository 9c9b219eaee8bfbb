"""
Error Reporting

Diagnostics for import lines the grammar does not recognize, and the
exception classes raised at the configuration and parser boundaries.

Diagnostics render in the familiar compiler layout::

    warning: import declaration not recognized
     --> src/Foo.hs:3:8
      |
    3 | import qualified as M
      |        ^^^^^^^^^^^^^^ skipped by hydrate and dehydrate
      |
      = help: write `import [qualified] Module.Name [as Alias] ...` on a single line
"""

import os
import sys
from dataclasses import dataclass
from typing import Dict, List, Optional

from .source_location import SourceLocation

_ANSI = {
    "bold": "\033[1m",
    "red": "\033[31m",
    "yellow": "\033[33m",
    "blue": "\033[34m",
    "cyan": "\033[36m",
}
_ANSI_RESET = "\033[0m"
_SEVERITY_COLORS = {"error": "red", "warning": "yellow"}


def _use_color() -> bool:
    """Color on stderr ttys, unless NO_COLOR or HSMODULES_COLOR=never says otherwise."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("HSMODULES_COLOR", "").lower() in ("0", "false", "no", "never"):
        return False
    return sys.stderr.isatty()


@dataclass
class Error:
    """A diagnostic attached to a source location."""
    message: str
    location: Optional[SourceLocation]
    severity: str = "error"
    help: Optional[str] = None
    note: Optional[str] = None
    label: Optional[str] = None


class _Painter:
    def __init__(self, enabled: bool):
        self.enabled = enabled

    def __call__(self, text: str, *styles: str) -> str:
        if not self.enabled or not styles:
            return text
        return "".join(_ANSI[s] for s in styles) + text + _ANSI_RESET


def _render(error: Error, source_files: Dict[str, str], paint: _Painter) -> str:
    accent = _SEVERITY_COLORS.get(error.severity, "red")
    lines = [paint(error.severity, "bold", accent) + paint(f": {error.message}", "bold")]

    loc = error.location
    source = source_files.get(loc.file) if loc is not None else None
    if source is None:
        where = str(loc) if loc is not None else "<unknown location>"
        lines.append(paint(" --> ", "bold", "blue") + where)
        lines.extend(_annotations(error, 1, paint))
        return "\n".join(lines)

    gutter = len(str(loc.line))
    margin = " " * (gutter + 1)
    lines.append(paint(" " * gutter + "--> ", "bold", "blue") + str(loc))
    lines.append(paint(margin + "|", "bold", "blue"))

    source_lines = source.split("\n")
    code = source_lines[loc.line - 1].rstrip("\r") if 0 < loc.line <= len(source_lines) else ""
    lines.append(paint(f"{loc.line} | ", "bold", "blue") + code)

    start = max(loc.column, 1) - 1
    width = loc.end_column - loc.column if loc.end_column > loc.column else len(code.rstrip()) - start
    marker = " " * start + "^" * max(width, 1)
    if error.label:
        marker += f" {error.label}"
    lines.append(paint(margin + "| ", "bold", "blue") + paint(marker, "bold", accent))

    lines.extend(_annotations(error, gutter, paint))
    return "\n".join(lines)


def _annotations(error: Error, gutter: int, paint: _Painter) -> List[str]:
    notes = [(kind, text) for kind, text in (("help", error.help), ("note", error.note)) if text]
    if not notes:
        return []
    margin = " " * (gutter + 1)
    out = [paint(margin + "|", "bold", "blue")]
    for kind, text in notes:
        out.append(paint(f"{margin}= ", "bold", "cyan") + paint(f"{kind}: ", "bold") + text)
    return out


class ErrorReporter:
    """Collects diagnostics and renders them against the buffers they refer to."""

    def __init__(self, source_files: Dict[str, str]):
        self.source_files = source_files
        self.errors: List[Error] = []

    def report(self, error: Error) -> None:
        self.errors.append(error)

    def format_error(self, error: Error, color: Optional[bool] = None) -> str:
        enabled = _use_color() if color is None else color
        return _render(error, self.source_files, _Painter(enabled))

    def format_all_errors(self, color: Optional[bool] = None) -> str:
        return "\n\n".join(self.format_error(e, color=color) for e in self.errors)

    def has_errors(self) -> bool:
        return bool(self.errors)

    def print_errors(self) -> None:
        if self.errors:
            print(self.format_all_errors(), file=sys.stderr)


# ============================================================================
# Exception Classes
# ============================================================================

class HsModulesError(Exception):
    """Base exception for all hsmodules errors"""
    def __init__(self, message: str, location: Optional[SourceLocation] = None):
        super().__init__(message)
        self.message = message
        self.location = location

    def __str__(self):
        if self.location is None:
            return self.message
        return f"{self.message}\n --> {self.location}"


class ConfigError(HsModulesError):
    """Raised when the workspace configuration file is unreadable or invalid."""


class ImportParseError(HsModulesError):
    """Raised when a line is not a recognized import declaration."""
