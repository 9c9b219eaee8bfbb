"""Import declaration recognition."""

from .parser import ImportParser, parse_import_line, check_imports
from .transformers import ImportLine

__all__ = ["ImportParser", "ImportLine", "parse_import_line", "check_imports"]
