"""
Import Line Parser

Recognizes Haskell import declarations, one line at a time. The grammar lives
in grammar.lark so it can be hardened without touching callers.
"""

from functools import lru_cache
from pathlib import Path
from typing import List, Optional
import logging

from lark import Lark
from lark.exceptions import LarkError, UnexpectedInput

from .transformers.import_line import ImportLine, ImportLineTransformer
from ..shared.errors import Error, ImportParseError
from ..shared.source_location import SourceLocation
from ..utils.config import DEFAULT_PARSER_CACHE_FILE

logger = logging.getLogger(__name__)

IMPORT_KEYWORD = "import"


class ImportParser:
    """
    Import declaration parser.

    Takes a single source line, returns an ImportLine.
    Uses a Lark LALR parser with caching.
    """

    def __init__(self, cache_file: Optional[str] = DEFAULT_PARSER_CACHE_FILE):
        grammar_path = Path(__file__).parent / "grammar.lark"
        self.parser = Lark.open(
            str(grammar_path),
            start="start",
            parser="lalr",
            cache=cache_file or False,
            maybe_placeholders=False,
        )
        self.transformer = ImportLineTransformer()

    def parse(self, line: str, source_file: str = "<buffer>", line_number: int = 1) -> ImportLine:
        """
        Parse one line.

        The declaration must start at column 1, like a top-level import.

        Raises:
            ImportParseError: If the line is not a recognized import.
        """
        if not line.startswith(IMPORT_KEYWORD):
            raise ImportParseError(
                "Not an import declaration",
                SourceLocation(file=source_file, line=line_number, column=1),
            )
        try:
            tree = self.parser.parse(line)
            return self.transformer.transform(tree)
        except UnexpectedInput as e:
            location = SourceLocation(
                file=source_file,
                line=line_number,
                column=max(getattr(e, "column", 1) or 1, 1),
            )
            raise ImportParseError(f"Unrecognized import declaration: {line.strip()}", location) from e
        except LarkError as e:
            raise ImportParseError(f"Unrecognized import declaration: {line.strip()}") from e


@lru_cache(maxsize=1)
def default_parser() -> ImportParser:
    """Shared parser instance (grammar analysis is done once per process)."""
    return ImportParser()


def parse_import_line(line: str) -> Optional[ImportLine]:
    """Parse one line; None when it is not a recognized import declaration."""
    if not line.startswith(IMPORT_KEYWORD):
        return None
    try:
        return default_parser().parse(line)
    except ImportParseError:
        return None


def check_imports(text: str, source_file: str = "<buffer>") -> List[Error]:
    """
    Diagnose lines that look like imports but are not recognized.

    These lines are skipped by hydrate and dehydrate.
    """
    parser = default_parser()
    diagnostics: List[Error] = []
    for number, line in enumerate(text.split("\n"), start=1):
        if not line.startswith(IMPORT_KEYWORD) or not line[len(IMPORT_KEYWORD):len(IMPORT_KEYWORD) + 1].isspace():
            continue
        try:
            parser.parse(line, source_file, number)
        except ImportParseError as e:
            logger.debug(f"Unrecognized import at {source_file}:{number}")
            diagnostics.append(Error(
                message="import declaration not recognized",
                location=e.location or SourceLocation(file=source_file, line=number, column=1),
                severity="warning",
                label="skipped by hydrate and dehydrate",
                help="write `import [qualified] Module.Name [as Alias] ...` on a single line",
            ))
    return diagnostics
