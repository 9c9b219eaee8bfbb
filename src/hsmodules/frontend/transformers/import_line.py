"""
Import Line Transformer
Converts the Lark parse tree of one import declaration into an ImportLine
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Any
import logging

from lark import Transformer, v_args
from lark.lexer import Token

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImportLine:
    """
    One recognized import declaration.

    - module_path: Dotted module path (e.g., 'Data.Map.Strict')
    - qualified: True for `import qualified M` and `import M qualified`
    - alias: Name after `as`, if any
    - remainder: Import list / hiding clause / comment, verbatim
    """
    module_path: str
    qualified: bool = False
    qualified_post: bool = False
    alias: Optional[str] = None
    remainder: Optional[str] = None
    package: Optional[str] = None
    source: bool = False
    safe: bool = False

    @property
    def qualifier(self) -> str:
        """Name that prefixes references to this import in the module body."""
        return self.alias if self.alias is not None else self.module_path


Clause = Tuple[str, Any]


@v_args(inline=True)
class ImportLineTransformer(Transformer):
    """Each clause becomes a (field, value) pair; start() assembles them."""

    def source_pragma(self, _token: Token) -> Clause:
        return ("source", True)

    def safe(self, _token: Token) -> Clause:
        return ("safe", True)

    def qualified_pre(self, _token: Token) -> Clause:
        return ("qualified", True)

    def qualified_post(self, _token: Token) -> Clause:
        return ("qualified_post", True)

    def package(self, token: Token) -> Clause:
        return ("package", str(token)[1:-1])

    def module_name(self, token: Token) -> Clause:
        return ("module_path", str(token))

    def alias(self, _as: Token, token: Token) -> Clause:
        return ("alias", str(token))

    def remainder(self, token: Token) -> Clause:
        return ("remainder", str(token).rstrip())

    def start(self, _import: Token, *clauses: Clause) -> ImportLine:
        fields = dict(clauses)
        if fields.get("qualified_post"):
            fields["qualified"] = True
        return ImportLine(**fields)
