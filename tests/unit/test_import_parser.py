"""
Tests for the import line grammar and the parser wrapper around it.
"""

import pytest

from hsmodules.frontend.parser import ImportParser, check_imports, parse_import_line
from hsmodules.frontend.transformers.import_line import ImportLine
from hsmodules.shared.errors import ImportParseError


class TestParseImportLine:
    """Recognized import declarations"""

    def test_plain_import(self):
        assert parse_import_line("import Data.Map") == ImportLine(module_path="Data.Map")

    def test_qualified_with_alias(self):
        imp = parse_import_line("import qualified Data.Map as M")
        assert imp.module_path == "Data.Map"
        assert imp.qualified
        assert imp.alias == "M"
        assert imp.qualifier == "M"
        assert imp.remainder is None

    def test_import_list_is_remainder(self):
        imp = parse_import_line("import Data.Map (Map, (!), lookup)")
        assert imp.module_path == "Data.Map"
        assert not imp.qualified
        assert imp.remainder == "(Map, (!), lookup)"
        assert imp.qualifier == "Data.Map"

    def test_import_list_without_space(self):
        imp = parse_import_line("import Data.Map(Map)")
        assert imp.module_path == "Data.Map"
        assert imp.remainder == "(Map)"

    def test_hiding_clause(self):
        imp = parse_import_line("import Prelude hiding (lookup)")
        assert imp.module_path == "Prelude"
        assert imp.remainder == "hiding (lookup)"

    def test_alias_then_list(self):
        imp = parse_import_line("import Data.Map as Map (insert)")
        assert imp.alias == "Map"
        assert imp.remainder == "(insert)"
        assert not imp.qualified

    def test_postpositive_qualified(self):
        imp = parse_import_line("import Data.Map qualified as M")
        assert imp.qualified
        assert imp.qualified_post
        assert imp.alias == "M"

    def test_source_safe_and_package(self):
        imp = parse_import_line('import {-# SOURCE #-} safe qualified "containers" Data.Map as M (x)')
        assert imp.source
        assert imp.safe
        assert imp.qualified
        assert imp.package == "containers"
        assert imp.module_path == "Data.Map"
        assert imp.alias == "M"
        assert imp.remainder == "(x)"

    def test_trailing_comment(self):
        imp = parse_import_line("import Data.Map -- for lookups")
        assert imp.remainder == "-- for lookups"

    def test_trailing_whitespace_and_carriage_return(self):
        imp = parse_import_line("import qualified Data.Map as M  \r")
        assert imp.alias == "M"
        assert imp.remainder is None

    def test_single_segment_and_primes(self):
        assert parse_import_line("import X").module_path == "X"
        assert parse_import_line("import Foo'.Bar_2").module_path == "Foo'.Bar_2"

    def test_hydrated_alias(self):
        imp = parse_import_line("import qualified Control.Monad as Q_3")
        assert imp.alias == "Q_3"


class TestRejectedLines:
    """Lines that are not import declarations"""

    @pytest.mark.parametrize("line", [
        "",
        "importFoo = 1",
        "  import Data.Map",
        "-- import Data.Map",
        "import",
        "import qualified",
        "import data",
        "import qualified Data.Map as",
        "import qualified Data.Map as m",
        "module Data.Map where",
    ])
    def test_not_recognized(self, line):
        assert parse_import_line(line) is None

    def test_parser_raises_with_location(self):
        parser = ImportParser(cache_file=None)
        with pytest.raises(ImportParseError) as info:
            parser.parse("import data", source_file="A.hs", line_number=4)
        assert info.value.location.file == "A.hs"
        assert info.value.location.line == 4
        assert info.value.location.column == 8

    def test_parser_rejects_indented_line(self):
        parser = ImportParser(cache_file=None)
        with pytest.raises(ImportParseError):
            parser.parse(" import A")


class TestCheckImports:
    """Diagnostics for import lines hydrate would skip"""

    def test_reports_unrecognized_imports_only(self):
        text = "module A where\nimport Data.Map\nimport qualified\nimportant = 1\n"
        diagnostics = check_imports(text, "A.hs")
        assert len(diagnostics) == 1
        assert diagnostics[0].location.line == 3
        assert diagnostics[0].severity == "warning"

    def test_clean_buffer(self):
        assert check_imports("import Data.Map\nimport qualified Data.Set as S\n") == []


if __name__ == "__main__":
    pytest.main([__file__])
