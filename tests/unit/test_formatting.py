"""Unit tests for the formatting reconciliation passes."""

from splurge_xctest_to_swift_testing.swift_syntax import parse_source
from splurge_xctest_to_swift_testing.transformers.formatting import (
    fix_optional_subscripts,
    reconcile_formatting,
    sort_imports,
)


def _sorted(source: str) -> str:
    return sort_imports(parse_source(source)).render()


class TestSortImports:
    """Each contiguous run of imports is sorted on its own."""

    def test_sorts_a_run(self):
        assert _sorted("import Zeta\nimport Alpha\nimport Mid\n") == "import Alpha\nimport Mid\nimport Zeta\n"

    def test_sorting_ignores_case(self):
        assert _sorted("import beta\nimport Alpha\n") == "import Alpha\nimport beta\n"

    def test_blank_line_separates_runs(self):
        source = "import Zeta\nimport Testing\n\nimport Beta\nimport Alpha\n"

        assert _sorted(source) == "import Testing\nimport Zeta\n\nimport Alpha\nimport Beta\n"

    def test_non_import_statement_separates_runs(self):
        source = "import B\nlet x = 1\nimport A\n"

        assert _sorted(source) == source

    def test_comments_travel_with_their_import(self):
        source = "// header\nimport B\n// about A\nimport A\n"

        assert _sorted(source) == "// header\n// about A\nimport A\nimport B\n"

    def test_attributes_travel_with_their_import(self):
        source = "@testable import MyApp\nimport Foundation\n"

        assert _sorted(source) == "import Foundation\n@testable import MyApp\n"

    def test_crlf_line_endings_are_kept(self):
        assert _sorted("import B\r\nimport A\r\n") == "import A\r\nimport B\r\n"

    def test_sorted_file_is_returned_as_is(self):
        tree = parse_source("import A\nimport B\n\nstruct S {}\n")

        assert sort_imports(tree) is tree

    def test_nested_imports_are_not_considered(self):
        source = "#if canImport(UIKit)\nimport UIKit\n#endif\n"

        assert _sorted(source) == source


class TestOptionalSubscriptFix:
    def test_space_between_optional_mark_and_bracket_is_removed(self):
        tree = parse_source("let v = items? [0]\n")

        assert fix_optional_subscripts(tree).render() == "let v = items?[0]\n"

    def test_plain_subscript_is_untouched(self):
        tree = parse_source("let v = items [0]\nlet w = items?[1]\n")

        assert fix_optional_subscripts(tree) is tree


def test_reconcile_runs_both_passes():
    tree = parse_source("import XCTestHelpers\nimport Foundation\n\nlet v = a? [0]\n")

    assert reconcile_formatting(tree).render() == "import Foundation\nimport XCTestHelpers\n\nlet v = a?[0]\n"
