"""Tests for the Swift lexer."""

import pytest

from splurge_xctest_to_swift_testing.exceptions import InvalidSyntaxError
from splurge_xctest_to_swift_testing.swift_syntax import Lexer, Token, TokenKind, tokenize


def _texts(source: str) -> list[str]:
    return [token.text for token in tokenize(source) if not token.is_eof]


class TestTokenization:
    """Token boundaries and kinds."""

    def test_simple_call(self):
        tokens = tokenize("XCTAssertEqual(a, b)")

        assert [token.text for token in tokens] == ["XCTAssertEqual", "(", "a", ",", "b", ")", ""]
        assert tokens[0].kind is TokenKind.IDENTIFIER
        assert tokens[1].kind is TokenKind.PUNCTUATION
        assert tokens[-1].is_eof

    def test_macro_and_attribute(self):
        tokens = tokenize("@Test func f() { #expect(x) }")

        assert tokens[0].text == "@"
        assert tokens[1].text == "Test"
        pound = next(token for token in tokens if token.text == "#expect")
        assert pound.kind is TokenKind.POUND

    def test_numbers(self):
        tokens = tokenize("1 2.5 0xFF 1e10 1_000")

        kinds = [token.kind for token in tokens if not token.is_eof]
        assert kinds == [TokenKind.INTEGER, TokenKind.FLOAT, TokenKind.INTEGER, TokenKind.FLOAT, TokenKind.INTEGER]

    def test_strings_with_interpolation_and_raw_delimiters(self):
        assert _texts('"a \\(b + "c") d"') == ['"a \\(b + "c") d"']
        assert _texts('#"raw "quoted""#') == ['#"raw "quoted""#']

    def test_multiline_string(self):
        source = 'let s = """\n    line\n    """'

        assert _texts(source)[-1] == '"""\n    line\n    """'

    def test_optional_chaining_mark_is_separate_token(self):
        assert _texts("a?.b") == ["a", "?", ".", "b"]
        assert _texts("a != b") == ["a", "!=", "b"]

    def test_operators_are_grouped(self):
        assert _texts("a === b && c") == ["a", "===", "b", "&&", "c"]

    def test_backticked_identifier(self):
        tokens = tokenize("func `default`() {}")

        assert tokens[1].text == "`default`"
        assert tokens[1].kind is TokenKind.IDENTIFIER

    def test_positions_are_one_based(self):
        tokens = tokenize("import XCTest\n  class A {}")

        assert tokens[0].position == (1, 1)
        assert tokens[2].position == (2, 3)


class TestTriviaAttribution:
    """Trailing trivia stops at a line break; the rest leads the next token."""

    def test_trailing_stops_before_newline(self):
        tokens = tokenize("a // note\n    b")

        assert tokens[0].trailing.render() == " // note"
        assert tokens[1].leading.render() == "\n    "

    def test_leading_trivia_of_first_token(self):
        tokens = tokenize("\n// header\n\nimport XCTest")

        assert tokens[0].leading.render() == "\n// header\n\n"

    def test_trailing_trivia_at_end_goes_to_eof(self):
        tokens = tokenize("a\n\n")

        assert tokens[-1].is_eof
        assert tokens[-1].leading.render() == "\n\n"

    def test_shebang_becomes_leading_trivia(self):
        tokens = tokenize("#!/usr/bin/swift\nprint(1)")

        assert tokens[0].text == "print"
        assert tokens[0].leading.render() == "#!/usr/bin/swift\n"

    def test_round_trip_with_crlf(self):
        source = "import XCTest\r\n\r\nclass A: XCTestCase {\r\n}\r\n"

        assert "".join(token.render() for token in tokenize(source)) == source


class TestLexerErrors:
    """Lexically broken input raises ``InvalidSyntaxError`` with a location."""

    def test_unterminated_string(self):
        with pytest.raises(InvalidSyntaxError) as excinfo:
            Lexer('let a = 1\nlet s = "open').tokenize()

        assert excinfo.value.line == 2
        assert excinfo.value.column == 9
        assert "unterminated string literal" in excinfo.value.message

    def test_unterminated_block_comment(self):
        with pytest.raises(InvalidSyntaxError, match="unterminated block comment"):
            tokenize("a /* never closed")

    def test_nested_block_comment_is_closed(self):
        assert _texts("a /* outer /* inner */ still */ b") == ["a", "b"]


def test_token_make_guesses_kind():
    assert Token.make("(").kind is TokenKind.PUNCTUATION
    assert Token.make("==").kind is TokenKind.OPERATOR
    assert Token.make("#expect").kind is TokenKind.POUND
    assert Token.make("name", leading=" ").render() == " name"
