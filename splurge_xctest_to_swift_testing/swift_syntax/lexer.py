"""Swift lexer producing trivia-carrying tokens.

The lexer splits source text into a flat list of :class:`Token` values
that ends with an ``EOF`` token. Whitespace and comments are attached to
tokens as trivia: a token's trailing trivia runs up to (not including)
the next line break and everything after that belongs to the leading
trivia of the next token. Concatenating every token's rendering
reproduces the input exactly.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

import bisect
import logging

from ..exceptions import InvalidSyntaxError
from .tokens import Token, TokenKind
from .trivia import Trivia, TriviaKind, TriviaPiece

logger = logging.getLogger(__name__)

OPERATOR_CHARS = frozenset("/=-+!*%<>&|^~?")
PUNCTUATION_CHARS = frozenset("()[]{},:;@\\")


def _is_identifier_start(ch: str) -> bool:
    return ch.isalpha() or ch == "_" or (ord(ch) > 127 and not ch.isspace() and ch != "\ufeff")


def _is_identifier_char(ch: str) -> bool:
    return _is_identifier_start(ch) or ch.isdigit()


def scan_trivia(text: str, pos: int, stop_at_newline: bool) -> tuple[list[TriviaPiece], int]:
    """Scan trivia starting at ``pos``.

    Returns the pieces and the offset of the first non-trivia character.
    With ``stop_at_newline`` the scan ends before the first line break.
    """
    pieces: list[TriviaPiece] = []
    length = len(text)
    while pos < length:
        ch = text[pos]
        if ch == " " or ch == "\t":
            end = pos
            while end < length and text[end] == ch:
                end += 1
            kind = TriviaKind.SPACES if ch == " " else TriviaKind.TABS
            pieces.append(TriviaPiece(kind, text[pos:end]))
            pos = end
        elif ch == "\n":
            if stop_at_newline:
                break
            end = pos
            while end < length and text[end] == "\n":
                end += 1
            pieces.append(TriviaPiece(TriviaKind.NEWLINES, text[pos:end]))
            pos = end
        elif ch == "\r":
            if stop_at_newline:
                break
            end = pos
            while end < length and text[end] == "\r":
                end += 2 if text.startswith("\r\n", end) else 1
            pieces.append(TriviaPiece(TriviaKind.CARRIAGE_RETURNS, text[pos:end]))
            pos = end
        elif text.startswith("//", pos):
            end = pos
            while end < length and text[end] not in "\r\n":
                end += 1
            comment = text[pos:end]
            kind = TriviaKind.DOC_LINE_COMMENT if comment.startswith("///") else TriviaKind.LINE_COMMENT
            pieces.append(TriviaPiece(kind, comment))
            pos = end
        elif text.startswith("/*", pos):
            end = _scan_block_comment(text, pos)
            comment = text[pos:end]
            is_doc = comment.startswith("/**") and comment != "/**/"
            kind = TriviaKind.DOC_BLOCK_COMMENT if is_doc else TriviaKind.BLOCK_COMMENT
            pieces.append(TriviaPiece(kind, comment))
            pos = end
        elif ch in "\f\v\ufeff":
            pieces.append(TriviaPiece(TriviaKind.UNEXPECTED, ch))
            pos += 1
        else:
            break
    return pieces, pos


def _scan_block_comment(text: str, pos: int) -> int:
    depth = 0
    index = pos
    length = len(text)
    while index < length:
        if text.startswith("/*", index):
            depth += 1
            index += 2
        elif text.startswith("*/", index):
            depth -= 1
            index += 2
            if depth == 0:
                return index
        else:
            index += 1
    line, column = _line_and_column(text, pos)
    raise InvalidSyntaxError("unterminated block comment", line, column)


def _line_and_column(text: str, offset: int) -> tuple[int, int]:
    line = text.count("\n", 0, offset) + 1
    line_start = text.rfind("\n", 0, offset) + 1
    return line, offset - line_start + 1


class Lexer:
    """Tokenizer for a single Swift source text."""

    def __init__(self, source: str):
        self.source = source
        self.length = len(source)
        self._line_starts = [0]
        for index, ch in enumerate(source):
            if ch == "\n":
                self._line_starts.append(index + 1)
        self._tokens: list[Token] = []

    def tokenize(self) -> list[Token]:
        """Split the whole source into tokens, the last one being ``EOF``."""
        pos = 0
        shebang: list[TriviaPiece] = []
        if self.source.startswith("#!"):
            end = 0
            while end < self.length and self.source[end] not in "\r\n":
                end += 1
            shebang.append(TriviaPiece(TriviaKind.LINE_COMMENT, self.source[:end]))
            pos = end
        leading, pos = scan_trivia(self.source, pos, stop_at_newline=False)
        leading = shebang + leading

        while pos < self.length:
            kind, end = self._scan_token(pos, left_bound=self._is_left_bound(leading))
            text = self.source[pos:end]
            trailing, after = scan_trivia(self.source, end, stop_at_newline=True)
            self._tokens.append(Token(kind, text, Trivia(tuple(leading)), Trivia(tuple(trailing)), self._position(pos)))
            leading, pos = scan_trivia(self.source, after, stop_at_newline=False)

        self._tokens.append(Token(TokenKind.EOF, "", Trivia(tuple(leading)), Trivia(), self._position(pos)))
        logger.debug(f"Lexed {len(self._tokens)} tokens")
        return self._tokens

    def _position(self, offset: int) -> tuple[int, int]:
        line_index = bisect.bisect_right(self._line_starts, offset) - 1
        return line_index + 1, offset - self._line_starts[line_index] + 1

    def _error(self, reason: str, offset: int) -> InvalidSyntaxError:
        line, column = self._position(offset)
        return InvalidSyntaxError(reason, line, column)

    def _is_left_bound(self, leading: list[TriviaPiece]) -> bool:
        if leading or not self._tokens:
            return False
        previous = self._tokens[-1]
        return not previous.trailing

    def _scan_token(self, pos: int, left_bound: bool) -> tuple[TokenKind, int]:
        src = self.source
        ch = src[pos]

        if _is_identifier_start(ch):
            end = pos + 1
            while end < self.length and _is_identifier_char(src[end]):
                end += 1
            return TokenKind.IDENTIFIER, end

        if ch == "$":
            end = pos + 1
            while end < self.length and _is_identifier_char(src[end]):
                end += 1
            return TokenKind.IDENTIFIER, end

        if ch == "`":
            close = src.find("`", pos + 1)
            newline = src.find("\n", pos + 1)
            if close == -1 or (newline != -1 and newline < close):
                return TokenKind.UNKNOWN, pos + 1
            return TokenKind.IDENTIFIER, close + 1

        if ch.isdigit():
            return self._scan_number(pos)

        if ch == '"':
            return TokenKind.STRING, self._scan_string(pos)

        if ch == "#":
            end = pos
            while end < self.length and src[end] == "#":
                end += 1
            if end < self.length and src[end] == '"':
                return TokenKind.STRING, self._scan_string(pos)
            if end == pos + 1 and end < self.length and _is_identifier_start(src[end]):
                while end < self.length and _is_identifier_char(src[end]):
                    end += 1
                return TokenKind.POUND, end
            return TokenKind.UNKNOWN, pos + 1

        if ch == ".":
            if src.startswith("..", pos):
                return TokenKind.OPERATOR, self._scan_operator(pos, allow_dot=True)
            return TokenKind.PUNCTUATION, pos + 1

        if ch in OPERATOR_CHARS:
            if ch in "?!" and left_bound and not src.startswith("=", pos + 1):
                # postfix optional-chaining / force-unwrap mark
                return TokenKind.OPERATOR, pos + 1
            return TokenKind.OPERATOR, self._scan_operator(pos, allow_dot=False)

        if ch in PUNCTUATION_CHARS:
            return TokenKind.PUNCTUATION, pos + 1

        return TokenKind.UNKNOWN, pos + 1

    def _scan_operator(self, pos: int, allow_dot: bool) -> int:
        src = self.source
        end = pos
        while end < self.length:
            ch = src[end]
            if end > pos and (src.startswith("//", end) or src.startswith("/*", end)):
                break
            if ch in OPERATOR_CHARS or (allow_dot and ch == "."):
                end += 1
                continue
            break
        return end

    def _scan_number(self, pos: int) -> tuple[TokenKind, int]:
        src = self.source
        kind = TokenKind.INTEGER
        end = pos
        prefix = src[pos : pos + 2].lower()
        if prefix in ("0x", "0b", "0o"):
            end = pos + 2
            digits = "0123456789abcdefABCDEF_" if prefix == "0x" else "0123456789_"
            while end < self.length and src[end] in digits:
                end += 1
            if prefix == "0x":
                if end + 1 < self.length and src[end] == "." and src[end + 1] in digits:
                    kind = TokenKind.FLOAT
                    end += 1
                    while end < self.length and src[end] in digits:
                        end += 1
                if end < self.length and src[end] in "pP":
                    kind = TokenKind.FLOAT
                    end = self._scan_exponent(end)
            return kind, end

        while end < self.length and (src[end].isdigit() or src[end] == "_"):
            end += 1
        if end + 1 < self.length and src[end] == "." and src[end + 1].isdigit():
            kind = TokenKind.FLOAT
            end += 1
            while end < self.length and (src[end].isdigit() or src[end] == "_"):
                end += 1
        if end < self.length and src[end] in "eE":
            probe = end + 1
            if probe < self.length and src[probe] in "+-":
                probe += 1
            if probe < self.length and src[probe].isdigit():
                kind = TokenKind.FLOAT
                end = self._scan_exponent(end)
        return kind, end

    def _scan_exponent(self, pos: int) -> int:
        src = self.source
        end = pos + 1
        if end < self.length and src[end] in "+-":
            end += 1
        while end < self.length and (src[end].isdigit() or src[end] == "_"):
            end += 1
        return end

    def _scan_string(self, pos: int) -> int:
        """Return the offset just past the string literal starting at ``pos``."""
        src = self.source
        hashes = 0
        while src[pos + hashes] == "#":
            hashes += 1
        quote = pos + hashes
        multiline = src.startswith('"""', quote)
        delimiter = '"""' if multiline else '"'
        closing = delimiter + "#" * hashes
        escape = "\\" + "#" * hashes
        index = quote + len(delimiter)
        while True:
            if index >= self.length:
                raise self._error("unterminated string literal", pos)
            if src.startswith(escape, index):
                index += len(escape)
                if index < self.length and src[index] == "(":
                    index = self._scan_interpolation(index + 1, pos)
                else:
                    index += 1
                continue
            if src.startswith(closing, index):
                return index + len(closing)
            if not multiline and src[index] in "\r\n":
                raise self._error("unterminated string literal", pos)
            index += 1

    def _scan_interpolation(self, index: int, literal_start: int) -> int:
        src = self.source
        depth = 1
        while index < self.length:
            ch = src[index]
            if ch == '"' or (ch == "#" and self._opens_raw_string(index)):
                index = self._scan_string(index)
                continue
            if ch == "(":
                depth += 1
            elif ch == ")":
                depth -= 1
                if depth == 0:
                    return index + 1
            index += 1
        raise self._error("unterminated string interpolation", literal_start)

    def _opens_raw_string(self, index: int) -> bool:
        while index < self.length and self.source[index] == "#":
            index += 1
        return index < self.length and self.source[index] == '"'


def tokenize(source: str) -> list[Token]:
    """Convenience wrapper around :class:`Lexer`."""
    return Lexer(source).tokenize()
