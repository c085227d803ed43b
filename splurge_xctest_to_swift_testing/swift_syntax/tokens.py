"""Token leaf type for the Swift syntax tree.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from dataclasses import dataclass, field, replace
from enum import Enum

from .trivia import Trivia


class TokenKind(Enum):
    IDENTIFIER = "identifier"
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    OPERATOR = "operator"
    PUNCTUATION = "punctuation"
    POUND = "pound"
    UNKNOWN = "unknown"
    EOF = "eof"


# Words that cannot start an expression of their own.
STATEMENT_KEYWORDS = frozenset(
    {
        "associatedtype",
        "break",
        "case",
        "catch",
        "class",
        "continue",
        "default",
        "defer",
        "deinit",
        "do",
        "else",
        "enum",
        "extension",
        "fallthrough",
        "for",
        "func",
        "guard",
        "import",
        "in",
        "let",
        "operator",
        "precedencegroup",
        "protocol",
        "repeat",
        "return",
        "struct",
        "subscript",
        "throw",
        "typealias",
        "var",
        "where",
        "while",
    }
)

# Reserved words that must be escaped with backticks to be used as names.
RESERVED_WORDS = STATEMENT_KEYWORDS | frozenset(
    {
        "Any",
        "as",
        "false",
        "fileprivate",
        "if",
        "init",
        "inout",
        "internal",
        "is",
        "nil",
        "private",
        "public",
        "rethrows",
        "self",
        "Self",
        "static",
        "super",
        "switch",
        "throws",
        "true",
        "try",
    }
)


@dataclass(frozen=True)
class Token:
    """A lexical token with the trivia attached to it.

    ``position`` is the 1-based (line, column) of the token text in the
    parsed source; synthesized tokens have no position.
    """

    kind: TokenKind
    text: str
    leading: Trivia = field(default_factory=Trivia)
    trailing: Trivia = field(default_factory=Trivia)
    position: tuple[int, int] | None = field(default=None, compare=False)

    @classmethod
    def make(cls, text: str, kind: TokenKind | None = None, leading: str = "", trailing: str = "") -> "Token":
        """Build a synthesized token; trivia is given as plain text."""
        if kind is None:
            kind = _guess_kind(text)
        return cls(
            kind,
            text,
            Trivia.from_text(leading) if leading else Trivia(),
            Trivia.from_text(trailing) if trailing else Trivia(),
        )

    def render(self) -> str:
        return self.leading.render() + self.text + self.trailing.render()

    def __str__(self) -> str:
        return self.render()

    def with_text(self, text: str) -> "Token":
        return replace(self, text=text)

    def with_leading(self, trivia: Trivia) -> "Token":
        return replace(self, leading=trivia)

    def with_trailing(self, trivia: Trivia) -> "Token":
        return replace(self, trailing=trivia)

    def is_punct(self, *texts: str) -> bool:
        return self.kind is TokenKind.PUNCTUATION and self.text in texts

    def is_operator(self, *texts: str) -> bool:
        if self.kind is not TokenKind.OPERATOR:
            return False
        return not texts or self.text in texts

    def is_word(self, *texts: str) -> bool:
        return self.kind is TokenKind.IDENTIFIER and self.text in texts

    @property
    def is_identifier(self) -> bool:
        return self.kind is TokenKind.IDENTIFIER

    @property
    def is_eof(self) -> bool:
        return self.kind is TokenKind.EOF

    @property
    def starts_line(self) -> bool:
        return self.leading.has_newline


def _guess_kind(text: str) -> TokenKind:
    if not text:
        return TokenKind.EOF
    first = text[0]
    if first.isdigit():
        return TokenKind.FLOAT if "." in text else TokenKind.INTEGER
    if first == '"' or (first == "#" and '"' in text):
        return TokenKind.STRING
    if first == "#":
        return TokenKind.POUND
    if first.isalpha() or first in "_$`":
        return TokenKind.IDENTIFIER
    if text in ("(", ")", "[", "]", "{", "}", ",", ":", ";", ".", "@", "\\"):
        return TokenKind.PUNCTUATION
    return TokenKind.OPERATOR
