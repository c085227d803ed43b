"""Trivia: the whitespace and comments that surround Swift tokens.

Trivia is value data. It is copied from one token to another when nodes
are rebuilt, never re-derived from layout heuristics, which is what keeps
comments and hand-made formatting intact through a migration.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum


class TriviaKind(Enum):
    """Kinds of trivia piece produced by the lexer."""

    SPACES = "spaces"
    TABS = "tabs"
    NEWLINES = "newlines"
    CARRIAGE_RETURNS = "carriage_returns"
    LINE_COMMENT = "line_comment"
    BLOCK_COMMENT = "block_comment"
    DOC_LINE_COMMENT = "doc_line_comment"
    DOC_BLOCK_COMMENT = "doc_block_comment"
    UNEXPECTED = "unexpected"


_NEWLINE_KINDS = frozenset({TriviaKind.NEWLINES, TriviaKind.CARRIAGE_RETURNS})
_COMMENT_KINDS = frozenset(
    {
        TriviaKind.LINE_COMMENT,
        TriviaKind.BLOCK_COMMENT,
        TriviaKind.DOC_LINE_COMMENT,
        TriviaKind.DOC_BLOCK_COMMENT,
    }
)
_BLANK_KINDS = frozenset({TriviaKind.SPACES, TriviaKind.TABS})


@dataclass(frozen=True)
class TriviaPiece:
    """A single run of trivia of one kind."""

    kind: TriviaKind
    text: str

    @property
    def is_newline(self) -> bool:
        return self.kind in _NEWLINE_KINDS

    @property
    def is_comment(self) -> bool:
        return self.kind in _COMMENT_KINDS

    @property
    def is_blank(self) -> bool:
        """True for horizontal whitespace (spaces and tabs)."""
        return self.kind in _BLANK_KINDS

    @property
    def count(self) -> int:
        """Number of line breaks for newline pieces, characters otherwise."""
        if self.kind is TriviaKind.CARRIAGE_RETURNS:
            return self.text.count("\r")
        if self.kind is TriviaKind.NEWLINES:
            return self.text.count("\n")
        return len(self.text)


@dataclass(frozen=True)
class Trivia:
    """Immutable ordered sequence of :class:`TriviaPiece` values."""

    pieces: tuple[TriviaPiece, ...] = ()

    # Construction -----------------------------------------------------

    @classmethod
    def of(cls, pieces: Iterable[TriviaPiece]) -> "Trivia":
        return cls(tuple(pieces))

    @classmethod
    def spaces(cls, count: int = 1) -> "Trivia":
        if count <= 0:
            return cls()
        return cls((TriviaPiece(TriviaKind.SPACES, " " * count),))

    @classmethod
    def newlines(cls, count: int = 1, newline: str = "\n") -> "Trivia":
        if count <= 0:
            return cls()
        kind = TriviaKind.CARRIAGE_RETURNS if "\r" in newline else TriviaKind.NEWLINES
        return cls((TriviaPiece(kind, newline * count),))

    @classmethod
    def from_text(cls, text: str) -> "Trivia":
        """Split a whitespace/comment string into trivia pieces.

        Used when synthesizing tokens; the lexer builds trivia directly.
        """
        from .lexer import scan_trivia

        pieces, end = scan_trivia(text, 0, stop_at_newline=False)
        if end != len(text):
            raise ValueError(f"Not trivia: {text!r}")
        return cls(tuple(pieces))

    # Rendering and container protocol ---------------------------------

    def render(self) -> str:
        return "".join(piece.text for piece in self.pieces)

    def __str__(self) -> str:
        return self.render()

    def __iter__(self) -> Iterator[TriviaPiece]:
        return iter(self.pieces)

    def __len__(self) -> int:
        return len(self.pieces)

    def __bool__(self) -> bool:
        return bool(self.pieces)

    def __add__(self, other: "Trivia") -> "Trivia":
        return Trivia(self.pieces + other.pieces)

    # Queries ----------------------------------------------------------

    @property
    def has_comments(self) -> bool:
        return any(piece.is_comment for piece in self.pieces)

    @property
    def has_newline(self) -> bool:
        return any(piece.is_newline for piece in self.pieces)

    @property
    def newline_count(self) -> int:
        return sum(piece.count for piece in self.pieces if piece.is_newline)

    @property
    def newline_count_before_content(self) -> int:
        """Line breaks before the first comment (or the token itself)."""
        total = 0
        for piece in self.pieces:
            if piece.is_newline:
                total += piece.count
            elif not piece.is_blank:
                break
        return total

    @property
    def has_blank_line(self) -> bool:
        """True when two line breaks are separated only by spaces or tabs."""
        run = 0
        for piece in self.pieces:
            if piece.is_newline:
                run += piece.count
                if run >= 2:
                    return True
            elif not piece.is_blank:
                run = 0
        return False

    @property
    def indentation(self) -> str:
        """Horizontal whitespace after the last line break, if nothing follows it."""
        last_newline = self._last_newline_index()
        if last_newline is None:
            return ""
        tail = self.pieces[last_newline + 1 :]
        if not all(piece.is_blank for piece in tail):
            return ""
        return "".join(piece.text for piece in tail)

    @property
    def newline_text(self) -> str:
        for piece in self.pieces:
            if piece.kind is TriviaKind.CARRIAGE_RETURNS:
                return "\r\n"
            if piece.kind is TriviaKind.NEWLINES:
                return "\n"
        return "\n"

    # Derivation -------------------------------------------------------

    def with_leading_newlines(self, count: int) -> "Trivia":
        """Replace the whitespace before the first comment with ``count`` line breaks.

        Indentation that follows the last of those line breaks is kept. Trivia
        that does not start on a new line is returned unchanged.
        """
        prefix_end = self._leading_break_end()
        if prefix_end is None:
            return self
        return Trivia.newlines(count, self.newline_text) + Trivia(self.pieces[prefix_end:])

    def without_leading_newlines(self) -> "Trivia":
        """Drop the whitespace and line breaks before the first comment."""
        prefix_end = self._leading_break_end()
        if prefix_end is None:
            return self
        return Trivia(self.pieces[prefix_end:]).lstrip_blank()

    def through_last_comment(self) -> "Trivia":
        """Prefix up to and including the last comment; empty when there is none."""
        for index in range(len(self.pieces) - 1, -1, -1):
            if self.pieces[index].is_comment:
                return Trivia(self.pieces[: index + 1])
        return Trivia()

    def lstrip_blank(self) -> "Trivia":
        index = 0
        while index < len(self.pieces) and self.pieces[index].is_blank:
            index += 1
        return Trivia(self.pieces[index:])

    def rstrip_blank(self) -> "Trivia":
        index = len(self.pieces)
        while index > 0 and self.pieces[index - 1].is_blank:
            index -= 1
        return Trivia(self.pieces[:index])

    def _last_newline_index(self) -> int | None:
        for index in range(len(self.pieces) - 1, -1, -1):
            if self.pieces[index].is_newline:
                return index
        return None

    def _leading_break_end(self) -> int | None:
        # index just past the last line break that precedes any comment
        end = None
        for index, piece in enumerate(self.pieces):
            if piece.is_newline:
                end = index + 1
            elif not piece.is_blank:
                break
        return end
