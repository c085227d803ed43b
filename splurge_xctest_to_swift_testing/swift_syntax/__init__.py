"""Lossless Swift syntax tree used by the migration engine.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from . import nodes
from .lexer import Lexer, tokenize
from .parser import parse_source
from .tokens import RESERVED_WORDS, Token, TokenKind
from .trivia import Trivia, TriviaKind, TriviaPiece
from .visitor import SyntaxRewriter, SyntaxVisitor

__all__ = [
    "Lexer",
    "RESERVED_WORDS",
    "SyntaxRewriter",
    "SyntaxVisitor",
    "Token",
    "TokenKind",
    "Trivia",
    "TriviaKind",
    "TriviaPiece",
    "nodes",
    "parse_source",
    "tokenize",
]
