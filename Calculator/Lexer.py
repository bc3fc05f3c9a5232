# Lexer.py
"""""
Lexer: raw text -> flat list of located Tokens.

At every position the scanner tries, in order, a number, an identifier and the
longest known operator text. Nothing is resolved here; the TypeChecker decides
what each token means.
"""""

import re

from . import error as E
from . import Registry
from .Tokens import Location, Token, TokenKind


NUMBER_PATTERN = re.compile(r"[0-9_]+(?:\.[0-9_]+)?")  # no sign, a leading '-' is always an operator
IDENTIFIER_PATTERN = re.compile(r"[A-Za-z][A-Za-z0-9_]*")
OPERATOR_PATTERN = re.compile("|".join(re.escape(text) for text in Registry.OPERATOR_TEXTS))
WHITESPACE_PATTERN = re.compile(r"\s*")
UNKNOWN_PATTERN = re.compile(r"\S+")

PATTERNS = (
    (NUMBER_PATTERN, TokenKind.NUMBER),
    (IDENTIFIER_PATTERN, TokenKind.IDENTIFIER),
    (OPERATOR_PATTERN, TokenKind.OPERATOR),
)


def tokenize(text):
    """Split text into Tokens. Empty or blank text gives an empty list."""
    tokens = []
    position = WHITESPACE_PATTERN.match(text).end()

    while position < len(text):
        for pattern, kind in PATTERNS:
            match = pattern.match(text, position)
            if match:
                break
        else:
            # --- Nothing matched: report the whole unscannable run ---
            unknown = UNKNOWN_PATTERN.match(text, position)
            if unknown is None:
                raise E.SyntaxError("invalid expression", code="1001", location=Location(position, len(text)))
            raise E.SyntaxError(
                f"unknown token: `{unknown.group()}`",
                code="1000",
                location=Location(unknown.start(), unknown.end()),
            )

        tokens.append(Token(kind, match.group(), Location(match.start(), match.end())))
        position = WHITESPACE_PATTERN.match(text, match.end()).end()

    return tokens
