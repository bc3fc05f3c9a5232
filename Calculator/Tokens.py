# Tokens.py
"""""
Token model shared by every phase of the pipeline.

A Token starts out raw (kind, text, location) as produced by the Lexer and is
resolved exactly once by the TypeChecker. Resolution never mutates a token:
`resolve()` hands back a new Token, so each phase works on its own list.
"""""

from enum import Enum


class TokenKind(Enum):
    NUMBER = "number"          # `123`, `1.12`, `1_2_3`
    OPERATOR = "operator"      # `+`, `-`, `^`, `(`
    IDENTIFIER = "identifier"  # `abc`, `a12`, `a_b_1`


class Location:
    """Half-open [start, end) character range into the original text."""

    def __init__(self, start, end):
        self.start = start
        self.end = end

    def size(self):
        return self.end - self.start

    def span(self, other):
        """Return the Location covering self up to the end of other."""
        return Location(self.start, other.end)

    def __eq__(self, other):
        if not isinstance(other, Location):
            return NotImplemented
        return self.start == other.start and self.end == other.end

    def __hash__(self):
        return hash((self.start, self.end))

    def __repr__(self):
        return f"Location({self.start}, {self.end})"


class Token:
    def __init__(self, kind, text, location, value=None, operator=None, identifier=None):
        self.kind = kind
        self.text = text
        self.location = location
        self.value = value
        self.operator = operator
        self.identifier = identifier

    @property
    def resolved(self):
        return self.value is not None or self.operator is not None or self.identifier is not None

    def resolve(self, value=None, operator=None, identifier=None):
        """Return a resolved copy of this (still raw) token."""
        assert not self.resolved, f"token {self!r} resolved twice"
        assert [value, operator, identifier].count(None) == 2, "exactly one resolution expected"
        return Token(self.kind, self.text, self.location, value, operator, identifier)

    def reclassify(self, operator):
        """Swap the resolved operator of an operator token (binary minus -> unary minus)."""
        assert self.operator is not None, f"token {self!r} is not a resolved operator"
        return Token(self.kind, self.text, self.location, operator=operator)

    # --- Structural helpers (work on raw and resolved tokens) ---

    def is_open_parenthesis(self):
        return self.kind is TokenKind.OPERATOR and self.text == "("

    def is_close_parenthesis(self):
        return self.kind is TokenKind.OPERATOR and self.text == ")"

    def is_comma(self):
        return self.kind is TokenKind.OPERATOR and self.text == ","

    def is_structural(self):
        return self.is_open_parenthesis() or self.is_close_parenthesis() or self.is_comma()

    def is_value(self):
        """Numbers and variables push exactly one value without consuming any."""
        if self.kind is TokenKind.NUMBER:
            return True
        return self.kind is TokenKind.IDENTIFIER and self.identifier is not None and self.identifier.variable

    def is_function(self):
        return self.kind is TokenKind.IDENTIFIER and self.identifier is not None and not self.identifier.variable

    def __repr__(self):
        resolved = ""
        if self.value is not None:
            resolved = f" {self.value}"
        elif self.operator is not None:
            resolved = f" {self.operator.name!r}"
        elif self.identifier is not None:
            resolved = f" {self.identifier.name!r}"
        return f"{{{self.kind.value}}}:[{self.location.start}-{self.location.end}] `{self.text}`{resolved}"


def split_arguments(tokens, open_index, end=None):
    """Split the argument list opened by tokens[open_index] == '('.

    Walks forward tracking parenthesis depth; commas at depth 1 separate
    arguments. Returns (ranges, close_index) where ranges holds one
    (start, end) index pair per argument. An empty call `f()` gives no
    ranges; a dangling comma shows up as an empty range. close_index is
    None when the list is never closed.
    """
    if end is None:
        end = len(tokens)
    depth = 0
    ranges = []
    start = open_index + 1
    for index in range(open_index, end):
        token = tokens[index]
        if token.is_open_parenthesis():
            depth += 1
        elif token.is_close_parenthesis():
            depth -= 1
            if depth == 0:
                if index > start or ranges:
                    ranges.append((start, index))
                return ranges, index
        elif depth == 1 and token.is_comma():
            ranges.append((start, index))
            start = index + 1
    return ranges, None
