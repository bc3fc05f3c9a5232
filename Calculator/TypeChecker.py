# TypeChecker.py
"""""
TypeChecker: raw Tokens -> resolved Tokens.

check() runs two passes and returns a new list, the input is left alone:

1) resolve_tokens: numbers are parsed, operators are resolved to their unary
   or binary Registry entry, identifiers to a variable or to the function whose
   arity matches the argument list, parentheses and commas are validated.
2) validate_values: walks the resolved stream in the same precedence order as
   the postfix conversion and counts pending values, so that every operator
   finds its operands and exactly one value escapes the whole expression.
"""""

import re
from decimal import Decimal, InvalidOperation

from . import error as E
from . import Registry
from .Tokens import TokenKind, split_arguments


MAX_NESTING = 256

# Single underscores between digits only; Decimal() itself drops every underscore
NUMBER_LITERAL = re.compile(r"[0-9]+(?:_[0-9]+)*(?:\.[0-9]+(?:_[0-9]+)*)?")


def check(tokens):
    resolved = resolve_tokens(tokens)
    return validate_values(resolved)


# -----------------------------
# Pass 1: resolution
# -----------------------------

def resolve_number(token):
    if not NUMBER_LITERAL.fullmatch(token.text):
        raise E.ResolutionError(f"malformed number `{token.text}`", code="3003", location=token.location)
    try:
        return token.resolve(value=Decimal(token.text))
    except InvalidOperation:
        raise E.ResolutionError(f"malformed number `{token.text}`", code="3003", location=token.location)


def resolve_operator(tokens, resolved, index):
    """Resolve a non-structural operator as unary or binary from its left neighbour.

    Unary when it opens the expression, or follows another operator that is not
    a closing parenthesis (the `(` of a zero-arity call like `rand(` excluded).
    """
    token = tokens[index]
    unary = index == 0
    if not unary:
        previous = tokens[index - 1]
        unary = previous.kind is TokenKind.OPERATOR and not previous.is_close_parenthesis()
        if unary and previous.is_open_parenthesis() and index >= 2:
            caller = resolved[index - 2]
            if caller.is_function() and caller.identifier.arity == 0:
                unary = False

    operator = Registry.find_operator(token.text, 1 if unary else 2)
    if operator is None:
        kind = "unary" if unary else "binary"
        raise E.ResolutionError(f"unknown {kind} operator `{token.text}`", code="3000", location=token.location)
    return token.resolve(operator=operator)


def resolve_identifier(tokens, index):
    token = tokens[index]

    # --- Variable: not followed by '(' ---
    if index + 1 >= len(tokens) or not tokens[index + 1].is_open_parenthesis():
        identifier = Registry.find_variable(token.text)
        if identifier is None:
            raise E.ResolutionError(f"unknown identifier `{token.text}`", code="3001", location=token.location)
        return token.resolve(identifier=identifier)

    # --- Function call: count the top-level arguments ---
    ranges, close_index = split_arguments(tokens, index + 1)
    if close_index is None:
        raise E.SyntaxError("unclosed parenthesis", code="2001", location=tokens[index + 1].location)

    for start, end in ranges:
        if start == end:
            # Dangling comma: the one closing this empty argument, else the one opening it
            comma = tokens[end] if tokens[end].is_comma() else tokens[start - 1]
            raise E.SyntaxError("unexpected comma", code="2002", location=comma.location)

    identifier = Registry.find_function(token.text, len(ranges))
    if identifier is None:
        raise E.ResolutionError(
            f"unknown function `{token.text}/{len(ranges)}`", code="3002", location=token.location
        )
    return token.resolve(identifier=identifier)


def resolve_tokens(tokens):
    resolved = []
    open_parentheses = []  # (index, is_call) of every '(' not closed yet

    for index, token in enumerate(tokens):
        if token.kind is TokenKind.NUMBER:
            resolved.append(resolve_number(token))

        elif token.kind is TokenKind.IDENTIFIER:
            resolved.append(resolve_identifier(tokens, index))

        elif token.is_open_parenthesis():
            is_call = index > 0 and resolved[index - 1].is_function()
            open_parentheses.append((index, is_call))
            if len(open_parentheses) > MAX_NESTING:
                raise E.SyntaxError("expression nested too deeply", code="2003", location=token.location)
            resolved.append(token.resolve(operator=Registry.OPEN_PARENTHESIS))

        elif token.is_close_parenthesis():
            if not open_parentheses:
                raise E.SyntaxError("unexpected closing parenthesis", code="2000", location=token.location)
            open_index, is_call = open_parentheses.pop()
            # `()` is only valid as the call of a zero-arity function
            if open_index == index - 1 and not is_call:
                raise E.SyntaxError("unexpected closing parenthesis", code="2000", location=token.location)
            resolved.append(token.resolve(operator=Registry.CLOSE_PARENTHESIS))

        elif token.is_comma():
            if not open_parentheses or not open_parentheses[-1][1]:
                raise E.SyntaxError("unexpected comma", code="2002", location=token.location)
            resolved.append(token.resolve(operator=Registry.COMMA))

        else:
            resolved.append(resolve_operator(tokens, resolved, index))

    if open_parentheses:
        index, _ = open_parentheses[-1]
        raise E.SyntaxError("unclosed parenthesis", code="2001", location=tokens[index].location)

    return resolved


# -----------------------------
# Pass 2: value balance
# -----------------------------

def validate_values(tokens):
    """Check that every operator gets its operands and one value escapes.

    Returns a new list in which a binary minus that only finds one pending
    value has been turned into a unary minus.
    """
    tokens = list(tokens)
    if tokens:
        _expect_single_value(tokens, 0, len(tokens))
    return tokens


def _expect_single_value(tokens, start, end):
    values, last_value = _count_values(tokens, start, end)
    if values == 0:
        location = tokens[start].location.span(tokens[end - 1].location)
        raise E.BalanceError("no values returned in expression", code="4001", location=location)
    if values > 1:
        raise E.BalanceError("too many values returned in expression", code="4002",
                             location=tokens[last_value].location)


def _count_values(tokens, start, end):
    """Count the values left pending by tokens[start:end].

    Mirrors the shunting-yard order of Postfix.to_postfix: operators are
    applied lazily when an operator of lower or equal precedence arrives, when
    their group closes, or at the end.
    """
    values = 0
    last_value = None
    pending = []  # indices of operators and open parentheses
    saved = []    # pending value counts outside each open group

    def apply_pending():
        nonlocal values
        index = pending.pop()
        token = tokens[index]
        operator = token.operator

        if operator.arity == 1:
            # Counts every pending value of the group, including the left operand of
            # a binary minus still waiting below: `1 - -` checks as `-(-1)`
            if values < 1:
                raise E.BalanceError(f"not enough arguments for {operator.name}", code="4000",
                                     location=token.location)
            return

        if values < 2:
            # Legacy fallback: a lone operand turns binary minus into unary minus
            if operator.kind is Registry.OperatorKind.SUBTRACT and values == 1:
                tokens[index] = token.reclassify(Registry.find_operator("-", 1))
                return
            raise E.BalanceError(f"not enough arguments for {operator.name}", code="4000",
                                 location=token.location)
        values -= 1

    index = start
    while index < end:
        token = tokens[index]

        if token.is_open_parenthesis():
            pending.append(index)
            saved.append(values)
            values = 0

        elif token.is_close_parenthesis():
            while not tokens[pending[-1]].is_open_parenthesis():
                apply_pending()
            open_index = pending.pop()
            if values == 0:
                location = tokens[open_index].location.span(token.location)
                raise E.BalanceError("no values returned in expression", code="4001", location=location)
            if values > 1:
                raise E.BalanceError("too many values returned in expression", code="4002",
                                     location=tokens[last_value].location)
            values = saved.pop() + 1

        elif token.is_function():
            ranges, close_index = split_arguments(tokens, index + 1, end)
            for argument_start, argument_end in ranges:
                _expect_single_value(tokens, argument_start, argument_end)
            values += 1
            last_value = index
            index = close_index

        elif token.is_value():
            values += 1
            last_value = index

        else:
            while (pending and not tokens[pending[-1]].is_open_parenthesis()
                   and tokens[pending[-1]].operator.precedence >= token.operator.precedence):
                apply_pending()
            pending.append(index)

        index += 1

    while pending:
        apply_pending()

    return values, last_value
