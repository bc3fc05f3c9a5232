# Postfix.py
"""""
Shunting-yard conversion of resolved Tokens into Reverse Polish order.

Function calls are lowered recursively: each argument range is converted on
its own, the outputs are concatenated in argument order and the function
token follows them ("push all args, then call").
"""""

from . import error as E
from .Tokens import TokenKind, split_arguments


def to_postfix(tokens, start=0, end=None):
    if end is None:
        end = len(tokens)
    stack = []
    output = []

    index = start
    while index < end:
        token = tokens[index]

        if token.kind is TokenKind.NUMBER:
            output.append(token)

        elif token.kind is TokenKind.IDENTIFIER:
            if token.identifier.variable:
                output.append(token)
            else:
                ranges, close_index = split_arguments(tokens, index + 1, end)
                for argument_start, argument_end in ranges:
                    output.extend(to_postfix(tokens, argument_start, argument_end))
                output.append(token)
                index = close_index  # the closing parenthesis of the call is skipped

        elif token.is_open_parenthesis():
            stack.append(token)

        elif token.is_close_parenthesis():
            while stack and not stack[-1].is_open_parenthesis():
                output.append(stack.pop())
            if stack:
                stack.pop()

        elif token.is_comma():
            raise E.SyntaxError("unexpected comma", code="2002", location=token.location)

        else:
            # Left associative: equal precedence pops the earlier operator first
            while (stack and not stack[-1].is_open_parenthesis()
                   and stack[-1].operator.precedence >= token.operator.precedence):
                output.append(stack.pop())
            stack.append(token)

        index += 1

    while stack:
        token = stack.pop()
        assert not token.is_open_parenthesis(), f"unbalanced {token!r} reached the postfix converter"
        output.append(token)

    return output
