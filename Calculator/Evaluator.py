# Evaluator.py
"""""
Stack machine executing a postfix Token stream against decimal.Decimal.
"""""

from decimal import DecimalException, DivisionByZero, Overflow

from . import error as E
from .Tokens import TokenKind


def _describe(token):
    if token.kind is TokenKind.OPERATOR:
        return f"apply operator `{token.text}`"
    if token.identifier.variable:
        return f"apply variable `{token.text}`"
    return f"apply function `{token.text}`"


def evaluate(tokens):
    """Run the postfix stream and return the single value left on the stack."""
    stack = []

    for token in tokens:
        if token.kind is TokenKind.NUMBER:
            stack.append(token.value)
            continue

        entry = token.operator if token.kind is TokenKind.OPERATOR else token.identifier
        try:
            entry.apply(stack)

        # Our own errors only lack the location of the applying token
        except E.MathError as e:
            raise type(e)(f"{_describe(token)}: {e.message}", code=e.code, location=token.location) from e

        # Signals raised by the Decimal primitive itself
        except Overflow as e:
            raise E.CalculationError(f"{_describe(token)}: number too big", code="5008", location=token.location) from e
        except DivisionByZero as e:
            raise E.CalculationError(f"{_describe(token)}: division by zero", code="5000", location=token.location) from e
        except DecimalException as e:
            raise E.CalculationError(f"{_describe(token)}: invalid operation", code="5009", location=token.location) from e

    if not stack:
        raise E.BalanceError("no return values", code="4001")
    if len(stack) > 1:
        raise E.BalanceError(f"too many ({len(stack)}) values returned", code="4002")
    return stack.pop()
