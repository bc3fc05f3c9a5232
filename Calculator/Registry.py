# Registry.py
"""""
Static catalogs of the supported operators and identifiers.

Operators are keyed by (text, arity), identifiers by (text, arity, variable).
Behaviour is not stored on the entries: every entry carries a `kind` tag and
the apply_* functions dispatch on it. Both catalogs are built once at import
time and only read afterwards, so concurrent evaluations share them freely.
"""""

import random
from decimal import Decimal, ROUND_HALF_UP, ROUND_UP, ROUND_FLOOR, ROUND_CEILING, localcontext
from enum import Enum

from . import error as E
from . import ScientificEngine


class OperatorKind(Enum):
    OPEN_PARENTHESIS = "open parenthesis"
    CLOSE_PARENTHESIS = "close parenthesis"
    COMMA = "comma"
    ADD = "addition"
    SUBTRACT = "subtraction"
    MULTIPLY = "multiplication"
    DIVIDE = "division"
    FLOOR_DIVIDE = "floor division"
    MODULO = "modulo"
    POWER = "power"
    ROOT = "root"
    PLUS = "unary plus"
    MINUS = "unary minus"
    INCREMENT = "increment"
    DECREMENT = "decrement"


class IdentifierKind(Enum):
    PI = "number Pi"
    E = "number e"
    SQRT = "square root"
    ROOT = "root"
    ABS = "absolute value"
    ROUND = "round"
    ROUND_UP = "round up"
    FLOOR = "floor"
    CEIL = "ceil"
    SIN = "sine"
    COS = "cosine"
    TAN = "tangent"
    RAD = "radian"
    MIN = "minimum"
    MAX = "maximum"
    RAND = "random number"
    LN = "natural logarithm"
    LOG = "logarithm"
    EXP = "exponential"


class Operator:
    def __init__(self, text, kind, precedence=0, arity=0):
        self.text = text
        self.kind = kind
        self.name = kind.value
        self.precedence = precedence
        self.arity = arity

    @property
    def structural(self):
        return self.arity == 0

    def apply(self, stack):
        arguments = _pop_arguments(stack, self.arity, self.name)
        stack.append(apply_operator(self.kind, arguments))

    def __repr__(self):
        return f"Operator({self.text!r}, {self.name!r}, precedence={self.precedence}, arity={self.arity})"


class Identifier:
    def __init__(self, text, kind, arity=0, variable=False):
        self.text = text
        self.kind = kind
        self.name = kind.value
        self.arity = arity
        self.variable = variable

    def apply(self, stack):
        arguments = _pop_arguments(stack, self.arity, self.name)
        stack.append(apply_identifier(self.kind, arguments))

    def __repr__(self):
        kind = "variable" if self.variable else f"function/{self.arity}"
        return f"Identifier({self.text!r}, {self.name!r}, {kind})"


def _pop_arguments(stack, arity, name):
    """Pop `arity` values; the first popped is the right-most argument."""
    if len(stack) < arity:
        raise E.BalanceError(f"not enough arguments for {name}", code="4000")
    if arity == 0:
        return []
    arguments = stack[-arity:]
    del stack[-arity:]
    return arguments


# -----------------------------
# Catalogs
# -----------------------------

OPEN_PARENTHESIS = Operator("(", OperatorKind.OPEN_PARENTHESIS)
CLOSE_PARENTHESIS = Operator(")", OperatorKind.CLOSE_PARENTHESIS)
COMMA = Operator(",", OperatorKind.COMMA)

OPERATORS = (
    OPEN_PARENTHESIS,
    CLOSE_PARENTHESIS,
    COMMA,

    Operator("+", OperatorKind.ADD, precedence=1, arity=2),
    Operator("-", OperatorKind.SUBTRACT, precedence=1, arity=2),
    Operator("*", OperatorKind.MULTIPLY, precedence=2, arity=2),
    Operator("/", OperatorKind.DIVIDE, precedence=2, arity=2),
    Operator("//", OperatorKind.FLOOR_DIVIDE, precedence=2, arity=2),
    Operator("%", OperatorKind.MODULO, precedence=2, arity=2),
    Operator("^", OperatorKind.POWER, precedence=3, arity=2),
    Operator("@", OperatorKind.ROOT, precedence=3, arity=2),
    Operator("+", OperatorKind.PLUS, precedence=4, arity=1),
    Operator("-", OperatorKind.MINUS, precedence=4, arity=1),
    Operator("++", OperatorKind.INCREMENT, precedence=4, arity=1),
    Operator("--", OperatorKind.DECREMENT, precedence=4, arity=1),
)

IDENTIFIERS = (
    Identifier("Pi", IdentifierKind.PI, variable=True),
    Identifier("e", IdentifierKind.E, variable=True),

    Identifier("sqrt", IdentifierKind.SQRT, arity=1),
    Identifier("root", IdentifierKind.ROOT, arity=2),
    Identifier("abs", IdentifierKind.ABS, arity=1),
    Identifier("round", IdentifierKind.ROUND, arity=1),
    Identifier("round", IdentifierKind.ROUND, arity=2),
    Identifier("roundUp", IdentifierKind.ROUND_UP, arity=1),
    Identifier("roundUp", IdentifierKind.ROUND_UP, arity=2),
    Identifier("floor", IdentifierKind.FLOOR, arity=1),
    Identifier("ceil", IdentifierKind.CEIL, arity=1),
    Identifier("sin", IdentifierKind.SIN, arity=1),
    Identifier("cos", IdentifierKind.COS, arity=1),
    Identifier("tan", IdentifierKind.TAN, arity=1),
    Identifier("rad", IdentifierKind.RAD, arity=1),
    Identifier("min", IdentifierKind.MIN, arity=2),
    Identifier("max", IdentifierKind.MAX, arity=2),
    Identifier("rand", IdentifierKind.RAND, arity=0),
    Identifier("ln", IdentifierKind.LN, arity=1),
    Identifier("log", IdentifierKind.LOG, arity=1),
    Identifier("log", IdentifierKind.LOG, arity=2),
    Identifier("exp", IdentifierKind.EXP, arity=1),
)

_operators = {(operator.text, operator.arity): operator for operator in OPERATORS}
_identifiers = {(identifier.text, identifier.arity, identifier.variable): identifier for identifier in IDENTIFIERS}

# Longest first, so `//` and `++` win over their one-character prefixes
OPERATOR_TEXTS = tuple(sorted({operator.text for operator in OPERATORS}, key=len, reverse=True))


def _validate():
    """Check the catalog invariants once at import time."""
    assert len(_operators) == len(OPERATORS), "operator (text, arity) keys must be unique"
    assert len(_identifiers) == len(IDENTIFIERS), "identifier (text, arity, variable) keys must be unique"
    for operator in OPERATORS:
        if operator.text in ("(", ")", ","):
            assert operator.arity == 0, f"{operator!r} must have arity 0"
        else:
            assert operator.arity in (1, 2), f"{operator!r} must have arity 1 or 2"
    for identifier in IDENTIFIERS:
        assert not identifier.text[0].isdigit(), f"{identifier!r} starts with a digit"
        if identifier.variable:
            assert identifier.arity == 0, f"{identifier!r} is a variable with arguments"


_validate()


def find_operator(text, arity):
    return _operators.get((text, arity))


def find_function(text, arity):
    return _identifiers.get((text, arity, False))


def find_variable(text):
    return _identifiers.get((text, 0, True))


# -----------------------------
# rand() source
# -----------------------------

_random = random.Random()


def seed_random(seed=None):
    """Reseed the process-wide source behind rand()."""
    _random.seed(seed)


# -----------------------------
# Dispatch
# -----------------------------

def _require_integer(value):
    if not ScientificEngine.is_integer(value):
        raise E.CalculationError("the second argument must be an integer", code="5006")
    return int(value)


def _divide(left, right, places):
    if right == 0:
        raise E.CalculationError("division by zero", code="5000")
    return ScientificEngine.round_places(left / right, places)


def _modulo(left, right):
    if right == 0:
        raise E.CalculationError("modulo by zero", code="5012")
    # The integer quotient must fit the context, or Decimal refuses the remainder
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, left.adjusted() - right.adjusted() + 2)
        return left % right


def apply_operator(kind, arguments):
    """Apply an operator to its popped arguments (left operand first)."""
    if kind is OperatorKind.ADD:
        left, right = arguments
        return left + right
    elif kind is OperatorKind.SUBTRACT:
        left, right = arguments
        return left - right
    elif kind is OperatorKind.MULTIPLY:
        left, right = arguments
        return left * right
    elif kind is OperatorKind.DIVIDE:
        left, right = arguments
        return _divide(left, right, ScientificEngine.DEFAULT_PLACES)
    elif kind is OperatorKind.FLOOR_DIVIDE:
        left, right = arguments
        return _divide(left, right, 0)
    elif kind is OperatorKind.MODULO:
        left, right = arguments
        return _modulo(left, right)
    elif kind is OperatorKind.POWER:
        left, right = arguments
        return ScientificEngine.power(left, right)
    elif kind is OperatorKind.ROOT:
        left, right = arguments
        return ScientificEngine.root(left, right)
    elif kind is OperatorKind.PLUS:
        return arguments[0]
    elif kind is OperatorKind.MINUS:
        return -arguments[0]
    elif kind is OperatorKind.INCREMENT:
        return arguments[0] + 1
    elif kind is OperatorKind.DECREMENT:
        return arguments[0] - 1
    else:
        # Structural operators never reach the evaluator
        raise E.CalculationError(f"Unknown operator: {kind.value}", code="3000")


def apply_identifier(kind, arguments):
    """Apply a constant or function to its popped arguments."""
    if kind is IdentifierKind.PI:
        return ScientificEngine.PI
    elif kind is IdentifierKind.E:
        return ScientificEngine.E_NUMBER
    elif kind is IdentifierKind.RAND:
        return Decimal(repr(_random.random()))

    elif kind is IdentifierKind.SQRT:
        return ScientificEngine.root(arguments[0], Decimal(2))
    elif kind is IdentifierKind.ROOT:
        return ScientificEngine.root(arguments[0], arguments[1])
    elif kind is IdentifierKind.ABS:
        return abs(arguments[0])

    elif kind is IdentifierKind.ROUND:
        places = _require_integer(arguments[1]) if len(arguments) == 2 else 0
        return ScientificEngine.round_places(arguments[0], places, ROUND_HALF_UP)
    elif kind is IdentifierKind.ROUND_UP:
        places = _require_integer(arguments[1]) if len(arguments) == 2 else 0
        return ScientificEngine.round_places(arguments[0], places, ROUND_UP)
    elif kind is IdentifierKind.FLOOR:
        return arguments[0].to_integral_value(rounding=ROUND_FLOOR)
    elif kind is IdentifierKind.CEIL:
        return arguments[0].to_integral_value(rounding=ROUND_CEILING)

    elif kind is IdentifierKind.SIN:
        return ScientificEngine.sin(arguments[0])
    elif kind is IdentifierKind.COS:
        return ScientificEngine.cos(arguments[0])
    elif kind is IdentifierKind.TAN:
        return ScientificEngine.tan(arguments[0])
    elif kind is IdentifierKind.RAD:
        return ScientificEngine.rad(arguments[0])

    elif kind is IdentifierKind.MIN:
        first, second = arguments
        return first if first < second else second
    elif kind is IdentifierKind.MAX:
        first, second = arguments
        return second if second > first else first

    elif kind is IdentifierKind.LN:
        return ScientificEngine.ln(arguments[0])
    elif kind is IdentifierKind.LOG:
        return ScientificEngine.log(*arguments)
    elif kind is IdentifierKind.EXP:
        return ScientificEngine.exp(arguments[0])
    else:
        raise E.CalculationError(f"Unknown identifier: {kind.value}", code="3001")
