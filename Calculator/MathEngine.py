# MathEngine.py
"""""
Core calculation engine.

Pipeline
--------
1) Lexer: raw input string -> flat list of located tokens.
2) TypeChecker: resolves every token against the Registry, checks parentheses,
   function arities and that exactly one value comes out of the expression.
3) Postfix: shunting-yard conversion into Reverse Polish order.
4) Evaluator: stack machine over decimal.Decimal.
5) Formatter: rounds to the requested precision and renders plain decimal text.
"""""

from decimal import Context, Decimal, Overflow, localcontext

from . import config_manager as config_manager
from . import error as E
from . import Lexer, TypeChecker, Postfix, Evaluator
from .ScientificEngine import round_places
from .debugger import Debugger


DEFAULT_PRECISION = 32
WORKING_DIGITS = 200  # significant digits of the per-evaluation Decimal context


def format_result(result, precision):
    """Round half away from zero to `precision` digits and render without exponent."""
    rounded = round_places(result, precision)
    if rounded == 0:
        return "0"
    # A context as wide as the number itself, so normalize() only strips zeros
    exact = Context(prec=len(rounded.as_tuple().digits))
    return f"{rounded.normalize(exact):f}"


class Executor:
    """Runs one expression at a time and keeps the trace of the last run."""

    def __init__(self, debugger=None):
        self.debugger = debugger if debugger is not None else Debugger()

    def execute(self, expression, precision=DEFAULT_PRECISION):
        """Evaluate expression and return the result as text ("" for blank input)."""
        self.debugger.clean()
        try:
            # Every call owns its Decimal state; the registries are shared read-only
            with localcontext() as ctx:
                ctx.prec = WORKING_DIGITS

                tokens = Lexer.tokenize(expression)
                self.debugger.debug("Tokens ", tokens)
                if not tokens:
                    return ""

                tokens = TypeChecker.check(tokens)
                self.debugger.debug("Tokens (type checked) ", tokens)

                tokens = Postfix.to_postfix(tokens)
                self.debugger.debug("Tokens (postfix notation) ", tokens)

                result = Evaluator.evaluate(tokens)
                self.debugger.debug("Result ", result)

                return format_result(result, precision)

        # Known numeric overflow (e.g. while rounding the final result)
        except Overflow:
            raise E.CalculationError("Number too large (Arithmetic overflow).", code="5008", equation=expression)
        # Re-raise our domain errors after attaching the source equation
        except E.MathError as e:
            e.equation = expression
            raise
        except RecursionError:
            raise E.SyntaxError("expression nested too deeply", code="2003", equation=expression)

    def evaluate(self, expression, precision=DEFAULT_PRECISION):
        """Like execute() but returns the Decimal value (None for blank input)."""
        text = self.execute(expression, precision)
        if text == "":
            return None
        return Decimal(text)


def calculate(problem, precision=None):
    """Main API: evaluate with the configured precision, errors always come out as MathError."""
    try:
        if precision is None:
            precision = config_manager.load_precision()
        debugger = Debugger(enabled=config_manager.load_setting_value("debug") is True)
        return Executor(debugger).execute(problem, precision)

    except E.MathError:
        raise
    # Convert unexpected Python exceptions to our unified error type
    except Exception as e:
        raise E.MathError(message=f"Unexpected Error: {e}", code="9999", equation=problem)


def test_main():
    """Simple REPL-like runner for manual testing of the engine."""
    print("Enter the problem: ")
    problem = input()
    try:
        print(calculate(problem))
    except E.MathError as e:
        print(f"Error {e.code}: {e}")


if __name__ == "__main__":
    test_main()
