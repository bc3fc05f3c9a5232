# error.py
"""""
Error taxonomy for the expression engine.

Every error carries a 4-digit code (see ERROR_MESSAGES), the human readable
message and, where it is known, the Location of the offending span so
front-ends can underline it.
"""""


class MathError(Exception):
    def __init__(self, message, code="9999", location=None, equation=None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.location = location
        self.equation = equation

    def __str__(self):
        if self.location is None:
            return self.message
        # Positions are shown 1-based, the end is inclusive
        if self.location.size() == 1:
            return f"expression at [{self.location.start + 1}]: {self.message}"
        return f"expression in range [{self.location.start + 1}, {self.location.end}]: {self.message}"

class SyntaxError(MathError):
    pass

class ResolutionError(MathError):
    pass

class BalanceError(MathError):
    pass

class CalculationError(MathError):
    pass




Error_Dictionary = {

    "1" : "Lexical Error",
    "2" : "Structural Error",
    "3" : "Resolution Error",
    "4" : "Balance Error",
    "5" : "Calculation Error",
    "6" : "Configuration Error",
    "9" : "Runtime Error"

}

#Error Messages are structured in:
# 1. Digit: Main Error (see Error_Dictionary)
# 2. Digit: Specification
# 3. and 4. Digit: Error Number



ERROR_MESSAGES = {
    "1000" : "Unknown token: ", # + token
    "1001" : "Invalid expression.",

    "2000" : "Unexpected closing parenthesis.",
    "2001" : "Unclosed parenthesis.",
    "2002" : "Unexpected comma.",
    "2003" : "Expression nested too deeply.",

    "3000" : "Unknown operator: ", # + operator
    "3001" : "Unknown identifier: ", # + identifier
    "3002" : "Unknown function: ", # + name/arity
    "3003" : "Malformed number: ", # + literal

    "4000" : "Not enough arguments: ", # + operation name
    "4001" : "No value produced.",
    "4002" : "Too many values produced.",

    "5000" : "Division by zero.",
    "5001" : "Undefined value (0 ^ 0).",
    "5002" : "Infinity.",
    "5003" : "Imaginary value.",
    "5004" : "Root of a negative number.",
    "5005" : "Root index must be an integer.",
    "5006" : "Argument must be an integer.",
    "5007" : "Logarithm of a non-positive number.",
    "5008" : "Number too big.",
    "5009" : "Invalid operation.",
    "5010" : "Invalid logarithm base.",
    "5011" : "Root did not converge.",
    "5012" : "Modulo by zero.",

    "6000" : "Invalid precision: ", # + value
    "6001" : "Not all Settings could be saved: ", # + setting

    "9999" : "Unexpected Error: " #+error
}


def describe(code):
    """Return '<category>: <message>' for a code, used by the front-ends."""
    category = Error_Dictionary.get(str(code)[:1], "Unknown Error")
    return f"{category}: {ERROR_MESSAGES.get(code, 'Unknown error')}"
