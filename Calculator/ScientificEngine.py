# ScientificEngine
"""""
Decimal helpers behind the scientific identifiers of the Registry.

Everything here works on decimal.Decimal inside whatever context the caller
opened (the Executor opens one per evaluation). Results are rounded to a
fixed number of fractional digits with ROUND_HALF_UP, i.e. half away from zero.
"""""

from decimal import Decimal, ROUND_HALF_UP, getcontext, localcontext

from . import error as E


DEFAULT_PLACES = 32     # fractional digits kept by division, power and the scientific functions
ROOT_ITERATIONS = 512   # fixed budget of the n-th root refinement
GUARD_DIGITS = 10       # extra significant digits for the series expansions

PI = Decimal("3.14159265358979323846264338327950288419716939937510582097494459")
E_NUMBER = Decimal("2.71828182845904523536028747135266249775724709369995957496696763")

ZERO = Decimal(0)
ONE = Decimal(1)


def round_places(value, places, rounding=ROUND_HALF_UP):
    """Round value to `places` fractional digits (negative places round to tens, hundreds, ...).

    Values that already have no more digits than requested are returned untouched,
    so quantize() never has to grow the coefficient beyond the context precision.
    """
    exponent = value.as_tuple().exponent
    if not isinstance(exponent, int) or exponent >= -places:
        return value
    return value.quantize(ONE.scaleb(-places), rounding=rounding)


def is_integer(value):
    return value == value.to_integral_value()


def root(radicand, index):
    """n-th root by fixed-point refinement x <- a*x + b/x^(n-1).

    The radicand is first split into m * 10^(n*k) with m in [1, 10^n), so the
    refinement always starts near the answer and 10^k scales the root back.
    a = (n-1)/n and b = m/n, seeded at x0 = m/n. The loop runs a constant
    number of rounds; a result that still moves after them is an error.
    """
    if radicand < 0:
        raise E.CalculationError("root of negative number", code="5004")
    if not is_integer(index):
        raise E.CalculationError("root index must be an integer", code="5005")
    if index == 0:
        raise E.CalculationError("division by zero (root index 0)", code="5000")

    # Negative index: root of the inverted radicand
    if index < 0:
        if radicand == 0:
            raise E.CalculationError("division by zero", code="5000")
        radicand = ONE / radicand
        index = -index

    if radicand == 0:
        return ZERO

    shift = radicand.adjusted() // int(index)
    radicand = radicand.scaleb(-int(index) * shift)

    n1 = index - 1
    a = n1 / index
    b = radicand / index

    x = b
    previous = x
    for _ in range(ROOT_ITERATIONS):
        previous, x = x, a * x + b / x ** n1

    if abs(x - previous) > x.scaleb(GUARD_DIGITS - getcontext().prec):
        raise E.CalculationError(f"root of index {index} did not converge", code="5011")

    # Drop the last digits the refinement wobbles on before scaling back
    with localcontext() as ctx:
        ctx.prec -= GUARD_DIGITS
        x = +x
    return round_places(x.scaleb(shift), DEFAULT_PLACES)


def power(base, exponent):
    if base == 0 and exponent == 0:
        raise E.CalculationError("undefined value (0 ^ 0)", code="5001")
    if base == 0 and exponent < 0:
        raise E.CalculationError("infinity", code="5002")
    if base < 0 and not is_integer(exponent):
        raise E.CalculationError("imaginary value", code="5003")
    return round_places(base ** exponent, DEFAULT_PLACES)


# -----------------------------
# Trigonometry (Taylor series)
# -----------------------------

def _pi():
    """π to the current context precision (Decimal module recipe)."""
    with localcontext() as ctx:
        ctx.prec += 2
        three = Decimal(3)
        lasts, t, s, n, na, d, da = 0, three, 3, 1, 0, 0, 24
        while s != lasts:
            lasts = s
            n, na = n + na, na + 8
            d, da = d + da, da + 32
            t = (t * n) / d
            s += t
    return +s


def _reduce(x):
    """Map x into [-π, π] so the series converge quickly."""
    two_pi = 2 * _pi()
    x = x % two_pi
    if x > two_pi / 2:
        x -= two_pi
    elif x < -two_pi / 2:
        x += two_pi
    return x


def _sin(x):
    with localcontext() as ctx:
        ctx.prec += GUARD_DIGITS
        x = _reduce(x)
        i, lasts, s, fact, num, sign = 1, 0, x, 1, x, 1
        while s != lasts:
            lasts = s
            i += 2
            fact *= i * (i - 1)
            num *= x * x
            sign *= -1
            s += num / fact * sign
    return +s


def _cos(x):
    with localcontext() as ctx:
        ctx.prec += GUARD_DIGITS
        x = _reduce(x)
        i, lasts, s, fact, num, sign = 0, 0, 1, 1, 1, 1
        while s != lasts:
            lasts = s
            i += 2
            fact *= i * (i - 1)
            num *= x * x
            sign *= -1
            s += num / fact * sign
    return +s


def sin(x):
    if x == 0:
        return ZERO
    return round_places(_sin(x), DEFAULT_PLACES)


def cos(x):
    return round_places(_cos(x), DEFAULT_PLACES)


def tan(x):
    if x == 0:
        return ZERO
    cosine = _cos(x)
    if cosine == 0:
        raise E.CalculationError("infinity", code="5002")
    return round_places(_sin(x) / cosine, DEFAULT_PLACES)


def rad(degrees):
    """Degrees to radians via π·v/180."""
    if degrees == 0:
        return ZERO
    return round_places(PI * degrees / 180, DEFAULT_PLACES)


# -----------------------------
# Logarithms / exponent
# -----------------------------

def ln(value):
    if value <= 0:
        raise E.CalculationError("logarithm of non-positive number", code="5007")
    return round_places(value.ln(), DEFAULT_PLACES)


def log(value, base=None):
    """Logarithm of value; base 10 when no base is given."""
    if value <= 0:
        raise E.CalculationError("logarithm of non-positive number", code="5007")
    if base is None:
        return round_places(value.log10(), DEFAULT_PLACES)
    if base <= 0 or base == 1:
        raise E.CalculationError("invalid logarithm base", code="5010")
    return round_places(value.ln() / base.ln(), DEFAULT_PLACES)


def exp(value):
    return round_places(value.exp(), DEFAULT_PLACES)
