import threading
from decimal import Decimal

import pytest

from Calculator import Lexer, Registry, config_manager, error as E
from Calculator.MathEngine import Executor, calculate, format_result
from Calculator.debugger import Debugger
from Calculator.Tokens import Location


# --- Results ---

@pytest.mark.parametrize("expression, expected", [
    ("1+2*3", "7"),
    ("(1+2)*3", "9"),
    ("-1+2", "1"),
    ("1-2", "-1"),
    ("1-(-2)", "3"),
    ("round(1.5)", "2"),
    ("round(1.567,2)", "1.57"),
    ("sqrt(4)", "2"),
    ("2^10", "1024"),
    ("10^30", "1000000000000000000000000000000"),
    ("1/3", "0.33333333333333333333333333333333"),
    ("2/3", "0.66666666666666666666666666666667"),
    ("7//2", "4"),
    ("27 @ 3", "3"),
    ("root(16, 4)", "2"),
    ("++5", "6"),
    ("--5", "4"),
    ("5 -", "-5"),
    ("max(3, 1 + 4) * min(2, -2)", "-10"),
    ("sin(Pi)", "0"),
    ("cos(0)", "1"),
    ("ln(e)", "1"),
    ("log(1000)", "3"),
    ("log(8, 2)", "3"),
    ("exp(0)", "1"),
    ("floor(-0.5) + ceil(0.5)", "0"),
    ("1_000 * 2", "2000"),
    ("0.1 + 0.2", "0.3"),
    ("2 - 2.000", "0"),
])
def test_execute(executor, expression, expected):
    assert executor.execute(expression) == expected


def test_pi_to_full_precision(executor):
    assert executor.execute("Pi") == "3.1415926535897932384626433832795"
    assert executor.execute("Pi", 5) == "3.14159"


def test_rad(executor):
    assert executor.execute("rad(180)", 10) == "3.1415926536"


@pytest.mark.parametrize("expression, zeros", [
    ("sqrt(10^400)", 200),
    ("root(10^500, 2)", 250),
    ("(10^400) @ 2", 200),
    ("root(10^900, 3)", 300),
    ("sqrt(10^308)", 154),
])
def test_roots_of_huge_radicands(executor, expression, zeros):
    assert executor.execute(expression, 5) == "1" + "0" * zeros


def test_root_that_does_not_settle(executor):
    with pytest.raises(E.CalculationError) as info:
        executor.execute("root(2, 50)")
    assert info.value.code == "5011"
    assert info.value.location == Location(0, 4)


@pytest.mark.parametrize("expression, expected", [
    ("1 - -", "1"),
    ("5 - - -", "-5"),
])
def test_trailing_unary_minus_borrows_the_left_operand(executor, expression, expected):
    assert executor.execute(expression) == expected


@pytest.mark.parametrize("expression, expected", [
    ("2*--3", "4"),
    ("1 - -1", "2"),
    ("1-(-1)", "2"),
])
def test_double_minus_is_decrement(executor, expression, expected):
    assert executor.execute(expression) == expected


def test_double_minus_between_values_is_not_subtraction(executor):
    with pytest.raises(E.ResolutionError) as info:
        executor.execute("1--1")
    assert info.value.code == "3000"
    assert info.value.location == Location(1, 3)


def test_modulo(executor):
    assert executor.execute("10^250 % 3") == "1"
    with pytest.raises(E.CalculationError) as info:
        executor.execute("5 % 0")
    assert info.value.code == "5012"


def test_precision_argument(executor):
    assert executor.execute("1/3", 2) == "0.33"
    assert executor.execute("2/3", 0) == "1"
    assert executor.execute("sqrt(2)", 10) == "1.4142135624"


@pytest.mark.parametrize("expression", ["", "   ", "\t\n"])
def test_blank_input_is_an_empty_result(executor, expression):
    assert executor.execute(expression) == ""
    assert executor.evaluate(expression) is None


def test_evaluate_returns_decimal(executor):
    assert executor.evaluate("1/4") == Decimal("0.25")


@pytest.mark.parametrize("expression", [
    "1/3", "-2/7", "sqrt(2)", "Pi * 1000", "10^25 + 0.5", "-0.0000001", "round(1234, -2)",
])
def test_rendered_result_evaluates_to_itself(executor, expression):
    text = executor.execute(expression)
    assert "E" not in text
    assert executor.execute(text) == text


def test_rand_is_deterministic_when_seeded(executor):
    Registry.seed_random(99)
    first = executor.execute("rand() + rand()")
    Registry.seed_random(99)
    assert executor.execute("rand() + rand()") == first


# --- Errors ---

def test_division_by_zero_is_located_at_the_operator(executor):
    with pytest.raises(E.CalculationError) as info:
        executor.execute("1/0")
    assert info.value.code == "5000"
    assert info.value.location == Location(1, 2)
    assert info.value.equation == "1/0"
    assert str(info.value) == "expression at [2]: apply operator `/`: division by zero"


def test_unclosed_parenthesis_is_located_at_the_open(executor):
    with pytest.raises(E.SyntaxError) as info:
        executor.execute("(1+2")
    assert info.value.code == "2001"
    assert info.value.location == Location(0, 1)


def test_too_many_values(executor):
    with pytest.raises(E.BalanceError) as info:
        executor.execute("1 2")
    assert info.value.code == "4002"


def test_lone_operator(executor):
    with pytest.raises(E.BalanceError):
        executor.execute("+")


def test_negative_radicand(executor):
    with pytest.raises(E.CalculationError) as info:
        executor.execute("sqrt(-9)")
    assert info.value.code == "5004"
    assert str(info.value) == "expression in range [1, 4]: apply function `sqrt`: root of negative number"


def test_overflow_is_reported():
    with pytest.raises(E.CalculationError) as info:
        Executor().execute("10^999999 * 10^999999")
    assert info.value.code == "5008"


# --- Trace ---

def test_trace_records_every_phase():
    debugger = Debugger()
    Executor(debugger).execute("1+2")
    lines = debugger.lines
    assert lines[0].startswith("Tokens ")
    assert lines[1].startswith("Tokens (type checked) ")
    assert lines[2].startswith("Tokens (postfix notation) ")
    assert lines[3] == "Result 3"


def test_trace_is_reset_per_evaluation():
    debugger = Debugger()
    executor = Executor(debugger)
    executor.execute("1+2")
    executor.execute("")
    assert len(debugger.lines) == 1


def test_trace_does_not_change_the_result():
    assert Executor(Debugger(enabled=True)).execute("2/3") == Executor().execute("2/3")


# --- Formatting ---

@pytest.mark.parametrize("value, precision, expected", [
    ("2.500", 32, "2.5"),
    ("-0.0001", 2, "0"),
    ("1E+3", 2, "1000"),
    ("0.125", 2, "0.13"),
    ("-0.125", 2, "-0.13"),
    ("123.456", 0, "123"),
])
def test_format_result(value, precision, expected):
    assert format_result(Decimal(value), precision) == expected


# --- Concurrency ---

def test_parallel_evaluations_are_independent():
    expressions = ["1/3", "sqrt(2)", "2^0.5", "Pi*2", "log(8, 2)"] * 4
    expected = [Executor().execute(expression) for expression in expressions]
    results = [None] * len(expressions)

    def work(position):
        results[position] = Executor().execute(expressions[position])

    threads = [threading.Thread(target=work, args=(position,)) for position in range(len(expressions))]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert results == expected


# --- calculate() ---

@pytest.fixture
def config_file(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    monkeypatch.setattr(config_manager, "config_json", path)
    return path


def test_calculate_uses_configured_precision(config_file):
    config_file.write_text('{"precision": 3}', encoding="utf-8")
    assert calculate("1/3") == "0.333"
    assert calculate("1/3", precision=1) == "0.3"


def test_calculate_keeps_math_errors(config_file):
    with pytest.raises(E.CalculationError) as info:
        calculate("1/0")
    assert info.value.equation == "1/0"


def test_calculate_wraps_unexpected_errors(config_file, monkeypatch):
    def broken(text):
        raise ValueError("boom")

    monkeypatch.setattr(Lexer, "tokenize", broken)
    with pytest.raises(E.MathError) as info:
        calculate("1+1")
    assert info.value.code == "9999"
    assert info.value.equation == "1+1"
    assert "boom" in info.value.message


def test_calculate_rejects_invalid_precision(config_file):
    config_file.write_text('{"precision": -1}', encoding="utf-8")
    with pytest.raises(E.MathError) as info:
        calculate("1")
    assert info.value.code == "6000"
