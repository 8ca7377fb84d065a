import math
from decimal import Decimal, localcontext

import pytest

from formula_engine import (
    FunctionTable, InvalidArgumentError, MalformedInputError, MathDomainError,
    NumericOverflowError, SUPPORTED_FUNCTIONS, UnsupportedOperationError
)


class RecordingEvaluator:
    """Sub-formula evaluator that treats the argument text as a number literal."""

    def __init__(self):
        self.calls = []

    def __call__(self, argument, bindings):
        self.calls.append((argument, bindings))
        return Decimal(argument)


@pytest.fixture
def evaluator():
    return RecordingEvaluator()


@pytest.fixture
def table(evaluator):
    return FunctionTable(evaluator)


def invoke(table, call_text, bindings=None):
    with localcontext() as ctx:
        ctx.prec = 50
        return table.invoke(call_text, bindings or {})


def test_supported_names(table):
    assert table.supported_names() == SUPPORTED_FUNCTIONS
    for name in ["sin", "cos", "tan", "floor", "ceil", "round", "log", "ln", "fact", "sqrt"]:
        assert table.is_supported(name)
    assert not table.is_supported("exp")


@pytest.mark.parametrize("name", ["", None])
def test_empty_name_is_invalid(table, name):
    with pytest.raises(InvalidArgumentError):
        table.is_supported(name)


def test_argument_goes_through_injected_evaluator(table, evaluator):
    bindings = {"x": Decimal(2)}
    assert invoke(table, "sqrt(16)", bindings) == 4
    assert evaluator.calls == [("16", bindings)]


def test_split_call_uses_first_open_and_last_close():
    assert FunctionTable.split_call("sqrt(sin(0)+1)") == ("sqrt", "sin(0)+1")


def test_empty_argument_is_malformed(table, evaluator):
    with pytest.raises(MalformedInputError):
        invoke(table, "sin()")
    with pytest.raises(MalformedInputError):
        invoke(table, "sin(  )")
    assert evaluator.calls == []


def test_unknown_function(table):
    with pytest.raises(UnsupportedOperationError):
        invoke(table, "foo(1)")


@pytest.mark.parametrize("call_text, expected", [
    ("sin(0)", 0),
    ("cos(0)", 1),
    ("tan(0)", 0),
    ("floor(2.7)", 2),
    ("floor(-2.2)", -3),
    ("ceil(2.1)", 3),
    ("ceil(-2.7)", -2),
    ("round(2.5)", 3),
    ("round(-2.5)", -3),
    ("round(2.4)", 2),
    ("log(1000)", 3),
    ("ln(1)", 0),
    ("fact(0)", 1),
    ("fact(5)", 120),
    ("fact(4.6)", 120),
    ("sqrt(16)", 4),
])
def test_exact_results(table, call_text, expected):
    assert invoke(table, call_text) == expected


def test_trigonometry_uses_radians(table):
    assert abs(float(invoke(table, "sin(1.5707963267948966)")) - 1.0) < 1e-15
    assert abs(float(invoke(table, "tan(0.7853981633974483)")) - 1.0) < 1e-15


def test_decimal_precision_for_roots_and_logs(table):
    root2 = invoke(table, "sqrt(2)")
    assert str(root2).startswith("1.4142135623730950488016887242096980785696718753")
    assert abs(float(invoke(table, "ln(10)")) - math.log(10)) < 1e-15


def test_factorial_of_large_argument(table):
    assert invoke(table, "fact(20)") == Decimal(2432902008176640000)
    with pytest.raises(NumericOverflowError):
        invoke(table, "fact(171)")


def test_factorial_limit_is_configurable(evaluator):
    table = FunctionTable(evaluator, max_factorial=10)
    assert invoke(table, "fact(10)") == 3628800
    with pytest.raises(NumericOverflowError):
        invoke(table, "fact(11)")


@pytest.mark.parametrize("call_text", ["fact(-1)", "sqrt(-4)", "ln(0)", "log(-10)", "ln(-1)"])
def test_domain_errors(table, call_text):
    with pytest.raises(MathDomainError):
        invoke(table, call_text)


def test_argument_beyond_double_range_overflows(table):
    with pytest.raises(NumericOverflowError):
        invoke(table, "sin(1E+400)")
    with pytest.raises(NumericOverflowError):
        invoke(table, "floor(-1E+400)")


@pytest.mark.parametrize("call_text, expected", [
    ("floor(123456.9)", Decimal(123456)),
    ("ceil(123456.1)", Decimal(123457)),
    ("round(98765.5)", Decimal(98766)),
])
def test_integral_results_keep_every_digit(table, call_text, expected):
    with localcontext() as ctx:
        ctx.prec = 5
        result = table.invoke(call_text, {})
    assert result == expected
    assert str(result) == str(expected)


def test_ceil_of_small_negative_is_plain_zero(table):
    result = invoke(table, "ceil(-0.5)")
    assert result == 0
    assert not result.is_signed()
