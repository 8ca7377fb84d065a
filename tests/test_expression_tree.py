from decimal import Decimal, localcontext

import pytest
import sympy as sp

from formula_engine import (
    BinaryOpNode, DivisionByZeroError, Expression, ExpressionValidator, FormulaEngine,
    InvalidArgumentError, MathDomainError, NestingTooDeepError, NumericOverflowError,
    OperandNode, UnknownSymbolError
)
from formula_engine.expression_tree import SymPyConverter, evaluate_binary_op, normalize_bindings


@pytest.fixture(scope="module")
def engine():
    return FormulaEngine()


def combine(left, op, right):
    with localcontext() as ctx:
        ctx.prec = 50
        return evaluate_binary_op(Decimal(left), Decimal(right), op)


def test_binary_ops():
    assert combine("1.5", "+", "2.25") == Decimal("3.75")
    assert combine("1.5", "-", "2.25") == Decimal("-0.75")
    assert combine("1.5", "*", "4") == 6
    assert combine("7", "/", "2") == Decimal("3.5")
    assert combine("2", "^", "10") == 1024
    assert combine("-2", "^", "3") == -8


def test_division_rounds_to_context_precision():
    third = combine("1", "/", "3")
    assert len(third.as_tuple().digits) == 50
    assert str(third).startswith("0.3333")


def test_exponent_is_truncated_toward_zero():
    assert combine("2", "^", "3.9") == 8
    assert combine("2", "^", "0.5") == 1
    assert combine("2", "^", "-1.5") == Decimal("0.5")
    assert combine("0", "^", "0") == 1


@pytest.mark.parametrize("left, op, right", [("5", "/", "0"), ("0", "/", "0"), ("0", "^", "-1")])
def test_division_by_zero(left, op, right):
    with pytest.raises(DivisionByZeroError):
        combine(left, op, right)


def test_overflow_is_detected():
    with pytest.raises(NumericOverflowError):
        combine("10", "^", "1000000000")


def test_operator_node_requires_both_children():
    with pytest.raises(InvalidArgumentError):
        BinaryOpNode('+', None, OperandNode('1'))
    with pytest.raises(InvalidArgumentError):
        BinaryOpNode('+', OperandNode('1'), None)
    with pytest.raises(InvalidArgumentError):
        BinaryOpNode('%', OperandNode('1'), OperandNode('2'))
    with pytest.raises(InvalidArgumentError):
        OperandNode('')


def test_size_depth_and_leaves(engine):
    expr = engine.compile("2+3*4")
    assert expr.size() == 5
    assert expr.depth() == 3
    assert [leaf.item for leaf in expr.root.leaves()] == ["2", "3", "4"]


def test_structurally_equal_trees_hash_equal(engine):
    assert engine.compile("a + b*2") == engine.compile("a+b * 2")
    assert hash(engine.compile("a + b*2")) == hash(engine.compile("a+b * 2"))
    assert engine.compile("a+b") != engine.compile("b+a")


def test_validator(engine):
    root = engine.compile("(1+2)*x").root
    assert ExpressionValidator.is_valid_expression(root)
    assert not ExpressionValidator.is_valid_expression(root, max_depth=2)


def test_leaf_resolution_order(engine):
    # variable binding wins over a constant of the same name
    assert engine.compile("pi").evaluate({"pi": 3}) == 3
    assert engine.compile("pi").evaluate() == engine.constants.resolve("pi")
    with pytest.raises(UnknownSymbolError) as info:
        engine.compile("y+1").evaluate({"x": 1})
    assert info.value.symbol == "y"


def test_compiled_expression_reused_with_different_bindings(engine):
    expr = engine.compile("x^2 + sqrt(y)")
    assert expr.evaluate({"x": 3, "y": 16}) == 13
    assert expr.evaluate({"x": 1.5, "y": 0}) == Decimal("2.25")


def test_variables_include_function_arguments(engine):
    expr = engine.compile("x*sin(y+pi)+x+2")
    assert expr.variables() == ["x", "y"]


def test_to_sympy(engine):
    x = sp.Symbol("x")
    assert engine.compile("2*x+sin(pi)").to_sympy() == 2 * x
    assert engine.compile("x^2.7").to_sympy() == x ** 2
    assert engine.compile("sqrt(x)/tau").to_sympy() == sp.sqrt(x) / (2 * sp.pi)
    assert engine.compile("fact(3)+hue").to_sympy() == 9007


def test_normalize_bindings():
    assert normalize_bindings({"x": 0.1, "n": 3, "d": Decimal("2.5")}) == {
        "x": Decimal("0.1"), "n": Decimal(3), "d": Decimal("2.5"),
    }
    assert normalize_bindings(None) == {}


@pytest.mark.parametrize("bindings", [
    {"x": float("nan")},
    {"x": float("inf")},
    {"x": Decimal("Infinity")},
    {"x": "4"},
    {"x": True},
    {"": 1},
])
def test_invalid_bindings(bindings):
    with pytest.raises(InvalidArgumentError):
        normalize_bindings(bindings)


def test_domain_error_inside_subtree(engine):
    with pytest.raises(MathDomainError):
        engine.compile("1 + sqrt(0-1)").evaluate()


def test_deep_tree_evaluation_raises_nesting_error(engine):
    root = OperandNode("1")
    for _ in range(5000):
        root = BinaryOpNode('+', root, OperandNode("1"))
    with pytest.raises(NestingTooDeepError):
        Expression(root, engine).evaluate()


def test_to_sympy_goes_through_converter(engine):
    expr = engine.compile("x*e + floor(2.5)")
    assert SymPyConverter(engine).convert(expr.root) == expr.to_sympy()
    assert expr.to_sympy() == sp.Symbol("x") * sp.E + 2
