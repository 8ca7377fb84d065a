"""
Named unary functions available in formulas.

A call such as ``sqrt(x + 1)`` reaches the table as a single operand. The
argument text is evaluated through the sub-formula evaluator the table was
constructed with, using the caller's bindings, before the function body runs.
"""

import decimal
import math
from dataclasses import dataclass
from decimal import Decimal
from types import MappingProxyType
from typing import Callable, Mapping, Optional, Tuple

import numpy as np
import sympy as sp

from .errors import (
    InvalidArgumentError, MalformedInputError, MathDomainError,
    NumericOverflowError, UnsupportedOperationError
)
from .logging_system import log_debug

SUPPORTED_FUNCTIONS: Tuple[str, ...] = (
    "sin", "cos", "tan",
    "floor", "ceil", "round",
    "log", "ln",
    "fact",
    "sqrt",
)

SubformulaEvaluator = Callable[[str, Mapping[str, Decimal]], Decimal]


@dataclass(frozen=True)
class FunctionEntry:
    name: str
    apply: Callable[[Decimal], Decimal]
    symbolic: Callable[[sp.Expr], sp.Expr]


def _native(ufunc):
    """Run a numpy ufunc on the native double and promote the result back."""
    def apply(value: Decimal) -> Decimal:
        with np.errstate(all='ignore'):
            result = ufunc(np.float64(float(value)))
        if not np.isfinite(result):
            raise MathDomainError(f"{ufunc.__name__}({value}) is undefined")
        return +Decimal(float(result))
    return apply


def _to_integral(rounding):
    def apply(value: Decimal) -> Decimal:
        # Exact integer, not re-rounded to the context precision; -0 becomes 0
        result = value.to_integral_value(rounding=rounding)
        return result.copy_abs() if result.is_zero() else result
    return apply


def _decimal_method(method_name: str):
    def apply(value: Decimal) -> Decimal:
        ctx = decimal.getcontext()
        try:
            result = getattr(ctx, method_name)(value)
        except (decimal.InvalidOperation, decimal.DivisionByZero):
            raise MathDomainError(f"{method_name}({value}) is undefined") from None
        if not result.is_finite():
            raise MathDomainError(f"{method_name}({value}) is undefined")
        return result
    return apply


def _symbolic_round(arg: sp.Expr) -> sp.Expr:
    if arg.is_number:
        return sp.Integer(int(Decimal(str(sp.N(arg, 30))).to_integral_value(rounding=decimal.ROUND_HALF_UP)))
    return sp.Function('round')(arg)


class FunctionTable:
    """Read-only registry of function name -> unary Decimal operation"""

    def __init__(self, evaluate_subformula: SubformulaEvaluator, max_factorial: int = 170):
        self._evaluate_subformula = evaluate_subformula
        self.max_factorial = max_factorial
        entries = (
            FunctionEntry("sin", _native(np.sin), sp.sin),
            FunctionEntry("cos", _native(np.cos), sp.cos),
            FunctionEntry("tan", _native(np.tan), sp.tan),
            FunctionEntry("floor", _to_integral(decimal.ROUND_FLOOR), sp.floor),
            FunctionEntry("ceil", _to_integral(decimal.ROUND_CEILING), sp.ceiling),
            FunctionEntry("round", _to_integral(decimal.ROUND_HALF_UP), _symbolic_round),
            FunctionEntry("log", _decimal_method("log10"), lambda a: sp.log(a, 10)),
            FunctionEntry("ln", _decimal_method("ln"), sp.log),
            FunctionEntry("fact", self._factorial, sp.factorial),
            FunctionEntry("sqrt", _decimal_method("sqrt"), sp.sqrt),
        )
        self._entries = MappingProxyType({entry.name: entry for entry in entries})

    def is_supported(self, name: Optional[str]) -> bool:
        if name is None or name == "":
            raise InvalidArgumentError("A function name must be provided.")
        return name in self._entries

    def supported_names(self) -> Tuple[str, ...]:
        return SUPPORTED_FUNCTIONS

    @staticmethod
    def split_call(call_text: Optional[str]) -> Tuple[str, str]:
        """Split ``name(argument)`` at the first '(' and the last ')'."""
        if call_text is None or call_text == "":
            raise InvalidArgumentError("A function must be provided.")
        open_idx = call_text.find('(')
        close_idx = call_text.rfind(')')
        if open_idx <= 0 or close_idx != len(call_text) - 1:
            raise MalformedInputError(f"'{call_text}' is not of the form name(argument).", call_text)
        name = call_text[:open_idx].strip()
        argument = call_text[open_idx + 1:close_idx]
        if not argument.strip():
            raise MalformedInputError(f"A parameter must be provided to '{name}'.", call_text)
        return name, argument

    def invoke(self, call_text: str, bindings: Mapping[str, Decimal]) -> Decimal:
        name, argument = self.split_call(call_text)
        if not self.is_supported(name):
            raise UnsupportedOperationError(f"Function '{name}' is not supported.", name)

        value = self._evaluate_subformula(argument, bindings)
        if np.isinf(float(value)):
            raise NumericOverflowError(
                f"Argument of {name}() is too large to use in functions: {value}", call_text
            )

        result = self._entries[name].apply(value)
        log_debug(f"{name}({argument}) -> {value} -> {result}")
        return result

    def symbolic(self, name: str, argument: sp.Expr) -> sp.Expr:
        if not self.is_supported(name):
            raise UnsupportedOperationError(f"Function '{name}' is not supported.", name)
        return self._entries[name].symbolic(argument)

    def _factorial(self, value: Decimal) -> Decimal:
        n = int(value.to_integral_value(rounding=decimal.ROUND_HALF_UP))
        if n < 0:
            raise MathDomainError(f"fact({value}) is undefined for negative numbers")
        if n > self.max_factorial:
            raise NumericOverflowError(
                f"fact({value}) exceeds the largest supported factorial argument {self.max_factorial}"
            )
        return +Decimal(math.factorial(n))
