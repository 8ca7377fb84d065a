"""
Named constants available in formulas.

Values are computed once per table from their SymPy definitions at the
table's precision, so ``pi`` carries as many digits as the decimal context.
"""

import decimal
from decimal import Decimal
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

import sympy as sp

from .errors import InvalidArgumentError, UnsupportedConstantError

SUPPORTED_CONSTANTS: Tuple[str, ...] = ("e", "pi", "tau", "hue")

CONSTANT_DEFINITIONS: Mapping[str, sp.Expr] = MappingProxyType({
    "e": sp.E,
    "pi": sp.pi,
    "tau": 2 * sp.pi,
    "hue": sp.Integer(9001),
})


def _evaluate_symbolic(expr: sp.Expr, precision: int) -> Decimal:
    if expr.is_Integer:
        return Decimal(int(expr))
    # A few guard digits, then round to the context precision
    digits = sp.N(expr, precision + 5)
    return decimal.Context(prec=precision).create_decimal(str(digits))


class ConstantTable:
    """Read-only registry of constant name -> precomputed Decimal"""

    def __init__(self, precision: int = 50):
        self.precision = precision
        self._values = MappingProxyType({
            name: _evaluate_symbolic(CONSTANT_DEFINITIONS[name], precision)
            for name in SUPPORTED_CONSTANTS
        })

    @staticmethod
    def _check_name(name: Optional[str]):
        if name is None or name == "":
            raise InvalidArgumentError("A constant name must be provided.")

    def is_supported(self, name: Optional[str]) -> bool:
        self._check_name(name)
        return name in self._values

    def resolve(self, name: str) -> Decimal:
        self._check_name(name)
        try:
            return self._values[name]
        except KeyError:
            raise UnsupportedConstantError(f"Constant '{name}' is not supported.", name) from None

    def symbolic(self, name: str) -> sp.Expr:
        if not self.is_supported(name):
            raise UnsupportedConstantError(f"Constant '{name}' is not supported.", name)
        return CONSTANT_DEFINITIONS[name]

    def supported_names(self) -> Tuple[str, ...]:
        return SUPPORTED_CONSTANTS

    def values(self) -> Mapping[str, Decimal]:
        return self._values
