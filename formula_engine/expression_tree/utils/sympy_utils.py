import sympy as sp
from decimal import Decimal
from ..core.operators import is_number_literal, is_call


class SymPyConverter:
  """Converts expression tree operands to SymPy, expanding function calls.

  ``engine`` must provide ``constants``, ``functions`` and ``compile``.
  Identifiers that are neither constants nor calls become symbols.
  """

  def __init__(self, engine):
    self.engine = engine

  def convert(self, node) -> sp.Expr:
    return node.to_sympy(self)

  def operand(self, item: str) -> sp.Expr:
    if is_number_literal(item):
      return sp.Rational(*Decimal(item).as_integer_ratio())
    if self.engine.constants.is_supported(item):
      return self.engine.constants.symbolic(item)
    if is_call(item):
      name, argument = self.engine.functions.split_call(item)
      inner = self.engine.compile(argument).to_sympy()
      return self.engine.functions.symbolic(name, inner)
    return sp.Symbol(item)
