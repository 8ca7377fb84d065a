import decimal
from decimal import Decimal
from typing import Any, List, Mapping, Optional
import sympy as sp
from .core.node import Node
from .core.operators import normalize_bindings, is_number_literal, is_call
from .utils.sympy_utils import SymPyConverter
from ..errors import recursion_guard


class Expression:
  """A parsed formula bound to the engine whose tables resolve its operands"""

  __slots__ = ('root', 'engine', '_string_cache')

  def __init__(self, root: Node, engine):
    self.root = root
    self.engine = engine
    self._string_cache: Optional[str] = None

  def evaluate(self, bindings: Optional[Mapping[str, Any]] = None) -> Decimal:
    normalized = normalize_bindings(bindings)
    with decimal.localcontext(self.engine.config.decimal_context()), recursion_guard():
      return self.root.evaluate(normalized, self.engine)

  def to_string(self) -> str:
    if self._string_cache is None:
      self._string_cache = self.root.to_string()
    return self._string_cache

  def size(self) -> int:
    """Node count"""
    return self.root.size()

  def depth(self) -> int:
    return self.root.depth()

  def variables(self) -> List[str]:
    """Names the formula expects in its bindings, in first-use order.

    Function arguments are searched too. Constant names are excluded even
    though a binding of the same name would take precedence.
    """
    names: List[str] = []
    for leaf in self.root.leaves():
      item = leaf.item
      if is_number_literal(item) or self.engine.constants.is_supported(item):
        continue
      if is_call(item):
        _, argument = self.engine.functions.split_call(item)
        found = self.engine.compile(argument).variables()
      else:
        found = [item]
      for name in found:
        if name not in names:
          names.append(name)
    return names

  def to_sympy(self) -> sp.Expr:
    return SymPyConverter(self.engine).convert(self.root)

  def __str__(self) -> str:
    return self.to_string()

  def __repr__(self) -> str:
    return f"Expression({self.to_string()!r})"

  def __hash__(self) -> int:
    return hash(self.root)

  def __eq__(self, other) -> bool:
    if not isinstance(other, Expression):
      return False
    return self.root == other.root
