import sympy as sp
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Iterator, Mapping, Optional
from .operators import NodeType, BINARY_OPERATORS, evaluate_binary_op, resolve_operand
from ...errors import InvalidArgumentError


class Node(ABC):
  """Base node of an expression tree. Trees are never mutated after construction."""

  __slots__ = ('item', '_hash_cache', '_size_cache', '_depth_cache')

  left: Optional['Node'] = None
  right: Optional['Node'] = None

  def __init__(self, item: str):
    if not item:
      raise InvalidArgumentError("A node item must be provided.")
    self.item = item
    self._hash_cache: Optional[int] = None
    self._size_cache: Optional[int] = None
    self._depth_cache: Optional[int] = None

  @abstractmethod
  def evaluate(self, bindings: Mapping[str, Decimal], scope) -> Decimal:
    pass

  @abstractmethod
  def to_string(self) -> str:
    pass

  @abstractmethod
  def to_sympy(self, converter) -> sp.Expr:
    pass

  def is_leaf(self) -> bool:
    return self.left is None and self.right is None

  def leaves(self) -> Iterator['OperandNode']:
    """Operands in left-to-right order"""
    if self.is_leaf():
      yield self
    else:
      yield from self.left.leaves()
      yield from self.right.leaves()

  def size(self) -> int:
    if self._size_cache is None:
      self._size_cache = self._compute_size()
    return self._size_cache

  def depth(self) -> int:
    if self._depth_cache is None:
      self._depth_cache = self._compute_depth()
    return self._depth_cache

  @abstractmethod
  def _compute_size(self) -> int:
    pass

  @abstractmethod
  def _compute_depth(self) -> int:
    pass

  def __hash__(self) -> int:
    if self._hash_cache is None:
      self._hash_cache = self._compute_hash()
    return self._hash_cache

  @abstractmethod
  def _compute_hash(self) -> int:
    pass

  def __eq__(self, other) -> bool:
    if not isinstance(other, Node) or type(self) is not type(other):
      return False
    return self.item == other.item and self.left == other.left and self.right == other.right

  def __repr__(self) -> str:
    return f"{type(self).__name__}({self.to_string()!r})"


class OperandNode(Node):
  """Leaf: number literal, variable name, constant name or function-call text."""

  __slots__ = ()

  def evaluate(self, bindings: Mapping[str, Decimal], scope) -> Decimal:
    return resolve_operand(self.item, bindings, scope)

  def to_string(self) -> str:
    return self.item

  def to_sympy(self, converter) -> sp.Expr:
    return converter.operand(self.item)

  def _compute_size(self) -> int:
    return 1

  def _compute_depth(self) -> int:
    return 1

  def _compute_hash(self) -> int:
    return hash((NodeType.OPERAND, self.item))


class BinaryOpNode(Node):
  __slots__ = ('left', 'right')

  def __init__(self, operator: str, left: Node, right: Node):
    if operator not in BINARY_OPERATORS:
      raise InvalidArgumentError(f"Unknown operator '{operator}'", operator)
    if left is None or right is None:
      raise InvalidArgumentError(f"Operator '{operator}' requires two operands", operator)
    super().__init__(operator)
    self.left = left
    self.right = right

  @property
  def operator(self) -> str:
    return self.item

  def evaluate(self, bindings: Mapping[str, Decimal], scope) -> Decimal:
    left_val = self.left.evaluate(bindings, scope)
    right_val = self.right.evaluate(bindings, scope)
    return evaluate_binary_op(left_val, right_val, self.item)

  def to_string(self) -> str:
    return f"({self.left.to_string()} {self.item} {self.right.to_string()})"

  def to_sympy(self, converter) -> sp.Expr:
    left = self.left.to_sympy(converter)
    right = self.right.to_sympy(converter)
    if self.item == '+':
      return sp.Add(left, right)
    elif self.item == '-':
      return sp.Add(left, sp.Mul(-1, right))
    elif self.item == '*':
      return sp.Mul(left, right)
    elif self.item == '/':
      return sp.Mul(left, sp.Pow(right, -1))
    else:
      # Numeric exponents are truncated toward zero, as in evaluate()
      if right.is_number and right.is_real:
        right = sp.Integer(int(right))
      return sp.Pow(left, right)

  def _compute_size(self) -> int:
    return 1 + self.left.size() + self.right.size()

  def _compute_depth(self) -> int:
    return 1 + max(self.left.depth(), self.right.depth())

  def _compute_hash(self) -> int:
    return hash((NodeType.BINARY_OP, self.item, hash(self.left), hash(self.right)))
