"""Expression Tree Module

Binary expression trees: operator nodes over operand leaves, evaluated with
decimal arithmetic.
"""

from .expression import Expression
from .core.node import Node, OperandNode, BinaryOpNode
from .core.operators import (
  NodeType,
  BINARY_OPERATORS,
  PRECEDENCE,
  RIGHT_ASSOCIATIVE,
  evaluate_binary_op,
  resolve_operand,
  normalize_bindings,
)
from .utils import SymPyConverter, ExpressionValidator

__all__ = [
  "Expression",
  "Node", "OperandNode", "BinaryOpNode",
  "NodeType",
  "BINARY_OPERATORS", "PRECEDENCE", "RIGHT_ASSOCIATIVE",
  "evaluate_binary_op", "resolve_operand", "normalize_bindings",
  "SymPyConverter", "ExpressionValidator"
]
