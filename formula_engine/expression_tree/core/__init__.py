"""Core expression tree components."""

from .node import Node, OperandNode, BinaryOpNode
from .operators import (
  NodeType, BINARY_OPERATORS, PRECEDENCE, RIGHT_ASSOCIATIVE,
  evaluate_binary_op, resolve_operand, normalize_bindings, to_decimal,
  is_number_literal, is_call
)

__all__ = [
  'Node', 'OperandNode', 'BinaryOpNode',
  'NodeType', 'BINARY_OPERATORS', 'PRECEDENCE', 'RIGHT_ASSOCIATIVE',
  'evaluate_binary_op', 'resolve_operand', 'normalize_bindings', 'to_decimal',
  'is_number_literal', 'is_call'
]
