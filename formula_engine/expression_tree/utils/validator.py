from typing import Optional
from ..core.node import Node, OperandNode, BinaryOpNode
from ..core.operators import BINARY_OPERATORS
from ...errors import FormulaSyntaxError, NestingTooDeepError


class ExpressionValidator:

  @staticmethod
  def is_valid_expression(node: Node, max_depth: Optional[int] = None) -> bool:
    try:
      ExpressionValidator.validate(node, max_depth)
      return True
    except FormulaSyntaxError:
      return False

  @staticmethod
  def validate(node: Node, max_depth: Optional[int] = None):
    """Raise FormulaSyntaxError unless every operator node has two valid operands."""
    if max_depth is not None and node.depth() > max_depth:
      raise NestingTooDeepError(
        f"Expression tree depth {node.depth()} exceeds the limit of {max_depth}"
      )
    ExpressionValidator._validate_recursive(node)

  @staticmethod
  def _validate_recursive(node: Node):
    if isinstance(node, BinaryOpNode):
      if node.item not in BINARY_OPERATORS:
        raise FormulaSyntaxError(f"Unknown operator '{node.item}'", node.item)
      if node.left is None or node.right is None:
        raise FormulaSyntaxError(f"Operator '{node.item}' is missing an operand", node.item)
      ExpressionValidator._validate_recursive(node.left)
      ExpressionValidator._validate_recursive(node.right)

    elif isinstance(node, OperandNode):
      if not node.item or not node.item.strip():
        raise FormulaSyntaxError("Empty operand in expression tree")
      if node.item in BINARY_OPERATORS:
        raise FormulaSyntaxError(f"Operator '{node.item}' used as an operand", node.item)

    else:
      raise FormulaSyntaxError(f"Unexpected node type {type(node).__name__}")
