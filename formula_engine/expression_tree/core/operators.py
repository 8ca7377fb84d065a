import re
import decimal
from decimal import Decimal
from enum import IntEnum
from numbers import Real
from typing import Any, Dict, Mapping, Optional

import numpy as np

from ...errors import (
  DivisionByZeroError, InvalidArgumentError, MathDomainError,
  NumericOverflowError, UnknownSymbolError
)


class NodeType(IntEnum):
  OPERAND = 0
  BINARY_OP = 1


# Binding strength; the parser builds one grammar level per distinct value
PRECEDENCE = {'+': 1, '-': 1, '*': 2, '/': 2, '^': 3}
BINARY_OPERATORS = frozenset(PRECEDENCE)
RIGHT_ASSOCIATIVE = frozenset('^')

NUMBER_LITERAL = re.compile(r'(?:\d+(?:\.\d*)?|\.\d+)\Z')


def is_number_literal(item: str) -> bool:
  return NUMBER_LITERAL.match(item) is not None


def is_call(item: str) -> bool:
  return '(' in item


def evaluate_binary_op(left_val: Decimal, right_val: Decimal, operator: str) -> Decimal:
  """Combine two operands in the current decimal context."""
  ctx = decimal.getcontext()
  try:
    if operator == '+':
      return ctx.add(left_val, right_val)
    elif operator == '-':
      return ctx.subtract(left_val, right_val)
    elif operator == '*':
      return ctx.multiply(left_val, right_val)
    elif operator == '/':
      if right_val.is_zero():
        raise DivisionByZeroError(f"Division by zero: {left_val} / {right_val}")
      return ctx.divide(left_val, right_val)
    elif operator == '^':
      # Exponent is truncated toward zero; fractional powers are not supported.
      exponent = int(right_val)
      if exponent == 0:
        return Decimal(1)
      if exponent < 0 and left_val.is_zero():
        raise DivisionByZeroError(f"Division by zero: {left_val} ^ {right_val}")
      return ctx.power(left_val, exponent)
  except decimal.Overflow:
    raise NumericOverflowError(
      f"Result of {left_val} {operator} {right_val} exceeds the representable range"
    ) from None
  except decimal.DivisionByZero:
    raise DivisionByZeroError(f"Division by zero: {left_val} {operator} {right_val}") from None
  except decimal.InvalidOperation as e:
    raise MathDomainError(f"Invalid operation: {left_val} {operator} {right_val}") from e
  raise InvalidArgumentError(f"Unknown operator '{operator}'", operator)


def to_decimal(name: str, value: Any) -> Decimal:
  """Promote a binding value to Decimal, rejecting non-finite numbers."""
  if isinstance(value, (bool, np.bool_, np.complexfloating)) or not isinstance(value, (Real, Decimal, np.number)):
    raise InvalidArgumentError(f"Value bound to '{name}' is not a number: {value!r}", name)
  if isinstance(value, Decimal):
    result = value
  elif isinstance(value, (int, np.integer)):
    result = Decimal(int(value))
  else:
    value = float(value)
    if not np.isfinite(value):
      raise InvalidArgumentError(f"Value bound to '{name}' is not finite: {value!r}", name)
    # repr gives the shortest string that round-trips, avoiding binary expansion noise
    result = Decimal(repr(value))
  if not result.is_finite():
    raise InvalidArgumentError(f"Value bound to '{name}' is not finite: {value!r}", name)
  return result


def normalize_bindings(bindings: Optional[Mapping[str, Any]]) -> Dict[str, Decimal]:
  if bindings is None:
    return {}
  normalized = {}
  for name, value in bindings.items():
    if not isinstance(name, str) or not name:
      raise InvalidArgumentError(f"Variable names must be non-empty strings, got {name!r}")
    normalized[name] = to_decimal(name, value)
  return normalized


def resolve_operand(item: str, bindings: Mapping[str, Decimal], scope) -> Decimal:
  """
  Resolve a leaf: number literal, then variable, then constant, then
  function call. ``scope`` provides ``constants`` and ``functions`` tables.
  """
  if is_number_literal(item):
    return Decimal(item)
  if item in bindings:
    return bindings[item]
  if scope.constants.is_supported(item):
    return scope.constants.resolve(item)
  if is_call(item):
    return scope.functions.invoke(item, bindings)
  raise UnknownSymbolError(item)
