"""Formula engine exception hierarchy.

Every error is raised where it is detected and propagates unchanged to the
caller. Each kind also derives from the closest builtin exception.
"""

from contextlib import contextmanager
from typing import Optional


class FormulaError(Exception):
  """Base exception for all formula engine errors."""

  def __init__(self, message: str, text: Optional[str] = None):
    super().__init__(message)
    self.text = text


class MalformedInputError(FormulaError, ValueError):
  """Empty formula, unrecognised character or empty function argument."""

  def __init__(self, message: str, text: Optional[str] = None, position: Optional[int] = None):
    super().__init__(message, text)
    self.position = position


class FormulaSyntaxError(FormulaError, SyntaxError):
  """Unbalanced parentheses or misplaced operators/operands."""


class NestingTooDeepError(FormulaSyntaxError):
  """Formula nests deeper than the configured limits."""


class UnsupportedConstantError(FormulaError, LookupError):
  """Constant name not in the constant table."""


class UnsupportedOperationError(FormulaError, NotImplementedError):
  """Function name not in the function table."""


class UnknownSymbolError(FormulaError, NameError):
  """Leaf resolves to nothing."""

  def __init__(self, symbol: str):
    super().__init__(f"Unknown value '{symbol}' found in formula.", symbol)
    self.symbol = symbol


class DivisionByZeroError(FormulaError, ZeroDivisionError):
  pass


class NumericOverflowError(FormulaError, OverflowError):
  pass


class MathDomainError(FormulaError, ValueError):
  """A function was applied outside of its domain (ln(0), sqrt(-1), ...)."""


class InvalidArgumentError(FormulaError, ValueError):
  """Empty/None name passed to a lookup, or an invalid engine setting."""


@contextmanager
def recursion_guard(text: Optional[str] = None):
  """Re-raise interpreter RecursionError as NestingTooDeepError."""
  try:
    yield
  except RecursionError:
    raise NestingTooDeepError("Formula nests too deeply to evaluate", text) from None
