"""Formula Engine Package

Evaluates calculator formulas (numbers, variables, constants, + - * / ^ and
unary functions) with arbitrary-precision decimal arithmetic.
"""

from .config import EngineConfig
from .constants import ConstantTable, SUPPORTED_CONSTANTS
from .engine import FormulaEngine, evaluate_formula, get_default_engine
from .errors import (
  FormulaError, MalformedInputError, FormulaSyntaxError, NestingTooDeepError,
  UnsupportedConstantError, UnsupportedOperationError, UnknownSymbolError,
  DivisionByZeroError, NumericOverflowError, MathDomainError, InvalidArgumentError
)
from .expression_tree import (
  Expression, Node, OperandNode, BinaryOpNode, ExpressionValidator
)
from .functions import FunctionTable, SUPPORTED_FUNCTIONS
from .logging_system import LogLevel, configure_logging, get_logger, set_log_level
from .parser import ExpressionParser, parse
from .tokenizer import Token, TokenKind, tokenize

__version__ = "0.1.0"
__all__ = [
  "EngineConfig",
  "ConstantTable", "SUPPORTED_CONSTANTS",
  "FormulaEngine", "evaluate_formula", "get_default_engine",
  "FormulaError", "MalformedInputError", "FormulaSyntaxError", "NestingTooDeepError",
  "UnsupportedConstantError", "UnsupportedOperationError", "UnknownSymbolError",
  "DivisionByZeroError", "NumericOverflowError", "MathDomainError", "InvalidArgumentError",
  "Expression", "Node", "OperandNode", "BinaryOpNode", "ExpressionValidator",
  "FunctionTable", "SUPPORTED_FUNCTIONS",
  "LogLevel", "configure_logging", "get_logger", "set_log_level",
  "ExpressionParser", "parse",
  "Token", "TokenKind", "tokenize",
]
