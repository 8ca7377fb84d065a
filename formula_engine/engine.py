"""
Formula engine entry points.

``evaluate_formula`` drives tokenize -> parse -> evaluate for one formula.
Function arguments go through the same pipeline recursively: the function
table is constructed with the engine's sub-formula evaluator.
"""

import decimal
import threading
from decimal import Decimal
from typing import Any, Mapping, Optional

import sympy as sp

from .config import EngineConfig
from .constants import ConstantTable
from .errors import recursion_guard
from .expression_tree import Expression, ExpressionValidator
from .expression_tree.core.operators import normalize_bindings
from .functions import FunctionTable
from .logging_system import get_logger, log_warning, set_log_level
from .parser import ExpressionParser
from .tokenizer import tokenize


class FormulaEngine:
    """
    Evaluates formulas against variable bindings with decimal arithmetic.

    The constant and function tables are built once and never modified, so one
    engine may be shared between threads. Each evaluation runs in its own
    decimal context.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()
        if self.config.log_level is not None:
            set_log_level(self.config.log_level)
        self.logger = get_logger()
        self.constants = ConstantTable(self.config.precision)
        self.functions = FunctionTable(self._evaluate_subformula, self.config.max_factorial)
        self.parser = ExpressionParser(self.config.max_nesting_depth, self.config.max_tree_depth)
        self.logger.info(
            f"Formula engine ready: precision={self.config.precision}, "
            f"rounding={self.config.rounding}, max_tree_depth={self.config.max_tree_depth}"
        )

    def compile(self, formula: str) -> Expression:
        """Tokenize and parse once; the result can be evaluated many times."""
        tokens = tokenize(formula)
        self.logger.debug(f"tokens: {[t.text for t in tokens]}")
        with recursion_guard(formula):
            root = self.parser.parse(tokens)
            ExpressionValidator.validate(root, self.config.max_tree_depth)
        return Expression(root, self)

    def evaluate(self, formula: str, bindings: Optional[Mapping[str, Any]] = None) -> Decimal:
        n_bindings = len(bindings) if bindings else 0
        try:
            normalized = normalize_bindings(bindings)
            self._warn_shadowed_constants(normalized)
            root = self.compile(formula).root
            with decimal.localcontext(self.config.decimal_context()), recursion_guard(formula):
                result = root.evaluate(normalized, self)
        except Exception as e:
            self.logger.evaluation(formula, n_bindings, error=e)
            raise
        self.logger.evaluation(formula, n_bindings, result=result)
        return result

    def _warn_shadowed_constants(self, bindings: Mapping[str, Decimal]):
        for name in bindings:
            if self.constants.is_supported(name):
                log_warning(f"Variable '{name}' shadows the built-in constant of the same name")

    def _evaluate_subformula(self, argument: str, bindings: Mapping[str, Decimal]) -> Decimal:
        # Runs inside the caller's decimal context
        return self.compile(argument).root.evaluate(bindings, self)

    def to_sympy(self, formula: str) -> sp.Expr:
        return self.compile(formula).to_sympy()


_default_engine: Optional[FormulaEngine] = None
_default_engine_lock = threading.Lock()


def get_default_engine() -> FormulaEngine:
    """Get or create the process-wide engine with the default configuration"""
    global _default_engine
    with _default_engine_lock:
        if _default_engine is None:
            _default_engine = FormulaEngine()
        return _default_engine


def evaluate_formula(formula_text: str, variable_bindings: Optional[Mapping[str, Any]] = None) -> Decimal:
    """Evaluate ``formula_text`` with the given variable values.

    >>> evaluate_formula("x+1", {"x": 4})
    Decimal('5')
    """
    return get_default_engine().evaluate(formula_text, variable_bindings)
