from .sympy_utils import SymPyConverter
from .validator import ExpressionValidator

__all__ = ['SymPyConverter', 'ExpressionValidator']
