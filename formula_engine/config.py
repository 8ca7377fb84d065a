"""Engine configuration: decimal precision/rounding policy and recursion limits."""

import decimal
import sys
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

from .errors import InvalidArgumentError
from .logging_system import LogLevel

ROUNDING_MODES = (
    decimal.ROUND_HALF_EVEN, decimal.ROUND_HALF_UP, decimal.ROUND_HALF_DOWN,
    decimal.ROUND_UP, decimal.ROUND_DOWN, decimal.ROUND_CEILING,
    decimal.ROUND_FLOOR, decimal.ROUND_05UP,
)

# Half the interpreter recursion limit, at least 64
DEFAULT_MAX_TREE_DEPTH = max(64, sys.getrecursionlimit() // 2)


@dataclass(frozen=True)
class EngineConfig:
    """Settings shared by every evaluation an engine performs"""
    precision: int = 50                  # significant digits
    rounding: str = decimal.ROUND_HALF_EVEN
    max_nesting_depth: int = 32          # parenthesis depth, function calls included
    max_tree_depth: int = DEFAULT_MAX_TREE_DEPTH  # height of one parsed tree
    max_factorial: int = 170             # 170! is the largest factorial a double holds
    log_level: Optional[LogLevel] = None  # None leaves the process-wide level alone

    def __post_init__(self):
        """Validate fields after initialization"""
        for name in ('precision', 'max_nesting_depth', 'max_tree_depth'):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                raise InvalidArgumentError(f"{name} must be a positive integer, got {value!r}")
        if not isinstance(self.max_factorial, int) or self.max_factorial < 0:
            raise InvalidArgumentError(f"max_factorial must be a non-negative integer, got {self.max_factorial!r}")
        if self.rounding not in ROUNDING_MODES:
            raise InvalidArgumentError(f"Unknown rounding mode {self.rounding!r}")
        if self.log_level is not None and not isinstance(self.log_level, LogLevel):
            raise InvalidArgumentError(f"log_level must be a LogLevel, got {self.log_level!r}")

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> 'EngineConfig':
        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise InvalidArgumentError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
        values = dict(values)
        level = values.get('log_level')
        if isinstance(level, str):
            try:
                values['log_level'] = LogLevel[level.upper()]
            except KeyError:
                raise InvalidArgumentError(f"Unknown log level {level!r}") from None
        return cls(**values)

    def decimal_context(self) -> decimal.Context:
        """Fresh context; overflow and invalid operations raise instead of yielding Inf/NaN."""
        return decimal.Context(
            prec=self.precision,
            rounding=self.rounding,
            traps=[decimal.InvalidOperation, decimal.DivisionByZero, decimal.Overflow],
        )
