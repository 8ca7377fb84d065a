"""
Logging System for the Formula Engine

Level-gated wrapper around the standard logging module. The engine only emits
trace output; errors are raised to the caller, never logged and dropped.
"""

import logging
import sys
from typing import Optional
from enum import Enum


class LogLevel(Enum):
    """Enumeration of logging levels for the formula engine"""
    SILENT = 0      # No output at all
    MINIMAL = 1     # Warnings only
    MODERATE = 2    # Engine configuration changes
    DETAILED = 3    # One line per top-level evaluation
    VERBOSE = 4     # Tokenize/parse/evaluate traces


class FormulaEngineLogger:
    """
    Centralized logger for the formula engine
    """

    def __init__(self, log_level: LogLevel = LogLevel.MINIMAL,
                 log_to_file: bool = False, log_file_path: Optional[str] = None):
        self.log_level = log_level
        self.log_to_file = log_to_file

        self.logger = logging.getLogger('formula_engine')
        self.logger.setLevel(logging.DEBUG)
        self.logger.handlers.clear()  # Remove any existing handlers

        formatter = logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        )

        if self.log_level != LogLevel.SILENT:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setFormatter(formatter)
            self.logger.addHandler(console_handler)

        if log_to_file:
            if log_file_path is None:
                log_file_path = "formula_engine.log"
            file_handler = logging.FileHandler(log_file_path)
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

    def _should_log(self, required_level: LogLevel) -> bool:
        """Check if message should be logged based on current log level"""
        return self.log_level.value >= required_level.value

    def info(self, message: str, required_level: LogLevel = LogLevel.MODERATE):
        if self._should_log(required_level):
            self.logger.info(message)

    def warning(self, message: str):
        if self._should_log(LogLevel.MINIMAL):
            self.logger.warning(message)

    def evaluation(self, formula: str, n_bindings: int, result=None, error: Optional[Exception] = None):
        """One line per top-level evaluation"""
        if not self._should_log(LogLevel.DETAILED):
            return
        if error is not None:
            self.logger.info(f"EVAL: {formula!r} ({n_bindings} bindings) -> {type(error).__name__}: {error}")
        else:
            self.logger.info(f"EVAL: {formula!r} ({n_bindings} bindings) = {result}")

    def debug(self, message: str):
        """Debug information - only in verbose mode"""
        if self._should_log(LogLevel.VERBOSE):
            self.logger.debug(f"DEBUG: {message}")


# Global logger instance
_global_logger: Optional[FormulaEngineLogger] = None


def get_logger() -> FormulaEngineLogger:
    """Get or create the global logger instance"""
    global _global_logger
    if _global_logger is None:
        _global_logger = FormulaEngineLogger()
    return _global_logger


def set_log_level(level: LogLevel):
    """Set the global logging level"""
    global _global_logger
    if _global_logger is None:
        _global_logger = FormulaEngineLogger(log_level=level)
    else:
        _global_logger.log_level = level


def configure_logging(log_level: LogLevel = LogLevel.MINIMAL,
                      log_to_file: bool = False,
                      log_file_path: Optional[str] = None) -> FormulaEngineLogger:
    """Configure the global logging system"""
    global _global_logger
    _global_logger = FormulaEngineLogger(
        log_level=log_level,
        log_to_file=log_to_file,
        log_file_path=log_file_path
    )
    return _global_logger


def log_debug(message: str):
    get_logger().debug(message)


def log_warning(message: str):
    get_logger().warning(message)
