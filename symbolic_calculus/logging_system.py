"""
Logging System for Symbolic Calculus

This module provides a centralized logger with coarse verbosity levels. Output
goes to stderr because stdout carries command results.
"""

import logging
import sys
from typing import Optional
from enum import Enum


class LogLevel(Enum):
    """Enumeration of logging levels"""
    SILENT = 0      # No output at all
    MINIMAL = 1     # Warnings only
    MODERATE = 2    # Key milestones
    DETAILED = 3    # Per-operation summaries
    VERBOSE = 4     # Everything, including rule-by-rule debug output


class CalculusLogger:
    """
    Centralized logger wrapping the 'symbolic_calculus' stdlib logger
    """

    def __init__(self, log_level: LogLevel = LogLevel.SILENT):
        self.log_level = log_level

        self.logger = logging.getLogger('symbolic_calculus')
        self.logger.setLevel(logging.DEBUG)
        self.logger.propagate = False
        self.logger.handlers.clear()  # Remove any existing handlers

        formatter = logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        )

        if self.log_level != LogLevel.SILENT:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setFormatter(formatter)
            self.logger.addHandler(console_handler)

    def _should_log(self, required_level: LogLevel) -> bool:
        """Check if message should be logged based on current log level"""
        return self.log_level.value >= required_level.value

    def info(self, message: str, required_level: LogLevel = LogLevel.DETAILED):
        if self._should_log(required_level):
            self.logger.info(message)

    def milestone(self, message: str):
        if self._should_log(LogLevel.MODERATE):
            self.logger.info(f"MILESTONE: {message}")

    def warning(self, message: str):
        if self._should_log(LogLevel.MINIMAL):
            self.logger.warning(message)

    def debug(self, message: str):
        """Debug information - only in verbose mode"""
        if self._should_log(LogLevel.VERBOSE):
            self.logger.debug(f"DEBUG: {message}")


# Global logger instance
_global_logger: Optional[CalculusLogger] = None


def get_logger() -> CalculusLogger:
    """Get or create the global logger instance"""
    global _global_logger
    if _global_logger is None:
        _global_logger = CalculusLogger()
    return _global_logger


def set_log_level(level: LogLevel):
    """Set the global logging level"""
    configure_logging(log_level=level)


def configure_logging(log_level: LogLevel = LogLevel.SILENT) -> CalculusLogger:
    """Configure the global logging system"""
    global _global_logger
    _global_logger = CalculusLogger(log_level=log_level)
    return _global_logger


# Convenience functions for common operations
def log_info(message: str, level: LogLevel = LogLevel.DETAILED):
    get_logger().info(message, level)


def log_milestone(message: str):
    get_logger().milestone(message)


def log_warning(message: str):
    get_logger().warning(message)


def log_debug(message: str):
    get_logger().debug(message)
