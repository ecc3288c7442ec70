"""Structured logging infrastructure for grid generation runs."""

from .structured_logger import StructuredLogger, get_logger
from .context import LoggingContext
from .setup import setup_logging

__all__ = [
    'StructuredLogger',
    'get_logger',
    'LoggingContext',
    'setup_logging',
]
