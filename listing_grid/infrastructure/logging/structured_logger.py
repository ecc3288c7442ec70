"""Structured logging with run context propagation for grid generation runs."""

import logging
import sys
import traceback
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Dict, Any, Optional

# Context variables for correlation across a run
run_context: ContextVar[Optional[str]] = ContextVar('run_id', default=None)
run_metadata: ContextVar[Dict[str, Any]] = ContextVar('run_metadata', default={})
stage_context: ContextVar[Optional[str]] = ContextVar('stage', default=None)


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')


class StructuredLogger(logging.Logger):
    """Logger that attaches the current run to every record.

    Each record carries three extra attributes read by the formatters:

    - ``context``: run id, run metadata (city, cell size), current stage and
      any ``extra={'context': ...}`` fields of the call
    - ``performance``: metrics passed through :meth:`log_performance`
    - ``traceback``: formatted traceback when ``exc_info`` is given
    """

    def _log(self, level, msg, args, exc_info=None, extra=None, stack_info=False, **kwargs):
        context = {
            'run_id': run_context.get(),
            'stage': stage_context.get(),
            **run_metadata.get()
        }
        context = {k: v for k, v in context.items() if v is not None}

        extra = dict(extra) if isinstance(extra, dict) else {}
        performance = extra.pop('performance', None)
        context.update(extra.pop('context', {}))
        traceback_str = extra.pop('traceback', None)

        if not traceback_str and exc_info:
            if isinstance(exc_info, BaseException):
                exc_info = (type(exc_info), exc_info, exc_info.__traceback__)
            elif not isinstance(exc_info, tuple):
                exc_info = sys.exc_info()
            if exc_info[0] is not None:
                traceback_str = ''.join(traceback.format_exception(*exc_info))

        extra.update({
            'context': context,
            'performance': performance,
            'traceback': traceback_str
        })

        super()._log(level, msg, args, exc_info=False, extra=extra,
                     stack_info=stack_info, **kwargs)

    def log_performance(self, operation: str, duration: float, **metrics):
        """Log how long an operation took.

        Args:
            operation: Operation name, e.g. ``stage_aggregate``
            duration: Duration in seconds
            **metrics: Counts for the operation (items_processed, cells_populated, ...)
        """
        performance_data = {
            'operation': operation,
            'duration_seconds': round(duration, 3),
            'timestamp': _utc_timestamp(),
            **metrics
        }

        if 'items_processed' in metrics and duration > 0:
            performance_data['items_per_second'] = round(
                metrics['items_processed'] / duration, 2
            )

        self.info(
            f"Performance: {operation} completed in {duration:.3f}s",
            extra={'performance': performance_data}
        )

    def log_error_with_context(self, error: Exception, operation: Optional[str] = None, **context):
        """Log an error with its type, the failing operation and the traceback."""
        error_context = {
            'error_type': type(error).__name__,
            'error_module': type(error).__module__,
            **context
        }

        if operation:
            error_context['operation'] = operation

        self.error(
            f"{type(error).__name__}: {str(error)}",
            exc_info=error,
            extra={'context': error_context}
        )


_logger_cache: Dict[str, StructuredLogger] = {}


def get_logger(name: str) -> StructuredLogger:
    """Get or create a structured logger instance.

    Example:
        from listing_grid.infrastructure.logging import get_logger
        logger = get_logger(__name__)
    """
    if name in _logger_cache:
        return _logger_cache[name]

    original_class = logging.getLoggerClass()
    logging.setLoggerClass(StructuredLogger)

    try:
        logger = logging.getLogger(name)
        _logger_cache[name] = logger
        return logger
    finally:
        logging.setLoggerClass(original_class)
