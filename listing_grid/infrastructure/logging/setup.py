"""Setup of console and file logging for a grid generation run."""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Any

from .formatters import HumanFormatter, JsonFormatter
from .structured_logger import get_logger


def _stream_supports_color(stream) -> bool:
    if not hasattr(stream, 'isatty') or not stream.isatty():
        return False
    # NO_COLOR standard
    if os.environ.get('NO_COLOR'):
        return False
    return os.environ.get('TERM', '') != 'dumb'


def console_handler(level: int, stream=None) -> logging.StreamHandler:
    """Human-readable handler on stderr."""
    stream = stream if stream is not None else sys.stderr
    handler = logging.StreamHandler(stream)
    handler.setFormatter(HumanFormatter(use_colors=_stream_supports_color(stream)))
    handler.setLevel(level)
    return handler


def file_handler(log_file: str, config: Any) -> RotatingFileHandler:
    """Rotating JSON-lines handler capturing everything from DEBUG up."""
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(
        filename=str(log_path),
        maxBytes=config.get('logging.max_file_size', 10 * 1024 * 1024),
        backupCount=config.get('logging.backup_count', 3),
        encoding='utf-8'
    )
    handler.setFormatter(JsonFormatter())
    handler.setLevel(logging.DEBUG)
    return handler


def setup_logging(config: Any,
                  log_file: Optional[str] = None,
                  console: bool = True,
                  log_level: Optional[str] = None):
    """Configure the root logger for a run.

    Args:
        config: Config instance (dot-notation ``get`` is used)
        log_file: Optional log file path; when omitted a file is only written
            if ``logging.file_logging`` is enabled in config
        console: Whether to enable console logging
        log_level: Minimum console log level (defaults to ``logging.level``)
    """
    log_level = (log_level or config.get('logging.level', 'INFO')).upper()
    level = getattr(logging, log_level, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    # Handlers are detached, not closed; callers may still own them
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if console:
        root_logger.addHandler(console_handler(level))

    if log_file is None and config.get('logging.file_logging', False):
        log_file = str(Path(config.get('paths.logs_dir', 'logs')) / 'grid_generation.log')

    if log_file is not None:
        root_logger.setLevel(min(level, logging.DEBUG))
        root_logger.addHandler(file_handler(log_file, config))

    get_logger(__name__).debug(
        "Logging configured",
        extra={'context': {'log_level': log_level, 'log_file': log_file}}
    )
