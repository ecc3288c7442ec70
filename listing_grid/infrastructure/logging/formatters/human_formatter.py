"""Console formatter for operators watching a grid generation run."""

import logging
from datetime import datetime
from typing import Any, Dict


class HumanFormatter(logging.Formatter):
    """One line per record, prefixed with the run it belongs to.

    Output looks like::

        14:02:11 INFO     [lisboa 200m | aggregate] Generated 812 grid cells with listing data
                          aggregate_listings 0.041s, 25000 items (609756/s)

    Only the level name is coloured.
    """

    LEVEL_COLORS = {
        'DEBUG': '\033[36m',
        'WARNING': '\033[93m',
        'ERROR': '\033[91m',
        'CRITICAL': '\033[95m',
    }
    RESET = '\033[0m'
    INDENT = ' ' * 18

    def __init__(self, use_colors: bool = False):
        super().__init__()
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        clock = datetime.fromtimestamp(record.created).strftime('%H:%M:%S')
        level = f"{record.levelname:8}"
        if self.use_colors and record.levelname in self.LEVEL_COLORS:
            level = f"{self.LEVEL_COLORS[record.levelname]}{level}{self.RESET}"

        line = f"{clock} {level} "
        run = self.describe_run(getattr(record, 'context', None) or {})
        if run:
            line += f"[{run}] "
        line += record.getMessage()

        performance = getattr(record, 'performance', None)
        if performance and performance.get('items_processed'):
            line += f"\n{self.INDENT}{self.describe_performance(performance)}"

        tb = getattr(record, 'traceback', None)
        if tb:
            line += '\n' + tb.rstrip()
        return line

    @staticmethod
    def describe_run(context: Dict[str, Any]) -> str:
        """``city cell_size | stage`` for records inside a run, '' outside one."""
        parts = []
        if context.get('city'):
            where = str(context['city'])
            if context.get('cell_size_m') is not None:
                where += f" {int(context['cell_size_m'])}m"
            parts.append(where)
        if context.get('stage'):
            parts.append(str(context['stage']))
        return ' | '.join(parts)

    @staticmethod
    def describe_performance(performance: Dict[str, Any]) -> str:
        text = (
            f"{performance.get('operation', 'operation')} "
            f"{performance.get('duration_seconds', 0):.3f}s, "
            f"{performance['items_processed']} items"
        )
        if 'items_per_second' in performance:
            text += f" ({performance['items_per_second']:.0f}/s)"
        return text
