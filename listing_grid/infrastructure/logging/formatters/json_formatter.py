"""JSON-lines formatter for run log files."""

import json
import logging
import traceback
from datetime import datetime, timezone

# Context keys lifted into the record's "run" object
RUN_KEYS = ('run_id', 'city', 'cell_size_m')


class JsonFormatter(logging.Formatter):
    """Format each record as one JSON object grouped by run.

    ``{"time", "level", "logger", "message", "run": {run_id, city,
    cell_size_m}, "stage", "context", "performance", "traceback"}``;
    empty groups are omitted.
    """

    def format(self, record: logging.LogRecord) -> str:
        context = dict(getattr(record, 'context', None) or {})
        run = {key: context.pop(key) for key in RUN_KEYS if key in context}
        stage = context.pop('stage', None)

        entry = {
            'time': datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        if run:
            entry['run'] = run
        if stage:
            entry['stage'] = stage
        if context:
            entry['context'] = context

        performance = getattr(record, 'performance', None)
        if performance:
            entry['performance'] = performance

        tb = getattr(record, 'traceback', None)
        if not tb and record.exc_info:
            tb = ''.join(traceback.format_exception(*record.exc_info))
        if tb:
            entry['traceback'] = tb

        return json.dumps(entry, separators=(',', ':'), ensure_ascii=False, default=str)
