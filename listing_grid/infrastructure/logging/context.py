"""Logging context management for grid generation runs."""

import time
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Optional, Dict, Any

from .structured_logger import run_context, run_metadata, stage_context, get_logger


class LoggingContext:
    """Scope log records to a run and its stages, and time each stage.

    Every record emitted inside :meth:`pipeline` carries the run id and the
    run metadata (city, cell size); inside :meth:`stage` it also carries
    the stage name.
    """

    def __init__(self, run_id: Optional[str] = None):
        """Initialize logging context.

        Args:
            run_id: Run identifier (generated if not provided)
        """
        self.run_id = run_id or str(uuid.uuid4())
        self.timings: Dict[str, Dict[str, Any]] = {}
        self.logger = get_logger(self.__class__.__name__)

    @contextmanager
    def pipeline(self, name: str, **metadata):
        """Context for one run.

        Example:
            with ctx.pipeline('grid_generation', city='lisboa', cell_size_m=200.0):
                ...
        """
        start_time = time.time()
        run_token = run_context.set(self.run_id)
        metadata_token = run_metadata.set(dict(metadata))

        self.logger.info(f"Pipeline started: {name}")

        status = 'completed'
        try:
            yield self
        except Exception:
            status = 'failed'
            raise
        finally:
            self.logger.log_performance(f"pipeline_{name}", time.time() - start_time, status=status)
            run_metadata.reset(metadata_token)
            run_context.reset(run_token)

    @contextmanager
    def stage(self, name: str):
        """Context for one stage; failures are logged with context and re-raised.

        Example:
            with ctx.stage('load_boundary'):
                ...
        """
        stage_token = stage_context.set(name)
        start_time = time.time()
        self.logger.debug(f"Stage started: {name}")

        status = 'completed'
        try:
            yield self
        except Exception as e:
            status = 'failed'
            self.logger.log_error_with_context(e, operation=f"stage_{name}")
            raise
        finally:
            duration = time.time() - start_time
            self.timings[name] = {
                'duration': duration,
                'status': status,
                'timestamp': datetime.now(timezone.utc).isoformat()
            }
            self.logger.log_performance(f"stage_{name}", duration, status=status)
            stage_context.reset(stage_token)

    def get_timings(self) -> Dict[str, Dict[str, Any]]:
        """Timing and status per stage name, in execution order."""
        return self.timings.copy()
