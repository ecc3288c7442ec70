"""Pipeline orchestration."""

from .grid_pipeline import GridPipeline, PipelineResult, generate_grid

__all__ = ['GridPipeline', 'PipelineResult', 'generate_grid']
