"""Exporters for populated grids."""

from .base_exporter import BaseExporter, ExportConfig
from .geojson_exporter import (
    GeoJSONExporter,
    grid_name,
    output_path_for,
    summarize,
    log_summary
)

__all__ = [
    'BaseExporter',
    'ExportConfig',
    'GeoJSONExporter',
    'grid_name',
    'output_path_for',
    'summarize',
    'log_summary'
]
