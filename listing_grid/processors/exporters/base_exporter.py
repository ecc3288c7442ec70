# listing_grid/processors/exporters/base_exporter.py
"""Base exporter for grid export operations."""

from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

from ...abstractions.types import PopulatedCell


class ExportConfig:
    """Configuration for export operations."""

    def __init__(self,
                 output_path: Path,
                 name: str,
                 crs_name: str = 'urn:ogc:def:crs:EPSG::4326',
                 price_decimals: int = 2,
                 indent: int = 2):
        self.output_path = Path(output_path)
        self.name = name
        self.crs_name = crs_name
        self.price_decimals = price_decimals
        self.indent = indent


class BaseExporter(ABC):
    """Abstract base class for grid exporters."""

    def __init__(self):
        self.export_stats: Dict[str, Any] = {
            'features_exported': 0,
            'start_time': None,
            'end_time': None
        }

    @abstractmethod
    def export(self, cells: List[PopulatedCell], config: ExportConfig) -> Path:
        """
        Export populated cells to the configured path.

        Args:
            cells: Populated cells to export
            config: Export configuration

        Returns:
            Path to exported file
        """
        pass

    @abstractmethod
    def validate_export(self, output_path: Path) -> bool:
        """Validate the exported file."""
        pass

    def get_export_stats(self) -> Dict[str, Any]:
        """Get export statistics."""
        stats = self.export_stats.copy()
        if stats['start_time'] and stats['end_time']:
            stats['duration_seconds'] = (
                stats['end_time'] - stats['start_time']
            ).total_seconds()
        return stats

    def _mark_start(self):
        self.export_stats['start_time'] = datetime.now()

    def _mark_end(self, features: int):
        self.export_stats['features_exported'] = features
        self.export_stats['end_time'] = datetime.now()
