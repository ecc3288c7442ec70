# listing_grid/processors/exporters/geojson_exporter.py
"""GeoJSON exporter for populated grid cells."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ...abstractions.types import PopulatedCell
from ...infrastructure.logging import get_logger
from .base_exporter import BaseExporter, ExportConfig

logger = get_logger(__name__)


def grid_name(city: str, cell_size_m: float) -> str:
    """Run name ``{city}_{cell size truncated to whole metres}``."""
    return f"{city}_{int(cell_size_m)}"


def output_path_for(output_dir: Union[str, Path], city: str, cell_size_m: float) -> Path:
    """Deterministic output location for a city and cell size."""
    return Path(output_dir) / f"{grid_name(city, cell_size_m)}.geojson"


class GeoJSONExporter(BaseExporter):
    """Export populated cells as a GeoJSON FeatureCollection."""

    def __init__(self):
        super().__init__()
        self.last_collection: Optional[Dict[str, Any]] = None

    def build_feature(self, item: PopulatedCell, price_decimals: int = 2) -> Dict[str, Any]:
        """One Feature with bounds, price statistics and the cell rectangle."""
        cell, stats = item.cell, item.stats
        properties = {
            'id': cell.id,
            'left': cell.left,
            'top': cell.top,
            'right': cell.right,
            'bottom': cell.bottom,
            'price_min': round(stats.min, price_decimals),
            'price_max': round(stats.max, price_decimals),
            'price_mean': round(stats.mean, price_decimals),
            'listings_count': float(stats.count)
        }
        return {
            'type': 'Feature',
            'properties': properties,
            'geometry': {
                'type': 'Polygon',
                'coordinates': [cell.ring]
            }
        }

    def build_collection(self, cells: List[PopulatedCell], config: ExportConfig) -> Dict[str, Any]:
        return {
            'type': 'FeatureCollection',
            'name': config.name,
            'crs': {
                'type': 'name',
                'properties': {
                    'name': config.crs_name
                }
            },
            'features': [self.build_feature(item, config.price_decimals) for item in cells]
        }

    def export(self, cells: List[PopulatedCell], config: ExportConfig) -> Path:
        """
        Write the FeatureCollection to ``config.output_path``.

        Args:
            cells: Populated cells in lattice order
            config: Export configuration

        Returns:
            Path to the written file
        """
        self._mark_start()
        collection = self.build_collection(cells, config)

        output_file = config.output_path
        output_file.parent.mkdir(parents=True, exist_ok=True)
        logger.info(f"Saving to {output_file}...")

        try:
            with open(output_file, 'w', encoding='utf-8') as f:
                json.dump(collection, f, indent=config.indent, ensure_ascii=False, allow_nan=False)
                f.write('\n')
        except Exception as e:
            logger.error(f"Export failed: {e}")
            raise

        self.last_collection = collection
        self._mark_end(len(collection['features']))
        logger.info(
            f"Successfully created {output_file} with {len(collection['features'])} grid cells"
        )
        return output_file

    def validate_export(self, output_path: Path) -> bool:
        """Check the file decodes as a FeatureCollection with the exported count."""
        try:
            with open(output_path, 'r', encoding='utf-8') as f:
                document = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Export validation failed for {output_path}: {e}")
            return False

        return (
            document.get('type') == 'FeatureCollection' and
            len(document.get('features', [])) == self.export_stats['features_exported']
        )


def summarize(features: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Run-level statistics over exported features.

    Returns an empty dict when there are no features.
    """
    if not features:
        return {}

    means = [feature['properties']['price_mean'] for feature in features]
    counts = [feature['properties']['listings_count'] for feature in features]

    return {
        'cells': len(features),
        'price_min': min(means),
        'price_max': max(means),
        'price_mean': round(sum(means) / len(means), 2),
        'total_listings': int(sum(counts)),
        'listings_per_cell': round(sum(counts) / len(counts), 1)
    }


def log_summary(summary: Dict[str, Any]):
    """Report run statistics for operator visibility."""
    if not summary:
        logger.warning("No grid cells contain listings; nothing to summarize")
        return

    logger.info("Statistics:", extra={'context': {'summary': summary}})
    logger.info(f"Price range: €{summary['price_min']} - €{summary['price_max']}")
    logger.info(f"Average price: €{summary['price_mean']}")
    logger.info(f"Total listings: {summary['total_listings']}")
    logger.info(f"Average listings per cell: {summary['listings_per_cell']}")
