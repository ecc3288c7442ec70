# listing_grid/pipelines/grid_pipeline.py
"""Sequential grid generation run: load, build, aggregate, export."""

import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from ..abstractions.types import Boundary, GridSpec, Listing, PopulatedCell
from ..config import config as default_config
from ..exceptions import InputFileError, ValidationError
from ..grid_systems import CoordinateConverter, RectangularGrid
from ..infrastructure.logging import LoggingContext, get_logger
from ..loaders import BoundaryLoader, ListingLoader
from ..processors.aggregation import CellAggregator
from ..processors.exporters import (
    ExportConfig,
    GeoJSONExporter,
    grid_name,
    log_summary,
    output_path_for,
    summarize
)

logger = get_logger(__name__)


@dataclass
class PipelineResult:
    """Outcome of one grid generation run."""
    output_path: Path
    spec: GridSpec
    listings_loaded: int
    cells_kept: int
    cells_populated: int
    summary: Dict[str, Any] = field(default_factory=dict)
    timings: Dict[str, Dict[str, Any]] = field(default_factory=dict)


class GridPipeline:
    """
    Generate the price grid for one city at one cell size.

    Stages run strictly in order and the first failure ends the run:
    load_boundary -> load_listings -> build_grid -> aggregate -> export.
    """

    def __init__(self,
                 city: str,
                 cell_size_m: Optional[float] = None,
                 config: Optional[Any] = None,
                 source_dir: Optional[Path] = None,
                 output_dir: Optional[Path] = None):
        """
        Initialize pipeline.

        Args:
            city: City identifier, used in input and output paths
            cell_size_m: Cell edge length in metres (``grid.default_cell_size`` if omitted)
            config: Config instance (module-level config if omitted)
            source_dir: Directory holding ``{city}/outline.geojson`` and ``{city}/listings.csv``
            output_dir: Directory the GeoJSON grid is written to
        """
        self.config = config if config is not None else default_config
        self.city = city

        if cell_size_m is None:
            cell_size_m = self.config.get('grid.default_cell_size', 200.0)
        cell_size_m = float(cell_size_m)
        if not math.isfinite(cell_size_m) or cell_size_m <= 0:
            raise ValidationError(f"Cell size must be a positive number, got: {cell_size_m}")
        self.cell_size_m = cell_size_m

        self.source_dir = Path(source_dir or self.config.get('paths.source_dir', 'data/src'))
        self.output_dir = Path(output_dir or self.config.get('paths.output_dir', 'data'))

        self.logging_context = LoggingContext()

    @property
    def boundary_path(self) -> Path:
        return self.source_dir / self.city / self.config.get('paths.boundary_filename', 'outline.geojson')

    @property
    def listings_path(self) -> Path:
        return self.source_dir / self.city / self.config.get('paths.listings_filename', 'listings.csv')

    @property
    def output_path(self) -> Path:
        return output_path_for(self.output_dir, self.city, self.cell_size_m)

    def check_inputs(self) -> Tuple[Path, Path]:
        """
        Verify both input files exist before any work starts.

        Raises:
            InputFileError: Naming the first missing file
        """
        for path in (self.boundary_path, self.listings_path):
            if not path.is_file():
                raise InputFileError(f"{path} not found!")
        return self.boundary_path, self.listings_path

    def run(self) -> PipelineResult:
        """Execute all stages and return the run outcome."""
        ctx = self.logging_context

        with ctx.pipeline('grid_generation', city=self.city, cell_size_m=self.cell_size_m):
            with ctx.stage('load_boundary'):
                boundary = BoundaryLoader().load(self.boundary_path)

            with ctx.stage('load_listings'):
                listings = ListingLoader.from_config(self.config).load(self.listings_path)

            with ctx.stage('build_grid'):
                grid = self.build_grid(boundary)
                cells = grid.get_cells()

            with ctx.stage('aggregate'):
                populated = self.aggregate(grid, listings)

            with ctx.stage('export'):
                output_path, summary = self.export(populated)

        return PipelineResult(
            output_path=output_path,
            spec=grid.spec,
            listings_loaded=len(listings),
            cells_kept=len(cells),
            cells_populated=len(populated),
            summary=summary,
            timings=ctx.get_timings()
        )

    def build_grid(self, boundary: Boundary) -> RectangularGrid:
        converter = CoordinateConverter.from_config(boundary, self.config)
        logger.debug(f"Using {converter}")
        return RectangularGrid(boundary, self.cell_size_m, converter=converter)

    def aggregate(self, grid: RectangularGrid, listings: List[Listing]) -> List[PopulatedCell]:
        strategy = self.config.get('aggregation.strategy', 'indexed')
        return CellAggregator(grid, strategy=strategy).aggregate(listings)

    def export(self, populated: List[PopulatedCell]) -> Tuple[Path, Dict[str, Any]]:
        exporter = GeoJSONExporter()
        export_config = ExportConfig(
            output_path=self.output_path,
            name=grid_name(self.city, self.cell_size_m),
            crs_name=self.config.get('output.crs_name', 'urn:ogc:def:crs:EPSG::4326'),
            price_decimals=self.config.get('output.price_decimals', 2),
            indent=self.config.get('output.indent', 2)
        )
        output_path = exporter.export(populated, export_config)

        summary = summarize(exporter.last_collection['features'])
        log_summary(summary)
        return output_path, summary


def generate_grid(city: str,
                  cell_size_m: Optional[float] = None,
                  config: Optional[Any] = None,
                  **kwargs) -> PipelineResult:
    """Convenience wrapper: check inputs and run a :class:`GridPipeline`."""
    pipeline = GridPipeline(city, cell_size_m, config=config, **kwargs)
    pipeline.check_inputs()
    return pipeline.run()
