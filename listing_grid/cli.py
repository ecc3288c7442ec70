"""
Grid generation CLI.

Usage:
    generate-grid <city> [cell_size_in_meters]

Requires {source_dir}/<city>/outline.geojson and {source_dir}/<city>/listings.csv
and writes {output_dir}/<city>_<cell_size>.geojson.
"""

import math
import re
from pathlib import Path
from typing import Optional

import click
import yaml

from .config import Config, config as default_config
from .exceptions import GridGenerationError
from .infrastructure.logging import get_logger, setup_logging
from .pipelines import GridPipeline

logger = get_logger(__name__)

CITY_PATTERN = re.compile(r'^[A-Za-z0-9_-]+$')

EXAMPLES = """
\b
Examples:
  generate-grid lisboa           # Uses default 200m cells for Lisboa
  generate-grid lisboa 100       # Uses 100m cells for Lisboa
  generate-grid porto 500        # Uses 500m cells for Porto
"""


def _validate_city(ctx, param, value: str) -> str:
    if not CITY_PATTERN.match(value):
        raise click.BadParameter(
            f"Invalid city name '{value}'. Only letters, digits, hyphens and underscores are allowed."
        )
    return value


def _validate_cell_size(ctx, param, value: Optional[str]) -> Optional[float]:
    if value is None:
        return None
    try:
        cell_size = float(value)
    except ValueError:
        # Mistyped options land here because unknown options pass through
        if value.startswith('-'):
            raise click.NoSuchOption(value, ctx=ctx)
        raise click.BadParameter(f"Invalid cell size '{value}'")
    if not math.isfinite(cell_size) or cell_size <= 0:
        raise click.BadParameter("Cell size must be a positive number")
    return cell_size


@click.command(
    epilog=EXAMPLES,
    context_settings={
        'help_option_names': ['-h', '--help'],
        # Lets negative cell sizes reach validation instead of parsing as options
        'ignore_unknown_options': True,
    }
)
@click.argument('city', callback=_validate_city)
@click.argument('cell_size', required=False, callback=_validate_cell_size)
@click.option('--config', 'config_file', type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='YAML file overriding default settings')
@click.option('--source-dir', type=click.Path(file_okay=False, path_type=Path),
              help='Directory holding <city>/outline.geojson and <city>/listings.csv')
@click.option('--output-dir', type=click.Path(file_okay=False, path_type=Path),
              help='Directory the grid GeoJSON is written to')
@click.option('--log-level', type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
              default=None, help='Minimum log level')
@click.option('--log-file', type=click.Path(dir_okay=False, path_type=Path),
              help='Also write JSON logs to this file')
def main(city, cell_size, config_file, source_dir, output_dir, log_level, log_file):
    """Generate a boundary-clipped price grid for CITY with CELL_SIZE metre cells (default 200)."""
    try:
        settings = Config(config_file) if config_file else default_config
    except (OSError, ValueError, yaml.YAMLError) as e:
        click.echo(f"Error: Cannot load config {config_file}: {e}", err=True)
        raise click.Abort()
    setup_logging(settings, log_file=str(log_file) if log_file else None, log_level=log_level)

    try:
        pipeline = GridPipeline(
            city,
            cell_size,
            config=settings,
            source_dir=source_dir,
            output_dir=output_dir
        )
        pipeline.check_inputs()
    except GridGenerationError as e:
        click.echo(f"Error: {e}", err=True)
        raise click.Abort()

    logger.info(f"Using city: {city}")
    logger.info(f"Using cell size: {int(pipeline.cell_size_m)}m x {int(pipeline.cell_size_m)}m")

    try:
        result = pipeline.run()
    except GridGenerationError as e:
        click.echo(f"❌ Failed to generate grid for {city}: {e}", err=True)
        raise click.Abort()

    click.echo(f"✅ Wrote {result.cells_populated} grid cells to {result.output_path}")


if __name__ == '__main__':
    main()
