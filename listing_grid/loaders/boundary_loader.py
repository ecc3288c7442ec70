"""Load a city boundary from a GeoJSON document."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from shapely.geometry import Polygon

from ..abstractions.types import Boundary
from ..exceptions import InputFileError, ParseError, UnsupportedGeometryError
from ..infrastructure.logging import get_logger

logger = get_logger(__name__)


class BoundaryLoader:
    """
    Parse a boundary document into a single closed outer ring.

    Accepts a FeatureCollection (first feature is used), a single Feature,
    or a bare geometry. For a MultiPolygon only the first member polygon's
    outer ring is used; remaining members are ignored.
    """

    SUPPORTED_TYPES = ('Polygon', 'MultiPolygon')

    def load(self, path: Union[str, Path]) -> Boundary:
        """
        Read and parse a boundary file.

        Args:
            path: Path to a GeoJSON document

        Returns:
            Boundary with a closed exterior ring

        Raises:
            InputFileError: If the file is missing or unreadable
            ParseError: If the document is malformed
            UnsupportedGeometryError: If the geometry is not a (Multi)Polygon
        """
        path = Path(path)
        logger.info(f"Loading boundary from {path}...")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                document = json.load(f)
        except FileNotFoundError as e:
            raise InputFileError(f"Boundary file not found: {path}", e)
        except OSError as e:
            raise InputFileError(f"Cannot read boundary file {path}: {e}", e)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ParseError(f"Malformed boundary document {path}: {e}", e)

        boundary = self.parse(document, source=str(path))
        logger.info(
            f"Loaded {boundary.geometry_type} boundary with "
            f"{len(boundary.ring) - 1} vertices"
        )
        return boundary

    def parse(self, document: Any, source: Optional[str] = None) -> Boundary:
        """Parse an already decoded GeoJSON object."""
        geometry = self._extract_geometry(document)
        geometry_type = geometry.get('type')

        if geometry_type not in self.SUPPORTED_TYPES:
            raise UnsupportedGeometryError(geometry_type)

        coordinates = geometry.get('coordinates')
        try:
            if geometry_type == 'MultiPolygon':
                ring = coordinates[0][0]
                ignored = len(coordinates) - 1
            else:
                ring = coordinates[0]
                ignored = 0
        except (TypeError, IndexError, KeyError) as e:
            raise ParseError(f"{geometry_type} has no outer ring", e)

        if ignored:
            logger.warning(
                f"MultiPolygon boundary has {ignored + 1} members; "
                f"only the first is used, {ignored} ignored"
            )

        return Boundary(
            polygon=Polygon(self._parse_ring(ring)),
            geometry_type=geometry_type,
            ignored_members=ignored,
            source=source
        )

    def _extract_geometry(self, document: Any) -> Dict[str, Any]:
        if not isinstance(document, dict):
            raise ParseError("Boundary document must be a JSON object")

        if document.get('type') == 'FeatureCollection':
            features = document.get('features')
            if not isinstance(features, list):
                raise ParseError("FeatureCollection features must be a list")
            if not features:
                raise ParseError("FeatureCollection has no features")
            geometry = features[0].get('geometry') if isinstance(features[0], dict) else None
        elif 'geometry' in document:
            geometry = document['geometry']
        else:
            geometry = document

        if not isinstance(geometry, dict):
            raise ParseError("Boundary document has no geometry")
        return geometry

    def _parse_ring(self, ring: Any) -> List[tuple]:
        """Convert [lon, lat] pairs into a closed list of float tuples."""
        if not isinstance(ring, list):
            raise ParseError("Polygon ring must be a list of positions")

        try:
            points = [(float(position[0]), float(position[1])) for position in ring]
        except (TypeError, ValueError, IndexError) as e:
            raise ParseError(f"Invalid ring position: {e}", e)

        if len(set(points)) < 3:
            raise ParseError(f"Polygon ring needs at least 3 distinct vertices, got {len(set(points))}")

        if points[0] != points[-1]:
            points.append(points[0])
        return points


def load_boundary(path: Union[str, Path]) -> Boundary:
    """Convenience wrapper around :class:`BoundaryLoader`."""
    return BoundaryLoader().load(path)
