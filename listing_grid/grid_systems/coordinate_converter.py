"""Metre to degree conversion under a locally-flat earth approximation."""

import math
from typing import Optional, Any

from ..abstractions.types import Boundary
from ..exceptions import ValidationError

# Approximate length of one degree of latitude
METERS_PER_DEGREE = 111000.0

# Latitude historical Lisbon grids were generated at
LISBON_REFERENCE_LATITUDE = 38.7


class CoordinateConverter:
    """
    Convert linear distances in metres to degrees of latitude and longitude.

    One degree of latitude is taken as a constant length; one degree of
    longitude shrinks with the cosine of the reference latitude. The
    approximation is only accurate near the reference latitude, which is why
    it should be taken from the area being gridded.
    """

    def __init__(self,
                 reference_latitude: float,
                 meters_per_degree: float = METERS_PER_DEGREE):
        """
        Initialize converter.

        Args:
            reference_latitude: Latitude in degrees the approximation is anchored at
            meters_per_degree: Length of one degree of latitude in metres

        Raises:
            ValidationError: If the latitude is not strictly between the poles
                or the degree length is not positive
        """
        if not math.isfinite(reference_latitude) or abs(reference_latitude) >= 90:
            raise ValidationError(
                f"Reference latitude must be between -90 and 90, got: {reference_latitude}"
            )
        if not meters_per_degree > 0:
            raise ValidationError(f"Meters per degree must be positive, got: {meters_per_degree}")

        self.reference_latitude = float(reference_latitude)
        self.meters_per_degree_lat = float(meters_per_degree)
        self.meters_per_degree_lon = meters_per_degree * math.cos(math.radians(reference_latitude))

    @classmethod
    def from_boundary(cls,
                      boundary: Boundary,
                      meters_per_degree: float = METERS_PER_DEGREE) -> 'CoordinateConverter':
        """Anchor the approximation at the boundary's centroid latitude."""
        return cls(centroid_latitude(boundary), meters_per_degree)

    @classmethod
    def from_config(cls, boundary: Boundary, config: Any) -> 'CoordinateConverter':
        """
        Build a converter from ``grid.*`` settings.

        A configured ``grid.reference_latitude`` pins the latitude; otherwise
        it is derived from the boundary.
        """
        meters_per_degree = float(config.get('grid.meters_per_degree', METERS_PER_DEGREE))
        reference_latitude: Optional[float] = config.get('grid.reference_latitude')
        if reference_latitude is None:
            return cls.from_boundary(boundary, meters_per_degree)
        return cls(float(reference_latitude), meters_per_degree)

    def meters_to_degrees_lat(self, meters: float) -> float:
        return meters / self.meters_per_degree_lat

    def meters_to_degrees_lon(self, meters: float) -> float:
        return meters / self.meters_per_degree_lon

    def __repr__(self) -> str:
        return f"CoordinateConverter(reference_latitude={self.reference_latitude:.6f})"


def centroid_latitude(boundary: Boundary) -> float:
    """Centroid latitude of the boundary, or the bbox middle for degenerate rings."""
    polygon = boundary.polygon
    if polygon.area > 0:
        return polygon.centroid.y
    min_lat, max_lat = polygon.bounds[1], polygon.bounds[3]
    return (min_lat + max_lat) / 2
