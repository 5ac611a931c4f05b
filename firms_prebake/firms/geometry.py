"""
Bounding Box Geometry Module

Provides the fixed rectangular region used to filter fire detections.
The box is parsed once from a "west,south,east,north" string and passed
explicitly to every component that needs it.
"""

import math
from dataclasses import dataclass
from functools import cached_property

from shapely.geometry import Point, box

# California, used by the archive converter when no box is given
DEFAULT_BBOX = "-125,32,-113.5,43"


def _format_bound(value: float) -> str:
    # Shortest round-trip form; whole degrees without the trailing ".0"
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


@dataclass(frozen=True)
class BoundingBox:
    """Rectangular region in WGS84 degrees (west, south, east, north)."""

    west: float
    south: float
    east: float
    north: float

    def __post_init__(self):
        for name in ("west", "south", "east", "north"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or not math.isfinite(value):
                raise ValueError(f"Bounding box {name} must be a finite number: {value!r}")
        if not self.west < self.east:
            raise ValueError(f"Bounding box west ({self.west}) must be < east ({self.east})")
        if not self.south < self.north:
            raise ValueError(
                f"Bounding box south ({self.south}) must be < north ({self.north})"
            )

    @classmethod
    def from_string(cls, value: str) -> "BoundingBox":
        """
        Parse a "west,south,east,north" string.

        Raises:
            ValueError: If the string does not hold four numbers or the bounds are inverted
        """
        parts = [p.strip() for p in str(value).split(",")]
        if len(parts) != 4:
            raise ValueError(f"Bounding box must be 'west,south,east,north', got: {value!r}")
        try:
            west, south, east, north = (float(p) for p in parts)
        except ValueError:
            raise ValueError(f"Bounding box contains a non-numeric bound: {value!r}")
        return cls(west, south, east, north)

    @cached_property
    def polygon(self):
        return box(self.west, self.south, self.east, self.north)

    def as_query(self) -> str:
        """Render the box the way the area API expects it in the URL path."""
        return ",".join(_format_bound(v) for v in (self.west, self.south, self.east, self.north))

    def inside(self, lon, lat) -> bool:
        """True if (lon, lat) lies in the box, edges included."""
        try:
            lon = float(lon)
            lat = float(lat)
        except (TypeError, ValueError):
            return False
        if not (math.isfinite(lon) and math.isfinite(lat)):
            return False
        # covers() keeps points lying on the boundary
        return self.polygon.covers(Point(lon, lat))
