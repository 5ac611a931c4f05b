"""
FIRMS Record Normalization Module

Maps one upstream record into a canonical fire detection. Records come
either as CSV rows from the area API or archive downloads, or as already
structured point records (GeoJSON features or JSON row objects). Column
names have changed across FIRMS products over the years, so field lookup
is case-insensitive and accepts the historical spellings.
"""

import math
import re
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from shapely.geometry import Point, mapping

from .geometry import BoundingBox

# Logical field -> accepted column names (lowercase), first match wins
FIELD_ALIASES = {
    "latitude": ("latitude", "lat"),
    "longitude": ("longitude", "lon", "lng"),
    "acq_date": ("acq_date", "date"),
    "acq_time": ("acq_time", "time"),
    "satellite": ("satellite",),
    "instrument": ("instrument",),
    "confidence": ("confidence",),
    "frp": ("frp",),
    "daynight": ("daynight",),
    "version": ("version",),
    "src": ("src", "source"),
}

# Property order in the written GeoJSON
PROPERTY_FIELDS = [
    "acq_date",
    "acq_time",
    "satellite",
    "instrument",
    "confidence",
    "frp",
    "daynight",
    "version",
    "src",
]

_DATE_PREFIX = re.compile(r"^\d{4}-(0[1-9]|1[0-2])")


@dataclass(frozen=True)
class FireDetection:
    """Canonical point feature for one satellite fire detection."""

    longitude: float
    latitude: float
    acq_date: Optional[str] = None
    acq_time: Optional[str] = None
    satellite: Optional[str] = None
    instrument: Optional[str] = None
    confidence: Optional[str] = None
    frp: Optional[float] = None
    daynight: Optional[str] = None
    version: Optional[str] = None
    src: Optional[str] = None

    @property
    def month_key(self) -> Optional[str]:
        """YYYY-MM taken from acq_date, or None if the date is missing."""
        if not self.acq_date or not _DATE_PREFIX.match(self.acq_date):
            return None
        return self.acq_date[:7]

    def properties(self) -> Dict[str, Any]:
        return {
            name: getattr(self, name)
            for name in PROPERTY_FIELDS
            if getattr(self, name) is not None
        }

    def to_geojson(self) -> Dict[str, Any]:
        geometry = mapping(Point(self.longitude, self.latitude))
        return {
            "type": "Feature",
            "properties": self.properties(),
            "geometry": {
                "type": geometry["type"],
                "coordinates": list(geometry["coordinates"]),
            },
        }


def _parse_float(value) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(str(value).strip())
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def _text(value) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _column(name) -> str:
    return str(name).lstrip("\ufeff").strip().lower()


def _flatten(record: Mapping) -> Dict[str, Any]:
    """Lowercase the keys and lift GeoJSON point coordinates into lon/lat."""
    flat = {}
    if record.get("type") == "Feature":
        properties = record.get("properties")
        if isinstance(properties, Mapping):
            flat.update({_column(k): v for k, v in properties.items()})
        geometry = record.get("geometry") or {}
        coords = geometry.get("coordinates") if isinstance(geometry, Mapping) else None
        if isinstance(coords, (list, tuple)) and len(coords) >= 2:
            # Geometry wins over any lat/lon properties
            flat["longitude"], flat["latitude"] = coords[0], coords[1]
        else:
            for alias in FIELD_ALIASES["longitude"] + FIELD_ALIASES["latitude"]:
                flat.pop(alias, None)
        return flat

    for key, value in record.items():
        flat.setdefault(_column(key), value)
    return flat


def _lookup(flat: Mapping[str, Any], field: str):
    for alias in FIELD_ALIASES[field]:
        value = flat.get(alias)
        if value is not None and value != "":
            return value
    return None


def normalize_record(
    record: Mapping, bbox: BoundingBox, source: Optional[str] = None
) -> Optional[FireDetection]:
    """
    Convert one raw record into a FireDetection.

    Args:
        record: CSV row mapping, JSON row object, or GeoJSON Point feature
        bbox: Region detections must fall in
        source: Source identifier to record when the row does not name one

    Returns:
        FireDetection, or None if the coordinates are unusable or outside bbox
    """
    if not isinstance(record, Mapping):
        return None

    flat = _flatten(record)
    lat = _parse_float(_lookup(flat, "latitude"))
    lon = _parse_float(_lookup(flat, "longitude"))
    if lat is None or lon is None:
        return None
    if not bbox.inside(lon, lat):
        return None

    return FireDetection(
        longitude=lon,
        latitude=lat,
        acq_date=_text(_lookup(flat, "acq_date")),
        acq_time=_text(_lookup(flat, "acq_time")),
        satellite=_text(_lookup(flat, "satellite")),
        instrument=_text(_lookup(flat, "instrument")),
        confidence=_text(_lookup(flat, "confidence")),
        frp=_parse_float(_lookup(flat, "frp")),
        daynight=_text(_lookup(flat, "daynight")),
        version=_text(_lookup(flat, "version")),
        src=_text(_lookup(flat, "src")) or source,
    )
