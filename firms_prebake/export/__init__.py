"""
Export Package

Writes and inspects the monthly GeoJSON fire detection files.
"""

from .geojson_store import (
    MonthStore,
    create_geojson_featurecollection,
    read_feature_count,
    save_geojson,
)

__all__ = [
    "MonthStore",
    "create_geojson_featurecollection",
    "read_feature_count",
    "save_geojson",
]
