"""
GeoJSON Month Store Module

Persists one FeatureCollection per month under a fixed file prefix
(e.g. CA-2021-08.geojson). The feature count of an existing file is the
only progress record: a rerun skips months that already hold detections.
"""

import json
import os
from typing import Iterable, List, Optional

from ..firms.normalize import FireDetection


def create_geojson_featurecollection(features: List[dict]) -> dict:
    """
    Create a GeoJSON FeatureCollection from a list of features.

    Args:
        features (list): List of GeoJSON features

    Returns:
        dict: GeoJSON FeatureCollection
    """
    return {"type": "FeatureCollection", "features": features}


def save_geojson(geojson: dict, filepath: str):
    """Write GeoJSON compactly, replacing any previous file atomically."""
    tmp_path = f"{filepath}.tmp"
    try:
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(geojson, f, separators=(",", ":"))
        os.replace(tmp_path, filepath)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise


def read_feature_count(filepath: str) -> Optional[int]:
    """
    Count the features in an existing month file.

    Returns:
        int: Number of features (0 if the document has no feature list)
        None: If the file is missing or cannot be parsed
    """
    try:
        with open(filepath, "r", encoding="utf-8") as f:
            geojson = json.load(f)
    except (OSError, ValueError):
        return None
    features = geojson.get("features") if isinstance(geojson, dict) else None
    return len(features) if isinstance(features, list) else 0


class MonthStore:
    """Month files in one output directory."""

    def __init__(self, out_dir: str, prefix: str = "CA"):
        self.out_dir = out_dir
        self.prefix = prefix

    def path_for(self, month_key: str) -> str:
        return os.path.join(self.out_dir, f"{self.prefix}-{month_key}.geojson")

    def exists(self, month_key: str) -> bool:
        return os.path.exists(self.path_for(month_key))

    def feature_count(self, month_key: str) -> Optional[int]:
        return read_feature_count(self.path_for(month_key))

    def write(self, month_key: str, detections: Iterable[FireDetection]) -> str:
        """Write the month's detections in the given order and return the path."""
        os.makedirs(self.out_dir, exist_ok=True)
        features = [d.to_geojson() for d in detections]
        filepath = self.path_for(month_key)
        save_geojson(create_geojson_featurecollection(features), filepath)
        return filepath
