"""
Data validation utilities for monthly FIRMS GeoJSON output.

Checks that written month files parse, carry the required properties, hold
no duplicate detections and keep every point inside the run's bounding box.
"""

import json
import os
from typing import Any, Dict, List, Optional, Sequence

import polars as pl

from ..firms.geometry import BoundingBox

REQUIRED_PROPERTIES = ["acq_date", "acq_time", "satellite", "instrument"]


def _as_float(value) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def features_frame(features: List[dict]) -> pl.DataFrame:
    """Flatten GeoJSON point features into one row per feature."""
    rows = []
    for feature in features:
        if not isinstance(feature, dict):
            feature = {}
        props = feature.get("properties") or {}
        geometry = feature.get("geometry")
        coords = geometry.get("coordinates") if isinstance(geometry, dict) else None
        if not isinstance(coords, (list, tuple)):
            coords = []
        if len(coords) < 2:
            coords = [None, None]
        rows.append(
            {
                "longitude": _as_float(coords[0]),
                "latitude": _as_float(coords[1]),
                **{
                    name: None if props.get(name) is None else str(props.get(name))
                    for name in REQUIRED_PROPERTIES
                },
            }
        )
    schema = {"longitude": pl.Float64, "latitude": pl.Float64}
    schema.update({name: pl.Utf8 for name in REQUIRED_PROPERTIES})
    return pl.DataFrame(rows, schema=schema)


def validate_month_file(file_path: str, bbox: Optional[BoundingBox] = None) -> Dict[str, Any]:
    """
    Validate one monthly GeoJSON file.

    Args:
        file_path: Path to the month file
        bbox: Region every point should fall in; skipped when None

    Returns:
        Dictionary containing validation results and statistics
    """
    validation_result = {
        "file_path": file_path,
        "file_exists": False,
        "feature_count": 0,
        "duplicate_keys": 0,
        "outside_bbox": 0,
        "missing_properties": [],
        "errors": [],
        "warnings": [],
    }

    # Step 1: Check file existence
    if not os.path.exists(file_path):
        validation_result["errors"].append(f"File does not exist: {file_path}")
        print(f"[ERROR] File does not exist: {file_path}")
        return validation_result

    validation_result["file_exists"] = True

    # Step 2: Parse the document
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            geojson = json.load(f)
    except (OSError, ValueError) as e:
        validation_result["errors"].append(f"Failed to read file: {e}")
        print(f"[ERROR] Failed to read file: {e}")
        return validation_result

    if not isinstance(geojson, dict) or geojson.get("type") != "FeatureCollection":
        validation_result["errors"].append("Document is not a FeatureCollection")
        print("[ERROR] Document is not a FeatureCollection")
        return validation_result

    features = geojson.get("features")
    if not isinstance(features, list):
        validation_result["errors"].append("FeatureCollection has no feature list")
        print("[ERROR] FeatureCollection has no feature list")
        return validation_result

    validation_result["feature_count"] = len(features)
    if not features:
        validation_result["warnings"].append("File contains 0 features")
        print(f"[WARNING] {file_path} contains 0 features")
        return validation_result

    df = features_frame(features)

    # Step 3: Coordinates
    null_coords = df.filter(pl.col("longitude").is_null() | pl.col("latitude").is_null()).height
    if null_coords > 0:
        validation_result["errors"].append(f"Found {null_coords} features without coordinates")
        print(f"[ERROR] Found {null_coords} features without coordinates")

    if bbox is not None:
        outside = df.filter(
            pl.col("longitude").is_not_null()
            & pl.col("latitude").is_not_null()
            & ~(
                pl.col("longitude").is_between(bbox.west, bbox.east)
                & pl.col("latitude").is_between(bbox.south, bbox.north)
            )
        ).height
        validation_result["outside_bbox"] = outside
        if outside > 0:
            validation_result["errors"].append(f"Found {outside} features outside the bounding box")
            print(f"[ERROR] Found {outside} features outside the bounding box")

    # Step 4: Required properties
    missing = [name for name in REQUIRED_PROPERTIES if df[name].null_count() == len(df)]
    validation_result["missing_properties"] = missing
    if missing:
        validation_result["warnings"].append(f"Properties missing on every feature: {missing}")
        print(f"[WARNING] Properties missing on every feature: {missing}")

    # Step 5: Duplicate detections by identity key
    keyed = df.with_columns(
        pl.col("longitude").round(4).alias("lon_key"),
        pl.col("latitude").round(4).alias("lat_key"),
    )
    key_cols = ["lon_key", "lat_key", "acq_date", "acq_time", "instrument", "satellite"]
    duplicates = len(keyed) - keyed.unique(subset=key_cols).height
    validation_result["duplicate_keys"] = duplicates
    if duplicates > 0:
        validation_result["errors"].append(f"Found {duplicates} duplicate detections")
        print(f"[ERROR] Found {duplicates} duplicate detections")

    return validation_result


def validate_and_report(file_paths: Sequence[str], bbox: Optional[BoundingBox] = None) -> bool:
    """
    Validate month files and print a short report.

    Returns:
        True if no file reported errors
    """
    passed = True
    for file_path in file_paths:
        result = validate_month_file(file_path, bbox)
        status = "PASSED" if not result["errors"] else "FAILED"
        if result["errors"]:
            passed = False
        print(
            f"   {os.path.basename(file_path)}: {status} "
            f"(features={result['feature_count']}, warnings={len(result['warnings'])})"
        )
    return passed
