"""
FIRMS Archive Conversion Module

Converts a folder of FIRMS archive downloads (CSV/TXT exports, GeoJSON
FeatureCollections or JSON arrays of rows) into the same monthly GeoJSON
files the prebake run produces. Detections are bucketed by the month of
their acquisition date rather than by a planned fetch month.
"""

import io
import json
import os
from typing import Dict, Iterator, List

import polars as pl

from ..export.geojson_store import MonthStore
from ..firms.dedup import MonthBucket, fold
from ..firms.geometry import BoundingBox
from ..firms.normalize import FireDetection, normalize_record

ARCHIVE_EXTENSIONS = (".csv", ".txt", ".json")


def list_archive_files(in_dir: str) -> List[str]:
    if not os.path.isdir(in_dir):
        raise FileNotFoundError(f"Input folder not found: {in_dir}")
    names = sorted(n for n in os.listdir(in_dir) if n.lower().endswith(ARCHIVE_EXTENSIONS))
    return [os.path.join(in_dir, n) for n in names]


def load_records(filepath: str) -> Iterator[dict]:
    """Yield raw records from one archive file."""
    with open(filepath, "r", encoding="utf-8") as f:
        text = f.read()

    if filepath.lower().endswith((".csv", ".txt")):
        if not text.strip():
            return
        df = pl.read_csv(io.StringIO(text), infer_schema_length=0, truncate_ragged_lines=True)
        yield from df.to_dicts()
        return

    obj = json.loads(text)
    if isinstance(obj, dict) and obj.get("type") == "FeatureCollection":
        features = obj.get("features")
        if isinstance(features, list):
            yield from (f for f in features if isinstance(f, dict))
    elif isinstance(obj, list):
        yield from (row for row in obj if isinstance(row, dict))


def load_detections(filepath: str, bbox: BoundingBox) -> List[FireDetection]:
    detections = []
    for record in load_records(filepath):
        detection = normalize_record(record, bbox)
        if detection is not None:
            detections.append(detection)
    return detections


def bucket_by_month(detections, buckets: Dict[str, MonthBucket]) -> int:
    """Fold detections into per-month buckets; returns how many had no usable date."""
    undated = 0
    for detection in detections:
        key = detection.month_key
        if key is None:
            undated += 1
            continue
        fold(buckets.setdefault(key, {}), detection)
    return undated


def convert_archive(in_dir: str, store: MonthStore, bbox: BoundingBox) -> Dict[str, int]:
    """
    Convert every archive file in a folder into monthly GeoJSON files.

    Args:
        in_dir: Folder with FIRMS CSV/TXT/JSON files
        store: Destination month store; existing months are overwritten
        bbox: Region detections must fall in

    Returns:
        Mapping of month key to the number of features written
    """
    files = list_archive_files(in_dir)
    print(f"Converting {len(files)} archive files from {in_dir}...")

    buckets: Dict[str, MonthBucket] = {}
    for filepath in files:
        print(f"   Reading {os.path.basename(filepath)}")
        detections = load_detections(filepath, bbox)
        undated = bucket_by_month(detections, buckets)
        print(f"   {len(detections)} detections in bbox")
        if undated:
            print(f"   [WARNING] {undated} detections without acq_date were dropped")

    written = {}
    for key in sorted(buckets):
        bucket = buckets[key]
        path = store.write(key, bucket.values())
        written[key] = len(bucket)
        print(f"   Wrote {path}  features={len(bucket)}")

    return written
