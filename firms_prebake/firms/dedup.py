"""
Cross-source deduplication of fire detections.

The same physical detection is often returned by several sources or by
overlapping windows, with coordinates formatted to different precision.
Detections are identified by coordinates rounded to 4 decimals (~11 m),
acquisition date/time, instrument and satellite. The first copy folded
into a bucket is kept; later copies are dropped.
"""

from typing import Dict, Iterable, Tuple

from .normalize import FireDetection

IdentityKey = Tuple[str, str, str, str, str, str]
MonthBucket = Dict[IdentityKey, FireDetection]


def identity_key(detection: FireDetection) -> IdentityKey:
    return (
        f"{detection.longitude:.4f}",
        f"{detection.latitude:.4f}",
        detection.acq_date or "",
        detection.acq_time or "",
        detection.instrument or "",
        detection.satellite or "",
    )


def fold(bucket: MonthBucket, detection: FireDetection) -> MonthBucket:
    """Add detection to bucket unless an equal key is already present."""
    key = identity_key(detection)
    if key not in bucket:
        bucket[key] = detection
    return bucket


def fold_all(bucket: MonthBucket, detections: Iterable[FireDetection]) -> int:
    """Fold every detection into bucket and return how many were new."""
    before = len(bucket)
    for detection in detections:
        fold(bucket, detection)
    return len(bucket) - before
