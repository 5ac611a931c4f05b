"""
FIRMS (Fire Information for Resource Management System) Package

This package provides the building blocks for retrieving NASA FIRMS fire
detections: bounding-box filtering, record normalization, deduplication,
request window planning and the rate-limit aware fetcher.
"""

from .geometry import BoundingBox, DEFAULT_BBOX
from .normalize import FireDetection, normalize_record
from .dedup import identity_key, fold, fold_all
from .windows import (
    DAY_MAX,
    RequestWindow,
    days_in_month,
    plan_windows,
    month_key,
    parse_month_key,
    month_range,
    parse_month_list,
)
from .sources import SourceDescriptor, SOURCE_START, DEFAULT_SOURCES, resolve_sources
from .firms_collect import (
    FirmsRequestError,
    RetryPolicy,
    WindowFetcher,
    WindowResult,
    create_session,
)

__all__ = [
    'BoundingBox',
    'DEFAULT_BBOX',
    'FireDetection',
    'normalize_record',
    'identity_key',
    'fold',
    'fold_all',
    'DAY_MAX',
    'RequestWindow',
    'days_in_month',
    'plan_windows',
    'month_key',
    'parse_month_key',
    'month_range',
    'parse_month_list',
    'SourceDescriptor',
    'SOURCE_START',
    'DEFAULT_SOURCES',
    'resolve_sources',
    'FirmsRequestError',
    'RetryPolicy',
    'WindowFetcher',
    'WindowResult',
    'create_session',
]
