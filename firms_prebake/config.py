"""
Run configuration for the FIRMS prebake pipeline.

Everything a run needs is resolved once, at process start, into an
immutable PrebakeConfig that is handed to each component explicitly.
"""

import os
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .firms.firms_collect import (
    DEFAULT_BACKOFF_BASE_MS,
    DEFAULT_BACKOFF_CAP_MS,
    DEFAULT_MAX_RETRIES,
    DEFAULT_THROTTLE_MS,
    RetryPolicy,
)
from .firms.geometry import BoundingBox
from .firms.sources import SourceDescriptor, resolve_sources
from .firms.windows import DAY_MAX, month_range, parse_month_list

MAP_KEY_ENV = "FIRMS_MAP_KEY"
THROTTLE_ENV = "FIRMS_THROTTLE_MS"
MAX_RETRIES_ENV = "FIRMS_MAX_RETRIES"

DEFAULT_OUTPUT_DIR = "./data/firms"
DEFAULT_PREFIX = "CA"


class ConfigError(ValueError):
    """Raised when the run cannot start because of missing or invalid settings."""


@dataclass(frozen=True)
class PrebakeConfig:
    map_key: str
    bbox: BoundingBox
    months: Tuple[Tuple[int, int], ...]
    sources: Tuple[SourceDescriptor, ...]
    out_dir: str = DEFAULT_OUTPUT_DIR
    prefix: str = DEFAULT_PREFIX
    throttle_ms: int = DEFAULT_THROTTLE_MS
    max_retries: int = DEFAULT_MAX_RETRIES
    backoff_base_ms: int = DEFAULT_BACKOFF_BASE_MS
    backoff_cap_ms: int = DEFAULT_BACKOFF_CAP_MS
    retry_empty: bool = True
    day_max_span: int = DAY_MAX

    @property
    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_retries=self.max_retries,
            throttle_ms=self.throttle_ms,
            backoff_base_ms=self.backoff_base_ms,
            backoff_cap_ms=self.backoff_cap_ms,
        )


def env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got: {value!r}")


def require_map_key() -> str:
    map_key = os.getenv(MAP_KEY_ENV)
    if not map_key:
        raise ConfigError(
            f"{MAP_KEY_ENV} environment variable is required. "
            "Please copy .env-example to .env and configure your MAP key."
        )
    return map_key


def parse_bbox(value: Optional[str]) -> BoundingBox:
    if not value:
        raise ConfigError("A bounding box is required (west,south,east,north).")
    try:
        return BoundingBox.from_string(value)
    except ValueError as e:
        raise ConfigError(str(e))


def resolve_months(
    start: Optional[str], end: Optional[str], months: Optional[str] = None
) -> List[Tuple[int, int]]:
    """An explicit month list wins over the start/end range."""
    if not months and not (start and end):
        raise ConfigError("Either --months or both --start and --end are required.")
    try:
        resolved = parse_month_list(months) if months else month_range(start, end)
    except ValueError as e:
        raise ConfigError(str(e))

    if not resolved:
        raise ConfigError("The requested month range is empty.")
    return resolved


def build_config(
    *,
    bbox: Optional[str],
    start: Optional[str] = None,
    end: Optional[str] = None,
    months: Optional[str] = None,
    sources: str,
    out_dir: str = DEFAULT_OUTPUT_DIR,
    prefix: str = DEFAULT_PREFIX,
    throttle_ms: Optional[int] = None,
    max_retries: Optional[int] = None,
    retry_empty: bool = True,
    map_key: Optional[str] = None,
) -> PrebakeConfig:
    """
    Resolve CLI values and environment settings into a PrebakeConfig.

    Raises:
        ConfigError: If the MAP key, bounding box, months or sources are unusable
    """
    map_key = map_key or require_map_key()

    if throttle_ms is None:
        throttle_ms = env_int(THROTTLE_ENV, DEFAULT_THROTTLE_MS)
    if max_retries is None:
        max_retries = env_int(MAX_RETRIES_ENV, DEFAULT_MAX_RETRIES)
    if throttle_ms < 0:
        raise ConfigError("Throttle must be >= 0 ms.")
    if max_retries < 0:
        raise ConfigError("Max retries must be >= 0.")

    resolved_sources = resolve_sources(sources or "")
    if not resolved_sources:
        raise ConfigError("At least one FIRMS source is required.")

    return PrebakeConfig(
        map_key=map_key,
        bbox=parse_bbox(bbox),
        months=tuple(resolve_months(start, end, months)),
        sources=tuple(resolved_sources),
        out_dir=out_dir,
        prefix=prefix,
        throttle_ms=throttle_ms,
        max_retries=max_retries,
        retry_empty=retry_empty,
    )
