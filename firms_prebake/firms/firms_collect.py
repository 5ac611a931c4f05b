"""
FIRMS Area API Fetch Helper Module

Issues one request per (source, request window) against NASA's FIRMS area
CSV API and turns the response into normalized fire detections.

The API penalizes bursts with HTTP 403/429. Each request therefore runs
through a small state machine:

    Attempting(n) --2xx--------> Succeeded(features)
    Attempting(n) --403/429----> Backoff(n)
    Backoff(n)    --n+1 <= max-> Attempting(n + 1)
    Backoff(n)    --otherwise--> Exhausted

Any other status or transport failure is raised to the caller without retry.
An exhausted window is reported as zero detections with rate_limited set.
"""

import io
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Union

import polars as pl
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .geometry import BoundingBox
from .normalize import FireDetection, normalize_record
from .windows import RequestWindow

BASE = "https://firms.modaps.eosdis.nasa.gov/api/area/csv"

RATE_LIMIT_STATUSES = (403, 429)
TIMEOUT = (10, 60)  # 10s to connect, 60s to read response

DEFAULT_THROTTLE_MS = 800
DEFAULT_MAX_RETRIES = 4
DEFAULT_BACKOFF_BASE_MS = 15000  # 15s, 30s, 45s, 60s...
DEFAULT_BACKOFF_CAP_MS = 120000


class FirmsRequestError(Exception):
    """A window failed for a reason other than rate limiting."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RateLimited(Exception):
    """Raised by a single attempt when the API answers 403 or 429."""

    def __init__(self, status_code: int):
        super().__init__(f"HTTP {status_code}")
        self.status_code = status_code


@dataclass(frozen=True)
class Attempting:
    attempt: int


@dataclass(frozen=True)
class Backoff:
    attempt: int
    status_code: int


@dataclass(frozen=True)
class Succeeded:
    features: List[FireDetection]


@dataclass(frozen=True)
class Exhausted:
    pass


FetchState = Union[Attempting, Backoff, Succeeded, Exhausted]


@dataclass(frozen=True)
class RetryPolicy:
    max_retries: int = DEFAULT_MAX_RETRIES
    throttle_ms: int = DEFAULT_THROTTLE_MS
    backoff_base_ms: int = DEFAULT_BACKOFF_BASE_MS
    backoff_cap_ms: int = DEFAULT_BACKOFF_CAP_MS

    def backoff_ms(self, attempt: int) -> int:
        """Linear, capped delay after the given (zero-based) attempt."""
        return min(self.backoff_cap_ms, self.backoff_base_ms * (attempt + 1))


@dataclass(frozen=True)
class WindowResult:
    features: List[FireDetection]
    rate_limited: bool
    attempts: int


def create_session() -> requests.Session:
    """Create a requests session for sequential FIRMS calls."""
    session = requests.Session()

    # Connection-level retries only; HTTP statuses are handled by WindowFetcher
    retry_strategy = Retry(
        total=3,
        connect=3,
        read=2,
        status=0,
        backoff_factor=1,
        allowed_methods=["GET"],
        raise_on_status=False,
    )

    adapter = HTTPAdapter(max_retries=retry_strategy, pool_connections=1, pool_maxsize=1)
    session.mount("http://", adapter)
    session.mount("https://", adapter)

    session.headers.update(
        {
            "User-Agent": "FIRMS-Prebake/1.0",
            "Accept": "text/csv",
            "Connection": "keep-alive",
        }
    )

    return session


def parse_csv_rows(text: str) -> List[dict]:
    """Parse a CSV body into row dicts with every value kept as text."""
    if not text or not text.strip():
        return []
    df = pl.read_csv(io.StringIO(text), infer_schema_length=0, truncate_ragged_lines=True)
    return df.to_dicts()


class WindowFetcher:
    """Fetches request windows for one bounding box, one request at a time."""

    def __init__(
        self,
        map_key: str,
        bbox: BoundingBox,
        policy: Optional[RetryPolicy] = None,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
        base_url: str = BASE,
    ):
        if not map_key:
            raise ValueError("FIRMS MAP key is required.")
        self.map_key = map_key
        self.bbox = bbox
        self.policy = policy or RetryPolicy()
        self.session = session if session is not None else create_session()
        self._sleep = sleep
        self.base_url = base_url.rstrip("/")

    def build_url(self, source: str, window: RequestWindow) -> str:
        return (
            f"{self.base_url}/{self.map_key}/{source}/{self.bbox.as_query()}"
            f"/{window.span}/{window.start_iso}"
        )

    def redact(self, url: str) -> str:
        return url.replace(self.map_key, "***")

    def _pause(self, milliseconds: int):
        if milliseconds > 0:
            self._sleep(milliseconds / 1000.0)

    def request(self, source: str, window: RequestWindow) -> List[FireDetection]:
        """
        Issue a single request for one window.

        Raises:
            RateLimited: On HTTP 403/429
            FirmsRequestError: On any other non-2xx status or an unreadable body
            requests.RequestException: On transport failures
        """
        url = self.build_url(source, window)
        response = self.session.get(url, timeout=TIMEOUT)

        if response.status_code in RATE_LIMIT_STATUSES:
            raise RateLimited(response.status_code)
        if not 200 <= response.status_code < 300:
            raise FirmsRequestError(
                f"HTTP {response.status_code} ({source} {window.describe()})",
                status_code=response.status_code,
            )

        try:
            rows = parse_csv_rows(response.text)
        except pl.exceptions.PolarsError as e:
            raise FirmsRequestError(f"Parse error ({source} {window.describe()}): {e}")

        features = []
        for row in rows:
            detection = normalize_record(row, self.bbox, source=source)
            if detection is not None:
                features.append(detection)
        return features

    def step(self, state: FetchState, source: str, window: RequestWindow) -> FetchState:
        """Advance the fetch state machine by one transition."""
        if isinstance(state, Attempting):
            try:
                features = self.request(source, window)
            except RateLimited as e:
                return Backoff(state.attempt, e.status_code)
            # Pace every successful call to keep a steady request rate
            self._pause(self.policy.throttle_ms)
            return Succeeded(features)

        if isinstance(state, Backoff):
            delay_ms = self.policy.backoff_ms(state.attempt)
            print(
                f"   [RETRY] limit (HTTP {state.status_code}) for {source} {window.describe()}. "
                f"Cooling {delay_ms / 1000:.0f}s... (attempt {state.attempt + 1}/{self.policy.max_retries + 1})"
            )
            self._pause(delay_ms)
            if state.attempt + 1 <= self.policy.max_retries:
                return Attempting(state.attempt + 1)
            return Exhausted()

        raise ValueError(f"No transition out of terminal state {state!r}")

    def fetch(self, source: str, window: RequestWindow) -> WindowResult:
        """Run one window to a terminal state."""
        state: FetchState = Attempting(0)
        attempts = 0
        while not isinstance(state, (Succeeded, Exhausted)):
            if isinstance(state, Attempting):
                attempts += 1
            state = self.step(state, source, window)

        if isinstance(state, Exhausted):
            print(f"   [SKIP] {source} {window.describe()}: max retries exceeded, treating as empty")
            return WindowResult(features=[], rate_limited=True, attempts=attempts)
        return WindowResult(features=state.features, rate_limited=False, attempts=attempts)
