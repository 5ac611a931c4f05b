"""
Month Assembly Module

Builds one month's GeoJSON file: checks whether an existing file can be
kept, fetches every request window for every available source, merges the
detections through the deduplicator and decides whether to write.

A month that ends up empty while rate limits were observed is deferred
instead of written, so a later run retries it rather than trusting an
empty file.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

import requests

from ..export.geojson_store import MonthStore
from ..firms.dedup import MonthBucket, fold_all
from ..firms.firms_collect import FirmsRequestError, WindowFetcher
from ..firms.sources import SourceDescriptor
from ..firms.windows import DAY_MAX, month_key, plan_windows

WRITTEN = "written"
SKIPPED = "skipped"
DEFERRED = "deferred"


@dataclass(frozen=True)
class MonthDecision:
    month_key: str
    status: str
    feature_count: Optional[int] = None
    reason: str = ""
    path: Optional[str] = None


class MonthAssembler:
    def __init__(
        self,
        fetcher: WindowFetcher,
        store: MonthStore,
        sources: Sequence[SourceDescriptor],
        retry_empty: bool = True,
        day_max_span: int = DAY_MAX,
    ):
        self.fetcher = fetcher
        self.store = store
        self.sources = list(sources)
        self.retry_empty = retry_empty
        self.day_max_span = day_max_span

    def check_existing(self, key: str) -> Optional[MonthDecision]:
        """Return a skip decision if the month file can be kept, else None."""
        path = self.store.path_for(key)
        if not self.store.exists(key):
            return None

        count = self.store.feature_count(key)
        if count is None:
            print(f"   [WARNING] {path} is unreadable -> rebuilding")
            return None
        if count > 0:
            print(f"   {path} (exists, features={count})")
            return MonthDecision(key, SKIPPED, count, "exists", path)
        if not self.retry_empty:
            print(f"   {path} (exists, features=0)")
            return MonthDecision(key, SKIPPED, 0, "exists", path)

        print(f"   {path} has 0 features -> retrying")
        return None

    def assemble(self, year: int, month: int) -> MonthDecision:
        key = month_key(year, month)
        existing = self.check_existing(key)
        if existing is not None:
            return existing

        windows = plan_windows(year, month, self.day_max_span)
        bucket: MonthBucket = {}
        saw_limit = False

        for source in self.sources:
            if not source.available_for(year, month):
                print(
                    f"   {source.name}: not available before {source.earliest.isoformat()}, skipping"
                )
                continue

            for window in windows:
                try:
                    result = self.fetcher.fetch(source.name, window)
                except (FirmsRequestError, requests.RequestException) as e:
                    print(f"   [ERROR] {source.name} {window.describe()}: {self.fetcher.redact(str(e))}")
                    continue

                if result.rate_limited:
                    saw_limit = True
                added = fold_all(bucket, result.features)
                print(
                    f"   {source.name} {window.describe()}: {len(result.features)} detections "
                    f"({added} new)"
                )

        count = len(bucket)
        path = self.store.path_for(key)

        if count == 0 and saw_limit:
            print(f"   [SKIP] Not writing {path} (0 features due to rate limit). Re-run later to fill.")
            return MonthDecision(key, DEFERRED, 0, "rate-limited", None)

        path = self.store.write(key, bucket.values())
        print(f"   Wrote {path}  features={count}")
        return MonthDecision(key, WRITTEN, count, "", path)
