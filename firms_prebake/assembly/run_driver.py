"""
Prebake run driver.

Walks the configured months in order and assembles each one. Months
deferred by rate limiting do not stop the run; any other error does.
"""

import os
from typing import List, Optional

from ..config import PrebakeConfig
from ..export.geojson_store import MonthStore
from ..firms.firms_collect import WindowFetcher
from ..utils.data_utils import print_run_summary
from .month_assembler import MonthAssembler, MonthDecision


def build_assembler(
    config: PrebakeConfig,
    fetcher: Optional[WindowFetcher] = None,
    store: Optional[MonthStore] = None,
) -> MonthAssembler:
    if fetcher is None:
        fetcher = WindowFetcher(config.map_key, config.bbox, config.retry_policy)
    if store is None:
        store = MonthStore(config.out_dir, config.prefix)
    return MonthAssembler(
        fetcher,
        store,
        config.sources,
        retry_empty=config.retry_empty,
        day_max_span=config.day_max_span,
    )


def run_prebake(
    config: PrebakeConfig,
    fetcher: Optional[WindowFetcher] = None,
    store: Optional[MonthStore] = None,
) -> List[MonthDecision]:
    """
    Assemble every configured month.

    Args:
        config: Resolved run configuration
        fetcher: Optional fetcher (a session-backed one is created otherwise)
        store: Optional month store (defaults to config.out_dir / config.prefix)

    Returns:
        One MonthDecision per month, in run order
    """
    print("=== FIRMS Monthly Prebake ===\n")
    print(f"Sources: {', '.join(s.name for s in config.sources)}")
    print(f"BBOX: {config.bbox.as_query()}")
    print(
        f"Throttle: {config.throttle_ms} ms, Retries: {config.max_retries}, "
        f"RetryEmpty: {config.retry_empty}"
    )

    os.makedirs(config.out_dir, exist_ok=True)
    assembler = build_assembler(config, fetcher, store)

    decisions = []
    total = len(config.months)
    for i, (year, month) in enumerate(config.months, start=1):
        print(f"\n{i}/{total}. Assembling {year}-{month:02d}...")
        decision = assembler.assemble(year, month)
        decisions.append(decision)
        detail = f", {decision.reason}" if decision.reason else ""
        print(f"   -> {decision.status} (features={decision.feature_count}{detail})")

    print("\n=== Prebake Complete ===")
    print_run_summary(decisions)
    return decisions
