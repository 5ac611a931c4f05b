"""
Data utility functions for the prebake run.

Builds and prints the per-month run summary.
"""

from typing import Sequence

import polars as pl


def decisions_frame(decisions: Sequence) -> pl.DataFrame:
    """
    Tabulate month decisions.

    Args:
        decisions: MonthDecision objects in run order

    Returns:
        DataFrame with month, status, features and reason columns
    """
    return pl.DataFrame(
        {
            "month": [d.month_key for d in decisions],
            "status": [d.status for d in decisions],
            "features": [d.feature_count for d in decisions],
            "reason": [d.reason for d in decisions],
        },
        schema={
            "month": pl.Utf8,
            "status": pl.Utf8,
            "features": pl.Int64,
            "reason": pl.Utf8,
        },
    )


def print_run_summary(decisions: Sequence) -> None:
    """Print summary statistics for a prebake run."""

    print("\n=== Summary Statistics ===")
    df = decisions_frame(decisions)
    print(f"Months processed: {len(df)}")

    if df.is_empty():
        return

    counts = df.group_by("status").agg(pl.len().alias("months")).sort("status")
    for status, months in counts.iter_rows():
        print(f"  {status}: {months}")

    written = df.filter(pl.col("status") == "written")
    if not written.is_empty():
        print(f"Detections written: {written['features'].sum()}")

    deferred = df.filter(pl.col("status") == "deferred")["month"].to_list()
    if deferred:
        print(f"Deferred (re-run later): {', '.join(deferred)}")

    try:
        print(df)
    except UnicodeEncodeError:
        print(f"Months: {df['month'].to_list()}")
