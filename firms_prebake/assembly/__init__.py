"""
Month assembly and run orchestration.
"""

from .month_assembler import (
    DEFERRED,
    SKIPPED,
    WRITTEN,
    MonthAssembler,
    MonthDecision,
)
from .run_driver import build_assembler, run_prebake

__all__ = [
    "DEFERRED",
    "SKIPPED",
    "WRITTEN",
    "MonthAssembler",
    "MonthDecision",
    "build_assembler",
    "run_prebake",
]
