"""
Utility functions for the prebake run.
"""

from .data_utils import decisions_frame, print_run_summary

__all__ = ['decisions_frame', 'print_run_summary']
