"""
Validation utilities for monthly FIRMS output files.
"""

from .output_validator import validate_month_file, validate_and_report

__all__ = ['validate_month_file', 'validate_and_report']
