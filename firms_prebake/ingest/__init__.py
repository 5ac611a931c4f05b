"""
Archive ingestion for FIRMS downloads made outside the area API.
"""

from .archive_convert import convert_archive, load_detections, load_records

__all__ = ['convert_archive', 'load_detections', 'load_records']
