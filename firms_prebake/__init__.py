"""
FIRMS Monthly Prebake

Fetches NASA FIRMS fire detections for a region and prebakes them into one
deduplicated GeoJSON point collection per month.
"""

__version__ = "1.0.0"
