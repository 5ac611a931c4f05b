"""
FIRMS data source catalogue.

Each source carries the first date FIRMS has archive data for; months
before it are never requested.
"""

from dataclasses import dataclass
from datetime import date
from typing import List

# Earliest availability per source
SOURCE_START = {
    "MODIS_SP": date(2000, 11, 1),  # MODIS standard processing
    "MODIS_NRT": date(2000, 11, 1),  # MODIS near real-time
    "VIIRS_SNPP_SP": date(2012, 1, 20),  # VIIRS on Suomi NPP
    "VIIRS_SNPP_NRT": date(2012, 1, 20),
    "VIIRS_NOAA20_SP": date(2020, 1, 1),  # VIIRS on NOAA-20
    "VIIRS_NOAA20_NRT": date(2020, 1, 1),
    "VIIRS_NOAA21_NRT": date(2024, 1, 17),  # VIIRS on NOAA-21
}
UNKNOWN_SOURCE_START = date(1900, 1, 1)

DEFAULT_SOURCES = "MODIS_SP,VIIRS_SNPP_SP,VIIRS_NOAA20_SP,VIIRS_NOAA21_NRT"


@dataclass(frozen=True)
class SourceDescriptor:
    name: str
    earliest: date

    def available_for(self, year: int, month: int) -> bool:
        """False when the source only starts after the given month."""
        return (self.earliest.year, self.earliest.month) <= (year, month)


def resolve_sources(names: str) -> List[SourceDescriptor]:
    """Build descriptors from a comma list, keeping the given order."""
    sources = []
    for name in names.split(","):
        name = name.strip()
        if not name:
            continue
        sources.append(SourceDescriptor(name, SOURCE_START.get(name, UNKNOWN_SOURCE_START)))
    return sources
