"""Geolocate module - photo location scanning and visualization."""

from .coverage import (
    CoverageScan,
    EmptyDirectoryError,
    ImageRecord,
    ScanFailure,
    scan_directory,
    scan_images,
)
from .maps import CoverageMap, MapStyle, generate_map

__all__ = [
    "CoverageScan",
    "EmptyDirectoryError",
    "ImageRecord",
    "ScanFailure",
    "scan_directory",
    "scan_images",
    "CoverageMap",
    "MapStyle",
    "generate_map",
]
