"""Mock implementations of external services for testing."""

from .mock_exif import MockExif
from .mock_map import MockCoverageMap

__all__ = [
    "MockCoverageMap",
    "MockExif",
]
