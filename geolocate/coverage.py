"""Directory scanning and coordinate aggregation for photo coverage."""

import os
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

from exif_utils import ExifDataError, FileOpenError, get_image_coordinates


class EmptyDirectoryError(Exception):
    """Raised when no geotagged images are available to compute a center."""
    pass


@dataclass(frozen=True)
class ImageRecord:
    """A scanned image and its decimal coordinates."""

    path: str
    latitude: float
    longitude: float


@dataclass(frozen=True)
class ScanFailure:
    """An image whose coordinates could not be extracted."""

    path: str
    error: ExifDataError


@dataclass
class CoverageScan:
    """Running fold over per-image scan outcomes."""

    records: list[ImageRecord] = field(default_factory=list)
    failures: list[ScanFailure] = field(default_factory=list)
    lat_sum: float = 0.0
    lon_sum: float = 0.0

    def add(self, outcome: ImageRecord | ScanFailure) -> None:
        if isinstance(outcome, ScanFailure):
            self.failures.append(outcome)
            return

        self.records.append(outcome)
        self.lat_sum += outcome.latitude
        self.lon_sum += outcome.longitude

    @property
    def count(self) -> int:
        return len(self.records)

    def center(self) -> tuple[float, float]:
        """
        Mean position of all scanned records.

        Raises:
            EmptyDirectoryError: If no records were scanned
        """
        if not self.records:
            raise EmptyDirectoryError("No geotagged images found; cannot compute a map center")
        return self.lat_sum / self.count, self.lon_sum / self.count


def list_image_paths(directory: str | Path) -> list[Path]:
    """
    List the entries of a directory (non-recursive), sorted by name.

    Raises:
        FileOpenError: If the directory cannot be listed
    """
    try:
        names = os.listdir(directory)
    except OSError as e:
        raise FileOpenError(f"Problem listing directory: {directory} ({e})")

    return [Path(directory) / name for name in sorted(names)]


def scan_image(path: str | Path) -> ImageRecord | ScanFailure:
    """Extract one image's coordinates, capturing any extraction error."""
    path = Path(path)
    if not path.is_file():
        return ScanFailure(str(path), FileOpenError(f"Not a regular file: {path}"))

    try:
        latitude, longitude = get_image_coordinates(str(path))
    except ExifDataError as e:
        return ScanFailure(str(path), e)

    return ImageRecord(str(path), latitude, longitude)


def scan_images(directory: str | Path) -> Iterator[ImageRecord | ScanFailure]:
    """Yield one outcome per directory entry, in name order."""
    for path in list_image_paths(directory):
        yield scan_image(path)


def scan_directory(
    directory: str | Path,
    skip_errors: bool = False,
    on_outcome: Callable[[ImageRecord | ScanFailure], None] | None = None,
) -> CoverageScan:
    """
    Scan a directory of photos and fold the results.

    Args:
        directory: Directory holding the photos
        skip_errors: Collect failing images instead of stopping at the first one
        on_outcome: Called with each record, and each failure when skip_errors is set,
            as soon as it is scanned

    Returns:
        CoverageScan with records in directory order

    Raises:
        ExifDataError: First extraction error, unless skip_errors is set
    """
    scan = CoverageScan()
    for outcome in scan_images(directory):
        if isinstance(outcome, ScanFailure) and not skip_errors:
            raise outcome.error
        if on_outcome is not None:
            on_outcome(outcome)
        scan.add(outcome)
    return scan
