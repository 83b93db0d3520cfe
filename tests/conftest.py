"""Pytest configuration and fixtures for all tests."""

import io
import struct
import tempfile
from pathlib import Path

import pytest
from PIL import Image
from PIL.ExifTags import GPS, IFD

# ==================== Image Helpers ====================


def write_gps_image(path, latitude=None, longitude=None, extra_tags=None):
    """
    Write a small JPEG carrying GPS EXIF tags.

    Args:
        path: Destination file
        latitude: (degrees, minutes, seconds, ref) or None to omit
        longitude: (degrees, minutes, seconds, ref) or None to omit
        extra_tags: Additional primary IFD tags {tag_id: value}
    """
    gps = {}
    if latitude is not None:
        *dms, ref = latitude
        gps[GPS.GPSLatitudeRef] = ref
        gps[GPS.GPSLatitude] = tuple(dms)
    if longitude is not None:
        *dms, ref = longitude
        gps[GPS.GPSLongitudeRef] = ref
        gps[GPS.GPSLongitude] = tuple(dms)

    exif = Image.Exif()
    for tag, value in (extra_tags or {}).items():
        exif[tag] = value
    if gps:
        exif[IFD.GPSInfo] = gps

    img = Image.new("RGB", (100, 100), color="blue")
    img.save(path, "JPEG", exif=exif)

    return Path(path)


@pytest.fixture
def make_gps_image():
    """Factory fixture for GPS-tagged JPEGs (see write_gps_image)."""
    return write_gps_image


def write_raw_exif_image(path, tiff_data):
    """
    Write a JPEG whose APP1 segment carries hand-made EXIF bytes.

    Args:
        path: Destination file
        tiff_data: Bytes placed after the "Exif\\0\\0" marker
    """
    buffer = io.BytesIO()
    Image.new("RGB", (100, 100), color="blue").save(buffer, "JPEG")
    jpeg = buffer.getvalue()

    payload = b"Exif\x00\x00" + tiff_data
    app1 = b"\xff\xe1" + struct.pack(">H", len(payload) + 2) + payload

    # APP1 goes right after the SOI marker
    Path(path).write_bytes(jpeg[:2] + app1 + jpeg[2:])

    return Path(path)


@pytest.fixture
def make_raw_exif_image():
    """Factory fixture for JPEGs with arbitrary EXIF bytes (see write_raw_exif_image)."""
    return write_raw_exif_image


# ==================== Mock Fixtures ====================


@pytest.fixture
def mock_map(monkeypatch):
    """Replace the folium-backed map with a recording MockCoverageMap."""
    from tests.mocks import MockCoverageMap

    MockCoverageMap.instances.clear()
    monkeypatch.setattr("geolocate.maps.CoverageMap", MockCoverageMap)
    yield MockCoverageMap
    MockCoverageMap.instances.clear()


@pytest.fixture
def no_browser(monkeypatch):
    """Capture click.launch calls instead of opening a browser."""
    launched = []
    monkeypatch.setattr("click.launch", lambda url, *args, **kwargs: launched.append(url))
    return launched


# ==================== File System Fixtures ====================


@pytest.fixture
def temp_dir():
    """Provide a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_image(temp_dir):
    """Create a temporary test image without EXIF data."""
    image_path = temp_dir / "test_image.jpg"
    img = Image.new("RGB", (100, 100), color="blue")
    img.save(image_path, "JPEG")

    return image_path


@pytest.fixture
def gps_image(temp_dir):
    """Create a JPEG tagged at 40°45'0" N, 73°59'0" W."""
    return write_gps_image(
        temp_dir / "times_square.jpg",
        latitude=(40, 45, 0, "N"),
        longitude=(73, 59, 0, "W"),
    )


@pytest.fixture
def gps_dir(temp_dir):
    """Directory with two photos at (10.0, 20.0) and (30.0, 40.0)."""
    photos = temp_dir / "photos"
    photos.mkdir()
    write_gps_image(photos / "a.jpg", latitude=(10, 0, 0, "N"), longitude=(20, 0, 0, "E"))
    write_gps_image(photos / "b.jpg", latitude=(30, 0, 0, "N"), longitude=(40, 0, 0, "E"))

    return photos


# ==================== Pytest Configuration ====================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (real image files)")
    config.addinivalue_line("markers", "e2e: End-to-end tests (full workflow)")
