import struct
from numbers import Rational
from typing import Any

from PIL import Image, UnidentifiedImageError
from PIL.ExifTags import GPS, GPSTAGS, IFD

CoordinateTriple = tuple[Rational, Rational, Rational]

# Axis tag -> companion hemisphere reference tag
REFERENCE_TAGS = {
    GPS.GPSLatitude: GPS.GPSLatitudeRef,
    GPS.GPSLongitude: GPS.GPSLongitudeRef,
}

NEGATIVE_HEMISPHERES = ("S", "W")


class ExifDataError(Exception):
    """Raised when image lacks required EXIF data."""
    pass


class FileOpenError(ExifDataError):
    """Raised when an image file cannot be opened for reading."""
    pass


class ContainerParseError(ExifDataError):
    """Raised when the file holds no decodable EXIF container."""
    pass


class MissingFieldError(ExifDataError):
    """Raised when a required GPS field is absent."""
    pass


class MalformedFieldError(ExifDataError):
    """Raised when a GPS field is present but holds an unusable value."""
    pass


def _is_rational_sequence(value: Any) -> bool:
    if isinstance(value, (str, bytes)) or not isinstance(value, (tuple, list)):
        return False
    return bool(value) and all(isinstance(v, Rational) for v in value)


def _read_reference(value: Any, name: str) -> str:
    if isinstance(value, bytes):
        try:
            value = value.decode("ascii")
        except UnicodeDecodeError:
            raise MalformedFieldError(f"{name} is not ASCII text: {value!r}")

    if not isinstance(value, str) or not value:
        raise MalformedFieldError(f"{name} must be non-empty text, got {value!r}")

    return value[0]


def get_exif_gps(exif: Image.Exif, tag: GPS) -> tuple[CoordinateTriple, str]:
    """
    Locate one GPS axis in an EXIF container.

    Fields are read from the GPS IFD of the primary image; an embedded
    thumbnail's IFD1 is never consulted.

    Args:
        exif: Parsed EXIF container (as returned by ``Image.getexif()``)
        tag: ``GPS.GPSLatitude`` or ``GPS.GPSLongitude``

    Returns:
        Tuple of (degrees/minutes/seconds triple, hemisphere reference character)

    Raises:
        MissingFieldError: If the coordinate or its reference is absent
        MalformedFieldError: If either field holds an unusable value
    """
    if tag not in REFERENCE_TAGS:
        raise ValueError(f"Not a GPS coordinate axis: {tag!r}")

    ref_tag = REFERENCE_TAGS[tag]
    gps_ifd = exif.get_ifd(IFD.GPSInfo)

    ref_name = GPSTAGS[ref_tag]
    if ref_tag not in gps_ifd:
        raise MissingFieldError(f"{ref_name} not found in EXIF data")
    gps_ref = _read_reference(gps_ifd[ref_tag], ref_name)

    name = GPSTAGS[tag]
    if tag not in gps_ifd:
        raise MissingFieldError(f"{name} not found in EXIF data")

    value = gps_ifd[tag]
    if not _is_rational_sequence(value):
        raise MalformedFieldError(f"{name} must be a sequence of rationals, got {value!r}")
    if len(value) != 3:
        raise MalformedFieldError(f"{name} must have 3 components, got {len(value)}")

    return tuple(value), gps_ref


def exif_to_decimal(triple: CoordinateTriple, ref: str) -> float:
    """Convert a degrees/minutes/seconds triple and hemisphere to decimal degrees."""
    if len(triple) != 3:
        raise MalformedFieldError(f"Coordinate must have 3 components, got {len(triple)}")

    for component in triple:
        if component.denominator == 0:
            raise MalformedFieldError(f"Zero denominator in coordinate {triple!r}")

    deg, minutes, sec = (c.numerator / c.denominator for c in triple)
    sign = -1.0 if ref in NEGATIVE_HEMISPHERES else 1.0

    return (deg + (minutes / 60.0) + (sec / 3600.0)) * sign


def get_exif_data(image_path: str) -> Image.Exif:
    """Open an image and return its EXIF container."""
    try:
        with Image.open(image_path) as image:
            raw_exif = image.info.get("exif")
            exif = image.getexif()
            # TIFF sub-IFDs are read lazily from the open file
            gps_ifd = exif.get_ifd(IFD.GPSInfo)
    except UnidentifiedImageError as e:
        raise ContainerParseError(f"Not a readable image: {image_path} ({e})")
    except OSError as e:
        raise FileOpenError(f"Problem opening the file: {image_path} ({e})")
    except (SyntaxError, ValueError, struct.error) as e:
        raise ContainerParseError(f"EXIF data is unreadable in {image_path}: {e}")

    if not exif:
        if raw_exif:
            raise ContainerParseError(f"EXIF data is unreadable in {image_path}")
        raise ContainerParseError(f"No EXIF data found in image: {image_path}")

    # Pillow only warns when the GPSInfo pointer leads nowhere
    if IFD.GPSInfo in exif and not gps_ifd:
        raise ContainerParseError(f"GPS IFD is unreadable in {image_path}")

    return exif


def get_image_coordinates(image_path: str) -> tuple[float, float]:
    """
    Extract decimal GPS coordinates from an image.

    Returns:
        Tuple of (latitude, longitude)

    Raises:
        FileOpenError: If the file cannot be opened
        ContainerParseError: If the file holds no readable EXIF data
        MissingFieldError: If a GPS field is absent
        MalformedFieldError: If a GPS field is unusable
    """
    exif = get_exif_data(image_path)

    lat = exif_to_decimal(*get_exif_gps(exif, GPS.GPSLatitude))
    lon = exif_to_decimal(*get_exif_gps(exif, GPS.GPSLongitude))

    return lat, lon
