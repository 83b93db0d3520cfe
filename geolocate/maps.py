"""Interactive coverage map rendering."""

import os
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

import click
import folium

from .coverage import ImageRecord


@dataclass
class MapStyle:
    """Presentation defaults for the coverage map."""

    tiles: str = "OpenStreetMap"
    zoom: int = 18
    marker_color: str = "#26cbde"
    marker_radius: int = 5
    marker_opacity: float = 0.8

    @classmethod
    def from_env(cls) -> "MapStyle":
        """Build a style from COVERAGE_* environment variables, falling back to defaults."""
        default = cls()
        return cls(
            tiles=os.getenv("COVERAGE_MAP_TILES", default.tiles),
            zoom=int(os.getenv("COVERAGE_MAP_ZOOM", default.zoom)),
            marker_color=os.getenv("COVERAGE_MARKER_COLOR", default.marker_color),
            marker_radius=int(os.getenv("COVERAGE_MARKER_RADIUS", default.marker_radius)),
            marker_opacity=float(os.getenv("COVERAGE_MARKER_OPACITY", default.marker_opacity)),
        )


class CoverageMap:
    """Collects photo markers and a view center, then renders a Leaflet map."""

    def __init__(self, style: MapStyle | None = None):
        self.style = style or MapStyle()
        self.markers: list[tuple[float, float, str | None]] = []
        self.center: tuple[float, float] | None = None

    def add_marker(self, latitude: float, longitude: float, label: str | None = None) -> None:
        self.markers.append((latitude, longitude, label))

    def set_center(self, latitude: float, longitude: float) -> None:
        self.center = (latitude, longitude)

    def render(self) -> folium.Map:
        """
        Build the folium map.

        The map fills its frame, shows no legend and starts at the
        configured zoom level over the center.

        Raises:
            ValueError: If no center has been set
        """
        if self.center is None:
            raise ValueError("Map center must be set before rendering")

        fmap = folium.Map(
            location=list(self.center),
            zoom_start=self.style.zoom,
            tiles=self.style.tiles,
            width="100%",
            height="100%",
        )

        for latitude, longitude, label in self.markers:
            folium.CircleMarker(
                location=[latitude, longitude],
                radius=self.style.marker_radius,
                color=self.style.marker_color,
                opacity=self.style.marker_opacity,
                fill=True,
                fill_color=self.style.marker_color,
                fill_opacity=self.style.marker_opacity,
                tooltip=label,
            ).add_to(fmap)

        return fmap

    def save(self, output_path: str | Path) -> Path:
        """Write the map as a standalone HTML file."""
        output_path = Path(output_path)
        self.render().save(str(output_path))
        return output_path

    def show(self, output_path: str | Path) -> Path:
        """Write the map and open it in the default browser."""
        output_path = self.save(output_path)
        click.launch(output_path.resolve().as_uri())
        return output_path


def generate_map(
    records: Iterable[ImageRecord],
    center: tuple[float, float],
    style: MapStyle | None = None,
) -> CoverageMap:
    """
    Build a coverage map with one marker per record.

    Args:
        records: Scanned images, plotted at their own coordinates
        center: (latitude, longitude) of the initial view
        style: Presentation overrides

    Returns:
        CoverageMap ready to save or show
    """
    coverage_map = CoverageMap(style)
    for record in records:
        coverage_map.add_marker(record.latitude, record.longitude, label=record.path)
    coverage_map.set_center(*center)
    return coverage_map
