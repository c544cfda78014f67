"""
Orthographic globe geometry and the ISS scene objects drawn on it.

Screen convention (as seen by the viewer):

        +z/N
          |
          o-- +y/E
         /
        +x  (towards the viewer, visible hemisphere)
"""

import logging
import typing
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

import config
from iss_tracking import IssPosition
from track import PositionColors

logger = logging.getLogger(__name__)

LatLon = Tuple[float, float]
Polyline = List[LatLon]

# Rings longer than this are decimated before projection
MAX_RING_POINTS = 200
GRATICULE_RESOLUTION_DEG = 5


def geodetic_to_cartesian(r, long, lat):
    c = np.cos(lat)

    x = r * c * np.cos(long)
    y = r * c * np.sin(long)
    z = r * np.sin(lat)

    return x, y, z


class GlobeView:
    """Camera looking at the globe: rotation in longitude, tilt in latitude and zoom."""

    def __init__(self, width: int, height: int, zoom_m: float = config.INITIAL_ZOOM_M):
        self.width = width
        self.height = height
        self.zoom_m = zoom_m
        self.rotation = 0.0
        self.tilt = 0.0

    @property
    def radius(self) -> float:
        return min(self.width, self.height) / 3 * config.INITIAL_ZOOM_M / self.zoom_m

    def resize(self, width: int, height: int) -> None:
        self.width = width
        self.height = height

    def rotate(self, dx: float) -> None:
        self.rotation += -dx * config.DRAG_SENSITIVITY

    def center_on(self, lat: float, lon: float) -> None:
        """Point the camera at lat, lon (degrees)."""
        self.rotation = -np.radians(lon)
        self.tilt = np.radians(lat)

    def set_zoom(self, zoom_m: float) -> None:
        if zoom_m <= 0:
            raise ValueError(f"zoom must be positive, got {zoom_m}")
        self.zoom_m = min(max(zoom_m, config.MIN_ZOOM_M), config.MAX_ZOOM_M)

    def zoom(self, dy: float) -> None:
        """Move the camera out for positive dy (dragging down), in for negative."""
        self.set_zoom(self.zoom_m * np.exp(dy * config.ZOOM_SENSITIVITY))

    def project_many(self, lats, lons, altitudes_m=0.0):
        """
        Project arrays of geographic points to screen space.

        Returns (sx, sy, visible) arrays. A point is visible when it is on the
        near hemisphere or, for points above the surface, outside the disc.
        """
        lats = np.radians(np.asarray(lats, dtype=float))
        lons = np.radians(np.asarray(lons, dtype=float))
        altitudes_m = np.asarray(altitudes_m, dtype=float)

        r = self.radius * (1 + altitudes_m / config.EARTH_RADIUS_M * config.ALTITUDE_EXAGGERATION)
        x, y, z = geodetic_to_cartesian(r, lons + self.rotation, lats)

        c, s = np.cos(self.tilt), np.sin(self.tilt)
        x, z = x * c + z * s, -x * s + z * c

        visible = (x >= 0) | (np.hypot(y, z) > self.radius)
        return y + self.width / 2, -z + self.height / 2, visible

    def project(self, lat: float, lon: float, altitude_m: float = 0.0) -> Tuple[float, float, bool]:
        sx, sy, visible = self.project_many([lat], [lon], [altitude_m])
        return float(sx[0]), float(sy[0]), bool(visible[0])

    def project_polyline(self, points: Sequence[LatLon]) -> List[List[Tuple[float, float]]]:
        if not points:
            return []
        lats, lons = zip(*points)
        return split_visible(*self.project_many(lats, lons))


def split_visible(xs, ys, visible) -> List[List[Tuple[float, float]]]:
    """Split a projected polyline into runs of consecutive visible points."""
    runs = []
    current = []
    for x, y, v in zip(xs, ys, visible):
        if v:
            current.append((float(x), float(y)))
            continue
        if len(current) >= 2:
            runs.append(current)
        current = []
    if len(current) >= 2:
        runs.append(current)
    return runs


def graticule(step: int = config.GRATICULE_STEP_DEG) -> List[Polyline]:
    """Meridians and parallels every `step` degrees."""
    lines = []
    for lon in range(-180, 180, step):
        lines.append([(lat, lon) for lat in range(-90, 91, GRATICULE_RESOLUTION_DEG)])
    for lat in range(-90 + step, 90, step):
        lines.append([(lat, lon) for lon in range(-180, 181, GRATICULE_RESOLUTION_DEG)])
    return lines


def _ring(coords) -> Polyline:
    step = max(len(coords) // MAX_RING_POINTS, 1)
    # GeoJSON positions are [lon, lat(, alt)]
    return [(lat, lon) for lon, lat, *_ in coords[::step]]


def load_geojson(shape: typing.Any) -> List[Polyline]:
    """Collect outline polylines from a GeoJSON object."""
    match shape.get('type'):
        case 'FeatureCollection':
            return [line for feature in shape['features'] for line in load_geojson(feature)]
        case 'Feature':
            return load_geojson(shape['geometry']) if shape.get('geometry') else []
        case 'LineString':
            return [_ring(shape['coordinates'])]
        case 'MultiLineString' | 'Polygon':
            return [_ring(line) for line in shape['coordinates']]
        case 'MultiPolygon':
            return [_ring(ring) for poly in shape['coordinates'] for ring in poly]
        case t:
            logger.warning("Skipping unsupported GeoJSON type %s", t)
            return []


def marker_label(position: IssPosition, now: Optional[datetime] = None) -> str:
    """Label shown next to the ISS marker."""
    now = now or datetime.now()
    return "ISS - [{}] LAT: {:.4f}° LON: {:.4f}° ALT: {:.3f} km".format(
        now.strftime("%m-%d-%Y %H:%M:%S"),
        position.latitude,
        position.longitude,
        position.altitude_km,
    )


@dataclass
class Marker:
    position: IssPosition
    label_text: str = ""
    line_enabled: bool = True


@dataclass
class GroundTrack:
    positions: List[IssPosition] = field(default_factory=list)
    position_colors: Optional[PositionColors] = None
    show_positions: bool = True
    show_positions_scale: float = config.TRACK_POSITION_RADIUS

    def segments(self):
        """Yield (start, end, color) for each leg, colored by its start ordinal."""
        for i in range(len(self.positions) - 1):
            color = self.position_colors(i) if self.position_colors else None
            yield self.positions[i], self.positions[i + 1], color


class IssLayer:
    """
    Owns the ISS marker and ground track; replaces their contents on each update.

    When given a view, the camera is pointed at the first real fix. Zero
    positions from failed fetches do not count as a fix.
    """

    def __init__(
        self,
        colors: Sequence = config.GROUND_TRACK_COLORS,
        redraw: Callable[[], None] = lambda: None,
        view: Optional[GlobeView] = None,
    ):
        self.colors = list(colors)
        self.redraw = redraw
        self.view = view
        self.centered = False
        self.marker: Optional[Marker] = None
        self.ground_track = GroundTrack()

    def update(self, positions: Sequence[IssPosition], latest: IssPosition, now: Optional[datetime] = None) -> None:
        if self.view is not None and not self.centered and not latest.is_zero():
            self.view.center_on(latest.latitude, latest.longitude)
            self.centered = True

        label = marker_label(latest, now)
        if self.marker is None:
            self.marker = Marker(latest, label)
        else:
            self.marker.position = latest
            self.marker.label_text = label

        self.ground_track.positions = list(positions)
        self.ground_track.position_colors = (
            PositionColors(self.colors, len(positions)) if positions else None
        )

        self.redraw()
