# config.py
"""Shared configuration for the ISS tracker."""

from geodata import WORLD_CONTINENTS

# ─── Data Fetching ─────────────────────────────────
API_URL = "https://api.wheretheiss.at/v1/satellites/25544"
API_TIMEOUT_S = 10
UPDATE_INTERVAL_S = 15
FAILURE_ALERT_THRESHOLD = 4

# ─── Ground Track ──────────────────────────────────
MAX_POSITIONS = 500

# Evenly distributed along the path, oldest first (r, g, b, alpha)
GROUND_TRACK_COLORS = [
    (255, 0, 0, 0.5),  # Red
    (255, 255, 0, 0.5),  # Yellow
    (0, 255, 0, 0.5),  # Green
]

# ─── Window ────────────────────────────────────────
APP_NAME = "ISS Viewer"
APP_ID = "org.blackbird.issviewer"
WINDOW_SIZE = (1280, 720)

# ─── Globe Rendering ───────────────────────────────
EARTH_RADIUS_M = 6_371_000.0
ALTITUDE_EXAGGERATION = 8.0
GLOBE_FILL = (50, 60, 80, 0.5)
GRATICULE_COLOR = (120, 140, 170, 0.35)
GRATICULE_STEP_DEG = 30
COASTLINE_COLOR = (255, 200, 150, 0.75)
COASTLINE_GEOJSON = WORLD_CONTINENTS
MARKER_COLOR = (255, 255, 255, 1.0)
MARKER_RADIUS = 5
NADIR_LINE_COLOR = (255, 255, 255, 0.6)
TRACK_LINE_WIDTH = 4.0
TRACK_POSITION_RADIUS = 2.0
LABEL_COLOR = (230, 230, 230, 1.0)

# Camera distance (m) to start at; globe radius shrinks as it grows
INITIAL_ZOOM_M = 8_000_000.0
DRAG_SENSITIVITY = 0.01
MIN_ZOOM_M = 1_000_000.0
MAX_ZOOM_M = 40_000_000.0
ZOOM_SENSITIVITY = 0.005
