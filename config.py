# FlightView - drone flight log visualizer
# Copyright (C) 2024 FlightView Contributors
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program. If not, see <https://www.gnu.org/licenses/>.

"""
Configuration file for FlightView.
Contains all constants and settings for the flight store, track geometry,
map rendering and telemetry charts.

Only the backend location and timeout are read from the environment;
everything else is a plain module constant.
"""
import os

# ============================================================
# Backend Connection
# ============================================================
BACKEND_URL = os.environ.get('FLIGHTVIEW_BACKEND_URL', 'http://127.0.0.1:8765')
BACKEND_TIMEOUT_S = float(os.environ.get('FLIGHTVIEW_BACKEND_TIMEOUT', '30'))

# ============================================================
# Flight Store
# ============================================================
MAX_TRACK_POINTS = 5000           # Downsampling ceiling requested from the backend
DISCARD_STALE_SELECTIONS = True   # Drop detail responses superseded by a newer selection

# ============================================================
# Track Geometry
# ============================================================
SPLINE_SUBDIVISIONS = 8           # Points emitted per original segment
CATMULL_ROM_TENSION = 0.5         # Standard Catmull-Rom tension

# Gradient along the path (start of flight -> end of flight)
TRACK_GRADIENT_START = '#00D4AA'
TRACK_GRADIENT_END = '#FF4D6D'

# Framing
ZOOM_MIN = 10                     # Very long tracks never zoom out past this
ZOOM_MAX = 18                     # Degenerate tracks never zoom in past this
ZOOM_BASE = 16                    # Zoom for a track spanning ~1 km
KM_PER_DEGREE = 111.0             # Approximate km per degree of latitude

# ============================================================
# Map Rendering
# ============================================================
BASEMAP_STYLES = {
    'dark': 'https://basemaps.cartocdn.com/gl/dark-matter-gl-style/style.json',
    'light': 'https://basemaps.cartocdn.com/gl/positron-gl-style/style.json',
    'satellite': 'https://server.arcgisonline.com/ArcGIS/rest/services/World_Imagery/MapServer/tile/{z}/{y}/{x}',
}
DEFAULT_BASEMAP_THEME = 'dark'

TERRAIN_SOURCE_URL = 'https://demotiles.maplibre.org/terrain-tiles/tiles.json'
TERRAIN_EXAGGERATION = 1.5
SKY_LAYER_ID = 'sky'
TERRAIN_SOURCE_ID = 'terrain-dem'

# Path layers
TRACK_SHADOW_COLOR = '#000000'
TRACK_SHADOW_WIDTH = 10
TRACK_SHADOW_ALPHA = 0.25
TRACK_LINE_WIDTH = 4
TRACK_LINE_ALPHA = 0.95

# Markers
START_MARKER_COLOR = '#22c55e'
END_MARKER_COLOR = '#ef4444'
HOME_MARKER_COLOR = '#f59e0b'
HOME_EPSILON = 1e-6               # |lon|, |lat| below this means "home unknown"

# Default camera
DEFAULT_VIEWPORT = {
    'longitude': 0.0,
    'latitude': 0.0,
    'zoom': 14.0,
    'pitch': 45.0,
    'bearing': 0.0,
}
VIEWPORT_ZOOM_LIMITS = (0.0, 22.0)
VIEWPORT_PITCH_LIMITS = (0.0, 85.0)

# Pseudo-3D raster output (altitude shown as a northward offset)
RENDER_OFFSET_SCALE = 0.0006      # Altitude offset scale (in degrees)
RENDER_PILLAR_STEP = 20           # Vertical pillar every N points
RENDER_PILLAR_ALPHA = 0.4
RENDER_DPI = 150

# Session preference keys
SESSION_KEY_3D = 'flightview.map.3d'
SESSION_KEY_SATELLITE = 'flightview.map.satellite'

# ============================================================
# Telemetry Charts
# ============================================================
LOW_BATTERY_THRESHOLD = 20        # Percent

CHART_COLORS = {
    'altitude': '#00A0DC',
    'speed': '#00D4AA',
    'battery': '#f59e0b',
    'low_battery': '#ef4444',
    'pitch': '#8b5cf6',
    'roll': '#ec4899',
    'yaw': '#14b8a6',
    'axis': '#4a4e69',
    'label': '#9ca3af',
    'grid': '#2a2a4e',
    'tooltip_bg': '#16213e',
    'background': '#0f0f23',
}
CHART_LINE_WIDTH = 2
ATTITUDE_LINE_WIDTH = 1.5
AREA_ALPHA = 0.15

# ============================================================
# Log Import
# ============================================================
LOG_FILE_EXTENSIONS = ('txt', 'dat', 'log', 'csv')
