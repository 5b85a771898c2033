#!/usr/bin/env python3
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
Track geometry module.

Pure functions over GPS tracks: Catmull-Rom smoothing, altitude projection,
gradient segmentation and viewport framing. Points are ``(lon, lat, alt)``
tuples; nothing here keeps state between calls.
"""
import math
from typing import NamedTuple, Optional, Tuple

import numpy as np
from matplotlib.colors import to_hex, to_rgb

import config

from .structures import TRACK_LON, TRACK_LAT, TRACK_ALT

RGB_SCALE = 255.0


class Segment(NamedTuple):
    """One colored piece of the path between two consecutive points."""
    start: Tuple[float, float, float]
    end: Tuple[float, float, float]
    color: Tuple[int, int, int]
    end_color: Tuple[int, int, int]


def hex_to_rgb(color):
    """Convert any matplotlib color spec (e.g. ``'#00D4AA'``) to integer RGB."""
    return tuple(int(math.floor(c * RGB_SCALE + 0.5)) for c in to_rgb(color))


def rgb_to_hex(rgb):
    return to_hex([c / RGB_SCALE for c in rgb])


def smooth_track(points, subdivisions=None, tension=None):
    """
    Densify a track with a clamped Catmull-Rom spline.

    Each segment P1->P2 is interpolated from the control points P0..P3;
    at both ends the missing control point is the boundary sample itself.
    The curve passes through every original sample, and the final sample
    is appended verbatim.

    Args:
        points: sequence of (lon, lat, alt)
        subdivisions: points emitted per original segment
            (default: config.SPLINE_SUBDIVISIONS)
        tension: Catmull-Rom tension (default: config.CATMULL_ROM_TENSION)

    Returns:
        list of (lon, lat, alt) tuples with ``(n - 1) * subdivisions + 1``
        entries, or ``points`` itself when it has fewer than 3 entries.
    """
    if subdivisions is None:
        subdivisions = config.SPLINE_SUBDIVISIONS
    if tension is None:
        tension = config.CATMULL_ROM_TENSION
    if subdivisions < 1:
        raise ValueError(f"subdivisions must be >= 1, got {subdivisions}")

    if len(points) < 3:
        return points

    pts = np.asarray(points, dtype=float)[:, :3]
    padded = np.vstack([pts[:1], pts, pts[-1:]])

    # Control points for each of the n-1 segments, shape (n-1, 3)
    p0 = padded[:-3]
    p1 = padded[1:-2]
    p2 = padded[2:-1]
    p3 = padded[3:]

    tau = tension
    a = p1
    b = tau * (p2 - p0)
    c = 2.0 * tau * p0 + (tau - 3.0) * p1 + (3.0 - 2.0 * tau) * p2 - tau * p3
    d = -tau * p0 + (2.0 - tau) * p1 + (tau - 2.0) * p2 + tau * p3

    t = (np.arange(subdivisions, dtype=float) / subdivisions)[None, :, None]
    curve = a[:, None, :] + b[:, None, :] * t + c[:, None, :] * t ** 2 + d[:, None, :] * t ** 3

    smoothed = [tuple(row) for row in curve.reshape(-1, 3).tolist()]
    last = points[-1]
    smoothed.append((float(last[TRACK_LON]), float(last[TRACK_LAT]), float(last[TRACK_ALT])))
    return smoothed


def project_altitude(points, enabled):
    """Keep altitude (3D ribbon) or flatten every point onto the ground plane."""
    if enabled:
        return [(p[TRACK_LON], p[TRACK_LAT], p[TRACK_ALT]) for p in points]
    return [(p[TRACK_LON], p[TRACK_LAT], 0.0) for p in points]


def gradient_segments(points, start_color=None, end_color=None):
    """
    Split a path into consecutive-pair segments colored start -> end.

    Segment ``i`` takes the color at ``t = i / (n - 1)``; its ``end_color``
    is the color at ``t = (i + 1) / (n - 1)``. Channels are rounded to ints.

    Returns:
        list of Segment (``n - 1`` entries, empty for fewer than 2 points)
    """
    if start_color is None:
        start_color = config.TRACK_GRADIENT_START
    if end_color is None:
        end_color = config.TRACK_GRADIENT_END

    count = len(points)
    if count < 2:
        return []

    start_rgb = np.array(hex_to_rgb(start_color), dtype=float)
    end_rgb = np.array(hex_to_rgb(end_color), dtype=float)

    t = np.arange(count, dtype=float) / (count - 1)
    colors = np.floor(start_rgb + (end_rgb - start_rgb) * t[:, None] + 0.5).astype(int)
    colors = [tuple(int(c) for c in row) for row in colors]

    return [
        Segment(tuple(points[i]), tuple(points[i + 1]), colors[i], colors[i + 1])
        for i in range(count - 1)
    ]


def track_bounds(points) -> Optional[Tuple[Tuple[float, float], Tuple[float, float]]]:
    """Axis-aligned ``((min_lon, min_lat), (max_lon, max_lat))`` or None."""
    if len(points) == 0:
        return None
    pts = np.asarray(points, dtype=float)
    lons = pts[:, TRACK_LON]
    lats = pts[:, TRACK_LAT]
    return (
        (float(np.min(lons)), float(np.min(lats))),
        (float(np.max(lons)), float(np.max(lats))),
    )


def track_center(points) -> Optional[Tuple[float, float]]:
    bounds = track_bounds(points)
    if bounds is None:
        return None
    (min_lon, min_lat), (max_lon, max_lat) = bounds
    return ((min_lon + max_lon) / 2.0, (min_lat + max_lat) / 2.0)


def estimate_zoom(bounds, zoom_min=None, zoom_max=None):
    """
    Map a bounding box to a web-map zoom level.

    ``zoom = ZOOM_BASE - log2(extent_deg * KM_PER_DEGREE)``, clamped to
    ``[zoom_min, zoom_max]``. A zero-extent box gets ``zoom_max``.
    """
    if zoom_min is None:
        zoom_min = config.ZOOM_MIN
    if zoom_max is None:
        zoom_max = config.ZOOM_MAX

    (min_lon, min_lat), (max_lon, max_lat) = bounds
    extent = max(max_lon - min_lon, max_lat - min_lat)
    if extent <= 0:
        return float(zoom_max)

    zoom = config.ZOOM_BASE - math.log2(extent * config.KM_PER_DEGREE)
    return float(np.clip(zoom, zoom_min, zoom_max))


def frame_track(points):
    """Camera framing for a raw track: ``(center_lon, center_lat, zoom)`` or None."""
    bounds = track_bounds(points)
    if bounds is None:
        return None
    center_lon, center_lat = track_center(points)
    return center_lon, center_lat, estimate_zoom(bounds)


def initial_bearing(start, end):
    """Great-circle bearing in degrees [0, 360) from ``start`` to ``end``."""
    lon1, lat1 = np.radians(start[TRACK_LON]), np.radians(start[TRACK_LAT])
    lon2, lat2 = np.radians(end[TRACK_LON]), np.radians(end[TRACK_LAT])
    dlon = lon2 - lon1
    x = np.sin(dlon) * np.cos(lat2)
    y = np.cos(lat1) * np.sin(lat2) - np.sin(lat1) * np.cos(lat2) * np.cos(dlon)
    return float((np.degrees(np.arctan2(x, y)) + 360.0) % 360.0)
