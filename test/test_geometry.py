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
Tests for track geometry: smoothing, gradient segments and framing.
"""
import os
import sys

import pytest

# Add parent directory to path for imports
PARENT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PARENT_DIR not in sys.path:
    sys.path.insert(0, PARENT_DIR)

from core.geometry import (
    estimate_zoom,
    frame_track,
    gradient_segments,
    hex_to_rgb,
    initial_bearing,
    project_altitude,
    rgb_to_hex,
    smooth_track,
    track_bounds,
    track_center,
)
import config


THREE_POINT_TRACK = [[0, 0, 10], [1, 1, 20], [2, 0, 10]]

# A short zig-zag climb, roughly 300 m across
ZIGZAG_TRACK = [
    (8.5400, 47.3700, 400.0),
    (8.5410, 47.3705, 410.0),
    (8.5420, 47.3702, 425.0),
    (8.5430, 47.3710, 430.0),
    (8.5440, 47.3704, 428.0),
    (8.5450, 47.3712, 420.0),
]


@pytest.mark.parametrize("track", [
    [],
    [(8.54, 47.37, 400.0)],
    [(8.54, 47.37, 400.0), (8.55, 47.38, 410.0)],
])
def test_short_tracks_are_returned_unchanged(track):
    """Fewer than 3 points: nothing to interpolate."""
    smoothed = smooth_track(track, subdivisions=4)
    assert smoothed is track, "Short track should be returned as-is"


def test_three_point_track_with_four_subdivisions():
    smoothed = smooth_track(THREE_POINT_TRACK, subdivisions=4)

    assert len(smoothed) == 9, f"Expected 2 segments * 4 + 1 points, got {len(smoothed)}"
    assert list(smoothed[0]) == THREE_POINT_TRACK[0]
    assert list(smoothed[-1]) == THREE_POINT_TRACK[-1]


def test_spline_passes_through_original_samples():
    subdivisions = 5
    smoothed = smooth_track(ZIGZAG_TRACK, subdivisions=subdivisions)

    assert len(smoothed) == (len(ZIGZAG_TRACK) - 1) * subdivisions + 1
    for i, original in enumerate(ZIGZAG_TRACK):
        assert smoothed[i * subdivisions] == pytest.approx(original), \
            f"Sample {i} not on the curve"


def test_last_point_is_exact():
    track = [(8.5400001, 47.37, 400.123456789), (8.541, 47.371, 401.0),
             (8.542, 47.3705, 402.5), (8.5433333, 47.3722222, 399.987654321)]
    smoothed = smooth_track(track, subdivisions=7)
    assert smoothed[-1] == track[-1], "Final original point must be appended verbatim"


def test_interior_points_stay_near_the_polyline():
    smoothed = smooth_track(ZIGZAG_TRACK, subdivisions=8)
    lons = [p[0] for p in smoothed]
    # Catmull-Rom overshoot is small for evenly spaced samples
    assert min(lons) >= ZIGZAG_TRACK[0][0] - 1e-4
    assert max(lons) <= ZIGZAG_TRACK[-1][0] + 1e-4
    assert all(a < b for a, b in zip(lons, lons[1:])), "Longitude should keep increasing"


def test_default_subdivisions_from_config():
    smoothed = smooth_track(ZIGZAG_TRACK)
    assert len(smoothed) == (len(ZIGZAG_TRACK) - 1) * config.SPLINE_SUBDIVISIONS + 1


def test_invalid_subdivisions_rejected():
    with pytest.raises(ValueError):
        smooth_track(ZIGZAG_TRACK, subdivisions=0)


def test_project_altitude_flattens_and_keeps():
    flat = project_altitude(ZIGZAG_TRACK, enabled=False)
    raised = project_altitude(ZIGZAG_TRACK, enabled=True)

    assert all(p[2] == 0.0 for p in flat)
    assert [p[:2] for p in flat] == [p[:2] for p in ZIGZAG_TRACK]
    assert raised == ZIGZAG_TRACK


def test_gradient_segment_count_and_end_colors():
    smoothed = smooth_track(ZIGZAG_TRACK, subdivisions=4)
    segments = gradient_segments(smoothed, '#00D4AA', '#FF4D6D')

    assert len(segments) == len(smoothed) - 1
    assert segments[0].color == (0, 212, 170)
    assert segments[-1].end_color == (255, 77, 109)
    for seg, nxt in zip(segments, segments[1:]):
        assert seg.end == nxt.start, "Segments must be consecutive"
        assert seg.end_color == nxt.color


def test_gradient_midpoint_rounds_to_integers():
    segments = gradient_segments([(0, 0, 0), (1, 0, 0), (2, 0, 0)], '#000000', '#ff0000')
    assert [s.color for s in segments] == [(0, 0, 0), (128, 0, 0)]
    assert segments[-1].end_color == (255, 0, 0)


def test_gradient_defaults_and_degenerate_input():
    assert gradient_segments([]) == []
    assert gradient_segments([(0, 0, 0)]) == []
    segments = gradient_segments([(0, 0, 0), (1, 1, 1)])
    assert segments[0].color == hex_to_rgb(config.TRACK_GRADIENT_START)
    assert segments[0].end_color == hex_to_rgb(config.TRACK_GRADIENT_END)


def test_color_helpers_round_trip():
    assert hex_to_rgb('#00A0DC') == (0, 160, 220)
    assert rgb_to_hex((0, 160, 220)) == '#00a0dc'


def test_bounds_and_center():
    bounds = track_bounds(THREE_POINT_TRACK)
    assert bounds == ((0.0, 0.0), (2.0, 1.0))
    assert track_center(THREE_POINT_TRACK) == (1.0, 0.5)
    assert track_bounds([]) is None
    assert track_center([]) is None


def test_zoom_clamps_to_max_for_degenerate_extent():
    assert estimate_zoom(((8.54, 47.37), (8.54, 47.37))) == config.ZOOM_MAX
    assert estimate_zoom(((8.54, 47.37), (8.54 + 1e-9, 47.37))) == 18


def test_zoom_clamps_to_min_for_huge_extent():
    assert estimate_zoom(((-90.0, -45.0), (90.0, 45.0))) == config.ZOOM_MIN
    assert estimate_zoom(((0.0, 0.0), (5.0, 0.0))) == 10


def test_zoom_for_one_kilometre_track():
    extent = 1.0 / config.KM_PER_DEGREE
    assert estimate_zoom(((0.0, 0.0), (extent, extent / 2))) == pytest.approx(config.ZOOM_BASE)


def test_frame_track():
    lon, lat, zoom = frame_track(ZIGZAG_TRACK)
    assert lon == pytest.approx(8.5425)
    assert lat == pytest.approx(47.3706)
    assert config.ZOOM_MIN <= zoom <= config.ZOOM_MAX
    assert frame_track([]) is None


def test_single_point_track_frames_at_max_zoom():
    lon, lat, zoom = frame_track([(8.54, 47.37, 100.0)])
    assert (lon, lat) == (8.54, 47.37)
    assert zoom == config.ZOOM_MAX


@pytest.mark.parametrize("end,expected", [
    ((0.0, 1.0, 0.0), 0.0),
    ((1.0, 0.0, 0.0), 90.0),
    ((0.0, -1.0, 0.0), 180.0),
    ((-1.0, 0.0, 0.0), 270.0),
])
def test_initial_bearing(end, expected):
    assert initial_bearing((0.0, 0.0, 0.0), end) == pytest.approx(expected, abs=1e-6)
