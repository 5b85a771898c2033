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
Tests for telemetry chart shaping.
"""
import os
import sys

import matplotlib
matplotlib.use('Agg')
import pytest

# Add parent directory to path for imports
PARENT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PARENT_DIR not in sys.path:
    sys.path.insert(0, PARENT_DIR)

from core.charts import BASE_CHART, build_charts, format_elapsed, plot_charts
from core.structures import Telemetry
import config


def make_telemetry():
    return Telemetry(
        time=(0.0, 30.0, 61.5, 125.0),
        altitude=(0.0, 42.0, None, 80.5),
        speed=(0.0, 8.2, 9.1, None),
        battery=(100, 81, None, 19),
        satellites=(12, 14, 15, 15),
        pitch=(0.0, -5.5, None, 2.0),
        roll=(0.0, 1.0, 1.5, None),
        yaw=(180.0, 181.0, 179.5, 90.0),
    )


@pytest.mark.parametrize("seconds,expected", [
    (0, "0:00"),
    (9.9, "0:09"),
    (59.99, "0:59"),
    (60, "1:00"),
    (75.4, "1:15"),
    (600, "10:00"),
    ("125.0", "2:05"),
])
def test_format_elapsed(seconds, expected):
    assert format_elapsed(seconds) == expected


def test_three_charts_in_display_order():
    charts = build_charts(make_telemetry())
    assert [c['id'] for c in charts] == ['altitude_speed', 'battery', 'attitude']


def test_charts_share_base_style():
    for chart in build_charts(make_telemetry()):
        assert chart['animation'] is False
        assert chart['grid'] == BASE_CHART['grid']
        assert chart['tooltip'] == BASE_CHART['tooltip']
        assert chart['x_axis']['formatter'] is format_elapsed
        assert chart['x_axis']['data'] == (0.0, 30.0, 61.5, 125.0)


def test_building_does_not_mutate_base_style():
    build_charts(make_telemetry())
    assert 'data' not in BASE_CHART['x_axis']
    assert 'data' not in BASE_CHART['legend']


def test_altitude_speed_chart_is_dual_axis():
    telemetry = make_telemetry()
    chart = build_charts(telemetry)[0]

    assert len(chart['y_axes']) == 2
    assert chart['y_axes'][0]['name'] == "Altitude (m)"
    assert chart['y_axes'][1]['name'] == "Speed (m/s)"
    altitude, speed = chart['series']
    assert (altitude['y_axis_index'], speed['y_axis_index']) == (0, 1)
    assert altitude['data'] is telemetry.altitude
    assert speed['data'] is telemetry.speed
    assert chart['legend']['data'] == ["Altitude", "Speed"]


def test_battery_chart_has_low_battery_threshold():
    telemetry = make_telemetry()
    chart = build_charts(telemetry)[1]

    axis, = chart['y_axes']
    assert (axis['min'], axis['max']) == (0, 100)
    series, = chart['series']
    assert series['data'] is telemetry.battery
    mark, = series['mark_lines']
    assert mark['y'] == 20 == config.LOW_BATTERY_THRESHOLD
    assert mark['label'] == "Low Battery"
    assert mark['style'] == 'dashed'


def test_attitude_chart_shares_one_axis():
    telemetry = make_telemetry()
    chart = build_charts(telemetry)[2]

    assert len(chart['y_axes']) == 1
    assert [s['name'] for s in chart['series']] == ["Pitch", "Roll", "Yaw"]
    assert all(s['y_axis_index'] == 0 for s in chart['series'])
    assert chart['series'][0]['data'] == (0.0, -5.5, None, 2.0)


def test_empty_telemetry():
    charts = build_charts(Telemetry())
    assert all(s['data'] == () for c in charts for s in c['series'])


def test_plot_charts_with_gaps(tmp_path):
    output = str(tmp_path / "flight.png")
    path = plot_charts(build_charts(make_telemetry()), output)

    assert path == str(tmp_path / "flight_telemetry.png")
    assert os.path.getsize(path) > 0


def test_plot_charts_nothing_to_draw():
    assert plot_charts([]) is None
