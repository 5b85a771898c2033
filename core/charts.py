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
Telemetry chart shaping.

``build_charts`` turns one Telemetry into three chart definitions
(altitude/speed, battery, attitude). Definitions are plain dicts sharing
``BASE_CHART``; ``plot_charts`` draws them with matplotlib.
"""
import copy
import logging
import math
import os

import matplotlib.pyplot as plt
from matplotlib.ticker import FuncFormatter
import numpy as np

import config

try:
    from locales.strings import LABELS
except ImportError:
    from ..locales.strings import LABELS

logger = logging.getLogger(__name__)

SECONDS_PER_MINUTE = 60


def format_elapsed(value, _pos=None):
    """Render elapsed seconds as ``m:ss`` (e.g. 75.4 -> ``1:15``)."""
    secs = float(value)
    mins = math.floor(secs / SECONDS_PER_MINUTE)
    remaining = math.floor(secs % SECONDS_PER_MINUTE)
    return f"{mins}:{remaining:02d}"


BASE_CHART = {
    'animation': False,
    'grid': {'left': 50, 'right': 20, 'top': 30, 'bottom': 30},
    'tooltip': {
        'trigger': 'axis',
        'background': config.CHART_COLORS['tooltip_bg'],
        'border': config.CHART_COLORS['axis'],
        'text_color': '#ffffff',
        'pointer': 'cross',
    },
    'legend': {'text_color': config.CHART_COLORS['label'], 'top': 0},
    'x_axis': {
        'type': 'category',
        'boundary_gap': False,
        'line_color': config.CHART_COLORS['axis'],
        'label_color': config.CHART_COLORS['label'],
        'formatter': format_elapsed,
        'split_line': False,
    },
}


def _value_axis(name, color=None, split_line=True, **extra):
    axis = {
        'type': 'value',
        'name': name,
        'name_color': color,
        'line_color': color or config.CHART_COLORS['axis'],
        'label_color': config.CHART_COLORS['label'],
        'split_line': config.CHART_COLORS['grid'] if split_line else None,
    }
    axis.update(extra)
    return axis


def _line_series(name, data, color, width=config.CHART_LINE_WIDTH, y_axis_index=0, area=False):
    return {
        'name': name,
        'type': 'line',
        'data': data,
        'y_axis_index': y_axis_index,
        'smooth': True,
        'symbol': None,
        'color': color,
        'width': width,
        'area': area,
        'mark_lines': [],
    }


def _chart(chart_id, telemetry, legend):
    chart = copy.deepcopy(BASE_CHART)
    chart['id'] = chart_id
    chart['legend']['data'] = legend
    chart['x_axis']['data'] = telemetry.time
    return chart


def altitude_speed_chart(telemetry):
    chart = _chart('altitude_speed', telemetry, [LABELS['altitude'], LABELS['speed']])
    chart['y_axes'] = [
        _value_axis(LABELS['altitude_axis'], config.CHART_COLORS['altitude']),
        _value_axis(LABELS['speed_axis'], config.CHART_COLORS['speed'], split_line=False),
    ]
    chart['series'] = [
        _line_series(LABELS['altitude'], telemetry.altitude,
                     config.CHART_COLORS['altitude'], area=True),
        _line_series(LABELS['speed'], telemetry.speed,
                     config.CHART_COLORS['speed'], y_axis_index=1),
    ]
    return chart


def battery_chart(telemetry):
    chart = _chart('battery', telemetry, [LABELS['battery']])
    chart['y_axes'] = [_value_axis(LABELS['battery_axis'], min=0, max=100)]
    series = _line_series(LABELS['battery'], telemetry.battery,
                          config.CHART_COLORS['battery'], area=True)
    series['mark_lines'] = [{
        'y': config.LOW_BATTERY_THRESHOLD,
        'color': config.CHART_COLORS['low_battery'],
        'style': 'dashed',
        'label': LABELS['low_battery'],
    }]
    chart['series'] = [series]
    return chart


def attitude_chart(telemetry):
    chart = _chart('attitude', telemetry,
                   [LABELS['pitch'], LABELS['roll'], LABELS['yaw']])
    chart['y_axes'] = [_value_axis(LABELS['attitude_axis'])]
    chart['series'] = [
        _line_series(LABELS[name], getattr(telemetry, name),
                     config.CHART_COLORS[name], width=config.ATTITUDE_LINE_WIDTH)
        for name in ('pitch', 'roll', 'yaw')
    ]
    return chart


def build_charts(telemetry):
    """Three independent chart definitions for one Telemetry, in display order."""
    return [
        altitude_speed_chart(telemetry),
        battery_chart(telemetry),
        attitude_chart(telemetry),
    ]


def _to_plot_array(values):
    # None becomes NaN so matplotlib leaves a gap
    return np.array([np.nan if v is None else v for v in values], dtype=float)


def _draw_chart(ax, chart):
    colors = config.CHART_COLORS
    x = np.asarray(chart['x_axis']['data'], dtype=float)
    axes = [ax]
    if len(chart['y_axes']) > 1:
        axes.append(ax.twinx())

    for axis, axis_def in zip(axes, chart['y_axes']):
        axis.set_ylabel(axis_def['name'], color=axis_def['name_color'] or axis_def['label_color'])
        axis.tick_params(axis='y', colors=axis_def['label_color'])
        if 'min' in axis_def and 'max' in axis_def:
            axis.set_ylim(axis_def['min'], axis_def['max'])
        if axis_def['split_line']:
            axis.grid(True, axis='y', color=axis_def['split_line'], linestyle='-', alpha=0.7)
        for spine in axis.spines.values():
            spine.set_color(axis_def['line_color'])

    for series in chart['series']:
        target = axes[series['y_axis_index']]
        y = _to_plot_array(series['data'])
        target.plot(x, y, color=series['color'], linewidth=series['width'], label=series['name'])
        if series['area'] and len(y):
            target.fill_between(x, y, np.nanmin(y) if np.any(~np.isnan(y)) else 0,
                                color=series['color'], alpha=config.AREA_ALPHA)
        for mark in series['mark_lines']:
            target.axhline(mark['y'], color=mark['color'], linestyle='--', linewidth=1)
            target.annotate(mark['label'], xy=(1.0, mark['y']),
                            xycoords=('axes fraction', 'data'),
                            ha='right', va='bottom', color=mark['color'], fontsize=8)

    ax.set_facecolor(colors['background'])
    ax.tick_params(axis='x', colors=chart['x_axis']['label_color'])
    ax.xaxis.set_major_formatter(FuncFormatter(chart['x_axis']['formatter']))
    if len(x):
        ax.set_xlim(float(x[0]), float(x[-1]) if x[-1] > x[0] else float(x[0]) + 1.0)

    handles, labels = [], []
    for axis in axes:
        h, lbl = axis.get_legend_handles_labels()
        handles.extend(h)
        labels.extend(lbl)
    if handles:
        legend = ax.legend(handles, labels, loc='upper center', ncol=len(handles),
                           frameon=False, fontsize=8)
        for text in legend.get_texts():
            text.set_color(chart['legend']['text_color'])


def plot_charts(charts, output_file=None):
    """Draw chart definitions stacked in one figure.

    Args:
        charts: list from build_charts()
        output_file: base path for saving ("<base>_telemetry.png")

    Returns:
        str: path to saved file or None
    """
    if not charts:
        logger.warning("No charts to plot")
        return None

    fig, axes = plt.subplots(len(charts), 1, figsize=(12, 3 * len(charts)), sharex=True)
    axes = np.atleast_1d(axes)
    fig.patch.set_facecolor(config.CHART_COLORS['background'])

    for ax, chart in zip(axes, charts):
        _draw_chart(ax, chart)

    axes[-1].set_xlabel(LABELS['time_axis'], color=config.CHART_COLORS['label'])
    plt.tight_layout()

    chart_filename = None
    if output_file:
        base_filename = os.path.splitext(output_file)[0]
        chart_filename = f"{base_filename}_telemetry.png"
        plt.savefig(chart_filename, dpi=config.RENDER_DPI, bbox_inches='tight',
                    facecolor=config.CHART_COLORS['background'])
    else:
        plt.show()

    plt.close(fig)
    return chart_filename
