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
FlightView track renderer.

Turns a raw GPS track into a layered map scene and owns the camera.
Layers, bottom to top:

    basemap         dark / light / satellite
    terrain         DEM source, 3D only
    sky             atmosphere decoration, 3D only
    track-shadow    wide, low-opacity dark line
    track-path      gradient-colored line (start color -> end color)
    marker-start    pulsing dot
    marker-end      arrow pointing along the last leg
    marker-home     crosshair, omitted when home is unknown

The scene is plain data (dicts), so it can be handed to any map front-end;
``render`` rasterizes it with matplotlib as a pseudo-3D image.
"""
import logging
import os
from dataclasses import dataclass, field, replace
from typing import List, Optional

import matplotlib.pyplot as plt
from matplotlib.collections import LineCollection
import numpy as np

import config

try:
    from locales.strings import LABELS, MESSAGES
except ImportError:
    from ..locales.strings import LABELS, MESSAGES

from .geometry import (
    frame_track,
    gradient_segments,
    initial_bearing,
    project_altitude,
    rgb_to_hex,
    smooth_track,
)
from .session import get_session
from .structures import ViewportState, TRACK_LON, TRACK_LAT, TRACK_ALT

logger = logging.getLogger(__name__)

BASEMAP_BACKGROUNDS = {
    'dark': '#0f0f23',
    'light': '#f2f2ee',
    'satellite': '#1d2b1f',
}


@dataclass
class Scene:
    """One composited frame: camera, terrain and ordered layers."""
    viewport: ViewportState
    layers: List[dict] = field(default_factory=list)
    terrain: Optional[dict] = None
    empty: bool = False

    def layer(self, layer_id):
        for layer in self.layers:
            if layer['id'] == layer_id:
                return layer
        return None

    @property
    def layer_ids(self):
        return [layer['id'] for layer in self.layers]


class Map3DToggle:
    """
    3D terrain as a two-state machine.

    Entering ON adds the DEM source and, if not already present, the sky
    layer. Leaving ON removes both. Sources and layers are tracked here so
    the renderer never has to guess what is mounted.
    """
    OFF = 'off'
    ON = 'on'

    def __init__(self):
        self.state = self.OFF
        self.sources = {}
        self.layers = {}

    @property
    def enabled(self):
        return self.state == self.ON

    def enable(self):
        if self.state == self.ON:
            return
        self.sources[config.TERRAIN_SOURCE_ID] = {
            'type': 'raster-dem',
            'url': config.TERRAIN_SOURCE_URL,
            'tileSize': 256,
        }
        if config.SKY_LAYER_ID not in self.layers:
            self.layers[config.SKY_LAYER_ID] = {
                'id': config.SKY_LAYER_ID,
                'type': 'sky',
                'paint': {
                    'sky-type': 'atmosphere',
                    'sky-atmosphere-sun-intensity': 15,
                },
            }
        self.state = self.ON
        logger.debug("3D terrain enabled")

    def disable(self):
        if self.state == self.OFF:
            return
        self.sources.pop(config.TERRAIN_SOURCE_ID, None)
        self.layers.pop(config.SKY_LAYER_ID, None)
        self.state = self.OFF
        logger.debug("3D terrain disabled")

    def terrain(self):
        if not self.enabled:
            return None
        return {
            'source': config.TERRAIN_SOURCE_ID,
            'exaggeration': config.TERRAIN_EXAGGERATION,
        }

    def scene_layers(self):
        """Terrain-related layers to insert above the basemap."""
        if not self.enabled:
            return []
        layers = [{
            'id': config.TERRAIN_SOURCE_ID,
            'type': 'hillshade',
            'source': dict(self.sources[config.TERRAIN_SOURCE_ID]),
        }]
        if config.SKY_LAYER_ID in self.layers:
            layers.append(dict(self.layers[config.SKY_LAYER_ID]))
        return layers


def is_known_home(home, epsilon=None):
    """Home at (or within epsilon of) 0,0 means the log never recorded one."""
    if home is None:
        return False
    if epsilon is None:
        epsilon = config.HOME_EPSILON
    return abs(home[0]) > epsilon or abs(home[1]) > epsilon


class TrackRenderer:
    """Scene composer and camera owner for one map view."""

    def __init__(self, session=None, theme=None):
        self.session = session if session is not None else get_session()
        self.viewport = ViewportState(**config.DEFAULT_VIEWPORT)
        self.theme = theme or config.DEFAULT_BASEMAP_THEME
        self.terrain = Map3DToggle()
        if self.session.get_bool(config.SESSION_KEY_3D, default=False):
            self.terrain.enable()
        self.satellite = self.session.get_bool(config.SESSION_KEY_SATELLITE, default=False)
        self._track = ()
        self._home = None

    # ------------------------------------------------------------------
    # Track and camera
    # ------------------------------------------------------------------
    @property
    def track(self):
        return self._track

    def set_track(self, track, home=None):
        """Show a track; re-frame the camera only when the track object changes."""
        self._home = home
        if track is self._track:
            return
        self._track = track
        framing = frame_track(track) if track is not None else None
        if framing is None:
            return
        lon, lat, zoom = framing
        self.viewport = replace(self.viewport, longitude=lon, latitude=lat, zoom=zoom)
        logger.info(f"Framed track of {len(track)} points at {lat:.5f}, {lon:.5f} zoom {zoom:.2f}")

    def pan(self, longitude, latitude):
        self.viewport = replace(self.viewport, longitude=float(longitude), latitude=float(latitude))

    def zoom_to(self, zoom):
        low, high = config.VIEWPORT_ZOOM_LIMITS
        self.viewport = replace(self.viewport, zoom=float(np.clip(zoom, low, high)))

    def rotate(self, bearing=None, pitch=None):
        if bearing is not None:
            self.viewport = replace(self.viewport, bearing=float(bearing) % 360.0)
        if pitch is not None:
            low, high = config.VIEWPORT_PITCH_LIMITS
            self.viewport = replace(self.viewport, pitch=float(np.clip(pitch, low, high)))

    # ------------------------------------------------------------------
    # Preferences
    # ------------------------------------------------------------------
    @property
    def is_3d(self):
        return self.terrain.enabled

    def set_3d(self, enabled):
        if enabled:
            self.terrain.enable()
        else:
            self.terrain.disable()
        self.session.set_bool(config.SESSION_KEY_3D, enabled)

    def set_satellite(self, enabled):
        self.satellite = bool(enabled)
        self.session.set_bool(config.SESSION_KEY_SATELLITE, enabled)

    def set_theme(self, theme):
        if theme not in ('dark', 'light'):
            raise ValueError(f"Unknown basemap theme: {theme}")
        self.theme = theme

    @property
    def basemap(self):
        return 'satellite' if self.satellite else self.theme

    # ------------------------------------------------------------------
    # Composition
    # ------------------------------------------------------------------
    def _basemap_layer(self):
        name = self.basemap
        return {
            'id': 'basemap',
            'type': 'raster' if name == 'satellite' else 'style',
            'name': name,
            'source': config.BASEMAP_STYLES[name],
        }

    def compose(self):
        """Build the scene for the current track, toggles and camera."""
        layers = [self._basemap_layer()]
        points = [] if self._track is None else list(self._track)

        if not points:
            return Scene(viewport=replace(self.viewport), layers=layers, empty=True)

        layers.extend(self.terrain.scene_layers())

        smoothed = smooth_track(points)
        path = project_altitude(smoothed, self.terrain.enabled)
        segments = gradient_segments(path)

        layers.append({
            'id': 'track-shadow',
            'type': 'line',
            'coordinates': path,
            'color': config.TRACK_SHADOW_COLOR,
            'width': config.TRACK_SHADOW_WIDTH,
            'opacity': config.TRACK_SHADOW_ALPHA,
        })
        layers.append({
            'id': 'track-path',
            'type': 'line-gradient',
            'segments': segments,
            'width': config.TRACK_LINE_WIDTH,
            'opacity': config.TRACK_LINE_ALPHA,
        })

        start, end = path[0], path[-1]
        bearing = initial_bearing(path[-2], path[-1]) if len(path) >= 2 else 0.0
        layers.append({
            'id': 'marker-start',
            'type': 'marker',
            'style': 'pulse',
            'position': start,
            'color': config.START_MARKER_COLOR,
            'label': LABELS['start'],
        })
        layers.append({
            'id': 'marker-end',
            'type': 'marker',
            'style': 'arrow',
            'position': end,
            'bearing': bearing,
            'color': config.END_MARKER_COLOR,
            'label': LABELS['end'],
        })
        if is_known_home(self._home):
            layers.append({
                'id': 'marker-home',
                'type': 'marker',
                'style': 'crosshair',
                'position': (float(self._home[0]), float(self._home[1]), 0.0),
                'color': config.HOME_MARKER_COLOR,
                'label': LABELS['home'],
            })

        return Scene(
            viewport=replace(self.viewport),
            layers=layers,
            terrain=self.terrain.terrain(),
        )

    # ------------------------------------------------------------------
    # Raster output
    # ------------------------------------------------------------------
    def render(self, output_file=None, title=None):
        """Rasterize the current scene as a pseudo-3D map image.

        Altitude is drawn as a northward offset over the flat shadow, with
        vertical pillars linking the two, when 3D is on.

        Args:
            output_file: base path for saving ("<base>_track.png")
            title: optional figure title

        Returns:
            str: path to saved file or None
        """
        scene = self.compose()
        if scene.empty:
            logger.warning(MESSAGES['no_gps_data'])
            return None

        shadow = scene.layer('track-shadow')
        path_layer = scene.layer('track-path')
        coords = np.asarray(shadow['coordinates'], dtype=float)
        lons = coords[:, TRACK_LON]
        lats = coords[:, TRACK_LAT]

        alts = coords[:, TRACK_ALT]
        alt_min = float(np.min(alts))
        alt_range = max(1.0, float(np.max(alts)) - alt_min)
        if self.is_3d:
            alt_norm = (alts - alt_min) / alt_range
        else:
            alt_norm = np.zeros_like(alts)
        lats_elevated = lats + alt_norm * config.RENDER_OFFSET_SCALE

        background = BASEMAP_BACKGROUNDS[self.basemap]
        fig, ax = plt.subplots(figsize=(10, 10))
        fig.patch.set_facecolor(background)
        ax.set_facecolor(background)

        # Shadow (no offset)
        ax.plot(lons, lats, color=shadow['color'],
                linewidth=shadow['width'], alpha=shadow['opacity'], zorder=1)

        if self.is_3d:
            step = max(1, len(lats) // config.RENDER_PILLAR_STEP)
            for i in range(0, len(lats), step):
                ax.plot([lons[i], lons[i]], [lats[i], lats_elevated[i]],
                        color='gray', alpha=config.RENDER_PILLAR_ALPHA,
                        linewidth=0.8, zorder=2)

        points = np.array([lons, lats_elevated]).T.reshape(-1, 1, 2)
        segments = np.concatenate([points[:-1], points[1:]], axis=1)
        colors = [rgb_to_hex(seg.color) for seg in path_layer['segments']]
        lc = LineCollection(segments, colors=colors,
                            linewidth=path_layer['width'],
                            alpha=path_layer['opacity'], zorder=3)
        ax.add_collection(lc)

        for layer in scene.layers:
            if layer['type'] != 'marker':
                continue
            lon, lat = layer['position'][TRACK_LON], layer['position'][TRACK_LAT]
            if layer['id'] == 'marker-end':
                lat = lats_elevated[-1]
                marker = (3, 0, -layer['bearing'])
            elif layer['id'] == 'marker-start':
                lat = lats_elevated[0]
                marker = 'o'
            else:
                ax.scatter([lon], [lat], s=160, marker='+', color=layer['color'],
                           linewidths=2.0, zorder=5, label=layer['label'])
                continue
            ax.scatter([lon], [lat], s=120, marker=marker, color=layer['color'],
                       edgecolors='white', linewidths=1.5, zorder=5, label=layer['label'])

        ax.autoscale()
        ax.set_aspect('equal')
        ax.axis('off')
        ax.legend(loc='lower right', fontsize=9)

        if title:
            ax.set_title(title, fontsize=14, fontweight='bold',
                         color='white' if self.basemap != 'light' else 'black')

        track_filename = None
        if output_file:
            base_filename = os.path.splitext(output_file)[0]
            track_filename = f"{base_filename}_track.png"
            plt.savefig(track_filename, dpi=config.RENDER_DPI, bbox_inches='tight',
                        facecolor=background)
        else:
            plt.show()

        plt.close(fig)
        return track_filename
