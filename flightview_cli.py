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
FlightView CLI entry point.

Drives the flight store against a running backend and renders the
selected flight's track and telemetry charts to PNG files.
"""
import argparse
import asyncio
import json
import logging
import os
import sys

# Add script directory to path for imports
SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
if SCRIPT_DIR not in sys.path:
    sys.path.insert(0, SCRIPT_DIR)

from core.charts import build_charts, plot_charts
from core.renderer import TrackRenderer
from core.session import SessionStorage
from store.backend import HttpBackend
from store.flight_store import FlightStore
from store.importer import validate_log_path
import config
from locales.strings import ERRORS

logger = logging.getLogger('flightview_cli')


def format_duration_secs(duration_secs):
    """Format duration in seconds as mm:ss."""
    if duration_secs is None:
        return ""
    minutes = int(duration_secs // 60)
    seconds = int(duration_secs % 60)
    return f"{minutes:02d}:{seconds:02d}"


def flight_to_json(flight):
    return {
        "id": flight.id,
        "file_name": flight.file_name,
        "drone_model": flight.drone_model,
        "drone_serial": flight.drone_serial,
        "start_time": flight.start_time,
        "duration_secs": flight.duration_secs,
        "duration_formatted": format_duration_secs(flight.duration_secs),
        "total_distance_m": flight.total_distance,
        "max_altitude_m": flight.max_altitude,
        "max_speed_ms": flight.max_speed,
        "point_count": flight.point_count,
    }


def error_response(message):
    return {"success": False, "error": message}


async def run_list(store, args):
    await store.load_flights()
    state = store.state
    if state.error:
        return error_response(state.error)
    return {
        "success": True,
        "flights": [flight_to_json(f) for f in state.flights],
    }


def render_detail(detail, args):
    """Render track and charts for a loaded flight; returns output paths."""
    session = SessionStorage()
    renderer = TrackRenderer(session=session, theme=args.theme)
    renderer.set_3d(args.map_3d)
    renderer.set_satellite(args.satellite)
    renderer.set_track(detail.track, home=detail.home)

    paths = {}
    track_path = renderer.render(args.output, title=detail.flight.file_name)
    if track_path:
        paths["track"] = track_path
    charts_path = plot_charts(build_charts(detail.telemetry), args.output)
    if charts_path:
        paths["telemetry"] = charts_path

    vp = renderer.viewport
    return paths, {
        "longitude": vp.longitude,
        "latitude": vp.latitude,
        "zoom": vp.zoom,
        "pitch": vp.pitch,
        "bearing": vp.bearing,
    }


async def run_show(store, args):
    await store.select_flight(args.flight_id)
    state = store.state
    if state.error:
        return error_response(state.error)
    detail = state.current_flight_detail
    if detail is None:
        return error_response(ERRORS['flight_not_found'].format(flight_id=args.flight_id))

    paths, viewport = render_detail(detail, args)
    return {
        "success": True,
        "flight": flight_to_json(detail.flight),
        "track_points": len(detail.track),
        "telemetry_samples": len(detail.telemetry),
        "viewport": viewport,
        "graphs": paths,
    }


async def run_import(store, args):
    problem = validate_log_path(args.log_file)
    if problem:
        return error_response(problem)
    result = await store.import_log(os.path.abspath(args.log_file))
    state = store.state
    if not result.success:
        return error_response(state.error or result.message)
    # Imported, but the follow-up reload or selection failed
    if state.error:
        response = error_response(state.error)
        response["flight_id"] = result.flight_id
        return response
    response = {
        "success": True,
        "flight_id": result.flight_id,
        "message": result.message,
        "point_count": result.point_count,
    }
    if state.selected_flight is not None:
        response["flight"] = flight_to_json(state.selected_flight)
    return response


async def run_delete(store, args):
    await store.delete_flight(args.flight_id)
    state = store.state
    if state.error:
        return error_response(state.error)
    return {"success": True, "remaining": len(state.flights)}


COMMANDS = {
    'list': run_list,
    'show': run_show,
    'import': run_import,
    'delete': run_delete,
}


def build_parser():
    parser = argparse.ArgumentParser(description='Drone flight log viewer')
    parser.add_argument('--backend', help='Backend base URL', default=config.BACKEND_URL)
    parser.add_argument('--timeout', type=float, help='Backend timeout in seconds',
                        default=config.BACKEND_TIMEOUT_S)
    parser.add_argument('--verbose', action='store_true', help='Log progress to stderr')
    sub = parser.add_subparsers(dest='command', required=True)

    sub.add_parser('list', help='List stored flights')

    show = sub.add_parser('show', help='Render a flight track and telemetry charts')
    show.add_argument('flight_id', type=int)
    show.add_argument('--output', help='Output base path for charts', default=None)
    show.add_argument('--3d', dest='map_3d', action='store_true', help='Render altitude')
    show.add_argument('--satellite', action='store_true', help='Satellite basemap')
    show.add_argument('--theme', choices=('dark', 'light'), default=config.DEFAULT_BASEMAP_THEME)

    imp = sub.add_parser('import', help='Import a flight log')
    imp.add_argument('log_file')

    delete = sub.add_parser('delete', help='Delete a flight')
    delete.add_argument('flight_id', type=int)
    return parser


def main():
    """CLI entry point."""
    args = build_parser().parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.ERROR,
        format='%(levelname)s: %(message)s',
        stream=sys.stderr
    )

    try:
        store = FlightStore(HttpBackend(args.backend, timeout=args.timeout))
        response = asyncio.run(COMMANDS[args.command](store, args))
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=args.verbose)
        response = error_response(f"Error: {str(e)}")

    print(json.dumps(response, ensure_ascii=False, indent=2))
    if not response.get("success"):
        sys.exit(1)


if __name__ == "__main__":
    main()
