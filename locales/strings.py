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
Localization strings for FlightView.
English dictionary for user interface.
"""

# Error messages published on the flight store
ERRORS = {
    'load_flights': "Failed to load flights: {error}",
    'load_flight_data': "Failed to load flight data: {error}",
    'import_failed': "Import failed: {error}",
    'delete_flight': "Failed to delete flight: {error}",
    'backend_unreachable': "Backend unreachable: {error}",
    'backend_status': "Backend returned HTTP {status}: {detail}",
    'backend_payload': "Malformed backend response: {error}",
    'file_not_found': "File not found: {file_path}",
    'unsupported_extension': "Unsupported log file type: {file_path}",
    'flight_not_found': "Flight {flight_id} not found",
}

# User-facing notices
MESSAGES = {
    'drop_unsupported': (
        'Please use the "Browse" button to select files. '
        'Drag and drop file paths are not accessible in this application.'
    ),
    'no_gps_data': "No GPS data available",
    'dialog_title': "Import a flight log",
    'dialog_filter': "Flight Log Files",
}

# Axis labels and chart titles
LABELS = {
    'altitude': "Altitude",
    'speed': "Speed",
    'battery': "Battery",
    'pitch': "Pitch",
    'roll': "Roll",
    'yaw': "Yaw",

    'altitude_axis': "Altitude (m)",
    'speed_axis': "Speed (m/s)",
    'battery_axis': "Battery %",
    'attitude_axis': "Degrees",
    'time_axis': "Time (m:ss)",

    'low_battery': "Low Battery",

    # Track markers
    'start': "Start",
    'end': "End",
    'home': "Home",
}
