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

"""Flight state store and its backend command surface."""

from .backend import Backend, BackendError, HttpBackend
from .flight_store import FlightStore, StoreState
from .importer import (
    browse_and_import,
    choose_log_file,
    handle_drop,
    is_log_file,
    validate_log_path,
)

__all__ = [
    # Backend
    'Backend',
    'BackendError',
    'HttpBackend',
    # Store
    'FlightStore',
    'StoreState',
    # Log selection
    'browse_and_import',
    'choose_log_file',
    'handle_drop',
    'is_log_file',
    'validate_log_path',
]
