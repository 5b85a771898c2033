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

"""Session-scoped preference storage (lives as long as the process)."""
import logging

logger = logging.getLogger(__name__)

_TRUE_VALUES = ('1', 'true', 'yes', 'on')


class SessionStorage:
    """String key/value store, never written to disk.

    Values are stored as strings, the way browser session storage does,
    so booleans go through ``get_bool``/``set_bool``.
    """

    def __init__(self, initial=None):
        self._values = dict(initial or {})

    def get(self, key, default=None):
        return self._values.get(key, default)

    def set(self, key, value):
        self._values[key] = str(value)

    def get_bool(self, key, default=False):
        raw = self.get(key)
        if raw is None:
            return default
        return raw.strip().lower() in _TRUE_VALUES

    def set_bool(self, key, value):
        logger.debug(f"Session preference {key} = {bool(value)}")
        self.set(key, 'true' if value else 'false')


# One storage per running application
_SESSION = SessionStorage()


def get_session():
    """Process-wide session storage."""
    return _SESSION
