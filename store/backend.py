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
Flight backend command surface.

The backend parses logs, stores telemetry and downsamples it; the client
only ever reaches it through the four commands of ``Backend``.
``HttpBackend`` speaks to it over HTTP:

    GET    /flights                     -> [Flight, ...]
    GET    /flights/{id}?maxPoints=N    -> FlightDetail
    POST   /import   {"filePath": ...}  -> ImportResult
    DELETE /flights/{id}                -> 204
"""
import abc
import logging

import httpx

import config

try:
    from core.structures import Flight, FlightDetail, ImportResult
    from locales.strings import ERRORS
except ImportError:
    from ..core.structures import Flight, FlightDetail, ImportResult
    from ..locales.strings import ERRORS

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """Any failure of a backend command: transport, HTTP status or payload."""


class Backend(abc.ABC):
    """The four commands the flight store depends on."""

    @abc.abstractmethod
    async def list_flights(self):
        """Return every stored Flight, newest first."""

    @abc.abstractmethod
    async def get_flight_detail(self, flight_id, max_points):
        """Return the FlightDetail downsampled to at most ``max_points``."""

    @abc.abstractmethod
    async def import_log(self, file_path):
        """Parse and store a log file; return an ImportResult."""

    @abc.abstractmethod
    async def delete_flight(self, flight_id):
        """Remove a flight and its telemetry."""


class HttpBackend(Backend):
    """Backend reached over HTTP with httpx."""

    def __init__(self, base_url=None, timeout=None, transport=None):
        self.base_url = (base_url or config.BACKEND_URL).rstrip('/')
        self.timeout = config.BACKEND_TIMEOUT_S if timeout is None else timeout
        # transport is injectable for tests (httpx.MockTransport)
        self._transport = transport

    def _client(self):
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        )

    async def _request(self, method, path, **kwargs):
        logger.debug(f"{method} {self.base_url}{path}")
        try:
            async with self._client() as client:
                response = await client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            raise BackendError(ERRORS['backend_unreachable'].format(error=f"timeout: {e}")) from e
        except httpx.HTTPError as e:
            raise BackendError(ERRORS['backend_unreachable'].format(error=e)) from e

        if response.status_code >= 400:
            detail = _error_detail(response)
            raise BackendError(ERRORS['backend_status'].format(
                status=response.status_code, detail=detail))
        return response

    async def _json(self, method, path, decode, **kwargs):
        response = await self._request(method, path, **kwargs)
        try:
            return decode(response.json())
        except (ValueError, KeyError, TypeError, IndexError) as e:
            raise BackendError(ERRORS['backend_payload'].format(error=e)) from e

    async def list_flights(self):
        return await self._json(
            'GET', '/flights',
            lambda data: [Flight.from_dict(item) for item in data],
        )

    async def get_flight_detail(self, flight_id, max_points):
        return await self._json(
            'GET', f'/flights/{flight_id}',
            FlightDetail.from_dict,
            params={'maxPoints': max_points},
        )

    async def import_log(self, file_path):
        return await self._json(
            'POST', '/import',
            ImportResult.from_dict,
            json={'filePath': str(file_path)},
        )

    async def delete_flight(self, flight_id):
        await self._request('DELETE', f'/flights/{flight_id}')


def _error_detail(response):
    try:
        payload = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(payload, dict):
        return payload.get('detail') or payload.get('message') or str(payload)
    return str(payload)
