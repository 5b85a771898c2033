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
Flight state store.

Single source of truth for the flight list, the selected flight, the
loaded flight detail and the loading/importing/error flags. Every change
replaces the published ``StoreState`` snapshot as a whole and notifies
subscribers; nothing else mutates it.

Backend failures never escape the store: they end up in ``state.error``.
"""
import logging
from dataclasses import dataclass, replace
from typing import Optional, Tuple

import config

try:
    from core.structures import Flight, FlightDetail, ImportResult
    from locales.strings import ERRORS
except ImportError:
    from ..core.structures import Flight, FlightDetail, ImportResult
    from ..locales.strings import ERRORS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreState:
    """Read-only snapshot of the store."""
    flights: Tuple[Flight, ...] = ()
    selected_flight_id: Optional[int] = None
    current_flight_detail: Optional[FlightDetail] = None
    loading: bool = False
    importing: bool = False
    error: Optional[str] = None

    @property
    def selected_flight(self):
        for flight in self.flights:
            if flight.id == self.selected_flight_id:
                return flight
        return None


class FlightStore:
    """Orchestrates backend calls and keeps ``StoreState`` consistent.

    Args:
        backend: a store.backend.Backend
        max_points: downsampling ceiling for flight detail
            (default: config.MAX_TRACK_POINTS)
        discard_stale: drop detail responses of superseded selections
            (default: config.DISCARD_STALE_SELECTIONS)
    """

    def __init__(self, backend, max_points=None, discard_stale=None):
        self._backend = backend
        self.max_points = config.MAX_TRACK_POINTS if max_points is None else max_points
        self.discard_stale = (config.DISCARD_STALE_SELECTIONS
                              if discard_stale is None else discard_stale)
        self._state = StoreState()
        self._subscribers = []
        self._selection_token = 0

    @property
    def state(self):
        return self._state

    def subscribe(self, callback):
        """Call ``callback(state)`` after every change; returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _set(self, **changes):
        self._state = replace(self._state, **changes)
        for callback in list(self._subscribers):
            try:
                callback(self._state)
            except Exception:
                logger.exception(f"Subscriber {callback!r} failed")

    def _is_stale(self, token):
        return self.discard_stale and token != self._selection_token

    async def load_flights(self, auto_select=True):
        """Reload the flight list.

        With ``auto_select`` the first flight is selected when none is.
        """
        self._set(loading=True, error=None)
        try:
            flights = await self._backend.list_flights()
        except Exception as e:
            logger.error(f"Error loading flights: {e}")
            self._set(loading=False, error=ERRORS['load_flights'].format(error=e))
            return

        self._set(flights=tuple(flights), loading=False)
        logger.info(f"Loaded {len(flights)} flights")

        if auto_select and flights and self._state.selected_flight_id is None:
            await self.select_flight(flights[0].id)

    async def select_flight(self, flight_id):
        """Select a flight at once, then fetch its detail.

        On failure the selection stays on ``flight_id`` with no detail for it.
        """
        self._selection_token += 1
        token = self._selection_token
        self._set(selected_flight_id=flight_id, loading=True, error=None)

        try:
            detail = await self._backend.get_flight_detail(flight_id, self.max_points)
        except Exception as e:
            if self._is_stale(token):
                logger.debug(f"Ignoring failure of superseded selection {flight_id}: {e}")
                return
            logger.error(f"Error loading flight {flight_id}: {e}")
            self._set(loading=False, error=ERRORS['load_flight_data'].format(error=e))
            return

        if self._is_stale(token):
            logger.debug(f"Discarding detail of superseded selection {flight_id}")
            return
        self._set(current_flight_detail=detail, loading=False)
        logger.info(f"Loaded flight {flight_id}: {len(detail.track)} track points, "
                    f"{len(detail.telemetry)} telemetry samples")

    async def import_log(self, file_path):
        """Import a log file; on success reload the list and select the new flight.

        Returns:
            ImportResult (a failure result with point_count 0 when the
            backend rejects the file or the call fails)
        """
        self._set(importing=True, error=None)
        try:
            result = await self._backend.import_log(file_path)
        except Exception as e:
            message = ERRORS['import_failed'].format(error=e)
            logger.error(message)
            self._set(importing=False, error=message)
            return ImportResult.failure(message)

        if not result.success:
            message = ERRORS['import_failed'].format(error=result.message)
            logger.error(message)
            self._set(importing=False, error=message)
            return ImportResult.failure(message)

        try:
            if result.flight_id is not None:
                logger.info(f"Imported {file_path} as flight {result.flight_id} "
                            f"({result.point_count} points)")
                await self.load_flights(auto_select=False)
                await self.select_flight(result.flight_id)
        finally:
            self._set(importing=False)
        return result

    async def delete_flight(self, flight_id):
        """Delete a flight, dropping it from the selection first if selected."""
        try:
            await self._backend.delete_flight(flight_id)
        except Exception as e:
            logger.error(f"Error deleting flight {flight_id}: {e}")
            self._set(error=ERRORS['delete_flight'].format(error=e))
            return

        if self._state.selected_flight_id == flight_id:
            # Invalidate any detail request still in flight for this id
            self._selection_token += 1
            self._set(selected_flight_id=None, current_flight_detail=None)

        logger.info(f"Deleted flight {flight_id}")
        await self.load_flights()

    def clear_error(self):
        self._set(error=None)
