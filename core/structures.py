#!/usr/bin/env python3
# FlightView - drone flight log visualizer
# Copyright (C) 2024 FlightView Contributors
#
# Shared data-structure definitions used across the store, the geometry
# pipeline and the chart shaper. The backend speaks camelCase JSON; these
# classes are the only place that knows the wire spelling.

"""
Data shapes exchanged with the flight backend.

Flight (list item)
------------------
Returned by ``list flights``::

    {
        "id": 1,                     # backend identifier
        "fileName": "DJIFlightRecord_2024-05-01.txt",
        "droneModel": "Mavic 3",     # nullable
        "droneSerial": "1581F...",   # nullable
        "startTime": "2024-05-01T10:12:00Z",  # nullable, ISO 8601
        "durationSecs": 612.4,       # nullable
        "totalDistance": 3120.0,     # nullable, metres
        "maxAltitude": 118.2,        # nullable, metres
        "maxSpeed": 14.9,            # nullable, m/s
        "pointCount": 6124,          # nullable
    }

Flight detail
-------------
Returned by ``get flight detail``::

    {
        "flight": {...},             # Flight
        "telemetry": {               # parallel arrays, equal length
            "time": [0.0, 0.1, ...], # seconds from flight start
            "altitude": [...], "speed": [...], "battery": [...],
            "satellites": [...], "pitch": [...], "roll": [...], "yaw": [...],
        },
        "track": [[lon, lat, alt], ...],
        "home": [lon, lat],          # optional
    }

Any telemetry entry except ``time`` may be ``null``.
"""
from dataclasses import dataclass, field
from typing import Optional, Tuple

# Track point tuple layout: (longitude, latitude, altitude)
TRACK_LON = 0
TRACK_LAT = 1
TRACK_ALT = 2

# Telemetry channels, in wire order
TELEMETRY_CHANNELS = (
    'time', 'altitude', 'speed', 'battery',
    'satellites', 'pitch', 'roll', 'yaw',
)


def _optional_float(value):
    return None if value is None else float(value)


def _optional_int(value):
    return None if value is None else int(value)


@dataclass(frozen=True)
class Flight:
    """Flight metadata for list display."""
    id: int
    file_name: str
    drone_model: Optional[str] = None
    drone_serial: Optional[str] = None
    start_time: Optional[str] = None
    duration_secs: Optional[float] = None
    total_distance: Optional[float] = None
    max_altitude: Optional[float] = None
    max_speed: Optional[float] = None
    point_count: Optional[int] = None

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=int(data['id']),
            file_name=str(data['fileName']),
            drone_model=data.get('droneModel'),
            drone_serial=data.get('droneSerial'),
            start_time=data.get('startTime'),
            duration_secs=_optional_float(data.get('durationSecs')),
            total_distance=_optional_float(data.get('totalDistance')),
            max_altitude=_optional_float(data.get('maxAltitude')),
            max_speed=_optional_float(data.get('maxSpeed')),
            point_count=_optional_int(data.get('pointCount')),
        )


@dataclass(frozen=True)
class Telemetry:
    """Time-indexed telemetry channels.

    All channels are tuples of the same length; every channel except
    ``time`` may hold ``None`` at any index.
    """
    time: Tuple[float, ...] = ()
    altitude: Tuple[Optional[float], ...] = ()
    speed: Tuple[Optional[float], ...] = ()
    battery: Tuple[Optional[int], ...] = ()
    satellites: Tuple[Optional[int], ...] = ()
    pitch: Tuple[Optional[float], ...] = ()
    roll: Tuple[Optional[float], ...] = ()
    yaw: Tuple[Optional[float], ...] = ()

    def __post_init__(self):
        lengths = {name: len(getattr(self, name)) for name in TELEMETRY_CHANNELS}
        if len(set(lengths.values())) > 1:
            raise ValueError(f"Telemetry channels differ in length: {lengths}")
        # Freeze whatever sequence type the caller handed in
        for name in TELEMETRY_CHANNELS:
            object.__setattr__(self, name, tuple(getattr(self, name)))

    def __len__(self):
        return len(self.time)

    @classmethod
    def from_dict(cls, data):
        return cls(
            time=tuple(float(t) for t in data.get('time', ())),
            altitude=tuple(_optional_float(v) for v in data.get('altitude', ())),
            speed=tuple(_optional_float(v) for v in data.get('speed', ())),
            battery=tuple(_optional_int(v) for v in data.get('battery', ())),
            satellites=tuple(_optional_int(v) for v in data.get('satellites', ())),
            pitch=tuple(_optional_float(v) for v in data.get('pitch', ())),
            roll=tuple(_optional_float(v) for v in data.get('roll', ())),
            yaw=tuple(_optional_float(v) for v in data.get('yaw', ())),
        )


def parse_track(raw):
    """Convert ``[[lon, lat, alt], ...]`` into a tuple of float triples."""
    track = []
    for point in raw or ():
        if len(point) < 3:
            raise ValueError(f"Track point needs lon, lat, alt: {point!r}")
        track.append((float(point[TRACK_LON]), float(point[TRACK_LAT]), float(point[TRACK_ALT])))
    return tuple(track)


@dataclass(frozen=True)
class FlightDetail:
    """A fully loaded flight: metadata, telemetry and GPS track."""
    flight: Flight
    telemetry: Telemetry = field(default_factory=Telemetry)
    track: Tuple[Tuple[float, float, float], ...] = ()
    home: Optional[Tuple[float, float]] = None

    @classmethod
    def from_dict(cls, data):
        home = data.get('home')
        return cls(
            flight=Flight.from_dict(data['flight']),
            telemetry=Telemetry.from_dict(data.get('telemetry') or {}),
            track=parse_track(data.get('track')),
            home=(float(home[0]), float(home[1])) if home else None,
        )


@dataclass(frozen=True)
class ImportResult:
    """Outcome of one import attempt."""
    success: bool
    flight_id: Optional[int] = None
    message: str = ''
    point_count: int = 0

    @classmethod
    def from_dict(cls, data):
        return cls(
            success=bool(data['success']),
            flight_id=_optional_int(data.get('flightId')),
            message=str(data.get('message') or ''),
            point_count=int(data.get('pointCount') or 0),
        )

    @classmethod
    def failure(cls, message):
        return cls(success=False, flight_id=None, message=message, point_count=0)


@dataclass
class ViewportState:
    """Map camera. Mutable: user interaction moves it around."""
    longitude: float = 0.0
    latitude: float = 0.0
    zoom: float = 14.0
    pitch: float = 45.0
    bearing: float = 0.0
