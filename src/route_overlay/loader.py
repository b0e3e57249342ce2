"""
GPX and FIT importers.

Both produce a ``RawRoute`` with index-aligned channels. Structural problems
(unreadable file, broken XML or FIT data, no points at all) raise
``RouteParseError``; per-point problems are left for validation.
"""

from __future__ import annotations

import logging
import os
from datetime import timezone
from typing import Optional

import fitparse
import gpxpy
import gpxpy.gpx

from route_overlay.constants import SUPPORTED_EXTENSIONS
from route_overlay.models import Coordinate, RawRoute


logger = logging.getLogger(__name__)

SEMICIRCLE_TO_DEGREES = 180 / 2**31
MS_TO_KMH = 3.6


class RouteParseError(ValueError):
    """The file could not be turned into a route."""


def get_best_value(record, legacy_key, enhanced_key):
    """Prefer the enhanced FIT field, fall back to the legacy one."""
    val = record.get(enhanced_key)
    return val if val is not None else record.get(legacy_key)


def _extension_value(point, names) -> Optional[float]:
    """First numeric extension element whose local tag name is in ``names``."""
    for extension in getattr(point, 'extensions', None) or []:
        for elem in extension.iter():
            tag = elem.tag.split('}', 1)[-1].lower()
            if tag in names and elem.text and elem.text.strip():
                try:
                    return float(elem.text.strip())
                except ValueError:
                    continue
    return None


def parse_gpx(source, filename: str = '') -> RawRoute:
    """
    Parse GPX content (XML text or an open file) into a RawRoute.

    Track points are used when present, otherwise route points. Heart rate,
    cadence and power come from ``<extensions>`` in any namespace; GPX
    cadence counts one foot and is doubled to steps per minute.
    """
    try:
        gpx = gpxpy.parse(source)
    except gpxpy.gpx.GPXException as e:
        raise RouteParseError(f"Invalid XML in {filename or 'GPX data'}: {e}") from e

    points = [p for track in gpx.tracks for segment in track.segments for p in segment.points]
    if not points:
        points = [p for route in gpx.routes for p in route.points]
    if not points:
        raise RouteParseError(f"No track points found in {filename or 'GPX data'}")

    raw = RawRoute(coordinates=[], filename=filename)
    for point in points:
        raw.coordinates.append(Coordinate(point.latitude, point.longitude))
        raw.elevations.append(point.elevation)
        raw.timestamps.append(point.time)
        raw.heart_rates.append(_extension_value(point, ('hr', 'heartrate')))
        cadence = _extension_value(point, ('cad', 'cadence'))
        raw.cadences.append(cadence * 2 if cadence is not None else None)
        raw.powers.append(_extension_value(point, ('power', 'watts')))
    return raw


def _record_position(r):
    lat = r.get('position_lat')
    lon = r.get('position_long')
    if lat is None or lon is None:
        return None
    if abs(lat) > 180:  # semicircles
        lat = lat * SEMICIRCLE_TO_DEGREES
        lon = lon * SEMICIRCLE_TO_DEGREES
    if lat == 0 and lon == 0:
        return None
    return Coordinate(lat, lon)


def parse_fit(path: str, filename: str = '') -> RawRoute:
    """
    Read ``record`` messages from a FIT file.

    Records without a position (or at 0,0) are skipped. Device speed is
    converted from m/s to km/h and running cadence doubled to steps per
    minute.
    """
    filename = filename or os.path.basename(path)
    raw = RawRoute(coordinates=[], filename=filename)
    skipped = 0

    try:
        fitfile = fitparse.FitFile(path)
        for record in fitfile.get_messages("record"):
            r = record.get_values()
            position = _record_position(r)
            if position is None:
                skipped += 1
                continue

            timestamp = r.get('timestamp')
            if timestamp is not None and timestamp.tzinfo is None:
                timestamp = timestamp.replace(tzinfo=timezone.utc)
            speed = get_best_value(r, 'speed', 'enhanced_speed')
            cadence = r.get('cadence')

            raw.coordinates.append(position)
            raw.elevations.append(get_best_value(r, 'altitude', 'enhanced_altitude'))
            raw.timestamps.append(timestamp)
            raw.heart_rates.append(r.get('heart_rate'))
            raw.cadences.append(cadence * 2 if cadence is not None else None)
            raw.powers.append(r.get('power'))
            raw.speeds.append(speed * MS_TO_KMH if speed is not None else None)
    except (fitparse.FitParseError, OSError) as e:
        raise RouteParseError(f"Could not read FIT file {filename}: {e}") from e

    if skipped:
        logger.info("%s: ignored %d record(s) without a position", filename, skipped)
    if not raw.coordinates:
        raise RouteParseError(f"No track points found in {filename}")
    return raw


def load_raw_route(path: str) -> RawRoute:
    """Dispatch on the file extension (``.gpx`` or ``.fit``)."""
    filename = os.path.basename(path)
    ext = os.path.splitext(filename)[1].lower()
    if ext not in SUPPORTED_EXTENSIONS:
        raise RouteParseError(f"Unsupported file type '{ext}' for {filename}")

    if ext == '.fit':
        return parse_fit(path, filename)

    try:
        with open(path, encoding='utf-8') as gpx_file:
            return parse_gpx(gpx_file, filename)
    except (OSError, UnicodeDecodeError) as e:
        raise RouteParseError(f"Could not read {filename}: {e}") from e
