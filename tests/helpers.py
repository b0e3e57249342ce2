from datetime import datetime, timedelta, timezone

from route_overlay.metrics import calculate_route_stats
from route_overlay.models import Coordinate, Route

START = datetime(2026, 2, 1, tzinfo=timezone.utc)

# 0.009 degrees of latitude is roughly 1 km
DEG_PER_KM = 0.009


def _timestamps(count, step_seconds=1.0, start=START):
    return [start + timedelta(seconds=i * step_seconds) for i in range(count)]


def make_route(distance_km, pace_min_per_km=5.0, points_per_km=10, elevations=None, heart_rates=None,
               cadences=None, timed=True, filename='route.gpx'):
    """Straight northbound route at a constant pace, one point every 1/points_per_km km."""
    count = int(round(distance_km * points_per_km)) + 1
    seconds_per_point = pace_min_per_km * 60 / points_per_km
    coordinates = [Coordinate(i / points_per_km * DEG_PER_KM, 0.0) for i in range(count)]
    timestamps = _timestamps(count, seconds_per_point) if timed else [None] * count
    return route_from(
        coordinates,
        timestamps,
        elevations if elevations is not None else [100.0] * count,
        heart_rates if heart_rates is not None else [150.0] * count,
        cadences or [],
        filename,
    )


def route_from(coordinates, timestamps, elevations=None, heart_rates=None, cadences=None, filename='route.gpx',
               paces=None):
    elevations = elevations or []
    return Route(
        coordinates=list(coordinates),
        elevations=list(elevations),
        timestamps=list(timestamps),
        heart_rates=list(heart_rates or []),
        cadences=list(cadences or []),
        paces=list(paces or []),
        filename=filename,
        stats=calculate_route_stats(coordinates, elevations, timestamps),
    )


def gpx_document(count, lat_step=0.0009, seconds_step=30, hr=None, cad=None, start=START):
    """A GPX 1.1 track with Garmin TrackPointExtension values."""
    points = []
    for i in range(count):
        ts = (start + timedelta(seconds=i * seconds_step)).strftime('%Y-%m-%dT%H:%M:%SZ')
        ext = ''
        if hr is not None or cad is not None:
            inner = ''
            if hr is not None:
                inner += f'<gpxtpx:hr>{hr}</gpxtpx:hr>'
            if cad is not None:
                inner += f'<gpxtpx:cad>{cad}</gpxtpx:cad>'
            ext = f'<extensions><gpxtpx:TrackPointExtension>{inner}</gpxtpx:TrackPointExtension></extensions>'
        points.append(
            f'<trkpt lat="{i * lat_step:.6f}" lon="0.000000"><ele>{100 + i * 0.5:.1f}</ele>'
            f'<time>{ts}</time>{ext}</trkpt>'
        )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<gpx version="1.1" creator="tests" xmlns="http://www.topografix.com/GPX/1/1" '
        'xmlns:gpxtpx="http://www.garmin.com/xmlschemas/TrackPointExtension/v1">'
        '<trk><name>Test</name><trkseg>' + ''.join(points) + '</trkseg></trk></gpx>'
    )
