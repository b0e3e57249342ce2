"""
Route Overlay
GPS route analytics: clean GPX/FIT recordings and compare runs at equal
distance.
"""

__version__ = "1.0.0"
__author__ = ""

from route_overlay.analyzer import RouteAnalyzer
from route_overlay.loader import RouteParseError
from route_overlay.models import Coordinate, RawRoute, Route
from route_overlay.pipeline import build_route, load_route

__all__ = ["RouteAnalyzer", "RouteParseError", "Coordinate", "RawRoute", "Route", "build_route", "load_route"]
