"""Route data structures shared by the analysis modules."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from route_overlay.constants import METRIC_CHANNELS


@dataclass(frozen=True)
class Coordinate:
    lat: float
    lng: float


@dataclass
class RawRoute:
    """Parser output, index-aligned but not yet validated."""

    coordinates: List[Coordinate]
    elevations: List[Optional[float]] = field(default_factory=list)
    timestamps: List[Optional[datetime]] = field(default_factory=list)
    heart_rates: List[Optional[float]] = field(default_factory=list)
    cadences: List[Optional[float]] = field(default_factory=list)
    powers: List[Optional[float]] = field(default_factory=list)
    speeds: List[Optional[float]] = field(default_factory=list)
    filename: str = ''


@dataclass(frozen=True)
class RouteStats:
    distance: float = 0.0
    elevation_gain: float = 0.0
    elevation_loss: float = 0.0
    min_elevation: float = 0.0
    max_elevation: float = 0.0
    duration: Optional[float] = None


@dataclass
class Route:
    """
    A validated, derived and cleaned recording.

    Per-point lists share one length and index i of each list refers to the
    same physical sample. A channel the source never recorded may be left
    empty; readers treat missing positions as None (see ``value_at``).
    """

    coordinates: List[Coordinate]
    elevations: List[Optional[float]] = field(default_factory=list)
    timestamps: List[Optional[datetime]] = field(default_factory=list)
    heart_rates: List[Optional[float]] = field(default_factory=list)
    cadences: List[Optional[float]] = field(default_factory=list)
    powers: List[Optional[float]] = field(default_factory=list)
    speeds: List[Optional[float]] = field(default_factory=list)
    paces: List[Optional[float]] = field(default_factory=list)
    filename: str = ''
    stats: RouteStats = field(default_factory=RouteStats)
    display_name: str = ''
    skipped: int = 0
    warnings: List[str] = field(default_factory=list)

    def __post_init__(self):
        if not self.display_name:
            self.display_name = default_display_name(self.filename)

    def __len__(self):
        return len(self.coordinates)

    def has_timestamps(self) -> bool:
        return any(ts is not None for ts in self.timestamps)

    def channel(self, metric: str) -> List[Optional[float]]:
        """Return a per-point series by metric name ('pace', 'heartrate', ...)."""
        attr = METRIC_CHANNELS.get(metric)
        if attr is None:
            raise KeyError(f"Unknown metric channel: {metric}")
        return getattr(self, attr)


def value_at(values, index):
    """Return values[index], or None when the channel is shorter than the route."""
    if values is None or index < 0 or index >= len(values):
        return None
    return values[index]


def default_display_name(filename: str) -> str:
    name = re.sub(r'\.(gpx|fit)$', '', filename or '', flags=re.IGNORECASE)
    return name.replace('_', ' ')
