"""Shared thresholds, defaults, and labels for route analysis."""

from __future__ import annotations

from typing import Dict, Tuple

EARTH_RADIUS_KM = 6371.0

SUPPORTED_EXTENSIONS: Tuple[str, ...] = ('.gpx', '.fit')

# --- GPS cleaning ---
JUMP_MAX_SPEED_KMH = 35.0
CLEAN_MAX_SPEED_KMH = 30.0
MAX_ACCELERATION_MS2 = 10.0
ROLLING_MEDIAN_WINDOW = 5

# --- Field validation ---
MIN_ELEVATION_M = -500.0
MAX_ELEVATION_M = 9000.0

# --- Display smoothing: (upper distance bound km, window size, decimation factor) ---
ADAPTIVE_SMOOTHING_STEPS: Tuple[Tuple[float, int, int], ...] = (
    (10.0, 50, 5),
    (25.0, 100, 10),
    (50.0, 200, 15),
    (100.0, 300, 25),
)
ADAPTIVE_SMOOTHING_MAX: Tuple[int, int] = (500, 50)

DEFAULT_SMOOTHING_WINDOW = 20
DEFAULT_DECIMATION_FACTOR = 20

# --- Route comparison ---
TIME_GAP_SAMPLE_INTERVAL_KM = 0.1
DEFAULT_SPLIT_KM = 1.0
PARTIAL_SPLIT_RATIO = 0.9
MAX_SPLIT_PACE_MIN_KM = 30.0

BEST_EFFORT_DISTANCES_KM: Tuple[float, ...] = (1.0, 5.0, 10.0, 21.1, 42.2)
HALF_MARATHON_KM = 21.0975
MARATHON_KM = 42.195
DISTANCE_LABEL_TOLERANCE_KM = 0.1

STEEP_MIN_LENGTH_M = 5.0
STEEP_MIN_GRADE = 0.05

# --- Zones ---
ZONE_COUNT = 5
MIN_ZONE_SAMPLES = 10
DEFAULT_ZONE_METRIC = 'heartRate'

ZONE_NAMES: Dict[str, Tuple[str, ...]] = {
    'heartRate': ('Recovery', 'Aerobic', 'Tempo', 'Threshold', 'Max'),
    'power': ('Recovery', 'Endurance', 'Tempo', 'Threshold', 'Max'),
    'cadence': ('Recovery', 'Easy', 'Steady', 'Quick', 'Max'),
    # Lower pace is faster, so the first bin holds the hardest efforts.
    'pace': ('Max', 'Threshold', 'Tempo', 'Aerobic', 'Recovery'),
}

# --- Insights ---
EVEN_SPLIT_PERCENT = 2.0
MIN_INSIGHT_SAMPLES = 10
MAX_REASONABLE_PACE = 20.0
MIN_VALID_HR = 30.0
MAX_VALID_HR = 220.0
NET_ELEVATION_THRESHOLD_M = 20.0
DEFAULT_CADENCE_SPM = 170.0

# Start hour upper bounds; later starts are 'Night Owl'
TIME_OF_DAY_LABELS: Tuple[Tuple[int, str], ...] = (
    (6, 'Early Bird'),
    (12, 'Morning'),
    (17, 'Afternoon'),
    (20, 'Evening'),
)
LATE_TIME_OF_DAY_LABEL = 'Night Owl'

# Route channel name -> Route attribute
METRIC_CHANNELS: Dict[str, str] = {
    'elevation': 'elevations',
    'speed': 'speeds',
    'pace': 'paces',
    'heartrate': 'heart_rates',
    'cadence': 'cadences',
    'power': 'powers',
}
