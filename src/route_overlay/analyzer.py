"""
Route Overlay - Analysis Engine
Loads GPX/FIT recordings, reports per-route metrics and compares routes
against each other at equal distance.
"""

import os
from dataclasses import asdict
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from route_overlay.comparison import (
    TimeGapResult,
    calculate_best_efforts,
    calculate_splits,
    calculate_time_gaps,
    detect_steep_sections,
)
from route_overlay.constants import SUPPORTED_EXTENSIONS
from route_overlay.formatting import (
    format_cadence,
    format_distance,
    format_duration,
    format_effort_duration,
    format_elevation,
    format_heart_rate,
    format_pace,
    format_split_gap,
    format_split_pace,
    format_split_time,
    format_time_delta,
)
from route_overlay.insights import (
    calculate_activity_totals,
    calculate_elevation_summary,
    calculate_fastest_pace,
    calculate_heart_rate_drift,
    calculate_optimal_cadence,
    calculate_pace_consistency,
    calculate_split_analysis,
    calculate_time_of_day,
)
from route_overlay.loader import RouteParseError
from route_overlay.models import Route
from route_overlay.pipeline import load_route
from route_overlay.zones import calculate_zones


def _average(values) -> Optional[float]:
    avg = pd.Series(values, dtype=float).mean()
    return None if pd.isna(avg) else float(avg)


def _average_pace(route: Route) -> Optional[float]:
    if not route.stats.duration or route.stats.distance <= 0:
        return None
    return route.stats.duration / 60 / route.stats.distance


def _difference(value, reference) -> Optional[float]:
    if value is None or reference is None:
        return None
    return value - reference


class RouteAnalyzer:
    """Analyzes GPX/FIT files and compares routes at equal distance."""

    def __init__(self, output_callback=None, progress_callback=None):
        """
        Initialize analyzer.

        Args:
            output_callback: Optional function to call with output lines
            progress_callback: Optional function called with (current, total)
                while a folder is processed
        """
        self.output_callback = output_callback or self._default_output
        self.progress_callback = progress_callback

    def _default_output(self, text: str):
        """Default output handler - prints to console."""
        print(text)

    def _emit(self, text: str):
        """Emit output through callback."""
        self.output_callback(text)

    def load_file(self, filename: str) -> Optional[Route]:
        """Load one file, reporting parse failures instead of raising."""
        try:
            route = load_route(filename)
        except RouteParseError as e:
            self._emit(f"❌ Error opening {filename}: {e}")
            return None

        if route.warnings:
            self._emit(
                f"⚠️ {route.filename}: {route.skipped} point(s) skipped, "
                f"{len(route.warnings)} data warning(s)"
            )
        return route

    def analyze_file(self, filename: str) -> Optional[Dict[str, Any]]:
        """
        Analyze a single GPX or FIT file.

        Args:
            filename: Path to the recording

        Returns:
            Dictionary with analysis results or None if the file is unusable
        """
        route = self.load_file(filename)
        if route is None:
            return None
        return self.analyze_route(route)

    def analyze_route(self, route: Route) -> Dict[str, Any]:
        stats = route.stats
        splits = calculate_splits(route)
        efforts = calculate_best_efforts(route)
        hr_zones = calculate_zones(route.heart_rates, route.timestamps, 'heartRate')
        steep = detect_steep_sections(route)
        avg_pace = _average_pace(route)
        avg_hr = _average(route.heart_rates)
        avg_cadence = _average(route.cadences)
        start_time = next((ts for ts in route.timestamps if ts is not None), None)

        # Generate Report
        when = start_time.strftime('%Y-%m-%d %H:%M') if start_time else 'no timestamps'
        self._emit(f"\n🏃 REPORT: {route.display_name} ({when})")
        self._emit("-" * 50)
        self._emit(
            f"Stats:    {format_distance(stats.distance)}  in  {format_duration(stats.duration)}"
            f"  @  {format_pace(avg_pace)}"
        )
        self._emit(
            f"Climb:    +{format_elevation(stats.elevation_gain)} / -{format_elevation(stats.elevation_loss)}"
            f"  (range {format_elevation(stats.min_elevation)} - {format_elevation(stats.max_elevation)})"
        )
        self._emit(f"Metrics:  HR: {format_heart_rate(avg_hr)} | Cad: {format_cadence(avg_cadence)}")

        if splits:
            self._emit("Splits:")
            self._emit(self.splits_frame(splits).to_string(index=False))

        for effort in efforts:
            self._emit(
                f"Best {effort.distance_label}: {format_effort_duration(effort.duration)} "
                f"({format_split_pace(effort.pace)}) at {effort.start_km:.1f}km"
            )

        if hr_zones:
            dominant = hr_zones.zones[hr_zones.dominant_zone]
            self._emit(f"HR Zones: mostly {dominant.name} ({dominant.percent}%)")

        if steep.climbs:
            steepest = max(steep.climbs, key=lambda c: c.max_grade)
            self._emit(
                f"Terrain:  {len(steep.climbs)} climb(s) >5%, steepest {steepest.max_grade:.1f}% "
                f"at {steepest.start_km:.1f}km"
            )
        elif not steep.descents:
            self._emit("Terrain:  ✅ Flat, no steep sections")

        split_analysis = calculate_split_analysis(route)
        if split_analysis:
            labels = {'even': '✅ Even split', 'negative': '🚀 Negative split', 'positive': '⚠️ Positive split'}
            self._emit(f"Pacing:   {labels[split_analysis.verdict]} ({split_analysis.difference_percent:+.1f}%)")

        elevation = calculate_elevation_summary(route)
        if elevation and elevation.direction:
            self._emit(f"Net:      {elevation.direction} {abs(elevation.net):.0f} m start to finish")

        totals = calculate_activity_totals(route)
        time_of_day = calculate_time_of_day(route)
        if totals:
            extras = []
            if totals.steps is not None:
                extras.append(f"~{totals.steps:,} steps")
            if totals.heartbeats is not None:
                extras.append(f"~{totals.heartbeats:,} heartbeats")
            if time_of_day:
                extras.append(f"{time_of_day.label} start")
            if extras:
                self._emit("Extras:   " + " | ".join(extras))

        return {
            'filename': route.filename,
            'display_name': route.display_name,
            'date': start_time,
            'distance_km': stats.distance,
            'duration_s': stats.duration,
            'elevation_gain_m': stats.elevation_gain,
            'elevation_loss_m': stats.elevation_loss,
            'avg_pace': avg_pace,
            'avg_hr': round(avg_hr, 1) if avg_hr is not None else None,
            'avg_cadence': round(avg_cadence, 1) if avg_cadence is not None else None,
            'splits': splits,
            'best_efforts': efforts,
            'hr_zones': hr_zones,
            'climbs': steep.climbs,
            'descents': steep.descents,
            'split_analysis': split_analysis,
            'consistency': calculate_pace_consistency(route),
            'hr_drift': calculate_heart_rate_drift(route),
            'optimal_cadence': calculate_optimal_cadence(route),
            'fastest_pace': calculate_fastest_pace(route),
            'elevation_summary': elevation,
            'totals': totals,
            'time_of_day': time_of_day,
            'route': route,
        }

    def analyze_folder(self, folder_path: str) -> List[Dict[str, Any]]:
        """
        Analyze all GPX/FIT files in a folder.

        Args:
            folder_path: Path to folder containing recordings

        Returns:
            List of analysis results
        """
        files = sorted(f for f in os.listdir(folder_path) if f.lower().endswith(SUPPORTED_EXTENSIONS))

        if not files:
            self._emit(f"⚠️ No .gpx or .fit files found in {folder_path}")
            return []

        self._emit(f"\n📁 Found {len(files)} route file(s) in {folder_path}")
        self._emit("=" * 60)

        results = []
        for i, f in enumerate(files):
            if self.progress_callback:
                self.progress_callback(i + 1, len(files))
            res = self.analyze_file(os.path.join(folder_path, f))
            if res:
                results.append(res)

        self._emit(f"\n✅ Analysis complete! Processed {len(results)} file(s).")
        return results

    def compare_files(self, filenames: Sequence[str]) -> Optional[TimeGapResult]:
        routes = [r for r in (self.load_file(f) for f in filenames) if r is not None]
        return self.compare_routes(routes)

    def compare_routes(self, routes: Sequence[Route]) -> Optional[TimeGapResult]:
        """
        Time gaps of every timed route against the first timed one.

        Returns None (with an explanatory line) when fewer than two routes
        carry timestamps.
        """
        timed = [r for r in routes if r.has_timestamps()]
        if len(timed) < 2:
            self._emit("⚠️ Select at least 2 routes with timestamp data to compare")
            return None

        reference, others = timed[0], timed[1:]
        result = calculate_time_gaps(reference, others)
        if result is None or not result.gaps:
            self._emit("⚠️ Could not align these routes by distance")
            return None

        self._emit(f"\n⏱️ TIME GAPS vs {reference.display_name} over {format_distance(result.max_distance)}")
        self._emit("-" * 50)
        last = result.gaps[-1]
        for entry in last.comparisons:
            verdict = 'behind' if entry.gap > 0 else 'ahead' if entry.gap < 0 else 'level'
            self._emit(f"{entry.route.display_name}: {format_time_delta(entry.gap)} ({verdict})")
        self._emit(self.comparison_table(timed).to_string(index=False))

        reference_splits = calculate_splits(reference)
        for route in others:
            splits = calculate_splits(route)
            if splits:
                self._emit(f"Splits: {route.display_name} vs {reference.display_name}")
                self._emit(self.splits_frame(splits, reference_splits).to_string(index=False))
        return result

    def comparison_table(self, routes: Sequence[Route]) -> pd.DataFrame:
        """One summary row per route."""
        rows = []
        for route in routes:
            efforts = {e.distance_label: e.duration for e in calculate_best_efforts(route, (1.0, 5.0))}
            rows.append({
                'route': route.display_name,
                'distance_km': round(route.stats.distance, 2),
                'duration': format_duration(route.stats.duration),
                'pace': format_pace(_average_pace(route)),
                'elev_gain_m': round(route.stats.elevation_gain),
                'avg_hr': format_heart_rate(_average(route.heart_rates)),
                'best_1km': format_effort_duration(efforts.get('1km')),
                'best_5km': format_effort_duration(efforts.get('5km')),
            })
        return pd.DataFrame(rows)

    def splits_frame(self, splits, reference_splits=None) -> pd.DataFrame:
        """
        Splits as a table, times and paces formatted for display.

        With ``reference_splits`` a ``gap`` column holds each split's time
        minus the reference split with the same number.
        """
        df = pd.DataFrame([asdict(s) for s in splits])
        if df.empty:
            return df
        df['time'] = df['duration'].apply(format_split_time)
        df['pace'] = df['pace'].apply(format_split_pace)
        df['distance'] = df['distance'].round(2)
        df['elev_gain'] = pd.to_numeric(df['elev_gain']).round(0)
        df['avg_hr'] = pd.to_numeric(df['avg_hr']).round(0)
        columns = ['number', 'distance', 'time', 'pace', 'elev_gain', 'avg_hr', 'is_partial']
        if reference_splits is not None:
            reference = {s.number: s.duration for s in reference_splits}
            df['gap'] = [
                format_split_gap(_difference(s.duration, reference.get(s.number))) for s in splits
            ]
            columns.append('gap')
        return df[columns]

    def time_gap_frame(self, result: TimeGapResult) -> pd.DataFrame:
        """Gap series in wide form: one column of seconds per comparison route."""
        rows = []
        for point in result.gaps:
            row = {'distance_km': round(point.distance, 3), 'reference_s': point.reference_time}
            for entry in point.comparisons:
                row[entry.route.display_name] = entry.gap
            rows.append(row)
        return pd.DataFrame(rows)
