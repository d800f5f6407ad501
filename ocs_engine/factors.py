"""
Probability factor model.

Five independent evidence channels, each mapping a candidate location to a
score in [0, 1]:

  distance_decay     Gaussian fall-off from the loss point, sigma = radius / 3
  route_proximity    closeness to the vessel track (cross-track distance)
  current_influence  closeness to where the current would have carried it
  cluster_score      Gaussian kernel density of past losses
  depth_factor       seafloor depth heuristic (same for every cell)

The *_array variants take numpy lat/lon arrays so the Cell Scorer can score
a whole grid at once; the plain variants take a GeoPoint and return a float.
Missing inputs (no route, no current, no history) score 0, never raise.
"""

from typing import Optional, Sequence

import numpy as np

from .config import DEFAULT_CONFIG, SearchConfig
from .geo import destination_arrays, haversine_m, polyline_distance_m
from .types import GeoPoint, HistoricalIncident


def distance_decay(distance_m, search_radius_m: float):
    """exp(-d^2 / (2 sigma^2)) with sigma = search_radius_m / 3."""
    sigma = search_radius_m / 3.0
    if sigma <= 0:
        return np.where(np.asarray(distance_m) == 0, 1.0, 0.0)
    return np.exp(-np.square(distance_m) / (2 * sigma ** 2))


def route_proximity_array(lats, lons, route_points: Sequence[GeoPoint], max_distance_m: float) -> np.ndarray:
    lats = np.asarray(lats, dtype=float)
    if len(route_points) < 2 or max_distance_m <= 0:
        return np.zeros_like(lats)
    d = polyline_distance_m(
        lats, np.asarray(lons, dtype=float),
        [p.latitude for p in route_points],
        [p.longitude for p in route_points],
    )
    return np.maximum(0.0, 1.0 - d / max_distance_m)


def route_proximity(point: GeoPoint, route_points: Sequence[GeoPoint], max_distance_m: float) -> float:
    """1 - distance/max, floored at 0; 0 when the route has fewer than 2 points."""
    return float(route_proximity_array([point.latitude], [point.longitude], route_points, max_distance_m)[0])


def expected_drift_endpoint(
    incident_location: GeoPoint,
    speed_mps: float,
    direction_deg: float,
    time_in_water_hours: float,
) -> GeoPoint:
    lat, lon = destination_arrays(
        incident_location.latitude, incident_location.longitude,
        speed_mps * time_in_water_hours * 3600.0, direction_deg,
    )
    return GeoPoint(float(lat), float(lon), incident_location.altitude)


def current_influence_array(
    lats,
    lons,
    incident_location: GeoPoint,
    speed_mps: float,
    direction_deg: float,
    time_in_water_hours: float,
) -> np.ndarray:
    lats = np.asarray(lats, dtype=float)
    expected_m = speed_mps * time_in_water_hours * 3600.0
    if expected_m <= 0:
        return np.zeros_like(lats)
    end = expected_drift_endpoint(incident_location, speed_mps, direction_deg, time_in_water_hours)
    err = haversine_m(lats, np.asarray(lons, dtype=float), end.latitude, end.longitude)
    return np.maximum(0.0, 1.0 - err / (2 * expected_m))


def current_influence(
    point: GeoPoint,
    incident_location: GeoPoint,
    speed_mps: float,
    direction_deg: float,
    time_in_water_hours: float,
) -> float:
    """
    Project the drift endpoint (speed x time along the current) and score
    1 - distance_to_endpoint / (2 x drift distance), floored at 0.
    """
    return float(current_influence_array(
        [point.latitude], [point.longitude],
        incident_location, speed_mps, direction_deg, time_in_water_hours,
    )[0])


def cluster_score_array(
    lats,
    lons,
    historical: Optional[Sequence[HistoricalIncident]],
    bandwidth_m: float = 5000.0,
) -> np.ndarray:
    lats = np.asarray(lats, dtype=float)
    if not historical:
        return np.zeros_like(lats)
    lons = np.asarray(lons, dtype=float)
    density = np.zeros_like(lats)
    for inc in historical:
        d = haversine_m(lats, lons, inc.location.latitude, inc.location.longitude)
        density += np.exp(-np.square(d) / (2 * bandwidth_m ** 2))
    return density / len(historical)


def cluster_score(
    point: GeoPoint,
    historical: Optional[Sequence[HistoricalIncident]],
    bandwidth_m: float = 5000.0,
) -> float:
    """Mean Gaussian kernel over past incidents; 0 with no history."""
    return float(cluster_score_array([point.latitude], [point.longitude], historical, bandwidth_m)[0])


def depth_factor(depth_m: float, config: SearchConfig = DEFAULT_CONFIG) -> float:
    """
    1.0 inside the 1000-3000 m band, ramps 0.7 -> 1.0 from the surface to
    1000 m, decays by 1.0 per 5000 m past 3000 m. Never below 0.3.
    """
    lo, hi = config.optimal_depth_min_m, config.optimal_depth_max_m
    depth_m = abs(depth_m)
    if lo <= depth_m <= hi:
        return 1.0
    if depth_m < lo:
        base = config.shallow_depth_base
        return base + (depth_m / lo) * (1.0 - base)
    return max(config.depth_floor, 1.0 - (depth_m - hi) * config.deep_decay_per_m)
