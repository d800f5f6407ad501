# ============================== OCS STANDARD HEADER ==============================
# Script Name: geo.py
# Last Updated (UTC): 2026-10-17
# Update Summary:
# - Geodesy primitives for the search engine (distance, bearing, projection,
#   cross-track, polygons, spatial grid, drift walk, ISO 6346 check digit).
# Description:
# - Spherical-Earth math on WGS84 lat/lon. The *_m / *_deg / *_arrays helpers
#   are numpy expressions that accept scalars or arrays, so the grid pipeline
#   scores every cell in one pass; the GeoPoint functions wrap them and
#   return plain floats / GeoPoints.
# Data Handling Notes:
# - Earth mean radius R = 6,371,000 m. Distances in meters, angles in degrees.
# - Polygon area and point-in-polygon work in lat/lon space: fine for zones a
#   few tens of km across, not geodesically exact.
# ===============================================================================

import math
import re
import logging
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from .exceptions import EmptyInputError, GridTooLargeError
from .types import ContainerSerial, GeoPoint

LOG = logging.getLogger(__name__)

EARTH_RADIUS_M = 6371000.0

WATER_DENSITY_KG_M3 = 1025.0
GRAVITY_MS2 = 9.81


# ---------- Angles ----------

def degrees_to_radians(degrees):
    return np.radians(degrees)


def radians_to_degrees(radians):
    return np.degrees(radians)


def normalize_angle(degrees: float) -> float:
    """Map any angle into [0, 360)."""
    return float(degrees) % 360.0


def angle_difference(angle1: float, angle2: float) -> float:
    """Shortest signed turn from angle1 to angle2, in (-180, 180]."""
    diff = normalize_angle(angle2) - normalize_angle(angle1)
    if diff > 180:
        diff -= 360
    if diff <= -180:
        diff += 360
    return diff


# ---------- Array-capable cores ----------

def haversine_m(lat1, lon1, lat2, lon2):
    """
    Great-circle distance in meters. Works on floats or numpy arrays
    (broadcasting), e.g. one incident against every grid cell.
    """
    phi1 = np.radians(lat1)
    phi2 = np.radians(lat2)
    dphi = np.radians(np.subtract(lat2, lat1))
    dlmb = np.radians(np.subtract(lon2, lon1))
    a = np.sin(dphi / 2) ** 2 + np.cos(phi1) * np.cos(phi2) * np.sin(dlmb / 2) ** 2
    a = np.clip(a, 0.0, 1.0)
    return EARTH_RADIUS_M * 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))


def bearing_deg(lat1, lon1, lat2, lon2):
    """Initial bearing 1 -> 2 in [0, 360). Identical points give 0 (atan2(0, 0))."""
    phi1 = np.radians(lat1)
    phi2 = np.radians(lat2)
    dlmb = np.radians(np.subtract(lon2, lon1))
    y = np.sin(dlmb) * np.cos(phi2)
    x = np.cos(phi1) * np.sin(phi2) - np.sin(phi1) * np.cos(phi2) * np.cos(dlmb)
    return (np.degrees(np.arctan2(y, x)) + 360.0) % 360.0


def destination_arrays(lat, lon, distance_m, bearing) -> Tuple[np.ndarray, np.ndarray]:
    """
    Forward projection on the sphere. Returns (lat2, lon2) with lon2
    normalized into [-180, 180).
    """
    delta = np.asarray(distance_m, dtype=float) / EARTH_RADIUS_M
    theta = np.radians(bearing)
    phi1 = np.radians(lat)
    lmb1 = np.radians(lon)

    phi2 = np.arcsin(
        np.clip(np.sin(phi1) * np.cos(delta) + np.cos(phi1) * np.sin(delta) * np.cos(theta), -1.0, 1.0)
    )
    lmb2 = lmb1 + np.arctan2(
        np.sin(theta) * np.sin(delta) * np.cos(phi1),
        np.cos(delta) - np.sin(phi1) * np.sin(phi2),
    )
    lat2 = np.degrees(phi2)
    lon2 = (np.degrees(lmb2) + 540.0) % 360.0 - 180.0
    return lat2, lon2


def cross_track_m(lat, lon, start_lat, start_lon, end_lat, end_lon):
    """
    Distance from point(s) to the great circle through start -> end.
    Not clamped to the segment: a point beyond either end is measured to
    the extended circle.
    """
    d13 = haversine_m(start_lat, start_lon, lat, lon) / EARTH_RADIUS_M
    theta13 = np.radians(bearing_deg(start_lat, start_lon, lat, lon))
    theta12 = np.radians(bearing_deg(start_lat, start_lon, end_lat, end_lon))
    dxt = np.arcsin(np.clip(np.sin(d13) * np.sin(theta13 - theta12), -1.0, 1.0))
    return np.abs(dxt) * EARTH_RADIUS_M


def polyline_distance_m(lat, lon, route_lats: Sequence[float], route_lons: Sequence[float]):
    """Minimum cross-track distance to any segment; inf for an empty route."""
    n = len(route_lats)
    if n == 0:
        return np.full(np.shape(lat), np.inf) if np.ndim(lat) else math.inf
    if n == 1:
        return haversine_m(route_lats[0], route_lons[0], lat, lon)

    best = None
    for i in range(n - 1):
        d = cross_track_m(lat, lon, route_lats[i], route_lons[i], route_lats[i + 1], route_lons[i + 1])
        best = d if best is None else np.minimum(best, d)
    return best


# ---------- GeoPoint API ----------

def haversine_distance(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance in meters (symmetric, never negative)."""
    return float(haversine_m(a.latitude, a.longitude, b.latitude, b.longitude))


def calculate_bearing(a: GeoPoint, b: GeoPoint) -> float:
    """Initial bearing from a to b in degrees [0, 360); 0 when a == b."""
    return float(bearing_deg(a.latitude, a.longitude, b.latitude, b.longitude))


def destination_point(origin: GeoPoint, distance_m: float, bearing: float) -> GeoPoint:
    """Point reached from origin after distance_m along bearing. Keeps origin altitude."""
    lat2, lon2 = destination_arrays(origin.latitude, origin.longitude, distance_m, bearing)
    return GeoPoint(float(lat2), float(lon2), origin.altitude)


def perpendicular_distance(point: GeoPoint, line_start: GeoPoint, line_end: GeoPoint) -> float:
    return float(cross_track_m(
        point.latitude, point.longitude,
        line_start.latitude, line_start.longitude,
        line_end.latitude, line_end.longitude,
    ))


def distance_to_polyline(point: GeoPoint, polyline: Sequence[GeoPoint]) -> float:
    """
    Shortest distance from point to a route:
      - 0 points  -> inf
      - 1 point   -> haversine to that point
      - otherwise -> min cross-track over consecutive segments
    """
    lats = [p.latitude for p in polyline]
    lons = [p.longitude for p in polyline]
    return float(polyline_distance_m(point.latitude, point.longitude, lats, lons))


# ---------- Spatial grid ----------

def spatial_grid_arrays(
    center: GeoPoint,
    radius_m: float,
    cell_size_m: float,
    max_cells: Optional[int] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Square lattice of cell centers spaced cell_size_m apart, masked to the
    disc of radius_m around center. Row order: east offset outer, north
    offset inner (deterministic).

    Raises GridTooLargeError before doing any work if the lattice holds
    more than max_cells candidates.
    """
    if cell_size_m is None or cell_size_m <= 0:
        raise ValueError(f"cell_size_m must be > 0 (got {cell_size_m})")
    if radius_m < 0:
        raise ValueError(f"radius_m must be >= 0 (got {radius_m})")

    cells_per_side = math.ceil((radius_m * 2) / cell_size_m)
    half = cells_per_side // 2
    lattice = (2 * half + 1) ** 2
    if max_cells is not None and lattice > max_cells:
        raise GridTooLargeError(
            f"Grid of {lattice} cells (radius {radius_m:.0f} m, cell {cell_size_m:.0f} m) "
            f"exceeds limit of {max_cells}"
        )

    steps = np.arange(-half, half + 1, dtype=float) * cell_size_m
    east, north = np.meshgrid(steps, steps, indexing="ij")
    east = east.ravel()
    north = north.ravel()

    dist = np.sqrt(east * east + north * north)
    keep = dist <= radius_m
    bearing = (np.degrees(np.arctan2(east[keep], north[keep])) + 360.0) % 360.0

    lats, lons = destination_arrays(center.latitude, center.longitude, dist[keep], bearing)
    LOG.debug("spatial grid: %d of %d lattice points inside %.0f m", int(keep.sum()), lattice, radius_m)
    return np.atleast_1d(lats), np.atleast_1d(lons)


def create_spatial_grid(
    center: GeoPoint,
    radius_m: float,
    cell_size_m: float,
    max_cells: Optional[int] = None,
) -> List[GeoPoint]:
    lats, lons = spatial_grid_arrays(center, radius_m, cell_size_m, max_cells)
    alt = center.altitude
    return [GeoPoint(la, lo, alt) for la, lo in zip(lats.tolist(), lons.tolist())]


# ---------- Polygons ----------

def calculate_centroid(points: Sequence[GeoPoint]) -> GeoPoint:
    """
    Arithmetic mean of lat/lon/altitude (missing altitude counts as 0;
    result altitude is None only if no point has one).
    """
    if not points:
        raise EmptyInputError("Cannot calculate centroid of empty point list")
    n = len(points)
    lat = sum(p.latitude for p in points) / n
    lon = sum(p.longitude for p in points) / n
    if all(p.altitude is None for p in points):
        alt = None
    else:
        alt = sum((p.altitude or 0.0) for p in points) / n
    return GeoPoint(lat, lon, alt)


def calculate_polygon_area(points: Sequence[GeoPoint]) -> float:
    """
    Approximate area in m2: shoelace formula on lat/lon radians, scaled by R^2.
    Returns 0 for fewer than 3 vertices.
    """
    if len(points) < 3:
        return 0.0
    lat = np.radians([p.latitude for p in points])
    lon = np.radians([p.longitude for p in points])
    area = np.sum(lon * np.roll(lat, -1) - np.roll(lon, -1) * lat)
    return float(abs(area / 2) * EARTH_RADIUS_M * EARTH_RADIUS_M)


def is_point_in_polygon(point: GeoPoint, polygon: Sequence[GeoPoint]) -> bool:
    """Ray casting in lat/lon space."""
    inside = False
    x, y = point.longitude, point.latitude
    j = len(polygon) - 1
    for i in range(len(polygon)):
        xi, yi = polygon[i].longitude, polygon[i].latitude
        xj, yj = polygon[j].longitude, polygon[j].latitude
        if (yi > y) != (yj > y) and x < (xj - xi) * (y - yi) / (yj - yi) + xi:
            inside = not inside
        j = i
    return inside


# ---------- Local Cartesian ----------

def gps_to_cartesian(point: GeoPoint, reference: GeoPoint, scale: float = 1.0) -> Dict[str, float]:
    """
    Equirectangular projection around reference: x east, z north, y altitude,
    all in meters / scale. Only valid a few tens of km from reference.
    """
    phi = math.radians(reference.latitude)
    d_lat = math.radians(point.latitude - reference.latitude)
    d_lon = math.radians(point.longitude - reference.longitude)
    return {
        "x": d_lon * EARTH_RADIUS_M * math.cos(phi) / scale,
        "y": (point.altitude or 0.0) / scale,
        "z": d_lat * EARTH_RADIUS_M / scale,
    }


def cartesian_to_gps(cartesian: Dict[str, float], reference: GeoPoint, scale: float = 1.0) -> GeoPoint:
    phi = math.radians(reference.latitude)
    d_lon = (cartesian["x"] * scale) / (EARTH_RADIUS_M * math.cos(phi))
    d_lat = (cartesian["z"] * scale) / EARTH_RADIUS_M
    return GeoPoint(
        reference.latitude + math.degrees(d_lat),
        reference.longitude + math.degrees(d_lon),
        cartesian["y"] * scale,
    )


# ---------- Drift ----------

def calculate_drift(
    start: GeoPoint,
    speed_mps: float,
    direction_deg: float,
    duration_hours: float,
    samples: int = 10,
) -> List[GeoPoint]:
    """
    Constant-velocity drift along one bearing. Returns samples + 1 points,
    the first being start.
    """
    if samples < 1:
        raise ValueError(f"samples must be >= 1 (got {samples})")
    step_m = speed_mps * duration_hours * 3600.0 / samples
    trajectory = [start]
    pos = start
    for _ in range(samples):
        pos = destination_point(pos, step_m, direction_deg)
        trajectory.append(pos)
    return trajectory


# ---------- Misc physics ----------

def calculate_pressure(depth_m: float) -> float:
    """Absolute pressure in bar at depth (seawater column + 1 atm)."""
    return WATER_DENSITY_KG_M3 * GRAVITY_MS2 * depth_m / 100000.0 + 1.0


# ---------- ISO 6346 ----------

_SERIAL_RE = re.compile(r"[A-Z]{4}[0-9]{7}")


def _iso6346_letter_values() -> Dict[str, int]:
    # A=10, then 11, 22 and 33 are skipped (multiples of 11)
    values = {}
    for index, letter in enumerate("ABCDEFGHIJKLMNOPQRSTUVWXYZ"):
        value = 10 + index
        if index >= 1:
            value += 1
        if index >= 11:
            value += 1
        if index >= 21:
            value += 1
        values[letter] = value
    return values


ISO6346_LETTER_VALUES = _iso6346_letter_values()


def _clean_serial(serial) -> str:
    if not isinstance(serial, str):
        return ""
    return serial.replace("-", "").replace(" ", "").upper()


def iso6346_check_digit(code10: str) -> int:
    """Check digit for the first 10 symbols (4 letters + 6 digits)."""
    total = 0
    for position, ch in enumerate(code10):
        value = ISO6346_LETTER_VALUES[ch] if ch.isalpha() else int(ch)
        total += value * (2 ** position)
    return (total % 11) % 10


def validate_container_serial(serial) -> bool:
    """
    True iff serial (hyphens ignored, case-insensitive) is 4 letters + 7 digits
    and the last digit matches the ISO 6346 check digit. Never raises.
    """
    cleaned = _clean_serial(serial)
    if not _SERIAL_RE.fullmatch(cleaned):
        return False
    return iso6346_check_digit(cleaned[:10]) == int(cleaned[10])


def parse_container_serial(serial) -> ContainerSerial:
    cleaned = _clean_serial(serial)
    return ContainerSerial(
        owner_code=cleaned[0:3],
        category_identifier=cleaned[3:4],
        serial_number=cleaned[4:10],
        check_digit=cleaned[10:11],
        is_valid=validate_container_serial(serial),
    )
