# ============================== OCS STANDARD HEADER ==============================
# Script Name: providers.py
# Last Updated (UTC): 2026-10-17
# Update Summary:
# - Environmental / historical data providers feeding IncidentContext
#   enrichment: mock (built-in regional table) and live (Open-Meteo).
# Description:
# - EnvironmentalProvider is the seam the pipeline depends on. The core
#   scoring code never sees a provider; it only sees the enriched incident.
# - MockEnvironmentalProvider answers from the nearest built-in ocean region
#   and a small table of past container-loss incidents.
# - LiveEnvironmentalProvider queries the Open-Meteo Marine API (surface
#   current, SST, waves) and Forecast API (10 m wind). Any failure is logged
#   and answered by the fallback (mock) provider.
# External Data Sources:
# - https://marine-api.open-meteo.com/v1/marine   (no key)
# - https://api.open-meteo.com/v1/forecast        (no key)
# Data Handling Notes:
# - Open-Meteo reports ocean_current_velocity in km/h; converted to m/s.
# - Directions are "towards", degrees clockwise from North.
# - Historical incidents and bathymetry have no keyless live source; both
#   always come from the fallback.
# - Malformed payloads (non-object JSON, non-numeric fields) count as a
#   failed fetch. used_fallback records whether the fallback answered.
# ===============================================================================

import logging
import math
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

import numpy as np
import requests

from .config import get_data_mode
from .exceptions import ProviderError
from .geo import haversine_m
from .types import Bathymetry, CurrentVector, EnvironmentalData, GeoPoint, HistoricalIncident
from .utils_time import ensure_utc, now_utc

LOG = logging.getLogger(__name__)

OPEN_METEO_MARINE_URL = "https://marine-api.open-meteo.com/v1/marine"
OPEN_METEO_FORECAST_URL = "https://api.open-meteo.com/v1/forecast"
HTTP_TIMEOUT_S = 20

KELVIN_SEAMOUNTS = (37.5, -14.5)
MOCK_MIN_DEPTH_M = 200.0
MOCK_DEPTH_SPAN_M = 3000.0

# Surface and sub-surface currents per region; first entry is the primary vector.
MOCK_REGIONS: List[Dict] = [
    {
        "name": "Kelvin Seamounts",
        "latitude": 37.5, "longitude": -14.5,
        "currents": [
            {"speed": 0.42, "direction": 85.0, "depth": 0.0},
            {"speed": 0.18, "direction": 110.0, "depth": 500.0},
        ],
        "sea_state": 4, "visibility": 15000.0, "temperature": 18.5,
        "salinity": 36.1, "wind_speed": 8.5, "wind_direction": 320.0,
    },
    {
        "name": "Bay of Biscay",
        "latitude": 45.5, "longitude": -6.0,
        "currents": [
            {"speed": 0.25, "direction": 150.0, "depth": 0.0},
            {"speed": 0.10, "direction": 170.0, "depth": 300.0},
        ],
        "sea_state": 5, "visibility": 9000.0, "temperature": 15.2,
        "salinity": 35.6, "wind_speed": 12.0, "wind_direction": 270.0,
    },
    {
        "name": "North Pacific (Kuroshio extension)",
        "latitude": 35.0, "longitude": 150.0,
        "currents": [
            {"speed": 0.95, "direction": 75.0, "depth": 0.0},
            {"speed": 0.40, "direction": 80.0, "depth": 500.0},
        ],
        "sea_state": 5, "visibility": 12000.0, "temperature": 19.8,
        "salinity": 34.7, "wind_speed": 11.0, "wind_direction": 290.0,
    },
    {
        "name": "South China Sea",
        "latitude": 15.0, "longitude": 115.0,
        "currents": [
            {"speed": 0.35, "direction": 220.0, "depth": 0.0},
        ],
        "sea_state": 3, "visibility": 18000.0, "temperature": 28.4,
        "salinity": 33.8, "wind_speed": 6.5, "wind_direction": 45.0,
    },
    {
        "name": "North Sea",
        "latitude": 56.0, "longitude": 3.0,
        "currents": [
            {"speed": 0.30, "direction": 30.0, "depth": 0.0},
        ],
        "sea_state": 5, "visibility": 8000.0, "temperature": 10.1,
        "salinity": 34.9, "wind_speed": 13.5, "wind_direction": 240.0,
    },
]

MOCK_HISTORICAL: List[Dict] = [
    {"id": "HIST-2019-KS-01", "latitude": 37.62, "longitude": -14.31, "altitude": -2790.0,
     "timestamp": "2019-02-11T06:40:00Z", "container_count": 12, "recovered": False,
     "recovery_duration_days": None, "cause": "parametric rolling"},
    {"id": "HIST-2021-KS-02", "latitude": 37.41, "longitude": -14.62, "altitude": -2910.0,
     "timestamp": "2021-11-03T22:15:00Z", "container_count": 4, "recovered": True,
     "recovery_duration_days": 9.0, "cause": "lashing failure"},
    {"id": "HIST-2022-KS-03", "latitude": 37.55, "longitude": -14.05, "altitude": -2650.0,
     "timestamp": "2022-01-27T13:05:00Z", "container_count": 27, "recovered": False,
     "recovery_duration_days": None, "cause": "heavy weather"},
    {"id": "HIST-2020-BB-01", "latitude": 45.80, "longitude": -5.70, "altitude": -4500.0,
     "timestamp": "2020-01-20T03:30:00Z", "container_count": 40, "recovered": False,
     "recovery_duration_days": None, "cause": "heavy weather"},
    {"id": "HIST-2020-NP-01", "latitude": 35.20, "longitude": 150.40, "altitude": -5600.0,
     "timestamp": "2020-11-30T17:00:00Z", "container_count": 1816, "recovered": False,
     "recovery_duration_days": None, "cause": "stack collapse"},
    {"id": "HIST-2019-NS-01", "latitude": 53.60, "longitude": 6.10, "altitude": -25.0,
     "timestamp": "2019-01-02T01:50:00Z", "container_count": 342, "recovered": True,
     "recovery_duration_days": 120.0, "cause": "heavy weather"},
]


def sea_state_from_wind(wind_speed_mps: Optional[float]) -> Optional[int]:
    """WMO sea state code (0 calm .. 9 phenomenal) estimated from 10 m wind."""
    if wind_speed_mps is None or (isinstance(wind_speed_mps, float) and math.isnan(wind_speed_mps)):
        return None
    bounds = (1, 3, 6, 10, 16, 21, 27, 33, 41)
    for code, upper in enumerate(bounds):
        if wind_speed_mps < upper:
            return code
    return 9


class EnvironmentalProvider(ABC):
    """Source of environmental conditions, seabed depth and past incidents for a location."""

    source = "unknown"

    @abstractmethod
    def fetch_environment(self, lat: float, lon: float, depth_m: Optional[float] = None) -> EnvironmentalData:
        ...

    @abstractmethod
    def fetch_historical_incidents(self, lat: float, lon: float, radius_km: float = 50.0) -> List[HistoricalIncident]:
        ...

    @abstractmethod
    def fetch_bathymetry(self, lat: float, lon: float) -> Bathymetry:
        ...


class MockEnvironmentalProvider(EnvironmentalProvider):
    source = "mock"

    def __init__(self, regions: Optional[List[Dict]] = None, historical: Optional[List[Dict]] = None):
        self.regions = regions if regions is not None else MOCK_REGIONS
        self.historical = historical if historical is not None else MOCK_HISTORICAL

    def nearest_region(self, lat: float, lon: float) -> Dict:
        # planar degree distance is enough to pick a region
        return min(self.regions, key=lambda r: math.hypot(r["latitude"] - lat, r["longitude"] - lon))

    def fetch_environment(self, lat, lon, depth_m=None):
        region = self.nearest_region(lat, lon)
        LOG.debug("mock environment for (%.4f, %.4f): %s", lat, lon, region["name"])
        ts = now_utc()
        return EnvironmentalData(
            ocean_currents=[
                CurrentVector(
                    speed_mps=c["speed"], direction_deg=c["direction"],
                    depth_m=c["depth"], timestamp=ts, source="mock",
                )
                for c in region["currents"]
            ],
            sea_state=region["sea_state"],
            visibility_m=region["visibility"],
            temperature_c=region["temperature"],
            salinity_psu=region["salinity"],
            wind_speed_mps=region["wind_speed"],
            wind_direction_deg=region["wind_direction"],
        )

    def fetch_historical_incidents(self, lat, lon, radius_km=50.0):
        out = []
        for h in self.historical:
            d_m = float(haversine_m(lat, lon, h["latitude"], h["longitude"]))
            if d_m <= radius_km * 1000.0:
                out.append(HistoricalIncident(
                    id=h["id"],
                    location=GeoPoint(h["latitude"], h["longitude"], h.get("altitude")),
                    timestamp=ensure_utc(h.get("timestamp")),
                    container_count=h.get("container_count", 1),
                    recovered=h.get("recovered", False),
                    recovery_duration_days=h.get("recovery_duration_days"),
                    cause=h.get("cause"),
                ))
        LOG.debug("mock history: %d incidents within %.0f km of (%.4f, %.4f)", len(out), radius_km, lat, lon)
        return out

    def fetch_bathymetry(self, lat, lon):
        """
        Kelvin Seamounts box -> 2850 m seamount. Elsewhere a 200-3200 m
        estimate seeded by the position rounded to 0.01 deg, so repeated
        calls for the same spot agree.
        """
        if abs(lat - KELVIN_SEAMOUNTS[0]) < 1.0 and abs(lon - KELVIN_SEAMOUNTS[1]) < 1.0:
            return Bathymetry(depth_m=2850.0, terrain="seamount")
        seed = [int(round((lat + 90.0) * 100)) % 36000, int(round((lon + 180.0) * 100)) % 36000]
        rng = np.random.default_rng(seed)
        depth = float(math.floor(MOCK_MIN_DEPTH_M + rng.random() * MOCK_DEPTH_SPAN_M))
        return Bathymetry(depth_m=depth, terrain="rocky" if depth > 2000.0 else "sandy")


class LiveEnvironmentalProvider(EnvironmentalProvider):
    """
    Open-Meteo conditions with a fallback provider behind them.
    `used_fallback` reports whether the last fetch_environment() call was
    answered by the fallback.
    """

    source = "Open-Meteo"

    def __init__(self, fallback: Optional[EnvironmentalProvider] = None, session=None,
                 timeout: float = HTTP_TIMEOUT_S):
        self.fallback = fallback or MockEnvironmentalProvider()
        self.http = session or requests
        self.timeout = timeout
        self.used_fallback = False

    def _get_current(self, url: str, params: Dict) -> Dict:
        try:
            r = self.http.get(url, params=params, timeout=self.timeout)
            r.raise_for_status()
            j = r.json()
        except (requests.RequestException, ValueError) as e:
            raise ProviderError(f"{url} failed: {e}") from e
        if not isinstance(j, dict):
            raise ProviderError(f"{url} returned {type(j).__name__}, expected a JSON object")
        cur = j.get("current") or {}
        if not isinstance(cur, dict) or not cur:
            raise ProviderError(f"{url} returned no 'current' block")
        return cur

    def _fetch_live(self, lat, lon, depth_m=None) -> EnvironmentalData:
        marine = self._get_current(OPEN_METEO_MARINE_URL, {
            "latitude": lat, "longitude": lon,
            "current": "ocean_current_velocity,ocean_current_direction,sea_surface_temperature,wave_height",
            "timezone": "UTC",
        })
        vel_kmh = marine.get("ocean_current_velocity")
        direction = marine.get("ocean_current_direction")
        if vel_kmh is None or direction is None:
            raise ProviderError(f"no ocean current at ({lat:.4f}, {lon:.4f})")

        wx = self._get_current(OPEN_METEO_FORECAST_URL, {
            "latitude": lat, "longitude": lon,
            "current": "wind_speed_10m,wind_direction_10m",
            "wind_speed_unit": "ms",
            "timezone": "UTC",
        })

        try:
            speed_mps = float(vel_kmh) / 3.6
            direction_deg = float(direction)
            wind = _optional_float(wx.get("wind_speed_10m"))
            wind_dir = _optional_float(wx.get("wind_direction_10m"))
            sst = _optional_float(marine.get("sea_surface_temperature"))
        except (TypeError, ValueError) as e:
            raise ProviderError(f"malformed Open-Meteo payload at ({lat:.4f}, {lon:.4f}): {e}") from e

        return EnvironmentalData(
            ocean_currents=[CurrentVector(
                speed_mps=speed_mps,
                direction_deg=direction_deg,
                depth_m=0.0,
                timestamp=ensure_utc(marine.get("time")),
                source=self.source,
            )],
            sea_state=sea_state_from_wind(wind),
            temperature_c=sst,
            wind_speed_mps=wind,
            wind_direction_deg=wind_dir,
        )

    def fetch_environment(self, lat, lon, depth_m=None):
        try:
            env = self._fetch_live(lat, lon, depth_m)
        except ProviderError as e:
            LOG.warning(f"Open-Meteo environment fetch failed @({lat:.4f},{lon:.4f}): {e}; using fallback")
            self.used_fallback = True
            return self.fallback.fetch_environment(lat, lon, depth_m)
        self.used_fallback = False
        LOG.info("Open-Meteo environment @(%.4f,%.4f): current %.2f m/s @ %.0f deg",
                 lat, lon, env.ocean_currents[0].speed_mps, env.ocean_currents[0].direction_deg)
        return env

    def fetch_historical_incidents(self, lat, lon, radius_km=50.0):
        return self.fallback.fetch_historical_incidents(lat, lon, radius_km)

    def fetch_bathymetry(self, lat, lon):
        # no live bathymetry source is wired in
        return self.fallback.fetch_bathymetry(lat, lon)


def _optional_float(value) -> Optional[float]:
    return None if value is None else float(value)


def make_provider(mode: Optional[str] = None) -> EnvironmentalProvider:
    """Provider for `mode` ("mock" | "live"); None reads OCS_DATA_MODE."""
    mode = (mode or get_data_mode()).strip().lower()
    if mode == "live":
        LOG.info("Using live Open-Meteo environmental provider (mock fallback)")
        return LiveEnvironmentalProvider()
    if mode != "mock":
        LOG.warning("Unknown data mode %r; using mock", mode)
    return MockEnvironmentalProvider()
