"""
export.py

JSON / GeoJSON export for search results.

- to_jsonable(obj): dataclasses -> dicts, pandas/datetime timestamps -> ISO
  strings, numpy scalars -> Python numbers, non-finite floats -> None.
- strategy_to_geojson(strategy, incident_id): FeatureCollection with one
  polygon feature per zone (lon/lat order, per RFC 7946).
"""

import dataclasses
import datetime as dt
import logging
import math
from typing import Any, Dict, Optional

import numpy as np
import pandas as pd
from shapely.geometry import MultiPoint, Polygon, mapping

from .types import ProbabilityZone, SearchStrategy
from .utils_time import to_iso_utc

LOG = logging.getLogger(__name__)


def to_jsonable(obj: Any) -> Any:
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: to_jsonable(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
    if isinstance(obj, dict):
        return {str(k): to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_jsonable(v) for v in obj]
    if isinstance(obj, (pd.Timestamp, dt.datetime)):
        return to_iso_utc(obj)
    if isinstance(obj, np.generic):
        obj = obj.item()
    if isinstance(obj, float) and not math.isfinite(obj):
        return None
    return obj


def zone_geometry(zone: ProbabilityZone):
    """
    Boundary zones -> polygon through their ring. Point-cloud zones -> convex
    hull of member cell centers (degenerates to a point or line for 1-2 cells).
    """
    coords = [(p.longitude, p.latitude) for p in zone.coordinates]
    if zone.is_boundary and len(coords) >= 3:
        return Polygon(coords)
    if not coords:
        return MultiPoint([(zone.centroid.longitude, zone.centroid.latitude)]).convex_hull
    return MultiPoint(coords).convex_hull


def strategy_to_geojson(strategy: SearchStrategy, incident_id: Optional[str] = None) -> Dict[str, Any]:
    features = []
    for rank, zone in enumerate(strategy.zones):
        ci = zone.confidence_interval
        features.append({
            "type": "Feature",
            "geometry": mapping(zone_geometry(zone)),
            "properties": {
                "id": zone.id,
                "priority": zone.priority,
                "probabilityScore": zone.probability_score,
                "areaKm2": zone.area_m2 / 1_000_000.0,
                "estimatedSearchDurationHours": zone.estimated_search_duration_hours,
                "searchRank": strategy.search_order.index(zone.id) + 1
                if zone.id in strategy.search_order else rank + 1,
                "confidenceInterval": [ci.lower, ci.upper] if ci else None,
                "factors": to_jsonable(zone.factors),
                "centroid": [zone.centroid.longitude, zone.centroid.latitude],
            },
        })
    LOG.debug("GeoJSON export: %d %s zones", len(features), strategy.type)
    return {
        "type": "FeatureCollection",
        "features": features,
        "metadata": {
            "incidentId": incident_id,
            "strategyType": strategy.type,
            "generatedAt": to_iso_utc(strategy.generated_at),
            "algorithmVersion": strategy.algorithm_version,
        },
    }
