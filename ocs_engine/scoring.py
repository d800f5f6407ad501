"""
Cell Scorer: weighted sum of the five probability factors.

score = w_dd*distance_decay + w_rp*route_proximity + w_ci*current_influence
        + w_cl*cluster_score + w_df*depth_factor

Weights come from SearchConfig.weights (default 0.35/0.25/0.20/0.15/0.05).
"""

import logging
from typing import Sequence

import numpy as np
import pandas as pd

from .config import DEFAULT_CONFIG, SearchConfig
from .factors import (
    cluster_score_array,
    current_influence_array,
    depth_factor,
    distance_decay,
    route_proximity_array,
)
from .geo import haversine_m
from .types import GeoPoint, IncidentContext, ProbabilityFactors, ScoredCell

LOG = logging.getLogger(__name__)

FACTOR_COLUMNS = [
    "distance_decay",
    "route_proximity",
    "current_influence",
    "cluster_score",
    "depth_factor",
]
CELL_COLUMNS = ["latitude", "longitude"] + FACTOR_COLUMNS + ["score"]


def incident_depth_m(incident: IncidentContext, config: SearchConfig = DEFAULT_CONFIG) -> float:
    """Depth at the loss point; an absent or zero altitude means "unknown"."""
    alt = incident.location.altitude
    return abs(alt) if alt else config.default_depth_m


def score_grid(
    lats,
    lons,
    incident: IncidentContext,
    search_radius_m: float,
    config: SearchConfig = DEFAULT_CONFIG,
) -> pd.DataFrame:
    """
    Score every candidate cell. Returns one row per cell with CELL_COLUMNS,
    in input order.
    """
    lats = np.asarray(lats, dtype=float)
    lons = np.asarray(lons, dtype=float)
    loc = incident.location

    dist = haversine_m(lats, lons, loc.latitude, loc.longitude)
    dd = distance_decay(dist, search_radius_m)
    rp = route_proximity_array(lats, lons, incident.route_points, search_radius_m / 2)

    current = incident.primary_current
    if current is not None:
        ci = current_influence_array(
            lats, lons, loc,
            current.speed_mps, current.direction_deg,
            incident.time_in_water_hours(config.default_time_in_water_hours),
        )
    else:
        ci = np.zeros_like(lats)

    cl = cluster_score_array(lats, lons, incident.historical, config.cluster_bandwidth_m)
    dpf = np.full_like(lats, depth_factor(incident_depth_m(incident, config), config))

    w = config.weights
    cells = pd.DataFrame({
        "latitude": lats,
        "longitude": lons,
        "distance_decay": dd,
        "route_proximity": rp,
        "current_influence": ci,
        "cluster_score": cl,
        "depth_factor": dpf,
    })
    cells["score"] = (
        dd * w.distance_decay
        + rp * w.route_proximity
        + ci * w.current_influence
        + cl * w.cluster_score
        + dpf * w.depth_factor
    )
    LOG.debug("scored %d cells (max=%.3f mean=%.3f)", len(cells),
              cells["score"].max() if len(cells) else 0.0,
              cells["score"].mean() if len(cells) else 0.0)
    return cells


def score_cell(
    point: GeoPoint,
    incident: IncidentContext,
    search_radius_m: float,
    config: SearchConfig = DEFAULT_CONFIG,
) -> ScoredCell:
    row = score_grid([point.latitude], [point.longitude], incident, search_radius_m, config).iloc[0]
    return ScoredCell(
        location=point,
        score=float(row["score"]),
        factors=ProbabilityFactors(**{c: float(row[c]) for c in FACTOR_COLUMNS}),
    )


def cells_to_frame(cells: Sequence[ScoredCell]) -> pd.DataFrame:
    rows = []
    for c in cells:
        f = c.factors
        rows.append({
            "latitude": c.location.latitude,
            "longitude": c.location.longitude,
            "distance_decay": f.distance_decay,
            "route_proximity": f.route_proximity,
            "current_influence": f.current_influence,
            "cluster_score": f.cluster_score,
            "depth_factor": f.depth_factor,
            "score": c.score,
        })
    return pd.DataFrame(rows, columns=CELL_COLUMNS)
