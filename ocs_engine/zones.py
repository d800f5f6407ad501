"""
Zone Aggregator: bucket scored cells into high / medium / low priority zones.

Each non-empty tier yields one ProbabilityZone whose coordinates are the
member cell centers (a point cloud, not an outline). Tiers are emitted in
priority order, so a strategy can carry 1, 2 or 3 zones.
"""

import logging
from typing import List, Optional, Sequence, Union

import pandas as pd

from .config import DEFAULT_CONFIG, PriorityThresholds, SearchConfig
from .geo import calculate_centroid
from .scoring import FACTOR_COLUMNS, cells_to_frame
from .types import (
    PRIORITIES,
    ConfidenceInterval,
    GeoPoint,
    ProbabilityFactors,
    ProbabilityZone,
    ScoredCell,
)

LOG = logging.getLogger(__name__)


def classify_priority(score: float, thresholds: PriorityThresholds = DEFAULT_CONFIG.thresholds) -> str:
    if score >= thresholds.high:
        return "high"
    if score >= thresholds.medium:
        return "medium"
    return "low"


def confidence_interval(score: float, margin: float = 0.2) -> ConfidenceInterval:
    return ConfidenceInterval(lower=score * (1 - margin), upper=min(1.0, score * (1 + margin)))


def aggregate_cells_into_zones(
    cells: Union[Sequence[ScoredCell], pd.DataFrame],
    cell_size_m: float,
    config: SearchConfig = DEFAULT_CONFIG,
    altitude: Optional[float] = None,
    id_prefix: str = "optimized",
) -> List[ProbabilityZone]:
    """
    Partition cells by score (>= high, [medium, high), < medium) and emit one
    zone per non-empty tier:

      probability_score = mean member score
      factors           = per-factor mean
      area_m2           = member count x cell_size_m^2
      duration_hours    = area_m2 / search rate (100,000 m2/h)
      confidence        = [0.8 s, min(1, 1.2 s)]

    `cells` may be a list of ScoredCell or the DataFrame from score_grid.
    Member points carry `altitude` (cells from a DataFrame have no altitude
    of their own).
    """
    if isinstance(cells, pd.DataFrame):
        frame = cells
    else:
        frame = cells_to_frame(cells)
        if altitude is None and len(cells):
            altitude = cells[0].location.altitude

    if frame.empty:
        LOG.info("No cells to aggregate; returning no zones")
        return []

    th = config.thresholds
    tiers = pd.Series("low", index=frame.index)
    tiers.loc[frame["score"] >= th.medium] = "medium"
    tiers.loc[frame["score"] >= th.high] = "high"

    cell_area = float(cell_size_m) ** 2
    zones = []
    grouped = dict(list(frame.groupby(tiers, sort=False)))

    for priority in PRIORITIES:
        members = grouped.get(priority)
        if members is None or members.empty:
            continue
        points = [
            GeoPoint(la, lo, altitude)
            for la, lo in zip(members["latitude"].tolist(), members["longitude"].tolist())
        ]
        score = float(members["score"].mean())
        means = members[FACTOR_COLUMNS].mean()
        area = len(members) * cell_area
        zones.append(ProbabilityZone(
            id=f"{id_prefix}-{priority}",
            coordinates=points,
            centroid=calculate_centroid(points),
            probability_score=score,
            priority=priority,
            area_m2=area,
            factors=ProbabilityFactors(**{c: float(means[c]) for c in FACTOR_COLUMNS}),
            estimated_search_duration_hours=area / config.search_rate_m2_per_hour,
            confidence_interval=confidence_interval(score, config.confidence_margin),
        ))
        LOG.debug("zone %s: %d cells, mean score %.3f", priority, len(members), score)

    return zones


def sort_zones_by_priority(zones: Sequence[ProbabilityZone]) -> List[ProbabilityZone]:
    """Stable sort high -> medium -> low."""
    rank = {p: i for i, p in enumerate(PRIORITIES)}
    return sorted(zones, key=lambda z: rank.get(z.priority, len(PRIORITIES)))
