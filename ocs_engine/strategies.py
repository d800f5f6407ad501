# ============================== OCS STANDARD HEADER ==============================
# Script Name: strategies.py
# Last Updated (UTC): 2026-10-17
# Update Summary:
# - Traditional (uniform circle) and optimized (grid -> score -> zones)
#   search strategy generators.
# Description:
# - Traditional: one medium-priority zone, a 36-vertex circle of the search
#   radius, fixed score 0.5. The "search everything evenly" baseline.
# - Optimized: spatial grid inside the radius, every cell scored with the
#   five-factor model, cells bucketed into high/medium/low zones.
# Data Handling Notes:
# - Pure: no I/O. The incident must already be enriched (see pipeline.py).
# - Grid size is capped by SearchConfig.max_grid_cells (GridTooLargeError).
# ===============================================================================

import math
import logging

from .config import DEFAULT_CONFIG, SearchConfig
from .geo import destination_point, spatial_grid_arrays
from .metrics import calculate_search_metrics
from .scoring import score_grid
from .types import IncidentContext, ProbabilityFactors, ProbabilityZone, SearchStrategy
from .utils_time import now_utc
from .zones import aggregate_cells_into_zones, confidence_interval, sort_zones_by_priority

LOG = logging.getLogger(__name__)


def generate_traditional_search(
    incident: IncidentContext,
    search_radius_km: float,
    grid_resolution_m: float = None,
    config: SearchConfig = DEFAULT_CONFIG,
) -> SearchStrategy:
    # grid_resolution_m is unused for the uniform circle
    radius_m = search_radius_km * 1000.0
    segments = config.traditional_segments
    ring = [
        destination_point(incident.location, radius_m, i * 360.0 / segments)
        for i in range(segments)
    ]
    area = math.pi * radius_m ** 2
    score = config.traditional_score
    zone = ProbabilityZone(
        id="traditional-medium",
        coordinates=ring,
        centroid=incident.location,
        probability_score=score,
        priority="medium",
        area_m2=area,
        factors=ProbabilityFactors(distance_decay=0.5, depth_factor=0.5),
        estimated_search_duration_hours=area / config.search_rate_m2_per_hour,
        confidence_interval=confidence_interval(score, config.confidence_margin),
        is_boundary=True,
    )
    zones = [zone]
    return SearchStrategy(
        type="traditional",
        zones=zones,
        search_order=[z.id for z in zones],
        metrics=calculate_search_metrics(zones, config),
        generated_at=now_utc(),
        algorithm_version=config.traditional_version,
    )


def generate_optimized_search(
    incident: IncidentContext,
    search_radius_km: float,
    grid_resolution_m: float,
    config: SearchConfig = DEFAULT_CONFIG,
) -> SearchStrategy:
    radius_m = search_radius_km * 1000.0
    lats, lons = spatial_grid_arrays(
        incident.location, radius_m, grid_resolution_m, max_cells=config.max_grid_cells
    )
    LOG.info("optimized search: %d grid cells (radius %.1f km, cell %.0f m)",
             len(lats), search_radius_km, grid_resolution_m)

    cells = score_grid(lats, lons, incident, radius_m, config)
    zones = aggregate_cells_into_zones(
        cells, grid_resolution_m, config,
        altitude=incident.location.altitude, id_prefix="optimized",
    )
    zones = sort_zones_by_priority(zones)
    LOG.info("optimized search: %d zones (%s)", len(zones), ", ".join(z.priority for z in zones))

    return SearchStrategy(
        type="optimized",
        zones=zones,
        search_order=[z.id for z in zones],
        metrics=calculate_search_metrics(zones, config),
        generated_at=now_utc(),
        algorithm_version=config.optimized_version,
    )
