"""
Search configuration: factor weights, priority thresholds, cost model and
the physical/heuristic constants used by the scoring and metrics code.

Everything lives on an immutable SearchConfig. Functions take an optional
`config` and fall back to DEFAULT_CONFIG, so a test can swap weightings
without touching module state.
"""

import os
import logging
from dataclasses import dataclass, field

from dotenv import load_dotenv

LOG = logging.getLogger(__name__)

DATA_MODES = ("mock", "live")


@dataclass(frozen=True)
class FactorWeights:
    distance_decay: float = 0.35
    route_proximity: float = 0.25
    current_influence: float = 0.20
    cluster_score: float = 0.15
    depth_factor: float = 0.05

    def total(self) -> float:
        return (
            self.distance_decay
            + self.route_proximity
            + self.current_influence
            + self.cluster_score
            + self.depth_factor
        )


@dataclass(frozen=True)
class PriorityThresholds:
    high: float = 0.7      # score >= high            -> "high"
    medium: float = 0.3    # medium <= score < high   -> "medium", below -> "low"


@dataclass(frozen=True)
class CostModel:
    vessel_per_day_usd: float = 50_000.0
    dive_team_per_day_usd: float = 15_000.0
    equipment_base_usd: float = 25_000.0
    fuel_per_km2_usd: float = 150.0
    fuel_price_usd_per_liter: float = 1.5
    co2_kg_per_liter: float = 2.68     # diesel

    # Detailed breakdown (search analytics)
    equipment_depth_scale_m: float = 3000.0    # equipment cost doubles at this depth
    support_services_rate: float = 0.15        # of vessel + dive team
    sea_state_scale: float = 10.0              # support x (1 + sea_state / scale)
    contingency_rate: float = 0.15             # of subtotal
    default_sea_state: int = 3
    co2_kg_per_tree_year: float = 21.0
    crew_per_day: float = 1.5
    dive_hours_per_km2: float = 4.0


@dataclass(frozen=True)
class SearchConfig:
    weights: FactorWeights = field(default_factory=FactorWeights)
    thresholds: PriorityThresholds = field(default_factory=PriorityThresholds)
    costs: CostModel = field(default_factory=CostModel)

    # Recovery weight per priority class, area-weighted in the metrics
    recovery_weight_high: float = 0.8
    recovery_weight_medium: float = 0.5
    recovery_weight_low: float = 0.2

    # Factor model
    cluster_bandwidth_m: float = 5000.0
    optimal_depth_min_m: float = 1000.0
    optimal_depth_max_m: float = 3000.0
    shallow_depth_base: float = 0.7
    deep_decay_per_m: float = 1.0 / 5000.0
    depth_floor: float = 0.3
    default_depth_m: float = 2850.0            # Kelvin Seamounts
    default_time_in_water_hours: float = 24.0

    # Zones
    search_rate_m2_per_hour: float = 100_000.0
    confidence_margin: float = 0.2
    traditional_segments: int = 36
    traditional_score: float = 0.5

    # Drift
    drift_samples: int = 24
    drift_confidence: float = 0.75
    default_drift_hours: float = 72.0

    # Request defaults and limits
    default_search_radius_km: float = 25.0
    default_grid_resolution_m: float = 100.0
    max_grid_cells: int = 2_000_000
    max_search_radius_km: float = 100.0
    min_grid_resolution_m: float = 50.0

    traditional_version: str = "1.0.0-traditional"
    optimized_version: str = "1.0.0-multifactor"

    def __post_init__(self):
        total = self.weights.total()
        if abs(total - 1.0) > 1e-9:
            raise ValueError(f"Factor weights must sum to 1.0 (got {total:.6f})")
        if not (0.0 <= self.thresholds.medium <= self.thresholds.high <= 1.0):
            raise ValueError(
                f"Priority thresholds out of order: medium={self.thresholds.medium} high={self.thresholds.high}"
            )


DEFAULT_CONFIG = SearchConfig()


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        LOG.warning("Ignoring %s=%r (not a number); using %s", name, raw, default)
        return default


def load_config_from_env() -> SearchConfig:
    """
    Build a SearchConfig from environment variables (.env honoured).

    OCS_MAX_GRID_CELLS             hard cap on grid cells per request
    OCS_DEFAULT_RADIUS_KM          default search radius
    OCS_DEFAULT_GRID_RESOLUTION_M  default cell size
    """
    load_dotenv()
    cfg = SearchConfig(
        max_grid_cells=int(_env_float("OCS_MAX_GRID_CELLS", DEFAULT_CONFIG.max_grid_cells)),
        default_search_radius_km=_env_float("OCS_DEFAULT_RADIUS_KM", DEFAULT_CONFIG.default_search_radius_km),
        default_grid_resolution_m=_env_float(
            "OCS_DEFAULT_GRID_RESOLUTION_M", DEFAULT_CONFIG.default_grid_resolution_m
        ),
    )
    LOG.debug("Loaded search config from env: max_grid_cells=%s radius_km=%s grid_m=%s",
              cfg.max_grid_cells, cfg.default_search_radius_km, cfg.default_grid_resolution_m)
    return cfg


def get_data_mode() -> str:
    """Return OCS_DATA_MODE ("mock" | "live"); anything else falls back to "mock"."""
    load_dotenv()
    mode = (os.getenv("OCS_DATA_MODE") or "mock").strip().lower()
    if mode not in DATA_MODES:
        LOG.warning("Unknown OCS_DATA_MODE=%r; using mock", mode)
        return "mock"
    return mode
