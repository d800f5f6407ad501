from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

PRIORITIES = ("high", "medium", "low")
STRATEGY_TYPES = ("traditional", "optimized")


@dataclass(frozen=True)
class GeoPoint:
    """
    WGS84 position. altitude < 0 is depth below sea level (m).
    """
    latitude: float
    longitude: float
    altitude: Optional[float] = None

    @property
    def depth_m(self) -> Optional[float]:
        return None if self.altitude is None else abs(self.altitude)


@dataclass
class CurrentVector:
    speed_mps: float
    direction_deg: float            # 0 = North, clockwise
    depth_m: float = 0.0
    timestamp: Any = None
    source: str = "mock"            # mock / Open-Meteo / NOAA


@dataclass
class EnvironmentalData:
    ocean_currents: List[CurrentVector] = field(default_factory=list)
    sea_state: Optional[int] = None         # WMO 0-9
    visibility_m: Optional[float] = None
    temperature_c: Optional[float] = None
    salinity_psu: Optional[float] = None
    wind_speed_mps: Optional[float] = None
    wind_direction_deg: Optional[float] = None


@dataclass
class HistoricalIncident:
    id: str
    location: GeoPoint
    timestamp: Any = None
    container_count: int = 1
    recovered: bool = False
    recovery_duration_days: Optional[float] = None
    cause: Optional[str] = None


@dataclass
class RoutePolyline:
    points: List[GeoPoint] = field(default_factory=list)
    vessel_name: str = ""
    vessel_type: str = ""
    imo_number: Optional[str] = None
    timestamp: Any = None


@dataclass
class IncidentContext:
    """
    Everything known about one container loss. Built once per request and
    read-only afterwards.
    """
    location: GeoPoint
    route: Optional[RoutePolyline] = None
    environment: Optional[EnvironmentalData] = None
    historical: Optional[List[HistoricalIncident]] = None
    estimated_time_in_water_hours: Optional[float] = None
    cargo_value_usd: Optional[float] = None
    id: str = ""
    timestamp: Any = None
    container_serial_id: Optional[str] = None
    container_type: Optional[str] = None     # 20ft / 40ft / 40ft-HC / reefer

    def time_in_water_hours(self, default: float = 24.0) -> float:
        # 0 / None both mean "unknown"
        return self.estimated_time_in_water_hours or default

    @property
    def primary_current(self) -> Optional[CurrentVector]:
        if self.environment and self.environment.ocean_currents:
            return self.environment.ocean_currents[0]
        return None

    @property
    def route_points(self) -> List[GeoPoint]:
        return list(self.route.points) if self.route else []


@dataclass
class ProbabilityFactors:
    """Independent evidence channels, each in [0, 1]; they need not sum to 1."""
    distance_decay: float = 0.0
    route_proximity: float = 0.0
    current_influence: float = 0.0
    cluster_score: float = 0.0
    depth_factor: float = 0.0


@dataclass
class ScoredCell:
    location: GeoPoint
    score: float
    factors: ProbabilityFactors


@dataclass(frozen=True)
class ConfidenceInterval:
    lower: float
    upper: float


@dataclass(frozen=True)
class ProbabilityZone:
    """Immutable once built; priority is fixed from probability_score."""
    id: str
    coordinates: List[GeoPoint]          # boundary ring or member-point cloud
    centroid: GeoPoint
    probability_score: float
    priority: str                        # fixed at creation from probability_score
    area_m2: float
    factors: ProbabilityFactors
    estimated_search_duration_hours: float
    confidence_interval: Optional[ConfidenceInterval] = None
    is_boundary: bool = False            # True when coordinates form a closed outline


@dataclass(frozen=True)
class ZoneCoverage:
    high: float = 0.0     # km2
    medium: float = 0.0
    low: float = 0.0


@dataclass(frozen=True)
class SearchMetrics:
    total_area_km2: float
    zone_coverage: ZoneCoverage
    estimated_duration_days: float
    estimated_cost_usd: float
    recovery_probability: float
    fuel_consumption_liters: float
    carbon_footprint_kg: float


@dataclass(frozen=True)
class SearchStrategy:
    type: str                      # traditional / optimized
    zones: List[ProbabilityZone]
    search_order: List[str]        # zone ids, high -> medium -> low
    metrics: SearchMetrics
    generated_at: Any
    algorithm_version: str


@dataclass(frozen=True)
class Improvements:
    area_reduction_pct: float
    cost_savings_usd: float
    duration_reduction_days: float
    probability_increase_pct: float


@dataclass(frozen=True)
class SearchComparison:
    traditional: SearchStrategy
    optimized: SearchStrategy
    improvements: Improvements


@dataclass(frozen=True)
class DriftModel:
    start_position: GeoPoint
    current_position: GeoPoint
    trajectory: List[GeoPoint]
    drift_speed_mps: float
    drift_direction_deg: float
    time_elapsed_hours: float
    confidence: float


@dataclass(frozen=True)
class Bathymetry:
    depth_m: float
    terrain: str = "unknown"     # seamount / rocky / sandy / unknown


@dataclass(frozen=True)
class CostBreakdown:
    """Whole-dollar line items; total includes contingency."""
    vessel_operation_usd: int
    dive_team_usd: int
    equipment_rental_usd: int
    fuel_usd: int
    support_services_usd: int
    contingency_usd: int
    total_usd: int


@dataclass(frozen=True)
class EnvironmentalImpact:
    fuel_consumption_liters: int
    carbon_footprint_kg: int
    equivalent_trees: int        # tree-years of CO2 uptake


@dataclass(frozen=True)
class OperationalMetrics:
    estimated_crew_size: int
    total_dive_hours: int
    total_surface_hours: int
    avg_daily_progress_km2: float


@dataclass(frozen=True)
class SearchAnalytics:
    area_km2: float
    duration_days: float
    depth_m: float
    sea_state: int
    cost_breakdown: CostBreakdown
    environmental_impact: EnvironmentalImpact
    operational: OperationalMetrics


@dataclass
class ValidationIssue:
    field: str
    message: str
    code: str    # INVALID_GPS / INVALID_SERIAL / INVALID_DATE / MISSING_REQUIRED / OUT_OF_RANGE


@dataclass
class ContainerSerial:
    owner_code: str            # 3 letters
    category_identifier: str   # U / J / Z
    serial_number: str         # 6 digits
    check_digit: str
    is_valid: bool


@dataclass
class SearchRequest:
    incident: IncidentContext
    search_radius_km: Optional[float] = None
    grid_resolution_m: Optional[float] = None
    include_historical: bool = False
    use_real_time_data: bool = False


@dataclass
class SearchResponse:
    comparison: Optional[SearchComparison] = None
    drift_model: Optional[DriftModel] = None
    seabed: Optional[Bathymetry] = None
    analytics: Dict[str, SearchAnalytics] = field(default_factory=dict)   # by strategy type
    warnings: List[str] = field(default_factory=list)
    errors: List[ValidationIssue] = field(default_factory=list)
    processing_time_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return not self.errors and self.comparison is not None
