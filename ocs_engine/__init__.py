"""
OceanCache Search Engine (flat layout)

Probability-weighted search zones for shipping containers lost at sea.

Public API:
- types.IncidentContext, types.SearchRequest, types.SearchResponse (and the rest of types)
- config.SearchConfig, config.DEFAULT_CONFIG, config.load_config_from_env
- strategies.generate_traditional_search, strategies.generate_optimized_search
- metrics.calculate_search_metrics, metrics.calculate_improvements, metrics.compare_strategies
- metrics.analyze_search, metrics.analyze_strategy (cost breakdown, CO2, crew figures)
- drift.generate_drift_model
- validation.validate_incident_input
- providers.MockEnvironmentalProvider, providers.LiveEnvironmentalProvider, providers.make_provider
- pipeline.enrich_incident, pipeline.run_probability_search
- export.to_jsonable, export.strategy_to_geojson
"""

from .config import DEFAULT_CONFIG, SearchConfig, load_config_from_env
from .drift import generate_drift_model
from .exceptions import EmptyInputError, GridTooLargeError, OceanCacheError, ProviderError
from .export import strategy_to_geojson, to_jsonable
from .geo import validate_container_serial
from .metrics import (
    analyze_search,
    analyze_strategy,
    calculate_improvements,
    calculate_search_metrics,
    compare_strategies,
)
from .pipeline import enrich_incident, run_probability_search
from .providers import (
    EnvironmentalProvider,
    LiveEnvironmentalProvider,
    MockEnvironmentalProvider,
    make_provider,
)
from .strategies import generate_optimized_search, generate_traditional_search
from .types import (
    Bathymetry,
    CostBreakdown,
    CurrentVector,
    DriftModel,
    EnvironmentalData,
    GeoPoint,
    HistoricalIncident,
    IncidentContext,
    ProbabilityZone,
    RoutePolyline,
    SearchAnalytics,
    SearchComparison,
    SearchRequest,
    SearchResponse,
    SearchStrategy,
)
from .validation import validate_incident_input

__all__ = [
    "DEFAULT_CONFIG",
    "SearchConfig",
    "load_config_from_env",
    "generate_drift_model",
    "EmptyInputError",
    "GridTooLargeError",
    "OceanCacheError",
    "ProviderError",
    "strategy_to_geojson",
    "to_jsonable",
    "validate_container_serial",
    "analyze_search",
    "analyze_strategy",
    "calculate_improvements",
    "calculate_search_metrics",
    "compare_strategies",
    "enrich_incident",
    "run_probability_search",
    "EnvironmentalProvider",
    "LiveEnvironmentalProvider",
    "MockEnvironmentalProvider",
    "make_provider",
    "generate_optimized_search",
    "generate_traditional_search",
    "Bathymetry",
    "CostBreakdown",
    "CurrentVector",
    "DriftModel",
    "EnvironmentalData",
    "GeoPoint",
    "HistoricalIncident",
    "IncidentContext",
    "ProbabilityZone",
    "RoutePolyline",
    "SearchAnalytics",
    "SearchComparison",
    "SearchRequest",
    "SearchResponse",
    "SearchStrategy",
    "validate_incident_input",
]
