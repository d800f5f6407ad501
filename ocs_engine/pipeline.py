# ============================== OCS STANDARD HEADER ==============================
# Script Name: pipeline.py
# Last Updated (UTC): 2026-10-17
# Update Summary:
# - Request orchestration: validate -> enrich -> traditional + optimized
#   strategies -> comparison -> drift model -> seabed + cost analytics ->
#   data-quality warnings.
# Description:
# - The only place a provider is called (enrich_incident, fetch_seabed).
#   Strategy generation and scoring are pure.
# Data Handling Notes:
# - The caller's IncidentContext is never mutated; enrichment returns a copy.
# - Validation failures return a SearchResponse with errors and no comparison.
# ===============================================================================

import logging
import time
from dataclasses import replace
from typing import Optional

from .config import SearchConfig, load_config_from_env
from .drift import generate_drift_model
from .exceptions import GridTooLargeError, ProviderError
from .metrics import analyze_strategy, compare_strategies
from .providers import EnvironmentalProvider, MockEnvironmentalProvider, make_provider
from .strategies import generate_optimized_search, generate_traditional_search
from .types import Bathymetry, IncidentContext, SearchRequest, SearchResponse, ValidationIssue
from .validation import validate_incident_input

LOG = logging.getLogger(__name__)

WARN_MOCK_DATA = "Using mock environmental data - enable real-time data for production use"
WARN_NO_ROUTE = "No vessel route provided - route proximity factor not applied"
WARN_NO_HISTORY = "No historical incident data available - cluster analysis not applied"


def enrich_incident(
    incident: IncidentContext,
    provider: EnvironmentalProvider,
    include_historical: bool = False,
    use_real_time: bool = False,
    search_radius_km: float = 25.0,
) -> IncidentContext:
    """
    Fill in environment (when missing, or always when use_real_time) and past
    incidents (when requested and missing). Provider failures leave the
    field as it was.
    """
    loc = incident.location
    environment = incident.environment
    historical = incident.historical

    if environment is None or use_real_time:
        try:
            environment = provider.fetch_environment(loc.latitude, loc.longitude, abs(loc.altitude or 0.0))
        except ProviderError as e:
            LOG.warning(f"Environment enrichment failed @({loc.latitude:.4f},{loc.longitude:.4f}): {e}")

    if include_historical and not historical:
        try:
            historical = provider.fetch_historical_incidents(loc.latitude, loc.longitude, search_radius_km)
        except ProviderError as e:
            LOG.warning(f"Historical enrichment failed @({loc.latitude:.4f},{loc.longitude:.4f}): {e}")
            historical = []

    return replace(incident, environment=environment, historical=historical)


def fetch_seabed(incident: IncidentContext, provider: EnvironmentalProvider) -> Optional[Bathymetry]:
    loc = incident.location
    try:
        return provider.fetch_bathymetry(loc.latitude, loc.longitude)
    except ProviderError as e:
        LOG.warning(f"Bathymetry lookup failed @({loc.latitude:.4f},{loc.longitude:.4f}): {e}")
        return None


def run_probability_search(
    request: SearchRequest,
    provider: Optional[EnvironmentalProvider] = None,
    config: Optional[SearchConfig] = None,
) -> SearchResponse:
    t0 = time.perf_counter()
    config = config or load_config_from_env()

    errors = validate_incident_input(
        request.incident, request.search_radius_km, request.grid_resolution_m, config
    )
    if errors:
        return SearchResponse(errors=errors, processing_time_ms=(time.perf_counter() - t0) * 1000.0)

    radius_km = request.search_radius_km or config.default_search_radius_km
    grid_m = request.grid_resolution_m or config.default_grid_resolution_m

    if provider is None:
        provider = make_provider("live" if request.use_real_time_data else None)
    incident = enrich_incident(
        request.incident, provider,
        include_historical=request.include_historical,
        use_real_time=request.use_real_time_data,
        search_radius_km=radius_km,
    )

    traditional = generate_traditional_search(incident, radius_km, grid_m, config)
    try:
        optimized = generate_optimized_search(incident, radius_km, grid_m, config)
    except GridTooLargeError as e:
        LOG.warning("Rejected search request: %s", e)
        return SearchResponse(
            errors=[ValidationIssue("grid_resolution_m", str(e), "OUT_OF_RANGE")],
            processing_time_ms=(time.perf_counter() - t0) * 1000.0,
        )
    comparison = compare_strategies(traditional, optimized)

    drift = generate_drift_model(
        incident, incident.estimated_time_in_water_hours or config.default_drift_hours, config
    )

    # a recorded altitude wins over the charted seabed depth
    seabed = fetch_seabed(incident, provider)
    depth_m = incident.location.depth_m or (seabed.depth_m if seabed else None)
    sea_state = incident.environment.sea_state if incident.environment else None
    analytics = {
        s.type: analyze_strategy(s, depth_m, sea_state, config)
        for s in (traditional, optimized)
    }

    warnings = []
    fell_back = getattr(provider, "used_fallback", False)
    if not request.use_real_time_data or isinstance(provider, MockEnvironmentalProvider) or fell_back:
        warnings.append(WARN_MOCK_DATA)
    if incident.route is None:
        warnings.append(WARN_NO_ROUTE)
    if not incident.historical:
        warnings.append(WARN_NO_HISTORY)

    elapsed_ms = (time.perf_counter() - t0) * 1000.0
    LOG.info("probability search %s done in %.0f ms (%d warnings)", incident.id or "-", elapsed_ms, len(warnings))
    return SearchResponse(
        comparison=comparison,
        drift_model=drift,
        seabed=seabed,
        analytics=analytics,
        warnings=warnings,
        processing_time_ms=elapsed_ms,
    )
