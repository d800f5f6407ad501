"""
Search metrics and strategy comparison.

Cost model (per CostModel):
  cost = days x vessel/day + days x dive team/day + equipment + km2 x fuel/km2
Recovery probability is the area-weighted mean of the per-tier recovery
weights (high 0.8 / medium 0.5 / low 0.2), capped at 1.

analyze_search() / analyze_strategy() add the itemized view: depth-scaled
equipment, sea-state-scaled support services, 15% contingency, fuel and CO2
(with tree-year equivalents) and crew / dive-hour figures.
"""

import logging
import math
from typing import Optional, Sequence

from .config import DEFAULT_CONFIG, SearchConfig
from .types import (
    CostBreakdown,
    EnvironmentalImpact,
    Improvements,
    OperationalMetrics,
    ProbabilityZone,
    SearchAnalytics,
    SearchComparison,
    SearchMetrics,
    SearchStrategy,
    ZoneCoverage,
)

LOG = logging.getLogger(__name__)


def calculate_search_metrics(
    zones: Sequence[ProbabilityZone],
    config: SearchConfig = DEFAULT_CONFIG,
) -> SearchMetrics:
    total_km2 = sum(z.area_m2 for z in zones) / 1_000_000.0
    coverage = ZoneCoverage(
        high=sum(z.area_m2 for z in zones if z.priority == "high") / 1_000_000.0,
        medium=sum(z.area_m2 for z in zones if z.priority == "medium") / 1_000_000.0,
        low=sum(z.area_m2 for z in zones if z.priority == "low") / 1_000_000.0,
    )
    days = sum(z.estimated_search_duration_hours for z in zones) / 24.0

    c = config.costs
    fuel_cost = total_km2 * c.fuel_per_km2_usd
    cost = days * c.vessel_per_day_usd + days * c.dive_team_per_day_usd + c.equipment_base_usd + fuel_cost

    if total_km2 > 0:
        recovery = (
            coverage.high * config.recovery_weight_high
            + coverage.medium * config.recovery_weight_medium
            + coverage.low * config.recovery_weight_low
        ) / total_km2
    else:
        recovery = 0.0

    liters = fuel_cost / c.fuel_price_usd_per_liter
    return SearchMetrics(
        total_area_km2=total_km2,
        zone_coverage=coverage,
        estimated_duration_days=days,
        estimated_cost_usd=cost,
        recovery_probability=min(1.0, recovery),
        fuel_consumption_liters=liters,
        carbon_footprint_kg=liters * c.co2_kg_per_liter,
    )


def calculate_improvements(traditional: SearchStrategy, optimized: SearchStrategy) -> Improvements:
    """Relative gains of `optimized` over `traditional`; every field floored at 0."""
    t, o = traditional.metrics, optimized.metrics
    if t.total_area_km2 > 0:
        area_pct = (t.total_area_km2 - o.total_area_km2) / t.total_area_km2 * 100.0
    else:
        area_pct = 0.0
    return Improvements(
        area_reduction_pct=max(0.0, area_pct),
        cost_savings_usd=max(0.0, t.estimated_cost_usd - o.estimated_cost_usd),
        duration_reduction_days=max(0.0, t.estimated_duration_days - o.estimated_duration_days),
        probability_increase_pct=max(0.0, (o.recovery_probability - t.recovery_probability) * 100.0),
    )


def compare_strategies(traditional: SearchStrategy, optimized: SearchStrategy) -> SearchComparison:
    imp = calculate_improvements(traditional, optimized)
    LOG.info(
        "comparison: area -%.1f%%, cost -$%.0f, duration -%.2f d, recovery +%.1f pts",
        imp.area_reduction_pct, imp.cost_savings_usd, imp.duration_reduction_days, imp.probability_increase_pct,
    )
    return SearchComparison(traditional=traditional, optimized=optimized, improvements=imp)


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def calculate_cost_breakdown(
    area_km2: float,
    duration_days: float,
    depth_m: Optional[float] = None,
    sea_state: Optional[int] = None,
    config: SearchConfig = DEFAULT_CONFIG,
) -> CostBreakdown:
    """
    Itemized operation cost. Equipment scales with depth (x2 at 3000 m),
    support services (logistics, comms, safety) with sea state, and a
    contingency is added on top of the subtotal. Line items are rounded to
    whole dollars; the total is rounded from the unrounded sum.
    """
    c = config.costs
    depth_m = config.default_depth_m if not depth_m else abs(depth_m)
    sea_state = c.default_sea_state if sea_state is None else sea_state

    vessel = duration_days * c.vessel_per_day_usd
    dive_team = duration_days * c.dive_team_per_day_usd
    equipment = c.equipment_base_usd * (1.0 + depth_m / c.equipment_depth_scale_m)
    fuel = area_km2 * c.fuel_per_km2_usd
    support = (vessel + dive_team) * c.support_services_rate * (1.0 + sea_state / c.sea_state_scale)

    subtotal = vessel + dive_team + equipment + fuel + support
    contingency = subtotal * c.contingency_rate

    return CostBreakdown(
        vessel_operation_usd=_round_half_up(vessel),
        dive_team_usd=_round_half_up(dive_team),
        equipment_rental_usd=_round_half_up(equipment),
        fuel_usd=_round_half_up(fuel),
        support_services_usd=_round_half_up(support),
        contingency_usd=_round_half_up(contingency),
        total_usd=_round_half_up(subtotal + contingency),
    )


def calculate_environmental_impact(fuel_liters: float, config: SearchConfig = DEFAULT_CONFIG) -> EnvironmentalImpact:
    co2_kg = fuel_liters * config.costs.co2_kg_per_liter
    return EnvironmentalImpact(
        fuel_consumption_liters=_round_half_up(fuel_liters),
        carbon_footprint_kg=_round_half_up(co2_kg),
        equivalent_trees=int(math.ceil(co2_kg / config.costs.co2_kg_per_tree_year)),
    )


def calculate_operational_metrics(
    area_km2: float,
    duration_days: float,
    config: SearchConfig = DEFAULT_CONFIG,
) -> OperationalMetrics:
    c = config.costs
    dive_hours = area_km2 * c.dive_hours_per_km2
    return OperationalMetrics(
        estimated_crew_size=int(math.ceil(duration_days * c.crew_per_day)),
        total_dive_hours=_round_half_up(dive_hours),
        total_surface_hours=_round_half_up(duration_days * 24.0 - dive_hours),
        avg_daily_progress_km2=round(area_km2 / duration_days, 2),
    )


def analyze_search(
    area_km2: float,
    duration_days: float,
    depth_m: Optional[float] = None,
    sea_state: Optional[int] = None,
    config: SearchConfig = DEFAULT_CONFIG,
) -> SearchAnalytics:
    """
    Cost breakdown, fuel / CO2 and crew figures for a search of `area_km2`
    lasting `duration_days`. Raises ValueError unless both are positive.
    Missing depth -> config.default_depth_m; missing sea state -> 3.
    """
    if not area_km2 or area_km2 <= 0:
        raise ValueError(f"Invalid search area: {area_km2!r} km2")
    if not duration_days or duration_days <= 0:
        raise ValueError(f"Invalid search duration: {duration_days!r} days")

    depth_m = config.default_depth_m if not depth_m else abs(depth_m)
    sea_state = config.costs.default_sea_state if sea_state is None else sea_state

    breakdown = calculate_cost_breakdown(area_km2, duration_days, depth_m, sea_state, config)
    # liters are derived from the rounded fuel line item
    fuel_liters = breakdown.fuel_usd / config.costs.fuel_price_usd_per_liter
    return SearchAnalytics(
        area_km2=area_km2,
        duration_days=duration_days,
        depth_m=depth_m,
        sea_state=sea_state,
        cost_breakdown=breakdown,
        environmental_impact=calculate_environmental_impact(fuel_liters, config),
        operational=calculate_operational_metrics(area_km2, duration_days, config),
    )


def analyze_strategy(
    strategy: SearchStrategy,
    depth_m: Optional[float] = None,
    sea_state: Optional[int] = None,
    config: SearchConfig = DEFAULT_CONFIG,
) -> SearchAnalytics:
    m = strategy.metrics
    return analyze_search(m.total_area_km2, m.estimated_duration_days, depth_m, sea_state, config)
