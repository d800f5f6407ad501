# tests/test_metrics.py
import math

import pytest

from ocs_engine.config import CostModel, SearchConfig
from ocs_engine.metrics import (
    analyze_search,
    analyze_strategy,
    calculate_cost_breakdown,
    calculate_environmental_impact,
    calculate_improvements,
    calculate_operational_metrics,
    calculate_search_metrics,
    compare_strategies,
)
from ocs_engine.strategies import generate_traditional_search
from ocs_engine.types import GeoPoint, IncidentContext, ProbabilityFactors, ProbabilityZone


def _zone(priority, area_m2):
    c = GeoPoint(0.0, 0.0)
    return ProbabilityZone(
        id=f"z-{priority}",
        coordinates=[c],
        centroid=c,
        probability_score=0.5,
        priority=priority,
        area_m2=area_m2,
        factors=ProbabilityFactors(),
        estimated_search_duration_hours=area_m2 / 100_000.0,
    )


def test_metrics_formulas():
    zones = [_zone("high", 2_000_000.0), _zone("low", 2_000_000.0)]
    m = calculate_search_metrics(zones)
    assert m.total_area_km2 == 4.0
    assert m.zone_coverage.high == 2.0 and m.zone_coverage.medium == 0.0 and m.zone_coverage.low == 2.0
    # 40 hours of searching
    assert math.isclose(m.estimated_duration_days, 40.0 / 24.0)
    expected_cost = (40.0 / 24.0) * 65_000.0 + 25_000.0 + 4.0 * 150.0
    assert math.isclose(m.estimated_cost_usd, expected_cost)
    assert math.isclose(m.recovery_probability, (2 * 0.8 + 2 * 0.2) / 4)
    assert math.isclose(m.fuel_consumption_liters, 600.0 / 1.5)
    assert math.isclose(m.carbon_footprint_kg, 400.0 * 2.68)


def test_metrics_empty_zone_list():
    m = calculate_search_metrics([])
    assert m.total_area_km2 == 0.0
    assert m.recovery_probability == 0.0
    assert m.estimated_cost_usd == 25_000.0


def test_improvements_are_non_negative_both_ways():
    inc = IncidentContext(location=GeoPoint(37.5, -14.5))
    big = generate_traditional_search(inc, 10.0)
    small = generate_traditional_search(inc, 5.0)

    better = calculate_improvements(big, small)
    assert math.isclose(better.area_reduction_pct, 75.0)
    assert better.cost_savings_usd > 0
    assert better.duration_reduction_days > 0
    assert better.probability_increase_pct == 0.0

    worse = calculate_improvements(small, big)
    assert worse.area_reduction_pct == 0.0
    assert worse.cost_savings_usd == 0.0
    assert worse.duration_reduction_days == 0.0
    assert worse.probability_increase_pct == 0.0


def test_improvements_zero_traditional_area():
    inc = IncidentContext(location=GeoPoint(37.5, -14.5))
    empty = generate_traditional_search(inc, 0.0)
    other = generate_traditional_search(inc, 1.0)
    imp = calculate_improvements(empty, other)
    assert imp.area_reduction_pct == 0.0


def test_compare_strategies(kelvin_incident):
    a = generate_traditional_search(kelvin_incident, 10.0)
    b = generate_traditional_search(kelvin_incident, 8.0)
    cmp_ = compare_strategies(a, b)
    assert cmp_.traditional is a and cmp_.optimized is b
    assert math.isclose(cmp_.improvements.area_reduction_pct, 36.0)


def test_cost_breakdown_line_items():
    # 25 km2 over 18 days at 2850 m, sea state 3
    b = calculate_cost_breakdown(25.0, 18.0, 2850.0, 3)
    assert b.vessel_operation_usd == 900_000
    assert b.dive_team_usd == 270_000
    assert b.equipment_rental_usd == 48_750          # 25k x (1 + 2850/3000)
    assert b.fuel_usd == 3_750
    assert b.support_services_usd == 228_150         # 15% of 1.17M x 1.3
    assert b.contingency_usd == 217_598              # 15% of 1,450,650, half rounds up
    assert b.total_usd == 1_668_248


def test_cost_breakdown_depth_and_sea_state_scaling():
    assert calculate_cost_breakdown(1.0, 1.0, 3000.0, 3).equipment_rental_usd == 50_000
    # unknown depth -> 2850 m
    assert calculate_cost_breakdown(1.0, 1.0, None, 3).equipment_rental_usd == 48_750
    assert calculate_cost_breakdown(1.0, 1.0, 0.0, 3).equipment_rental_usd == 48_750
    assert calculate_cost_breakdown(1.0, 10.0, 2850.0, 9).support_services_usd == 185_250
    # calm sea is a real sea state, not "unknown"
    assert calculate_cost_breakdown(1.0, 10.0, 2850.0, 0).support_services_usd == 97_500
    assert calculate_cost_breakdown(1.0, 10.0, 2850.0).support_services_usd == 126_750


def test_cost_breakdown_follows_cost_model():
    cfg = SearchConfig(costs=CostModel(contingency_rate=0.0, support_services_rate=0.0))
    b = calculate_cost_breakdown(2.0, 1.0, 3000.0, 5, cfg)
    assert b.support_services_usd == 0 and b.contingency_usd == 0
    assert b.total_usd == 50_000 + 15_000 + 50_000 + 300


def test_environmental_impact():
    e = calculate_environmental_impact(2500.0)
    assert e.fuel_consumption_liters == 2500
    assert e.carbon_footprint_kg == 6700
    assert e.equivalent_trees == 320                 # ceil(6700 / 21)
    assert calculate_environmental_impact(0.0).equivalent_trees == 0


def test_operational_metrics():
    o = calculate_operational_metrics(25.0, 18.0)
    assert o.estimated_crew_size == 27
    assert o.total_dive_hours == 100
    assert o.total_surface_hours == 332
    assert o.avg_daily_progress_km2 == 1.39


def test_analyze_search_ties_the_pieces_together():
    a = analyze_search(25.0, 18.0, 2850.0, 3)
    assert a.cost_breakdown.total_usd == 1_668_248
    # liters come from the rounded fuel line item at $1.50/L
    assert a.environmental_impact.fuel_consumption_liters == 2500
    assert a.operational.estimated_crew_size == 27

    defaults = analyze_search(25.0, 18.0)
    assert defaults.depth_m == 2850.0 and defaults.sea_state == 3
    assert defaults.cost_breakdown == a.cost_breakdown


@pytest.mark.parametrize("area, days", [(0.0, 18.0), (-1.0, 18.0), (25.0, 0.0), (25.0, -2.0), (None, 1.0)])
def test_analyze_search_rejects_empty_search(area, days):
    with pytest.raises(ValueError):
        analyze_search(area, days)


def test_analyze_strategy_uses_strategy_metrics():
    s = generate_traditional_search(IncidentContext(location=GeoPoint(37.5, -14.5, -2850.0)), 5.0)
    a = analyze_strategy(s, 2850.0, 4)
    m = s.metrics
    assert a.area_km2 == m.total_area_km2
    assert a.duration_days == m.estimated_duration_days
    assert a.operational.total_dive_hours == round(4 * m.total_area_km2)
    assert a.operational.estimated_crew_size == math.ceil(m.estimated_duration_days * 1.5)
    assert a.cost_breakdown.total_usd > m.estimated_cost_usd
