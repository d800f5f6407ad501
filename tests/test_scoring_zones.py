# tests/test_scoring_zones.py
import pytest

from ocs_engine.config import DEFAULT_CONFIG, FactorWeights, SearchConfig
from ocs_engine.scoring import CELL_COLUMNS, incident_depth_m, score_cell, score_grid
from ocs_engine.types import (
    GeoPoint,
    IncidentContext,
    ProbabilityFactors,
    RoutePolyline,
    ScoredCell,
)
from ocs_engine.zones import aggregate_cells_into_zones, classify_priority, sort_zones_by_priority


def approx(a, b, tol=1e-9):
    return abs(a - b) <= tol


def test_weights_sum_to_one():
    assert approx(DEFAULT_CONFIG.weights.total(), 1.0, 1e-12)


def test_bad_weights_rejected():
    with pytest.raises(ValueError):
        SearchConfig(weights=FactorWeights(distance_decay=0.5))


def test_incident_depth_defaults():
    assert incident_depth_m(IncidentContext(location=GeoPoint(0, 0, -1200.0))) == 1200.0
    assert incident_depth_m(IncidentContext(location=GeoPoint(0, 0))) == 2850.0
    assert incident_depth_m(IncidentContext(location=GeoPoint(0, 0, 0.0))) == 2850.0


def test_score_cell_bare_incident():
    # No route, current or history: only distance decay and depth contribute
    inc = IncidentContext(location=GeoPoint(37.5, -14.5, -2850.0))
    cell = score_cell(inc.location, inc, 25000.0)
    assert approx(cell.factors.distance_decay, 1.0)
    assert cell.factors.route_proximity == 0.0
    assert cell.factors.current_influence == 0.0
    assert cell.factors.cluster_score == 0.0
    assert cell.factors.depth_factor == 1.0
    assert approx(cell.score, 0.35 + 0.05)


def test_score_cell_with_substituted_weights():
    cfg = SearchConfig(weights=FactorWeights(1.0, 0.0, 0.0, 0.0, 0.0))
    inc = IncidentContext(location=GeoPoint(37.5, -14.5, -2850.0))
    assert approx(score_cell(inc.location, inc, 25000.0, cfg).score, 1.0)
    assert approx(score_cell(inc.location, inc, 25000.0).score, 0.4)


def test_score_grid_frame(kelvin_incident):
    lats = [37.5, 37.6, 37.5]
    lons = [-14.5, -14.5, -14.3]
    inc = IncidentContext(
        location=kelvin_incident.location,
        environment=kelvin_incident.environment,
        route=RoutePolyline(points=[GeoPoint(37.5, -15.0), GeoPoint(37.5, -14.0)]),
        estimated_time_in_water_hours=48.0,
    )
    df = score_grid(lats, lons, inc, 25000.0)
    assert list(df.columns) == CELL_COLUMNS
    assert len(df) == 3
    assert (df["score"].between(0, 1)).all()
    # about 120 m off the great circle between the route points
    assert df.loc[0, "route_proximity"] > 0.98
    # east of the loss point is downstream of an 85 deg current
    assert df.loc[2, "current_influence"] > df.loc[0, "current_influence"]


def test_classify_priority_partition():
    assert classify_priority(0.7) == "high"
    assert classify_priority(1.0) == "high"
    assert classify_priority(0.6999) == "medium"
    assert classify_priority(0.3) == "medium"
    assert classify_priority(0.2999) == "low"
    assert classify_priority(0.0) == "low"


def _cell(score, lat=0.0, lon=0.0):
    return ScoredCell(GeoPoint(lat, lon, -100.0), score, ProbabilityFactors(distance_decay=score))


def test_aggregate_cells_into_zones():
    cells = [_cell(0.9, 0.0, 0.0), _cell(0.75, 0.0, 0.002), _cell(0.5, 0.001), _cell(0.1, 0.002)]
    zones = aggregate_cells_into_zones(cells, 100.0)
    assert [z.priority for z in zones] == ["high", "medium", "low"]
    assert [z.id for z in zones] == ["optimized-high", "optimized-medium", "optimized-low"]

    high = zones[0]
    assert len(high.coordinates) == 2
    assert approx(high.probability_score, 0.825)
    assert approx(high.factors.distance_decay, 0.825)
    assert high.area_m2 == 20000.0
    assert approx(high.estimated_search_duration_hours, 0.2)
    assert approx(high.centroid.longitude, 0.001)
    assert high.centroid.altitude == -100.0
    assert approx(high.confidence_interval.lower, 0.66)
    assert approx(high.confidence_interval.upper, 0.99)

    # every cell lands in exactly one zone
    assert sum(z.area_m2 for z in zones) == len(cells) * 100.0 ** 2


def test_confidence_upper_capped():
    zones = aggregate_cells_into_zones([_cell(0.95)], 100.0)
    assert zones[0].confidence_interval.upper == 1.0


def test_aggregate_skips_empty_tiers_and_empty_input():
    zones = aggregate_cells_into_zones([_cell(0.1), _cell(0.2)], 50.0)
    assert [z.priority for z in zones] == ["low"]
    assert aggregate_cells_into_zones([], 50.0) == []


def test_aggregate_from_frame(kelvin_incident):
    df = score_grid([37.5, 37.5], [-14.5, -14.49], kelvin_incident, 25000.0)
    zones = aggregate_cells_into_zones(df, 100.0, altitude=-2850.0, id_prefix="x")
    assert sum(len(z.coordinates) for z in zones) == 2
    assert all(z.id.startswith("x-") for z in zones)
    assert all(p.altitude == -2850.0 for z in zones for p in z.coordinates)


def test_sort_zones_by_priority():
    cells = [_cell(0.1), _cell(0.5), _cell(0.9)]
    zones = aggregate_cells_into_zones(cells, 100.0)
    shuffled = [zones[2], zones[0], zones[1]]
    assert [z.priority for z in sort_zones_by_priority(shuffled)] == ["high", "medium", "low"]
