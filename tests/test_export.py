# tests/test_export.py
import json
import math

import numpy as np
import pandas as pd

from ocs_engine.export import strategy_to_geojson, to_jsonable
from ocs_engine.strategies import generate_optimized_search, generate_traditional_search
from ocs_engine.types import GeoPoint


def test_to_jsonable_handles_timestamps_numpy_and_inf():
    out = to_jsonable({
        "t": pd.Timestamp("2026-03-01 04:00", tz="UTC"),
        "n": np.float64(1.5),
        "i": np.int64(3),
        "inf": math.inf,
        "p": GeoPoint(1.0, 2.0),
        "l": (1, 2),
    })
    assert out["t"] == "2026-03-01T04:00:00Z"
    assert out["n"] == 1.5 and isinstance(out["n"], float)
    assert out["i"] == 3 and isinstance(out["i"], int)
    assert out["inf"] is None
    assert out["p"] == {"latitude": 1.0, "longitude": 2.0, "altitude": None}
    assert out["l"] == [1, 2]
    json.dumps(out)


def test_traditional_geojson_is_closed_polygon(kelvin_incident):
    fc = strategy_to_geojson(generate_traditional_search(kelvin_incident, 5.0), "INC-TEST-001")
    assert fc["type"] == "FeatureCollection"
    assert fc["metadata"]["incidentId"] == "INC-TEST-001"
    assert fc["metadata"]["algorithmVersion"] == "1.0.0-traditional"
    assert fc["metadata"]["generatedAt"].endswith("Z")
    geom = fc["features"][0]["geometry"]
    assert geom["type"] == "Polygon"
    ring = geom["coordinates"][0]
    assert len(ring) == 37
    assert tuple(ring[0]) == tuple(ring[-1])
    props = fc["features"][0]["properties"]
    assert props["priority"] == "medium"
    assert props["searchRank"] == 1
    json.dumps(fc)


def test_optimized_geojson_hulls(kelvin_incident):
    strat = generate_optimized_search(kelvin_incident, 2.0, 100.0)
    fc = strategy_to_geojson(strat)
    assert len(fc["features"]) == len(strat.zones)
    for f, z in zip(fc["features"], strat.zones):
        assert f["properties"]["id"] == z.id
        assert f["geometry"]["type"] in ("Polygon", "LineString", "Point")
        # lon/lat order
        lon, lat = f["properties"]["centroid"]
        assert -15.0 < lon < -14.0 and 37.0 < lat < 38.0
    ranks = [f["properties"]["searchRank"] for f in fc["features"]]
    assert ranks == list(range(1, len(ranks) + 1))
