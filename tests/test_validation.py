# tests/test_validation.py
from dataclasses import replace

from ocs_engine.types import GeoPoint, IncidentContext
from ocs_engine.validation import validate_incident_input


def codes(issues):
    return {(i.field, i.code) for i in issues}


def test_valid_incident_has_no_issues(kelvin_incident):
    assert validate_incident_input(kelvin_incident) == []
    assert validate_incident_input(kelvin_incident, 25.0, 100.0) == []


def test_out_of_range_coordinates(kelvin_incident):
    inc = replace(kelvin_incident, location=GeoPoint(91.0, -181.0))
    assert codes(validate_incident_input(inc)) == {
        ("location.latitude", "OUT_OF_RANGE"),
        ("location.longitude", "OUT_OF_RANGE"),
    }


def test_boundary_coordinates_are_valid(kelvin_incident):
    for lat, lon in ((90.0, 180.0), (-90.0, -180.0)):
        assert validate_incident_input(replace(kelvin_incident, location=GeoPoint(lat, lon))) == []


def test_missing_and_non_numeric_coordinates(kelvin_incident):
    assert codes(validate_incident_input(replace(kelvin_incident, location=None))) == {
        ("location", "MISSING_REQUIRED"),
    }
    bad = replace(kelvin_incident, location=GeoPoint("37.5N", float("nan")))
    assert codes(validate_incident_input(bad)) == {
        ("location.latitude", "INVALID_GPS"),
        ("location.longitude", "INVALID_GPS"),
    }
    none_lat = replace(kelvin_incident, location=GeoPoint(None, -14.5))
    assert codes(validate_incident_input(none_lat)) == {("location.latitude", "MISSING_REQUIRED")}


def test_serial_checked_only_when_present(kelvin_incident):
    bad = replace(kelvin_incident, container_serial_id="MAEU1234568")
    assert codes(validate_incident_input(bad)) == {("container_serial_id", "INVALID_SERIAL")}
    assert validate_incident_input(replace(kelvin_incident, container_serial_id=None)) == []


def test_timestamp_required_and_parseable(kelvin_incident):
    assert codes(validate_incident_input(replace(kelvin_incident, timestamp=None))) == {
        ("timestamp", "INVALID_DATE"),
    }
    assert codes(validate_incident_input(replace(kelvin_incident, timestamp="not a date"))) == {
        ("timestamp", "INVALID_DATE"),
    }


def test_request_limits(kelvin_incident):
    assert codes(validate_incident_input(kelvin_incident, search_radius_km=150.0)) == {
        ("search_radius_km", "OUT_OF_RANGE"),
    }
    assert codes(validate_incident_input(kelvin_incident, search_radius_km=-1.0)) == {
        ("search_radius_km", "OUT_OF_RANGE"),
    }
    assert codes(validate_incident_input(kelvin_incident, grid_resolution_m=10.0)) == {
        ("grid_resolution_m", "OUT_OF_RANGE"),
    }


def test_all_violations_collected():
    inc = IncidentContext(location=GeoPoint(100.0, 0.0), container_serial_id="XXXX0000000", timestamp=None)
    found = {i.code for i in validate_incident_input(inc, search_radius_km=0.0)}
    assert found == {"OUT_OF_RANGE", "INVALID_SERIAL", "INVALID_DATE"}
    assert len(validate_incident_input(inc, search_radius_km=0.0)) == 4
