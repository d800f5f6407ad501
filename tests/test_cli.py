# tests/test_cli.py
import json

from ocs_engine.cli import incident_from_dict, main

INCIDENT = {
    "id": "INC-CLI-1",
    "timestamp": "2026-03-01T04:00:00Z",
    "container_serial_id": "MAEU-123456-7",
    "location": {"latitude": 37.5, "longitude": -14.5, "altitude": -2850},
    "estimated_time_in_water_hours": 48,
    "environment": {"ocean_currents": [{"speed_mps": 0.42, "direction_deg": 85}], "sea_state": 4},
    "route": {"points": [{"latitude": 37.4, "longitude": -14.6}, {"latitude": 37.6, "longitude": -14.4}],
              "vessel_name": "MV Example"},
    "historical": [{"id": "H1", "location": {"latitude": 37.51, "longitude": -14.49}}],
}


def test_incident_from_dict():
    inc = incident_from_dict(INCIDENT)
    assert inc.location.altitude == -2850
    assert inc.primary_current.direction_deg == 85
    assert inc.environment.sea_state == 4
    assert len(inc.route_points) == 2 and inc.route.vessel_name == "MV Example"
    assert inc.historical[0].location.latitude == 37.51


def test_cli_end_to_end(tmp_path, capsys, monkeypatch):
    monkeypatch.delenv("OCS_DATA_MODE", raising=False)
    src = tmp_path / "incident.json"
    src.write_text(json.dumps(INCIDENT))
    gj = tmp_path / "zones.geojson"

    rc = main([str(src), "--radius-km", "2", "--grid-m", "100", "--geojson", str(gj)])
    assert rc == 0
    out = json.loads(capsys.readouterr().out)
    assert out["errors"] == []
    zones = out["comparison"]["optimized"]["zones"]
    assert zones and all("coordinates" not in z and z["cell_count"] > 0 for z in zones)
    assert len(out["comparison"]["traditional"]["zones"][0]["coordinates"]) == 36
    assert json.loads(gj.read_text())["metadata"]["incidentId"] == "INC-CLI-1"


def test_cli_validation_failure_exit_code(tmp_path, capsys):
    bad = dict(INCIDENT, location={"latitude": 120.0, "longitude": -14.5})
    src = tmp_path / "bad.json"
    src.write_text(json.dumps(bad))
    assert main([str(src)]) == 2
    out = json.loads(capsys.readouterr().out)
    assert out["errors"][0]["code"] == "OUT_OF_RANGE"


def test_cli_unreadable_input(tmp_path):
    assert main([str(tmp_path / "missing.json")]) == 1
