# Script Name: cli.py
# Last Updated (UTC): 2026-10-17
# Update Summary:
# - ocs_search console entry point: incident JSON in, SearchResponse JSON out.
# Description:
# - Loads an incident file, runs run_probability_search(), prints the
#   response as JSON and optionally writes the optimized zones as GeoJSON.
# Data Handling Notes:
# - Incident JSON uses the dataclass field names, e.g.
#   {"id": "...", "timestamp": "2026-03-01T04:00:00Z",
#    "location": {"latitude": 37.5, "longitude": -14.5, "altitude": -2850},
#    "estimated_time_in_water_hours": 48,
#    "environment": {"ocean_currents": [{"speed_mps": 0.42, "direction_deg": 85}]},
#    "route": {"points": [{"latitude": ..., "longitude": ...}, ...]}}
# - Exit codes: 0 ok, 2 validation failure, 1 unreadable input.

import argparse
import json
import logging
import sys
from typing import Any, Dict, Optional

from .export import strategy_to_geojson, to_jsonable
from .pipeline import run_probability_search
from .providers import make_provider
from .types import (
    CurrentVector,
    EnvironmentalData,
    GeoPoint,
    HistoricalIncident,
    IncidentContext,
    RoutePolyline,
    SearchRequest,
)

LOG = logging.getLogger(__name__)


def _point(d: Optional[Dict[str, Any]]) -> Optional[GeoPoint]:
    if d is None:
        return None
    return GeoPoint(d.get("latitude"), d.get("longitude"), d.get("altitude"))


def incident_from_dict(d: Dict[str, Any]) -> IncidentContext:
    env = d.get("environment")
    route = d.get("route")
    hist = d.get("historical")
    return IncidentContext(
        location=_point(d.get("location")),
        route=RoutePolyline(
            points=[_point(p) for p in route.get("points", [])],
            vessel_name=route.get("vessel_name", ""),
            vessel_type=route.get("vessel_type", ""),
            imo_number=route.get("imo_number"),
            timestamp=route.get("timestamp"),
        ) if route else None,
        environment=EnvironmentalData(
            ocean_currents=[CurrentVector(**c) for c in env.get("ocean_currents", [])],
            **{k: v for k, v in env.items() if k != "ocean_currents"},
        ) if env else None,
        historical=[
            HistoricalIncident(**{**h, "location": _point(h.get("location"))}) for h in hist
        ] if hist is not None else None,
        estimated_time_in_water_hours=d.get("estimated_time_in_water_hours"),
        cargo_value_usd=d.get("cargo_value_usd"),
        id=d.get("id", ""),
        timestamp=d.get("timestamp"),
        container_serial_id=d.get("container_serial_id"),
        container_type=d.get("container_type"),
    )


def summarize_zones(response: Dict[str, Any]) -> Dict[str, Any]:
    """Replace point-cloud zone coordinates with a cell count (boundary rings are kept)."""
    comparison = response.get("comparison") or {}
    for strategy in comparison.values():
        for zone in (strategy or {}).get("zones", []) if isinstance(strategy, dict) else []:
            if not zone.get("is_boundary"):
                zone["cell_count"] = len(zone.get("coordinates") or [])
                zone.pop("coordinates", None)
    return response


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="ocs_search",
        description="Probability-weighted search zones for a lost shipping container.",
    )
    p.add_argument("incident_json", help="Path to incident JSON file ('-' for stdin).")
    p.add_argument("--radius-km", type=float, default=None, help="Search radius (default 25 km).")
    p.add_argument("--grid-m", type=float, default=None, help="Grid cell size (default 100 m).")
    p.add_argument("--include-historical", action="store_true", help="Add nearby past incidents.")
    p.add_argument("--live", action="store_true", help="Fetch real-time conditions from Open-Meteo.")
    p.add_argument("--geojson", metavar="OUT", default=None, help="Write optimized zones as GeoJSON.")
    p.add_argument("--full", action="store_true", help="Include every member cell of optimized zones.")
    p.add_argument("-v", "--verbose", action="store_true", help="DEBUG logging.")
    return p


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        if args.incident_json == "-":
            raw = json.load(sys.stdin)
        else:
            with open(args.incident_json, "r", encoding="utf-8") as fh:
                raw = json.load(fh)
        incident = incident_from_dict(raw)
    except (OSError, ValueError, TypeError, AttributeError) as e:
        LOG.error(f"Cannot read incident {args.incident_json}: {e}")
        return 1

    request = SearchRequest(
        incident=incident,
        search_radius_km=args.radius_km,
        grid_resolution_m=args.grid_m,
        include_historical=args.include_historical,
        use_real_time_data=args.live,
    )
    response = run_probability_search(request, provider=make_provider("live" if args.live else None))

    out = to_jsonable(response)
    if not args.full:
        out = summarize_zones(out)
    json.dump(out, sys.stdout, indent=2)
    sys.stdout.write("\n")

    if not response.ok:
        return 2

    if args.geojson:
        fc = strategy_to_geojson(response.comparison.optimized, incident.id or None)
        with open(args.geojson, "w", encoding="utf-8") as fh:
            json.dump(fc, fh, indent=2)
        LOG.info(f"GeoJSON written: {args.geojson}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
