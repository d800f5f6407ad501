"""
validation.py

Incident input validation. Pure, no side effects; every violation is
collected and returned as a ValidationIssue so a caller can report them
all at once. Nothing here raises on bad data.
"""

import logging
import math
from numbers import Real
from typing import List, Optional

from .config import DEFAULT_CONFIG, SearchConfig
from .geo import validate_container_serial
from .types import IncidentContext, ValidationIssue
from .utils_time import ensure_utc

LOG = logging.getLogger(__name__)


def _is_number(x) -> bool:
    return isinstance(x, Real) and not isinstance(x, bool) and math.isfinite(x)


def _check_coordinate(value, field: str, lo: float, hi: float, label: str) -> Optional[ValidationIssue]:
    if value is None:
        return ValidationIssue(field, f"{label} is required", "MISSING_REQUIRED")
    if not _is_number(value):
        return ValidationIssue(field, f"{label} must be a finite number (got {value!r})", "INVALID_GPS")
    if value < lo or value > hi:
        return ValidationIssue(field, f"{label} must be between {lo:g} and {hi:g} degrees", "OUT_OF_RANGE")
    return None


def validate_incident_input(
    incident: IncidentContext,
    search_radius_km: Optional[float] = None,
    grid_resolution_m: Optional[float] = None,
    config: SearchConfig = DEFAULT_CONFIG,
) -> List[ValidationIssue]:
    """
    Check an incident (and optional request parameters) before any search is
    computed. Returns an empty list when the input is usable.
    """
    issues: List[ValidationIssue] = []

    loc = getattr(incident, "location", None)
    if loc is None:
        issues.append(ValidationIssue("location", "Incident location is required", "MISSING_REQUIRED"))
    else:
        for issue in (
            _check_coordinate(loc.latitude, "location.latitude", -90.0, 90.0, "Latitude"),
            _check_coordinate(loc.longitude, "location.longitude", -180.0, 180.0, "Longitude"),
        ):
            if issue is not None:
                issues.append(issue)
        if loc.altitude is not None and not _is_number(loc.altitude):
            issues.append(ValidationIssue(
                "location.altitude", f"Altitude must be a finite number (got {loc.altitude!r})", "INVALID_GPS"
            ))

    serial = getattr(incident, "container_serial_id", None)
    if serial and not validate_container_serial(serial):
        issues.append(ValidationIssue(
            "container_serial_id", "Invalid ISO 6346 container serial number", "INVALID_SERIAL"
        ))

    if ensure_utc(getattr(incident, "timestamp", None)) is None:
        issues.append(ValidationIssue("timestamp", "Missing or unparseable timestamp", "INVALID_DATE"))

    if search_radius_km is not None:
        if not _is_number(search_radius_km) or not (0 < search_radius_km <= config.max_search_radius_km):
            issues.append(ValidationIssue(
                "search_radius_km",
                f"Search radius must be in (0, {config.max_search_radius_km:g}] km",
                "OUT_OF_RANGE",
            ))

    if grid_resolution_m is not None:
        if not _is_number(grid_resolution_m) or grid_resolution_m < config.min_grid_resolution_m:
            issues.append(ValidationIssue(
                "grid_resolution_m",
                f"Grid resolution must be at least {config.min_grid_resolution_m:g} m",
                "OUT_OF_RANGE",
            ))

    if issues:
        LOG.info("Incident validation failed: %s", ", ".join(f"{i.field}:{i.code}" for i in issues))
    return issues
