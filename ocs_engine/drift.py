import logging
from typing import Optional

from .config import DEFAULT_CONFIG, SearchConfig
from .geo import calculate_drift
from .types import DriftModel, IncidentContext

LOG = logging.getLogger(__name__)


def generate_drift_model(
    incident: IncidentContext,
    duration_hours: float = 72.0,
    config: SearchConfig = DEFAULT_CONFIG,
) -> Optional[DriftModel]:
    """
    Straight-line drift along the first current vector, sampled in 24 equal
    steps. None when the incident carries no current.

    Confidence is a fixed constant, not derived from data quality.
    """
    current = incident.primary_current
    if current is None:
        LOG.debug("no current vector; drift model skipped")
        return None

    trajectory = calculate_drift(
        incident.location, current.speed_mps, current.direction_deg,
        duration_hours, samples=config.drift_samples,
    )
    return DriftModel(
        start_position=incident.location,
        current_position=trajectory[-1],
        trajectory=trajectory,
        drift_speed_mps=current.speed_mps,
        drift_direction_deg=current.direction_deg,
        time_elapsed_hours=duration_hours,
        confidence=config.drift_confidence,
    )
