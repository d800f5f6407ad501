# utils_time.py - UTC helpers for the OceanCache search engine
# Last Updated (UTC): 2026-10-17
# Update Summary:
# - UTC normalization for incident timestamps and strategy generated_at stamps.
#
# Data Handling Notes:
# - All functions returning timestamps produce tz-aware UTC pd.Timestamp.
# - Invalid inputs -> None, never raise.

import logging
from typing import Optional

import pandas as pd

LOG = logging.getLogger(__name__)


def ensure_utc(ts) -> Optional[pd.Timestamp]:
    """
    Normalize any timestamp-like input to a tz-aware UTC pandas Timestamp.

      - None/NaT/unparseable -> None
      - tz-naive -> localized to UTC
      - tz-aware -> converted to UTC
    """
    if ts is None:
        return None
    try:
        t = pd.to_datetime(ts, errors="coerce")
    except (TypeError, ValueError):
        LOG.debug("ensure_utc: cannot parse %r", ts)
        return None
    if t is None or pd.isna(t) or not isinstance(t, pd.Timestamp):
        return None
    if t.tzinfo is None:
        return t.tz_localize("UTC")
    return t.tz_convert("UTC")


def now_utc() -> pd.Timestamp:
    """Current time as tz-aware UTC pandas Timestamp."""
    return pd.Timestamp.now(tz="UTC")


def to_iso_utc(ts) -> Optional[str]:
    t = ensure_utc(ts)
    return None if t is None else t.isoformat().replace("+00:00", "Z")
