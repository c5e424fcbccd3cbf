"""Assembly of the daily indicator record.

The record is the single output of a collection run.  Field names are
the camelCase keys published in ``latest.json`` and the order of
:meth:`DailyIndicatorRecord.to_dict` is the order they are written in.
"""

from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass
from typing import Any, Dict

import pandas as pd

NOTES = "auto via Actions"

RECORD_FIELDS = (
    "date",
    "siberianHighIdx",
    "aoIndex",
    "japanSeaSstAnom",
    "ensoPhase",
    "notes",
)


@dataclass(frozen=True)
class DailyIndicatorRecord:
    date: str  # "YYYY-MM-DD" (UTC)
    siberian_high_idx: float
    ao_index: float
    japan_sea_sst_anom: float
    enso_phase: int
    notes: str = NOTES

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "siberianHighIdx": self.siberian_high_idx,
            "aoIndex": self.ao_index,
            "japanSeaSstAnom": self.japan_sea_sst_anom,
            "ensoPhase": self.enso_phase,
            "notes": self.notes,
        }

    def to_frame(self) -> pd.DataFrame:
        """One‑row frame, used for contract validation."""
        return pd.DataFrame([self.to_dict()], columns=list(RECORD_FIELDS))


def build_record(
    *,
    now: _dt.datetime,
    siberian_high_idx: float,
    ao_index: float,
    japan_sea_sst_anom: float,
    enso_phase: int,
) -> DailyIndicatorRecord:
    """Build a record dated with the UTC calendar day of ``now``.

    ``now`` must be timezone aware; a naive datetime is rejected rather
    than silently interpreted in the host's local zone.
    """
    if now.tzinfo is None:
        raise ValueError("now must be a timezone-aware datetime")
    day = now.astimezone(_dt.timezone.utc).date()
    return DailyIndicatorRecord(
        date=day.isoformat(),
        siberian_high_idx=float(siberian_high_idx),
        ao_index=float(ao_index),
        japan_sea_sst_anom=float(japan_sea_sst_anom),
        enso_phase=int(enso_phase),
    )


__all__ = ["DailyIndicatorRecord", "NOTES", "RECORD_FIELDS", "build_record"]
