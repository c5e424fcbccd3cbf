"""Fixed arithmetic transforms from raw upstream values to indicators.

Each client in :mod:`ingestion.clients` retrieves raw numbers (a text
token, a list of daily reanalysis values) and hands them to the
functions defined here.  They are free of I/O so that the formulas can
be exercised without touching the network:

* ``enso_phase`` – discretises an Oceanic Niño Index value into
  La Niña (-1), Neutral (0) or El Niño (+1) using the ±0.5 °C
  threshold.
* ``sst_anomaly`` – averages daily sea‑surface temperatures and
  subtracts the monthly climatology for the Japan Sea point.
* ``siberian_high_index`` – averages daily mean sea‑level pressure and
  maps the departure from 1018 hPa onto a bounded [-2, 2] scale.

Missing or non‑finite inputs never propagate: an empty window maps to
``0.0`` so that every field of the daily record stays a finite number.
"""

from __future__ import annotations

import math
from typing import Iterable, Optional

import numpy as np
import pandas as pd

ENSO_THRESHOLD = 0.5

# Approximate monthly mean SST (°C) at 40N/135E, January first.
# Rough ERA5 climatology, used only as an anomaly baseline.
SST_CLIMATOLOGY = (
    9.0,   # Jan
    8.5,   # Feb
    8.5,   # Mar
    10.0,  # Apr
    13.0,  # May
    17.0,  # Jun
    22.0,  # Jul
    25.0,  # Aug
    24.0,  # Sep
    21.0,  # Oct
    17.0,  # Nov
    13.0,  # Dec
)

MSLP_BASELINE_HPA = 1018.0
MSLP_SCALE_HPA = 5.0
SIBERIAN_HIGH_BOUND = 2.0


def round_half_up(value: float, ndigits: int = 1) -> float:
    """Round ``value`` half‑up (towards +inf) at ``ndigits`` decimals.

    Python's :func:`round` uses banker's rounding, which would publish
    ``0.2`` for ``0.25``.  The indicator feed has always rounded halves
    upwards, so we keep that behaviour.  Negative zero is folded into
    ``0.0``.
    """
    factor = 10 ** ndigits
    return (math.floor(value * factor + 0.5) / factor) or 0.0


def finite_mean(values: Iterable) -> Optional[float]:
    """Return the mean of the finite entries of ``values``.

    ``None``, ``NaN``, infinities and anything that is not already a
    number (numeric strings such as ``"12"``, booleans) are excluded,
    not counted as zero.  Returns ``None`` when nothing is left.
    """
    numbers = [
        v for v in values
        if isinstance(v, (int, float, np.integer, np.floating)) and not isinstance(v, (bool, np.bool_))
    ]
    series = pd.Series(numbers, dtype="float64")
    finite = series[np.isfinite(series)]
    if finite.empty:
        return None
    return float(finite.mean())


def enso_phase(oni: float) -> int:
    """Classify an ONI value; NaN falls through to Neutral."""
    if oni > ENSO_THRESHOLD:
        return 1
    if oni < -ENSO_THRESHOLD:
        return -1
    return 0


def sst_climatology(month: int) -> float:
    if not 1 <= month <= 12:
        raise ValueError(f"month must be in 1..12, got {month}")
    return SST_CLIMATOLOGY[month - 1]


def sst_anomaly(values: Iterable, month: int) -> float:
    """Mean SST over the window minus the climatology of ``month``.

    Parameters
    ----------
    values : iterable
        Daily sea‑surface temperatures in °C.  Non‑finite entries are
        ignored.
    month : int
        Calendar month (1–12) selecting the climatological baseline.

    Returns
    -------
    float
        Anomaly in °C rounded to one decimal, or ``0.0`` if the window
        holds no valid value.
    """
    mean = finite_mean(values)
    if mean is None:
        return 0.0
    return round_half_up(mean - sst_climatology(month))


def siberian_high_index(values: Iterable) -> float:
    """Bounded Siberian High proxy from daily MSLP values.

    The archive values are divided by 100 to obtain hPa, compared with
    a 1018 hPa baseline and scaled so that 5 hPa equals one unit.  The
    rounded result is clamped to [-2, 2].
    """
    mean = finite_mean(values)
    if mean is None:
        return 0.0
    hpa = mean / 100.0
    raw = (hpa - MSLP_BASELINE_HPA) / MSLP_SCALE_HPA
    clamped = np.clip(round_half_up(raw), -SIBERIAN_HIGH_BOUND, SIBERIAN_HIGH_BOUND)
    return float(clamped) or 0.0


__all__ = [
    "SST_CLIMATOLOGY",
    "enso_phase",
    "finite_mean",
    "round_half_up",
    "siberian_high_index",
    "sst_anomaly",
    "sst_climatology",
]
