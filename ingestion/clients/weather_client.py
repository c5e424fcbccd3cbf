"""
Client for downloading ERA5 daily reanalysis values (Open-Meteo archive).

- Récupère une variable journalière en un point sur les 7 derniers jours.
- SST mer du Japon (40N/135E) -> anomalie vs climatologie mensuelle.
- MSLP Sibérie (55N/100E) -> indice proxy de l'anticyclone sibérien, borné à ±2.
"""

from __future__ import annotations

import datetime as _dt
import logging
from dataclasses import dataclass
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

import pandas as pd
import requests

from ingestion.transform.indices import finite_mean, siberian_high_index, sst_anomaly

logger = logging.getLogger(__name__)

ERA5_ARCHIVE_URL = "https://archive-api.open-meteo.com/v1/era5"
DEFAULT_TIMEZONE = "Asia/Tokyo"
WINDOW_DAYS = 7


@dataclass
class ArchiveQuery:
    latitude: float
    longitude: float
    variable: str
    start: str  # "YYYY-MM-DD"
    end: str    # "YYYY-MM-DD"


class WeatherClient:
    """Client to fetch trailing-window ERA5 indicators from Open-Meteo."""

    # Fixed sampling points (lat, lon).
    _POINTS = {
        "japan_sea": (40.0, 135.0),
        "siberia": (55.0, 100.0),
    }

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timezone: str = DEFAULT_TIMEZONE,
        timeout: Optional[float] = None,
    ) -> None:
        self.session = session or requests.Session()
        self.timezone = timezone
        self.timeout = timeout

    def local_today(self, now: Optional[_dt.datetime] = None) -> _dt.date:
        """Calendar date of ``now`` (default: current instant) in the archive time zone."""
        now = now or _dt.datetime.now(_dt.timezone.utc)
        return now.astimezone(ZoneInfo(self.timezone)).date()

    @staticmethod
    def trailing_window(today: _dt.date, days: int = WINDOW_DAYS) -> Tuple[str, str]:
        """(start, end) ISO dates of the ``days``-day window ending ``today`` inclusive."""
        start = today - _dt.timedelta(days=days - 1)
        return start.isoformat(), today.isoformat()

    def _fetch_daily(self, q: ArchiveQuery) -> pd.Series:
        """Call the archive and return the daily values of ``q.variable``.

        Values are returned as sent (``object`` dtype); filtering of
        non-finite entries is left to the transforms.  Transport and JSON
        decoding errors propagate.  An HTTP error status or a response
        without the expected ``daily`` payload yields an empty series.
        """
        params = {
            "latitude": str(q.latitude),
            "longitude": str(q.longitude),
            "start_date": q.start,
            "end_date": q.end,
            "daily": q.variable,
            "timezone": self.timezone,
        }
        logger.info("Fetching %s at (%s, %s) between %s and %s", q.variable, q.latitude, q.longitude, q.start, q.end)
        resp = self.session.get(ERA5_ARCHIVE_URL, params=params, timeout=self.timeout)
        try:
            resp.raise_for_status()
        except requests.HTTPError as exc:
            logger.warning("Weather API call failed for (%s, %s) between %s and %s: %s", q.latitude, q.longitude, q.start, q.end, exc)
            return pd.Series([], dtype="object", name=q.variable)
        data = resp.json()

        daily = data.get("daily") if isinstance(data, dict) else None
        if not isinstance(daily, dict):
            logger.warning("Weather API returned no daily data for (%s, %s)", q.latitude, q.longitude)
            return pd.Series([], dtype="object", name=q.variable)

        values = daily.get(q.variable)
        if not isinstance(values, list):
            logger.warning("Weather API returned no %s values for (%s, %s)", q.variable, q.latitude, q.longitude)
            return pd.Series([], dtype="object", name=q.variable)

        return pd.Series(values, dtype="object", name=q.variable)

    def _query(self, point: str, variable: str, today: _dt.date) -> ArchiveQuery:
        lat, lon = self._POINTS[point]
        start, end = self.trailing_window(today)
        return ArchiveQuery(latitude=lat, longitude=lon, variable=variable, start=start, end=end)

    def fetch_japan_sea_sst_anom(self, now: Optional[_dt.datetime] = None) -> float:
        """7-day mean SST at 40N/135E minus the climatology of the current month."""
        today = self.local_today(now)
        daily = self._fetch_daily(self._query("japan_sea", "sea_surface_temperature", today))
        if finite_mean(daily) is None:
            logger.warning("No valid SST values, anomaly defaults to 0")
        return sst_anomaly(daily, today.month)

    def fetch_siberian_high_idx(self, now: Optional[_dt.datetime] = None) -> float:
        """Siberian High proxy from the 7-day mean MSLP at 55N/100E."""
        today = self.local_today(now)
        daily = self._fetch_daily(self._query("siberia", "mean_sea_level_pressure", today))
        if finite_mean(daily) is None:
            logger.warning("No valid MSLP values, Siberian High index defaults to 0")
        return siberian_high_index(daily)


__all__ = ["WeatherClient", "ArchiveQuery"]
