"""
Indicator collection script.

Single entry point to fetch the climate indicators and persist them:
- Siberian High proxy index (ERA5 MSLP, 55N/100E)
- Arctic Oscillation daily index (NOAA CPC)
- Japan Sea SST anomaly (ERA5 SST, 40N/135E)
- ENSO phase from the Oceanic Niño Index (NOAA CPC)

The record is written to public/data/latest.json (overwritten on every run).

Usage:
    python -m scripts.fetch_weekly
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

import requests

from ingestion.clients.noaa_client import NoaaClient
from ingestion.clients.weather_client import WeatherClient, DEFAULT_TIMEZONE
from ingestion.quality.contracts import validate_record
from ingestion.transform.record import DailyIndicatorRecord, build_record
from scripts.common import write_json

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Static config
# ---------------------------------------------------------------------------

OUT_DIR = Path("public/data")
OUT_FILE = OUT_DIR / "latest.json"
ARCHIVE_TIMEZONE = DEFAULT_TIMEZONE

# ---------------------------------------------------------------------------
# Collection
# ---------------------------------------------------------------------------

def collect_indicators(
    noaa: NoaaClient,
    weather: WeatherClient,
    *,
    now: datetime,
) -> DailyIndicatorRecord:
    """Fetch the four indicators sequentially and assemble the record."""
    ao = noaa.fetch_ao_index()
    enso = noaa.fetch_enso_phase()
    sst = weather.fetch_japan_sea_sst_anom(now)
    siberian = weather.fetch_siberian_high_idx(now)
    return build_record(
        now=now,
        siberian_high_idx=siberian,
        ao_index=ao,
        japan_sea_sst_anom=sst,
        enso_phase=enso,
    )


def run(
    out_file: Path = OUT_FILE,
    *,
    session: Optional[requests.Session] = None,
    now: Optional[datetime] = None,
) -> DailyIndicatorRecord:
    """Collect, validate and write the daily record to ``out_file``.

    Any failure before the write propagates and leaves ``out_file``
    untouched.
    """
    now = now or datetime.now(timezone.utc)
    owns_session = session is None
    session = session or requests.Session()
    try:
        noaa = NoaaClient(session=session)
        weather = WeatherClient(session=session, timezone=ARCHIVE_TIMEZONE)
        record = validate_record(collect_indicators(noaa, weather, now=now))
    finally:
        if owns_session:
            session.close()

    path = write_json(record.to_dict(), out_file)
    logger.info(f"Indicator record written → {path}")
    print("Wrote", path, record.to_dict())
    return record

# ---------------------------------------------------------------------------
# MAIN
# ---------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    # No options: the output path and sources are fixed.
    parser = argparse.ArgumentParser(description="Fetch climate indicators into a dated JSON record.")
    parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    )

    logger.info("Starting indicator collection ...")
    try:
        run(OUT_FILE)
    except Exception:
        logger.exception("Indicator collection failed")
        return 1
    logger.info("✅ Indicator collection completed successfully.")
    return 0


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
