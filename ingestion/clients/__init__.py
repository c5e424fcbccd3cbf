"""Client package for fetching raw indicator data.

This package exposes classes that wrap external data sources and return
plain numbers ready to be placed in the daily indicator record.  Each
client degrades to a neutral value when the upstream payload is empty or
malformed, while transport and HTTP errors propagate to the caller.

The clients currently implemented are:

* :class:`WeatherClient` – downloads ERA5 daily values from the Open‑Meteo
  archive API and derives the Japan Sea SST anomaly and the Siberian High
  proxy index.
* :class:`NoaaClient` – reads the NOAA CPC Arctic Oscillation series and
  Oceanic Niño Index table through a text‑extraction proxy.
"""

from .weather_client import WeatherClient, ArchiveQuery
from .noaa_client import NoaaClient

__all__ = ["WeatherClient", "ArchiveQuery", "NoaaClient"]
